"""Placeholder resolution for names, paths, URLs and headers."""

from shipyard.template.engine import TemplateEngine
from shipyard.template.exceptions import TemplateError

__all__ = [
    "TemplateEngine",
    "TemplateError",
]
