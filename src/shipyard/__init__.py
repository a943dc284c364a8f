"""shipyard: release automation.

Runs an ordered pipeline of release stages over a shared context: a source
archive built from git, an artifact registry and HTTP publishers.

Examples:
    >>> from shipyard import PipelineRunner, load_config, new_context
    >>> from shipyard.stages import default_stages
    >>> ctx = new_context(load_config(), version="1.2.3")  # doctest: +SKIP
    >>> PipelineRunner(default_stages()).run(ctx)  # doctest: +SKIP
"""

from shipyard.config import ShipyardError, load_config
from shipyard.context import ReleaseContext, new_context
from shipyard.meta import __app_name__, __version__
from shipyard.pipeline import PipelineRunner, SkipError, StageError

__all__ = [
    "PipelineRunner",
    "ReleaseContext",
    "ShipyardError",
    "SkipError",
    "StageError",
    "__app_name__",
    "__version__",
    "load_config",
    "new_context",
]
