"""Template engine resolving placeholders against the release context.

Expressions are Jinja2 templates rendered in a sandbox with
``StrictUndefined``: referencing an unknown field, or an environment
variable that is not set and has no ``default`` filter, is an error rather
than an empty string.

Available fields:

- ``project_name``, ``version``, ``raw_version``, ``tag``
- ``major``, ``minor``, ``patch``, ``prerelease``
- ``commit``, ``full_commit``, ``short_commit``, ``branch``, ``previous_tag``,
  ``git_url``, ``is_git_dirty``
- ``date`` (ISO 8601), ``timestamp`` (Unix seconds)
- ``env`` (environment snapshot)
- when bound to an artifact: ``os``, ``arch``, ``artifact_name``,
  ``artifact_path``, ``artifact_ext``, ``artifact_id``

Examples:
    >>> from shipyard.config.models import ProjectConfig
    >>> from shipyard.context import new_context
    >>> ctx = new_context(ProjectConfig(project_name="demo"), version="1.2.3", env={"REPO": "main"})
    >>> engine = TemplateEngine(ctx)
    >>> engine.resolve("{{ project_name }}-{{ version }}")
    'demo-1.2.3'
    >>> engine.resolve("{{ env.REPO }}/{{ env.MISSING | default('none') }}")
    'main/none'
    >>> engine.resolve_bool("{{ env.REPO == 'main' }}")
    True
"""

from __future__ import annotations

import functools
import re
from typing import TYPE_CHECKING, Any

import jinja2
from jinja2.sandbox import SandboxedEnvironment

from shipyard.template.exceptions import TemplateError

if TYPE_CHECKING:
    from shipyard.artifact.models import Artifact
    from shipyard.context import ReleaseContext

_SEMVER_PATTERN = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?$"
)

_TRUE_VALUES = frozenset({"true", "1"})
_FALSE_VALUES = frozenset({"false", "0", ""})

_ENVIRONMENT = SandboxedEnvironment(
    undefined=jinja2.StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
)


@functools.lru_cache(maxsize=512)
def _compile(expression: str) -> jinja2.Template:
    return _ENVIRONMENT.from_string(expression)


class TemplateEngine:
    """Resolve template expressions against a release context.

    The engine is pure: the same context and fields always produce the same
    output, and resolving never mutates the context. ``with_artifact`` and
    ``with_fields`` return new engines.

    Args:
        ctx: The release context.
        fields: Pre-computed fields (internal, used by the ``with_*`` helpers).
    """

    def __init__(self, ctx: ReleaseContext, fields: dict[str, Any] | None = None) -> None:
        """Initialize TemplateEngine."""
        self._ctx = ctx
        self._fields = fields if fields is not None else _context_fields(ctx)

    @property
    def fields(self) -> dict[str, Any]:
        """Copy of the fields available to expressions."""
        return dict(self._fields)

    def with_artifact(self, artifact: Artifact) -> TemplateEngine:
        """Return an engine that also exposes per-artifact fields."""
        return self.with_fields(
            os=artifact.goos or "",
            arch=artifact.goarch or "",
            artifact_name=artifact.name,
            artifact_path=artifact.path,
            artifact_ext=artifact.ext,
            artifact_id=artifact.id or "",
        )

    def with_fields(self, **extra: Any) -> TemplateEngine:
        """Return an engine with additional (or overridden) fields."""
        return TemplateEngine(self._ctx, {**self._fields, **extra})

    def resolve(self, expression: str) -> str:
        """Render an expression into a literal string.

        Args:
            expression: Jinja2 template text. Plain text renders unchanged.

        Returns:
            The rendered string.

        Raises:
            TemplateError: On syntax errors, undefined fields or sandbox violations.
        """
        if "{" not in expression:
            return expression
        try:
            return _compile(expression).render(self._fields)
        except jinja2.TemplateError as exc:
            raise TemplateError(expression, str(exc) or type(exc).__name__) from exc
        except (TypeError, ValueError, ArithmeticError) as exc:
            raise TemplateError(expression, str(exc)) from exc

    def resolve_bool(self, value: bool | str) -> bool:
        """Evaluate a literal or templated boolean.

        Args:
            value: ``True``/``False`` or an expression rendering to
                ``true``/``false`` (an empty result counts as false).

        Returns:
            The boolean value.

        Raises:
            TemplateError: If the rendered text is not a boolean.
        """
        if isinstance(value, bool):
            return value
        rendered = self.resolve(value).strip().lower()
        if rendered in _TRUE_VALUES:
            return True
        if rendered in _FALSE_VALUES:
            return False
        raise TemplateError(value, f"expected a boolean, got {rendered!r}")

    def resolve_all(self, expressions: dict[str, str]) -> dict[str, str]:
        """Resolve every value of a mapping, keeping its keys."""
        return {key: self.resolve(value) for key, value in expressions.items()}


def _context_fields(ctx: ReleaseContext) -> dict[str, Any]:
    match = _SEMVER_PATTERN.match(ctx.version)
    if match:
        major, minor, patch = (int(match.group(k)) for k in ("major", "minor", "patch"))
        prerelease = match.group("prerelease") or ""
    else:
        major = minor = patch = 0
        prerelease = ""

    git = ctx.git
    return {
        "project_name": ctx.project_name,
        "version": ctx.version,
        "raw_version": f"{major}.{minor}.{patch}",
        "tag": ctx.tag,
        "major": major,
        "minor": minor,
        "patch": patch,
        "prerelease": prerelease,
        "commit": git.full_commit if git else "",
        "full_commit": git.full_commit if git else "",
        "short_commit": git.short_commit if git else "",
        "branch": git.branch if git else "",
        "previous_tag": git.previous_tag if git else "",
        "git_url": git.url if git else "",
        "is_git_dirty": git.dirty if git else False,
        "date": ctx.date.isoformat(),
        "timestamp": int(ctx.date.timestamp()),
        "env": dict(ctx.env),
    }


__all__ = [
    "TemplateEngine",
]
