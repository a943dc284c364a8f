"""Exceptions raised by the shipyard.template module."""

from __future__ import annotations

from shipyard.config.exceptions import ShipyardError


class TemplateError(ShipyardError, ValueError):
    """A template expression could not be resolved.

    Raised for undefined fields, unresolved environment lookups without a
    default, syntax errors and sandbox violations.

    Attributes:
        expression: The offending template expression.
        reason: Description of the failure.

    Examples:
        >>> raise TemplateError("{{ nope }}", "'nope' is undefined")
        Traceback (most recent call last):
        ...
        shipyard.template.exceptions.TemplateError: template: failed to apply "{{ nope }}": 'nope' is undefined
    """

    def __init__(self, expression: str, reason: str) -> None:
        """Initialize TemplateError.

        Args:
            expression: The offending template expression.
            reason: Description of the failure.
        """
        super().__init__(f'template: failed to apply "{expression}": {reason}')
        self.expression = expression
        self.reason = reason


__all__ = [
    "TemplateError",
]
