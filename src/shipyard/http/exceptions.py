"""Exceptions raised by the shipyard.http module.

Exception hierarchy::

    ShipyardError
        HttpError (base for all publish errors)
            UploadConfigError (invalid target configuration, also ValueError)
            UploadError (one artifact failed to upload)
            ResponseError (server answered with a rejected status)
                ArtifactoryResponseError (decoded Artifactory error document)
"""

from __future__ import annotations

from shipyard.config.exceptions import ShipyardError


class HttpError(ShipyardError):
    """Base exception for all shipyard.http errors."""


class UploadConfigError(HttpError, ValueError):
    """An upload target is misconfigured.

    Raised before any network activity.

    Attributes:
        target: Name of the offending target (may be empty).
        reason: What is wrong.

    Examples:
        >>> raise UploadConfigError("upload", "prod", "missing target")
        Traceback (most recent call last):
        ...
        shipyard.http.exceptions.UploadConfigError: upload section 'prod': missing target
    """

    def __init__(self, kind: str, target: str, reason: str) -> None:
        """Initialize UploadConfigError.

        Args:
            kind: Publisher kind, e.g. ``upload`` or ``artifactory``.
            target: Name of the offending target.
            reason: What is wrong.
        """
        super().__init__(f"{kind} section '{target}': {reason}")
        self.kind = kind
        self.target = target
        self.reason = reason


class UploadError(HttpError):
    """An artifact could not be published to a target.

    Attributes:
        target: Target name.
        artifact: Artifact name (empty if the failure is not tied to one).
        reason: Description of the underlying cause.
    """

    def __init__(self, target: str, artifact: str, reason: str) -> None:
        """Initialize UploadError.

        Args:
            target: Target name.
            artifact: Artifact name.
            reason: Description of the underlying cause.
        """
        subject = f"'{artifact}' to '{target}'" if artifact else f"to '{target}'"
        super().__init__(f"upload {subject} failed: {reason}")
        self.target = target
        self.artifact = artifact
        self.reason = reason


class ResponseError(HttpError):
    """The server answered with a status the checker does not accept.

    Attributes:
        status_code: HTTP status code.
        body: Response body (truncated).

    Examples:
        >>> raise ResponseError(500, "oops")
        Traceback (most recent call last):
        ...
        shipyard.http.exceptions.ResponseError: unexpected status 500: oops
    """

    def __init__(self, status_code: int, body: str = "", message: str | None = None) -> None:
        """Initialize ResponseError.

        Args:
            status_code: HTTP status code.
            body: Response body.
            message: Custom message (defaults to status and body).
        """
        if message is None:
            message = f"unexpected status {status_code}: {body}" if body else f"unexpected status {status_code}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ArtifactoryResponseError(ResponseError):
    """Artifactory rejected an upload with an ``errors`` document.

    Attributes:
        errors: ``(status, message)`` pairs reported by the server.
    """

    def __init__(self, status_code: int, body: str, errors: list[tuple[int, str]]) -> None:
        """Initialize ArtifactoryResponseError.

        Args:
            status_code: HTTP status code.
            body: Raw response body.
            errors: Decoded ``(status, message)`` pairs.
        """
        details = ", ".join(f"{status}: {message}" for status, message in errors)
        super().__init__(status_code, body, f"artifactory error {status_code} ({details})")
        self.errors = errors


__all__ = [
    "ArtifactoryResponseError",
    "HttpError",
    "ResponseError",
    "UploadConfigError",
    "UploadError",
]
