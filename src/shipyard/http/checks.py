"""Response checkers.

A checker inspects an :class:`httpx.Response` and raises when the upload
must be considered failed. Publishers pick the checker matching their
server's error conventions.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx

from shipyard.http.exceptions import ResponseError

ResponseCheck = Callable[[httpx.Response], None]

#: Maximum number of body characters kept on errors.
MAX_ERROR_BODY = 512


def check_2xx(response: httpx.Response) -> None:
    """Accept any 2xx status.

    Raises:
        ResponseError: For every other status.

    Examples:
        >>> check_2xx(httpx.Response(201))
        >>> check_2xx(httpx.Response(404, text="missing"))
        Traceback (most recent call last):
        ...
        shipyard.http.exceptions.ResponseError: unexpected status 404: missing
    """
    if not response.is_success:
        raise ResponseError(response.status_code, response_body(response))


def response_body(response: httpx.Response) -> str:
    """Return the (truncated) response text, or an empty string."""
    try:
        text = response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError):
        return ""
    return text[:MAX_ERROR_BODY]


__all__ = [
    "MAX_ERROR_BODY",
    "ResponseCheck",
    "check_2xx",
    "response_body",
]
