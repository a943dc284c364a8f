"""Artifactory upload stage.

Same transport as :class:`~shipyard.stages.upload.UploadStage`, with
credentials read from ``ARTIFACTORY_<NAME>_*`` variables and error bodies
decoded from Artifactory's ``{"errors": [...]}`` document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipyard.http.checks import response_body
from shipyard.http.client import default_client_factory
from shipyard.http.exceptions import ArtifactoryResponseError, ResponseError
from shipyard.http.upload import open_asset, upload, upload_defaults

if TYPE_CHECKING:
    import httpx

    from shipyard.context import ReleaseContext
    from shipyard.http.client import ClientFactory
    from shipyard.http.upload import AssetOpener

#: Credential prefix and label of Artifactory targets.
KIND = "artifactory"


def check_artifactory_response(response: httpx.Response) -> None:
    """Accept 2xx and decode Artifactory error documents otherwise.

    Raises:
        ArtifactoryResponseError: If the body carries an ``errors`` list.
        ResponseError: For any other non-2xx response.

    Examples:
        >>> import httpx
        >>> check_artifactory_response(httpx.Response(201))
        >>> check_artifactory_response(
        ...     httpx.Response(400, json={"errors": [{"status": 400, "message": "Bad Request"}]})
        ... )
        Traceback (most recent call last):
        ...
        shipyard.http.exceptions.ArtifactoryResponseError: artifactory error 400 (400: Bad Request)
    """
    if response.is_success:
        return

    body = response_body(response)
    try:
        document = response.json()
    except ValueError:
        raise ResponseError(response.status_code, body) from None

    errors = document.get("errors") if isinstance(document, dict) else None
    if not isinstance(errors, list) or not errors:
        raise ResponseError(response.status_code, body)

    pairs: list[tuple[int, str]] = []
    for item in errors:
        if not isinstance(item, dict):
            continue
        try:
            status = int(item.get("status", response.status_code))
        except (TypeError, ValueError):
            status = response.status_code
        pairs.append((status, str(item.get("message", ""))))
    raise ArtifactoryResponseError(response.status_code, body, pairs)


class ArtifactoryStage:
    """Publish artifacts to the ``artifactories`` targets.

    Args:
        asset_opener: Opens artifact bodies.
        client_factory: Builds one HTTP client per target.
    """

    def __init__(
        self,
        *,
        asset_opener: AssetOpener = open_asset,
        client_factory: ClientFactory = default_client_factory,
    ) -> None:
        """Initialize ArtifactoryStage."""
        self._asset_opener = asset_opener
        self._client_factory = client_factory

    def __str__(self) -> str:
        return "artifactory"

    def skip(self, ctx: ReleaseContext) -> bool:
        """Skip when no Artifactory target is configured."""
        return not ctx.config.artifactories

    def default(self, ctx: ReleaseContext) -> None:
        """Default every target to mode archive and method PUT."""
        upload_defaults(ctx.config.artifactories)

    def run(self, ctx: ReleaseContext) -> None:
        """Upload to every Artifactory target."""
        upload(
            ctx,
            ctx.config.artifactories,
            KIND,
            check_artifactory_response,
            asset_opener=self._asset_opener,
            client_factory=self._client_factory,
        )


__all__ = [
    "KIND",
    "ArtifactoryStage",
    "check_artifactory_response",
]
