"""Generic HTTP upload stage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipyard.http.checks import check_2xx
from shipyard.http.client import default_client_factory
from shipyard.http.upload import open_asset, upload, upload_defaults

if TYPE_CHECKING:
    from shipyard.context import ReleaseContext
    from shipyard.http.client import ClientFactory
    from shipyard.http.upload import AssetOpener

#: Credential prefix and label of generic upload targets.
KIND = "upload"


class UploadStage:
    """Publish artifacts to the ``uploads`` targets.

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
        """Initialize UploadStage."""
        self._asset_opener = asset_opener
        self._client_factory = client_factory

    def __str__(self) -> str:
        return "http upload"

    def skip(self, ctx: ReleaseContext) -> bool:
        """Skip when no upload target is configured."""
        return not ctx.config.uploads

    def default(self, ctx: ReleaseContext) -> None:
        """Default every target to mode archive and method PUT."""
        upload_defaults(ctx.config.uploads)

    def run(self, ctx: ReleaseContext) -> None:
        """Upload to every target, accepting any 2xx response."""
        upload(
            ctx,
            ctx.config.uploads,
            KIND,
            check_2xx,
            asset_opener=self._asset_opener,
            client_factory=self._client_factory,
        )


__all__ = [
    "KIND",
    "UploadStage",
]
