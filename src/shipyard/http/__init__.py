"""HTTP publishing for shipyard.

Examples:
    >>> from shipyard.http import check_2xx, upload, upload_defaults
    >>> upload_defaults(ctx.config.uploads)  # doctest: +SKIP
    >>> upload(ctx, ctx.config.uploads, "upload", check_2xx)  # doctest: +SKIP
"""

from shipyard.http.checks import ResponseCheck, check_2xx, response_body
from shipyard.http.client import (
    ClientFactory,
    build_ssl_context,
    default_client_factory,
    load_trusted_certificates,
)
from shipyard.http.exceptions import (
    ArtifactoryResponseError,
    HttpError,
    ResponseError,
    UploadConfigError,
    UploadError,
)
from shipyard.http.extrafiles import find_extra_files
from shipyard.http.upload import (
    DEFAULT_METHOD,
    MODE_TYPES,
    Asset,
    AssetOpener,
    check_config,
    credential_variables,
    open_asset,
    resolve_username,
    select_artifacts,
    target_url,
    upload,
    upload_defaults,
)

__all__ = [
    "DEFAULT_METHOD",
    "MODE_TYPES",
    "ArtifactoryResponseError",
    "Asset",
    "AssetOpener",
    "ClientFactory",
    "HttpError",
    "ResponseCheck",
    "ResponseError",
    "UploadConfigError",
    "UploadError",
    "build_ssl_context",
    "check_2xx",
    "check_config",
    "credential_variables",
    "default_client_factory",
    "find_extra_files",
    "load_trusted_certificates",
    "open_asset",
    "resolve_username",
    "response_body",
    "select_artifacts",
    "target_url",
    "upload",
    "upload_defaults",
]
