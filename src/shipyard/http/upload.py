"""Generic HTTP publisher.

Uploads registry artifacts (and extra files) to every configured target.
Targets are processed one after the other; the artifacts of one target are
sent concurrently, bounded by ``ctx.parallelism``.

Credentials follow the ``<KIND>_<NAME>_USERNAME`` / ``<KIND>_<NAME>_SECRET``
environment convention, uppercased. The secret is never read from the
configuration file.

Examples:
    >>> from shipyard.http import check_2xx, upload
    >>> upload(ctx, ctx.config.uploads, "upload", check_2xx)  # doctest: +SKIP
"""

from __future__ import annotations

import hashlib
import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING
from urllib.parse import quote

import httpx

from shipyard.artifact.exceptions import AssetOpenError
from shipyard.artifact.filters import and_, by_ext, by_ids, by_type, or_
from shipyard.artifact.models import Artifact, ArtifactType
from shipyard.config.exceptions import ShipyardError
from shipyard.config.models import MODE_ARCHIVE, MODE_BINARY, UPLOAD_MODES
from shipyard.http.client import default_client_factory, load_trusted_certificates
from shipyard.http.exceptions import UploadConfigError, UploadError
from shipyard.http.extrafiles import find_extra_files
from shipyard.logging import SUCCESS_LEVEL
from shipyard.pipeline.exceptions import SkipError, SkipMemento
from shipyard.template.engine import TemplateEngine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shipyard.config.models import UploadConfig
    from shipyard.context import ReleaseContext
    from shipyard.http.checks import ResponseCheck
    from shipyard.http.client import ClientFactory

logger = logging.getLogger(__name__)

#: Default HTTP method.
DEFAULT_METHOD = "PUT"

#: Sub-delimiters and path characters left unescaped in artifact names.
_PATH_SAFE = "!$&'()*+,;=:@"

#: Artifact types selected by each upload mode.
MODE_TYPES: dict[str, frozenset[ArtifactType]] = {
    MODE_ARCHIVE: frozenset(
        {
            ArtifactType.LINUX_PACKAGE,
            ArtifactType.UPLOADABLE_ARCHIVE,
            ArtifactType.UPLOADABLE_SOURCE_ARCHIVE,
        }
    ),
    MODE_BINARY: frozenset({ArtifactType.UPLOADABLE_BINARY}),
}


@dataclass(slots=True)
class Asset:
    """An opened artifact body.

    Attributes:
        reader: Binary stream positioned at the start of the content.
        size: Exact content length in bytes.
    """

    reader: IO[bytes]
    size: int


AssetOpener = Callable[[str, Artifact], Asset]


def open_asset(kind: str, artifact: Artifact) -> Asset:
    """Open an artifact's file for upload.

    Args:
        kind: Publisher kind (used in error messages).
        artifact: Artifact to open.

    Returns:
        The opened asset. The caller closes ``reader``.

    Raises:
        AssetOpenError: If the path is missing, is a directory or is unreadable.
    """
    try:
        size = os.stat(artifact.path).st_size
        if os.path.isdir(artifact.path):
            raise AssetOpenError(artifact.name, artifact.path, f"{kind}: is a directory")
        reader = open(artifact.path, "rb")  # noqa: SIM115
    except OSError as exc:
        raise AssetOpenError(artifact.name, artifact.path, f"{kind}: {exc.strerror or exc}") from exc
    return Asset(reader=reader, size=size)


def upload_defaults(uploads: Sequence[UploadConfig]) -> None:
    """Fill unset ``mode`` and ``method`` fields (idempotent)."""
    for upload_config in uploads:
        if not upload_config.mode:
            upload_config.mode = MODE_ARCHIVE
        if not upload_config.method:
            upload_config.method = DEFAULT_METHOD


def credential_variables(upload_config: UploadConfig, kind: str) -> tuple[str, str]:
    """Return the username and secret environment variable names.

    Examples:
        >>> from shipyard.config.models import UploadConfig
        >>> credential_variables(UploadConfig(name="production"), "artifactory")
        ('ARTIFACTORY_PRODUCTION_USERNAME', 'ARTIFACTORY_PRODUCTION_SECRET')
    """
    base = f"{kind}_{upload_config.name}".upper()
    return f"{base}_USERNAME", f"{base}_SECRET"


def resolve_username(ctx: ReleaseContext, upload_config: UploadConfig, kind: str) -> str:
    """Return the configured username, or the one from the environment."""
    if upload_config.username:
        return upload_config.username
    username_var, _ = credential_variables(upload_config, kind)
    return ctx.env.get(username_var, "")


def check_config(ctx: ReleaseContext, upload_config: UploadConfig, kind: str) -> None:
    """Validate a target before any network activity.

    Args:
        ctx: Release context (for credential lookups).
        upload_config: Target configuration.
        kind: Publisher kind.

    Raises:
        UploadConfigError: If the target is misconfigured.
    """
    name = upload_config.name
    if not name:
        raise UploadConfigError(kind, name, "name is required")
    if not upload_config.target:
        raise UploadConfigError(kind, name, "target is required")
    if upload_config.mode not in UPLOAD_MODES:
        raise UploadConfigError(
            kind,
            name,
            f"mode must be one of {', '.join(sorted(UPLOAD_MODES))}, got {upload_config.mode!r}",
        )

    username_var, secret_var = credential_variables(upload_config, kind)
    username = resolve_username(ctx, upload_config, kind)
    has_secret = bool(ctx.env.get(secret_var))
    if username and not has_secret:
        raise UploadConfigError(kind, name, f"missing secret for user {username!r}, set {secret_var}")
    if has_secret and not username:
        raise UploadConfigError(kind, name, f"{secret_var} is set but no username, set username or {username_var}")

    if upload_config.trusted_certificates:
        try:
            load_trusted_certificates(upload_config.trusted_certificates)
        except ValueError as exc:
            raise UploadConfigError(kind, name, f"invalid trusted_certificates: {exc}") from exc

    if bool(upload_config.client_x509_cert) != bool(upload_config.client_x509_key):
        raise UploadConfigError(kind, name, "client_x509_cert and client_x509_key must be set together")


def select_artifacts(ctx: ReleaseContext, upload_config: UploadConfig, engine: TemplateEngine) -> list[Artifact]:
    """Compute the artifacts published by a target.

    Registry artifacts are selected by mode, ``ids`` and ``exts``, then
    joined by enabled sidecars. Extra files are always appended.
    """
    selected: list[Artifact] = []
    if not upload_config.extra_files_only:
        primary_filters = [by_type(*MODE_TYPES[upload_config.mode])]
        if upload_config.ids:
            primary_filters.append(by_ids(*upload_config.ids))
        if upload_config.exts:
            primary_filters.append(by_ext(*upload_config.exts))
        primaries = ctx.artifacts.filter(and_(*primary_filters))
        selected.extend(primaries)

        sidecar_types: list[ArtifactType] = []
        if upload_config.checksum:
            sidecar_types.append(ArtifactType.CHECKSUM)
        if upload_config.signature:
            sidecar_types += [ArtifactType.SIGNATURE, ArtifactType.CERTIFICATE]
        if upload_config.meta:
            sidecar_types.append(ArtifactType.METADATA)
        if sidecar_types:
            group_ids = {a.id for a in primaries if a.id is not None}
            same_group = or_(lambda a: a.id is None, lambda a: a.id in group_ids)
            selected.extend(ctx.artifacts.filter(and_(by_type(*sidecar_types), same_group)))

    for name, path in find_extra_files(engine, upload_config.extra_files).items():
        selected.append(Artifact(name=name, path=path, type=ArtifactType.UPLOADABLE_FILE))
    return selected


def upload(
    ctx: ReleaseContext,
    uploads: Sequence[UploadConfig],
    kind: str,
    check: ResponseCheck,
    *,
    asset_opener: AssetOpener = open_asset,
    client_factory: ClientFactory = default_client_factory,
) -> None:
    """Publish artifacts to every target.

    Args:
        ctx: Release context.
        uploads: Target configurations (defaults already applied).
        kind: Publisher kind, also the credential variable prefix.
        check: Response checker.
        asset_opener: Opens an artifact body (injectable for tests).
        client_factory: Builds the HTTP client of a target (injectable for tests).

    Raises:
        UploadConfigError: If a target is misconfigured.
        UploadError: If an artifact fails to upload.
        SkipError: If every non-skipped target succeeded but some were skipped.
    """
    engine = TemplateEngine(ctx)
    memento = SkipMemento()
    for upload_config in uploads:
        if engine.resolve_bool(upload_config.skip):
            reason = f"{kind} section '{upload_config.name}' skipped"
            logger.info("%s", reason)
            memento.remember(SkipError(reason))
            continue

        check_config(ctx, upload_config, kind)
        _upload_target(ctx, engine, upload_config, kind, check, asset_opener, client_factory)
    memento.check()


def _upload_target(
    ctx: ReleaseContext,
    engine: TemplateEngine,
    upload_config: UploadConfig,
    kind: str,
    check: ResponseCheck,
    asset_opener: AssetOpener,
    client_factory: ClientFactory,
) -> None:
    try:
        artifacts = select_artifacts(ctx, upload_config, engine)
    except (ShipyardError, ValueError) as exc:
        raise UploadError(upload_config.name, "", str(exc)) from exc

    if not artifacts:
        logger.info("Nothing to upload to %s '%s'", kind, upload_config.name)
        return

    username = resolve_username(ctx, upload_config, kind)
    _, secret_var = credential_variables(upload_config, kind)
    auth = httpx.BasicAuth(username, ctx.env.get(secret_var, "")) if username else None

    try:
        client = client_factory(upload_config)
    except (OSError, ValueError) as exc:
        raise UploadError(upload_config.name, "", f"cannot build HTTP client: {exc}") from exc

    logger.info("Uploading %d artifact(s) to %s '%s'", len(artifacts), kind, upload_config.name)
    with client, ThreadPoolExecutor(max_workers=max(1, ctx.parallelism)) as executor:
        futures = [
            executor.submit(
                _upload_asset,
                engine.with_artifact(artifact),
                upload_config,
                kind,
                artifact,
                client,
                auth,
                check,
                asset_opener,
            )
            for artifact in artifacts
        ]
        try:
            for future in futures:
                future.result()
        except BaseException:
            for future in futures:
                future.cancel()
            raise


def _upload_asset(
    engine: TemplateEngine,
    upload_config: UploadConfig,
    kind: str,
    artifact: Artifact,
    client: httpx.Client,
    auth: httpx.Auth | None,
    check: ResponseCheck,
    asset_opener: AssetOpener,
) -> None:
    try:
        url = target_url(engine.resolve(upload_config.target), artifact.name)
        headers = engine.resolve_all(upload_config.custom_headers)

        if upload_config.checksum_header:
            headers[upload_config.checksum_header] = _sha256(asset_opener(kind, artifact))

        asset = asset_opener(kind, artifact)
        headers["Content-Length"] = str(asset.size)
        logger.info("Uploading %s to %s '%s'", artifact.name, kind, upload_config.name)
        logger.debug("%s %s", upload_config.method, url)
        with asset.reader:
            response = client.request(
                upload_config.method or DEFAULT_METHOD,
                url,
                content=asset.reader,
                headers=headers,
                auth=auth,
            )
        check(response)
    except (ShipyardError, httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
        raise UploadError(upload_config.name, artifact.name, str(exc)) from exc
    logger.log(
        SUCCESS_LEVEL,
        "Uploaded %s",
        artifact.name,
        extra={"context": {"target": upload_config.name, "status": response.status_code}},
    )


def target_url(base: str, name: str) -> str:
    """Join a resolved target and an artifact name with exactly one slash.

    Only characters that are not valid in a path segment are percent-encoded,
    so names such as ``app+build.1.zip`` reach the server unchanged.

    Examples:
        >>> target_url("https://repo.example.com/files/", "app 1.0.tar.gz")
        'https://repo.example.com/files/app%201.0.tar.gz'
        >>> target_url("https://repo.example.com/files", "app+build.1.zip")
        'https://repo.example.com/files/app+build.1.zip'
    """
    return f"{base.rstrip('/')}/{quote(name, safe=_PATH_SAFE)}"


def _sha256(asset: Asset) -> str:
    digest = hashlib.sha256()
    with asset.reader:
        for chunk in iter(lambda: asset.reader.read(64 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


__all__ = [
    "DEFAULT_METHOD",
    "MODE_TYPES",
    "Asset",
    "AssetOpener",
    "check_config",
    "credential_variables",
    "open_asset",
    "resolve_username",
    "select_artifacts",
    "target_url",
    "upload",
    "upload_defaults",
]
