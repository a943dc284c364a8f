"""HTTP client construction for upload targets.

Each target gets its own :class:`httpx.Client`. TLS trust is the system
default unless ``trusted_certificates`` is set, in which case only that PEM
bundle is trusted. A client certificate and key enable mutual TLS.
"""

from __future__ import annotations

import logging
import ssl
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import httpx
from cryptography import x509

if TYPE_CHECKING:
    from shipyard.config.models import UploadConfig

logger = logging.getLogger(__name__)

ClientFactory = Callable[["UploadConfig"], httpx.Client]


def load_trusted_certificates(pem: str) -> list[x509.Certificate]:
    """Parse a PEM bundle.

    Args:
        pem: One or more PEM-encoded X.509 certificates.

    Returns:
        The parsed certificates.

    Raises:
        ValueError: If the bundle holds no valid certificate.
    """
    certificates = x509.load_pem_x509_certificates(pem.encode("utf-8"))
    if not certificates:
        raise ValueError("no certificate found")
    return certificates


def build_ssl_context(upload: UploadConfig) -> ssl.SSLContext:
    """Build the TLS context for a target.

    Args:
        upload: Target configuration.

    Returns:
        A client-side SSL context.

    Raises:
        ssl.SSLError: If the bundle or the client key pair cannot be loaded.
        OSError: If the client certificate or key file cannot be read.
    """
    if upload.trusted_certificates:
        context = ssl.create_default_context(cadata=upload.trusted_certificates)
        logger.debug("Target '%s' trusts a custom certificate bundle", upload.name)
    else:
        context = ssl.create_default_context()
    if upload.client_x509_cert and upload.client_x509_key:
        context.load_cert_chain(upload.client_x509_cert, upload.client_x509_key)
        logger.debug("Target '%s' uses a client certificate", upload.name)
    return context


def default_client_factory(upload: UploadConfig) -> httpx.Client:
    """Create the HTTP client used to publish to ``upload``."""
    kwargs: dict[str, Any] = {"verify": build_ssl_context(upload)}
    if upload.timeout is not None:
        kwargs["timeout"] = upload.timeout
    return httpx.Client(**kwargs)


__all__ = [
    "ClientFactory",
    "build_ssl_context",
    "default_client_factory",
    "load_trusted_certificates",
]
