"""High-level entry points for identity extraction.

:func:`extract_identity_from_document` runs the full pipeline over a
signed PDF; :func:`extract_identity_from_certificate` skips signature
location for callers that already hold a bare certificate.  Both are pure
functions of their input bytes and safe to call from worker threads.
"""

from __future__ import annotations

__all__ = [
    "extract_identity",
    "extract_identity_from_certificate",
    "extract_identity_from_document",
]

import logging
from typing import TYPE_CHECKING

from .constants import PDF_MAGIC
from .core.cert_info import load_certificate_bytes
from .core.pkcs7 import is_certificate_shape
from .core.selector import record_from_certificate, select_identity
from .errors import CertificateStructureError

if TYPE_CHECKING:
    from .config import ScanLimits
    from .core.identity import IdentityRecord

_logger = logging.getLogger(__name__)


def extract_identity_from_document(
    document_bytes: bytes, *, limits: ScanLimits | None = None
) -> IdentityRecord:
    """
    Extract the signer's identity from a digitally signed PDF.

    Args:
        document_bytes: Unmodified PDF file image.
        limits: Optional scan bounds.

    Returns:
        The selected IdentityRecord (possibly best-effort, mostly ``"NA"``).

    Raises:
        IdentityError: Subclass naming the terminal failure.
    """
    return select_identity(bytes(document_bytes), limits=limits)


def extract_identity_from_certificate(certificate_bytes: bytes) -> IdentityRecord:
    """
    Extract identity fields from a bare X.509 certificate.

    Args:
        certificate_bytes: PEM text (with a ``BEGIN CERTIFICATE`` marker)
            or raw DER bytes.

    Returns:
        IdentityRecord for the certificate.

    Raises:
        CertificateStructureError: If the bytes are not a readable certificate.
    """
    der = load_certificate_bytes(bytes(certificate_bytes))
    if not is_certificate_shape(der):
        raise CertificateStructureError(
            "Not an X.509 certificate (expected a SEQUENCE of three elements)"
        )
    return record_from_certificate(der)


def extract_identity(data: bytes, *, limits: ScanLimits | None = None) -> IdentityRecord:
    """Dispatch on content: PDFs run the full pipeline, anything else is
    treated as a certificate."""
    if data[: len(PDF_MAGIC)] == PDF_MAGIC:
        _logger.debug("PDF detected, extracting certificate from signatures")
        return extract_identity_from_document(data, limits=limits)
    return extract_identity_from_certificate(data)
