"""
aadhaar-identity -- recover Aadhaar eSign identity from signed PDFs.

Locates PKCS#7/CMS signatures in raw PDF bytes, pulls out the signer's
X.509 certificate (tolerating BER and otherwise non-conformant envelopes)
and decodes the identity fields packed into its Subject name.
"""

from __future__ import annotations

from .api import extract_identity, extract_identity_from_certificate, extract_identity_from_document
from .config import ScanLimits, load_limits_from_env
from .constants import NA, __version__
from .core.identity import IdentityRecord
from .errors import (
    CertificateStructureError,
    ErrorKind,
    IdentityError,
    MalformedHexError,
    NoAadhaarDataError,
    NoCertificateFoundError,
    NoSignatureFoundError,
    NotAPdfError,
)

__all__ = [
    "NA",
    "CertificateStructureError",
    "ErrorKind",
    "IdentityError",
    "IdentityRecord",
    "MalformedHexError",
    "NoAadhaarDataError",
    "NoCertificateFoundError",
    "NoSignatureFoundError",
    "NotAPdfError",
    "ScanLimits",
    "__version__",
    "extract_identity",
    "extract_identity_from_certificate",
    "extract_identity_from_document",
    "load_limits_from_env",
]
