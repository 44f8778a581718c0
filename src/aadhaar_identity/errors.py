"""aadhaar-identity error types."""

from __future__ import annotations

import enum
from typing import ClassVar

__all__ = [
    "CertificateStructureError",
    "ErrorKind",
    "IdentityError",
    "MalformedHexError",
    "NoAadhaarDataError",
    "NoCertificateFoundError",
    "NoSignatureFoundError",
    "NotAPdfError",
]


class ErrorKind(enum.Enum):
    """Terminal failure kinds reported to callers."""

    NOT_A_PDF = "not_a_pdf"
    NO_SIGNATURE_FOUND = "no_signature_found"
    NO_CERTIFICATE_FOUND = "no_certificate_found"
    CERTIFICATE_STRUCTURE_INVALID = "certificate_structure_invalid"
    MALFORMED_HEX = "malformed_hex"
    NO_AADHAAR_DATA_FOUND = "no_aadhaar_data_found"


class IdentityError(Exception):
    """Base error for identity extraction."""

    kind: ClassVar[ErrorKind]


class NotAPdfError(IdentityError):
    """Input does not start with the PDF header."""

    kind = ErrorKind.NOT_A_PDF


class NoSignatureFoundError(IdentityError):
    """No decodable signature blob was located in the document."""

    kind = ErrorKind.NO_SIGNATURE_FOUND


class NoCertificateFoundError(IdentityError):
    """Every PKCS#7 decode strategy came back empty."""

    kind = ErrorKind.NO_CERTIFICATE_FOUND


class CertificateStructureError(IdentityError):
    """Certificate bytes lack a recognizable TBSCertificate layout."""

    kind = ErrorKind.CERTIFICATE_STRUCTURE_INVALID


class MalformedHexError(IdentityError):
    """Hex text has odd length or non-hex characters."""

    kind = ErrorKind.MALFORMED_HEX


class NoAadhaarDataError(IdentityError):
    """Certificates were found but none decoded into an identity record."""

    kind = ErrorKind.NO_AADHAAR_DATA_FOUND
