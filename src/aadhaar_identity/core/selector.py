"""
Candidate selection across every certificate in a signed PDF.

A signed PDF may carry several signatures (document signer, organization
seal, timestamp) and each signature several certificates (signer plus
intermediate CAs).  Only the signer's personal eSign certificate carries
Aadhaar fields, so the search walks the whole candidate tree and stops at
the first record that has them.
"""

from __future__ import annotations

__all__ = [
    "ExtractionOutcome",
    "evaluate_certificate",
    "has_aadhaar_data",
    "record_from_certificate",
    "select_identity",
]

import logging
from dataclasses import dataclass

from ..config import ScanLimits
from ..constants import NA
from ..errors import IdentityError, NoAadhaarDataError, NoCertificateFoundError
from .cert_info import extract_certificate_attributes
from .identity import IdentityRecord, build_identity_record
from .locator import locate_signatures
from .pkcs7 import CertificateCandidate, decode_certificates

_logger = logging.getLogger(__name__)

# Strategy whose candidates fall back to the largest certificate
_BYTE_SCAN = "byte_scan"


def has_aadhaar_data(record: IdentityRecord) -> bool:
    """Return True if the record carries any personal eSign field.

    Intermediate CA and organization certificates never have TPIN,
    gender, birth year or PIN code; a signer's personal certificate does.
    """
    return any(
        value != NA
        for value in (record.tpin, record.gender, record.year_of_birth, record.postal_code)
    )


@dataclass(frozen=True)
class ExtractionOutcome:
    """Result of decoding one certificate candidate."""

    candidate: CertificateCandidate
    record: IdentityRecord | None = None
    error: IdentityError | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None


def record_from_certificate(cert_der: bytes) -> IdentityRecord:
    """Decode one DER certificate into an :class:`IdentityRecord`.

    Raises:
        CertificateStructureError: If the certificate cannot be read.
    """
    return build_identity_record(extract_certificate_attributes(cert_der))


def evaluate_certificate(candidate: CertificateCandidate) -> ExtractionOutcome:
    """Decode a candidate, capturing failure instead of raising."""
    try:
        record = record_from_certificate(candidate.raw_bytes)
    except IdentityError as exc:
        _logger.debug(
            "Certificate at offset %d (%d bytes) did not decode: %s",
            candidate.origin_offset,
            candidate.byte_size,
            exc,
        )
        return ExtractionOutcome(candidate, error=exc)
    return ExtractionOutcome(candidate, record=record)


def _fallback(outcomes: list[ExtractionOutcome]) -> IdentityRecord | None:
    """Pick the non-qualifying record one signature contributes.

    Byte-scan hits include nested CA certificates and fragments, so the
    largest decoded certificate stands in; otherwise the first decoded one.
    """
    decoded = [outcome for outcome in outcomes if outcome.record is not None]
    if not decoded:
        return None
    if decoded[0].candidate.strategy == _BYTE_SCAN:
        best = max(decoded, key=lambda outcome: outcome.candidate.byte_size)
        return best.record
    return decoded[0].record


def select_identity(document_bytes: bytes, *, limits: ScanLimits | None = None) -> IdentityRecord:
    """
    Find the signer identity in a signed PDF.

    Signature candidates are tried in locator order and their certificates
    in decode order; the first record with Aadhaar data wins.  When none
    qualifies, the fallback record of the first signature that decoded at
    all is returned, most fields ``"NA"``.

    Args:
        document_bytes: Complete PDF file bytes.
        limits: Scan bounds (defaults to :class:`ScanLimits`).

    Returns:
        The selected IdentityRecord.

    Raises:
        NotAPdfError: If the input is not a PDF.
        NoSignatureFoundError: If no signature blob is present.
        MalformedHexError: If every signature hex string is malformed.
        NoCertificateFoundError: If no signature yields a certificate.
        NoAadhaarDataError: If certificates were found but none decoded.
    """
    if limits is None:
        limits = ScanLimits()

    signatures = locate_signatures(
        document_bytes, max_candidates=limits.max_signature_candidates
    )

    fallback: IdentityRecord | None = None
    certificates_seen = 0

    for index, signature in enumerate(signatures, start=1):
        if not signature.decodable:
            _logger.debug(
                "Skipping indirect signature reference %s at offset %d",
                signature.reference,
                signature.byte_offset,
            )
            continue

        _logger.debug(
            "Signature %d/%d: %s, %d bytes at offset %d",
            index,
            len(signatures),
            signature.source_pattern.value,
            signature.size,
            signature.byte_offset,
        )
        try:
            candidates = decode_certificates(signature.raw_bytes, limits=limits)
        except NoCertificateFoundError as exc:
            _logger.debug("Signature %d: %s", index, exc)
            continue

        certificates_seen += len(candidates)
        outcomes: list[ExtractionOutcome] = []
        for candidate in candidates:
            outcome = evaluate_certificate(candidate)
            if outcome.record is not None and has_aadhaar_data(outcome.record):
                _logger.debug(
                    "Signature %d: Aadhaar certificate found (%s)",
                    index,
                    outcome.record.signer_name,
                )
                return outcome.record
            outcomes.append(outcome)

        if fallback is None:
            fallback = _fallback(outcomes)

    if fallback is not None:
        _logger.debug("No certificate has Aadhaar data, returning best-effort record")
        return fallback

    if certificates_seen == 0:
        raise NoCertificateFoundError("No certificate could be extracted from any signature")
    raise NoAadhaarDataError(
        f"None of {certificates_seen} certificate(s) found could be decoded"
    )
