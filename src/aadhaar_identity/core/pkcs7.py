# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
Certificate extraction from PKCS#7/CMS SignedData blobs.

Real-world eSign producers emit envelopes that strict decoders refuse:
trailing bytes after the DER, indefinite-length BER framing, key
algorithms a typed parser does not know.  Extraction therefore runs an
ordered list of strategies, each more forgiving than the last, and keeps
the first one that finds anything.
"""

from __future__ import annotations

__all__ = [
    "STRATEGIES",
    "CertificateCandidate",
    "DecodeStrategy",
    "decode_certificates",
    "is_certificate_shape",
]

import logging
from collections.abc import Callable
from dataclasses import dataclass

from asn1crypto import cms as asn1_cms

from ..config import ScanLimits
from ..errors import NoCertificateFoundError
from .asn1 import (
    ASN1_SEQUENCE_TAG,
    decode_tag_length,
    find_all,
    read_node,
    trim_der_padding,
)

_logger = logging.getLogger(__name__)

# Errors any decode step may raise on hostile bytes
_DECODE_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError, OverflowError)

# Number of top-level elements in an X.509 Certificate:
# tbsCertificate, signatureAlgorithm, signatureValue
_CERT_ELEMENT_COUNT = 3


@dataclass(frozen=True)
class CertificateCandidate:
    """A certificate-shaped DER blob pulled out of a signature.

    Attributes:
        raw_bytes: DER SEQUENCE with exactly three top-level elements.
        byte_size: Length of ``raw_bytes``.
        origin_offset: Offset of the certificate inside the signature blob
            (-1 when the decoder does not track positions).
        strategy: Name of the strategy that produced it.
    """

    raw_bytes: bytes
    byte_size: int
    origin_offset: int
    strategy: str


def is_certificate_shape(der: bytes) -> bool:
    """Return True if ``der`` is exactly one SEQUENCE of three elements."""
    try:
        node = read_node(der, 0)
        if node.identifier != ASN1_SEQUENCE_TAG or node.end != len(der):
            return False
        return len(node.children()) == _CERT_ELEMENT_COUNT
    except ValueError:
        return False


def _candidate(der: bytes, offset: int, strategy: str) -> CertificateCandidate:
    return CertificateCandidate(bytes(der), len(der), offset, strategy)


# ── Strategy 1: asn1crypto ContentInfo ───────────────────────────────


def _decode_structured(blob: bytes, limits: ScanLimits) -> list[CertificateCandidate]:
    """Parse a standard CMS ContentInfo and emit its certificate set."""
    content_info = asn1_cms.ContentInfo.load(trim_der_padding(blob), strict=True)
    if content_info["content_type"].native != "signed_data":
        raise ValueError(f"Unexpected CMS content type: {content_info['content_type'].native}")
    certs = content_info["content"]["certificates"]
    if not certs:
        return []

    found: list[CertificateCandidate] = []
    for choice in certs:
        if choice.name != "certificate":
            _logger.debug("Skipping non-X.509 certificate choice: %s", choice.name)
            continue
        der = choice.chosen.dump()
        if is_certificate_shape(der):
            found.append(_candidate(der, -1, "structured"))
    return found


# ── Strategy 2: strict DER navigation ────────────────────────────────


def _decode_navigation(blob: bytes, limits: ScanLimits) -> list[CertificateCandidate]:
    """Walk ContentInfo -> SignedData -> [0] IMPLICIT certificates by hand.

    Only the outer SEQUENCE is read, so trailing bytes are tolerated.
    """
    outer = read_node(blob, 0)
    if outer.identifier != ASN1_SEQUENCE_TAG:
        raise ValueError(f"Expected ASN.1 SEQUENCE (0x30), got 0x{outer.identifier:02x}")

    for field in outer.children():
        signed_data = None
        if field.is_context(0) and field.constructed:
            inner = field.children()
            if inner and inner[0].identifier == ASN1_SEQUENCE_TAG:
                signed_data = inner[0]
        elif field.identifier == ASN1_SEQUENCE_TAG:
            signed_data = field
        if signed_data is None:
            continue

        for sub_field in signed_data.children():
            if not (sub_field.is_context(0) and sub_field.constructed):
                continue
            found = [
                _candidate(cert.encoded, cert.offset, "asn1_navigation")
                for cert in sub_field.children()
                if cert.identifier == ASN1_SEQUENCE_TAG and is_certificate_shape(cert.encoded)
            ]
            if found:
                return found

    raise ValueError("Could not find certificate in ASN.1 structure")


# ── Strategy 3: raw byte scan ────────────────────────────────────────


def _decode_byte_scan(blob: bytes, limits: ScanLimits) -> list[CertificateCandidate]:
    """Scan for long-form SEQUENCE headers and keep certificate-shaped slices.

    Handles BER indefinite-length envelopes that no DER walker can step
    through.  Nested and overlapping hits are all kept, in scan order.
    """
    offsets = sorted({pos for prefix in limits.sequence_prefixes for pos in find_all(blob, prefix)})

    found: list[CertificateCandidate] = []
    for pos in offsets:
        try:
            header = decode_tag_length(blob, pos)
        except ValueError:
            continue
        length = header.length
        if length is None:
            continue
        if not limits.min_certificate_length <= length <= limits.max_certificate_length:
            continue
        end = pos + header.header_size + length
        if end > len(blob):
            continue
        der = blob[pos:end]
        if is_certificate_shape(der):
            found.append(_candidate(der, pos, "byte_scan"))
    return found


@dataclass(frozen=True)
class DecodeStrategy:
    """One named way of pulling certificates out of a signature blob."""

    name: str
    decode: Callable[[bytes, ScanLimits], list[CertificateCandidate]]


STRATEGIES: tuple[DecodeStrategy, ...] = (
    DecodeStrategy("structured", _decode_structured),
    DecodeStrategy("asn1_navigation", _decode_navigation),
    DecodeStrategy("byte_scan", _decode_byte_scan),
)


def decode_certificates(
    blob: bytes,
    *,
    limits: ScanLimits | None = None,
    strategies: tuple[DecodeStrategy, ...] = STRATEGIES,
) -> list[CertificateCandidate]:
    """
    Extract certificate candidates from a PKCS#7/CMS signature blob.

    Strategies run in order; the first to return a non-empty list wins and
    results are never merged.  A strategy that raises is logged and
    skipped.

    Args:
        blob: Decoded signature bytes (may carry zero padding).
        limits: Size bounds and caps for the byte scan.
        strategies: Override the strategy order (tests, tooling).

    Returns:
        Candidates in the winning strategy's order.

    Raises:
        NoCertificateFoundError: If no strategy finds a certificate.
    """
    if limits is None:
        limits = ScanLimits()

    for strategy in strategies:
        try:
            found = strategy.decode(blob, limits)
        except _DECODE_ERRORS as exc:  # noqa: PERF203 -- each strategy is an independent attempt
            _logger.debug("Strategy %s failed: %s", strategy.name, exc)
            continue
        if not found:
            _logger.debug("Strategy %s found no certificates", strategy.name)
            continue
        if limits.max_certificate_candidates is not None:
            found = found[: limits.max_certificate_candidates]
        _logger.debug("Strategy %s found %d certificate(s)", strategy.name, len(found))
        return found

    raise NoCertificateFoundError(
        f"Could not find a certificate in {len(blob)}-byte signature using any strategy"
    )
