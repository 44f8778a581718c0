"""Signature blob location in raw PDF bytes.

Signatures are found by textual patterns over the document, not by parsing
the PDF object graph, so damaged or unusual files still yield candidates.
"""

from __future__ import annotations

__all__ = [
    "BYTERANGE_PATTERN",
    "SignatureCandidate",
    "SignaturePattern",
    "locate_signatures",
    "parse_byterange",
]

import enum
import logging
import re
from dataclasses import dataclass

from ..constants import PDF_MAGIC, SIG_BYTERANGE_WINDOW, SIG_CONTENTS_WINDOW
from ..errors import MalformedHexError, NoSignatureFoundError, NotAPdfError
from .asn1 import decode_hex

_logger = logging.getLogger(__name__)

# Regex pattern to find ByteRange arrays in PDF
BYTERANGE_PATTERN = rb"/ByteRange\s*\[\s*(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s*\]"

# Hex string body, PDF whitespace allowed between digits
_HEX = rb"<([0-9A-Fa-f\s]+)>"


class SignaturePattern(enum.Enum):
    """Textual shapes a signature can take, most specific first."""

    AADHAAR_ESIGN = "Aadhaar eSign"
    PKCS7_DETACHED = "PKCS#7 detached"
    PKCS7_SHA1 = "PKCS#7 SHA1"
    SIG_DICTIONARY = "/Sig dictionary"
    BYTERANGE_WITH_CONTENTS = "/ByteRange with /Contents"
    STANDARD_CONTENTS = "Standard /Contents hex"
    INDIRECT_REFERENCE = "Indirect /Contents reference"


_PATTERNS: tuple[tuple[SignaturePattern, re.Pattern[bytes]], ...] = (
    (
        SignaturePattern.AADHAAR_ESIGN,
        re.compile(
            rb"/SubFilter\s*/ETSI\.CAdES\.detached[\s\S]{0,%d}?/Contents\s*" % SIG_CONTENTS_WINDOW
            + _HEX
        ),
    ),
    (
        SignaturePattern.PKCS7_DETACHED,
        re.compile(
            rb"/SubFilter\s*/adbe\.pkcs7\.detached[\s\S]{0,%d}?/Contents\s*" % SIG_CONTENTS_WINDOW
            + _HEX
        ),
    ),
    (
        SignaturePattern.PKCS7_SHA1,
        re.compile(
            rb"/SubFilter\s*/adbe\.pkcs7\.sha1[\s\S]{0,%d}?/Contents\s*" % SIG_CONTENTS_WINDOW
            + _HEX
        ),
    ),
    (
        SignaturePattern.SIG_DICTIONARY,
        re.compile(rb"/Type\s*/Sig\b[\s\S]{0,%d}?/Contents\s*" % SIG_CONTENTS_WINDOW + _HEX),
    ),
    (
        SignaturePattern.BYTERANGE_WITH_CONTENTS,
        re.compile(
            rb"/ByteRange\s*\[[^\]]*\][\s\S]{0,%d}?/Contents\s*" % SIG_BYTERANGE_WINDOW + _HEX
        ),
    ),
    (SignaturePattern.STANDARD_CONTENTS, re.compile(rb"/Contents\s*" + _HEX)),
)

_INDIRECT_PATTERN = re.compile(rb"/Contents\s+(\d+)\s+(\d+)\s+R\b")


@dataclass(frozen=True)
class SignatureCandidate:
    """One signature blob found in a document.

    Attributes:
        byte_offset: Document offset of the hex payload (or of the
            indirect reference).
        raw_bytes: Decoded binary payload; empty for indirect references.
        source_pattern: Which pattern located it.
        reference: ``"N M R"`` for indirect references, else None.
    """

    byte_offset: int
    raw_bytes: bytes
    source_pattern: SignaturePattern
    reference: str | None = None

    @property
    def decodable(self) -> bool:
        return self.source_pattern is not SignaturePattern.INDIRECT_REFERENCE

    @property
    def size(self) -> int:
        return len(self.raw_bytes)


def parse_byterange(pdf_bytes: bytes) -> list[tuple[int, int, int, int]]:
    """Return every numeric /ByteRange array in document order."""
    return [
        (int(m.group(1)), int(m.group(2)), int(m.group(3)), int(m.group(4)))
        for m in re.finditer(BYTERANGE_PATTERN, pdf_bytes)
    ]


def locate_signatures(
    document_bytes: bytes, *, max_candidates: int | None = None
) -> list[SignatureCandidate]:
    """
    Find candidate signature blobs in a PDF.

    Each pattern is matched against the document's single-byte (latin-1)
    view, so raw bytes round-trip one-to-one.  A hex payload matched by
    several patterns is reported once, under the most specific one.

    Args:
        document_bytes: Complete PDF file bytes.
        max_candidates: Stop after this many candidates (None = all).

    Returns:
        Candidates ordered by pattern specificity, then document order.
        Indirect ``/Contents N M R`` references come last and are not
        decodable on their own.

    Raises:
        NotAPdfError: If the buffer does not start with ``%PDF-``.
        MalformedHexError: If every hex payload found was malformed.
        NoSignatureFoundError: If no decodable candidate exists.
    """
    if document_bytes[: len(PDF_MAGIC)] != PDF_MAGIC:
        raise NotAPdfError("Input is not a PDF (missing %PDF- header)")

    candidates: list[SignatureCandidate] = []
    seen_offsets: set[int] = set()
    malformed: list[MalformedHexError] = []

    def _full() -> bool:
        return max_candidates is not None and len(candidates) >= max_candidates

    for source, regex in _PATTERNS:
        for match in regex.finditer(document_bytes):
            offset = match.start(1)
            if offset in seen_offsets:
                continue
            seen_offsets.add(offset)
            try:
                raw = decode_hex(match.group(1))
            except MalformedHexError as exc:
                _logger.debug("Skipping %s at offset %d: %s", source.value, offset, exc)
                malformed.append(exc)
                continue
            if not raw:
                continue
            candidates.append(SignatureCandidate(offset, raw, source))
            if _full():
                break
        if _full():
            break

    decodable_count = len(candidates)

    if not _full():
        for match in _INDIRECT_PATTERN.finditer(document_bytes):
            reference = f"{match.group(1).decode()} {match.group(2).decode()} R"
            candidates.append(
                SignatureCandidate(
                    match.start(), b"", SignaturePattern.INDIRECT_REFERENCE, reference
                )
            )
            if _full():
                break

    if decodable_count == 0:
        if malformed:
            raise MalformedHexError(
                f"Found {len(malformed)} signature hex string(s), none decodable: {malformed[0]}"
            )
        raise NoSignatureFoundError(
            "No signature found in PDF. The PDF may not be digitally signed."
        )

    _logger.debug(
        "Located %d signature candidate(s) (%d decodable)", len(candidates), decodable_count
    )
    return candidates
