"""ASN.1/DER byte-level primitives: hex decoding, TLV headers, pattern search."""

from __future__ import annotations

__all__ = [
    "ASN1_BIT_STRING_TAG",
    "ASN1_INTEGER_TAG",
    "ASN1_SEQUENCE_TAG",
    "ASN1_SET_TAG",
    "CLASS_CONTEXT",
    "CLASS_UNIVERSAL",
    "Asn1Node",
    "TagLength",
    "decode_hex",
    "decode_tag_length",
    "find_all",
    "read_node",
    "trim_der_padding",
]

import binascii
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from ..constants import MAX_LENGTH_OCTETS
from ..errors import MalformedHexError

if TYPE_CHECKING:
    from collections.abc import Iterator

# ASN.1 universal tags (full identifier octets)
ASN1_INTEGER_TAG = 0x02
ASN1_BIT_STRING_TAG = 0x03
ASN1_SEQUENCE_TAG = 0x30
ASN1_SET_TAG = 0x31

# Tag classes (top two bits of the identifier octet)
CLASS_UNIVERSAL = 0
CLASS_CONTEXT = 2

_INDEFINITE_LENGTH = 0x80

_WHITESPACE_RE = re.compile(rb"[\x00\t\n\x0c\r ]+")


def decode_hex(hex_text: str | bytes) -> bytes:
    """Decode a hex string into bytes.

    PDF whitespace inside the hex string is ignored.

    Raises:
        MalformedHexError: On odd length or non-hex characters.
    """
    if isinstance(hex_text, str):
        try:
            raw = hex_text.encode("ascii")
        except UnicodeEncodeError as e:
            raise MalformedHexError(f"Non-hex characters in hex string: {e}") from e
    else:
        raw = bytes(hex_text)

    raw = _WHITESPACE_RE.sub(b"", raw)
    if len(raw) % 2:
        raise MalformedHexError(f"Hex string has odd length ({len(raw)} digits)")
    try:
        return binascii.unhexlify(raw)
    except (binascii.Error, ValueError) as e:
        raise MalformedHexError(f"Invalid hex string: {e}") from e


class TagLength(NamedTuple):
    """Decoded TLV header.

    ``length`` is None for the BER indefinite form (``0x80``), which is
    distinct from a definite zero length.
    """

    length: int | None
    header_size: int

    @property
    def indefinite(self) -> bool:
        return self.length is None


def decode_tag_length(data: bytes, position: int = 0) -> TagLength:
    """Decode the identifier and length octets of the TLV at ``position``.

    Supports short form, long form (up to 4 length octets) and the
    indefinite form.

    Raises:
        ValueError: If the header is truncated or the length field too large.
    """
    end = len(data)
    if position < 0 or position + 2 > end:
        raise ValueError(f"Truncated ASN.1 header at offset {position}")

    pos = position + 1
    if data[position] & 0x1F == 0x1F:
        # High tag number form: base-128 tag octets, last one has bit 8 clear
        while pos < end and data[pos] & 0x80:
            pos += 1
        pos += 1
        if pos >= end:
            raise ValueError(f"Truncated ASN.1 tag at offset {position}")

    length_byte = data[pos]
    pos += 1

    if length_byte < 0x80:
        return TagLength(length_byte, pos - position)
    if length_byte == _INDEFINITE_LENGTH:
        return TagLength(None, pos - position)

    num_len_bytes = length_byte & 0x7F
    if num_len_bytes > MAX_LENGTH_OCTETS:
        raise ValueError(f"ASN.1 length field too large: {num_len_bytes} bytes")
    if pos + num_len_bytes > end:
        raise ValueError("Truncated ASN.1 length field")
    length = int.from_bytes(data[pos : pos + num_len_bytes], "big")
    return TagLength(length, pos + num_len_bytes - position)


def find_all(
    haystack: bytes, pattern: bytes, start: int = 0, end: int | None = None
) -> Iterator[int]:
    """Yield every offset of ``pattern`` in ``haystack``, overlaps included."""
    if not pattern:
        return
    stop = len(haystack) if end is None else min(end, len(haystack))
    pos = haystack.find(pattern, start, stop)
    while pos != -1:
        yield pos
        pos = haystack.find(pattern, pos + 1, stop)


@dataclass(frozen=True, slots=True)
class Asn1Node:
    """Strict-DER view of one TLV inside a byte buffer."""

    data: bytes
    offset: int
    identifier: int
    header_size: int
    length: int

    @property
    def tag_class(self) -> int:
        return self.identifier >> 6

    @property
    def constructed(self) -> bool:
        return bool(self.identifier & 0x20)

    @property
    def tag_number(self) -> int:
        return self.identifier & 0x1F

    @property
    def end(self) -> int:
        return self.offset + self.header_size + self.length

    @property
    def size(self) -> int:
        return self.header_size + self.length

    @property
    def encoded(self) -> bytes:
        """Full TLV bytes (a copy)."""
        return self.data[self.offset : self.end]

    @property
    def content(self) -> bytes:
        return self.data[self.offset + self.header_size : self.end]

    def is_universal(self, identifier: int) -> bool:
        return self.identifier == identifier

    def is_context(self, number: int) -> bool:
        return self.tag_class == CLASS_CONTEXT and self.tag_number == number

    def children(self) -> list[Asn1Node]:
        """Parse the immediate children of a constructed node.

        Raises:
            ValueError: If the node is primitive or its contents are not a
                clean run of TLVs.
        """
        if not self.constructed:
            raise ValueError(f"ASN.1 tag 0x{self.identifier:02x} is not constructed")
        nodes: list[Asn1Node] = []
        pos = self.offset + self.header_size
        while pos < self.end:
            node = read_node(self.data, pos, limit=self.end)
            nodes.append(node)
            pos = node.end
        return nodes


def read_node(data: bytes, offset: int = 0, *, limit: int | None = None) -> Asn1Node:
    """Read one DER TLV starting at ``offset``.

    Trailing bytes after the TLV are ignored.

    Raises:
        ValueError: On truncation, indefinite length (not valid in DER) or a
            length that overruns ``limit`` (default: end of ``data``).
    """
    bound = len(data) if limit is None else limit
    header = decode_tag_length(data, offset)
    length = header.length
    if length is None:
        raise ValueError("Indefinite length encoding is not valid in DER")
    if offset + header.header_size + length > bound:
        raise ValueError(
            f"ASN.1 length ({length} bytes) at offset {offset} "
            f"exceeds available data ({bound - offset - header.header_size} bytes)"
        )
    if data[offset] & 0x1F == 0x1F:
        raise ValueError(f"Unsupported high tag number at offset {offset}")
    return Asn1Node(data, offset, data[offset], header.header_size, length)


def trim_der_padding(blob: bytes) -> bytes:
    """Strip zero padding after the outermost definite-length TLV.

    Signature placeholders in PDFs are sized up front and zero-filled, so
    the decoded /Contents blob is usually longer than the CMS it holds.
    Blobs with an indefinite outer length, or with non-zero trailing bytes,
    are returned unchanged.
    """
    try:
        header = decode_tag_length(blob, 0)
    except ValueError:
        return blob
    if header.length is None:
        return blob
    total = header.header_size + header.length
    if total >= len(blob) or blob[total:].strip(b"\x00"):
        return blob
    return blob[:total]
