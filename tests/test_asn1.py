"""Tests for aadhaar_identity.core.asn1 -- hex decoding and TLV primitives."""

from __future__ import annotations

import pytest

from aadhaar_identity.core.asn1 import (
    Asn1Node,
    TagLength,
    decode_hex,
    decode_tag_length,
    find_all,
    read_node,
    trim_der_padding,
)
from aadhaar_identity.errors import MalformedHexError

from .conftest import der_int, der_seq

# ── decode_hex ───────────────────────────────────────────────────────


def test_decode_hex_basic():
    assert decode_hex("3082AbCd") == b"\x30\x82\xab\xcd"


def test_decode_hex_accepts_bytes():
    assert decode_hex(b"00ff") == b"\x00\xff"


def test_decode_hex_ignores_pdf_whitespace():
    assert decode_hex(b"30 82\r\n01\t23") == b"\x30\x82\x01\x23"


def test_decode_hex_empty():
    assert decode_hex("") == b""


def test_decode_hex_odd_length():
    with pytest.raises(MalformedHexError, match="odd length"):
        decode_hex("abc")


def test_decode_hex_bad_character():
    with pytest.raises(MalformedHexError):
        decode_hex("zz")


def test_decode_hex_non_ascii():
    with pytest.raises(MalformedHexError):
        decode_hex("éé")


# ── decode_tag_length ────────────────────────────────────────────────


def test_tag_length_short_form():
    assert decode_tag_length(b"\x02\x01\x05") == TagLength(1, 2)


def test_tag_length_long_form_two_octets():
    header = decode_tag_length(b"\x30\x82\x01\x23")
    assert header.length == 0x123
    assert header.header_size == 4


def test_tag_length_long_form_three_octets():
    assert decode_tag_length(b"\x30\x83\x01\x00\x00") == TagLength(0x10000, 5)


def test_tag_length_indefinite_distinct_from_zero():
    indefinite = decode_tag_length(b"\x30\x80")
    zero = decode_tag_length(b"\x30\x00")
    assert indefinite.indefinite
    assert indefinite.length is None
    assert not zero.indefinite
    assert zero.length == 0
    assert indefinite != zero


def test_tag_length_at_position():
    data = b"\xff\xff\x30\x81\x90"
    assert decode_tag_length(data, 2) == TagLength(0x90, 3)


def test_tag_length_high_tag_number():
    # [APPLICATION 31] in high-tag form, then short length
    assert decode_tag_length(b"\x5f\x1f\x02\xaa\xbb") == TagLength(2, 3)


def test_tag_length_truncated_header():
    with pytest.raises(ValueError, match="Truncated"):
        decode_tag_length(b"\x30")


def test_tag_length_truncated_length_octets():
    with pytest.raises(ValueError, match="Truncated"):
        decode_tag_length(b"\x30\x82\x01")


def test_tag_length_too_many_length_octets():
    with pytest.raises(ValueError, match="too large"):
        decode_tag_length(b"\x30\x85\x01\x02\x03\x04\x05")


def test_tag_length_position_past_end():
    with pytest.raises(ValueError):
        decode_tag_length(b"\x30\x00", 5)


# ── find_all ─────────────────────────────────────────────────────────


def test_find_all_includes_overlaps():
    assert list(find_all(b"\x30\x30\x30", b"\x30\x30")) == [0, 1]


def test_find_all_bounds():
    data = b"ab-ab-ab"
    assert list(find_all(data, b"ab", 1, 6)) == [3]


def test_find_all_empty_pattern():
    assert list(find_all(b"abc", b"")) == []


# ── read_node / Asn1Node ─────────────────────────────────────────────


def test_read_node_children():
    data = der_seq(der_int(1) + der_int(300))
    node = read_node(data)
    assert isinstance(node, Asn1Node)
    assert node.constructed
    assert node.end == len(data)
    children = node.children()
    assert [child.content for child in children] == [b"\x01", b"\x01\x2c"]
    assert children[1].encoded == b"\x02\x02\x01\x2c"


def test_read_node_ignores_trailing_bytes():
    data = der_int(7) + b"\xde\xad"
    node = read_node(data)
    assert node.size == 3


def test_read_node_rejects_indefinite():
    with pytest.raises(ValueError, match="Indefinite"):
        read_node(b"\x30\x80\x02\x01\x01\x00\x00")


def test_read_node_rejects_overrun():
    with pytest.raises(ValueError, match="exceeds"):
        read_node(b"\x30\x05\x02\x01")


def test_children_of_primitive_raises():
    with pytest.raises(ValueError, match="not constructed"):
        read_node(der_int(1)).children()


def test_context_tag():
    node = read_node(b"\xa0\x03\x02\x01\x02")
    assert node.is_context(0)
    assert not node.is_context(1)
    assert not node.is_universal(0x30)


# ── trim_der_padding ─────────────────────────────────────────────────


def test_trim_zero_padding():
    body = der_seq(der_int(1))
    assert trim_der_padding(body + b"\x00" * 32) == body


def test_trim_keeps_nonzero_trailer():
    blob = der_seq(der_int(1)) + b"\x00\x01"
    assert trim_der_padding(blob) == blob


def test_trim_keeps_indefinite():
    blob = b"\x30\x80\x00\x00\x00\x00"
    assert trim_der_padding(blob) == blob


def test_trim_garbage_unchanged():
    assert trim_der_padding(b"\x30") == b"\x30"
