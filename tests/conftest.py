"""Shared fixtures and DER builders for the aadhaar-identity test suite.

Certificates, CMS envelopes and PDFs are assembled byte by byte so each
test controls exactly which quirks the input carries.
"""

from __future__ import annotations

import pytest

# ── OIDs ─────────────────────────────────────────────────────────────

OID_CN = "2.5.4.3"
OID_C = "2.5.4.6"
OID_ST = "2.5.4.8"
OID_O = "2.5.4.10"
OID_OU = "2.5.4.11"
OID_T = "2.5.4.12"
OID_POSTAL_CODE = "2.5.4.17"
OID_DN_QUALIFIER = "2.5.4.46"

OID_RSA = "1.2.840.113549.1.1.1"
OID_SHA256_RSA = "1.2.840.113549.1.1.11"
OID_SHA256 = "2.16.840.1.101.3.4.2.1"
OID_DATA = "1.2.840.113549.1.7.1"
OID_SIGNED_DATA = "1.2.840.113549.1.7.2"

UTF8_STRING = 0x0C
PRINTABLE_STRING = 0x13
UTC_TIME = 0x17
GENERALIZED_TIME = 0x18

# 2030-01-01T00:00:00Z
NOT_AFTER_MILLIS = 1893456000000

AADHAAR_SUBJECT = (
    (OID_C, "IN", PRINTABLE_STRING),
    (OID_O, "Personal", UTF8_STRING),
    (OID_T, "ABCD1234", UTF8_STRING),
    (OID_ST, "KA", UTF8_STRING),
    (OID_DN_QUALIFIER, "1990F56789", PRINTABLE_STRING),
    (OID_POSTAL_CODE, "560001", UTF8_STRING),
    (OID_CN, "Asha Rao", UTF8_STRING),
)

CA_SUBJECT = (
    (OID_C, "IN", PRINTABLE_STRING),
    (OID_O, "eMudhra Limited", UTF8_STRING),
    (OID_CN, "e-Mudhra Sub CA for Class 2 Individual 2014", UTF8_STRING),
)

ROOT_SUBJECT = (
    (OID_C, "IN", PRINTABLE_STRING),
    (OID_O, "India PKI", UTF8_STRING),
    (OID_CN, "CCA India 2014", UTF8_STRING),
)


# ── DER primitives ───────────────────────────────────────────────────


def der_len(length: int) -> bytes:
    """Encode a DER length field."""
    if length < 0x80:
        return bytes([length])
    elif length < 0x100:
        return bytes([0x81, length])
    else:
        return bytes([0x82, (length >> 8) & 0xFF, length & 0xFF])


def der_tlv(tag: int, contents: bytes) -> bytes:
    return bytes([tag]) + der_len(len(contents)) + contents


def der_seq(contents: bytes) -> bytes:
    """Wrap contents in a DER SEQUENCE."""
    return der_tlv(0x30, contents)


def der_set(contents: bytes) -> bytes:
    """Wrap contents in a DER SET."""
    return der_tlv(0x31, contents)


def der_int(value: int) -> bytes:
    length = max(1, (value.bit_length() + 8) // 8)
    return der_tlv(0x02, value.to_bytes(length, "big", signed=True))


def der_oid(dotted: str) -> bytes:
    arcs = [int(arc) for arc in dotted.split(".")]
    body = bytearray([40 * arcs[0] + arcs[1]])
    for arc in arcs[2:]:
        chunk = [arc & 0x7F]
        arc >>= 7
        while arc:
            chunk.append(0x80 | (arc & 0x7F))
            arc >>= 7
        body.extend(reversed(chunk))
    return der_tlv(0x06, bytes(body))


def der_bit_string(payload: bytes) -> bytes:
    return der_tlv(0x03, b"\x00" + payload)


def der_null() -> bytes:
    return b"\x05\x00"


def der_name(attributes) -> bytes:
    """Build a Name with one single-valued RDN per ``(oid, text, tag)``."""
    rdns = b"".join(
        der_set(der_seq(der_oid(oid) + der_tlv(tag, text.encode("utf-8"))))
        for oid, text, tag in attributes
    )
    return der_seq(rdns)


def der_algorithm(oid: str) -> bytes:
    return der_seq(der_oid(oid) + der_null())


# ── Certificates ─────────────────────────────────────────────────────


def build_certificate(
    subject=AADHAAR_SUBJECT,
    issuer=CA_SUBJECT,
    *,
    serial: int = 0x1A2B3C4D5E,
    not_after: bytes = b"300101000000Z",
    time_tag: int = UTC_TIME,
    key_algorithm: str = OID_RSA,
) -> bytes:
    """Build a DER X.509 v3 certificate with a fake 2048-bit RSA key.

    Nothing is actually signed; the signature value is filler of the
    right size so the certificate body exceeds the byte-scan minimum.
    """
    not_before = b"20250101000000Z" if time_tag == GENERALIZED_TIME else b"250101000000Z"
    validity = der_seq(der_tlv(time_tag, not_before) + der_tlv(time_tag, not_after))
    modulus = int.from_bytes(b"\xc5" + b"\x5a" * 255, "big")
    public_key = der_seq(der_int(modulus) + der_int(65537))
    spki = der_seq(der_algorithm(key_algorithm) + der_bit_string(public_key))
    tbs = der_seq(
        der_tlv(0xA0, der_int(2))
        + der_int(serial)
        + der_algorithm(OID_SHA256_RSA)
        + der_name(issuer)
        + validity
        + der_name(subject)
        + spki
    )
    return der_seq(tbs + der_algorithm(OID_SHA256_RSA) + der_bit_string(b"\x3c" * 256))


def build_signed_data(certificates) -> bytes:
    """Build a DER CMS ContentInfo wrapping SignedData with ``certificates``."""
    signed_data = der_seq(
        der_int(1)
        + der_set(der_algorithm(OID_SHA256))
        + der_seq(der_oid(OID_DATA))
        + der_tlv(0xA0, b"".join(certificates))
        + der_set(b"")
    )
    return der_seq(der_oid(OID_SIGNED_DATA) + der_tlv(0xA0, signed_data))


def build_ber_signed_data(certificates, trailer: bytes = b"\x01\x02\x03\x04") -> bytes:
    """Build an indefinite-length (BER) ContentInfo followed by junk.

    Neither a strict CMS parser nor a DER walker can read it; only the raw
    byte scan recovers the certificates.
    """
    eoc = b"\x00\x00"
    signed_data = (
        b"\x30\x80"
        + der_int(1)
        + der_set(der_algorithm(OID_SHA256))
        + der_seq(der_oid(OID_DATA))
        + b"\xa0\x80"
        + b"".join(certificates)
        + eoc
        + der_set(b"")
        + eoc
    )
    return b"\x30\x80" + der_oid(OID_SIGNED_DATA) + b"\xa0\x80" + signed_data + eoc + eoc + trailer


def build_pdf(
    *signatures: bytes,
    sub_filter: bytes = b"/ETSI.CAdES.detached",
    padding: int = 64,
) -> bytes:
    """Build a PDF image with one signature dictionary per blob.

    Each /Contents hex string is zero-padded like a real placeholder.
    """
    parts = [b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog >>\nendobj\n"]
    for number, blob in enumerate(signatures, start=2):
        hex_body = blob.hex().upper().encode("ascii") + b"00" * padding
        parts.append(
            b"%d 0 obj\n<< /Type /Sig /Filter /Adobe.PPKLite /SubFilter %s "
            b"/ByteRange [0 100 %d 300] /Contents <%s> >>\nendobj\n"
            % (number, sub_filter, 200 + number, hex_body)
        )
    parts.append(b"trailer\n<< /Root 1 0 R >>\n%%EOF\n")
    return b"".join(parts)


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def aadhaar_cert() -> bytes:
    return build_certificate()


@pytest.fixture
def ca_cert() -> bytes:
    return build_certificate(CA_SUBJECT, ROOT_SUBJECT, serial=0x2001)


@pytest.fixture
def signed_pdf(aadhaar_cert: bytes, ca_cert: bytes) -> bytes:
    """A PDF whose single signature carries the CA then the signer."""
    return build_pdf(build_signed_data([ca_cert, aadhaar_cert]))
