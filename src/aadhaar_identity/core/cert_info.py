# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""
Attribute extraction from X.509 certificates.

Certificates go through asn1crypto's object model first.  When that
refuses them (odd key algorithms, trailing bytes, broken extensions), the
TBSCertificate is walked by hand with the strict DER reader.  Both paths
decode attribute values through the same helper, so they agree on any
certificate both can read.
"""

from __future__ import annotations

__all__ = [
    "ALIAS_TO_OID",
    "OID_TO_ALIAS",
    "AttributeMap",
    "CertificateAttributes",
    "extract_certificate_attributes",
    "load_certificate_bytes",
]

import calendar
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from asn1crypto import core as asn1_core
from asn1crypto import pem as asn1_pem
from asn1crypto import x509 as asn1_x509

from ..constants import NA, PEM_CERT_MARKER
from ..errors import CertificateStructureError
from .asn1 import (
    ASN1_INTEGER_TAG,
    ASN1_SEQUENCE_TAG,
    ASN1_SET_TAG,
    CLASS_UNIVERSAL,
    Asn1Node,
    decode_tag_length,
    read_node,
)

if TYPE_CHECKING:
    import datetime

_logger = logging.getLogger(__name__)

_OID_TAG = 0x06
_UTC_TIME_TAG = 0x17
_GENERALIZED_TIME_TAG = 0x18

# Universal string types asn1crypto decodes to text
_STRING_TAGS = frozenset({12, 18, 19, 20, 21, 22, 25, 26, 27, 28, 30})

_PARSE_ERRORS = (ValueError, TypeError, KeyError, IndexError, AttributeError, OverflowError)

OID_TO_ALIAS: dict[str, str] = {
    "2.5.4.3": "CN",
    "2.5.4.5": "serialNumber",
    "2.5.4.6": "C",
    "2.5.4.7": "L",
    "2.5.4.8": "ST",
    "2.5.4.9": "street",
    "2.5.4.10": "O",
    "2.5.4.11": "OU",
    "2.5.4.12": "T",
    "2.5.4.17": "postalCode",
    "2.5.4.46": "dnQualifier",
    "2.5.4.65": "pseudonym",
    "1.2.840.113549.1.9.1": "E",
}

ALIAS_TO_OID: dict[str, str] = {alias: oid for oid, alias in OID_TO_ALIAS.items()}


class AttributeMap(Mapping[str, str]):
    """Read-only RDN attributes keyed by dotted OID.

    Lookups also accept the short aliases in :data:`OID_TO_ALIAS`
    (``attrs["CN"]`` is ``attrs["2.5.4.3"]``).  Iteration yields OIDs.
    When an OID repeats in a name, the last value wins.
    """

    __slots__ = ("_by_oid",)

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        by_oid: dict[str, str] = {}
        for oid, value in pairs:
            by_oid[oid] = value
        self._by_oid = by_oid

    def __getitem__(self, key: str) -> str:
        return self._by_oid[ALIAS_TO_OID.get(key, key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_oid)

    def __len__(self) -> int:
        return len(self._by_oid)

    def __repr__(self) -> str:
        return f"AttributeMap({self.aliased()!r})"

    def aliased(self) -> dict[str, str]:
        """Return the attributes keyed by alias where one is known."""
        return {OID_TO_ALIAS.get(oid, oid): value for oid, value in self._by_oid.items()}


@dataclass(frozen=True)
class CertificateAttributes:
    """Fields read from one certificate."""

    serial_number: str
    not_after_epoch_millis: int | str
    subject: AttributeMap
    issuer: AttributeMap


def _decode_text(tlv: bytes) -> str:
    """Decode an attribute value TLV to text.

    String types are decoded by asn1crypto; anything else falls back to
    UTF-8 over the raw content octets.
    """
    header = decode_tag_length(tlv, 0)
    identifier = tlv[0]
    if identifier >> 6 == CLASS_UNIVERSAL and identifier & 0x1F in _STRING_TAGS:
        try:
            value = asn1_core.load(tlv).native
        except _PARSE_ERRORS as e:
            _logger.debug("Cannot decode string value (tag 0x%02x): %s", identifier, e)
        else:
            if isinstance(value, str):
                return value
    end = len(tlv) if header.length is None else header.header_size + header.length
    return tlv[header.header_size : end].decode("utf-8", errors="replace")


def _epoch_millis(value: datetime.datetime) -> int:
    return calendar.timegm(value.utctimetuple()) * 1000 + value.microsecond // 1000


# ── Object model path (asn1crypto) ───────────────────────────────────


def _attributes_from_name(name: asn1_x509.Name) -> AttributeMap:
    pairs: list[tuple[str, str]] = []
    for rdn in name.chosen:
        for attr in rdn:
            pairs.append((attr["type"].dotted, _decode_text(attr["value"].dump())))
    return AttributeMap(pairs)


def _extract_with_object_model(cert_der: bytes) -> CertificateAttributes:
    cert = asn1_x509.Certificate.load(cert_der, strict=True)
    tbs = cert["tbs_certificate"]

    serial = str(tbs["serial_number"].native)
    not_after: int | str = NA
    try:
        not_after = _epoch_millis(tbs["validity"]["not_after"].native)
    except _PARSE_ERRORS as e:
        _logger.debug("Cannot read certificate notAfter: %s", e)

    return CertificateAttributes(
        serial_number=serial,
        not_after_epoch_millis=not_after,
        subject=_attributes_from_name(tbs["subject"]),
        issuer=_attributes_from_name(tbs["issuer"]),
    )


# ── Manual TBSCertificate walk ───────────────────────────────────────


def _attributes_from_node(name: Asn1Node) -> AttributeMap:
    pairs: list[tuple[str, str]] = []
    for rdn in name.children():
        if rdn.identifier != ASN1_SET_TAG:
            continue
        for atv in rdn.children():
            if atv.identifier != ASN1_SEQUENCE_TAG:
                continue
            parts = atv.children()
            if len(parts) < 2 or parts[0].identifier != _OID_TAG:
                continue
            oid = asn1_core.ObjectIdentifier.load(parts[0].encoded).dotted
            pairs.append((oid, _decode_text(parts[1].encoded)))
    return AttributeMap(pairs)


def _time_millis(node: Asn1Node) -> int | None:
    """Decode a UTCTime, else GeneralizedTime, node to epoch millis."""
    for tag, time_type in (
        (_UTC_TIME_TAG, asn1_core.UTCTime),
        (_GENERALIZED_TIME_TAG, asn1_core.GeneralizedTime),
    ):
        if node.identifier != tag:
            continue
        try:
            return _epoch_millis(time_type.load(node.encoded).native)
        except _PARSE_ERRORS as e:
            _logger.debug("Cannot decode time value: %s", e)
    return None


def _is_validity(children: list[Asn1Node]) -> bool:
    return len(children) == 2 and all(
        child.identifier in (_UTC_TIME_TAG, _GENERALIZED_TIME_TAG) for child in children
    )


def _extract_manually(cert_der: bytes) -> CertificateAttributes:
    try:
        cert = read_node(cert_der, 0)
        if cert.identifier != ASN1_SEQUENCE_TAG:
            raise ValueError(f"Expected ASN.1 SEQUENCE (0x30), got 0x{cert.identifier:02x}")
        elements = cert.children()
        if not elements or elements[0].identifier != ASN1_SEQUENCE_TAG:
            raise ValueError("Certificate does not start with a TBSCertificate SEQUENCE")
        fields = elements[0].children()
    except ValueError as e:
        raise CertificateStructureError(f"Invalid certificate structure: {e}") from e

    serial: str = NA
    not_after: int | str | None = None
    issuer: Asn1Node | None = None
    subject: Asn1Node | None = None

    for field in fields:
        if field.identifier == ASN1_INTEGER_TAG and serial == NA:
            serial = str(int.from_bytes(field.content, "big", signed=True))
            continue
        if field.identifier != ASN1_SEQUENCE_TAG:
            continue
        try:
            children = field.children()
        except ValueError:
            continue
        if not_after is None and _is_validity(children):
            not_after = _time_millis(children[1])
        if children and children[0].identifier == ASN1_SET_TAG:
            if issuer is None:
                issuer = field
            elif subject is None:
                subject = field

    if issuer is None or subject is None:
        raise CertificateStructureError("No issuer/subject name pair found in TBSCertificate")

    try:
        subject_attrs = _attributes_from_node(subject)
        issuer_attrs = _attributes_from_node(issuer)
    except _PARSE_ERRORS as e:
        raise CertificateStructureError(f"Cannot decode certificate names: {e}") from e

    return CertificateAttributes(
        serial_number=serial,
        not_after_epoch_millis=NA if not_after is None else not_after,
        subject=subject_attrs,
        issuer=issuer_attrs,
    )


def extract_certificate_attributes(cert_der: bytes) -> CertificateAttributes:
    """
    Read serial, expiry, subject and issuer attributes from a certificate.

    Args:
        cert_der: DER-encoded X.509 certificate.

    Returns:
        CertificateAttributes for the certificate.

    Raises:
        CertificateStructureError: If neither path can find a subject and
            issuer name.
    """
    try:
        return _extract_with_object_model(cert_der)
    except _PARSE_ERRORS as e:
        _logger.debug("asn1crypto rejected certificate, walking TBSCertificate: %s", e)
    return _extract_manually(cert_der)


def load_certificate_bytes(data: bytes) -> bytes:
    """Return DER bytes from PEM-armored text or raw DER input.

    PEM is recognized by the literal ``BEGIN CERTIFICATE`` marker; anything
    else is taken to be DER already.

    Raises:
        CertificateStructureError: If PEM armor is present but unreadable.
    """
    if PEM_CERT_MARKER not in data:
        return bytes(data)
    start = data.find(b"-----BEGIN")
    try:
        _, _, der = asn1_pem.unarmor(data[start if start != -1 else 0 :])
    except (ValueError, TypeError) as e:
        raise CertificateStructureError(f"Invalid PEM certificate: {e}") from e
    return der
