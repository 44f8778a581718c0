"""
Aadhaar eSign identity fields and their decoding.

The eSign certificate profile packs personal data into Subject attributes:
``dnQualifier`` carries birth year and gender (e.g. ``1999Mxxxxx``),
``postalCode`` the PIN code, ``T`` (title) the TPIN and ``ST`` the state.
"""

from __future__ import annotations

__all__ = [
    "IdentityRecord",
    "build_identity_record",
    "decode_postal_code",
    "decode_qualifier",
]

import re
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from ..constants import NA

if TYPE_CHECKING:
    from .cert_info import CertificateAttributes

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_GENDERS = "MmFfTt"

# Birth years at or below this are treated as filler, not data
_MIN_BIRTH_YEAR = 1900


@dataclass(frozen=True)
class IdentityRecord:
    """Identity recovered from one certificate.

    Every field holds a decoded value or the ``"NA"`` sentinel.
    ``not_after_epoch_millis`` is an integer when the validity period
    could be read.
    """

    signer_name: str = NA
    tpin: str = NA
    state: str = NA
    gender: str = NA
    year_of_birth: str = NA
    postal_code: str = NA
    serial_number: str = NA
    not_after_epoch_millis: int | str = NA
    issuer_name: str = NA
    issuer_organisation: str = NA

    def to_dict(self) -> dict[str, int | str]:
        return asdict(self)


def _parse_int(text: str) -> int | None:
    if not _INTEGER_RE.fullmatch(text):
        return None
    return int(text)


def decode_qualifier(dn_qualifier: str | None) -> tuple[str, str]:
    """Split a dnQualifier into ``(year_of_birth, gender)``.

    The year is the first four characters when they parse as an integer
    above 1900.  Gender is the fifth character when it is one of M, F, T
    (any case), normalized to uppercase.  The two decode independently.
    """
    year = NA
    gender = NA
    if not dn_qualifier or not dn_qualifier.strip():
        return year, gender

    if len(dn_qualifier) >= 4:
        prefix = dn_qualifier[:4]
        value = _parse_int(prefix)
        if value is not None and value > _MIN_BIRTH_YEAR:
            year = prefix

    if len(dn_qualifier) >= 5 and dn_qualifier[4] in _GENDERS:
        gender = dn_qualifier[4].upper()

    return year, gender


def decode_postal_code(raw_value: str | None) -> str:
    """Return the postal code when it is a positive integer, else NA."""
    if not raw_value:
        return NA
    value = _parse_int(raw_value)
    if value is None or value <= 0:
        return NA
    return raw_value


def build_identity_record(attributes: CertificateAttributes) -> IdentityRecord:
    """Map certificate attributes onto an :class:`IdentityRecord`."""
    subject = attributes.subject
    issuer = attributes.issuer
    year, gender = decode_qualifier(subject.get("dnQualifier"))

    return IdentityRecord(
        signer_name=subject.get("CN") or NA,
        tpin=subject.get("T") or NA,
        state=subject.get("ST") or NA,
        gender=gender,
        year_of_birth=year,
        postal_code=decode_postal_code(subject.get("postalCode")),
        serial_number=attributes.serial_number,
        not_after_epoch_millis=attributes.not_after_epoch_millis,
        issuer_name=issuer.get("CN") or NA,
        issuer_organisation=issuer.get("O") or NA,
    )
