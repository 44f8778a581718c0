"""Signature location, PKCS#7 decoding and certificate identity extraction."""

from .asn1 import TagLength, decode_hex, decode_tag_length, find_all
from .cert_info import (
    AttributeMap,
    CertificateAttributes,
    extract_certificate_attributes,
    load_certificate_bytes,
)
from .identity import IdentityRecord, build_identity_record, decode_postal_code, decode_qualifier
from .locator import SignatureCandidate, SignaturePattern, locate_signatures
from .pkcs7 import STRATEGIES, CertificateCandidate, DecodeStrategy, decode_certificates
from .selector import ExtractionOutcome, evaluate_certificate, has_aadhaar_data, select_identity

__all__ = [
    "STRATEGIES",
    "AttributeMap",
    "CertificateAttributes",
    "CertificateCandidate",
    "DecodeStrategy",
    "ExtractionOutcome",
    "IdentityRecord",
    "SignatureCandidate",
    "SignaturePattern",
    "TagLength",
    "build_identity_record",
    "decode_certificates",
    "decode_hex",
    "decode_postal_code",
    "decode_qualifier",
    "decode_tag_length",
    "evaluate_certificate",
    "extract_certificate_attributes",
    "find_all",
    "has_aadhaar_data",
    "load_certificate_bytes",
    "locate_signatures",
    "select_identity",
]
