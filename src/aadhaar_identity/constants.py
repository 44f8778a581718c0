"""
Application-wide constants for aadhaar-identity.

Size bounds, markers, sentinel values and environment variable names are
centralized here for easy maintenance and configuration.
"""

from __future__ import annotations

import importlib.metadata

try:
    __version__ = importlib.metadata.version("aadhaar-identity")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.3.0"

__all__ = [
    "CERT_SEQUENCE_PREFIXES",
    "DEFAULT_MAX_CERT_LENGTH",
    "DEFAULT_MIN_CERT_LENGTH",
    "ENV_MAX_CERT_SIZE",
    "ENV_MAX_SIGNATURES",
    "ENV_MIN_CERT_SIZE",
    "MAX_LENGTH_OCTETS",
    "NA",
    "PDF_MAGIC",
    "PEM_CERT_MARKER",
    "SIG_CONTENTS_WINDOW",
    "SIG_BYTERANGE_WINDOW",
    "__version__",
]

# Sentinel for any identity field that is absent or fails to decode
NA = "NA"


# ── Document markers ──────────────────────────────────────────────────

# PDF file magic bytes
PDF_MAGIC = b"%PDF-"

# Literal marker that identifies PEM-armored certificate text
PEM_CERT_MARKER = b"BEGIN CERTIFICATE"


# ── Signature location ────────────────────────────────────────────────

# Maximum gap (bytes) between a /SubFilter or /Type /Sig marker and the
# /Contents hex string it belongs to
SIG_CONTENTS_WINDOW = 1000

# Maximum gap (bytes) between a /ByteRange array and its /Contents
SIG_BYTERANGE_WINDOW = 500


# ── Certificate scanning ──────────────────────────────────────────────

# Long-form SEQUENCE headers (2 and 3 length octets), the shape an
# X.509 certificate's outermost tag takes
CERT_SEQUENCE_PREFIXES = (b"\x30\x82", b"\x30\x83")

# Plausible certificate content length seen from real eSign producers
DEFAULT_MIN_CERT_LENGTH = 500
DEFAULT_MAX_CERT_LENGTH = 10000

# DER lengths longer than 4 octets are rejected outright
MAX_LENGTH_OCTETS = 4


# ── Environment variable names ────────────────────────────────────────

ENV_MIN_CERT_SIZE = "AADHAAR_MIN_CERT_SIZE"
ENV_MAX_CERT_SIZE = "AADHAAR_MAX_CERT_SIZE"
ENV_MAX_SIGNATURES = "AADHAAR_MAX_SIGNATURES"
