"""
Common CLI helper functions for aadhaar-identity.

File reading and record formatting shared by the extract, analyze and
batch commands.
"""

from __future__ import annotations

import datetime
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from ..core.identity import IdentityRecord

__all__ = [
    "format_expiry",
    "format_record_lines",
    "format_size_kb",
    "safe_read_file",
]

_BYTES_PER_KB = 1024

# Display labels in output order
_RECORD_LABELS = (
    ("signer_name", "Name"),
    ("tpin", "TPIN"),
    ("state", "State"),
    ("gender", "Gender"),
    ("year_of_birth", "Year of birth"),
    ("postal_code", "PIN code"),
    ("serial_number", "Serial"),
    ("not_after_epoch_millis", "Expires"),
    ("issuer_name", "Issuer"),
    ("issuer_organisation", "Issuer org"),
)


def format_size_kb(size_bytes: int) -> str:
    """Format a byte count as a human-readable KB string (e.g. '123.4 KB')."""
    return f"{size_bytes / _BYTES_PER_KB:.1f} KB"


def format_expiry(epoch_millis: int | str) -> str:
    """Render a not-after timestamp as a UTC date, passing ``"NA"`` through."""
    if not isinstance(epoch_millis, int):
        return epoch_millis
    moment = datetime.datetime.fromtimestamp(epoch_millis / 1000, tz=datetime.timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S UTC")


def format_record_lines(record: IdentityRecord) -> list[str]:
    """Return ``Label: value`` lines for every field of an identity record."""
    values = record.to_dict()
    width = max(len(label) for _, label in _RECORD_LABELS)
    lines = []
    for key, label in _RECORD_LABELS:
        value = values[key]
        if key == "not_after_epoch_millis":
            value = format_expiry(value)
        lines.append(f"{label + ':':<{width + 1}} {value}")
    return lines


def safe_read_file(path: Path, kind: str = "file") -> bytes | None:
    """
    Read a file with uniform error handling.

    Checks existence first, then reads, catching OSError.

    Args:
        path: Path to the file to read.
        kind: Descriptive name for error messages (e.g., "PDF", "certificate").

    Returns:
        File contents as bytes, or None if the file doesn't exist or can't be read.

    Example:
        >>> pdf_bytes = safe_read_file(Path("signed.pdf"), "PDF")
        >>> if pdf_bytes is None:
        ...     sys.exit(1)
    """
    if not path.exists():
        print(f"Error: {kind} not found: {path}", file=sys.stderr)
        return None

    try:
        return path.read_bytes()
    except OSError as e:
        print(f"Error reading {kind}: {e}", file=sys.stderr)
        return None
