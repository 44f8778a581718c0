"""Identity extraction command."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ...api import extract_identity
from ...config import load_limits_from_env
from ...core.selector import has_aadhaar_data
from ...errors import IdentityError
from ..helpers import format_record_lines, format_size_kb, safe_read_file

if TYPE_CHECKING:
    import argparse


def cmd_extract(args: argparse.Namespace) -> None:
    """Extract identity from each PDF or certificate file given."""
    limits = load_limits_from_env()
    as_json = getattr(args, "json", False)
    failures = 0
    payload: list[dict[str, object]] = []

    for name in args.files:
        path = Path(name)
        data = safe_read_file(path, "file")
        if data is None:
            failures += 1
            continue

        try:
            record = extract_identity(data, limits=limits)
        except IdentityError as e:
            print(f"Error: {path.name}: {e}", file=sys.stderr)
            failures += 1
            continue

        if as_json:
            payload.append({"file": str(path), "aadhaarDetails": record.to_dict()})
            continue

        print(f"{path.name} ({format_size_kb(len(data))})")
        for line in format_record_lines(record):
            print(f"  {line}")
        if not has_aadhaar_data(record):
            print("  (no Aadhaar fields in any certificate)")

    if as_json:
        print(json.dumps(payload, indent=2))

    if failures:
        sys.exit(1)
