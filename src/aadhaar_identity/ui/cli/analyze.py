"""Signature inspection command.

Lists every signature candidate in a PDF and what each one decodes to,
without picking a winner.  Useful when extraction returns an unexpected
record.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ...config import load_limits_from_env
from ..helpers import format_expiry, format_size_kb, safe_read_file
from ..workflows import inspect_document

if TYPE_CHECKING:
    import argparse

    from ..workflows import DocumentInspection


def _inspection_to_dict(inspection: DocumentInspection) -> dict[str, object]:
    return {
        "byteRanges": [list(byterange) for byterange in inspection.byteranges],
        "signatures": [
            {
                "index": sig.index,
                "pattern": sig.pattern,
                "offset": sig.offset,
                "size": sig.size,
                "reference": sig.reference,
                "error": sig.error_message,
                "certificates": [
                    {
                        "offset": cert.offset,
                        "size": cert.size,
                        "strategy": cert.strategy,
                        "hasAadhaarData": cert.qualifying,
                        "aadhaarDetails": cert.record.to_dict() if cert.record else None,
                        "error": cert.error_message,
                    }
                    for cert in sig.certificates
                ],
            }
            for sig in inspection.signatures
        ],
    }


def cmd_analyze(args: argparse.Namespace) -> None:
    """Print every signature candidate and its certificates."""
    pdf_path = Path(args.pdf)
    pdf_bytes = safe_read_file(pdf_path, "PDF")
    if pdf_bytes is None:
        sys.exit(1)

    inspection = inspect_document(pdf_bytes, limits=load_limits_from_env())
    if not inspection.ok:
        print(f"Error: {inspection.error_message}", file=sys.stderr)
        sys.exit(1)

    if getattr(args, "json", False):
        print(json.dumps(_inspection_to_dict(inspection), indent=2))
        return

    print(f"Analyzing {pdf_path.name} ({format_size_kb(len(pdf_bytes))})...")
    for byterange in inspection.byteranges:
        print(f"  ByteRange: [{' '.join(str(n) for n in byterange)}]")

    total = len(inspection.signatures)
    for sig in inspection.signatures:
        print(f"\n  Signature {sig.index + 1}/{total}: {sig.pattern}")
        if sig.reference is not None:
            print(f"    Reference: {sig.reference} at offset {sig.offset}")
        else:
            print(f"    Offset: {sig.offset}, size: {format_size_kb(sig.size)}")
        if sig.error_message:
            print(f"    {sig.error_message}")
            continue

        for cert in sig.certificates:
            where = f"offset {cert.offset}" if cert.offset >= 0 else "envelope"
            print(f"    Certificate ({cert.strategy}, {cert.size} bytes, {where}):")
            if cert.record is None:
                print(f"      Unreadable: {cert.error_message}")
                continue
            marker = "Aadhaar eSign" if cert.qualifying else "no Aadhaar fields"
            print(f"      Subject: {cert.record.signer_name} [{marker}]")
            print(f"      Issuer:  {cert.record.issuer_name}")
            print(f"      Expires: {format_expiry(cert.record.not_after_epoch_millis)}")
