"""Batch extraction over a directory of PDFs."""

from __future__ import annotations

import csv
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ...config import load_limits_from_env
from ..helpers import format_expiry
from ..workflows import process_directory

if TYPE_CHECKING:
    import argparse

    from ..workflows import BatchSummary, FileResult

CSV_HEADERS = (
    "File Name",
    "File Path",
    "Status",
    "Signer Name",
    "TPIN",
    "Gender",
    "Year of Birth",
    "State",
    "Pincode",
    "Serial Number",
    "End Date",
    "Issuer Name",
    "Issuer Organisation",
    "Error",
)


def _csv_row(result: FileResult) -> list[str]:
    row = [result.path.name, str(result.path), "Success" if result.ok else "Failed"]
    record = result.record
    if record is None:
        return row + [""] * 10 + [result.error_message or "Unknown error"]
    return row + [
        record.signer_name,
        record.tpin,
        record.gender,
        record.year_of_birth,
        record.state,
        record.postal_code,
        record.serial_number,
        format_expiry(record.not_after_epoch_millis),
        record.issuer_name,
        record.issuer_organisation,
        "",
    ]


def write_csv_report(summary: BatchSummary, path: Path) -> None:
    """Write one CSV row per processed file."""
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(CSV_HEADERS)
        for result in summary.results:
            writer.writerow(_csv_row(result))


def _summary_to_dict(summary: BatchSummary) -> dict[str, object]:
    return {
        "summary": {
            "totalFiles": summary.total,
            "successCount": summary.succeeded,
            "failureCount": summary.failed,
            "withAadhaarData": summary.with_aadhaar_data,
        },
        "files": [result.to_dict() for result in summary.results],
    }


def cmd_batch(args: argparse.Namespace) -> None:
    """Extract identity from every PDF under a directory."""
    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"Error: directory not found: {directory}", file=sys.stderr)
        sys.exit(1)

    as_json = getattr(args, "json", False)

    def _progress(result: FileResult) -> None:
        if as_json:
            return
        if result.ok and result.record is not None:
            status = "OK  " if result.has_aadhaar_data else "NA  "
            print(f"  {status} {result.path.name}: {result.record.signer_name}")
        else:
            print(f"  FAIL {result.path.name}: {result.error_message}")

    summary = process_directory(
        directory,
        recursive=not args.no_recursive,
        workers=args.workers,
        limits=load_limits_from_env(),
        progress=_progress,
    )

    if args.csv:
        csv_path = Path(args.csv)
        try:
            write_csv_report(summary, csv_path)
        except OSError as e:
            print(f"Error writing {csv_path}: {e}", file=sys.stderr)
            sys.exit(1)

    if as_json:
        print(json.dumps(_summary_to_dict(summary), indent=2))
    else:
        if summary.total == 0:
            print(f"No PDF files found in {directory}")
        print(
            f"\n  {summary.total} file(s): {summary.succeeded} extracted, "
            f"{summary.failed} failed, {summary.with_aadhaar_data} with Aadhaar data"
        )
        if args.csv:
            print(f"  CSV report: {args.csv}")

    if summary.failed:
        sys.exit(1)
