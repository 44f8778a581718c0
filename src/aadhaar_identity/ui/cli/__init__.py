"""
Command-line interface for aadhaar-identity.

Argument parsing and dispatch.  Command logic lives in the ``extract``,
``analyze`` and ``batch`` modules.
"""

from __future__ import annotations

import argparse
import logging
import sys

from ...constants import ENV_MAX_CERT_SIZE, ENV_MAX_SIGNATURES, ENV_MIN_CERT_SIZE, __version__
from .analyze import cmd_analyze
from .batch import cmd_batch
from .extract import cmd_extract


def _configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.DEBUG if verbosity > 1 else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aadhaar-identity",
        description="Extract Aadhaar eSign signer identity from digitally signed PDFs.",
        epilog=(
            "Environment variables:\n"
            f"  {ENV_MIN_CERT_SIZE:<24}Smallest certificate body scanned (default: 500)\n"
            f"  {ENV_MAX_CERT_SIZE:<24}Largest certificate body scanned (default: 10000)\n"
            f"  {ENV_MAX_SIGNATURES:<24}Stop after this many signature candidates\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"aadhaar-identity {__version__}"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for per-candidate debug output)",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # extract
    p_extract = sub.add_parser("extract", help="Extract identity from PDF or certificate file(s)")
    p_extract.add_argument("files", nargs="+", help="Signed PDF, PEM or DER certificate file(s)")
    p_extract.add_argument("--json", action="store_true", help="Print records as JSON")

    # analyze
    p_analyze = sub.add_parser("analyze", help="List every signature and certificate in a PDF")
    p_analyze.add_argument("pdf", help="Signed PDF file")
    p_analyze.add_argument("--json", action="store_true", help="Print the analysis as JSON")

    # batch
    p_batch = sub.add_parser("batch", help="Extract identity from every PDF in a directory")
    p_batch.add_argument("directory", help="Directory to search for PDF files")
    p_batch.add_argument(
        "--no-recursive",
        action="store_true",
        default=False,
        help="Do not descend into subdirectories",
    )
    p_batch.add_argument(
        "-w",
        "--workers",
        type=int,
        default=1,
        help="Number of files processed in parallel (default: 1)",
    )
    p_batch.add_argument("--csv", metavar="FILE", help="Also write a CSV report to FILE")
    p_batch.add_argument("--json", action="store_true", help="Print the report as JSON")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "extract":
        cmd_extract(args)
    elif args.command == "analyze":
        cmd_analyze(args)
    elif args.command == "batch":
        if args.workers < 1:
            parser.error("--workers must be at least 1")
        cmd_batch(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
