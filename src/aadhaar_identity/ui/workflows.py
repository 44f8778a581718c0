"""Shared extraction, inspection and batch workflows.

UI-agnostic orchestration of identity extraction.  The CLI is a thin
wrapper around these functions.

Constraints:
- No stdout/stderr output (no print)
- No sys.exit()
- No argparse imports
- Returns structured results, never raises on business errors
"""

from __future__ import annotations

__all__ = [
    "BatchSummary",
    "CertificateInspection",
    "DocumentInspection",
    "FileResult",
    "SignatureInspection",
    "find_pdf_files",
    "inspect_document",
    "process_directory",
    "process_file",
]

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..api import extract_identity
from ..core.locator import locate_signatures, parse_byterange
from ..core.pkcs7 import decode_certificates
from ..core.selector import evaluate_certificate, has_aadhaar_data
from ..errors import IdentityError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from ..config import ScanLimits
    from ..core.identity import IdentityRecord
    from ..core.locator import SignatureCandidate

_logger = logging.getLogger(__name__)


# ── Result types ──────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FileResult:
    """Result of extracting identity from one file."""

    path: Path
    ok: bool
    record: IdentityRecord | None = None
    error_kind: str | None = None
    error_message: str | None = None

    @property
    def has_aadhaar_data(self) -> bool:
        return self.record is not None and has_aadhaar_data(self.record)

    def to_dict(self) -> dict[str, object]:
        return {
            "file": str(self.path),
            "success": self.ok,
            "aadhaarDetails": self.record.to_dict() if self.record is not None else None,
            "errorKind": self.error_kind,
            "error": self.error_message,
        }


@dataclass(frozen=True, slots=True)
class BatchSummary:
    """Results for every PDF in a directory, in discovery order."""

    results: list[FileResult]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def with_aadhaar_data(self) -> int:
        return sum(1 for result in self.results if result.has_aadhaar_data)


@dataclass(frozen=True, slots=True)
class CertificateInspection:
    """One certificate found inside a signature."""

    offset: int
    size: int
    strategy: str
    record: IdentityRecord | None
    error_message: str | None

    @property
    def qualifying(self) -> bool:
        return self.record is not None and has_aadhaar_data(self.record)


@dataclass(frozen=True, slots=True)
class SignatureInspection:
    """One located signature and what it decodes to."""

    index: int
    pattern: str
    offset: int
    size: int
    reference: str | None = None
    certificates: list[CertificateInspection] = field(default_factory=list)
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class DocumentInspection:
    """Every signature candidate in a PDF, without selection applied."""

    ok: bool
    signatures: list[SignatureInspection] = field(default_factory=list)
    byteranges: list[tuple[int, int, int, int]] = field(default_factory=list)
    error_message: str | None = None


# ── Extraction ────────────────────────────────────────────────────


def _classify_error(path: Path, error: Exception) -> FileResult:
    """Convert a caught exception into a FileResult."""
    if isinstance(error, IdentityError):
        return FileResult(
            path=path, ok=False, error_kind=error.kind.value, error_message=str(error)
        )

    if isinstance(error, OSError):
        return FileResult(path=path, ok=False, error_kind="io_error", error_message=str(error))

    _logger.exception("Unexpected error while processing %s", path)
    return FileResult(
        path=path,
        ok=False,
        error_kind="unexpected",
        error_message="An unexpected error occurred. Check logs for details.",
    )


def process_file(path: Path, *, limits: ScanLimits | None = None) -> FileResult:
    """Extract identity from one PDF or certificate file.

    Never raises on business errors -- all captured in the result.
    """
    try:
        data = path.read_bytes()
        record = extract_identity(data, limits=limits)
    except Exception as e:  # noqa: BLE001 -- classified, unknown errors are logged
        return _classify_error(path, e)
    return FileResult(path=path, ok=True, record=record)


def find_pdf_files(directory: Path, *, recursive: bool = True) -> list[Path]:
    """Return every ``*.pdf`` file (any case) under ``directory``, sorted."""
    pattern = "**/*" if recursive else "*"
    return sorted(
        path for path in directory.glob(pattern) if path.is_file() and path.suffix.lower() == ".pdf"
    )


def process_directory(
    directory: Path,
    *,
    recursive: bool = True,
    workers: int = 1,
    limits: ScanLimits | None = None,
    progress: Callable[[FileResult], None] | None = None,
) -> BatchSummary:
    """Extract identity from every PDF in a directory.

    Files are independent, so they run on a thread pool; results keep
    discovery order regardless of completion order.

    Args:
        directory: Directory to search.
        recursive: Search subdirectories.
        workers: Thread count (1 = sequential).
        limits: Scan bounds passed to each extraction.
        progress: Called with each result, in order.
    """
    files = find_pdf_files(directory, recursive=recursive)
    _logger.debug("Found %d PDF file(s) under %s", len(files), directory)

    def _run(path: Path) -> FileResult:
        return process_file(path, limits=limits)

    results: list[FileResult] = []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        for result in pool.map(_run, files):
            results.append(result)
            if progress is not None:
                progress(result)

    return BatchSummary(results=results)


# ── Inspection ────────────────────────────────────────────────────


def _inspect_signature(
    index: int, signature: SignatureCandidate, limits: ScanLimits | None
) -> SignatureInspection:
    base = {
        "index": index,
        "pattern": signature.source_pattern.value,
        "offset": signature.byte_offset,
        "size": signature.size,
        "reference": signature.reference,
    }
    if not signature.decodable:
        return SignatureInspection(**base, error_message="Indirect reference, not decodable")

    try:
        candidates = decode_certificates(signature.raw_bytes, limits=limits)
    except IdentityError as e:
        return SignatureInspection(**base, error_message=str(e))

    certificates = []
    for candidate in candidates:
        outcome = evaluate_certificate(candidate)
        certificates.append(
            CertificateInspection(
                offset=candidate.origin_offset,
                size=candidate.byte_size,
                strategy=candidate.strategy,
                record=outcome.record,
                error_message=str(outcome.error) if outcome.error is not None else None,
            )
        )
    return SignatureInspection(**base, certificates=certificates)


def inspect_document(pdf_bytes: bytes, *, limits: ScanLimits | None = None) -> DocumentInspection:
    """List every signature candidate and the certificates each decodes to.

    Unlike extraction, nothing is selected: all candidates are reported.
    """
    try:
        signatures = locate_signatures(
            pdf_bytes,
            max_candidates=limits.max_signature_candidates if limits is not None else None,
        )
    except IdentityError as e:
        return DocumentInspection(ok=False, error_message=str(e))

    return DocumentInspection(
        ok=True,
        signatures=[
            _inspect_signature(index, signature, limits)
            for index, signature in enumerate(signatures)
        ],
        byteranges=parse_byterange(pdf_bytes),
    )
