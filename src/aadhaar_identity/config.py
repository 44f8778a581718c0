"""
Scan limits for certificate discovery.

The core never reads the environment; callers build a :class:`ScanLimits`
directly or resolve one with :func:`load_limits_from_env` (the CLI does).
"""

from __future__ import annotations

__all__ = ["ScanLimits", "load_limits_from_env"]

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import (
    CERT_SEQUENCE_PREFIXES,
    DEFAULT_MAX_CERT_LENGTH,
    DEFAULT_MIN_CERT_LENGTH,
    ENV_MAX_CERT_SIZE,
    ENV_MAX_SIGNATURES,
    ENV_MIN_CERT_SIZE,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

_logger = logging.getLogger(__name__)

# Upper bound accepted from the environment for any size setting (16 MB)
_MAX_ENV_SIZE = 16 * 1024 * 1024


@dataclass(frozen=True)
class ScanLimits:
    """Bounds on how much work one extraction may do.

    Attributes:
        min_certificate_length: Smallest certificate content length (bytes,
            excluding the tag/length header) the byte scan admits.
        max_certificate_length: Largest certificate content length admitted.
        sequence_prefixes: Byte prefixes the byte scan searches for.
        max_signature_candidates: Stop locating after this many signature
            candidates (None = unlimited).
        max_certificate_candidates: Keep at most this many certificates per
            signature blob (None = unlimited).
    """

    min_certificate_length: int = DEFAULT_MIN_CERT_LENGTH
    max_certificate_length: int = DEFAULT_MAX_CERT_LENGTH
    sequence_prefixes: tuple[bytes, ...] = CERT_SEQUENCE_PREFIXES
    max_signature_candidates: int | None = None
    max_certificate_candidates: int | None = None

    def __post_init__(self) -> None:
        if self.min_certificate_length < 0:
            raise ValueError("min_certificate_length must not be negative")
        if self.max_certificate_length < self.min_certificate_length:
            raise ValueError(
                f"max_certificate_length ({self.max_certificate_length}) is below "
                f"min_certificate_length ({self.min_certificate_length})"
            )
        if not self.sequence_prefixes:
            raise ValueError("sequence_prefixes must not be empty")
        for cap in (self.max_signature_candidates, self.max_certificate_candidates):
            if cap is not None and cap < 1:
                raise ValueError("candidate caps must be positive or None")


def _read_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        _logger.warning("Invalid %s value %r, using default", name, raw)
        return None
    if value < 1 or value > _MAX_ENV_SIZE:
        _logger.warning("%s=%d out of range [1, %d], using default", name, value, _MAX_ENV_SIZE)
        return None
    return value


def load_limits_from_env(env: Mapping[str, str] | None = None) -> ScanLimits:
    """
    Resolve scan limits from environment variables.

    Priority: env vars > built-in defaults.  Each setting is validated on
    its own; a bad value is logged and replaced by its default.

    Args:
        env: Mapping to read from (defaults to ``os.environ``).

    Returns:
        ScanLimits with any valid overrides applied.
    """
    if env is None:
        env = os.environ

    min_len = _read_int(env, ENV_MIN_CERT_SIZE) or DEFAULT_MIN_CERT_LENGTH
    max_len = _read_int(env, ENV_MAX_CERT_SIZE) or DEFAULT_MAX_CERT_LENGTH
    max_sigs = _read_int(env, ENV_MAX_SIGNATURES)

    if min_len > max_len:
        _logger.warning(
            "Certificate size range [%d, %d] is empty, using defaults",
            min_len,
            max_len,
        )
        min_len, max_len = DEFAULT_MIN_CERT_LENGTH, DEFAULT_MAX_CERT_LENGTH

    return ScanLimits(
        min_certificate_length=min_len,
        max_certificate_length=max_len,
        max_signature_candidates=max_sigs,
    )
