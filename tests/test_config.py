"""Tests for aadhaar_identity.config -- scan limits and env overrides."""

from __future__ import annotations

import logging

import pytest

from aadhaar_identity.config import ScanLimits, load_limits_from_env
from aadhaar_identity.constants import (
    CERT_SEQUENCE_PREFIXES,
    DEFAULT_MAX_CERT_LENGTH,
    DEFAULT_MIN_CERT_LENGTH,
)


def test_defaults():
    limits = ScanLimits()
    assert limits.min_certificate_length == 500
    assert limits.max_certificate_length == 10000
    assert limits.sequence_prefixes == CERT_SEQUENCE_PREFIXES
    assert limits.max_signature_candidates is None
    assert limits.max_certificate_candidates is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_certificate_length": -1},
        {"min_certificate_length": 600, "max_certificate_length": 550},
        {"sequence_prefixes": ()},
        {"max_signature_candidates": 0},
        {"max_certificate_candidates": -3},
    ],
)
def test_invalid_limits(kwargs):
    with pytest.raises(ValueError):
        ScanLimits(**kwargs)


def test_limits_are_frozen():
    with pytest.raises(AttributeError):
        ScanLimits().min_certificate_length = 1  # type: ignore[misc]


def test_env_empty():
    assert load_limits_from_env({}) == ScanLimits()


def test_env_overrides():
    limits = load_limits_from_env(
        {
            "AADHAAR_MIN_CERT_SIZE": "300",
            "AADHAAR_MAX_CERT_SIZE": "20000",
            "AADHAAR_MAX_SIGNATURES": " 4 ",
        }
    )
    assert limits.min_certificate_length == 300
    assert limits.max_certificate_length == 20000
    assert limits.max_signature_candidates == 4


def test_env_invalid_value_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="aadhaar_identity.config"):
        limits = load_limits_from_env({"AADHAAR_MIN_CERT_SIZE": "lots"})
    assert limits.min_certificate_length == DEFAULT_MIN_CERT_LENGTH
    assert "AADHAAR_MIN_CERT_SIZE" in caplog.text


def test_env_out_of_range_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="aadhaar_identity.config"):
        limits = load_limits_from_env({"AADHAAR_MAX_SIGNATURES": "0"})
    assert limits.max_signature_candidates is None
    assert "out of range" in caplog.text


def test_env_inverted_range_resets(caplog):
    with caplog.at_level(logging.WARNING, logger="aadhaar_identity.config"):
        limits = load_limits_from_env(
            {"AADHAAR_MIN_CERT_SIZE": "9000", "AADHAAR_MAX_CERT_SIZE": "800"}
        )
    assert limits.min_certificate_length == DEFAULT_MIN_CERT_LENGTH
    assert limits.max_certificate_length == DEFAULT_MAX_CERT_LENGTH
    assert "empty" in caplog.text


def test_env_defaults_to_os_environ(monkeypatch):
    monkeypatch.setenv("AADHAAR_MAX_CERT_SIZE", "12345")
    monkeypatch.delenv("AADHAAR_MIN_CERT_SIZE", raising=False)
    assert load_limits_from_env().max_certificate_length == 12345
