"""Tests for aadhaar_identity.errors -- exception hierarchy."""

import pytest

from aadhaar_identity.errors import (
    CertificateStructureError,
    ErrorKind,
    IdentityError,
    MalformedHexError,
    NoAadhaarDataError,
    NoCertificateFoundError,
    NoSignatureFoundError,
    NotAPdfError,
)

_ALL = (
    NotAPdfError,
    NoSignatureFoundError,
    NoCertificateFoundError,
    CertificateStructureError,
    MalformedHexError,
    NoAadhaarDataError,
)


def test_identity_error_is_exception():
    assert issubclass(IdentityError, Exception)


@pytest.mark.parametrize("cls", _ALL)
def test_subclasses_inherit_base(cls):
    assert issubclass(cls, IdentityError)
    e = cls("details")
    assert isinstance(e, IdentityError)
    assert str(e) == "details"


def test_each_error_has_distinct_kind():
    kinds = [cls.kind for cls in _ALL]
    assert len(set(kinds)) == len(kinds)
    assert set(kinds) == set(ErrorKind)


def test_kind_values():
    assert NotAPdfError.kind is ErrorKind.NOT_A_PDF
    assert NoAadhaarDataError("x").kind.value == "no_aadhaar_data_found"


def test_catch_all_with_base():
    """All specific errors should be catchable via IdentityError."""
    for cls in _ALL:
        try:
            raise cls("test")
        except IdentityError:  # noqa: PERF203
            pass  # expected


def test_error_pickle_roundtrip():
    import pickle

    e = pickle.loads(pickle.dumps(MalformedHexError("odd length")))
    assert isinstance(e, MalformedHexError)
    assert str(e) == "odd length"
    assert e.kind is ErrorKind.MALFORMED_HEX
