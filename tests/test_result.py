"""Unit tests for the Result container used by the backends."""

from __future__ import annotations

import pytest

from blogstore.core.result import Err, Ok, err, ok


def test_ok_accessors() -> None:
    r = ok(3)
    assert r.is_ok() and not r.is_err()
    assert r.unwrap() == 3
    assert r == Ok(3)
    with pytest.raises(RuntimeError):
        r.unwrap_err()


def test_err_accessors() -> None:
    failure = OSError("nope")
    r = err(failure)
    assert r.is_err()
    assert r.unwrap_err() is failure
    assert r == Err(failure)
    with pytest.raises(RuntimeError):
        r.unwrap()
