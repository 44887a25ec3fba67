"""Tests for prr.core.result module."""

from __future__ import annotations

from prr.core.result import Err, Ok, Result


def _describe(result: Result[int, str]) -> str:
    match result:
        case Ok(value):
            return f"ok {value}"
        case Err(error):
            return f"err {error}"


def test_pattern_matching() -> None:
    assert _describe(Ok(1)) == "ok 1"
    assert _describe(Err("no")) == "err no"


def test_equality() -> None:
    assert Ok([1]) == Ok([1])
    assert Ok(1) != Err(1)


def test_repr() -> None:
    assert repr(Ok("x")) == "Ok('x')"
    assert repr(Err("bad")) == "Err('bad')"
