"""Tests for autorelease.core.result module."""

from autorelease.core.result import Err, Ok, Result


class TestOk:
    """Tests for Ok type."""

    def test_value(self) -> None:
        assert Ok(42).value == 42

    def test_repr(self) -> None:
        assert repr(Ok("v1.0.0")) == "Ok('v1.0.0')"

    def test_is_frozen(self) -> None:
        assert Ok(1) == Ok(1)
        assert Ok(1) != Err(1)


class TestErr:
    """Tests for Err type."""

    def test_error(self) -> None:
        assert Err("boom").error == "boom"

    def test_repr(self) -> None:
        assert repr(Err(404)) == "Err(404)"


class TestNarrowing:
    def test_isinstance(self) -> None:
        results: list[Result[int, str]] = [Ok(1), Err("x"), Ok(2)]
        assert [r.value for r in results if isinstance(r, Ok)] == [1, 2]
        assert [r.error for r in results if isinstance(r, Err)] == ["x"]

    def test_pattern_matching(self) -> None:
        def describe(r: Result[int, str]) -> str:
            match r:
                case Ok(value):
                    return f"ok {value}"
                case Err(error):
                    return f"err {error}"

        assert describe(Ok(3)) == "ok 3"
        assert describe(Err("no")) == "err no"
