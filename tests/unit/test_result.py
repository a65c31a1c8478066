"""
Unit tests for the Result container.
"""
import pytest

from internal.domain.errors import AppError, ErrorCode
from pkg.result import Failure, Success, UnwrapFailedError, combine, fail, ok


class TestConstruction:
    """Tests for ok/fail and the variants."""

    def test_ok_without_value(self):
        result = ok()

        assert result.is_success
        assert not result.is_failure
        assert result.get_value() is None

    def test_fail_carries_error(self):
        error = AppError.not_found("Product not found")
        result = fail(error)

        assert result.is_failure
        assert result.error_value() is error
        assert result.get_value() is None

    def test_failure_requires_an_error(self):
        with pytest.raises(ValueError):
            Failure(None)

    def test_variants_are_values(self):
        assert ok(1) == Success(1)
        assert fail("x") == Failure("x")


class TestUnwrap:
    """Tests for extracting values."""

    def test_unwrap_success(self):
        assert ok(42).unwrap() == 42

    def test_unwrap_failure_surfaces_error_message(self):
        error = AppError.validation("GTIN invalid (8 - 14 digits required)")

        with pytest.raises(UnwrapFailedError) as exc_info:
            fail(error).unwrap()

        assert str(exc_info.value) == "GTIN invalid (8 - 14 digits required)"
        assert exc_info.value.error is error

    def test_unwrap_error_on_success_raises(self):
        with pytest.raises(UnwrapFailedError):
            ok(1).unwrap_error()

    def test_expect_uses_custom_message(self):
        with pytest.raises(UnwrapFailedError, match="product must load"):
            fail(AppError(ErrorCode.INTERNAL, "Internal error")).expect("product must load")

    def test_unwrap_or_defaults(self):
        assert ok(3).unwrap_or(0) == 3
        assert fail("boom").unwrap_or(0) == 0
        assert fail("boom").unwrap_or_else(len) == 4


class TestCombinators:
    """Tests for map, and_then and friends."""

    def test_map_transforms_success_only(self):
        assert ok(2).map(lambda v: v * 10) == ok(20)
        failure = fail("bad")
        assert failure.map(lambda v: v * 10) is failure

    def test_map_error_transforms_failure_only(self):
        assert fail("bad").map_error(str.upper) == fail("BAD")
        assert ok(1).map_error(str.upper) == ok(1)

    def test_and_then_short_circuits(self):
        calls = []

        def step(value):
            calls.append(value)
            return ok(value + 1)

        assert ok(1).and_then(step) == ok(2)
        assert fail("stop").and_then(step) == fail("stop")
        assert calls == [1]

    def test_or_else_recovers(self):
        assert fail("bad").or_else(lambda e: ok(len(e))) == ok(3)

    @pytest.mark.asyncio
    async def test_async_combinators(self):
        async def double(value):
            return value * 2

        async def check(value):
            return ok(value) if value > 0 else fail("negative")

        assert await ok(4).map_async(double) == ok(8)
        assert await ok(-1).and_then_async(check) == fail("negative")

    def test_combine_returns_first_failure(self):
        first = AppError.validation("first")
        second = AppError.validation("second")

        result = combine([ok(1), fail(first), fail(second)])

        assert result.unwrap_error() is first

    def test_combine_all_success(self):
        result = combine([ok(1), ok(2)])

        assert result.is_success
        assert result.get_value() is None

    def test_combine_empty(self):
        assert combine([]).is_success


def test_app_error_string_form():
    error = AppError.validation("Net weight must be positive")

    assert error.code == ErrorCode.VALIDATION
    assert str(error) == "VALIDATION: Net weight must be positive"
    assert error.to_dict() == {
        "code": "VALIDATION",
        "message": "Net weight must be positive",
        "details": None,
    }
