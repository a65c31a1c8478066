"""
Result type for expected failures.

A Result is either Success(value) or Failure(error). Use cases and entities
return Results for validation and lookup failures instead of raising;
infrastructure faults and programming errors still raise.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")


class UnwrapFailedError(Exception):
    """Raised when a value is forcibly extracted from the wrong variant."""

    def __init__(self, message: str, error: Any = None) -> None:
        """
        Initialize unwrap error.

        Args:
            message: Error message.
            error: The error carried by the failure, if any.
        """
        super().__init__(message)
        self.message = message
        self.error = error


class Result(Generic[T, E]):
    """Common operations of Success and Failure."""

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    @property
    def is_failure(self) -> bool:
        return isinstance(self, Failure)

    def get_value(self) -> Optional[T]:
        """Return the success value, or None on failure."""
        return self.value if isinstance(self, Success) else None

    def error_value(self) -> Optional[E]:
        """Return the error, or None on success."""
        return self.error if isinstance(self, Failure) else None

    def map(self, func: Callable[[T], U]) -> "Result[U, E]":
        """Transform the success value; failures pass through."""
        if isinstance(self, Success):
            return Success(func(self.value))
        return self  # type: ignore[return-value]

    async def map_async(self, func: Callable[[T], Awaitable[U]]) -> "Result[U, E]":
        """Async variant of map."""
        if isinstance(self, Success):
            return Success(await func(self.value))
        return self  # type: ignore[return-value]

    def map_error(self, func: Callable[[E], F]) -> "Result[T, F]":
        """Transform the error; successes pass through."""
        if isinstance(self, Failure):
            return Failure(func(self.error))
        return self  # type: ignore[return-value]

    def and_then(self, func: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        """Chain a Result-returning function on success."""
        if isinstance(self, Success):
            return func(self.value)
        return self  # type: ignore[return-value]

    async def and_then_async(
        self,
        func: Callable[[T], Awaitable["Result[U, E]"]],
    ) -> "Result[U, E]":
        """Async variant of and_then."""
        if isinstance(self, Success):
            return await func(self.value)
        return self  # type: ignore[return-value]

    def or_else(self, func: Callable[[E], "Result[T, F]"]) -> "Result[T, F]":
        """Recover from a failure with a Result-returning function."""
        if isinstance(self, Failure):
            return func(self.error)
        return self  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        """Return the success value or the given default."""
        return self.value if isinstance(self, Success) else default

    def unwrap_or_else(self, func: Callable[[E], T]) -> T:
        """Return the success value or compute one from the error."""
        if isinstance(self, Success):
            return self.value
        return func(self.error)  # type: ignore[attr-defined]

    async def unwrap_or_else_async(self, func: Callable[[E], Awaitable[T]]) -> T:
        """Async variant of unwrap_or_else."""
        if isinstance(self, Success):
            return self.value
        return await func(self.error)  # type: ignore[attr-defined]

    def unwrap(self) -> T:
        """
        Return the success value.

        Raises:
            UnwrapFailedError: If called on a failure. The message is the
                message of the carried error.
        """
        if isinstance(self, Success):
            return self.value
        error = self.error  # type: ignore[attr-defined]
        raise UnwrapFailedError(str(getattr(error, "message", error)), error)

    def expect(self, message: str) -> T:
        """Return the success value or raise with a custom message."""
        if isinstance(self, Success):
            return self.value
        raise UnwrapFailedError(message, self.error)  # type: ignore[attr-defined]

    def unwrap_error(self) -> E:
        """
        Return the error.

        Raises:
            UnwrapFailedError: If called on a success.
        """
        if isinstance(self, Failure):
            return self.error
        raise UnwrapFailedError("Called unwrap_error on a success result")


@dataclass(frozen=True)
class Success(Result[T, E]):
    """Successful outcome carrying a value."""

    value: T = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


@dataclass(frozen=True)
class Failure(Result[T, E]):
    """Failed outcome carrying an error."""

    error: E

    def __post_init__(self) -> None:
        if self.error is None:
            raise ValueError("A failure result must carry an error")

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


def ok(value: Any = None) -> Success:
    """Build a success result."""
    return Success(value)


def fail(error: Any) -> Failure:
    """Build a failure result."""
    return Failure(error)


def combine(results: Iterable[Result]) -> Result:
    """
    Return the first failure in order, or ok(None) if every result succeeded.

    Args:
        results: Results to inspect.

    Returns:
        The first Failure found, or Success(None).
    """
    for result in results:
        if result.is_failure:
            return result
    return ok()
