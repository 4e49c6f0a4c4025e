"""Result Types and Usage Errors

Parse results are a Result monad: ``Ok`` carries the parsed value, ``Err``
carries the aggregated ``ValidationError``. Both support structural pattern
matching, so callers can handle outcomes exhaustively:

    match schema.safe_parse(payload):
        case Ok(data):
            ...
        case Err(error):
            ...

Usage errors are a separate category. They signal API misuse (for example an
async refinement met during a synchronous parse) and are always raised,
never recorded as issues.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Generic, NoReturn, TypeVar, Union, final

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant: wraps the parsed value."""
    data: T
    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.data

    def unwrap_or(self, default: T) -> T:
        return self.data

    def map(self, f: Callable[[T], U]) -> Result[U, Exception]:
        """Transform the success value."""
        return Ok(f(self.data))

    def match(self, ok: Callable[[T], U], err: Callable[[Exception], U]) -> U:
        return ok(self.data)


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant: wraps the aggregated error."""
    error: E
    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        """Raises the carried error, since Err has no value to unwrap."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return self  # type: ignore

    def match(self, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return err(self.error)


Result = Union[Ok[T], Err[E]]


def collect_results(results: list[Result[T, E]]) -> Result[list[T], list[E]]:
    """Collect list of Results into Result of list.

    Returns Ok with all values if all are Ok, else Err with every error.
    """
    values: list[T] = []
    errors: list[E] = []

    for r in results:
        match r:
            case Ok(v):
                values.append(v)
            case Err(e):
                errors.append(e)

    if errors:
        return Err(errors)  # type: ignore
    return Ok(values)


# ============================================================================
# Usage Errors
# ============================================================================

class SchemaUsageError(Exception):
    """The schema API was used incorrectly. Never reported as an issue."""


class AsyncUsageError(SchemaUsageError):
    """An awaitable was produced while parsing in synchronous mode."""

    def __init__(self, operation: str = "operation"):
        self.operation = operation
        super().__init__(
            f"Async {operation} encountered during synchronous parse operation. "
            "Use .parse_async instead."
        )
