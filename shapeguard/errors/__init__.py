"""Result Monad and Usage Errors

Usage:
    from shapeguard.errors import Ok, Err, Result

    match schema.safe_parse(raw):
        case Ok(value): save(value)
        case Err(error): report(error.flatten())
"""
from .types import (
    AsyncUsageError,
    Err,
    Ok,
    Result,
    SchemaUsageError,
    collect_results,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "collect_results",
    # Usage errors
    "SchemaUsageError",
    "AsyncUsageError",
]
