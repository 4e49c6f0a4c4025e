"""shapeguard: composable schemas for untrusted structured input

Declare a schema once, then parse raw data into a validated value or a
structured, path-addressed error report.

Usage:
    import shapeguard as sg

    User = sg.object_({
        "name": sg.string(),
        "email": sg.string().refine(lambda s: "@" in s, "Invalid email"),
        "role": sg.enum("admin", "member").default("member"),
    })

    user = User.parse({"name": "Ada", "email": "ada@example.com"})

    match User.safe_parse(payload):
        case sg.Ok(data): ...
        case sg.Err(error): print(error.flatten())
"""

from shapeguard.errors import AsyncUsageError, Err, Ok, Result, SchemaUsageError
from shapeguard.schemas import *  # noqa: F401,F403
from shapeguard.schemas import __all__ as _schemas_all
from shapeguard.validation import (
    UNDEFINED,
    ErrorMap,
    Issue,
    IssueKind,
    ParseOptions,
    ParsedType,
    Registry,
    RegistryOptions,
    SchemaValidator,
    Symbol,
    ValidationError,
    get_registry,
    validated,
)

__version__ = "0.1.0"

__all__ = [
    *_schemas_all,
    # Results
    "Ok",
    "Err",
    "Result",
    # Errors
    "ValidationError",
    "SchemaUsageError",
    "AsyncUsageError",
    "Issue",
    "IssueKind",
    "ParsedType",
    # Options & registry
    "ParseOptions",
    "ErrorMap",
    "Registry",
    "RegistryOptions",
    "get_registry",
    # Values
    "UNDEFINED",
    "Symbol",
    # Pydantic integration
    "SchemaValidator",
    "validated",
]
