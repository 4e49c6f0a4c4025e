"""Parse Engine

Issue model, message resolution, parse contexts, the global registry and
the aggregated error surface shared by every schema node.

Key Features:
- Closed issue kinds with typed payloads
- Five-layer message resolution (payload, call site, schema, registry, default)
- Parse contexts with child/clone spawning and upward issue propagation
- One coroutine-based traversal for synchronous and asynchronous parsing
- ValidationError with format() / flatten() projections
- Pydantic field integration through Annotated

Usage:
    from shapeguard.validation import ParseOptions, ValidationError, get_registry

    get_registry().set_error_map({"required": "Missing"})
    try:
        schema.parse(raw, ParseOptions(abort_early=True))
    except ValidationError as exc:
        return exc.flatten()
"""

# Issue model
from .issues import (
    Check,
    CheckKind,
    CustomPayload,
    InvalidEnumValuePayload,
    InvalidInstancePayload,
    InvalidLiteralPayload,
    InvalidTypePayload,
    InvalidUnionPayload,
    Issue,
    IssueKind,
    LengthCheck,
    MaxCheck,
    MinCheck,
    NestedErrorPayload,
    Path,
    RangeCheck,
    SizeCheck,
    SortCheck,
    UnrecognizedKeysPayload,
)

# Message resolution
from .error_map import (
    ErrorMap,
    ErrorMapContext,
    IssuesFormatter,
    default_error_map,
    default_issues_formatter,
    resolve_message,
)

# Errors
from .errors import ValidationError

# Registry
from .registry import Registry, RegistryOptions, get_registry

# Parse execution
from .parse import (
    ParseCommon,
    ParseContext,
    ParseOptions,
    ParseResult,
    run_sync,
)
from .parsed_type import ParsedType, get_parsed_type

# Values
from .utils import UNDEFINED, Symbol, clone_deep, format_path

# Pydantic integration
from .annotated import SchemaValidator, validated

__all__ = [
    # Issue model
    "Issue",
    "IssueKind",
    "Path",
    "Check",
    "CheckKind",
    "MinCheck",
    "MaxCheck",
    "LengthCheck",
    "SizeCheck",
    "RangeCheck",
    "SortCheck",
    "InvalidTypePayload",
    "InvalidEnumValuePayload",
    "InvalidLiteralPayload",
    "InvalidInstancePayload",
    "InvalidUnionPayload",
    "NestedErrorPayload",
    "UnrecognizedKeysPayload",
    "CustomPayload",
    # Message resolution
    "ErrorMap",
    "ErrorMapContext",
    "IssuesFormatter",
    "default_error_map",
    "default_issues_formatter",
    "resolve_message",
    # Errors
    "ValidationError",
    # Registry
    "Registry",
    "RegistryOptions",
    "get_registry",
    # Parse execution
    "ParseCommon",
    "ParseContext",
    "ParseOptions",
    "ParseResult",
    "ParsedType",
    "get_parsed_type",
    "run_sync",
    # Values
    "UNDEFINED",
    "Symbol",
    "clone_deep",
    "format_path",
    # Pydantic integration
    "SchemaValidator",
    "validated",
]
