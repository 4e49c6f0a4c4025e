"""Error Maps and Message Resolution

An error map turns an issue into a message. It is either a function
``(issue, ctx) -> str | None`` or a dict keyed by issue kind (plus a
``"__default"`` fallback) whose values are strings or such functions.

Resolution order for a recorded issue, highest priority first:
    1. a message embedded in the issue's own payload
    2. the call-site error map
    3. the error map declared on the rejecting schema
    4. the registry (process-wide) error map
    5. the built-in default map

Each layer receives the message produced by the layers below it as
``ctx.default_message``, so a map may decorate rather than replace it.
The built-in map handles every kind, so resolution never ends empty.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Sequence, Union

from .issues import (
    CustomPayload, InvalidEnumValuePayload, InvalidInstancePayload,
    InvalidLiteralPayload, InvalidTypePayload, Issue, IssueKind, LengthCheck,
    MaxCheck, MinCheck, RangeCheck, SizeCheck, SortCheck, UnrecognizedKeysPayload,
)
from .utils import format_path, literalize


@dataclass(frozen=True, slots=True)
class ErrorMapContext:
    default_message: str
    data: Any


ErrorMapFn = Callable[[Issue, ErrorMapContext], Union[str, None]]
ErrorMap = Union[ErrorMapFn, Mapping[str, Union[str, ErrorMapFn]]]
IssuesFormatter = Callable[[Sequence[Issue]], str]


# ============================================================================
# Built-in Default Map
# ============================================================================

def _bound(value: Any) -> str:
    return value.isoformat() if isinstance(value, datetime) else literalize(value)


def _sized_message(noun: str, unit: str, check: Any) -> str:
    match check:
        case MinCheck(value=value, inclusive=inclusive):
            return f"{noun} must contain {'at least' if inclusive else 'more than'} {value} {unit}(s)"
        case MaxCheck(value=value, inclusive=inclusive):
            return f"{noun} must contain {'at most' if inclusive else 'fewer than'} {value} {unit}(s)"
        case LengthCheck(value=value) | SizeCheck(value=value):
            return f"{noun} must contain exactly {value} {unit}(s)"
        case SortCheck(direction=direction):
            return f"{noun} must be sorted in {direction} order"
    return f"Invalid {noun.lower()}"


def _date_message(check: Any) -> str:
    match check:
        case MinCheck(value=value, inclusive=inclusive):
            return f"Date must be {'on or after' if inclusive else 'after'} {_bound(value)}"
        case MaxCheck(value=value, inclusive=inclusive):
            return f"Date must be {'on or before' if inclusive else 'before'} {_bound(value)}"
        case RangeCheck(min=lo, max=hi, inclusive=inclusive):
            return f"Date must be between {_bound(lo)} and {_bound(hi)} (inclusive: {inclusive})"
    return "Invalid date"


def default_error_map(issue: Issue, ctx: ErrorMapContext | None = None) -> str:
    """Built-in messages. Handles every IssueKind."""
    match issue.kind, issue.payload:
        case IssueKind.REQUIRED, _:
            return "Required"
        case IssueKind.INVALID_TYPE, InvalidTypePayload(expected=expected, received=received):
            return f"Expected {expected}, received {received}"
        case IssueKind.INVALID_ARRAY, payload:
            return _sized_message("Array", "element", payload)
        case IssueKind.INVALID_SET, payload:
            return _sized_message("Set", "element", payload)
        case IssueKind.INVALID_TUPLE, payload:
            return _sized_message("Tuple", "item", payload)
        case IssueKind.INVALID_DATE, payload:
            return _date_message(payload)
        case IssueKind.INVALID_ENUM_VALUE, InvalidEnumValuePayload() as payload:
            return f"Invalid enum value. Expected {payload.formatted_expected}, received {payload.formatted_received}"
        case IssueKind.INVALID_LITERAL, InvalidLiteralPayload() as payload:
            return f"Invalid literal value, expected {payload.formatted_expected}"
        case IssueKind.INVALID_ARGUMENTS, _:
            return "Invalid function arguments"
        case IssueKind.INVALID_RETURN_TYPE, _:
            return "Invalid function return type"
        case IssueKind.INVALID_UNION, _:
            return "Invalid input"
        case IssueKind.INVALID_INTERSECTION, _:
            return "Intersection results could not be merged"
        case IssueKind.INVALID_INSTANCE, InvalidInstancePayload(expected=expected):
            return f"Input not instance of {expected}"
        case IssueKind.UNRECOGNIZED_KEYS, UnrecognizedKeysPayload(keys=keys):
            return f"Unrecognized key(s) in object: {', '.join(literalize(k) for k in keys)}"
        case IssueKind.FORBIDDEN, _:
            return "This value is forbidden"
        case IssueKind.CUSTOM, _:
            return "Invalid input"
    raise AssertionError(f"Unhandled issue kind: {issue.kind!r}")


# ============================================================================
# Resolution
# ============================================================================

def resolve_error_map(error_map: ErrorMap) -> ErrorMapFn:
    """Normalize a dict-form map into a function."""
    if callable(error_map): return error_map

    def _from_dict(issue: Issue, ctx: ErrorMapContext) -> str | None:
        entry = error_map.get(issue.kind.value, error_map.get("__default"))
        if entry is None: return None
        return entry if isinstance(entry, str) else entry(issue, ctx)

    return _from_dict


def _embedded_message(issue: Issue) -> str | None:
    message = getattr(issue.payload, "message", None)
    return message if isinstance(message, str) and message else None


def resolve_message(issue: Issue, maps: Iterable[ErrorMap | None]) -> str:
    """Resolve ``issue``'s message.

    ``maps`` is ordered lowest priority first (registry, schema, call site).
    """
    if (embedded := _embedded_message(issue)) is not None: return embedded
    message = default_error_map(issue)
    for error_map in maps:
        if error_map is None: continue
        resolved = resolve_error_map(error_map)(issue, ErrorMapContext(default_message=message, data=issue.data))
        if resolved: message = resolved
    return message


def default_issues_formatter(issues: Sequence[Issue]) -> str:
    """Format issues as text, one ``path: message`` line per issue."""
    if not issues: return "Validation failed"
    if len(issues) == 1: return str(issues[0])
    lines = [f"Validation failed ({len(issues)} issues)"]
    lines.extend(f"  - {format_path(i.path)}: {i.message}" for i in issues)
    return "\n".join(lines)


def custom_payload(message: Any, data: Any) -> CustomPayload:
    """Build a Custom payload from a string, a params mapping, or a function of the data."""
    if callable(message): message = message(data)
    if message is None: return CustomPayload()
    if isinstance(message, str): return CustomPayload(message=message)
    if isinstance(message, Mapping):
        return CustomPayload(message=message.get("message"), params=message.get("params"))
    raise TypeError(f"Unsupported refinement message: {message!r}")
