"""Issue Model

An issue is one structured validation failure: a closed kind, a
kind-specific payload, the path where it was detected, a snapshot of the
offending data and the schema that rejected it, and a resolved message.

Payloads:
    required / forbidden / invalid_intersection  -> None
    invalid_type                                 -> InvalidTypePayload
    invalid_array / invalid_set / invalid_tuple  -> a sized check
    invalid_date                                 -> MinCheck | MaxCheck | RangeCheck
    invalid_enum_value                           -> InvalidEnumValuePayload
    invalid_literal                              -> InvalidLiteralPayload
    invalid_arguments / invalid_return_type      -> NestedErrorPayload
    invalid_union                                -> InvalidUnionPayload
    invalid_instance                             -> InvalidInstancePayload
    unrecognized_keys                            -> UnrecognizedKeysPayload
    custom                                       -> CustomPayload
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Literal, Union
from uuid import uuid4

from .parsed_type import ParsedType
from .utils import format_path, literalize

if TYPE_CHECKING:
    from .errors import ValidationError

PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]


class IssueKind(str, Enum):
    """Closed set of issue kinds."""
    REQUIRED = "required"
    INVALID_TYPE = "invalid_type"
    INVALID_ARRAY = "invalid_array"
    INVALID_DATE = "invalid_date"
    INVALID_SET = "invalid_set"
    INVALID_TUPLE = "invalid_tuple"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_LITERAL = "invalid_literal"
    INVALID_ARGUMENTS = "invalid_arguments"
    INVALID_RETURN_TYPE = "invalid_return_type"
    INVALID_UNION = "invalid_union"
    INVALID_INTERSECTION = "invalid_intersection"
    INVALID_INSTANCE = "invalid_instance"
    UNRECOGNIZED_KEYS = "unrecognized_keys"
    FORBIDDEN = "forbidden"
    CUSTOM = "custom"


# ============================================================================
# Checks (declarative constraints carried by sized and date schemas)
# ============================================================================

class CheckKind(str, Enum):
    MIN = "min"
    MAX = "max"
    LENGTH = "length"
    SIZE = "size"
    RANGE = "range"
    SORT_ASCENDING = "sort_ascending"
    SORT_DESCENDING = "sort_descending"


RangeInclusivity = Literal["both", "min", "max", "none"]
SortDirection = Literal["ascending", "descending"]


@dataclass(frozen=True, slots=True)
class MinCheck:
    value: Any
    inclusive: bool = True
    message: str | None = None
    kind: ClassVar[CheckKind] = CheckKind.MIN


@dataclass(frozen=True, slots=True)
class MaxCheck:
    value: Any
    inclusive: bool = True
    message: str | None = None
    kind: ClassVar[CheckKind] = CheckKind.MAX


@dataclass(frozen=True, slots=True)
class LengthCheck:
    value: int
    message: str | None = None
    kind: ClassVar[CheckKind] = CheckKind.LENGTH


@dataclass(frozen=True, slots=True)
class SizeCheck:
    value: int
    message: str | None = None
    kind: ClassVar[CheckKind] = CheckKind.SIZE


@dataclass(frozen=True, slots=True)
class RangeCheck:
    """Two-sided bound; ``inclusive`` names which ends are inclusive."""
    min: Any
    max: Any
    inclusive: RangeInclusivity = "both"
    message: str | None = None
    kind: ClassVar[CheckKind] = CheckKind.RANGE

    @property
    def min_inclusive(self) -> bool: return self.inclusive in ("both", "min")

    @property
    def max_inclusive(self) -> bool: return self.inclusive in ("both", "max")


@dataclass(frozen=True, slots=True)
class SortCheck:
    """Ordering requirement. With ``convert`` the data is rewritten sorted instead of rejected."""
    direction: SortDirection
    convert: bool = False
    message: str | None = None

    @property
    def kind(self) -> CheckKind:
        return CheckKind.SORT_ASCENDING if self.direction == "ascending" else CheckKind.SORT_DESCENDING


Check = Union[MinCheck, MaxCheck, LengthCheck, SizeCheck, RangeCheck, SortCheck]


def with_check(checks: tuple[Check, ...], check: Check, *, clears: tuple[CheckKind, ...] = ()) -> tuple[Check, ...]:
    """Append ``check``, dropping any standing check of the same kind or of a cleared kind."""
    dropped = {check.kind, *clears}
    return (*(c for c in checks if c.kind not in dropped), check)


# ============================================================================
# Payloads
# ============================================================================

@dataclass(frozen=True, slots=True)
class InvalidTypePayload:
    expected: ParsedType
    received: ParsedType


@dataclass(frozen=True, slots=True)
class InvalidEnumValuePayload:
    expected: tuple[Any, ...]
    received: Any

    @property
    def formatted_expected(self) -> str: return " | ".join(literalize(v) for v in self.expected)

    @property
    def formatted_received(self) -> str: return literalize(self.received)


@dataclass(frozen=True, slots=True)
class InvalidLiteralPayload:
    expected: Any
    received: Any

    @property
    def formatted_expected(self) -> str: return literalize(self.expected)

    @property
    def formatted_received(self) -> str: return literalize(self.received)


@dataclass(frozen=True, slots=True)
class NestedErrorPayload:
    """Carries the error raised by a function's argument or return validation."""
    error: ValidationError


@dataclass(frozen=True, slots=True)
class InvalidUnionPayload:
    union_issues: tuple[Issue, ...]


@dataclass(frozen=True, slots=True)
class InvalidInstancePayload:
    expected: str


@dataclass(frozen=True, slots=True)
class UnrecognizedKeysPayload:
    keys: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class CustomPayload:
    message: str | None = None
    params: Any = None


# ============================================================================
# Issue
# ============================================================================

@dataclass(frozen=True, slots=True)
class Issue:
    """One validation failure. Immutable once recorded."""
    kind: IssueKind
    path: Path
    payload: Any
    data: Any
    parsed_type: ParsedType
    schema: str
    hint: str
    message: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def field_path(self) -> str:
        return format_path(self.path)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        result: dict[str, Any] = {
            "kind": self.kind.value,
            "path": list(self.path),
            "field": self.field_path,
            "message": self.message,
            "received": self.parsed_type.value,
            "schema": self.schema,
            "hint": self.hint,
        }
        if isinstance(self.payload, InvalidUnionPayload):
            result["union_issues"] = [i.to_dict() for i in self.payload.union_issues]
        elif isinstance(self.payload, NestedErrorPayload):
            result["issues"] = [i.to_dict() for i in self.payload.error.issues]
        elif isinstance(self.payload, UnrecognizedKeysPayload):
            result["keys"] = list(self.payload.keys)
        return result

    def __str__(self) -> str:
        return f"{self.field_path}: {self.message}"
