"""Leaf Schemas

Leaves check the runtime type of the data and return it unchanged, except
where a coercion policy is configured (boolean, date).

Type mapping:
    string -> str            number -> int | float (no bool, no NaN)
    bigint -> int (no bool)  nan    -> float("nan")
    boolean -> bool          date   -> datetime
    symbol -> Symbol         null   -> None
    undefined / void -> UNDEFINED
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Union

from shapeguard.validation.issues import (
    Check, CheckKind, IssueKind, MaxCheck, MinCheck, RangeCheck, RangeInclusivity, with_check,
)
from shapeguard.validation.parse import ParseContext, ParseResult
from shapeguard.validation.parsed_type import ParsedType, is_number
from shapeguard.validation.utils import UNDEFINED, Symbol, is_primitive, literalize, same_value

from .base import Schema, SchemaKind


@dataclass(frozen=True, slots=True, eq=False)
class StringSchema(Schema):
    kind = SchemaKind.STRING

    @property
    def hint(self) -> str: return "str"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if not isinstance(ctx.raw_data, str): return ctx.invalid_type(ParsedType.STRING).abort()
        return ctx.ok(ctx.raw_data)


@dataclass(frozen=True, slots=True, eq=False)
class NumberSchema(Schema):
    kind = SchemaKind.NUMBER

    @property
    def hint(self) -> str: return "int | float"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if not is_number(ctx.raw_data): return ctx.invalid_type(ParsedType.NUMBER).abort()
        return ctx.ok(ctx.raw_data)


@dataclass(frozen=True, slots=True, eq=False)
class BigIntSchema(Schema):
    kind = SchemaKind.BIGINT

    @property
    def hint(self) -> str: return "int"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, int) or isinstance(data, bool): return ctx.invalid_type(ParsedType.INTEGER).abort()
        return ctx.ok(data)


@dataclass(frozen=True, slots=True, eq=False)
class NaNSchema(Schema):
    kind = SchemaKind.NAN

    @property
    def hint(self) -> str: return "NaN"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not (isinstance(data, float) and math.isnan(data)): return ctx.invalid_type(ParsedType.NAN).abort()
        return ctx.ok(data)


# ============================================================================
# Boolean
# ============================================================================

@dataclass(frozen=True, slots=True)
class BooleanCoercion:
    """Selective coercion: extra values that map to True / False."""
    true_values: tuple[Any, ...] = ()
    false_values: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True, eq=False)
class BooleanSchema(Schema):
    """Strict bool, optionally coerced.

    coercion:
        False              strict, only bool passes
        True               any value is cast through truthiness
        BooleanCoercion    listed values map to True / False first
    """
    coercion: Union[bool, BooleanCoercion] = False
    kind = SchemaKind.BOOLEAN

    @property
    def hint(self) -> str: return "bool"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if self.coercion is True:
            data = bool(data)
        elif isinstance(self.coercion, BooleanCoercion) and is_primitive(data):
            if any(same_value(data, v) for v in self.coercion.true_values): data = True
            elif any(same_value(data, v) for v in self.coercion.false_values): data = False
        ctx.set_data(data)
        if not isinstance(data, bool): return ctx.invalid_type(ParsedType.BOOLEAN).abort()
        return ctx.ok(data)

    def coerce(self, policy: Union[bool, BooleanCoercion, Mapping[str, Iterable[Any]]] = True) -> BooleanSchema:
        """Set the coercion policy. A mapping may carry ``true`` / ``false`` value lists."""
        if isinstance(policy, Mapping):
            policy = BooleanCoercion(true_values=tuple(policy.get("true", ())),
                false_values=tuple(policy.get("false", ())))
        return replace(self, coercion=policy)

    def truthy(self, values: Iterable[Any]) -> BooleanSchema:
        """Values that parse as True. Keeps any falsy list already set."""
        current = self.coercion if isinstance(self.coercion, BooleanCoercion) else BooleanCoercion()
        return replace(self, coercion=replace(current, true_values=tuple(values)))

    def falsy(self, values: Iterable[Any]) -> BooleanSchema:
        """Values that parse as False. Keeps any truthy list already set."""
        current = self.coercion if isinstance(self.coercion, BooleanCoercion) else BooleanCoercion()
        return replace(self, coercion=replace(current, false_values=tuple(values)))


@dataclass(frozen=True, slots=True, eq=False)
class TrueSchema(Schema):
    kind = SchemaKind.TRUE

    @property
    def hint(self) -> str: return "Literal[True]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is not True: return ctx.invalid_type(ParsedType.TRUE).abort()
        return ctx.ok(True)


@dataclass(frozen=True, slots=True, eq=False)
class FalseSchema(Schema):
    kind = SchemaKind.FALSE

    @property
    def hint(self) -> str: return "Literal[False]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is not False: return ctx.invalid_type(ParsedType.FALSE).abort()
        return ctx.ok(False)


# ============================================================================
# Date
# ============================================================================

DateCoercion = Union[bool, Literal["strings", "numbers"]]
DateInput = Union[datetime, str, int, float]


def parse_iso8601(value: str) -> datetime | None:
    """Parse an ISO-8601 string, accepting a trailing ``Z``."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def from_timestamp(value: int | float) -> datetime | None:
    """POSIX seconds as an aware UTC datetime."""
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _to_bound(value: DateInput) -> datetime | str:
    """Normalize a check bound. ``"now"`` stays symbolic until parse time."""
    if isinstance(value, datetime) or value == "now": return value
    if isinstance(value, str):
        if (parsed := parse_iso8601(value)) is None: raise ValueError(f"Invalid date bound: {value!r}")
        return parsed
    if is_number(value):
        if (parsed := from_timestamp(value)) is None: raise ValueError(f"Invalid date bound: {value!r}")
        return parsed
    raise TypeError(f"Unsupported date bound: {value!r}")


def _resolve_bound(bound: datetime | str, like: datetime) -> datetime:
    if bound == "now": return datetime.now(like.tzinfo)
    return bound


def _comparable(a: datetime, b: datetime) -> tuple[datetime, datetime]:
    """Align naive and aware datetimes, treating the naive side as UTC."""
    if (a.tzinfo is None) == (b.tzinfo is None): return a, b
    if a.tzinfo is None: return a.replace(tzinfo=timezone.utc), b
    return a, b.replace(tzinfo=timezone.utc)


def _after(a: datetime, b: datetime, inclusive: bool) -> bool:
    a, b = _comparable(a, b)
    return a >= b if inclusive else a > b


def _before(a: datetime, b: datetime, inclusive: bool) -> bool:
    a, b = _comparable(a, b)
    return a <= b if inclusive else a < b


def _date_check_passes(data: datetime, check: Check) -> bool:
    match check:
        case MinCheck(value=value, inclusive=inclusive):
            return _after(data, _resolve_bound(value, data), inclusive)
        case MaxCheck(value=value, inclusive=inclusive):
            return _before(data, _resolve_bound(value, data), inclusive)
        case RangeCheck(min=lo, max=hi):
            return (_after(data, _resolve_bound(lo, data), check.min_inclusive)
                and _before(data, _resolve_bound(hi, data), check.max_inclusive))
    return True


@dataclass(frozen=True, slots=True, eq=False)
class DateSchema(Schema):
    """``datetime`` values with optional coercion and bound checks.

    Coercion: ``"strings"`` parses ISO-8601, ``"numbers"`` reads POSIX
    seconds as UTC, ``True`` does both. Unparseable input is left as-is and
    fails the type check.

    ``min``/``max`` and ``range`` are mutually exclusive: setting one clears
    the other(s).
    """
    coercion: DateCoercion = False
    checks: tuple[Check, ...] = ()
    kind = SchemaKind.DATE

    @property
    def hint(self) -> str: return "datetime"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if self.coercion in (True, "strings") and isinstance(data, str):
            data = parse_iso8601(data) or data
        if self.coercion in (True, "numbers") and is_number(data):
            data = from_timestamp(data) or data
        ctx.set_data(data)

        if not isinstance(data, datetime): return ctx.invalid_type(ParsedType.DATETIME).abort()

        for check in self.checks:
            if _date_check_passes(data, check): continue
            ctx.invalid_check(IssueKind.INVALID_DATE, check)
            if ctx.abort_early: return ctx.abort()

        return ctx.abort() if ctx.is_invalid() else ctx.ok(data)

    def coerce(self, policy: DateCoercion = True) -> DateSchema:
        return replace(self, coercion=policy)

    def min(self, value: DateInput, *, inclusive: bool = True, message: str | None = None) -> DateSchema:
        check = MinCheck(_to_bound(value), inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.RANGE,)))

    def max(self, value: DateInput, *, inclusive: bool = True, message: str | None = None) -> DateSchema:
        check = MaxCheck(_to_bound(value), inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.RANGE,)))

    def range(
        self,
        min: DateInput,
        max: DateInput,
        *,
        inclusive: RangeInclusivity = "both",
        message: str | None = None,
    ) -> DateSchema:
        check = RangeCheck(_to_bound(min), _to_bound(max), inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.MIN, CheckKind.MAX)))

    def after(self, value: DateInput, *, message: str | None = None) -> DateSchema:
        return self.min(value, inclusive=False, message=message)

    def same_or_after(self, value: DateInput, *, message: str | None = None) -> DateSchema:
        return self.min(value, inclusive=True, message=message)

    def before(self, value: DateInput, *, message: str | None = None) -> DateSchema:
        return self.max(value, inclusive=False, message=message)

    def same_or_before(self, value: DateInput, *, message: str | None = None) -> DateSchema:
        return self.max(value, inclusive=True, message=message)

    def between(
        self,
        start: DateInput,
        end: DateInput,
        *,
        inclusive: RangeInclusivity = "both",
        message: str | None = None,
    ) -> DateSchema:
        return self.range(start, end, inclusive=inclusive, message=message)


# ============================================================================
# Unit types
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class SymbolSchema(Schema):
    kind = SchemaKind.SYMBOL

    @property
    def hint(self) -> str: return "Symbol"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if not isinstance(ctx.raw_data, Symbol): return ctx.invalid_type(ParsedType.SYMBOL).abort()
        return ctx.ok(ctx.raw_data)


@dataclass(frozen=True, slots=True, eq=False)
class NullSchema(Schema):
    kind = SchemaKind.NULL

    @property
    def hint(self) -> str: return "None"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is not None: return ctx.invalid_type(ParsedType.NONE).abort()
        return ctx.ok(None)


@dataclass(frozen=True, slots=True, eq=False)
class UndefinedSchema(Schema):
    kind = SchemaKind.UNDEFINED

    @property
    def hint(self) -> str: return "undefined"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is not UNDEFINED: return ctx.invalid_type(ParsedType.UNDEFINED).abort()
        return ctx.ok(UNDEFINED)


@dataclass(frozen=True, slots=True, eq=False)
class VoidSchema(Schema):
    kind = SchemaKind.VOID

    @property
    def hint(self) -> str: return "void"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is not UNDEFINED: return ctx.invalid_type(ParsedType.UNDEFINED).abort()
        return ctx.ok(UNDEFINED)


@dataclass(frozen=True, slots=True, eq=False)
class AnySchema(Schema):
    kind = SchemaKind.ANY

    @property
    def hint(self) -> str: return "Any"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        return ctx.ok(ctx.raw_data)


@dataclass(frozen=True, slots=True, eq=False)
class UnknownSchema(Schema):
    kind = SchemaKind.UNKNOWN

    @property
    def hint(self) -> str: return "object"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        return ctx.ok(ctx.raw_data)


@dataclass(frozen=True, slots=True, eq=False)
class NeverSchema(Schema):
    kind = SchemaKind.NEVER

    @property
    def hint(self) -> str: return "Never"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        return ctx.forbidden().abort()


# ============================================================================
# Literal, Enum, Instance-of
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class LiteralSchema(Schema):
    value: Any
    kind = SchemaKind.LITERAL

    @property
    def hint(self) -> str: return f"Literal[{literalize(self.value)}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not is_primitive(data): return ctx.invalid_type(ParsedType.PRIMITIVE).abort()
        if not same_value(data, self.value): return ctx.invalid_literal(self.value).abort()
        return ctx.ok(data)


EnumSource = Union[Iterable[Union[str, int]], Mapping[str, Union[str, int]], type[enum.Enum]]


def _enum_members(source: EnumSource) -> dict[str, str | int]:
    if isinstance(source, type) and issubclass(source, enum.Enum):
        return {member.name: member.value for member in source}
    if isinstance(source, Mapping):
        return dict(source)
    return {str(value): value for value in source}


@dataclass(frozen=True, slots=True, eq=False)
class EnumSchema(Schema):
    """A fixed set of ``str`` / ``int`` values. ``enum.Enum`` members parse to their value."""
    members: Mapping[str, str | int]
    kind = SchemaKind.ENUM

    @classmethod
    def create(cls, source: EnumSource) -> EnumSchema:
        members = _enum_members(source)
        if not members: raise ValueError("An enum needs at least one value")
        bad = [v for v in members.values() if isinstance(v, bool) or not isinstance(v, (str, int))]
        if bad: raise TypeError(f"Enum values must be str or int, got {bad!r}")
        return cls(MappingProxyType(members))

    @property
    def values(self) -> tuple[str | int, ...]: return tuple(self.members.values())

    @property
    def enum(self) -> Mapping[str, str | int]: return self.members

    @property
    def hint(self) -> str: return " | ".join(literalize(v) for v in self.values)

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if isinstance(data, enum.Enum): data = data.value
        if isinstance(data, bool) or not isinstance(data, (str, int)):
            return ctx.invalid_type(ParsedType.ENUM_VALUE).abort()
        for value in self.values:
            if same_value(data, value): return ctx.ok(value)
        return ctx.invalid_enum_value(self.values).abort()

    def extract(self, *values: str | int) -> EnumSchema:
        """Enum of only ``values``, in declaration order."""
        return EnumSchema.create({k: v for k, v in self.members.items() if any(same_value(v, x) for x in values)})

    def exclude(self, *values: str | int) -> EnumSchema:
        return EnumSchema.create({k: v for k, v in self.members.items() if not any(same_value(v, x) for x in values)})


@dataclass(frozen=True, slots=True, eq=False)
class InstanceOfSchema(Schema):
    cls: type
    kind = SchemaKind.INSTANCE_OF

    @property
    def hint(self) -> str: return self.cls.__name__

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if not isinstance(ctx.raw_data, self.cls): return ctx.invalid_instance(self.cls.__name__).abort()
        return ctx.ok(ctx.raw_data)
