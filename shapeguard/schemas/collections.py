"""Collection Schemas

Element-wise validation through child contexts (one path segment per index
or key), preceded by declarative size and order checks.

    array   list | tuple  -> list
    set     set | frozenset -> set
    tuple   list | tuple  -> tuple, fixed positions plus optional rest
    record  Mapping -> dict, key schema defaults to str
    map     Mapping -> dict, any hashable keys; issues at (index, "key"|"value")
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from shapeguard.validation.issues import (
    Check, CheckKind, IssueKind, LengthCheck, MaxCheck, MinCheck, SizeCheck, SortCheck, with_check,
)
from shapeguard.validation.parse import ParseContext, ParseResult
from shapeguard.validation.parsed_type import ParsedType

from .base import Schema, SchemaKind
from .primitives import StringSchema


def _size_passes(size: int, check: Check) -> bool:
    match check:
        case MinCheck(value=value, inclusive=inclusive):
            return size >= value if inclusive else size > value
        case MaxCheck(value=value, inclusive=inclusive):
            return size <= value if inclusive else size < value
        case LengthCheck(value=value) | SizeCheck(value=value):
            return size == value
    return True


def _sorted(items: list[Any], direction: str) -> list[Any] | None:
    """``items`` in the requested order, or None when they cannot be ordered."""
    try:
        return sorted(items, reverse=direction == "descending")
    except TypeError:
        return None


async def _parse_elements(ctx: ParseContext, element: Schema, items: list[Any]) -> list[Any] | None:
    """Validate items in order. Returns None when abort-early stops the loop."""
    result: list[Any] = []
    for index, item in enumerate(items):
        outcome = await element._parse(ctx.child(element, item, index))
        if outcome.ok: result.append(outcome.data)
        elif ctx.abort_early: return None
    return result


# ============================================================================
# Array
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class ArraySchema(Schema):
    element: Schema
    checks: tuple[Check, ...] = ()
    kind = SchemaKind.ARRAY

    @property
    def hint(self) -> str: return f"list[{self.element.hint}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, (list, tuple)): return ctx.invalid_type(ParsedType.SEQUENCE).abort()
        items = list(data)

        for check in self.checks:
            if isinstance(check, SortCheck):
                ordered = _sorted(items, check.direction)
                if ordered is not None and (check.convert or ordered == items):
                    items = ordered
                    continue
            elif _size_passes(len(items), check):
                continue
            ctx.invalid_check(IssueKind.INVALID_ARRAY, check)
            if ctx.abort_early: return ctx.abort()
        ctx.set_data(items)

        result = await _parse_elements(ctx, self.element, items)
        if result is None or ctx.is_invalid(): return ctx.abort()
        return ctx.ok(result)

    def min(self, value: int, *, inclusive: bool = True, message: str | None = None) -> ArraySchema:
        check = MinCheck(value, inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.LENGTH,)))

    def max(self, value: int, *, inclusive: bool = True, message: str | None = None) -> ArraySchema:
        check = MaxCheck(value, inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.LENGTH,)))

    def length(self, value: int, *, message: str | None = None) -> ArraySchema:
        check = LengthCheck(value, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.MIN, CheckKind.MAX)))

    def nonempty(self, *, message: str | None = None) -> ArraySchema:
        return self.min(1, message=message)

    def ascending(self, *, convert: bool = False, message: str | None = None) -> ArraySchema:
        """Require ascending order, or with ``convert`` sort the output instead."""
        check = SortCheck("ascending", convert=convert, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.SORT_DESCENDING,)))

    def descending(self, *, convert: bool = False, message: str | None = None) -> ArraySchema:
        check = SortCheck("descending", convert=convert, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.SORT_ASCENDING,)))

    def flatten(self) -> Schema:
        """The element schema when it is itself an array, else this schema."""
        return self.element if isinstance(self.element, ArraySchema) else self


# ============================================================================
# Set
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class SetSchema(Schema):
    element: Schema
    checks: tuple[Check, ...] = ()
    kind = SchemaKind.SET

    @property
    def hint(self) -> str: return f"set[{self.element.hint}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, (set, frozenset)): return ctx.invalid_type(ParsedType.SET).abort()

        for check in self.checks:
            if _size_passes(len(data), check): continue
            ctx.invalid_check(IssueKind.INVALID_SET, check)
            if ctx.abort_early: return ctx.abort()

        result = await _parse_elements(ctx, self.element, list(data))
        if result is None or ctx.is_invalid(): return ctx.abort()
        return ctx.ok(set(result))

    def min(self, value: int, *, inclusive: bool = True, message: str | None = None) -> SetSchema:
        check = MinCheck(value, inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.SIZE,)))

    def max(self, value: int, *, inclusive: bool = True, message: str | None = None) -> SetSchema:
        check = MaxCheck(value, inclusive=inclusive, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.SIZE,)))

    def size(self, value: int, *, message: str | None = None) -> SetSchema:
        check = SizeCheck(value, message=message)
        return replace(self, checks=with_check(self.checks, check, clears=(CheckKind.MIN, CheckKind.MAX)))

    def nonempty(self, *, message: str | None = None) -> SetSchema:
        return self.min(1, message=message)


# ============================================================================
# Tuple
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class TupleSchema(Schema):
    """Fixed positions, plus ``rest_node`` for any overflow positions."""
    items: tuple[Schema, ...]
    rest_node: Schema | None = None
    kind = SchemaKind.TUPLE

    @property
    def hint(self) -> str:
        parts = [item.hint for item in self.items]
        if self.rest_node is not None: parts.append(f"*tuple[{self.rest_node.hint}, ...]")
        return f"tuple[{', '.join(parts)}]" if parts else "tuple[()]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, (list, tuple)): return ctx.invalid_type(ParsedType.SEQUENCE).abort()

        declared = len(self.items)
        if len(data) < declared:
            ctx.invalid_check(IssueKind.INVALID_TUPLE, MinCheck(declared))
            return ctx.abort()
        if len(data) > declared and self.rest_node is None:
            ctx.invalid_check(IssueKind.INVALID_TUPLE, MaxCheck(declared))
            if ctx.abort_early: return ctx.abort()

        result: list[Any] = []
        for index, item in enumerate(data):
            schema = self.items[index] if index < declared else self.rest_node
            if schema is None: break
            outcome = await schema._parse(ctx.child(schema, item, index))
            if outcome.ok: result.append(outcome.data)
            elif ctx.abort_early: return ctx.abort()

        return ctx.abort() if ctx.is_invalid() else ctx.ok(tuple(result))

    def rest(self, node: Schema) -> TupleSchema:
        return replace(self, rest_node=node)


# ============================================================================
# Record & Map
# ============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class RecordSchema(Schema):
    """Every key validated by ``key``, every value by ``value``."""
    value: Schema
    key: Schema = StringSchema()
    kind = SchemaKind.RECORD

    @property
    def hint(self) -> str: return f"dict[{self.key.hint}, {self.value.hint}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, Mapping): return ctx.invalid_type(ParsedType.DICT).abort()

        result: dict[Any, Any] = {}
        for raw_key, raw_value in data.items():
            key = await self.key._parse(ctx.child(self.key, raw_key, raw_key))
            if not key.ok and ctx.abort_early: return ctx.abort()
            value = await self.value._parse(ctx.child(self.value, raw_value, raw_key))
            if key.ok and value.ok: result[key.data] = value.data
            elif ctx.abort_early: return ctx.abort()

        return ctx.abort() if ctx.is_invalid() else ctx.ok(result)

    @property
    def element(self) -> Schema: return self.value


@dataclass(frozen=True, slots=True, eq=False)
class MapSchema(Schema):
    key: Schema
    value: Schema
    kind = SchemaKind.MAP

    @property
    def hint(self) -> str: return f"Mapping[{self.key.hint}, {self.value.hint}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, Mapping): return ctx.invalid_type(ParsedType.DICT).abort()

        result: dict[Any, Any] = {}
        for index, (raw_key, raw_value) in enumerate(data.items()):
            entry = ctx.child(self, (raw_key, raw_value), index)
            key = await self.key._parse(entry.child(self.key, raw_key, "key"))
            if not key.ok and ctx.abort_early: return ctx.abort()
            value = await self.value._parse(entry.child(self.value, raw_value, "value"))
            if key.ok and value.ok: result[key.data] = value.data
            elif ctx.abort_early: return ctx.abort()

        return ctx.abort() if ctx.is_invalid() else ctx.ok(result)
