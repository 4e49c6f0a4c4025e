"""Union & Intersection

Union: members are tried in declaration order, each on an isolated clone;
the first success wins. Synchronous parses stop at that first success.
Asynchronous parses run all members concurrently and still pick the first
declared success. When every member fails, one InvalidUnion issue carries
all member issues.

Intersection: every member must succeed on a linked clone; outputs are then
folded left to right through ``merge_values``. An irreconcilable pair yields
a single InvalidIntersection issue.
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from shapeguard.validation.parse import ParseContext, ParseResult
from shapeguard.validation.parsed_type import get_parsed_type

from .base import Schema, SchemaKind


@dataclass(frozen=True, slots=True, eq=False)
class UnionSchema(Schema):
    members: tuple[Schema, ...]
    kind = SchemaKind.UNION

    def __post_init__(self):
        if len(self.members) < 1: raise ValueError("A union needs at least one member")

    @property
    def hint(self) -> str: return " | ".join(member.hint for member in self.members)

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        clones = [ctx.clone(member, isolated=True) for member in self.members]

        if ctx.is_async:
            results = await asyncio.gather(*(m._parse(c) for m, c in zip(self.members, clones)))
        else:
            results = []
            for member, clone in zip(self.members, clones):
                results.append(result := await member._parse(clone))
                if result.ok: break

        for result in results:
            if result.ok: return result

        union_issues = tuple(issue for clone in clones for issue in clone.issues)
        return ctx.invalid_union(union_issues).abort()


# ============================================================================
# Intersection
# ============================================================================

_NO_MERGE = object()


def merge_values(a: Any, b: Any) -> Any:
    """Reconcile two outputs of the same input. Returns ``_NO_MERGE`` on conflict."""
    a_type, b_type = get_parsed_type(a), get_parsed_type(b)
    if a is b: return a
    if a_type is not b_type: return _NO_MERGE

    if isinstance(a, Mapping):
        merged = dict(a)
        for key, value in b.items():
            if key not in merged:
                merged[key] = value
                continue
            if (shared := merge_values(merged[key], value)) is _NO_MERGE: return _NO_MERGE
            merged[key] = shared
        return merged

    if isinstance(a, (list, tuple)):
        if len(a) != len(b): return _NO_MERGE
        items = []
        for left, right in zip(a, b):
            if (item := merge_values(left, right)) is _NO_MERGE: return _NO_MERGE
            items.append(item)
        return type(a)(items)

    if isinstance(a, datetime):
        return a if a == b else _NO_MERGE

    return a


@dataclass(frozen=True, slots=True, eq=False)
class IntersectionSchema(Schema):
    members: tuple[Schema, ...]
    kind = SchemaKind.INTERSECTION

    def __post_init__(self):
        if len(self.members) < 2: raise ValueError("An intersection needs at least two members")

    @property
    def hint(self) -> str: return " & ".join(member.hint for member in self.members)

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        clones = [ctx.clone(member) for member in self.members]

        if ctx.is_async and not ctx.abort_early:
            results = await asyncio.gather(*(m._parse(c) for m, c in zip(self.members, clones)))
        else:
            results = []
            for member, clone in zip(self.members, clones):
                results.append(result := await member._parse(clone))
                if not result.ok and ctx.abort_early: return ctx.abort()

        if not all(result.ok for result in results): return ctx.abort()

        merged = results[0].data
        for result in results[1:]:
            if (merged := merge_values(merged, result.data)) is _NO_MERGE:
                return ctx.invalid_intersection().abort()
        return ctx.ok(merged)
