"""Wrapper Schemas

Wrappers reinterpret the same position under an inner schema through a
clone context, adding one behaviour on the way:

    optional   UNDEFINED passes as-is
    nullable   None passes as-is
    default    UNDEFINED is replaced before delegating
    catch      failure is replaced by a fallback value
    branded    nominal marker, no runtime effect
    lazy       inner schema resolved from a thunk at parse time
    promise    awaitable payload validated asynchronously
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable

from shapeguard.validation.parse import ParseContext, ParseOptions, ParseResult
from shapeguard.validation.parsed_type import ParsedType
from shapeguard.validation.utils import UNDEFINED, clone_deep

from .base import Schema, SchemaKind


def _unwrap_deep(schema: Schema, *wrapper_types: type) -> Schema:
    while isinstance(schema, wrapper_types):
        schema = schema.inner
    return schema


@dataclass(frozen=True, slots=True, eq=False)
class OptionalSchema(Schema):
    inner: Schema
    kind = SchemaKind.OPTIONAL

    @property
    def hint(self) -> str: return f"{self.inner.hint} | undefined"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is UNDEFINED: return ctx.ok(UNDEFINED)
        return await self.inner._parse(ctx.clone(self.inner))

    def unwrap(self) -> Schema: return self.inner

    def unwrap_deep(self) -> Schema:
        return _unwrap_deep(self, OptionalSchema, NullableSchema)


@dataclass(frozen=True, slots=True, eq=False)
class NullableSchema(Schema):
    inner: Schema
    kind = SchemaKind.NULLABLE

    @property
    def hint(self) -> str: return f"{self.inner.hint} | None"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if ctx.raw_data is None: return ctx.ok(None)
        return await self.inner._parse(ctx.clone(self.inner))

    def unwrap(self) -> Schema: return self.inner

    def unwrap_deep(self) -> Schema:
        return _unwrap_deep(self, OptionalSchema, NullableSchema)


@dataclass(frozen=True, slots=True, eq=False)
class DefaultSchema(Schema):
    """Absent input becomes ``default_value`` (called when it is callable)."""
    inner: Schema
    default_value: Any
    kind = SchemaKind.DEFAULT

    @property
    def hint(self) -> str: return self.inner.hint

    def get_default(self) -> Any:
        if callable(self.default_value): return self.default_value()
        return clone_deep(self.default_value)

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        inner_ctx = ctx.clone(self.inner)
        if ctx.raw_data is UNDEFINED: inner_ctx.set_data(self.get_default())
        return await self.inner._parse(inner_ctx)

    def remove_default(self) -> Schema: return self.inner

    def unwrap(self) -> Schema: return self.inner


@dataclass(frozen=True, slots=True, eq=False)
class CatchSchema(Schema):
    """Failure becomes ``catch_value`` (called when it is callable)."""
    inner: Schema
    catch_value: Any
    kind = SchemaKind.CATCH

    @property
    def hint(self) -> str: return self.inner.hint

    def get_catch(self) -> Any:
        if callable(self.catch_value): return self.catch_value()
        return clone_deep(self.catch_value)

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        result = await self.inner._parse(ctx.clone(self.inner, isolated=True))
        if result.ok: return result
        return ctx.ok(self.get_catch())

    def remove_catch(self) -> Schema: return self.inner

    def unwrap(self) -> Schema: return self.inner


@dataclass(frozen=True, slots=True, eq=False)
class BrandedSchema(Schema):
    inner: Schema
    brand_name: str
    kind = SchemaKind.BRANDED

    @property
    def hint(self) -> str: return f"{self.inner.hint} @ {self.brand_name}"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        return await self.inner._parse(ctx.clone(self.inner))

    def get_brand(self) -> str: return self.brand_name

    def remove_brand(self) -> Schema: return self.inner

    def unwrap(self) -> Schema: return self.inner


@dataclass(frozen=True, slots=True, eq=False)
class LazySchema(Schema):
    """Defers to ``getter()`` on every parse. The only way to build recursive schemas."""
    getter: Callable[[], Schema]
    kind = SchemaKind.LAZY

    @property
    def hint(self) -> str: return "Lazy"

    @property
    def schema(self) -> Schema: return self.getter()

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        inner = self.getter()
        return await inner._parse(ctx.clone(inner))


@dataclass(frozen=True, slots=True, eq=False)
class PromiseSchema(Schema):
    """Awaitable input. The output is an awaitable that validates the settled value.

    In synchronous mode the input must already be awaitable; in asynchronous
    mode a plain value is accepted and wrapped.
    """
    inner: Schema
    kind = SchemaKind.PROMISE

    @property
    def hint(self) -> str: return f"Awaitable[{self.inner.hint}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not inspect.isawaitable(data) and not ctx.is_async:
            return ctx.invalid_type(ParsedType.AWAITABLE).abort()
        options = ParseOptions(abort_early=ctx.abort_early, error_map=ctx.common.error_map,
            registry=ctx.common.registry)
        inner = self.inner

        async def settle() -> Any:
            value = await data if inspect.isawaitable(data) else data
            return await inner.parse_async(value, options)

        return ctx.ok(settle())

    def unwrap(self) -> Schema: return self.inner
