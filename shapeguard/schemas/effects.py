"""Effect Engine

Effects wrap an underlying schema with user code:

    Preprocess(fn)            fn(raw) runs first, the result is validated
    Refinement(check, msg)    after success, a falsy check(value) adds a Custom issue
    Transform(fn)             after success, fn(value) becomes the output

User functions may return awaitables. They are awaited in asynchronous
parses; in synchronous parses an awaitable raises ``AsyncUsageError``.

Transforms and refinements taking two positional parameters receive an
``EffectContext`` as the second argument, which can record issues:

    def to_int(value, ctx):
        if not value.isdigit():
            ctx.add_issue("not a number")
        return int(value) if value.isdigit() else value
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Union

from shapeguard.validation.error_map import custom_payload
from shapeguard.validation.issues import IssueKind, Path
from shapeguard.validation.parse import ParseContext, ParseResult, resolve_maybe_awaitable

from .base import Schema, SchemaKind


def _takes_context(fn: Callable[..., Any]) -> bool:
    """True when ``fn`` accepts a second positional argument."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = [p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]
    return len(positional) >= 2 or any(p.kind is p.VAR_POSITIONAL for p in params)


@dataclass(frozen=True, slots=True)
class EffectContext:
    """Handle given to two-argument effect functions."""
    _ctx: ParseContext

    @property
    def path(self) -> Path: return self._ctx.path

    def add_issue(self, message: Any = None, *, kind: IssueKind = IssueKind.CUSTOM, payload: Any = None) -> None:
        """Record an issue at the current path. ``message`` builds a Custom payload."""
        if payload is None and kind is IssueKind.CUSTOM: payload = custom_payload(message, self._ctx.data)
        self._ctx.dirty(kind, payload)


@dataclass(frozen=True, slots=True)
class Preprocess:
    fn: Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class Refinement:
    """``message`` is a string, a ``{"message", "params"}`` mapping, or a function of the value."""
    check: Callable[..., Any]
    message: Any = None


@dataclass(frozen=True, slots=True)
class Transform:
    fn: Callable[..., Any]


Effect = Union[Preprocess, Refinement, Transform]


def _call(fn: Callable[..., Any], value: Any, ctx: ParseContext) -> Any:
    return fn(value, EffectContext(ctx)) if _takes_context(fn) else fn(value)


@dataclass(frozen=True, slots=True, eq=False)
class EffectsSchema(Schema):
    underlying: Schema
    effect: Effect
    kind = SchemaKind.EFFECTS

    @property
    def hint(self) -> str: return self.underlying.hint

    def inner_type(self) -> Schema:
        """The first non-effect schema below this one."""
        node: Schema = self
        while isinstance(node, EffectsSchema): node = node.underlying
        return node

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        match self.effect:
            case Preprocess(fn=fn):
                processed = await resolve_maybe_awaitable(ctx, fn(ctx.data), "preprocess")
                inner_ctx = ctx.clone(self.underlying).set_data(processed)
                return await self.underlying._parse(inner_ctx)

            case Refinement(check=check, message=message):
                result = await self.underlying._parse(ctx.clone(self.underlying))
                if not result.ok: return ctx.abort()
                passed = await resolve_maybe_awaitable(ctx, _call(check, result.data, ctx), "refinement")
                if not passed:
                    ctx.dirty(IssueKind.CUSTOM, custom_payload(message, result.data))
                    return ctx.abort()
                return ctx.abort() if ctx.is_invalid() else result

            case Transform(fn=fn):
                result = await self.underlying._parse(ctx.clone(self.underlying))
                if not result.ok: return ctx.abort()
                value = await resolve_maybe_awaitable(ctx, _call(fn, result.data, ctx), "transform")
                return ctx.abort() if ctx.is_invalid() else ctx.ok(value)

        raise AssertionError(f"Unhandled effect: {self.effect!r}")
