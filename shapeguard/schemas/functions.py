"""Function Schema

Parsing a callable yields a wrapper that validates positional arguments
against ``parameters`` (a tuple schema) before the call and the return value
against ``returns`` after it. Failures raise ``ValidationError`` with one
InvalidArguments / InvalidReturnType issue carrying the nested error.
Coroutine functions get an async wrapper that parses both sides
asynchronously.

Usage:
    add = function(tuple_([number(), number()]), number()).implement(lambda a, b: a + b)
    add(1, 2)      # 3
    add(1, "2")    # raises ValidationError (invalid_arguments)
"""
from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, replace
from typing import Any, Callable

from shapeguard.validation.errors import ValidationError
from shapeguard.validation.parse import ParseContext, ParseOptions, ParseResult
from shapeguard.validation.parsed_type import ParsedType

from .base import Schema, SchemaKind
from .collections import TupleSchema
from .primitives import UnknownSchema


def _failure(schema: Schema, data: Any, options: ParseOptions, record: Callable[[ParseContext], Any]) -> ValidationError:
    """Build the outer error holding one nested-error issue."""
    ctx = ParseContext.create(schema, data, options)
    record(ctx)
    return ctx.abort().error


@dataclass(frozen=True, slots=True, eq=False)
class FunctionSchema(Schema):
    parameters: TupleSchema = TupleSchema((), UnknownSchema())
    return_type: Schema = UnknownSchema()
    kind = SchemaKind.FUNCTION

    @property
    def hint(self) -> str:
        return f"Callable[[{', '.join(item.hint for item in self.parameters.items)}], {self.return_type.hint}]"

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        if not callable(ctx.raw_data): return ctx.invalid_type(ParsedType.FUNCTION).abort()
        options = ParseOptions(abort_early=ctx.abort_early, error_map=ctx.common.error_map,
            registry=ctx.common.registry)
        return ctx.ok(self._wrap(ctx.raw_data, options))

    def _wrap(self, fn: Callable[..., Any], options: ParseOptions) -> Callable[..., Any]:
        parameters, return_type = self.parameters, self.return_type

        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_validated(*args: Any) -> Any:
                parsed_args = await parameters.safe_parse_async(args, options)
                if not parsed_args.ok:
                    raise _failure(self, args, options, lambda c: c.invalid_arguments(parsed_args.error))
                returned = await fn(*parsed_args.data)
                parsed_return = await return_type.safe_parse_async(returned, options)
                if not parsed_return.ok:
                    raise _failure(self, returned, options, lambda c: c.invalid_return_type(parsed_return.error))
                return parsed_return.data

            return async_validated

        @functools.wraps(fn)
        def validated(*args: Any) -> Any:
            parsed_args = parameters.safe_parse(args, options)
            if not parsed_args.ok:
                raise _failure(self, args, options, lambda c: c.invalid_arguments(parsed_args.error))
            returned = fn(*parsed_args.data)
            parsed_return = return_type.safe_parse(returned, options)
            if not parsed_return.ok:
                raise _failure(self, returned, options, lambda c: c.invalid_return_type(parsed_return.error))
            return parsed_return.data

        return validated

    # ========================================================================
    # Builders
    # ========================================================================

    def args(self, *items: Schema) -> FunctionSchema:
        """Replace the declared positional parameters, keeping any rest schema."""
        return replace(self, parameters=replace(self.parameters, items=tuple(items)))

    def rest(self, node: Schema | None) -> FunctionSchema:
        return replace(self, parameters=replace(self.parameters, rest_node=node))

    def returns(self, node: Schema) -> FunctionSchema:
        return replace(self, return_type=node)

    def implement(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Wrap ``fn`` with argument and return validation."""
        return self.parse(fn)

    validate = implement
