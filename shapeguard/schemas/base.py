"""Schema Base

Every schema node is a frozen, slotted dataclass. Derived schemas are new
values built with ``dataclasses.replace``; a node never changes after
construction, so one node can be shared by any number of graphs and parsed
concurrently.

Each concrete node implements one traversal step, ``_parse(ctx)``, as a
coroutine. The public entry points fix the execution mode:

    parse / safe_parse              synchronous, never suspends
    parse_async / safe_parse_async  asynchronous, awaits effects

Chaining helpers (``optional()``, ``refine()``, ``or_()``...) wrap the
receiver in the matching wrapper, composite or effect node.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Mapping, TypeVar

from shapeguard.config import get_settings
from shapeguard.errors import Ok
from shapeguard.logging import parse_logger
from shapeguard.validation.error_map import ErrorMap
from shapeguard.validation.parse import ParseContext, ParseOptions, ParseResult, run_sync
from shapeguard.validation.utils import UNDEFINED

if TYPE_CHECKING:
    from .collections import ArraySchema
    from .composites import IntersectionSchema, UnionSchema
    from .effects import EffectsSchema
    from .wrappers import (
        BrandedSchema, CatchSchema, DefaultSchema, LazySchema, NullableSchema,
        OptionalSchema, PromiseSchema,
    )

S = TypeVar("S", bound="Schema")
logger = parse_logger()

CallOptions = ParseOptions | Mapping[str, Any] | None


class SchemaKind(str, Enum):
    """Closed set of schema node kinds."""
    STRING = "string"
    NUMBER = "number"
    BIGINT = "bigint"
    NAN = "nan"
    BOOLEAN = "boolean"
    TRUE = "true"
    FALSE = "false"
    DATE = "date"
    SYMBOL = "symbol"
    NULL = "null"
    UNDEFINED = "undefined"
    VOID = "void"
    ANY = "any"
    UNKNOWN = "unknown"
    NEVER = "never"
    LITERAL = "literal"
    ENUM = "enum"
    INSTANCE_OF = "instance_of"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    CATCH = "catch"
    BRANDED = "branded"
    LAZY = "lazy"
    PROMISE = "promise"
    ARRAY = "array"
    SET = "set"
    TUPLE = "tuple"
    RECORD = "record"
    MAP = "map"
    OBJECT = "object"
    UNION = "union"
    INTERSECTION = "intersection"
    EFFECTS = "effects"
    FUNCTION = "function"


@dataclass(frozen=True, slots=True)
class SchemaOptions:
    """Per-node overrides, layered between registry and call-site options."""
    abort_early: bool | None = None
    error_map: ErrorMap | None = None


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Schema(ABC):
    """Base of every schema node."""
    options: SchemaOptions = field(default_factory=SchemaOptions)
    kind: ClassVar[SchemaKind]

    @property
    @abstractmethod
    def hint(self) -> str:
        """Python-typing-flavoured description used in issues and hints."""

    @abstractmethod
    async def _parse(self, ctx: ParseContext) -> ParseResult:
        """One traversal step over ``ctx``'s data."""

    def with_options(self: S, **changes: Any) -> S:
        return replace(self, options=replace(self.options, **changes))

    # ========================================================================
    # Entry points
    # ========================================================================

    def safe_parse(self, data: Any, options: CallOptions = None) -> ParseResult:
        """Parse synchronously. Never raises on bad data."""
        ctx = ParseContext.create(self, data, options, is_async=False)
        result = run_sync(self._parse(ctx))
        self._trace(ctx, result)
        return result

    def parse(self, data: Any, options: CallOptions = None) -> Any:
        """Parse synchronously, raising ``ValidationError`` on bad data."""
        result = self.safe_parse(data, options)
        if result.ok: return result.data
        raise result.error

    async def safe_parse_async(self, data: Any, options: CallOptions = None) -> ParseResult:
        ctx = ParseContext.create(self, data, options, is_async=True)
        result = await self._parse(ctx)
        self._trace(ctx, result)
        return result

    async def parse_async(self, data: Any, options: CallOptions = None) -> Any:
        result = await self.safe_parse_async(data, options)
        if result.ok: return result.data
        raise result.error

    def is_valid(self, data: Any) -> bool:
        """Type-guard style check."""
        return isinstance(self.safe_parse(data), Ok)

    def is_optional(self) -> bool: return self.is_valid(UNDEFINED)

    def is_nullable(self) -> bool: return self.is_valid(None)

    def _trace(self, ctx: ParseContext, result: ParseResult) -> None:
        if not get_settings().TRACE_PARSES: return
        logger.debug("parse.completed", schema=self.kind.value, mode="async" if ctx.is_async else "sync",
            ok=result.ok, issues=len(ctx.issues))

    # ========================================================================
    # Chaining
    # ========================================================================

    def optional(self) -> OptionalSchema:
        from .wrappers import OptionalSchema
        return OptionalSchema(self)

    def nullable(self) -> NullableSchema:
        from .wrappers import NullableSchema
        return NullableSchema(self)

    def nullish(self) -> OptionalSchema:
        return self.nullable().optional()

    def or_(self, *others: Schema) -> UnionSchema:
        from .composites import UnionSchema
        return UnionSchema((self, *others))

    def and_(self, *others: Schema) -> IntersectionSchema:
        from .composites import IntersectionSchema
        return IntersectionSchema((self, *others))

    def array(self) -> ArraySchema:
        from .collections import ArraySchema
        return ArraySchema(self)

    def promise(self) -> PromiseSchema:
        from .wrappers import PromiseSchema
        return PromiseSchema(self)

    def brand(self, brand: str) -> BrandedSchema:
        from .wrappers import BrandedSchema
        return BrandedSchema(self, brand)

    def default(self, value: Any) -> DefaultSchema:
        """Substitute ``value`` (or ``value()`` when callable) for absent input."""
        from .wrappers import DefaultSchema
        return DefaultSchema(self, value)

    def catch(self, value: Any) -> CatchSchema:
        """Substitute ``value`` (or ``value()`` when callable) when parsing fails."""
        from .wrappers import CatchSchema
        return CatchSchema(self, value)

    def lazy(self) -> LazySchema:
        from .wrappers import LazySchema
        return LazySchema(lambda: self)

    def refine(self, check: Callable[[Any], Any], message: Any = None) -> EffectsSchema:
        from .effects import EffectsSchema, Refinement
        return EffectsSchema(self, Refinement(check, message))

    def transform(self, fn: Callable[..., Any]) -> EffectsSchema:
        from .effects import EffectsSchema, Transform
        return EffectsSchema(self, Transform(fn))

    def preprocess(self, fn: Callable[[Any], Any]) -> EffectsSchema:
        from .effects import EffectsSchema, Preprocess
        return EffectsSchema(self, Preprocess(fn))
