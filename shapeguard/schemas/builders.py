"""Schema Builders

Factory functions for every schema kind. Names that would shadow a builtin
carry a trailing underscore (``object_``, ``tuple_``, ``set_``, ``map_``,
``any_``, ``true_``, ``false_``).

Usage:
    import shapeguard as sg

    User = sg.object_({
        "name": sg.string(),
        "age": sg.number().optional(),
        "tags": sg.array(sg.string()).max(5),
    })
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Sequence

from .base import Schema
from .collections import ArraySchema, MapSchema, RecordSchema, SetSchema, TupleSchema
from .composites import IntersectionSchema, UnionSchema
from .effects import EffectsSchema, Preprocess, Refinement, Transform
from .functions import FunctionSchema
from .objects import ObjectSchema
from .primitives import (
    AnySchema, BigIntSchema, BooleanSchema, DateSchema, EnumSchema, EnumSource, FalseSchema,
    InstanceOfSchema, LiteralSchema, NaNSchema, NeverSchema, NullSchema, NumberSchema,
    StringSchema, SymbolSchema, TrueSchema, UndefinedSchema, UnknownSchema, VoidSchema,
)
from .wrappers import (
    BrandedSchema, CatchSchema, DefaultSchema, LazySchema, NullableSchema, OptionalSchema,
    PromiseSchema,
)


# ============================================================================
# Leaves
# ============================================================================

def string() -> StringSchema: return StringSchema()
def number() -> NumberSchema: return NumberSchema()
def bigint() -> BigIntSchema: return BigIntSchema()
def nan() -> NaNSchema: return NaNSchema()
def boolean() -> BooleanSchema: return BooleanSchema()
def true_() -> TrueSchema: return TrueSchema()
def false_() -> FalseSchema: return FalseSchema()
def date() -> DateSchema: return DateSchema()
def symbol() -> SymbolSchema: return SymbolSchema()
def null() -> NullSchema: return NullSchema()
def undefined() -> UndefinedSchema: return UndefinedSchema()
def void() -> VoidSchema: return VoidSchema()
def any_() -> AnySchema: return AnySchema()
def unknown() -> UnknownSchema: return UnknownSchema()
def never() -> NeverSchema: return NeverSchema()


def literal(value: Any) -> LiteralSchema:
    return LiteralSchema(value)


def enum(source: EnumSource, *more: str | int) -> EnumSchema:
    """``enum(["a", "b"])``, ``enum("a", "b")``, ``enum(Color)`` or ``enum({"A": 1})``."""
    if isinstance(source, (str, int)): source = (source, *more)
    return EnumSchema.create(source)


def instanceof(cls: type) -> InstanceOfSchema:
    return InstanceOfSchema(cls)


# ============================================================================
# Wrappers
# ============================================================================

def optional(schema: Schema) -> OptionalSchema: return OptionalSchema(schema)
def nullable(schema: Schema) -> NullableSchema: return NullableSchema(schema)
def nullish(schema: Schema) -> OptionalSchema: return OptionalSchema(NullableSchema(schema))
def default(schema: Schema, value: Any) -> DefaultSchema: return DefaultSchema(schema, value)
def catch(schema: Schema, value: Any) -> CatchSchema: return CatchSchema(schema, value)
def branded(schema: Schema, brand: str) -> BrandedSchema: return BrandedSchema(schema, brand)
def lazy(getter: Callable[[], Schema]) -> LazySchema: return LazySchema(getter)
def promise(schema: Schema) -> PromiseSchema: return PromiseSchema(schema)


# ============================================================================
# Collections & Objects
# ============================================================================

def array(element: Schema) -> ArraySchema:
    return ArraySchema(element)


def set_(element: Schema) -> SetSchema:
    return SetSchema(element)


def tuple_(items: Sequence[Schema], rest: Schema | None = None) -> TupleSchema:
    return TupleSchema(tuple(items), rest)


def record(key_or_value: Schema, value: Schema | None = None) -> RecordSchema:
    """``record(value)`` uses string keys; ``record(key, value)`` validates keys too."""
    if value is None: return RecordSchema(key_or_value)
    return RecordSchema(value, key_or_value)


def map_(key: Schema, value: Schema) -> MapSchema:
    return MapSchema(key, value)


def object_(shape: Mapping[str, Schema]) -> ObjectSchema:
    return ObjectSchema.create(shape)


def strict_object(shape: Mapping[str, Schema]) -> ObjectSchema:
    return ObjectSchema.create(shape, unknown_keys="strict")


def passthrough_object(shape: Mapping[str, Schema]) -> ObjectSchema:
    return ObjectSchema.create(shape, unknown_keys="passthrough")


# ============================================================================
# Composites, Effects, Functions
# ============================================================================

def union(members: Iterable[Schema]) -> UnionSchema:
    return UnionSchema(tuple(members))


def intersection(members: Iterable[Schema]) -> IntersectionSchema:
    return IntersectionSchema(tuple(members))


def refine(schema: Schema, check: Callable[..., Any], message: Any = None) -> EffectsSchema:
    return EffectsSchema(schema, Refinement(check, message))


def transform(schema: Schema, fn: Callable[..., Any]) -> EffectsSchema:
    return EffectsSchema(schema, Transform(fn))


def preprocess(fn: Callable[[Any], Any], schema: Schema) -> EffectsSchema:
    return EffectsSchema(schema, Preprocess(fn))


def function(parameters: TupleSchema | Sequence[Schema] | None = None, returns: Schema | None = None) -> FunctionSchema:
    """Callable schema. ``parameters`` defaults to any arguments, ``returns`` to unknown."""
    schema = FunctionSchema()
    if isinstance(parameters, TupleSchema): schema = FunctionSchema(parameters, schema.return_type)
    elif parameters is not None: schema = schema.args(*parameters).rest(None)
    return schema.returns(returns) if returns is not None else schema
