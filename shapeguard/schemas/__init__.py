"""Schema Nodes

Leaf, wrapper, collection, object, composite, effect and function schemas,
plus the builder functions used to declare them.
"""

from .base import Schema, SchemaKind, SchemaOptions

from .primitives import (
    AnySchema,
    BigIntSchema,
    BooleanCoercion,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    FalseSchema,
    InstanceOfSchema,
    LiteralSchema,
    NaNSchema,
    NeverSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
    SymbolSchema,
    TrueSchema,
    UndefinedSchema,
    UnknownSchema,
    VoidSchema,
)
from .wrappers import (
    BrandedSchema,
    CatchSchema,
    DefaultSchema,
    LazySchema,
    NullableSchema,
    OptionalSchema,
    PromiseSchema,
)
from .collections import ArraySchema, MapSchema, RecordSchema, SetSchema, TupleSchema
from .objects import ObjectSchema
from .composites import IntersectionSchema, UnionSchema, merge_values
from .effects import EffectContext, EffectsSchema, Preprocess, Refinement, Transform
from .functions import FunctionSchema

from .builders import (
    any_,
    array,
    bigint,
    boolean,
    branded,
    catch,
    date,
    default,
    enum,
    false_,
    function,
    instanceof,
    intersection,
    lazy,
    literal,
    map_,
    nan,
    never,
    null,
    nullable,
    nullish,
    number,
    object_,
    optional,
    passthrough_object,
    preprocess,
    promise,
    record,
    refine,
    set_,
    strict_object,
    string,
    symbol,
    transform,
    true_,
    tuple_,
    undefined,
    union,
    unknown,
    void,
)

__all__ = [
    # Base
    "Schema",
    "SchemaKind",
    "SchemaOptions",
    # Leaves
    "StringSchema",
    "NumberSchema",
    "BigIntSchema",
    "NaNSchema",
    "BooleanSchema",
    "BooleanCoercion",
    "TrueSchema",
    "FalseSchema",
    "DateSchema",
    "SymbolSchema",
    "NullSchema",
    "UndefinedSchema",
    "VoidSchema",
    "AnySchema",
    "UnknownSchema",
    "NeverSchema",
    "LiteralSchema",
    "EnumSchema",
    "InstanceOfSchema",
    # Wrappers
    "OptionalSchema",
    "NullableSchema",
    "DefaultSchema",
    "CatchSchema",
    "BrandedSchema",
    "LazySchema",
    "PromiseSchema",
    # Collections & objects
    "ArraySchema",
    "SetSchema",
    "TupleSchema",
    "RecordSchema",
    "MapSchema",
    "ObjectSchema",
    # Composites
    "UnionSchema",
    "IntersectionSchema",
    "merge_values",
    # Effects
    "EffectsSchema",
    "EffectContext",
    "Preprocess",
    "Refinement",
    "Transform",
    # Functions
    "FunctionSchema",
    # Builders
    "string", "number", "bigint", "nan", "boolean", "true_", "false_", "date",
    "symbol", "null", "undefined", "void", "any_", "unknown", "never",
    "literal", "enum", "instanceof",
    "optional", "nullable", "nullish", "default", "catch", "branded", "lazy", "promise",
    "array", "set_", "tuple_", "record", "map_",
    "object_", "strict_object", "passthrough_object",
    "union", "intersection", "refine", "transform", "preprocess", "function",
]
