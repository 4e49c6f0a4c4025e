"""Object Schema & Shape Algebra

Validation walks the declared shape in order, one child context per field.
A field whose output is UNDEFINED is left out of the result, which is how
optional fields vanish. Extra input keys follow, in priority order:

    catchall set    each extra value validated by the catchall and kept
    "passthrough"   extra keys kept verbatim
    "strict"        one UnrecognizedKeys issue listing every extra key
    "strip"         extra keys dropped (default)

The unknown-key policy and the catchall are mutually exclusive: setting one
clears the other.

Shape operations never mutate; each returns a new ObjectSchema:
    augment / extend / set_key / merge / pick / omit / diff
    partial / partial_deep / required / keyof

``diff`` is a symmetric difference: it keeps the fields that appear on
exactly one side (with that side's schema) and drops the shared ones.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Union

from shapeguard.validation.parse import ParseContext, ParseResult
from shapeguard.validation.parsed_type import ParsedType
from shapeguard.validation.utils import UNDEFINED

from .base import Schema, SchemaKind
from .collections import ArraySchema
from .primitives import EnumSchema
from .wrappers import NullableSchema, OptionalSchema

UnknownKeys = Literal["strip", "passthrough", "strict"]
Shape = Mapping[str, Schema]


def _freeze(shape: Mapping[str, Schema]) -> Mapping[str, Schema]:
    return MappingProxyType(dict(shape))


@dataclass(frozen=True, slots=True, eq=False)
class ObjectSchema(Schema):
    shape: Shape
    unknown_keys: UnknownKeys | None = "strip"
    catchall_node: Schema | None = None
    kind = SchemaKind.OBJECT

    @classmethod
    def create(cls, shape: Shape, unknown_keys: UnknownKeys = "strip") -> ObjectSchema:
        return cls(_freeze(shape), unknown_keys=unknown_keys)

    @property
    def hint(self) -> str:
        fields = []
        for name, node in self.shape.items():
            if isinstance(node, OptionalSchema): fields.append(f"{name}?: {node.inner.hint}")
            else: fields.append(f"{name}: {node.hint}")
        if self.catchall_node is not None: fields.append(f"[str]: {self.catchall_node.hint}")
        return "{" + ", ".join(fields) + "}"

    @property
    def entries(self) -> list[tuple[str, Schema]]:
        return list(self.shape.items())

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(self.shape)

    async def _parse(self, ctx: ParseContext) -> ParseResult:
        data = ctx.raw_data
        if not isinstance(data, Mapping): return ctx.invalid_type(ParsedType.DICT).abort()

        result: dict[Any, Any] = {}
        for name, node in self.shape.items():
            outcome = await node._parse(ctx.child(node, data.get(name, UNDEFINED), name))
            if outcome.ok:
                if outcome.data is not UNDEFINED: result[name] = outcome.data
            elif ctx.abort_early:
                return ctx.abort()

        extra_keys = [key for key in data if key not in self.shape]
        if extra_keys:
            if self.catchall_node is not None:
                for key in extra_keys:
                    outcome = await self.catchall_node._parse(ctx.child(self.catchall_node, data[key], key))
                    if outcome.ok:
                        if outcome.data is not UNDEFINED: result[key] = outcome.data
                    elif ctx.abort_early:
                        return ctx.abort()
            elif self.unknown_keys == "passthrough":
                for key in extra_keys: result[key] = data[key]
            elif self.unknown_keys == "strict":
                ctx.unrecognized_keys(tuple(extra_keys))

        return ctx.abort() if ctx.is_invalid() else ctx.ok(result)

    # ========================================================================
    # Unknown-key policy
    # ========================================================================

    def strip(self) -> ObjectSchema:
        return replace(self, unknown_keys="strip", catchall_node=None)

    def passthrough(self) -> ObjectSchema:
        return replace(self, unknown_keys="passthrough", catchall_node=None)

    def strict(self) -> ObjectSchema:
        return replace(self, unknown_keys="strict", catchall_node=None)

    def catchall(self, node: Schema) -> ObjectSchema:
        return replace(self, unknown_keys=None, catchall_node=node)

    # ========================================================================
    # Shape algebra
    # ========================================================================

    def augment(self, fields: Shape) -> ObjectSchema:
        """Add ``fields``; on a name collision the incoming field wins."""
        return replace(self, shape=_freeze({**self.shape, **fields}))

    extend = augment

    def set_key(self, name: str, node: Schema) -> ObjectSchema:
        return self.augment({name: node})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        """Augment with ``other``'s shape and adopt its unknown-key policy and catchall."""
        return replace(self, shape=_freeze({**self.shape, **other.shape}),
            unknown_keys=other.unknown_keys, catchall_node=other.catchall_node)

    def pick(self, *keys: str | Iterable[str]) -> ObjectSchema:
        wanted = _names(keys)
        return replace(self, shape=_freeze({k: v for k, v in self.shape.items() if k in wanted}))

    def omit(self, *keys: str | Iterable[str]) -> ObjectSchema:
        unwanted = _names(keys)
        return replace(self, shape=_freeze({k: v for k, v in self.shape.items() if k not in unwanted}))

    def diff(self, other: Union[ObjectSchema, Shape]) -> ObjectSchema:
        """Fields present on exactly one side. Shared names are dropped."""
        other_shape = other.shape if isinstance(other, ObjectSchema) else other
        fields = {k: v for k, v in self.shape.items() if k not in other_shape}
        fields.update({k: v for k, v in other_shape.items() if k not in self.shape})
        return replace(self, shape=_freeze(fields))

    def partial(self, *keys: str | Iterable[str]) -> ObjectSchema:
        """Make the named fields (default: all) optional. Already-optional fields are kept as-is."""
        names = _names(keys) or set(self.shape)
        return replace(self, shape=_freeze({
            k: v.optional() if k in names and not isinstance(v, OptionalSchema) else v
            for k, v in self.shape.items()
        }))

    def partial_deep(self) -> ObjectSchema:
        """Optional at every depth: nested objects, array elements and existing wrappers."""
        return replace(self, shape=_freeze({k: _optional_once(_deep_partial(v)) for k, v in self.shape.items()}))

    def required(self, *keys: str | Iterable[str]) -> ObjectSchema:
        """Strip optional layers from the named fields (default: all), keeping nullable ones."""
        names = _names(keys) or set(self.shape)
        return replace(self, shape=_freeze({
            k: _deoptional(v) if k in names else v for k, v in self.shape.items()
        }))

    def keyof(self) -> EnumSchema:
        return EnumSchema.create(list(self.shape))


# ============================================================================
# Helpers
# ============================================================================

def _names(keys: tuple[str | Iterable[str], ...]) -> set[str]:
    """Accept ``pick("a", "b")`` as well as ``pick(["a", "b"])``."""
    names: set[str] = set()
    for key in keys:
        if isinstance(key, str): names.add(key)
        else: names.update(key)
    return names


def _optional_once(node: Schema) -> Schema:
    return node if isinstance(node, OptionalSchema) else node.optional()


def _deep_partial(node: Schema) -> Schema:
    match node:
        case ObjectSchema():
            return node.partial_deep()
        case ArraySchema(element=element):
            return replace(node, element=_deep_partial(element))
        case OptionalSchema(inner=inner):
            return OptionalSchema(_deep_partial(inner), options=node.options)
        case NullableSchema(inner=inner):
            return NullableSchema(_deep_partial(inner), options=node.options)
    return node


def _deoptional(node: Schema) -> Schema:
    match node:
        case OptionalSchema(inner=inner):
            return _deoptional(inner)
        case NullableSchema(inner=inner):
            return NullableSchema(_deoptional(inner), options=node.options)
    return node
