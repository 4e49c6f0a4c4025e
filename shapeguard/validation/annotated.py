"""Pydantic Field Validators

Use a shapeguard schema as a pydantic v2 field constraint through
``typing.Annotated``. The schema replaces pydantic's own validation for
that field (plain validator), so coercions, defaults and transforms behave
exactly as in ``schema.parse``.

Usage:
    from typing import Annotated, Any
    from pydantic import BaseModel
    from shapeguard.validation.annotated import SchemaValidator, validated

    Tags = sg.array(sg.string()).max(3)

    class Post(BaseModel):
        tags: Annotated[list, SchemaValidator(Tags)]
        published: validated(sg.date().coerce("strings"))
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, core_schema

if TYPE_CHECKING:
    from shapeguard.schemas.base import Schema


class SchemaValidator:
    """Annotated marker that validates a field with a shapeguard schema."""
    __slots__ = ("schema",)

    def __init__(self, schema: Schema): self.schema = schema

    def __get_pydantic_core_schema__(self, source_type: type, handler: GetCoreSchemaHandler) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(self._validate)

    def _validate(self, v: Any) -> Any:
        result = self.schema.safe_parse(v)
        if not result.ok: raise ValueError(result.error.message)
        return result.data

    def __get_pydantic_json_schema__(self, core_schema: CoreSchema, handler: GetJsonSchemaHandler) -> JsonSchemaValue:
        return {"description": self.schema.hint}


def validated(schema: Schema, base: Any = Any) -> Any:
    """``Annotated[base, SchemaValidator(schema)]``."""
    return Annotated[base, SchemaValidator(schema)]
