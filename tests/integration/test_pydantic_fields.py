"""Integration tests: shapeguard schemas as pydantic field validators."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

import pydantic
import pytest
from pydantic import BaseModel

import shapeguard as sg
from shapeguard.validation import SchemaValidator, validated

Tags = sg.array(sg.string()).max(2)
Published = validated(sg.date().coerce("strings"))
Slug = validated(sg.string().transform(lambda value: value.strip().lower()), str)


class Post(BaseModel):
    title: str
    tags: Annotated[list, SchemaValidator(Tags)] = []
    published: Published = None
    slug: Slug = "untitled"


def test_valid_fields_pass_through_schema() -> None:
    """Schema outputs become the model's field values."""
    post = Post(title="Hello", tags=["a"], published="2024-05-01T12:00:00Z", slug="  Hello-World ")
    assert post.tags == ["a"]
    assert post.published == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
    assert post.slug == "hello-world"


def test_schema_failures_become_pydantic_errors() -> None:
    """Schema issues surface as pydantic validation errors on the field."""
    with pytest.raises(pydantic.ValidationError) as exc_info:
        Post(title="Hello", tags=["a", "b", "c"])

    errors = exc_info.value.errors()
    assert errors[0]["loc"] == ("tags",)
    assert "Array must contain at most 2 element(s)" in errors[0]["msg"]


def test_json_schema_uses_hint() -> None:
    """The field's JSON schema describes the shapeguard hint."""
    properties = Post.model_json_schema()["properties"]
    assert properties["tags"]["description"] == "list[str]"
