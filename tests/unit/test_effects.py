"""Tests for refinements, transforms and preprocessors in both execution modes."""

from __future__ import annotations

import asyncio

import pytest

import shapeguard as sg
from shapeguard.errors import AsyncUsageError
from shapeguard.schemas import NumberSchema
from shapeguard.validation import IssueKind


async def _is_positive(value):
    await asyncio.sleep(0)
    return value > 0


# ============================================================================
# Refinement
# ============================================================================

def test_refinement_adds_custom_issue() -> None:
    """A falsy check records a Custom issue with the default message."""
    issue = sg.number().refine(lambda value: value > 0).safe_parse(-1).error.issues[0]
    assert issue.kind is IssueKind.CUSTOM
    assert issue.message == "Invalid input"


def test_refinement_message_forms() -> None:
    """Messages may be strings, params mappings or functions of the value."""
    as_text = sg.number().refine(lambda value: value > 0, "Must be positive")
    as_params = sg.number().refine(lambda value: value > 0, {"message": "Too small", "params": {"min": 1}})
    as_function = sg.number().refine(lambda value: value > 0, lambda value: f"{value} is not positive")

    assert as_text.safe_parse(-1).error.issues[0].message == "Must be positive"

    issue = as_params.safe_parse(-1).error.issues[0]
    assert issue.message == "Too small"
    assert issue.payload.params == {"min": 1}

    assert as_function.safe_parse(-1).error.issues[0].message == "-1 is not positive"


def test_refinement_skipped_when_underlying_fails() -> None:
    """Checks only run on valid data."""
    calls: list[object] = []
    schema = sg.number().refine(lambda value: calls.append(value) or True)
    issues = schema.safe_parse("x").error.issues
    assert calls == []
    assert [issue.kind for issue in issues] == [IssueKind.INVALID_TYPE]


def test_refinement_with_context_can_add_issues() -> None:
    """Two-argument checks get an effect context at the current path."""

    def check(value, ctx):
        if value % 2:
            ctx.add_issue("Must be even")
        return True

    schema = sg.object_({"n": sg.number().refine(check)})
    issue = schema.safe_parse({"n": 3}).error.issues[0]
    assert issue.path == ("n",)
    assert issue.message == "Must be even"


def test_async_refinement_in_sync_parse_is_usage_error() -> None:
    """An awaitable check during a synchronous parse raises immediately."""
    schema = sg.number().refine(_is_positive)
    with pytest.raises(AsyncUsageError, match="Async refinement encountered during synchronous parse operation"):
        schema.safe_parse(1)


def test_async_refinement_in_async_parse() -> None:
    """Asynchronous parses await the check."""
    schema = sg.number().refine(_is_positive, "Must be positive")
    assert asyncio.run(schema.parse_async(2)) == 2

    result = asyncio.run(schema.safe_parse_async(-2))
    assert result.error.issues[0].message == "Must be positive"


# ============================================================================
# Transform
# ============================================================================

def test_transform_replaces_output() -> None:
    """The transform's return value becomes the parsed value."""
    assert sg.string().transform(lambda value: len(value)).parse("abc") == 3


def test_transform_skipped_when_underlying_fails() -> None:
    """Transforms never see invalid data."""
    calls: list[object] = []
    schema = sg.string().transform(lambda value: calls.append(value))
    assert not schema.is_valid(1)
    assert calls == []


def test_transform_with_context_can_fail() -> None:
    """A transform that records an issue fails the parse."""

    def to_int(value, ctx):
        if not value.isdigit():
            ctx.add_issue("Not a number")
            return value
        return int(value)

    schema = sg.string().transform(to_int)
    assert schema.parse("42") == 42
    assert schema.safe_parse("x").error.issues[0].message == "Not a number"


def test_async_transform() -> None:
    """Awaitable transforms run in async mode and fail loudly in sync mode."""

    async def double(value):
        return value * 2

    schema = sg.number().transform(double)
    assert asyncio.run(schema.parse_async(4)) == 8
    with pytest.raises(AsyncUsageError, match="Async transform"):
        schema.parse(4)


def test_transform_chain_inner_type() -> None:
    """inner_type() skips every effect layer."""
    schema = sg.number().transform(lambda value: value + 1).refine(lambda value: value > 0)
    assert isinstance(schema.inner_type(), NumberSchema)
    assert schema.parse(1) == 2


# ============================================================================
# Preprocess
# ============================================================================

def test_preprocess_runs_before_validation() -> None:
    """The preprocessed value is what gets validated."""
    schema = sg.preprocess(lambda value: int(value) if isinstance(value, str) else value, sg.number())
    assert schema.parse("42") == 42
    assert schema.parse(7) == 7


def test_preprocess_sees_a_copy() -> None:
    """Preprocessors cannot mutate the caller's data."""
    raw = [1]
    schema = sg.array(sg.number()).preprocess(lambda value: value.append(2) or value)
    assert schema.parse(raw) == [1, 2]
    assert raw == [1]


def test_async_preprocess() -> None:
    """Awaitable preprocessors need an async parse."""

    async def strip(value):
        return value.strip()

    schema = sg.string().preprocess(strip)
    assert asyncio.run(schema.parse_async("  x ")) == "x"
    with pytest.raises(AsyncUsageError, match="Async preprocess"):
        schema.parse("  x ")
