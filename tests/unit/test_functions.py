"""Tests for function schemas: argument and return validation."""

from __future__ import annotations

import asyncio

import pytest

import shapeguard as sg
from shapeguard.schemas import UnknownSchema
from shapeguard.validation import IssueKind, ParsedType, ValidationError


def _add():
    return sg.function([sg.number(), sg.number()], sg.number()).implement(lambda a, b: a + b)


def test_valid_call_passes_through() -> None:
    """Valid arguments reach the implementation and the result is returned."""
    assert _add()(1, 2) == 3


def test_invalid_arguments_raise_nested_error() -> None:
    """Bad arguments raise one InvalidArguments issue wrapping the tuple error."""
    with pytest.raises(ValidationError) as exc_info:
        _add()(1, "2")

    issue = exc_info.value.issues[0]
    assert issue.kind is IssueKind.INVALID_ARGUMENTS
    assert issue.message == "Invalid function arguments"
    assert issue.payload.error.issues[0].path == (1,)


def test_invalid_return_type_raises() -> None:
    """A bad return value raises one InvalidReturnType issue."""
    echo = sg.function([sg.string()], sg.number()).implement(lambda value: value)
    with pytest.raises(ValidationError) as exc_info:
        echo("x")
    assert exc_info.value.issues[0].kind is IssueKind.INVALID_RETURN_TYPE


def test_nested_issues_expand_in_format() -> None:
    """format() lays argument issues out by position."""
    with pytest.raises(ValidationError) as exc_info:
        _add()(1, "2")
    assert exc_info.value.format() == {
        "_errors": [],
        1: {"_errors": ["Expected int | float, received str"]},
    }


def test_declared_parameters_reject_extra_arguments() -> None:
    """A parameter list without rest rejects surplus arguments."""
    one = sg.function([sg.string()]).implement(lambda value: value)
    with pytest.raises(ValidationError):
        one("a", "b")


def test_default_parameters_accept_anything() -> None:
    """Without declared parameters every argument passes."""
    anything = sg.function().implement(lambda *args: len(args))
    assert anything(1, "two", None) == 3


def test_args_keeps_rest_schema() -> None:
    """args() replaces the positions but keeps the unknown rest."""
    schema = sg.function().args(sg.string()).returns(sg.string())
    assert len(schema.parameters.items) == 1
    assert isinstance(schema.parameters.rest_node, UnknownSchema)
    assert schema.hint == "Callable[[str], str]"
    assert schema.implement(lambda *args: args[0])("a", 1) == "a"


def test_rest_schema_validates_surplus() -> None:
    """rest() types the variadic tail."""
    total = sg.function().args().rest(sg.number()).returns(sg.number()).validate(lambda *args: sum(args))
    assert total(1, 2, 3) == 6
    with pytest.raises(ValidationError):
        total(1, "2")


def test_non_callable_input_is_invalid_type() -> None:
    """Only callables are functions."""
    issue = sg.function().safe_parse(1).error.issues[0]
    assert issue.payload.expected is ParsedType.FUNCTION


def test_coroutine_functions_get_async_wrapper() -> None:
    """Async implementations validate both sides asynchronously."""

    async def double(value):
        return value * 2

    wrapped = sg.function([sg.number()], sg.number()).implement(double)
    assert asyncio.run(wrapped(2)) == 4
    with pytest.raises(ValidationError):
        asyncio.run(wrapped("a"))


def test_wrapper_keeps_metadata() -> None:
    """The wrapper looks like the implementation."""

    def greet(name):
        """Say hello."""
        return f"hello {name}"

    wrapped = sg.function([sg.string()], sg.string()).implement(greet)
    assert wrapped.__name__ == "greet"
    assert wrapped.__doc__ == "Say hello."
    assert wrapped("ada") == "hello ada"
