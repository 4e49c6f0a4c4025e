"""Tests for the error surface: messages, projections and serialization."""

from __future__ import annotations

import pytest

import shapeguard as sg
from shapeguard.errors import Err, Ok, collect_results
from shapeguard.validation import IssueKind, ValidationError, format_path


def _profile():
    return sg.object_({"name": sg.string(), "tags": sg.array(sg.string())})


def _error(schema, data) -> ValidationError:
    result = schema.safe_parse(data)
    assert isinstance(result, Err)
    return result.error


def test_parse_raises_validation_error() -> None:
    """parse() raises the same error safe_parse() returns."""
    with pytest.raises(ValidationError) as exc_info:
        sg.string().parse(1)
    assert exc_info.value.issues[0].kind is IssueKind.INVALID_TYPE


def test_safe_parse_returns_result() -> None:
    """safe_parse() never raises on bad data."""
    assert sg.string().safe_parse("x") == Ok("x")
    assert isinstance(sg.string().safe_parse(1), Err)


def test_result_pattern_matching() -> None:
    """Results support structural pattern matching."""
    match sg.number().safe_parse("x"):
        case Ok(data):
            outcome = data
        case Err(error):
            outcome = error.first_issue.kind
    assert outcome is IssueKind.INVALID_TYPE


def test_result_combinators() -> None:
    """map, unwrap, match and collect_results behave like the Result monad."""
    assert sg.number().safe_parse(2).map(lambda value: value * 10).unwrap() == 20
    assert sg.number().safe_parse("x").unwrap_or(0) == 0
    with pytest.raises(ValidationError):
        sg.number().safe_parse("x").unwrap()

    collected = collect_results([sg.number().safe_parse(1), sg.number().safe_parse(2)])
    assert collected == Ok([1, 2])
    assert isinstance(collect_results([sg.number().safe_parse("x")]), Err)

    described = sg.number().safe_parse("x").match(ok=str, err=lambda error: error.first_issue.message)
    assert described == "Expected int | float, received str"


def test_single_issue_message() -> None:
    """One issue renders as "path: message"."""
    error = _error(_profile(), {"name": 1, "tags": []})
    assert error.message == "name: Expected str, received int"
    assert str(error) == error.message


def test_multiple_issue_message() -> None:
    """Several issues render as a counted list."""
    error = _error(_profile(), {"name": 1, "tags": ["a", 2]})
    assert error.message.splitlines() == [
        "Validation failed (2 issues)",
        "  - name: Expected str, received int",
        "  - tags[1]: Expected str, received int",
    ]


def test_format_builds_nested_tree() -> None:
    """format() mirrors the data with _errors at every node."""
    error = _error(_profile(), {"name": 1, "tags": ["a", 2]})
    assert error.format() == {
        "_errors": [],
        "name": {"_errors": ["Expected str, received int"]},
        "tags": {"_errors": [], 1: {"_errors": ["Expected str, received int"]}},
    }


def test_format_expands_union_issues() -> None:
    """Union member issues are laid out in place of the union issue."""
    error = _error(sg.union([sg.string(), sg.number()]), True)
    assert error.format() == {
        "_errors": ["Expected str, received bool", "Expected int | float, received bool"],
    }


def test_flatten_groups_by_first_segment() -> None:
    """flatten() splits root issues from field issues."""
    schema = _profile().strict()
    error = _error(schema, {"name": 1, "tags": ["a", 2], "extra": True})
    assert error.flatten() == {
        "form_errors": ['Unrecognized key(s) in object: "extra"'],
        "field_errors": {
            "name": ["Expected str, received int"],
            "tags": ["Expected str, received int"],
        },
    }
    assert error.form_errors == ['Unrecognized key(s) in object: "extra"']
    assert list(error.field_errors) == ["name", "tags"]


def test_projections_accept_mapper() -> None:
    """A mapper chooses what each issue turns into."""
    error = _error(_profile(), {"name": 1, "tags": []})
    assert error.flatten(lambda issue: issue.kind.value)["field_errors"] == {"name": ["invalid_type"]}


def test_to_dict_for_api_responses() -> None:
    """to_dict() serializes every issue with its field path."""
    error = _error(_profile(), {"name": "Ada", "tags": ["a", 2]})
    body = error.to_dict()["error"]
    assert body["type"] == "validation_error"
    assert body["error_count"] == 1
    assert body["issues"][0]["field"] == "tags[1]"
    assert body["issues"][0]["path"] == ["tags", 1]
    assert body["issues"][0]["kind"] == "invalid_type"


def test_issue_lookup_helpers() -> None:
    """first_issue, issues_for and paths index the flat issue list."""
    error = _error(_profile(), {"name": 1, "tags": ["a", 2]})
    assert error.first_issue.path == ("name",)
    assert len(error.issues_for(["tags", 1])) == 1
    assert error.paths == [("name",), ("tags", 1)]


def test_format_path() -> None:
    """Paths render like JSON paths."""
    assert format_path(()) == "$"
    assert format_path(("user", "addresses", 0, "street")) == "user.addresses[0].street"
    assert format_path((0, "name")) == "[0].name"
