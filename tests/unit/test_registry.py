"""Tests for the registry and the message resolution chain."""

from __future__ import annotations

import pytest

import shapeguard as sg
from shapeguard.config import Settings
from shapeguard.validation import (
    CustomPayload,
    InvalidEnumValuePayload,
    InvalidInstancePayload,
    InvalidLiteralPayload,
    InvalidTypePayload,
    InvalidUnionPayload,
    Issue,
    IssueKind,
    MinCheck,
    NestedErrorPayload,
    ParsedType,
    ParseOptions,
    Registry,
    RegistryOptions,
    UnrecognizedKeysPayload,
    ValidationError,
    default_error_map,
    get_registry,
)


def _missing_name_message(schema, options=None) -> str:
    return schema.safe_parse({}, options).error.issues[0].message


def test_default_message() -> None:
    """Without any error map the built-in text is used."""
    assert _missing_name_message(sg.object_({"name": sg.string()})) == "Required"


def test_registry_error_map() -> None:
    """The registry map applies to every parse."""
    get_registry().set_error_map({"required": "Global required"})
    assert _missing_name_message(sg.object_({"name": sg.string()})) == "Global required"


def test_schema_error_map_beats_registry() -> None:
    """A map declared on the rejecting schema wins over the registry map."""
    get_registry().set_error_map({"required": "Global required"})
    field = sg.string().with_options(error_map={"required": "Name is required"})
    assert _missing_name_message(sg.object_({"name": field})) == "Name is required"


def test_call_error_map_beats_schema() -> None:
    """Call-site maps win and see the lower layers' message as the default."""
    field = sg.string().with_options(error_map={"required": "Name is required"})
    options = ParseOptions(error_map=lambda issue, ctx: f"Call: {ctx.default_message}")
    assert _missing_name_message(sg.object_({"name": field}), options) == "Call: Name is required"


def test_embedded_message_beats_every_map() -> None:
    """A message carried by the check itself always wins."""
    schema = sg.array(sg.string()).min(2, message="Too few")
    options = ParseOptions(error_map=lambda issue, ctx: "from the call site")
    assert schema.safe_parse([], options).error.issues[0].message == "Too few"


def test_error_map_can_defer() -> None:
    """A map returning None leaves the lower message in place."""
    options = ParseOptions(error_map=lambda issue, ctx: None)
    assert sg.string().safe_parse(1, options).error.issues[0].message == "Expected str, received int"


def test_dict_error_map_fallback() -> None:
    """__default covers kinds the map does not name."""
    options = {"error_map": {"required": "Missing", "__default": "Nope"}}
    assert sg.string().safe_parse(1, options).error.issues[0].message == "Nope"
    assert _missing_name_message(sg.object_({"name": sg.string()}), options) == "Missing"


def test_dict_error_map_entries_may_be_functions() -> None:
    """Dict entries can compute messages from the issue."""
    error_map = {"invalid_type": lambda issue, ctx: f"wanted {issue.payload.expected}"}
    assert sg.number().safe_parse("x", {"error_map": error_map}).error.issues[0].message == "wanted int | float"


def test_registry_abort_early_default() -> None:
    """Registry options seed abort-early for every parse."""
    schema = sg.object_({"a": sg.number(), "b": sg.number()})
    get_registry().set_options(abort_early=True)
    assert len(schema.safe_parse({"a": "x", "b": "y"}).error.issues) == 1
    assert len(schema.safe_parse({"a": "x", "b": "y"}, {"abort_early": False}).error.issues) == 2


def test_injected_registry_overrides_global() -> None:
    """A registry passed per call replaces the shared one."""
    get_registry().set_error_map({"required": "Global required"})
    isolated = Registry(options=RegistryOptions(abort_early=True), error_map={"invalid_type": "Local"})
    schema = sg.object_({"a": sg.number(), "b": sg.number()})

    issues = schema.safe_parse({"a": "x", "b": "y"}, ParseOptions(registry=isolated)).error.issues
    assert len(issues) == 1
    assert issues[0].message == "Local"


def test_issues_formatter() -> None:
    """The registry formatter renders the error message."""
    registry = Registry(issues_formatter=lambda issues: f"{len(issues)} problem(s)")
    error = sg.string().safe_parse(1, ParseOptions(registry=registry)).error
    assert error.message == "1 problem(s)"


def test_reset_restores_defaults() -> None:
    """reset() drops every customization."""
    registry = get_registry().set_error_map({"__default": "x"}).set_options(abort_early=True)
    registry.reset()
    assert registry.get_error_map() is None
    assert registry.get_options() == RegistryOptions()


def test_get_registry_is_shared() -> None:
    """get_registry() always returns the same instance."""
    assert get_registry() is get_registry()


def test_settings_read_environment(monkeypatch) -> None:
    """Settings come from SHAPEGUARD_-prefixed environment variables."""
    monkeypatch.setenv("SHAPEGUARD_ABORT_EARLY", "true")
    monkeypatch.setenv("SHAPEGUARD_LOG_LEVEL", "DEBUG")
    settings = Settings()
    assert settings.ABORT_EARLY is True
    assert settings.LOG_LEVEL == "DEBUG"


def test_default_error_map_covers_every_kind() -> None:
    """The built-in map yields a message for every issue kind."""
    payloads = {
        IssueKind.INVALID_TYPE: InvalidTypePayload(ParsedType.STRING, ParsedType.INTEGER),
        IssueKind.INVALID_ARRAY: MinCheck(1),
        IssueKind.INVALID_DATE: MinCheck(0),
        IssueKind.INVALID_SET: MinCheck(1),
        IssueKind.INVALID_TUPLE: MinCheck(1),
        IssueKind.INVALID_ENUM_VALUE: InvalidEnumValuePayload(("a",), "b"),
        IssueKind.INVALID_LITERAL: InvalidLiteralPayload("a", "b"),
        IssueKind.INVALID_ARGUMENTS: NestedErrorPayload(ValidationError(())),
        IssueKind.INVALID_RETURN_TYPE: NestedErrorPayload(ValidationError(())),
        IssueKind.INVALID_UNION: InvalidUnionPayload(()),
        IssueKind.INVALID_INSTANCE: InvalidInstancePayload("Point"),
        IssueKind.UNRECOGNIZED_KEYS: UnrecognizedKeysPayload(("z",)),
        IssueKind.CUSTOM: CustomPayload(),
    }
    for kind in IssueKind:
        issue = Issue(kind=kind, path=(), payload=payloads.get(kind), data=None,
            parsed_type=ParsedType.NONE, schema="any", hint="Any")
        assert default_error_map(issue)


def test_default_error_map_rejects_mismatched_payload() -> None:
    """A kind paired with the wrong payload type is a hard error."""
    issue = Issue(kind=IssueKind.INVALID_TYPE, path=(), payload=CustomPayload(), data=None,
        parsed_type=ParsedType.NONE, schema="any", hint="Any")
    with pytest.raises(AssertionError, match="Unhandled issue kind"):
        default_error_map(issue)
