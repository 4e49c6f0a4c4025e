"""Tests for the date schema: coercion policies and bound checks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

import shapeguard as sg
from shapeguard.validation import CheckKind, IssueKind, ParseOptions, ParsedType

NEW_YEAR = datetime(2024, 1, 1, tzinfo=timezone.utc)
MIDYEAR = datetime(2024, 6, 1, tzinfo=timezone.utc)
YEAR_END = datetime(2024, 12, 31, tzinfo=timezone.utc)


def test_accepts_datetime_without_coercion() -> None:
    """Plain datetimes pass; strings are rejected unless coerced."""
    assert sg.date().parse(MIDYEAR) == MIDYEAR

    result = sg.date().safe_parse("2024-01-01")
    assert result.error.issues[0].payload.received is ParsedType.STRING


def test_coerces_iso_strings() -> None:
    """ISO-8601 strings, including a trailing Z, become aware datetimes."""
    parsed = sg.date().coerce("strings").parse("2024-01-15T10:30:00Z")
    assert parsed == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_coerces_numbers_as_utc_seconds() -> None:
    """Numbers are POSIX seconds in UTC."""
    assert sg.date().coerce("numbers").parse(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
    assert not sg.date().coerce("strings").is_valid(0)
    assert not sg.date().coerce("numbers").is_valid("2024-01-01")


def test_unparseable_string_fails_type_check() -> None:
    """Coercion leaves garbage as-is, so it fails as a string."""
    result = sg.date().coerce().safe_parse("not a date")
    issue = result.error.issues[0]
    assert issue.kind is IssueKind.INVALID_TYPE
    assert issue.payload.received is ParsedType.STRING


def test_min_is_inclusive_and_after_is_not() -> None:
    """min() accepts the bound itself, after() does not."""
    assert sg.date().min(NEW_YEAR).parse(NEW_YEAR) == NEW_YEAR
    assert not sg.date().after(NEW_YEAR).is_valid(NEW_YEAR)

    issue = sg.date().min(NEW_YEAR).safe_parse(NEW_YEAR - timedelta(days=1)).error.issues[0]
    assert issue.kind is IssueKind.INVALID_DATE
    assert issue.message == "Date must be on or after 2024-01-01T00:00:00+00:00"


def test_max_and_before() -> None:
    """max() and before() bound from above."""
    assert sg.date().max(YEAR_END).is_valid(YEAR_END)
    assert not sg.date().before(YEAR_END).is_valid(YEAR_END)
    assert sg.date().same_or_before(YEAR_END).is_valid(MIDYEAR)


def test_range_inclusivity() -> None:
    """between() is inclusive by default; "none" excludes both ends."""
    both = sg.date().between(NEW_YEAR, YEAR_END)
    neither = sg.date().between(NEW_YEAR, YEAR_END, inclusive="none")
    lower = sg.date().range(NEW_YEAR, YEAR_END, inclusive="min")

    assert both.is_valid(NEW_YEAR) and both.is_valid(YEAR_END)
    assert not neither.is_valid(NEW_YEAR)
    assert neither.is_valid(MIDYEAR)
    assert lower.is_valid(NEW_YEAR) and not lower.is_valid(YEAR_END)


def test_range_and_single_bounds_clear_each_other() -> None:
    """Setting a range drops min/max; setting min or max drops the range."""
    ranged = sg.date().min(NEW_YEAR).max(YEAR_END).range(NEW_YEAR, YEAR_END)
    assert [check.kind for check in ranged.checks] == [CheckKind.RANGE]

    bounded = ranged.min(MIDYEAR)
    assert [check.kind for check in bounded.checks] == [CheckKind.MIN]


def test_bounds_accept_iso_strings_and_numbers() -> None:
    """Check bounds are normalized to datetimes at build time."""
    assert sg.date().min("2024-01-01T00:00:00Z").checks[0].value == NEW_YEAR
    assert sg.date().max(0).checks[0].value == datetime(1970, 1, 1, tzinfo=timezone.utc)

    with pytest.raises(ValueError):
        sg.date().min("someday")


def test_now_bound_is_resolved_at_parse_time() -> None:
    """"now" compares against the current time on every parse."""
    past = datetime(2000, 1, 1)
    assert sg.date().max("now").is_valid(past)
    assert not sg.date().min("now").is_valid(past)


def test_naive_datetimes_compare_as_utc() -> None:
    """Naive input is compared against aware bounds as UTC."""
    assert sg.date().min(NEW_YEAR).is_valid(datetime(2024, 6, 1))
    assert not sg.date().min(NEW_YEAR).is_valid(datetime(2023, 6, 1))


def test_custom_check_message() -> None:
    """A message on the check wins over the default text."""
    schema = sg.date().min(NEW_YEAR, message="Too early")
    assert schema.safe_parse(datetime(2020, 1, 1)).error.issues[0].message == "Too early"


def test_all_failing_checks_are_reported_unless_abort_early() -> None:
    """Each failing bound is its own issue."""
    schema = sg.date().min(YEAR_END).max(NEW_YEAR)

    assert len(schema.safe_parse(MIDYEAR).error.issues) == 2
    assert len(schema.safe_parse(MIDYEAR, ParseOptions(abort_early=True)).error.issues) == 1
