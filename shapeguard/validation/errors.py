"""Aggregated Validation Error

Raised by ``parse`` and carried by failed ``safe_parse`` results. The flat
``issues`` tuple is the single source of truth; everything else is a derived
view of it.

Views:
    .message    formatted text (pluggable issues formatter)
    .format()   nested tree keyed by path segment, ``_errors`` at each node
    .flatten()  {"form_errors": [...], "field_errors": {first_segment: [...]}}
    .to_dict()  API response body

Error Format (to_dict):
{
    "error": {
        "type": "validation_error",
        "message": "user.email: Expected str, received int",
        "error_count": 1,
        "issues": [
            {"kind": "invalid_type", "path": ["user", "email"], "field": "user.email", ...}
        ]
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Sequence

from .error_map import IssuesFormatter, default_issues_formatter
from .issues import InvalidUnionPayload, Issue, IssueKind, NestedErrorPayload, Path

IssueMapper = Callable[[Issue], Any]


def _expand(issues: Sequence[Issue]) -> Iterator[Issue]:
    """Yield issues with union and function sub-issues flattened in place."""
    for issue in issues:
        match issue.kind, issue.payload:
            case IssueKind.INVALID_UNION, InvalidUnionPayload(union_issues=nested):
                yield from _expand(nested)
            case (IssueKind.INVALID_ARGUMENTS | IssueKind.INVALID_RETURN_TYPE), NestedErrorPayload(error=error):
                yield from _expand(error.issues)
            case _:
                yield issue


@dataclass(eq=False)
class ValidationError(Exception):
    """Aggregated parse failure."""
    issues: tuple[Issue, ...]
    formatter: IssuesFormatter | None = None

    def __post_init__(self):
        self.issues = tuple(self.issues)
        Exception.__init__(self, self.message)

    @property
    def message(self) -> str:
        return (self.formatter or default_issues_formatter)(self.issues)

    def __str__(self) -> str: return self.message

    @property
    def first_issue(self) -> Issue | None: return self.issues[0] if self.issues else None

    def issues_for(self, path: Sequence[str | int]) -> list[Issue]:
        return [i for i in self.issues if i.path == tuple(path)]

    def format(self, mapper: IssueMapper | None = None) -> dict[str, Any]:
        """Nested tree mirroring the data. Every node has an ``_errors`` list."""
        mapper = mapper or (lambda issue: issue.message)
        tree: dict[str, Any] = {"_errors": []}
        for issue in _expand(self.issues):
            node = tree
            for segment in issue.path:
                node = node.setdefault(segment, {"_errors": []})
            node["_errors"].append(mapper(issue))
        return tree

    def flatten(self, mapper: IssueMapper | None = None) -> dict[str, Any]:
        """Path-less issues as form errors, the rest grouped by first path segment."""
        mapper = mapper or (lambda issue: issue.message)
        form_errors: list[Any] = []
        field_errors: dict[str | int, list[Any]] = {}
        for issue in self.issues:
            if issue.path: field_errors.setdefault(issue.path[0], []).append(mapper(issue))
            else: form_errors.append(mapper(issue))
        return {"form_errors": form_errors, "field_errors": field_errors}

    @property
    def field_errors(self) -> dict[str | int, list[Any]]:
        return self.flatten()["field_errors"]

    @property
    def form_errors(self) -> list[Any]:
        return self.flatten()["form_errors"]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message,
            "error_count": len(self.issues), "issues": [i.to_dict() for i in self.issues]}}

    @property
    def paths(self) -> list[Path]:
        return [i.path for i in self.issues]
