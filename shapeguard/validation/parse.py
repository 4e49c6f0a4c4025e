"""Parse Execution Context

One ``ParseContext`` tree is built per top-level parse call. Each context
tracks the data under inspection, its path, its validity and the issues
recorded on it or below it.

Features:
- child contexts descend into a new path position (object keys, indexes)
- clone contexts reinterpret the same position under another schema
- isolated clones (union members, catch) keep failures to themselves
- invalidity and issues propagate to every ancestor
- one execution path for both modes: schema steps are coroutines, a
  synchronous parse drives them without an event loop and fails loudly
  if anything tries to suspend

Usage:
    ctx = ParseContext.create(schema, raw, ParseOptions(abort_early=True))
    result = run_sync(schema._parse(ctx))
"""
from __future__ import annotations

import inspect
import weakref
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Coroutine, Iterator, Mapping, TypeVar

from shapeguard.errors import AsyncUsageError, Err, Ok, Result
from shapeguard.logging import parse_logger

from .error_map import ErrorMap, resolve_message
from .errors import ValidationError
from .issues import (
    Check, InvalidEnumValuePayload, InvalidInstancePayload, InvalidLiteralPayload,
    InvalidTypePayload, InvalidUnionPayload, Issue, IssueKind, NestedErrorPayload,
    Path, PathSegment, UnrecognizedKeysPayload,
)
from .parsed_type import ParsedType, get_parsed_type
from .registry import Registry, get_registry
from .utils import UNDEFINED, clone_deep

if TYPE_CHECKING:
    from shapeguard.schemas.base import Schema

T = TypeVar("T")
logger = parse_logger()

ParseResult = Result[Any, ValidationError]


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Call-site options. ``None`` fields fall through to schema, then registry."""
    abort_early: bool | None = None
    error_map: ErrorMap | None = None
    registry: Registry | None = None

    @classmethod
    def coerce(cls, options: ParseOptions | Mapping[str, Any] | None) -> ParseOptions:
        if options is None: return cls()
        if isinstance(options, ParseOptions): return options
        return cls(**options)


@dataclass(frozen=True, slots=True)
class ParseCommon:
    """Read-only snapshot shared by every context of one parse call."""
    abort_early: bool
    is_async: bool
    error_map: ErrorMap | None
    registry: Registry


def run_sync(step: Coroutine[Any, Any, T]) -> T:
    """Drive a parse coroutine to completion without an event loop."""
    try:
        step.send(None)
    except StopIteration as stop:
        return stop.value
    step.close()
    logger.warning("parse.suspended_in_sync_mode")
    raise AsyncUsageError("suspension")


async def resolve_maybe_awaitable(ctx: ParseContext, value: Any, operation: str) -> Any:
    """Await ``value`` in async mode. In sync mode an awaitable is a usage error."""
    if not inspect.isawaitable(value): return value
    if ctx.is_async: return await value
    if inspect.iscoroutine(value): value.close()
    logger.warning("parse.async_effect_in_sync_mode", operation=operation, path=list(ctx.path))
    raise AsyncUsageError(operation)


class ParseContext:
    """Mutable traversal record for one position of one parse call."""

    __slots__ = (
        "node", "_data", "path", "common", "_parent", "_children",
        "_issues", "_invalid", "__weakref__",
    )

    def __init__(
        self,
        node: Schema,
        data: Any,
        path: Path,
        common: ParseCommon,
        parent: ParseContext | None = None,
    ):
        self.node = node
        self._data = data
        self.path = path
        self.common = common
        self._parent = weakref.ref(parent) if parent is not None else None
        self._children: list[ParseContext] = []
        self._issues: list[Issue] = []
        self._invalid = False

    @classmethod
    def create(
        cls,
        node: Schema,
        data: Any,
        options: ParseOptions | Mapping[str, Any] | None = None,
        *,
        is_async: bool = False,
    ) -> ParseContext:
        """Root context. Options merge registry, then schema, then call site."""
        options = ParseOptions.coerce(options)
        registry = options.registry or get_registry()
        abort_early = registry.get_options().abort_early
        if node.options.abort_early is not None: abort_early = node.options.abort_early
        if options.abort_early is not None: abort_early = options.abort_early
        common = ParseCommon(abort_early=abort_early, is_async=is_async,
            error_map=options.error_map, registry=registry)
        return cls(node, data, (), common)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    @property
    def data(self) -> Any:
        """Defensive copy of the current data."""
        return clone_deep(self._data)

    @property
    def raw_data(self) -> Any: return self._data

    @property
    def data_type(self) -> ParsedType: return get_parsed_type(self._data)

    def set_data(self, data: Any) -> ParseContext:
        self._data = data
        return self

    @property
    def is_async(self) -> bool: return self.common.is_async

    @property
    def abort_early(self) -> bool: return self.common.abort_early

    @property
    def parent(self) -> ParseContext | None:
        return self._parent() if self._parent is not None else None

    # ------------------------------------------------------------------
    # Tree
    # ------------------------------------------------------------------

    def child(self, node: Schema, data: Any, segment: PathSegment) -> ParseContext:
        """Context for a nested position, extending the path by ``segment``."""
        ctx = ParseContext(node, data, (*self.path, segment), self.common, parent=self)
        self._children.append(ctx)
        return ctx

    def clone(self, node: Schema, *, isolated: bool = False) -> ParseContext:
        """Context for the same position under ``node``.

        An isolated clone is not linked to this context: its failures stay
        local until the caller decides what to report.
        """
        if isolated: return ParseContext(node, self._data, self.path, self.common)
        ctx = ParseContext(node, self._data, self.path, self.common, parent=self)
        self._children.append(ctx)
        return ctx

    def iter_descendants(self) -> Iterator[ParseContext]:
        for child in self._children:
            yield child
            yield from child.iter_descendants()

    def is_valid(self) -> bool:
        """Valid only if this context and every descendant are valid."""
        if self._invalid: return False
        return not any(c._invalid for c in self.iter_descendants())

    def is_invalid(self) -> bool: return not self.is_valid()

    @property
    def issues(self) -> tuple[Issue, ...]:
        """Issues recorded here or below, in recording order."""
        return tuple(self._issues)

    def _set_invalid(self) -> None:
        ctx: ParseContext | None = self
        while ctx is not None and not ctx._invalid:
            ctx._invalid = True
            ctx = ctx.parent

    def _add_issue(self, issue: Issue) -> None:
        ctx: ParseContext | None = self
        while ctx is not None:
            ctx._issues.append(issue)
            ctx = ctx.parent

    # ------------------------------------------------------------------
    # Issue recording
    # ------------------------------------------------------------------

    def dirty(self, kind: IssueKind, payload: Any = None) -> ParseContext:
        """Record an issue here. No-op on an invalid branch under abort-early."""
        if self.abort_early and self.is_invalid(): return self
        self._set_invalid()
        draft = Issue(
            kind=kind,
            path=self.path,
            payload=payload,
            data=self.data,
            parsed_type=self.data_type,
            schema=self.node.kind.value,
            hint=self.node.hint,
        )
        maps = (self.common.registry.get_error_map(), self.node.options.error_map, self.common.error_map)
        issue = replace(draft, message=resolve_message(draft, maps))
        self._add_issue(issue)
        return self

    def ok(self, value: Any) -> ParseResult:
        return Ok(value)

    def abort(self) -> ParseResult:
        return Err(ValidationError(self.issues, formatter=self.common.registry.get_issues_formatter()))

    # ------------------------------------------------------------------
    # Issue helpers
    # ------------------------------------------------------------------

    def required(self) -> ParseContext:
        return self.dirty(IssueKind.REQUIRED)

    def invalid_type(self, expected: ParsedType) -> ParseContext:
        """InvalidType, or Required when the data is absent."""
        if self._data is UNDEFINED: return self.required()
        return self.dirty(IssueKind.INVALID_TYPE, InvalidTypePayload(expected=expected, received=self.data_type))

    def invalid_check(self, kind: IssueKind, check: Check) -> ParseContext:
        return self.dirty(kind, check)

    def invalid_enum_value(self, expected: tuple[Any, ...]) -> ParseContext:
        return self.dirty(IssueKind.INVALID_ENUM_VALUE, InvalidEnumValuePayload(expected=expected, received=self.data))

    def invalid_literal(self, expected: Any) -> ParseContext:
        return self.dirty(IssueKind.INVALID_LITERAL, InvalidLiteralPayload(expected=expected, received=self.data))

    def invalid_arguments(self, error: ValidationError) -> ParseContext:
        return self.dirty(IssueKind.INVALID_ARGUMENTS, NestedErrorPayload(error=error))

    def invalid_return_type(self, error: ValidationError) -> ParseContext:
        return self.dirty(IssueKind.INVALID_RETURN_TYPE, NestedErrorPayload(error=error))

    def invalid_union(self, union_issues: tuple[Issue, ...]) -> ParseContext:
        return self.dirty(IssueKind.INVALID_UNION, InvalidUnionPayload(union_issues=union_issues))

    def invalid_intersection(self) -> ParseContext:
        return self.dirty(IssueKind.INVALID_INTERSECTION)

    def invalid_instance(self, expected: str) -> ParseContext:
        return self.dirty(IssueKind.INVALID_INSTANCE, InvalidInstancePayload(expected=expected))

    def unrecognized_keys(self, keys: tuple[Any, ...]) -> ParseContext:
        return self.dirty(IssueKind.UNRECOGNIZED_KEYS, UnrecognizedKeysPayload(keys=keys))

    def forbidden(self) -> ParseContext:
        return self.dirty(IssueKind.FORBIDDEN)

    def __repr__(self) -> str:
        return f"ParseContext(path={list(self.path)!r}, node={self.node.kind.value}, valid={self.is_valid()})"
