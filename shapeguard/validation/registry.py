"""Global Configuration Registry

Process-wide defaults consulted as the lowest-priority layer of option
merging and message resolution. A ``Registry`` is an ordinary object: build
your own and pass it per call through ``ParseOptions(registry=...)``, or use
the shared default returned by ``get_registry()`` (seeded from settings).

Usage:
    registry = get_registry()
    registry.set_error_map({"required": "This field is required"})
    registry.set_options(abort_early=True)

    isolated = Registry(options=RegistryOptions(abort_early=False))
    schema.parse(raw, ParseOptions(registry=isolated))
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from functools import lru_cache

from shapeguard.config import get_settings
from shapeguard.logging import registry_logger

from .error_map import ErrorMap, IssuesFormatter, default_issues_formatter

logger = registry_logger()


@dataclass(frozen=True, slots=True)
class RegistryOptions:
    abort_early: bool = False


class Registry:
    """Holder of default options, the global error map and the issues formatter."""

    __slots__ = ("_options", "_error_map", "_issues_formatter")

    def __init__(
        self,
        *,
        options: RegistryOptions | None = None,
        error_map: ErrorMap | None = None,
        issues_formatter: IssuesFormatter | None = None,
    ):
        self._options = options or RegistryOptions()
        self._error_map = error_map
        self._issues_formatter = issues_formatter or default_issues_formatter

    def get_options(self) -> RegistryOptions: return self._options

    def set_options(self, **changes) -> Registry:
        self._options = replace(self._options, **changes)
        logger.info("registry.options_set", **changes)
        return self

    def get_error_map(self) -> ErrorMap | None: return self._error_map

    def set_error_map(self, error_map: ErrorMap | None) -> Registry:
        self._error_map = error_map
        logger.info("registry.error_map_set", custom=error_map is not None)
        return self

    def get_issues_formatter(self) -> IssuesFormatter: return self._issues_formatter

    def set_issues_formatter(self, formatter: IssuesFormatter | None) -> Registry:
        self._issues_formatter = formatter or default_issues_formatter
        logger.info("registry.issues_formatter_set", custom=formatter is not None)
        return self

    def reset(self) -> Registry:
        """Restore built-in defaults."""
        self._options = RegistryOptions()
        self._error_map = None
        self._issues_formatter = default_issues_formatter
        return self

    def __repr__(self) -> str:
        return f"Registry(options={self._options!r}, error_map={self._error_map!r})"


@lru_cache
def get_registry() -> Registry:
    """Shared process-wide registry."""
    return Registry(options=RegistryOptions(abort_early=get_settings().ABORT_EARLY))
