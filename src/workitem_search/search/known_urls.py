"""Registry of known application URLs.

A known URL is a named regular expression describing a route whose links
search should understand, e.g. the work-item detail page. Patterns are
registered without protocol and without trailing slash because both are
removed from a URL before it is matched.

Usage:
    registry = KnownURLRegistry()
    register_work_item_routes(registry, "openshift.io")
    registry.freeze()

    match = registry.lookup("openshift.io/acme/demo/plan/detail/42")
    match.pattern_name  # "work-item-list-details"
    match.number        # "42"
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
import logging
import re
import threading

from workitem_search.domain.search import URLMatch


logger = logging.getLogger(__name__)

LIST_DETAIL_PATTERN = "work-item-list-details"
BOARD_DETAIL_PATTERN = "work-item-board-details"

LIST_DETAIL_ROUTE = "plan/detail"
BOARD_DETAIL_ROUTE = "plan/board/detail"


class ConfigurationError(ValueError):
    """Raised when a known-URL pattern cannot be registered."""


@dataclass(frozen=True, slots=True)
class KnownURLPattern:
    """A registered URL pattern.

    Attributes:
        name: Unique registration key, reported back as the match tag.
        regex_text: Source of the regular expression.
        compiled: Compiled matcher for ``regex_text``.
        group_names: Named capture groups in the order they appear.
    """

    name: str
    regex_text: str
    compiled: re.Pattern[str]
    group_names: tuple[str, ...]

    @classmethod
    def compile(cls, name: str, regex_text: str) -> KnownURLPattern:
        try:
            compiled = re.compile(regex_text)
        except re.error as exc:
            raise ConfigurationError(f"Invalid regular expression for known URL {name!r}: {exc}") from exc
        group_names = tuple(group for group, _ in sorted(compiled.groupindex.items(), key=lambda item: item[1]))
        return cls(name=name, regex_text=regex_text, compiled=compiled, group_names=group_names)

    def match(self, url: str) -> URLMatch | None:
        """Match the whole of ``url``; groups that did not take part map to ""."""
        found = self.compiled.fullmatch(url)
        if found is None:
            return None
        captures = {group: found.group(group) or "" for group in self.group_names}
        return URLMatch(pattern_name=self.name, captures=captures)


class KnownURLRegistry:
    """Registry of known URL patterns.

    Built once at process startup, then frozen and shared read-only by every
    classifier. Writers replace the pattern mapping wholesale so readers never
    observe a partially updated dict.
    """

    def __init__(self) -> None:
        self._patterns: dict[str, KnownURLPattern] = {}
        self._lock = threading.Lock()
        self._frozen = False

    def register(self, name: str, regex_text: str) -> KnownURLPattern:
        """Compile ``regex_text`` and store it under ``name``.

        An existing registration with the same name is replaced.

        Raises:
            ConfigurationError: If the expression does not compile or the
                registry has been frozen.
        """
        pattern = KnownURLPattern.compile(name, regex_text)
        with self._lock:
            self._ensure_mutable(name)
            self._patterns = {**self._patterns, name: pattern}
        logger.debug("Registered known URL %s", name, extra={"pattern": regex_text, "groups": pattern.group_names})
        return pattern

    def unregister(self, name: str) -> None:
        """Remove a registration. Unknown names are ignored."""
        with self._lock:
            self._ensure_mutable(name)
            if name not in self._patterns:
                return
            self._patterns = {key: value for key, value in self._patterns.items() if key != name}
        logger.debug("Unregistered known URL %s", name)

    def freeze(self) -> None:
        """Make the registry read-only."""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, url: str) -> URLMatch | None:
        """Return the first registered pattern matching all of ``url``.

        Patterns are tried in registration order; deployments are expected to
        register mutually exclusive routes.
        """
        for pattern in tuple(self._patterns.values()):
            match = pattern.match(url)
            if match is not None:
                return match
        return None

    def get(self, name: str) -> KnownURLPattern | None:
        return self._patterns.get(name)

    def names(self) -> list[str]:
        return list(self._patterns)

    def registered_patterns(self) -> dict[str, KnownURLPattern]:
        """Snapshot of every registration keyed by name."""
        return dict(self._patterns)

    def _ensure_mutable(self, name: str) -> None:
        if self._frozen:
            raise ConfigurationError(f"Known URL registry is frozen; cannot change {name!r}")

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, name: object) -> bool:
        return name in self._patterns

    def __iter__(self) -> Iterator[KnownURLPattern]:
        return iter(tuple(self._patterns.values()))


def work_item_route_pattern(host: str, route: str) -> str:
    """Build the expression for a work-item detail route on ``host``.

    Matches ``<host>/<org>/<space>/<route>[/<number>]``.
    """
    route = route.strip("/")
    return (
        rf"(?P<domain>{re.escape(host)})/(?P<org>[^/]+)/(?P<space>[^/]+)"
        rf"(?P<path>/{re.escape(route)})(?:/(?P<number>[0-9]+))?"
    )


def register_work_item_routes(registry: KnownURLRegistry, host: str) -> None:
    """Register the work-item list and board detail routes served by ``host``."""
    registry.register(LIST_DETAIL_PATTERN, work_item_route_pattern(host, LIST_DETAIL_ROUTE))
    registry.register(BOARD_DETAIL_PATTERN, work_item_route_pattern(host, BOARD_DETAIL_ROUTE))
    logger.info("Registered work-item routes for %s", host)


def register_patterns(registry: KnownURLRegistry, patterns: Mapping[str, str]) -> None:
    """Register every ``name -> regex`` pair of ``patterns``."""
    for name, regex_text in patterns.items():
        registry.register(name, regex_text)
