"""URL classification for search input.

Decides whether a token looks like a URL and turns URL tokens into search
fragments. A URL pointing at a registered work-item route with a number
becomes a disjunction, so the item can be found either by its number or by
the literal link text:

    openshift.io/acme/demo/plan/detail/42  ->  (42:*A | openshift.io/acme/demo/plan/detail/42:*)

Anything else degrades to a literal prefix term (``<url>:*``).
"""

from __future__ import annotations

from collections.abc import Callable
import logging
import re

from workitem_search.domain.search import URLClassification
from workitem_search.observability.metrics import URL_CLASSIFICATIONS
from workitem_search.search.known_urls import KnownURLRegistry


logger = logging.getLogger(__name__)

# Suffixes understood by the full-text engine: ":*" is a prefix match, "A"
# raises the weight of the term.
WORD_SUFFIX = ":*"
NUMBER_SUFFIX = ":*A"

_PROTOCOL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")
_HOST_WITH_PATH_RE = re.compile(r"[\w-]+(?:\.[\w-]+)+(?::\d+)?/")
_DOTTED_RE = re.compile(r"[^.\s]\.[^.\s]")


def strip_protocol(url: str) -> str:
    """Remove a leading ``scheme://`` from ``url``."""
    return _PROTOCOL_RE.sub("", url, count=1)


def strip_url(url: str) -> str:
    """Remove the protocol and any trailing slashes."""
    return strip_protocol(url.strip()).rstrip("/")


def has_url_body(url: str) -> bool:
    """Return True when stripping ``url`` leaves more than a bare scheme separator."""
    stripped = strip_url(url)
    return bool(stripped) and not stripped.endswith(":")


def _has_scheme(token: str) -> bool:
    return "://" in token


def _has_host_with_path(token: str) -> bool:
    return _HOST_WITH_PATH_RE.search(token) is not None


def _has_dotted_segment(token: str) -> bool:
    return _DOTTED_RE.search(token) is not None


# Checked in order. This is a heuristic, not a URL grammar: a token flagged
# here that no pattern recognizes still ends up as a literal term.
URL_HEURISTICS: tuple[Callable[[str], bool], ...] = (
    _has_scheme,
    _has_host_with_path,
    _has_dotted_segment,
)


def looks_like_url(token: str) -> bool:
    """Return True when ``token`` should be treated as a URL candidate."""
    if not token or any(ch.isspace() for ch in token):
        return False
    return any(check(token) for check in URL_HEURISTICS)


class UrlClassifier:
    """Classifies URLs against a shared, read-only known-URL registry."""

    def __init__(self, registry: KnownURLRegistry) -> None:
        self.registry = registry

    def is_known_url(self, url: str) -> tuple[bool, str | None]:
        """Check ``url`` against the registry.

        Returns:
            ``(True, pattern_name)`` for a registered URL, ``(False, None)`` otherwise.
        """
        match = self.registry.lookup(strip_url(url))
        if match is None:
            return False, None
        return True, match.pattern_name

    def classify_for_search(self, url: str) -> URLClassification:
        """Turn ``url`` into a search fragment.

        Known URLs carrying a work-item number yield ``(<number>:*A | <url>:*)``;
        every other URL yields ``<url>:*``. Never raises.
        """
        if not has_url_body(url):
            URL_CLASSIFICATIONS.labels(outcome="unknown").inc()
            return URLClassification(fragment=f"{url}{WORD_SUFFIX}", matched_known=False)

        stripped = strip_url(url)
        match = self.registry.lookup(stripped)
        if match is None:
            outcome = "unknown"
            result = URLClassification(fragment=f"{stripped}{WORD_SUFFIX}", matched_known=False)
        elif match.number:
            outcome = "known_with_number"
            result = URLClassification(
                fragment=f"({match.number}{NUMBER_SUFFIX} | {stripped}{WORD_SUFFIX})",
                matched_known=True,
                pattern_name=match.pattern_name,
            )
        else:
            outcome = "known"
            result = URLClassification(
                fragment=f"{stripped}{WORD_SUFFIX}",
                matched_known=True,
                pattern_name=match.pattern_name,
            )

        URL_CLASSIFICATIONS.labels(outcome=outcome).inc()
        logger.debug(
            "Classified URL %s as %s",
            stripped,
            outcome,
            extra={"url": stripped, "search_query": result.fragment, "pattern_name": result.pattern_name},
        )
        return result
