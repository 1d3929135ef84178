"""Compile raw search input into a keyword query.

Each whitespace-separated token lands in exactly one place:

- ``number:<digits>``  -> ``numbers`` as ``<digits>:*A``
- URL-like tokens      -> ``words`` via the URL classifier
- anything else        -> ``words`` as ``<token>:*``

A bare number such as ``800`` is an ordinary word; only the explicit
``number:`` form is boosted as a work-item number.
"""

from __future__ import annotations

import logging
import re

from workitem_search.domain.search import KeywordQuery
from workitem_search.observability.metrics import QUERIES_COMPILED
from workitem_search.observability.tracing import create_span
from workitem_search.search.classifier import (
    NUMBER_SUFFIX,
    WORD_SUFFIX,
    UrlClassifier,
    has_url_body,
    looks_like_url,
    strip_protocol,
)
from workitem_search.search.known_urls import KnownURLRegistry


logger = logging.getLogger(__name__)

NUMBER_TOKEN_RE = re.compile(r"number:([0-9]+)")


def tokenize(text: str) -> list[str]:
    """Split on whitespace, dropping empty tokens."""
    return text.split()


class SearchQueryCompiler:
    """Stateless compiler from search text to :class:`KeywordQuery`.

    Safe to share between threads once the registry behind the classifier
    has been frozen.
    """

    def __init__(self, classifier: UrlClassifier) -> None:
        self.classifier = classifier

    @classmethod
    def for_registry(cls, registry: KnownURLRegistry) -> SearchQueryCompiler:
        return cls(UrlClassifier(registry))

    def compile(self, text: str) -> KeywordQuery:
        numbers: list[str] = []
        words: list[str] = []

        with create_span("search.compile") as span:
            for token in tokenize(text):
                number = NUMBER_TOKEN_RE.fullmatch(token)
                if number is not None:
                    numbers.append(f"{number.group(1)}{NUMBER_SUFFIX}")
                elif looks_like_url(token) and has_url_body(token):
                    words.append(self.classifier.classify_for_search(strip_protocol(token)).fragment)
                else:
                    words.append(f"{token}{WORD_SUFFIX}")

            span.set_attribute("search.numbers", len(numbers))
            span.set_attribute("search.words", len(words))

        query = KeywordQuery(numbers=numbers, words=words)
        QUERIES_COMPILED.labels().inc()
        logger.debug("Search keywords: %r -> %s", text, query.terms())
        return query


def compile_search_query(text: str, registry: KnownURLRegistry) -> KeywordQuery:
    """Compile ``text`` against ``registry`` in one call."""
    return SearchQueryCompiler.for_registry(registry).compile(text)
