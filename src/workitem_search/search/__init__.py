"""Search input compilation: known-URL registry, URL classifier and query compiler."""

from workitem_search.search.classifier import (
    NUMBER_SUFFIX,
    WORD_SUFFIX,
    UrlClassifier,
    has_url_body,
    looks_like_url,
    strip_protocol,
    strip_url,
)
from workitem_search.search.known_urls import (
    BOARD_DETAIL_PATTERN,
    LIST_DETAIL_PATTERN,
    ConfigurationError,
    KnownURLPattern,
    KnownURLRegistry,
    register_patterns,
    register_work_item_routes,
    work_item_route_pattern,
)
from workitem_search.search.query_compiler import SearchQueryCompiler, compile_search_query, tokenize


__all__ = [
    "BOARD_DETAIL_PATTERN",
    "LIST_DETAIL_PATTERN",
    "NUMBER_SUFFIX",
    "WORD_SUFFIX",
    "ConfigurationError",
    "KnownURLPattern",
    "KnownURLRegistry",
    "SearchQueryCompiler",
    "UrlClassifier",
    "compile_search_query",
    "has_url_body",
    "looks_like_url",
    "register_patterns",
    "register_work_item_routes",
    "strip_protocol",
    "strip_url",
    "tokenize",
    "work_item_route_pattern",
]
