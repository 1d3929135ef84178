"""Domain layer - immutable value objects produced by the search compiler.

Holds the keyword query, the typed known-URL match and the per-URL
classification result. Nothing here depends on logging, metrics or the
registry.
"""

from workitem_search.domain.search import NUMBER_GROUP, KeywordQuery, URLClassification, URLMatch


__all__ = [
    "NUMBER_GROUP",
    "KeywordQuery",
    "URLClassification",
    "URLMatch",
]
