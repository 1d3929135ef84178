"""Domain models for search query compilation.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- Domain logic lives in domain layer
- No infrastructure dependencies

These models carry the compiled keyword query and the outcome of matching a
URL against the known-URL registry.
"""

from pydantic import BaseModel, ConfigDict, Field


NUMBER_GROUP = "number"


class URLMatch(BaseModel):
    """Value object describing a URL that matched a registered pattern.

    ``pattern_name`` doubles as the classification tag, so callers can tell
    apart URL families (e.g. list vs board detail pages).
    """

    model_config = ConfigDict(frozen=True)

    pattern_name: str
    captures: dict[str, str] = Field(default_factory=dict)

    @property
    def number(self) -> str:
        """Captured work-item number, empty when the pattern has none."""
        return self.captures.get(NUMBER_GROUP, "")

    def group(self, name: str) -> str:
        return self.captures.get(name, "")


class URLClassification(BaseModel):
    """Value object for the search fragment derived from a URL."""

    model_config = ConfigDict(frozen=True)

    fragment: str
    matched_known: bool
    pattern_name: str | None = None


class KeywordQuery(BaseModel):
    """Value object representing a compiled search input.

    ``numbers`` holds boosted work-item number terms, ``words`` holds plain
    word and URL terms. Both keep first-seen input order.
    """

    model_config = ConfigDict(frozen=True)

    numbers: list[str] = Field(default_factory=list)
    words: list[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.numbers and not self.words

    def terms(self) -> list[str]:
        """All terms, numbers first."""
        return [*self.numbers, *self.words]
