"""Validation and normalization of tracker source repository URLs."""

from __future__ import annotations

import logging
import re


logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"

_SSH_RE = re.compile(r"git@(?P<host>[^:/\s]+):(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+?)(?:\.git)?")
_HTTP_RE = re.compile(r"https?://(?P<host>[^/\s]+)/(?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+?)(?:\.git)?/?")

# Path segments git itself refuses as repository names
_RESERVED_REPO_NAMES = frozenset({".", "..", ".git"})

# Same shapes as jonschlinkert/is-git-url: a git, ssh or http(s) scheme, or
# scp-style "git@host:", followed by a path ending in ".git" and optionally a
# trailing slash or a "#ref".
_REPO_URL_RE = re.compile(r"(?:git|ssh|https?|git@[-\w.]+):(?://)?.*?\.git(?:/?|#[-\w.]+?)")


class InvalidSourceURL(ValueError):
    """Raised when a source URL is not a recognized GitHub repository URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid source URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


def normalize_github_url(raw: str) -> str:
    """Normalize a GitHub repository URL to ``https://github.com/<owner>/<repo>.git``.

    Accepts the SSH form (``git@github.com:<owner>/<repo>[.git]``) and the
    HTTP(S) form (``http[s]://github.com/<owner>/<repo>[.git]``).

    Raises:
        InvalidSourceURL: If the URL has neither shape, its host is not github.com,
            or the owner or repository segment is not a usable name.
    """
    candidate = raw.strip()
    match = _SSH_RE.fullmatch(candidate) or _HTTP_RE.fullmatch(candidate)
    if match is None:
        raise InvalidSourceURL(raw, "expected git@github.com:<owner>/<repo> or https://github.com/<owner>/<repo>")

    host = match.group("host").lower()
    if host != GITHUB_HOST:
        raise InvalidSourceURL(raw, f"unsupported host {host!r}")

    owner, repo = match.group("owner"), match.group("repo")
    if not owner.strip(".") or repo in _RESERVED_REPO_NAMES:
        raise InvalidSourceURL(raw, f"invalid repository path {owner}/{repo}")

    normalized = f"https://{GITHUB_HOST}/{owner}/{repo}.git"
    if normalized != candidate:
        logger.debug("Normalized source URL %s -> %s", raw, normalized)
    return normalized


def is_repo_valid_url(raw: str) -> bool:
    """Return True when ``raw`` looks like a clonable git repository URL."""
    if not raw:
        return False
    return _REPO_URL_RE.fullmatch(raw) is not None
