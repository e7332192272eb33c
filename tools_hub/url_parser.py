"""
GitHub repository URL and username validation.

Accepted repository URL forms:
  https://github.com/owner/repo
  https://github.com/owner/repo/
  https://github.com/owner/repo.git
  https://github.com/owner/repo/tree/main/src   (extra path ignored)
  http://www.github.com/owner/repo              (also accepted)

Anything else raises ``InputValidationError``; these run before any
network call.
"""

from __future__ import annotations

import re

from tools_hub.errors import InputValidationError

_GITHUB_URL_RE = re.compile(
    r"^https?://(?:www\.)?github\.com/"
    r"(?P<owner>[A-Za-z0-9\-_.]+)/"
    r"(?P<repo>[A-Za-z0-9\-_.]+?)"
    r"(?:\.git)?(?:/[^\s]*)?\s*$"
)

_USERNAME_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")


def parse_github_url(url: str) -> tuple[str, str]:
    """Return (owner, repo) from a GitHub repository URL."""
    if not url or not url.strip():
        raise InputValidationError("Please enter a repository URL")

    match = _GITHUB_URL_RE.match(url.strip())
    if not match:
        raise InputValidationError("Invalid repository URL")

    return match.group("owner"), match.group("repo")


def parse_username(username: str) -> str:
    """Return the stripped GitHub login, or raise for empty/invalid input."""
    if not username or not username.strip():
        raise InputValidationError("Please enter a GitHub username")

    username = username.strip()
    if not _USERNAME_RE.match(username):
        raise InputValidationError(f"Invalid GitHub username: '{username}'")
    return username
