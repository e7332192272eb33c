"""
Async GitHub REST API client.

Features:
- httpx.AsyncClient with configurable timeouts, shared across users.
- Bearer token supplied per call (each user brings their own token).
- Call-site specific error messages, raised as ``UpstreamRequestFailedError``.
- Proper 403/429 rate-limit handling (reads X-RateLimit-Reset header).
- Base64 file content decoding for the contents API.

No retries: a failed call fails the feature that made it.
"""

from __future__ import annotations

import base64
import binascii
import datetime as dt
import json
import logging
from typing import Any

import httpx

from tools_hub.errors import RateLimitError, UpstreamRequestFailedError
from tools_hub.settings import Settings

logger = logging.getLogger("tools_hub.github_client")


# ── Helpers ─────────────────────────────────────────────────────
def _rate_limit_reset(response: httpx.Response) -> int | None:
    """Extract X-RateLimit-Reset header (unix timestamp) if present."""
    val = response.headers.get("x-ratelimit-reset")
    if val:
        try:
            return int(val)
        except ValueError:
            pass
    return None


def _check_rate_limit(response: httpx.Response) -> None:
    """Raise RateLimitError if response indicates rate limiting."""
    if response.status_code in (403, 429):
        remaining = response.headers.get("x-ratelimit-remaining")
        # GitHub returns 403 with remaining=0 when rate-limited
        if response.status_code == 429 or remaining == "0":
            reset_ts = _rate_limit_reset(response)
            hint = " Try again later."
            if reset_ts:
                reset_dt = dt.datetime.fromtimestamp(reset_ts, tz=dt.timezone.utc)
                hint = f" Try again after {reset_dt.strftime('%Y-%m-%d %H:%M:%S UTC')}."
            raise RateLimitError(
                f"GitHub rate limit hit.{hint}", reset_timestamp=reset_ts
            )


def decode_content(payload: dict[str, Any]) -> str:
    """Decode the base64 ``content`` field of a contents API response."""
    return base64.b64decode(payload.get("content", "")).decode(errors="replace")


# ── Client ──────────────────────────────────────────────────────
class GitHubClient:
    """Async GitHub REST API wrapper."""

    def __init__(
        self, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> None:
        self._settings = settings
        self._client = client or httpx.AsyncClient(
            base_url=settings.github_api_base,
            headers={
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": "github-tools-hub/1.0",
            },
            timeout=httpx.Timeout(
                connect=settings.http_connect_timeout,
                read=settings.http_read_timeout,
                write=settings.http_read_timeout,
                pool=settings.http_read_timeout,
            ),
        )

    # ── Low-level request ──────────────────────────────────────
    async def _get(
        self,
        path: str,
        token: str,
        *,
        error_message: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET *path*; any non-2xx or network failure raises *error_message*."""
        try:
            resp = await self._client.get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("GitHub request %s failed: %s", path, exc)
            raise UpstreamRequestFailedError(error_message) from exc

        _check_rate_limit(resp)

        if not resp.is_success:
            logger.info("GitHub %s returned %s", path, resp.status_code)
            raise UpstreamRequestFailedError(error_message)
        return resp

    async def _get_json(self, path: str, token: str, *, error_message: str, **kw) -> Any:
        resp = await self._get(path, token, error_message=error_message, **kw)
        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("GitHub %s returned a non-JSON body", path)
            raise UpstreamRequestFailedError(error_message) from exc

    # ── High-level fetch methods ───────────────────────────────
    async def fetch_authenticated_user(self, token: str) -> dict:
        """Token check: the user the token belongs to."""
        return await self._get_json("/user", token, error_message="Invalid GitHub token")

    async def fetch_user(self, token: str, username: str) -> dict:
        return await self._get_json(
            f"/users/{username}", token, error_message="GitHub user not found"
        )

    async def fetch_user_repos(self, token: str, username: str) -> list[dict]:
        return await self._get_json(
            f"/users/{username}/repos",
            token,
            error_message="Failed to fetch repositories",
        )

    async def fetch_repo(self, token: str, owner: str, repo: str) -> dict:
        return await self._get_json(
            f"/repos/{owner}/{repo}", token, error_message="Failed to fetch repository"
        )

    async def fetch_languages(self, token: str, owner: str, repo: str) -> dict[str, int]:
        """Language name -> byte count."""
        return await self._get_json(
            f"/repos/{owner}/{repo}/languages",
            token,
            error_message="Failed to fetch repository languages",
        )

    async def fetch_commits(self, token: str, owner: str, repo: str) -> list[dict]:
        return await self._get_json(
            f"/repos/{owner}/{repo}/commits",
            token,
            error_message="Failed to fetch repository commits",
        )

    async def fetch_tree(
        self, token: str, owner: str, repo: str, branch: str
    ) -> list[dict]:
        """Fetch the full tree of *branch* recursively.

        Returns a list of tree node dicts (path, type, size) capped at
        ``settings.tree_max_entries``.
        """
        data = await self._get_json(
            f"/repos/{owner}/{repo}/git/trees/{branch}",
            token,
            error_message="Failed to fetch repository contents",
            params={"recursive": "1"},
        )
        tree_items: list[dict] = data.get("tree", [])
        if len(tree_items) > self._settings.tree_max_entries:
            tree_items = tree_items[: self._settings.tree_max_entries]
        return tree_items

    async def fetch_file_content(
        self, token: str, owner: str, repo: str, path: str
    ) -> str | None:
        """Decoded content of a single file. Returns None when unavailable."""
        try:
            payload = await self._get_json(
                f"/repos/{owner}/{repo}/contents/{path}",
                token,
                error_message=f"Failed to fetch {path}",
            )
        except RateLimitError:
            raise
        except UpstreamRequestFailedError:
            return None

        if not isinstance(payload, dict):
            # A directory listing, not a file
            return None
        try:
            return decode_content(payload)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Undecodable content for %s/%s:%s: %s", owner, repo, path, exc)
            return None

    async def fetch_package_json(self, token: str, owner: str, repo: str) -> dict | None:
        """Parsed ``package.json`` at the repo root, or None."""
        content = await self.fetch_file_content(token, owner, repo, "package.json")
        if content is None:
            return None
        try:
            package = json.loads(content)
        except json.JSONDecodeError:
            logger.debug("Ignoring invalid package.json in %s/%s", owner, repo)
            return None
        return package if isinstance(package, dict) else None

    async def aclose(self) -> None:
        await self._client.aclose()
