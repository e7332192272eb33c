"""Tests for tools_hub.github_client — all HTTP calls mocked via respx."""

import httpx
import pytest
import respx

from tools_hub.errors import RateLimitError, UpstreamRequestFailedError
from tools_hub.github_client import GitHubClient
from tests.conftest import GITHUB, TOKEN, encoded


@pytest.fixture
def github(services) -> GitHubClient:
    return services.github


# ── Profile / repositories ─────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_fetch_user_sends_bearer_token(github):
    route = respx.get(f"{GITHUB}/users/octocat").mock(
        return_value=httpx.Response(200, json={"login": "octocat", "name": "The Octocat"})
    )

    data = await github.fetch_user(TOKEN, "octocat")

    assert data["name"] == "The Octocat"
    assert route.calls.last.request.headers["Authorization"] == f"Bearer {TOKEN}"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_user_not_found(github):
    respx.get(f"{GITHUB}/users/ghost").mock(
        return_value=httpx.Response(404, json={"message": "Not Found"})
    )

    with pytest.raises(UpstreamRequestFailedError, match="GitHub user not found"):
        await github.fetch_user(TOKEN, "ghost")


@pytest.mark.asyncio
@respx.mock
async def test_fetch_repos_failure_message(github):
    respx.get(f"{GITHUB}/users/octocat/repos").mock(
        return_value=httpx.Response(500, json={"message": "boom"})
    )

    with pytest.raises(UpstreamRequestFailedError) as exc_info:
        await github.fetch_user_repos(TOKEN, "octocat")
    assert str(exc_info.value) == "Failed to fetch repositories"


@pytest.mark.asyncio
@respx.mock
async def test_network_error_uses_call_site_message(github):
    respx.get(f"{GITHUB}/users/octocat/repos").mock(
        side_effect=httpx.ConnectError("connection refused")
    )

    with pytest.raises(UpstreamRequestFailedError, match="Failed to fetch repositories"):
        await github.fetch_user_repos(TOKEN, "octocat")


@pytest.mark.asyncio
@respx.mock
async def test_invalid_token(github):
    respx.get(f"{GITHUB}/user").mock(
        return_value=httpx.Response(401, json={"message": "Bad credentials"})
    )

    with pytest.raises(UpstreamRequestFailedError, match="Invalid GitHub token"):
        await github.fetch_authenticated_user("bad-token")


# ── Rate limit ─────────────────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_rate_limited(github):
    respx.get(f"{GITHUB}/repos/owner/repo").mock(
        return_value=httpx.Response(
            403,
            json={"message": "rate limit"},
            headers={
                "x-ratelimit-remaining": "0",
                "x-ratelimit-reset": "1700000000",
            },
        )
    )

    with pytest.raises(RateLimitError) as exc_info:
        await github.fetch_repo(TOKEN, "owner", "repo")
    assert exc_info.value.reset_timestamp == 1700000000
    assert "2023-11-14" in str(exc_info.value)


@pytest.mark.asyncio
@respx.mock
async def test_forbidden_without_rate_limit_is_plain_failure(github):
    respx.get(f"{GITHUB}/repos/owner/private").mock(
        return_value=httpx.Response(403, headers={"x-ratelimit-remaining": "4999"})
    )

    with pytest.raises(UpstreamRequestFailedError) as exc_info:
        await github.fetch_repo(TOKEN, "owner", "private")
    assert not isinstance(exc_info.value, RateLimitError)


# ── Repository data ────────────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_fetch_languages(github):
    respx.get(f"{GITHUB}/repos/owner/repo/languages").mock(
        return_value=httpx.Response(200, json={"Python": 50000, "HTML": 3000})
    )

    assert await github.fetch_languages(TOKEN, "owner", "repo") == {"Python": 50000, "HTML": 3000}


@pytest.mark.asyncio
@respx.mock
async def test_fetch_tree_recursive_and_capped(github, settings):
    items = [{"path": f"f{i}.py", "type": "blob", "size": i} for i in range(80)]
    route = respx.get(
        f"{GITHUB}/repos/owner/repo/git/trees/main", params={"recursive": "1"}
    ).mock(return_value=httpx.Response(200, json={"tree": items, "truncated": False}))

    tree = await github.fetch_tree(TOKEN, "owner", "repo", "main")

    assert route.called
    assert len(tree) == settings.tree_max_entries
    assert tree[0]["path"] == "f0.py"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_tree_failure(github):
    respx.get(f"{GITHUB}/repos/owner/repo/git/trees/dev", params={"recursive": "1"}).mock(
        return_value=httpx.Response(404)
    )

    with pytest.raises(UpstreamRequestFailedError, match="Failed to fetch repository contents"):
        await github.fetch_tree(TOKEN, "owner", "repo", "dev")


# ── File contents ──────────────────────────────────────────────
@pytest.mark.asyncio
@respx.mock
async def test_fetch_file_content_decodes_base64(github):
    respx.get(f"{GITHUB}/repos/owner/repo/contents/README.md").mock(
        return_value=httpx.Response(200, json=encoded("# Hello\nworld"))
    )

    assert await github.fetch_file_content(TOKEN, "owner", "repo", "README.md") == "# Hello\nworld"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_file_content_missing(github):
    respx.get(f"{GITHUB}/repos/owner/repo/contents/nope.txt").mock(
        return_value=httpx.Response(404, json={"message": "Not Found"})
    )

    assert await github.fetch_file_content(TOKEN, "owner", "repo", "nope.txt") is None


@pytest.mark.asyncio
@respx.mock
async def test_fetch_file_content_directory(github):
    respx.get(f"{GITHUB}/repos/owner/repo/contents/src").mock(
        return_value=httpx.Response(200, json=[{"name": "a.py", "type": "file"}])
    )

    assert await github.fetch_file_content(TOKEN, "owner", "repo", "src") is None


@pytest.mark.asyncio
@respx.mock
async def test_fetch_package_json(github):
    respx.get(f"{GITHUB}/repos/owner/repo/contents/package.json").mock(
        return_value=httpx.Response(200, json=encoded({"dependencies": {"react": "^18.0.0"}}))
    )

    package = await github.fetch_package_json(TOKEN, "owner", "repo")
    assert package == {"dependencies": {"react": "^18.0.0"}}


@pytest.mark.asyncio
@respx.mock
async def test_fetch_package_json_invalid(github):
    respx.get(f"{GITHUB}/repos/owner/repo/contents/package.json").mock(
        return_value=httpx.Response(200, json=encoded("{ not json"))
    )

    assert await github.fetch_package_json(TOKEN, "owner", "repo") is None


@pytest.mark.asyncio
@respx.mock
async def test_non_json_body_is_upstream_failure(github):
    respx.get(f"{GITHUB}/users/octocat").mock(
        return_value=httpx.Response(200, text="<html>proxy error</html>")
    )

    with pytest.raises(UpstreamRequestFailedError, match="GitHub user not found"):
        await github.fetch_user(TOKEN, "octocat")
