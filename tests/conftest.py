"""Shared fixtures: settings, a mocked generation client and wired services."""

import base64
import json
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio

from tools_hub.features import Services
from tools_hub.github_client import GitHubClient
from tools_hub.llm_client import LLMClient
from tools_hub.settings import Settings
from tools_hub.store import InMemoryStore

GITHUB = "https://api.github.com"
USER_ID = "user-123"
TOKEN = "ghp_testtoken1234567890"


def encoded(content: str | dict) -> dict:
    """Contents API payload for *content* (dicts are JSON-encoded first)."""
    if isinstance(content, dict):
        content = json.dumps(content)
    return {
        "type": "file",
        "encoding": "base64",
        "content": base64.b64encode(content.encode()).decode(),
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        llm_api_key="test-key",
        dependency_scan_repos=5,
        tree_max_entries=50,
    )


@pytest.fixture
def llm() -> AsyncMock:
    return AsyncMock(spec=LLMClient)


@pytest_asyncio.fixture
async def services(settings, llm):
    async with httpx.AsyncClient(base_url=settings.github_api_base) as hc:
        yield Services(
            settings=settings,
            github=GitHubClient(settings, client=hc),
            llm=llm,
            store=InMemoryStore(),
        )


@pytest_asyncio.fixture
async def authed(services):
    """Services with a GitHub token already stored for USER_ID."""
    await services.store.upsert_token(USER_ID, TOKEN)
    return services
