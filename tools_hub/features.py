"""
Generator features.

Each coroutine is one user action: validate input, load the user's GitHub
token, collect GitHub data, build the prompt, call the model and, for
structured features, normalize + validate the output. Parse and shape
failures are logged here with full diagnostics and re-raised; their
user-visible message stays generic.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from tools_hub import collectors, portfolio, prompts, schemas
from tools_hub.errors import (
    InputValidationError,
    PersistenceError,
    ResponseFormatError,
    TokenMissingError,
)
from tools_hub.github_client import GitHubClient
from tools_hub.llm_client import LLMClient
from tools_hub.normalizer import normalize, normalize_and_validate
from tools_hub.schemas import Schema
from tools_hub.settings import Settings
from tools_hub.store import HistoryRecord, Store
from tools_hub.url_parser import parse_github_url, parse_username

logger = logging.getLogger("tools_hub.features")

DOCUMENTATION = "documentation"
RESUME = "resume"


@dataclass
class Services:
    """Collaborators injected into every feature."""

    settings: Settings
    github: GitHubClient
    llm: LLMClient
    store: Store


# ── Shared steps ───────────────────────────────────────────────
async def require_token(services: Services, user_id: str) -> str:
    token = await services.store.get_token(user_id)
    if not token:
        raise TokenMissingError()
    return token


async def generate_structured(
    services: Services, schema: Schema, prompt: str
) -> dict[str, Any]:
    """Call the model and return a validated result for *schema*."""
    raw = await services.llm.generate_content(prompt)
    try:
        return normalize_and_validate(raw, schema)
    except ResponseFormatError as exc:
        logger.warning(
            "Unusable %s response: %s", schema.name, type(exc).__name__,
            extra=exc.diagnostics(),
        )
        raise


async def _save_history(
    services: Services, feature: str, user_id: str, subject: str, content: str
) -> None:
    try:
        await services.store.insert_history(feature, user_id, subject, content)
    except Exception as exc:
        logger.exception("Failed to save %s history", feature)
        raise PersistenceError(f"Failed to save {feature}") from exc


# ── Token management ───────────────────────────────────────────
async def save_token(services: Services, user_id: str, token: str) -> dict[str, Any]:
    """Check the token against GitHub, then upsert it for *user_id*."""
    token = (token or "").strip()
    if not token:
        raise InputValidationError("Please enter a GitHub token")

    account = await services.github.fetch_authenticated_user(token)
    await services.store.upsert_token(user_id, token)
    logger.info("Stored GitHub token", extra={"user_id": user_id})
    return {"login": account.get("login")}


async def delete_token(services: Services, user_id: str) -> None:
    await services.store.delete_token(user_id)


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}{'*' * (len(token) - 8)}{token[-4:]}"


async def token_status(services: Services, user_id: str) -> dict[str, Any]:
    token = await services.store.get_token(user_id)
    return {"has_token": bool(token), "masked_token": mask_token(token) if token else None}


# ── Documentation ──────────────────────────────────────────────
async def generate_documentation(
    services: Services, user_id: str, repo_url: str
) -> dict[str, Any]:
    owner, repo = parse_github_url(repo_url)
    token = await require_token(services, user_id)

    analytics = await collectors.analyze_repository(services.github, token, owner, repo)
    documentation = await services.llm.generate_content(
        prompts.documentation_prompt(analytics)
    )

    await _save_history(services, DOCUMENTATION, user_id, repo_url.strip(), documentation)
    return {"documentation": documentation, "analytics": analytics}


# ── Resume ─────────────────────────────────────────────────────
async def generate_resume(
    services: Services, user_id: str, username: str
) -> dict[str, Any]:
    username = parse_username(username)
    token = await require_token(services, user_id)

    profile = await collectors.user_profile(services.github, token, username)
    resume = await generate_structured(services, schemas.RESUME, prompts.resume_prompt(profile))

    await _save_history(services, RESUME, user_id, username, json.dumps(resume, indent=2))
    return resume


async def list_history(
    services: Services, feature: str, user_id: str
) -> list[HistoryRecord]:
    return await services.store.list_history(feature, user_id)


# ── Coding challenge ───────────────────────────────────────────
async def generate_challenge(
    services: Services, user_id: str, username: str
) -> dict[str, Any]:
    username = parse_username(username)
    token = await require_token(services, user_id)

    stack = await collectors.analyze_stack(
        services.github, token, username,
        max_repos=services.settings.dependency_scan_repos,
    )
    return await generate_structured(
        services, schemas.CHALLENGE, prompts.challenge_prompt(stack)
    )


async def reveal_solution(services: Services, challenge: dict[str, Any]) -> str:
    if not challenge.get("description"):
        raise InputValidationError("Challenge description is required")
    return await services.llm.generate_content(prompts.solution_prompt(challenge))


# ── Learning path ──────────────────────────────────────────────
async def generate_learning_path(
    services: Services, user_id: str, username: str
) -> dict[str, Any]:
    username = parse_username(username)
    token = await require_token(services, user_id)

    stack = await collectors.analyze_stack(
        services.github, token, username,
        max_repos=services.settings.dependency_scan_repos,
    )
    return await generate_structured(
        services, schemas.LEARNING_PATH, prompts.learning_path_prompt(stack)
    )


# ── Codebase visualizer ────────────────────────────────────────
async def generate_visualization(
    services: Services, user_id: str, repo_url: str
) -> dict[str, Any]:
    owner, repo = parse_github_url(repo_url)
    token = await require_token(services, user_id)

    structure = await collectors.repository_structure(services.github, token, owner, repo)
    return await generate_structured(
        services, schemas.VISUALIZATION, prompts.visualization_prompt(structure)
    )


# ── Repository chatbot ─────────────────────────────────────────
async def analyze_for_chat(
    services: Services, user_id: str, repo_url: str
) -> dict[str, Any]:
    owner, repo = parse_github_url(repo_url)
    token = await require_token(services, user_id)

    context = await collectors.chat_context(
        services.github, token, owner, repo,
        commit_count=services.settings.chat_commit_count,
    )
    welcome = {"role": "assistant", "content": prompts.welcome_message(context)}
    return {"context": context, "messages": [welcome]}


async def chat_reply(
    services: Services,
    context: dict[str, Any],
    messages: list[dict[str, str]],
    question: str,
) -> dict[str, str]:
    if not question or not question.strip():
        raise InputValidationError("Please enter a message")

    reply = await services.llm.generate_content(
        prompts.chat_prompt(context, messages, question.strip())
    )
    return {"role": "assistant", "content": reply}


# ── Portfolio ──────────────────────────────────────────────────
async def build_portfolio(
    services: Services, user_id: str, username: str
) -> dict[str, Any]:
    username = parse_username(username)
    token = await require_token(services, user_id)

    data = await collectors.portfolio_profile(
        services.github, token, username,
        max_repos=services.settings.portfolio_max_repos,
    )
    files = portfolio.build_site(data)
    return {"username": username, "files": files, "preview_html": files["index.html"]}


# ── Code translator ────────────────────────────────────────────
async def translate_code(
    services: Services, source_code: str, from_lang: str, to_lang: str
) -> str:
    if not source_code or not source_code.strip():
        raise InputValidationError("Please enter source code")
    if not from_lang.strip() or not to_lang.strip():
        raise InputValidationError("Please choose both languages")

    raw = await services.llm.generate_content(
        prompts.translation_prompt(source_code, from_lang.strip(), to_lang.strip())
    )
    return normalize(raw)
