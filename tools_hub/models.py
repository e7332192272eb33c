"""
Pydantic models for request / response / error payloads.

Structured generator results (challenge, resume, ...) are returned as the
validated model output itself, so they have no response model here.

  Error:    {"status": "error", "message": "..."}
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


# ── Requests ───────────────────────────────────────────────────
class RepoRequest(BaseModel):
    repo_url: str = Field(..., description="URL of a GitHub repository")


class UsernameRequest(BaseModel):
    username: str = Field(..., description="GitHub login")


class TokenRequest(BaseModel):
    token: str = Field(..., description="GitHub personal access token")


class SolutionRequest(BaseModel):
    challenge: dict[str, Any] = Field(..., description="A previously generated challenge")


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class RepoChatContext(BaseModel):
    name: str
    description: str | None = None
    languages: dict[str, int] = Field(default_factory=dict)
    lastCommits: list[dict[str, Any]] = Field(default_factory=list)


class ChatRequest(BaseModel):
    context: RepoChatContext
    messages: list[ChatMessage] = Field(default_factory=list)
    message: str


class TranslateRequest(BaseModel):
    source_code: str
    from_lang: str = "JavaScript"
    to_lang: str = "Python"


# ── Responses ──────────────────────────────────────────────────
class TokenStatus(BaseModel):
    has_token: bool
    masked_token: str | None = None


class TokenSaved(BaseModel):
    status: str = "saved"
    login: str | None = None


class DocumentationResponse(BaseModel):
    documentation: str
    analytics: dict[str, Any]


class HistoryEntry(BaseModel):
    id: int
    subject: str = Field(..., description="Repository URL or GitHub username")
    content: str
    created_at: datetime


class SolutionResponse(BaseModel):
    solution: str


class ChatSession(BaseModel):
    context: RepoChatContext
    messages: list[ChatMessage]


class PortfolioResponse(BaseModel):
    username: str
    files: dict[str, str]
    preview_html: str


class TranslateResponse(BaseModel):
    translated_code: str


class ErrorResponse(BaseModel):
    status: str = "error"
    message: str
