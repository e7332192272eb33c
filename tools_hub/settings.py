"""
Centralised application settings loaded from environment variables.
Uses pydantic-settings so every value can be overridden via env vars or a .env file.

The settings object is built once at import time and handed to the clients
in the application lifespan; no module reads credentials on its own.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    # ── Generation model (OpenAI-compatible endpoint) ───────
    llm_api_key: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_base_url: str | None = None
    llm_max_tokens: int = 4096
    llm_temperature: float = 0.7

    # ── GitHub ──────────────────────────────────────────────
    github_api_base: str = "https://api.github.com"

    # ── HTTP client ─────────────────────────────────────────
    http_connect_timeout: float = 5.0
    http_read_timeout: float = 15.0

    # ── Payload limits ──────────────────────────────────────
    tree_max_entries: int = 500
    dependency_scan_repos: int = 30
    portfolio_max_repos: int = 6
    chat_commit_count: int = 5

    # ── Server ──────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    model_config = {"env_prefix": "", "env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton resolved once at process start
settings = Settings()
