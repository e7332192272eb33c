"""
FastAPI application — GitHub Tools Hub API.

Endpoints:
    GET    /health                  → {"status": "ok"}
    GET    /token                   → TokenStatus
    PUT    /token                   → TokenSaved
    DELETE /token                   → 204
    POST   /documentation           → DocumentationResponse
    GET    /documentation/history   → [HistoryEntry]
    POST   /resume                  → resume object
    GET    /resume/history          → [HistoryEntry]
    POST   /challenge               → challenge object
    POST   /challenge/solution      → SolutionResponse
    POST   /learning-path           → learning path object
    POST   /visualize               → visualization object
    POST   /chat/analyze            → ChatSession
    POST   /chat                    → ChatMessage
    POST   /portfolio               → PortfolioResponse
    POST   /portfolio/download      → application/zip
    POST   /translate               → TranslateResponse

Every endpoint except /health needs the ``X-User-Id`` header set by the
authentication proxy in front of this service.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tools_hub import features
from tools_hub.errors import NotAuthenticatedError, ToolsHubError
from tools_hub.features import Services
from tools_hub.github_client import GitHubClient
from tools_hub.llm_client import LLMClient
from tools_hub.logging_config import new_request_id, request_id_ctx, setup_logging
from tools_hub.models import (
    ChatMessage,
    ChatRequest,
    ChatSession,
    DocumentationResponse,
    ErrorResponse,
    HistoryEntry,
    PortfolioResponse,
    RepoRequest,
    SolutionRequest,
    SolutionResponse,
    TokenRequest,
    TokenSaved,
    TokenStatus,
    TranslateRequest,
    TranslateResponse,
    UsernameRequest,
)
from tools_hub.portfolio import zip_site
from tools_hub.settings import settings
from tools_hub.store import InMemoryStore

logger = logging.getLogger("tools_hub.main")


# ── Shared state ───────────────────────────────────────────────
class _State:
    """Mutable container so lifespan and endpoints share instances."""
    services: Services | None = None


state = _State()


def build_services() -> Services:
    return Services(
        settings=settings,
        github=GitHubClient(settings),
        llm=LLMClient(settings),
        store=InMemoryStore(),
    )


def get_services() -> Services:
    """Lazily initialise services for TestClient compatibility."""
    if state.services is None:
        state.services = build_services()
    return state.services


def current_user(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise NotAuthenticatedError()
    return x_user_id.strip()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage client lifetime."""
    setup_logging(settings.log_level)

    services = get_services()

    logger.info(
        "Application started (llm_model=%s, llm_base_url=%s)",
        settings.llm_model,
        settings.llm_base_url or "default",
    )
    if not settings.llm_api_key:
        logger.warning(
            "LLM_API_KEY is not set — generation calls will fail. "
            "Set the env var or add it to .env before sending requests."
        )
    yield

    await services.github.aclose()
    await services.llm.aclose()
    state.services = None
    logger.info("Application shutdown")


app = FastAPI(
    title="GitHub Tools Hub",
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ───────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Middleware: request_id + timing ────────────────────────────
@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    rid = new_request_id()
    request_id_ctx.set(rid)
    t0 = time.perf_counter()
    response = await call_next(request)
    elapsed = round((time.perf_counter() - t0) * 1000, 1)
    response.headers["X-Request-Id"] = rid
    logger.info(
        "%s %s → %s (%.1f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


# ── Error handling ─────────────────────────────────────────────
def _error_response(status: int, message: str) -> JSONResponse:
    """Return the error envelope: {"status": "error", "message": "..."}"""
    body = ErrorResponse(message=message)
    return JSONResponse(status_code=status, content=body.model_dump())


@app.exception_handler(ToolsHubError)
async def tools_hub_error_handler(request: Request, exc: ToolsHubError) -> JSONResponse:
    logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return _error_response(exc.status_code, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(p) for p in err.get("loc", []))
        messages.append(f"{loc}: {err.get('msg', 'validation error')}")
    return _error_response(422, "; ".join(messages))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response(500, "An unexpected error occurred. Please try again.")


def _history(records) -> list[HistoryEntry]:
    return [
        HistoryEntry(id=r.id, subject=r.subject, content=r.content, created_at=r.created_at)
        for r in records
    ]


# ── Endpoints ──────────────────────────────────────────────────
@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/token", response_model=TokenStatus)
async def get_token_status(
    user_id: str = Depends(current_user), services: Services = Depends(get_services)
):
    return await features.token_status(services, user_id)


@app.put("/token", response_model=TokenSaved)
async def put_token(
    body: TokenRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    saved = await features.save_token(services, user_id, body.token)
    return TokenSaved(login=saved["login"])


@app.delete("/token", status_code=204)
async def remove_token(
    user_id: str = Depends(current_user), services: Services = Depends(get_services)
):
    await features.delete_token(services, user_id)
    return Response(status_code=204)


@app.post("/documentation", response_model=DocumentationResponse)
async def documentation(
    body: RepoRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    return await features.generate_documentation(services, user_id, body.repo_url)


@app.get("/documentation/history", response_model=list[HistoryEntry])
async def documentation_history(
    user_id: str = Depends(current_user), services: Services = Depends(get_services)
):
    return _history(await features.list_history(services, features.DOCUMENTATION, user_id))


@app.post("/resume")
async def resume(
    body: UsernameRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return await features.generate_resume(services, user_id, body.username)


@app.get("/resume/history", response_model=list[HistoryEntry])
async def resume_history(
    user_id: str = Depends(current_user), services: Services = Depends(get_services)
):
    return _history(await features.list_history(services, features.RESUME, user_id))


@app.post("/challenge")
async def challenge(
    body: UsernameRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return await features.generate_challenge(services, user_id, body.username)


@app.post("/challenge/solution", response_model=SolutionResponse)
async def challenge_solution(
    body: SolutionRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    return SolutionResponse(solution=await features.reveal_solution(services, body.challenge))


@app.post("/learning-path")
async def learning_path(
    body: UsernameRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return await features.generate_learning_path(services, user_id, body.username)


@app.post("/visualize")
async def visualize(
    body: RepoRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    return await features.generate_visualization(services, user_id, body.repo_url)


@app.post("/chat/analyze", response_model=ChatSession)
async def chat_analyze(
    body: RepoRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    return await features.analyze_for_chat(services, user_id, body.repo_url)


@app.post("/chat", response_model=ChatMessage)
async def chat(
    body: ChatRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    return await features.chat_reply(
        services,
        body.context.model_dump(),
        [m.model_dump() for m in body.messages],
        body.message,
    )


@app.post("/portfolio", response_model=PortfolioResponse)
async def build_portfolio(
    body: UsernameRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    return await features.build_portfolio(services, user_id, body.username)


@app.post("/portfolio/download")
async def download_portfolio(
    body: UsernameRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    bundle = await features.build_portfolio(services, user_id, body.username)
    return Response(
        content=zip_site(bundle["files"]),
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{bundle["username"]}-portfolio.zip"'
        },
    )


@app.post("/translate", response_model=TranslateResponse)
async def translate(
    body: TranslateRequest,
    user_id: str = Depends(current_user),
    services: Services = Depends(get_services),
):
    translated = await features.translate_code(
        services, body.source_code, body.from_lang, body.to_lang
    )
    return TranslateResponse(translated_code=translated)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "tools_hub.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
