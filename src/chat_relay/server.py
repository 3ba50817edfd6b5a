# HTTP front end for the relay.
# Run with: uvicorn --factory chat_relay.server:create_app --reload --port 3000
# or: python -m chat_relay

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles

from chat_relay._exceptions import InvalidRequestError, OfflineFailure
from chat_relay.config import Settings
from chat_relay.service import ChatService, validate_message

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)


async def _read_message(request: Request) -> str:
    """Decode the JSON body and return its ``message`` field."""
    raw = await request.body()
    try:
        body: Any = json.loads(raw) if raw else None
    except ValueError:
        body = None
    return validate_message(body)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[ChatService] = None,
) -> FastAPI:
    settings = settings or (service.settings if service else Settings.from_env())
    service = service or ChatService(settings)

    index_html = settings.static_dir / "index.html"
    logger.info(
        "[AI_AGENT_BOOT] cwd=%s static_dir=%s index_html_exists=%s",
        os.getcwd(),
        settings.static_dir,
        index_html.exists(),
    )
    if not settings.groq_configured:
        logger.warning("GROQ_API_KEY not set. Server will run in offline demo mode.")

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await service.aclose()

    app = FastAPI(title="Chat Relay", lifespan=lifespan)
    app.state.service = service
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        logger.info("[REQ] %s %s", request.method, request.url.path)
        return await call_next(request)

    async def chat(request: Request) -> JSONResponse:
        try:
            message = await _read_message(request)
            reply = await service.reply(message)
        except InvalidRequestError as exc:
            return _error(400, str(exc))
        except OfflineFailure as exc:
            return _error(500, str(exc))
        return JSONResponse(content=reply.as_payload())

    app.add_api_route("/chat", chat, methods=["POST"])
    app.add_api_route("/api/chat", chat, methods=["POST"])

    @app.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True, "groqConfigured": service.provider_configured}

    @app.get("/", response_model=None)
    def index() -> Response:
        if index_html.exists():
            return FileResponse(index_html)
        return PlainTextResponse("index.html not found", status_code=404)

    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir), name="static")

    return app

