"""
HTTP surface: a single chat endpoint plus status routes (FastAPI).
"""

import json
import os
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from genai_gateway.core.app_context import AppContext
from genai_gateway.core.error_handler import handle_error
from genai_gateway.core.exceptions import (
    ConfigError,
    RequestValidationError,
    RoutingError,
)
from genai_gateway.service.chat_service import ChatRequest
from genai_gateway.utils.logging import get_logger

logger = get_logger("server.app")

CONFIG_ENV_VAR = "GENAI_GATEWAY_CONFIG"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(ctx: AppContext) -> FastAPI:
    """Build the FastAPI application around a bootstrapped context."""
    app = FastAPI(title="genai-gateway")
    app.state.ctx = ctx

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request: {exc.detail}")
        return _error(400, exc.detail)

    @app.exception_handler(405)
    async def method_not_allowed_handler(request: Request, exc: Exception):
        return _error(405, "Method not allowed")

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError):
        handle_error(exc, context="server.chat")
        return _error(500, exc.detail)

    @app.exception_handler(RoutingError)
    async def routing_error_handler(request: Request, exc: RoutingError):
        handle_error(exc, context="server.chat")
        return _error(500, exc.detail)

    @app.post("/api/chat")
    async def chat(request: Request):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RequestValidationError(f"Invalid JSON body: {e}") from e

        chat_request = ChatRequest.parse(body)
        try:
            response = await ctx.service.handle(chat_request)
        except (ConfigError, RequestValidationError, RoutingError):
            raise
        except Exception as e:
            handle_error(e, context="server.chat", verbose=True)
            return _error(500, f"Internal server error: {e}")
        return response.to_payload()

    @app.options("/api/chat")
    async def chat_preflight() -> Response:
        return Response(status_code=200)

    @app.api_route("/api/chat", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
    async def chat_method_not_allowed() -> JSONResponse:
        return _error(405, "Method not allowed")

    @app.get("/api/providers")
    async def providers() -> dict[str, Any]:
        return {"providers": ctx.service.provider_status()}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def app_factory() -> FastAPI:
    """Entry point for `uvicorn --factory` (used by auto-reload)."""
    from genai_gateway.core.bootstrap import bootstrap

    return create_app(bootstrap(os.environ.get(CONFIG_ENV_VAR)))
