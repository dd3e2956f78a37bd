# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/codeflow

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx
import uvicorn
from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from codeflow.config import CodeflowConfig
from codeflow.exceptions import CodeflowError, ExecutionError, ProvisioningError
from codeflow.factory import ServiceFactory
from codeflow.integrations.supabase import extract_bearer_token
from codeflow.models.api import (
    ChatRequest,
    ChatResponse,
    CodeGenerationRequest,
    CodeGenerationResponse,
    ExecutionResponse,
    RenderRequest,
    RenderResponse,
)
from codeflow.models.execution import ExecutionRequest
from codeflow.rendering import render

CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _describe_validation_error(exc: RequestValidationError) -> str:
    """First validation problem as one line, e.g. "language: Input should be a valid string"."""
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg") or "Invalid value"
    return f"{field}: {message}" if field else message


def create_app(config: CodeflowConfig | None = None, client: httpx.AsyncClient | None = None) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Configuration; loaded from the environment when omitted.
        client: Optional shared httpx.AsyncClient (tests pass a mocked transport).
    """
    config = config or CodeflowConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        http_client = client or httpx.AsyncClient(timeout=config.http_timeout)
        factory = ServiceFactory(config, http_client)
        app.state.orchestrator = factory.get_orchestrator()
        app.state.chat = factory.get_chat_service()
        app.state.codegen = factory.get_code_generation_service()
        logger.info("Codeflow services ready")
        try:
            yield
        finally:
            if client is None:
                await http_client.aclose()

    app = FastAPI(title="codeflow", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=CORS_HEADERS,
    )

    @app.exception_handler(CodeflowError)
    async def handle_codeflow_error(request: Request, exc: CodeflowError) -> JSONResponse:
        if isinstance(exc, (ProvisioningError, ExecutionError)):
            logger.error(f"Error in daytona-execute: {exc.message}")
            return _error(exc.status_code, exc.message, backend="daytona")
        logger.warning(f"{request.url.path} failed: {exc.message}")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _describe_validation_error(exc)
        logger.warning(f"{request.url.path} rejected: {message}")
        return _error(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error in {request.url.path}")
        return _error(500, "Internal server error")

    @app.post("/ai-chat", response_model=ChatResponse, response_model_by_alias=True)
    async def ai_chat(
        body: ChatRequest, request: Request, authorization: str | None = Header(default=None)
    ) -> ChatResponse:
        token = extract_bearer_token(authorization)
        return await request.app.state.chat.chat(body.message, body.conversation_id, token)

    @app.post("/openai-code-generation", response_model=CodeGenerationResponse, response_model_by_alias=True)
    async def openai_code_generation(
        body: CodeGenerationRequest, request: Request, authorization: str | None = Header(default=None)
    ) -> CodeGenerationResponse:
        token = extract_bearer_token(authorization)
        return await request.app.state.codegen.generate(body.prompt, body.conversation_id, body.project_id, token)

    @app.post("/daytona-execute", response_model=ExecutionResponse, response_model_by_alias=True)
    async def daytona_execute(
        body: ExecutionRequest, request: Request, authorization: str | None = Header(default=None)
    ) -> ExecutionResponse:
        orchestrator = request.app.state.orchestrator
        # Input is checked before the credential, so bad requests never touch auth.
        orchestrator.validate(body)
        token = extract_bearer_token(authorization)
        result = await orchestrator.execute(body, token)
        return ExecutionResponse(result=result)

    @app.post("/render", response_model=RenderResponse)
    async def render_content(body: RenderRequest) -> RenderResponse:
        return RenderResponse(segments=render(body.content))

    return app


def main() -> None:
    """Entry point for the HTTP server."""
    from codeflow.utils.logger import logger as configured_logger

    config = CodeflowConfig()
    configured_logger.info(f"Starting codeflow on {config.host}:{config.port}")
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":  # pragma: no cover
    main()
