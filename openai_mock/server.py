"""
OpenAI API Mock Server

This FastAPI application stands in for the OpenAI REST API so that client
applications and load-testing harnesses can exercise realistic request and
response shapes without calling a real inference backend.

Features:
    - OpenAI compatible chat completions, embeddings and models endpoints
    - Configurable latency injection (non-blocking, per request)
    - Model validation against the configured registry (HTTP 400 envelope)
    - Lenient request parsing: malformed bodies fall back to defaults
    - Health check endpoint for Kubernetes probes

Usage:
    Run through the command line entry point:
        python -m openai_mock --port 8080 --min-latency 100ms --max-latency 500ms

    Or build the app yourself:
        app = create_app(ServiceConfig(min_latency=0.1, max_latency=0.5))
"""

import json
import logging
import time
from typing import Type, TypeVar

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from . import __version__
from .config import ServiceConfig
from .generators import generate_chat_completion, generate_embeddings, list_models
from .latency import LatencySimulator
from .registry import ModelNotFound, check_model
from .schemas import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    EmbeddingRequest,
    EmbeddingResponse,
    ErrorDetail,
    ErrorResponse,
    ModelsResponse,
)

logger = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)


async def parse_lenient(request: Request, model: Type[RequestModel], kind: str) -> RequestModel:
    """
    Parse the JSON body into ``model`` without ever rejecting the request.

    Invalid JSON, a non-object payload or values that still fail validation
    are logged as warnings and replaced by an empty request, so the handler
    continues with its default values. Invalid UTF-8 bytes are replaced with
    U+FFFD rather than discarding the whole body.
    """
    body = await request.body()
    try:
        payload = json.loads(body.decode("utf-8-sig", "replace")) if body else {}
    except ValueError as e:
        logger.warning("Malformed %s request: %s. Continuing with default values.", kind, e)
        return model()

    if not isinstance(payload, dict):
        logger.warning(
            "Malformed %s request: expected a JSON object, got %s. Continuing with default values.",
            kind, type(payload).__name__,
        )
        return model()

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.warning("Malformed %s request: %s. Continuing with default values.", kind, e)
        return model()


def create_app(config: ServiceConfig) -> FastAPI:
    """
    Build the request-handling pipeline for ``config``.

    The latency stage runs before every route; the config is captured by the
    route closures and never modified.
    """
    app = FastAPI(
        title="OpenAI API Mock Server",
        description="OpenAI API compatible mock for client testing and simulated scale",
        version=__version__,
    )
    app.state.config = config

    # --- PIPELINE STAGES ---
    app.middleware("http")(LatencySimulator(config.min_latency, config.max_latency))

    @app.exception_handler(ModelNotFound)
    async def model_not_found_handler(request: Request, exc: ModelNotFound):
        logger.info("Rejected %s: unknown model %r", request.url.path, exc.model)
        body = ErrorResponse(error=ErrorDetail(message=str(exc)))
        return JSONResponse(status_code=400, content=body.model_dump())

    # --- API ROUTES ---

    @app.post("/v1/chat/completions", response_model=ChatCompletionResponse)
    async def chat_completions(request: Request):
        """
        OpenAI compatible chat completion endpoint.

        Returns a canned assistant reply. Usage counts are estimated from the
        message contents; the completion always reports 20 tokens.
        """
        chat_request = await parse_lenient(request, ChatCompletionRequest, "chat completion")
        check_model(chat_request.model, config.chat_models)
        return generate_chat_completion(chat_request, config)

    @app.post("/v1/embeddings", response_model=EmbeddingResponse)
    async def embeddings(request: Request):
        """
        OpenAI compatible embeddings endpoint.

        Returns one deterministic, unit-length 1536-dimensional vector per input.
        """
        embedding_request = await parse_lenient(request, EmbeddingRequest, "embedding")
        check_model(embedding_request.model, config.embedding_models)
        return generate_embeddings(embedding_request, config)

    @app.get("/v1/models", response_model=ModelsResponse)
    async def models():
        """List every configured chat and embedding model."""
        return list_models(config)

    # --- OPERATIONS ---

    @app.get("/health")
    async def health_check():
        """Health check endpoint for Kubernetes probes."""
        return {"status": "ok", "timestamp": int(time.time())}

    @app.get("/")
    async def root():
        """Root endpoint with service information."""
        return {
            "service": "OpenAI API Mock Server",
            "version": __version__,
            "config": {
                "min_latency": config.min_latency,
                "max_latency": config.max_latency,
                "chat_models": list(config.chat_models),
                "embedding_models": list(config.embedding_models),
            },
        }

    return app
