#!/usr/bin/env python3
"""
FastAPI Application for the Multi-LLM Generation Gateway

This FastAPI application exposes the multi-provider generation orchestrator
as a REST API.

Endpoints:
- POST /api/generate: Fan a prompt out to the requested models, N completions each
- GET /health: Health check endpoint
- GET /config: Generation settings and configured providers (no secrets)
"""

import os
import time
import uuid
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError
import uvicorn

from core.config import load_config
from core.data_models import GenerationRequest, Message
from main import create_orchestrator
from routers.generation_orchestrator import GenerationOrchestrator, InvalidRequestError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# Global orchestrator instance, built on first use
orchestrator_instance: Optional[GenerationOrchestrator] = None


# Pydantic Models for API Request/Response
class MessageModel(BaseModel):
    """One conversation turn"""
    role: str = Field(..., description="Message author", pattern="^(user|assistant)$")
    content: str = Field(..., description="Message text")


class GenerateRequest(BaseModel):
    """Request model for the generate endpoint"""
    model_config = ConfigDict(populate_by_name=True)

    bin_id: Optional[str] = Field(None, alias="binId", description="Opaque correlation id")
    system_prompt: Optional[str] = Field("", alias="systemPrompt", description="System prompt, may be empty")
    messages: Optional[List[MessageModel]] = Field(None, description="Conversation history, oldest first")
    models: Optional[List[str]] = Field(None, description="Model identifiers to fan out to")
    temperature: Optional[float] = Field(None, description="Sampling temperature")
    max_tokens: Optional[int] = Field(None, alias="maxTokens", description="Output token budget")
    max_completion_tokens: Optional[int] = Field(None, description="Reasoning-tier completion budget")
    n: Optional[int] = Field(None, description="Completions per model", ge=1)

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(
            bin_id=self.bin_id,
            system_prompt=self.system_prompt or "",
            messages=None if self.messages is None else [
                Message(role=m.role, content=m.content) for m in self.messages
            ],
            models=list(self.models or []),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            max_completion_tokens=self.max_completion_tokens,
            n=self.n or 1
        )


class HealthResponse(BaseModel):
    """Response model for health endpoint"""
    status: str
    timestamp: str
    version: str = VERSION
    configured_providers: List[str]


def get_orchestrator() -> GenerationOrchestrator:
    """Return the shared orchestrator, creating it from config on first use"""
    global orchestrator_instance
    if orchestrator_instance is None:
        config = load_config(os.getenv("GATEWAY_CONFIG", "config.ini"))
        orchestrator_instance = create_orchestrator(config)
    return orchestrator_instance


def _configured_providers(orchestrator: GenerationOrchestrator) -> List[str]:
    return orchestrator.scheduler.executor.router.configured_provider_types()


# Application lifecycle management
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown"""
    logger.info("Starting generation gateway...")
    try:
        orchestrator = get_orchestrator()
        logger.info(f"Gateway ready with providers: {_configured_providers(orchestrator)}")
    except Exception as e:
        logger.error(f"Failed to initialize orchestrator on startup: {e}")
        # Continue anyway - initialization is retried on first request

    yield

    logger.info("Shutting down generation gateway...")


# FastAPI app instance
app = FastAPI(
    title="Multi-LLM Generation Gateway",
    description="Fan-out generation across multiple LLM providers",
    version=VERSION,
    lifespan=lifespan
)

app_start_time = time.time()


def _invalid_request() -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


# API Endpoints

@app.post("/api/generate")
async def generate(http_request: Request):
    """Generate N completions for every requested model"""
    request_id = str(uuid.uuid4())
    timestamp = datetime.now(timezone.utc).isoformat()
    body: Any = None

    try:
        body = await http_request.json()
        try:
            payload = GenerateRequest.model_validate(body)
        except ValidationError as e:
            logger.info(f"Request {request_id}: rejected ({e.error_count()} validation errors)")
            return _invalid_request()

        orchestrator = get_orchestrator()
        responses = await orchestrator.generate(payload.to_generation_request(), request_id)

    except InvalidRequestError:
        return _invalid_request()

    except Exception as e:
        models = body.get("models") if isinstance(body, dict) else None
        messages = body.get("messages") if isinstance(body, dict) else None
        message_count = len(messages) if isinstance(messages, list) else None
        logger.error(
            f"Request {request_id} error: {e} (models={models}, messageCount={message_count})",
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": str(e),
                "details": {
                    "timestamp": timestamp,
                    "requestId": request_id,
                    "models": models,
                    "messageCount": message_count
                }
            }
        )

    return {"responses": [response.to_dict() for response in responses]}


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    try:
        providers = _configured_providers(get_orchestrator())
        status = "healthy" if providers else "degraded"
    except Exception as e:
        logger.warning(f"Health check could not build orchestrator: {e}")
        providers = []
        status = "unhealthy"

    return HealthResponse(
        status=status,
        timestamp=time.strftime("%Y-%m-%d %H:%M:%S UTC", time.gmtime()),
        configured_providers=providers
    )


@app.get("/config")
async def get_configuration():
    """Get current generation configuration (without sensitive data)"""
    try:
        orchestrator = get_orchestrator()
    except Exception as e:
        return JSONResponse(status_code=500, content={"error": f"Configuration retrieval failed: {str(e)}"})

    return {
        "generation": orchestrator.settings.to_dict(),
        "configured_providers": _configured_providers(orchestrator),
        "uptime_seconds": time.time() - app_start_time,
        "version": VERSION
    }


if __name__ == "__main__":
    import sys

    # Enable debug mode if DEBUG environment variable is set
    debug_mode = os.getenv("DEBUG", "false").lower() == "true"

    if debug_mode:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("Debug mode enabled")
        logger.debug(f"Python path: {sys.executable}")
        logger.debug(f"Working directory: {os.getcwd()}")

    # Run with uvicorn for development
    uvicorn.run(
        "fastapi_app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="debug" if debug_mode else "info",
        access_log=True
    )
