"""
Request Orchestrator.

Top-level entry point for one generation request: validates input, drives
the batch scheduler under a wall-clock deadline and assembles the ordered
response list. Per-model failures are carried as error records; only
structural failures raise.
"""

import asyncio
import logging
import uuid
from typing import List, Optional

from core.config import GenerationSettings
from core.data_models import CompletionResult, GenerationRequest
from .batch_scheduler import BatchScheduler

logger = logging.getLogger(__name__)


class InvalidRequestError(ValueError):
    """Raised when required request fields are missing"""
    pass


class OrchestrationTimeoutError(Exception):
    """Raised when the overall request deadline elapses"""
    pass


def validate_request(request: GenerationRequest) -> None:
    """
    Check the fields every generation needs.

    An empty message list is accepted; a missing one is not.

    Raises:
        InvalidRequestError: If bin id, messages or models are missing
    """
    if not request.bin_id or request.messages is None or not request.models:
        raise InvalidRequestError("Invalid request")
    if request.n < 1:
        raise InvalidRequestError("Invalid request")


def _preview(request: GenerationRequest) -> str:
    if not request.messages:
        return "none"
    return request.messages[-1].content[:50] + "..."


class GenerationOrchestrator:
    """Fans a request out to every requested model and collects the results"""

    def __init__(self, scheduler: BatchScheduler, settings: GenerationSettings):
        self.scheduler = scheduler
        self.settings = settings

    async def generate(self, request: GenerationRequest,
                       request_id: Optional[str] = None) -> List[CompletionResult]:
        """
        Orchestrate one generation request.

        Args:
            request: Parsed generation request
            request_id: Correlation id for logging (generated when absent)

        Returns:
            List[CompletionResult]: Model-major, completion-index-minor records

        Raises:
            InvalidRequestError: Before any provider call when input is incomplete
            OrchestrationTimeoutError: When the deadline fires before completion
        """
        request_id = request_id or str(uuid.uuid4())
        logger.info(
            f"Request {request_id}: bin={request.bin_id} "
            f"messageCount={len(request.messages or [])} models={request.models} "
            f"lastMessage={_preview(request)!r}"
        )
        validate_request(request)

        try:
            responses = await asyncio.wait_for(
                self.scheduler.run(request, request_id),
                timeout=self.settings.request_deadline_seconds
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Request {request_id}: deadline of {self.settings.request_deadline_seconds}s exceeded"
            )
            raise OrchestrationTimeoutError("Request timeout - processing took too long")

        if not responses:
            logger.warning(f"Request {request_id}: No responses generated")
            responses = [CompletionResult(
                model="system",
                error="No responses generated - all models failed or timed out",
                error_details={
                    "message": "Generation failure",
                    "models": list(request.models)
                }
            )]

        success_count = sum(1 for response in responses if response.succeeded)
        logger.info(
            f"Request {request_id} completed: totalResponses={len(responses)} "
            f"successfulResponses={success_count} "
            f"failedResponses={len(responses) - success_count}"
        )
        return responses
