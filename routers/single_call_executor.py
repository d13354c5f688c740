"""
Single-Call Executor.

Issues one completion request for one call task, post-processes it into a
CompletionResult and retries failures with exponential backoff. Failures
never escape this boundary: an exhausted retry budget becomes an error
record.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.config import GenerationSettings
from core.cot_extractor import extract_cot_content, is_cot_model
from core.data_models import CallTask, CompletionResult, GenerationRequest
from core.token_estimator import (
    adjust_reported_usage, estimate_answer_usage, estimate_raw_usage
)
from llm_providers.base_provider import BaseLLMProvider, ProviderCompletion, ProviderRequest
from .provider_router import ProviderRouter

logger = logging.getLogger(__name__)


class SingleCallExecutor:
    """Executes call tasks against routed providers with bounded retries"""

    def __init__(self, router: ProviderRouter, settings: GenerationSettings,
                 sleep: Optional[Callable[[float], Awaitable[None]]] = None):
        """
        Args:
            router: Provider router used to pick the backend per model
            settings: Retry budget and backoff constants
            sleep: Coroutine used for backoff waits (defaults to ``asyncio.sleep``)
        """
        self.router = router
        self.settings = settings
        self._sleep = sleep or asyncio.sleep

    def build_provider_request(self, request: GenerationRequest, model_id: str) -> ProviderRequest:
        """Apply request defaults; the provider adapts the shape per its API"""
        temperature = request.temperature
        if temperature is None:
            temperature = self.settings.default_temperature
        return ProviderRequest(
            model_id=model_id,
            system_prompt=request.system_prompt or "",
            messages=list(request.messages or []),
            temperature=temperature,
            max_tokens=request.max_tokens or self.settings.default_max_tokens,
            max_completion_tokens=request.max_completion_tokens
        )

    def build_result(self, task: CallTask, provider: BaseLLMProvider,
                     completion: ProviderCompletion) -> CompletionResult:
        """
        Normalize a provider completion into a CompletionResult.

        COT-eligible models get their reasoning split off and usage adjusted
        so that counts reflect only the user-facing answer. Providers without
        native usage get estimated counts.
        """
        raw_content = completion.content
        result = CompletionResult(
            model=task.model_id,
            content=raw_content,
            usage=completion.usage,
            completion_index=task.completion_index,
            total_completions=task.total_completions
        )
        if not provider.reports_usage:
            result.usage = estimate_raw_usage(completion.prompt_text, raw_content)

        if not is_cot_model(task.model_id):
            return result

        extraction = extract_cot_content(raw_content, task.model_id)
        result.content = extraction.main_content
        result.reasoning = extraction.reasoning
        result.full_content = extraction.full_content
        result.is_cot = True

        if not extraction.reasoning:
            return result

        if provider.reports_usage:
            if completion.usage is not None:
                result.usage, result.reasoning_tokens = adjust_reported_usage(
                    completion.usage, extraction.reasoning
                )
        else:
            result.usage, result.reasoning_tokens = estimate_answer_usage(
                completion.prompt_text, extraction.main_content, extraction.reasoning
            )
        return result

    async def execute(self, request: GenerationRequest, task: CallTask) -> CompletionResult:
        """
        Run one call task to a terminal CompletionResult.

        Routing failures return immediately without retry. Provider failures
        are retried up to ``max_retries`` times; the attempt counter starts at
        ``task.retry_count``.

        Args:
            request: The originating generation request
            task: Model id and completion index to generate

        Returns:
            CompletionResult: Success record or error record, never raises
        """
        provider = self.router.resolve(task.model_id)
        if provider is None:
            logger.warning(f"No provider available for model {task.model_id}")
            return CompletionResult.unavailable(task.model_id)

        provider_request = self.build_provider_request(request, task.model_id)
        max_retries = self.settings.max_retries
        total_attempts = max_retries + 1
        retry_count = task.retry_count
        last_error: Optional[Exception] = None

        while retry_count <= max_retries:
            try:
                completion = await provider.generate(provider_request)
                return self.build_result(task, provider, completion)
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Error with {task.model_id} (attempt {retry_count + 1}/{total_attempts}): {e}"
                )

            if retry_count < max_retries:
                delay_ms = self.settings.retry_delay_ms(retry_count)
                logger.info(f"Retrying {task.model_id} after {delay_ms}ms...")
                await self._sleep(delay_ms / 1000)
            retry_count += 1

        attempts = retry_count
        message = str(last_error) if last_error is not None else "Unknown error"
        logger.error(f"{task.model_id} completion {task.completion_index} failed after {attempts} attempts")
        return CompletionResult(
            model=task.model_id,
            error=f"{message} (after {attempts} attempts)",
            error_details={
                "message": message,
                "attempts": attempts,
                "modelId": task.model_id
            },
            completion_index=task.completion_index,
            total_completions=task.total_completions
        )
