"""
Batch Scheduler.

Expands requested models x N completions into call tasks and runs them with
bounded concurrency: all at once when few, otherwise in sequential chunks
separated by a short cooldown.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from core.config import GenerationSettings
from core.data_models import CallTask, CompletionResult, GenerationRequest
from .single_call_executor import SingleCallExecutor

logger = logging.getLogger(__name__)


def build_call_tasks(models: List[str], n: int) -> List[CallTask]:
    """Models outer, completion index inner; indices are 1-based per model"""
    return [
        CallTask(model_id=model_id, completion_index=index, total_completions=n)
        for model_id in models
        for index in range(1, n + 1)
    ]


def chunk_tasks(tasks: List[CallTask], chunk_size: int) -> List[List[CallTask]]:
    """Split tasks into consecutive chunks of at most ``chunk_size``"""
    return [tasks[start:start + chunk_size] for start in range(0, len(tasks), chunk_size)]


class BatchScheduler:
    """Runs call tasks with per-chunk concurrency and inter-chunk cooldown"""

    def __init__(self, executor: SingleCallExecutor, settings: GenerationSettings,
                 sleep: Optional[Callable[[float], Awaitable[None]]] = None):
        self.executor = executor
        self.settings = settings
        self._sleep = sleep or asyncio.sleep

    async def _run_chunk(self, request: GenerationRequest, chunk: List[CallTask]) -> List[CompletionResult]:
        # gather keeps creation order regardless of completion order
        return list(await asyncio.gather(
            *(self.executor.execute(request, task) for task in chunk)
        ))

    async def run(self, request: GenerationRequest, request_id: str = "") -> List[CompletionResult]:
        """
        Execute every (model, completion) pair of a request.

        Args:
            request: Validated generation request
            request_id: Correlation id for logging

        Returns:
            List[CompletionResult]: One record per task, in task-creation order
        """
        tasks = build_call_tasks(request.models, request.n)
        chunk_size = self.settings.batch_size

        if len(tasks) <= chunk_size:
            return await self._run_chunk(request, tasks)

        logger.info(
            f"Request {request_id}: Processing {len(tasks)} responses in batches of {chunk_size}"
        )
        chunks = chunk_tasks(tasks, chunk_size)
        results: List[CompletionResult] = []
        for position, chunk in enumerate(chunks):
            results.extend(await self._run_chunk(request, chunk))
            if position < len(chunks) - 1:
                await self._sleep(self.settings.batch_cooldown_ms / 1000)
        return results
