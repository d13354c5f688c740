"""
Routers Package.

This package contains provider routing, single-call execution, batch
scheduling and request orchestration for multi-provider generation.
"""

from .provider_router import ProviderRouter, RoutingRule, ROUTING_TABLE
from .single_call_executor import SingleCallExecutor
from .batch_scheduler import BatchScheduler, build_call_tasks, chunk_tasks
from .generation_orchestrator import (
    GenerationOrchestrator,
    InvalidRequestError,
    OrchestrationTimeoutError,
    validate_request
)

__all__ = [
    "ProviderRouter",
    "RoutingRule",
    "ROUTING_TABLE",
    "SingleCallExecutor",
    "BatchScheduler",
    "build_call_tasks",
    "chunk_tasks",
    "GenerationOrchestrator",
    "InvalidRequestError",
    "OrchestrationTimeoutError",
    "validate_request"
]
