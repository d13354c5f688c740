#!/usr/bin/env python3
"""
Multi-LLM Gateway - Multi-Provider Generation Orchestrator

Fans a single chat-style prompt out to several LLM providers, collects N
completions per requested model, normalizes the heterogeneous responses
(including chain-of-thought traces and token usage) into one schema and
returns them together.

This module wires configuration, providers and the orchestration pipeline
together, and offers a one-shot command line for local use.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Dict, Any, List, Optional

from core.config import GatewayConfig, load_config
from core.data_models import GenerationRequest, Message
from llm_providers.base_provider import BaseLLMProvider, LLMProviderType
from llm_providers.factory import ProviderFactory
from routers.batch_scheduler import BatchScheduler
from routers.generation_orchestrator import GenerationOrchestrator
from routers.provider_router import ProviderRouter
from routers.single_call_executor import SingleCallExecutor

logger = logging.getLogger(__name__)


def create_real_providers(config: GatewayConfig, **overrides: Dict[str, Any]) -> Dict[LLMProviderType, BaseLLMProvider]:
    """
    Create provider instances for every configured credential.

    Unlike a strict setup, missing credentials are not an error: their
    models resolve to "Model not available" at request time.

    Args:
        config: Loaded gateway configuration
        **overrides: Per-provider extra kwargs (see ProviderFactory)

    Returns:
        Dictionary mapping provider types to provider instances
    """
    providers = ProviderFactory.create_configured_providers(config.credentials, **overrides)
    if not providers:
        logger.warning(
            "No providers were created. Set at least one of OPENAI_API_KEY, ANTHROPIC_API_KEY, "
            "OPENROUTER_API_KEY or GOOGLE_API_KEY (or the matching keys in config.ini)"
        )
    else:
        logger.info(f"Successfully created {len(providers)} provider(s): {[p.value for p in providers]}")
    return providers


def create_orchestrator(config: GatewayConfig,
                        providers: Optional[Dict[LLMProviderType, BaseLLMProvider]] = None) -> GenerationOrchestrator:
    """Assemble router, executor, scheduler and orchestrator"""
    if providers is None:
        providers = create_real_providers(config)
    router = ProviderRouter(providers)
    executor = SingleCallExecutor(router, config.generation)
    scheduler = BatchScheduler(executor, config.generation)
    return GenerationOrchestrator(scheduler, config.generation)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fan a prompt out to multiple LLM providers")
    parser.add_argument("--config", default="config.ini", help="Path to config.ini")
    parser.add_argument("--model", action="append", required=True, dest="models",
                        help="Model identifier (repeat for several models)")
    parser.add_argument("--prompt", required=True, help="User message")
    parser.add_argument("--system", default="", help="System prompt")
    parser.add_argument("-n", type=positive_int, default=1, help="Completions per model")
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--max-tokens", type=int, default=None)
    parser.add_argument("--max-completion-tokens", type=int, default=None)
    parser.add_argument("--bin-id", default="cli", help="Correlation id")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one generation request and print the JSON response"""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    config = load_config(args.config)
    orchestrator = create_orchestrator(config)
    request = GenerationRequest(
        bin_id=args.bin_id,
        system_prompt=args.system,
        messages=[Message(role="user", content=args.prompt)],
        models=args.models,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        max_completion_tokens=args.max_completion_tokens,
        n=args.n
    )

    responses = asyncio.run(orchestrator.generate(request))
    print(json.dumps({"responses": [r.to_dict() for r in responses]}, indent=2))
    return 0 if any(r.succeeded for r in responses) else 1


if __name__ == "__main__":
    sys.exit(main())
