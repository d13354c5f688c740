"""
OpenAI Provider Package.

This package provides integration with OpenAI chat-completion models and
the OpenRouter gateway, which shares the same wire format.
"""

from .chat_provider import (
    OpenAIProvider,
    OpenRouterProvider,
    create_openai_provider,
    create_openrouter_provider,
    is_reasoning_tier
)

__all__ = [
    "OpenAIProvider",
    "OpenRouterProvider",
    "create_openai_provider",
    "create_openrouter_provider",
    "is_reasoning_tier"
]
