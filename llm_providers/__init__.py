"""
LLM Providers Package.

This package provides a unified interface for integrating multiple LLM providers
including OpenAI, Anthropic, OpenRouter and Google with the generation orchestrator.
"""

# Base classes and types
from .base_provider import (
    BaseLLMProvider,
    ProviderRequest,
    ProviderCompletion,
    LLMProviderType,
    LLMProviderError,
    RateLimitError,
    AuthenticationError,
    ModelNotFoundError
)

# Provider implementations
from .openai import OpenAIProvider, OpenRouterProvider, create_openai_provider, create_openrouter_provider
from .anthropic import AnthropicProvider, create_anthropic_provider
from .google import GoogleProvider, create_google_provider

# Factory
from .factory import ProviderFactory

__version__ = "1.0.0"

__all__ = [
    # Base classes and types
    "BaseLLMProvider",
    "ProviderRequest",
    "ProviderCompletion",
    "LLMProviderType",
    "LLMProviderError",
    "RateLimitError",
    "AuthenticationError",
    "ModelNotFoundError",

    # Provider implementations
    "OpenAIProvider",
    "OpenRouterProvider",
    "AnthropicProvider",
    "GoogleProvider",

    # Factory functions
    "create_openai_provider",
    "create_openrouter_provider",
    "create_anthropic_provider",
    "create_google_provider",

    # Factory
    "ProviderFactory"
]
