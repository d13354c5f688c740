"""
LLM Provider Factory for credential-gated instantiation.

This module provides factory methods for creating provider instances. A
provider is only constructed when its credential is configured; models of
an unconstructed provider resolve to "unavailable" at routing time.
"""

import logging
from typing import Dict, Any

from core.config import ProviderCredentials
from .base_provider import BaseLLMProvider, LLMProviderType
from .openai import create_openai_provider, create_openrouter_provider
from .anthropic import create_anthropic_provider
from .google import create_google_provider

logger = logging.getLogger(__name__)


class ProviderFactory:
    """
    Factory class for creating LLM providers.

    Provides a unified interface for instantiating different LLM providers
    with consistent configuration and error handling.
    """

    # Registry of available providers
    PROVIDERS = {
        LLMProviderType.OPENAI: {
            "factory": create_openai_provider,
            "credential": "openai_api_key"
        },
        LLMProviderType.ANTHROPIC: {
            "factory": create_anthropic_provider,
            "credential": "anthropic_api_key"
        },
        LLMProviderType.OPENROUTER: {
            "factory": create_openrouter_provider,
            "credential": "openrouter_api_key"
        },
        LLMProviderType.GOOGLE: {
            "factory": create_google_provider,
            "credential": "google_api_key"
        }
    }

    @classmethod
    def create_provider(cls, provider_type: LLMProviderType, api_key: str, **kwargs) -> BaseLLMProvider:
        """
        Create a provider instance.

        Args:
            provider_type: Registered provider type
            api_key: API key for the provider
            **kwargs: Additional provider-specific configuration

        Returns:
            BaseLLMProvider: Configured provider instance
        """
        return cls.PROVIDERS[provider_type]["factory"](api_key, **kwargs)

    @classmethod
    def create_configured_providers(
        cls,
        credentials: ProviderCredentials,
        **overrides: Dict[str, Any]
    ) -> Dict[LLMProviderType, BaseLLMProvider]:
        """
        Create every provider whose credential is present.

        Args:
            credentials: Provider secrets and shared client settings
            **overrides: Per-provider extra kwargs keyed by provider value,
                e.g. ``openai={"client": fake_client}``

        Returns:
            Dict[LLMProviderType, BaseLLMProvider]: Constructed providers
        """
        providers: Dict[LLMProviderType, BaseLLMProvider] = {}

        for provider_type, provider_info in cls.PROVIDERS.items():
            api_key = getattr(credentials, provider_info["credential"])
            if not api_key:
                logger.info(f"No credential for {provider_type.value}; its models will be unavailable")
                continue

            kwargs: Dict[str, Any] = {"timeout": credentials.request_timeout}
            if provider_type == LLMProviderType.OPENROUTER:
                kwargs["base_url"] = credentials.openrouter_base_url
            kwargs.update(overrides.get(provider_type.value, {}))

            providers[provider_type] = cls.create_provider(provider_type, api_key, **kwargs)
            logger.info(f"Created {provider_type.value} provider")

        return providers
