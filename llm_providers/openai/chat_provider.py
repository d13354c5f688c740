"""
OpenAI Chat Completions Provider Implementation.

This module provides integration with OpenAI's chat-completion models and
with OpenRouter, a secondary gateway that speaks the same wire format and
fronts several model families (Deepseek, Grok, Moonshot) behind one key.
"""

from typing import Dict, Any, List, Optional

from openai import AsyncOpenAI

from core.data_models import TokenUsage
from ..base_provider import (
    BaseLLMProvider, ProviderRequest, ProviderCompletion, LLMProviderType, LLMProviderError
)


# Model id substrings that select the reasoning tier
REASONING_TIER_MARKERS = ("o3", "o4-mini")


def is_reasoning_tier(model_id: str) -> bool:
    """Reasoning-tier models take max_completion_tokens and reject temperature"""
    return any(marker in model_id for marker in REASONING_TIER_MARKERS)


def build_chat_messages(request: ProviderRequest) -> List[Dict[str, str]]:
    """System prompt first, then the conversation oldest first"""
    return [{"role": "system", "content": request.system_prompt}] + [
        message.to_dict() for message in request.messages
    ]


def _usage_from_completion(completion: Any) -> Optional[TokenUsage]:
    usage = getattr(completion, "usage", None)
    if usage is None:
        return None
    return TokenUsage(
        prompt_tokens=getattr(usage, "prompt_tokens", None),
        completion_tokens=getattr(usage, "completion_tokens", None),
        total_tokens=getattr(usage, "total_tokens", None),
    )


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI chat-completion provider.

    Handles both standard chat models (``gpt-*``) and the reasoning tier
    (``o3*``, ``o4-mini*``) which uses a completion-token budget and has no
    temperature control.
    """

    def __init__(self, api_key: str, **kwargs):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            **kwargs: Additional configuration options
                - base_url: Custom API base URL
                - timeout: Request timeout in seconds
                - client: Pre-built AsyncOpenAI-compatible client
        """
        super().__init__(api_key, **kwargs)
        self.base_url = kwargs.get("base_url")
        self.client = kwargs.get("client") or AsyncOpenAI(
            api_key=api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0  # retries are owned by the executor
        )

    def get_provider_type(self) -> LLMProviderType:
        """Get the provider type"""
        return LLMProviderType.OPENAI

    def build_params(self, request: ProviderRequest) -> Dict[str, Any]:
        """
        Build chat.completions.create parameters for one completion.

        Args:
            request: Standardized provider request

        Returns:
            Dict[str, Any]: Keyword arguments for the SDK call
        """
        params: Dict[str, Any] = {
            "model": request.model_id,
            "messages": build_chat_messages(request),
            "n": 1,
        }
        if is_reasoning_tier(request.model_id):
            params["max_completion_tokens"] = request.max_completion_tokens or request.max_tokens
        else:
            params["temperature"] = request.temperature
            params["max_tokens"] = request.max_tokens
        return params

    async def generate(self, request: ProviderRequest) -> ProviderCompletion:
        """
        Generate one chat completion.

        Args:
            request: Standardized provider request

        Returns:
            ProviderCompletion: Raw content and reported usage

        Raises:
            LLMProviderError: For API errors and malformed responses
        """
        try:
            completion = await self.client.chat.completions.create(**self.build_params(request))
            content = completion.choices[0].message.content
        except Exception as e:
            raise self._handle_provider_error(e) from e

        if content is None:
            raise LLMProviderError(
                f"No content in completion from {request.model_id}",
                self.get_provider_type().value
            )

        return ProviderCompletion(
            content=content,
            usage=_usage_from_completion(completion)
        )


class OpenRouterProvider(OpenAIProvider):
    """
    OpenRouter gateway provider.

    Same wire format as OpenAI; every routed model takes temperature and
    max_tokens.
    """

    DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

    def __init__(self, api_key: str, **kwargs):
        kwargs.setdefault("base_url", self.DEFAULT_BASE_URL)
        super().__init__(api_key, **kwargs)

    def get_provider_type(self) -> LLMProviderType:
        """Get the provider type"""
        return LLMProviderType.OPENROUTER

    def build_params(self, request: ProviderRequest) -> Dict[str, Any]:
        return {
            "model": request.model_id,
            "messages": build_chat_messages(request),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }


def create_openai_provider(api_key: str, **kwargs) -> OpenAIProvider:
    """Factory function to create the OpenAI provider."""
    return OpenAIProvider(api_key, **kwargs)


def create_openrouter_provider(api_key: str, **kwargs) -> OpenRouterProvider:
    """Factory function to create the OpenRouter provider."""
    return OpenRouterProvider(api_key, **kwargs)
