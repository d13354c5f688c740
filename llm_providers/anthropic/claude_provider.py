"""
Anthropic Provider for the Messages API.

This module provides an implementation of the LLM provider interface
for Anthropic's Claude models. The Messages API takes the system prompt as
a top-level field, separate from the conversation.
"""

from typing import Dict, Any, List

from anthropic import AsyncAnthropic

from core.data_models import TokenUsage
from ..base_provider import (
    BaseLLMProvider, ProviderRequest, ProviderCompletion, LLMProviderType
)


def build_claude_messages(request: ProviderRequest) -> List[Dict[str, str]]:
    """Map every turn to the user/assistant roles the Messages API accepts"""
    return [
        {
            "role": "user" if message.role == "user" else "assistant",
            "content": message.content
        }
        for message in request.messages
    ]


class AnthropicProvider(BaseLLMProvider):
    """
    Anthropic Provider implementation using the Messages API.

    Usage is reported as separate input and output counts which are summed
    into a total.
    """

    def __init__(self, api_key: str, **kwargs):
        """
        Initialize the Anthropic provider.

        Args:
            api_key: Anthropic API key (MANDATORY)
            **kwargs: Additional configuration options
                - timeout: Request timeout in seconds
                - client: Pre-built AsyncAnthropic-compatible client
        """
        super().__init__(api_key, **kwargs)
        self.client = kwargs.get("client") or AsyncAnthropic(
            api_key=api_key,
            timeout=self.timeout,
            max_retries=0
        )

    def get_provider_type(self) -> LLMProviderType:
        """Get the provider type."""
        return LLMProviderType.ANTHROPIC

    def build_params(self, request: ProviderRequest) -> Dict[str, Any]:
        """Build messages.create parameters for one completion."""
        params: Dict[str, Any] = {
            "model": request.model_id,
            "messages": build_claude_messages(request),
            "temperature": request.temperature,
            "max_tokens": request.max_tokens
        }
        if request.system_prompt:
            params["system"] = request.system_prompt
        return params

    async def generate(self, request: ProviderRequest) -> ProviderCompletion:
        """
        Generate one response from Claude.

        Args:
            request (ProviderRequest): The request to process

        Returns:
            ProviderCompletion: The generated text and summed usage

        Raises:
            LLMProviderError: If the request fails or the response is malformed
        """
        try:
            response = await self.client.messages.create(**self.build_params(request))
            text_content = response.content[0].text
            input_tokens = response.usage.input_tokens
            output_tokens = response.usage.output_tokens
        except Exception as e:
            raise self._handle_provider_error(e) from e

        return ProviderCompletion(
            content=text_content,
            usage=TokenUsage(
                prompt_tokens=input_tokens,
                completion_tokens=output_tokens,
                total_tokens=input_tokens + output_tokens
            )
        )


def create_anthropic_provider(api_key: str, **kwargs) -> AnthropicProvider:
    """
    Create an Anthropic provider instance.

    Args:
        api_key: Anthropic API key (MANDATORY - no defaults)
        **kwargs: Additional configuration

    Returns:
        AnthropicProvider: Configured Anthropic provider instance

    Raises:
        ValueError: If the API key is missing or empty
    """
    return AnthropicProvider(api_key=api_key, **kwargs)
