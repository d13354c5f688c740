"""
Google Gemini Provider Implementation.

This module provides integration with Google's Gemini models through their
conversational chat API. Gemini takes a history of prior turns plus one
current prompt, has no system role, and reports no token counts here.
"""

from typing import Dict, Any, List, Tuple

import google.generativeai as genai

from core.data_models import Message
from ..base_provider import (
    BaseLLMProvider, ProviderRequest, ProviderCompletion, LLMProviderType
)


MODEL_PREFIX = "models/"


def normalize_model_name(model_id: str) -> str:
    """Strip a leading ``models/`` prefix"""
    if model_id.startswith(MODEL_PREFIX):
        return model_id[len(MODEL_PREFIX):]
    return model_id


def build_gemini_history(system_prompt: str, messages: List[Message]) -> Tuple[List[Dict[str, Any]], str]:
    """
    Convert a conversation into Gemini history plus the current prompt.

    The system prompt is merged into the first message when that message
    is a user turn. The last message becomes the current prompt only if it
    is a user turn; otherwise it joins the history and the prompt is empty.

    Args:
        system_prompt: System prompt, may be empty
        messages: Conversation, oldest first

    Returns:
        Tuple[List[Dict[str, Any]], str]: (history, current prompt)
    """
    combined = [Message(role=m.role, content=m.content) for m in messages]
    if system_prompt and combined and combined[0].role == "user":
        combined[0] = Message(role="user", content=f"{system_prompt}\n\n{combined[0].content}")

    history: List[Dict[str, Any]] = []
    current_prompt = ""
    for index, message in enumerate(combined):
        if index == len(combined) - 1 and message.role == "user":
            current_prompt = message.content
        else:
            history.append({
                "role": "user" if message.role == "user" else "model",
                "parts": [{"text": message.content}]
            })
    return history, current_prompt


class GoogleProvider(BaseLLMProvider):
    """
    Google Gemini provider implementation.

    Handles communication with Google's API for Gemini models.
    """

    reports_usage = False

    def __init__(self, api_key: str, **kwargs):
        """
        Initialize Google provider.

        Args:
            api_key: Google API key
            **kwargs: Additional configuration options
                - timeout: Request timeout in seconds
                - model_factory: Callable returning a GenerativeModel for a name
        """
        super().__init__(api_key, **kwargs)
        genai.configure(api_key=api_key)
        self.model_factory = kwargs.get("model_factory") or genai.GenerativeModel

    def get_provider_type(self) -> LLMProviderType:
        """Get the provider type"""
        return LLMProviderType.GOOGLE

    async def generate(self, request: ProviderRequest) -> ProviderCompletion:
        """
        Generate one response using Google Gemini.

        Args:
            request: Standardized provider request

        Returns:
            ProviderCompletion: Generated text with no native usage

        Raises:
            LLMProviderError: For API errors
            RateLimitError: When rate limited
            AuthenticationError: For auth failures
        """
        model_name = normalize_model_name(request.model_id)
        history, current_prompt = build_gemini_history(request.system_prompt, request.messages)

        try:
            model = self.model_factory(model_name)
            chat = model.start_chat(history=history)
            response = await chat.send_message_async(
                current_prompt,
                request_options={"timeout": self.timeout}
            )
            text = response.text
        except Exception as e:
            raise self._handle_provider_error(e) from e

        return ProviderCompletion(
            content=text,
            usage=None,
            prompt_text=current_prompt
        )


def create_google_provider(api_key: str, **kwargs) -> GoogleProvider:
    """
    Factory function to create Google provider.

    Args:
        api_key: Google API key
        **kwargs: Additional configuration

    Returns:
        GoogleProvider: Configured provider instance
    """
    return GoogleProvider(api_key, **kwargs)
