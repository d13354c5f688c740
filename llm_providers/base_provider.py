"""
Abstract Base Class for LLM Provider Integration.

This module defines the base interface that all LLM providers must implement
for consistent integration with the generation orchestrator.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from dataclasses import dataclass
from enum import Enum

from core.data_models import Message, TokenUsage


class LLMProviderType(Enum):
    """Enumeration of supported LLM providers"""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OPENROUTER = "openrouter"
    GOOGLE = "google"


@dataclass
class ProviderRequest:
    """Standardized request format for all LLM providers"""
    model_id: str
    system_prompt: str
    messages: List[Message]
    temperature: float
    max_tokens: int
    max_completion_tokens: Optional[int] = None


@dataclass
class ProviderCompletion:
    """Standardized single-completion result from all LLM providers"""
    content: str
    usage: Optional[TokenUsage] = None  # None when the provider reports no counts
    prompt_text: str = ""  # text sent as the current prompt, for estimation


class LLMProviderError(Exception):
    """Base exception for LLM provider errors"""
    def __init__(self, message: str, provider: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
        self.error_code = error_code


class RateLimitError(LLMProviderError):
    """Raised when rate limits are exceeded"""
    pass


class AuthenticationError(LLMProviderError):
    """Raised when authentication fails"""
    pass


class ModelNotFoundError(LLMProviderError):
    """Raised when requested model is not available"""
    pass


class BaseLLMProvider(ABC):
    """
    Abstract base class for all LLM providers.

    One instance serves every model of its provider kind; the model id
    travels with each request. Instances hold only read-only credentials
    and a client, so they are safe to share across concurrent calls.
    """

    # Whether completions carry native token counts
    reports_usage: bool = True

    def __init__(self, api_key: str, **kwargs):
        """
        Initialize the LLM provider.

        Args:
            api_key: API key for the provider
            **kwargs: Additional provider-specific configuration
                - timeout: Request timeout in seconds
        """
        if not api_key or not api_key.strip():
            raise ValueError("api_key is required and cannot be empty")
        self.api_key = api_key
        self.timeout = kwargs.get("timeout", 60.0)
        self.config = kwargs

    @abstractmethod
    async def generate(self, request: ProviderRequest) -> ProviderCompletion:
        """
        Generate exactly one completion.

        Args:
            request: Standardized provider request

        Returns:
            ProviderCompletion: Raw text plus native usage if reported

        Raises:
            LLMProviderError: For provider-specific errors
            RateLimitError: When rate limits are exceeded
            AuthenticationError: When authentication fails
        """
        pass

    @abstractmethod
    def get_provider_type(self) -> LLMProviderType:
        """Get the provider type enum"""
        pass

    def _handle_provider_error(self, error: Exception) -> LLMProviderError:
        """
        Convert provider-specific errors to standardized errors.

        Matches on the error text and HTTP status so that SDK exception
        classes do not leak past the provider boundary.

        Args:
            error: Original exception from the provider

        Returns:
            LLMProviderError: Standardized error
        """
        if isinstance(error, LLMProviderError):
            return error

        provider = self.get_provider_type().value
        error_message = str(error) or error.__class__.__name__
        lowered = error_message.lower()
        status = getattr(error, "status_code", None)

        if status == 429 or "rate limit" in lowered or "rate_limit" in lowered or "quota" in lowered \
                or "resource exhausted" in lowered:
            return RateLimitError(error_message, provider, "429")
        if status in (401, 403) or "unauthorized" in lowered or "unauthenticated" in lowered \
                or "invalid api key" in lowered:
            return AuthenticationError(error_message, provider, str(status or 401))
        if status == 404 or "not found" in lowered:
            return ModelNotFoundError(error_message, provider, "404")
        return LLMProviderError(error_message, provider, str(status) if status else None)

    def __str__(self) -> str:
        """String representation of the provider"""
        return f"{self.get_provider_type().value.title()}Provider"

    def __repr__(self) -> str:
        """Detailed string representation of the provider, without secrets"""
        return f"{self.__class__.__name__}(timeout={self.timeout})"
