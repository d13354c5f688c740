"""
Data models for the multi-provider generation gateway.

This module contains the core data structures used throughout the system.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List


@dataclass
class Message:
    """One conversation turn, oldest first in a request"""
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class GenerationRequest:
    """Structure for an incoming fan-out generation request"""
    bin_id: Optional[str]
    system_prompt: str = ""
    messages: Optional[List[Message]] = None
    models: List[str] = field(default_factory=list)
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    max_completion_tokens: Optional[int] = None
    n: int = 1


@dataclass(frozen=True)
class CallTask:
    """A single (model, completion index) unit of work"""
    model_id: str
    completion_index: int  # 1-based within the model's own N
    total_completions: int
    retry_count: int = 0


@dataclass
class TokenUsage:
    """Token counters; providers may leave any of them unreported"""
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    def to_dict(self) -> Dict[str, int]:
        return {
            key: value
            for key, value in (
                ("prompt_tokens", self.prompt_tokens),
                ("completion_tokens", self.completion_tokens),
                ("total_tokens", self.total_tokens),
            )
            if value is not None
        }


@dataclass
class CompletionResult:
    """Normalized outcome of one call task, successful or not"""
    model: str
    content: Optional[str] = None
    reasoning: Optional[str] = None
    full_content: Optional[str] = None
    is_cot: bool = False
    usage: Optional[TokenUsage] = None
    reasoning_tokens: Optional[int] = None
    completion_index: Optional[int] = None
    total_completions: Optional[int] = None
    error: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None

    @classmethod
    def unavailable(cls, model_id: str) -> "CompletionResult":
        """Routing failure: no pattern matched or the credential is missing"""
        return cls(model=model_id, error="Model not available")

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format returned by the HTTP layer"""
        data: Dict[str, Any] = {"model": self.model}
        if self.error is not None:
            data["error"] = self.error
            if self.error_details is not None:
                data["errorDetails"] = self.error_details
        else:
            data["content"] = self.content
            if self.usage is not None:
                data["usage"] = self.usage.to_dict()
            if self.is_cot:
                data["reasoning"] = self.reasoning
                data["fullContent"] = self.full_content
                data["isCOT"] = True
            if self.reasoning_tokens is not None:
                data["reasoningTokens"] = self.reasoning_tokens
        if self.completion_index is not None:
            data["completionIndex"] = self.completion_index
        if self.total_completions is not None:
            data["totalCompletions"] = self.total_completions
        return data
