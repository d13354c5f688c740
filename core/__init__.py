"""
Core Components Package.

This package contains foundational components used throughout the generation gateway.
"""

from .data_models import Message, GenerationRequest, CallTask, TokenUsage, CompletionResult
from .config import GenerationSettings, ProviderCredentials, GatewayConfig, load_config
from .cot_extractor import CotExtraction, is_cot_model, extract_cot_content
from .token_estimator import estimate_tokens, adjust_reported_usage

__all__ = [
    "Message",
    "GenerationRequest",
    "CallTask",
    "TokenUsage",
    "CompletionResult",
    "GenerationSettings",
    "ProviderCredentials",
    "GatewayConfig",
    "load_config",
    "CotExtraction",
    "is_cot_model",
    "extract_cot_content",
    "estimate_tokens",
    "adjust_reported_usage"
]
