"""
Anthropic Provider Package.

This package provides integration with Anthropic's Claude models.
"""

from .claude_provider import AnthropicProvider, create_anthropic_provider

__all__ = [
    "AnthropicProvider",
    "create_anthropic_provider"
]
