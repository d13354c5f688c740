"""
Provider Router.

Maps a model identifier to the provider instance that serves it using one
ordered rule table. Adding a provider means adding a rule here.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from llm_providers.base_provider import BaseLLMProvider, LLMProviderType


@dataclass(frozen=True)
class RoutingRule:
    """One entry of the routing table"""
    provider_type: LLMProviderType
    matches: Callable[[str], bool]
    description: str


# Evaluated in order; first rule that matches a configured provider wins
ROUTING_TABLE: List[RoutingRule] = [
    RoutingRule(
        LLMProviderType.OPENAI,
        lambda model_id: model_id.startswith(("gpt", "o3", "o4")),
        "gpt*, o3*, o4*"
    ),
    RoutingRule(
        LLMProviderType.ANTHROPIC,
        lambda model_id: model_id.startswith("claude"),
        "claude*"
    ),
    RoutingRule(
        LLMProviderType.OPENROUTER,
        lambda model_id: model_id.startswith(("deepseek", "x-ai/grok", "moonshotai")),
        "deepseek*, x-ai/grok*, moonshotai*"
    ),
    RoutingRule(
        LLMProviderType.GOOGLE,
        lambda model_id: "gemini" in model_id,
        "*gemini*"
    ),
]


class ProviderRouter:
    """Resolves model identifiers against the routing table"""

    def __init__(self, providers: Dict[LLMProviderType, BaseLLMProvider],
                 rules: Optional[List[RoutingRule]] = None):
        """
        Args:
            providers: Constructed providers keyed by type; absent types have no credential
            rules: Routing table override (defaults to ``ROUTING_TABLE``)
        """
        self.providers = providers
        self.rules = rules if rules is not None else ROUTING_TABLE

    def resolve(self, model_id: str) -> Optional[BaseLLMProvider]:
        """
        Find the provider for a model.

        Args:
            model_id: Opaque model identifier

        Returns:
            Optional[BaseLLMProvider]: None when no rule matches a configured provider
        """
        for rule in self.rules:
            if rule.matches(model_id) and rule.provider_type in self.providers:
                return self.providers[rule.provider_type]
        return None

    def configured_provider_types(self) -> List[str]:
        return [provider_type.value for provider_type in self.providers]
