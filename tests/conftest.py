"""
Shared pytest fixtures for the generation gateway tests.
"""

from __future__ import annotations

import pytest

from core.config import GenerationSettings
from llm_providers.base_provider import LLMProviderType
from tests.fakes import RecordingSleep, ScriptedProvider, completion


@pytest.fixture
def settings() -> GenerationSettings:
    return GenerationSettings()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def paris_provider() -> ScriptedProvider:
    """OpenAI provider answering 'Paris' with 10/3/13 usage"""
    return ScriptedProvider(LLMProviderType.OPENAI, [completion("Paris")])


@pytest.fixture
def failing_provider() -> ScriptedProvider:
    """OpenAI provider that always raises"""
    return ScriptedProvider(LLMProviderType.OPENAI, [RuntimeError("upstream exploded")])
