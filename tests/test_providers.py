"""
Tests for the provider adapters.

SDK clients are replaced by namespaces exposing the same call shape, so
these tests check request shaping and response normalization only.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from core.config import GenerationSettings
from core.data_models import CallTask, Message
from llm_providers.anthropic.claude_provider import AnthropicProvider, build_claude_messages
from llm_providers.base_provider import (
    AuthenticationError, LLMProviderError, LLMProviderType, ModelNotFoundError, ProviderRequest,
    RateLimitError
)
from llm_providers.google.gemini_provider import (
    GoogleProvider, build_gemini_history, normalize_model_name
)
from llm_providers.openai.chat_provider import (
    OpenAIProvider, OpenRouterProvider, build_chat_messages, is_reasoning_tier
)
from routers.provider_router import ProviderRouter
from routers.single_call_executor import SingleCallExecutor
from tests.fakes import RecordingSleep, make_request, run


def _request(model_id, system_prompt="Be brief.", messages=None, **kwargs):
    defaults = {"temperature": 0.7, "max_tokens": 1000}
    defaults.update(kwargs)
    return ProviderRequest(
        model_id=model_id,
        system_prompt=system_prompt,
        messages=messages if messages is not None else [Message("user", "Hi")],
        **defaults
    )


class _StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


def _openai_client(content="Paris", usage=None, error=None):
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        if error is not None:
            raise error
        return SimpleNamespace(
            model=kwargs["model"],
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
            usage=usage,
        )

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("model_id, expected", [
    ("o3", True),
    ("o3-mini", True),
    ("o4-mini", True),
    ("gpt-4", False),
    ("gpt-4o", False),
])
def test_reasoning_tier_detection(model_id, expected):
    assert is_reasoning_tier(model_id) is expected


def test_chat_messages_put_system_first_even_when_empty():
    request = _request("gpt-4", system_prompt="", messages=[
        Message("user", "Hi"), Message("assistant", "Hello"), Message("user", "Bye")
    ])

    assert build_chat_messages(request) == [
        {"role": "system", "content": ""},
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello"},
        {"role": "user", "content": "Bye"},
    ]


def test_standard_model_params_carry_temperature_and_max_tokens():
    client, _ = _openai_client()
    provider = OpenAIProvider("sk-test", client=client)

    params = provider.build_params(_request("gpt-4", temperature=0.2, max_tokens=50))

    assert params["model"] == "gpt-4"
    assert params["n"] == 1
    assert params["temperature"] == 0.2
    assert params["max_tokens"] == 50
    assert "max_completion_tokens" not in params


def test_reasoning_tier_params_omit_temperature():
    client, _ = _openai_client()
    provider = OpenAIProvider("sk-test", client=client)

    params = provider.build_params(_request("o3-mini", max_tokens=500, max_completion_tokens=2000))

    assert params["max_completion_tokens"] == 2000
    assert "temperature" not in params
    assert "max_tokens" not in params


@pytest.mark.parametrize("max_completion_tokens", [None, 0])
def test_reasoning_tier_falls_back_to_max_tokens_budget(max_completion_tokens):
    client, _ = _openai_client()
    provider = OpenAIProvider("sk-test", client=client)

    params = provider.build_params(
        _request("o4-mini", max_tokens=500, max_completion_tokens=max_completion_tokens)
    )

    assert params["max_completion_tokens"] == 500


def test_openai_generate_returns_content_and_usage():
    usage = SimpleNamespace(prompt_tokens=10, completion_tokens=3, total_tokens=13)
    client, calls = _openai_client(content="Paris", usage=usage)
    provider = OpenAIProvider("sk-test", client=client)

    completion = run(provider.generate(_request("gpt-4")))

    assert completion.content == "Paris"
    assert completion.usage.to_dict() == {
        "prompt_tokens": 10, "completion_tokens": 3, "total_tokens": 13
    }
    assert len(calls) == 1


def test_openai_generate_without_usage_reports_none():
    client, _ = _openai_client(content="Paris", usage=None)
    provider = OpenAIProvider("sk-test", client=client)

    completion = run(provider.generate(_request("gpt-4")))

    assert completion.content == "Paris"
    assert completion.usage is None


def test_null_content_is_a_provider_error():
    client, _ = _openai_client(content=None)
    provider = OpenRouterProvider("or-test", client=client)

    with pytest.raises(LLMProviderError) as excinfo:
        run(provider.generate(_request("deepseek/deepseek-r1")))

    assert excinfo.value.provider == "openrouter"
    assert "deepseek/deepseek-r1" in str(excinfo.value)


def test_null_content_is_retried_by_the_executor():
    contents = [None, "<reasoning>r</reasoning>42"]
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        content = contents.pop(0)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=content))], usage=None
        )

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    provider = OpenRouterProvider("or-test", client=client)
    sleep = RecordingSleep()
    executor = SingleCallExecutor(
        ProviderRouter({LLMProviderType.OPENROUTER: provider}), GenerationSettings(), sleep=sleep
    )
    task = CallTask(model_id="deepseek/deepseek-r1", completion_index=1, total_completions=1)

    result = run(executor.execute(make_request(["deepseek/deepseek-r1"]), task))

    assert result.succeeded
    assert result.content == "42"
    assert len(calls) == 2
    assert sleep.delays == [1.0]


@pytest.mark.parametrize("error, expected_type", [
    (_StatusError("Too many requests", 429), RateLimitError),
    (_StatusError("Incorrect API key provided", 401), AuthenticationError),
    (_StatusError("The model does not exist", 404), ModelNotFoundError),
    (RuntimeError("You exceeded your current quota"), RateLimitError),
    (RuntimeError("connection reset"), LLMProviderError),
])
def test_openai_errors_are_standardized(error, expected_type):
    client, _ = _openai_client(error=error)
    provider = OpenAIProvider("sk-test", client=client)

    with pytest.raises(expected_type) as excinfo:
        run(provider.generate(_request("gpt-4")))

    assert excinfo.value.provider == "openai"
    assert str(excinfo.value) == str(error)


def test_empty_api_key_is_rejected():
    client, _ = _openai_client()
    with pytest.raises(ValueError):
        OpenAIProvider("  ", client=client)


# ---------------------------------------------------------------------------
# OpenRouter
# ---------------------------------------------------------------------------

def test_openrouter_params_always_carry_temperature():
    client, _ = _openai_client()
    provider = OpenRouterProvider("or-test", client=client)

    params = provider.build_params(_request("deepseek/deepseek-r1", temperature=0.0, max_tokens=64))

    assert params == {
        "model": "deepseek/deepseek-r1",
        "messages": [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
        ],
        "temperature": 0.0,
        "max_tokens": 64,
    }


def test_openrouter_defaults_base_url_and_type():
    client, _ = _openai_client()
    provider = OpenRouterProvider("or-test", client=client)

    assert provider.base_url == "https://openrouter.ai/api/v1"
    assert provider.get_provider_type().value == "openrouter"


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------

def _anthropic_client(text="Paris", input_tokens=12, output_tokens=4):
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(
            content=[SimpleNamespace(text=text)],
            usage=SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens),
            stop_reason="end_turn",
        )

    return SimpleNamespace(messages=SimpleNamespace(create=create)), calls


def test_claude_roles_map_to_user_and_assistant():
    request = _request("claude-3-haiku", messages=[
        Message("user", "Hi"), Message("assistant", "Hello"), Message("system", "odd")
    ])

    assert [m["role"] for m in build_claude_messages(request)] == ["user", "assistant", "assistant"]


def test_claude_system_prompt_is_top_level():
    client, calls = _anthropic_client()
    provider = AnthropicProvider("ak-test", client=client)

    run(provider.generate(_request("claude-3-haiku", system_prompt="Be brief.")))

    assert calls[0]["system"] == "Be brief."
    assert calls[0]["messages"] == [{"role": "user", "content": "Hi"}]
    assert calls[0]["temperature"] == 0.7
    assert calls[0]["max_tokens"] == 1000


def test_claude_empty_system_prompt_is_omitted():
    client, _ = _anthropic_client()
    provider = AnthropicProvider("ak-test", client=client)

    params = provider.build_params(_request("claude-3-haiku", system_prompt=""))

    assert "system" not in params


def test_claude_usage_total_is_input_plus_output():
    client, _ = _anthropic_client(text="Paris", input_tokens=12, output_tokens=4)
    provider = AnthropicProvider("ak-test", client=client)

    completion = run(provider.generate(_request("claude-3-haiku")))

    assert completion.content == "Paris"
    assert completion.usage.to_dict() == {
        "prompt_tokens": 12, "completion_tokens": 4, "total_tokens": 16
    }


# ---------------------------------------------------------------------------
# Google
# ---------------------------------------------------------------------------

def test_normalize_model_name_strips_prefix():
    assert normalize_model_name("models/gemini-2.5-pro") == "gemini-2.5-pro"
    assert normalize_model_name("gemini-2.5-pro") == "gemini-2.5-pro"


def test_gemini_history_merges_system_prompt_into_first_user_turn():
    history, prompt = build_gemini_history("Be brief.", [
        Message("user", "Hi"), Message("assistant", "Hello"), Message("user", "Capital of France?")
    ])

    assert history == [
        {"role": "user", "parts": [{"text": "Be brief.\n\nHi"}]},
        {"role": "model", "parts": [{"text": "Hello"}]},
    ]
    assert prompt == "Capital of France?"


def test_gemini_single_user_message_carries_system_prompt_as_prompt():
    history, prompt = build_gemini_history("Be brief.", [Message("user", "Hi")])

    assert history == []
    assert prompt == "Be brief.\n\nHi"


def test_gemini_trailing_assistant_turn_stays_in_history():
    history, prompt = build_gemini_history("", [Message("user", "Hi"), Message("assistant", "Hello")])

    assert [turn["role"] for turn in history] == ["user", "model"]
    assert prompt == ""


def test_gemini_empty_conversation():
    assert build_gemini_history("Be brief.", []) == ([], "")


class _FakeGeminiModel:
    def __init__(self, name, text, seen):
        self.name = name
        self.text = text
        self.seen = seen

    def start_chat(self, history):
        self.seen["history"] = history
        model = self

        class _Chat:
            async def send_message_async(self, prompt, request_options=None):
                model.seen["prompt"] = prompt
                model.seen["request_options"] = request_options
                return SimpleNamespace(text=model.text)

        return _Chat()


def test_google_generate_uses_chat_history_and_reports_no_usage(monkeypatch):
    monkeypatch.setattr("google.generativeai.configure", lambda **kwargs: None)
    seen = {}

    def factory(name):
        seen["model_name"] = name
        return _FakeGeminiModel(name, "Paris", seen)

    provider = GoogleProvider("gk-test", model_factory=factory, timeout=30)
    completion = run(provider.generate(_request("models/gemini-2.5-pro")))

    assert seen["model_name"] == "gemini-2.5-pro"
    assert seen["history"] == []
    assert seen["prompt"] == "Be brief.\n\nHi"
    assert seen["request_options"] == {"timeout": 30}
    assert completion.content == "Paris"
    assert completion.usage is None
    assert completion.prompt_text == "Be brief.\n\nHi"
    assert provider.reports_usage is False


def test_google_errors_are_standardized(monkeypatch):
    monkeypatch.setattr("google.generativeai.configure", lambda **kwargs: None)

    def factory(name):
        raise RuntimeError("429 Resource exhausted")

    provider = GoogleProvider("gk-test", model_factory=factory)

    with pytest.raises(RateLimitError):
        run(provider.generate(_request("gemini-2.5-pro")))
