"""
Tests for chain-of-thought trace extraction.

Covers model eligibility, the tag-based heuristics for Grok and Deepseek,
the leading-prose heuristics for Gemini, non-matches and idempotence.
"""

from __future__ import annotations

import pytest

from core.cot_extractor import extract_cot_content, is_cot_model


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("model_id", [
    "x-ai/grok-4",
    "x-ai/grok-4-0709",
    "gemini-2.5-pro",
    "models/gemini-2.5-pro",
    "gemini-2.5-pro-preview-06-05",
    "deepseek/deepseek-r1",
    "deepseek/deepseek-r1-0528",
])
def test_known_cot_models_are_eligible(model_id):
    assert is_cot_model(model_id)


@pytest.mark.parametrize("model_id", [
    "gpt-4",
    "claude-3-5-sonnet-20241022",
    "gemini-1.5-flash",
    "deepseek/deepseek-chat",
    "x-ai/grok-3",
    "o3-mini",
])
def test_other_models_are_not_eligible(model_id):
    assert not is_cot_model(model_id)


# ---------------------------------------------------------------------------
# Tagged families
# ---------------------------------------------------------------------------

def test_deepseek_reasoning_block_is_split_off():
    raw = "<reasoning>step A step B</reasoning>Answer: 42"
    result = extract_cot_content(raw, "deepseek/deepseek-r1")

    assert result.reasoning == "step A step B"
    assert result.main_content == "Answer: 42"
    assert result.full_content == raw


def test_grok_thinking_block_spans_newlines_and_is_trimmed():
    raw = "<thinking>line one\nline two</thinking>\n\n  The answer is 7.  "
    result = extract_cot_content(raw, "x-ai/grok-4")

    assert result.reasoning == "line one\nline two"
    assert result.main_content == "The answer is 7."


def test_block_in_the_middle_is_removed_and_surroundings_kept():
    raw = "Intro. <thinking>hidden</thinking> Outro."
    result = extract_cot_content(raw, "x-ai/grok-4")

    assert result.reasoning == "hidden"
    assert result.main_content == "Intro.  Outro."


def test_only_first_block_is_extracted():
    raw = "<thinking>first</thinking>A<thinking>second</thinking>B"
    result = extract_cot_content(raw, "x-ai/grok-4")

    assert result.reasoning == "first"
    assert result.main_content == "A<thinking>second</thinking>B"


def test_tag_must_match_family():
    # Deepseek output is only searched for <reasoning>, never <thinking>
    raw = "<thinking>not for deepseek</thinking>Answer"
    result = extract_cot_content(raw, "deepseek/deepseek-r1")

    assert result.reasoning == ""
    assert result.main_content == raw


def test_empty_tag_block_yields_empty_reasoning():
    result = extract_cot_content("<reasoning></reasoning>Done", "deepseek/deepseek-r1")
    assert result.reasoning == ""
    assert result.main_content == "Done"


# ---------------------------------------------------------------------------
# Gemini heuristics
# ---------------------------------------------------------------------------

def test_gemini_let_me_think_prefix():
    raw = "Let me think step by step.\n\nThe capital is Paris."
    result = extract_cot_content(raw, "gemini-2.5-pro")

    assert result.reasoning == "Let me think step by step."
    assert result.main_content == "The capital is Paris."


def test_gemini_i_need_to_prefix_with_models_prefix():
    raw = "I need to recall geography.\nEurope first.\n\nParis."
    result = extract_cot_content(raw, "models/gemini-2.5-pro")

    assert result.reasoning == "I need to recall geography.\nEurope first."
    assert result.main_content == "Paris."


def test_gemini_first_prefix_requires_answer_cue():
    raw = "First, add the numbers.\n\nBased on that, the total is 4."
    result = extract_cot_content(raw, "gemini-2.5-pro")

    assert result.reasoning == "First, add the numbers."
    assert result.main_content == "Based on that, the total is 4."


def test_gemini_first_prefix_without_cue_is_not_split():
    raw = "First, add the numbers.\n\nSo the total is 4."
    result = extract_cot_content(raw, "gemini-2.5-pro")

    assert result.reasoning == ""
    assert result.main_content == raw


def test_gemini_boundary_must_precede_ascii_word_character():
    raw = "Let me think about it.\n\nÉtant donné cela, Paris."
    result = extract_cot_content(raw, "gemini-2.5-pro")

    assert result.reasoning == ""
    assert result.main_content == raw


def test_gemini_plain_answer_is_unchanged():
    raw = "Paris is the capital of France."
    result = extract_cot_content(raw, "gemini-2.5-pro")

    assert result.reasoning == ""
    assert result.main_content == raw
    assert result.full_content == raw


# ---------------------------------------------------------------------------
# General properties
# ---------------------------------------------------------------------------

def test_non_matching_model_family_passes_content_through():
    raw = "<thinking>kept</thinking>Answer"
    result = extract_cot_content(raw, "gpt-4")

    assert result.reasoning == ""
    assert result.main_content == raw


@pytest.mark.parametrize("raw, model_id", [
    ("<reasoning>step A step B</reasoning>Answer: 42", "deepseek/deepseek-r1"),
    ("<thinking>plan</thinking>\nResult", "x-ai/grok-4"),
    ("Let me think.\n\nParis.", "gemini-2.5-pro"),
])
def test_extraction_is_idempotent(raw, model_id):
    first = extract_cot_content(raw, model_id)
    second = extract_cot_content(first.main_content, model_id)

    assert first.reasoning != ""
    assert second.reasoning == ""
    assert second.main_content == first.main_content
