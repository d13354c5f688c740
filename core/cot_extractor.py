"""
Chain-of-thought trace extraction.

Splits raw model output into the visible answer and the reasoning trace
using per-family heuristics. This is best-effort pattern matching: a
missing match simply means the content is returned unchanged.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern


# Models known to emit a reasoning trace (substring match on the model id)
COT_MODELS = (
    "x-ai/grok-4",
    "gemini-2.5-pro",
    "models/gemini-2.5-pro",
    "deepseek/deepseek-r1",
)

_THINKING_BLOCK = re.compile(r"<thinking>([\s\S]*?)</thinking>")
_REASONING_BLOCK = re.compile(r"<reasoning>([\s\S]*?)</reasoning>")

# Gemini emits no tags; look for leading reasoning prose ended by a blank line.
# re.ASCII keeps \w to [A-Za-z0-9_].
_GEMINI_PATTERNS: List[Pattern[str]] = [
    re.compile(r"^(Let me think[\s\S]*?)\n\n(?=\w)", re.ASCII),
    re.compile(r"^(I need to[\s\S]*?)\n\n(?=\w)", re.ASCII),
    re.compile(r"^(First,[\s\S]*?)\n\n(?=The answer|Based on|To answer)", re.ASCII),
]


@dataclass
class CotExtraction:
    """Result of splitting a response into reasoning and answer"""
    reasoning: str
    main_content: str
    full_content: str


def is_cot_model(model_id: str) -> bool:
    """Check whether a model id belongs to a known chain-of-thought model"""
    return any(cot_model in model_id for cot_model in COT_MODELS)


def _extract_tagged(content: str, pattern: Pattern[str]) -> Optional[CotExtraction]:
    match = pattern.search(content)
    if not match:
        return None
    main_content = pattern.sub("", content, count=1).strip()
    return CotExtraction(reasoning=match.group(1), main_content=main_content, full_content=content)


def _extract_gemini(content: str) -> Optional[CotExtraction]:
    for pattern in _GEMINI_PATTERNS:
        match = pattern.match(content)
        if match:
            reasoning = match.group(1)
            return CotExtraction(
                reasoning=reasoning,
                main_content=content[len(reasoning):].strip(),
                full_content=content,
            )
    return None


def extract_cot_content(content: str, model_id: str) -> CotExtraction:
    """
    Split raw model output into reasoning and visible answer.

    Only the heuristic for the family named in ``model_id`` is tried:
    ``<thinking>`` blocks for Grok, ``<reasoning>`` blocks for Deepseek and
    leading reasoning prose for Gemini.

    Args:
        content: Raw response text
        model_id: Model identifier used to pick the heuristic

    Returns:
        CotExtraction: ``full_content`` is always the untouched input
    """
    extraction = None
    if "grok" in model_id:
        extraction = _extract_tagged(content, _THINKING_BLOCK)
    if extraction is None and "deepseek" in model_id:
        extraction = _extract_tagged(content, _REASONING_BLOCK)
    if extraction is None and "gemini" in model_id:
        extraction = _extract_gemini(content)

    if extraction is None:
        return CotExtraction(reasoning="", main_content=content, full_content=content)
    return extraction
