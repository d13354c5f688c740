"""
Token estimation for providers that do not report exact counts.

A token is approximated as four characters of text. The same estimate
sizes the reasoning span that is subtracted from provider-reported usage
once a chain-of-thought trace has been removed from the answer.
"""

import math
from typing import Optional, Tuple

from .data_models import TokenUsage


CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Approximate token count: ceil(len(text) / 4)"""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _subtract_floor_one(reported: Optional[int], removed: int) -> Optional[int]:
    if reported is None:
        return None
    return max(1, reported - removed)


def adjust_reported_usage(usage: TokenUsage, reasoning: str) -> Tuple[TokenUsage, int]:
    """
    Remove an extracted reasoning trace from provider-reported usage.

    Completion and total counts are reduced by the estimated size of the
    trace and never drop below 1. Counters the provider did not report
    stay unreported.

    Args:
        usage: Usage as reported by the provider
        reasoning: Reasoning text that was split off the answer

    Returns:
        Tuple[TokenUsage, int]: (adjusted usage, estimated reasoning tokens)
    """
    reasoning_tokens = estimate_tokens(reasoning)
    adjusted = TokenUsage(
        prompt_tokens=usage.prompt_tokens,
        completion_tokens=_subtract_floor_one(usage.completion_tokens, reasoning_tokens),
        total_tokens=_subtract_floor_one(usage.total_tokens, reasoning_tokens),
    )
    return adjusted, reasoning_tokens


def estimate_raw_usage(prompt_text: str, raw_content: str) -> TokenUsage:
    """Usage for a provider with no native counts when no trace was removed"""
    return TokenUsage(total_tokens=estimate_tokens(prompt_text + raw_content))


def estimate_answer_usage(prompt_text: str, main_content: str, reasoning: str) -> Tuple[TokenUsage, int]:
    """
    Usage for a provider with no native counts once a trace was removed.

    Only the prompt and the user-facing answer are counted. Note that this
    counts prompt and answer separately while :func:`estimate_raw_usage`
    reports a single total over prompt plus raw output.
    """
    prompt_tokens = estimate_tokens(prompt_text)
    completion_tokens = estimate_tokens(main_content)
    usage = TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )
    return usage, estimate_tokens(reasoning)
