"""Token and cost estimation.

Token counts are a length heuristic (about four characters per token for
English text), not a provider tokenizer. They are used for the context
window guard and for the recorded cost, which is therefore an estimate.
"""

from __future__ import annotations

import math

from openprd.llm.types import ModelSpec

CHARS_PER_TOKEN = 4

# Share of a model's context window the prompt may occupy
CONTEXT_BUDGET_RATIO = 0.6


def estimate_tokens(text: str) -> int:
    """Estimate tokens for `text`.

    Args:
        text: Any string; the empty string yields 0.

    Returns:
        ceil(len(text) / 4).
    """
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def calculate_cost(tokens: int, cost_per_1k: float) -> float:
    """Cost in USD for `tokens` at a per-1,000-token price."""
    return (tokens / 1000) * cost_per_1k


def estimate_generation_cost(model: ModelSpec, input_tokens: int, output_tokens: int) -> float:
    """Total cost of one generation: input and output priced separately."""
    return calculate_cost(input_tokens, model.input_cost_per_1k) + calculate_cost(
        output_tokens, model.output_cost_per_1k
    )


def context_budget(model: ModelSpec, ratio: float = CONTEXT_BUDGET_RATIO) -> float:
    """Largest input token estimate accepted for `model`."""
    return model.context_window * ratio
