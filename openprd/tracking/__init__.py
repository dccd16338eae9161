"""Token and cost estimation for generations."""

from openprd.tracking.estimate import (
    CONTEXT_BUDGET_RATIO,
    calculate_cost,
    context_budget,
    estimate_generation_cost,
    estimate_tokens,
)

__all__ = [
    "CONTEXT_BUDGET_RATIO",
    "calculate_cost",
    "context_budget",
    "estimate_generation_cost",
    "estimate_tokens",
]
