"""Model tier decision table and cost estimator. Pure functions, no I/O."""

from sei_debug.models import CostEstimate, ModelTier, TaskDescriptor

SEARCH_COST = 0.01  # per web search ($10 per 1000)
TOKEN_RATE_PER_1K: dict[ModelTier, float] = {
    ModelTier.HIGH: 0.075,
    ModelTier.STANDARD: 0.015,
}
# Fallback for hand-built descriptors; classify() always sets its own estimate.
DEFAULT_TOKEN_COUNT = 1000


def select_tier(task: TaskDescriptor) -> ModelTier:
    """Pick the model tier for a task. Escalation rules win over economy rules."""
    if task.needs_deep_analysis or task.needs_code_execution or task.complexity == "high":
        return ModelTier.HIGH

    if task.is_simple_query or task.is_status_check or task.complexity == "low":
        return ModelTier.STANDARD

    return ModelTier.STANDARD


def token_cost(tokens: int, tier: ModelTier) -> float:
    return (tokens / 1000) * TOKEN_RATE_PER_1K[tier]


def estimate_cost(task: TaskDescriptor) -> CostEstimate:
    searches = task.estimated_search_count if task.estimated_search_count is not None else 0
    tokens = task.estimated_token_count if task.estimated_token_count is not None else DEFAULT_TOKEN_COUNT

    search_cost = searches * SEARCH_COST
    tokens_cost = token_cost(tokens, select_tier(task))
    return CostEstimate(
        search_cost=search_cost,
        token_cost=tokens_cost,
        total=search_cost + tokens_cost,
    )
