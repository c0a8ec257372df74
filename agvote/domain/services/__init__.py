"""Pure domain services."""

from agvote.domain.services.policy_evaluator import (
    DecisionDenominators,
    evaluate_decision,
    format_number,
    format_percent,
    resolve_policy_id,
    select_tally_source,
)

__all__: list[str] = [
    "DecisionDenominators",
    "evaluate_decision",
    "format_number",
    "format_percent",
    "resolve_policy_id",
    "select_tally_source",
]
