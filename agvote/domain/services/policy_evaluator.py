"""Policy evaluator: converts weighted vote sums into a ruling.

Everything in this module is pure. Callers gather the tally, the policies
and the contextual denominators; the evaluator only does arithmetic and
wording, which keeps the decision procedure testable in isolation.

Decision procedure:
    1. Quorum (only when a quorum policy applies). Not met iff the expressed
       weight is strictly below threshold x denominator. Majority is then
       skipped and the ruling is no_quorum.
    2. Majority. Adopted iff "for" strictly exceeds threshold x base.
       An exact for/against tie is always rejected.
"""

from __future__ import annotations

from dataclasses import dataclass

from agvote.domain.models.ballot import BallotTally
from agvote.domain.models.decision import (
    Decision,
    DecisionOutcome,
    ElectronicTally,
    ManualTally,
    TallySource,
)
from agvote.domain.models.motion import MANUAL_TALLY_EPSILON, Motion
from agvote.domain.models.policy import (
    DEFAULT_VOTE_POLICY,
    MajorityBase,
    QuorumDenominator,
    QuorumPolicy,
    VotePolicy,
)

_QUORUM_BASIS_LABELS = {
    QuorumDenominator.ELIGIBLE_MEMBERS: "des membres éligibles",
    QuorumDenominator.PRESENT: "du poids présent",
}

_MAJORITY_BASE_LABELS = {
    MajorityBase.EXPRESSED: "des exprimés",
    MajorityBase.PRESENT: "des présents",
}


@dataclass(frozen=True, eq=True)
class DecisionDenominators:
    """Contextual figures the evaluator cannot derive from the tally.

    Attributes:
        eligible_members: Active members of the tenant.
        quorum_present_weight: Present weight over the quorum policy's modes.
        majority_present_weight: Present weight of directly present members.
        convocation_no: 1 for the first call, >= 2 when reconvened.
    """

    eligible_members: int = 0
    quorum_present_weight: float = 0.0
    majority_present_weight: float = 0.0
    convocation_no: int = 1


def format_number(value: float) -> str:
    """Format a figure the French way ("1 234" or "1 234,50")."""
    rounded = round(value)
    if abs(value - rounded) < 0.0001:
        return f"{int(rounded):,}".replace(",", " ")
    return f"{value:,.2f}".replace(",", " ").replace(".", ",")


def format_percent(ratio: float) -> str:
    """Format a ratio as a French percentage ("50%" or "66,67%")."""
    return f"{format_number(ratio * 100)}%"


def select_tally_source(
    motion: Motion,
    electronic: BallotTally,
    epsilon: float = MANUAL_TALLY_EPSILON,
) -> TallySource:
    """Pick the tally the official result is computed from.

    The manual tally wins when it was entered and adds up to its total;
    otherwise the electronic aggregate is used.

    Args:
        motion: Motion carrying the manual tally fields.
        electronic: Weighted aggregate of the motion's ballots.
        epsilon: Tolerance for the manual consistency check.

    Returns:
        ManualTally or ElectronicTally.
    """
    if motion.has_consistent_manual_tally(epsilon):
        return ManualTally(
            for_weight=motion.manual_for,
            against_weight=motion.manual_against,
            abstain_weight=motion.manual_abstain,
            total=motion.manual_total,
        )
    return ElectronicTally(
        for_weight=electronic.weight_for,
        against_weight=electronic.weight_against,
        abstain_weight=electronic.weight_abstain,
        total=electronic.weight_total,
        ballot_count=electronic.total_ballots,
    )


def resolve_policy_id(*candidates: str | None) -> str | None:
    """Return the first non-empty policy id, in precedence order.

    Called as resolve_policy_id(motion_level, meeting_level).
    """
    for candidate in candidates:
        if candidate is not None and candidate.strip():
            return candidate.strip()
    return None


def _figures(tally: TallySource) -> str:
    return (
        f"Pour: {format_number(tally.for_weight)}, "
        f"Contre: {format_number(tally.against_weight)}"
    )


def _evaluate_quorum(
    tally: TallySource,
    policy: QuorumPolicy,
    denominators: DecisionDenominators,
) -> tuple[bool, float, str]:
    """Return (met, ratio, failure reason) for the convocation in force."""
    basis, threshold = policy.for_convocation(denominators.convocation_no)
    if basis is QuorumDenominator.ELIGIBLE_MEMBERS:
        denominator = float(denominators.eligible_members)
    else:
        denominator = denominators.quorum_present_weight

    expressed = tally.expressed_weight
    ratio = expressed / denominator if denominator > 0 else 0.0
    if expressed >= threshold * denominator:
        return True, ratio, ""

    reason = (
        f"Quorum non atteint ({format_percent(ratio)} < "
        f"{format_percent(threshold)} {_QUORUM_BASIS_LABELS[basis]} ; "
        f"{_figures(tally)})"
    )
    return False, ratio, reason


def _tie_reason(tally: TallySource) -> str:
    figure = format_number(tally.for_weight)
    return f"Égalité des voix (Pour: {figure} = Contre: {figure})"


def _evaluate_simple_majority(tally: TallySource) -> tuple[Decision, str, float]:
    for_fmt = format_number(tally.for_weight)
    against_fmt = format_number(tally.against_weight)
    base = tally.for_weight + tally.against_weight
    ratio = tally.for_weight / base if base > 0 else 0.0

    if tally.for_weight == tally.against_weight:
        return Decision.REJECTED, _tie_reason(tally), ratio
    if tally.for_weight > DEFAULT_VOTE_POLICY.threshold * base:
        reason = f"Majorité simple (Pour: {for_fmt} > Contre: {against_fmt})"
        return Decision.ADOPTED, reason, ratio
    reason = f"Majorité simple non atteinte (Pour: {for_fmt} <= Contre: {against_fmt})"
    return Decision.REJECTED, reason, ratio


def _evaluate_policy_majority(
    tally: TallySource,
    policy: VotePolicy,
    denominators: DecisionDenominators,
) -> tuple[Decision, str, float]:
    if policy.base is MajorityBase.PRESENT:
        denominator = denominators.majority_present_weight
    else:
        denominator = tally.for_weight + tally.against_weight
        if policy.abstention_as_against:
            denominator += tally.abstain_weight

    ratio = tally.for_weight / denominator if denominator > 0 else 0.0
    if tally.for_weight == tally.against_weight:
        return Decision.REJECTED, _tie_reason(tally), ratio

    label = _MAJORITY_BASE_LABELS[policy.base]
    if denominator > 0 and tally.for_weight > policy.threshold * denominator:
        reason = (
            f"Majorité atteinte ({format_percent(ratio)} > "
            f"{format_percent(policy.threshold)} {label} ; {_figures(tally)})"
        )
        return Decision.ADOPTED, reason, ratio
    reason = (
        f"Majorité non atteinte ({format_percent(ratio)} <= "
        f"{format_percent(policy.threshold)} {label} ; {_figures(tally)})"
    )
    return Decision.REJECTED, reason, ratio


def evaluate_decision(
    tally: TallySource,
    quorum_policy: QuorumPolicy | None,
    vote_policy: VotePolicy | None,
    denominators: DecisionDenominators,
) -> DecisionOutcome:
    """Rule on a motion from one tally source.

    Args:
        tally: Manual or electronic figures.
        quorum_policy: Resolved quorum policy, or None when none applies.
        vote_policy: Resolved vote policy, or None for the simple-majority
            default.
        denominators: Eligible/present figures for the meeting.

    Returns:
        DecisionOutcome with the ruling and a reason citing the figures.
    """
    quorum_met: bool | None = None
    quorum_ratio: float | None = None
    if quorum_policy is not None:
        quorum_met, quorum_ratio, reason = _evaluate_quorum(
            tally, quorum_policy, denominators
        )
        if not quorum_met:
            return DecisionOutcome(
                decision=Decision.NO_QUORUM,
                reason=reason,
                quorum_met=False,
                quorum_ratio=quorum_ratio,
            )

    policy = vote_policy or DEFAULT_VOTE_POLICY
    if policy.is_default:
        decision, reason, ratio = _evaluate_simple_majority(tally)
    else:
        decision, reason, ratio = _evaluate_policy_majority(tally, policy, denominators)

    return DecisionOutcome(
        decision=decision,
        reason=reason,
        quorum_met=quorum_met,
        quorum_ratio=quorum_ratio,
        majority_ratio=ratio,
        majority_threshold=policy.threshold,
    )
