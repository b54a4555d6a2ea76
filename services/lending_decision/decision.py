"""
Decision Combiner
=================

Maps a credit score and a fraud recommendation to a loan decision and
an approved amount.

Decision table:
- score >= 650 and fraud not reject/block      -> approved
- score >= 550 and fraud review (or not run)   -> conditional at 70%
- otherwise                                    -> declined

Version: 0.1.0
"""

import math
from dataclasses import dataclass
from enum import Enum

from services.fraud_detection.models import RecommendedAction


APPROVAL_SCORE = 650
CONDITIONAL_SCORE = 550
CONDITIONAL_SHARE = 0.7


class LoanDecision(str, Enum):
    """Outcome of a lending decision."""

    APPROVED = "approved"
    CONDITIONAL = "conditional"
    DECLINED = "declined"


@dataclass(frozen=True)
class DecisionResult:
    """Decision and the amount it approves."""

    decision: LoanDecision
    approved_amount: float


def decide(
    score: int,
    fraud_recommendation: RecommendedAction | None,
    requested_amount: float | None,
    max_amount: float,
) -> DecisionResult:
    """
    Combine score and fraud recommendation into a decision.

    Args:
        score: Credit score (350-850)
        fraud_recommendation: Fraud engine action, or None if fraud was not checked
        requested_amount: Amount applied for. None requests the full
            max_amount rather than being read as zero, so an application
            without an amount is sized by the scoring loan range
        max_amount: Upper bound from the scoring loan range

    Returns:
        DecisionResult
    """
    capped = max_amount if requested_amount is None else min(requested_amount, max_amount)
    blocked = fraud_recommendation in (RecommendedAction.REJECT, RecommendedAction.BLOCK)

    if score >= APPROVAL_SCORE and not blocked:
        return DecisionResult(LoanDecision.APPROVED, capped)

    if score >= CONDITIONAL_SCORE and fraud_recommendation in (RecommendedAction.REVIEW, None):
        return DecisionResult(LoanDecision.CONDITIONAL, math.floor(CONDITIONAL_SHARE * capped))

    return DecisionResult(LoanDecision.DECLINED, 0)
