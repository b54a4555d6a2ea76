"""
Risk Aggregation
================

Turns a list of indicators into the overall risk score, confidence,
risk level and recommended action.

The score is normalized by ``N * weight(critical)``, so adding
lower-severity indicators lowers the score even when the existing
indicators are unchanged.

Version: 0.1.0
"""

from collections.abc import Sequence

from services.fraud_detection.models import FraudIndicator, RecommendedAction, Severity


SEVERITY_WEIGHTS: dict[Severity, float] = {
    Severity.CRITICAL: 40,
    Severity.HIGH: 25,
    Severity.MEDIUM: 15,
    Severity.LOW: 5,
}

# Shared by risk level and recommended action
CRITICAL_THRESHOLD = 90
HIGH_THRESHOLD = 75
MEDIUM_THRESHOLD = 50

BLOCK_CONFIDENCE = 0.9


def calculate_risk_score(indicators: Sequence[FraudIndicator]) -> float:
    """Confidence-weighted severity mass, 0 to 100."""
    if not indicators:
        return 0.0

    total = sum(SEVERITY_WEIGHTS[i.severity] * i.confidence for i in indicators)
    max_possible = len(indicators) * SEVERITY_WEIGHTS[Severity.CRITICAL]
    return max(0.0, min(100.0, total / max_possible * 100))


def calculate_confidence(indicators: Sequence[FraudIndicator]) -> float:
    """Average indicator confidence plus 0.05 per indicator (at most 0.2)."""
    if not indicators:
        return 0.5

    average = sum(i.confidence for i in indicators) / len(indicators)
    bonus = min(0.2, len(indicators) * 0.05)
    return max(0.0, min(1.0, average + bonus))


def determine_risk_level(risk_score: float) -> Severity:
    if risk_score >= CRITICAL_THRESHOLD:
        return Severity.CRITICAL
    if risk_score >= HIGH_THRESHOLD:
        return Severity.HIGH
    if risk_score >= MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return Severity.LOW


def determine_action(risk_score: float, confidence: float) -> RecommendedAction:
    if risk_score >= CRITICAL_THRESHOLD and confidence >= BLOCK_CONFIDENCE:
        return RecommendedAction.BLOCK
    if risk_score >= HIGH_THRESHOLD:
        return RecommendedAction.REJECT
    if risk_score >= MEDIUM_THRESHOLD:
        return RecommendedAction.REVIEW
    return RecommendedAction.APPROVE
