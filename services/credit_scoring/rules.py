"""
Score Rules
===========

Score-derived outputs: banding, default probability, recommendations,
loan ranges, interest rates and confidence. All band lookups read the
single RISK_BANDS table so risk level and band recommendations agree.

Version: 0.1.0
"""

from collections.abc import Sequence

from services.credit_scoring.models import (
    BANDS_BY_LEVEL,
    RISK_BANDS,
    SCORE_MAX,
    SCORE_MIN,
    AmountRange,
    AssessmentFactor,
    FactorImpact,
    RiskBand,
    RiskLevel,
)
from shared.models import EntityType


# Shown when a factor is negative and its sub-score below this threshold
RECOMMENDATION_THRESHOLD = 0.4

FACTOR_RECOMMENDATIONS: dict[str, str] = {
    "Payment History": "Improve payment history by making all payments on time",
    "Credit Utilization": "Reduce credit card balances to below 30% of credit limits",
    "Employment Stability": "Maintain stable employment and document income sources",
    "Financial Performance": "Focus on improving revenue growth and profitability ratios",
    "Capital Adequacy": "Increase capital reserves to meet regulatory requirements",
}

GENERAL_RECOMMENDATIONS: dict[EntityType, list[str]] = {
    EntityType.INDIVIDUAL: [
        "Consider building credit history through secured credit products",
        "Maintain emergency savings equivalent to 3-6 months of expenses",
    ],
    EntityType.COMPANY: [
        "Maintain detailed financial records and regular audits",
        "Diversify revenue streams to reduce business risk",
    ],
}

INDIVIDUAL_LOAN_CAP = 1_000_000
INDIVIDUAL_LOAN_FLOOR = 5_000
BUSINESS_LOAN_CAP = 10_000_000
BUSINESS_LOAN_FLOOR = 50_000


def clamp_score(raw: float) -> int:
    """Round and clamp a weighted sum into the score range."""
    return max(SCORE_MIN, min(SCORE_MAX, round(raw)))


def weighted_score(base: float, factors: Sequence[AssessmentFactor], scale: float) -> int:
    """``base + sum(score * weight * scale)``, clamped."""
    total = base + sum(f.score * f.weight * scale for f in factors)
    return clamp_score(total)


def band_for(score: int) -> RiskBand:
    """Band containing a clamped score."""
    for band in RISK_BANDS:
        if band.contains(score):
            return band
    raise ValueError(f"Score {score} outside [{SCORE_MIN}, {SCORE_MAX}]")


def determine_risk_level(score: int) -> RiskLevel:
    return band_for(score).level


def probability_of_default(score: int, factors: Sequence[AssessmentFactor]) -> float:
    """
    Estimate default probability from the score.

    Starts from ``(850 - score) / 1000`` bounded to [0.01, 0.5], then
    adds 2 points per negative factor and removes 1 point per positive
    factor, bounded to [0.005, 0.5].
    """
    base = max(0.01, min(0.5, (SCORE_MAX - score) / 1000))
    negatives = sum(1 for f in factors if f.impact == FactorImpact.NEGATIVE)
    positives = sum(1 for f in factors if f.impact == FactorImpact.POSITIVE)
    return max(0.005, min(0.5, base + negatives * 0.02 - positives * 0.01))


def generate_recommendations(
    factors: Sequence[AssessmentFactor],
    entity_type: EntityType,
    risk_level: RiskLevel,
) -> list[str]:
    """Factor-driven, entity-general and band-level recommendations, in that order."""
    recommendations: list[str] = []

    for factor in factors:
        if factor.impact == FactorImpact.NEGATIVE and factor.score < RECOMMENDATION_THRESHOLD:
            message = FACTOR_RECOMMENDATIONS.get(factor.category)
            if message:
                recommendations.append(message)

    recommendations.extend(GENERAL_RECOMMENDATIONS.get(entity_type, []))

    band_message = BANDS_BY_LEVEL[risk_level].recommendation
    if band_message:
        recommendations.append(band_message)

    return recommendations


# =============================================================================
# Loan Amounts and Pricing
# =============================================================================


def individual_loan_range(score: int, monthly_income: float) -> AmountRange:
    """Annual income multiple by score tier, capped at 1M."""
    if score >= 700:
        multiplier = 5
    elif score >= 600:
        multiplier = 3
    elif score >= 500:
        multiplier = 2
    else:
        multiplier = 1

    max_loan = monthly_income * multiplier * 12
    return AmountRange(
        min=max(INDIVIDUAL_LOAN_FLOOR, max_loan * 0.1),
        max=min(INDIVIDUAL_LOAN_CAP, max_loan),
    )


def business_loan_range(score: int, annual_revenue: float) -> AmountRange:
    """Share of annual revenue by score tier, capped at 10M."""
    if score >= 700:
        multiplier = 0.5
    elif score >= 600:
        multiplier = 0.3
    elif score >= 500:
        multiplier = 0.2
    else:
        multiplier = 0.1

    max_loan = annual_revenue * multiplier
    return AmountRange(
        min=max(BUSINESS_LOAN_FLOOR, max_loan * 0.1),
        max=min(BUSINESS_LOAN_CAP, max_loan),
    )


def institutional_loan_range(score: int) -> AmountRange:
    if score >= 700:
        base = 50_000_000
    elif score >= 600:
        base = 20_000_000
    else:
        base = 10_000_000
    return AmountRange(min=base * 0.1, max=base)


def interest_rate_range(risk_level: RiskLevel) -> AmountRange:
    band = BANDS_BY_LEVEL[risk_level]
    return AmountRange(min=band.interest_min, max=band.interest_max)


def calculate_confidence(
    factors: Sequence[AssessmentFactor],
    has_bureau_data: bool,
    has_alternative_data: bool,
) -> float:
    """Data-source availability plus average factor quality, bounded to [0.3, 1.0]."""
    confidence = 0.5
    if has_bureau_data:
        confidence += 0.3
    if has_alternative_data:
        confidence += 0.2

    if factors:
        average = sum(f.score for f in factors) / len(factors)
        confidence += (average - 0.5) * 0.2

    return max(0.3, min(1.0, confidence))
