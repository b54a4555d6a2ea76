"""
Partner Response
================

Serializes an assessment outcome into the JSON body returned to
lending partners, plus display formatting helpers.

Version: 0.1.0
"""

from typing import Any

from services.credit_scoring.models import RiskLevel
from services.lending_decision.assessment import AssessmentOutcome


def format_risk_level(level: RiskLevel | str) -> str:
    """``VERY_LOW`` -> ``very low``."""
    value = level.value if isinstance(level, RiskLevel) else level
    return value.lower().replace("_", " ")


def format_probability(probability: float) -> str:
    """0.0734 -> ``7.3%``."""
    return f"{probability * 100:.1f}%"


def format_interest_rate(rate_min: float, rate_max: float) -> str:
    """3.5, 5.0 -> ``3.5% - 5.0%``."""
    return f"{rate_min:.1f}% - {rate_max:.1f}%"


def format_risk_score(score: float) -> str:
    """Fraud risk score out of 100, e.g. ``73/100``."""
    return f"{round(score)}/100"


def build_partner_response(outcome: AssessmentOutcome) -> dict[str, Any]:
    """
    Build the partner-facing response body.

    Score fields are ``None`` for entities declined before scoring
    (blacklisted); ``fraud_check`` is ``None`` when fraud was not checked.
    """
    scoring = outcome.scoring
    fraud = outcome.fraud

    response: dict[str, Any] = {
        "assessment_id": outcome.assessment_id,
        "entity_id": outcome.entity_id,
        "score": scoring.score if scoring else None,
        "risk_category": format_risk_level(scoring.risk_level) if scoring else None,
        "probability_of_default": round(scoring.probability_of_default, 2) if scoring else None,
        "confidence": round(scoring.confidence, 2) if scoring else None,
        "decision": outcome.decision.decision.value,
        "approved_amount": outcome.decision.approved_amount,
        "max_amount": scoring.loan_amount_range.max if scoring else None,
        "interest_rate": scoring.suggested_interest_rate.min if scoring else None,
        "interest_rate_range": (
            {
                "min": scoring.suggested_interest_rate.min,
                "max": scoring.suggested_interest_rate.max,
            }
            if scoring
            else None
        ),
        "factors": [
            {
                "category": f.category,
                "impact": f.impact.value,
                "weight": f.weight,
                "score": f.score,
                "description": f.description,
                "data_source": f.data_source.value,
            }
            for f in (scoring.factors if scoring else [])
        ],
        "recommendations": list(scoring.recommendations) if scoring else [],
        "fraud_check": (
            {
                "risk_score": round(fraud.overall_risk_score, 2),
                "risk_level": fraud.risk_level.value,
                "flags": fraud.flags,
                "recommendation": fraud.recommended_action.value,
            }
            if fraud
            else None
        ),
        "data_unavailable": list(outcome.external.unavailable) if outcome.external else [],
        "blacklisted": outcome.blacklisted,
        "processing_time_ms": outcome.processing_time_ms,
        "created_at": outcome.created_at.isoformat(),
        "expires_at": outcome.expires_at.isoformat(),
    }
    return response
