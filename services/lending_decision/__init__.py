"""
Lending Decision Service
========================

Decision table, assessment pipeline and partner response.

Usage:
    from services.lending_decision import AssessmentRequest, AssessmentService

    service = AssessmentService()
    outcome = await service.assess(AssessmentRequest(entity=entity, requested_amount=50_000))
    body = build_partner_response(outcome)
"""

from services.lending_decision.assessment import (
    AssessmentOutcome,
    AssessmentRequest,
    AssessmentService,
)
from services.lending_decision.decision import DecisionResult, LoanDecision, decide
from services.lending_decision.response import (
    build_partner_response,
    format_interest_rate,
    format_probability,
    format_risk_level,
    format_risk_score,
)

__all__ = [
    "decide",
    "DecisionResult",
    "LoanDecision",
    "AssessmentService",
    "AssessmentRequest",
    "AssessmentOutcome",
    "build_partner_response",
    "format_risk_level",
    "format_probability",
    "format_interest_rate",
    "format_risk_score",
]
