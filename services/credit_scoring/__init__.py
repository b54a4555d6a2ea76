"""
Credit Scoring Service
======================

Weighted multi-factor credit scoring for individuals, companies and
financial institutions.

Usage:
    from services.credit_scoring import CreditScoringEngine

    engine = CreditScoringEngine()
    result = engine.calculate_score(entity, bureau_data, alternative_data)
    print(result.score, result.risk_level)
"""

from services.credit_scoring.cache import CacheKey, ScoreCache
from services.credit_scoring.engine import CreditScoringEngine, UnsupportedEntityTypeError
from services.credit_scoring.models import (
    RISK_BANDS,
    AmountRange,
    AssessmentFactor,
    DataSource,
    FactorImpact,
    RiskBand,
    RiskLevel,
    ScoringResult,
)
from services.credit_scoring.rules import band_for, determine_risk_level

__all__ = [
    "CreditScoringEngine",
    "UnsupportedEntityTypeError",
    "ScoreCache",
    "CacheKey",
    "ScoringResult",
    "AssessmentFactor",
    "AmountRange",
    "DataSource",
    "FactorImpact",
    "RiskBand",
    "RiskLevel",
    "RISK_BANDS",
    "band_for",
    "determine_risk_level",
]
