"""
Credit Scoring Engine
=====================

Real-time credit scoring for individuals, companies and financial
institutions.

Flow per call:
1. Cache lookup on (entity id, entity updated_at, bureau freshness,
   alternative data count); a hit returns the stored result with a
   CACHE_HIT audit entry
2. Per-entity-type weighted factors
3. ``base + sum(score * weight * scale)`` clamped to [350, 850]
4. Risk band, default probability, recommendations, loan range,
   interest band and confidence
5. Cache store and SCORE_CALCULATED audit entry

The processing budget is advisory: exceeding it logs a warning.

Version: 0.1.0
"""

import copy
import time
from collections import deque
from collections.abc import Callable, Sequence
from datetime import UTC, date, datetime
from typing import Any

from services.credit_scoring.cache import CacheKey, ScoreCache
from services.credit_scoring.factors import (
    company_factors,
    individual_factors,
    institution_factors,
)
from services.credit_scoring.models import AssessmentFactor, ScoringResult
from services.credit_scoring.rules import (
    business_loan_range,
    calculate_confidence,
    determine_risk_level,
    generate_recommendations,
    individual_loan_range,
    institutional_loan_range,
    interest_rate_range,
    probability_of_default,
    weighted_score,
)
from shared.config import ScoringSettings, get_settings
from shared.logging import get_logger
from shared.models import (
    AlternativeDataPoint,
    AuditEntry,
    Company,
    CreditBureauData,
    EntityType,
    Individual,
    Institution,
)


logger = get_logger(__name__)

COMPONENT = "ScoringEngine"

# (base, scale) per entity type
SCORE_SCALES: dict[EntityType, tuple[float, float]] = {
    EntityType.INDIVIDUAL: (500, 350),
    EntityType.COMPANY: (500, 350),
    EntityType.INSTITUTION: (600, 250),
}


class UnsupportedEntityTypeError(TypeError):
    """Raised when an entity is not one of the supported variants."""

    def __init__(self, entity: Any) -> None:
        self.entity_type = getattr(entity, "entity_type", type(entity).__name__)
        super().__init__(f"Unsupported entity type: {self.entity_type}")


def _today() -> date:
    return datetime.now(UTC).date()


class CreditScoringEngine:
    """
    Credit scoring engine.

    Deterministic for identical inputs and cache state. Each result
    carries its own audit trail; ``audit_log`` keeps a bounded history
    of every entry recorded by this engine, errors included.
    """

    AUDIT_LOG_SIZE = 1000

    def __init__(
        self,
        settings: ScoringSettings | None = None,
        cache: ScoreCache | None = None,
        today: Callable[[], date] = _today,
    ) -> None:
        """
        Initialize the scoring engine.

        Args:
            settings: Scoring settings (defaults to application settings)
            cache: Result cache (defaults to a TTL cache from settings)
            today: Clock used for years-in-business calculations
        """
        self.settings = settings or get_settings().scoring
        self.cache = cache or ScoreCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self._today = today
        self._audit_log: deque[AuditEntry] = deque(maxlen=self.AUDIT_LOG_SIZE)

    @property
    def audit_log(self) -> list[AuditEntry]:
        return list(self._audit_log)

    def calculate_score(
        self,
        entity: Individual | Company | Institution,
        bureau_data: CreditBureauData | None = None,
        alternative_data: Sequence[AlternativeDataPoint] | None = None,
    ) -> ScoringResult:
        """
        Calculate a credit score for an entity.

        Args:
            entity: Individual, Company or Institution
            bureau_data: Credit bureau report, if available
            alternative_data: Alternative data points, if available

        Returns:
            ScoringResult with score, band, factors and pricing

        Raises:
            UnsupportedEntityTypeError: entity is not a supported variant
        """
        start = time.perf_counter()
        entity_id = getattr(entity, "id", "unknown")

        try:
            if not isinstance(entity, (Individual, Company, Institution)):
                raise UnsupportedEntityTypeError(entity)

            key = CacheKey.build(entity.id, entity.updated_at, bureau_data, alternative_data)
            cached = self.cache.get(key)
            if cached is not None:
                return self._from_cache(cached, entity.id, start)

            result = self._score(entity, bureau_data, alternative_data)
        except Exception as e:
            self._record(
                AuditEntry(
                    entity_id=entity_id,
                    action="SCORING_ERROR",
                    component=COMPONENT,
                    data={"error": str(e)},
                )
            )
            logger.error("scoring_failed", entity_id=entity_id, error=str(e))
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        result.processing_time_ms = elapsed_ms

        if elapsed_ms > self.settings.processing_budget_ms:
            logger.warning(
                "scoring_budget_exceeded",
                entity_id=entity.id,
                processing_time_ms=round(elapsed_ms, 2),
                budget_ms=self.settings.processing_budget_ms,
            )

        entry = AuditEntry(
            entity_id=entity.id,
            action="SCORE_CALCULATED",
            component=COMPONENT,
            data={"score": result.score, "processing_time_ms": elapsed_ms},
        )
        result.audit_trail.append(entry)
        self._record(entry)

        self.cache.set(key, copy.deepcopy(result))

        logger.info(
            "score_calculated",
            entity_id=entity.id,
            entity_type=result.entity_type,
            score=result.score,
            risk_level=result.risk_level.value,
            processing_time_ms=round(elapsed_ms, 2),
        )

        return result

    # =========================================================================
    # Internals
    # =========================================================================

    def _from_cache(self, cached: ScoringResult, entity_id: str, start: float) -> ScoringResult:
        result = copy.deepcopy(cached)
        entry = AuditEntry(entity_id=entity_id, action="CACHE_HIT", component=COMPONENT)
        result.audit_trail.append(entry)
        result.processing_time_ms = (time.perf_counter() - start) * 1000
        self._record(entry)

        logger.debug("score_cache_hit", entity_id=entity_id, score=result.score)
        return result

    def _score(
        self,
        entity: Individual | Company | Institution,
        bureau_data: CreditBureauData | None,
        alternative_data: Sequence[AlternativeDataPoint] | None,
    ) -> ScoringResult:
        if isinstance(entity, Individual):
            factors = individual_factors(entity, bureau_data, alternative_data)
            entity_type = EntityType.INDIVIDUAL
        elif isinstance(entity, Company):
            factors = company_factors(entity, self._today())
            entity_type = EntityType.COMPANY
        elif isinstance(entity, Institution):
            factors = institution_factors(entity)
            entity_type = EntityType.INSTITUTION
        else:
            raise UnsupportedEntityTypeError(entity)

        base, scale = SCORE_SCALES[entity_type]
        score = weighted_score(base, factors, scale)
        risk_level = determine_risk_level(score)

        if isinstance(entity, Individual):
            loan_range = individual_loan_range(score, entity.monthly_income or 0)
        elif isinstance(entity, Company):
            loan_range = business_loan_range(score, entity.annual_revenue or 0)
        else:
            loan_range = institutional_loan_range(score)

        return ScoringResult(
            entity_id=entity.id,
            entity_type=entity_type.value,
            score=score,
            risk_level=risk_level,
            probability_of_default=probability_of_default(score, factors),
            factors=factors,
            recommendations=generate_recommendations(factors, entity_type, risk_level),
            loan_amount_range=loan_range,
            suggested_interest_rate=interest_rate_range(risk_level),
            confidence=self._confidence(factors, bureau_data, alternative_data),
        )

    @staticmethod
    def _confidence(
        factors: list[AssessmentFactor],
        bureau_data: CreditBureauData | None,
        alternative_data: Sequence[AlternativeDataPoint] | None,
    ) -> float:
        return calculate_confidence(
            factors,
            has_bureau_data=bureau_data is not None,
            has_alternative_data=bool(alternative_data),
        )

    def _record(self, entry: AuditEntry) -> None:
        self._audit_log.append(entry)
