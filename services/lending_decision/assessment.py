"""
Assessment Pipeline
===================

End-to-end credit assessment for one application:

1. Blacklist check (blacklisted entities are declined unscored)
2. External data aggregation (optional)
3. Credit scoring
4. Fraud detection (optional)
5. Lending decision against the scored loan range
6. Velocity bookkeeping (assessment and request log rows)

Version: 0.1.0
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from services.credit_scoring import CreditScoringEngine, ScoringResult, UnsupportedEntityTypeError
from services.data_providers import DataAggregationService, ExternalData
from services.fraud_detection import FraudAssessment, FraudDetectionEngine
from services.lending_decision.decision import DecisionResult, LoanDecision, decide
from shared.logging import bind_context, clear_context, get_logger
from shared.models import (
    AlternativeDataPoint,
    BehavioralPattern,
    Company,
    CreditBureauData,
    DeviceFingerprint,
    GeolocationData,
    Individual,
    Institution,
)
from shared.storage import FraudStore, RequestLogRecord, get_fraud_store


logger = get_logger(__name__)

ASSESSMENT_VALIDITY = timedelta(hours=24)


@dataclass
class AssessmentRequest:
    """One loan application as received from a partner."""

    entity: Individual | Company | Institution
    requested_amount: float | None = None

    # Caller-supplied external data takes precedence over aggregated data
    bureau_data: CreditBureauData | None = None
    alternative_data: list[AlternativeDataPoint] | None = None
    include_external_data: bool = True

    include_fraud_check: bool = True
    device_fingerprint: DeviceFingerprint | None = None
    geolocation: GeolocationData | None = None
    behavioral: BehavioralPattern | None = None
    ip_address: str | None = None
    endpoint: str = "/api/v1/assessments"


@dataclass
class AssessmentOutcome:
    """Everything produced for one application."""

    entity_id: str
    decision: DecisionResult
    scoring: ScoringResult | None = None
    fraud: FraudAssessment | None = None
    external: ExternalData | None = None
    blacklisted: bool = False
    assessment_id: str = field(default_factory=lambda: f"assess_{uuid4().hex[:16]}")
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    processing_time_ms: int = 0

    @property
    def expires_at(self) -> datetime:
        return self.created_at + ASSESSMENT_VALIDITY


class AssessmentService:
    """Wires data providers, scoring, fraud detection and the decision table."""

    def __init__(
        self,
        scoring_engine: CreditScoringEngine | None = None,
        fraud_engine: FraudDetectionEngine | None = None,
        data_service: DataAggregationService | None = None,
        store: FraudStore | None = None,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            scoring_engine: Credit scoring engine
            fraud_engine: Fraud detection engine (shares ``store``)
            data_service: External data aggregation; None skips aggregation
            store: Fraud store for blacklist and velocity bookkeeping
        """
        self.store = store or get_fraud_store()
        self.scoring_engine = scoring_engine or CreditScoringEngine()
        self.fraud_engine = fraud_engine or FraudDetectionEngine(store=self.store)
        self.data_service = data_service

    async def assess(self, request: AssessmentRequest) -> AssessmentOutcome:
        """
        Run the full assessment pipeline.

        Raises:
            UnsupportedEntityTypeError: entity is not a supported variant
        """
        started = datetime.now(UTC)
        entity = request.entity
        if not isinstance(entity, (Individual, Company, Institution)):
            raise UnsupportedEntityTypeError(entity)

        bind_context(entity_id=entity.id, entity_type=entity.entity_type)

        try:
            if await self.store.is_blacklisted(entity.id, at=started):
                logger.warning("blacklisted_entity_declined")
                outcome = AssessmentOutcome(
                    entity_id=entity.id,
                    decision=DecisionResult(LoanDecision.DECLINED, 0),
                    blacklisted=True,
                    created_at=started,
                )
            else:
                outcome = await self._assess(request, started)

            await self._record(request)
        finally:
            clear_context()

        outcome.processing_time_ms = round((datetime.now(UTC) - started).total_seconds() * 1000)
        return outcome

    async def _assess(self, request: AssessmentRequest, started: datetime) -> AssessmentOutcome:
        entity = request.entity

        external: ExternalData | None = None
        if self.data_service is not None and request.include_external_data:
            external = await self.data_service.aggregate(entity)

        bureau_data = request.bureau_data
        alternative_data = request.alternative_data
        if external is not None:
            bureau_data = bureau_data or external.credit_bureau
            alternative_data = alternative_data if alternative_data is not None else external.alternative

        scoring = self.scoring_engine.calculate_score(entity, bureau_data, alternative_data)

        fraud: FraudAssessment | None = None
        if request.include_fraud_check:
            fraud = await self.fraud_engine.detect_fraud(
                entity,
                device_fingerprint=request.device_fingerprint,
                geolocation=request.geolocation,
                behavioral=request.behavioral,
                ip_address=request.ip_address,
            )

        decision = decide(
            scoring.score,
            fraud.recommended_action if fraud else None,
            request.requested_amount,
            scoring.loan_amount_range.max,
        )

        logger.info(
            "assessment_completed",
            score=scoring.score,
            decision=decision.decision.value,
            approved_amount=decision.approved_amount,
            fraud_action=fraud.recommended_action.value if fraud else None,
        )

        return AssessmentOutcome(
            entity_id=entity.id,
            decision=decision,
            scoring=scoring,
            fraud=fraud,
            external=external,
            created_at=started,
        )

    async def _record(self, request: AssessmentRequest) -> None:
        """Write the velocity rows the fraud checks read on later calls."""
        try:
            await self.store.record_assessment(request.entity.id)
            if request.ip_address:
                await self.store.record_request(
                    RequestLogRecord(
                        ip_address=request.ip_address,
                        entity_id=request.entity.id,
                        endpoint=request.endpoint,
                    )
                )
        except Exception as e:
            logger.error("assessment_record_failed", error=str(e))
