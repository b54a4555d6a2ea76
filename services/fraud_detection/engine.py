"""
Fraud Detection Engine
======================

Multi-signal fraud assessment for credit applications.

Pipeline:
1. Seven indicator checks run concurrently (velocity, device,
   geolocation, behavioral, identity, financial, network); a failed
   check contributes no indicators
2. Anomaly model over indicator counts and entity numerics
3. Aggregation into risk score, confidence, level and action
4. Indicator storage and assessment log
5. High-risk responses dispatched as independent tasks

``detect_fraud`` never raises under normal operation: an internal
failure returns the safe default review assessment.

Version: 0.1.0
"""

import asyncio
import time
from collections.abc import Callable
from datetime import UTC, datetime

from services.fraud_detection.aggregation import (
    calculate_confidence,
    calculate_risk_score,
    determine_action,
    determine_risk_level,
)
from services.fraud_detection.anomaly import (
    ANOMALY_THRESHOLD,
    AnomalyModel,
    IsolationForestStub,
    extract_features,
)
from services.fraud_detection.checks import IndicatorChecks
from services.fraud_detection.models import (
    FraudAssessment,
    FraudIndicator,
    IndicatorType,
    RecommendedAction,
    Severity,
)
from services.fraud_detection.network import NetworkGraph
from services.fraud_detection.responder import AlertPublisher, HighRiskResponder
from shared.config import FraudSettings, get_settings
from shared.logging import get_logger
from shared.models import (
    BehavioralPattern,
    Company,
    DeviceFingerprint,
    GeolocationData,
    Individual,
    Institution,
)
from shared.storage import FraudAssessmentLog, FraudStore, get_fraud_store


logger = get_logger(__name__)

CHECK_NAMES = (
    "velocity",
    "device",
    "geolocation",
    "behavioral",
    "identity",
    "financial",
    "network",
)


class FraudDetectionEngine:
    """
    Fraud detection engine.

    Example:
        >>> engine = FraudDetectionEngine()
        >>> assessment = await engine.detect_fraud(entity, fingerprint, geo, behavior, ip)
        >>> if assessment.recommended_action == RecommendedAction.BLOCK:
        ...     decline(entity)
    """

    def __init__(
        self,
        store: FraudStore | None = None,
        settings: FraudSettings | None = None,
        anomaly_model: AnomalyModel | None = None,
        alerts: AlertPublisher | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        """
        Initialize the fraud engine.

        Args:
            store: Fraud store (defaults to the configured global store)
            settings: Fraud settings (defaults to application settings)
            anomaly_model: Anomaly model (defaults to the placeholder forest)
            alerts: Alert publisher for high-risk responses
            clock: Time source for windows and timestamps
        """
        self.store = store or get_fraud_store()
        self.settings = settings or get_settings().fraud
        self.model_version = self.settings.model_version
        self.anomaly_model = anomaly_model or IsolationForestStub()
        self._clock = clock

        self.checks = IndicatorChecks(self.store, self.settings, clock)
        self.network = NetworkGraph(self.store)
        self.responder = HighRiskResponder(self.store, self.settings, alerts, clock)

    async def detect_fraud(
        self,
        entity: Individual | Company | Institution,
        device_fingerprint: DeviceFingerprint | None = None,
        geolocation: GeolocationData | None = None,
        behavioral: BehavioralPattern | None = None,
        ip_address: str | None = None,
    ) -> FraudAssessment:
        """
        Assess an application for fraud.

        Args:
            entity: Applicant entity
            device_fingerprint: Browser/device fingerprint
            geolocation: Resolved IP geolocation
            behavioral: Form interaction telemetry
            ip_address: Source IP of the request

        Returns:
            FraudAssessment (the safe default on internal failure)
        """
        start = time.perf_counter()

        try:
            indicators = await self._run_checks(
                entity, device_fingerprint, geolocation, behavioral, ip_address
            )

            anomaly = self._anomaly_indicator(entity, indicators)
            if anomaly is not None:
                indicators.append(anomaly)

            risk_score = calculate_risk_score(indicators)
            confidence = calculate_confidence(indicators)

            assessment = FraudAssessment(
                entity_id=entity.id,
                overall_risk_score=risk_score,
                risk_level=determine_risk_level(risk_score),
                confidence=confidence,
                indicators=indicators,
                recommended_action=determine_action(risk_score, confidence),
                processing_time_ms=round((time.perf_counter() - start) * 1000),
                model_version=self.model_version,
            )

            await self._persist(assessment)
            self.responder.dispatch(assessment)

        except Exception as e:
            logger.error(
                "fraud_assessment_failed",
                entity_id=getattr(entity, "id", "unknown"),
                error=str(e),
                exc_info=True,
            )
            return self._safe_default(entity, start)

        logger.info(
            "fraud_assessed",
            entity_id=entity.id,
            risk_score=round(assessment.overall_risk_score, 2),
            risk_level=assessment.risk_level.value,
            recommended_action=assessment.recommended_action.value,
            indicator_count=len(indicators),
        )

        return assessment

    # =========================================================================
    # Internals
    # =========================================================================

    async def _run_checks(
        self,
        entity: Individual | Company | Institution,
        device_fingerprint: DeviceFingerprint | None,
        geolocation: GeolocationData | None,
        behavioral: BehavioralPattern | None,
        ip_address: str | None,
    ) -> list[FraudIndicator]:
        tasks = [
            self.checks.check_velocity(entity.id, ip_address),
            self.checks.check_device(entity.id, device_fingerprint),
            self.checks.check_geolocation(entity.id, geolocation),
            self.checks.check_behavioral(entity.id, behavioral),
            self.checks.check_identity(entity),
            self.checks.check_financial(entity),
            self.network.check_network(entity.id, ip_address),
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        indicators: list[FraudIndicator] = []
        for name, result in zip(CHECK_NAMES, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "fraud_check_failed",
                    check=name,
                    entity_id=entity.id,
                    error=str(result),
                )
                continue
            indicators.extend(result)

        return indicators

    def _anomaly_indicator(
        self,
        entity: Individual | Company | Institution,
        indicators: list[FraudIndicator],
    ) -> FraudIndicator | None:
        try:
            features = extract_features(entity, indicators, self._clock().date())
            score = self.anomaly_model.predict(features)
        except Exception as e:
            logger.warning("anomaly_detection_failed", entity_id=entity.id, error=str(e))
            return None

        if score <= ANOMALY_THRESHOLD:
            return None

        return FraudIndicator(
            entity_id=entity.id,
            indicator_type=IndicatorType.BEHAVIORAL,
            severity=Severity.CRITICAL if score > 0.9 else Severity.HIGH,
            description="ML anomaly detection flagged unusual patterns",
            confidence=score,
            evidence={"anomaly_score": score},
        )

    async def _persist(self, assessment: FraudAssessment) -> None:
        if assessment.indicators:
            try:
                await self.store.store_indicators([i.to_dict() for i in assessment.indicators])
            except Exception as e:
                logger.error("store_indicators_failed", entity_id=assessment.entity_id, error=str(e))

        try:
            await self.store.log_fraud_assessment(
                FraudAssessmentLog(
                    entity_id=assessment.entity_id,
                    risk_score=assessment.overall_risk_score,
                    risk_level=assessment.risk_level.value,
                    confidence=assessment.confidence,
                    indicator_count=len(assessment.indicators),
                    recommended_action=assessment.recommended_action.value,
                    processing_time_ms=assessment.processing_time_ms,
                    model_version=assessment.model_version,
                    created_at=self._clock(),
                )
            )
        except Exception as e:
            logger.error("log_fraud_assessment_failed", entity_id=assessment.entity_id, error=str(e))

    def _safe_default(self, entity: object, start: float) -> FraudAssessment:
        return FraudAssessment(
            entity_id=getattr(entity, "id", "unknown"),
            overall_risk_score=50,
            risk_level=Severity.MEDIUM,
            confidence=0.5,
            indicators=[],
            recommended_action=RecommendedAction.REVIEW,
            processing_time_ms=round((time.perf_counter() - start) * 1000),
            model_version=self.model_version,
        )
