"""Tests for the fraud detection engine."""

from collections.abc import Sequence
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from services.fraud_detection import (
    AlertPublisher,
    AnomalyModel,
    FraudAssessment,
    FraudDetectionEngine,
    HighRiskResponder,
    IndicatorType,
    RecommendedAction,
    Severity,
)
from shared.config import FraudSettings
from shared.models import BehavioralPattern, EmploymentStatus, Individual
from shared.storage import CasePriority, InMemoryFraudStore


class RecordingAlerts(AlertPublisher):
    """Collects published alerts."""

    def __init__(self) -> None:
        self.published: list[FraudAssessment] = []

    async def publish(self, assessment: FraudAssessment) -> None:
        self.published.append(assessment)


class FixedAnomalyModel(AnomalyModel):
    """Returns a fixed anomaly score."""

    def __init__(self, score: float) -> None:
        self.score = score

    def predict(self, features: Sequence[float]) -> float:
        return self.score


@pytest.fixture
def alerts() -> RecordingAlerts:
    return RecordingAlerts()


@pytest.fixture
def engine(
    store: InMemoryFraudStore,
    fraud_settings: FraudSettings,
    alerts: RecordingAlerts,
    now: datetime,
) -> FraudDetectionEngine:
    """Create fraud engine over an in-memory store with a fixed clock."""
    return FraudDetectionEngine(
        store=store,
        settings=fraud_settings,
        alerts=alerts,
        clock=lambda: now,
    )


class TestDetectFraud:
    """Tests for FraudDetectionEngine.detect_fraud."""

    @pytest.mark.asyncio
    async def test_clean_application(
        self,
        engine: FraudDetectionEngine,
        store: InMemoryFraudStore,
        individual: Individual,
    ) -> None:
        """Test no indicators yields a low-risk approval."""
        assessment = await engine.detect_fraud(individual, ip_address="10.0.0.1")

        assert assessment.indicators == []
        assert assessment.overall_risk_score == 0
        assert assessment.risk_level == Severity.LOW
        assert assessment.confidence == 0.5
        assert assessment.recommended_action == RecommendedAction.APPROVE
        assert assessment.model_version == "1.0.0"
        assert assessment.flags == []

        # Summary logged, no indicator rows written
        assert len(store.assessment_logs) == 1
        assert store.indicators == []

    @pytest.mark.asyncio
    async def test_duplicate_national_id_blocks(
        self,
        engine: FraudDetectionEngine,
        store: InMemoryFraudStore,
        alerts: RecordingAlerts,
        individual: Individual,
        now: datetime,
    ) -> None:
        """Test a reused national ID is blocked, blacklisted, alerted and cased."""
        await engine.detect_fraud(individual)
        impostor = individual.model_copy(update={"id": "ind-999"})

        assessment = await engine.detect_fraud(impostor)
        await engine.responder.drain()

        assert assessment.risk_level == Severity.CRITICAL
        assert assessment.overall_risk_score == pytest.approx(95)
        assert assessment.recommended_action == RecommendedAction.BLOCK
        assert assessment.flags == [IndicatorType.IDENTITY.value]

        assert await store.is_blacklisted("ind-999", at=now)
        assert not await store.is_blacklisted("ind-999", at=now + timedelta(hours=25))
        assert store.blacklist[0].reason == "auto_block_critical_risk"

        cases = await store.list_cases("ind-999")
        assert len(cases) == 1
        assert cases[0].priority == CasePriority.HIGH
        assert cases[0].id.startswith("case:")

        assert [a.entity_id for a in alerts.published] == ["ind-999"]
        assert len(store.indicators) == 1

    @pytest.mark.asyncio
    async def test_duplicate_national_id_with_second_signal(
        self,
        engine: FraudDetectionEngine,
        store: InMemoryFraudStore,
        alerts: RecordingAlerts,
        individual: Individual,
        now: datetime,
    ) -> None:
        """Test a reused national ID plus income while unemployed is rejected."""
        await engine.detect_fraud(individual)
        impostor = individual.model_copy(
            update={"id": "ind-999", "employment_status": EmploymentStatus.UNEMPLOYED}
        )

        assessment = await engine.detect_fraud(impostor)
        await engine.responder.drain()

        severities = sorted(i.severity for i in assessment.indicators)
        assert severities == [Severity.CRITICAL, Severity.HIGH]
        # (40 * 0.95 + 25 * 0.9) / (2 * 40): the second indicator dilutes the
        # lone duplicate-ID score of 95 out of the critical band
        assert assessment.overall_risk_score == pytest.approx(75.625)
        assert assessment.risk_level == Severity.HIGH
        assert assessment.confidence == pytest.approx(1.0)
        assert assessment.recommended_action == RecommendedAction.REJECT
        assert sorted(assessment.flags) == [
            IndicatorType.FINANCIAL.value,
            IndicatorType.IDENTITY.value,
        ]

        # High risk: alerted and cased at medium priority, not blacklisted
        assert not await store.is_blacklisted("ind-999", at=now)
        cases = await store.list_cases("ind-999")
        assert [c.priority for c in cases] == [CasePriority.MEDIUM]
        assert [a.entity_id for a in alerts.published] == ["ind-999"]

    @pytest.mark.asyncio
    async def test_medium_risk_has_no_side_effects(
        self,
        engine: FraudDetectionEngine,
        store: InMemoryFraudStore,
        alerts: RecordingAlerts,
        individual: Individual,
    ) -> None:
        """Test responses only fire for high and critical assessments."""
        behavioral = BehavioralPattern(typing_speed=60, form_completion_time=300, suspicious_timing=True)

        assessment = await engine.detect_fraud(individual, behavioral=behavioral)
        await engine.responder.drain()

        # One medium indicator at 0.8 confidence: 15 * 0.8 / 40
        assert assessment.overall_risk_score == pytest.approx(30)
        assert assessment.risk_level == Severity.LOW
        assert alerts.published == []
        assert await store.list_cases() == []

    @pytest.mark.asyncio
    async def test_failed_check_is_skipped(
        self,
        engine: FraudDetectionEngine,
        individual: Individual,
    ) -> None:
        """Test one failing check does not fail the assessment."""
        behavioral = BehavioralPattern(form_completion_time=5)

        with patch.object(
            engine.checks,
            "check_velocity",
            AsyncMock(side_effect=RuntimeError("store unavailable")),
        ):
            assessment = await engine.detect_fraud(individual, behavioral=behavioral)

        assert [i.indicator_type for i in assessment.indicators] == [IndicatorType.BEHAVIORAL]
        assert assessment.recommended_action == RecommendedAction.APPROVE

    @pytest.mark.asyncio
    async def test_internal_failure_returns_safe_default(
        self,
        engine: FraudDetectionEngine,
        individual: Individual,
    ) -> None:
        """Test an aggregation failure yields the review default."""
        with patch(
            "services.fraud_detection.engine.calculate_risk_score",
            side_effect=ValueError("boom"),
        ):
            assessment = await engine.detect_fraud(individual)

        assert assessment.entity_id == individual.id
        assert assessment.overall_risk_score == 50
        assert assessment.risk_level == Severity.MEDIUM
        assert assessment.confidence == 0.5
        assert assessment.indicators == []
        assert assessment.recommended_action == RecommendedAction.REVIEW

    @pytest.mark.asyncio
    async def test_storage_failure_still_returns_assessment(
        self,
        engine: FraudDetectionEngine,
        store: InMemoryFraudStore,
        individual: Individual,
    ) -> None:
        """Test a failed assessment log write is not surfaced."""
        with patch.object(
            store,
            "log_fraud_assessment",
            AsyncMock(side_effect=ConnectionError("db down")),
        ):
            assessment = await engine.detect_fraud(individual)

        assert assessment.recommended_action == RecommendedAction.APPROVE


class TestHighRiskResponder:
    """Tests for HighRiskResponder."""

    @staticmethod
    def assessment(level: Severity, score: float, confidence: float) -> FraudAssessment:
        return FraudAssessment(
            entity_id="ind-001",
            overall_risk_score=score,
            risk_level=level,
            confidence=confidence,
            indicators=[],
            recommended_action=RecommendedAction.REJECT,
            processing_time_ms=3,
            model_version="1.0.0",
        )

    @pytest.fixture
    def responder(
        self,
        store: InMemoryFraudStore,
        fraud_settings: FraudSettings,
        alerts: RecordingAlerts,
        now: datetime,
    ) -> HighRiskResponder:
        return HighRiskResponder(store, fraud_settings, alerts, clock=lambda: now)

    @pytest.mark.asyncio
    async def test_below_high_dispatches_nothing(self, responder: HighRiskResponder) -> None:
        """Test medium risk schedules no actions."""
        assert responder.dispatch(self.assessment(Severity.MEDIUM, 60, 0.95)) == []

    @pytest.mark.asyncio
    async def test_high_risk_alerts_and_opens_case(
        self,
        responder: HighRiskResponder,
        store: InMemoryFraudStore,
        alerts: RecordingAlerts,
        now: datetime,
    ) -> None:
        """Test high risk alerts and opens a medium-priority case without blacklisting."""
        tasks = responder.dispatch(self.assessment(Severity.HIGH, 80, 0.95))
        await responder.drain()

        assert len(tasks) == 2
        assert len(alerts.published) == 1
        cases = await store.list_cases()
        assert [c.priority for c in cases] == [CasePriority.MEDIUM]
        assert not await store.is_blacklisted("ind-001", at=now)

    @pytest.mark.asyncio
    async def test_critical_needs_confidence_to_blacklist(
        self,
        responder: HighRiskResponder,
        store: InMemoryFraudStore,
        now: datetime,
    ) -> None:
        """Test critical risk below 0.9 confidence is not blacklisted."""
        responder.dispatch(self.assessment(Severity.CRITICAL, 92, 0.85))
        await responder.drain()

        assert not await store.is_blacklisted("ind-001", at=now)
        cases = await store.list_cases()
        assert [c.priority for c in cases] == [CasePriority.HIGH]

    @pytest.mark.asyncio
    async def test_failing_alert_does_not_stop_other_actions(
        self,
        store: InMemoryFraudStore,
        fraud_settings: FraudSettings,
        now: datetime,
    ) -> None:
        """Test each action runs independently of the others."""
        failing = AsyncMock(spec=AlertPublisher)
        failing.publish.side_effect = RuntimeError("pager offline")
        responder = HighRiskResponder(store, fraud_settings, failing, clock=lambda: now)

        responder.dispatch(self.assessment(Severity.CRITICAL, 95, 0.95))
        await responder.drain()

        failing.publish.assert_awaited_once()
        assert await store.is_blacklisted("ind-001", at=now)
        assert len(await store.list_cases()) == 1


class TestAnomalyIndicator:
    """Tests for the anomaly model stage."""

    @pytest.mark.asyncio
    async def test_high_anomaly_score_adds_indicator(
        self,
        store: InMemoryFraudStore,
        fraud_settings: FraudSettings,
        individual: Individual,
    ) -> None:
        """Test scores above 0.9 raise a critical behavioral indicator."""
        engine = FraudDetectionEngine(
            store=store,
            settings=fraud_settings,
            anomaly_model=FixedAnomalyModel(0.95),
        )

        assessment = await engine.detect_fraud(individual)
        await engine.responder.drain()

        assert len(assessment.indicators) == 1
        indicator = assessment.indicators[0]
        assert indicator.indicator_type == IndicatorType.BEHAVIORAL
        assert indicator.severity == Severity.CRITICAL
        assert indicator.confidence == 0.95
        assert indicator.evidence == {"anomaly_score": 0.95}

    @pytest.mark.asyncio
    async def test_model_failure_is_ignored(
        self,
        store: InMemoryFraudStore,
        fraud_settings: FraudSettings,
        individual: Individual,
    ) -> None:
        """Test a failing model adds nothing."""
        model = FixedAnomalyModel(0.0)
        engine = FraudDetectionEngine(store=store, settings=fraud_settings, anomaly_model=model)

        with patch.object(model, "predict", side_effect=ArithmeticError("nan")):
            assessment = await engine.detect_fraud(individual)

        assert assessment.indicators == []
        assert assessment.recommended_action == RecommendedAction.APPROVE
