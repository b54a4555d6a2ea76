"""
High-Risk Responder
===================

Side effects for high and critical fraud assessments: auto-blacklist,
alert and investigation case. Each action runs as its own task after
the assessment is built; a failing action is logged and never reaches
the caller.

Version: 0.1.0
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from datetime import UTC, datetime, timedelta
from typing import Any

from services.fraud_detection.models import FraudAssessment, Severity
from shared.config import FraudSettings
from shared.logging import get_logger
from shared.storage import BlacklistEntry, CasePriority, FraudCase, FraudStore


logger = get_logger(__name__)

AUTO_BLOCK_REASON = "auto_block_critical_risk"
AUTO_BLOCK_CONFIDENCE = 0.9


class AlertPublisher(ABC):
    """Destination for fraud alerts (pager, queue, e-mail)."""

    @abstractmethod
    async def publish(self, assessment: FraudAssessment) -> None:
        ...


class LoggingAlertPublisher(AlertPublisher):
    """Writes alerts to the structured log."""

    async def publish(self, assessment: FraudAssessment) -> None:
        logger.warning(
            "fraud_alert",
            entity_id=assessment.entity_id,
            risk_level=assessment.risk_level.value,
            risk_score=round(assessment.overall_risk_score, 2),
            recommended_action=assessment.recommended_action.value,
            flags=assessment.flags,
        )


class HighRiskResponder:
    """Dispatches fire-and-forget responses to high-risk assessments."""

    def __init__(
        self,
        store: FraudStore,
        settings: FraudSettings,
        alerts: AlertPublisher | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self.store = store
        self.settings = settings
        self.alerts = alerts or LoggingAlertPublisher()
        self._clock = clock
        self._pending: set[asyncio.Task[None]] = set()

    def dispatch(self, assessment: FraudAssessment) -> list[asyncio.Task[None]]:
        """
        Schedule responses for a high or critical assessment.

        Returns:
            The scheduled tasks (empty below high risk)
        """
        if assessment.risk_level not in (Severity.HIGH, Severity.CRITICAL):
            return []

        actions: list[tuple[str, Coroutine[Any, Any, None]]] = []
        if (
            assessment.risk_level == Severity.CRITICAL
            and assessment.confidence >= AUTO_BLOCK_CONFIDENCE
        ):
            actions.append(("blacklist", self._blacklist(assessment)))
        actions.append(("alert", self.alerts.publish(assessment)))
        actions.append(("case", self._open_case(assessment)))

        tasks = []
        for name, coro in actions:
            task = asyncio.create_task(self._guard(name, assessment.entity_id, coro))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def drain(self) -> None:
        """Wait for all scheduled responses to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _guard(self, action: str, entity_id: str, coro: Coroutine[Any, Any, None]) -> None:
        try:
            await coro
        except Exception as e:
            logger.error(
                "high_risk_action_failed",
                action=action,
                entity_id=entity_id,
                error=str(e),
            )

    async def _blacklist(self, assessment: FraudAssessment) -> None:
        now = self._clock()
        await self.store.add_to_blacklist(
            BlacklistEntry(
                entity_id=assessment.entity_id,
                reason=AUTO_BLOCK_REASON,
                expires_at=now + timedelta(hours=self.settings.blacklist_duration_hours),
                created_at=now,
            )
        )

    async def _open_case(self, assessment: FraudAssessment) -> None:
        case = await self.store.create_case(
            FraudCase(
                entity_id=assessment.entity_id,
                risk_score=assessment.overall_risk_score,
                risk_level=assessment.risk_level.value,
                indicator_count=len(assessment.indicators),
                priority=(
                    CasePriority.HIGH
                    if assessment.risk_level == Severity.CRITICAL
                    else CasePriority.MEDIUM
                ),
                created_at=self._clock(),
            )
        )
        logger.info("fraud_case_opened", case_id=case.id, entity_id=case.entity_id, priority=case.priority.value)
