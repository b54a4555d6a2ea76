"""
Fraud Detection Models
======================

Indicators emitted by the fraud checks and the aggregate assessment.

Version: 0.1.0
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4


class IndicatorType(str, Enum):
    """Families of fraud signals."""

    VELOCITY = "velocity"
    DEVICE = "device"
    GEOLOCATION = "geolocation"
    BEHAVIORAL = "behavioral"
    IDENTITY = "identity"
    FINANCIAL = "financial"


class Severity(str, Enum):
    """Indicator severity, also used as the fraud risk level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IndicatorStatus(str, Enum):
    """Review status of an indicator."""

    ACTIVE = "active"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"


class RecommendedAction(str, Enum):
    """Action recommended for an assessed application."""

    APPROVE = "approve"
    REVIEW = "review"
    REJECT = "reject"
    BLOCK = "block"


@dataclass
class FraudIndicator:
    """One discrete, evidenced fraud signal."""

    entity_id: str
    indicator_type: IndicatorType
    severity: Severity
    description: str
    confidence: float
    evidence: dict[str, Any] = field(default_factory=dict)
    detected_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: IndicatorStatus = IndicatorStatus.ACTIVE
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            self.id = f"{self.indicator_type.value}_{uuid4().hex[:12]}"

    def to_dict(self) -> dict[str, Any]:
        """Storage representation."""
        return {
            "id": self.id,
            "entity_id": self.entity_id,
            "indicator_type": self.indicator_type.value,
            "severity": self.severity.value,
            "description": self.description,
            "confidence": self.confidence,
            "evidence": dict(self.evidence),
            "detected_at": self.detected_at.isoformat(),
            "status": self.status.value,
        }


@dataclass
class FraudAssessment:
    """Aggregate of all indicators for one evaluation."""

    entity_id: str
    overall_risk_score: float  # 0 to 100
    risk_level: Severity
    confidence: float  # 0.0 to 1.0
    indicators: list[FraudIndicator]
    recommended_action: RecommendedAction
    processing_time_ms: int
    model_version: str

    @property
    def flags(self) -> list[str]:
        """Distinct indicator types in emission order."""
        seen: list[str] = []
        for indicator in self.indicators:
            if indicator.indicator_type.value not in seen:
                seen.append(indicator.indicator_type.value)
        return seen
