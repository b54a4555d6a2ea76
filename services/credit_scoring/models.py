"""
Credit Scoring Models
=====================

Result types produced by the scoring engine and the fixed band table
every score-derived output is read from.

Version: 0.1.0
"""

from dataclasses import dataclass, field
from enum import Enum

from shared.models import AuditEntry


SCORE_MIN = 350
SCORE_MAX = 850


class RiskLevel(str, Enum):
    """Credit risk bands."""

    VERY_LOW = "VERY_LOW"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"


class FactorImpact(str, Enum):
    """Direction a factor pushes the score."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class DataSource(str, Enum):
    """Where a factor's inputs came from."""

    CREDIT_BUREAU = "credit_bureau"
    ALTERNATIVE_DATA = "alternative_data"
    SELF_REPORTED = "self_reported"
    GOVERNMENT = "government"


@dataclass(frozen=True)
class RiskBand:
    """One row of the band table."""

    level: RiskLevel
    min_score: int
    max_score: int
    label: str
    interest_min: float
    interest_max: float
    recommendation: str | None = None

    def contains(self, score: int) -> bool:
        return self.min_score <= score <= self.max_score


# Ordered best to worst; bands are contiguous over [SCORE_MIN, SCORE_MAX]
RISK_BANDS: tuple[RiskBand, ...] = (
    RiskBand(RiskLevel.VERY_LOW, 750, 850, "Very Low Risk", 3.5, 5.0),
    RiskBand(RiskLevel.LOW, 650, 749, "Low Risk", 5.0, 7.0),
    RiskBand(RiskLevel.MEDIUM, 550, 649, "Medium Risk", 7.0, 10.0),
    RiskBand(
        RiskLevel.HIGH,
        450,
        549,
        "High Risk",
        10.0,
        15.0,
        recommendation="Consider a smaller or secured facility until the credit profile improves",
    ),
    RiskBand(
        RiskLevel.VERY_HIGH,
        350,
        449,
        "Very High Risk",
        15.0,
        25.0,
        recommendation="Extend credit only against collateral or a guarantor",
    ),
)

BANDS_BY_LEVEL: dict[RiskLevel, RiskBand] = {band.level: band for band in RISK_BANDS}


@dataclass
class AssessmentFactor:
    """One weighted, explainable input to a score."""

    category: str
    weight: float
    score: float  # 0.0 to 1.0
    impact: FactorImpact
    description: str
    data_source: DataSource = DataSource.SELF_REPORTED


@dataclass
class AmountRange:
    """Inclusive numeric range (loan amounts, interest rates)."""

    min: float
    max: float


@dataclass
class ScoringResult:
    """Complete credit score calculation result."""

    entity_id: str
    entity_type: str

    score: int  # 350 to 850
    risk_level: RiskLevel
    probability_of_default: float
    factors: list[AssessmentFactor]
    recommendations: list[str]
    loan_amount_range: AmountRange
    suggested_interest_rate: AmountRange
    confidence: float  # 0.3 to 1.0

    processing_time_ms: float = 0.0
    audit_trail: list[AuditEntry] = field(default_factory=list)
