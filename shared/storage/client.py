"""
Fraud Store Interface
=====================

Abstract base class and records for the append-only storage slices the
fraud engine reads and writes. Persistence itself belongs to the
platform; engines only depend on this interface.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from shared.logging import get_logger

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class CaseStatus(str, Enum):
    """Investigation case status."""

    OPEN = "open"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    FALSE_POSITIVE = "false_positive"


class CasePriority(str, Enum):
    """Investigation case priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class LocationRecord(BaseModel):
    """A geolocated event for an entity."""

    entity_id: str
    ip_address: str
    country: str
    region: str = ""
    city: str = ""
    latitude: float
    longitude: float
    created_at: datetime = Field(default_factory=_now)


class FingerprintRecord(BaseModel):
    """A device fingerprint observed for an entity."""

    entity_id: str
    fingerprint_hash: str
    fingerprint_data: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_now)


class RequestLogRecord(BaseModel):
    """An inbound API request as written by the API boundary."""

    ip_address: str
    entity_id: str | None = None
    endpoint: str = ""
    created_at: datetime = Field(default_factory=_now)


class FraudAssessmentLog(BaseModel):
    """Summary row written for every completed fraud assessment."""

    entity_id: str
    risk_score: float
    risk_level: str
    confidence: float
    indicator_count: int
    recommended_action: str
    processing_time_ms: int
    model_version: str
    created_at: datetime = Field(default_factory=_now)


class BlacklistEntry(BaseModel):
    """An entity barred from assessment until ``expires_at``."""

    entity_id: str
    reason: str
    expires_at: datetime | None = None
    created_at: datetime = Field(default_factory=_now)

    def is_active(self, at: datetime) -> bool:
        """Whether the entry still applies at the given time."""
        return self.expires_at is None or self.expires_at > at


class FraudCase(BaseModel):
    """A manual-review case opened for a high-risk assessment."""

    id: str = Field(default_factory=lambda: f"case:{uuid4()}")
    entity_id: str
    risk_score: float
    risk_level: str
    indicator_count: int = 0
    status: CaseStatus = CaseStatus.OPEN
    priority: CasePriority = CasePriority.MEDIUM
    created_at: datetime = Field(default_factory=_now)


class FraudStore(ABC):
    """
    Storage boundary for fraud detection.

    Each fraud check reads and writes its own slice; slices never share
    rows, so checks can run concurrently against one store.
    """

    # -------------------------------------------------------------------------
    # Velocity
    # -------------------------------------------------------------------------

    @abstractmethod
    async def record_assessment(self, entity_id: str, at: datetime | None = None) -> None:
        """Record that a credit assessment was run for an entity."""
        ...

    @abstractmethod
    async def count_assessments(self, entity_id: str, since: datetime) -> int:
        """Count assessments for an entity at or after ``since``."""
        ...

    @abstractmethod
    async def record_request(self, record: RequestLogRecord) -> None:
        """Append an API request log row."""
        ...

    @abstractmethod
    async def count_requests_from_ip(self, ip_address: str, since: datetime) -> int:
        """Count request log rows from an IP at or after ``since``."""
        ...

    @abstractmethod
    async def count_entities_sharing_ip(self, ip_address: str, exclude_entity_id: str) -> int:
        """Count distinct other entities seen in request logs from an IP."""
        ...

    # -------------------------------------------------------------------------
    # Device and location
    # -------------------------------------------------------------------------

    @abstractmethod
    async def save_fingerprint(self, record: FingerprintRecord) -> None:
        """Persist a device fingerprint observation."""
        ...

    @abstractmethod
    async def find_fingerprint_entities(
        self,
        fingerprint_hash: str,
        exclude_entity_id: str,
    ) -> list[str]:
        """Other entities that used the same fingerprint."""
        ...

    @abstractmethod
    async def save_location(self, record: LocationRecord) -> None:
        """Append a location to an entity's history."""
        ...

    @abstractmethod
    async def latest_location(self, entity_id: str, since: datetime) -> LocationRecord | None:
        """Most recent location for an entity at or after ``since``."""
        ...

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @abstractmethod
    async def register_identity(self, entity_id: str, national_id: str) -> None:
        """Index an entity's national ID."""
        ...

    @abstractmethod
    async def find_entities_by_national_id(
        self,
        national_id: str,
        exclude_entity_id: str,
    ) -> list[str]:
        """Other entities registered with the same national ID."""
        ...

    # -------------------------------------------------------------------------
    # Outcomes
    # -------------------------------------------------------------------------

    @abstractmethod
    async def store_indicators(self, indicators: list[dict[str, Any]]) -> None:
        """Append emitted fraud indicators."""
        ...

    @abstractmethod
    async def log_fraud_assessment(self, log: FraudAssessmentLog) -> None:
        """Append a fraud assessment summary."""
        ...

    @abstractmethod
    async def add_to_blacklist(self, entry: BlacklistEntry) -> None:
        """Bar an entity until the entry expires."""
        ...

    @abstractmethod
    async def is_blacklisted(self, entity_id: str, at: datetime | None = None) -> bool:
        """Whether an unexpired blacklist entry exists for the entity."""
        ...

    @abstractmethod
    async def create_case(self, case: FraudCase) -> FraudCase:
        """Open an investigation case."""
        ...

    @abstractmethod
    async def list_cases(self, entity_id: str | None = None) -> list[FraudCase]:
        """List cases, optionally for one entity."""
        ...


# Global store instance
_store: FraudStore | None = None


def get_fraud_store() -> FraudStore:
    """
    Get the configured fraud store instance.

    Returns:
        FraudStore instance (in-memory unless one was set)
    """
    global _store

    if _store is None:
        from shared.storage.memory import InMemoryFraudStore

        _store = InMemoryFraudStore()
        logger.info("fraud_store_initialized", backend="memory")

    return _store


def set_fraud_store(store: FraudStore) -> None:
    """
    Set a custom fraud store.

    Args:
        store: FraudStore instance
    """
    global _store
    _store = store
    logger.info("fraud_store_set", backend=type(store).__name__)


def reset_fraud_store() -> None:
    """Reset the store to be re-initialized."""
    global _store
    _store = None
