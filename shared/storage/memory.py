"""
In-Memory Fraud Store
=====================

In-memory implementation for development and testing.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any

from shared.logging import get_logger
from shared.storage.client import (
    BlacklistEntry,
    FingerprintRecord,
    FraudAssessmentLog,
    FraudCase,
    FraudStore,
    LocationRecord,
    RequestLogRecord,
)

logger = get_logger(__name__)


class InMemoryFraudStore(FraudStore):
    """
    In-memory fraud store.

    Rows are kept in per-slice lists and lost on restart. Expiring rows
    (blacklist entries) are filtered at read time, never swept.
    """

    def __init__(self) -> None:
        """Initialize empty storage slices."""
        self._assessments: dict[str, list[datetime]] = {}
        self._requests: list[RequestLogRecord] = []
        self._fingerprints: list[FingerprintRecord] = []
        self._locations: dict[str, list[LocationRecord]] = {}
        self._identities: dict[str, set[str]] = {}
        self._indicators: list[dict[str, Any]] = []
        self._assessment_logs: list[FraudAssessmentLog] = []
        self._blacklist: list[BlacklistEntry] = []
        self._cases: list[FraudCase] = []

        logger.debug("memory_fraud_store_initialized")

    # =========================================================================
    # Velocity
    # =========================================================================

    async def record_assessment(self, entity_id: str, at: datetime | None = None) -> None:
        self._assessments.setdefault(entity_id, []).append(at or datetime.now(UTC))

    async def count_assessments(self, entity_id: str, since: datetime) -> int:
        return sum(1 for ts in self._assessments.get(entity_id, []) if ts >= since)

    async def record_request(self, record: RequestLogRecord) -> None:
        self._requests.append(record)

    async def count_requests_from_ip(self, ip_address: str, since: datetime) -> int:
        return sum(
            1
            for r in self._requests
            if r.ip_address == ip_address and r.created_at >= since
        )

    async def count_entities_sharing_ip(self, ip_address: str, exclude_entity_id: str) -> int:
        entities = {
            r.entity_id
            for r in self._requests
            if r.ip_address == ip_address
            and r.entity_id is not None
            and r.entity_id != exclude_entity_id
        }
        return len(entities)

    # =========================================================================
    # Device and location
    # =========================================================================

    async def save_fingerprint(self, record: FingerprintRecord) -> None:
        # Upsert on (entity, hash)
        self._fingerprints = [
            f
            for f in self._fingerprints
            if not (f.entity_id == record.entity_id and f.fingerprint_hash == record.fingerprint_hash)
        ]
        self._fingerprints.append(record)

    async def find_fingerprint_entities(
        self,
        fingerprint_hash: str,
        exclude_entity_id: str,
    ) -> list[str]:
        seen: list[str] = []
        for f in self._fingerprints:
            if (
                f.fingerprint_hash == fingerprint_hash
                and f.entity_id != exclude_entity_id
                and f.entity_id not in seen
            ):
                seen.append(f.entity_id)
        return seen

    async def save_location(self, record: LocationRecord) -> None:
        self._locations.setdefault(record.entity_id, []).append(record)

    async def latest_location(self, entity_id: str, since: datetime) -> LocationRecord | None:
        recent = [r for r in self._locations.get(entity_id, []) if r.created_at >= since]
        if not recent:
            return None
        return max(recent, key=lambda r: r.created_at)

    # =========================================================================
    # Identity
    # =========================================================================

    async def register_identity(self, entity_id: str, national_id: str) -> None:
        self._identities.setdefault(national_id, set()).add(entity_id)

    async def find_entities_by_national_id(
        self,
        national_id: str,
        exclude_entity_id: str,
    ) -> list[str]:
        return sorted(e for e in self._identities.get(national_id, set()) if e != exclude_entity_id)

    # =========================================================================
    # Outcomes
    # =========================================================================

    async def store_indicators(self, indicators: list[dict[str, Any]]) -> None:
        self._indicators.extend(indicators)

    async def log_fraud_assessment(self, log: FraudAssessmentLog) -> None:
        self._assessment_logs.append(log)

    async def add_to_blacklist(self, entry: BlacklistEntry) -> None:
        self._blacklist.append(entry)
        logger.info(
            "entity_blacklisted",
            entity_id=entry.entity_id,
            reason=entry.reason,
            expires_at=entry.expires_at.isoformat() if entry.expires_at else None,
        )

    async def is_blacklisted(self, entity_id: str, at: datetime | None = None) -> bool:
        now = at or datetime.now(UTC)
        return any(e.entity_id == entity_id and e.is_active(now) for e in self._blacklist)

    async def create_case(self, case: FraudCase) -> FraudCase:
        self._cases.append(case)
        return case

    async def list_cases(self, entity_id: str | None = None) -> list[FraudCase]:
        if entity_id is None:
            return list(self._cases)
        return [c for c in self._cases if c.entity_id == entity_id]

    # =========================================================================
    # Inspection helpers
    # =========================================================================

    @property
    def indicators(self) -> list[dict[str, Any]]:
        """Indicators stored so far."""
        return list(self._indicators)

    @property
    def assessment_logs(self) -> list[FraudAssessmentLog]:
        """Fraud assessment summaries logged so far."""
        return list(self._assessment_logs)

    @property
    def blacklist(self) -> list[BlacklistEntry]:
        """All blacklist entries, expired ones included."""
        return list(self._blacklist)

    def clear_all(self) -> None:
        """Clear all slices."""
        self.__init__()  # type: ignore[misc]
        logger.warning("memory_fraud_store_cleared")
