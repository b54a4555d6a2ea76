"""
Storage Module
==============

Storage boundary for the fraud engine.

Supports:
- In-memory store (development/testing)
- Any platform store implementing FraudStore

Usage:
    from shared.storage import get_fraud_store

    store = get_fraud_store()
    await store.record_assessment("ent-123")
    recent = await store.count_assessments("ent-123", since=one_hour_ago)
"""

from shared.storage.client import (
    BlacklistEntry,
    CasePriority,
    CaseStatus,
    FingerprintRecord,
    FraudAssessmentLog,
    FraudCase,
    FraudStore,
    LocationRecord,
    RequestLogRecord,
    get_fraud_store,
    reset_fraud_store,
    set_fraud_store,
)
from shared.storage.memory import InMemoryFraudStore

__all__ = [
    # Store
    "FraudStore",
    "get_fraud_store",
    "set_fraud_store",
    "reset_fraud_store",
    # Records
    "LocationRecord",
    "FingerprintRecord",
    "RequestLogRecord",
    "FraudAssessmentLog",
    "BlacklistEntry",
    "FraudCase",
    "CaseStatus",
    "CasePriority",
    # Implementations
    "InMemoryFraudStore",
]
