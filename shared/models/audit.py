"""
Audit Models
============

Per-call audit trail entries returned alongside engine results.

Version: 0.1.0
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class AuditEntry(BaseModel):
    """One step recorded while producing a result."""

    entity_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: str
    component: str
    data: dict[str, Any] = Field(default_factory=dict)
