"""
Network Graph Analysis
======================

Detects possible fraud rings by counting other entities seen from the
same source IP.

Version: 0.1.0
"""

from dataclasses import dataclass

from services.fraud_detection.models import FraudIndicator, IndicatorType, Severity
from shared.storage import FraudStore


# Indicator emitted above this risk score
NETWORK_RISK_THRESHOLD = 0.7


@dataclass
class NetworkRisk:
    """Risk derived from connected entities."""

    risk_score: float
    confidence: float
    connected_entities: int


def network_risk_score(connected_entities: int) -> float:
    if connected_entities > 10:
        return 0.9
    if connected_entities > 5:
        return 0.7
    if connected_entities > 2:
        return 0.5
    return 0.1


class NetworkGraph:
    """Shared-IP connection analysis."""

    def __init__(self, store: FraudStore) -> None:
        self.store = store

    async def analyze_connections(self, entity_id: str, ip_address: str) -> NetworkRisk:
        connected = await self.store.count_entities_sharing_ip(ip_address, exclude_entity_id=entity_id)
        return NetworkRisk(
            risk_score=network_risk_score(connected),
            confidence=0.8,
            connected_entities=connected,
        )

    async def check_network(self, entity_id: str, ip_address: str | None) -> list[FraudIndicator]:
        """Surface a behavioral indicator when the shared-IP network is large."""
        if not ip_address:
            return []

        risk = await self.analyze_connections(entity_id, ip_address)
        if risk.risk_score <= NETWORK_RISK_THRESHOLD:
            return []

        return [
            FraudIndicator(
                entity_id=entity_id,
                indicator_type=IndicatorType.BEHAVIORAL,
                severity=Severity.CRITICAL if risk.risk_score > 0.9 else Severity.HIGH,
                description="Connected to high-risk network",
                confidence=risk.confidence,
                evidence={
                    "network_risk_score": risk.risk_score,
                    "connected_entities": risk.connected_entities,
                },
            )
        ]
