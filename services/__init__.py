"""
Lending Risk Services
=====================

Engines of the lending risk platform.

Services:
- credit_scoring: Multi-entity weighted credit scoring
- fraud_detection: Concurrent fraud indicator checks and risk aggregation
- data_providers: External data aggregation (bureau, government, alternative)
- lending_decision: Decision table, assessment pipeline, partner response
"""

__all__ = [
    "credit_scoring",
    "fraud_detection",
    "data_providers",
    "lending_decision",
]
