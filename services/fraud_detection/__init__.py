"""
Fraud Detection Service
=======================

Concurrent multi-signal fraud detection with anomaly scoring, risk
aggregation and high-risk responses.

Usage:
    from services.fraud_detection import FraudDetectionEngine

    engine = FraudDetectionEngine()
    assessment = await engine.detect_fraud(entity, ip_address="10.0.0.1")
    print(assessment.overall_risk_score, assessment.recommended_action)
"""

from services.fraud_detection.aggregation import (
    calculate_confidence,
    calculate_risk_score,
    determine_action,
    determine_risk_level,
)
from services.fraud_detection.anomaly import AnomalyModel, IsolationForestStub, extract_features
from services.fraud_detection.engine import FraudDetectionEngine
from services.fraud_detection.models import (
    FraudAssessment,
    FraudIndicator,
    IndicatorStatus,
    IndicatorType,
    RecommendedAction,
    Severity,
)
from services.fraud_detection.network import NetworkGraph, NetworkRisk
from services.fraud_detection.responder import (
    AlertPublisher,
    HighRiskResponder,
    LoggingAlertPublisher,
)

__all__ = [
    # Engine
    "FraudDetectionEngine",
    # Models
    "FraudAssessment",
    "FraudIndicator",
    "IndicatorType",
    "IndicatorStatus",
    "Severity",
    "RecommendedAction",
    # Components
    "AnomalyModel",
    "IsolationForestStub",
    "extract_features",
    "NetworkGraph",
    "NetworkRisk",
    "AlertPublisher",
    "LoggingAlertPublisher",
    "HighRiskResponder",
    # Aggregation
    "calculate_risk_score",
    "calculate_confidence",
    "determine_risk_level",
    "determine_action",
]
