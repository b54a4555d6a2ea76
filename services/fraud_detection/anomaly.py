"""
Anomaly Detection
=================

Pluggable anomaly scoring over a small numeric feature vector.

The default model is a placeholder with an isolation-forest-shaped
interface: it averages a path length over an ensemble of trees and
compares it to the expected path length for the sample size. The path
lengths are a deterministic function of indicator severities, not a
trained model; swap in a real ``AnomalyModel`` for production use.

Version: 0.1.0
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import date

from services.fraud_detection.checks import age_on
from services.fraud_detection.models import FraudIndicator, Severity
from shared.models import Company, EmploymentStatus, Individual, Institution


EULER_GAMMA = 0.5772156649

# Anomaly indicator emitted above this score
ANOMALY_THRESHOLD = 0.7

# Birth date assumed when an individual has none on file
DEFAULT_DATE_OF_BIRTH = date(1990, 1, 1)


def extract_features(
    entity: Individual | Company | Institution,
    indicators: Sequence[FraudIndicator],
    today: date,
) -> list[float]:
    """
    Build the model input.

    Layout: [count, critical, high, medium, low] for every entity, plus
    [monthly_income, age, employed] for individuals.
    """
    features: list[float] = [
        len(indicators),
        sum(1 for i in indicators if i.severity == Severity.CRITICAL),
        sum(1 for i in indicators if i.severity == Severity.HIGH),
        sum(1 for i in indicators if i.severity == Severity.MEDIUM),
        sum(1 for i in indicators if i.severity == Severity.LOW),
    ]

    if isinstance(entity, Individual):
        features.extend(
            [
                entity.monthly_income or 0,
                age_on(entity.date_of_birth or DEFAULT_DATE_OF_BIRTH, today),
                1 if entity.employment_status == EmploymentStatus.EMPLOYED else 0,
            ]
        )

    return features


def expected_path_length(n: int) -> float:
    """Average path length of an unsuccessful BST search over ``n`` samples."""
    if n <= 1:
        return 0.0
    return 2 * (math.log(n - 1) + EULER_GAMMA) - (2 * (n - 1) / n)


class AnomalyModel(ABC):
    """Scores a feature vector in [0, 1]; higher is more anomalous."""

    @abstractmethod
    def predict(self, features: Sequence[float]) -> float:
        ...


class IsolationTreeStub:
    """
    Placeholder isolation tree.

    Shortens the path by 2 per critical, 1 per high and 0.5 per medium
    indicator from a baseline of 10, never below 1.
    """

    BASELINE = 10.0

    def path_length(self, features: Sequence[float]) -> float:
        critical, high, medium = features[1], features[2], features[3]
        return max(1.0, self.BASELINE - 2 * critical - high - 0.5 * medium)


class IsolationForestStub(AnomalyModel):
    """Isolation-forest-shaped placeholder model."""

    def __init__(self, num_trees: int = 100, sample_size: int = 256) -> None:
        self.sample_size = sample_size
        self.trees = [IsolationTreeStub() for _ in range(num_trees)]

    def predict(self, features: Sequence[float]) -> float:
        average = sum(tree.path_length(features) for tree in self.trees) / len(self.trees)
        expected = expected_path_length(self.sample_size)
        return 2 ** (-average / expected)
