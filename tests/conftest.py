"""
Test Configuration
==================

Pytest fixtures for lending risk tests.
"""

import os
from collections.abc import Callable, Generator
from datetime import UTC, date, datetime, timedelta

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "testing"

from shared.config import FraudSettings, ProviderSettings, ScoringSettings  # noqa: E402
from shared.models import (  # noqa: E402
    AccountType,
    CreditAccount,
    CreditBureauData,
    Company,
    EmploymentStatus,
    Individual,
    Institution,
    InstitutionType,
    LegalForm,
    PaymentRecord,
    RegulatoryAuthority,
)
from shared.storage import InMemoryFraudStore, reset_fraud_store  # noqa: E402


FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_global_store() -> Generator[None, None, None]:
    """Each test starts with a fresh global fraud store."""
    reset_fraud_store()
    yield
    reset_fraud_store()


@pytest.fixture
def now() -> datetime:
    """Fixed wall-clock time used by engine clocks."""
    return FIXED_NOW


@pytest.fixture
def store() -> InMemoryFraudStore:
    """Fresh in-memory fraud store."""
    return InMemoryFraudStore()


@pytest.fixture
def scoring_settings() -> ScoringSettings:
    return ScoringSettings(cache_ttl_seconds=300, processing_budget_ms=50.0)


@pytest.fixture
def fraud_settings() -> FraudSettings:
    return FraudSettings()


@pytest.fixture
def provider_settings() -> ProviderSettings:
    """Fast provider policy: short timeout, no backoff."""
    return ProviderSettings(timeout_seconds=0.2, max_retries=3, retry_wait_seconds=0)


@pytest.fixture
def individual() -> Individual:
    """Employed individual with a mid-range income."""
    return Individual(
        id="ind-001",
        first_name="Sara",
        last_name="Alharbi",
        national_id="1012345678",
        date_of_birth=date(1990, 5, 17),
        mobile_number="+966500000001",
        employment_status=EmploymentStatus.EMPLOYED,
        monthly_income=15_000,
        updated_at=datetime(2026, 2, 1, tzinfo=UTC),
    )


@pytest.fixture
def company() -> Company:
    """Established technology LLC."""
    return Company(
        id="co-001",
        company_name="Najd Software LLC",
        commercial_registration="1010101010",
        annual_revenue=6_000_000,
        employee_count=60,
        establishment_date=date(2018, 1, 15),
        legal_form=LegalForm.LLC,
        industry_sector="technology",
        updated_at=datetime(2026, 2, 1, tzinfo=UTC),
    )


@pytest.fixture
def institution() -> Institution:
    """Well-capitalized SAMA-regulated bank."""
    return Institution(
        id="fi-001",
        institution_name="Gulf Commercial Bank",
        license_number="SAMA-0042",
        institution_type=InstitutionType.BANK,
        regulatory_authority=RegulatoryAuthority.SAMA,
        capital_adequacy_ratio=16.5,
        risk_rating="AA-",
        updated_at=datetime(2026, 2, 1, tzinfo=UTC),
    )


def _payments(on_time: int, late: int = 0, severely_late: int = 0) -> list[PaymentRecord]:
    """Monthly payment history, oldest first: severely late, then late, then on time."""
    records: list[PaymentRecord] = []
    days = [45] * severely_late + [10] * late + [0] * on_time
    for n, days_late in enumerate(days):
        records.append(
            PaymentRecord(
                account_id="acc-1",
                payment_date=date(2023, 1, 1) + timedelta(days=30 * n),
                amount_due=1_000,
                amount_paid=1_000,
                days_late=days_late,
            )
        )
    return records


@pytest.fixture
def make_payments() -> Callable[..., list[PaymentRecord]]:
    """Factory for payment histories."""
    return _payments


@pytest.fixture
def bureau_data() -> CreditBureauData:
    """Clean bureau file: 24 on-time payments, 10% utilization."""
    return CreditBureauData(
        payment_history=_payments(on_time=24),
        credit_accounts=[
            CreditAccount(
                account_id="card-1",
                account_type=AccountType.CREDIT_CARD,
                balance=1_000,
                credit_limit=10_000,
                monthly_payment=500,
            )
        ],
        last_updated=datetime(2026, 2, 20, tzinfo=UTC),
    )
