"""Tests for scoring factors and score rules."""

from datetime import date

import pytest

from services.credit_scoring.factors import (
    alternative_data_score,
    asset_quality_score,
    business_stability_score,
    capital_adequacy_score,
    credit_utilization_score,
    debt_to_income_score,
    individual_factors,
    monthly_debt,
    payment_history_score,
)
from services.credit_scoring.models import RISK_BANDS, DataSource, RiskLevel
from services.credit_scoring.rules import (
    band_for,
    calculate_confidence,
    clamp_score,
    determine_risk_level,
    interest_rate_range,
)
from shared.models import (
    AccountStatus,
    AccountType,
    AlternativeDataPoint,
    AlternativeDataSource,
    Company,
    CreditAccount,
    CreditBureauData,
    Individual,
    LegalForm,
)


def card(balance: float, limit: float, monthly_payment: float = 0) -> CreditAccount:
    return CreditAccount(
        account_id=f"card-{balance}",
        account_type=AccountType.CREDIT_CARD,
        balance=balance,
        credit_limit=limit,
        monthly_payment=monthly_payment,
    )


class TestIndividualFactors:
    """Tests for individual factor scorers."""

    def test_payment_history_defaults_to_neutral(self) -> None:
        """Test an empty history scores 0.5."""
        assert payment_history_score([]) == 0.5

    def test_payment_history_weights_recent_payments(self, make_payments) -> None:
        """Test old late payments hurt less than the overall ratio suggests."""
        history = make_payments(on_time=12, late=12)

        # 0.5 overall * 0.7 + 1.0 recent * 0.3 - 12 * 0.1 / 24
        assert payment_history_score(history) == pytest.approx(0.6)

    def test_payment_history_never_negative(self, make_payments) -> None:
        """Test heavy penalties clamp to zero."""
        assert payment_history_score(make_payments(on_time=0, severely_late=6)) == 0.0

    @pytest.mark.parametrize(
        ("balance", "expected"),
        [(1_000, 1.0), (3_000, 0.8), (5_000, 0.6), (7_000, 0.4), (9_000, 0.2)],
    )
    def test_utilization_bands(self, balance: float, expected: float) -> None:
        """Test utilization ratio bands."""
        assert credit_utilization_score([card(balance, 10_000)]) == expected

    def test_utilization_ignores_non_card_accounts(self) -> None:
        """Test loans do not count toward utilization."""
        loan = CreditAccount(
            account_id="loan-1",
            account_type=AccountType.LOAN,
            balance=90_000,
            credit_limit=100_000,
        )
        assert credit_utilization_score([loan]) == 0.5

    def test_utilization_zero_limit(self) -> None:
        """Test zero total limit is neutral."""
        assert credit_utilization_score([card(0, 0)]) == 0.5

    def test_monthly_debt_counts_open_accounts_only(self) -> None:
        """Test closed accounts are excluded from monthly debt."""
        closed = CreditAccount(
            account_id="old",
            account_type=AccountType.LOAN,
            monthly_payment=2_000,
            status=AccountStatus.CLOSED,
        )
        bureau = CreditBureauData(credit_accounts=[card(0, 5_000, 400), closed])

        assert monthly_debt(bureau) == 400
        assert monthly_debt(CreditBureauData(credit_accounts=[closed])) is None
        assert monthly_debt(None) is None

    def test_debt_to_income_bands(self) -> None:
        """Test DTI bands and the assumed ratio."""
        assert debt_to_income_score(0, 500) == 0.3
        assert debt_to_income_score(10_000, None) == 0.8
        assert debt_to_income_score(10_000, 1_000) == 1.0
        assert debt_to_income_score(10_000, 4_500) == 0.6
        assert debt_to_income_score(10_000, 9_000) == 0.2

    def test_dti_uses_bureau_accounts(self, individual: Individual) -> None:
        """Test DTI reads monthly payments from the bureau when reported."""
        bureau = CreditBureauData(credit_accounts=[card(0, 10_000, 9_000)])

        factors = individual_factors(individual, bureau, None)
        dti = next(f for f in factors if f.category == "Debt-to-Income Ratio")

        # 9000 / 15000 = 0.6
        assert dti.score == 0.4
        assert dti.data_source == DataSource.CREDIT_BUREAU

    def test_dti_without_bureau_is_self_reported(self, individual: Individual) -> None:
        """Test DTI falls back to the assumed ratio."""
        factors = individual_factors(individual, None, None)
        dti = next(f for f in factors if f.category == "Debt-to-Income Ratio")

        assert dti.score == 0.8
        assert dti.data_source == DataSource.SELF_REPORTED

    def test_alternative_data_blend(self) -> None:
        """Test source weights and confidence scale the blend."""
        points = [
            AlternativeDataPoint(source=AlternativeDataSource.TELECOM, score=1.0, confidence=1.0),
            AlternativeDataPoint(source=AlternativeDataSource.UTILITIES, score=0.4, confidence=0.5),
        ]

        # (1.0 * 0.3 * 1.0 + 0.4 * 0.25 * 0.5) / 0.55
        assert alternative_data_score(points) == pytest.approx(0.35 / 0.55)

    def test_empty_alternative_data_adds_no_factor(self, individual: Individual) -> None:
        """Test the alternative data factor needs at least one point."""
        assert len(individual_factors(individual, None, [])) == 4


class TestOrganizationFactors:
    """Tests for company and institution scorers."""

    def test_business_stability_by_age_and_form(self) -> None:
        """Test years in business tiers plus legal form adjustment."""
        young = Company(id="c1", establishment_date=date(2025, 6, 1))
        veteran = Company(
            id="c2",
            establishment_date=date(2010, 1, 1),
            legal_form=LegalForm.JOINT_STOCK,
        )
        today = date(2026, 3, 1)

        assert business_stability_score(young, today) == 0.3
        assert business_stability_score(veteran, today) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        ("ratio", "expected"),
        [(15, 1.0), (12.5, 0.8), (10, 0.7), (8, 0.6), (7.9, 0.3)],
    )
    def test_capital_adequacy_bands(self, ratio: float, expected: float) -> None:
        """Test CAR bands around the 8% minimum."""
        assert capital_adequacy_score(ratio) == expected

    @pytest.mark.parametrize(
        ("rating", "expected"),
        [("AA-", 0.9), ("A+", 0.8), ("BBB", 0.7), ("BB+", 0.6), ("B-", 0.4), ("", 0.6)],
    )
    def test_asset_quality_from_rating(self, rating: str, expected: float) -> None:
        """Test longest rating prefix wins."""
        assert asset_quality_score(rating) == expected


class TestScoreRules:
    """Tests for banding and pricing rules."""

    def test_bands_cover_score_range(self) -> None:
        """Test every score in range maps to exactly one band."""
        for score in range(350, 851):
            assert sum(1 for band in RISK_BANDS if band.contains(score)) == 1

    @pytest.mark.parametrize(
        ("score", "level"),
        [
            (850, RiskLevel.VERY_LOW),
            (750, RiskLevel.VERY_LOW),
            (749, RiskLevel.LOW),
            (650, RiskLevel.LOW),
            (649, RiskLevel.MEDIUM),
            (550, RiskLevel.MEDIUM),
            (549, RiskLevel.HIGH),
            (450, RiskLevel.HIGH),
            (449, RiskLevel.VERY_HIGH),
            (350, RiskLevel.VERY_HIGH),
        ],
    )
    def test_band_edges(self, score: int, level: RiskLevel) -> None:
        """Test band boundaries are inclusive."""
        assert determine_risk_level(score) == level

    def test_band_for_out_of_range(self) -> None:
        """Test unclamped scores are rejected."""
        with pytest.raises(ValueError):
            band_for(900)

    def test_clamp_score(self) -> None:
        """Test rounding and clamping."""
        assert clamp_score(1_000) == 850
        assert clamp_score(100) == 350
        assert clamp_score(700.6) == 701

    def test_interest_rate_follows_band(self) -> None:
        """Test interest range is read from the band table."""
        rate = interest_rate_range(RiskLevel.VERY_HIGH)

        assert (rate.min, rate.max) == (15.0, 25.0)

    def test_confidence_bounds(self) -> None:
        """Test confidence stays inside [0.3, 1.0]."""
        assert calculate_confidence([], has_bureau_data=True, has_alternative_data=True) == 1.0
        assert calculate_confidence([], has_bureau_data=False, has_alternative_data=False) == 0.5
