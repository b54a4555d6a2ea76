"""Tests for the lending decision table and response formatting."""

import pytest

from services.credit_scoring import RiskLevel
from services.fraud_detection import RecommendedAction
from services.lending_decision import (
    LoanDecision,
    decide,
    format_interest_rate,
    format_probability,
    format_risk_level,
    format_risk_score,
)


class TestDecide:
    """Tests for decide."""

    def test_good_score_is_approved(self) -> None:
        """Test approval at the requested amount."""
        result = decide(700, RecommendedAction.APPROVE, 50_000, 100_000)

        assert result.decision == LoanDecision.APPROVED
        assert result.approved_amount == 50_000

    def test_review_with_mid_score_is_conditional(self) -> None:
        """Test conditional approval at 70% of the capped amount."""
        result = decide(600, RecommendedAction.REVIEW, 50_000, 100_000)

        assert result.decision == LoanDecision.CONDITIONAL
        assert result.approved_amount == 35_000

    def test_conditional_amount_is_floored(self) -> None:
        """Test the conditional amount rounds down."""
        assert decide(600, RecommendedAction.REVIEW, 10_001, 20_000).approved_amount == 7_000

    def test_low_score_is_declined(self) -> None:
        """Test scores under 550 are declined with nothing approved."""
        result = decide(500, RecommendedAction.APPROVE, 50_000, 100_000)

        assert result.decision == LoanDecision.DECLINED
        assert result.approved_amount == 0

    @pytest.mark.parametrize("action", [RecommendedAction.REJECT, RecommendedAction.BLOCK])
    def test_fraud_rejection_overrides_score(self, action: RecommendedAction) -> None:
        """Test reject and block decline even excellent scores."""
        result = decide(820, action, 50_000, 100_000)

        assert result.decision == LoanDecision.DECLINED
        assert result.approved_amount == 0

    def test_mid_score_with_clean_fraud_check_is_declined(self) -> None:
        """Test conditional approval needs a review recommendation or no check."""
        assert decide(600, RecommendedAction.APPROVE, 50_000, 100_000).decision == LoanDecision.DECLINED

    def test_no_fraud_check_allows_conditional(self) -> None:
        """Test a skipped fraud check behaves like review."""
        result = decide(600, None, 50_000, 100_000)

        assert result.decision == LoanDecision.CONDITIONAL

    def test_request_capped_at_maximum(self) -> None:
        """Test approvals never exceed the scored maximum."""
        assert decide(720, RecommendedAction.APPROVE, 2_000_000, 900_000).approved_amount == 900_000

    def test_missing_request_means_maximum(self) -> None:
        """Test no requested amount approves the maximum."""
        assert decide(720, None, None, 900_000).approved_amount == 900_000
        assert decide(600, None, None, 80_000).approved_amount == 56_000

    @pytest.mark.parametrize(
        ("score", "decision"),
        [(650, LoanDecision.APPROVED), (649, LoanDecision.CONDITIONAL), (550, LoanDecision.CONDITIONAL), (549, LoanDecision.DECLINED)],
    )
    def test_score_boundaries(self, score: int, decision: LoanDecision) -> None:
        """Test decision thresholds are inclusive."""
        assert decide(score, RecommendedAction.REVIEW, 10_000, 10_000).decision == decision


class TestFormatting:
    """Tests for display helpers."""

    def test_format_risk_level(self) -> None:
        """Test band names are humanized."""
        assert format_risk_level(RiskLevel.VERY_LOW) == "very low"
        assert format_risk_level("MEDIUM") == "medium"

    def test_format_probability(self) -> None:
        """Test probabilities render as one-decimal percentages."""
        assert format_probability(0.0734) == "7.3%"

    def test_format_interest_rate(self) -> None:
        """Test interest ranges render with one decimal."""
        assert format_interest_rate(3.5, 5) == "3.5% - 5.0%"

    def test_format_risk_score(self) -> None:
        """Test fraud scores render out of 100."""
        assert format_risk_score(72.6) == "73/100"
