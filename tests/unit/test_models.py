"""Tests for shared entity and data models."""

from datetime import date

import pytest
from pydantic import ValidationError

from shared.models import (
    AlternativeDataPoint,
    AlternativeDataSource,
    Company,
    Individual,
    Institution,
    parse_entity,
)


class TestEntities:
    """Tests for entity models."""

    def test_parse_entity_by_type(self) -> None:
        """Test the discriminator selects the variant."""
        individual = parse_entity({"entity_type": "individual", "id": "ind-1", "monthly_income": 9000})
        company = parse_entity(
            {"entity_type": "company", "id": "co-1", "establishment_date": "2015-04-01"}
        )
        institution = parse_entity({"entity_type": "institution", "id": "fi-1"})

        assert isinstance(individual, Individual)
        assert isinstance(company, Company)
        assert company.establishment_date == date(2015, 4, 1)
        assert isinstance(institution, Institution)

    def test_unknown_entity_type_rejected(self) -> None:
        """Test unsupported types fail validation."""
        with pytest.raises(ValidationError):
            parse_entity({"entity_type": "trust", "id": "t-1"})

    def test_company_requires_establishment_date(self) -> None:
        """Test companies cannot be built without a founding date."""
        with pytest.raises(ValidationError):
            Company(id="co-1")  # type: ignore[call-arg]

    def test_entities_are_immutable(self, individual: Individual) -> None:
        """Test entity fields cannot be reassigned."""
        with pytest.raises(ValidationError):
            individual.monthly_income = 1  # type: ignore[misc]

    def test_full_name(self) -> None:
        """Test missing name parts are skipped."""
        assert Individual(id="i", first_name="Sara").full_name == "Sara"
        assert Individual(id="i", first_name="Sara", last_name="Alharbi").full_name == "Sara Alharbi"

    def test_negative_income_rejected(self) -> None:
        """Test income must be non-negative."""
        with pytest.raises(ValidationError):
            Individual(id="i", monthly_income=-1)


class TestAlternativeData:
    """Tests for alternative data points."""

    def test_score_bounds(self) -> None:
        """Test scores and confidences must lie in [0, 1]."""
        with pytest.raises(ValidationError):
            AlternativeDataPoint(source=AlternativeDataSource.TELECOM, score=1.2, confidence=0.5)
