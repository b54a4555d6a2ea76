"""
Entity Models
=============

Borrower entities assessed by the lending engines. An entity is one of
three variants discriminated on ``entity_type``; each variant carries the
profile fields its scorer reads.

Version: 0.1.0
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class EntityType(str, Enum):
    """Types of entities assessed."""

    INDIVIDUAL = "individual"
    COMPANY = "company"
    INSTITUTION = "institution"


class EmploymentStatus(str, Enum):
    """Employment status of an individual."""

    EMPLOYED = "employed"
    SELF_EMPLOYED = "self_employed"
    RETIRED = "retired"
    UNEMPLOYED = "unemployed"
    STUDENT = "student"


class LegalForm(str, Enum):
    """Legal form of a company."""

    JOINT_STOCK = "joint_stock"
    LLC = "llc"
    PARTNERSHIP = "partnership"
    SOLE_PROPRIETORSHIP = "sole_proprietorship"


class RegulatoryAuthority(str, Enum):
    """Regulator supervising a financial institution."""

    SAMA = "sama"
    CMA = "cma"
    OTHER = "other"


class InstitutionType(str, Enum):
    """Kinds of licensed financial institutions."""

    BANK = "bank"
    FINANCE_COMPANY = "finance_company"
    MICROFINANCE = "microfinance"
    COOPERATIVE = "cooperative"


class EntityBase(BaseModel):
    """Fields common to every entity variant."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique entity ID")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Individual(EntityBase):
    """A natural person applying for credit."""

    entity_type: Literal["individual"] = "individual"

    first_name: str | None = None
    last_name: str | None = None
    national_id: str | None = None
    date_of_birth: date | None = None
    mobile_number: str | None = None

    employment_status: EmploymentStatus | None = None
    monthly_income: float | None = Field(default=None, ge=0)

    @property
    def full_name(self) -> str:
        """First and last name joined, skipping missing parts."""
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class Company(EntityBase):
    """A commercial business."""

    entity_type: Literal["company"] = "company"

    company_name: str | None = None
    commercial_registration: str | None = None

    annual_revenue: float | None = Field(default=None, ge=0)
    employee_count: int | None = Field(default=None, ge=0)
    establishment_date: date
    legal_form: LegalForm | None = None
    industry_sector: str = ""


class Institution(EntityBase):
    """A regulated financial institution."""

    entity_type: Literal["institution"] = "institution"

    institution_name: str | None = None
    license_number: str | None = None

    institution_type: InstitutionType | None = None
    regulatory_authority: RegulatoryAuthority | None = None
    capital_adequacy_ratio: float | None = Field(
        default=None,
        ge=0,
        description="Regulatory capital over risk-weighted assets, in percent",
    )
    risk_rating: str | None = Field(default=None, description="Letter rating, e.g. AA-")


Entity = Annotated[Individual | Company | Institution, Field(discriminator="entity_type")]

_entity_adapter: TypeAdapter[Entity] = TypeAdapter(Entity)


def parse_entity(data: dict[str, Any]) -> Individual | Company | Institution:
    """
    Build the matching entity variant from raw profile data.

    Raises:
        pydantic.ValidationError: if ``entity_type`` is missing or unknown
    """
    return _entity_adapter.validate_python(data)
