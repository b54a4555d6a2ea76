"""
Scoring Factors
===============

Per-entity-type factor scorers. Each factor reduces raw profile and
external data to a normalized sub-score in [0, 1].

Factor sets:
- Individual: payment history, credit utilization, employment stability,
  debt-to-income, alternative data (only when present)
- Company: financial performance, business stability, industry risk,
  management quality
- Institution: capital adequacy, governance & compliance, asset quality

Version: 0.1.0
"""

from collections.abc import Sequence
from datetime import date

from services.credit_scoring.models import AssessmentFactor, DataSource, FactorImpact
from shared.models import (
    AccountStatus,
    AccountType,
    AlternativeDataPoint,
    AlternativeDataSource,
    Company,
    CreditAccount,
    CreditBureauData,
    EmploymentStatus,
    Individual,
    Institution,
    InstitutionType,
    LegalForm,
    PaymentRecord,
    RegulatoryAuthority,
)


# =============================================================================
# Weights and Lookup Tables
# =============================================================================


INDIVIDUAL_WEIGHTS = {
    "payment_history": 0.35,
    "credit_utilization": 0.30,
    "employment_stability": 0.15,
    "debt_to_income": 0.10,
    "alternative_data": 0.20,
}

COMPANY_WEIGHTS = {
    "financial_performance": 0.40,
    "business_stability": 0.25,
    "industry_risk": 0.15,
    "management_quality": 0.10,
}

INSTITUTION_WEIGHTS = {
    "capital_adequacy": 0.30,
    "governance": 0.20,
    "asset_quality": 0.25,
}

ALTERNATIVE_DATA_WEIGHTS: dict[AlternativeDataSource, float] = {
    AlternativeDataSource.TELECOM: 0.30,
    AlternativeDataSource.UTILITIES: 0.25,
    AlternativeDataSource.DIGITAL_FOOTPRINT: 0.20,
    AlternativeDataSource.SOCIAL_MEDIA: 0.15,
    AlternativeDataSource.ECOMMERCE: 0.10,
}

INDUSTRY_RISK: dict[str, float] = {
    "technology": 0.7,
    "healthcare": 0.8,
    "finance": 0.6,
    "education": 0.8,
    "manufacturing": 0.6,
    "retail": 0.5,
    "hospitality": 0.4,
    "oil_gas": 0.5,
    "construction": 0.4,
    "agriculture": 0.6,
}

EMPLOYMENT_BASE: dict[EmploymentStatus, float] = {
    EmploymentStatus.EMPLOYED: 0.8,
    EmploymentStatus.SELF_EMPLOYED: 0.6,
    EmploymentStatus.RETIRED: 0.7,
    EmploymentStatus.UNEMPLOYED: 0.2,
}

LEGAL_FORM_ADJUSTMENT: dict[LegalForm, float] = {
    LegalForm.JOINT_STOCK: 0.1,
    LegalForm.LLC: 0.05,
    LegalForm.SOLE_PROPRIETORSHIP: -0.05,
}

REGULATOR_BASE: dict[RegulatoryAuthority, float] = {
    RegulatoryAuthority.SAMA: 0.9,
    RegulatoryAuthority.CMA: 0.8,
    RegulatoryAuthority.OTHER: 0.6,
}

INSTITUTION_TYPE_ADJUSTMENT: dict[InstitutionType, float] = {
    InstitutionType.BANK: 0.1,
    InstitutionType.FINANCE_COMPANY: 0.0,
    InstitutionType.MICROFINANCE: -0.05,
    InstitutionType.COOPERATIVE: -0.1,
}

# Assumed monthly debt share of income when the bureau lists no open accounts
ASSUMED_DTI = 0.3


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _impact(score: float, positive_above: float, negative_below: float | None = None) -> FactorImpact:
    if score > positive_above:
        return FactorImpact.POSITIVE
    if negative_below is not None and score < negative_below:
        return FactorImpact.NEGATIVE
    return FactorImpact.NEUTRAL


def years_between(start: date, today: date) -> float:
    """Fractional years elapsed, 365-day years."""
    return (today - start).days / 365


# =============================================================================
# Individual Factors
# =============================================================================


def payment_history_score(history: Sequence[PaymentRecord]) -> float:
    """
    On-time ratio weighted toward the most recent 12 payments.

    Late payments (1-30 days) and severely late payments (>30 days) are
    penalized in proportion to the total number of payments.
    """
    if not history:
        return 0.5

    total = len(history)
    on_time = sum(1 for p in history if p.days_late == 0)
    late = sum(1 for p in history if 0 < p.days_late <= 30)
    severely_late = sum(1 for p in history if p.days_late > 30)

    recent = history[-12:]
    recent_score = sum(1 for p in recent if p.days_late == 0) / len(recent)

    overall = on_time / total
    penalty = (late * 0.1 + severely_late * 0.3) / total

    return _clamp(overall * 0.7 + recent_score * 0.3 - penalty)


def credit_utilization_score(accounts: Sequence[CreditAccount]) -> float:
    """Band the credit card balance-to-limit ratio."""
    cards = [a for a in accounts if a.account_type == AccountType.CREDIT_CARD]
    if not cards:
        return 0.5

    total_limit = sum(c.credit_limit for c in cards)
    if total_limit == 0:
        return 0.5

    ratio = sum(c.balance for c in cards) / total_limit
    if ratio <= 0.1:
        return 1.0
    if ratio <= 0.3:
        return 0.8
    if ratio <= 0.5:
        return 0.6
    if ratio <= 0.7:
        return 0.4
    return 0.2


def employment_stability_score(individual: Individual) -> float:
    """Employment status baseline adjusted by income tier."""
    income = individual.monthly_income or 0
    score = EMPLOYMENT_BASE.get(individual.employment_status, 0.5)

    if income >= 20000:
        score += 0.1
    elif income >= 10000:
        score += 0.05
    elif income < 3000:
        score -= 0.2

    return _clamp(score)


def monthly_debt(bureau_data: CreditBureauData | None) -> float | None:
    """Sum of monthly payments on open accounts, or None if none are reported."""
    if bureau_data is None:
        return None
    open_accounts = [a for a in bureau_data.credit_accounts if a.status == AccountStatus.OPEN]
    if not open_accounts:
        return None
    return sum(a.monthly_payment for a in open_accounts)


def debt_to_income_score(monthly_income: float, debt: float | None) -> float:
    """Band the debt-to-income ratio; unknown debt assumes 30% of income."""
    if monthly_income == 0:
        return 0.3

    if debt is None:
        debt = monthly_income * ASSUMED_DTI
    dti = debt / monthly_income

    if dti <= 0.2:
        return 1.0
    if dti <= 0.36:
        return 0.8
    if dti <= 0.5:
        return 0.6
    if dti <= 0.7:
        return 0.4
    return 0.2


def alternative_data_score(points: Sequence[AlternativeDataPoint]) -> float:
    """Source-weighted, confidence-adjusted blend of alternative data scores."""
    if not points:
        return 0.5

    weighted = 0.0
    total_weight = 0.0
    for point in points:
        weight = ALTERNATIVE_DATA_WEIGHTS.get(point.source, 0.1)
        weighted += point.score * weight * point.confidence
        total_weight += weight

    return weighted / total_weight if total_weight > 0 else 0.5


def individual_factors(
    individual: Individual,
    bureau_data: CreditBureauData | None,
    alternative_data: Sequence[AlternativeDataPoint] | None,
) -> list[AssessmentFactor]:
    """Build the ordered factor list for an individual."""
    history = bureau_data.payment_history if bureau_data else []
    accounts = bureau_data.credit_accounts if bureau_data else []

    payment = payment_history_score(history)
    utilization = credit_utilization_score(accounts)
    employment = employment_stability_score(individual)

    debt = monthly_debt(bureau_data)
    dti = debt_to_income_score(individual.monthly_income or 0, debt)

    factors = [
        AssessmentFactor(
            category="Payment History",
            weight=INDIVIDUAL_WEIGHTS["payment_history"],
            score=payment,
            impact=_impact(payment, 0.7, 0.3),
            description="Track record of on-time payments and credit management",
            data_source=DataSource.CREDIT_BUREAU,
        ),
        AssessmentFactor(
            category="Credit Utilization",
            weight=INDIVIDUAL_WEIGHTS["credit_utilization"],
            score=utilization,
            impact=_impact(utilization, 0.7, 0.3),
            description="Percentage of available credit currently being used",
            data_source=DataSource.CREDIT_BUREAU,
        ),
        AssessmentFactor(
            category="Employment Stability",
            weight=INDIVIDUAL_WEIGHTS["employment_stability"],
            score=employment,
            impact=_impact(employment, 0.7),
            description="Job stability and income consistency",
        ),
        AssessmentFactor(
            category="Debt-to-Income Ratio",
            weight=INDIVIDUAL_WEIGHTS["debt_to_income"],
            score=dti,
            impact=_impact(dti, 0.6, 0.3),
            description="Monthly debt payments relative to income",
            data_source=DataSource.CREDIT_BUREAU if debt is not None else DataSource.SELF_REPORTED,
        ),
    ]

    if alternative_data:
        alt = alternative_data_score(alternative_data)
        factors.append(
            AssessmentFactor(
                category="Alternative Data",
                weight=INDIVIDUAL_WEIGHTS["alternative_data"],
                score=alt,
                impact=_impact(alt, 0.6),
                description="Non-traditional credit indicators (telecom, utilities, digital behavior)",
                data_source=DataSource.ALTERNATIVE_DATA,
            )
        )

    return factors


# =============================================================================
# Company Factors
# =============================================================================


def financial_performance_score(company: Company) -> float:
    """Revenue and headcount tiers."""
    revenue = company.annual_revenue or 0
    employees = company.employee_count or 0
    score = 0.5

    if revenue >= 10_000_000:
        score += 0.3
    elif revenue >= 5_000_000:
        score += 0.2
    elif revenue >= 1_000_000:
        score += 0.1
    elif revenue < 100_000:
        score -= 0.2

    if employees >= 100:
        score += 0.1
    elif employees >= 50:
        score += 0.05
    elif employees < 5:
        score -= 0.1

    return _clamp(score)


def business_stability_score(company: Company, today: date) -> float:
    """Years-in-business tier adjusted by legal form."""
    years = years_between(company.establishment_date, today)

    if years >= 10:
        score = 0.9
    elif years >= 5:
        score = 0.7
    elif years >= 3:
        score = 0.6
    elif years >= 1:
        score = 0.4
    else:
        score = 0.3

    score += LEGAL_FORM_ADJUSTMENT.get(company.legal_form, 0.0)
    return _clamp(score)


def industry_risk_score(industry_sector: str) -> float:
    return INDUSTRY_RISK.get(industry_sector.lower(), 0.5)


def management_quality_score(company: Company, today: date) -> float:
    """Company age times size, as a proxy for management experience."""
    years = years_between(company.establishment_date, today)
    employees = company.employee_count or 0

    if years >= 5 and employees >= 20:
        return 0.8
    if years >= 3 and employees >= 10:
        return 0.7
    if years >= 1:
        return 0.6
    return 0.5


def company_factors(company: Company, today: date) -> list[AssessmentFactor]:
    """Build the ordered factor list for a company."""
    financial = financial_performance_score(company)
    stability = business_stability_score(company, today)
    industry = industry_risk_score(company.industry_sector)
    management = management_quality_score(company, today)

    return [
        AssessmentFactor(
            category="Financial Performance",
            weight=COMPANY_WEIGHTS["financial_performance"],
            score=financial,
            impact=_impact(financial, 0.7, 0.4),
            description="Revenue growth, profitability, and financial ratios",
        ),
        AssessmentFactor(
            category="Business Stability",
            weight=COMPANY_WEIGHTS["business_stability"],
            score=stability,
            impact=_impact(stability, 0.6),
            description="Years in business, market position, and operational consistency",
        ),
        AssessmentFactor(
            category="Industry Risk",
            weight=COMPANY_WEIGHTS["industry_risk"],
            score=industry,
            impact=_impact(industry, 0.6, 0.4),
            description="Industry-specific risk factors and market conditions",
        ),
        AssessmentFactor(
            category="Management Quality",
            weight=COMPANY_WEIGHTS["management_quality"],
            score=management,
            impact=_impact(management, 0.7),
            description="Leadership experience and corporate governance",
        ),
    ]


# =============================================================================
# Institution Factors
# =============================================================================


def capital_adequacy_score(ratio: float) -> float:
    """Band the capital adequacy ratio against the 8% regulatory minimum."""
    if ratio >= 15:
        return 1.0
    if ratio >= 12:
        return 0.8
    if ratio >= 10:
        return 0.7
    if ratio >= 8:
        return 0.6
    return 0.3


def governance_score(institution: Institution) -> float:
    score = REGULATOR_BASE.get(institution.regulatory_authority, 0.7)
    score += INSTITUTION_TYPE_ADJUSTMENT.get(institution.institution_type, 0.0)
    return _clamp(score)


def asset_quality_score(risk_rating: str) -> float:
    """Proxy asset quality from a letter rating prefix."""
    # Longest prefixes first: "AA" before "A", "BBB" before "BB" before "B"
    if risk_rating.startswith("AA"):
        return 0.9
    if risk_rating.startswith("A"):
        return 0.8
    if risk_rating.startswith("BBB"):
        return 0.7
    if risk_rating.startswith("BB"):
        return 0.6
    if risk_rating.startswith("B"):
        return 0.4
    return 0.6


def institution_factors(institution: Institution) -> list[AssessmentFactor]:
    """Build the ordered factor list for an institution."""
    capital = capital_adequacy_score(institution.capital_adequacy_ratio or 0)
    governance = governance_score(institution)
    assets = asset_quality_score(institution.risk_rating or "")

    return [
        AssessmentFactor(
            category="Capital Adequacy",
            weight=INSTITUTION_WEIGHTS["capital_adequacy"],
            score=capital,
            impact=_impact(capital, 0.8, 0.5),
            description="Capital adequacy ratio and regulatory compliance",
        ),
        AssessmentFactor(
            category="Governance & Compliance",
            weight=INSTITUTION_WEIGHTS["governance"],
            score=governance,
            impact=_impact(governance, 0.8),
            description="Regulatory compliance and corporate governance standards",
        ),
        AssessmentFactor(
            category="Asset Quality",
            weight=INSTITUTION_WEIGHTS["asset_quality"],
            score=assets,
            impact=_impact(assets, 0.7, 0.4),
            description="Quality of loan portfolio and asset management",
        ),
    ]
