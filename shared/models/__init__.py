"""
Shared Models
=============

Pydantic data contracts shared across the lending services.

Models:
- Entity models (Individual, Company, Institution, Entity union)
- External data (CreditBureauData, AlternativeDataPoint, GovernmentData)
- Application signals (DeviceFingerprint, GeolocationData, BehavioralPattern)
- Audit trail (AuditEntry)
"""

from shared.models.audit import AuditEntry
from shared.models.entity import (
    Company,
    EmploymentStatus,
    Entity,
    EntityType,
    Individual,
    Institution,
    InstitutionType,
    LegalForm,
    RegulatoryAuthority,
    parse_entity,
)
from shared.models.external import (
    AccountStatus,
    AccountType,
    AlternativeDataPoint,
    AlternativeDataSource,
    BehavioralPattern,
    BureauSource,
    CreditAccount,
    CreditBureauData,
    CreditInquiry,
    DeviceFingerprint,
    GeolocationData,
    GovernmentData,
    GovernmentSource,
    PaymentRecord,
    PaymentStatus,
    PublicRecord,
)

__all__ = [
    # Entity
    "Entity",
    "EntityType",
    "Individual",
    "Company",
    "Institution",
    "EmploymentStatus",
    "LegalForm",
    "RegulatoryAuthority",
    "InstitutionType",
    "parse_entity",
    # Credit bureau
    "CreditBureauData",
    "BureauSource",
    "PaymentRecord",
    "PaymentStatus",
    "CreditAccount",
    "AccountType",
    "AccountStatus",
    "PublicRecord",
    "CreditInquiry",
    # Alternative / government
    "AlternativeDataPoint",
    "AlternativeDataSource",
    "GovernmentData",
    "GovernmentSource",
    # Signals
    "DeviceFingerprint",
    "GeolocationData",
    "BehavioralPattern",
    # Audit
    "AuditEntry",
]
