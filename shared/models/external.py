"""
External Data Models
====================

Typed records produced by collaborators outside the engines: credit
bureau reports, government records, alternative-data feeds and the
device/network/behavior signals captured at application time.

Version: 0.1.0
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# Credit Bureau
# =============================================================================


class BureauSource(str, Enum):
    """Credit bureaus reports can originate from."""

    SIMAH = "simah"
    NCCGR = "nccgr"
    OTHER = "other"


class PaymentStatus(str, Enum):
    """Status of a single reported payment."""

    CURRENT = "current"
    LATE = "late"
    DEFAULT = "default"
    CHARGED_OFF = "charged_off"


class AccountType(str, Enum):
    """Credit account products."""

    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    MORTGAGE = "mortgage"
    LINE_OF_CREDIT = "line_of_credit"


class AccountStatus(str, Enum):
    """Credit account lifecycle status."""

    OPEN = "open"
    CLOSED = "closed"
    DEFAULT = "default"


class PaymentRecord(BaseModel):
    """One payment on a credit account, oldest records first in a history."""

    account_id: str
    payment_date: date
    amount_due: float = Field(default=0, ge=0)
    amount_paid: float = Field(default=0, ge=0)
    days_late: int = Field(default=0, ge=0)
    status: PaymentStatus = PaymentStatus.CURRENT


class CreditAccount(BaseModel):
    """A credit account reported by the bureau."""

    account_id: str
    account_type: AccountType
    balance: float = Field(default=0, ge=0)
    credit_limit: float = Field(default=0, ge=0)
    monthly_payment: float = Field(default=0, ge=0)
    open_date: date | None = None
    status: AccountStatus = AccountStatus.OPEN


class PublicRecord(BaseModel):
    """Court or registry record (bankruptcy, judgment, lien)."""

    record_type: str
    filing_date: date
    amount: float | None = None
    status: str = "active"


class CreditInquiry(BaseModel):
    """A lender inquiry against the credit file."""

    inquirer: str
    inquiry_date: date
    hard: bool = False


class CreditBureauData(BaseModel):
    """Credit bureau report consumed by the scoring engine."""

    source: BureauSource = BureauSource.OTHER
    payment_history: list[PaymentRecord] = Field(default_factory=list)
    credit_accounts: list[CreditAccount] = Field(default_factory=list)
    public_records: list[PublicRecord] = Field(default_factory=list)
    inquiries: list[CreditInquiry] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# Alternative and Government Data
# =============================================================================


class AlternativeDataSource(str, Enum):
    """Non-traditional credit data sources."""

    TELECOM = "telecom"
    UTILITIES = "utilities"
    DIGITAL_FOOTPRINT = "digital_footprint"
    SOCIAL_MEDIA = "social_media"
    ECOMMERCE = "ecommerce"


class AlternativeDataPoint(BaseModel):
    """A scored signal from an alternative-data provider."""

    source: AlternativeDataSource
    provider: str = ""
    data_type: str = "payment_behavior"
    score: float = Field(..., ge=0, le=1)
    confidence: float = Field(..., ge=0, le=1)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))
    details: dict[str, Any] = Field(default_factory=dict)


class GovernmentSource(str, Enum):
    """Government registries."""

    SOCIAL_INSURANCE = "social_insurance"
    TAX_AUTHORITY = "tax_authority"
    COMMERCE_REGISTRY = "commerce_registry"


class GovernmentData(BaseModel):
    """Employment, tax or registration record from a government registry."""

    source: GovernmentSource
    employment_verified: bool | None = None
    verified_monthly_salary: float | None = None
    records: list[dict[str, Any]] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# Application-time Signals
# =============================================================================


class DeviceFingerprint(BaseModel):
    """Browser/device characteristics captured with an application."""

    user_agent: str
    screen_resolution: str = ""
    timezone: str = ""
    language: str = ""
    platform: str = ""


class GeolocationData(BaseModel):
    """IP geolocation resolved for an application."""

    ip_address: str
    country: str
    region: str = ""
    city: str = ""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    isp: str = ""
    is_proxy: bool = False
    is_vpn: bool = False


class BehavioralPattern(BaseModel):
    """Form-interaction telemetry captured during an application."""

    typing_speed: float = 0
    form_completion_time: float = Field(default=0, description="Seconds")
    copy_paste_events: int = 0
    tab_switches: int = 0
    suspicious_timing: bool = False
