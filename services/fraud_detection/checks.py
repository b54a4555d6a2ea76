"""
Fraud Indicator Checks
======================

Independent indicator checks run concurrently by the fraud engine.
Each check reads and writes only its own storage slice and returns
the indicators it found; exceptions propagate to the engine, which
treats a failed check as an empty result.

Checks:
- Velocity: applications per hour/day and requests per IP
- Device: bot user agents and fingerprint reuse
- Geolocation: high-risk countries, VPN/proxy, impossible travel
- Behavioral: typing speed, completion time, copy-paste, timing
- Identity: suspicious names, duplicate national IDs, implausible age
- Financial: implausible income and revenue claims

Version: 0.1.0
"""

import hashlib
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta

from services.fraud_detection.geo import haversine_km, travel_speed_kmh
from services.fraud_detection.models import FraudIndicator, IndicatorType, Severity
from shared.config import FraudSettings
from shared.logging import get_logger
from shared.models import (
    BehavioralPattern,
    Company,
    DeviceFingerprint,
    EmploymentStatus,
    GeolocationData,
    Individual,
    Institution,
)
from shared.storage import FingerprintRecord, FraudStore, LocationRecord


logger = get_logger(__name__)

SUSPICIOUS_USER_AGENTS = ("bot", "crawler", "spider", "scraper")
SUSPICIOUS_NAME_PATTERNS = ("test", "fake", "dummy", "sample")

MAX_TYPING_SPEED = 200
MIN_FORM_COMPLETION_SECONDS = 30
MAX_COPY_PASTE_EVENTS = 10

MAX_MONTHLY_INCOME = 100_000
MAX_REVENUE_PER_EMPLOYEE = 1_000_000

MIN_AGE = 18
MAX_AGE = 100


def fingerprint_hash(fingerprint: DeviceFingerprint) -> str:
    """Stable hash of user agent, resolution, timezone and language."""
    data = "|".join(
        (
            fingerprint.user_agent,
            fingerprint.screen_resolution,
            fingerprint.timezone,
            fingerprint.language,
        )
    )
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def age_on(date_of_birth: date, today: date) -> int:
    """Whole years between a birth date and ``today``."""
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


class IndicatorChecks:
    """The six entity/session checks; network analysis lives in NetworkGraph."""

    def __init__(
        self,
        store: FraudStore,
        settings: FraudSettings,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self.store = store
        self.settings = settings
        self._clock = clock

    # =========================================================================
    # Velocity
    # =========================================================================

    async def check_velocity(self, entity_id: str, ip_address: str | None) -> list[FraudIndicator]:
        """Count recent assessments for the entity and requests from the IP."""
        indicators: list[FraudIndicator] = []
        now = self._clock()

        last_hour = await self.store.count_assessments(entity_id, since=now - timedelta(hours=1))
        last_day = await self.store.count_assessments(entity_id, since=now - timedelta(days=1))

        if last_hour > self.settings.applications_per_hour:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.VELOCITY,
                    severity=Severity.HIGH,
                    description=f"Excessive applications in last hour: {last_hour}",
                    confidence=0.9,
                    evidence={"applications_last_hour": last_hour},
                )
            )

        if last_day > self.settings.applications_per_day:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.VELOCITY,
                    severity=Severity.MEDIUM,
                    description=f"Excessive applications in last day: {last_day}",
                    confidence=0.8,
                    evidence={"applications_last_day": last_day},
                )
            )

        if ip_address:
            ip_last_hour = await self.store.count_requests_from_ip(
                ip_address, since=now - timedelta(hours=1)
            )
            if ip_last_hour > self.settings.ip_requests_per_hour:
                indicators.append(
                    FraudIndicator(
                        entity_id=entity_id,
                        indicator_type=IndicatorType.VELOCITY,
                        severity=Severity.HIGH,
                        description=f"Excessive applications from IP in last hour: {ip_last_hour}",
                        confidence=0.85,
                        evidence={"ip_applications_last_hour": ip_last_hour, "ip_address": ip_address},
                    )
                )

        return indicators

    # =========================================================================
    # Device
    # =========================================================================

    async def check_device(
        self,
        entity_id: str,
        fingerprint: DeviceFingerprint | None,
    ) -> list[FraudIndicator]:
        """Flag automation user agents and fingerprints shared with other entities."""
        if fingerprint is None:
            return []

        indicators: list[FraudIndicator] = []
        user_agent = fingerprint.user_agent.lower()

        if any(agent in user_agent for agent in SUSPICIOUS_USER_AGENTS):
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.DEVICE,
                    severity=Severity.HIGH,
                    description="Suspicious user agent detected",
                    confidence=0.9,
                    evidence={"user_agent": fingerprint.user_agent},
                )
            )

        digest = fingerprint_hash(fingerprint)
        others = await self.store.find_fingerprint_entities(digest, exclude_entity_id=entity_id)
        if others:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.DEVICE,
                    severity=Severity.MEDIUM,
                    description=f"Device fingerprint used by {len(others)} other entities",
                    confidence=0.75,
                    evidence={"fingerprint_hash": digest, "other_entities": len(others)},
                )
            )

        await self.store.save_fingerprint(
            FingerprintRecord(
                entity_id=entity_id,
                fingerprint_hash=digest,
                fingerprint_data=fingerprint.model_dump(),
                created_at=self._clock(),
            )
        )

        return indicators

    # =========================================================================
    # Geolocation
    # =========================================================================

    async def check_geolocation(
        self,
        entity_id: str,
        geolocation: GeolocationData | None,
    ) -> list[FraudIndicator]:
        """Flag risky origins and impossible travel since the last known location."""
        if geolocation is None:
            return []

        indicators: list[FraudIndicator] = []
        now = self._clock()

        if geolocation.country.upper() in self.settings.high_risk_country_list:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.GEOLOCATION,
                    severity=Severity.MEDIUM,
                    description=f"Application from high-risk country: {geolocation.country}",
                    confidence=0.7,
                    evidence={"country": geolocation.country, "city": geolocation.city},
                )
            )

        if geolocation.is_vpn or geolocation.is_proxy:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.GEOLOCATION,
                    severity=Severity.MEDIUM,
                    description="VPN or proxy detected",
                    confidence=0.8,
                    evidence={
                        "is_vpn": geolocation.is_vpn,
                        "is_proxy": geolocation.is_proxy,
                        "isp": geolocation.isp,
                    },
                )
            )

        previous = await self.store.latest_location(
            entity_id,
            since=now - timedelta(hours=self.settings.location_lookback_hours),
        )
        if previous is not None:
            distance = haversine_km(
                previous.latitude,
                previous.longitude,
                geolocation.latitude,
                geolocation.longitude,
            )
            speed = travel_speed_kmh(distance, previous.created_at, now)
            if speed > self.settings.impossible_travel_kmh:
                indicators.append(
                    FraudIndicator(
                        entity_id=entity_id,
                        indicator_type=IndicatorType.GEOLOCATION,
                        severity=Severity.HIGH,
                        description="Impossible travel detected",
                        confidence=0.95,
                        evidence={
                            "distance_km": round(distance, 1),
                            "time_hours": (now - previous.created_at).total_seconds() / 3600,
                            "speed_kmh": speed,
                        },
                    )
                )

        await self.store.save_location(
            LocationRecord(
                entity_id=entity_id,
                ip_address=geolocation.ip_address,
                country=geolocation.country,
                region=geolocation.region,
                city=geolocation.city,
                latitude=geolocation.latitude,
                longitude=geolocation.longitude,
                created_at=now,
            )
        )

        return indicators

    # =========================================================================
    # Behavioral
    # =========================================================================

    async def check_behavioral(
        self,
        entity_id: str,
        behavioral: BehavioralPattern | None,
    ) -> list[FraudIndicator]:
        if behavioral is None:
            return []

        indicators: list[FraudIndicator] = []

        if behavioral.typing_speed > MAX_TYPING_SPEED:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.BEHAVIORAL,
                    severity=Severity.MEDIUM,
                    description="Unusually fast typing speed detected",
                    confidence=0.7,
                    evidence={"typing_speed": behavioral.typing_speed},
                )
            )

        if behavioral.form_completion_time < MIN_FORM_COMPLETION_SECONDS:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.BEHAVIORAL,
                    severity=Severity.MEDIUM,
                    description="Suspiciously fast form completion",
                    confidence=0.75,
                    evidence={"completion_time": behavioral.form_completion_time},
                )
            )

        if behavioral.copy_paste_events > MAX_COPY_PASTE_EVENTS:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.BEHAVIORAL,
                    severity=Severity.LOW,
                    description="Excessive copy-paste activity",
                    confidence=0.6,
                    evidence={"copy_paste_events": behavioral.copy_paste_events},
                )
            )

        if behavioral.suspicious_timing:
            indicators.append(
                FraudIndicator(
                    entity_id=entity_id,
                    indicator_type=IndicatorType.BEHAVIORAL,
                    severity=Severity.MEDIUM,
                    description="Suspicious timing patterns detected",
                    confidence=0.8,
                    evidence={"suspicious_timing": True},
                )
            )

        return indicators

    # =========================================================================
    # Identity
    # =========================================================================

    async def check_identity(self, entity: Individual | Company | Institution) -> list[FraudIndicator]:
        """Individual identity consistency; other entity types yield nothing."""
        if not isinstance(entity, Individual):
            return []

        indicators: list[FraudIndicator] = []

        if entity.first_name and entity.last_name:
            full_name = entity.full_name.lower()
            if any(pattern in full_name for pattern in SUSPICIOUS_NAME_PATTERNS):
                indicators.append(
                    FraudIndicator(
                        entity_id=entity.id,
                        indicator_type=IndicatorType.IDENTITY,
                        severity=Severity.HIGH,
                        description="Suspicious name pattern detected",
                        confidence=0.85,
                        evidence={"full_name": full_name},
                    )
                )

        if entity.national_id:
            duplicates = await self.store.find_entities_by_national_id(
                entity.national_id,
                exclude_entity_id=entity.id,
            )
            if duplicates:
                indicators.append(
                    FraudIndicator(
                        entity_id=entity.id,
                        indicator_type=IndicatorType.IDENTITY,
                        severity=Severity.CRITICAL,
                        description="Duplicate national ID detected",
                        confidence=0.95,
                        evidence={"duplicate_count": len(duplicates)},
                    )
                )
            await self.store.register_identity(entity.id, entity.national_id)

        if entity.date_of_birth:
            age = age_on(entity.date_of_birth, self._clock().date())
            if age < MIN_AGE or age > MAX_AGE:
                indicators.append(
                    FraudIndicator(
                        entity_id=entity.id,
                        indicator_type=IndicatorType.IDENTITY,
                        severity=Severity.MEDIUM,
                        description=f"Suspicious age: {age} years",
                        confidence=0.8,
                        evidence={"age": age, "date_of_birth": entity.date_of_birth.isoformat()},
                    )
                )

        return indicators

    # =========================================================================
    # Financial
    # =========================================================================

    async def check_financial(self, entity: Individual | Company | Institution) -> list[FraudIndicator]:
        indicators: list[FraudIndicator] = []

        if isinstance(entity, Individual):
            income = entity.monthly_income or 0

            if income > MAX_MONTHLY_INCOME:
                indicators.append(
                    FraudIndicator(
                        entity_id=entity.id,
                        indicator_type=IndicatorType.FINANCIAL,
                        severity=Severity.MEDIUM,
                        description="Unusually high reported income",
                        confidence=0.7,
                        evidence={"monthly_income": income},
                    )
                )

            if entity.employment_status == EmploymentStatus.UNEMPLOYED and income > 0:
                indicators.append(
                    FraudIndicator(
                        entity_id=entity.id,
                        indicator_type=IndicatorType.FINANCIAL,
                        severity=Severity.HIGH,
                        description="Income reported despite unemployment status",
                        confidence=0.9,
                        evidence={
                            "employment_status": entity.employment_status.value,
                            "monthly_income": income,
                        },
                    )
                )

        elif isinstance(entity, Company):
            if entity.annual_revenue and entity.employee_count:
                per_employee = entity.annual_revenue / entity.employee_count
                if per_employee > MAX_REVENUE_PER_EMPLOYEE:
                    indicators.append(
                        FraudIndicator(
                            entity_id=entity.id,
                            indicator_type=IndicatorType.FINANCIAL,
                            severity=Severity.MEDIUM,
                            description="Unusually high revenue per employee",
                            confidence=0.75,
                            evidence={
                                "revenue_per_employee": per_employee,
                                "annual_revenue": entity.annual_revenue,
                                "employee_count": entity.employee_count,
                            },
                        )
                    )

        return indicators
