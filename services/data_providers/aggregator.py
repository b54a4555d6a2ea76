"""
Data Aggregation Service
========================

Concurrent fetch from configured external data providers. Every
provider call gets a timeout and bounded retries; a provider that still
fails is reported as unavailable and its data is omitted.

Version: 0.1.0
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from pydantic import TypeAdapter
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from services.data_providers.base import (
    ExternalDataProvider,
    HTTPDataProvider,
    ProviderError,
    ProviderKind,
)
from shared.config import ProviderSettings, get_settings
from shared.logging import get_logger
from shared.models import (
    AlternativeDataPoint,
    Company,
    CreditBureauData,
    GovernmentData,
    Individual,
    Institution,
)


logger = get_logger(__name__)


@dataclass
class ExternalData:
    """Everything the providers returned for one entity."""

    credit_bureau: CreditBureauData | None = None
    alternative: list[AlternativeDataPoint] | None = None
    government: GovernmentData | None = None
    unavailable: list[str] = field(default_factory=list)


class DataAggregationService:
    """
    Fans out to providers and assembles ``ExternalData``.

    Alternative-data points from several providers are concatenated.
    ``alternative`` stays ``None`` when no alternative provider returned
    data, so the scoring cache key can tell "no feed" from "empty feed".
    """

    def __init__(
        self,
        providers: list[ExternalDataProvider[Any]] | None = None,
        settings: ProviderSettings | None = None,
    ) -> None:
        self.providers = providers or []
        self.settings = settings or get_settings().providers

    @classmethod
    def from_settings(cls, settings: ProviderSettings | None = None) -> "DataAggregationService":
        """Build HTTP providers for every configured endpoint."""
        settings = settings or get_settings().providers
        providers: list[ExternalDataProvider[Any]] = []

        if settings.credit_bureau_url:
            providers.append(
                HTTPDataProvider(
                    "credit_bureau",
                    ProviderKind.CREDIT_BUREAU,
                    settings.credit_bureau_url,
                    TypeAdapter(CreditBureauData),
                    timeout=settings.timeout_seconds,
                )
            )
        if settings.government_url:
            providers.append(
                HTTPDataProvider(
                    "government",
                    ProviderKind.GOVERNMENT,
                    settings.government_url,
                    TypeAdapter(GovernmentData),
                    timeout=settings.timeout_seconds,
                )
            )
        if settings.alternative_data_url:
            providers.append(
                HTTPDataProvider(
                    "alternative_data",
                    ProviderKind.ALTERNATIVE,
                    settings.alternative_data_url,
                    TypeAdapter(list[AlternativeDataPoint]),
                    timeout=settings.timeout_seconds,
                )
            )

        return cls(providers, settings)

    async def aggregate(self, entity: Individual | Company | Institution) -> ExternalData:
        """
        Fetch all provider data for an entity.

        Never raises for provider failures; failed providers are listed
        in ``ExternalData.unavailable``.
        """
        results = await asyncio.gather(
            *(self._fetch(provider, entity) for provider in self.providers),
            return_exceptions=True,
        )

        data = ExternalData()
        for provider, result in zip(self.providers, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "provider_unavailable",
                    provider=provider.name,
                    entity_id=entity.id,
                    error=str(result) or type(result).__name__,
                )
                data.unavailable.append(provider.name)
                continue
            if result is None:
                continue

            if provider.kind == ProviderKind.CREDIT_BUREAU:
                data.credit_bureau = result
            elif provider.kind == ProviderKind.GOVERNMENT:
                data.government = result
            elif provider.kind == ProviderKind.ALTERNATIVE:
                data.alternative = (data.alternative or []) + list(result)

        logger.debug(
            "external_data_aggregated",
            entity_id=entity.id,
            has_bureau=data.credit_bureau is not None,
            has_government=data.government is not None,
            alternative_points=len(data.alternative or []),
            unavailable=data.unavailable,
        )
        return data

    async def _fetch(
        self,
        provider: ExternalDataProvider[Any],
        entity: Individual | Company | Institution,
    ) -> Any:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type((ProviderError, asyncio.TimeoutError)),
            stop=stop_after_attempt(self.settings.max_retries),
            wait=wait_exponential(multiplier=self.settings.retry_wait_seconds, max=5),
            before_sleep=lambda retry_state: logger.warning(
                "provider_retry",
                provider=provider.name,
                attempt=retry_state.attempt_number,
            ),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await asyncio.wait_for(
                    provider.fetch(entity),
                    timeout=self.settings.timeout_seconds,
                )
        return None

    async def close(self) -> None:
        for provider in self.providers:
            await provider.close()
