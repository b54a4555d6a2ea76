"""
Data Provider Base
==================

Abstract base class for external data providers (credit bureau,
government registries, alternative-data feeds) and a generic JSON over
HTTP provider.

Version: 0.1.0
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from shared.logging import get_logger
from shared.models import Company, Individual, Institution


logger = get_logger(__name__)

T = TypeVar("T")


class ProviderKind(str, Enum):
    """Slot a provider fills in the aggregated external data."""

    CREDIT_BUREAU = "credit_bureau"
    GOVERNMENT = "government"
    ALTERNATIVE = "alternative"


class ProviderError(Exception):
    """A provider could not produce data."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"{provider}: {message}")


def entity_identifiers(entity: Individual | Company | Institution) -> dict[str, Any]:
    """Lookup keys a provider needs to find an entity's records."""
    payload: dict[str, Any] = {"entity_id": entity.id, "entity_type": entity.entity_type}

    if isinstance(entity, Individual):
        payload["national_id"] = entity.national_id
        payload["mobile_number"] = entity.mobile_number
    elif isinstance(entity, Company):
        payload["commercial_registration"] = entity.commercial_registration
    elif isinstance(entity, Institution):
        payload["license_number"] = entity.license_number

    return payload


class ExternalDataProvider(ABC, Generic[T]):
    """
    Abstract base class for external data providers.

    Providers return ``None`` when they have no data for an entity and
    raise ``ProviderError`` when the lookup itself failed.
    """

    kind: ProviderKind

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name used in logs and ``ExternalData.unavailable``."""
        ...

    @abstractmethod
    async def fetch(self, entity: Individual | Company | Institution) -> T | None:
        """Fetch this provider's data for an entity."""
        ...

    async def close(self) -> None:
        """Release held resources."""
        return None


class HTTPDataProvider(ExternalDataProvider[T]):
    """
    Provider backed by a JSON endpoint.

    POSTs the entity identifiers to ``url`` and validates the response
    body with ``adapter``. A 404 means no data for the entity.
    """

    def __init__(
        self,
        name: str,
        kind: ProviderKind,
        url: str,
        adapter: TypeAdapter[T],
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize the HTTP provider.

        Args:
            name: Provider name
            kind: Slot the provider fills
            url: Endpoint receiving the lookup request
            adapter: Validator for the response body
            timeout: HTTP timeout in seconds
            client: Shared client (one is created when omitted)
            headers: Extra request headers (API keys)
        """
        self._name = name
        self.kind = kind
        self.url = url
        self._adapter = adapter
        self._headers = headers or {}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self, entity: Individual | Company | Institution) -> T | None:
        try:
            response = await self._client.post(
                self.url,
                json=entity_identifiers(entity),
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            raise ProviderError(self.name, f"request failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise ProviderError(self.name, f"HTTP {response.status_code}")

        try:
            return self._adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            raise ProviderError(self.name, f"invalid payload: {e}") from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
