"""
Data Providers
==============

Boundary to external data sources: credit bureaus, government
registries and alternative-data feeds.

Usage:
    from services.data_providers import DataAggregationService

    service = DataAggregationService.from_settings()
    external = await service.aggregate(entity)
    if "credit_bureau" in external.unavailable:
        ...
"""

from services.data_providers.aggregator import DataAggregationService, ExternalData
from services.data_providers.base import (
    ExternalDataProvider,
    HTTPDataProvider,
    ProviderError,
    ProviderKind,
    entity_identifiers,
)

__all__ = [
    "DataAggregationService",
    "ExternalData",
    "ExternalDataProvider",
    "HTTPDataProvider",
    "ProviderError",
    "ProviderKind",
    "entity_identifiers",
]
