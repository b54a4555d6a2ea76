"""
Lending Risk Shared Library
===========================

Common utilities, configurations, and abstractions shared across all
lending risk services.

Modules:
    - config: Configuration management with Pydantic Settings
    - logging: Structured logging with structlog
    - models: Shared Pydantic models (entities, external data, audit)
    - storage: Fraud store interface and in-memory implementation

Version: 0.1.0
"""

__version__ = "0.1.0"
__author__ = "Lending Risk Team"

from shared.config import settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "settings",
    "get_logger",
    "setup_logging",
    "__version__",
]
