"""
Pizza Factory Service Factory

Provides a single entry point for obtaining the factory client.
The rest of the application stays agnostic about which implementation
is in use.

Usage:
    from pizza_service.services.factory import get_factory_service

    factory = get_factory_service()
    result = await factory.submit_order(diner, order)

Environment Switching:
    - ENV_MODE=development → MockFactoryService (no HTTP calls)
    - ENV_MODE=staging → HttpFactoryService
    - ENV_MODE=production → HttpFactoryService

Version: 1.0.0
"""

import logging
from functools import lru_cache

from pizza_service.core.config import get_settings
from pizza_service.services.factory.base import (
    BaseFactoryService,
    FactoryOrderResult,
)
from pizza_service.services.factory.mock import MockFactoryService
from pizza_service.services.factory.http import HttpFactoryService

logger = logging.getLogger(__name__)


@lru_cache()
def get_factory_service() -> BaseFactoryService:
    """
    Get the configured factory client.

    The instance is cached so every request shares one client.

    Raises:
        ValueError: If not in development mode and FACTORY_API_KEY is unset
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Factory Service: Using MockFactoryService (development mode)")
        return MockFactoryService(
            failure_rate=settings.factory_mock_failure_rate,
            min_latency=settings.factory_mock_min_latency,
            max_latency=settings.factory_mock_max_latency,
        )

    logger.info(
        f"Factory Service: Using HttpFactoryService "
        f"({settings.env_mode.value} mode)"
    )
    return HttpFactoryService()


__all__ = [
    "get_factory_service",
    "BaseFactoryService",
    "FactoryOrderResult",
    "MockFactoryService",
    "HttpFactoryService",
]
