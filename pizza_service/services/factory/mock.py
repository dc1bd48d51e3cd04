"""
Mock Pizza Factory Implementation

Simulates the order fulfillment factory without making HTTP calls.
Used in development mode (ENV_MODE=development) to:
    - Test the complete order flow locally
    - Develop without factory credentials
    - Exercise the failure path on demand

Behavior:
    - Simulates configurable response times
    - Fails a configurable fraction of orders with a report URL
    - Returns a locally signed JWT receipt

Version: 1.0.0
"""

import asyncio
import random
import uuid
import logging
from datetime import datetime, timezone
from typing import Any

import jwt

from pizza_service.services.factory.base import (
    BaseFactoryService,
    FactoryOrderResult,
)

logger = logging.getLogger(__name__)


class MockFactoryService(BaseFactoryService):
    """
    Mock implementation of the factory client.

    Attributes:
        failure_rate: Probability of a simulated fulfillment failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds

    Example:
        >>> service = MockFactoryService(failure_rate=1.0)
        >>> result = await service.submit_order(diner, order)
        >>> print(result.success)
        False
    """

    REPORT_URL = "http://localhost/mock-factory/report"

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
        signing_key: str = "mock-factory-receipt-signing-key-0001",
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max(max_latency, min_latency)
        self._signing_key = signing_key

        logger.info(
            f"MockFactoryService initialized "
            f"(failure_rate={failure_rate:.0%}, "
            f"latency={self.min_latency}-{self.max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> float:
        """Sleep for a random latency and return it in milliseconds."""
        latency = random.uniform(self.min_latency, self.max_latency)
        if latency > 0:
            await asyncio.sleep(latency)
        return latency * 1000

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def submit_order(
        self,
        diner: dict[str, Any],
        order: dict[str, Any],
    ) -> FactoryOrderResult:
        latency_ms = await self._simulate_latency()
        report_id = uuid.uuid4().hex[:12]

        if self._should_fail():
            logger.debug(f"Mock: Factory rejected order {order.get('id')}")
            return FactoryOrderResult(
                success=False,
                report_url=f"{self.REPORT_URL}/{report_id}",
                error_message="Mock factory failure",
                response_time_ms=latency_ms,
            )

        receipt = jwt.encode(
            {
                "vendor": {"id": "mock", "name": "Mock Factory"},
                "diner": diner,
                "order": order,
                "iat": datetime.now(timezone.utc),
            },
            self._signing_key,
            algorithm="HS256",
        )

        logger.info(f"Mock: Factory fulfilled order {order.get('id')}")

        return FactoryOrderResult(
            success=True,
            jwt=receipt,
            report_url=f"{self.REPORT_URL}/{report_id}",
            response_time_ms=latency_ms,
        )

    async def health_check(self) -> bool:
        """Mock health check always returns True."""
        return True
