"""
HTTP Pizza Factory Implementation

Production client for the order fulfillment factory.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - FACTORY_URL points at the factory service
    - FACTORY_API_KEY must be set in environment

Protocol:
    POST {FACTORY_URL}/api/order
    Authorization: Bearer {FACTORY_API_KEY}
    {"diner": {...}, "order": {...}}
    -> {"jwt": "...", "reportUrl": "..."}

Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

from pizza_service.core.config import get_settings
from pizza_service.services.factory.base import (
    BaseFactoryService,
    FactoryOrderResult,
)

logger = logging.getLogger(__name__)


class HttpFactoryService(BaseFactoryService):
    """
    Factory client speaking the factory's JSON API over httpx.

    Example:
        >>> service = HttpFactoryService()
        >>> result = await service.submit_order(
        ...     diner={"id": 4, "name": "pizza diner", "email": "d@jwt.com"},
        ...     order={"id": 1, "franchiseId": 1, "storeId": 1, "items": [...]},
        ... )
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Raises:
            ValueError: If no factory API key is configured
        """
        settings = get_settings()

        self._base_url = (base_url or settings.factory_url).rstrip("/")
        self._api_key = api_key or settings.factory_api_key
        self._timeout = timeout or settings.factory_timeout_seconds
        self._transport = transport

        if not self._api_key:
            raise ValueError(
                "FACTORY_API_KEY is required outside development mode. "
                "Set it in your .env file or environment variables."
            )

        logger.info(f"HttpFactoryService initialized ({self._base_url})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "http"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def submit_order(
        self,
        diner: dict[str, Any],
        order: dict[str, Any],
    ) -> FactoryOrderResult:
        start_time = datetime.now()

        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/order",
                    json={"diner": diner, "order": order},
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Factory request failed: {e}")
            return FactoryOrderResult(
                success=False,
                error_message=f"Factory unreachable: {e}",
                response_time_ms=self._elapsed_ms(start_time),
            )

        elapsed = self._elapsed_ms(start_time)

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_success:
            logger.info(f"Factory fulfilled order {order.get('id')} in {elapsed:.0f}ms")
            return FactoryOrderResult(
                success=True,
                jwt=body.get("jwt"),
                report_url=body.get("reportUrl"),
                response_time_ms=elapsed,
            )

        logger.warning(
            f"Factory rejected order {order.get('id')}: "
            f"{response.status_code} {body.get('message', '')}"
        )
        return FactoryOrderResult(
            success=False,
            report_url=body.get("reportUrl"),
            error_message=body.get("message") or f"HTTP {response.status_code}",
            response_time_ms=elapsed,
        )

    async def health_check(self) -> bool:
        """Check that the factory answers HTTP at all."""
        try:
            async with self._client() as client:
                response = await client.get("/")
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.error(f"Factory health check failed: {e}")
            return False

    @staticmethod
    def _elapsed_ms(start_time: datetime) -> float:
        return (datetime.now() - start_time).total_seconds() * 1000
