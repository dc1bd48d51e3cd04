"""
Pizza Factory Service Abstract Base Class

Defines the interface contract for order fulfillment. Both
MockFactoryService and HttpFactoryService implement these methods,
ensuring consistent behavior regardless of which client is active.

Design Pattern: Strategy Pattern
    - Allows runtime switching between the mock and the real factory
    - Facilitates testing with mock implementations

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class FactoryOrderResult:
    """
    Standardized result from submitting an order to the factory.

    Attributes:
        success: Whether the factory accepted the order
        jwt: Signed fulfillment receipt returned by the factory
        report_url: Link the factory returns for tracking or problem reports
        error_message: Error description if fulfillment failed
        response_time_ms: Time taken by the factory call
    """
    success: bool
    jwt: Optional[str] = None
    report_url: Optional[str] = None
    error_message: Optional[str] = None
    response_time_ms: float = 0.0


class BaseFactoryService(ABC):
    """Abstract base class for pizza factory clients."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of the factory provider (e.g. "mock", "http")."""
        pass

    @abstractmethod
    async def submit_order(
        self,
        diner: dict[str, Any],
        order: dict[str, Any],
    ) -> FactoryOrderResult:
        """
        Ask the factory to make and deliver an order.

        Args:
            diner: {"id", "name", "email"} of the ordering diner
            order: The persisted order in its JSON (camelCase) form

        Returns:
            FactoryOrderResult: Standardized result object
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the factory.

        Returns:
            bool: True if the factory is reachable
        """
        pass
