"""
                        Services Module

External integrations behind the Mock (development) / Real (production)
pattern.

Services:
    - factory: pizza factory order fulfillment
"""

from pizza_service.services.factory import get_factory_service

__all__ = ["get_factory_service"]
