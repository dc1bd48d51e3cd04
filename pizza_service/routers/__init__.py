"""
API Routers

Each module exposes an APIRouter (``router``) and the endpoint
descriptions served by /api/docs (``docs``).
"""

from pizza_service.routers import auth, franchise, order, user

ALL_ROUTERS = [auth, user, order, franchise]

__all__ = ["ALL_ROUTERS", "auth", "user", "order", "franchise"]
