"""
Pydantic Schemas for Request/Response Validation

JSON bodies use camelCase keys (franchiseId, storeId, menuId, ...);
the models are populated by snake_case attribute name internally.

Version: 1.0.0
"""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# USERS & AUTH
# =============================================================================

class RoleClaim(CamelModel):
    """A role held by a user; object_id is set for franchisee grants."""
    role: str
    object_id: Optional[int] = None


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    roles: List[RoleClaim] = Field(default_factory=list)


class AuthResponse(BaseModel):
    """Response after register, login or profile update."""
    user: UserResponse
    token: str


class RegisterRequest(BaseModel):
    """Registration payload. Missing fields are reported as 400."""
    name: Optional[str] = Field(None, examples=["pizza diner"])
    email: Optional[str] = Field(None, examples=["d@jwt.com"])
    password: Optional[str] = Field(None, examples=["diner"])


class LoginRequest(BaseModel):
    email: Optional[str] = Field(None, examples=["a@jwt.com"])
    password: Optional[str] = Field(None, examples=["admin"])


class UserUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=1)


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# MENU
# =============================================================================

class MenuItemCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255, examples=["Student"])
    description: str = Field(default="", max_length=1024, examples=["No topping, no sauce, just carbs"])
    image: str = Field(default="", max_length=1024, examples=["pizza9.png"])
    price: float = Field(..., ge=0, examples=[0.0001])


class MenuItemResponse(CamelModel):
    id: int
    title: str
    description: str
    image: str
    price: float


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemCreate(CamelModel):
    """Single item in an order."""
    menu_id: int = Field(..., examples=[1])
    description: str = Field(..., min_length=1, max_length=1024, examples=["Veggie"])
    price: float = Field(..., ge=0, examples=[0.05])


class OrderCreate(CamelModel):
    """Request schema for placing a new order."""
    franchise_id: int = Field(..., examples=[1])
    store_id: int = Field(..., examples=[1])
    items: List[OrderItemCreate] = Field(..., min_length=1)


class OrderItemResponse(CamelModel):
    id: int
    menu_id: int
    description: str
    price: float


class OrderResponse(CamelModel):
    id: int
    franchise_id: int
    store_id: int
    date: datetime
    items: List[OrderItemResponse] = Field(default_factory=list)


class OrderHistoryResponse(CamelModel):
    diner_id: int
    orders: List[OrderResponse]
    page: int


class OrderCreateResponse(CamelModel):
    """Response after an order has been fulfilled by the factory."""
    order: OrderResponse
    follow_link_to_end_chaos: Optional[str] = None
    jwt: Optional[str] = None


# =============================================================================
# FRANCHISES & STORES
# =============================================================================

class FranchiseAdminRef(BaseModel):
    email: str = Field(..., examples=["f@jwt.com"])


class FranchiseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["pizzaPocket"])
    admins: List[FranchiseAdminRef] = Field(default_factory=list)


class FranchiseAdmin(CamelModel):
    id: int
    name: str
    email: str


class StoreResponse(CamelModel):
    id: int
    name: str
    total_revenue: Optional[float] = None


class FranchiseResponse(CamelModel):
    """
    A franchise. admins and store revenue are only filled in for
    callers allowed to see them.
    """
    id: int
    name: str
    admins: Optional[List[FranchiseAdmin]] = None
    stores: List[StoreResponse] = Field(default_factory=list)


class FranchiseListResponse(BaseModel):
    franchises: List[FranchiseResponse]
    more: bool


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["SLC"])


class StoreCreateResponse(CamelModel):
    id: int
    franchise_id: int
    name: str


# =============================================================================
# SERVICE
# =============================================================================

class EndpointDoc(CamelModel):
    method: str
    path: str
    requires_auth: bool
    description: str


class DocsResponse(BaseModel):
    version: str
    endpoints: List[EndpointDoc]
    config: dict[str, str]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    factory_service: str
    timestamp: datetime
