"""
SQLAlchemy Database Models

Relational schema for the pizza platform:
- Users and their role grants
- Allow-listed auth tokens
- Menu
- Franchises and their stores
- Diner orders and order items

Version: 1.0.0
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey

from pizza_service.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    """Roles a user can hold."""
    DINER = "diner"
    FRANCHISEE = "franchisee"
    ADMIN = "admin"


RoleColumn = Enum(
    Role,
    name="role",
    values_callable=lambda roles: [r.value for r in roles],
)


class User(Base):
    """A registered account. The password column holds a hash."""
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<User #{self.id} - {self.email}>"


class UserRole(Base):
    """
    A role grant.

    For the franchisee role, object_id is the franchise the user
    administers; for other roles it is 0.
    """
    __tablename__ = "user_role"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(RoleColumn, nullable=False)
    object_id = Column(Integer, nullable=False, default=0, index=True)

    def __repr__(self):
        return f"<UserRole user={self.user_id} {self.role.value} object={self.object_id}>"


class AuthToken(Base):
    """Allow-listed token signature for a logged-in session."""
    __tablename__ = "auth"

    token = Column(String(512), primary_key=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class MenuItem(Base):
    __tablename__ = "menu"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1024), nullable=False, default="")
    image = Column(String(1024), nullable=False, default="")
    price = Column(Float, nullable=False)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.title} - {self.price}>"


class Franchise(Base):
    __tablename__ = "franchise"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)

    def __repr__(self):
        return f"<Franchise #{self.id} - {self.name}>"


class Store(Base):
    __tablename__ = "store"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    franchise_id = Column(Integer, ForeignKey("franchise.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Store #{self.id} - {self.name} (franchise {self.franchise_id})>"


class DinerOrder(Base):
    """
    An order placed by a diner at a store.

    franchise_id and store_id are plain columns so order history
    survives franchise and store deletion.
    """
    __tablename__ = "diner_order"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    diner_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    franchise_id = Column(Integer, nullable=False, index=True)
    store_id = Column(Integer, nullable=False, index=True)
    date = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<DinerOrder #{self.id} - diner {self.diner_id} - store {self.store_id}>"


class OrderItem(Base):
    __tablename__ = "order_item"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("diner_order.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_id = Column(Integer, ForeignKey("menu.id"), nullable=False)
    description = Column(String(1024), nullable=False)
    price = Column(Float, nullable=False)
