"""
Security Primitives

Password hashing and JWT signing/verification.

Tokens carry the public user claims (id, name, email, roles). A token is
only honoured while its signature is allow-listed in the auth table, so
logging out revokes it even though the JWT itself has no expiry by
default.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.context import CryptContext

from pizza_service.core.config import get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


def create_token(claims: dict[str, Any]) -> str:
    """
    Sign the given user claims into a JWT.

    Each token gets a fresh ``jti`` so that two logins by the same user
    never produce the same signature.

    Args:
        claims: Public user fields (id, name, email, roles)

    Returns:
        Encoded JWT (header.payload.signature)
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    to_encode = dict(claims)
    to_encode["iat"] = now
    to_encode["jti"] = secrets.token_urlsafe(16)
    if settings.jwt_expire_minutes:
        to_encode["exp"] = now + timedelta(minutes=settings.jwt_expire_minutes)

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT.

    Raises:
        jwt.InvalidTokenError: If the signature or claims are invalid
    """
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def token_signature(token: str) -> str:
    """Return the signature segment of a JWT, or "" if malformed."""
    parts = token.split(".")
    if len(parts) != 3:
        return ""
    return parts[2]
