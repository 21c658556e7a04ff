"""
Journeo Backend — Password Hashing and Token Signing
======================================================

What:  The two cryptographic primitives of authentication: bcrypt password
       hashes and HS256-signed JWT access tokens.
How:   bcrypt (cost from BCRYPT_ROUNDS) for passwords; PyJWT for tokens whose
       subject is the user's email. Verification uses bcrypt.checkpw, which
       compares in constant time.
Who:   AuthService (login), UserService (create/update), route dependencies
       (token decoding).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from journeo.config import settings
from journeo.exceptions import UnauthenticatedError, ValidationError

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh salt."""
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            message=f"must be at most {MAX_PASSWORD_BYTES} bytes",
            field="password",
        )
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(raw, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plaintext password against a stored hash.

    Returns False (never raises) for over-long input or a malformed hash so
    that every failure looks the same to the caller.
    """
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_access_token(
    email: str,
    role: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """Issue a signed token binding the caller's email (subject) and role."""
    now = datetime.now(timezone.utc)
    lifetime = expires_minutes if expires_minutes is not None else settings.jwt_expiration_minutes
    payload = {
        "sub": email,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=lifetime),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        UnauthenticatedError: expired, tampered or otherwise unreadable token.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError(message="Token has expired") from None
    except jwt.InvalidTokenError as exc:
        raise UnauthenticatedError(
            message="Invalid authentication token",
            context={"reason": type(exc).__name__},
        ) from None
    return claims
