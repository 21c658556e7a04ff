"""
Journeo Backend — Password and Token Tests
============================================

What:  Tests for bcrypt hashing and JWT issue/verification in journeo.security.

What we test:
    ✅ Hash/verify round trip, wrong password, salted hashes
    ✅ Passwords over 72 bytes rejected on hash, never verified
    ✅ Token claims (sub, role, exp) and expiry handling
    ✅ Tampered, foreign-key-signed and subject-less tokens rejected
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from journeo.config import settings
from journeo.exceptions import UnauthenticatedError, ValidationError
from journeo.security import (
    MAX_PASSWORD_BYTES,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_then_verify(self):
        hashed = hash_password("admin123")
        assert hashed != "admin123"
        assert verify_password("admin123", hashed)

    def test_wrong_password(self):
        assert not verify_password("admin124", hash_password("admin123"))

    def test_hashes_are_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_too_long_password_rejected(self):
        with pytest.raises(ValidationError, match="password"):
            hash_password("x" * (MAX_PASSWORD_BYTES + 1))

    def test_max_length_password_accepted(self):
        password = "x" * MAX_PASSWORD_BYTES
        assert verify_password(password, hash_password(password))

    def test_too_long_password_never_verifies(self):
        hashed = hash_password("x" * MAX_PASSWORD_BYTES)
        assert not verify_password("x" * (MAX_PASSWORD_BYTES + 1), hashed)

    def test_malformed_hash_is_false(self):
        assert not verify_password("admin123", "not-a-bcrypt-hash")


class TestAccessTokens:
    def test_claims(self):
        claims = decode_access_token(create_access_token("a@b.c", "ADMIN"))
        assert claims["sub"] == "a@b.c"
        assert claims["role"] == "ADMIN"
        assert claims["exp"] > claims["iat"]

    def test_expired_token(self):
        token = create_access_token("a@b.c", "USER", expires_minutes=-1)
        with pytest.raises(UnauthenticatedError, match="expired"):
            decode_access_token(token)

    def test_tampered_token(self):
        header, _, signature = create_access_token("a@b.c", "USER").split(".")
        forged_claims = create_access_token("evil@b.c", "ADMIN").split(".")[1]
        tampered = f"{header}.{forged_claims}.{signature}"
        with pytest.raises(UnauthenticatedError, match="Invalid"):
            decode_access_token(tampered)

    def test_token_signed_with_other_secret(self):
        token = jwt.encode(
            {"sub": "a@b.c", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "some-other-secret-of-enough-length",
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthenticatedError):
            decode_access_token(token)

    def test_token_without_subject(self):
        token = jwt.encode(
            {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(UnauthenticatedError):
            decode_access_token(token)

    def test_garbage(self):
        with pytest.raises(UnauthenticatedError):
            decode_access_token("not.a.jwt")
