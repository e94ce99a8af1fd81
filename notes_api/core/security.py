"""Security helpers (password hashing and signed access tokens)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from argon2 import PasswordHasher, exceptions as argon_exc
from jose import jwt

_ph = PasswordHasher()
ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    """True when the hash was produced with weaker parameters than the current ones."""
    return _ph.check_needs_rehash(stored_hash)


def create_access_token(account_id: int, email: str, secret: str, ttl: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {"sub": str(account_id), "email": email, "iat": now, "exp": now + ttl}
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> dict:
    """Validate signature and expiry; raises jose.JWTError (incl. ExpiredSignatureError)."""
    return jwt.decode(token, secret, algorithms=[ALGORITHM])
