"""
Security utilities for password hashing and session token signing.
"""
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional
import base64
import hashlib
import bcrypt
from fastapi.concurrency import run_in_threadpool
from jose import JWTError, jwt
from app.core.config import settings


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    The digest is base64-encoded (44 bytes) so it never contains NUL bytes
    and stays under bcrypt's 72-byte limit.
    """
    digest = hashlib.sha256(password.encode('utf-8')).digest()
    return base64.b64encode(digest)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash using bcrypt's constant-time check."""
    pre_hashed = _pre_hash_password(plain_password)
    try:
        return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password.
    Pre-hashes with SHA256 first to support longer passwords, then bcrypt
    with the configured cost factor.
    """
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(pre_hashed, salt)
    return hashed.decode('utf-8')


@lru_cache(maxsize=1)
def get_dummy_hash() -> str:
    """Hash checked for unknown usernames so every failed login costs the same."""
    return get_password_hash("dummy-password-never-matches")


async def hash_password_async(password: str) -> str:
    """Hash in the thread pool so the event loop keeps serving requests."""
    return await run_in_threadpool(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


def create_session_token(session_id: str, expires_at: datetime) -> str:
    """Sign an opaque session id into the cookie value."""
    to_encode = {"sid": session_id, "exp": expires_at}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_session_token(token: str) -> Optional[str]:
    """Return the session id from a cookie value, or None if invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    session_id = payload.get("sid")
    if not isinstance(session_id, str):
        return None
    return session_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
