"""
Signing utilities for the Tarefas cookies.

Session IDs and OAuth state values travel to the browser as HS256 JWTs
signed with the session secret, so a client can hold them but not
forge or alter them. Uses python-jose for JWT.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt


ALGORITHM = "HS256"


def generate_token() -> str:
    """Random URL-safe token for session IDs and OAuth state."""
    return secrets.token_urlsafe(32)


def sign_value(
    data: dict[str, Any],
    secret: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed token carrying ``data``.

    Args:
        data: Dictionary of claims to encode in the token
        secret: Signing key
        expires_delta: Optional lifetime; tokens without one never expire

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})

    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def read_signed_value(token: str, secret: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a token created by ``sign_value``.

    Args:
        token: The JWT token string to decode
        secret: Signing key

    Returns:
        Decoded payload if valid, None if invalid, tampered or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
