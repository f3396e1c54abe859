"""JWT auth utilities and the owner-identity providers used by the services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from psipro.config import Settings, get_settings
from psipro.errors import AuthError


def create_access_token(
    owner_id: str,
    expires_minutes: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> str:
    settings = settings or get_settings()
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {
        "sub": owner_id,
        "type": "access",
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Optional[Settings] = None) -> dict | None:
    """Decode and validate a JWT. Returns claims dict or None on any error."""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


class AuthProvider(ABC):
    """Resolves the practitioner that owns the current request."""

    @abstractmethod
    def current_owner_id(self) -> str:
        """Return the owner id.

        Raises:
            AuthError: If there is no valid session
        """
        pass


class TokenAuthProvider(AuthProvider):
    """Owner identity taken from a bearer access token.

    Tokens are checked against *settings* (secret and algorithm), falling
    back to the process-wide settings.
    """

    def __init__(self, token: Optional[str], settings: Optional[Settings] = None):
        self.token = token
        self.settings = settings

    def current_owner_id(self) -> str:
        if not self.token:
            raise AuthError("Not authenticated")
        claims = decode_token(self.token, self.settings)
        if not claims or claims.get("type") != "access" or not claims.get("sub"):
            raise AuthError("Session expired or invalid, please log in again")
        return str(claims["sub"])


class StaticAuthProvider(AuthProvider):
    """Fixed owner identity, for trusted local callers such as the CLI."""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id

    def current_owner_id(self) -> str:
        if not self.owner_id:
            raise AuthError("Not authenticated")
        return self.owner_id
