from __future__ import annotations

import logging
import time
from typing import Any, Dict

import jwt

from ..config import get_settings
from ..errors import AuthError, DependencyError, ForbiddenError, ValidationError

LOGGER = logging.getLogger("uvicorn.error")


def normalize_email(raw: Any) -> str:
    text = raw.strip().lower() if isinstance(raw, str) else ""
    if not text or "@" not in text or text.startswith("@") or text.endswith("@"):
        raise ValidationError("valid email required")
    return text


class TokenService:
    """Issues and verifies HS256 session tokens carrying the account email."""

    def __init__(self, *, secret: str, ttl_seconds: int) -> None:
        if not secret:
            raise DependencyError("token signing is not configured")
        self._secret = secret
        self._ttl = ttl_seconds

    def issue_token(self, email: str) -> str:
        now = int(time.time())
        payload = {
            "email": normalize_email(email),
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm="HS256")

    def verify_token(self, token: str) -> Dict[str, Any]:
        """Return decoded claims or raise ``AuthError``/``ForbiddenError``."""

        if not token:
            raise AuthError()
        try:
            claims = jwt.decode(token, self._secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise ForbiddenError("token expired") from None
        except jwt.InvalidTokenError:
            raise ForbiddenError() from None
        email = claims.get("email")
        if not isinstance(email, str) or not email.strip():
            raise ForbiddenError()
        return claims


def get_token_service() -> TokenService:
    settings = get_settings()
    if not settings.jwt_secret:
        LOGGER.error("JWT_SECRET is not set; refusing to issue or verify tokens")
    return TokenService(secret=settings.jwt_secret, ttl_seconds=settings.jwt_ttl_seconds)


__all__ = ["TokenService", "get_token_service", "normalize_email"]
