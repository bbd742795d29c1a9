"""Request-scoped auth dependencies shared by the routers."""

from fastapi import Depends, Header

from .errors import AuthError
from .services.auth_service import TokenService, get_token_service
from .services.user_service import UserService, get_user_service


def _extract_token(authorization: str) -> str:
    if not authorization:
        raise AuthError()
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError()
    return token.strip()


async def get_current_email(
    authorization: str = Header(default=""),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Email claim of a valid bearer token (401 when absent, 403 when invalid)."""

    claims = tokens.verify_token(_extract_token(authorization))
    return claims["email"].strip().lower()


async def require_admin(
    email: str = Depends(get_current_email),
    users: UserService = Depends(get_user_service),
) -> str:
    await users.require_admin(email)
    return email


__all__ = ["get_current_email", "require_admin"]
