"""Caller identity for the chat surfaces.

Tokens are issued by the storefront auth service; this module only validates
the Bearer JWT and turns its claims into an explicit ``CallerIdentity`` that
routers pass into the chat service.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.config import settings
from src.exceptions import ForbiddenException, UnauthorizedException

logger = logging.getLogger(__name__)

ADMIN_ROLES = frozenset({"admin", "superadmin"})
DEFAULT_ROLE = "customer"

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CallerIdentity:
    id: str
    role: str = DEFAULT_ROLE
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def _decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Raises UnauthorizedException on failure."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as exc:
        logger.warning("JWT validation failed: %s", exc)
        raise UnauthorizedException("Invalid or expired token") from exc


async def get_current_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> CallerIdentity:
    """FastAPI dependency resolving the authenticated caller from the Bearer token."""
    if credentials is None:
        raise UnauthorizedException("Authentication required")

    payload = _decode_token(credentials.credentials)
    caller_id = payload.get("sub") or payload.get("userId")
    if not caller_id:
        raise UnauthorizedException("Token is missing required claims")

    caller = CallerIdentity(
        id=str(caller_id),
        role=str(payload.get("role") or DEFAULT_ROLE).lower(),
        email=payload.get("email"),
    )
    request.state.caller = caller
    return caller


async def require_customer(
    caller: CallerIdentity = Depends(get_current_caller),
) -> CallerIdentity:
    if caller.is_admin:
        raise ForbiddenException("Customer only")
    return caller


async def require_admin(
    caller: CallerIdentity = Depends(get_current_caller),
) -> CallerIdentity:
    if not caller.is_admin:
        raise ForbiddenException("Admin only")
    return caller
