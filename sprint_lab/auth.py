"""
Authentication module for Sprint Lab

Two mechanisms:
- Session tokens: HS256 JWTs issued at login (distributors and admin)
- Admin API key: X-Admin-Key header for server-to-server admin routes
  (official sales, user listing, partner sync)

Configuration (environment variables):
- SESSION_SECRET: HMAC secret for session tokens (required to issue tokens)
- SESSION_TTL_HOURS: Session lifetime (default: 72)
- ADMIN_API_KEY: Shared key for admin routes (key access disabled if unset)
"""

import hmac
import os
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException, Security, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError

from .models import ROLE_ADMIN, User

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI
security = HTTPBearer(
    scheme_name="HTTPBearer",
    description="Session token returned by /v1/auth/login",
    auto_error=False,
)

SESSION_ALGORITHM = "HS256"
SESSION_ISSUER = "sprint-lab"


def _session_secret() -> str:
    secret = os.getenv("SESSION_SECRET", "")
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro de configuração do servidor: SESSION_SECRET não definida.",
        )
    return secret


def _session_ttl() -> timedelta:
    return timedelta(hours=float(os.getenv("SESSION_TTL_HOURS", "72")))


class AuthError(HTTPException):
    """Custom exception for authentication errors"""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_session_token(user: User) -> str:
    """
    Issue a signed session token for an authenticated user

    Claims: sub (user id), name, role, iss, iat, exp
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "name": user.name,
        "role": user.role,
        "iss": SESSION_ISSUER,
        "iat": now,
        "exp": now + _session_ttl(),
    }
    return jwt.encode(payload, _session_secret(), algorithm=SESSION_ALGORITHM)


def verify_session_token(token: str) -> User:
    """
    Verify a session token

    Returns:
        User rebuilt from the token claims (id, name, role)

    Raises:
        AuthError: If token is invalid, expired, or signature verification fails
    """
    try:
        data = jwt.decode(
            token,
            _session_secret(),
            algorithms=[SESSION_ALGORITHM],
            issuer=SESSION_ISSUER,
            options={"require": ["sub", "exp"]},
        )
    except ExpiredSignatureError:
        raise AuthError("Sessão expirada")
    except InvalidTokenError as e:
        raise AuthError(f"Token inválido: {str(e)}")

    return User(id=data["sub"], name=data.get("name", ""), role=data.get("role", ""))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> User:
    """
    FastAPI dependency: user from the session token

    Usage:
        @app.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"user": user.id}
    """
    if not credentials:
        raise AuthError("Token de sessão ausente")

    user = verify_session_token(credentials.credentials)
    logger.debug(f"Authenticated session: user={user.id} role={user.role}")
    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Optional[User]:
    """
    Optional authentication - returns None if no token provided

    Useful for endpoints that work both with/without auth (leaderboard)
    """
    if not credentials:
        return None

    return await get_current_user(credentials)


def _check_admin_key(x_admin_key: str) -> None:
    expected = os.getenv("ADMIN_API_KEY", "")
    if not expected:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro de configuração do servidor: ADMIN_API_KEY não definida.",
        )

    if not hmac.compare_digest(x_admin_key.encode("utf-8"), expected.encode("utf-8")):
        logger.warning("Rejected admin request with invalid X-Admin-Key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Acesso não autorizado. Chave de administração inválida ou ausente.",
        )


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    x_admin_key: Optional[str] = Header(None, alias="X-Admin-Key"),
) -> None:
    """
    FastAPI dependency: admin-only routes

    Supports two scenarios:
    1. Server-to-server: X-Admin-Key header matching ADMIN_API_KEY
    2. Admin panel: session token of a user with role "admin"

    Raises:
        HTTPException: 401 if no valid credentials, 403 if session user is not admin,
            500 if an admin key is sent but ADMIN_API_KEY is not configured
    """
    if x_admin_key:
        _check_admin_key(x_admin_key)
        return

    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Acesso não autorizado. Chave de administração inválida ou ausente.",
        )

    user = verify_session_token(credentials.credentials)
    if user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas administradores podem executar esta ação.",
        )
