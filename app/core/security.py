"""
Admin session capabilities.

An admin login yields a signed token scoped to ``admin`` with a hard expiry,
instead of a client-side flag.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError
import hmac
import jwt
import logging

logger = logging.getLogger(__name__)

ADMIN_SCOPE = "admin"
ALGORITHM = "HS256"

admin_security = HTTPBearer(auto_error=False)


def _token_secret() -> str:
    if not settings.ADMIN_TOKEN_SECRET:
        logger.error("ADMIN_TOKEN_SECRET is not configured")
        raise AuthenticationError("Admin access is not configured")
    return settings.ADMIN_TOKEN_SECRET


def check_admin_credentials(username: str, password: str) -> bool:
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return False
    username_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USERNAME.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return username_ok and password_ok


def create_admin_token(username: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Issue an admin capability token; returns the token and its expiry."""
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=settings.ADMIN_TOKEN_TTL_MINUTES)
    payload = {
        "sub": username,
        "scope": ADMIN_SCOPE,
        "iat": now,
        "exp": expires_at
    }
    token = jwt.encode(payload, _token_secret(), algorithm=ALGORITHM)
    return {"access_token": token, "expires_at": expires_at}


def decode_admin_token(token: str) -> Dict[str, Any]:
    try:
        claims = jwt.decode(token, _token_secret(), algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Admin session has expired")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected admin token: {e}")
        raise AuthenticationError("Invalid admin session")

    if claims.get("scope") != ADMIN_SCOPE:
        raise AuthorizationError("Admin scope required")
    return claims


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(admin_security)
) -> str:
    """Dependency returning the admin username from a valid session token."""
    if not credentials:
        raise AuthenticationError("Admin session required")
    claims = decode_admin_token(credentials.credentials)
    return claims["sub"]
