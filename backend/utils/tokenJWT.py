# utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from config import Settings
from context import AppContext, get_context
from schemas.user import Principal
from utils.errors import Forbidden, Unauthorized

SCOPE_ACCESS = "access"
SCOPE_FILE = "file"

# Header is optional: browser downloads pass ?token= instead
bearer_scheme = HTTPBearer(auto_error=False)


def _encode(settings: Settings, claims: dict, expires_delta: timedelta) -> str:
    to_encode = claims.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# Generate a new JWT access token for a logged-in user
def create_access_token(settings: Settings, user_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        settings,
        {"sub": str(user_id), "role": role, "scope": SCOPE_ACCESS},
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


# Generate a link token that unlocks exactly one stored file
def create_file_token(settings: Settings, filename: str, expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        settings,
        {"sub": SCOPE_FILE, "scope": SCOPE_FILE, "file": filename},
        expires_delta or timedelta(minutes=settings.FILE_LINK_EXPIRE_MINUTES),
    )


def decode_token(settings: Settings, token: str) -> dict:
    """Verify signature and expiry; any failure is a Forbidden."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Forbidden("Invalid or expired token")


def principal_from_claims(claims: dict) -> Principal:
    if claims.get("scope") != SCOPE_ACCESS:
        raise Forbidden("Invalid or expired token")
    try:
        return Principal(user_id=int(claims["sub"]), role=claims["role"])
    except (KeyError, TypeError, ValueError):
        raise Forbidden("Invalid or expired token")


def extract_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token: Optional[str] = Query(None, description="Token for links that cannot set headers"),
) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    return token or None


# Resolve the caller from the bearer header or the ?token= parameter
def get_principal(
    token: Optional[str] = Depends(extract_token),
    ctx: AppContext = Depends(get_context),
) -> Principal:
    if not token:
        raise Unauthorized()
    return principal_from_claims(decode_token(ctx.settings, token))


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(principal: Principal = Depends(get_principal)) -> Principal:
        if allowed_roles and principal.role not in allowed_roles:
            raise Forbidden()
        return principal
    return _checker
