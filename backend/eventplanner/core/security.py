"""
Principal resolution from bearer tokens.

Token issuance (registration/login) lives in the identity service; this module
only mints tokens for internal tooling and tests and turns an incoming
`Authorization: Bearer <jwt>` header into a `Principal`.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from eventplanner.core.config import get_settings
from eventplanner.core.logging import get_logger
from eventplanner.db.session import get_db
from eventplanner.repositories.catalog_repository import SqlCatalogStore
from eventplanner.services.policy import Principal

logger = get_logger(__name__)
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """Resolve the caller, including the vendor profiles they own."""
    if credentials is None:
        raise _unauthorized("Access token required")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.warning("token_rejected", reason=type(e).__name__)
        raise _unauthorized("Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid or expired token")

    catalog = SqlCatalogStore(db)
    user = await catalog.get_active_user(str(user_id))
    if user is None:
        raise _unauthorized("User not found or inactive")

    vendor_profile_ids = await catalog.get_vendor_profile_ids_for_user(user.id)
    return Principal(
        id=user.id,
        role=user.profile_type,
        vendor_profile_ids=frozenset(vendor_profile_ids),
    )
