"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
The returned payload is the identity every ledger query is scoped by.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select
from backend.app.core.exceptions import AuthenticationError, TokenRevokedError
from backend.app.core.jwt import decode_access_token
from backend.app.core.token_revocation import is_token_revoked
from backend.app.db.record_store import LedgerStores, build_ledger_stores
from backend.app.db.session import get_db, get_session_factory
from backend.app.models.user import User

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Security checks:
    1. Validates JWT token signature and expiry
    2. Checks if the token was revoked by a sign-out
    3. Verifies user still exists and is active (real-time check)

    Args:
        credentials: HTTP Bearer token from request header
        db: Database session for real-time user status check

    Returns:
        Decoded token payload (sub, user_id, email) plus the raw token

    Raises:
        AuthenticationError / TokenRevokedError: 401
        HTTPException: 403 for an inactive account
    """
    token = credentials.credentials

    # 1. Decode and validate JWT
    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    user_id = payload.get("user_id")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    # 2. Check if this specific token has been revoked
    if await is_token_revoked(token):
        raise TokenRevokedError()

    # 3. Real-time database check: Verify user is still active
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    return {**payload, "token": token}


def get_ledger_stores(
    current_user: dict = Depends(get_current_user),
    session_factory: async_sessionmaker = Depends(get_session_factory)
) -> LedgerStores:
    """
    FastAPI dependency binding the record stores to the authenticated owner.

    Every ledger read and write goes through these, so no request can see
    or touch another user's rows.
    """
    return build_ledger_stores(session_factory, current_user["user_id"])
