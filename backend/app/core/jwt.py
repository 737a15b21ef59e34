"""
Access tokens for ledger owners.

A token names its owner three ways: ``sub`` (username), ``user_id`` (the key
every ledger row is scoped by) and ``email`` (printed on the PDF report).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from backend.app.core.config import settings

REQUIRED_CLAIMS = ("sub", "user_id")


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token.

    Args:
        data: Claims to embed, at least ``sub`` and ``user_id``
        expires_delta: Lifetime, defaults to ``settings.access_token_expire_minutes``

    Raises:
        ValueError: a required claim is missing
    """
    missing = [claim for claim in REQUIRED_CLAIMS if data.get(claim) is None]
    if missing:
        raise ValueError(f"Missing token claims: {', '.join(missing)}")

    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify signature and expiry.

    Returns the claims, or None for a bad, expired or incomplete token.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if any(payload.get(claim) is None for claim in REQUIRED_CLAIMS):
        return None
    return payload
