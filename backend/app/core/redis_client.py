"""
Redis connection for the sign-out blacklist.

Redis holds nothing but revoked bearer tokens; losing it lets revoked tokens
work again until they expire, so its status is reported by ``/health``.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError
from backend.app.core.config import settings

logger = logging.getLogger(__name__)

# Connects lazily on first command; token_revocation resolves this name at
# call time so it can be swapped out.
redis_client = redis.from_url(
    settings.redis_url,
    decode_responses=settings.redis_decode_responses,
)


async def ping_redis() -> bool:
    """True when the blacklist store answers, False otherwise."""
    try:
        return bool(await redis_client.ping())
    except (RedisError, OSError) as e:
        logger.warning("Redis ping failed: %s", e)
        return False


async def close_redis() -> None:
    """Release the connection pool on shutdown."""
    await redis_client.aclose()
