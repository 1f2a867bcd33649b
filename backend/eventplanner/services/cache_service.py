"""
Redis caching for booking statistics.

CACHING STRATEGY
================

What we cache:
  - The stats overview response per principal
  - Key pattern: "bookings:stats:{role}:{principal_id}"

Why:
  - The overview is an aggregate over every booking the caller can see, and
    dashboards poll it; listings and single reads stay uncached because they
    must reflect status changes immediately

Invalidation strategy:
  - Any booking mutation (create, status change, detail edit, delete) drops
    every "bookings:stats:*" key: one booking is visible to its customer,
    its vendor, the event manager and every admin, so per-key invalidation
    would need the full audience
  - TTL-based expiry (STATS_CACHE_TTL) as safety net

Failure mode:
  - Redis is advisory. Connection or command errors are logged and treated
    as a miss, so the database answers instead.
"""

import json
from typing import Optional

import redis.asyncio as redis
from eventplanner.core.config import get_settings
from eventplanner.core.logging import get_logger
from eventplanner.core.metrics import record_cache_operation, redis_connection_errors

logger = get_logger(__name__)
settings = get_settings()

STATS_KEY_PREFIX = "bookings:stats:"

_redis_client: Optional[redis.Redis] = None


async def get_redis() -> Optional[redis.Redis]:
    """Get or create Redis connection. Returns None if Redis is disabled or down."""
    global _redis_client

    if not settings.REDIS_ENABLED:
        return None

    if _redis_client is None:
        try:
            _redis_client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            await _redis_client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
        except Exception as e:
            redis_connection_errors.inc()
            logger.error("redis_connection_failed", error=str(e))
            _redis_client = None
            return None

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection on shutdown."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def make_stats_key(role: str, principal_id: str) -> str:
    return f"{STATS_KEY_PREFIX}{role}:{principal_id}"


async def get_cached_stats(role: str, principal_id: str) -> Optional[dict]:
    client = await get_redis()
    if not client:
        return None

    key = make_stats_key(role, principal_id)
    try:
        data = await client.get(key)
        if data:
            record_cache_operation("get", "hit")
            return json.loads(data)
        record_cache_operation("get", "miss")
    except Exception as e:
        record_cache_operation("get", "error")
        logger.error("cache_get_error", key=key, error=str(e))

    return None


async def set_cached_stats(role: str, principal_id: str, data: dict) -> None:
    client = await get_redis()
    if not client:
        return

    key = make_stats_key(role, principal_id)
    try:
        await client.setex(key, settings.STATS_CACHE_TTL, json.dumps(data, default=str))
        record_cache_operation("set", "ok")
    except Exception as e:
        record_cache_operation("set", "error")
        logger.error("cache_set_error", key=key, error=str(e))


async def invalidate_stats_cache() -> None:
    """Drop every cached stats overview."""
    client = await get_redis()
    if not client:
        return

    try:
        deleted = 0
        async for key in client.scan_iter(match=f"{STATS_KEY_PREFIX}*", count=100):
            await client.delete(key)
            deleted += 1
        record_cache_operation("invalidate", "ok")
        logger.debug("stats_cache_invalidated", keys_deleted=deleted)
    except Exception as e:
        record_cache_operation("invalidate", "error")
        logger.error("cache_invalidation_error", error=str(e))


async def get_cache_status() -> dict:
    """Connection status for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled" if not settings.REDIS_ENABLED else "unavailable"}

    try:
        await client.ping()
        return {"status": "connected"}
    except Exception as e:
        return {"status": "error", "error": str(e)}
