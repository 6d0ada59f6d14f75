"""
Session layer - Redis-backed session lookup and profile cache.
"""
from typing import Optional, Dict, Any
import logging
import json
import uuid
import redis

logger = logging.getLogger(__name__)

# Redis connection pool and client
_redis_pool: Optional[redis.ConnectionPool] = None
_redis_client: Optional[redis.Redis] = None
_profile_ttl: int = 1200


def init_redis(
    host: str, port: int, db: int, profile_ttl: int = 1200
) -> None:
    """Initialize Redis connection pool. Call once at app startup."""
    global _redis_pool, _redis_client, _profile_ttl
    _redis_pool = redis.ConnectionPool(
        host=host,
        port=port,
        db=db,
        decode_responses=True,
        max_connections=10
    )
    _redis_client = redis.Redis(connection_pool=_redis_pool)
    _profile_ttl = profile_ttl
    logger.info(f"Redis initialized: {host}:{port}/{db}, profile TTL: {profile_ttl}s")


def set_redis_client(client: Optional[redis.Redis]) -> None:
    """Swap the client in place of init_redis (tests pass a stand-in here)."""
    global _redis_client
    _redis_client = client


def get_redis_client() -> redis.Redis:
    """Get Redis client. Raises if not initialized."""
    if _redis_client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis_client


# --- Sessions ---


def get_session(token: str) -> Optional[Dict[str, Any]]:
    """Get user data from Redis session if token exists."""
    client = get_redis_client()
    session_key = f"session:{token}"
    data = client.get(session_key)
    if data:
        return json.loads(data)
    return None


def extract_token(auth_header: Optional[str]) -> Optional[str]:
    """Extract bearer token from Authorization header."""
    if not auth_header:
        return None

    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


# --- Profile cache ---
# Lookups never fail the caller: an unavailable Redis is a cache miss.


def _profile_key(user_id: uuid.UUID) -> str:
    return f"profile:{user_id}"


def get_cached_profile(user_id: uuid.UUID) -> Optional[Dict[str, Any]]:
    if _redis_client is None:
        return None
    try:
        data = _redis_client.get(_profile_key(user_id))
    except redis.RedisError as e:
        logger.warning("Redis GET error for profile %s: %s", user_id, e)
        return None
    return json.loads(data) if data else None


def cache_profile(user_id: uuid.UUID, profile: Dict[str, Any]) -> None:
    if _redis_client is None:
        return
    try:
        _redis_client.setex(_profile_key(user_id), _profile_ttl, json.dumps(profile, default=str))
    except redis.RedisError as e:
        logger.warning("Redis SET error for profile %s: %s", user_id, e)


def evict_profile(user_id: uuid.UUID) -> None:
    if _redis_client is None:
        return
    try:
        _redis_client.delete(_profile_key(user_id))
    except redis.RedisError as e:
        logger.warning("Redis DELETE error for profile %s: %s", user_id, e)
