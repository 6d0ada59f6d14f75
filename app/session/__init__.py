from .session_layer import (
    init_redis,
    set_redis_client,
    get_redis_client,
    get_session,
    extract_token,
    get_cached_profile,
    cache_profile,
    evict_profile,
)

__all__ = [
    "init_redis",
    "set_redis_client",
    "get_redis_client",
    "get_session",
    "extract_token",
    "get_cached_profile",
    "cache_profile",
    "evict_profile",
]
