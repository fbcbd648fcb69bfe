# ============================================================================
# FILE: jamvault/core/cache.py
# ============================================================================
import redis
import uuid
from typing import Optional
from jamvault.schemas.history import UserListeningStats
import logging

logger = logging.getLogger(__name__)

class StatsCache:
    """
    Per-user listening stats kept in Redis as JSON.

    Stats are recomputed from history on a miss and dropped whenever the
    user records a listen or the catalogue changes. Keys carry a namespace
    unique to this process: user ids restart at 1 on every boot while
    Redis outlives the process. Without a reachable Redis every call is a
    no-op and stats are always computed fresh.
    """

    def __init__(self, url: str, expire_seconds: int, namespace: Optional[str] = None):
        self.expire_seconds = expire_seconds
        self.namespace = namespace or uuid.uuid4().hex
        try:
            self.redis_client = redis.from_url(url, decode_responses=True)
            self.redis_client.ping()
            logger.info(f"Redis connection established (stats namespace {self.namespace})")
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Redis connection failed: {e}. Stats caching disabled.")
            self.redis_client = None

    def key(self, user_id: int) -> str:
        return f"stats:{self.namespace}:{user_id}"

    def get(self, user_id: int) -> Optional[UserListeningStats]:
        if not self.redis_client:
            return None
        try:
            raw = self.redis_client.get(self.key(user_id))
        except redis.RedisError as e:
            logger.error(f"Stats cache read failed for user {user_id}: {e}")
            return None
        if not raw:
            return None
        logger.info(f"Stats cache hit for user {user_id}")
        return UserListeningStats.model_validate_json(raw)

    def store(self, user_id: int, stats: UserListeningStats) -> bool:
        if not self.redis_client:
            return False
        try:
            self.redis_client.setex(self.key(user_id), self.expire_seconds, stats.model_dump_json(by_alias=True))
            return True
        except redis.RedisError as e:
            logger.error(f"Stats cache write failed for user {user_id}: {e}")
            return False

    def invalidate(self, user_id: int) -> bool:
        if not self.redis_client:
            return False
        try:
            self.redis_client.delete(self.key(user_id))
            return True
        except redis.RedisError as e:
            logger.error(f"Stats cache invalidation failed for user {user_id}: {e}")
            return False

    def invalidate_all(self) -> bool:
        """Drop every cached entry of this process, e.g. after a song is edited or deleted"""
        if not self.redis_client:
            return False
        try:
            keys = list(self.redis_client.scan_iter(match=f"stats:{self.namespace}:*"))
            if keys:
                self.redis_client.delete(*keys)
            return True
        except redis.RedisError as e:
            logger.error(f"Stats cache flush failed: {e}")
            return False
