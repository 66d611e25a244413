"""Fixed-window request rate limiting backed by Redis."""

import logging

import redis

logger = logging.getLogger(__name__)


class RateLimiter:
    """Counts hits per key in fixed windows.

    Redis failures fail open: the request is allowed and the error logged.
    """

    def __init__(self, client: redis.Redis, prefix: str = "ratelimit") -> None:
        self.client = client
        self.prefix = prefix

    def hit(self, scope: str, identifier: str, limit: int, window_seconds: int) -> bool:
        """Record one hit and report whether it is within the limit."""
        key = f"{self.prefix}:{scope}:{identifier}"
        try:
            pipe = self.client.pipeline()
            pipe.incr(key)
            pipe.expire(key, window_seconds, nx=True)
            count, _ = pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Rate limit check failed for {scope}: {e}")
            return True

        if count > limit:
            logger.warning(f"Rate limit exceeded for {scope} by {identifier}")
            return False
        return True
