"""Rate limiting for authentication endpoints.

SECURITY: Protects against brute-force attacks on /auth/login and
/auth/register. Uses a sliding window per client key.

NOTE: Without REDIS_URL the state is in-memory and per-process. In a
multi-worker deployment each worker keeps its own counters, effectively
multiplying the allowed requests by the number of workers. Set REDIS_URL to
share state.

Threading note: We use threading.Lock rather than asyncio.Lock because the critical
section is very short (dict operations only) and never awaits.
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock

import redis

from taskboard.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    max_requests: int = 5  # Maximum requests in window
    window_seconds: int = 60  # Time window in seconds
    block_seconds: int = 300  # Block duration after exceeding limit
    namespace: str = "rl"  # Key prefix so limiters sharing one Redis don't collide


@dataclass
class RateLimitState:
    """State for a single IP/key (in-memory fallback)."""

    requests: list[float] = field(default_factory=list)
    blocked_until: float = 0.0


class RateLimiter:
    """Rate limiter with Redis support and in-memory fallback.

    Uses sliding window algorithm. Thread-safe for concurrent access.
    """

    def __init__(self, config: RateLimitConfig | None = None, redis_url: str | None = None) -> None:
        self.config = config or RateLimitConfig()
        self._local_state: dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._lock = Lock()
        self._redis: redis.Redis | None = None

        if redis_url:
            try:
                self._redis = redis.from_url(redis_url, decode_responses=True)
                self._redis.ping()
            except redis.RedisError as exc:
                logger.warning("Redis unavailable for rate limiting, using local memory: %s", exc)
                self._redis = None

    def _keys(self, key: str) -> tuple[str, str]:
        return f"{self.config.namespace}:{key}", f"{self.config.namespace}_block:{key}"

    def is_allowed(self, key: str) -> tuple[bool, int]:
        """Check if request is allowed for the given key.

        Returns (allowed, retry_after_seconds).
        """
        if self._redis:
            return self._is_allowed_redis(key)
        return self._is_allowed_local(key)

    def _is_allowed_redis(self, key: str) -> tuple[bool, int]:
        """Redis-based rate limiting using a sorted set for sliding window."""
        now = time.time()
        rl_key, block_key = self._keys(key)

        try:
            blocked_until = self._redis.get(block_key)
            if blocked_until:
                remaining = int(float(blocked_until) - now)
                if remaining > 0:
                    return False, remaining

            # Add current request and prune old ones
            pipe = self._redis.pipeline()
            pipe.zadd(rl_key, {str(now): now})
            pipe.zremrangebyscore(rl_key, 0, now - self.config.window_seconds)
            pipe.zcard(rl_key)
            pipe.expire(rl_key, self.config.window_seconds * 2)
            results = pipe.execute()

            request_count = results[2]

            if request_count > self.config.max_requests:
                block_val = str(now + self.config.block_seconds)
                self._redis.setex(block_key, self.config.block_seconds, block_val)
                return False, self.config.block_seconds

            return True, 0
        except redis.RedisError as exc:
            logger.warning("Redis error during rate limiting, falling back to local: %s", exc)
            return self._is_allowed_local(key)

    def _is_allowed_local(self, key: str) -> tuple[bool, int]:
        """Local memory fallback for rate limiting."""
        now = time.time()
        with self._lock:
            state = self._local_state[key]
            if state.blocked_until > now:
                return False, int(state.blocked_until - now)

            window_start = now - self.config.window_seconds
            state.requests = [ts for ts in state.requests if ts >= window_start]

            if len(state.requests) >= self.config.max_requests:
                state.blocked_until = now + self.config.block_seconds
                return False, self.config.block_seconds

            state.requests.append(now)
            return True, 0

    def reset(self, key: str) -> None:
        """Reset rate limit state for a key."""
        if self._redis:
            try:
                self._redis.delete(*self._keys(key))
            except redis.RedisError as exc:
                logger.warning("Redis error during reset, ignoring: %s", exc)

        with self._lock:
            self._local_state.pop(key, None)

    def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            self._redis.close()


@dataclass
class AuthRateLimiters:
    """The limiters guarding the public auth endpoints."""

    login: RateLimiter
    register: RateLimiter
    enabled: bool = True

    def close(self) -> None:
        self.login.close()
        self.register.close()


def build_auth_rate_limiters(settings: Settings) -> AuthRateLimiters:
    """Create the login and registration limiters for one app instance."""
    return AuthRateLimiters(
        login=RateLimiter(
            RateLimitConfig(
                max_requests=5,  # 5 attempts
                window_seconds=60,  # per minute
                block_seconds=300,  # 5 minute block
                namespace="rl_login",
            ),
            redis_url=settings.redis_url,
        ),
        register=RateLimiter(
            RateLimitConfig(
                max_requests=3,  # 3 registrations
                window_seconds=3600,  # per hour
                block_seconds=3600,  # 1 hour block
                namespace="rl_register",
            ),
            redis_url=settings.redis_url,
        ),
        enabled=settings.rate_limit_enabled,
    )
