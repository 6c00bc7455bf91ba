"""
Login lockout and request rate limiting.

Both limiters sit on an `AttemptStore`. The default store is process-local;
set LOGIN_ATTEMPTS_REDIS_URL / RATE_LIMIT_REDIS_URL to share counters between
workers and instances through Redis (a counter keyed by identity with expiry).
"""
from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from flask import Flask


@dataclass
class Attempt:
    count: int
    last_attempt: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int


class AttemptStore:
    def get(self, key: str) -> Attempt | None:
        raise NotImplementedError

    def record(self, key: str, *, ttl_seconds: int) -> Attempt:
        """Increment the failure count for `key` and stamp the attempt time."""
        raise NotImplementedError

    def clear(self, key: str) -> None:
        raise NotImplementedError

    def hit(self, key: str, *, window_seconds: int) -> int:
        """Fixed-window counter: returns the count for the current window including this hit."""
        raise NotImplementedError


class MemoryAttemptStore(AttemptStore):
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._attempts: dict[str, Attempt] = {}
        self._buckets: dict[str, tuple[int, float]] = {}

    def get(self, key: str) -> Attempt | None:
        with self._lock:
            a = self._attempts.get(key)
            return Attempt(a.count, a.last_attempt) if a else None

    def record(self, key: str, *, ttl_seconds: int) -> Attempt:
        now = self._clock()
        with self._lock:
            a = self._attempts.get(key) or Attempt(0, 0.0)
            a = Attempt(a.count + 1, now)
            self._attempts[key] = a
            return Attempt(a.count, a.last_attempt)

    def clear(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)

    def hit(self, key: str, *, window_seconds: int) -> int:
        now = self._clock()
        with self._lock:
            count, expires = self._buckets.get(key, (0, 0.0))
            if expires < now:
                count, expires = 0, now + window_seconds
            count += 1
            self._buckets[key] = (count, expires)
            return count


class RedisAttemptStore(AttemptStore):
    def __init__(self, url: str, *, prefix: str = "neic", clock: Callable[[], float] = time.time) -> None:
        import redis

        self._client = redis.Redis.from_url(url, decode_responses=True)
        self._prefix = prefix
        self._clock = clock

    def _key(self, kind: str, key: str) -> str:
        return f"{self._prefix}:{kind}:{key}"

    def get(self, key: str) -> Attempt | None:
        data = self._client.hgetall(self._key("login_attempts", key))
        if not data:
            return None
        return Attempt(int(data.get("count") or 0), float(data.get("last") or 0.0))

    def record(self, key: str, *, ttl_seconds: int) -> Attempt:
        k = self._key("login_attempts", key)
        now = self._clock()
        pipe = self._client.pipeline()
        pipe.hincrby(k, "count", 1)
        pipe.hset(k, "last", now)
        pipe.expire(k, ttl_seconds)
        count, _, _ = pipe.execute()
        return Attempt(int(count), now)

    def clear(self, key: str) -> None:
        self._client.delete(self._key("login_attempts", key))

    def hit(self, key: str, *, window_seconds: int) -> int:
        k = self._key("ratelimit", key)
        current = int(self._client.incr(k))
        if current == 1:
            self._client.pexpire(k, window_seconds * 1000)
        return current


class LoginLimiter:
    """
    Per-identity failed-login lockout: once `max_attempts` failures are on
    record, further attempts are refused until `lockout_seconds` have passed
    since the most recent failure.
    """

    def __init__(self, store: AttemptStore, *, max_attempts: int = 5, lockout_seconds: int = 900,
                 clock: Callable[[], float] = time.time) -> None:
        self.store = store
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock

    def is_locked(self, identity: str) -> bool:
        a = self.store.get(identity)
        if not a or a.count < self.max_attempts:
            return False
        if self._clock() - a.last_attempt < self.lockout_seconds:
            return True
        # Lockout period elapsed.
        self.store.clear(identity)
        return False

    def record_failure(self, identity: str) -> Attempt:
        return self.store.record(identity, ttl_seconds=self.lockout_seconds)

    def reset(self, identity: str) -> None:
        self.store.clear(identity)


class RequestRateLimiter:
    def __init__(self, store: AttemptStore, *, max_requests: int = 10, window_seconds: int = 60) -> None:
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def check(self, identifier: str) -> RateLimitResult:
        current = self.store.hit(identifier, window_seconds=self.window_seconds)
        if current > self.max_requests:
            return RateLimitResult(allowed=False, remaining=0)
        return RateLimitResult(allowed=True, remaining=max(0, self.max_requests - current))


def _store_for(url: str, prefix: str) -> AttemptStore:
    if url:
        return RedisAttemptStore(url, prefix=prefix)
    return MemoryAttemptStore()


def init_rate_limiting(app: Flask) -> None:
    login_store = _store_for(app.config.get("LOGIN_ATTEMPTS_REDIS_URL") or "", "neic")
    request_store = _store_for(app.config.get("RATE_LIMIT_REDIS_URL") or "", "neic")
    app.extensions["login_limiter"] = LoginLimiter(
        login_store,
        max_attempts=int(app.config.get("LOGIN_MAX_ATTEMPTS") or 5),
        lockout_seconds=int(app.config.get("LOGIN_LOCKOUT_SECONDS") or 900),
    )
    app.extensions["rate_limiter"] = RequestRateLimiter(
        request_store,
        max_requests=int(app.config.get("RATE_LIMIT_MAX") or 10),
        window_seconds=int(app.config.get("RATE_LIMIT_WINDOW_SECONDS") or 60),
    )
    if isinstance(login_store, MemoryAttemptStore):
        app.logger.info("Login attempts tracked in process memory (set LOGIN_ATTEMPTS_REDIS_URL to share).")
