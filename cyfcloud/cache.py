"""Key-value cache backed by Redis."""

import logging
import time

import redis

log = logging.getLogger(__name__)


class CacheUnavailable(RuntimeError):
    """Raised when the Redis server cannot be reached."""


class Cache:
    """Thin key-value interface over a Redis client."""

    def __init__(self, client):
        self._client = client

    @classmethod
    def connect(cls, addr, max_idle=None, max_active=None, retries=5, delay=1.0):
        """Open a pooled connection to ``host:port`` and check it answers PING.

        ``max_idle`` is accepted for configuration compatibility; the pool
        keeps idle connections on its own.
        """
        host, sep, port = addr.rpartition(":")
        if not sep or not host:
            raise ValueError(f"invalid redis address: {addr!r}")
        pool = redis.ConnectionPool(
            host=host, port=int(port), max_connections=max_active or None
        )
        client = redis.Redis(connection_pool=pool)
        log.info("redis pool creation (max idle %s, max active %s)", max_idle, max_active)
        for attempt in range(retries):
            try:
                client.ping()
            except redis.exceptions.RedisError:
                time.sleep(delay)
                log.warning("redis ping failed, retry after %s second(s), attempt %d", delay, attempt)
                continue
            log.info("redis ping")
            return cls(client)
        raise CacheUnavailable(f"redis at {addr} did not answer ping")

    def set(self, key, value):
        """Store ``value`` under ``key``."""
        return self._client.set(key, value)

    def set_exp(self, key, value, exp_sec):
        """Store ``value`` under ``key`` and let it expire after ``exp_sec`` seconds."""
        self._client.set(key, value)
        return self._client.expire(key, int(exp_sec))

    def get(self, key):
        """Return the value of ``key`` as text; raise KeyError when it is absent."""
        value = self._client.get(key)
        if value is None:
            raise KeyError(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return str(value)

    def delete(self, key):
        """Remove ``key``."""
        self._client.delete(key)