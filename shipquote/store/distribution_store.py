from __future__ import annotations

import json
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

import redis
from redis.exceptions import RedisError

from shipquote.core.errors import StoreUnavailable
from shipquote.core.logging_config import logger
from shipquote.domain.models import DistributionRecord


class DistributionStore(Protocol):
    """
    Key-value contract consumed by the quoting core.

    - put: replaces the whole value, (re)sets expiry to ttl_seconds from now
    - get: latest record, or None when never written / expired
    """

    def put(self, key: str, record: DistributionRecord, ttl_seconds: int) -> None: ...

    def get(self, key: str) -> Optional[DistributionRecord]: ...


class RedisDistributionStore:
    """
    Redis-backed store. One client per process; connection errors surface as
    StoreUnavailable and are not retried here.
    """

    def __init__(self, client: "redis.Redis"):
        self.client = client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = 2.0) -> "RedisDistributionStore":
        client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client)

    def put(self, key: str, record: DistributionRecord, ttl_seconds: int) -> None:
        payload = json.dumps(record.to_dict(), ensure_ascii=False)
        try:
            self.client.set(key, payload, ex=ttl_seconds)
        except RedisError as e:
            logger.error("store_unavailable", op="put", key=key, error=repr(e))
            raise StoreUnavailable("Distribution store unreachable", {"op": "put"}) from e

    def get(self, key: str) -> Optional[DistributionRecord]:
        try:
            raw = self.client.get(key)
        except RedisError as e:
            logger.error("store_unavailable", op="get", key=key, error=repr(e))
            raise StoreUnavailable("Distribution store unreachable", {"op": "get"}) from e

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return DistributionRecord.from_dict(json.loads(raw))


class InMemoryDistributionStore:
    """
    Process-local store with the same contract (local dev + tests).
    Expiry is checked on get; every put also drops keys that have expired.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._data: Dict[str, Tuple[float, str]] = {}

    def put(self, key: str, record: DistributionRecord, ttl_seconds: int) -> None:
        # stored as JSON, same as redis
        payload = json.dumps(record.to_dict(), ensure_ascii=False)
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._data[key] = (now + ttl_seconds, payload)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        expired = [k for k, (expires_at, _) in self._data.items() if now >= expires_at]
        for k in expired:
            del self._data[k]

    def get(self, key: str) -> Optional[DistributionRecord]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None
            expires_at, payload = item
            if self._clock() >= expires_at:
                del self._data[key]
                return None
        return DistributionRecord.from_dict(json.loads(payload))
