"""
Async memoization cache with per-key TTL and request coalescing.
Why: one producer call per key per flight, however many callers are waiting.

Runs on a single asyncio event loop. Bookkeeping never awaits, so the store
and the pending map are only ever observed in a consistent state.
"""

import asyncio
import math
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, Generic, Optional, TypeVar, Union

from .errors import ProducerError
from .logging import get_logger
from .metrics import CacheStats

_LOG = get_logger(__name__)

V = TypeVar("V")

Producer = Callable[[], Awaitable[Any]]
Continuation = Callable[["Result"], None]
TTL = Union[int, float, timedelta]


class KeyState(Enum):
    ABSENT = "absent"
    PENDING = "pending"
    CACHED = "cached"


@dataclass(frozen=True)
class Result(Generic[V]):
    """Outcome handed to every continuation: a value or an error, never both."""

    value: Optional[V] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: V) -> "Result[V]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result[V]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> V:
        if self.error is not None:
            raise self.error
        return self.value


@dataclass
class _Entry:
    value: Any
    expires_at: float
    timer: Optional[asyncio.TimerHandle] = None


@dataclass
class _Pending:
    waiters: Deque[Continuation] = field(default_factory=deque)
    task: Optional["asyncio.Task[None]"] = None


def _ttl_seconds(ttl: TTL) -> float:
    if isinstance(ttl, timedelta):
        ttl = ttl.total_seconds()
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise ValueError(f"ttl must be seconds or a timedelta, got {ttl!r}")
    if not math.isfinite(ttl) or ttl <= 0:
        raise ValueError(f"ttl must be positive and finite, got {ttl!r}")
    return float(ttl)


class AsyncMemoCache:
    """Per-key TTL cache that coalesces concurrent requests for the same key.

    Each key is in exactly one state: ``ABSENT``, ``PENDING`` (a producer is
    running and callers are queued behind it) or ``CACHED``. A successful
    producer moves the key to ``CACHED`` until its TTL elapses; a failed one
    moves it straight back to ``ABSENT`` so the next request tries again.

    Instances share nothing. Create one per logical namespace (e.g. one per
    API resource) so unrelated producers never collide on a key.
    """

    def __init__(self, name: str = "cache") -> None:
        self.name = name
        self.stats = CacheStats()
        self._store: Dict[str, _Entry] = {}
        self._pending: Dict[str, _Pending] = {}

    def request(
        self, key: str, ttl: TTL, producer: Producer, on_result: Continuation
    ) -> None:
        """Deliver the value for ``key`` to ``on_result`` as a :class:`Result`.

        Must be called from a running event loop. On a hit the continuation
        runs on the next loop turn; on a coalesced request it is queued behind
        the running producer; on a miss ``producer()`` is awaited exactly once
        and every queued continuation is notified in arrival order.

        Raises:
            TypeError: ``key`` is not a string.
            ValueError: ``ttl`` is not a positive duration.
        """
        if not isinstance(key, str):
            raise TypeError(f"cache key must be str, got {type(key).__name__}")
        ttl_seconds = _ttl_seconds(ttl)
        loop = asyncio.get_running_loop()

        entry = self._live_entry(key)
        if entry is not None:
            self.stats.record_hit()
            _LOG.debug(f"[{self.name}] Reading from cache for key=[{key}]", extra=self._extra(key))
            loop.call_soon(self._notify_one, key, on_result, Result.success(entry.value))
            return

        pending = self._pending.get(key)
        if pending is not None:
            self.stats.record_coalesced()
            pending.waiters.append(on_result)
            _LOG.debug(
                f"[{self.name}] Queued behind in-flight request for key=[{key}] "
                f"waiters={len(pending.waiters)}",
                extra=self._extra(key),
            )
            return

        self.stats.record_miss()
        pending = _Pending(waiters=deque([on_result]))
        self._pending[key] = pending
        pending.task = loop.create_task(self._run(key, ttl_seconds, producer, pending))

    async def get(self, key: str, ttl: TTL, producer: Producer) -> Any:
        """Awaitable form of :meth:`request`.

        Returns the value, or raises :class:`ProducerError`. Cancelling the
        caller does not cancel the shared producer.
        """
        future = asyncio.get_running_loop().create_future()

        def _resolve(result: Result) -> None:
            if future.done():
                return
            if result.ok:
                future.set_result(result.value)
            else:
                future.set_exception(result.error)

        self.request(key, ttl, producer, _resolve)
        return await future

    def state(self, key: str) -> KeyState:
        if key in self._pending:
            return KeyState.PENDING
        if self._live_entry(key) is not None:
            return KeyState.CACHED
        return KeyState.ABSENT

    def invalidate(self, key: str) -> bool:
        """Drop the cached value for ``key``; an in-flight request is untouched."""
        entry = self._store.pop(key, None)
        if entry is None:
            return False
        if entry.timer is not None:
            entry.timer.cancel()
        _LOG.debug(f"[{self.name}] Invalidated key=[{key}]", extra=self._extra(key))
        return True

    def clear(self) -> None:
        """Cancel every expiry timer and drop all cached values.

        Producers already running still settle and notify their waiters.
        """
        for entry in self._store.values():
            if entry.timer is not None:
                entry.timer.cancel()
        self._store.clear()

    def __len__(self) -> int:
        for key in list(self._store):
            self._live_entry(key)
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._live_entry(key) is not None

    async def _run(self, key: str, ttl: float, producer: Producer, pending: _Pending) -> None:
        try:
            value = await producer()
        except asyncio.CancelledError as exc:
            self._settle_failure(key, pending, exc)
            raise
        except Exception as exc:
            self._settle_failure(key, pending, exc)
        else:
            self._settle_success(key, ttl, pending, value)

    def _settle_success(self, key: str, ttl: float, pending: _Pending, value: Any) -> None:
        self._pending.pop(key, None)
        entry = _Entry(value=value, expires_at=time.monotonic() + ttl)
        entry.timer = asyncio.get_running_loop().call_later(ttl, self._expire, key, entry)
        self._store[key] = entry
        _LOG.debug(
            f"[{self.name}] Cached key=[{key}] ttl={ttl}s waiters={len(pending.waiters)}",
            extra=self._extra(key),
        )
        self._notify_all(key, pending.waiters, Result.success(value))

    def _settle_failure(self, key: str, pending: _Pending, exc: BaseException) -> None:
        self._pending.pop(key, None)
        self.stats.record_failure()
        _LOG.warning(
            f"[{self.name}] Producer failed for key=[{key}] "
            f"waiters={len(pending.waiters)} error={exc!r}",
            extra=self._extra(key),
        )
        while pending.waiters:
            # one error per waiter so tracebacks raised in separate tasks stay apart
            self._notify_one(
                key, pending.waiters.popleft(), Result.failure(ProducerError(key, exc))
            )

    def _notify_all(self, key: str, waiters: Deque[Continuation], result: Result) -> None:
        while waiters:
            self._notify_one(key, waiters.popleft(), result)

    def _notify_one(self, key: str, on_result: Continuation, result: Result) -> None:
        try:
            on_result(result)
        except Exception:
            _LOG.exception(
                f"[{self.name}] Continuation for key=[{key}] raised", extra=self._extra(key)
            )

    def _extra(self, key: str) -> Dict[str, str]:
        return {"cache": self.name, "key": key}

    def _live_entry(self, key: str) -> Optional[_Entry]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if time.monotonic() >= entry.expires_at:
            self._expire(key, entry)
            return None
        return entry

    def _expire(self, key: str, entry: _Entry) -> None:
        # Only the entry this timer was scheduled for; a newer one stays.
        if self._store.get(key) is not entry:
            return
        del self._store[key]
        if entry.timer is not None:
            entry.timer.cancel()
        self.stats.record_expiration()
        _LOG.debug(f"[{self.name}] Cleared cache for key=[{key}]", extra=self._extra(key))
