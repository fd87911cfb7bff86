import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, TypeAlias


logger = logging.getLogger(__name__)


UNKNOWN_IDENTITY = "unknown"
DEFAULT_LIMIT = 10
DEFAULT_WINDOW = 60 * 60
SWEEP_SIZE = 1024


Clock: TypeAlias = Callable[[], float]


def client_identity(headers: Mapping[str, str]) -> str:
    """Clients with no address at all share the one "unknown" bucket."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        # First hop is the originating client
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()
    return UNKNOWN_IDENTITY


class RateLimiter(Protocol):
    limit: int

    def check_limit(self, identity: str) -> bool:
        ...

    def get_remaining(self, identity: str) -> int:
        ...


class _Bucket:
    __slots__ = ("lock", "window_start", "count", "evicted")

    def __init__(self, window_start: float) -> None:
        self.lock = threading.Lock()
        self.window_start = window_start
        self.count = 0
        self.evicted = False


class InMemoryRateLimiter:
    """Fixed window counters per identity, one lock per bucket."""

    def __init__(
        self,
        *,
        limit: int = DEFAULT_LIMIT,
        window: float = DEFAULT_WINDOW,
        clock: Clock = time.monotonic,
        sweep_size: int = SWEEP_SIZE,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be non-negative.")
        if window <= 0:
            raise ValueError("window must be positive.")
        self.limit = limit
        self.window = window
        self.clock = clock
        self.sweep_size = sweep_size
        self._sweep_at = sweep_size
        self._buckets: dict[str, _Bucket] = {}
        self._registry_lock = threading.Lock()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._buckets)

    def _sweep(self) -> None:
        # Caller holds the registry lock. Buckets in use are skipped.
        now = self.clock()
        for identity, bucket in list(self._buckets.items()):
            if not bucket.lock.acquire(blocking=False):
                continue
            try:
                if self._expired(bucket, now):
                    bucket.evicted = True
                    del self._buckets[identity]
            finally:
                bucket.lock.release()
        self._sweep_at = max(self.sweep_size, 2 * len(self._buckets))

    def _bucket(self, identity: str) -> _Bucket:
        with self._registry_lock:
            bucket = self._buckets.get(identity)
            if bucket is None:
                if len(self._buckets) >= self._sweep_at:
                    self._sweep()
                bucket = _Bucket(self.clock())
                self._buckets[identity] = bucket
            return bucket

    def _expired(self, bucket: _Bucket, now: float) -> bool:
        return now - bucket.window_start >= self.window

    def check_limit(self, identity: str) -> bool:
        while True:
            bucket = self._bucket(identity)
            with bucket.lock:
                if bucket.evicted:
                    continue
                now = self.clock()
                if self._expired(bucket, now):
                    bucket.window_start = now
                    bucket.count = 0
                if bucket.count >= self.limit:
                    logger.info("Rate limit reached for %s", identity)
                    return False
                bucket.count += 1
                return True

    def get_remaining(self, identity: str) -> int:
        with self._registry_lock:
            bucket = self._buckets.get(identity)
        if bucket is None:
            return self.limit
        with bucket.lock:
            if self._expired(bucket, self.clock()):
                return self.limit
            return max(0, self.limit - bucket.count)

    def reset(self, identity: str | None = None) -> None:
        with self._registry_lock:
            if identity is None:
                removed = list(self._buckets.values())
                self._buckets.clear()
            else:
                bucket = self._buckets.pop(identity, None)
                removed = [] if bucket is None else [bucket]
            for bucket in removed:
                bucket.evicted = True


class StateStore(Protocol):
    def load(self) -> dict[str, Any]:
        ...

    def save(self, state: dict[str, Any]) -> None:
        ...


class MemoryStore:
    def __init__(self, state: dict[str, Any] | None = None) -> None:
        self.state = {} if state is None else state

    def load(self) -> dict[str, Any]:
        return dict(self.state)

    def save(self, state: dict[str, Any]) -> None:
        self.state = dict(state)


class JsonFileStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        try:
            with open(self.path) as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable rate limit state %s: %r", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, state: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(state, f)


class ClientRateLimiter:
    """Advisory only. Wall clock time, the window outlives the process."""

    def __init__(
        self,
        store: StateStore,
        *,
        limit: int = DEFAULT_LIMIT,
        window: float = DEFAULT_WINDOW,
        clock: Clock = time.time,
    ) -> None:
        self.store = store
        self.limit = limit
        self.window = window
        self.clock = clock

    def _current(self) -> tuple[float, int]:
        state = self.store.load()
        now = self.clock()
        window_start = state.get("window_start")
        count = state.get("count")
        if not isinstance(window_start, (int, float)) or not isinstance(count, int):
            return now, 0
        if now - window_start >= self.window or window_start > now:
            return now, 0
        return float(window_start), count

    def check_limit(self) -> bool:
        window_start, count = self._current()
        if count >= self.limit:
            return False
        self.store.save({"window_start": window_start, "count": count + 1})
        return True

    def get_remaining_requests(self) -> int:
        _, count = self._current()
        return max(0, self.limit - count)

    def sync(self, remaining: int) -> None:
        """Adopt the authoritative remaining count reported by the server."""
        window_start, _ = self._current()
        count = min(self.limit, max(0, self.limit - remaining))
        self.store.save({"window_start": window_start, "count": count})
