"""
Per-client rate limiting

One token bucket per client IP, all kept in a single table behind one lock.
A background job evicts clients that have been idle for a while so the table
does not grow without bound.
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from pytz import timezone
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, Optional
import logging
import os
import time

logger = logging.getLogger(__name__)


@dataclass
class TokenBucket:
    """Refills at `rate` tokens per second up to `burst`; starts full"""
    rate: float
    burst: int
    tokens: float = field(init=False)
    updated_at: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        self.tokens = float(self.burst)

    def allow(self, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        elapsed = max(0.0, now - self.updated_at)
        self.tokens = min(float(self.burst), self.tokens + elapsed * self.rate)
        self.updated_at = now
        if self.tokens >= 1:
            self.tokens -= 1
            return True
        return False


@dataclass
class ClientState:
    bucket: TokenBucket
    last_seen: float


class ClientRateLimiter:
    """
    Token buckets keyed by client identifier.

    Usage:
        limiter = ClientRateLimiter(rps=2, burst=4)
        limiter.start()       # schedule the idle-client sweep
        limiter.allow("10.0.0.1")
        limiter.shutdown()
    """

    def __init__(
        self,
        rps: float = 2,
        burst: int = 4,
        enabled: bool = True,
        idle_timeout: float = 180,
        sweep_interval: float = 60,
    ):
        self.rps = rps
        self.burst = burst
        self.enabled = enabled
        self.idle_timeout = idle_timeout
        self.sweep_interval = sweep_interval

        self._lock = Lock()
        self._clients: Dict[str, ClientState] = {}
        self.scheduler = BackgroundScheduler(timezone=timezone(os.getenv("TIMEZONE", "UTC")))

    @classmethod
    def from_env(cls) -> "ClientRateLimiter":
        return cls(
            rps=float(os.getenv("LIMITER_RPS", 2)),
            burst=int(os.getenv("LIMITER_BURST", 4)),
            enabled=os.getenv("LIMITER_ENABLED", "false").lower() == "true",
        )

    def allow(self, client: str, now: Optional[float] = None) -> bool:
        if not self.enabled:
            return True

        now = time.monotonic() if now is None else now
        with self._lock:
            state = self._clients.get(client)
            if state is None:
                state = ClientState(bucket=TokenBucket(self.rps, self.burst, updated_at=now), last_seen=now)
                self._clients[client] = state
            state.last_seen = now
            return state.bucket.allow(now)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop clients idle for longer than idle_timeout; returns how many were dropped"""
        now = time.monotonic() if now is None else now
        with self._lock:
            idle = [client for client, state in self._clients.items() if now - state.last_seen > self.idle_timeout]
            for client in idle:
                del self._clients[client]
        if idle:
            logger.debug(f"Rate limiter evicted {len(idle)} idle clients")
        return len(idle)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def start(self) -> None:
        if not self.enabled or self.scheduler.running:
            return
        self.scheduler.add_job(
            func=self.sweep,
            trigger=IntervalTrigger(seconds=self.sweep_interval),
            id="rate_limiter_sweep",
            name="Evict idle rate limiter clients",
            replace_existing=True,
            max_instances=1,
        )
        self.scheduler.start()
        logger.info(f"Rate limiter enabled: {self.rps} rps, burst {self.burst}")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Rate limiter sweep stopped")
