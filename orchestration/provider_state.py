"""
Provider State
Per-provider circuit and rate-window records, each behind its own lock.

The rate limiter and circuit breaker never keep state of their own; they
read and mutate these records inside `record.lock`.
"""
import time
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from typing import Callable, Optional

from config import settings


class CircuitStatus(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitState:
    status: CircuitStatus = CircuitStatus.CLOSED
    consecutive_failures: int = 0
    opened_at: Optional[float] = None
    probe_in_flight: bool = False


@dataclass
class RateWindow:
    window_start: float = 0.0
    request_count: int = 0
    limit: int = 60
    window_size: float = 60.0


@dataclass
class ProviderRecord:
    name: str
    circuit: CircuitState = field(default_factory=CircuitState)
    window: RateWindow = field(default_factory=RateWindow)
    lock: Lock = field(default_factory=Lock)


class ProviderStateRegistry:
    """
    Owns one ProviderRecord per provider name, created on first use.
    `clock` is injectable so tests can move time without sleeping.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        rate_limit: int | None = None,
        window_size: float | None = None,
    ):
        self.clock = clock
        self.rate_limit = rate_limit if rate_limit is not None else settings.RATE_LIMIT_MAX_REQUESTS
        self.window_size = window_size if window_size is not None else settings.RATE_LIMIT_WINDOW_SECONDS
        self._records: dict[str, ProviderRecord] = {}
        self._registry_lock = Lock()

    def get(self, provider: str) -> ProviderRecord:
        with self._registry_lock:
            record = self._records.get(provider)
            if record is None:
                record = ProviderRecord(
                    name=provider,
                    window=RateWindow(
                        window_start=self.clock(),
                        limit=self.rate_limit,
                        window_size=self.window_size,
                    ),
                )
                self._records[provider] = record
            return record

    def providers(self) -> list[str]:
        with self._registry_lock:
            return list(self._records)


# Singleton instance
_registry: ProviderStateRegistry | None = None


def get_provider_state() -> ProviderStateRegistry:
    """Get or create the process-wide provider state registry"""
    global _registry
    if _registry is None:
        _registry = ProviderStateRegistry()
    return _registry
