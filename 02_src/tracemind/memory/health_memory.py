"""Rolling window of recent traces and the aggregate health view."""

from collections import deque
from datetime import datetime, timezone
from typing import Protocol

from ..config import DEFAULT_MEMORY_CAPACITY
from ..logging_config import get_logger
from ..models import SystemHealth, Trace
from .rwlock import ReadWriteLock

logger = get_logger(__name__)

SLOW_SERVICE_THRESHOLD_MS = 500.0


class IHealthMemory(Protocol):
    """Bounded FIFO window of traces with an aggregate health query."""

    def add(self, trace: Trace) -> None:
        """Store a trace, evicting the oldest one when over capacity."""
        ...

    def health(self) -> SystemHealth:
        """Compute a fresh SystemHealth over the current window."""
        ...


class HealthMemory:
    """Symbolic memory of the system: the most recent traces."""

    def __init__(self, capacity: int = DEFAULT_MEMORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._traces: deque[Trace] = deque()
        self._lock = ReadWriteLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._traces)

    def add(self, trace: Trace) -> None:
        """Store a trace, evicting the oldest one when over capacity."""
        with self._lock.write_locked():
            self._traces.append(trace)
            if len(self._traces) > self._capacity:
                evicted = self._traces.popleft()
                logger.debug("Evicted trace %s from health memory", evicted.trace_id)

    def traces(self) -> list[Trace]:
        """Snapshot of the window, oldest first."""
        with self._lock.read_locked():
            return list(self._traces)

    def clear(self) -> None:
        with self._lock.write_locked():
            self._traces.clear()

    def health(self) -> SystemHealth:
        """Compute a fresh SystemHealth over the current window.

        Services whose mean latency exceeds 500ms are reported as slow,
        sorted by name.
        """
        total_spans = 0
        error_spans = 0
        latencies: dict[str, list[float]] = {}

        with self._lock.read_locked():
            for trace in self._traces:
                for span in trace.spans:
                    total_spans += 1
                    if span.is_error:
                        error_spans += 1
                    latencies.setdefault(span.name, []).append(span.latency_ms)

        error_rate = error_spans / total_spans if total_spans else 0.0
        slowest = sorted(
            service
            for service, values in latencies.items()
            if sum(values) / len(values) > SLOW_SERVICE_THRESHOLD_MS
        )

        return SystemHealth(
            recent_error_rate=error_rate,
            slowest_services=tuple(slowest),
            last_update=datetime.now(timezone.utc),
        )
