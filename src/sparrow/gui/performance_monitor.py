"""Timing statistics for pipeline renders.

Render workers wrap their render callable with :meth:`PerformanceMonitor.measure`
so each pass is recorded, and a Qt signal fires whenever one takes longer than
the configured threshold.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from functools import wraps
from typing import Any, Callable, Deque, Dict, List, Optional, TypeVar

from PySide6.QtCore import QObject, Signal

F = TypeVar("F", bound=Callable[..., Any])

_LOGGER = logging.getLogger(__name__)


class PerformanceMonitor(QObject):
    """Collect recent timings per operation and flag slow ones.

    Measurements may be recorded from worker threads, so the sample store is
    guarded by a lock.
    """

    slowOperationDetected = Signal(str, float)  # operation_name, duration_ms

    def __init__(self, enabled: bool = False, slow_threshold_ms: float = 100.0):
        super().__init__()
        self._enabled = enabled
        self._slow_threshold_ms = slow_threshold_ms
        self._metrics: Dict[str, Deque[float]] = {}
        self._operation_counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def enable(self, enabled: bool = True) -> None:
        self._enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    @property
    def slow_threshold_ms(self) -> float:
        return self._slow_threshold_ms

    def measure(self, operation: str) -> Callable[[F], F]:
        """Decorator recording the wall time of every call under *operation*.

        Example:
            timed_render = monitor.measure("render")(render)
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(*args: Any, **kwargs: Any) -> Any:
                if not self._enabled:
                    return func(*args, **kwargs)

                start = time.perf_counter()
                try:
                    return func(*args, **kwargs)
                finally:
                    elapsed = time.perf_counter() - start
                    self._record(operation, elapsed)
                    elapsed_ms = elapsed * 1000
                    if elapsed_ms > self._slow_threshold_ms:
                        _LOGGER.warning("%s took %.1fms", operation, elapsed_ms)
                        self.slowOperationDetected.emit(operation, elapsed_ms)

            return wrapper  # type: ignore[return-value]

        return decorator

    def _record(self, operation: str, elapsed: float) -> None:
        with self._lock:
            if operation not in self._metrics:
                self._metrics[operation] = deque(maxlen=100)
                self._operation_counts[operation] = 0
            self._metrics[operation].append(elapsed)
            self._operation_counts[operation] += 1

    def get_stats(self, operation: str) -> Optional[Dict[str, float]]:
        """Return count, mean, min, max, p50 and p95 (milliseconds) for *operation*."""

        with self._lock:
            samples = list(self._metrics.get(operation, ()))
            total = self._operation_counts.get(operation, 0)
        if not samples:
            return None

        timings_ms = [sample * 1000 for sample in samples]
        return {
            "count": len(timings_ms),
            "total_count": total,
            "mean": sum(timings_ms) / len(timings_ms),
            "min": min(timings_ms),
            "max": max(timings_ms),
            "p50": self._percentile(timings_ms, 50),
            "p95": self._percentile(timings_ms, 95),
        }

    def reset(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._operation_counts.clear()

    @staticmethod
    def _percentile(data: List[float], p: int) -> float:
        if not data:
            return 0.0
        sorted_data = sorted(data)
        index = min(int(len(sorted_data) * p / 100), len(sorted_data) - 1)
        return sorted_data[index]


__all__ = ["PerformanceMonitor"]
