"""Running totals across completed analyses."""

from __future__ import annotations

import threading

from ..models import SuiteMetricsSnapshot


class SuiteMetrics:
    """Owned, lock-guarded counters; one instance per engine."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._confidence_sum = 0.0

    def record(self, confidence: float) -> SuiteMetricsSnapshot:
        with self._lock:
            self._total += 1
            self._confidence_sum += confidence
            return self._snapshot_locked()

    def snapshot(self) -> SuiteMetricsSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._confidence_sum = 0.0

    def _snapshot_locked(self) -> SuiteMetricsSnapshot:
        average = self._confidence_sum / self._total if self._total else 0.0
        return SuiteMetricsSnapshot(total_analyses=self._total, average_confidence=round(average, 4))


__all__ = ["SuiteMetrics"]
