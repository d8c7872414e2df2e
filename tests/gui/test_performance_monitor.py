"""Tests for render timing statistics."""

import time

from sparrow.gui.performance_monitor import PerformanceMonitor


def test_disabled_monitor_records_nothing() -> None:
    monitor = PerformanceMonitor(enabled=False)
    timed = monitor.measure("render")(lambda: 3)
    assert timed() == 3
    assert monitor.get_stats("render") is None


def test_measure_collects_stats() -> None:
    monitor = PerformanceMonitor(enabled=True, slow_threshold_ms=10_000)
    timed = monitor.measure("render")(lambda value: value * 2)
    for value in range(5):
        assert timed(value) == value * 2

    stats = monitor.get_stats("render")
    assert stats["count"] == 5
    assert stats["total_count"] == 5
    assert stats["min"] <= stats["p50"] <= stats["max"]

    monitor.reset()
    assert monitor.get_stats("render") is None


def test_slow_operations_are_signalled(qtbot) -> None:
    monitor = PerformanceMonitor(enabled=True, slow_threshold_ms=0.5)

    def slow() -> None:
        time.sleep(0.01)

    with qtbot.waitSignal(monitor.slowOperationDetected, timeout=1000) as blocker:
        monitor.measure("render")(slow)()
    assert blocker.args[0] == "render"
    assert blocker.args[1] > 0.5
