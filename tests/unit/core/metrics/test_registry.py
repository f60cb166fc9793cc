"""Tests for the in-memory meter registry."""

from __future__ import annotations

import pytest

from connection_secrets.core.metrics.registry import InMemoryRegistry, MeterRegistry


class TestInMemoryRegistry:
    def test_implements_protocol(self) -> None:
        assert isinstance(InMemoryRegistry(), MeterRegistry)

    def test_counter_by_tags(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("c", tags={"source": "Secret", "outcome": "success"})
        reg.counter("c", value=2.0, tags={"outcome": "success", "source": "Secret"})
        reg.counter("c", tags={"source": "Environment", "outcome": "success"})

        assert reg.get_counter("c", {"source": "Secret", "outcome": "success"}) == 3.0
        assert reg.get_counter("c", {"source": "Environment", "outcome": "success"}) == 1.0
        assert reg.get_counter("c") == 0.0

    def test_untagged_counter(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("c")
        assert reg.get_metrics()["counters"] == {"c": {"": 1.0}}

    def test_timer(self) -> None:
        reg = InMemoryRegistry()
        reg.timer("t", 1.5, tags={"source": "Filesystem"})
        reg.timer("t", 2.5, tags={"source": "Filesystem"})

        assert reg.get_timer_count("t", {"source": "Filesystem"}) == 2
        timer = reg.get_metrics()["timers"]["t"]["source=Filesystem"]
        assert timer["count"] == 2
        assert timer["total_ms"] == pytest.approx(4.0)

    def test_unknown_metrics(self) -> None:
        reg = InMemoryRegistry()
        assert reg.get_counter("missing") == 0.0
        assert reg.get_timer_count("missing") == 0

    def test_reset(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("c")
        reg.timer("t", 1.0)
        reg.reset()
        assert reg.get_metrics() == {"counters": {}, "timers": {}}

    def test_snapshot_is_detached(self) -> None:
        reg = InMemoryRegistry()
        reg.counter("c")
        snapshot = reg.get_metrics()
        reg.counter("c")
        assert snapshot["counters"]["c"][""] == 1.0
