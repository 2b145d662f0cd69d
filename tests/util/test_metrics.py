from __future__ import annotations

import pytest

from layoutwfc.util.metrics import GenerationStats, MostRecentNVar


class TestMostRecentNVar:
    def test_empty(self) -> None:
        var = MostRecentNVar(4)

        assert var.sample_count == 0
        assert var.get_percentiles() == (0.0, 0.0, 0.0)
        assert var.last == 0.0

    def test_percentiles(self) -> None:
        var = MostRecentNVar(200)
        for value in range(1, 101):
            var.record(float(value))

        assert var.sample_count == 100
        assert var.p50 == pytest.approx(50.5)
        assert var.p95 == pytest.approx(95.05)
        assert var.p99 == pytest.approx(99.01)

    def test_keeps_only_recent_samples(self) -> None:
        var = MostRecentNVar(3)
        for value in (100.0, 1.0, 2.0, 3.0):
            var.record(value)

        assert var.sample_count == 3
        assert var.last == 3.0
        assert var.p99 < 100.0

    def test_last_after_wraparound(self) -> None:
        var = MostRecentNVar(2)
        for value in (1.0, 2.0, 3.0, 4.0, 5.0):
            var.record(value)

        assert var.last == 5.0


class TestGenerationStats:
    def test_run_bookkeeping(self) -> None:
        stats = GenerationStats()
        stats.begin_run()
        stats.contradictions = 2
        stats.fallbacks = 3
        stats.end_run(12.5)

        assert stats.runs == 1
        assert stats.elapsed_ms.last == 12.5

        stats.begin_run()
        assert stats.contradictions == 0
        assert stats.fallbacks == 0
        assert stats.runs == 1

    def test_instances_do_not_share_samples(self) -> None:
        a = GenerationStats()
        b = GenerationStats()
        a.end_run(1.0)

        assert b.elapsed_ms.sample_count == 0
