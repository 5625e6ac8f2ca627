"""
Tests for the 2D vs 3D comparison table.
"""

import pytest

from chipsim.analysis import (
    COMPARISON_METRICS,
    compare_systems,
    power_improvement_percent,
    relative_improvement,
)
from chipsim.cpu import get_program, run_cpu_benchmark
from chipsim.hardware import DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D


@pytest.fixture(scope="module")
def result():
    return run_cpu_benchmark(DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D, get_program("vector_add").code)


class TestRelativeImprovement:

    def test_lower_is_better(self):
        assert relative_improvement(200.0, 150.0, higher_is_better=False) == pytest.approx(25.0)

    def test_higher_is_better(self):
        assert relative_improvement(0.5, 0.6, higher_is_better=True) == pytest.approx(20.0)

    def test_negative_baseline_uses_magnitude(self):
        assert relative_improvement(-10.0, -5.0, higher_is_better=True) == pytest.approx(50.0)

    def test_zero_baseline(self):
        assert relative_improvement(0.0, 5.0, higher_is_better=False) == 0.0


class TestCompareSystems:

    def test_row_order(self, result):
        comparison = compare_systems(result)
        assert [r.key for r in comparison.rows] == [m.key for m in COMPARISON_METRICS]
        assert [r.key for r in comparison.rows] == [
            "total_cycles", "amat", "ipc", "power_total", "operating_temp", "throttling_percent",
        ]

    def test_cycle_row_matches_headline(self, result):
        comparison = compare_systems(result)
        assert comparison.row("total_cycles").improvement_percent == pytest.approx(result.improvement_percent)
        assert comparison.cycle_improvement_percent == result.improvement_percent

    def test_stacked_wins_on_cycles_and_ipc(self, result):
        comparison = compare_systems(result)
        assert comparison.row("total_cycles").verdict == "better"
        assert comparison.row("amat").verdict == "better"
        assert comparison.row("ipc").verdict == "better"
        assert comparison.row("ipc").higher_is_better

    def test_no_throttling_is_same(self, result):
        row = compare_systems(result).row("throttling_percent")
        assert row.baseline_value == 0.0
        assert row.verdict == "same"

    def test_power_and_temperature(self, result):
        comparison = compare_systems(result)
        base, stacked = result.baseline, result.stacked
        assert comparison.power_improvement_percent == pytest.approx(
            (base.power.total_w - stacked.power.total_w) / base.power.total_w * 100
        )
        assert comparison.temperature_delta_c == pytest.approx(
            stacked.operating_temp_c - base.operating_temp_c
        )
        assert power_improvement_percent(base, base) == 0.0

    def test_unknown_row(self, result):
        with pytest.raises(KeyError):
            compare_systems(result).row("latency")

    def test_to_dict(self, result):
        data = compare_systems(result).to_dict()
        assert len(data["metrics"]) == 6
        assert data["metrics"][2]["metric"] == "ipc"
        assert set(data["summary"]) == {
            "cycle_improvement_percent", "power_improvement_percent", "temperature_delta_c",
        }
