"""
2D vs 3D comparison of a CPU benchmark result.

Each metric row carries both values and a signed improvement percentage that
is positive when the stacked system is better:

    higher_is_better:  (v3D - v2D) / |v2D| * 100
    lower_is_better:   (v2D - v3D) / |v2D| * 100

Rows whose baseline value is 0 report 0% improvement.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from chipsim.cpu.benchmark import BenchmarkMetrics, BenchmarkResult


# Differences smaller than this (in percent) count as "same"
IMPROVEMENT_TOLERANCE_PERCENT = 0.01


@dataclass(frozen=True)
class MetricSpec:
    """How to extract and judge one metric."""
    key: str
    label: str
    higher_is_better: bool
    extract: Callable[[BenchmarkMetrics], float]
    fmt: str = "{:.2f}"


COMPARISON_METRICS: List[MetricSpec] = [
    MetricSpec("total_cycles", "Total Cycles", False, lambda m: m.total_cycles, "{:,.0f}"),
    MetricSpec("amat", "AMAT (Cycles)", False, lambda m: m.amat, "{:.2f}"),
    MetricSpec("ipc", "IPC", True, lambda m: m.ipc, "{:.2f}"),
    MetricSpec("power_total", "Total Power (Watts)", False, lambda m: m.power.total_w, "{:.3f}"),
    MetricSpec("operating_temp", "Operating Temp (C)", False, lambda m: m.operating_temp_c, "{:.1f}"),
    MetricSpec("throttling_percent", "Throttling (%)", False, lambda m: m.throttling_percent, "{:.1f}"),
]


def relative_improvement(baseline: float, stacked: float, higher_is_better: bool) -> float:
    """Signed improvement of stacked over baseline, in percent."""
    if baseline == 0:
        return 0.0
    if higher_is_better:
        return (stacked - baseline) / abs(baseline) * 100.0
    return (baseline - stacked) / abs(baseline) * 100.0


@dataclass(frozen=True)
class MetricComparison:
    """One row of the 2D / 3D comparison table."""
    key: str
    label: str
    baseline_value: float
    stacked_value: float
    improvement_percent: float
    higher_is_better: bool
    fmt: str = "{:.2f}"

    @property
    def is_better(self) -> bool:
        return self.improvement_percent > IMPROVEMENT_TOLERANCE_PERCENT

    @property
    def is_worse(self) -> bool:
        return self.improvement_percent < -IMPROVEMENT_TOLERANCE_PERCENT

    @property
    def verdict(self) -> str:
        if self.is_better:
            return "better"
        if self.is_worse:
            return "worse"
        return "same"

    def format_value(self, value: float) -> str:
        return self.fmt.format(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.key,
            "label": self.label,
            "baseline": self.baseline_value,
            "stacked": self.stacked_value,
            "improvement_percent": self.improvement_percent,
            "higher_is_better": self.higher_is_better,
            "verdict": self.verdict,
        }


@dataclass(frozen=True)
class SystemComparison:
    """Full 2D vs 3D comparison for one CPU benchmark run."""
    rows: List[MetricComparison]
    cycle_improvement_percent: float
    power_improvement_percent: float
    temperature_delta_c: float

    def row(self, key: str) -> MetricComparison:
        for r in self.rows:
            if r.key == key:
                return r
        raise KeyError(key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metrics": [r.to_dict() for r in self.rows],
            "summary": {
                "cycle_improvement_percent": self.cycle_improvement_percent,
                "power_improvement_percent": self.power_improvement_percent,
                "temperature_delta_c": self.temperature_delta_c,
            },
        }


def power_improvement_percent(baseline: BenchmarkMetrics, stacked: BenchmarkMetrics) -> float:
    """(P2D - P3D) / P2D * 100, or 0 without baseline power."""
    if baseline.power.total_w <= 0:
        return 0.0
    return (baseline.power.total_w - stacked.power.total_w) / baseline.power.total_w * 100.0


def compare_systems(result: BenchmarkResult) -> SystemComparison:
    """Build the per-metric comparison table and headline deltas."""
    rows = []
    for metric in COMPARISON_METRICS:
        base_value = metric.extract(result.baseline)
        stacked_value = metric.extract(result.stacked)
        rows.append(MetricComparison(
            key=metric.key,
            label=metric.label,
            baseline_value=base_value,
            stacked_value=stacked_value,
            improvement_percent=relative_improvement(base_value, stacked_value, metric.higher_is_better),
            higher_is_better=metric.higher_is_better,
            fmt=metric.fmt,
        ))

    return SystemComparison(
        rows=rows,
        cycle_improvement_percent=result.improvement_percent,
        power_improvement_percent=power_improvement_percent(result.baseline, result.stacked),
        temperature_delta_c=result.stacked.operating_temp_c - result.baseline.operating_temp_c,
    )
