"""
CPU Benchmark Orchestrator

Runs the instruction-mix, cache/AMAT and power/thermal models for a
"2D Baseline" and a "3D Stacked" system as a controlled experiment: both
systems see the same instruction stream, access pattern and instruction mix.

    instruction text -> InstructionMix -> (per system) AMAT -> power/thermal
                                                   |
                                                   v
                               BenchmarkResult(baseline, stacked, improvement)

Usage:
    from chipsim.cpu import run_cpu_benchmark
    from chipsim.hardware import DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D

    result = run_cpu_benchmark(DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D, program_text,
                               access_pattern="random", instruction_mix_percent=50)
    print(f"{result.improvement_percent:.1f}% fewer cycles on 3D")
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from chipsim.core.errors import ConfigValidationError, SimulationStatus
from chipsim.core.structures import AccessPattern, BASELINE_2D_NAME, STACKED_3D_NAME
from chipsim.cpu.cache import CacheMetrics, compute_amat
from chipsim.cpu.instruction_mix import (
    MAX_INSTRUCTIONS,
    InstructionMix,
    analyze_program,
)
from chipsim.cpu.power_thermal import PowerBreakdown, estimate_power_thermal
from chipsim.hardware.config import SystemConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BenchmarkMetrics:
    """
    Derived metrics for one system. Immutable once computed.

    Attributes:
        system_name: Display name ("2D Baseline", "3D Stacked", ...)
        total_cycles: Cycles including any throttling penalty
        amat: Average memory access time (cycles)
        ipc: Instructions per cycle against throttled cycles
        power: Dynamic / static / total power (W)
        operating_temp_c: Steady-state operating temperature
        throttling_percent: Cycle penalty from thermal throttling (0-50)
        cache: Per-level hit/miss rates
        instruction_count: Instructions that were counted
        status: COMPLETED, DEGENERATE or BUDGET_EXCEEDED
    """
    system_name: str
    total_cycles: float
    amat: float
    ipc: float
    power: PowerBreakdown
    operating_temp_c: float
    throttling_percent: float
    cache: CacheMetrics
    instruction_count: int = 0
    status: SimulationStatus = SimulationStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "system_name": self.system_name,
            "total_cycles": self.total_cycles,
            "amat": self.amat,
            "ipc": self.ipc,
            "power": self.power.to_dict(),
            "operating_temp_c": self.operating_temp_c,
            "throttling_percent": self.throttling_percent,
            "cache": self.cache.to_dict(),
            "instruction_count": self.instruction_count,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class BenchmarkResult:
    """Paired 2D / 3D metrics for one simulation run."""
    baseline: BenchmarkMetrics
    stacked: BenchmarkMetrics
    improvement_percent: float
    instruction_mix: InstructionMix
    access_pattern: AccessPattern
    instruction_mix_percent: float

    @property
    def status(self) -> SimulationStatus:
        return self.baseline.status

    def to_dict(self) -> Dict[str, Any]:
        return {
            BASELINE_2D_NAME: self.baseline.to_dict(),
            STACKED_3D_NAME: self.stacked.to_dict(),
            "improvement": self.improvement_percent,
            "instruction_mix": self.instruction_mix.to_dict(),
            "access_pattern": self.access_pattern.value,
            "instruction_mix_percent": self.instruction_mix_percent,
        }


def cycle_improvement_percent(baseline_cycles: float, stacked_cycles: float) -> float:
    """(cycles2D - cycles3D) / cycles2D * 100, or 0 when the baseline has no cycles."""
    if baseline_cycles <= 0:
        return 0.0
    return (baseline_cycles - stacked_cycles) / baseline_cycles * 100.0


def _run_status(mix: InstructionMix) -> SimulationStatus:
    if mix.total == 0:
        return SimulationStatus.DEGENERATE
    if mix.truncated:
        return SimulationStatus.BUDGET_EXCEEDED
    return SimulationStatus.COMPLETED


def simulate_system(
    config: SystemConfig,
    mix: InstructionMix,
    access_pattern: Union[AccessPattern, str],
    memory_ratio: float,
    name: Optional[str] = None,
) -> BenchmarkMetrics:
    """
    Evaluate one system for an already-classified instruction stream.

    Args:
        config: System under evaluation
        mix: Classified instruction stream
        access_pattern: Pattern hint for the cache model
        memory_ratio: Fraction of instructions treated as memory ops (0..1)
        name: Display name (defaults to config.name)

    Raises:
        ConfigValidationError: config fails validation (it may have been
            mutated after construction) or cannot retire its memory ops
    """
    config.validate()
    system_name = name or config.name
    cache_analysis = compute_amat(config, access_pattern)
    estimate = estimate_power_thermal(
        total_instructions=mix.total,
        memory_ratio=memory_ratio,
        amat=cache_analysis.amat,
        stacked=config.is_stacked,
        thermal=config.thermal,
    )
    logger.debug(
        "%s: AMAT=%.3f cycles=%.1f IPC=%.4f T=%.1fC",
        system_name, cache_analysis.amat, estimate.total_cycles,
        estimate.ipc, estimate.operating_temp_c,
    )
    return BenchmarkMetrics(
        system_name=system_name,
        total_cycles=estimate.total_cycles,
        amat=cache_analysis.amat,
        ipc=estimate.ipc,
        power=estimate.power,
        operating_temp_c=estimate.operating_temp_c,
        throttling_percent=estimate.throttling_percent,
        cache=cache_analysis.cache,
        instruction_count=mix.total,
        status=_run_status(mix),
    )


def run_cpu_benchmark(
    config_2d: SystemConfig,
    config_3d: SystemConfig,
    instruction_text: str,
    access_pattern: Union[AccessPattern, str] = AccessPattern.RANDOM,
    instruction_mix_percent: Optional[float] = 50.0,
    max_instructions: int = MAX_INSTRUCTIONS,
) -> BenchmarkResult:
    """
    Run the paired 2D baseline / 3D stacked CPU benchmark.

    Args:
        config_2d: Baseline system
        config_3d: Stacked system
        instruction_text: Assembly-like program text
        access_pattern: 'sequential', 'strided' or 'random'
        instruction_mix_percent: Percent of instructions treated as memory ops
            (0-100). None uses the mix measured from the program text.
        max_instructions: Instruction cap

    Returns:
        BenchmarkResult with improvement = (cycles2D - cycles3D) / cycles2D * 100

    Raises:
        ConfigValidationError: invalid pattern or mix percent
    """
    pattern = AccessPattern.parse(access_pattern)
    mix = analyze_program(instruction_text, max_instructions=max_instructions)

    if instruction_mix_percent is None:
        mix_percent = mix.memory_ratio * 100.0
    else:
        mix_percent = float(instruction_mix_percent)
        if not 0.0 <= mix_percent <= 100.0:
            raise ConfigValidationError(
                f"instruction_mix_percent must be in [0, 100], got {instruction_mix_percent}"
            )
    memory_ratio = mix_percent / 100.0

    logger.info(
        "Running CPU benchmark: %d instructions (%d memory), %s access, %.0f%% memory mix",
        mix.total, mix.memory_ops, pattern.value, mix_percent,
    )
    if mix.total == 0:
        logger.info("Empty instruction stream, returning zero-cost result")

    baseline = simulate_system(config_2d, mix, pattern, memory_ratio, name=BASELINE_2D_NAME)
    stacked = simulate_system(config_3d, mix, pattern, memory_ratio, name=STACKED_3D_NAME)
    improvement = cycle_improvement_percent(baseline.total_cycles, stacked.total_cycles)

    logger.info("CPU benchmark complete: %.2f%% cycle improvement", improvement)

    return BenchmarkResult(
        baseline=baseline,
        stacked=stacked,
        improvement_percent=improvement,
        instruction_mix=mix,
        access_pattern=pattern,
        instruction_mix_percent=mix_percent,
    )
