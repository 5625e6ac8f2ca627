"""
GPU Kernel Time-Stepper

Discrete-time model of a GPU running one analytic workload to completion.
Every tick (20 ms of simulated time):

    1. work:     ops += cores * clock_GHz * 1e9 * dt
    2. thermal:  hotspots move, per-core power = (P_max / cores) * (clock / base) * factor,
                 temperatures integrate one RC step
    3. throttle: max(T) > T_throttle  ->  clock = base * max(0.1, 1 - 0.05 * excess)
                 otherwise               clock recovers by 2% of base per tick
    4. track peak temperature, clock sum and throttled time

The run terminates once ops >= ops_per_item * total_items * intensity. A
zero-work kernel runs no ticks (DEGENERATE); a run that hits max_ticks first
returns best-effort metrics (BUDGET_EXCEEDED).

The host drives the simulation with step(), iterates ticks(), or calls run()
with an optional per-tick callback. Snapshots handed to callers are copies.

Usage:
    from chipsim.gpu import run_gpu_benchmark
    from chipsim.hardware import default_gpu_config

    result = run_gpu_benchmark(default_gpu_config(), "ml:gemm_large",
                               access_pattern="random", seed=42)
    print(result.kernel_time_ms, result.is_memory_bound)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union

import numpy as np

from chipsim.core.errors import ConfigValidationError, SimulationStatus
from chipsim.core.structures import AccessPattern
from chipsim.gpu.thermal import (
    CoreGrid,
    HotspotField,
    integrate_temperatures,
    require_stable_step,
)
from chipsim.gpu.workloads import GpuBenchmarkInfo, get_gpu_benchmark
from chipsim.hardware.config import GpuConfig

logger = logging.getLogger(__name__)


TICK_MS = 20.0
TICK_S = TICK_MS / 1000.0
DEFAULT_MAX_TICKS = 100_000

OPS_PER_CYCLE = 2                   # FMA
THROTTLE_CLOCK_FLOOR = 0.1          # Fraction of base clock
THROTTLE_SLOPE_PER_C = 0.05         # Clock reduction per degree over the limit
CLOCK_RECOVERY_PER_TICK = 0.02      # Fraction of base clock regained per cool tick

SEQUENTIAL_LOCALITY_BOOST = 1.2
SEQUENTIAL_LOCALITY_CAP = 0.995
RANDOM_LOCALITY_SCALE = 0.4


def effective_locality(locality_factor: float, access_pattern: Union[AccessPattern, str]) -> float:
    """L2 hit rate for a workload's locality under the given access pattern."""
    pattern = AccessPattern.parse(access_pattern)
    if pattern == AccessPattern.SEQUENTIAL:
        return min(SEQUENTIAL_LOCALITY_CAP, locality_factor * SEQUENTIAL_LOCALITY_BOOST)
    if pattern == AccessPattern.RANDOM:
        return locality_factor * RANDOM_LOCALITY_SCALE
    return locality_factor


@dataclass(frozen=True)
class GpuTickSnapshot:
    """State of a running simulation after one tick."""
    tick: int
    elapsed_ms: float
    ops_completed: float
    progress: float                 # 0.0-1.0
    clock_ghz: float
    is_throttling: bool
    max_temp_c: float
    temperatures: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "elapsed_ms": self.elapsed_ms,
            "ops_completed": self.ops_completed,
            "progress": self.progress,
            "clock_ghz": self.clock_ghz,
            "is_throttling": self.is_throttling,
            "max_temp_c": self.max_temp_c,
            "temperatures": list(self.temperatures),
        }


@dataclass(frozen=True)
class GpuBenchmarkResult:
    """Result of one GPU kernel simulation."""
    benchmark_name: str
    config: GpuConfig
    access_pattern: AccessPattern

    # Peak capability
    theoretical_tflops: float

    # Timing
    kernel_time_ms: float
    compute_time_ms: float
    memory_time_ms: float
    is_memory_bound: bool

    # Memory
    l2_hit_rate: float
    throughput_gbps: float

    # Thermal / power
    peak_temp_c: float
    avg_clock_ghz: float
    throttle_time_ms: float
    estimated_power_w: float
    utilization: float
    thermal_data: Tuple[float, ...]
    grid_cols: int
    grid_rows: int

    tick_count: int
    status: SimulationStatus = SimulationStatus.COMPLETED

    @property
    def throttle_fraction(self) -> float:
        if self.kernel_time_ms <= 0:
            return 0.0
        return self.throttle_time_ms / self.kernel_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "benchmark": self.benchmark_name,
            "config": self.config.to_dict(),
            "access_pattern": self.access_pattern.value,
            "theoretical_tflops": self.theoretical_tflops,
            "timing": {
                "kernel_time_ms": self.kernel_time_ms,
                "compute_time_ms": self.compute_time_ms,
                "memory_time_ms": self.memory_time_ms,
                "is_memory_bound": self.is_memory_bound,
            },
            "memory": {
                "l2_hit_rate": self.l2_hit_rate,
                "throughput_gbps": self.throughput_gbps,
            },
            "thermal": {
                "peak_temp_c": self.peak_temp_c,
                "avg_clock_ghz": self.avg_clock_ghz,
                "throttle_time_ms": self.throttle_time_ms,
                "estimated_power_w": self.estimated_power_w,
                "utilization": self.utilization,
                "grid": {"cols": self.grid_cols, "rows": self.grid_rows},
                "core_temperatures": list(self.thermal_data),
            },
            "tick_count": self.tick_count,
            "status": self.status.value,
        }


class GpuKernelSimulation:
    """
    Mutable state of one GPU kernel run.

    Each instance owns its numpy Generator; two simulations built with the
    same inputs and seed produce identical results.
    """

    def __init__(
        self,
        gpu_config: GpuConfig,
        workload: GpuBenchmarkInfo,
        access_pattern: Union[AccessPattern, str] = AccessPattern.STRIDED,
        seed: Optional[int] = None,
        max_ticks: int = DEFAULT_MAX_TICKS,
    ):
        if max_ticks < 1:
            raise ConfigValidationError(f"max_ticks must be >= 1, got {max_ticks}")
        # Configs are mutable; check them again now that the run is starting
        gpu_config.validate()
        workload.validate()
        require_stable_step(
            gpu_config.total_thermal_resistance, gpu_config.thermal_capacitance_j_per_c, TICK_S
        )

        self.config = gpu_config
        self.workload = workload
        self.access_pattern = AccessPattern.parse(access_pattern)
        self.max_ticks = max_ticks

        self.required_ops = workload.required_ops(gpu_config.computational_intensity)
        self.grid = CoreGrid.for_cores(gpu_config.cores)
        self._xs, self._ys = self.grid.coordinates()
        self._rng = np.random.default_rng(seed)
        self.hotspots = HotspotField(self.grid, self._rng)

        self.temperatures = np.full(self.grid.cells, float(gpu_config.ambient_temp_c))
        self.tick = 0
        self.ops_completed = 0.0
        self.clock_ghz = float(gpu_config.clock_ghz)
        self.is_throttling = False
        self.peak_temp_c = float(gpu_config.ambient_temp_c)
        self.clock_sum_ghz = 0.0
        self.throttle_time_ms = 0.0

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    @property
    def elapsed_ms(self) -> float:
        return self.tick * TICK_MS

    @property
    def is_degenerate(self) -> bool:
        return self.required_ops <= 0

    @property
    def is_complete(self) -> bool:
        return self.is_degenerate or self.ops_completed >= self.required_ops

    @property
    def done(self) -> bool:
        return self.is_complete or self.tick >= self.max_ticks

    @property
    def progress(self) -> float:
        if self.is_degenerate:
            return 1.0
        return min(1.0, self.ops_completed / self.required_ops)

    @property
    def status(self) -> SimulationStatus:
        if self.is_degenerate:
            return SimulationStatus.DEGENERATE
        if not self.is_complete and self.tick >= self.max_ticks:
            return SimulationStatus.BUDGET_EXCEEDED
        return SimulationStatus.COMPLETED

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def step(self) -> GpuTickSnapshot:
        """Advance one tick and return a snapshot of the new state."""
        if self.done:
            raise RuntimeError("GPU simulation has already finished")

        cfg = self.config

        # 1. Work done at the clock in effect for this tick
        self.ops_completed += cfg.cores * self.clock_ghz * 1e9 * TICK_S

        # 2. Thermal
        power_per_core = (cfg.max_power_w / cfg.cores) * (self.clock_ghz / cfg.clock_ghz)
        self.hotspots.advance()
        core_power = power_per_core * self.hotspots.power_factors(self._xs, self._ys)
        self.temperatures = integrate_temperatures(
            self.temperatures,
            core_power,
            cfg.ambient_temp_c,
            cfg.total_thermal_resistance,
            cfg.thermal_capacitance_j_per_c,
            TICK_S,
        )

        # 3. Throttling
        max_temp = float(self.temperatures.max())
        self.peak_temp_c = max(self.peak_temp_c, max_temp)
        if max_temp > cfg.throttle_temp_c:
            excess = max_temp - cfg.throttle_temp_c
            factor = max(THROTTLE_CLOCK_FLOOR, 1.0 - excess * THROTTLE_SLOPE_PER_C)
            self.clock_ghz = cfg.clock_ghz * factor
            self.throttle_time_ms += TICK_MS
            self.is_throttling = True
        else:
            self.clock_ghz = min(cfg.clock_ghz, self.clock_ghz + cfg.clock_ghz * CLOCK_RECOVERY_PER_TICK)
            self.is_throttling = False

        # 4. Bookkeeping
        self.tick += 1
        self.clock_sum_ghz += self.clock_ghz

        return self.snapshot()

    def snapshot(self) -> GpuTickSnapshot:
        return GpuTickSnapshot(
            tick=self.tick,
            elapsed_ms=self.elapsed_ms,
            ops_completed=self.ops_completed,
            progress=self.progress,
            clock_ghz=self.clock_ghz,
            is_throttling=self.is_throttling,
            max_temp_c=float(self.temperatures.max()),
            temperatures=tuple(self.temperatures.tolist()),
        )

    def ticks(self) -> Iterator[GpuTickSnapshot]:
        """Yield a snapshot per tick until the run completes or the tick budget runs out."""
        while not self.done:
            yield self.step()

    def run(
        self,
        on_tick: Optional[Callable[[GpuTickSnapshot], None]] = None,
        snapshot_every: int = 1,
    ) -> 'GpuBenchmarkResult':
        """
        Drive the simulation to the end.

        Args:
            on_tick: Optional callback receiving snapshots
            snapshot_every: Deliver every Nth snapshot (the final one is always
                delivered). Has no effect on the result.
        """
        if snapshot_every < 1:
            raise ConfigValidationError(f"snapshot_every must be >= 1, got {snapshot_every}")

        for snap in self.ticks():
            if on_tick is not None and (snap.tick % snapshot_every == 0 or self.done):
                on_tick(snap)
        return self.result()

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    @property
    def avg_clock_ghz(self) -> float:
        return self.clock_sum_ghz / self.tick if self.tick > 0 else 0.0

    def result(self) -> GpuBenchmarkResult:
        """Metrics for the current state (final once done)."""
        cfg = self.config
        status = self.status
        avg_clock = self.avg_clock_ghz
        total_bytes = self.workload.total_bytes
        hit_rate = effective_locality(self.workload.locality_factor, self.access_pattern)

        # A truncated run is measured on the work it actually did
        if status == SimulationStatus.BUDGET_EXCEEDED:
            work_ops = self.ops_completed
        else:
            work_ops = self.required_ops

        compute_rate = cfg.cores * avg_clock * 1e9       # ops/s at the average clock
        compute_time_ms = work_ops / compute_rate * 1000.0 if compute_rate > 0 else 0.0

        memory_time_ms = total_bytes / (cfg.memory_bandwidth_gbps * 1e9) * 1000.0
        if avg_clock > 0:
            penalty_cycles = cfg.l2_latency_cycles * (1.0 - hit_rate)
            memory_time_ms += penalty_cycles / (avg_clock * 1e9) * 1000.0

        kernel_time_ms = self.elapsed_ms
        kernel_time_s = kernel_time_ms / 1000.0
        throughput_gbps = total_bytes / kernel_time_s / 1e9 if kernel_time_s > 0 else 0.0

        max_possible_ops = compute_rate * kernel_time_s * OPS_PER_CYCLE
        utilization = min(1.0, work_ops / max_possible_ops) if max_possible_ops > 0 else 0.0

        if status == SimulationStatus.BUDGET_EXCEEDED:
            logger.warning(
                "%s: tick budget of %d exhausted at %.1f%% progress; metrics are best-effort",
                self.workload.name, self.max_ticks, self.progress * 100,
            )

        return GpuBenchmarkResult(
            benchmark_name=self.workload.name,
            config=cfg,
            access_pattern=self.access_pattern,
            theoretical_tflops=cfg.cores * cfg.clock_ghz * OPS_PER_CYCLE / 1000.0,
            kernel_time_ms=kernel_time_ms,
            compute_time_ms=compute_time_ms,
            memory_time_ms=memory_time_ms,
            is_memory_bound=memory_time_ms > compute_time_ms,
            l2_hit_rate=hit_rate,
            throughput_gbps=throughput_gbps,
            peak_temp_c=self.peak_temp_c,
            avg_clock_ghz=avg_clock,
            throttle_time_ms=self.throttle_time_ms,
            estimated_power_w=cfg.max_power_w * avg_clock / cfg.clock_ghz,
            utilization=utilization,
            thermal_data=tuple(self.temperatures.tolist()),
            grid_cols=self.grid.cols,
            grid_rows=self.grid.rows,
            tick_count=self.tick,
            status=status,
        )


def resolve_workload(workload: Union[GpuBenchmarkInfo, str]) -> GpuBenchmarkInfo:
    """Accept a GpuBenchmarkInfo or a catalog key."""
    if isinstance(workload, GpuBenchmarkInfo):
        return workload
    bench = get_gpu_benchmark(workload)
    if bench is None:
        raise ConfigValidationError(f"Unknown GPU benchmark: {workload}")
    return bench


def run_gpu_benchmark(
    gpu_config: GpuConfig,
    workload: Union[GpuBenchmarkInfo, str],
    access_pattern: Union[AccessPattern, str] = AccessPattern.STRIDED,
    on_tick: Optional[Callable[[GpuTickSnapshot], None]] = None,
    seed: Optional[int] = None,
    max_ticks: int = DEFAULT_MAX_TICKS,
    snapshot_every: int = 1,
) -> GpuBenchmarkResult:
    """
    Simulate one GPU kernel to completion.

    Args:
        gpu_config: GPU under evaluation
        workload: GpuBenchmarkInfo or catalog key (e.g. 'ml:gemm_small')
        access_pattern: 'sequential', 'strided' or 'random'
        on_tick: Optional per-tick snapshot callback
        seed: Seed for hotspot placement; None draws fresh entropy
        max_ticks: Tick budget
        snapshot_every: Callback thinning, see GpuKernelSimulation.run

    Returns:
        GpuBenchmarkResult

    Raises:
        ConfigValidationError: unknown workload or access pattern, bad budget,
            invalid config, or a thermal time constant too short for the tick
    """
    bench = resolve_workload(workload)
    sim = GpuKernelSimulation(gpu_config, bench, access_pattern, seed=seed, max_ticks=max_ticks)

    logger.info(
        "Running GPU benchmark %s: %.3g ops, %.3g bytes, %s access on %d cores @ %.2f GHz",
        bench.name, sim.required_ops, bench.total_bytes, sim.access_pattern.value,
        gpu_config.cores, gpu_config.clock_ghz,
    )
    if sim.is_degenerate:
        logger.info("%s requires no work, returning zero-time result", bench.name)

    result = sim.run(on_tick=on_tick, snapshot_every=snapshot_every)

    logger.debug(
        "%s: %d ticks, avg clock %.3f GHz, peak %.2fC, throttled %.0f ms",
        bench.name, result.tick_count, result.avg_clock_ghz,
        result.peak_temp_c, result.throttle_time_ms,
    )
    logger.info(
        "GPU benchmark complete: %.1f ms kernel time (%s)",
        result.kernel_time_ms, "memory bound" if result.is_memory_bound else "compute bound",
    )
    return result
