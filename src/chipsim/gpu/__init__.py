"""
GPU Kernel Model

Time-stepped simulation of an analytic GPU workload with a per-core thermal
grid, moving hotspots and clock throttling.
"""

from .workloads import (
    CATEGORY_NAMES,
    CUSTOM_BENCHMARK_KEY,
    GpuBenchmarkInfo,
    GPU_BENCHMARKS,
    get_gpu_benchmark,
    list_gpu_benchmarks,
    benchmarks_by_category,
    custom_benchmark,
)

from .thermal import (
    MAX_SIMULATED_CORES,
    CoreGrid,
    HotspotField,
    integrate_temperatures,
    require_stable_step,
    step_ratio,
)

from .simulator import (
    TICK_MS,
    DEFAULT_MAX_TICKS,
    GpuTickSnapshot,
    GpuBenchmarkResult,
    GpuKernelSimulation,
    effective_locality,
    resolve_workload,
    run_gpu_benchmark,
)

__all__ = [
    # Workloads
    'CATEGORY_NAMES',
    'CUSTOM_BENCHMARK_KEY',
    'GpuBenchmarkInfo',
    'GPU_BENCHMARKS',
    'get_gpu_benchmark',
    'list_gpu_benchmarks',
    'benchmarks_by_category',
    'custom_benchmark',
    # Thermal grid
    'MAX_SIMULATED_CORES',
    'CoreGrid',
    'HotspotField',
    'integrate_temperatures',
    'require_stable_step',
    'step_ratio',
    # Simulator
    'TICK_MS',
    'DEFAULT_MAX_TICKS',
    'GpuTickSnapshot',
    'GpuBenchmarkResult',
    'GpuKernelSimulation',
    'effective_locality',
    'resolve_workload',
    'run_gpu_benchmark',
]
