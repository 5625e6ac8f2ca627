"""
CPU Performance / Power / Thermal Model

Pipeline for one system:
    instruction text -> instruction mix -> cache/AMAT -> power/thermal -> metrics

run_cpu_benchmark() evaluates a 2D baseline and a 3D stacked system on the
same instruction stream and reports the cycle improvement.
"""

from .instruction_mix import (
    MAX_INSTRUCTIONS,
    InstructionMix,
    parse_program,
    is_memory_op,
    classify_instructions,
    analyze_program,
    random_register_file,
)

from .cache import (
    ACCESS_PATTERN_MISS_MULTIPLIER,
    CacheLevelMetrics,
    CacheMetrics,
    CacheAnalysis,
    compute_miss_rate,
    compute_amat,
)

from .power_thermal import (
    MEMORY_OP_ENERGY_PJ,
    NON_MEMORY_OP_ENERGY_PJ,
    CLOCK_FREQUENCY_HZ,
    MAX_THROTTLE_PERCENT,
    PowerBreakdown,
    PowerThermalEstimate,
    estimate_power_thermal,
)

from .benchmark import (
    BenchmarkMetrics,
    BenchmarkResult,
    cycle_improvement_percent,
    simulate_system,
    run_cpu_benchmark,
)

from .programs import (
    BenchmarkProgram,
    BENCHMARK_PROGRAMS,
    DEFAULT_PROGRAM,
    get_program,
    list_programs,
    list_categories,
)

__all__ = [
    # Instruction mix
    'MAX_INSTRUCTIONS',
    'InstructionMix',
    'parse_program',
    'is_memory_op',
    'classify_instructions',
    'analyze_program',
    'random_register_file',
    # Cache / AMAT
    'ACCESS_PATTERN_MISS_MULTIPLIER',
    'CacheLevelMetrics',
    'CacheMetrics',
    'CacheAnalysis',
    'compute_miss_rate',
    'compute_amat',
    # Power / thermal
    'MEMORY_OP_ENERGY_PJ',
    'NON_MEMORY_OP_ENERGY_PJ',
    'CLOCK_FREQUENCY_HZ',
    'MAX_THROTTLE_PERCENT',
    'PowerBreakdown',
    'PowerThermalEstimate',
    'estimate_power_thermal',
    # Orchestrator
    'BenchmarkMetrics',
    'BenchmarkResult',
    'cycle_improvement_percent',
    'simulate_system',
    'run_cpu_benchmark',
    # Programs
    'BenchmarkProgram',
    'BENCHMARK_PROGRAMS',
    'DEFAULT_PROGRAM',
    'get_program',
    'list_programs',
    'list_categories',
]
