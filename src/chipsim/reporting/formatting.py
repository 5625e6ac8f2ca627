"""
Text reports for CPU and GPU benchmark results.

JSON output goes through each result's to_dict(); this module only renders
human-readable tables, bar charts and the ASCII per-core thermal map.
"""

from typing import Dict, List, Optional, Sequence

from chipsim.analysis.comparison import SystemComparison, compare_systems
from chipsim.cpu.benchmark import BenchmarkResult
from chipsim.gpu.simulator import GpuBenchmarkResult
from chipsim.hardware.config import GpuConfig, SystemConfig


BANNER_WIDTH = 80
BAR_WIDTH = 40

# Coolest to hottest
THERMAL_RAMP = " .:-=+*#%@"


def _banner(title: str) -> List[str]:
    return ["=" * BANNER_WIDTH, f"  {title}", "=" * BANNER_WIDTH, ""]


def _bar(fraction: float, width: int = BAR_WIDTH) -> str:
    fraction = min(1.0, max(0.0, fraction))
    filled = int(fraction * width)
    return "#" * filled + "." * (width - filled)


def _signed(value: float, suffix: str = "%") -> str:
    return f"{'+' if value > 0 else ''}{value:.1f}{suffix}"


# =============================================================================
# Configurations
# =============================================================================

def format_system_config(config: SystemConfig) -> str:
    """One system configuration as an indented block."""
    lines = [f"  {config.name}:"]
    mem = config.main_memory
    lines.append(
        f"    Main Memory:       {mem.latency_cycles:.0f} cycles, "
        f"{mem.bandwidth_gbps:.1f} GB/s, {mem.power_w:.1f} W"
    )
    for level_name, level in config.cache.levels().items():
        if level.enabled:
            lines.append(
                f"    {level_name.upper()}:                {level.size_kb:.0f} KB, "
                f"{level.latency_cycles:.0f} cycles, {level.associativity}-way"
            )
        else:
            lines.append(f"    {level_name.upper()}:                disabled")
    if config.tsv.enabled:
        lines.append(
            f"    TSV:               {config.tsv.latency_cycles:.0f} cycle hop, "
            f"{config.tsv.power_per_bit_fj:.1f} fJ/bit"
        )
    else:
        lines.append("    TSV:               none")
    th = config.thermal
    lines.append(
        f"    Thermal:           {th.ambient_c:.0f}C ambient, {th.thermal_resistance_c_per_w:.2f} C/W, "
        f"limit {th.tdp_limit_c:.0f}C"
    )
    return "\n".join(lines)


def format_gpu_config(config: GpuConfig) -> str:
    lines = ["  GPU Configuration:"]
    lines.append(f"    Cores:             {config.cores:,} @ {config.clock_ghz:.2f} GHz")
    lines.append(f"    Memory Bandwidth:  {config.memory_bandwidth_gbps:.0f} GB/s")
    lines.append(
        f"    L2 Cache:          {config.l2_size_kb:.0f} KB, {config.l2_latency_cycles:.0f} cycles, "
        f"{config.l2_associativity}-way"
    )
    lines.append(f"    Max Power:         {config.max_power_w:.0f} W")
    lines.append(
        f"    Thermal:           {config.ambient_temp_c:.0f}C ambient, "
        f"{config.total_thermal_resistance:.2f} C/W, throttle at {config.throttle_temp_c:.0f}C"
    )
    return "\n".join(lines)


# =============================================================================
# CPU
# =============================================================================

def format_comparison_table(comparison: SystemComparison) -> str:
    """Per-metric 2D / 3D table with signed improvement."""
    lines = []
    lines.append("  " + "-" * 76)
    lines.append(f"    {'Metric':<24} {'2D Baseline':>14} {'3D Stacked':>14} {'Improvement':>12}")
    lines.append("  " + "-" * 76)
    for row in comparison.rows:
        marker = {"better": "+", "worse": "-", "same": " "}[row.verdict]
        lines.append(
            f"    {row.label:<24} {row.format_value(row.baseline_value):>14} "
            f"{row.format_value(row.stacked_value):>14} {row.improvement_percent:>10.1f}% {marker}"
        )
    lines.append("  " + "-" * 76)
    return "\n".join(lines)


def format_cpu_result(
    result: BenchmarkResult,
    program_name: Optional[str] = None,
    configs: Optional[Sequence[SystemConfig]] = None,
) -> str:
    """Format a paired 2D / 3D CPU benchmark as text."""
    comparison = compare_systems(result)
    mix = result.instruction_mix
    lines = []

    title = "2D vs 3D CPU BENCHMARK"
    if program_name:
        title += f": {program_name.upper()}"
    lines.extend(_banner(title))

    if configs:
        lines.append("  Systems:")
        for config in configs:
            lines.append(format_system_config(config))
        lines.append("")

    lines.append("  Workload:")
    lines.append(f"    Instructions:          {mix.total:,} ({mix.memory_ops:,} memory, {mix.non_memory_ops:,} other)")
    lines.append(f"    Measured Memory Mix:   {mix.memory_ratio * 100:.1f}%")
    lines.append(f"    Modeled Memory Mix:    {result.instruction_mix_percent:.1f}%")
    lines.append(f"    Access Pattern:        {result.access_pattern.value}")
    lines.append(f"    Status:                {result.status.value}")
    if mix.truncated:
        lines.append("    ! Instruction cap reached, remaining lines were not counted")
    lines.append("")

    lines.append("  Summary:")
    lines.append(f"    Performance Gain:      {_signed(comparison.cycle_improvement_percent)} (fewer cycles)")
    lines.append(f"    Power Efficiency:      {_signed(comparison.power_improvement_percent)} (lower total power)")
    lines.append(f"    Temperature Change:    {_signed(comparison.temperature_delta_c, 'C')} (3D vs 2D)")
    lines.append("")

    lines.append("  Metric Comparison:")
    lines.append(format_comparison_table(comparison))
    lines.append("")

    lines.append("  Cache Hit Rates:")
    lines.append(f"    {'Level':<8} {'2D Baseline':>12} {'3D Stacked':>12}")
    base_cache, stacked_cache = result.baseline.cache, result.stacked.cache
    for level in ("l1", "l2", "l3"):
        b = getattr(base_cache, level).hit_rate
        s = getattr(stacked_cache, level).hit_rate
        lines.append(f"    {level.upper():<8} {b * 100:>11.1f}% {s * 100:>11.1f}%")
    lines.append("")

    lines.append("  Total Cycles:")
    max_cycles = max(result.baseline.total_cycles, result.stacked.total_cycles)
    for metrics in (result.baseline, result.stacked):
        frac = metrics.total_cycles / max_cycles if max_cycles > 0 else 0.0
        lines.append(f"    {metrics.system_name:<12} [{_bar(frac)}] {metrics.total_cycles:,.0f}")
    lines.append("")

    return "\n".join(lines)


def format_register_file(registers: Dict[str, int], per_row: int = 4) -> str:
    """Register values as a grid. The values are illustrative and not used by the model."""
    lines = ["  Register File (illustrative):"]
    items = list(registers.items())
    for start in range(0, len(items), per_row):
        cells = [f"{name:>3} = {value:>4}" for name, value in items[start:start + per_row]]
        lines.append("    " + "   ".join(cells))
    return "\n".join(lines)


# =============================================================================
# GPU
# =============================================================================

def format_thermal_map(
    temperatures: Sequence[float],
    cols: int,
    low_c: float,
    high_c: float,
) -> List[str]:
    """
    Render per-core temperatures as rows of ramp characters.

    Temperatures are scaled between low_c and high_c; cells past the last
    simulated core are left blank.
    """
    span = high_c - low_c
    rows = []
    for start in range(0, len(temperatures), cols):
        chunk = temperatures[start:start + cols]
        chars = []
        for t in chunk:
            frac = (t - low_c) / span if span > 0 else 0.0
            frac = min(1.0, max(0.0, frac))
            chars.append(THERMAL_RAMP[int(frac * (len(THERMAL_RAMP) - 1))])
        rows.append("".join(chars).ljust(cols))
    return rows


def format_gpu_result(result: GpuBenchmarkResult, show_thermal_map: bool = True) -> str:
    """Format a GPU kernel simulation result as text."""
    cfg = result.config
    lines = []

    lines.extend(_banner(f"GPU KERNEL SIMULATION: {result.benchmark_name.upper()}"))
    lines.append(format_gpu_config(cfg))
    lines.append(f"    Theoretical Peak:  {result.theoretical_tflops:.2f} TFLOPs")
    lines.append("")

    lines.append("  Run:")
    lines.append(f"    Access Pattern:        {result.access_pattern.value}")
    lines.append(f"    Ticks:                 {result.tick_count:,}")
    lines.append(f"    Status:                {result.status.value}")
    lines.append("")

    lines.append("  Timing:")
    lines.append(f"    Kernel Time:           {result.kernel_time_ms:.1f} ms")
    lines.append(f"    Compute Time:          {result.compute_time_ms:.3f} ms")
    lines.append(f"    Memory Time:           {result.memory_time_ms:.3f} ms")
    lines.append(f"    Bottleneck:            {'memory' if result.is_memory_bound else 'compute'}")
    lines.append("")

    lines.append("  Memory:")
    lines.append(f"    L2 Hit Rate:           {result.l2_hit_rate * 100:.1f}%")
    lines.append(f"    Effective Throughput:  {result.throughput_gbps:.2f} GB/s")
    lines.append("")

    lines.append("  Thermal / Power:")
    lines.append(f"    Peak Temperature:      {result.peak_temp_c:.2f}C")
    lines.append(f"    Average Clock:         {result.avg_clock_ghz:.3f} GHz ({result.avg_clock_ghz / cfg.clock_ghz * 100:.0f}% of base)")
    lines.append(f"    Throttled Time:        {result.throttle_time_ms:.0f} ms ({result.throttle_fraction * 100:.0f}%)")
    lines.append(f"    Estimated Power:       {result.estimated_power_w:.1f} W")
    lines.append(f"    Core Utilization:      [{_bar(result.utilization)}] {result.utilization * 100:.0f}%")
    lines.append("")

    if show_thermal_map and result.thermal_data:
        low = cfg.ambient_temp_c
        high = max(max(result.thermal_data), cfg.throttle_temp_c)
        lines.append(f"  Core Temperatures ({result.grid_cols}x{result.grid_rows} grid, "
                     f"'{THERMAL_RAMP[1]}' = {low:.0f}C ... '{THERMAL_RAMP[-1]}' = {high:.0f}C):")
        lines.append("    +" + "-" * result.grid_cols + "+")
        for row in format_thermal_map(result.thermal_data, result.grid_cols, low, high):
            lines.append(f"    |{row}|")
        lines.append("    +" + "-" * result.grid_cols + "+")
        lines.append("")

    return "\n".join(lines)
