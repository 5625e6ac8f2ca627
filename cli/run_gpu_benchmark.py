#!/usr/bin/env python3
"""
GPU Kernel Simulation CLI Tool

Time-steps an analytic GPU workload to completion with a per-core thermal
grid and clock throttling, then reports timing, memory and thermal metrics.

Usage:
    # Catalog workload with the default GPU
    ./cli/run_gpu_benchmark.py --workload ml:gemm_large

    # Random access, reproducible hotspots
    ./cli/run_gpu_benchmark.py --workload data:histogram --pattern random --seed 7

    # Hot environment with an aggressive throttle point
    ./cli/run_gpu_benchmark.py --workload sci:n_body_large --ambient 45 --throttle-temp 50

    # Custom workload
    ./cli/run_gpu_benchmark.py --workload custom --custom-ops 500 --custom-items 1e7

    # Print every 10th tick while running
    ./cli/run_gpu_benchmark.py --workload gfx:ray_tracing_bvh --trace 10

    # JSON output
    ./cli/run_gpu_benchmark.py --workload ml:gemm_small --format json
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

# Add repo root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from chipsim.core.structures import AccessPattern
from chipsim.gpu import (
    CATEGORY_NAMES,
    CUSTOM_BENCHMARK_KEY,
    DEFAULT_MAX_TICKS,
    GPU_BENCHMARKS,
    GpuTickSnapshot,
    benchmarks_by_category,
    custom_benchmark,
    get_gpu_benchmark,
    run_gpu_benchmark,
)
from chipsim.hardware import GpuConfig, default_gpu_config
from chipsim.reporting import format_gpu_result


DEFAULT_WORKLOAD = "ml:gemm_small"

# CLI flag -> GpuConfig field
CONFIG_OVERRIDES = {
    "cores": "cores",
    "clock": "clock_ghz",
    "bandwidth": "memory_bandwidth_gbps",
    "intensity": "computational_intensity",
    "max_power": "max_power_w",
    "throttle_temp": "throttle_temp_c",
    "ambient": "ambient_temp_c",
}


def build_gpu_config(args) -> GpuConfig:
    """Default (or JSON) GPU config with CLI overrides applied."""
    if args.config:
        with open(args.config) as f:
            config = GpuConfig.from_dict(json.load(f))
    else:
        config = default_gpu_config()

    changes = {
        field_name: getattr(args, flag)
        for flag, field_name in CONFIG_OVERRIDES.items()
        if getattr(args, flag) is not None
    }
    return dataclasses.replace(config, **changes) if changes else config


def print_workload_list(category=None):
    print("Available GPU workloads:")
    for cat, keys in benchmarks_by_category().items():
        if category is not None and cat != category:
            continue
        print(f"\n  {CATEGORY_NAMES.get(cat, cat)}:")
        for key in keys:
            bench = GPU_BENCHMARKS[key]
            print(f"    {key:<30} {bench.name:<38} locality {bench.locality_factor:.2f}")


def print_tick(snap: GpuTickSnapshot):
    marker = "!" if snap.is_throttling else " "
    print(
        f"  tick {snap.tick:>6} {snap.elapsed_ms:>9.0f} ms {snap.progress * 100:>6.1f}% "
        f"{snap.clock_ghz:>6.3f} GHz {snap.max_temp_c:>7.2f}C{marker}",
        file=sys.stderr,
    )


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Simulate a GPU kernel with thermal throttling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Catalog workload
  ./cli/run_gpu_benchmark.py --workload ml:gemm_large

  # Hot environment
  ./cli/run_gpu_benchmark.py --workload sci:n_body_large --ambient 45 --throttle-temp 50

  # Custom workload, JSON output
  ./cli/run_gpu_benchmark.py --workload custom --custom-ops 500 --format json
"""
    )

    parser.add_argument(
        "--workload", "-w",
        type=str,
        default=DEFAULT_WORKLOAD,
        help=f"Workload key (default: {DEFAULT_WORKLOAD})"
    )
    parser.add_argument(
        "--pattern",
        choices=[p.value for p in AccessPattern],
        default=AccessPattern.STRIDED.value,
        help="Memory access pattern (default: strided)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for hotspot placement (default: random)"
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=DEFAULT_MAX_TICKS,
        help=f"Tick budget (default: {DEFAULT_MAX_TICKS:,})"
    )

    # Custom workload
    parser.add_argument("--custom-ops", type=float, default=100, help="Custom: ops per item")
    parser.add_argument("--custom-data", type=float, default=50, help="Custom: bytes per item")
    parser.add_argument("--custom-items", type=float, default=1_000_000, help="Custom: total items")
    parser.add_argument("--custom-locality", type=float, default=0.5, help="Custom: locality factor (0-1)")

    # GPU configuration
    parser.add_argument("--config", type=str, help="JSON file describing the GPU")
    parser.add_argument("--cores", type=int, help="Override core count")
    parser.add_argument("--clock", type=float, help="Override base clock in GHz")
    parser.add_argument("--bandwidth", type=float, help="Override memory bandwidth in GB/s")
    parser.add_argument("--intensity", type=float, help="Override computational intensity")
    parser.add_argument("--max-power", type=float, help="Override max power in Watts")
    parser.add_argument("--throttle-temp", type=float, help="Override throttle temperature in Celsius")
    parser.add_argument("--ambient", "-a", type=float, help="Override ambient temperature in Celsius")

    parser.add_argument(
        "--trace",
        type=int,
        metavar="N",
        help="Print every Nth tick to stderr"
    )
    parser.add_argument(
        "--no-thermal-map",
        action="store_true",
        help="Omit the per-core thermal map from text output"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--list-workloads",
        nargs="?",
        const="all",
        metavar="CATEGORY",
        help="List workloads, optionally for one category (ml, sci, gfx, data, crypto)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle list option
    if args.list_workloads:
        print_workload_list(None if args.list_workloads == "all" else args.list_workloads)
        return 0

    try:
        if args.workload == CUSTOM_BENCHMARK_KEY:
            workload = custom_benchmark(
                ops_per_item=args.custom_ops,
                data_per_item_bytes=args.custom_data,
                total_items=args.custom_items,
                locality_factor=args.custom_locality,
            )
        else:
            workload = get_gpu_benchmark(args.workload)
            if workload is None:
                print(f"Error: Unknown workload: {args.workload}", file=sys.stderr)
                print("Use --list-workloads to see available workloads", file=sys.stderr)
                return 1

        config = build_gpu_config(args)

        result = run_gpu_benchmark(
            config,
            workload,
            access_pattern=args.pattern,
            on_tick=print_tick if args.trace else None,
            seed=args.seed,
            max_ticks=args.max_ticks,
            snapshot_every=args.trace or 1,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_gpu_result(result, show_thermal_map=not args.no_thermal_map))
    return 0


if __name__ == "__main__":
    sys.exit(main())
