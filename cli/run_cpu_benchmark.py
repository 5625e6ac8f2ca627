#!/usr/bin/env python3
"""
2D vs 3D CPU Benchmark CLI Tool

Runs an assembly-like program through the instruction-mix, cache/AMAT and
power/thermal models for a 2D baseline and a 3D stacked system, and reports
the cycle, power and temperature deltas.

Usage:
    # Built-in program with default systems
    ./cli/run_cpu_benchmark.py --program bubble_sort

    # Own program, sequential access, 30% memory mix
    ./cli/run_cpu_benchmark.py --file kernel.s --pattern sequential --mix 30

    # Use the memory mix measured from the program text
    ./cli/run_cpu_benchmark.py --program memcpy --measured-mix

    # Custom systems from JSON
    ./cli/run_cpu_benchmark.py --config-2d ddr5.json --config-3d hbm.json

    # JSON output
    ./cli/run_cpu_benchmark.py --program saxpy --format json
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Optional

# Add repo root to path
repo_root = Path(__file__).parent.parent
sys.path.insert(0, str(repo_root / "src"))

from chipsim.analysis import compare_systems
from chipsim.core.errors import ConfigValidationError
from chipsim.core.structures import AccessPattern
from chipsim.cpu import (
    BENCHMARK_PROGRAMS,
    DEFAULT_PROGRAM,
    MAX_INSTRUCTIONS,
    get_program,
    list_categories,
    list_programs,
    random_register_file,
    run_cpu_benchmark,
)
from chipsim.hardware import SystemConfig, get_system_preset, list_system_presets
from chipsim.reporting import format_cpu_result, format_register_file, format_system_config


def load_system_config(path: str, name: str) -> SystemConfig:
    """Load a SystemConfig from a JSON file; the display name defaults to `name`."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"{path}: expected a JSON object describing a system, got {type(data).__name__}"
        )
    data.setdefault("name", name)
    return SystemConfig.from_dict(data)


def apply_thermal_overrides(
    config: SystemConfig,
    ambient: Optional[float] = None,
    tdp_limit: Optional[float] = None,
) -> SystemConfig:
    """Return a copy of config with thermal fields overridden (validated again)."""
    changes = {}
    if ambient is not None:
        changes["ambient_c"] = ambient
    if tdp_limit is not None:
        changes["tdp_limit_c"] = tdp_limit
    if not changes:
        return config
    return dataclasses.replace(config, thermal=dataclasses.replace(config.thermal, **changes))


def print_program_list():
    print("Available programs:")
    for category in list_categories():
        print(f"\n  {category}:")
        for key in list_programs(category):
            program = BENCHMARK_PROGRAMS[key]
            print(f"    {key:<24} {program.name}")


def print_preset_list():
    print("Available system presets:")
    for key in list_system_presets():
        print(f"\n  [{key}]")
        print(format_system_config(get_system_preset(key)))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compare a 2D baseline and a 3D stacked CPU system on one program",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Built-in program
  ./cli/run_cpu_benchmark.py --program bubble_sort

  # Own program, sequential access, 30% memory mix
  ./cli/run_cpu_benchmark.py --file kernel.s --pattern sequential --mix 30

  # Custom systems from JSON
  ./cli/run_cpu_benchmark.py --config-2d ddr5.json --config-3d hbm.json --format json
"""
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--program", "-p",
        type=str,
        default=DEFAULT_PROGRAM,
        help=f"Built-in program key (default: {DEFAULT_PROGRAM})"
    )
    source.add_argument(
        "--file",
        type=str,
        help="Read the program text from a file"
    )

    parser.add_argument(
        "--pattern",
        choices=[p.value for p in AccessPattern],
        default=AccessPattern.RANDOM.value,
        help="Memory access pattern (default: random)"
    )
    mix = parser.add_mutually_exclusive_group()
    mix.add_argument(
        "--mix",
        type=float,
        default=50.0,
        help="Percent of instructions treated as memory ops (default: 50)"
    )
    mix.add_argument(
        "--measured-mix",
        action="store_true",
        help="Use the memory-op percentage measured from the program"
    )
    parser.add_argument(
        "--max-instructions",
        type=int,
        default=MAX_INSTRUCTIONS,
        help=f"Instruction cap (default: {MAX_INSTRUCTIONS:,})"
    )

    parser.add_argument(
        "--config-2d",
        type=str,
        help="JSON file describing the 2D baseline system"
    )
    parser.add_argument(
        "--config-3d",
        type=str,
        help="JSON file describing the 3D stacked system"
    )
    parser.add_argument(
        "--ambient", "-a",
        type=float,
        help="Override ambient temperature in Celsius for both systems"
    )
    parser.add_argument(
        "--tdp-limit",
        type=float,
        help="Override the throttling temperature limit in Celsius for both systems"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the illustrative register file shown in text output"
    )
    parser.add_argument(
        "--no-registers",
        action="store_true",
        help="Omit the register file from text output"
    )

    parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--list-programs",
        action="store_true",
        help="List built-in programs"
    )
    parser.add_argument(
        "--list-presets",
        action="store_true",
        help="List system presets"
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

    # Handle list options
    if args.list_programs:
        print_program_list()
        return 0
    if args.list_presets:
        print_preset_list()
        return 0

    try:
        if args.file:
            program_name = Path(args.file).name
            program_text = Path(args.file).read_text()
        else:
            program = get_program(args.program)
            if program is None:
                print(f"Error: Unknown program: {args.program}", file=sys.stderr)
                print("Use --list-programs to see available programs", file=sys.stderr)
                return 1
            program_name = program.name
            program_text = program.code

        config_2d = (load_system_config(args.config_2d, "2D Baseline")
                     if args.config_2d else get_system_preset("2d"))
        config_3d = (load_system_config(args.config_3d, "3D Stacked")
                     if args.config_3d else get_system_preset("3d"))
        config_2d = apply_thermal_overrides(config_2d, args.ambient, args.tdp_limit)
        config_3d = apply_thermal_overrides(config_3d, args.ambient, args.tdp_limit)

        result = run_cpu_benchmark(
            config_2d,
            config_3d,
            program_text,
            access_pattern=args.pattern,
            instruction_mix_percent=None if args.measured_mix else args.mix,
            max_instructions=args.max_instructions,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        output = {
            "program": program_name,
            "systems": {
                "2d": config_2d.to_dict(),
                "3d": config_3d.to_dict(),
            },
            "result": result.to_dict(),
            "comparison": compare_systems(result).to_dict(),
        }
        print(json.dumps(output, indent=2))
    else:
        print(format_cpu_result(result, program_name=program_name, configs=[config_2d, config_3d]))
        if not args.no_registers:
            print(format_register_file(random_register_file(args.seed)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
