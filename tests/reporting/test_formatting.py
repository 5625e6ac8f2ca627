"""
Tests for text report formatting.
"""

import dataclasses

from chipsim.cpu import get_program, random_register_file, run_cpu_benchmark
from chipsim.gpu import custom_benchmark, run_gpu_benchmark
from chipsim.hardware import DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D, default_gpu_config
from chipsim.reporting import (
    THERMAL_RAMP,
    format_cpu_result,
    format_gpu_result,
    format_register_file,
    format_system_config,
    format_thermal_map,
)


class TestSystemConfigFormatting:

    def test_planar(self):
        text = format_system_config(DEFAULT_CONFIG_2D)
        assert "2D Baseline" in text
        assert "200 cycles" in text
        assert "TSV:               none" in text

    def test_stacked(self):
        text = format_system_config(DEFAULT_CONFIG_3D)
        assert "1 cycle hop" in text

    def test_disabled_level(self):
        config = dataclasses.replace(
            DEFAULT_CONFIG_2D,
            cache=dataclasses.replace(DEFAULT_CONFIG_2D.cache, l3=dataclasses.replace(
                DEFAULT_CONFIG_2D.cache.l3, enabled=False)),
        )
        assert "L3: disabled" in " ".join(format_system_config(config).split())


class TestCpuReport:

    def test_sections(self):
        result = run_cpu_benchmark(DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D, get_program("saxpy").code)
        text = format_cpu_result(result, program_name="SAXPY", configs=[DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D])
        assert "2D vs 3D CPU BENCHMARK: SAXPY" in text
        assert "Metric Comparison:" in text
        assert "Total Cycles" in text
        assert "Throttling (%)" in text
        assert "Cache Hit Rates:" in text
        assert "87.5%" in text  # L1 hit rate under random access

    def test_truncation_notice(self):
        program = "\n".join(["add x1, x1, x1"] * 20)
        result = run_cpu_benchmark(DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D, program, max_instructions=5)
        assert "Instruction cap reached" in format_cpu_result(result)

    def test_empty_program(self):
        result = run_cpu_benchmark(DEFAULT_CONFIG_2D, DEFAULT_CONFIG_3D, "")
        text = format_cpu_result(result)
        assert "degenerate" in text


class TestRegisterFile:

    def test_grid(self):
        lines = format_register_file(random_register_file(seed=3)).splitlines()
        assert lines[0] == "  Register File (illustrative):"
        assert len(lines) == 9
        assert lines[1].startswith("     x0 =    0")
        assert "x31 =" in lines[-1]

    def test_row_width(self):
        lines = format_register_file({"x0": 0, "x1": 7, "x2": 12}, per_row=2).splitlines()
        assert len(lines) == 3
        assert lines[2] == "     x2 =   12"


class TestThermalMap:

    def test_ramp_extremes(self):
        rows = format_thermal_map([25.0, 90.0, 57.5], cols=2, low_c=25.0, high_c=90.0)
        assert rows[0] == THERMAL_RAMP[0] + THERMAL_RAMP[-1]
        assert len(rows) == 2
        assert len(rows[1]) == 2

    def test_flat_range(self):
        rows = format_thermal_map([30.0] * 4, cols=2, low_c=30.0, high_c=30.0)
        assert rows == [THERMAL_RAMP[0] * 2] * 2


class TestGpuReport:

    def test_sections(self):
        result = run_gpu_benchmark(default_gpu_config(), "ml:gemm_small", seed=1)
        text = format_gpu_result(result)
        assert "GPU KERNEL SIMULATION: ML: GEMM (SMALL)" in text
        assert "Kernel Time:           20.0 ms" in text
        assert "Core Temperatures (16x16 grid" in text
        assert sum(1 for line in text.splitlines() if line.startswith("    |")) == 16

    def test_without_map(self):
        result = run_gpu_benchmark(default_gpu_config(), "ml:gemm_small", seed=1)
        assert "Core Temperatures" not in format_gpu_result(result, show_thermal_map=False)

    def test_degenerate(self):
        result = run_gpu_benchmark(default_gpu_config(), custom_benchmark(total_items=0))
        text = format_gpu_result(result)
        assert "degenerate" in text
        assert "Throttled Time:        0 ms (0%)" in text
