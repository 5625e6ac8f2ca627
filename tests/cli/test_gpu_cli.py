"""
Tests for the GPU kernel simulation CLI.
"""

import json
import subprocess
import sys
from argparse import Namespace
from pathlib import Path

import pytest

# Add repo root to path
repo_root = Path(__file__).parent.parent.parent
cli_path = repo_root / "cli"

# Import from cli directory
import importlib.util
spec = importlib.util.spec_from_file_location("run_gpu_benchmark", cli_path / "run_gpu_benchmark.py")
gpu_cli = importlib.util.module_from_spec(spec)
spec.loader.exec_module(gpu_cli)

main = gpu_cli.main
build_gpu_config = gpu_cli.build_gpu_config


def _override_args(**kwargs):
    values = {flag: None for flag in gpu_cli.CONFIG_OVERRIDES}
    values["config"] = None
    values.update(kwargs)
    return Namespace(**values)


class TestListing:

    def test_list_all(self, capsys):
        assert main(["--list-workloads"]) == 0
        out = capsys.readouterr().out
        assert "Machine Learning" in out
        assert "crypto:sha256" in out

    def test_list_category(self, capsys):
        assert main(["--list-workloads", "gfx"]) == 0
        out = capsys.readouterr().out
        assert "gfx:ray_tracing_bvh" in out
        assert "ml:gemm_small" not in out


class TestRun:

    def test_text_output(self, capsys):
        assert main(["--workload", "ml:gemm_small", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "GPU KERNEL SIMULATION" in out
        assert "Core Temperatures" in out

    def test_no_thermal_map(self, capsys):
        assert main(["--seed", "1", "--no-thermal-map"]) == 0
        assert "Core Temperatures" not in capsys.readouterr().out

    def test_json_output(self, capsys):
        assert main(["--workload", "data:histogram", "--pattern", "random", "--seed", "3", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["benchmark"] == "Data: Histogram"
        assert data["access_pattern"] == "random"
        assert data["memory"]["l2_hit_rate"] == pytest.approx(0.04)
        assert data["status"] == "completed"

    def test_custom_workload(self, capsys):
        assert main(["--workload", "custom", "--custom-items", "0", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "degenerate"
        assert data["tick_count"] == 0

    def test_overrides(self, capsys):
        assert main(["--workload", "ml:gemm_large", "--throttle-temp", "20", "--cores", "64",
                     "--seed", "2", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["config"]["cores"] == 64
        assert data["thermal"]["throttle_time_ms"] > 0
        assert len(data["thermal"]["core_temperatures"]) == 64

    def test_config_file(self, tmp_path, capsys):
        path = tmp_path / "gpu.json"
        path.write_text(json.dumps({"cores": 16, "clock_ghz": 2.0}))
        assert main(["--config", str(path), "--clock", "1.0", "--seed", "1", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["config"]["cores"] == 16
        assert data["config"]["clock_ghz"] == 1.0

    def test_trace(self, capsys):
        assert main(["--workload", "ml:gemm_large", "--seed", "1", "--trace", "2"]) == 0
        err = capsys.readouterr().err
        assert "tick      2" in err
        assert "tick      5" in err
        assert "tick      1 " not in err

    def test_budget(self, capsys):
        assert main(["--workload", "ml:gemm_large", "--max-ticks", "1", "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["status"] == "budget_exceeded"


class TestErrors:

    def test_unknown_workload(self, capsys):
        assert main(["--workload", "ml:nope"]) == 1
        assert "Unknown workload" in capsys.readouterr().err

    def test_invalid_locality(self, capsys):
        assert main(["--workload", "custom", "--custom-locality", "2"]) == 1
        assert "locality_factor" in capsys.readouterr().err

    def test_invalid_override(self, capsys):
        assert main(["--cores", "0"]) == 1
        assert "cores" in capsys.readouterr().err

    def test_invalid_budget(self, capsys):
        assert main(["--max-ticks", "0"]) == 1


class TestBuildGpuConfig:

    def test_defaults(self):
        config = build_gpu_config(_override_args())
        assert config.cores == 1024

    def test_override(self):
        config = build_gpu_config(_override_args(ambient=40.0, max_power=300.0))
        assert config.ambient_temp_c == 40.0
        assert config.max_power_w == 300.0


class TestCLIIntegration:
    """Integration tests for CLI execution."""

    def test_cli_json(self):
        result = subprocess.run(
            [sys.executable, str(cli_path / "run_gpu_benchmark.py"),
             "--workload", "crypto:sha256", "--seed", "7", "--format", "json"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert json.loads(result.stdout)["benchmark"] == "Crypto: SHA-256 Hash"

    def test_cli_unknown_workload(self):
        result = subprocess.run(
            [sys.executable, str(cli_path / "run_gpu_benchmark.py"), "--workload", "xyz"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 1
        assert "Unknown workload" in result.stderr
