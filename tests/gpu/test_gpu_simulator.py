"""
Tests for the GPU kernel time-stepper.
"""

import dataclasses
import math

import pytest

from chipsim.core.errors import ConfigValidationError, SimulationStatus
from chipsim.core.structures import AccessPattern
from chipsim.gpu import (
    TICK_MS,
    GpuKernelSimulation,
    custom_benchmark,
    effective_locality,
    get_gpu_benchmark,
    run_gpu_benchmark,
)
from chipsim.hardware import default_gpu_config


@pytest.fixture
def gpu():
    return default_gpu_config()


@pytest.fixture
def hot_gpu():
    # Throttle point below ambient: throttles from the first tick
    return dataclasses.replace(default_gpu_config(), throttle_temp_c=20.0)


class TestEffectiveLocality:

    def test_sequential_boost_capped(self):
        assert effective_locality(0.9, "sequential") == pytest.approx(0.995)
        assert effective_locality(0.5, "sequential") == pytest.approx(0.6)

    def test_random_penalty(self):
        assert effective_locality(0.9, "random") == pytest.approx(0.36)

    def test_strided_unchanged(self):
        assert effective_locality(0.9, AccessPattern.STRIDED) == 0.9


class TestSingleTickKernel:

    def test_gemm_small(self, gpu):
        result = run_gpu_benchmark(gpu, "ml:gemm_small", seed=1)
        required = 2 * 512 * 512 * 512
        assert result.status is SimulationStatus.COMPLETED
        assert result.tick_count == 1
        assert result.kernel_time_ms == TICK_MS
        assert result.avg_clock_ghz == pytest.approx(1.5)
        assert result.theoretical_tflops == pytest.approx(3.072)
        assert result.compute_time_ms == pytest.approx(required / (1024 * 1.5e9) * 1000)
        assert result.utilization == pytest.approx(required / (1024 * 1.5e9 * 0.02 * 2))
        assert result.estimated_power_w == pytest.approx(250.0)
        assert result.throttle_time_ms == 0.0

    def test_memory_time(self, gpu):
        result = run_gpu_benchmark(gpu, "data:histogram", access_pattern="strided", seed=1)
        base = 4e8 / (512 * 1e9) * 1000
        penalty = 20 * (1 - 0.1) / (1.5e9) * 1000
        assert result.memory_time_ms == pytest.approx(base + penalty)
        assert result.is_memory_bound
        assert result.l2_hit_rate == pytest.approx(0.1)

    def test_compute_bound(self, gpu):
        result = run_gpu_benchmark(gpu, "sci:monte_carlo_pi", seed=1)
        assert result.memory_time_ms == 0.0
        assert not result.is_memory_bound
        assert result.throughput_gbps == 0.0


class TestMultiTickKernel:

    def test_gemm_large_tick_count(self, gpu):
        # 1.37e11 ops at 3.072e10 ops per tick
        result = run_gpu_benchmark(gpu, "ml:gemm_large", seed=1)
        assert result.tick_count == 5
        assert result.kernel_time_ms == pytest.approx(100.0)
        assert result.throughput_gbps == pytest.approx(4 * 4096 * 4096 / 0.1 / 1e9)

    def test_temperatures_rise(self, gpu):
        result = run_gpu_benchmark(gpu, "ml:gemm_large", seed=1)
        assert result.peak_temp_c > gpu.ambient_temp_c
        assert all(t > gpu.ambient_temp_c for t in result.thermal_data)

    @pytest.mark.parametrize("key", ["ml:gemm_large", "data:reduction_sum", "gfx:fragment_simple", "ml:rnn_cell"])
    @pytest.mark.parametrize("pattern", ["sequential", "strided", "random"])
    def test_utilization_bounded(self, gpu, key, pattern):
        result = run_gpu_benchmark(gpu, key, access_pattern=pattern, seed=2)
        assert 0.0 <= result.utilization <= 1.0


class TestThrottling:

    def test_throttles_from_first_tick(self, hot_gpu):
        result = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=4)
        assert result.avg_clock_ghz < hot_gpu.clock_ghz
        assert result.throttle_time_ms == result.kernel_time_ms
        assert result.estimated_power_w < hot_gpu.max_power_w

    def test_first_snapshot_is_throttling(self, hot_gpu):
        sim = GpuKernelSimulation(hot_gpu, get_gpu_benchmark("ml:gemm_large"), seed=4)
        snap = sim.step()
        assert snap.is_throttling
        assert snap.clock_ghz < hot_gpu.clock_ghz

    def test_throttled_run_takes_longer(self, gpu, hot_gpu):
        cool = run_gpu_benchmark(gpu, "ml:gemm_large", seed=4)
        hot = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=4)
        assert hot.tick_count > cool.tick_count

    def test_clock_floor(self):
        # Far above the throttle point the clock bottoms out at 10% of base
        config = dataclasses.replace(default_gpu_config(), throttle_temp_c=-500.0)
        sim = GpuKernelSimulation(config, get_gpu_benchmark("ml:gemm_large"), seed=0)
        assert sim.step().clock_ghz == pytest.approx(0.15)


class TestDegenerateAndBudget:

    def test_zero_items(self, gpu):
        result = run_gpu_benchmark(gpu, custom_benchmark(total_items=0), seed=1)
        assert result.status is SimulationStatus.DEGENERATE
        assert result.tick_count == 0
        assert result.kernel_time_ms == 0.0
        assert result.utilization == 0.0
        assert result.throughput_gbps == 0.0
        assert result.thermal_data == tuple([gpu.ambient_temp_c] * 256)

    def test_zero_intensity(self, gpu):
        config = dataclasses.replace(gpu, computational_intensity=0.0)
        result = run_gpu_benchmark(config, "ml:gemm_small", seed=1)
        assert result.status is SimulationStatus.DEGENERATE
        for value in result.to_dict()["timing"].values():
            assert not isinstance(value, float) or math.isfinite(value)

    def test_tick_budget(self, gpu, caplog):
        with caplog.at_level("WARNING"):
            result = run_gpu_benchmark(gpu, "ml:gemm_large", seed=1, max_ticks=2)
        assert result.status is SimulationStatus.BUDGET_EXCEEDED
        assert result.tick_count == 2
        assert "tick budget" in caplog.text

    def test_invalid_budget(self, gpu):
        with pytest.raises(ConfigValidationError):
            run_gpu_benchmark(gpu, "ml:gemm_small", max_ticks=0)

    def test_unknown_workload(self, gpu):
        with pytest.raises(ConfigValidationError, match="Unknown GPU benchmark"):
            run_gpu_benchmark(gpu, "ml:nope")

    def test_unknown_pattern(self, gpu):
        with pytest.raises(ConfigValidationError):
            run_gpu_benchmark(gpu, "ml:gemm_small", access_pattern="tiled")

    def test_step_after_done(self, gpu):
        sim = GpuKernelSimulation(gpu, get_gpu_benchmark("ml:gemm_small"), seed=1)
        sim.run()
        with pytest.raises(RuntimeError):
            sim.step()

    def test_budget_metrics_use_completed_work(self, gpu):
        # Two ticks at base clock cover 2 * 3.072e10 of the 1.37e11 required ops
        result = run_gpu_benchmark(gpu, "ml:gemm_large", seed=1, max_ticks=2)
        assert result.compute_time_ms == pytest.approx(result.kernel_time_ms)
        assert result.utilization == pytest.approx(0.5)


class TestRevalidation:

    def test_mutated_config_rejected(self, gpu):
        gpu.cores = 0
        with pytest.raises(ConfigValidationError, match="cores"):
            run_gpu_benchmark(gpu, "ml:gemm_small", seed=1)

    def test_mutated_workload_rejected(self, gpu):
        bench = get_gpu_benchmark("ml:gemm_small")
        bench.locality_factor = 1.5
        with pytest.raises(ConfigValidationError, match="locality_factor"):
            GpuKernelSimulation(gpu, bench, seed=1)

    def test_catalog_lookup_returns_copy(self, gpu):
        bench = get_gpu_benchmark("ml:gemm_small")
        bench.total_items = 0
        result = run_gpu_benchmark(gpu, "ml:gemm_small", seed=1)
        assert result.status is SimulationStatus.COMPLETED
        assert result.tick_count == 1


class TestThermalStability:
    # Default R_total is 0.35 C/W, so the 20 ms tick needs C > 0.02 / (2 * 0.35) ~ 0.0286

    def test_short_time_constant_rejected(self, gpu):
        config = dataclasses.replace(gpu, thermal_capacitance_j_per_c=0.028)
        with pytest.raises(ConfigValidationError, match="time constant"):
            run_gpu_benchmark(config, "ml:gemm_small", seed=1)

    def test_very_short_time_constant_rejected(self, gpu):
        config = dataclasses.replace(gpu, thermal_capacitance_j_per_c=0.005, throttle_temp_c=1e9)
        with pytest.raises(ConfigValidationError):
            run_gpu_benchmark(config, "ml:gemm_small", seed=1)

    def test_just_inside_bound_stays_finite(self, gpu):
        config = dataclasses.replace(gpu, thermal_capacitance_j_per_c=0.03, throttle_temp_c=1e9)
        workload = custom_benchmark(ops_per_item=1e6, total_items=1e6)
        result = run_gpu_benchmark(config, workload, seed=3)
        assert result.tick_count > 30
        assert math.isfinite(result.peak_temp_c)
        assert all(math.isfinite(t) for t in result.thermal_data)
        # Settles near the steady state instead of running away
        assert result.peak_temp_c < gpu.ambient_temp_c + 10


class TestThermalArray:

    @pytest.mark.parametrize("cores,expected", [(1, 1), (10, 10), (256, 256), (4096, 256)])
    def test_length(self, cores, expected):
        config = dataclasses.replace(default_gpu_config(), cores=cores)
        result = run_gpu_benchmark(config, "ml:gemm_small", seed=1)
        assert len(result.thermal_data) == expected


class TestDeterminismAndSnapshots:

    def test_same_seed_same_result(self, hot_gpu):
        a = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=11)
        b = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=11)
        assert a.to_dict() == b.to_dict()

    def test_thinning_does_not_change_result(self, hot_gpu):
        every, thinned = [], []
        a = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=5, on_tick=every.append)
        b = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=5, on_tick=thinned.append, snapshot_every=3)
        c = run_gpu_benchmark(hot_gpu, "ml:gemm_large", seed=5)
        assert a.to_dict() == b.to_dict() == c.to_dict()
        assert len(every) == a.tick_count
        assert len(thinned) < len(every)
        assert thinned[-1].tick == a.tick_count

    def test_snapshots_are_copies(self, gpu):
        sim = GpuKernelSimulation(gpu, get_gpu_benchmark("ml:gemm_large"), seed=1)
        first = sim.step()
        before = first.temperatures
        sim.step()
        assert first.temperatures == before
        assert isinstance(first.temperatures, tuple)
        assert first.tick == 1

    def test_ticks_generator(self, gpu):
        sim = GpuKernelSimulation(gpu, get_gpu_benchmark("ml:gemm_large"), seed=1)
        snaps = list(sim.ticks())
        assert [s.tick for s in snaps] == [1, 2, 3, 4, 5]
        assert snaps[-1].progress == 1.0
        assert snaps[0].progress < snaps[-1].progress
        assert sim.result().tick_count == 5

    def test_snapshot_to_dict(self, gpu):
        sim = GpuKernelSimulation(gpu, get_gpu_benchmark("ml:gemm_small"), seed=1)
        data = sim.step().to_dict()
        assert data["tick"] == 1
        assert len(data["temperatures"]) == 256

    def test_result_to_dict(self, gpu):
        data = run_gpu_benchmark(gpu, "ml:gemm_small", seed=1).to_dict()
        assert data["benchmark"] == "ML: GEMM (Small)"
        assert data["access_pattern"] == "strided"
        assert data["status"] == "completed"
        assert data["thermal"]["grid"] == {"cols": 16, "rows": 16}
