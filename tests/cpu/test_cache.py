"""
Tests for the cache / AMAT model.
"""

import dataclasses

import pytest

from chipsim.core.errors import ConfigValidationError
from chipsim.cpu import compute_amat, compute_miss_rate
from chipsim.hardware import (
    CacheHierarchyConfig,
    CacheLevelConfig,
    MainMemoryConfig,
    SystemConfig,
    TSVConfig,
    get_system_preset,
)


def _all_disabled(memory_latency=200, tsv=None):
    off = CacheLevelConfig(enabled=False)
    return SystemConfig(
        main_memory=MainMemoryConfig(latency_cycles=memory_latency),
        cache=CacheHierarchyConfig(l1=off, l2=off, l3=off),
        tsv=tsv or TSVConfig(),
    )


class TestMissRate:

    def test_base_miss_rate(self):
        assert compute_miss_rate(CacheLevelConfig(size_kb=32), "random") == pytest.approx(0.125)
        assert compute_miss_rate(CacheLevelConfig(size_kb=256), "random") == pytest.approx(1 / 64)

    def test_pattern_multipliers(self):
        level = CacheLevelConfig(size_kb=32)
        assert compute_miss_rate(level, "sequential") == pytest.approx(0.0125)
        assert compute_miss_rate(level, "strided") == pytest.approx(0.0625)
        assert compute_miss_rate(level, "random") == pytest.approx(0.125)

    def test_disabled_level_always_misses(self):
        assert compute_miss_rate(CacheLevelConfig(enabled=False), "sequential") == 1.0

    def test_tiny_cache_clamped(self):
        # 1 KB -> raw miss rate 4.0
        assert compute_miss_rate(CacheLevelConfig(size_kb=1), "random") == 1.0

    def test_unknown_pattern(self):
        with pytest.raises(ConfigValidationError):
            compute_miss_rate(CacheLevelConfig(), "zigzag")


class TestAMAT:

    def test_golden_2d_random(self):
        analysis = compute_amat(get_system_preset('2d'), "random")
        assert analysis.amat == pytest.approx(5.569122314453125)

    def test_golden_3d_random(self):
        # TSV hop charged on the L1->L2 and L2->L3 misses
        l3 = 20 + 60 / 512
        l2 = 8 + (l3 + 1) / 64
        expected = 4 + (l2 + 1) / 8
        assert compute_amat(get_system_preset('3d'), "random").amat == pytest.approx(expected)

    def test_all_disabled_equals_memory_latency(self):
        assert compute_amat(_all_disabled(200)).amat == 200

    def test_all_disabled_stacked_equals_memory_latency(self):
        config = _all_disabled(60, TSVConfig(enabled=True, latency_cycles=5))
        assert compute_amat(config).amat == 60

    def test_disabled_l2_passes_through(self):
        config = get_system_preset('2d')
        config.cache.l2 = CacheLevelConfig(enabled=False)
        l3 = 35 + 200 / 512
        assert compute_amat(config, "random").amat == pytest.approx(4 + 0.125 * l3)

    def test_amat_non_increasing_in_cache_size(self):
        base = get_system_preset('2d')
        previous = None
        for size in (8, 16, 32, 64, 128, 256):
            config = dataclasses.replace(
                base,
                cache=dataclasses.replace(base.cache, l1=CacheLevelConfig(size_kb=size, latency_cycles=4)),
            )
            amat = compute_amat(config, "random").amat
            if previous is not None:
                assert amat <= previous
            previous = amat

    def test_sequential_beats_random(self):
        config = get_system_preset('2d')
        assert compute_amat(config, "sequential").amat < compute_amat(config, "random").amat

    def test_hit_rates(self):
        cache = compute_amat(get_system_preset('2d'), "random").cache
        assert cache.l1.hit_rate == pytest.approx(0.875)
        assert cache.l1.hit_rate + cache.l1.miss_rate == pytest.approx(1.0)
        assert cache.l3.miss_rate == pytest.approx(1 / 512)
