"""
Cache / AMAT Model

Computes per-level miss rates and the composed Average Memory Access Time
(AMAT) for one SystemConfig under an access-pattern hint.

Miss-rate heuristic (not trace driven):
    base_miss = 1 / (size_kb / 4)        more capacity -> fewer conflict misses
    miss      = base_miss * pattern_multiplier

AMAT composition, bottom-up:
    L3_time = L3.lat + m3 * mem.lat                  (mem.lat if L3 disabled)
    L2_time = L2.lat + m2 * (L3_time + tsv)          (L3_time if L2 disabled)
    AMAT    = L1.lat + m1 * (L2_time + tsv)          (L2_time if L1 disabled)

tsv is the per-hop TSV latency for stacked systems and 0 otherwise. A hop is
only charged when an enabled level issues the miss; a disabled level is a pure
pass-through, so a hierarchy with every level disabled costs exactly the
main-memory latency.
"""

from dataclasses import dataclass
from typing import Dict, Union

from chipsim.core.structures import AccessPattern
from chipsim.hardware.config import CacheLevelConfig, SystemConfig


# Miss-rate multiplier per access pattern, uniform across levels
ACCESS_PATTERN_MISS_MULTIPLIER: Dict[AccessPattern, float] = {
    AccessPattern.SEQUENTIAL: 0.1,
    AccessPattern.STRIDED: 0.5,
    AccessPattern.RANDOM: 1.0,
}

# KB of capacity per unit of inverse miss rate
MISS_RATE_CAPACITY_KB = 4.0


@dataclass(frozen=True)
class CacheLevelMetrics:
    """Hit/miss rates for one cache level."""
    hit_rate: float
    miss_rate: float

    def to_dict(self) -> Dict[str, float]:
        return {"hit_rate": self.hit_rate, "miss_rate": self.miss_rate}


@dataclass(frozen=True)
class CacheMetrics:
    """Hit/miss rates for the full hierarchy."""
    l1: CacheLevelMetrics
    l2: CacheLevelMetrics
    l3: CacheLevelMetrics

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {"l1": self.l1.to_dict(), "l2": self.l2.to_dict(), "l3": self.l3.to_dict()}


@dataclass(frozen=True)
class CacheAnalysis:
    """AMAT plus per-level metrics for one system."""
    amat: float
    cache: CacheMetrics


def compute_miss_rate(
    level: CacheLevelConfig,
    access_pattern: Union[AccessPattern, str] = AccessPattern.RANDOM,
) -> float:
    """
    Heuristic miss rate for one cache level.

    A disabled level, or one with no capacity, misses every access.
    The result is clamped to [0, 1].
    """
    if not level.enabled or level.size_kb <= 0:
        return 1.0
    pattern = AccessPattern.parse(access_pattern)
    base_miss = 1.0 / (level.size_kb / MISS_RATE_CAPACITY_KB)
    return min(1.0, base_miss * ACCESS_PATTERN_MISS_MULTIPLIER[pattern])


def _level_time(
    level: CacheLevelConfig,
    miss_rate: float,
    next_level_time: float,
    hop_latency: float = 0.0,
) -> float:
    """Expected cycles at a level; a disabled level passes next_level_time straight through."""
    if not level.enabled:
        return next_level_time
    return level.latency_cycles + miss_rate * (next_level_time + hop_latency)


def compute_amat(
    config: SystemConfig,
    access_pattern: Union[AccessPattern, str] = AccessPattern.RANDOM,
) -> CacheAnalysis:
    """
    Compose the AMAT of a system's cache hierarchy.

    Args:
        config: System under evaluation
        access_pattern: Pattern hint, scales every level's miss rate

    Returns:
        CacheAnalysis with the scalar AMAT (cycles) and per-level rates
    """
    pattern = AccessPattern.parse(access_pattern)
    cache = config.cache
    hop = config.hop_latency_cycles

    m1 = compute_miss_rate(cache.l1, pattern)
    m2 = compute_miss_rate(cache.l2, pattern)
    m3 = compute_miss_rate(cache.l3, pattern)

    l3_time = _level_time(cache.l3, m3, config.main_memory.latency_cycles)
    l2_time = _level_time(cache.l2, m2, l3_time, hop)
    amat = _level_time(cache.l1, m1, l2_time, hop)

    metrics = CacheMetrics(
        l1=CacheLevelMetrics(hit_rate=1.0 - m1, miss_rate=m1),
        l2=CacheLevelMetrics(hit_rate=1.0 - m2, miss_rate=m2),
        l3=CacheLevelMetrics(hit_rate=1.0 - m3, miss_rate=m3),
    )
    return CacheAnalysis(amat=amat, cache=metrics)
