"""
Default system configurations.

DEFAULT_CONFIG_2D: DDR-attached planar system (long main-memory latency)
DEFAULT_CONFIG_3D: Memory stacked on logic with 1-cycle TSV hops
DEFAULT_GPU_CONFIG: 1024-core, 1.5 GHz GPU with a 4 MB L2

Each preset is built by a factory. get_system_preset() and default_gpu_config()
return a fresh instance per call, so changes made to one (or to the DEFAULT_*
module constants) never leak into later lookups.
"""

from typing import Callable, Dict, List, Optional

from chipsim.core.structures import BASELINE_2D_NAME, STACKED_3D_NAME
from chipsim.hardware.config import (
    CacheHierarchyConfig,
    CacheLevelConfig,
    GpuConfig,
    MainMemoryConfig,
    SystemConfig,
    ThermalConfig,
    TSVConfig,
)


def planar_system() -> SystemConfig:
    """DDR-attached 2D baseline."""
    return SystemConfig(
        name=BASELINE_2D_NAME,
        main_memory=MainMemoryConfig(latency_cycles=200, power_w=10.5, bandwidth_gbps=25.6),
        cache=CacheHierarchyConfig(
            l1=CacheLevelConfig(enabled=True, size_kb=32, latency_cycles=4, associativity=8),
            l2=CacheLevelConfig(enabled=True, size_kb=256, latency_cycles=12, associativity=8),
            l3=CacheLevelConfig(enabled=True, size_kb=2048, latency_cycles=35, associativity=16),
        ),
        tsv=TSVConfig(enabled=False, latency_cycles=0, power_per_bit_fj=0),
        thermal=ThermalConfig(
            ambient_c=25, tdp_logic_w=65, tdp_memory_w=0,
            thermal_resistance_c_per_w=0.8, tdp_limit_c=95,
        ),
    )


def stacked_system() -> SystemConfig:
    """Memory-on-logic 3D stack; TSV hops cost one cycle."""
    return SystemConfig(
        name=STACKED_3D_NAME,
        main_memory=MainMemoryConfig(latency_cycles=60, power_w=0.1, bandwidth_gbps=1024),
        cache=CacheHierarchyConfig(
            l1=CacheLevelConfig(enabled=True, size_kb=32, latency_cycles=4, associativity=8),
            l2=CacheLevelConfig(enabled=True, size_kb=256, latency_cycles=8, associativity=8),
            l3=CacheLevelConfig(enabled=True, size_kb=2048, latency_cycles=20, associativity=16),
        ),
        tsv=TSVConfig(enabled=True, latency_cycles=1, power_per_bit_fj=5),
        thermal=ThermalConfig(
            ambient_c=25, tdp_logic_w=75, tdp_memory_w=15,
            thermal_resistance_c_per_w=1.2, tdp_limit_c=95,
        ),
    )


def default_gpu_config() -> GpuConfig:
    """A new instance of the default GPU configuration."""
    return GpuConfig(
        cores=1024,
        clock_ghz=1.5,
        memory_bandwidth_gbps=512,
        l2_size_kb=4096,
        l2_latency_cycles=20,
        l2_associativity=16,
        computational_intensity=1.0,
        max_power_w=250,
        junction_to_case_r=0.2,
        case_to_ambient_r=0.15,
        throttle_temp_c=90,
        ambient_temp_c=25,
        thermal_capacitance_j_per_c=4,
    )


# Module-level instances for convenience; lookups below never read them
DEFAULT_CONFIG_2D = planar_system()
DEFAULT_CONFIG_3D = stacked_system()
DEFAULT_GPU_CONFIG = default_gpu_config()


SYSTEM_PRESETS: Dict[str, Callable[[], SystemConfig]] = {
    '2d': planar_system,
    '3d': stacked_system,
}


def get_system_preset(name: str) -> Optional[SystemConfig]:
    """Build a system preset by key ('2d' or '3d')."""
    factory = SYSTEM_PRESETS.get(name.lower())
    return factory() if factory is not None else None


def list_system_presets() -> List[str]:
    """List preset keys."""
    return sorted(SYSTEM_PRESETS)
