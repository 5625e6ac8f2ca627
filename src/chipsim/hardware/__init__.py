"""
Hardware configuration for the CPU (2D / 3D stacked) and GPU models.
"""

from .config import (
    CacheLevelConfig,
    CacheHierarchyConfig,
    MainMemoryConfig,
    TSVConfig,
    ThermalConfig,
    SystemConfig,
    GpuConfig,
)

from .presets import (
    DEFAULT_CONFIG_2D,
    DEFAULT_CONFIG_3D,
    DEFAULT_GPU_CONFIG,
    SYSTEM_PRESETS,
    planar_system,
    stacked_system,
    get_system_preset,
    list_system_presets,
    default_gpu_config,
)

__all__ = [
    # Configs
    'CacheLevelConfig',
    'CacheHierarchyConfig',
    'MainMemoryConfig',
    'TSVConfig',
    'ThermalConfig',
    'SystemConfig',
    'GpuConfig',
    # Presets
    'DEFAULT_CONFIG_2D',
    'DEFAULT_CONFIG_3D',
    'DEFAULT_GPU_CONFIG',
    'SYSTEM_PRESETS',
    'planar_system',
    'stacked_system',
    'get_system_preset',
    'list_system_presets',
    'default_gpu_config',
]
