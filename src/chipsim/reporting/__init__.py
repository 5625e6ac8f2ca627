"""
Text report formatting for CPU and GPU results.
"""

from .formatting import (
    THERMAL_RAMP,
    format_system_config,
    format_gpu_config,
    format_comparison_table,
    format_cpu_result,
    format_register_file,
    format_thermal_map,
    format_gpu_result,
)

__all__ = [
    'THERMAL_RAMP',
    'format_system_config',
    'format_gpu_config',
    'format_comparison_table',
    'format_cpu_result',
    'format_register_file',
    'format_thermal_map',
    'format_gpu_result',
]
