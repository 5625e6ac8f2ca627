"""
Result analysis: side-by-side 2D / 3D metric comparison.
"""

from .comparison import (
    IMPROVEMENT_TOLERANCE_PERCENT,
    MetricSpec,
    COMPARISON_METRICS,
    MetricComparison,
    SystemComparison,
    relative_improvement,
    power_improvement_percent,
    compare_systems,
)

__all__ = [
    'IMPROVEMENT_TOLERANCE_PERCENT',
    'MetricSpec',
    'COMPARISON_METRICS',
    'MetricComparison',
    'SystemComparison',
    'relative_improvement',
    'power_improvement_percent',
    'compare_systems',
]
