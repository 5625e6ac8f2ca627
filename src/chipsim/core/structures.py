"""
Shared enumerations for the CPU and GPU models.

- AccessPattern: memory access pattern hint applied to cache/locality models
- IntegrationStyle: planar (2D) vs die-stacked (3D) system integration
"""

from enum import Enum
from typing import Union

from .errors import ConfigValidationError


class AccessPattern(Enum):
    """
    Memory access pattern hint.

    The CPU cache model scales every level's miss rate by a pattern
    multiplier; the GPU model scales the workload locality factor.

    SEQUENTIAL: Unit-stride streaming, prefetch friendly
    STRIDED: Regular non-unit stride (matrix columns, tiles)
    RANDOM: No exploitable spatial locality
    """
    SEQUENTIAL = "sequential"
    STRIDED = "strided"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: Union[str, 'AccessPattern']) -> 'AccessPattern':
        """Accept an AccessPattern or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ConfigValidationError(
                f"Unknown access pattern '{value}' (expected one of: {valid})"
            ) from None


class IntegrationStyle(Enum):
    """How the memory hierarchy is integrated with the logic die."""
    PLANAR_2D = "2d"      # Off-die memory, no through-silicon vias
    STACKED_3D = "3d"     # Memory dies stacked on logic, TSV hops between dies


# Display names used for the paired CPU benchmark
BASELINE_2D_NAME = "2D Baseline"
STACKED_3D_NAME = "3D Stacked"
