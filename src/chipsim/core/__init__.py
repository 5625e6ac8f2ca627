"""
Core Types

Hardware-independent enumerations and the error taxonomy shared by the
CPU and GPU simulation pipelines.
"""

from .errors import (
    ConfigValidationError,
    SimulationStatus,
    require_non_negative,
    require_positive,
    require_fraction,
)

from .structures import (
    AccessPattern,
    IntegrationStyle,
    BASELINE_2D_NAME,
    STACKED_3D_NAME,
)

__all__ = [
    # Errors
    'ConfigValidationError',
    'SimulationStatus',
    'require_non_negative',
    'require_positive',
    'require_fraction',
    # Structures
    'AccessPattern',
    'IntegrationStyle',
    'BASELINE_2D_NAME',
    'STACKED_3D_NAME',
]
