"""
Error taxonomy and run status for the simulation engine.

Invalid inputs raise ConfigValidationError before any simulation work starts.
Degenerate workloads and exhausted iteration budgets are not errors: they are
reported through SimulationStatus on the result so callers can warn the user.
"""

from enum import Enum


class ConfigValidationError(ValueError):
    """Raised when a configuration or workload is invalid (negative latency, zero capacity, ...)."""


class SimulationStatus(Enum):
    """
    Outcome of a simulation run.

    COMPLETED: Workload ran to completion
    DEGENERATE: Nothing to simulate (zero instructions / zero required ops);
        result is a trivial zero-cost result
    BUDGET_EXCEEDED: Instruction or tick cap was hit; metrics are best-effort
    """
    COMPLETED = "completed"
    DEGENERATE = "degenerate"
    BUDGET_EXCEEDED = "budget_exceeded"


def require_non_negative(name: str, value: float):
    """Raise ConfigValidationError if value < 0."""
    if value < 0:
        raise ConfigValidationError(f"{name} must be >= 0, got {value}")


def require_positive(name: str, value: float):
    """Raise ConfigValidationError if value <= 0."""
    if value <= 0:
        raise ConfigValidationError(f"{name} must be > 0, got {value}")


def require_fraction(name: str, value: float):
    """Raise ConfigValidationError if value is outside [0, 1]."""
    if not 0.0 <= value <= 1.0:
        raise ConfigValidationError(f"{name} must be in [0, 1], got {value}")
