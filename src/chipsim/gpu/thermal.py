"""
Per-core thermal grid for the GPU kernel model.

At most MAX_SIMULATED_CORES cores are tracked, laid out row-major on a
near-square grid. Moving hotspots scale the power drawn by nearby cores:

    factor(core) = 1 + sum_h intensity_h * exp(-d^2 / (min(cols, rows) * 0.5))

Temperatures follow a lumped RC model integrated with forward Euler:

    T += (P / C) * dt - ((T - T_amb) / R_total / C) * dt

The step is stable only while dt / (R_total * C) < 2. Above that the error
grows every tick until temperatures overflow, so such configs are rejected.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from chipsim.core.errors import ConfigValidationError


MAX_SIMULATED_CORES = 256
CORES_PER_HOTSPOT = 16
HOTSPOT_MAX_SPEED = 0.25        # grid cells per tick, per axis
HOTSPOT_MIN_INTENSITY = 0.5
HOTSPOT_MAX_INTENSITY = 1.0
FALLOFF_SCALE = 0.5
MAX_STABLE_STEP_RATIO = 2.0    # forward Euler bound on dt / (R*C)


@dataclass(frozen=True)
class CoreGrid:
    """Layout of the simulated cores."""
    cells: int
    cols: int
    rows: int

    @classmethod
    def for_cores(cls, cores: int) -> 'CoreGrid':
        cells = max(1, min(int(cores), MAX_SIMULATED_CORES))
        cols = math.ceil(math.sqrt(cells))
        rows = math.ceil(cells / cols)
        return cls(cells=cells, cols=cols, rows=rows)

    @property
    def falloff(self) -> float:
        return min(self.cols, self.rows) * FALLOFF_SCALE

    def coordinates(self) -> Tuple[np.ndarray, np.ndarray]:
        """(x, y) grid coordinates of every simulated core."""
        index = np.arange(self.cells)
        return (index % self.cols).astype(float), (index // self.cols).astype(float)


class HotspotField:
    """
    Set of moving heat sources.

    Positions and velocities are drawn from the supplied numpy Generator, so
    a seeded generator reproduces the same trajectories. A hotspot that leaves
    the grid has the matching velocity component reversed.
    """

    def __init__(self, grid: CoreGrid, rng: np.random.Generator):
        self.grid = grid
        count = max(1, grid.cells // CORES_PER_HOTSPOT)
        self.x = rng.uniform(0.0, grid.cols, count)
        self.y = rng.uniform(0.0, grid.rows, count)
        self.vx = rng.uniform(-HOTSPOT_MAX_SPEED, HOTSPOT_MAX_SPEED, count)
        self.vy = rng.uniform(-HOTSPOT_MAX_SPEED, HOTSPOT_MAX_SPEED, count)
        self.intensity = rng.uniform(HOTSPOT_MIN_INTENSITY, HOTSPOT_MAX_INTENSITY, count)

    def __len__(self) -> int:
        return len(self.intensity)

    def advance(self):
        """Move every hotspot one tick and reflect at the grid edges."""
        self.x += self.vx
        self.y += self.vy
        self.vx[(self.x < 0) | (self.x > self.grid.cols)] *= -1
        self.vy[(self.y < 0) | (self.y > self.grid.rows)] *= -1

    def power_factors(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """Power multiplier (>= 1) for each core at (xs, ys)."""
        dist_sq = (xs[:, None] - self.x[None, :]) ** 2 + (ys[:, None] - self.y[None, :]) ** 2
        contributions = self.intensity[None, :] * np.exp(-dist_sq / self.grid.falloff)
        return 1.0 + contributions.sum(axis=1)


def integrate_temperatures(
    temperatures: np.ndarray,
    power_w: np.ndarray,
    ambient_c: float,
    total_resistance: float,
    capacitance: float,
    dt_s: float,
) -> np.ndarray:
    """One forward-Euler step of the per-core RC model. Returns a new array."""
    heat_generated = power_w / capacitance * dt_s
    heat_dissipated = (temperatures - ambient_c) / total_resistance / capacitance * dt_s
    return temperatures + heat_generated - heat_dissipated


def step_ratio(total_resistance: float, capacitance: float, dt_s: float) -> float:
    """dt over the RC time constant."""
    return dt_s / (total_resistance * capacitance)


def require_stable_step(total_resistance: float, capacitance: float, dt_s: float):
    """Raise ConfigValidationError if forward Euler would diverge at this step size."""
    ratio = step_ratio(total_resistance, capacitance, dt_s)
    if ratio >= MAX_STABLE_STEP_RATIO:
        raise ConfigValidationError(
            f"thermal time constant R*C = {total_resistance * capacitance:.4g} s is too short "
            f"for a {dt_s * 1000:.0f} ms step (must exceed {dt_s / MAX_STABLE_STEP_RATIO:.4g} s)"
        )
