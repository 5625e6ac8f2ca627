"""
Power / Thermal Model (CPU)

Closed-form estimate of cycles, IPC, dynamic and static power, steady-state
operating temperature and thermal throttling for one system.

Energy table (per instruction):
    memory op, planar (2D):   500 pJ  (off-package DRAM access)
    memory op, stacked (3D):   50 pJ  (short TSV path to stacked DRAM)
    non-memory op:             10 pJ

Thermal resolution uses two explicit passes instead of a fixed-point loop:
    T_dyn   = ambient + P_dyn * R
    P_stat  = P_leak * 1.08 ^ ((T_dyn - ambient) / 10)
    T_op    = ambient + (P_dyn + P_stat) * R

Leakage is evaluated at the dynamic-only temperature, which keeps the model
free of thermal-runaway feedback. Iterating to a fixed point would change
every derived value.
"""

import logging
from dataclasses import dataclass
from typing import Dict

from chipsim.core.errors import ConfigValidationError, require_fraction, require_non_negative
from chipsim.core.structures import IntegrationStyle
from chipsim.hardware.config import ThermalConfig

logger = logging.getLogger(__name__)


MEMORY_OP_ENERGY_PJ: Dict[IntegrationStyle, float] = {
    IntegrationStyle.PLANAR_2D: 500.0,
    IntegrationStyle.STACKED_3D: 50.0,
}
NON_MEMORY_OP_ENERGY_PJ = 10.0

CLOCK_FREQUENCY_HZ = 2e9        # Fixed 2 GHz core clock
LEAKAGE_BASE_W = 0.5            # Static power at ambient
LEAKAGE_GROWTH_PER_10C = 1.08   # Leakage multiplier per 10 C rise
MAX_LEAKAGE_RISE_C = 1000.0     # Rise beyond which leakage stops growing

MAX_THROTTLE_PERCENT = 50.0
THROTTLE_PERCENT_PER_C = 2.0

# Floor on the cycle count used as a divisor
CYCLE_EPSILON = 1e-9


@dataclass(frozen=True)
class PowerBreakdown:
    """Power split in Watts."""
    dynamic_w: float
    static_w: float
    total_w: float

    def to_dict(self) -> Dict[str, float]:
        return {"dynamic": self.dynamic_w, "static": self.static_w, "total": self.total_w}


@dataclass(frozen=True)
class PowerThermalEstimate:
    """Output of estimate_power_thermal."""
    total_cycles: float
    ipc: float
    power: PowerBreakdown
    operating_temp_c: float
    throttling_percent: float


def energy_per_instruction_j(memory_ratio: float, style: IntegrationStyle) -> float:
    """Average energy per instruction in Joules for the given memory-op fraction."""
    energy_pj = (
        memory_ratio * MEMORY_OP_ENERGY_PJ[style]
        + (1.0 - memory_ratio) * NON_MEMORY_OP_ENERGY_PJ
    )
    return energy_pj * 1e-12


def static_power_w(dynamic_temp_rise_c: float) -> float:
    """Leakage power given the temperature rise caused by dynamic power alone."""
    rise = min(dynamic_temp_rise_c, MAX_LEAKAGE_RISE_C)
    return LEAKAGE_BASE_W * LEAKAGE_GROWTH_PER_10C ** (rise / 10.0)


def throttle_percent(operating_temp_c: float, tdp_limit_c: float) -> float:
    """Throttling penalty in percent, 0 below the limit and capped at 50."""
    if operating_temp_c <= tdp_limit_c:
        return 0.0
    return min(MAX_THROTTLE_PERCENT, (operating_temp_c - tdp_limit_c) * THROTTLE_PERCENT_PER_C)


def _safe_ipc(total_instructions: float, total_cycles: float) -> float:
    if total_instructions <= 0:
        return 0.0
    return total_instructions / max(total_cycles, CYCLE_EPSILON)


def estimate_power_thermal(
    total_instructions: int,
    memory_ratio: float,
    amat: float,
    stacked: bool,
    thermal: ThermalConfig,
) -> PowerThermalEstimate:
    """
    Estimate cycles, power and temperature for one system.

    Args:
        total_instructions: Number of executed instructions
        memory_ratio: Fraction of instructions that are memory ops (0..1)
        amat: Average memory access time in cycles
        stacked: True for a 3D stacked system (selects the memory-op energy)
        thermal: Thermal parameters

    Returns:
        PowerThermalEstimate; cycles include any throttling penalty and IPC is
        computed against the throttled cycle count

    Raises:
        ConfigValidationError: out-of-range inputs, or a non-empty stream whose
            memory ops take zero cycles (100% memory mix with AMAT 0)
    """
    require_non_negative("total_instructions", total_instructions)
    require_fraction("memory_ratio", memory_ratio)
    require_non_negative("amat", amat)

    style = IntegrationStyle.STACKED_3D if stacked else IntegrationStyle.PLANAR_2D
    n = float(total_instructions)

    # Non-memory ops take one cycle, memory ops take AMAT cycles
    total_cycles = n * (1.0 - memory_ratio) + n * memory_ratio * amat
    if n > 0 and total_cycles <= 0:
        raise ConfigValidationError(
            f"memory ops need a non-zero AMAT, got {amat} with a {memory_ratio:.0%} memory mix"
        )
    ipc = _safe_ipc(n, total_cycles)

    dynamic_w = energy_per_instruction_j(memory_ratio, style) * ipc * CLOCK_FREQUENCY_HZ

    resistance = thermal.thermal_resistance_c_per_w
    temp_from_dynamic = thermal.ambient_c + dynamic_w * resistance
    static_w = static_power_w(temp_from_dynamic - thermal.ambient_c)
    total_w = dynamic_w + static_w
    operating_temp = thermal.ambient_c + total_w * resistance

    throttling = throttle_percent(operating_temp, thermal.tdp_limit_c)
    if throttling > 0:
        total_cycles *= 1.0 + throttling / 100.0
        logger.debug(
            "%s system at %.1fC exceeds %.1fC limit: throttling %.1f%%",
            style.value, operating_temp, thermal.tdp_limit_c, throttling,
        )

    return PowerThermalEstimate(
        total_cycles=total_cycles,
        ipc=_safe_ipc(n, total_cycles),
        power=PowerBreakdown(dynamic_w=dynamic_w, static_w=static_w, total_w=total_w),
        operating_temp_c=operating_temp,
        throttling_percent=throttling,
    )
