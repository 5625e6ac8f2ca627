"""
System and GPU Configuration

Typed configuration objects for the CPU (2D baseline / 3D stacked) and GPU
models. Every config validates itself at construction time, so a malformed
configuration fails before a simulation starts rather than mid-run.

CPU system hierarchy:
    L1 -> L2 -> L3 -> Main Memory
          ^     ^
          TSV hops (3D stacked only): L1<->L2 and L2<->L3 cross dies

Usage:
    from chipsim.hardware.config import SystemConfig, CacheLevelConfig

    config = SystemConfig.from_dict(json.load(open("my_system.json")))
    print(config.cache.l2.size_kb)

All configs round-trip through plain dicts (numbers, booleans, strings) via
to_dict() / from_dict().
"""

from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict

from chipsim.core.errors import (
    ConfigValidationError,
    require_non_negative,
    require_positive,
)


def _require_mapping(cls, data):
    if not isinstance(data, dict):
        raise ConfigValidationError(f"{cls.__name__} expects a mapping, got {type(data).__name__}")


def _build(cls, data: Dict[str, Any]):
    """Construct a flat dataclass from a dict, rejecting unknown keys."""
    _require_mapping(cls, data)
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigValidationError(
            f"Unknown {cls.__name__} field(s): {', '.join(sorted(unknown))}"
        )
    return cls(**data)


# =============================================================================
# CPU System Configuration
# =============================================================================

@dataclass
class CacheLevelConfig:
    """
    One level of the CPU cache hierarchy.

    Attributes:
        enabled: Whether this level exists. A disabled level is a pass-through.
        size_kb: Capacity in KB (must be > 0 when enabled)
        latency_cycles: Hit latency in cycles
        associativity: Ways (informational; the miss-rate heuristic ignores it)
    """
    enabled: bool = True
    size_kb: float = 32.0
    latency_cycles: float = 4.0
    associativity: int = 8

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigValidationError if any field is out of range."""
        require_non_negative("latency_cycles", self.latency_cycles)
        if self.enabled:
            require_positive("size_kb", self.size_kb)
            if self.associativity < 1:
                raise ConfigValidationError(
                    f"associativity must be >= 1, got {self.associativity}"
                )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheLevelConfig':
        return _build(cls, data)


@dataclass
class CacheHierarchyConfig:
    """Three-level cache hierarchy, ordered L1 -> L2 -> L3."""
    l1: CacheLevelConfig = field(default_factory=lambda: CacheLevelConfig(True, 32, 4, 8))
    l2: CacheLevelConfig = field(default_factory=lambda: CacheLevelConfig(True, 256, 12, 8))
    l3: CacheLevelConfig = field(default_factory=lambda: CacheLevelConfig(True, 2048, 35, 16))

    def levels(self) -> Dict[str, CacheLevelConfig]:
        """Levels keyed by name, in hierarchy order."""
        return {'l1': self.l1, 'l2': self.l2, 'l3': self.l3}

    def validate(self):
        for level in self.levels().values():
            level.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {name: level.to_dict() for name, level in self.levels().items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CacheHierarchyConfig':
        _require_mapping(cls, data)
        unknown = set(data) - {'l1', 'l2', 'l3'}
        if unknown:
            raise ConfigValidationError(
                f"Unknown cache level(s): {', '.join(sorted(unknown))}"
            )
        return cls(**{name: CacheLevelConfig.from_dict(level) for name, level in data.items()})


@dataclass
class MainMemoryConfig:
    """Off-chip (2D) or stacked (3D) main memory."""
    latency_cycles: float = 200.0
    power_w: float = 10.5
    bandwidth_gbps: float = 25.6

    def __post_init__(self):
        self.validate()

    def validate(self):
        require_non_negative("latency_cycles", self.latency_cycles)
        require_non_negative("power_w", self.power_w)
        require_non_negative("bandwidth_gbps", self.bandwidth_gbps)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MainMemoryConfig':
        return _build(cls, data)


@dataclass
class TSVConfig:
    """
    Through-Silicon Via characteristics.

    Modeled purely as a fixed latency added once per die-crossing hop.
    power_per_bit_fj is carried for reporting; the energy table already
    accounts for the stacked memory access energy.
    """
    enabled: bool = False
    latency_cycles: float = 0.0
    power_per_bit_fj: float = 0.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        require_non_negative("tsv.latency_cycles", self.latency_cycles)
        require_non_negative("tsv.power_per_bit_fj", self.power_per_bit_fj)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TSVConfig':
        return _build(cls, data)


@dataclass
class ThermalConfig:
    """
    Lumped thermal model parameters.

    Attributes:
        ambient_c: Ambient temperature (C)
        tdp_logic_w: Logic die TDP (W), informational
        tdp_memory_w: Memory die TDP (W), informational
        thermal_resistance_c_per_w: Junction-to-ambient resistance (C/W)
        tdp_limit_c: Temperature above which the system throttles (C)
    """
    ambient_c: float = 25.0
    tdp_logic_w: float = 65.0
    tdp_memory_w: float = 0.0
    thermal_resistance_c_per_w: float = 0.8
    tdp_limit_c: float = 95.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        require_non_negative("tdp_logic_w", self.tdp_logic_w)
        require_non_negative("tdp_memory_w", self.tdp_memory_w)
        require_non_negative("thermal_resistance_c_per_w", self.thermal_resistance_c_per_w)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ThermalConfig':
        return _build(cls, data)


@dataclass
class SystemConfig:
    """
    Complete CPU system description used by one side of the 2D/3D comparison.

    A system is "stacked" when its TSVs are enabled: TSV latency is then added
    on the L1<->L2 and L2<->L3 hops and the 3D memory-access energy applies.
    """
    name: str = "system"
    main_memory: MainMemoryConfig = field(default_factory=MainMemoryConfig)
    cache: CacheHierarchyConfig = field(default_factory=CacheHierarchyConfig)
    tsv: TSVConfig = field(default_factory=TSVConfig)
    thermal: ThermalConfig = field(default_factory=ThermalConfig)

    @property
    def is_stacked(self) -> bool:
        return self.tsv.enabled

    @property
    def hop_latency_cycles(self) -> float:
        """Latency added per die-crossing hop (0 for planar systems)."""
        return self.tsv.latency_cycles if self.is_stacked else 0.0

    def validate(self):
        """Re-check every section; fields may have been changed after construction."""
        self.main_memory.validate()
        self.cache.validate()
        self.tsv.validate()
        self.thermal.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "main_memory": self.main_memory.to_dict(),
            "cache": self.cache.to_dict(),
            "tsv": self.tsv.to_dict(),
            "thermal": self.thermal.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SystemConfig':
        _require_mapping(cls, data)
        unknown = set(data) - {"name", "main_memory", "cache", "tsv", "thermal"}
        if unknown:
            raise ConfigValidationError(
                f"Unknown SystemConfig field(s): {', '.join(sorted(unknown))}"
            )
        kwargs: Dict[str, Any] = {}
        if "name" in data:
            kwargs["name"] = str(data["name"])
        if "main_memory" in data:
            kwargs["main_memory"] = MainMemoryConfig.from_dict(data["main_memory"])
        if "cache" in data:
            kwargs["cache"] = CacheHierarchyConfig.from_dict(data["cache"])
        if "tsv" in data:
            kwargs["tsv"] = TSVConfig.from_dict(data["tsv"])
        if "thermal" in data:
            kwargs["thermal"] = ThermalConfig.from_dict(data["thermal"])
        return cls(**kwargs)


# =============================================================================
# GPU Configuration
# =============================================================================

@dataclass
class GpuConfig:
    """
    GPU hardware parameters for the kernel time-stepper.

    Thermal path: junction -> case -> ambient, lumped per core with a single
    thermal capacitance. Power scales linearly with clock.
    """
    cores: int = 1024
    clock_ghz: float = 1.5
    memory_bandwidth_gbps: float = 512.0
    l2_size_kb: float = 4096.0
    l2_latency_cycles: float = 20.0
    l2_associativity: int = 16
    computational_intensity: float = 1.0  # Multiplier on ops/item
    max_power_w: float = 250.0
    junction_to_case_r: float = 0.2       # C/W
    case_to_ambient_r: float = 0.15       # C/W
    throttle_temp_c: float = 90.0
    ambient_temp_c: float = 25.0
    thermal_capacitance_j_per_c: float = 4.0

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigValidationError if any field is out of range."""
        if int(self.cores) != self.cores or self.cores < 1:
            raise ConfigValidationError(f"cores must be a positive integer, got {self.cores}")
        self.cores = int(self.cores)
        require_positive("clock_ghz", self.clock_ghz)
        require_positive("memory_bandwidth_gbps", self.memory_bandwidth_gbps)
        require_positive("l2_size_kb", self.l2_size_kb)
        require_non_negative("l2_latency_cycles", self.l2_latency_cycles)
        if self.l2_associativity < 1:
            raise ConfigValidationError(
                f"l2_associativity must be >= 1, got {self.l2_associativity}"
            )
        require_non_negative("computational_intensity", self.computational_intensity)
        require_non_negative("max_power_w", self.max_power_w)
        require_non_negative("junction_to_case_r", self.junction_to_case_r)
        require_non_negative("case_to_ambient_r", self.case_to_ambient_r)
        require_positive("total thermal resistance", self.total_thermal_resistance)
        require_positive("thermal_capacitance_j_per_c", self.thermal_capacitance_j_per_c)

    @property
    def total_thermal_resistance(self) -> float:
        return self.junction_to_case_r + self.case_to_ambient_r

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GpuConfig':
        return _build(cls, data)
