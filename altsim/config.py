"""config.py – Configuration model for the altitude-transfer simulator."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from altsim.units import feet_to_meters


@dataclass
class FlightLimits:
    """Physical envelope the flight dynamics engine steers within."""
    max_altitude_ft: float = 40_000.0
    max_stable_angle_deg: float = 15.0
    max_speed_m_min: float = 780.0
    altitude_precision_ft: float = 0.1
    acceleration_per_percent: float = 10.0   # m/min² per % of engine power

    @property
    def max_altitude_m(self) -> float:
        return feet_to_meters(self.max_altitude_ft)

    @property
    def max_stable_angle_rad(self) -> float:
        return math.radians(self.max_stable_angle_deg)

    @property
    def min_altitude_delta_m(self) -> float:
        """Altitude tolerance used by every phase exit condition."""
        return feet_to_meters(self.altitude_precision_ft) / 10.0


@dataclass
class ConstraintLimits:
    """Hard limits checked by the driver after every tick."""
    max_altitude_ft: float = 40_000.0
    min_altitude_ft: float = 0.0
    max_angle_deg: float = 15.0
    max_speed_m_min: float = 800.0


@dataclass
class SimulationConfig:
    timestep_us: int = 100
    engine_power_pct: float = 10.0
    report_interval_ticks: int = 10 * 1000 + 1   # status dumps, about 1 s at 100 µs
    sample_interval_ticks: int = 1000            # telemetry samples
    max_simulated_s: float = 3600.0
    output_dir: str = "outputs"
    limits: FlightLimits = field(default_factory=FlightLimits)
    constraints: ConstraintLimits = field(default_factory=ConstraintLimits)

    def __post_init__(self):
        if self.timestep_us <= 0:
            raise ValueError("timestep_us must be > 0")
        if self.report_interval_ticks <= 0 or self.sample_interval_ticks <= 0:
            raise ValueError("report and sample intervals must be > 0")

    @property
    def max_ticks(self) -> int:
        return int(self.max_simulated_s * 1e6 / self.timestep_us)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SimulationConfig":
        top = {k: v for k, v in data.items() if k not in ("limits", "constraints")}
        return cls(
            limits=FlightLimits(**data.get("limits", {})),
            constraints=ConstraintLimits(**data.get("constraints", {})),
            **top,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str | Path | None) -> SimulationConfig:
    if path is None:
        return SimulationConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError("Only JSON config files are supported")

    with config_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")

    return SimulationConfig.from_dict(raw)
