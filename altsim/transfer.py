"""
transfer.py – Commanded altitude changes and their progress.

An ``AltitudeTransferRequest`` describes one maneuver: which way to go, the
target altitude, the climb angle and the climb rate to hold once the initial
speed change is over.  Angle and climb rate are stored as non-negative
magnitudes; the sign lives in ``direction`` only.

Phases always run in the same order::

    START → SPEED_RAMP_IN → STEADY → SPEED_RAMP_OUT → FINISHED
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

from altsim.config import FlightLimits
from altsim.units import feet_to_meters, meters_to_feet


class TransferDirection(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"
    NONE = "none"


class TransferPhase(Enum):
    START = 0
    SPEED_RAMP_IN = 1
    STEADY = 2
    SPEED_RAMP_OUT = 3
    FINISHED = 4


_NEXT_PHASE = {
    TransferPhase.START: TransferPhase.SPEED_RAMP_IN,
    TransferPhase.SPEED_RAMP_IN: TransferPhase.STEADY,
    TransferPhase.STEADY: TransferPhase.SPEED_RAMP_OUT,
    TransferPhase.SPEED_RAMP_OUT: TransferPhase.FINISHED,
}


@dataclass
class AltitudeTransferRequest:
    direction: TransferDirection
    target_altitude_m: float
    angle_rad: float              # magnitude, ≤ max stable angle
    climb_rate_m_min: float       # magnitude
    phase: TransferPhase = TransferPhase.START

    def __post_init__(self):
        if self.direction is TransferDirection.NONE:
            self.phase = TransferPhase.FINISHED

    # ── construction ─────────────────────────────────────────────

    @classmethod
    def no_transfer(cls) -> "AltitudeTransferRequest":
        """The empty maneuver: nothing to do, already finished."""
        return cls(TransferDirection.NONE, 0.0, 0.0, 0.0, TransferPhase.FINISHED)

    @classmethod
    def between(cls, current_altitude_ft: float, target_altitude_ft: float,
                angle_deg: float, climb_rate_m_min: float) -> "AltitudeTransferRequest":
        """
        Build a transfer from the current altitude to a target altitude.

        Parameters
        ----------
        current_altitude_ft : altitude the aircraft is at now  [ft]
        target_altitude_ft  : altitude to reach  [ft], already clamped
        angle_deg           : climb/descent angle  [°]
        climb_rate_m_min    : vertical speed to hold in the steady phase  [m/min]

        A target equal to the current altitude gives ``no_transfer()``.
        """
        if target_altitude_ft > current_altitude_ft:
            direction = TransferDirection.ASCENDING
        elif target_altitude_ft < current_altitude_ft:
            direction = TransferDirection.DESCENDING
        else:
            return cls.no_transfer()

        return cls(
            direction=direction,
            target_altitude_m=feet_to_meters(target_altitude_ft),
            angle_rad=abs(math.radians(angle_deg)),
            climb_rate_m_min=abs(climb_rate_m_min),
        )

    @classmethod
    def from_performance(cls, attack_angle_deg: float, climb_rate_m_min: float,
                         target_altitude_ft: float,
                         limits: FlightLimits | None = None) -> "AltitudeTransferRequest":
        """
        Build a transfer from a requested angle of attack and climb rate.

        The angle is clamped to the stable envelope and its sign picks the
        direction.  The climb rate is capped at what the angle allows at max
        speed (``max_speed · sin(angle)``).
        """
        limits = limits or FlightLimits()
        max_angle = limits.max_stable_angle_rad
        angle = max(min(math.radians(attack_angle_deg), max_angle), -max_angle)

        if angle > 0:
            direction = TransferDirection.ASCENDING
        elif angle < 0:
            direction = TransferDirection.DESCENDING
        else:
            return cls.no_transfer()

        achievable = limits.max_speed_m_min * math.sin(abs(angle))
        return cls(
            direction=direction,
            target_altitude_m=feet_to_meters(target_altitude_ft),
            angle_rad=abs(angle),
            climb_rate_m_min=min(abs(climb_rate_m_min), achievable),
        )

    # ── progress ─────────────────────────────────────────────────

    def advance(self) -> bool:
        """Step to the next phase.  Returns False when already finished."""
        if self.phase is TransferPhase.FINISHED:
            return False
        self.phase = _NEXT_PHASE[self.phase]
        return True

    def is_done(self) -> bool:
        return self.phase is TransferPhase.FINISHED

    # ── derived targets ──────────────────────────────────────────

    @property
    def signed_climb_rate(self) -> float:
        """Vertical speed to hold, negative when descending  [m/min]."""
        if self.direction is TransferDirection.DESCENDING:
            return -self.climb_rate_m_min
        return self.climb_rate_m_min

    @property
    def horizontal_speed(self) -> float:
        """Horizontal speed matching the climb rate along the angle  [m/min]."""
        if self.angle_rad == 0.0:
            return 0.0
        return self.climb_rate_m_min / math.tan(self.angle_rad)

    def describe(self) -> str:
        if self.direction is TransferDirection.NONE:
            return "no altitude transfer"
        return (
            f"transfer phase: {self.phase.name}, type: {self.direction.name}\n"
            f"altitude: {meters_to_feet(self.target_altitude_m):.2f}ft "
            f"({self.target_altitude_m:.2f}m), "
            f"angle: {math.degrees(self.angle_rad):.2f}deg, "
            f"climb_rate: {self.climb_rate_m_min:.2f}m/min"
        )
