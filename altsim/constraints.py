"""
constraints.py – Hard flight limits checked by the driver after each tick.

The dynamics engine never enforces these itself; it only reports through
``get_data()``.  Whoever drives the engine decides to halt on a violation.
"""

from __future__ import annotations

from altsim.config import ConstraintLimits
from altsim.dynamics import PlaneData


class ConstraintViolation(RuntimeError):
    """The aircraft left its allowed envelope."""

    def __init__(self, reason: str, data: PlaneData, tick: int | None = None):
        self.reason = reason
        self.data = data
        self.tick = tick
        super().__init__(reason)

    def __str__(self) -> str:
        if self.tick is None:
            return self.reason
        return f"{self.reason} (at tick {self.tick})"


def find_violation(data: PlaneData,
                   limits: ConstraintLimits | None = None) -> str | None:
    """Return the first violated limit as a message, or None."""
    limits = limits or ConstraintLimits()

    if data.altitude_ft >= limits.max_altitude_ft:
        return "too high"
    if data.altitude_ft < limits.min_altitude_ft:
        return "it's a plane, not a tunnel boring machine"
    if abs(data.computed_angle_deg) > limits.max_angle_deg:
        return (f"angle is not within [-{limits.max_angle_deg:g}, "
                f"{limits.max_angle_deg:g}]deg bounds")
    if data.speed_m_min > limits.max_speed_m_min:
        return "too fast"
    return None


def check_constraints(data: PlaneData,
                      limits: ConstraintLimits | None = None) -> None:
    """Raise ``ConstraintViolation`` if *data* is outside *limits*."""
    reason = find_violation(data, limits)
    if reason is not None:
        raise ConstraintViolation(reason, data)
