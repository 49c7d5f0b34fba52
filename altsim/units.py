"""
units.py – Unit constants and conversions shared by the simulator.

Lengths are stored internally in metres, speeds in metres per minute and
accelerations in metres per minute².  Feet only appear at the reporting and
command boundary.
"""

from __future__ import annotations
import math

M1_IN_FT = 3.28084        # ft per metre
FT1_IN_M = 0.3048         # metres per foot
US_PER_MINUTE = 60 * 1000 * 1000


def meters_to_feet(meters: float) -> float:
    return meters * M1_IN_FT


def feet_to_meters(feet: float) -> float:
    return feet * FT1_IN_M


def round_half_away(value: float, scale: float = 1.0) -> float:
    """
    Round *value* to the nearest 1/scale, halves away from zero.

    Python's ``round`` uses banker's rounding, which would report 0.5 ft as
    0 ft and 1.5 ft as 2 ft.
    """
    rounded = math.floor(abs(value) * scale + 0.5) / scale
    # + 0.0 folds -0.0 into 0.0
    return math.copysign(rounded, value) + 0.0
