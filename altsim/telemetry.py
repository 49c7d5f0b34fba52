"""
telemetry.py – Recording and export of sampled flight data.
"""

from __future__ import annotations
import numpy as np
from dataclasses import dataclass
from pathlib import Path

from altsim.dynamics import PlaneData

PROFILE_FILES = ("plane_altitude", "plane_speed", "plane_angle")


@dataclass
class TelemetrySample:
    time_s: float
    data: PlaneData


class TelemetryRecorder:
    """Keeps every sample handed to ``record`` in simulation order."""

    def __init__(self):
        self.samples: list[TelemetrySample] = []

    def __len__(self) -> int:
        return len(self.samples)

    def record(self, time_s: float, data: PlaneData):
        self.samples.append(TelemetrySample(time_s, data))

    def clear(self):
        self.samples.clear()

    def as_arrays(self) -> dict[str, np.ndarray]:
        """
        Column view of the samples.

        Keys: time_s, pos_x_ft, altitude_ft, speed_m_min,
        vertical_speed_m_min, angle_deg  (all float arrays of equal length)
        """
        s = self.samples
        return {
            'time_s': np.array([x.time_s for x in s], dtype=float),
            'pos_x_ft': np.array([x.data.pos_x_ft for x in s], dtype=float),
            'altitude_ft': np.array([x.data.altitude_ft for x in s], dtype=float),
            'speed_m_min': np.array([x.data.speed_m_min for x in s], dtype=float),
            'vertical_speed_m_min': np.array(
                [x.data.vertical_speed_m_min for x in s], dtype=float),
            'angle_deg': np.array([x.data.computed_angle_deg for x in s], dtype=float),
        }

    def write_profiles(self, output_dir: str | Path) -> dict[str, Path]:
        """
        Write the three tab-separated profile files, each keyed on the
        horizontal position:

            plane_altitude : x  <altitude>ft
            plane_speed    : x  <vertical speed>m/min
            plane_angle    : x  <angle>deg

        Returns
        -------
        dict mapping file name to the resolved Path written.
        """
        out = Path(output_dir).expanduser().resolve()
        out.mkdir(parents=True, exist_ok=True)
        paths = {name: out / name for name in PROFILE_FILES}

        with open(paths['plane_altitude'], "w") as f_alt, \
                open(paths['plane_speed'], "w") as f_speed, \
                open(paths['plane_angle'], "w") as f_angle:
            for sample in self.samples:
                d = sample.data
                f_alt.write(f"{d.pos_x_ft:.1f}\t{d.altitude_ft:.0f}ft\n")
                f_speed.write(f"{d.pos_x_ft:.1f}\t{d.vertical_speed_m_min:.6f}m/min\n")
                f_angle.write(f"{d.pos_x_ft:.1f}\t{d.computed_angle_deg:.6f}deg\n")

        return paths

    def export_csv(self, path: str | Path) -> Path:
        """
        Write all samples to CSV, one row per sample.

        Returns
        -------
        Resolved Path of the written file.
        """
        path = Path(path).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            f.write("time_s,pos_x_ft,altitude_ft,speed_m_min,"
                    "vertical_speed_m_min,angle_deg,state\n")
            for sample in self.samples:
                d = sample.data
                f.write(f"{sample.time_s:.4f},{d.pos_x_ft:.1f},{d.altitude_ft:.0f},"
                        f"{d.speed_m_min:.1f},{d.vertical_speed_m_min:.6f},"
                        f"{d.computed_angle_deg:.6f},{d.state.name}\n")

        return path
