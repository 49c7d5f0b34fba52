"""
simulation.py – Fixed-step driver around the flight dynamics engine.

Ticks the engine, samples telemetry, checks the hard constraints after every
tick and executes scripted altitude commands.  Time is simulated time only;
nothing here sleeps.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable

from altsim.config import SimulationConfig
from altsim.constraints import ConstraintViolation, find_violation
from altsim.dynamics import FlightDynamicsEngine, PlaneData
from altsim.telemetry import TelemetryRecorder


@dataclass
class AltitudeCommand:
    """Either climb/descend to ``target_altitude_ft`` or hold for ``hold_s``."""
    target_altitude_ft: float | None = None
    hold_s: float = 0.0


def parse_command(text: str) -> AltitudeCommand:
    """
    ``"500"`` → go to 500 ft, ``"-30"`` → keep flying for 30 s.

    Raises ValueError for anything that is not a number.
    """
    value = float(text)
    if value >= 0:
        return AltitudeCommand(target_altitude_ft=value)
    return AltitudeCommand(hold_s=-value)


@dataclass
class SimulationResult:
    ticks: int
    elapsed_s: float
    final: PlaneData
    telemetry: TelemetryRecorder
    reached: bool          # every commanded transfer finished


class FlightSimulator:
    """
    Parameters
    ----------
    config    : simulation settings, defaults to ``SimulationConfig()``
    on_report : called with the simulator every ``report_interval_ticks``
    """

    def __init__(self, config: SimulationConfig | None = None,
                 on_report: Callable[["FlightSimulator"], None] | None = None):
        self.config = config or SimulationConfig()
        self.engine = FlightDynamicsEngine(
            self.config.timestep_us,
            self.config.engine_power_pct,
            self.config.limits,
        )
        self.telemetry = TelemetryRecorder()
        self.on_report = on_report
        self.tick_count = 0

    @property
    def elapsed_s(self) -> float:
        return self.tick_count * self.config.timestep_us / 1e6

    def step(self) -> PlaneData:
        """Tick once, sample, then check the constraints."""
        cfg = self.config
        self.engine.tick()
        self.tick_count += 1

        data = self.engine.get_data()
        if self.tick_count % cfg.sample_interval_ticks == 0:
            self.telemetry.record(self.elapsed_s, data)
        if self.on_report is not None and self.tick_count % cfg.report_interval_ticks == 0:
            self.on_report(self)

        reason = find_violation(data, cfg.constraints)
        if reason is not None:
            raise ConstraintViolation(reason, data, tick=self.tick_count)
        return data

    def command(self, target_altitude_ft: float):
        return self.engine.set_transfer(target_altitude_ft)

    def run_until_done(self, max_ticks: int | None = None) -> bool:
        """
        Tick until the active transfer finishes.  Returns False if
        *max_ticks* (default: ``config.max_ticks``) ran out first.
        """
        if max_ticks is None:
            max_ticks = self.config.max_ticks
        ticks = 0
        while not self.engine.is_transfer_done():
            if ticks >= max_ticks:
                return False
            self.step()
            ticks += 1
        return True

    def hold(self, seconds: float):
        """Keep ticking for *seconds* of simulated time."""
        n_ticks = int(round(seconds * 1e6 / self.config.timestep_us))
        for _ in range(n_ticks):
            self.step()

    def run_script(self, commands: Iterable[AltitudeCommand],
                   max_ticks_per_transfer: int | None = None) -> SimulationResult:
        reached = True
        for cmd in commands:
            if cmd.target_altitude_ft is not None:
                self.command(cmd.target_altitude_ft)
                reached = self.run_until_done(max_ticks_per_transfer) and reached
            if cmd.hold_s > 0:
                self.hold(cmd.hold_s)
        return self.result(reached)

    def result(self, reached: bool = True) -> SimulationResult:
        return SimulationResult(
            ticks=self.tick_count,
            elapsed_s=self.elapsed_s,
            final=self.engine.get_data(),
            telemetry=self.telemetry,
            reached=reached,
        )
