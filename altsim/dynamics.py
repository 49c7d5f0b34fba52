"""
dynamics.py – Per-tick vertical-plane kinematics of a single aircraft.

The engine holds position, velocity and acceleration in the vertical plane
(x = horizontal, y = altitude) and advances them by a fixed timestep.  While
an altitude transfer is active it splits the available acceleration between
the two axes and walks the transfer through its phases:

    ramp-in   : accelerate from the current velocity to the climb velocity
    steady    : hold the climb velocity
    ramp-out  : level off towards cruise speed, zero vertical speed

The ramp-out has to start early enough to end at the target altitude, so the
altitude at which it must start is re-derived from the current velocity on
every ramp tick.  Thresholds are compared against ``min_altitude_delta_m``,
which only works if one tick moves the aircraft by less than that, i.e. at
small timesteps (100 µs – 1 ms).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

from altsim.config import FlightLimits
from altsim.transfer import AltitudeTransferRequest, TransferDirection, TransferPhase
from altsim.units import US_PER_MINUTE, meters_to_feet, round_half_away


class FlightState(Enum):
    GROUND = 0
    CHANGING_ALTITUDE = 1
    CRUISE_FLIGHT = 2
    STALL = 3


class TransferStateError(RuntimeError):
    """An altitude transfer reached a phase it can never be in."""


@dataclass
class PlaneData:
    """Read-only reporting snapshot, see ``FlightDynamicsEngine.get_data``."""
    pos_x_ft: float
    altitude_ft: float            # rounded to 1 ft
    speed_m_min: float            # rounded to 0.1 m/min
    computed_angle_deg: float
    state: FlightState
    vertical_speed_m_min: float


@dataclass
class KinematicState:
    pos_x_m: float = 0.0
    altitude_m: float = 0.0
    speed_x: float = 0.0          # m/min
    speed_y: float = 0.0          # m/min, > 0 climbing
    acc_x: float = 0.0            # m/min²
    acc_y: float = 0.0            # m/min²
    flight_state: FlightState = FlightState.GROUND


@dataclass
class SpeedTransfer:
    acc_x: float                  # m/min²
    acc_y: float                  # m/min²
    distance_y: float             # altitude covered while changing speed  [m]


def compute_speed_transfer(
    acceleration: float,
    speed_x: float,
    speed_y: float,
    desired_x: float,
    desired_y: float,
    limits: FlightLimits | None = None,
) -> SpeedTransfer:
    """
    Share an acceleration budget between the horizontal and vertical axes.

    Parameters
    ----------
    acceleration       : available acceleration magnitude  [m/min²]
    speed_x, speed_y   : current velocity  [m/min]
    desired_x, desired_y : velocity to reach  [m/min]

    The acceleration points along the velocity change, but never steeper
    than the max stable angle.  ``distance_y`` is the altitude gained (or
    lost, negative) before the vertical speed reaches ``desired_y``; it is 0
    when no vertical acceleration is available.
    """
    limits = limits or FlightLimits()
    max_speed = limits.max_speed_m_min
    max_angle = limits.max_stable_angle_rad

    delta_x = desired_x - speed_x
    delta_y = desired_y - speed_y

    desired_speed = math.hypot(desired_x, desired_y)
    if desired_speed > max_speed:
        ratio = max_speed / desired_speed
        delta_x *= ratio
        delta_y *= ratio

    # magnitude only, the signs come back through copysign below
    delta_angle = math.atan2(abs(delta_y), abs(delta_x))
    delta_angle = min(delta_angle, max_angle)

    acc_y = math.copysign(acceleration * math.sin(delta_angle), delta_y)
    acc_x = math.copysign(acceleration * math.cos(delta_angle), delta_x)

    if acc_y == 0.0:
        distance_y = 0.0
    else:
        average_speed_y = (desired_y + speed_y) / 2.0
        duration = delta_y / acc_y
        distance_y = duration * average_speed_y

    return SpeedTransfer(acc_x=acc_x, acc_y=acc_y, distance_y=distance_y)


class FlightDynamicsEngine:
    """
    Kinematic state of one aircraft plus the altitude transfer driving it.

    Parameters
    ----------
    timestep_us      : simulated time per ``tick()``  [µs], > 0
    engine_power_pct : share of engine power in use  [%]
    limits           : flight envelope, defaults to ``FlightLimits()``

    ``tick()`` is strictly sequential: it is not reentrant and the engine is
    not safe to share between threads.
    """

    def __init__(self, timestep_us: int, engine_power_pct: float = 100.0,
                 limits: FlightLimits | None = None):
        if timestep_us <= 0:
            raise ValueError("timestep_us must be > 0")
        self.timestep_us = timestep_us
        self.engine_power_pct = engine_power_pct
        self.limits = limits or FlightLimits()

        self.kinematics = KinematicState()
        self.transfer = AltitudeTransferRequest.no_transfer()

        self.ramp_in = SpeedTransfer(0.0, 0.0, 0.0)
        self.ramp_out = SpeedTransfer(0.0, 0.0, 0.0)
        self.altitude_ramp_in_end = 0.0      # m
        self.altitude_ramp_out_start = 0.0   # m

    @property
    def available_acceleration(self) -> float:
        return self.engine_power_pct * self.limits.acceleration_per_percent

    # ── commands ─────────────────────────────────────────────────

    def set_transfer(self, target_altitude_ft: float) -> AltitudeTransferRequest:
        """
        Command a climb or descent to *target_altitude_ft* at half the max
        stable angle.  Replaces whatever maneuver was in progress; a target
        equal to the current rounded altitude just cancels it.
        """
        current_ft = self.get_data().altitude_ft
        target_ft = self._clamp_altitude_ft(target_altitude_ft)
        angle_deg = self.limits.max_stable_angle_deg / 2.0
        climb_rate = self.limits.max_speed_m_min * math.sin(math.radians(angle_deg))

        self.transfer = AltitudeTransferRequest.between(
            current_ft, target_ft, angle_deg, climb_rate)
        return self.transfer

    def set_performance_transfer(self, attack_angle_deg: float,
                                 climb_rate_m_min: float,
                                 target_altitude_ft: float) -> AltitudeTransferRequest:
        """Command a maneuver with an explicit angle and climb rate."""
        self.transfer = AltitudeTransferRequest.from_performance(
            attack_angle_deg, climb_rate_m_min,
            self._clamp_altitude_ft(target_altitude_ft), self.limits)
        return self.transfer

    def is_transfer_done(self) -> bool:
        return self.transfer.is_done()

    def _clamp_altitude_ft(self, altitude_ft: float) -> float:
        return max(min(altitude_ft, self.limits.max_altitude_ft), 0.0)

    # ── simulation step ──────────────────────────────────────────

    def tick(self):
        """Advance the simulation by one timestep."""
        self._compute_speed_transfers()
        self._run_transfer_phases()
        self._update_speed()
        self._update_position()

    def _compute_speed_transfers(self):
        phase = self.transfer.phase
        k = self.kinematics
        acceleration = self.available_acceleration

        if phase is TransferPhase.SPEED_RAMP_IN:
            self.ramp_in = compute_speed_transfer(
                acceleration, k.speed_x, k.speed_y,
                self.transfer.horizontal_speed, self.transfer.signed_climb_rate,
                self.limits)
            self.altitude_ramp_in_end = k.altitude_m + self.ramp_in.distance_y

        if phase in (TransferPhase.SPEED_RAMP_IN, TransferPhase.SPEED_RAMP_OUT):
            self.ramp_out = compute_speed_transfer(
                acceleration, k.speed_x, k.speed_y,
                self.limits.max_speed_m_min, 0.0,
                self.limits)
            self.altitude_ramp_out_start = (
                self.transfer.target_altitude_m - self.ramp_out.distance_y)

    def _run_transfer_phases(self):
        """
        Run the current phase and keep going while phases complete, so one
        tick can pass through several of them.
        """
        transfer = self.transfer
        k = self.kinematics
        min_delta = self.limits.min_altitude_delta_m

        while True:
            phase = transfer.phase
            if (transfer.direction is TransferDirection.NONE
                    and phase not in (TransferPhase.START, TransferPhase.FINISHED)):
                raise TransferStateError(
                    f"transfer without direction is in phase {phase.name}")

            if phase is TransferPhase.START:
                k.flight_state = FlightState.CHANGING_ALTITUDE
                transfer.advance()
                # ramp thresholds are computed from the next tick on
                return

            if phase is TransferPhase.SPEED_RAMP_IN:
                done = (
                    abs(k.speed_y - transfer.signed_climb_rate) < 0.01
                    or abs(self.altitude_ramp_out_start - k.altitude_m) < min_delta
                )
                if not done:
                    k.acc_x = self.ramp_in.acc_x
                    k.acc_y = self.ramp_in.acc_y
                    return
                k.acc_x = 0.0
                k.acc_y = 0.0
                transfer.advance()
                continue

            if phase is TransferPhase.STEADY:
                if abs(self.altitude_ramp_out_start - k.altitude_m) >= min_delta:
                    return
                transfer.advance()
                continue

            if phase is TransferPhase.SPEED_RAMP_OUT:
                done = (
                    abs(transfer.target_altitude_m - k.altitude_m) < min_delta
                    or abs(k.speed_y) < 0.1
                )
                if not done:
                    k.acc_x = self.ramp_out.acc_x
                    k.acc_y = self.ramp_out.acc_y
                    return
                k.acc_x = 0.0
                k.acc_y = 0.0
                k.speed_x = self.limits.max_speed_m_min
                k.speed_y = 0.0
                transfer.advance()
                continue

            # FINISHED
            if self.get_data().altitude_ft == 0:
                k.speed_x = 0.0
                k.flight_state = FlightState.GROUND
            else:
                k.flight_state = FlightState.CRUISE_FLIGHT
            return

    def _update_speed(self):
        k = self.kinematics
        k.speed_x += (k.acc_x / US_PER_MINUTE) * self.timestep_us
        k.speed_y += (k.acc_y / US_PER_MINUTE) * self.timestep_us

    def _update_position(self):
        k = self.kinematics
        k.altitude_m += k.speed_y * self.timestep_us / US_PER_MINUTE
        k.pos_x_m += k.speed_x * self.timestep_us / US_PER_MINUTE

    # ── reporting ────────────────────────────────────────────────

    def compute_angle(self) -> float:
        """Flight-path angle from the velocity vector  [rad]."""
        k = self.kinematics
        if k.speed_x == 0:
            return 0.0
        return math.atan(k.speed_y / k.speed_x)

    def get_data(self) -> PlaneData:
        k = self.kinematics
        speed = math.hypot(k.speed_x, k.speed_y)
        return PlaneData(
            pos_x_ft=round_half_away(meters_to_feet(k.pos_x_m), 10.0),
            altitude_ft=round_half_away(meters_to_feet(k.altitude_m)),
            speed_m_min=round_half_away(speed, 10.0),
            computed_angle_deg=math.degrees(self.compute_angle()),
            state=k.flight_state,
            vertical_speed_m_min=k.speed_y,
        )

    def describe(self) -> str:
        """Multi-line status report of the aircraft and active transfer."""
        k = self.kinematics
        data = self.get_data()
        angle = self.compute_angle()
        acceleration = math.hypot(k.acc_x, k.acc_y)

        lines = [
            f"state: {k.flight_state.name}",
            f"altitude: {data.altitude_ft:.0f}ft ({k.altitude_m:.6f}m)",
            f"computed angle: {angle:.6f}rad ({math.degrees(angle):.6f}deg)",
            f"speed: {data.speed_m_min:.1f}m/min ({data.speed_m_min / 60.0:.3f}m/s) "
            f"(x={k.speed_x:.6f}m/min, y={k.speed_y:.6f}m/min)",
            f"acc: {acceleration:.6f}m/min² (x={k.acc_x:.6f}m/min², y={k.acc_y:.6f}m/min²)",
            f"engine_power: {self.engine_power_pct:.1f}%",
        ]
        if not self.is_transfer_done():
            lines.append(
                f"speed transfer: ramp-in end {self.altitude_ramp_in_end:.3f}m, "
                f"ramp-out start {self.altitude_ramp_out_start:.3f}m "
                f"(acc_x: {self.ramp_out.acc_x:.3f}m/min², "
                f"acc_y: {self.ramp_out.acc_y:.3f}m/min²)")
            lines.append(self.transfer.describe())
        return "\n".join(lines)
