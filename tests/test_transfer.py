"""
Tests for altsim.transfer
"""

import math
import pytest

from altsim.config import FlightLimits
from altsim.transfer import AltitudeTransferRequest, TransferDirection, TransferPhase
from altsim.units import feet_to_meters


MAX_ANGLE = math.radians(15.0)


class TestNoTransfer:

    def test_is_done(self):
        req = AltitudeTransferRequest.no_transfer()
        assert req.direction is TransferDirection.NONE
        assert req.is_done()

    def test_advance_is_refused(self):
        req = AltitudeTransferRequest.no_transfer()
        assert req.advance() is False
        assert req.phase is TransferPhase.FINISHED

    def test_none_direction_always_starts_finished(self):
        req = AltitudeTransferRequest(TransferDirection.NONE, 100.0, 0.1, 10.0,
                                      TransferPhase.START)
        assert req.phase is TransferPhase.FINISHED

    def test_describe(self):
        assert AltitudeTransferRequest.no_transfer().describe() == "no altitude transfer"


class TestBetween:

    def test_ascending(self):
        req = AltitudeTransferRequest.between(0, 500, 7.5, 101.8)
        assert req.direction is TransferDirection.ASCENDING
        assert req.phase is TransferPhase.START
        assert req.target_altitude_m == pytest.approx(feet_to_meters(500))

    def test_descending_keeps_magnitudes(self):
        req = AltitudeTransferRequest.between(1000, 500, -7.5, -101.8)
        assert req.direction is TransferDirection.DESCENDING
        assert req.angle_rad == pytest.approx(math.radians(7.5))
        assert req.climb_rate_m_min == pytest.approx(101.8)
        assert req.signed_climb_rate == pytest.approx(-101.8)

    def test_same_altitude_is_no_transfer(self):
        req = AltitudeTransferRequest.between(500, 500, 7.5, 101.8)
        assert req.direction is TransferDirection.NONE
        assert req.is_done()

    def test_horizontal_speed_along_angle(self):
        """climb = V·sin(θ)  ⇒  horizontal = V·cos(θ)."""
        angle = math.radians(7.5)
        req = AltitudeTransferRequest.between(0, 500, 7.5, 780.0 * math.sin(angle))
        assert req.horizontal_speed == pytest.approx(780.0 * math.cos(angle))


class TestFromPerformance:

    def test_angle_clamped(self):
        req = AltitudeTransferRequest.from_performance(90.0, 100.0, 1000.0)
        assert req.angle_rad == pytest.approx(MAX_ANGLE)
        assert req.direction is TransferDirection.ASCENDING

    def test_negative_angle_descends(self):
        req = AltitudeTransferRequest.from_performance(-90.0, 100.0, 0.0)
        assert req.direction is TransferDirection.DESCENDING
        assert req.angle_rad == pytest.approx(MAX_ANGLE)
        assert req.climb_rate_m_min == pytest.approx(100.0)

    def test_climb_rate_capped_by_angle(self):
        req = AltitudeTransferRequest.from_performance(10.0, 5000.0, 1000.0)
        assert req.climb_rate_m_min == pytest.approx(780.0 * math.sin(math.radians(10.0)))

    def test_descending_climb_rate_capped_as_magnitude(self):
        req = AltitudeTransferRequest.from_performance(-10.0, -5000.0, 0.0)
        assert req.climb_rate_m_min == pytest.approx(780.0 * math.sin(math.radians(10.0)))
        assert req.signed_climb_rate < 0

    def test_small_climb_rate_kept(self):
        req = AltitudeTransferRequest.from_performance(10.0, 20.0, 1000.0)
        assert req.climb_rate_m_min == pytest.approx(20.0)

    def test_zero_angle_is_no_transfer(self):
        req = AltitudeTransferRequest.from_performance(0.0, 100.0, 1000.0)
        assert req.is_done()

    def test_custom_limits(self):
        limits = FlightLimits(max_stable_angle_deg=5.0, max_speed_m_min=600.0)
        req = AltitudeTransferRequest.from_performance(30.0, 1000.0, 1000.0, limits)
        assert req.angle_rad == pytest.approx(math.radians(5.0))
        assert req.climb_rate_m_min == pytest.approx(600.0 * math.sin(math.radians(5.0)))


class TestAdvance:

    def test_fixed_order(self):
        req = AltitudeTransferRequest.between(0, 500, 7.5, 101.8)
        seen = [req.phase]
        while req.advance():
            seen.append(req.phase)
        assert seen == [
            TransferPhase.START,
            TransferPhase.SPEED_RAMP_IN,
            TransferPhase.STEADY,
            TransferPhase.SPEED_RAMP_OUT,
            TransferPhase.FINISHED,
        ]

    def test_finished_is_sticky(self):
        req = AltitudeTransferRequest.between(0, 500, 7.5, 101.8)
        for _ in range(10):
            req.advance()
        assert req.is_done()
        assert req.advance() is False

    def test_advance_leaves_targets_alone(self):
        req = AltitudeTransferRequest.between(0, 500, 7.5, 101.8)
        before = (req.direction, req.target_altitude_m, req.angle_rad, req.climb_rate_m_min)
        req.advance()
        req.advance()
        assert (req.direction, req.target_altitude_m, req.angle_rad,
                req.climb_rate_m_min) == before
