"""Tests for instruction-stream validation."""

import pytest

from swarf.core.program import SpindleDirection
from swarf.core.toolpath import CycleKind, DrillCycle, Linear, Rapid, SpindleCommand
from swarf.core.units import Units
from swarf.gcode.validate import MachineEnvelope, validate_instructions


@pytest.fixture
def small_envelope() -> MachineEnvelope:
    return MachineEnvelope(
        x_min=0.0, x_max=10.0,
        y_min=0.0, y_max=6.0,
        z_min=-10.0, z_max=5.0,
        max_rpm=10000,
        min_rpm=100,
        max_feed=110.0,
    )


def _cut(*extra):
    return [SpindleCommand(SpindleDirection.CW, 3000), *extra, Linear(1.0, 1.0, -0.05, 20.0)]


class TestValidation:
    def test_valid_program_passes(self, small_envelope):
        result = validate_instructions(_cut(), small_envelope)
        assert result.is_ok

    def test_x_out_of_range(self, small_envelope):
        result = validate_instructions(_cut(Rapid(x=15.0)), small_envelope)
        assert result.has_errors
        assert result.issues[0].index == 1

    def test_y_out_of_range(self, small_envelope):
        result = validate_instructions(_cut(Linear(y=8.0)), small_envelope)
        assert result.has_errors

    def test_z_out_of_range(self, small_envelope):
        result = validate_instructions(_cut(Linear(z=-11.0)), small_envelope)
        assert result.has_errors

    def test_drill_bottom_checked(self, small_envelope):
        deep = DrillCycle(CycleKind.SIMPLE, depth=12.0, retract=0.1, feed=10.0)
        result = validate_instructions(_cut(deep), small_envelope)
        assert result.has_errors

    def test_rpm_too_low(self, small_envelope):
        result = validate_instructions(
            [SpindleCommand(SpindleDirection.CW, 50), Linear(z=-0.05, feed=5.0)], small_envelope)
        assert result.has_errors

    def test_rpm_too_high(self, small_envelope):
        result = validate_instructions(
            [SpindleCommand(SpindleDirection.CW, 15000), Linear(z=-0.05, feed=5.0)], small_envelope)
        assert result.has_errors

    def test_spindle_off_not_checked(self, small_envelope):
        result = validate_instructions(_cut(SpindleCommand(SpindleDirection.OFF)), small_envelope)
        assert result.is_ok

    def test_feed_too_high_is_warning(self, small_envelope):
        result = validate_instructions(_cut(Linear(x=2.0, feed=200.0)), small_envelope)
        assert result.has_warnings
        assert not result.has_errors

    def test_no_cutting_is_warning(self, small_envelope):
        result = validate_instructions([Rapid(z=0.5)], small_envelope)
        assert result.has_warnings
        assert "No cutting moves" in result.issues[0].message

    def test_metric_converted_before_checking(self, small_envelope):
        # 200 mm is within 10" of X travel; 300 mm is not
        ok = validate_instructions([Linear(x=200.0, feed=500.0)], small_envelope, Units.MM)
        bad = validate_instructions([Linear(x=300.0, feed=500.0)], small_envelope, Units.MM)
        assert ok.is_ok
        assert bad.has_errors
