"""Tests for advisory parameter checks and tool-life estimates."""

import pytest

from swarf.core.feeds import CuttingParameters, Engagement, compute_parameters, load_material_database
from swarf.core.feeds.checks import (
    Severity,
    check_safety_limits,
    estimate_tool_life,
    max_rpm_for_diameter,
    validate_parameters,
)
from swarf.core.tool import ToolGeometry, ToolMaterial


@pytest.fixture
def db():
    return load_material_database()


@pytest.fixture
def tool():
    return ToolGeometry(diameter=0.25, flute_count=3)


@pytest.fixture
def aluminum_params(db, tool):
    eng = Engagement(axial_doc=0.125, radial_woc=0.0625, radial_engagement_pct=25.0)
    return compute_parameters(db["Aluminum 6061-T6"], tool, eng)


def _params(**overrides):
    fields = dict(
        rpm=3000, feed_rate=4.0, chip_load=0.0005, surface_speed=196.0,
        doc=0.05, woc=0.05, horsepower=0.05, material_removal_rate=0.01,
    )
    fields.update(overrides)
    return CuttingParameters(**fields)


def _codes(issues):
    return [i.code for i in issues]


class TestMaxRpm:
    def test_small_tools_spin_faster(self):
        assert max_rpm_for_diameter(0.0625) == 40000
        assert max_rpm_for_diameter(0.25) == 20000
        assert max_rpm_for_diameter(0.3) == 15000

    def test_large_tool(self):
        assert max_rpm_for_diameter(2.0) == 4000


class TestValidateParameters:
    def test_clean_aluminum_cut(self, db, tool, aluminum_params):
        assert validate_parameters(aluminum_params, db["Aluminum 6061-T6"], tool) == []

    def test_work_hardening_risk(self, db, tool):
        issues = validate_parameters(_params(), db["Stainless 304"], tool)
        risk = [i for i in issues if i.code == "WORK_HARDENING_RISK"]
        assert len(risk) == 1
        assert risk[0].severity is Severity.ERROR
        assert "7.5" in risk[0].suggestion

    def test_coolant_info(self, db, tool):
        issues = validate_parameters(_params(feed_rate=20.0), db["Stainless 304"], tool)
        assert _codes(issues) == ["COOLANT_RECOMMENDED"]
        assert issues[0].severity is Severity.INFO

    def test_rpm_too_high(self, db, tool):
        issues = validate_parameters(_params(rpm=25000), db["Delrin"], tool)
        assert "RPM_TOO_HIGH" in _codes(issues)

    def test_rubbing(self, db, tool):
        issues = validate_parameters(_params(chip_load=0.0001), db["Delrin"], tool)
        assert "POSSIBLE_RUBBING" in _codes(issues)

    def test_long_stickout_deflection(self, db):
        long_tool = ToolGeometry(diameter=0.25, flute_count=3, length=1.5)
        issues = validate_parameters(_params(doc=0.2), db["Delrin"], long_tool)
        assert "TOOL_DEFLECTION" in _codes(issues)

    def test_titanium_heat(self, db, tool):
        issues = validate_parameters(_params(surface_speed=200.0), db["Titanium Ti-6Al-4V"], tool)
        assert "TITANIUM_HEAT" in _codes(issues)

    def test_nickel_doc(self, db, tool):
        issues = validate_parameters(_params(doc=0.1), db["Inconel 718"], tool)
        assert "NICKEL_ALLOY_DOC" in _codes(issues)


class TestSafetyLimits:
    def test_within_limits(self, aluminum_params):
        assert check_safety_limits(aluminum_params, 20000, 300.0, 1.5) == []

    def test_small_machine(self, aluminum_params):
        issues = check_safety_limits(aluminum_params, 10000, 135.0, 1.5)
        assert _codes(issues) == ["MACHINE_RPM_EXCEEDED", "MACHINE_FEED_EXCEEDED"]
        assert all(i.severity is Severity.ERROR for i in issues)

    def test_horsepower_is_warning(self):
        issues = check_safety_limits(_params(horsepower=2.0), 10000, 135.0, 1.5)
        assert _codes(issues) == ["MACHINE_HP_LIMIT"]
        assert issues[0].severity is Severity.WARNING


class TestToolLife:
    def test_faster_is_shorter(self, db):
        al = db["Aluminum 6061-T6"]
        slow = estimate_tool_life(al, 600.0, 0.002, ToolMaterial.CARBIDE)
        fast = estimate_tool_life(al, 1200.0, 0.002, ToolMaterial.CARBIDE)
        assert fast.minutes < slow.minutes

    def test_taylor_value(self, db):
        al = db["Aluminum 6061-T6"]
        life = estimate_tool_life(al, 1200.0, 0.0, ToolMaterial.CARBIDE)
        assert life.minutes == pytest.approx((800.0 / 1200.0) ** 4)

    def test_confidence(self, db):
        ti = db["Titanium Ti-6Al-4V"]
        assert estimate_tool_life(ti, 100.0, 0.001, ToolMaterial.CARBIDE).confidence == 0.8
        assert estimate_tool_life(ti, 300.0, 0.001, ToolMaterial.CARBIDE).confidence == 0.6

    def test_zero_speed_rejected(self, db):
        with pytest.raises(ValueError):
            estimate_tool_life(db["Delrin"], 0.0, 0.001, ToolMaterial.HSS)
