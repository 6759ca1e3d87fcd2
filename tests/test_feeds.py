"""Tests for the speeds-and-feeds engine."""

import json

import pytest

from swarf.core.feeds import (
    STANDARD_DIAMETERS,
    CuttingParameterResolver,
    Engagement,
    InvalidEngagement,
    InvalidToolDiameter,
    MaterialCategory,
    MaterialProperties,
    OperationType,
    ResolverError,
    UnknownMaterial,
    apply_rpm_limit,
    chip_thinning_factor,
    compute_parameters,
    engagement_factor,
    load_material_database,
    load_material_file,
    lookup_chip_load,
    lookup_sfm,
    operation_parameters,
    speed_adjustment,
)
from swarf.core.tool import ToolGeometry, ToolMaterial


@pytest.fixture
def resolver():
    return CuttingParameterResolver()


@pytest.fixture
def aluminum():
    return load_material_database()["Aluminum 6061-T6"]


@pytest.fixture
def quarter_inch():
    return ToolGeometry(diameter=0.25, flute_count=3, tool_material=ToolMaterial.CARBIDE)


def _engagement(pct, doc=0.125, diameter=0.25):
    return Engagement(axial_doc=doc, radial_woc=diameter * pct / 100.0,
                      radial_engagement_pct=pct)


def _fast_material(**overrides):
    """A material whose recommended speed sits outside its own range."""
    fields = dict(
        name="Test Alloy",
        category=MaterialCategory.NON_FERROUS,
        machinability=100.0,
        sfm_hss=(100.0, 200.0, 150.0),
        sfm_cobalt=(100.0, 200.0, 150.0),
        sfm_carbide=(100.0, 200.0, 300.0),
        sfm_coated=(100.0, 200.0, 150.0),
        chip_loads_carbide=(0.001,) * len(STANDARD_DIAMETERS),
        chip_loads_hss=(0.0005,) * len(STANDARD_DIAMETERS),
        max_doc_ratio=1.0,
        recommended_engagement=30.0,
    )
    fields.update(overrides)
    return MaterialProperties(**fields)


class TestMaterialDatabase:
    def test_database_is_read_only(self):
        db = load_material_database()
        with pytest.raises(TypeError):
            db["Unobtainium"] = db["Delrin"]

    def test_every_table_matches_standard_diameters(self):
        for m in load_material_database().values():
            assert len(m.chip_loads_carbide) == len(STANDARD_DIAMETERS)
            assert len(m.chip_loads_hss) == len(STANDARD_DIAMETERS)

    def test_short_chip_table_rejected(self):
        with pytest.raises(ValueError):
            _fast_material(chip_loads_carbide=(0.001, 0.002))

    def test_dict_round_trip(self, aluminum):
        assert MaterialProperties.from_dict(aluminum.to_dict()) == aluminum

    def test_load_material_file(self, tmp_path):
        custom = _fast_material(name="Shop Bronze")
        path = tmp_path / "materials.json"
        path.write_text(json.dumps([custom.to_dict()]))
        loaded = load_material_file(path)
        assert loaded == [custom]

    def test_load_material_file_rejects_object(self, tmp_path):
        path = tmp_path / "materials.json"
        path.write_text(json.dumps({"name": "Shop Bronze"}))
        with pytest.raises(ValueError):
            load_material_file(path)


class TestLookups:
    def test_exact_table_diameter(self, aluminum):
        assert lookup_chip_load(aluminum, 0.25, ToolMaterial.CARBIDE) == pytest.approx(0.002)

    def test_interpolates_between_sizes(self, aluminum):
        # Halfway between 0.25 (0.002) and 0.375 (0.003)
        assert lookup_chip_load(aluminum, 0.3125, ToolMaterial.CARBIDE) == pytest.approx(0.0025)

    def test_below_table_uses_first_entry(self, aluminum):
        assert lookup_chip_load(aluminum, 0.0625, ToolMaterial.CARBIDE) == pytest.approx(0.001)

    def test_above_table_uses_last_entry(self, aluminum):
        assert lookup_chip_load(aluminum, 1.5, ToolMaterial.CARBIDE) == pytest.approx(0.007)

    def test_interpolation_stays_between_neighbours(self):
        for m in load_material_database().values():
            for lo, hi in zip(range(len(STANDARD_DIAMETERS) - 1), range(1, len(STANDARD_DIAMETERS))):
                d = (STANDARD_DIAMETERS[lo] + STANDARD_DIAMETERS[hi]) / 2.0
                value = lookup_chip_load(m, d, ToolMaterial.CARBIDE)
                a, b = m.chip_loads_carbide[lo], m.chip_loads_carbide[hi]
                assert min(a, b) - 1e-12 <= value <= max(a, b) + 1e-12

    def test_cobalt_uses_hss_table(self, aluminum):
        assert lookup_chip_load(aluminum, 0.25, ToolMaterial.COBALT) == pytest.approx(0.001)

    def test_ceramic_falls_back_to_carbide(self, aluminum):
        assert lookup_sfm(aluminum, ToolMaterial.CERAMIC) == aluminum.sfm_carbide

    def test_ceramic_table_used_when_present(self):
        inconel = load_material_database()["Inconel 718"]
        assert lookup_sfm(inconel, ToolMaterial.CERAMIC) == (200.0, 400.0, 300.0)


class TestEngagementFactor:
    def test_full_slot(self):
        assert engagement_factor(100.0) == 1.0
        assert engagement_factor(50.0) == 1.0

    def test_light_engagement_floor(self):
        assert engagement_factor(10.0) >= 3.0
        assert engagement_factor(5.0) == 3.0
        assert engagement_factor(1.0) == 3.0

    def test_strictly_decreasing_between_ten_and_fifty(self):
        values = [engagement_factor(p) for p in (10.0, 20.0, 30.0, 40.0, 49.0)]
        assert all(a > b for a, b in zip(values, values[1:]))

    def test_quarter_engagement_doubles(self):
        assert engagement_factor(25.0) == pytest.approx(2.0)

    def test_chip_thinning_clamped(self):
        assert chip_thinning_factor(100.0) == pytest.approx(1.0)
        assert chip_thinning_factor(25.0) == pytest.approx(2.0)
        assert chip_thinning_factor(5.0) == pytest.approx(3.5)


class TestComputeParameters:
    def test_aluminum_quarter_inch(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(25.0))
        assert params.rpm == 18336
        assert params.rpm > 8000
        assert 800.0 <= params.surface_speed <= 1500.0
        assert params.chip_load == pytest.approx(0.004)
        assert params.feed_rate == pytest.approx(18336 * 0.004 * 3)
        assert params.warnings == ()

    def test_lighter_engagement_feeds_faster(self, aluminum, quarter_inch):
        light = compute_parameters(aluminum, quarter_inch, _engagement(10.0))
        heavy = compute_parameters(aluminum, quarter_inch, _engagement(50.0))
        assert light.feed_rate > heavy.feed_rate

    def test_five_percent_beats_half(self, aluminum, quarter_inch):
        light = compute_parameters(aluminum, quarter_inch, _engagement(5.0))
        heavy = compute_parameters(aluminum, quarter_inch, _engagement(50.0))
        assert light.feed_rate > heavy.feed_rate

    def test_feed_relation(self, resolver, quarter_inch):
        for name in resolver.materials():
            p = resolver.resolve(name, quarter_inch, _engagement(40.0, doc=0.05))
            assert p.feed_rate == pytest.approx(p.rpm * p.chip_load * quarter_inch.flute_count)
            assert p.surface_speed == pytest.approx(p.rpm * 0.25 / 3.82)

    def test_removal_rate_and_power(self, aluminum, quarter_inch):
        eng = _engagement(25.0)
        params = compute_parameters(aluminum, quarter_inch, eng)
        mrr = eng.radial_woc * eng.axial_doc * params.feed_rate
        assert params.material_removal_rate == pytest.approx(mrr)
        assert params.horsepower == pytest.approx(mrr * 0.25)

    def test_deep_cut_warning(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(25.0, doc=0.5))
        assert any("exceeds recommended maximum" in w for w in params.warnings)

    def test_drilling_skips_depth_warning(self, aluminum, quarter_inch):
        eng = Engagement(axial_doc=0.5, radial_woc=0.25, radial_engagement_pct=100.0,
                         drilling=True)
        params = compute_parameters(aluminum, quarter_inch, eng)
        assert not any("exceeds recommended maximum" in w for w in params.warnings)

    def test_coolant_warning(self, resolver, quarter_inch):
        params = resolver.resolve("Stainless 304", quarter_inch, _engagement(25.0, doc=0.05))
        assert any("flood coolant" in w for w in params.warnings)

    def test_speed_above_range_warning(self, quarter_inch):
        params = compute_parameters(_fast_material(), quarter_inch, _engagement(25.0, doc=0.05))
        assert any("exceeds maximum" in w for w in params.warnings)

    def test_speed_below_range_warning(self, quarter_inch):
        slow = _fast_material(sfm_carbide=(100.0, 200.0, 50.0))
        params = compute_parameters(slow, quarter_inch, _engagement(25.0, doc=0.05))
        assert any("below minimum" in w for w in params.warnings)

    def test_parameters_are_frozen(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(25.0))
        with pytest.raises(AttributeError):
            params.rpm = 1


class TestErrors:
    def test_unknown_material(self, resolver, quarter_inch):
        with pytest.raises(UnknownMaterial) as info:
            resolver.resolve("Unobtainium", quarter_inch, _engagement(25.0))
        assert info.value.material == "Unobtainium"
        assert isinstance(info.value, ResolverError)

    def test_zero_diameter(self, resolver):
        with pytest.raises(InvalidToolDiameter):
            resolver.resolve("Delrin", ToolGeometry(diameter=0.0), _engagement(25.0))

    def test_negative_diameter(self, aluminum):
        with pytest.raises(InvalidToolDiameter):
            compute_parameters(aluminum, ToolGeometry(diameter=-0.25), _engagement(25.0))

    @pytest.mark.parametrize("pct", [0.0, -5.0, 100.5])
    def test_engagement_out_of_range(self, aluminum, quarter_inch, pct):
        with pytest.raises(InvalidEngagement):
            compute_parameters(aluminum, quarter_inch, _engagement(pct))

    def test_full_slot_is_valid(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(100.0))
        assert params.chip_load == pytest.approx(0.002)


class TestResolver:
    def test_grade_lookup(self, resolver):
        assert resolver.material("6061-T6").name == "Aluminum 6061-T6"

    def test_contains(self, resolver):
        assert "Delrin" in resolver
        assert "6061-T6" in resolver
        assert "Unobtainium" not in resolver

    def test_materials_sorted(self, resolver):
        names = resolver.materials()
        assert names == sorted(names)
        assert "Inconel 718" in names

    def test_by_category(self, resolver):
        cast = resolver.materials_by_category(MaterialCategory.CAST_IRON)
        assert {m.name for m in cast} == {"Cast Iron Gray", "Cast Iron Ductile"}

    def test_sfm_range(self, resolver):
        assert resolver.sfm_range("Aluminum 6061-T6", ToolMaterial.CARBIDE) == (800.0, 1500.0)

    def test_chip_load(self, resolver):
        assert resolver.chip_load("Aluminum 6061-T6", 0.5, ToolMaterial.CARBIDE) == pytest.approx(0.004)

    def test_same_input_same_output(self, resolver, quarter_inch):
        a = resolver.resolve("Steel 4140", quarter_inch, _engagement(30.0, doc=0.1))
        b = resolver.resolve("Steel 4140", quarter_inch, _engagement(30.0, doc=0.1))
        assert a == b


class TestRpmLimit:
    def test_scales_feed_with_rpm(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(25.0))
        limited = apply_rpm_limit(params, 10000)
        k = 10000 / params.rpm
        assert limited.rpm == 10000
        assert limited.feed_rate == pytest.approx(params.feed_rate * k)
        assert limited.surface_speed == pytest.approx(params.surface_speed * k)
        assert limited.chip_load == params.chip_load
        assert limited.warnings[-1].startswith("RPM limited to 10000")

    def test_within_limit_unchanged(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(25.0))
        assert apply_rpm_limit(params, 20000) is params

    def test_chip_per_tooth_preserved(self, aluminum, quarter_inch):
        params = compute_parameters(aluminum, quarter_inch, _engagement(25.0))
        limited = apply_rpm_limit(params, 5000)
        assert limited.feed_rate / (limited.rpm * 3) == pytest.approx(params.chip_load, rel=1e-3)


class TestOperationPresets:
    @pytest.mark.parametrize("diameter", [0.125, 0.25, 0.5, 1.0])
    def test_roughing_at_least_finishing(self, diameter):
        tool = ToolGeometry(diameter=diameter, flute_count=4)
        for m in load_material_database().values():
            rough = operation_parameters(m, tool, OperationType.ROUGHING)
            finish = operation_parameters(m, tool, OperationType.FINISHING)
            assert rough.feed_rate >= finish.feed_rate
            assert rough.doc >= finish.doc

    def test_adaptive_uses_light_woc(self, aluminum, quarter_inch):
        adaptive = operation_parameters(aluminum, quarter_inch, OperationType.ADAPTIVE)
        assert adaptive.woc == pytest.approx(0.025)
        assert adaptive.doc == pytest.approx(0.375)
        assert adaptive.description.startswith("Adaptive")


class TestSpeedAdjustment:
    def test_new_tool(self):
        assert speed_adjustment(1.0, MaterialCategory.NON_FERROUS) == pytest.approx(1.0)

    def test_worn_tool_in_titanium_slows(self):
        assert speed_adjustment(0.0, MaterialCategory.TITANIUM) == pytest.approx(0.85)

    def test_worn_tool_in_aluminum_speeds_up(self):
        assert speed_adjustment(0.0, MaterialCategory.NON_FERROUS) == pytest.approx(1.1)

    def test_half_worn(self):
        assert speed_adjustment(0.5, MaterialCategory.HIGH_TEMP_ALLOY) == pytest.approx(
            1.0 - 0.5 * 0.15)
