"""Tests for operation → instruction synthesis."""

import pytest

from swarf.core.context import CompilerContext
from swarf.core.feeds import UnknownMaterial
from swarf.core.program import (
    BoltCirclePattern,
    Circle,
    Clear,
    CommentOp,
    CoolantMode,
    Cut,
    CutSide,
    Direction,
    Drill,
    Face,
    Footer,
    GridPattern,
    Header,
    PartDef,
    Patterned,
    Pocket,
    Position,
    Profile,
    Rect,
    RegularPolygon,
    SafetyConfig,
    Setup,
    Spindle,
    SpindleDirection,
    StockDef,
    Tap,
    ToolChange,
)
from swarf.core.tool import ToolGeometry
from swarf.core.toolpath import (
    CancelCycle,
    Comment,
    CoolantCommand,
    CycleKind,
    DrillCycle,
    Linear,
    RawCode,
    SpindleCommand,
    TapCycle,
)
from swarf.core.toolpath import ToolChange as ToolChangeInstr
from swarf.core.toolpath.synthesizer import ToolpathSynthesizer
from swarf.core.units import Units


@pytest.fixture
def synth():
    return ToolpathSynthesizer()


@pytest.fixture
def half_inch():
    return ToolGeometry(diameter=0.5, flute_count=3)


@pytest.fixture
def ctx(half_inch):
    """Aluminum with a 1/2" end mill loaded."""
    return CompilerContext(tool=half_inch, tool_number=1, material="6061-T6")


def _of(instructions, kind):
    return [i for i in instructions if isinstance(i, kind)]


def _texts(instructions):
    return [i.text for i in instructions if isinstance(i, Comment)]


class TestFraming:
    def test_header(self, synth):
        ctx = CompilerContext()
        out = synth.header(Header(), ctx)
        assert out == [
            Comment("PROGRAM START"),
            RawCode("G90 G17 G40 G49 G80"),
            RawCode("G20"),
            RawCode("G54"),
        ]

    def test_header_turns_on_coolant(self, synth):
        ctx = CompilerContext(coolant=CoolantMode.FLOOD)
        out = synth.header(Header(safety=SafetyConfig(coolant=CoolantMode.FLOOD)), ctx)
        assert out[-1] == CoolantCommand(CoolantMode.FLOOD)
        assert ctx.coolant_active

    def test_footer(self, synth):
        ctx = CompilerContext(spindle_rpm=5000, spindle_direction=SpindleDirection.CW)
        out = synth.footer(Footer(), ctx)
        assert out[-1] == RawCode("M30")
        assert SpindleCommand(SpindleDirection.OFF) in out
        assert ctx.spindle_rpm == 0

    def test_unknown_operation(self, synth):
        with pytest.raises(TypeError):
            synth.synthesize(object(), CompilerContext())


class TestMachineState:
    def test_tool_change_updates_context(self, synth, half_inch):
        ctx = CompilerContext(spindle_rpm=5000, spindle_direction=SpindleDirection.CW)
        out = synth.synthesize(ToolChange(3, half_inch), ctx)
        assert out[:5] == [
            Comment("TOOL CHANGE - T3"),
            SpindleCommand(SpindleDirection.OFF),
            CoolantCommand(CoolantMode.OFF),
            ToolChangeInstr(3),
            RawCode("G43 H3"),
        ]
        assert out[5].text.startswith("TOOL DATA: DIA=0.5")
        assert ctx.tool is half_inch
        assert ctx.tool_number == 3
        assert ctx.spindle_rpm == 0

    def test_spindle_clamped(self, synth):
        ctx = CompilerContext(max_rpm=10000)
        out = synth.synthesize(Spindle(SpindleDirection.CW, 12000), ctx)
        assert out == [
            Comment("RPM 12000 clamped to machine maximum 10000"),
            SpindleCommand(SpindleDirection.CW, 10000),
        ]
        assert ctx.spindle_rpm == 10000

    def test_spindle_start_restores_coolant(self, synth):
        ctx = CompilerContext(coolant=CoolantMode.FLOOD)
        out = synth.synthesize(Spindle(SpindleDirection.CW, 3000), ctx)
        assert out == [SpindleCommand(SpindleDirection.CW, 3000), CoolantCommand(CoolantMode.FLOOD)]

    def test_spindle_off(self, synth):
        ctx = CompilerContext(spindle_rpm=3000, spindle_direction=SpindleDirection.CW)
        assert synth.synthesize(Spindle(SpindleDirection.OFF), ctx) == [
            SpindleCommand(SpindleDirection.OFF)]
        assert ctx.spindle_rpm == 0

    def test_part_def_sets_material_and_stock(self, synth):
        ctx = CompilerContext()
        out = synth.synthesize(PartDef("bracket", StockDef("Delrin", 2.0, 1.0, 0.5)), ctx)
        assert _texts(out) == ["PART: bracket", "STOCK: Delrin 2.0 x 1.0 x 0.5"]
        assert ctx.material == "Delrin"
        assert ctx.stock.bounds_2d == (0.0, 0.0, 2.0, 1.0)

    def test_setup_sets_floor(self, synth):
        ctx = CompilerContext()
        synth.synthesize(Setup(zero="X left, Y front, Z top", z_min=-0.2), ctx)
        assert ctx.z_floor == -0.2

    def test_cut_and_clear_are_comments(self, synth):
        for op in (Cut(Direction.X_POSITIVE, 1.0, 0.1, 0.5),
                   Clear(Direction.Y_NEGATIVE, 1.0, 0.1, 0.5)):
            out = synth.synthesize(op, CompilerContext())
            assert len(out) == 2
            assert all(isinstance(i, Comment) for i in out)
            assert "not supported" in out[1].text

    def test_comment_op(self, synth):
        assert synth.synthesize(CommentOp("deburr by hand"), CompilerContext()) == [
            Comment("deburr by hand")]


class TestDrilling:
    def test_defaults_without_tool(self, synth):
        ctx = CompilerContext()
        out = synth.synthesize(Drill([Position(1.0, 1.0)], depth=0.25), ctx)
        assert "WARNING: No tool defined, using default feed 10.0" in _texts(out)
        cycles = _of(out, DrillCycle)
        assert len(cycles) == 1
        assert cycles[0].kind is CycleKind.SIMPLE
        assert cycles[0].retract == pytest.approx(0.1)
        assert cycles[0].feed == pytest.approx(10.0)
        assert _of(out, SpindleCommand) == []

    def test_through_hole_depth(self, synth):
        out = synth.synthesize(Drill([Position(0.0, 0.0)], through=True, feed=8.0),
                               CompilerContext())
        assert _of(out, DrillCycle)[0].depth == pytest.approx(0.55)

    def test_depth_required(self, synth):
        with pytest.raises(ValueError):
            synth.synthesize(Drill([Position(0.0, 0.0)]), CompilerContext())

    def test_z_floor_limits_depth(self, synth):
        ctx = CompilerContext(z_floor=-0.2)
        out = synth.synthesize(Drill([Position(0.0, 0.0)], depth=0.5, feed=8.0), ctx)
        assert "Depth 0.5000 limited by Z floor -0.2000" in _texts(out)
        assert _of(out, DrillCycle)[0].depth == pytest.approx(0.2)

    def test_resolved_feed_starts_spindle(self, synth, ctx):
        out = synth.synthesize(Drill([Position(0.0, 0.0)], depth=0.25), ctx)
        spindle = _of(out, SpindleCommand)
        assert spindle == [SpindleCommand(SpindleDirection.CW, ctx.spindle_rpm)]
        assert ctx.spindle_rpm > 0

    def test_tap_starts_spindle(self, synth):
        ctx = CompilerContext()
        out = synth.synthesize(Tap([Position(0.0, 0.0)], depth=0.5, pitch=0.05), ctx)
        assert SpindleCommand(SpindleDirection.CW, 500) in out
        assert _of(out, TapCycle)[0].feed == pytest.approx(25.0)

    def test_tap_after_drill_uses_tap_speed(self, synth):
        ctx = CompilerContext(tool=ToolGeometry(diameter=0.201), tool_number=3,
                              material="6061-T6")
        synth.synthesize(Drill([Position(1.0, 1.0)], depth=0.5), ctx)
        assert ctx.spindle_rpm > 1000

        out = synth.synthesize(Tap([Position(1.0, 1.0)], depth=0.4, pitch=0.05), ctx)
        assert SpindleCommand(SpindleDirection.CW, 500) in out
        assert ctx.spindle_rpm == 500
        assert _of(out, TapCycle)[0].feed == pytest.approx(25.0)

    def test_tap_keeps_programmed_speed(self, synth, ctx):
        synth.synthesize(Spindle(SpindleDirection.CW, 300), ctx)
        out = synth.synthesize(Tap([Position(0.0, 0.0)], depth=0.5, pitch=0.05), ctx)
        assert _of(out, SpindleCommand) == []
        assert _of(out, TapCycle)[0].feed == pytest.approx(15.0)

    def test_drill_has_no_depth_warning(self, synth):
        ctx = CompilerContext(tool=ToolGeometry(diameter=0.201), material="6061-T6")
        out = synth.synthesize(Drill([Position(0.0, 0.0)], depth=0.5), ctx)
        assert not any("exceeds recommended maximum" in t for t in _texts(out))


class TestMilling:
    def test_unknown_material(self, synth, half_inch):
        ctx = CompilerContext(tool=half_inch, material="Unobtainium")
        with pytest.raises(UnknownMaterial):
            synth.synthesize(Pocket(Rect(0.0, 0.0, 2.0, 1.0), depth=0.2), ctx)
        assert ctx.spindle_rpm == 0

    def test_tight_circle_plunges_once(self, synth, ctx):
        out = synth.synthesize(Pocket(Circle(1.0, 1.0, 0.75), depth=0.2), ctx)
        cuts = _of(out, Linear)
        assert len(cuts) == 1
        assert cuts[0].z == pytest.approx(-0.2)
        assert not any(t.startswith("CIRCULAR POCKET DEPTH") for t in _texts(out))

    def test_polygon_pocket_unsupported(self, synth, ctx):
        out = synth.synthesize(Pocket(RegularPolygon(0.0, 0.0, 1.0, 6), depth=0.1), ctx)
        assert len(out) == 1
        assert out[0].text.startswith("UNSUPPORTED GEOMETRY")

    def test_rotated_rect_pocket_unsupported(self, synth, ctx):
        out = synth.synthesize(Pocket(Rect(0.0, 0.0, 2.0, 1.0, rotation=30.0), depth=0.1), ctx)
        assert _of(out, Linear) == []
        assert any(t.startswith("UNSUPPORTED GEOMETRY") for t in _texts(out))

    def test_pocket_without_tool(self, synth):
        out = synth.synthesize(Pocket(Rect(0.0, 0.0, 2.0, 1.0), depth=0.1), CompilerContext())
        assert out == [Comment("POCKET skipped: no tool loaded")]

    def test_explicit_feed_skips_resolver(self, synth, half_inch):
        ctx = CompilerContext(tool=half_inch, material="Unobtainium")
        out = synth.synthesize(
            Profile(Rect(0.0, 0.0, 1.0, 1.0), depth=0.1, feed=12.0), ctx)
        feeds = [i.feed for i in _of(out, Linear) if i.feed is not None]
        assert feeds[:2] == pytest.approx([3.0, 12.0])

    def test_inside_profile_too_small(self, synth, ctx):
        out = synth.synthesize(
            Profile(Circle(0.0, 0.0, 0.3), depth=0.1, side=CutSide.INSIDE), ctx)
        assert _of(out, Linear) == []
        assert any(t.startswith("PROFILE skipped") for t in _texts(out))

    def test_metric_feed_converted(self, synth):
        inch_ctx = CompilerContext(tool=ToolGeometry(0.5, 3), material="6061-T6")
        mm_ctx = CompilerContext(units=Units.MM, tool=ToolGeometry(12.7, 3), material="6061-T6")
        inch_out = synth.synthesize(Profile(Rect(0.0, 0.0, 1.0, 1.0), depth=0.1), inch_ctx)
        mm_out = synth.synthesize(Profile(Rect(0.0, 0.0, 25.4, 25.4), depth=2.54), mm_ctx)

        def cut_feed(out):
            return next(i.feed for i in _of(out, Linear) if i.x is not None and i.feed)

        assert cut_feed(mm_out) == pytest.approx(cut_feed(inch_out) * 25.4)
        assert mm_ctx.spindle_rpm == inch_ctx.spindle_rpm

    def test_face_uses_stock(self, synth, ctx):
        synth.synthesize(PartDef("plate", StockDef("Delrin", 2.0, 1.0, 0.5)), ctx)
        out = synth.synthesize(Face(depth=0.02), ctx)
        xs = [i.x for i in _of(out, Linear) if i.x is not None]
        assert max(xs) == pytest.approx(2.25)
        assert min(xs) == pytest.approx(-0.25)

    def test_face_without_bounds(self, synth, ctx):
        assert synth.synthesize(Face(depth=0.02), ctx) == [
            Comment("FACE skipped: no bounds or stock defined")]


class TestPatterns:
    def test_drill_pattern_is_one_block(self, synth):
        op = Patterned(Drill([Position(0.0, 0.0)], depth=0.25, feed=8.0),
                       BoltCirclePattern(4, 2.0, Position(1.0, 1.0)))
        out = synth.synthesize(op, CompilerContext())
        assert out[0] == Comment("PATTERN BoltCirclePattern x4")
        assert len(_of(out, DrillCycle)) == 4
        assert len(_of(out, CancelCycle)) == 1

    def test_pocket_pattern_repeats(self, synth, ctx):
        op = Patterned(Pocket(Circle(0.0, 0.0, 1.5), depth=0.1),
                       GridPattern(1, 2, 3.0, 0.0))
        out = synth.synthesize(op, ctx)
        assert _texts(out).count("POCKET OPERATION") == 2
