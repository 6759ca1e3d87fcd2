"""Operation → motion-instruction synthesis.

``ToolpathSynthesizer.synthesize`` handles one operation at a time,
reading and updating the ``CompilerContext`` as it goes.  Each call builds
its instructions in a local list, so an operation whose cutting
parameters cannot be resolved contributes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ...config import defaults
from .. import program as prog
from ..context import CompilerContext, StockEnvelope
from ..feeds import CuttingParameterResolver, Engagement, apply_rpm_limit
from .base import (
    Comment,
    CoolantCommand,
    MotionInstruction,
    Rapid,
    RawCode,
    SpindleCommand,
    ToolChange,
)
from .drilling import choose_cycle, cycle_at_positions, tap_cycle
from .facing import face
from .patterns import expand
from .pocketing import PocketParams, center_plunge, circle_pocket, rect_pocket
from .profiling import ProfileParams, profile
from .utils import GeometryDegenerate, UnsupportedGeometry

logger = logging.getLogger(__name__)


@dataclass
class _Feeds:
    """Feeds for one operation, in program units."""
    feed: float
    plunge: float
    rpm: Optional[int] = None        # None leaves the spindle alone
    notes: list[str] = field(default_factory=list)


class ToolpathSynthesizer:
    """Turns operations into generic-dialect motion instructions."""

    def __init__(self, resolver: Optional[CuttingParameterResolver] = None):
        self.resolver = resolver or CuttingParameterResolver()

    # ------------------------------------------------------------------
    # Program framing
    # ------------------------------------------------------------------

    def header(self, header: prog.Header, ctx: CompilerContext) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [
            Comment("PROGRAM START"),
            RawCode("G90 G17 G40 G49 G80"),
            RawCode(header.units.gcode_modal),
            RawCode(header.work_offset.value),
        ]
        if header.safety.coolant is not prog.CoolantMode.OFF:
            out.append(CoolantCommand(header.safety.coolant))
            ctx.coolant_active = True
        return out

    def footer(self, footer: prog.Footer, ctx: CompilerContext) -> list[MotionInstruction]:
        ctx.spindle_rpm = 0
        ctx.spindle_direction = prog.SpindleDirection.OFF
        ctx.spindle_programmed = False
        ctx.coolant_active = False
        return [
            Comment("PROGRAM END"),
            Rapid(z=ctx.clearance_z),
            Rapid(x=footer.return_to.x, y=footer.return_to.y),
            SpindleCommand(prog.SpindleDirection.OFF),
            CoolantCommand(prog.CoolantMode.OFF),
            RawCode(footer.end_code),
        ]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def synthesize(self, op: prog.Operation, ctx: CompilerContext) -> list[MotionInstruction]:
        """Instructions for *op*.

        Raises
        ------
        ResolverError:
            Cutting parameters could not be resolved for the operation.
        """
        logger.debug("synthesizing %s", type(op).__name__)

        if isinstance(op, prog.ToolChange):
            return self._tool_change(op, ctx)
        if isinstance(op, prog.Spindle):
            return self._spindle(op, ctx)
        if isinstance(op, prog.Drill):
            return self._drill(op, ctx)
        if isinstance(op, prog.Pocket):
            return self._pocket(op, ctx)
        if isinstance(op, prog.Profile):
            return self._profile(op, ctx)
        if isinstance(op, prog.Face):
            return self._face(op, ctx)
        if isinstance(op, prog.Tap):
            return self._tap(op, ctx)
        if isinstance(op, prog.Patterned):
            return self._patterned(op, ctx)
        if isinstance(op, prog.CommentOp):
            return [Comment(op.text)]
        if isinstance(op, prog.PartDef):
            return self._part_def(op, ctx)
        if isinstance(op, prog.Setup):
            return self._setup(op, ctx)
        if isinstance(op, (prog.Cut, prog.Clear)):
            return self._sweep(op)
        raise TypeError(f"Unknown operation type: {type(op).__name__}")

    # ------------------------------------------------------------------
    # Machine state
    # ------------------------------------------------------------------

    def _tool_change(self, op: prog.ToolChange, ctx: CompilerContext) -> list[MotionInstruction]:
        n = op.tool_number
        out: list[MotionInstruction] = [
            Comment(f"TOOL CHANGE - T{n}"),
            SpindleCommand(prog.SpindleDirection.OFF),
            CoolantCommand(prog.CoolantMode.OFF),
            ToolChange(n),
            RawCode(f"G43 H{n}"),
        ]
        if op.tool is not None:
            t = op.tool
            length = f"{t.length}" if t.length is not None else "-"
            out.append(Comment(
                f"TOOL DATA: DIA={t.diameter} LEN={length} "
                f"FLUTES={t.flute_count} MAT={t.tool_material}"
            ))
            ctx.tool = t

        ctx.tool_number = n
        ctx.spindle_rpm = 0
        ctx.spindle_direction = prog.SpindleDirection.OFF
        ctx.spindle_programmed = False
        ctx.coolant_active = False
        return out

    def _spindle(self, op: prog.Spindle, ctx: CompilerContext) -> list[MotionInstruction]:
        if op.direction is prog.SpindleDirection.OFF:
            ctx.spindle_rpm = 0
            ctx.spindle_direction = op.direction
            ctx.spindle_programmed = False
            return [SpindleCommand(op.direction)]

        out: list[MotionInstruction] = []
        rpm = int(op.rpm)
        if ctx.max_rpm and rpm > ctx.max_rpm:
            out.append(Comment(f"RPM {rpm} clamped to machine maximum {ctx.max_rpm}"))
            rpm = ctx.max_rpm
        out.extend(self._start_spindle(op.direction, rpm, ctx, programmed=True))
        return out

    def _start_spindle(
        self,
        direction: prog.SpindleDirection,
        rpm: int,
        ctx: CompilerContext,
        programmed: bool = False,
    ) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [SpindleCommand(direction, rpm)]
        ctx.spindle_rpm = rpm
        ctx.spindle_direction = direction
        ctx.spindle_programmed = programmed
        if ctx.coolant is not prog.CoolantMode.OFF and not ctx.coolant_active:
            out.append(CoolantCommand(ctx.coolant))
            ctx.coolant_active = True
        return out

    def _part_def(self, op: prog.PartDef, ctx: CompilerContext) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [Comment(f"PART: {op.name}")]
        if op.stock is not None:
            s = op.stock
            ctx.material = s.material
            ctx.stock = StockEnvelope.from_stock_def(s)
            out.append(Comment(
                f"STOCK: {s.material} {s.size_x} x {s.size_y} x {s.size_z}"))
        return out

    def _setup(self, op: prog.Setup, ctx: CompilerContext) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [Comment("SETUP BLOCK")]
        if op.zero:
            out.append(Comment(f"Zero: {op.zero}"))
        if op.z_min is not None:
            ctx.z_floor = op.z_min
            out.append(Comment(f"Z minimum: {op.z_min}"))
        if op.y_limit is not None:
            out.append(Comment(f"Y limit: {op.y_limit}"))
        return out

    def _sweep(self, op: prog.Cut | prog.Clear) -> list[MotionInstruction]:
        kind = "CUT" if isinstance(op, prog.Cut) else "CLEAR"
        return [
            Comment(f"{kind} {op.direction.value} sweep:{op.sweep} "
                    f"depth:{op.depth} height:{op.height}"),
            Comment(f"{kind} operation not supported, no toolpath generated"),
        ]

    # ------------------------------------------------------------------
    # Cutting parameters
    # ------------------------------------------------------------------

    def _feeds(
        self,
        ctx: CompilerContext,
        axial: float,
        radial: float,
        engagement_pct: float,
        feed: Optional[float] = None,
        plunge: Optional[float] = None,
        drilling: bool = False,
    ) -> _Feeds:
        """Feeds for the current tool and material.

        An explicit *feed* skips resolution entirely.  Without a tool or a
        material the conservative defaults are used and noted.
        """
        if feed is not None:
            return _Feeds(feed, plunge or feed * defaults.PLUNGE_FEED_RATIO)

        if ctx.tool is None or ctx.material is None:
            missing = "tool" if ctx.tool is None else "material"
            default = ctx.native(defaults.DEFAULT_FEED)
            return _Feeds(
                default,
                plunge or default * defaults.PLUNGE_FEED_RATIO,
                notes=[f"No {missing} defined, using default feed {default:.1f}"],
            )

        tool = replace(ctx.tool, diameter=ctx.inch(ctx.tool.diameter))
        engagement = Engagement(
            axial_doc=ctx.inch(axial),
            radial_woc=ctx.inch(radial),
            radial_engagement_pct=engagement_pct,
            drilling=drilling,
        )
        params = self.resolver.resolve(ctx.material, tool, engagement)
        if ctx.max_rpm:
            params = apply_rpm_limit(params, ctx.max_rpm)

        resolved = ctx.native(params.feed_rate)
        return _Feeds(
            resolved,
            plunge or resolved * defaults.PLUNGE_FEED_RATIO,
            rpm=params.rpm,
            notes=list(params.warnings),
        )

    def _prologue(self, feeds: _Feeds, ctx: CompilerContext) -> list[MotionInstruction]:
        out: list[MotionInstruction] = []
        if feeds.rpm is not None and feeds.rpm != ctx.spindle_rpm:
            direction = ctx.spindle_direction
            if direction is prog.SpindleDirection.OFF:
                direction = prog.SpindleDirection.CW
            out.extend(self._start_spindle(direction, feeds.rpm, ctx))
        out.extend(Comment(f"WARNING: {note}") for note in feeds.notes)
        return out

    def _limit_depth(self, depth: float, ctx: CompilerContext, out: list[MotionInstruction]) -> float:
        if ctx.z_floor is not None and ctx.z_floor < 0 and -depth < ctx.z_floor:
            out.append(Comment(
                f"Depth {depth:.4f} limited by Z floor {ctx.z_floor:.4f}"))
            return -ctx.z_floor
        return depth

    # ------------------------------------------------------------------
    # Hole making
    # ------------------------------------------------------------------

    def _drill(self, op: prog.Drill, ctx: CompilerContext) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [Comment("DRILL CYCLE")]

        depth = op.depth
        if depth is None:
            if not op.through:
                raise ValueError("Drill needs a depth or through=True")
            depth = ctx.native(defaults.THROUGH_DEPTH)
        depth = self._limit_depth(depth, ctx, out)

        retract = op.retract if op.retract is not None else ctx.native(defaults.RETRACT_Z)
        diameter = ctx.tool.diameter if ctx.tool is not None else (op.hole_diameter or 0.0)

        feeds = self._feeds(ctx, op.peck_depth or depth, diameter, 100.0,
                            feed=op.feed, drilling=True)
        cycle = choose_cycle(
            depth, retract, feeds.feed, diameter,
            peck=op.peck_depth,
            dwell=op.dwell,
            chip_break=op.chip_break,
            peck_ratio=defaults.PECK_RATIO,
            peck_factor=defaults.PECK_DIAMETER_FACTOR,
        )

        out.extend(self._prologue(feeds, ctx))
        out.extend(cycle_at_positions(cycle, [(p.x, p.y) for p in op.positions]))
        return out

    def _tap(self, op: prog.Tap, ctx: CompilerContext) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [Comment("TAPPING CYCLE")]
        depth = self._limit_depth(op.depth, ctx, out)
        retract = op.retract if op.retract is not None else ctx.native(defaults.RETRACT_Z)

        # Only a speed set by a Spindle operation overrides the tap default
        if not ctx.spindle_programmed and ctx.spindle_rpm != defaults.DEFAULT_TAP_RPM:
            out.extend(self._start_spindle(
                prog.SpindleDirection.CW, defaults.DEFAULT_TAP_RPM, ctx))

        cycle = tap_cycle(depth, retract, op.pitch, ctx.spindle_rpm)
        out.extend(cycle_at_positions(cycle, [(p.x, p.y) for p in op.positions]))
        return out

    # ------------------------------------------------------------------
    # Milling
    # ------------------------------------------------------------------

    def _pocket(self, op: prog.Pocket, ctx: CompilerContext) -> list[MotionInstruction]:
        g = op.geometry
        if not isinstance(g, (prog.Rect, prog.Circle)):
            return [Comment(f"UNSUPPORTED GEOMETRY: {type(g).__name__} pocket")]
        if ctx.tool is None:
            return [Comment("POCKET skipped: no tool loaded")]

        out: list[MotionInstruction] = [Comment("POCKET OPERATION")]
        depth = self._limit_depth(op.depth, ctx, out)
        d = ctx.tool.diameter
        stepdown = op.stepdown or d * defaults.POCKET_STEPDOWN_FACTOR
        fraction = op.stepover or defaults.POCKET_STEPOVER

        feeds = self._feeds(ctx, stepdown, d * fraction, fraction * 100.0,
                            feed=op.feed, plunge=op.plunge_feed)
        params = PocketParams(
            tool_radius=ctx.tool.radius,
            depth=depth,
            step_down=stepdown,
            step_over=d * fraction,
            feed=feeds.feed,
            plunge_feed=feeds.plunge,
            clearance=ctx.clearance_z,
            finish_allowance=op.finish_allowance or 0.0,
            finish_pass=op.finish_allowance is not None,
            min_spiral_radius=ctx.native(defaults.MIN_SPIRAL_CLEARANCE),
            points_per_rev=defaults.SPIRAL_POINTS_PER_REV,
        )

        out.extend(self._prologue(feeds, ctx))
        try:
            if isinstance(g, prog.Rect):
                out.extend(rect_pocket(g, params))
            else:
                out.extend(circle_pocket(g, params))
        except UnsupportedGeometry as exc:
            out.append(Comment(f"UNSUPPORTED GEOMETRY: {exc}"))
        except GeometryDegenerate as exc:
            logger.warning("pocket degenerated to a center plunge: %s", exc)
            if isinstance(g, prog.Rect):
                cx, cy = g.x + g.width / 2.0, g.y + g.height / 2.0
            else:
                cx, cy = g.cx, g.cy
            out.extend(center_plunge(cx, cy, params))
        return out

    def _profile(self, op: prog.Profile, ctx: CompilerContext) -> list[MotionInstruction]:
        if ctx.tool is None:
            return [Comment("PROFILE skipped: no tool loaded")]

        out: list[MotionInstruction] = [Comment("PROFILE OPERATION")]
        depth = self._limit_depth(op.depth, ctx, out)
        d = ctx.tool.diameter
        stepdown = op.stepdown or ctx.native(defaults.PROFILE_STEPDOWN)

        pct = defaults.PROFILE_ENGAGEMENT_PCT
        feeds = self._feeds(ctx, stepdown, d * pct / 100.0, pct,
                            feed=op.feed, plunge=op.plunge_feed)
        params = ProfileParams(
            tool_radius=ctx.tool.radius,
            depth=depth,
            step_down=stepdown,
            feed=feeds.feed,
            plunge_feed=feeds.plunge,
            clearance=ctx.clearance_z,
            stock_to_leave=op.stock_to_leave,
        )

        out.extend(self._prologue(feeds, ctx))
        try:
            out.extend(profile(op.geometry, op.side, params))
        except GeometryDegenerate as exc:
            logger.warning("profile skipped: %s", exc)
            out.append(Comment(f"PROFILE skipped: {exc}"))
        return out

    def _face(self, op: prog.Face, ctx: CompilerContext) -> list[MotionInstruction]:
        if ctx.tool is None:
            return [Comment("FACE skipped: no tool loaded")]
        if op.bounds is not None:
            b = op.bounds
            bounds = (b.x, b.y, b.x + b.width, b.y + b.height)
        elif ctx.stock is not None:
            bounds = ctx.stock.bounds_2d
        else:
            return [Comment("FACE skipped: no bounds or stock defined")]

        out: list[MotionInstruction] = [Comment("FACE MILLING")]
        depth = self._limit_depth(op.depth, ctx, out)
        d = ctx.tool.diameter
        fraction = op.stepover or defaults.FACE_STEPOVER

        feeds = self._feeds(ctx, depth, d * fraction, fraction * 100.0, feed=op.feed)
        out.extend(self._prologue(feeds, ctx))
        out.extend(face(
            bounds, depth,
            tool_radius=ctx.tool.radius,
            step_over=d * fraction,
            feed=feeds.feed,
            plunge_feed=feeds.plunge,
            clearance=ctx.clearance_z,
        ))
        return out

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------

    def _patterned(self, op: prog.Patterned, ctx: CompilerContext) -> list[MotionInstruction]:
        placed = expand(op.operation, op.pattern)
        out: list[MotionInstruction] = [
            Comment(f"PATTERN {type(op.pattern).__name__} x{len(placed)}")]
        if not placed:
            return out

        if isinstance(op.operation, prog.Drill):
            # One cycle block over every hole, in pattern order
            merged = replace(op.operation,
                             positions=[p for d in placed for p in d.positions])
            out.extend(self._drill(merged, ctx))
        else:
            for pocket in placed:
                out.extend(self._pocket(pocket, ctx))
        return out
