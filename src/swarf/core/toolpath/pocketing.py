"""Pocket clearing: zigzag raster for rectangles, spiral for circles.

Rectangular pockets
-------------------
1. Inset the pocket by tool radius + finish allowance.
2. Split the depth into ``ceil(depth / stepdown)`` passes.
3. At each pass cut boustrophedon rows across the inset interior, the
   stepover shrunk so the rows land on both walls.
4. Optionally trace the wall once at full depth.

Circular pockets
----------------
Spiral out from the centre to the inset radius at every depth pass and
finish with one full lap at that radius.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..program import Circle, Rect
from .base import Comment, Linear, MotionInstruction, Rapid
from .utils import (
    GeometryDegenerate,
    UnsupportedGeometry,
    circle_points,
    depth_passes,
    raster_rows,
    spiral_points,
)


@dataclass
class PocketParams:
    """Parameters for pocket clearing, all in program units."""

    tool_radius: float
    depth: float
    step_down: float
    step_over: float          # distance between adjacent rows / spiral laps
    feed: float
    plunge_feed: float
    clearance: float
    finish_allowance: float = 0.0
    finish_pass: bool = False
    min_spiral_radius: float = 0.0
    points_per_rev: int = 36


def rect_pocket(rect: Rect, params: PocketParams) -> list[MotionInstruction]:
    """Zigzag-clear *rect*.

    Raises
    ------
    UnsupportedGeometry:
        The rectangle is rotated or has rounded corners.
    GeometryDegenerate:
        The tool does not fit inside the pocket.
    """
    if rect.rotation or rect.corner_radius:
        raise UnsupportedGeometry("rotated or rounded rectangular pockets")

    inset = params.tool_radius + params.finish_allowance
    min_x, max_x = rect.x + inset, rect.x + rect.width - inset
    min_y, max_y = rect.y + inset, rect.y + rect.height - inset
    if max_x < min_x or max_y < min_y:
        raise GeometryDegenerate(
            f"{rect.width}x{rect.height} pocket is smaller than the tool")

    rows, actual = raster_rows(min_y, max_y, params.step_over)

    out: list[MotionInstruction] = []
    for i, z in enumerate(depth_passes(params.depth, params.step_down), start=1):
        out.append(Comment(f"DEPTH PASS {i} Z={z:.4f}"))
        out.append(Rapid(z=params.clearance))
        out.append(Rapid(x=min_x, y=float(rows[0])))
        out.append(Linear(z=z, feed=params.plunge_feed))

        for j, y in enumerate(rows):
            x_end = max_x if j % 2 == 0 else min_x
            if j == 0:
                out.append(Linear(x=x_end, feed=params.feed))
            else:
                out.append(Linear(y=float(y)))
                out.append(Linear(x=x_end))

        out.append(Rapid(z=params.clearance))

    if params.finish_pass:
        out.extend(_rect_finish(rect, params))
    return out


def _rect_finish(rect: Rect, params: PocketParams) -> list[MotionInstruction]:
    r = params.tool_radius
    x0, y0 = rect.x + r, rect.y + r
    x1, y1 = rect.x + rect.width - r, rect.y + rect.height - r
    # Plunge on the roughed corner, then step out onto the wall
    a = params.finish_allowance
    return [
        Comment("FINISH PASS"),
        Rapid(x=x0 + a, y=y0 + a),
        Linear(z=-params.depth, feed=params.plunge_feed),
        Linear(x=x0, y=y0, feed=params.feed),
        Linear(x=x1),
        Linear(y=y1),
        Linear(x=x0),
        Linear(y=y0),
        Rapid(z=params.clearance),
    ]


def circle_pocket(circle: Circle, params: PocketParams) -> list[MotionInstruction]:
    """Spiral-clear *circle*.

    Raises
    ------
    GeometryDegenerate:
        The tool leaves no room to spiral; the caller plunges instead.
    """
    radius = circle.radius - params.tool_radius - params.finish_allowance
    if radius <= params.min_spiral_radius + 1e-9:
        raise GeometryDegenerate(
            f"{circle.diameter} pocket leaves {radius:.4f} for the spiral")

    spiral = spiral_points(circle.cx, circle.cy, radius, params.step_over,
                           params.points_per_rev)
    lap = circle_points(circle.cx, circle.cy, radius, params.points_per_rev)

    out: list[MotionInstruction] = []
    for i, z in enumerate(depth_passes(params.depth, params.step_down), start=1):
        out.append(Comment(f"CIRCULAR POCKET DEPTH {i} Z={z:.4f}"))
        out.append(Rapid(z=params.clearance))
        out.append(Rapid(x=circle.cx, y=circle.cy))
        out.append(Linear(z=z, feed=params.plunge_feed))

        x, y = spiral[1]
        out.append(Linear(x=float(x), y=float(y), feed=params.feed))
        for x, y in spiral[2:]:
            out.append(Linear(x=float(x), y=float(y)))
        # Spiral ends at angle 0 on the bound, where the lap starts
        for x, y in lap[1:]:
            out.append(Linear(x=float(x), y=float(y)))

        out.append(Rapid(z=params.clearance))
    return out


def center_plunge(
    cx: float,
    cy: float,
    params: PocketParams,
) -> list[MotionInstruction]:
    """Single plunge at the pocket centre for a pocket the tool fills."""
    return [
        Comment("Tool too large for pocket, plunging at center"),
        Rapid(z=params.clearance),
        Rapid(x=cx, y=cy),
        Linear(z=-params.depth, feed=params.plunge_feed),
        Rapid(z=params.clearance),
    ]
