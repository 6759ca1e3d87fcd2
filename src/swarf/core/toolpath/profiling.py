"""Contour profiling.

The nominal geometry is offset by tool radius + stock-to-leave (outward
for OUTSIDE, inward for INSIDE, not at all for ON) to get the cutter
centreline, which is traced once per depth pass.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..program import CutSide, Geometry
from .base import Comment, MotionInstruction
from .utils import depth_passes, offset_rings, trace


@dataclass
class ProfileParams:
    tool_radius: float
    depth: float
    step_down: float
    feed: float
    plunge_feed: float
    clearance: float
    stock_to_leave: float = 0.0


def profile_offset(side: CutSide, tool_radius: float, stock_to_leave: float) -> float:
    if side is CutSide.OUTSIDE:
        return tool_radius + stock_to_leave
    if side is CutSide.INSIDE:
        return -(tool_radius + stock_to_leave)
    return 0.0


def profile(geometry: Geometry, side: CutSide, params: ProfileParams) -> list[MotionInstruction]:
    """Trace the offset of *geometry* at every depth pass.

    Raises
    ------
    GeometryDegenerate:
        An inside offset swallows the whole shape.
    """
    offset = profile_offset(side, params.tool_radius, params.stock_to_leave)
    rings = offset_rings(geometry.to_shapely(), offset)

    out: list[MotionInstruction] = []
    for z in depth_passes(params.depth, params.step_down):
        out.append(Comment(f"PROFILE Z={z:.4f}"))
        for ring in rings:
            out.extend(trace(ring, z, params.clearance, params.feed, params.plunge_feed))
    return out
