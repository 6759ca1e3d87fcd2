"""Mach3/Mach4 post-processor.

Mach3's canned-cycle support is unreliable, so every drill cycle is
expanded into explicit G00/G01 moves.  X, Y and feed are carried forward
from the instructions already seen.
"""

from __future__ import annotations

import math
from typing import Iterable

from ...config import defaults
from ...core.toolpath.base import (
    CancelCycle,
    CycleKind,
    DrillCycle,
    Dwell,
    Linear,
    MotionInstruction,
    Rapid,
)
from .base import PostProcessor


def simple_long_form(
    x: float, y: float, retract: float, depth: float, feed: float,
) -> list[MotionInstruction]:
    """G81 as explicit moves."""
    return [
        Rapid(x=x, y=y),
        Rapid(z=retract),
        Linear(z=-depth, feed=feed),
        Rapid(z=retract),
    ]


def dwell_long_form(
    x: float, y: float, retract: float, depth: float, seconds: float, feed: float,
) -> list[MotionInstruction]:
    """G82 as explicit moves with a dwell at the bottom."""
    return [
        Rapid(x=x, y=y),
        Rapid(z=retract),
        Linear(z=-depth, feed=feed),
        Dwell(seconds),
        Rapid(z=retract),
    ]


def peck_long_form(
    x: float,
    y: float,
    retract: float,
    depth: float,
    peck: float,
    feed: float,
    clearance: float = defaults.PECK_CLEARANCE,
) -> list[MotionInstruction]:
    """G83 as explicit moves.

    ``ceil(depth / peck)`` plunges, the last landing exactly on *depth*.
    Between pecks the tool clears to R and rapids back to *clearance*
    above the previous peck.
    """
    out: list[MotionInstruction] = [Rapid(x=x, y=y), Rapid(z=retract)]

    n = max(1, math.ceil(depth / peck - 1e-9))
    for i in range(1, n + 1):
        peck_depth = min(i * peck, depth)
        out.append(Linear(z=-peck_depth, feed=feed))
        if i < n:
            out.append(Rapid(z=retract))
            rapid_to = peck_depth - clearance
            if rapid_to > 0:
                out.append(Rapid(z=-rapid_to))

    out.append(Rapid(z=retract))
    return out


class Mach3PostProcessor(PostProcessor):
    name = "Mach3/Mach4"
    supports_canned_cycles = False
    supports_subroutines = False

    def expand(self, cycle: DrillCycle, x: float, y: float, feed: float) -> list[MotionInstruction]:
        feed = cycle.feed or feed
        if cycle.kind in (CycleKind.PECK, CycleKind.CHIP_BREAK) and cycle.peck:
            # No short-retract cycle here; chip breaking gets the full retract
            clearance = self.config.units.from_inch(defaults.PECK_CLEARANCE)
            return peck_long_form(x, y, cycle.retract, cycle.depth, cycle.peck,
                                  feed, clearance)
        if cycle.kind is CycleKind.DWELL and cycle.dwell:
            return dwell_long_form(x, y, cycle.retract, cycle.depth, cycle.dwell, feed)
        return simple_long_form(x, y, cycle.retract, cycle.depth, feed)

    def process(self, instructions: Iterable[MotionInstruction]) -> list[MotionInstruction]:
        out: list[MotionInstruction] = []
        last_x = last_y = 0.0
        last_feed = 0.0
        expanded = False

        for instr in instructions:
            if isinstance(instr, DrillCycle):
                out.extend(self.expand(instr, last_x, last_y, last_feed))
                if instr.feed:
                    last_feed = instr.feed
                expanded = True
                continue

            if isinstance(instr, CancelCycle) and expanded:
                expanded = False
                continue

            if isinstance(instr, (Rapid, Linear)):
                if instr.x is not None:
                    last_x = instr.x
                if instr.y is not None:
                    last_y = instr.y
            if isinstance(instr, Linear) and instr.feed is not None:
                last_feed = instr.feed

            out.append(instr)
        return out
