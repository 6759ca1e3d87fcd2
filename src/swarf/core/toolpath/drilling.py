"""Canned-cycle drilling and tapping."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from .base import (
    CancelCycle,
    CycleKind,
    DrillCycle,
    MotionInstruction,
    Rapid,
    TapCycle,
)


def choose_cycle(
    depth: float,
    retract: float,
    feed: float,
    diameter: float,
    peck: Optional[float] = None,
    dwell: Optional[float] = None,
    chip_break: bool = False,
    peck_ratio: float = 3.0,
    peck_factor: float = 1.5,
) -> DrillCycle:
    """Pick the drill cycle for a hole.

    Explicit requests win: chip-breaking, then a given peck depth, then a
    dwell.  Otherwise holes deeper than *peck_ratio* diameters are pecked
    at ``peck_factor * diameter`` and the rest drilled straight through.
    """
    default_peck = diameter * peck_factor

    if chip_break:
        return DrillCycle(CycleKind.CHIP_BREAK, depth, retract, feed,
                          peck=peck or default_peck)
    if peck is not None:
        return DrillCycle(CycleKind.PECK, depth, retract, feed, peck=peck)
    if dwell:
        return DrillCycle(CycleKind.DWELL, depth, retract, feed, dwell=dwell)
    if diameter > 0 and depth / diameter > peck_ratio:
        return DrillCycle(CycleKind.PECK, depth, retract, feed, peck=default_peck)
    return DrillCycle(CycleKind.SIMPLE, depth, retract, feed)


def cycle_at_positions(
    cycle: DrillCycle | TapCycle,
    positions: Iterable[tuple[float, float]],
) -> list[MotionInstruction]:
    """Repeat *cycle* over *positions*, then cancel and retract to R."""
    out: list[MotionInstruction] = [Rapid(z=cycle.retract)]
    for x, y in positions:
        out.append(Rapid(x=x, y=y))
        out.append(replace(cycle))
    out.append(CancelCycle())
    out.append(Rapid(z=cycle.retract))
    return out


def tap_cycle(depth: float, retract: float, pitch: float, rpm: int) -> TapCycle:
    """Rigid tap cycle; feed is locked to spindle speed by the thread pitch."""
    return TapCycle(depth=depth, retract=retract, feed=rpm * pitch, pitch=pitch)
