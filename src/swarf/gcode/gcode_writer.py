"""Low-level G-code line formatting helpers."""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.program import SpindleDirection
from ..core.toolpath.base import (
    CancelCycle,
    Comment,
    CoolantCommand,
    CycleKind,
    DrillCycle,
    Dwell,
    Linear,
    MotionInstruction,
    Rapid,
    RawCode,
    SpindleCommand,
    TapCycle,
    ToolChange,
)

FIRST_LINE_NUMBER = 10
LINE_NUMBER_STEP = 10


def fmt(value: float, decimals: int = 4) -> str:
    """Fixed-point number for G-code."""
    return f"{value:.{decimals}f}"


def _axes(x: Optional[float], y: Optional[float], z: Optional[float]) -> list[str]:
    parts = []
    if x is not None:
        parts.append(f"X{fmt(x)}")
    if y is not None:
        parts.append(f"Y{fmt(y)}")
    if z is not None:
        parts.append(f"Z{fmt(z)}")
    return parts


def rapid(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
) -> str:
    """G00 rapid traverse."""
    return " ".join(["G00"] + _axes(x, y, z))


def linear(
    x: Optional[float] = None,
    y: Optional[float] = None,
    z: Optional[float] = None,
    f: Optional[float] = None,
) -> str:
    """G01 linear interpolation."""
    parts = ["G01"] + _axes(x, y, z)
    if f is not None:
        parts.append(f"F{fmt(f, 1)}")
    return " ".join(parts)


def drill_cycle(cycle: DrillCycle) -> str:
    parts = [cycle.kind.value, f"Z{fmt(-cycle.depth)}", f"R{fmt(cycle.retract)}"]
    if cycle.kind in (CycleKind.PECK, CycleKind.CHIP_BREAK) and cycle.peck:
        parts.append(f"Q{fmt(cycle.peck)}")
    if cycle.kind is CycleKind.DWELL and cycle.dwell:
        parts.append(f"P{fmt(cycle.dwell, 2)}")
    parts.append(f"F{fmt(cycle.feed, 1)}")
    return " ".join(parts)


def comment(text: str, style: str = ";") -> str:
    """Comment in *style*: ``;`` for line comments, ``(`` for parenthesised."""
    if style == "(":
        # Parenthesised comments cannot nest
        cleaned = text.replace("(", "").replace(")", "")
        return f"({cleaned})"
    return f"; {text}"


def render(instr: MotionInstruction) -> str:
    """G-code words for one non-comment instruction."""
    if isinstance(instr, Rapid):
        return rapid(instr.x, instr.y, instr.z)
    if isinstance(instr, Linear):
        return linear(instr.x, instr.y, instr.z, instr.feed)
    if isinstance(instr, DrillCycle):
        return drill_cycle(instr)
    if isinstance(instr, TapCycle):
        return (f"G84 Z{fmt(-instr.depth)} R{fmt(instr.retract)} "
                f"F{fmt(instr.feed, 2)}")
    if isinstance(instr, CancelCycle):
        return "G80"
    if isinstance(instr, Dwell):
        return f"G04 P{fmt(instr.seconds, 2)}"
    if isinstance(instr, ToolChange):
        return f"T{instr.tool_number} M06"
    if isinstance(instr, SpindleCommand):
        if instr.direction is SpindleDirection.OFF:
            return instr.direction.value
        return f"S{instr.rpm} {instr.direction.value}"
    if isinstance(instr, CoolantCommand):
        return instr.mode.value
    if isinstance(instr, RawCode):
        return instr.text
    raise TypeError(f"Cannot render {type(instr).__name__}")


def number_lines(
    instructions: Iterable[MotionInstruction],
    comment_style: str = ";",
    start: int = FIRST_LINE_NUMBER,
    step: int = LINE_NUMBER_STEP,
) -> list[str]:
    """Render *instructions* as ``N0010 ...`` lines.

    Comments and unnumbered raw lines do not consume a line number.
    """
    lines: list[str] = []
    n = start
    for instr in instructions:
        if isinstance(instr, Comment):
            lines.append(comment(instr.text, comment_style))
        elif isinstance(instr, RawCode) and not instr.numbered:
            lines.append(instr.text)
        else:
            lines.append(f"N{n:04d} {render(instr)}")
            n += step
    return lines
