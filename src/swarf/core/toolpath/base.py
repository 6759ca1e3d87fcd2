"""Motion instructions: the generic dialect every post-processor starts from.

A synthesized program is a flat list of these, in execution order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from ..program import CoolantMode, SpindleDirection


class CycleKind(Enum):
    """Canned drilling cycle."""
    SIMPLE = "G81"
    DWELL = "G82"         # dwell at the bottom
    PECK = "G83"          # full-retract peck
    CHIP_BREAK = "G73"    # short-retract peck


@dataclass
class Rapid:
    """G00 rapid traverse; omitted axes stay put."""
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None


@dataclass
class Linear:
    """G01 feed move."""
    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    feed: Optional[float] = None


@dataclass
class DrillCycle:
    """Canned drill cycle at the current XY.

    ``depth`` is measured down from Z0 and is always positive; ``retract``
    is the R plane.
    """
    kind: CycleKind
    depth: float
    retract: float
    feed: float
    peck: Optional[float] = None
    dwell: Optional[float] = None


@dataclass
class TapCycle:
    depth: float
    retract: float
    feed: float
    pitch: float


@dataclass
class CancelCycle:
    pass


@dataclass
class Dwell:
    seconds: float


@dataclass
class ToolChange:
    tool_number: int


@dataclass
class Comment:
    text: str


@dataclass
class SpindleCommand:
    direction: SpindleDirection
    rpm: int = 0


@dataclass
class CoolantCommand:
    mode: CoolantMode


@dataclass
class RawCode:
    """Verbatim text for codes with no structured form.

    Unnumbered raw lines (``%`` tape markers, blank lines) are written
    without an N word.
    """
    text: str
    numbered: bool = True


MotionInstruction = Union[
    Rapid, Linear, DrillCycle, TapCycle, CancelCycle, Dwell, ToolChange,
    Comment, SpindleCommand, CoolantCommand, RawCode,
]
