"""Part-program data model.

A ``Program`` is what the parser hands to the compiler: a header, an
ordered list of operations and a footer.  Operations are plain
dataclasses; the synthesizer dispatches on their type.

Coordinates follow the usual mill convention: Z=0 is the top of stock and
depths are given as positive distances below it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from shapely import affinity
from shapely.geometry import LineString, Point, Polygon, box

from .tool import ToolGeometry
from .units import Units


# ---------------------------------------------------------------------------
# Header / footer
# ---------------------------------------------------------------------------


class WorkOffset(Enum):
    G54 = "G54"
    G55 = "G55"
    G56 = "G56"
    G57 = "G57"
    G58 = "G58"
    G59 = "G59"


class CoolantMode(Enum):
    OFF = "M09"
    FLOOD = "M08"
    MIST = "M07"
    THROUGH = "M51"   # high-pressure through-spindle


@dataclass
class SafetyConfig:
    max_spindle_rpm: Optional[int] = None
    coolant: CoolantMode = CoolantMode.OFF


@dataclass
class Header:
    units: Units = Units.INCH
    work_offset: WorkOffset = WorkOffset.G54
    safety: SafetyConfig = field(default_factory=SafetyConfig)


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass
class Footer:
    return_to: Position = Position(0.0, 0.0)
    end_code: str = "M30"


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle anchored at its lower-left corner."""
    x: float
    y: float
    width: float
    height: float
    corner_radius: Optional[float] = None
    rotation: float = 0.0     # degrees about the lower-left corner

    def to_shapely(self) -> Polygon:
        poly = box(self.x, self.y, self.x + self.width, self.y + self.height)
        if self.rotation:
            poly = affinity.rotate(poly, self.rotation, origin=(self.x, self.y))
        return poly


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    diameter: float

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    def to_shapely(self) -> Polygon:
        return Point(self.cx, self.cy).buffer(self.radius, quad_segs=16)


@dataclass(frozen=True)
class RegularPolygon:
    cx: float
    cy: float
    circumradius: float
    sides: int
    rotation: float = 0.0     # degrees

    def to_shapely(self) -> Polygon:
        start = math.radians(self.rotation)
        step = 2.0 * math.pi / self.sides
        return Polygon([
            (self.cx + self.circumradius * math.cos(start + i * step),
             self.cy + self.circumradius * math.sin(start + i * step))
            for i in range(self.sides)
        ])


@dataclass(frozen=True)
class Path:
    """Open polyline."""
    points: tuple[Position, ...]

    def to_shapely(self) -> LineString:
        return LineString([(p.x, p.y) for p in self.points])


Geometry = Union[Rect, Circle, RegularPolygon, Path]


class CutSide(Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"
    ON = "on"


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


@dataclass
class ToolChange:
    tool_number: int
    tool: Optional[ToolGeometry] = None


class SpindleDirection(Enum):
    CW = "M03"
    CCW = "M04"
    OFF = "M05"


@dataclass
class Spindle:
    direction: SpindleDirection
    rpm: float = 0.0


@dataclass
class Drill:
    """Drill one or more holes with a canned cycle.

    ``depth`` of None means a through hole when ``through`` is set.  A
    ``feed`` of None asks the resolver for one.
    """
    positions: list[Position]
    depth: Optional[float] = None
    through: bool = False
    peck_depth: Optional[float] = None
    retract: Optional[float] = None
    feed: Optional[float] = None
    dwell: Optional[float] = None
    chip_break: bool = False
    hole_diameter: Optional[float] = None


@dataclass
class Pocket:
    geometry: Geometry
    depth: float
    stepdown: Optional[float] = None
    stepover: Optional[float] = None       # fraction of tool diameter
    feed: Optional[float] = None
    plunge_feed: Optional[float] = None
    finish_allowance: Optional[float] = None


@dataclass
class Profile:
    geometry: Geometry
    depth: float
    side: CutSide = CutSide.OUTSIDE
    stock_to_leave: float = 0.0
    stepdown: Optional[float] = None
    feed: Optional[float] = None
    plunge_feed: Optional[float] = None


@dataclass
class Face:
    depth: float
    bounds: Optional[Rect] = None          # None → stock envelope
    stepover: Optional[float] = None       # fraction of tool diameter
    feed: Optional[float] = None


@dataclass
class Tap:
    positions: list[Position]
    depth: float
    pitch: float                           # distance per revolution
    retract: Optional[float] = None


@dataclass
class CommentOp:
    text: str


@dataclass
class StockDef:
    material: str
    size_x: float
    size_y: float
    size_z: float


@dataclass
class PartDef:
    name: str
    stock: Optional[StockDef] = None


@dataclass
class Setup:
    zero: str = ""                         # e.g. "X left, Y front, Z top"
    z_min: Optional[float] = None
    y_limit: Optional[float] = None


class Direction(Enum):
    X_POSITIVE = "X+"
    X_NEGATIVE = "X-"
    Y_POSITIVE = "Y+"
    Y_NEGATIVE = "Y-"
    Z_POSITIVE = "Z+"
    Z_NEGATIVE = "Z-"


@dataclass
class Cut:
    direction: Direction
    sweep: float
    depth: float
    height: float


@dataclass
class Clear:
    direction: Direction
    sweep: float
    depth: float
    height: float


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------


@dataclass
class GridPattern:
    rows: int
    cols: int
    spacing_x: float
    spacing_y: float
    origin: Position = Position(0.0, 0.0)


@dataclass
class BoltCirclePattern:
    count: int
    diameter: float
    center: Position = Position(0.0, 0.0)
    start_angle: float = 0.0               # degrees


@dataclass
class LinePattern:
    count: int
    spacing: float
    angle: float = 0.0                     # degrees, 0 = +X
    origin: Position = Position(0.0, 0.0)


@dataclass
class ArcPattern:
    count: int
    radius: float
    start_angle: float
    end_angle: float
    center: Position = Position(0.0, 0.0)


Pattern = Union[GridPattern, BoltCirclePattern, LinePattern, ArcPattern]


@dataclass
class Patterned:
    """A drill or pocket repeated at every position of *pattern*.

    The base operation is laid out relative to the origin and shifted to
    each pattern position in turn.
    """
    operation: Union[Drill, Pocket]
    pattern: Pattern


Operation = Union[
    ToolChange, Spindle, Drill, Pocket, Profile, Face, Tap, CommentOp,
    PartDef, Setup, Cut, Clear, Patterned,
]


@dataclass
class Program:
    header: Header = field(default_factory=Header)
    operations: list[Operation] = field(default_factory=list)
    footer: Footer = field(default_factory=Footer)
