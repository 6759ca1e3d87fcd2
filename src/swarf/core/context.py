"""Per-compilation machine state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..config import defaults
from .program import CoolantMode, Header, SpindleDirection, StockDef
from .tool import ToolGeometry
from .units import Units


@dataclass
class StockEnvelope:
    """Rectangular stock blank.

    Z=0 is the **top** of the stock; negative Z goes down into the
    material.  The lower-left corner sits at the work origin unless
    ``x_origin``/``y_origin`` say otherwise.
    """

    x_size: float
    y_size: float
    z_size: float
    x_origin: float = 0.0
    y_origin: float = 0.0

    @property
    def bounds_2d(self) -> tuple[float, float, float, float]:
        """(xmin, ymin, xmax, ymax) of the stock footprint."""
        return (self.x_origin, self.y_origin,
                self.x_origin + self.x_size, self.y_origin + self.y_size)

    @classmethod
    def from_stock_def(cls, stock: StockDef) -> StockEnvelope:
        return cls(x_size=stock.size_x, y_size=stock.size_y, z_size=stock.size_z)


@dataclass
class CompilerContext:
    """Mutable state threaded through one compilation.

    Operations read and update this in program order: tool changes set the
    tool, part definitions set material and stock, spindle commands set the
    running speed.
    """

    units: Units = Units.INCH
    tool: Optional[ToolGeometry] = None
    tool_number: Optional[int] = None
    material: Optional[str] = None
    stock: Optional[StockEnvelope] = None
    max_rpm: Optional[int] = None
    spindle_rpm: int = 0
    spindle_direction: SpindleDirection = SpindleDirection.OFF
    spindle_programmed: bool = False   # speed came from a Spindle operation
    coolant: CoolantMode = CoolantMode.OFF
    coolant_active: bool = False
    clearance_z: float = defaults.CLEARANCE_Z
    z_floor: Optional[float] = None

    @classmethod
    def from_header(cls, header: Header, max_rpm: Optional[int] = None) -> CompilerContext:
        """Context for a program with *header*.

        *max_rpm* is the machine limit; the tighter of it and the header's
        safety limit wins.
        """
        limits = [r for r in (max_rpm, header.safety.max_spindle_rpm) if r]
        return cls(
            units=header.units,
            max_rpm=int(min(limits)) if limits else None,
            coolant=header.safety.coolant,
            clearance_z=header.units.from_inch(defaults.CLEARANCE_Z),
        )

    def inch(self, value: float) -> float:
        return self.units.to_inch(value)

    def native(self, inches: float) -> float:
        """Convert an inch constant to program units."""
        return self.units.from_inch(inches)
