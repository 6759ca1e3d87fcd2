"""Post-synthesis sanity checks.

Walks a synthesized instruction stream, tracking tool position and
spindle speed, and checks them against machine travel and limits before
anything is cut.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.program import SpindleDirection
from ..core.toolpath.base import (
    DrillCycle,
    Linear,
    MotionInstruction,
    Rapid,
    SpindleCommand,
    TapCycle,
)
from ..core.units import Units


@dataclass
class MachineEnvelope:
    """Axis travel and spindle/feed limits, in inches."""

    x_min: float = 0.0
    x_max: float = 18.0
    y_min: float = 0.0
    y_max: float = 9.5
    z_min: float = -16.25
    z_max: float = 5.0
    max_rpm: int = 10000
    min_rpm: int = 175
    max_feed: float = 135.0  # IPM


@dataclass
class ValidationIssue:
    """A single problem found in the instruction stream."""

    severity: str  # "error" or "warning"
    message: str
    index: Optional[int] = None   # position in the instruction list


@dataclass
class ValidationResult:
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)

    @property
    def is_ok(self) -> bool:
        return len(self.issues) == 0


def validate_instructions(
    instructions: Iterable[MotionInstruction],
    envelope: MachineEnvelope,
    units: Units = Units.INCH,
) -> ValidationResult:
    """Check *instructions* against *envelope*.

    Checks performed:
    - every programmed X/Y/Z (and drill/tap bottom) within travel
    - feed rates within machine maximum
    - spindle speeds within machine range
    - at least one cutting move
    """
    result = ValidationResult()
    cutting = False

    def axis(name: str, value: float, lo: float, hi: float, i: int) -> None:
        v = units.to_inch(value)
        if v < lo or v > hi:
            result.issues.append(ValidationIssue(
                "error", f"{name}={v:.4f} outside travel [{lo}, {hi}]", i))

    def feed(value: Optional[float], i: int) -> None:
        if value is not None and units.to_inch(value) > envelope.max_feed:
            result.issues.append(ValidationIssue(
                "warning",
                f"Feed {units.to_inch(value):.1f} exceeds machine max "
                f"({envelope.max_feed:.1f})",
                i,
            ))

    for i, instr in enumerate(instructions):
        if isinstance(instr, (Rapid, Linear)):
            if instr.x is not None:
                axis("X", instr.x, envelope.x_min, envelope.x_max, i)
            if instr.y is not None:
                axis("Y", instr.y, envelope.y_min, envelope.y_max, i)
            if instr.z is not None:
                axis("Z", instr.z, envelope.z_min, envelope.z_max, i)
            if isinstance(instr, Linear):
                cutting = True
                feed(instr.feed, i)

        elif isinstance(instr, (DrillCycle, TapCycle)):
            cutting = True
            axis("Z", -instr.depth, envelope.z_min, envelope.z_max, i)
            feed(instr.feed, i)

        elif isinstance(instr, SpindleCommand) and instr.direction is not SpindleDirection.OFF:
            if instr.rpm < envelope.min_rpm:
                result.issues.append(ValidationIssue(
                    "error",
                    f"RPM {instr.rpm} below machine minimum ({envelope.min_rpm})", i))
            if instr.rpm > envelope.max_rpm:
                result.issues.append(ValidationIssue(
                    "error",
                    f"RPM {instr.rpm} above machine maximum ({envelope.max_rpm})", i))

    if not cutting:
        result.issues.append(ValidationIssue(
            "warning", "No cutting moves, the program will not remove material"))

    return result
