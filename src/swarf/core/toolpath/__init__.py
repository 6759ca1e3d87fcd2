"""Toolpath generation package."""

from .base import (
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

__all__ = [
    "CancelCycle", "Comment", "CoolantCommand", "CycleKind", "DrillCycle",
    "Dwell", "Linear", "MotionInstruction", "Rapid", "RawCode",
    "SpindleCommand", "TapCycle", "ToolChange",
]
