"""Tormach PathPilot post-processor.

PathPilot differences from generic output:
- G30 (not G28) is the tool-change and end-of-program position
- G64 path blending is switched on in the preamble
- comments are parenthesised
"""

from __future__ import annotations

from typing import Iterable

from ...core.toolpath.base import Comment, MotionInstruction, RawCode, ToolChange
from .base import PostProcessor

_END_CODES = ("M30", "M02", "M2")


class PathPilotPostProcessor(PostProcessor):
    name = "Tormach PathPilot"
    comment_style = "("

    def preamble(self) -> list[MotionInstruction]:
        return [
            RawCode("%", numbered=False),
            Comment(self.config.program_name or "swarf program"),
            RawCode(f"G17 {self.config.units.gcode_modal} G40 G49 G54 G80 G90 G94"),
            RawCode("G64"),
        ]

    def process(self, instructions: Iterable[MotionInstruction]) -> list[MotionInstruction]:
        out = self.preamble()
        for instr in instructions:
            if isinstance(instr, ToolChange) or (
                isinstance(instr, RawCode) and instr.text.strip() in _END_CODES
            ):
                out.append(RawCode("G30"))
            out.append(instr)
        out.append(RawCode("%", numbered=False))
        return out
