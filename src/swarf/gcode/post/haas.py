"""Haas post-processor.

Haas controls run the standard canned cycles; the program only needs the
tape markers, an optional O number and a safety line.  Haas comments are
parenthesised.
"""

from __future__ import annotations

from typing import Iterable

from ...core.toolpath.base import Comment, MotionInstruction, RawCode
from .base import PostProcessor


class HaasPostProcessor(PostProcessor):
    name = "Haas"
    comment_style = "("

    def header(self) -> list[MotionInstruction]:
        out: list[MotionInstruction] = [RawCode("%", numbered=False)]
        if self.config.program_number is not None:
            out.append(RawCode(f"O{self.config.program_number:05d}", numbered=False))
        out.append(Comment(self.config.program_name or "HAAS CNC PROGRAM"))
        out.append(RawCode(
            f"{self.config.units.gcode_modal} G17 G40 G49 G80 G90 G94 G98"))
        return out

    def process(self, instructions: Iterable[MotionInstruction]) -> list[MotionInstruction]:
        return self.header() + list(instructions) + [RawCode("%", numbered=False)]
