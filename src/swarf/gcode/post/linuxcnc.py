"""LinuxCNC post-processor: Fanuc-compatible, so only a modal header is added."""

from __future__ import annotations

from typing import Iterable

from ...core.toolpath.base import Comment, MotionInstruction, RawCode
from .base import PostProcessor


class LinuxCncPostProcessor(PostProcessor):
    name = "LinuxCNC"

    def header(self) -> list[MotionInstruction]:
        return [
            Comment("LinuxCNC compatible output"),
            RawCode(self.config.units.gcode_modal),
            RawCode("G17"),
            RawCode("G40"),
            RawCode("G49"),
            RawCode("G80"),
            RawCode("G90"),
            RawCode("G94"),
        ]

    def process(self, instructions: Iterable[MotionInstruction]) -> list[MotionInstruction]:
        return self.header() + list(instructions)
