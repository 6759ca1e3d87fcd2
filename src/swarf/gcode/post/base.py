"""Post-processor interface shared by every controller dialect."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ...core.toolpath.base import MotionInstruction
from ...core.units import Units
from ..gcode_writer import number_lines


@dataclass
class PostProcessorConfig:
    """Settings that shape dialect headers and footers."""

    units: Units = Units.INCH
    program_number: Optional[int] = None
    program_name: str = ""


class PostProcessor:
    """Generic Fanuc-style output: instructions pass through unchanged.

    Subclasses override ``process`` to rewrite the instruction stream for
    their controller.  ``process`` never raises on an instruction it does
    not recognise; it passes it through.
    """

    name = "Generic Fanuc"
    supports_canned_cycles = True
    supports_subroutines = True
    comment_style = ";"

    def __init__(self, config: Optional[PostProcessorConfig] = None):
        self.config = config or PostProcessorConfig()

    def process(self, instructions: Iterable[MotionInstruction]) -> list[MotionInstruction]:
        return list(instructions)

    def get_lines(self, instructions: Iterable[MotionInstruction]) -> list[str]:
        """Process and render *instructions* as numbered G-code lines."""
        return number_lines(self.process(instructions), self.comment_style)

    def generate(self, instructions: Iterable[MotionInstruction], path: Path) -> None:
        """Write the processed program to *path*."""
        path = Path(path)
        path.write_text("\n".join(self.get_lines(instructions)) + "\n")
