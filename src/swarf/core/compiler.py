"""Compiler: ties program + machine + dialect together.

``Compiler`` is the top-level entry point: it runs the synthesizer over a
program in order and hands the finished instruction list to the selected
post-processor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from ..config.machine_profiles import MachineProfile, get_profile
from ..config.settings import CompilerSettings
from ..gcode.post import PostProcessorConfig, PostProcessorType, get_processor
from ..gcode.validate import ValidationResult, validate_instructions
from .context import CompilerContext
from .feeds import CuttingParameterResolver, ResolverError
from .feeds.materials import load_material_database, load_material_file
from .program import Operation, Program
from .toolpath.base import MotionInstruction
from .toolpath.synthesizer import ToolpathSynthesizer

logger = logging.getLogger(__name__)

# Returns a list of human-readable problems; empty means valid
Validator = Callable[[Sequence[Operation]], Sequence[object]]


class CompilationError(RuntimeError):
    """An operation's cutting parameters could not be resolved."""

    def __init__(self, index: int, operation: Operation, cause: ResolverError):
        super().__init__(
            f"operation {index} ({type(operation).__name__}): {cause}")
        self.index = index
        self.operation = operation
        self.cause = cause


class ProgramValidationError(ValueError):
    """The program was rejected before synthesis."""

    def __init__(self, errors: Sequence[object]):
        self.errors = list(errors)
        listing = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} validation error(s):\n{listing}")


@dataclass
class CompiledProgram:
    instructions: list[MotionInstruction]
    lines: list[str]
    validation: Optional[ValidationResult] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines) + "\n"

    def write(self, path: Path) -> None:
        Path(path).write_text(self.text)


@dataclass
class Compiler:
    """Compiles programs for one machine and dialect."""

    resolver: CuttingParameterResolver = field(default_factory=CuttingParameterResolver)
    post: PostProcessorType = PostProcessorType.GENERIC
    post_config: Optional[PostProcessorConfig] = None
    machine: Optional[MachineProfile] = None
    validator: Optional[Validator] = None

    @classmethod
    def from_settings(cls, settings: Optional[CompilerSettings] = None) -> Compiler:
        """Compiler for the user's default machine and dialect."""
        settings = settings or CompilerSettings.load()
        machine = get_profile(settings.machine)

        resolver = CuttingParameterResolver()
        if settings.material_file:
            materials = dict(load_material_database())
            for m in load_material_file(Path(settings.material_file)):
                materials[m.name] = m
            resolver = CuttingParameterResolver(load_material_database(list(materials.values())))

        return cls(
            resolver=resolver,
            post=settings.post or machine.post,
            post_config=PostProcessorConfig(
                units=settings.units, program_number=settings.program_number),
            machine=machine,
        )

    def synthesize(self, program: Program) -> list[MotionInstruction]:
        """Generic-dialect instructions for *program*.

        Raises
        ------
        ProgramValidationError:
            The validator rejected the program.
        CompilationError:
            Cutting parameters could not be resolved for an operation.
        """
        if self.validator is not None:
            errors = list(self.validator(program.operations))
            if errors:
                raise ProgramValidationError(errors)

        ctx = CompilerContext.from_header(
            program.header,
            max_rpm=self.machine.max_rpm if self.machine else None,
        )
        synth = ToolpathSynthesizer(self.resolver)

        instructions = synth.header(program.header, ctx)
        for i, op in enumerate(program.operations):
            try:
                instructions.extend(synth.synthesize(op, ctx))
            except ResolverError as exc:
                raise CompilationError(i, op, exc) from exc
        instructions.extend(synth.footer(program.footer, ctx))
        return instructions

    def compile(self, program: Program) -> CompiledProgram:
        instructions = self.synthesize(program)

        validation = None
        if self.machine is not None:
            validation = validate_instructions(
                instructions, self.machine.envelope, program.header.units)
            for issue in validation.issues:
                logger.warning("%s: %s", issue.severity, issue.message)

        config = self.post_config or PostProcessorConfig()
        if config.units is not program.header.units:
            config = PostProcessorConfig(
                units=program.header.units,
                program_number=config.program_number,
                program_name=config.program_name,
            )
        processor = get_processor(self.post, config)
        lines = processor.get_lines(instructions)

        logger.info(
            "compiled %d operations to %d %s lines",
            len(program.operations), len(lines), processor.name,
        )
        return CompiledProgram(instructions=instructions, lines=lines, validation=validation)


def compile_program(
    program: Program,
    post: PostProcessorType = PostProcessorType.GENERIC,
    *,
    resolver: Optional[CuttingParameterResolver] = None,
    machine: Optional[MachineProfile] = None,
    validator: Optional[Validator] = None,
) -> str:
    """Compile *program* to G-code text in the *post* dialect."""
    compiler = Compiler(
        resolver=resolver or CuttingParameterResolver(),
        post=post,
        machine=machine,
        validator=validator,
    )
    return compiler.compile(program).text
