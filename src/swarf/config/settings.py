"""Compiler preferences (persisted to disk)."""

from __future__ import annotations

import json
import warnings
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from ..core.units import Units
from ..gcode.post import PostProcessorType
from .machine_profiles import MachineModel


@dataclass
class CompilerSettings:
    """User preferences, serialized to ~/.swarf/settings.json."""

    default_machine: str = MachineModel.PCNC_770.value
    default_post: str = ""              # empty → the machine's own dialect
    default_units: str = Units.INCH.value
    material_file: str = ""             # extra materials, JSON list
    program_number: Optional[int] = None

    @property
    def machine(self) -> MachineModel:
        return MachineModel(self.default_machine)

    @property
    def post(self) -> Optional[PostProcessorType]:
        return PostProcessorType(self.default_post) if self.default_post else None

    @property
    def units(self) -> Units:
        return Units(self.default_units)

    @staticmethod
    def _path() -> Path:
        return Path.home() / ".swarf" / "settings.json"

    def save(self) -> None:
        p = self._path()
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(asdict(self), indent=2))

    @classmethod
    def load(cls) -> CompilerSettings:
        p = cls._path()
        if not p.exists():
            return cls()
        try:
            data = json.loads(p.read_text())
        except (OSError, json.JSONDecodeError) as exc:
            warnings.warn(f"Ignoring unreadable settings file {p}: {exc}")
            return cls()
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
