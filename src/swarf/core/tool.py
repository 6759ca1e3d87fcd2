"""Cutting tool geometry as seen by the feeds-and-speeds engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class ToolMaterial(Enum):
    HSS = "hss"
    COBALT = "cobalt"
    CARBIDE = "carbide"
    COATED_CARBIDE = "coated_carbide"
    CERAMIC = "ceramic"
    CBN = "cbn"
    DIAMOND = "diamond"

    @property
    def is_hss_family(self) -> bool:
        return self in (ToolMaterial.HSS, ToolMaterial.COBALT)

    def __str__(self) -> str:
        return {
            ToolMaterial.HSS: "HSS",
            ToolMaterial.COBALT: "Cobalt",
            ToolMaterial.CARBIDE: "Carbide",
            ToolMaterial.COATED_CARBIDE: "Coated Carbide",
            ToolMaterial.CERAMIC: "Ceramic",
            ToolMaterial.CBN: "CBN",
            ToolMaterial.DIAMOND: "Diamond",
        }[self]


@dataclass(frozen=True)
class ToolGeometry:
    """A cutting tool definition.

    Dimensions are in the program's native units (inch or mm); the
    synthesizer converts to inches before asking for cutting parameters.
    """
    diameter: float
    flute_count: int = 2
    tool_material: ToolMaterial = ToolMaterial.CARBIDE
    corner_radius: Optional[float] = None
    coating: Optional[str] = None
    length: Optional[float] = None

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    def to_dict(self) -> dict:
        d = asdict(self)
        d["tool_material"] = self.tool_material.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> ToolGeometry:
        d = dict(d)
        d["tool_material"] = ToolMaterial(d["tool_material"])
        return cls(**d)
