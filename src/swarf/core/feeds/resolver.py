"""Material-table front end for the speeds-and-feeds engine."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..tool import ToolGeometry, ToolMaterial
from .calculations import (
    CuttingParameters,
    Engagement,
    compute_parameters,
    lookup_chip_load,
    lookup_sfm,
)
from .errors import UnknownMaterial
from .materials import MaterialCategory, MaterialProperties, load_material_database

logger = logging.getLogger(__name__)


class CuttingParameterResolver:
    """Resolves cutting parameters against a read-only material table.

    The table is fixed at construction, so one resolver can be shared by
    any number of compilations.
    """

    def __init__(self, materials: Optional[Mapping[str, MaterialProperties]] = None):
        self._materials = materials if materials is not None else load_material_database()

    def material(self, material_id: str) -> MaterialProperties:
        """Look up by table name, falling back to grade designations
        (``"6061-T6"`` finds ``"Aluminum 6061-T6"``)."""
        found = self._materials.get(material_id)
        if found is not None:
            return found
        for m in self._materials.values():
            if material_id in m.grades:
                return m
        raise UnknownMaterial(material_id)

    def resolve(
        self,
        material_id: str,
        tool: ToolGeometry,
        engagement: Engagement,
    ) -> CuttingParameters:
        """Compute cutting parameters for *tool* in *material_id*.

        Raises
        ------
        UnknownMaterial, InvalidToolDiameter, InvalidEngagement
        """
        params = compute_parameters(self.material(material_id), tool, engagement)
        logger.debug(
            "%s / %.4f\" %d-flute %s: %d RPM, %.1f IPM",
            material_id, tool.diameter, tool.flute_count, tool.tool_material,
            params.rpm, params.feed_rate,
        )
        return params

    def chip_load(
        self,
        material_id: str,
        diameter: float,
        tool_material: ToolMaterial,
    ) -> float:
        return lookup_chip_load(self.material(material_id), diameter, tool_material)

    def sfm_range(self, material_id: str, tool_material: ToolMaterial) -> tuple[float, float]:
        sfm_min, sfm_max, _ = lookup_sfm(self.material(material_id), tool_material)
        return sfm_min, sfm_max

    def materials(self) -> list[str]:
        return sorted(self._materials)

    def materials_by_category(self, category: MaterialCategory) -> list[MaterialProperties]:
        return [m for m in self._materials.values() if m.category is category]

    def __contains__(self, material_id: str) -> bool:
        try:
            self.material(material_id)
        except UnknownMaterial:
            return False
        return True
