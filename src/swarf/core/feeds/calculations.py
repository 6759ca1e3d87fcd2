"""Speeds-and-feeds formulas.

Everything here is a pure function of its arguments and works in inch
units (SFM, IPT, IPM).

Core relations
--------------
``rpm = 3.82 * sfm / diameter``
``feed = rpm * chip_load * flutes``
``mrr = woc * doc * feed``
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, replace
from enum import Enum

from ..tool import ToolGeometry, ToolMaterial
from .errors import InvalidEngagement, InvalidToolDiameter
from .materials import STANDARD_DIAMETERS, MaterialCategory, MaterialProperties, SfmTriple

SFM_CONSTANT = 3.82

# Unit horsepower (HP per cubic inch per minute) by category
_UNIT_HP: dict[MaterialCategory, float] = {
    MaterialCategory.STEEL_LOW_ALLOY: 1.0,
    MaterialCategory.STEEL_HIGH_ALLOY: 1.3,
    MaterialCategory.STAINLESS_AUSTENITIC: 1.0,
    MaterialCategory.STAINLESS_MARTENSITIC: 1.2,
    MaterialCategory.STAINLESS_PRECIPITATION: 1.1,
    MaterialCategory.CAST_IRON: 0.6,
    MaterialCategory.TITANIUM: 1.5,
    MaterialCategory.HIGH_TEMP_ALLOY: 2.0,
    MaterialCategory.PLASTIC: 0.1,
    MaterialCategory.COMPOSITE: 0.3,
}


@dataclass(frozen=True)
class Engagement:
    """How the tool meets the workpiece."""

    axial_doc: float               # Z depth of cut
    radial_woc: float              # XY width of cut
    radial_engagement_pct: float   # % of tool diameter, (0, 100]
    drilling: bool = False         # axial plunge; milling DOC limit does not apply


@dataclass(frozen=True)
class CuttingParameters:
    """Resolved cutting parameters.  Never mutated after construction."""

    rpm: int
    feed_rate: float               # IPM
    chip_load: float               # IPT actually programmed
    surface_speed: float           # SFM achieved at ``rpm``
    doc: float                     # recommended axial depth of cut
    woc: float                     # recommended radial width of cut
    horsepower: float
    material_removal_rate: float   # cubic inches per minute
    warnings: tuple[str, ...] = ()


class OperationType(Enum):
    ROUGHING = "roughing"
    FINISHING = "finishing"
    ADAPTIVE = "adaptive"   # high-efficiency milling


@dataclass(frozen=True)
class RecommendedParameters:
    rpm: int
    feed_rate: float
    doc: float
    woc: float
    description: str


def rpm_for(sfm: float, diameter: float) -> int:
    return int(round(SFM_CONSTANT * sfm / diameter))


def lookup_sfm(material: MaterialProperties, tool_material: ToolMaterial) -> SfmTriple:
    """(min, max, recommended) surface speed for *tool_material*."""
    if tool_material is ToolMaterial.HSS:
        return material.sfm_hss
    if tool_material is ToolMaterial.COBALT:
        return material.sfm_cobalt
    if tool_material is ToolMaterial.COATED_CARBIDE:
        return material.sfm_coated
    if tool_material in (ToolMaterial.CERAMIC, ToolMaterial.CBN):
        return material.sfm_ceramic or material.sfm_carbide
    # Carbide and diamond
    return material.sfm_carbide


def lookup_chip_load(
    material: MaterialProperties,
    diameter: float,
    tool_material: ToolMaterial,
) -> float:
    """Base chip load for *diameter*, interpolated between table sizes.

    Diameters outside the table use the nearest end entry.
    """
    table = (material.chip_loads_hss if tool_material.is_hss_family
             else material.chip_loads_carbide)

    hi = bisect.bisect_left(STANDARD_DIAMETERS, diameter)
    if hi == 0:
        return table[0]
    if hi == len(STANDARD_DIAMETERS):
        return table[-1]
    if STANDARD_DIAMETERS[hi] == diameter:
        return table[hi]

    lo = hi - 1
    d_lo, d_hi = STANDARD_DIAMETERS[lo], STANDARD_DIAMETERS[hi]
    pct = (diameter - d_lo) / (d_hi - d_lo)
    return table[lo] + (table[hi] - table[lo]) * pct


def engagement_factor(radial_engagement_pct: float) -> float:
    """Chip-thinning compensation for radial engagement.

    1.0 at 50 % or more, ``1/sqrt(ae)`` from 10 % up to 50 %, and a flat
    3.0 below 10 %.
    """
    if radial_engagement_pct >= 50.0:
        return 1.0
    if radial_engagement_pct >= 10.0:
        return 1.0 / math.sqrt(radial_engagement_pct / 100.0)
    return 3.0


def chip_thinning_factor(radial_engagement_pct: float) -> float:
    """Uncapped-below chip-thinning factor, clamped to [1.0, 3.5]."""
    ae = radial_engagement_pct / 100.0
    return min(max(1.0 / math.sqrt(ae), 1.0), 3.5)


def unit_horsepower(material: MaterialProperties) -> float:
    if material.category is MaterialCategory.NON_FERROUS:
        if "Aluminum" in material.name:
            return 0.25
        if "Brass" in material.name:
            return 0.5
        if "Copper" in material.name:
            return 0.8
        return 0.4
    return _UNIT_HP[material.category]


def speed_adjustment(tool_wear: float, category: MaterialCategory) -> float:
    """SFM multiplier for a worn tool (*tool_wear* 1.0 = new, 0.0 = worn out).

    Free-cutting materials tolerate a little more speed as the edge hones;
    heat-sensitive ones get slowed down instead.
    """
    worn = 1.0 - tool_wear
    if category in (MaterialCategory.TITANIUM,
                    MaterialCategory.HIGH_TEMP_ALLOY,
                    MaterialCategory.STAINLESS_AUSTENITIC):
        return 1.0 - worn * 0.15
    return 1.0 + worn * 0.1


def compute_parameters(
    material: MaterialProperties,
    tool: ToolGeometry,
    engagement: Engagement,
) -> CuttingParameters:
    """Full parameter set for *tool* cutting *material* at *engagement*.

    Raises
    ------
    InvalidToolDiameter:
        ``tool.diameter`` is not positive.
    InvalidEngagement:
        Radial engagement is outside (0, 100].
    """
    if tool.diameter <= 0:
        raise InvalidToolDiameter(tool.diameter)
    pct = engagement.radial_engagement_pct
    if pct <= 0 or pct > 100:
        raise InvalidEngagement(f"Radial engagement must be 0-100%, got {pct}")

    sfm_min, sfm_max, sfm_rec = lookup_sfm(material, tool.tool_material)
    base_chip = lookup_chip_load(material, tool.diameter, tool.tool_material)
    factor = engagement_factor(pct)
    chip = base_chip * factor

    # RPM is rounded before anything downstream uses it
    rpm = rpm_for(sfm_rec, tool.diameter)
    feed = rpm * chip * tool.flute_count
    actual_sfm = rpm * tool.diameter / SFM_CONSTANT

    mrr = engagement.radial_woc * engagement.axial_doc * feed
    hp = mrr * unit_horsepower(material)

    warnings: list[str] = []
    if chip > base_chip * 3.0:
        warnings.append(
            f"High engagement factor ({factor:.2f}). Ensure tool can handle "
            f"chip load of {chip:.4f} IPT"
        )

    max_doc = tool.diameter * material.max_doc_ratio
    if not engagement.drilling and engagement.axial_doc > max_doc:
        warnings.append(
            f"DOC {engagement.axial_doc:.3f}\" exceeds recommended maximum "
            f"{max_doc:.3f}\" for {material.name} in {tool.tool_material}"
        )

    nominal_feed = rpm * base_chip * tool.flute_count
    if material.work_hardens and feed < nominal_feed * 0.5:
        warnings.append(
            f"{material.name} work hardens. Consider increasing feed to "
            f"{nominal_feed:.1f} IPM to stay ahead of hardening front"
        )

    if material.coolant_required:
        warnings.append(
            f"{material.name} requires flood coolant for optimal tool life"
        )

    if actual_sfm < sfm_min:
        warnings.append(
            f"SFM {actual_sfm:.0f} is below minimum {sfm_min:.0f} for {material.name}"
        )
    elif actual_sfm > sfm_max:
        warnings.append(
            f"SFM {actual_sfm:.0f} exceeds maximum {sfm_max:.0f} for "
            f"{material.name} - may cause rapid tool wear"
        )

    return CuttingParameters(
        rpm=rpm,
        feed_rate=feed,
        chip_load=chip,
        surface_speed=actual_sfm,
        doc=max_doc,
        woc=tool.diameter * material.recommended_engagement / 100.0,
        horsepower=hp,
        material_removal_rate=mrr,
        warnings=tuple(warnings),
    )


def apply_rpm_limit(params: CuttingParameters, max_rpm: int) -> CuttingParameters:
    """Clamp spindle speed to *max_rpm*, scaling feed to hold chip load.

    Returns *params* unchanged when already within the limit.
    """
    if max_rpm <= 0 or params.rpm <= max_rpm:
        return params

    k = max_rpm / params.rpm
    return replace(
        params,
        rpm=int(max_rpm),
        feed_rate=params.feed_rate * k,
        surface_speed=params.surface_speed * k,
        material_removal_rate=params.material_removal_rate * k,
        horsepower=params.horsepower * k,
        warnings=params.warnings + (
            f"RPM limited to {int(max_rpm)}; feed scaled by {k:.3f}",
        ),
    )


def operation_parameters(
    material: MaterialProperties,
    tool: ToolGeometry,
    operation: OperationType,
) -> RecommendedParameters:
    """Preset parameters for roughing, finishing or adaptive clearing."""
    sfm_min, sfm_max, _ = lookup_sfm(material, tool.tool_material)
    base_chip = lookup_chip_load(material, tool.diameter, tool.tool_material)

    if operation is OperationType.ROUGHING:
        rpm = rpm_for(sfm_min + (sfm_max - sfm_min) * 0.6, tool.diameter)
        return RecommendedParameters(
            rpm=rpm,
            feed_rate=rpm * base_chip * 1.2 * tool.flute_count,
            doc=tool.diameter * material.max_doc_ratio,
            woc=tool.diameter * material.recommended_engagement / 100.0,
            description="Roughing - maximize MRR",
        )

    if operation is OperationType.FINISHING:
        rpm = rpm_for(sfm_max * 0.9, tool.diameter)
        return RecommendedParameters(
            rpm=rpm,
            feed_rate=rpm * base_chip * 0.5 * tool.flute_count,
            doc=tool.diameter * 0.1,
            woc=tool.diameter * 0.05,
            description="Finishing - maximize surface quality",
        )

    rpm = rpm_for(sfm_max * 0.85, tool.diameter)
    return RecommendedParameters(
        rpm=rpm,
        feed_rate=rpm * base_chip * engagement_factor(10.0) * tool.flute_count,
        doc=tool.diameter * 1.5,
        woc=tool.diameter * 0.10,
        description="Adaptive/HEM - chip thinning strategy",
    )
