"""Advisory checks on resolved cutting parameters.

None of these raise; they return lists of issues for the caller to show
or act on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..tool import ToolGeometry, ToolMaterial
from .calculations import SFM_CONSTANT, CuttingParameters
from .materials import MaterialCategory, MaterialProperties

# Rubbing threshold, inches per tooth
MIN_CHIP_LOAD = 0.0005

# Taylor constant C for VT^n = C, by tool material
_TAYLOR_C: dict[ToolMaterial, float] = {
    ToolMaterial.HSS: 80.0,
    ToolMaterial.COBALT: 120.0,
    ToolMaterial.CARBIDE: 400.0,
    ToolMaterial.COATED_CARBIDE: 600.0,
    ToolMaterial.CERAMIC: 2000.0,
    ToolMaterial.CBN: 3000.0,
    ToolMaterial.DIAMOND: 5000.0,
}
_TAYLOR_N = 0.25


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ParameterIssue:
    severity: Severity
    code: str
    message: str
    suggestion: Optional[str] = None


@dataclass
class ToolLifeEstimate:
    minutes: float
    confidence: float          # 0.0 to 1.0
    factors: list[str] = field(default_factory=list)


def max_rpm_for_diameter(diameter: float) -> int:
    """Balance-limited spindle speed for a tool of *diameter* inches."""
    for limit, rpm in ((0.0625, 40000), (0.125, 30000), (0.25, 20000),
                       (0.375, 15000), (0.5, 12000), (0.75, 8000),
                       (1.0, 6000)):
        if diameter <= limit:
            return rpm
    return 4000


def validate_parameters(
    params: CuttingParameters,
    material: MaterialProperties,
    tool: ToolGeometry,
) -> list[ParameterIssue]:
    """Check *params* against tool and material rules of thumb."""
    issues: list[ParameterIssue] = []
    d = tool.diameter

    max_rpm = max_rpm_for_diameter(d)
    if params.rpm > max_rpm:
        issues.append(ParameterIssue(
            Severity.ERROR, "RPM_TOO_HIGH",
            f"RPM {params.rpm} exceeds maximum {max_rpm} for {d}\" tool. "
            "Risk of tool failure.",
            f"Reduce SFM to {max_rpm * d / SFM_CONSTANT:.0f} or use smaller tool",
        ))

    if params.chip_load > d * 0.05:
        issues.append(ParameterIssue(
            Severity.WARNING, "CHIP_LOAD_HIGH",
            f"Chip load {params.chip_load:.4f}\" is aggressive for {d}\" tool",
            "Reduce feed or increase RPM",
        ))

    if params.chip_load < MIN_CHIP_LOAD and params.feed_rate > 0:
        issues.append(ParameterIssue(
            Severity.WARNING, "POSSIBLE_RUBBING",
            f"Chip load {params.chip_load:.4f}\" may cause rubbing and work hardening",
            "Increase feed rate or reduce RPM",
        ))

    # Without a stickout from the tool we assume 3xD
    stickout = tool.length if tool.length else d * 3.0
    ld_ratio = stickout / d
    if ld_ratio > 4.0 and params.doc > d * 0.5:
        issues.append(ParameterIssue(
            Severity.WARNING, "TOOL_DEFLECTION",
            f"L/D ratio {ld_ratio:.1f} with DOC {params.doc:.3f}\" may cause "
            "tool deflection",
            "Reduce DOC or use shorter tool",
        ))

    if material.category is MaterialCategory.STAINLESS_AUSTENITIC:
        if params.feed_rate < d * 20.0:
            issues.append(ParameterIssue(
                Severity.ERROR, "WORK_HARDENING_RISK",
                "Low feed rate may cause work hardening in austenitic stainless",
                f"Increase feed to at least {d * 30.0:.1f} IPM to stay ahead "
                "of hardening front",
            ))
    elif material.category is MaterialCategory.TITANIUM:
        if params.surface_speed > 150.0:
            issues.append(ParameterIssue(
                Severity.WARNING, "TITANIUM_HEAT",
                "High SFM generates excessive heat in titanium",
                "Reduce SFM below 150, ensure flood coolant",
            ))
    elif material.category is MaterialCategory.HIGH_TEMP_ALLOY:
        if params.doc > d * 0.2:
            issues.append(ParameterIssue(
                Severity.WARNING, "NICKEL_ALLOY_DOC",
                "Deep cuts cause rapid tool wear in nickel alloys",
                "Use multiple shallow passes",
            ))

    if material.coolant_required:
        issues.append(ParameterIssue(
            Severity.INFO, "COOLANT_RECOMMENDED",
            f"{material.name} performs best with flood coolant",
        ))

    return issues


def check_safety_limits(
    params: CuttingParameters,
    max_rpm: int,
    max_feed: float,
    max_hp: float,
) -> list[ParameterIssue]:
    """Compare *params* with what the machine can actually deliver."""
    issues: list[ParameterIssue] = []

    if params.rpm > max_rpm:
        issues.append(ParameterIssue(
            Severity.ERROR, "MACHINE_RPM_EXCEEDED",
            f"Required RPM {params.rpm} exceeds machine maximum {max_rpm}",
            "Use larger tool or different material strategy",
        ))
    if params.feed_rate > max_feed:
        issues.append(ParameterIssue(
            Severity.ERROR, "MACHINE_FEED_EXCEEDED",
            f"Required feed {params.feed_rate:.1f} IPM exceeds machine maximum "
            f"{max_feed:.1f} IPM",
            "Reduce feed or use different tool/flute count",
        ))
    if params.horsepower > max_hp:
        issues.append(ParameterIssue(
            Severity.WARNING, "MACHINE_HP_LIMIT",
            f"Operation requires {params.horsepower:.2f} HP, machine rated for "
            f"{max_hp:.2f} HP",
            "Reduce DOC/WOC or take lighter passes",
        ))

    return issues


def estimate_tool_life(
    material: MaterialProperties,
    sfm: float,
    chip_load: float,
    tool_material: ToolMaterial,
) -> ToolLifeEstimate:
    """Rough tool life from Taylor's equation ``V * T**n = C``.

    C is scaled by the material's machinability and the result is derated
    for heavy chip loads.
    """
    if sfm <= 0:
        raise ValueError("sfm must be positive")

    c = _TAYLOR_C[tool_material] * (material.machinability / 100.0)
    minutes = (c / sfm) ** (1.0 / _TAYLOR_N)
    minutes *= 1.0 / (1.0 + (chip_load / 0.01) * 0.1)

    return ToolLifeEstimate(
        minutes=minutes,
        confidence=0.8 if sfm < 200.0 else 0.6,
        factors=[
            f"SFM: {sfm:.0f}",
            f"Material machinability: {material.machinability:.0f}%",
        ],
    )
