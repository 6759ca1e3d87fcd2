"""Machine profiles: travel, spindle and feed limits plus the native dialect.

Travel limits are in inches.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..gcode.post import PostProcessorType
from ..gcode.validate import MachineEnvelope


@dataclass
class MachineProfile:
    """Specification for one mill model."""

    model: str
    x_travel: float   # inches
    y_travel: float
    z_travel: float
    min_rpm: int
    max_rpm: int
    max_feed_ipm: float
    spindle_hp: float
    post: PostProcessorType

    @property
    def envelope(self) -> MachineEnvelope:
        return MachineEnvelope(
            x_min=0.0, x_max=self.x_travel,
            y_min=0.0, y_max=self.y_travel,
            z_min=-self.z_travel, z_max=5.0,
            max_rpm=self.max_rpm,
            min_rpm=self.min_rpm,
            max_feed=self.max_feed_ipm,
        )

    def __str__(self) -> str:
        return (
            f"{self.model}  "
            f"X={self.x_travel}\" Y={self.y_travel}\" Z={self.z_travel}\"  "
            f"{self.min_rpm}-{self.max_rpm} RPM  "
            f"{self.max_feed_ipm} IPM  {self.spindle_hp} HP"
        )


class MachineModel(Enum):
    PCNC_440 = "PCNC 440"
    PCNC_770 = "PCNC 770"
    PCNC_1100 = "PCNC 1100"
    HAAS_VF2 = "Haas VF-2"
    MACH3_ROUTER = "Mach3 Router"


_PROFILES: dict[MachineModel, MachineProfile] = {
    MachineModel.PCNC_440: MachineProfile(
        model="Tormach PCNC 440",
        x_travel=10.0, y_travel=6.25, z_travel=10.0,
        min_rpm=100, max_rpm=10000,
        max_feed_ipm=110.0,
        spindle_hp=0.75,
        post=PostProcessorType.PATHPILOT,
    ),
    MachineModel.PCNC_770: MachineProfile(
        model="Tormach PCNC 770",
        x_travel=12.0, y_travel=8.0, z_travel=10.25,
        min_rpm=175, max_rpm=10000,
        max_feed_ipm=110.0,
        spindle_hp=1.5,
        post=PostProcessorType.PATHPILOT,
    ),
    MachineModel.PCNC_1100: MachineProfile(
        model="Tormach PCNC 1100",
        x_travel=18.0, y_travel=9.5, z_travel=16.25,
        min_rpm=175, max_rpm=10000,
        max_feed_ipm=135.0,
        spindle_hp=1.5,
        post=PostProcessorType.PATHPILOT,
    ),
    MachineModel.HAAS_VF2: MachineProfile(
        model="Haas VF-2",
        x_travel=30.0, y_travel=16.0, z_travel=20.0,
        min_rpm=1, max_rpm=8100,
        max_feed_ipm=650.0,
        spindle_hp=30.0,
        post=PostProcessorType.HAAS,
    ),
    MachineModel.MACH3_ROUTER: MachineProfile(
        model="Mach3 Router",
        x_travel=24.0, y_travel=24.0, z_travel=4.0,
        min_rpm=6000, max_rpm=24000,
        max_feed_ipm=200.0,
        spindle_hp=2.2,
        post=PostProcessorType.MACH3,
    ),
}


def get_profile(model: MachineModel) -> MachineProfile:
    return _PROFILES[model]


def list_profiles() -> list[MachineProfile]:
    return list(_PROFILES.values())
