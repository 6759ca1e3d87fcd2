"""Controller dialects.

The dialect set is closed: pick one with ``get_processor``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import PostProcessor, PostProcessorConfig
from .haas import HaasPostProcessor
from .linuxcnc import LinuxCncPostProcessor
from .mach3 import Mach3PostProcessor
from .pathpilot import PathPilotPostProcessor


class PostProcessorType(Enum):
    GENERIC = "generic"
    MACH3 = "mach3"
    LINUXCNC = "linuxcnc"
    HAAS = "haas"
    PATHPILOT = "pathpilot"


_PROCESSORS: dict[PostProcessorType, type[PostProcessor]] = {
    PostProcessorType.GENERIC: PostProcessor,
    PostProcessorType.MACH3: Mach3PostProcessor,
    PostProcessorType.LINUXCNC: LinuxCncPostProcessor,
    PostProcessorType.HAAS: HaasPostProcessor,
    PostProcessorType.PATHPILOT: PathPilotPostProcessor,
}


def get_processor(
    kind: PostProcessorType,
    config: Optional[PostProcessorConfig] = None,
) -> PostProcessor:
    return _PROCESSORS[kind](config)


__all__ = [
    "HaasPostProcessor",
    "LinuxCncPostProcessor",
    "Mach3PostProcessor",
    "PathPilotPostProcessor",
    "PostProcessor",
    "PostProcessorConfig",
    "PostProcessorType",
    "get_processor",
]
