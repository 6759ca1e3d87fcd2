from .calculations import (
    CuttingParameters,
    Engagement,
    OperationType,
    RecommendedParameters,
    apply_rpm_limit,
    chip_thinning_factor,
    compute_parameters,
    engagement_factor,
    lookup_chip_load,
    lookup_sfm,
    operation_parameters,
    speed_adjustment,
)
from .errors import InvalidEngagement, InvalidToolDiameter, ResolverError, UnknownMaterial
from .materials import (
    STANDARD_DIAMETERS,
    MaterialCategory,
    MaterialProperties,
    load_material_database,
    load_material_file,
)
from .resolver import CuttingParameterResolver

__all__ = [
    "STANDARD_DIAMETERS",
    "CuttingParameterResolver",
    "CuttingParameters",
    "Engagement",
    "InvalidEngagement",
    "InvalidToolDiameter",
    "MaterialCategory",
    "MaterialProperties",
    "OperationType",
    "RecommendedParameters",
    "ResolverError",
    "UnknownMaterial",
    "apply_rpm_limit",
    "chip_thinning_factor",
    "compute_parameters",
    "engagement_factor",
    "load_material_database",
    "load_material_file",
    "lookup_chip_load",
    "lookup_sfm",
    "operation_parameters",
    "speed_adjustment",
]
