"""Workpiece material table.

Surface speeds and chip loads are starting points compiled from Harvey Tool
general machining guidelines and Machinery's Handbook.  All values are in
inch units: SFM for surface speed, IPT for chip load.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

# Chip-load tables are indexed by these tool diameters (inches)
STANDARD_DIAMETERS: tuple[float, ...] = (
    0.125, 0.1875, 0.25, 0.375, 0.5, 0.625, 0.75, 1.0,
)

SfmTriple = tuple[float, float, float]   # (min, max, recommended)


class MaterialCategory(Enum):
    NON_FERROUS = "non_ferrous"
    STEEL_LOW_ALLOY = "steel_low_alloy"
    STEEL_HIGH_ALLOY = "steel_high_alloy"
    STAINLESS_AUSTENITIC = "stainless_austenitic"
    STAINLESS_MARTENSITIC = "stainless_martensitic"
    STAINLESS_PRECIPITATION = "stainless_precipitation"
    CAST_IRON = "cast_iron"
    TITANIUM = "titanium"
    HIGH_TEMP_ALLOY = "high_temp_alloy"
    PLASTIC = "plastic"
    COMPOSITE = "composite"


@dataclass(frozen=True)
class MaterialProperties:
    """Cutting data for one workpiece material."""

    name: str
    category: MaterialCategory
    machinability: float            # % relative to 1212 steel
    sfm_hss: SfmTriple
    sfm_cobalt: SfmTriple
    sfm_carbide: SfmTriple
    sfm_coated: SfmTriple
    chip_loads_carbide: tuple[float, ...]
    chip_loads_hss: tuple[float, ...]
    max_doc_ratio: float            # axial DOC / tool diameter
    recommended_engagement: float   # % radial engagement
    coolant_required: bool = False
    work_hardens: bool = False
    sfm_ceramic: Optional[SfmTriple] = None
    hardness_hrc: Optional[float] = None
    hardness_hb: Optional[int] = None
    grades: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""

    def __post_init__(self) -> None:
        for table in (self.chip_loads_carbide, self.chip_loads_hss):
            if len(table) != len(STANDARD_DIAMETERS):
                raise ValueError(
                    f"{self.name}: chip-load table needs "
                    f"{len(STANDARD_DIAMETERS)} entries, got {len(table)}"
                )

    def to_dict(self) -> dict:
        d = asdict(self)
        d["category"] = self.category.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> MaterialProperties:
        d = dict(d)
        d["category"] = MaterialCategory(d["category"])
        for key in ("sfm_hss", "sfm_cobalt", "sfm_carbide", "sfm_coated",
                    "chip_loads_carbide", "chip_loads_hss", "grades"):
            d[key] = tuple(d[key])
        if d.get("sfm_ceramic") is not None:
            d["sfm_ceramic"] = tuple(d["sfm_ceramic"])
        return cls(**d)


# Shared chip-load rows
_AL_CARBIDE = (0.001, 0.002, 0.002, 0.003, 0.004, 0.005, 0.006, 0.007)
_AL_HSS = (0.0005, 0.001, 0.001, 0.002, 0.002, 0.003, 0.003, 0.004)
_CU_CARBIDE = (0.001, 0.001, 0.002, 0.0025, 0.003, 0.004, 0.004, 0.005)
_ALLOY_CARBIDE = (0.0005, 0.0005, 0.001, 0.001, 0.0015, 0.002, 0.003, 0.004)
_ALLOY_HSS = (0.0002, 0.0003, 0.0005, 0.001, 0.001, 0.0015, 0.002, 0.0025)
_SS_CARBIDE = (0.0001, 0.0002, 0.0005, 0.001, 0.0015, 0.002, 0.003, 0.004)
_SS_HSS = (0.0001, 0.0001, 0.0002, 0.0005, 0.001, 0.001, 0.002, 0.0025)


def _builtin_materials() -> list[MaterialProperties]:
    return [
        # Non-ferrous
        MaterialProperties(
            name="Aluminum 6061-T6",
            category=MaterialCategory.NON_FERROUS,
            grades=("6061-T6", "6061-T651"),
            description="General purpose aluminum alloy, excellent machinability",
            hardness_hb=95,
            machinability=200.0,
            sfm_hss=(300.0, 600.0, 450.0),
            sfm_cobalt=(400.0, 800.0, 600.0),
            sfm_carbide=(800.0, 1500.0, 1200.0),
            sfm_coated=(1000.0, 2000.0, 1500.0),
            chip_loads_carbide=_AL_CARBIDE,
            chip_loads_hss=_AL_HSS,
            max_doc_ratio=1.5,
            recommended_engagement=30.0,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Aluminum 7075-T6",
            category=MaterialCategory.NON_FERROUS,
            grades=("7075-T6", "7075-T651"),
            description="High strength aircraft aluminum",
            hardness_hb=150,
            machinability=150.0,
            sfm_hss=(250.0, 500.0, 400.0),
            sfm_cobalt=(350.0, 700.0, 550.0),
            sfm_carbide=(800.0, 1500.0, 1100.0),
            sfm_coated=(900.0, 1800.0, 1300.0),
            chip_loads_carbide=_AL_CARBIDE,
            chip_loads_hss=_AL_HSS,
            max_doc_ratio=1.0,
            recommended_engagement=25.0,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Aluminum 2024-T3",
            category=MaterialCategory.NON_FERROUS,
            grades=("2024-T3", "2024-T4", "2024-T6"),
            description="High strength, fair corrosion resistance",
            hardness_hb=120,
            machinability=170.0,
            sfm_hss=(250.0, 500.0, 400.0),
            sfm_cobalt=(350.0, 700.0, 550.0),
            sfm_carbide=(800.0, 1500.0, 1100.0),
            sfm_coated=(900.0, 1800.0, 1300.0),
            chip_loads_carbide=_AL_CARBIDE,
            chip_loads_hss=_AL_HSS,
            max_doc_ratio=1.0,
            recommended_engagement=25.0,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Brass C360",
            category=MaterialCategory.NON_FERROUS,
            grades=("C36000", "Free Machining Brass"),
            description="Free machining brass",
            hardness_hb=80,
            machinability=100.0,
            sfm_hss=(200.0, 400.0, 300.0),
            sfm_cobalt=(300.0, 600.0, 450.0),
            sfm_carbide=(800.0, 1500.0, 1200.0),
            sfm_coated=(1000.0, 1800.0, 1400.0),
            chip_loads_carbide=_CU_CARBIDE,
            chip_loads_hss=(0.0005, 0.001, 0.001, 0.0015, 0.002, 0.0025, 0.003, 0.0035),
            max_doc_ratio=2.0,
            recommended_engagement=40.0,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Copper C110",
            category=MaterialCategory.NON_FERROUS,
            grades=("C11000", "ETP Copper"),
            description="Electrolytic tough pitch copper",
            hardness_hb=45,
            machinability=20.0,
            sfm_hss=(100.0, 200.0, 150.0),
            sfm_cobalt=(150.0, 300.0, 225.0),
            sfm_carbide=(600.0, 1000.0, 800.0),
            sfm_coated=(800.0, 1200.0, 1000.0),
            chip_loads_carbide=_CU_CARBIDE,
            chip_loads_hss=(0.0003, 0.0005, 0.001, 0.0015, 0.002, 0.0025, 0.003, 0.0035),
            max_doc_ratio=1.0,
            recommended_engagement=20.0,
            coolant_required=True,
        ),
        # Steels
        MaterialProperties(
            name="Steel 1018",
            category=MaterialCategory.STEEL_LOW_ALLOY,
            grades=("1018", "A36", "1020"),
            description="Low carbon steel, good machinability",
            hardness_hb=126,
            machinability=78.0,
            sfm_hss=(80.0, 150.0, 120.0),
            sfm_cobalt=(100.0, 200.0, 150.0),
            sfm_carbide=(200.0, 400.0, 300.0),
            sfm_coated=(300.0, 600.0, 450.0),
            chip_loads_carbide=(0.0005, 0.001, 0.0015, 0.002, 0.003, 0.004, 0.005, 0.006),
            chip_loads_hss=(0.0003, 0.0005, 0.001, 0.0015, 0.002, 0.0025, 0.003, 0.004),
            max_doc_ratio=1.0,
            recommended_engagement=30.0,
            coolant_required=True,
        ),
        MaterialProperties(
            name="Steel 4140",
            category=MaterialCategory.STEEL_LOW_ALLOY,
            grades=("4140", "4142", "4150"),
            description="Chromoly steel, medium hardenability",
            hardness_hrc=28.0,
            hardness_hb=220,
            machinability=66.0,
            sfm_hss=(60.0, 100.0, 80.0),
            sfm_cobalt=(80.0, 140.0, 110.0),
            sfm_carbide=(150.0, 300.0, 225.0),
            sfm_coated=(200.0, 400.0, 300.0),
            chip_loads_carbide=_ALLOY_CARBIDE,
            chip_loads_hss=_ALLOY_HSS,
            max_doc_ratio=0.5,
            recommended_engagement=20.0,
            coolant_required=True,
        ),
        MaterialProperties(
            name="Steel 8620",
            category=MaterialCategory.STEEL_LOW_ALLOY,
            grades=("8620", "8620H"),
            description="Case-hardening steel, tough core with hard surface",
            hardness_hrc=25.0,
            hardness_hb=200,
            machinability=65.0,
            sfm_hss=(50.0, 90.0, 70.0),
            sfm_cobalt=(70.0, 120.0, 95.0),
            sfm_carbide=(130.0, 260.0, 195.0),
            sfm_coated=(180.0, 350.0, 265.0),
            chip_loads_carbide=_ALLOY_CARBIDE,
            chip_loads_hss=_ALLOY_HSS,
            max_doc_ratio=0.5,
            recommended_engagement=20.0,
            coolant_required=True,
        ),
        MaterialProperties(
            name="Steel A2",
            category=MaterialCategory.STEEL_HIGH_ALLOY,
            grades=("A2", "A6", "D2", "O1"),
            description="Air hardening tool steel",
            hardness_hrc=62.0,
            hardness_hb=235,
            machinability=65.0,
            sfm_hss=(40.0, 80.0, 60.0),
            sfm_cobalt=(50.0, 100.0, 75.0),
            sfm_carbide=(100.0, 250.0, 175.0),
            sfm_coated=(150.0, 350.0, 250.0),
            sfm_ceramic=(300.0, 500.0, 400.0),
            chip_loads_carbide=(0.0003, 0.0005, 0.0008, 0.001, 0.001, 0.0015, 0.002, 0.003),
            chip_loads_hss=(0.0001, 0.0002, 0.0003, 0.0005, 0.0008, 0.001, 0.001, 0.002),
            max_doc_ratio=0.3,
            recommended_engagement=15.0,
            coolant_required=True,
        ),
        # Stainless
        MaterialProperties(
            name="Stainless 304",
            category=MaterialCategory.STAINLESS_AUSTENITIC,
            grades=("304", "304L", "302", "303"),
            description="Austenitic stainless, work hardens quickly",
            hardness_hb=150,
            machinability=45.0,
            sfm_hss=(30.0, 60.0, 45.0),
            sfm_cobalt=(50.0, 100.0, 75.0),
            sfm_carbide=(100.0, 350.0, 225.0),
            sfm_coated=(150.0, 450.0, 300.0),
            chip_loads_carbide=_SS_CARBIDE,
            chip_loads_hss=_SS_HSS,
            max_doc_ratio=0.5,
            recommended_engagement=10.0,
            coolant_required=True,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Stainless 316",
            category=MaterialCategory.STAINLESS_AUSTENITIC,
            grades=("316", "316L"),
            description="Marine grade stainless, more difficult than 304",
            hardness_hb=160,
            machinability=36.0,
            sfm_hss=(25.0, 50.0, 40.0),
            sfm_cobalt=(40.0, 80.0, 60.0),
            sfm_carbide=(100.0, 250.0, 175.0),
            sfm_coated=(150.0, 350.0, 250.0),
            chip_loads_carbide=_SS_CARBIDE,
            chip_loads_hss=_SS_HSS,
            max_doc_ratio=0.4,
            recommended_engagement=10.0,
            coolant_required=True,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Stainless 17-4PH",
            category=MaterialCategory.STAINLESS_PRECIPITATION,
            grades=("17-4PH", "15-5PH"),
            description="Precipitation hardening stainless",
            hardness_hrc=35.0,
            hardness_hb=330,
            machinability=48.0,
            sfm_hss=(30.0, 60.0, 45.0),
            sfm_cobalt=(50.0, 90.0, 70.0),
            sfm_carbide=(90.0, 250.0, 170.0),
            sfm_coated=(120.0, 300.0, 210.0),
            chip_loads_carbide=(0.0003, 0.0005, 0.001, 0.001, 0.002, 0.002, 0.004, 0.006),
            chip_loads_hss=(0.0001, 0.0002, 0.0003, 0.0005, 0.001, 0.0015, 0.002, 0.003),
            max_doc_ratio=0.5,
            recommended_engagement=15.0,
            coolant_required=True,
        ),
        MaterialProperties(
            name="Stainless 440C",
            category=MaterialCategory.STAINLESS_MARTENSITIC,
            grades=("440C", "420"),
            description="Martensitic stainless, can be hardened to 60 HRC",
            hardness_hrc=60.0,
            hardness_hb=240,
            machinability=40.0,
            sfm_hss=(25.0, 50.0, 40.0),
            sfm_cobalt=(40.0, 80.0, 60.0),
            sfm_carbide=(90.0, 250.0, 170.0),
            sfm_coated=(120.0, 300.0, 210.0),
            chip_loads_carbide=(0.0001, 0.0002, 0.0005, 0.0005, 0.001, 0.001, 0.003, 0.004),
            chip_loads_hss=(0.00005, 0.0001, 0.0002, 0.0003, 0.0005, 0.001, 0.0015, 0.002),
            max_doc_ratio=0.3,
            recommended_engagement=12.0,
            coolant_required=True,
        ),
        # Cast iron
        MaterialProperties(
            name="Cast Iron Gray",
            category=MaterialCategory.CAST_IRON,
            grades=("Class 30", "Class 40"),
            description="Gray cast iron, usually run dry",
            hardness_hb=210,
            machinability=110.0,
            sfm_hss=(50.0, 120.0, 85.0),
            sfm_cobalt=(80.0, 150.0, 115.0),
            sfm_carbide=(100.0, 400.0, 250.0),
            sfm_coated=(150.0, 500.0, 325.0),
            sfm_ceramic=(400.0, 800.0, 600.0),
            chip_loads_carbide=(0.0005, 0.001, 0.002, 0.003, 0.004, 0.005, 0.006, 0.008),
            chip_loads_hss=(0.0003, 0.0005, 0.001, 0.0015, 0.002, 0.003, 0.004, 0.005),
            max_doc_ratio=1.0,
            recommended_engagement=40.0,
        ),
        MaterialProperties(
            name="Cast Iron Ductile",
            category=MaterialCategory.CAST_IRON,
            grades=("65-45-12", "80-55-06"),
            description="Ductile/nodular cast iron",
            hardness_hb=180,
            machinability=90.0,
            sfm_hss=(40.0, 100.0, 70.0),
            sfm_cobalt=(60.0, 120.0, 90.0),
            sfm_carbide=(80.0, 300.0, 190.0),
            sfm_coated=(120.0, 400.0, 260.0),
            sfm_ceramic=(300.0, 600.0, 450.0),
            chip_loads_carbide=(0.0005, 0.001, 0.0015, 0.002, 0.0025, 0.003, 0.004, 0.005),
            chip_loads_hss=(0.0003, 0.0005, 0.0008, 0.001, 0.0015, 0.002, 0.003, 0.004),
            max_doc_ratio=0.8,
            recommended_engagement=35.0,
            coolant_required=True,
        ),
        # Titanium and superalloys
        MaterialProperties(
            name="Titanium Ti-6Al-4V",
            category=MaterialCategory.TITANIUM,
            grades=("Grade 5", "Ti-6Al-4V", "Ti64"),
            description="Most common titanium alloy, poor thermal conductivity",
            hardness_hrc=36.0,
            hardness_hb=334,
            machinability=22.0,
            sfm_hss=(20.0, 40.0, 30.0),
            sfm_cobalt=(30.0, 60.0, 45.0),
            sfm_carbide=(50.0, 150.0, 100.0),
            sfm_coated=(80.0, 200.0, 140.0),
            chip_loads_carbide=(0.0003, 0.0005, 0.001, 0.001, 0.001, 0.0015, 0.002, 0.003),
            chip_loads_hss=(0.0001, 0.0002, 0.0003, 0.0005, 0.0008, 0.001, 0.001, 0.002),
            max_doc_ratio=0.3,
            recommended_engagement=10.0,
            coolant_required=True,
            work_hardens=True,
        ),
        MaterialProperties(
            name="Inconel 718",
            category=MaterialCategory.HIGH_TEMP_ALLOY,
            grades=("Inconel 718", "N07718"),
            description="Nickel-based superalloy",
            hardness_hrc=47.0,
            hardness_hb=450,
            machinability=12.0,
            sfm_hss=(10.0, 20.0, 15.0),
            sfm_cobalt=(15.0, 30.0, 22.0),
            sfm_carbide=(30.0, 80.0, 55.0),
            sfm_coated=(50.0, 120.0, 85.0),
            sfm_ceramic=(200.0, 400.0, 300.0),
            chip_loads_carbide=(0.0002, 0.0003, 0.0005, 0.0008, 0.001, 0.001, 0.002, 0.003),
            chip_loads_hss=(0.00005, 0.0001, 0.0002, 0.0003, 0.0005, 0.0008, 0.001, 0.0015),
            max_doc_ratio=0.2,
            recommended_engagement=8.0,
            coolant_required=True,
            work_hardens=True,
        ),
        # Non-metals
        MaterialProperties(
            name="Delrin",
            category=MaterialCategory.PLASTIC,
            grades=("Acetal", "POM"),
            description="Acetal homopolymer, machines cleanly",
            machinability=300.0,
            sfm_hss=(300.0, 600.0, 500.0),
            sfm_cobalt=(400.0, 800.0, 600.0),
            sfm_carbide=(600.0, 1200.0, 1000.0),
            sfm_coated=(600.0, 1200.0, 1000.0),
            chip_loads_carbide=(0.002, 0.003, 0.004, 0.005, 0.006, 0.007, 0.008, 0.010),
            chip_loads_hss=(0.001, 0.002, 0.003, 0.004, 0.005, 0.006, 0.007, 0.008),
            max_doc_ratio=1.5,
            recommended_engagement=40.0,
        ),
        MaterialProperties(
            name="G10/FR4",
            category=MaterialCategory.COMPOSITE,
            grades=("G10", "FR4"),
            description="Glass-epoxy laminate, abrasive",
            machinability=60.0,
            sfm_hss=(100.0, 200.0, 150.0),
            sfm_cobalt=(150.0, 250.0, 200.0),
            sfm_carbide=(300.0, 700.0, 500.0),
            sfm_coated=(400.0, 800.0, 600.0),
            chip_loads_carbide=(0.0008, 0.001, 0.0015, 0.002, 0.0025, 0.003, 0.0035, 0.004),
            chip_loads_hss=(0.0003, 0.0005, 0.0008, 0.001, 0.0015, 0.002, 0.0025, 0.003),
            max_doc_ratio=0.5,
            recommended_engagement=25.0,
        ),
    ]


def load_material_database(
    materials: Optional[list[MaterialProperties]] = None,
) -> Mapping[str, MaterialProperties]:
    """Return a read-only name → MaterialProperties mapping.

    Uses the built-in table unless *materials* is supplied.
    """
    if materials is None:
        materials = _builtin_materials()
    return MappingProxyType({m.name: m for m in materials})


def load_material_file(path: Path) -> list[MaterialProperties]:
    """Read materials from a JSON list of ``MaterialProperties.to_dict`` records."""
    records = json.loads(Path(path).read_text())
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a list of materials")
    return [MaterialProperties.from_dict(r) for r in records]
