"""
Output data models for the composite construction calculators.
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class DesignStatus(str, Enum):
    """Status of a design check."""
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    NOT_CHECKED = "not_checked"  # no design action given


class CalculationStep(BaseModel):
    """Single calculation step for transparency."""
    step_number: int
    description: str
    formula: str
    substitution: str
    result: float
    unit: str
    code_reference: Optional[str] = None


class CheckOutput(BaseModel):
    """Fields shared by every calculator result."""
    status: DesignStatus
    badge: str  # short verdict shown next to the results
    utilization: Optional[float] = None  # demand / capacity
    warnings: list[str] = Field(default_factory=list)
    calculation_steps: list[CalculationStep] = Field(default_factory=list)

    @property
    def is_ok(self) -> bool:
        return self.status in (DesignStatus.PASS, DesignStatus.NOT_CHECKED)


# ---------------------------------------------------------------------------
# Composite slabs
# ---------------------------------------------------------------------------

class ConstructionStageOutput(CheckOutput):
    """Bare deck acting as formwork."""
    total_depth: float  # ht (mm)
    permanent_load: float  # g, deck + wet concrete (kN/m²)
    uls_load: float  # p = 1.35 g + 1.5 q (kN/m²)
    design_moment: float  # MEd (kN.m/m)
    moment_resistance: float  # MRd of the deck (kN.m/m)
    bending_ok: bool
    deflection: float  # mm
    deflection_limit: float  # mm
    deflection_ok: bool


class SlabBendingOutput(CheckOutput):
    """Sagging resistance of the composite slab."""
    total_depth: float  # mm
    deck_tension: float  # Npa (kN/m)
    concrete_compression: float  # Ncf (kN/m)
    pna_in_concrete: bool
    pna_depth: float  # xpl (mm)
    lever_arm: float  # z (mm)
    moment_resistance: float  # MplRd (kN.m/m)
    design_moment: float  # kN.m/m


class SlabShearOutput(CheckOutput):
    """Vertical shear resistance of the composite slab."""
    effective_depth: float  # dp (mm)
    ribs_per_metre: float
    shear_resistance: float  # VRd (kN/m)
    design_shear: float  # kN/m


class SlabDeflectionOutput(CheckOutput):
    """Serviceability of the composite slab."""
    modular_ratio: float  # n0
    equivalent_inertia: float  # Ieq (mm⁴/m)
    permanent_load: float  # kN/m²
    total_load: float  # kN/m²
    deflection: float  # mm
    deflection_limit: float  # L/250 (mm)
    deflection_ok: bool
    natural_frequency: float  # Hz
    frequency_ok: bool


class SlabFireOutput(CheckOutput):
    """Fire design of the composite slab with rebar in the ribs."""
    rating: str
    fire_load: float  # q_fi (kN/m²)
    fire_moment: float  # M_fi,Ed (kN.m/m)
    rebar_depth: float  # ds (mm)
    required_steel: float  # As,req (mm²/m)
    min_thickness: float  # hc,min (mm)
    thickness_ok: bool
    bar_diameter: int  # mm
    bars_per_rib: int
    provided_steel: float  # mm²/m
    arrangement: str


# ---------------------------------------------------------------------------
# Composite beams
# ---------------------------------------------------------------------------

class EffectiveWidthOutput(BaseModel):
    """Effective width of the concrete flange (EN 1994-1-1 5.4.1.2)."""
    equivalent_span: float  # Le
    half_width: float  # bei
    effective_width: float  # beff
    limit: float  # beam spacing


class ModularRatioOutput(BaseModel):
    n0: float
    nL: float
    Ecm: float


class PlasticForcesOutput(BaseModel):
    steel_force: float  # Na,pl (kN)
    concrete_force: float  # Nc,f (kN)
    fyd: float
    fcd: float
    steel_area: float  # cm²


class BeamMomentOutput(CheckOutput):
    """Plastic sagging resistance of the composite beam."""
    steel_force: float  # kN
    concrete_force: float  # kN
    pna_position: str  # "slab", "top_flange", "web"
    pna_depth: float  # zpl (mm)
    lever_arm: float  # mm
    moment_resistance: float  # MplRd (kN.m)
    design_moment: float  # kN.m


class StudResistanceOutput(BaseModel):
    steel_failure: float  # PRd,1 (kN)
    concrete_failure: float  # PRd,2 (kN)
    resistance: float  # PRd (kN)
    alpha: float
    failure_mode: str  # "steel" or "concrete"


class StudCountOutput(BaseModel):
    per_half_span: int
    total: int
    max_spacing: float  # mm


class ConnectorOutput(CheckOutput):
    """Headed stud design for a given longitudinal shear."""
    stud: StudResistanceOutput
    count: StudCountOutput
    longitudinal_shear: float  # Vl (kN)


class TransformedSectionOutput(BaseModel):
    """Uncracked transformed section with short-term modular ratio."""
    modular_ratio: float
    steel_area: float  # cm²
    concrete_area: float  # equivalent (cm²)
    total_area: float  # cm²
    centroid: float  # from profile bottom (mm)
    inertia: float  # Ieq (cm⁴)
    steel_centroid: float  # mm
    concrete_centroid: float  # mm


class BeamDeflectionOutput(CheckOutput):
    section: TransformedSectionOutput
    instantaneous: float  # mm
    with_creep: float  # mm
    limit_l250: float
    limit_l300: float
    limit_l350: float
    instantaneous_ok: bool
    total_ok: bool


class BeamShearOutput(CheckOutput):
    web_height: float  # hw (mm)
    shear_area: float  # Av (mm²)
    shear_resistance: float  # Vpl,Rd (kN)
    design_shear: float  # kN


# ---------------------------------------------------------------------------
# Composite columns
# ---------------------------------------------------------------------------

class ColumnResistanceOutput(CheckOutput):
    concrete_area: float  # Ac (cm²)
    steel_contribution: float  # Na (kN)
    concrete_contribution: float  # Nc (kN)
    rebar_contribution: float  # Ns (kN)
    plastic_resistance: float  # Npl,Rd (kN)
    contribution_ratio: float  # delta
    contribution_ok: bool


class BucklingOutput(CheckOutput):
    buckling_length: float  # Lcr (m)
    critical_load: float  # Ncr (kN)
    relative_slenderness: float  # lambda bar
    slenderness_ok: bool
    phi: float
    chi: float
    buckling_resistance: float  # Nb,Rd (kN)
    imperfection: float  # alpha


class CombinedOutput(CheckOutput):
    concrete_resistance: float  # Npm,Rd (kN)
    axial_ratio: float  # NEd / Npl,Rd
    mu_d: float
    reduced_moment: float  # Mpl,N,Rd (kN.m)
    allowable_moment: float  # alpha_M Mpl,N,Rd (kN.m)


class ColumnFireOutput(CheckOutput):
    section_type: str
    dimension: float  # mm
    cover: float  # mm
    achieved_rating: str  # "R0" when no rating is met
    load_level: float
    load_level_ok: bool
    requirements: dict[str, float]  # minimum dimension per rating
