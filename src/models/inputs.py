"""
Input data models for the composite construction calculators, using Pydantic
for validation.

Categorical inputs (deck, concrete, steel, profile) are keys of the EN 1994
reference tables and are rejected when unknown.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from enum import Enum

from src.codes.ec4 import get_code
from src.utils.constants import CONSTRUCTION_LOAD, PSI_L


class FireRating(str, Enum):
    """Standard fire resistance ratings."""
    R30 = "R30"
    R60 = "R60"
    R90 = "R90"
    R120 = "R120"


class SupportType(str, Enum):
    """Position of the beam span, for the equivalent span Le."""
    SIMPLE = "simple"
    END_SPAN = "end_span"
    INTERNAL_SUPPORT = "internal_support"


class ColumnSupport(str, Enum):
    """End conditions of a column."""
    PINNED_PINNED = "pinned_pinned"
    FIXED_PINNED = "fixed_pinned"
    FIXED_FIXED = "fixed_fixed"
    CANTILEVER = "cantilever"

    @property
    def beta(self) -> float:
        """Effective length factor."""
        return {
            "pinned_pinned": 1.0,
            "fixed_pinned": 0.7,
            "fixed_fixed": 0.5,
            "cantilever": 2.0,
        }[self.value]


class BucklingCurve(str, Enum):
    """EN 1993-1-1 buckling curves."""
    A0 = "a0"
    A = "a"
    B = "b"
    C = "c"
    D = "d"

    @property
    def alpha(self) -> float:
        """Imperfection factor (EN 1993-1-1 Table 6.1)."""
        return {"a0": 0.13, "a": 0.21, "b": 0.34, "c": 0.49, "d": 0.76}[self.value]


class ColumnFireSection(str, Enum):
    """Column section families of the tabulated fire data."""
    CIRCULAR_TUBE = "circular_tube"
    RECTANGULAR_TUBE = "rectangular_tube"
    ENCASED = "encased"


def _check_key(table: str, value: str) -> str:
    code = get_code()
    if not code.has_key(table, value):
        allowed = ", ".join(code.table_keys(table))
        raise ValueError(f"unknown value '{value}' (expected one of: {allowed})")
    return value


# ---------------------------------------------------------------------------
# Composite slabs
# ---------------------------------------------------------------------------

class SlabInput(BaseModel):
    """Deck and concrete topping shared by the slab calculators."""
    deck: str = Field(..., description="Steel deck reference")
    hc: float = Field(..., gt=0, le=300, description="Concrete thickness above the ribs in mm")

    @field_validator("deck")
    @classmethod
    def validate_deck(cls, v: str) -> str:
        return _check_key("decks", v)


class ConstructionStageInput(SlabInput):
    """Bare deck under wet concrete and construction load."""
    span: float = Field(..., gt=0, le=8000, description="Deck span in mm")
    construction_load: float = Field(
        default=CONSTRUCTION_LOAD,
        ge=0,
        description="Construction load on the deck in kN/m²"
    )


class SlabBendingInput(SlabInput):
    concrete: str = Field(default="C25", description="Slab concrete class")
    design_moment: float = Field(
        default=0,
        ge=0,
        description="Design sagging moment MEd in kN.m/m (0 = resistance only)"
    )

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("slab_concretes", v)


class SlabShearInput(SlabInput):
    concrete: str = Field(default="C25", description="Slab concrete class")
    design_shear: float = Field(
        default=0,
        ge=0,
        description="Design vertical shear VEd in kN/m (0 = resistance only)"
    )

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("slab_concretes", v)


class SlabDeflectionInput(SlabInput):
    concrete: str = Field(default="C25", description="Slab concrete class")
    span: float = Field(..., gt=0, le=10000, description="Slab span in mm")
    extra_permanent_load: float = Field(
        default=0,
        ge=0,
        description="Finishes and partitions in kN/m²"
    )
    imposed_load: float = Field(default=0, ge=0, description="Imposed load in kN/m²")

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("slab_concretes", v)


class SlabFireInput(BaseModel):
    """Composite slab in fire, reinforced with bars in the ribs."""
    rating: FireRating = FireRating.R60
    hc: float = Field(..., gt=0, le=300, description="Concrete thickness above the ribs in mm")
    span: float = Field(..., gt=0, le=10000, description="Slab span in mm")
    permanent_load: float = Field(
        ...,
        ge=0,
        description="Total characteristic permanent load in kN/m²"
    )
    imposed_load: float = Field(default=0, ge=0, description="Imposed load in kN/m²")


# ---------------------------------------------------------------------------
# Composite beams
# ---------------------------------------------------------------------------

class EffectiveWidthInput(BaseModel):
    span: float = Field(..., gt=0, description="Beam span in mm")
    spacing: float = Field(..., gt=0, description="Distance between beams in mm")
    support: SupportType = SupportType.SIMPLE


class ModularRatioInput(BaseModel):
    concrete: str = Field(default="C30/37", description="Concrete class")
    creep_coefficient: float = Field(default=0, ge=0, le=5, description="Creep coefficient phi_t")
    psi_l: float = Field(default=PSI_L, gt=0, description="Creep multiplier psi_L")

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("beam_concretes", v)


class CompositeSectionInput(BaseModel):
    """Rolled profile with a concrete flange of width beff."""
    profile: str = Field(default="IPE 360", description="Rolled steel profile")
    concrete: str = Field(default="C30/37", description="Concrete class")
    beff: float = Field(..., gt=0, le=10000, description="Effective width in mm")
    hc: float = Field(..., gt=0, le=500, description="Solid slab thickness in mm")
    hp: float = Field(default=0, ge=0, le=200, description="Deck rib height in mm")

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        return _check_key("beam_profiles", v)

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("beam_concretes", v)


class PlasticForcesInput(CompositeSectionInput):
    steel: str = Field(default="S355", description="Structural steel grade")

    @field_validator("steel")
    @classmethod
    def validate_steel(cls, v: str) -> str:
        return _check_key("beam_steels", v)


class BeamMomentInput(PlasticForcesInput):
    design_moment: Optional[float] = Field(
        None,
        ge=0,
        description="Design sagging moment MEd in kN.m"
    )


class ShearConnectorInput(BaseModel):
    """Headed stud welded through the deck."""
    diameter: float = Field(default=19, gt=0, le=25, description="Stud shank diameter d in mm")
    height: float = Field(default=100, gt=0, description="Overall stud height hsc in mm")
    fu: float = Field(default=450, gt=0, le=500, description="Stud ultimate strength in MPa")
    concrete: str = Field(default="C30/37", description="Concrete class")
    longitudinal_shear: float = Field(
        ...,
        gt=0,
        description="Longitudinal shear Vl over the half span in kN"
    )
    connection_degree: float = Field(
        default=1.0,
        gt=0,
        le=1.0,
        description="Degree of shear connection eta (1 = full)"
    )

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("beam_concretes", v)


class BeamDeflectionInput(CompositeSectionInput):
    span: float = Field(..., gt=0, le=30000, description="Beam span in mm")
    load: float = Field(..., gt=0, description="Service load q in kN/m")
    creep_coefficient: float = Field(default=0, ge=0, le=5, description="Creep coefficient phi_t")


class BeamShearInput(BaseModel):
    profile: str = Field(default="IPE 360", description="Rolled steel profile")
    steel: str = Field(default="S355", description="Structural steel grade")
    design_shear: Optional[float] = Field(
        None,
        ge=0,
        description="Design shear force VEd in kN"
    )

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        return _check_key("beam_profiles", v)

    @field_validator("steel")
    @classmethod
    def validate_steel(cls, v: str) -> str:
        return _check_key("beam_steels", v)


# ---------------------------------------------------------------------------
# Composite columns
# ---------------------------------------------------------------------------

class ColumnResistanceInput(BaseModel):
    """Partially or fully encased H profile."""
    profile: str = Field(default="HEB300", description="Steel profile")
    b: float = Field(..., gt=0, le=1500, description="Overall section width in mm")
    h: float = Field(..., gt=0, le=1500, description="Overall section depth in mm")
    concrete: str = Field(default="C30", description="Concrete class")
    steel: str = Field(default="S355", description="Structural steel grade")
    rebar_area: float = Field(default=0, ge=0, description="Longitudinal rebar area As in cm²")

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        return _check_key("column_profiles", v)

    @field_validator("concrete")
    @classmethod
    def validate_concrete(cls, v: str) -> str:
        return _check_key("column_concretes", v)

    @field_validator("steel")
    @classmethod
    def validate_steel(cls, v: str) -> str:
        return _check_key("column_steels", v)

    @model_validator(mode="after")
    def validate_concrete_area(self) -> "ColumnResistanceInput":
        """The outer section must leave room for concrete around the profile."""
        Aa = get_code().column_profiles[self.profile].Aa
        if self.b * self.h / 100 - Aa - self.rebar_area <= 0:
            raise ValueError(
                f"section {self.b:.0f} x {self.h:.0f} mm leaves no concrete "
                f"around {self.profile} (Aa = {Aa} cm²)"
            )
        return self


class BucklingInput(BaseModel):
    plastic_resistance: float = Field(..., gt=0, description="Npl,Rd in kN")
    effective_stiffness: float = Field(..., gt=0, description="(EI)eff in kN.m²")
    length: float = Field(..., gt=0, le=30, description="Column length in m")
    support: ColumnSupport = ColumnSupport.PINNED_PINNED
    curve: BucklingCurve = BucklingCurve.B
    design_axial: float = Field(..., ge=0, description="Design axial force NEd in kN")


class CombinedInput(BaseModel):
    plastic_resistance: float = Field(..., gt=0, description="Npl,Rd in kN")
    plastic_moment: float = Field(..., gt=0, description="Mpl,Rd in kN.m")
    design_axial: float = Field(..., ge=0, description="Design axial force NEd in kN")
    design_moment: float = Field(..., ge=0, description="Design moment MEd in kN.m")
    alpha_m: float = Field(default=0.9, gt=0, le=1.0, description="Coefficient alpha_M")


class ColumnFireInput(BaseModel):
    section_type: ColumnFireSection = ColumnFireSection.ENCASED
    dimension: float = Field(..., gt=0, description="Smallest outer dimension in mm")
    cover: float = Field(default=0, ge=0, description="Concrete cover of the profile in mm")
    load_level: float = Field(..., ge=0, le=1.0, description="Load level in fire mu_fi")
    required_rating: Optional[FireRating] = None
