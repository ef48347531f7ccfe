"""
Name -> calculator registry used by the UI pages, the CLI and the PDF notes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel

from src.codes.base_code import DesignCode
from src.core.beam import CompositeBeamDesigner
from src.core.column import CompositeColumnDesigner
from src.core.slab import CompositeSlabDesigner
from src.models import inputs

CHAPTERS = {
    "planchers": "Planchers mixtes",
    "poutres": "Poutres mixtes",
    "poteaux": "Poteaux mixtes",
}


@dataclass(frozen=True)
class Calculator:
    """One interactive calculator: an input model and the designer method it feeds."""
    name: str
    title: str
    chapter: str
    input_model: Type[BaseModel]
    designer: type
    method: str
    example: Dict[str, Any] = field(default_factory=dict)

    def validate(self, data: Union[Mapping[str, Any], BaseModel]) -> BaseModel:
        """Raises pydantic.ValidationError on missing or invalid fields."""
        if isinstance(data, self.input_model):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        return self.input_model.model_validate(dict(data))

    def run(
        self,
        data: Union[Mapping[str, Any], BaseModel],
        code: Optional[DesignCode] = None,
    ) -> BaseModel:
        inp = self.validate(data)
        return getattr(self.designer(code), self.method)(inp)


CALCULATORS: Dict[str, Calculator] = {c.name: c for c in [
    # -- planchers ------------------------------------------------------------
    Calculator(
        "slab_construction", "Phase de construction", "planchers",
        inputs.ConstructionStageInput, CompositeSlabDesigner, "construction_stage",
        {"deck": "cofraplus60_088", "span": 3000, "hc": 80, "construction_load": 1.5},
    ),
    Calculator(
        "slab_bending", "Moment résistant mixte", "planchers",
        inputs.SlabBendingInput, CompositeSlabDesigner, "bending_resistance",
        {"deck": "cofraplus60_088", "concrete": "C25", "hc": 80, "design_moment": 20},
    ),
    Calculator(
        "slab_shear", "Cisaillement vertical", "planchers",
        inputs.SlabShearInput, CompositeSlabDesigner, "vertical_shear",
        {"deck": "cofraplus60_088", "concrete": "C25", "hc": 80, "design_shear": 15},
    ),
    Calculator(
        "slab_deflection", "Flèche et vibrations (ELS)", "planchers",
        inputs.SlabDeflectionInput, CompositeSlabDesigner, "deflection",
        {"deck": "cofraplus60_088", "concrete": "C25", "hc": 80, "span": 3000,
         "extra_permanent_load": 1.0, "imposed_load": 2.5},
    ),
    Calculator(
        "slab_fire", "Résistance au feu", "planchers",
        inputs.SlabFireInput, CompositeSlabDesigner, "fire_resistance",
        {"rating": "R60", "hc": 80, "span": 3000, "permanent_load": 4.5, "imposed_load": 2.5},
    ),
    # -- poutres --------------------------------------------------------------
    Calculator(
        "beam_effective_width", "Largeur participante", "poutres",
        inputs.EffectiveWidthInput, CompositeBeamDesigner, "effective_width",
        {"span": 8000, "spacing": 3000, "support": "simple"},
    ),
    Calculator(
        "beam_modular_ratio", "Coefficient d'équivalence", "poutres",
        inputs.ModularRatioInput, CompositeBeamDesigner, "modular_ratio",
        {"concrete": "C30/37", "creep_coefficient": 2.0},
    ),
    Calculator(
        "beam_plastic_forces", "Forces plastiques", "poutres",
        inputs.PlasticForcesInput, CompositeBeamDesigner, "plastic_forces",
        {"profile": "IPE 360", "steel": "S355", "concrete": "C30/37", "beff": 2000, "hc": 100},
    ),
    Calculator(
        "beam_moment", "Moment résistant plastique", "poutres",
        inputs.BeamMomentInput, CompositeBeamDesigner, "moment_resistance",
        {"profile": "IPE 360", "steel": "S355", "concrete": "C30/37", "beff": 2000,
         "hc": 100, "hp": 0, "design_moment": 450},
    ),
    Calculator(
        "beam_connectors", "Connecteurs (goujons)", "poutres",
        inputs.ShearConnectorInput, CompositeBeamDesigner, "shear_connectors",
        {"diameter": 19, "height": 100, "fu": 450, "concrete": "C30/37",
         "longitudinal_shear": 2581},
    ),
    Calculator(
        "beam_deflection", "Flèche (ELS)", "poutres",
        inputs.BeamDeflectionInput, CompositeBeamDesigner, "deflection",
        {"profile": "IPE 360", "concrete": "C30/37", "beff": 2000, "hc": 100, "hp": 0,
         "span": 8000, "load": 15, "creep_coefficient": 2.0},
    ),
    Calculator(
        "beam_shear", "Effort tranchant", "poutres",
        inputs.BeamShearInput, CompositeBeamDesigner, "shear_resistance",
        {"profile": "IPE 360", "steel": "S355", "design_shear": 200},
    ),
    # -- poteaux --------------------------------------------------------------
    Calculator(
        "column_resistance", "Résistance plastique", "poteaux",
        inputs.ColumnResistanceInput, CompositeColumnDesigner, "plastic_resistance",
        {"profile": "HEB300", "b": 400, "h": 400, "concrete": "C30", "steel": "S355",
         "rebar_area": 12.6},
    ),
    Calculator(
        "column_buckling", "Flambement", "poteaux",
        inputs.BucklingInput, CompositeColumnDesigner, "buckling",
        {"plastic_resistance": 7000, "effective_stiffness": 60000, "length": 4.0,
         "support": "pinned_pinned", "curve": "b", "design_axial": 4000},
    ),
    Calculator(
        "column_combined", "Flexion composée", "poteaux",
        inputs.CombinedInput, CompositeColumnDesigner, "combined",
        {"plastic_resistance": 7000, "plastic_moment": 500, "design_axial": 3000,
         "design_moment": 200, "alpha_m": 0.9},
    ),
    Calculator(
        "column_fire", "Résistance au feu", "poteaux",
        inputs.ColumnFireInput, CompositeColumnDesigner, "fire_resistance",
        {"section_type": "encased", "dimension": 300, "cover": 50, "load_level": 0.45,
         "required_rating": "R90"},
    ),
]}


def get_calculator(name: str) -> Calculator:
    try:
        return CALCULATORS[name]
    except KeyError:
        raise KeyError(
            f"Unknown calculator '{name}'. Available: {', '.join(CALCULATORS)}"
        ) from None


def calculators_for(chapter: str) -> List[Calculator]:
    """Calculators of one course chapter, in page order."""
    return [c for c in CALCULATORS.values() if c.chapter == chapter]


def run_calculator(name: str, data: Union[Mapping[str, Any], BaseModel]) -> BaseModel:
    return get_calculator(name).run(data)
