# Data models for the EC4 composite construction calculators
from .inputs import (
    FireRating, SupportType, ColumnSupport, BucklingCurve, ColumnFireSection,
    ConstructionStageInput, SlabBendingInput, SlabShearInput,
    SlabDeflectionInput, SlabFireInput,
    EffectiveWidthInput, ModularRatioInput, PlasticForcesInput,
    BeamMomentInput, ShearConnectorInput, BeamDeflectionInput, BeamShearInput,
    ColumnResistanceInput, BucklingInput, CombinedInput, ColumnFireInput,
)
from .outputs import (
    DesignStatus, CalculationStep, CheckOutput,
    ConstructionStageOutput, SlabBendingOutput, SlabShearOutput,
    SlabDeflectionOutput, SlabFireOutput,
    EffectiveWidthOutput, ModularRatioOutput, PlasticForcesOutput,
    BeamMomentOutput, StudResistanceOutput, StudCountOutput, ConnectorOutput,
    TransformedSectionOutput, BeamDeflectionOutput, BeamShearOutput,
    ColumnResistanceOutput, BucklingOutput, CombinedOutput, ColumnFireOutput,
)
