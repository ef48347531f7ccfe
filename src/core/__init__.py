# Core calculation engine
from .slab import CompositeSlabDesigner
from .beam import CompositeBeamDesigner
from .column import CompositeColumnDesigner
from .registry import CALCULATORS, CHAPTERS, Calculator, calculators_for, get_calculator, run_calculator
