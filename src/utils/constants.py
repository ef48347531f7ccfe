"""
Engineering constants for the composite construction calculators.
"""

# Unit weight of reinforced concrete (kN/m³)
CONCRETE_UNIT_WEIGHT = 25.0

# Gravity (m/s²)
GRAVITY = 9.81

# Calculation width of a slab strip (mm)
SLAB_STRIP_WIDTH = 1000.0

# Distance from deck centroid to the slab soffit (mm)
DECK_CENTROID_OFFSET = 30.0

# Cover to the effective depth of the deck for vertical shear (mm)
SHEAR_DEPTH_OFFSET = 20.0

# Vertical shear coefficient kv = 0.0525 / 1.25
SLAB_SHEAR_KV = 0.042

# Default construction load on the deck (kN/m²)
CONSTRUCTION_LOAD = 1.5

# ULS load factors
GAMMA_G = 1.35
GAMMA_Q = 1.5

# Lowest acceptable natural frequency of a floor (Hz)
MIN_FLOOR_FREQUENCY = 3.0

# Rebar position in the ribs for fire design: hc + hp - cover (mm)
FIRE_REBAR_RIB_DEPTH = 60.0
FIRE_REBAR_COVER = 20.0

# Ribs per metre assumed for the fire reinforcement layout
FIRE_RIBS_PER_METRE = 5

# (max As,req in mm²/m, bar diameter, bars per rib)
FIRE_BAR_SELECTION = [
    (50, 6, 1),
    (100, 8, 1),
    (200, 10, 1),
    (300, 12, 1),
    (float("inf"), 12, 2),
]

# Effective length coefficient per support type (composite beams)
EFFECTIVE_LENGTH_FACTORS = {
    "simple": 1.00,
    "end_span": 0.85,
    "internal_support": 0.70,
}

# Creep multiplier for long-term modular ratio
PSI_L = 1.1

# Maximum longitudinal spacing of shear studs (mm)
MAX_STUD_SPACING = 800.0

# Approximations used by the column calculators
NPL_RK_FACTOR = 1.1
NPM_RD_FACTOR = 0.35
MAX_RELATIVE_SLENDERNESS = 2.0
STEEL_CONTRIBUTION_RANGE = (0.2, 0.9)

# Fire ratings in ascending order
FIRE_RATINGS = ["R30", "R60", "R90", "R120"]
