"""Composite slab calculators against hand calculations.

Reference case: Cofraplus 60 (0.88 mm) deck, C25 concrete, hc = 80 mm,
span 3.0 m.
"""

import pytest
from pydantic import ValidationError

from src.models import (
    ConstructionStageInput, DesignStatus, SlabBendingInput, SlabDeflectionInput,
    SlabFireInput, SlabShearInput,
)


class TestConstructionStage:

    @pytest.fixture
    def result(self, slab):
        return slab.construction_stage(ConstructionStageInput(
            deck="cofraplus60_088", span=3000, hc=80, construction_load=1.5,
        ))

    def test_loads(self, result):
        assert result.total_depth == 140
        # 11.5 kg/m² deck + 25 kN/m³ × 0.14 m
        assert result.permanent_load == pytest.approx(3.615)
        assert result.uls_load == pytest.approx(7.13025)

    def test_bending(self, result):
        assert result.design_moment == pytest.approx(8.0216, abs=1e-3)
        assert result.moment_resistance == 8.5
        assert result.bending_ok

    def test_deflection_exceeds_limit(self, result):
        assert result.deflection == pytest.approx(34.256, abs=0.01)
        assert result.deflection_limit == pytest.approx(3000 / 180)
        assert not result.deflection_ok
        assert result.status == DesignStatus.FAIL
        assert result.badge == "✗ Flèche excessive"

    def test_propping_required_on_long_span(self, slab):
        result = slab.construction_stage(ConstructionStageInput(
            deck="cofraplus60_075", span=4000, hc=100,
        ))
        assert not result.bending_ok
        assert result.badge == "✗ Étaiement requis"

    def test_construction_load_defaults(self):
        inp = ConstructionStageInput(deck="cofraplus60_088", span=3000, hc=80)
        assert inp.construction_load == 1.5


class TestBendingResistance:

    def test_pna_in_concrete(self, slab):
        result = slab.bending_resistance(SlabBendingInput(
            deck="cofraplus60_088", concrete="C25", hc=80,
        ))
        assert result.deck_tension == pytest.approx(410.88)
        assert result.concrete_compression == pytest.approx(1135.6)
        assert result.pna_in_concrete
        assert result.pna_depth == pytest.approx(28.945, abs=1e-3)
        assert result.lever_arm == pytest.approx(95.528, abs=1e-3)
        assert result.moment_resistance == pytest.approx(39.250, abs=1e-2)

    def test_no_design_moment_is_not_checked(self, slab):
        result = slab.bending_resistance(SlabBendingInput(
            deck="cofraplus60_088", concrete="C25", hc=80,
        ))
        assert result.status == DesignStatus.NOT_CHECKED
        assert result.utilization is None

    def test_design_moment_verified(self, slab):
        result = slab.bending_resistance(SlabBendingInput(
            deck="cofraplus60_088", concrete="C25", hc=80, design_moment=20,
        ))
        assert result.status == DesignStatus.PASS
        assert result.badge == "✓ Vérifié"
        assert result.utilization == pytest.approx(20 / 39.25, rel=1e-3)

    def test_pna_in_deck(self, slab):
        # Ncf = 0.85 × 13.3 × 1000 × 20 / 1000 = 226.1 < Npa = 467.2
        result = slab.bending_resistance(SlabBendingInput(
            deck="cofraplus60_100", concrete="C20", hc=20,
        ))
        assert not result.pna_in_concrete
        assert result.pna_depth == 20
        assert result.lever_arm == pytest.approx(80 - 10 - 30)
        assert result.moment_resistance == pytest.approx(226.1 * 40 / 1000)

    def test_unknown_deck_rejected(self):
        with pytest.raises(ValidationError, match="cofraplus60_088"):
            SlabBendingInput(deck="unknown", hc=80)


class TestVerticalShear:

    def test_resistance(self, slab):
        result = slab.vertical_shear(SlabShearInput(
            deck="cofraplus60_088", concrete="C25", hc=80, design_shear=15,
        ))
        assert result.effective_depth == 120
        assert result.ribs_per_metre == pytest.approx(1000 / 207)
        assert result.shear_resistance == pytest.approx(7.548, abs=1e-3)
        assert result.status == DesignStatus.FAIL
        assert not result.is_ok


class TestDeflection:

    @pytest.fixture
    def result(self, slab):
        return slab.deflection(SlabDeflectionInput(
            deck="cofraplus60_088", concrete="C25", hc=80, span=3000,
            extra_permanent_load=1.0, imposed_load=2.5,
        ))

    def test_modular_ratio(self, result):
        assert result.modular_ratio == pytest.approx(210000 / 31500)

    def test_loads(self, result):
        assert result.permanent_load == pytest.approx(4.615)
        assert result.total_load == pytest.approx(7.115)

    def test_equivalent_inertia(self, result):
        # 530000 + 42666667/6.667 + 1284 × 70²/6.667
        assert result.equivalent_inertia == pytest.approx(7.87374e6, rel=1e-4)

    def test_deflection(self, result):
        assert result.deflection == pytest.approx(4.538, abs=1e-3)
        assert result.deflection_limit == pytest.approx(12.0)
        assert result.deflection_ok

    def test_natural_frequency(self, result):
        assert result.natural_frequency == pytest.approx(32.72, abs=1e-2)
        assert result.frequency_ok
        assert result.status == DesignStatus.PASS
        assert result.badge == "✓ Vérifié"

    def test_low_frequency_floor(self, slab):
        result = slab.deflection(SlabDeflectionInput(
            deck="cofraplus60_088", concrete="C25", hc=80, span=10000,
            extra_permanent_load=20,
        ))
        assert result.natural_frequency == pytest.approx(1.302, abs=1e-3)
        assert not result.frequency_ok
        assert result.deflection == pytest.approx(1859.6, abs=0.1)
        assert not result.deflection_ok
        assert result.status == DesignStatus.FAIL
        assert result.badge == "✗ Flèche excessive"

    @pytest.mark.parametrize("span, extra, imposed", [(3000, 1.0, 2.5), (10000, 20, 5)])
    def test_frequency_tied_to_deflection(self, slab, span, extra, imposed):
        # f1² δ g/(g+q) depends on neither section nor span (≈ 3152 mm·Hz²), so a
        # slab passing L/250 (δ ≤ 40 mm) always has f1 ≥ 8.9 Hz
        result = slab.deflection(SlabDeflectionInput(
            deck="cofraplus60_088", concrete="C25", hc=80, span=span,
            extra_permanent_load=extra, imposed_load=imposed,
        ))
        ratio = result.permanent_load / result.total_load
        assert result.natural_frequency ** 2 * result.deflection * ratio == pytest.approx(3151.7, abs=0.1)


class TestFireResistance:

    def test_r60_verified(self, slab):
        result = slab.fire_resistance(SlabFireInput(
            rating="R60", hc=80, span=3000, permanent_load=4.5, imposed_load=2.5,
        ))
        assert result.fire_load == pytest.approx(5.75)
        assert result.fire_moment == pytest.approx(6.46875)
        assert result.rebar_depth == 120
        assert result.required_steel == pytest.approx(119.79, abs=0.01)
        assert result.bar_diameter == 10
        assert result.bars_per_rib == 1
        assert result.status == DesignStatus.PASS
        assert result.badge == "✓ R60 vérifié"

    def test_thickness_too_small(self, slab):
        result = slab.fire_resistance(SlabFireInput(
            rating="R120", hc=80, span=3000, permanent_load=4.5,
        ))
        assert result.min_thickness == 90
        assert not result.thickness_ok
        assert result.status == DesignStatus.FAIL
        assert result.badge == "✗ hc insuffisant"

    def test_heavy_load_uses_two_bars(self, slab):
        result = slab.fire_resistance(SlabFireInput(
            rating="R30", hc=80, span=6000, permanent_load=8, imposed_load=5,
        ))
        assert result.required_steel > 300
        assert (result.bar_diameter, result.bars_per_rib) == (12, 2)
