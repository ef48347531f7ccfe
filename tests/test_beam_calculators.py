"""Composite beam calculators against hand calculations.

Reference case: IPE 360 in S355 under a 100 mm C30/37 slab, beff = 2000 mm.
"""

import math

import pytest
from pydantic import ValidationError

from src.models import (
    BeamDeflectionInput, BeamMomentInput, BeamShearInput, DesignStatus,
    EffectiveWidthInput, ModularRatioInput, PlasticForcesInput, ShearConnectorInput,
)

SECTION = {"profile": "IPE 360", "steel": "S355", "concrete": "C30/37", "beff": 2000, "hc": 100}


class TestEffectiveWidth:

    @pytest.mark.parametrize("support, Le, beff", [
        ("simple", 8000, 2000),
        ("end_span", 6800, 1700),
        ("internal_support", 5600, 1400),
    ])
    def test_equivalent_span(self, beam, support, Le, beff):
        result = beam.effective_width(EffectiveWidthInput(span=8000, spacing=3000, support=support))
        assert result.equivalent_span == pytest.approx(Le)
        assert result.effective_width == pytest.approx(beff)

    def test_limited_by_spacing(self, beam):
        result = beam.effective_width(EffectiveWidthInput(span=20000, spacing=2000))
        assert result.half_width == 1000
        assert result.effective_width == 2000


class TestModularRatio:

    def test_short_and_long_term(self, beam):
        result = beam.modular_ratio(ModularRatioInput(concrete="C30/37", creep_coefficient=2.0))
        assert result.n0 == pytest.approx(6.3636, abs=1e-4)
        assert result.nL == pytest.approx(6.3636 * 3.2, abs=1e-3)

    def test_no_creep(self, beam):
        result = beam.modular_ratio(ModularRatioInput(concrete="C30/37"))
        assert result.nL == result.n0


class TestPlasticMoment:

    def test_plastic_forces(self, beam):
        result = beam.plastic_forces(PlasticForcesInput(**SECTION))
        assert result.steel_force == pytest.approx(2580.85)
        assert result.concrete_force == pytest.approx(3400.0)
        assert result.fcd == pytest.approx(20.0)

    def test_pna_in_slab(self, beam):
        result = beam.moment_resistance(BeamMomentInput(**SECTION, design_moment=450))
        assert result.pna_position == "slab"
        assert result.pna_depth == pytest.approx(75.907, abs=1e-3)
        assert result.lever_arm == pytest.approx(242.047, abs=1e-3)
        assert result.moment_resistance == pytest.approx(624.69, abs=0.02)
        assert result.status == DesignStatus.PASS
        assert result.utilization == pytest.approx(450 / 624.69, rel=1e-3)

    def test_pna_in_top_flange(self, beam):
        result = beam.moment_resistance(BeamMomentInput(**{**SECTION, "hc": 40}))
        assert result.pna_position == "top_flange"
        assert result.pna_depth == pytest.approx(1220.85 / 120.7, abs=1e-3)
        assert result.pna_depth <= 12.7

    def test_pna_in_web(self, beam):
        result = beam.moment_resistance(BeamMomentInput(**{**SECTION, "hc": 20}))
        assert result.pna_position == "web"
        assert result.pna_depth > 12.7

    def test_without_design_moment(self, beam):
        result = beam.moment_resistance(BeamMomentInput(**SECTION))
        assert result.status == DesignStatus.NOT_CHECKED
        assert result.design_moment == 0

    def test_overloaded(self, beam):
        result = beam.moment_resistance(BeamMomentInput(**SECTION, design_moment=700))
        assert result.status == DesignStatus.FAIL
        assert result.badge == "✗ Non vérifié"

    def test_unknown_profile(self):
        with pytest.raises(ValidationError):
            BeamMomentInput(**{**SECTION, "profile": "IPE 999"})


class TestShearConnectors:

    def test_stud_resistance(self, beam):
        stud = beam.stud_resistance(19, 100, 450, "C30/37")
        assert stud.alpha == 1.0
        assert stud.steel_failure == pytest.approx(81.656, abs=1e-3)
        assert stud.concrete_failure == pytest.approx(83.332, abs=1e-3)
        assert stud.resistance == stud.steel_failure
        assert stud.failure_mode == "steel"

    def test_alpha_between_3_and_4(self, beam):
        stud = beam.stud_resistance(20, 70, 450, "C30/37")
        assert stud.alpha == pytest.approx(0.2 * (3.5 + 1))

    def test_stud_count(self, beam):
        result = beam.shear_connectors(ShearConnectorInput(longitudinal_shear=2581))
        assert result.count.per_half_span == math.ceil(2581 / result.stud.resistance) == 32
        assert result.count.total == 64
        assert result.count.max_spacing == 800
        assert result.status == DesignStatus.PASS
        assert result.badge == "64 goujons"

    def test_partial_connection(self, beam):
        full = beam.shear_connectors(ShearConnectorInput(longitudinal_shear=2581))
        half = beam.shear_connectors(ShearConnectorInput(longitudinal_shear=2581,
                                                         connection_degree=0.5))
        assert half.count.per_half_span == math.ceil(0.5 * 2581 / full.stud.resistance)

    def test_short_stud_warns(self, beam):
        result = beam.shear_connectors(ShearConnectorInput(height=50, longitudinal_shear=1000))
        assert result.stud.alpha == 0.8
        assert result.status == DesignStatus.WARNING
        assert result.warnings


class TestDeflection:

    def test_reference_beam(self, beam):
        result = beam.deflection(BeamDeflectionInput(
            profile="IPE 360", concrete="C30/37", beff=2000, hc=100,
            span=8000, load=15, creep_coefficient=2.0,
        ))
        assert result.section.concrete_area == pytest.approx(314.286, abs=1e-3)
        assert result.section.inertia == pytest.approx(50122, rel=2e-3)
        assert result.instantaneous == pytest.approx(7.60, abs=0.02)
        assert result.with_creep == pytest.approx(2 * result.instantaneous)
        assert result.limit_l350 == pytest.approx(8000 / 350)
        assert result.status == DesignStatus.PASS

    def test_excessive(self, beam):
        result = beam.deflection(BeamDeflectionInput(
            profile="IPE 200", concrete="C30/37", beff=1000, hc=80,
            span=10000, load=20, creep_coefficient=2.0,
        ))
        assert result.status == DesignStatus.FAIL
        assert result.badge == "✗ Flèche excessive"


class TestVerticalShear:

    def test_resistance(self, beam):
        result = beam.shear_resistance(BeamShearInput(profile="IPE 360", steel="S355"))
        assert result.web_height == pytest.approx(334.6)
        assert result.shear_area == pytest.approx(2676.8)
        assert result.shear_resistance == pytest.approx(548.64, abs=0.01)
        assert result.status == DesignStatus.NOT_CHECKED

    @pytest.mark.parametrize("ved, status", [
        (200, DesignStatus.PASS),
        (300, DesignStatus.WARNING),
        (600, DesignStatus.FAIL),
    ])
    def test_verdict(self, beam, ved, status):
        result = beam.shear_resistance(BeamShearInput(profile="IPE 360", steel="S355",
                                                      design_shear=ved))
        assert result.status == status

    def test_interaction_warning(self, beam):
        result = beam.shear_resistance(BeamShearInput(profile="IPE 360", steel="S355",
                                                      design_shear=300))
        assert result.badge == "⚠ Interaction M-V"
        assert result.warnings
