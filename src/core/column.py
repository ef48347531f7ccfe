"""
Composite column calculations per EN 1994-1-1 6.7 (simplified method).

Implements:
- Plastic resistance to compression and steel contribution ratio
- Flexural buckling with the European buckling curves
- Compression and uniaxial bending (interaction polygon approximation)
- Fire resistance from tabulated data (EN 1994-1-2 4.2.3)

Section areas are in cm², forces in kN, moments in kN.m.
"""

import math

from src.codes.base_code import DesignCode
from src.codes.ec4 import EN1994, get_code
from src.core.steps import add_step
from src.models.inputs import (
    ColumnResistanceInput, BucklingInput, CombinedInput, ColumnFireInput, ColumnFireSection,
)
from src.models.outputs import (
    DesignStatus, ColumnResistanceOutput, BucklingOutput, CombinedOutput, ColumnFireOutput,
)
from src.utils.constants import (
    NPL_RK_FACTOR, NPM_RD_FACTOR, MAX_RELATIVE_SLENDERNESS, STEEL_CONTRIBUTION_RANGE,
    FIRE_RATINGS,
)

BADGE_OK = "✓ OK"
BADGE_FAIL = "✗ NON VÉRIFIÉ"


class CompositeColumnDesigner:
    """
    Axially loaded composite columns (encased or concrete filled).
    """

    def __init__(self, code: DesignCode = None):
        self.code: EN1994 = code or get_code()
        factors = self.code.get_partial_safety_factors()
        self.gamma_M0 = factors["gamma_M0"]
        self.gamma_C = factors["gamma_C"]
        self.gamma_S = factors["gamma_S"]

    def plastic_resistance(self, inp: ColumnResistanceInput) -> ColumnResistanceOutput:
        """Npl,Rd = Aa fyd + 0.85 Ac fcd + As fsd (EN 1994-1-1 6.7.3.2)."""
        steps = []
        profile = self.code.column_profiles[inp.profile]
        fy = self.code.column_steels[inp.steel].fy
        fck = self.code.column_concretes[inp.concrete].fck
        As = inp.rebar_area
        b, h = inp.b / 10, inp.h / 10  # cm

        fyd = fy / self.gamma_M0
        fcd = fck / self.gamma_C
        fsd = self.code.rebar_fsk / self.gamma_S

        Ac = add_step(steps, "Concrete area", "Ac = b h - Aa - As",
                      f"= {b:.1f} × {h:.1f} - {profile.Aa} - {As}", b * h - profile.Aa - As, "cm²")
        Na = add_step(steps, "Steel contribution", "Na = Aa fy / γM0",
                      f"= {profile.Aa} × {fy:.0f} / {self.gamma_M0} / 10",
                      profile.Aa * fyd / 10, "kN")
        Nc = add_step(steps, "Concrete contribution", "Nc = 0.85 Ac fck / γC",
                      f"= 0.85 × {Ac:.1f} × {fck:.0f} / {self.gamma_C} / 10",
                      0.85 * Ac * fcd / 10, "kN")
        Ns = add_step(steps, "Rebar contribution", "Ns = As fsk / γS",
                      f"= {As} × {self.code.rebar_fsk:.0f} / {self.gamma_S} / 10",
                      As * fsd / 10, "kN")
        NplRd = add_step(steps, "Plastic resistance", "Npl,Rd = Na + Nc + Ns",
                         f"= {Na:.0f} + {Nc:.0f} + {Ns:.0f}", Na + Nc + Ns, "kN",
                         "EN 1994-1-1 (6.30)")
        delta = add_step(steps, "Steel contribution ratio", "δ = Na / Npl,Rd",
                         f"= {Na:.0f} / {NplRd:.0f}", Na / NplRd, "", "EN 1994-1-1 6.7.1(4)")

        low, high = STEEL_CONTRIBUTION_RANGE
        delta_ok = low <= delta <= high
        warnings = []
        if not delta_ok:
            warnings.append(f"Le coefficient δ doit être entre {low} et {high}")

        return ColumnResistanceOutput(
            status=DesignStatus.PASS if delta_ok else DesignStatus.FAIL,
            badge=BADGE_OK if delta_ok else "✗ Hors limites",
            warnings=warnings,
            concrete_area=Ac,
            steel_contribution=Na,
            concrete_contribution=Nc,
            rebar_contribution=Ns,
            plastic_resistance=NplRd,
            contribution_ratio=delta,
            contribution_ok=delta_ok,
            calculation_steps=steps,
        )

    def buckling(self, inp: BucklingInput) -> BucklingOutput:
        """Nb,Rd = χ Npl,Rd with χ from the buckling curve (EN 1993-1-1 6.3.1.2)."""
        steps = []
        NplRd = inp.plastic_resistance
        EI = inp.effective_stiffness
        beta = inp.support.beta
        alpha = inp.curve.alpha

        Lcr = add_step(steps, "Buckling length", "Lcr = β L",
                       f"= {beta} × {inp.length}", beta * inp.length, "m")
        Ncr = add_step(steps, "Elastic critical force", "Ncr = π² (EI)eff / Lcr²",
                       f"= π² × {EI:.0f} / {Lcr:.2f}²", math.pi ** 2 * EI / Lcr ** 2, "kN")
        NplRk = NPL_RK_FACTOR * NplRd
        lam = add_step(steps, "Relative slenderness", "λ̄ = √(Npl,Rk / Ncr)",
                       f"= √({NplRk:.0f} / {Ncr:.0f})", math.sqrt(NplRk / Ncr), "",
                       "EN 1994-1-1 (6.39)")
        phi = add_step(steps, "Buckling parameter", "Φ = 0.5 [1 + α(λ̄ - 0.2) + λ̄²]",
                       f"= 0.5 × [1 + {alpha} × ({lam:.3f} - 0.2) + {lam:.3f}²]",
                       0.5 * (1 + alpha * (lam - 0.2) + lam ** 2), "")
        chi = add_step(steps, "Reduction factor", "χ = 1 / (Φ + √(Φ² - λ̄²)) ≤ 1",
                       f"= 1 / ({phi:.3f} + √({phi:.3f}² - {lam:.3f}²))",
                       min(1.0, 1 / (phi + math.sqrt(phi ** 2 - lam ** 2))), "",
                       "EN 1993-1-1 (6.49)")
        NbRd = add_step(steps, "Buckling resistance", "Nb,Rd = χ Npl,Rd",
                        f"= {chi:.3f} × {NplRd:.0f}", chi * NplRd, "kN")

        utilization = inp.design_axial / NbRd
        slenderness_ok = lam <= MAX_RELATIVE_SLENDERNESS
        warnings = []
        if not slenderness_ok:
            warnings.append(f"λ̄ > {MAX_RELATIVE_SLENDERNESS} : hors du domaine de la méthode simplifiée")

        if utilization > 1.0:
            status, badge = DesignStatus.FAIL, BADGE_FAIL
        elif not slenderness_ok:
            status, badge = DesignStatus.WARNING, f"⚠ λ̄ > {MAX_RELATIVE_SLENDERNESS}"
        else:
            status, badge = DesignStatus.PASS, BADGE_OK

        return BucklingOutput(
            status=status,
            badge=badge,
            utilization=utilization,
            warnings=warnings,
            buckling_length=Lcr,
            critical_load=Ncr,
            relative_slenderness=lam,
            slenderness_ok=slenderness_ok,
            phi=phi,
            chi=chi,
            buckling_resistance=NbRd,
            imperfection=alpha,
            calculation_steps=steps,
        )

    def combined(self, inp: CombinedInput) -> CombinedOutput:
        """MEd ≤ αM μd Mpl,Rd (EN 1994-1-1 6.7.3.6)."""
        steps = []
        NplRd = inp.plastic_resistance
        MplRd = inp.plastic_moment
        NEd = inp.design_axial

        NpmRd = add_step(steps, "Concrete resistance", "Npm,Rd ≈ 0.35 Npl,Rd",
                         f"= {NPM_RD_FACTOR} × {NplRd:.0f}", NPM_RD_FACTOR * NplRd, "kN")
        axial_ratio = NEd / NplRd

        if axial_ratio >= 1.0:
            # section fully used by the axial force
            return CombinedOutput(
                status=DesignStatus.FAIL,
                badge=BADGE_FAIL,
                utilization=math.inf,
                warnings=["NEd ≥ Npl,Rd : la section est ruinée en compression"],
                concrete_resistance=NpmRd,
                axial_ratio=axial_ratio,
                mu_d=0.0,
                reduced_moment=0.0,
                allowable_moment=0.0,
                calculation_steps=steps,
            )

        mu_d = add_step(steps, "Moment ratio", "μd = (1 - NEd/Npl,Rd) / (1 - Npm,Rd/(2 Npl,Rd)) ≤ 1",
                        f"= (1 - {axial_ratio:.3f}) / (1 - {NpmRd:.0f}/(2 × {NplRd:.0f}))",
                        min(1.0, (1 - axial_ratio) / (1 - NpmRd / (2 * NplRd))), "")
        MplNRd = add_step(steps, "Reduced moment resistance", "Mpl,N,Rd = μd Mpl,Rd",
                          f"= {mu_d:.3f} × {MplRd:.1f}", mu_d * MplRd, "kN.m")
        allowable = add_step(steps, "Allowable moment", "αM Mpl,N,Rd",
                             f"= {inp.alpha_m} × {MplNRd:.1f}", inp.alpha_m * MplNRd, "kN.m",
                             "EN 1994-1-1 (6.46)")

        utilization = inp.design_moment / allowable
        ok = utilization <= 1.0
        return CombinedOutput(
            status=DesignStatus.PASS if ok else DesignStatus.FAIL,
            badge=BADGE_OK if ok else BADGE_FAIL,
            utilization=utilization,
            concrete_resistance=NpmRd,
            axial_ratio=axial_ratio,
            mu_d=mu_d,
            reduced_moment=MplNRd,
            allowable_moment=allowable,
            calculation_steps=steps,
        )

    def fire_resistance(self, inp: ColumnFireInput) -> ColumnFireOutput:
        """Highest tabulated rating reached by the section dimension and cover."""
        section = inp.section_type
        requirements = self.code.column_fire_dimensions(section.value)
        covers = self.code.column_fire_covers()
        encased = section == ColumnFireSection.ENCASED
        steps = []

        achieved = "R0"
        for rating in FIRE_RATINGS:
            if inp.dimension >= requirements[rating]:
                if not encased or inp.cover >= covers[rating]:
                    achieved = rating

        if achieved != "R0":
            add_step(steps, f"Minimum dimension for {achieved}", "b ≥ bmin",
                     f"{inp.dimension:g} ≥ {requirements[achieved]:g}", requirements[achieved],
                     "mm", "EN 1994-1-2 4.2.3")
            if encased:
                add_step(steps, f"Minimum cover for {achieved}", "c ≥ cmin",
                         f"{inp.cover:g} ≥ {covers[achieved]:g}", covers[achieved], "mm")

        max_level = self.code.column_fire_max_load_level
        add_step(steps, "Load level in fire", "μfi = Efi,d / Rd",
                 f"= {inp.load_level:g} (max {max_level:g})", inp.load_level)
        load_level_ok = inp.load_level <= max_level
        warnings = []
        if not load_level_ok:
            warnings.append(f"μfi > {max_level} : vérification détaillée requise")

        if inp.required_rating is not None:
            target = inp.required_rating.value
            reached = achieved != "R0" and FIRE_RATINGS.index(achieved) >= FIRE_RATINGS.index(target)
        else:
            target = None
            reached = achieved != "R0"

        if not reached:
            status = DesignStatus.FAIL
            badge = f"✗ {achieved}" + (f" < {target}" if target else "")
        elif not load_level_ok:
            status, badge = DesignStatus.WARNING, f"⚠ {achieved}"
        else:
            status, badge = DesignStatus.PASS, f"✓ {achieved}"

        return ColumnFireOutput(
            status=status,
            badge=badge,
            warnings=warnings,
            section_type=section.value,
            dimension=inp.dimension,
            cover=inp.cover,
            achieved_rating=achieved,
            load_level=inp.load_level,
            load_level_ok=load_level_ok,
            requirements={k: float(v) for k, v in requirements.items()},
            calculation_steps=steps,
        )
