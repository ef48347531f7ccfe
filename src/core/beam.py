"""
Composite beam calculations per EN 1994-1-1.

Implements:
- Effective width of the concrete flange (5.4.1.2)
- Modular ratios, short and long term (5.4.2.2)
- Plastic sagging resistance with the PNA in the slab, top flange or web (6.2.1.2)
- Headed stud resistance and number of connectors (6.6.3.1)
- Transformed section and deflection at SLS (7.3)
- Vertical shear resistance of the steel web (6.2.2, EN 1993-1-1 6.2.6)

Profile areas and inertias are in cm² / cm⁴ as in the steel tables,
all other lengths in mm.
"""

import math

from src.codes.base_code import DesignCode
from src.codes.ec4 import EN1994, get_code
from src.core.steps import BADGE_OK, BADGE_FAIL, BADGE_NOT_CHECKED, add_step, ratio_verdict
from src.models.inputs import (
    EffectiveWidthInput, ModularRatioInput, PlasticForcesInput, BeamMomentInput,
    ShearConnectorInput, CompositeSectionInput, BeamDeflectionInput, BeamShearInput,
)
from src.models.outputs import (
    DesignStatus, EffectiveWidthOutput, ModularRatioOutput, PlasticForcesOutput,
    BeamMomentOutput, StudResistanceOutput, StudCountOutput, ConnectorOutput,
    TransformedSectionOutput, BeamDeflectionOutput, BeamShearOutput,
)
from src.utils.constants import EFFECTIVE_LENGTH_FACTORS, MAX_STUD_SPACING


class CompositeBeamDesigner:
    """
    Design checks of a simply supported composite beam.
    """

    def __init__(self, code: DesignCode = None):
        self.code: EN1994 = code or get_code()
        factors = self.code.get_partial_safety_factors()
        self.gamma_M0 = factors["gamma_M0"]
        self.gamma_C = factors["gamma_C"]
        self.gamma_V = factors["gamma_V"]
        self.alpha_cc = factors["alpha_cc"]

    # -- section properties --------------------------------------------------

    def effective_width(self, inp: EffectiveWidthInput) -> EffectiveWidthOutput:
        Le = EFFECTIVE_LENGTH_FACTORS[inp.support.value] * inp.span
        bei = min(Le / 8, inp.spacing / 2)
        beff = min(2 * bei, inp.spacing)
        return EffectiveWidthOutput(
            equivalent_span=Le,
            half_width=bei,
            effective_width=beff,
            limit=inp.spacing,
        )

    def modular_ratio(self, inp: ModularRatioInput) -> ModularRatioOutput:
        """n0 = Ea/Ecm and nL = n0 (1 + psiL phi_t)."""
        Ecm = self.code.beam_concretes[inp.concrete].Ecm
        n0 = self.code.Ea / Ecm
        return ModularRatioOutput(
            n0=n0,
            nL=n0 * (1 + inp.psi_l * inp.creep_coefficient),
            Ecm=Ecm,
        )

    def plastic_forces(self, inp: PlasticForcesInput) -> PlasticForcesOutput:
        profile = self.code.beam_profiles[inp.profile]
        fyd = self.code.beam_steels[inp.steel].fy / self.gamma_M0
        fcd = self.alpha_cc * self.code.beam_concretes[inp.concrete].fck / self.gamma_C
        return PlasticForcesOutput(
            steel_force=(profile.Aa * 1e-4) * (fyd * 1e3),
            concrete_force=0.85 * fcd * inp.beff * inp.hc * 1e-3,
            fyd=fyd,
            fcd=fcd,
            steel_area=profile.Aa,
        )

    # -- ULS -----------------------------------------------------------------

    def moment_resistance(self, inp: BeamMomentInput) -> BeamMomentOutput:
        """
        Plastic sagging resistance MplRd with full shear connection.

        The plastic neutral axis is located by comparing the steel tension
        Napl with the concrete compression Ncf, then with the top flange.
        """
        steps = []
        profile = self.code.beam_profiles[inp.profile]
        forces = self.plastic_forces(inp)
        Napl, Ncf = forces.steel_force, forces.concrete_force
        fyd, fcd = forces.fyd, forces.fcd
        ha, bf, tf, tw = profile.ha, profile.bf, profile.tf, profile.tw
        hc, hp = inp.hc, inp.hp

        add_step(steps, "Plastic resistance of the steel profile", "Na,pl = Aa × fyd",
                 f"= {profile.Aa} cm² × {fyd:.0f} MPa", Napl, "kN")
        add_step(steps, "Compression resistance of the slab", "Nc,f = 0.85 fcd beff hc",
                 f"= 0.85 × {fcd:.2f} × {inp.beff:.0f} × {hc:.0f} × 10⁻³", Ncf, "kN")

        if Ncf >= Napl:
            position = "slab"
            zpl = add_step(steps, "PNA depth in the slab", "zpl = Na,pl / (0.85 fcd beff)",
                           f"= {Napl:.1f} / (0.85 × {fcd:.2f} × {inp.beff:.0f}) × 1000",
                           Napl / (0.85 * fcd * inp.beff) * 1000, "mm",
                           "EN 1994-1-1 6.2.1.2")
            lever_arm = add_step(steps, "Lever arm", "d = ha/2 + hc + hp - zpl/2",
                                 f"= {ha / 2:.1f} + {hc:.0f} + {hp:.0f} - {zpl:.2f}/2",
                                 ha / 2 + hc + hp - zpl / 2, "mm")
            MplRd = Napl * lever_arm / 1000
            formula, subst = "MplRd = Na,pl × d", f"= {Napl:.1f} × {lever_arm:.1f} / 1000"
        else:
            delta_F = Napl - Ncf
            Nf = 2 * bf * tf * fyd * 1e-3
            MaplRd = profile.Wply * fyd * 1e-3
            d1 = ha / 2 + hp + hc / 2
            if delta_F <= Nf:
                position = "top_flange"
                zpl = add_step(steps, "PNA depth in the top flange",
                               "zpl = (Na,pl - Nc,f) / (2 bf fyd)",
                               f"= {delta_F:.1f} / (2 × {bf:.0f} × {fyd:.0f} × 10⁻³)",
                               delta_F / (2 * bf * fyd * 1e-3), "mm")
                MplRd = (MaplRd + Ncf * d1 / 1000
                         - (delta_F / 2) ** 2 / (2 * bf * fyd * 1e-3) / 1000)
                formula = "MplRd = Mapl,Rd + Nc,f d1 - (ΔF/2)² / (2 bf fyd)"
            else:
                position = "web"
                zpl = add_step(steps, "PNA depth in the web",
                               "zpl = tf + (ΔF - Nf) / (2 tw fyd)",
                               f"= {tf} + {delta_F - Nf:.1f} / (2 × {tw} × {fyd:.0f} × 10⁻³)",
                               tf + (delta_F - Nf) / (2 * tw * fyd * 1e-3), "mm")
                MplRd = MaplRd + Ncf * d1 / 1000
                formula = "MplRd = Mapl,Rd + Nc,f d1"
            subst = f"= {MaplRd:.1f} + {Ncf:.1f} × {d1:.1f} / 1000"
            lever_arm = MplRd * 1000 / Napl

        add_step(steps, "Plastic moment resistance", formula, subst, MplRd, "kN.m",
                 "EN 1994-1-1 6.2.1.2")

        design_moment = inp.design_moment or 0.0
        status, badge, utilization = ratio_verdict(design_moment, MplRd)
        return BeamMomentOutput(
            status=status,
            badge=badge,
            utilization=utilization,
            steel_force=Napl,
            concrete_force=Ncf,
            pna_position=position,
            pna_depth=zpl,
            lever_arm=lever_arm,
            moment_resistance=MplRd,
            design_moment=design_moment,
            calculation_steps=steps,
        )

    def stud_resistance(
        self,
        diameter: float,  # d (mm)
        height: float,    # hsc (mm)
        fu: float,        # MPa
        concrete: str,
    ) -> StudResistanceOutput:
        """PRd = min(steel shank failure, concrete crushing)."""
        props = self.code.beam_concretes[concrete]
        ratio = height / diameter
        if ratio >= 4:
            alpha = 1.0
        elif ratio >= 3:
            alpha = 0.2 * (ratio + 1)
        else:
            alpha = 0.8

        PRd1 = (0.8 * fu * math.pi * diameter ** 2 / 4) / (self.gamma_V * 1000)
        PRd2 = (0.29 * alpha * diameter ** 2 * math.sqrt(props.fck * props.Ecm)) / (self.gamma_V * 1000)
        return StudResistanceOutput(
            steel_failure=PRd1,
            concrete_failure=PRd2,
            resistance=min(PRd1, PRd2),
            alpha=alpha,
            failure_mode="steel" if PRd1 < PRd2 else "concrete",
        )

    def stud_count(
        self,
        longitudinal_shear: float,  # Vl (kN)
        resistance: float,          # PRd (kN)
        connection_degree: float = 1.0,
    ) -> StudCountOutput:
        n = math.ceil(connection_degree * longitudinal_shear / resistance)
        return StudCountOutput(per_half_span=n, total=2 * n, max_spacing=MAX_STUD_SPACING)

    def shear_connectors(self, inp: ShearConnectorInput) -> ConnectorOutput:
        steps = []
        stud = self.stud_resistance(inp.diameter, inp.height, inp.fu, inp.concrete)
        count = self.stud_count(inp.longitudinal_shear, stud.resistance, inp.connection_degree)
        concrete = self.code.beam_concretes[inp.concrete]

        add_step(steps, "Reduction factor", "α = f(hsc/d)",
                 f"hsc/d = {inp.height:.0f}/{inp.diameter:.0f} = {inp.height / inp.diameter:.2f}",
                 stud.alpha, "", "EN 1994-1-1 6.6.3.1")
        add_step(steps, "Shank failure", "PRd,1 = 0.8 fu π d²/4 / γV",
                 f"= 0.8 × {inp.fu:.0f} × π × {inp.diameter:.0f}²/4 / {self.gamma_V}",
                 stud.steel_failure, "kN", "EN 1994-1-1 (6.18)")
        add_step(steps, "Concrete failure", "PRd,2 = 0.29 α d² √(fck Ecm) / γV",
                 f"= 0.29 × {stud.alpha:.2f} × {inp.diameter:.0f}² × √({concrete.fck:.0f} × "
                 f"{concrete.Ecm:.0f}) / {self.gamma_V}",
                 stud.concrete_failure, "kN", "EN 1994-1-1 (6.19)")
        add_step(steps, "Studs per half span", "n = ⌈η Vl / PRd⌉",
                 f"= ⌈{inp.connection_degree} × {inp.longitudinal_shear:.0f} / {stud.resistance:.2f}⌉",
                 count.per_half_span, "")

        warnings = []
        if inp.height / inp.diameter < 3:
            warnings.append("hsc/d < 3 : goujon trop court (EN 1994-1-1 6.6.3.1)")

        return ConnectorOutput(
            status=DesignStatus.WARNING if warnings else DesignStatus.PASS,
            badge=f"{count.total} goujons",
            warnings=warnings,
            stud=stud,
            count=count,
            longitudinal_shear=inp.longitudinal_shear,
            calculation_steps=steps,
        )

    def shear_resistance(self, inp: BeamShearInput) -> BeamShearOutput:
        """Plastic shear resistance of the web, Av = hw tw."""
        steps = []
        profile = self.code.beam_profiles[inp.profile]
        fyd = self.code.beam_steels[inp.steel].fy / self.gamma_M0

        hw = add_step(steps, "Web height", "hw = ha - 2 tf",
                      f"= {profile.ha:.0f} - 2 × {profile.tf}", profile.ha - 2 * profile.tf, "mm")
        Av = add_step(steps, "Shear area", "Av = hw × tw",
                      f"= {hw:.1f} × {profile.tw}", hw * profile.tw, "mm²")
        VplRd = add_step(steps, "Plastic shear resistance", "Vpl,Rd = Av fyd / √3",
                         f"= {Av:.0f} × {fyd:.0f} / √3 / 1000",
                         Av * fyd / math.sqrt(3) / 1000, "kN", "EN 1993-1-1 6.2.6")

        warnings = []
        if not inp.design_shear:
            status, badge, utilization = DesignStatus.NOT_CHECKED, BADGE_NOT_CHECKED, None
        else:
            utilization = inp.design_shear / VplRd
            if utilization > 1.0:
                status, badge = DesignStatus.FAIL, BADGE_FAIL
            elif utilization > 0.5:
                status, badge = DesignStatus.WARNING, "⚠ Interaction M-V"
                warnings.append("VEd > 0,5 Vpl,Rd : réduire le moment résistant (EN 1994-1-1 6.2.2.4)")
            else:
                status, badge = DesignStatus.PASS, BADGE_OK

        return BeamShearOutput(
            status=status,
            badge=badge,
            utilization=utilization,
            warnings=warnings,
            web_height=hw,
            shear_area=Av,
            shear_resistance=VplRd,
            design_shear=inp.design_shear or 0.0,
            calculation_steps=steps,
        )

    # -- SLS -----------------------------------------------------------------

    def transformed_section(self, inp: CompositeSectionInput) -> TransformedSectionOutput:
        """Uncracked section homogenised with the short-term ratio n0."""
        profile = self.code.beam_profiles[inp.profile]
        n = self.code.Ea / self.code.beam_concretes[inp.concrete].Ecm

        Aa = profile.Aa
        Aceq = inp.beff * inp.hc / (n * 100)
        Atot = Aa + Aceq

        # centroids from the bottom of the profile (mm)
        ya = profile.ha / 2
        yc = profile.ha + inp.hp + inp.hc / 2
        yG = (Aa * ya + Aceq * yc) / Atot

        Ic = inp.beff * inp.hc ** 3 / (12 * n) / 1e4
        Ieq = (profile.Iy + Aa * ((yG - ya) / 10) ** 2
               + Ic + Aceq * ((yc - yG) / 10) ** 2)

        return TransformedSectionOutput(
            modular_ratio=n,
            steel_area=Aa,
            concrete_area=Aceq,
            total_area=Atot,
            centroid=yG,
            inertia=Ieq,
            steel_centroid=ya,
            concrete_centroid=yc,
        )

    def deflection(self, inp: BeamDeflectionInput) -> BeamDeflectionOutput:
        steps = []
        section = self.transformed_section(inp)
        Ea = self.code.Ea
        L = inp.span
        q = inp.load

        add_step(steps, "Equivalent inertia", "Ieq = Ia + Aa(yG-ya)² + Ic/n + Ac,eq(yc-yG)²",
                 f"n = {section.modular_ratio:.2f}, yG = {section.centroid:.1f} mm",
                 section.inertia, "cm⁴", "EN 1994-1-1 5.4.2.2")
        delta = add_step(steps, "Instantaneous deflection", "δ = 5 q L⁴ / (384 Ea Ieq)",
                         f"= 5 × {q} × {L:.0f}⁴ / (384 × {Ea:.0f} × {section.inertia:.0f} × 10⁴)",
                         5 * q * L ** 4 / (384 * Ea * section.inertia * 1e4), "mm")
        delta_creep = add_step(steps, "Deflection with creep", "δ∞ = δ (1 + 0.5 φt)",
                               f"= {delta:.2f} × (1 + 0.5 × {inp.creep_coefficient})",
                               delta * (1 + 0.5 * inp.creep_coefficient), "mm")

        instantaneous_ok = delta <= L / 350
        total_ok = delta_creep <= L / 250
        ok = instantaneous_ok and total_ok
        return BeamDeflectionOutput(
            status=DesignStatus.PASS if ok else DesignStatus.FAIL,
            badge=BADGE_OK if ok else "✗ Flèche excessive",
            utilization=max(delta / (L / 350), delta_creep / (L / 250)),
            section=section,
            instantaneous=delta,
            with_creep=delta_creep,
            limit_l250=L / 250,
            limit_l300=L / 300,
            limit_l350=L / 350,
            instantaneous_ok=instantaneous_ok,
            total_ok=total_ok,
            calculation_steps=steps,
        )
