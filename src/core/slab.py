"""
Composite slab calculations per EN 1994-1-1 (profiled steel deck).

All checks are made on a 1 m wide strip:
- Construction stage (deck as formwork): bending and deflection, 9.3
- Sagging resistance with full shear connection, 9.7.2
- Vertical shear resistance, 9.7.5
- Serviceability: deflection and natural frequency, 9.8
- Fire resistance with rebar in the ribs (EN 1994-1-2 tabulated data)
"""

import math

from src.codes.base_code import DesignCode
from src.codes.ec4 import EN1994, get_code
from src.core.steps import BADGE_OK, add_step, ratio_verdict
from src.models.inputs import (
    ConstructionStageInput, SlabBendingInput, SlabShearInput,
    SlabDeflectionInput, SlabFireInput,
)
from src.models.outputs import (
    DesignStatus, ConstructionStageOutput, SlabBendingOutput, SlabShearOutput,
    SlabDeflectionOutput, SlabFireOutput,
)
from src.utils.constants import (
    CONCRETE_UNIT_WEIGHT, GRAVITY, SLAB_STRIP_WIDTH, DECK_CENTROID_OFFSET,
    SHEAR_DEPTH_OFFSET, SLAB_SHEAR_KV, GAMMA_G, GAMMA_Q, MIN_FLOOR_FREQUENCY,
    FIRE_REBAR_RIB_DEPTH, FIRE_REBAR_COVER, FIRE_RIBS_PER_METRE, FIRE_BAR_SELECTION,
)


class CompositeSlabDesigner:
    """
    Checks of a composite slab on a profiled steel deck.

    Each method takes a validated input model and returns an output model;
    nothing is stored between calls.
    """

    def __init__(self, code: DesignCode = None):
        self.code: EN1994 = code or get_code()

    def _self_weight(self, deck, ht: float) -> tuple[float, float]:
        """Deck and concrete self weight (kN/m²)."""
        return deck.weight / 100, CONCRETE_UNIT_WEIGHT * ht / 1000

    def construction_stage(self, inp: ConstructionStageInput) -> ConstructionStageOutput:
        """Bare deck carrying wet concrete and the construction load."""
        steps = []
        deck = self.code.decks[inp.deck]
        Ea = self.code.Ea
        span = inp.span
        q = inp.construction_load

        ht = add_step(steps, "Total slab depth", "ht = hp + hc",
                      f"= {deck.hp:.0f} + {inp.hc:.0f}", deck.hp + inp.hc, "mm")

        g_deck, g_conc = self._self_weight(deck, ht)
        g = add_step(steps, "Permanent load (deck + wet concrete)",
                     "g = weight/100 + 25 × ht/1000",
                     f"= {g_deck:.3f} + {g_conc:.3f}", g_deck + g_conc, "kN/m²")

        p = add_step(steps, "ULS load", "p = 1.35 g + 1.5 q",
                     f"= {GAMMA_G} × {g:.3f} + {GAMMA_Q} × {q:.2f}",
                     GAMMA_G * g + GAMMA_Q * q, "kN/m²", "EN 1990 6.10")

        L = span / 1000
        MEd = add_step(steps, "Design moment (simply supported)", "MEd = p L² / 8",
                       f"= {p:.3f} × {L:.2f}² / 8", p * L ** 2 / 8, "kN.m/m")
        MRd = deck.Mpa
        utilization = MEd / MRd
        add_step(steps, "Bending utilization", "MEd / MRd",
                 f"= {MEd:.2f} / {MRd:.2f}", utilization, "", "EN 1994-1-1 9.3")

        delta = add_step(steps, "Deflection under wet concrete",
                         "δ = 5 g L⁴ / (384 Ea Ip)",
                         f"= 5 × {g:.3f} × {span:.0f}⁴ / (384 × {Ea:.0f} × {deck.Ip:.0f})",
                         5 * g * span ** 4 / (384 * Ea * deck.Ip), "mm")
        delta_lim = add_step(steps, "Deflection limit", "min(L/180, L/150 + 10)",
                             f"= min({span / 180:.1f}, {span / 150 + 10:.1f})",
                             min(span / 180, span / 150 + 10), "mm", "EN 1994-1-1 9.6")

        bending_ok = utilization <= 1.0
        deflection_ok = delta <= delta_lim
        if bending_ok and deflection_ok:
            status, badge = DesignStatus.PASS, BADGE_OK
        elif not bending_ok:
            status, badge = DesignStatus.FAIL, "✗ Étaiement requis"
        else:
            status, badge = DesignStatus.FAIL, "✗ Flèche excessive"

        return ConstructionStageOutput(
            status=status,
            badge=badge,
            utilization=utilization,
            total_depth=ht,
            permanent_load=g,
            uls_load=p,
            design_moment=MEd,
            moment_resistance=MRd,
            bending_ok=bending_ok,
            deflection=delta,
            deflection_limit=delta_lim,
            deflection_ok=deflection_ok,
            calculation_steps=steps,
        )

    def bending_resistance(self, inp: SlabBendingInput) -> SlabBendingOutput:
        """Plastic sagging resistance, PNA in the concrete or in the deck."""
        steps = []
        deck = self.code.decks[inp.deck]
        concrete = self.code.slab_concretes[inp.concrete]
        fcd = concrete.fcd
        fyp = self.code.deck_fyp
        b = SLAB_STRIP_WIDTH
        hc = inp.hc
        ht = deck.hp + hc

        Npa = add_step(steps, "Tension in the deck", "Npa = Ap × fyp / 1000",
                       f"= {deck.Ap:.0f} × {fyp:.0f} / 1000", deck.Ap * fyp / 1000, "kN/m")
        Ncf = add_step(steps, "Compression capacity of the concrete",
                       "Ncf = 0.85 fcd b hc / 1000",
                       f"= 0.85 × {fcd} × {b:.0f} × {hc:.0f} / 1000",
                       0.85 * fcd * b * hc / 1000, "kN/m")

        pna_in_concrete = Ncf >= Npa
        if pna_in_concrete:
            xpl = add_step(steps, "PNA depth (in concrete)", "xpl = Npa × 1000 / (0.85 fcd b)",
                           f"= {Npa:.2f} × 1000 / (0.85 × {fcd} × {b:.0f})",
                           Npa * 1000 / (0.85 * fcd * b), "mm", "EN 1994-1-1 9.7.2")
            z = add_step(steps, "Lever arm", "z = ht - xpl/2 - e",
                         f"= {ht:.0f} - {xpl:.2f}/2 - {DECK_CENTROID_OFFSET:.0f}",
                         ht - xpl / 2 - DECK_CENTROID_OFFSET, "mm")
            M = Npa * z / 1000
            formula, subst = "MplRd = Npa × z / 1000", f"= {Npa:.2f} × {z:.2f} / 1000"
        else:
            xpl = hc
            z = add_step(steps, "Lever arm (PNA in deck)", "z = ht - hc/2 - e",
                         f"= {ht:.0f} - {hc:.0f}/2 - {DECK_CENTROID_OFFSET:.0f}",
                         ht - hc / 2 - DECK_CENTROID_OFFSET, "mm")
            M = Ncf * z / 1000
            formula, subst = "MplRd = Ncf × z / 1000", f"= {Ncf:.2f} × {z:.2f} / 1000"
        add_step(steps, "Plastic moment resistance", formula, subst, M, "kN.m/m",
                 "EN 1994-1-1 9.7.2(5)")

        status, badge, utilization = ratio_verdict(inp.design_moment, M)
        return SlabBendingOutput(
            status=status,
            badge=badge,
            utilization=utilization,
            total_depth=ht,
            deck_tension=Npa,
            concrete_compression=Ncf,
            pna_in_concrete=pna_in_concrete,
            pna_depth=xpl,
            lever_arm=z,
            moment_resistance=M,
            design_moment=inp.design_moment,
            calculation_steps=steps,
        )

    def vertical_shear(self, inp: SlabShearInput) -> SlabShearOutput:
        steps = []
        deck = self.code.decks[inp.deck]
        fck = self.code.slab_concretes[inp.concrete].fck
        ht = deck.hp + inp.hc

        dp = add_step(steps, "Effective depth", "dp = ht - 20",
                      f"= {ht:.0f} - {SHEAR_DEPTH_OFFSET:.0f}", ht - SHEAR_DEPTH_OFFSET, "mm")
        nr = add_step(steps, "Ribs per metre", "nr = 1000 / br",
                      f"= 1000 / {deck.br:.0f}", SLAB_STRIP_WIDTH / deck.br, "")
        VRd = add_step(steps, "Vertical shear resistance",
                       "VRd = nr × b0 × dp × kv × √fck / 1000",
                       f"= {nr:.3f} × {deck.b0:.0f} × {dp:.0f} × {SLAB_SHEAR_KV} × √{fck:.0f} / 1000",
                       nr * deck.b0 * dp * SLAB_SHEAR_KV * math.sqrt(fck) / 1000,
                       "kN/m", "EN 1994-1-1 9.7.5")

        status, badge, utilization = ratio_verdict(inp.design_shear, VRd)
        return SlabShearOutput(
            status=status,
            badge=badge,
            utilization=utilization,
            effective_depth=dp,
            ribs_per_metre=nr,
            shear_resistance=VRd,
            design_shear=inp.design_shear,
            calculation_steps=steps,
        )

    def deflection(self, inp: SlabDeflectionInput) -> SlabDeflectionOutput:
        """Deflection of the composite slab and first natural frequency."""
        steps = []
        deck = self.code.decks[inp.deck]
        concrete = self.code.slab_concretes[inp.concrete]
        Ea = self.code.Ea
        hc = inp.hc
        span = inp.span
        ht = deck.hp + hc
        L = span / 1000

        n0 = add_step(steps, "Modular ratio", "n0 = Ea / Ecm",
                      f"= {Ea:.0f} / {concrete.Ecm:.0f}", Ea / concrete.Ecm, "")
        Ic = SLAB_STRIP_WIDTH * hc ** 3 / 12
        Ieq = add_step(steps, "Equivalent inertia",
                       "Ieq = Ip + (b hc³/12)/n0 + Ap (ht/2)²/n0",
                       f"= {deck.Ip:.0f} + {Ic:.0f}/{n0:.2f} + {deck.Ap:.0f} × {ht / 2:.1f}²/{n0:.2f}",
                       deck.Ip + Ic / n0 + deck.Ap * (ht / 2) ** 2 / n0, "mm⁴/m")

        g_deck, g_conc = self._self_weight(deck, ht)
        g_tot = add_step(steps, "Permanent load", "g = g_deck + g_concrete + g_extra",
                         f"= {g_deck:.3f} + {g_conc:.3f} + {inp.extra_permanent_load:.2f}",
                         g_deck + g_conc + inp.extra_permanent_load, "kN/m²")
        q_tot = g_tot + inp.imposed_load

        delta = add_step(steps, "Deflection", "δ = 5 (g + q) L⁴ / (384 Ea Ieq)",
                         f"= 5 × {q_tot:.3f} × {span:.0f}⁴ / (384 × {Ea:.0f} × {Ieq:.0f})",
                         5 * q_tot * span ** 4 / (384 * Ea * Ieq), "mm")
        delta_lim = add_step(steps, "Deflection limit", "L / 250",
                             f"= {span:.0f} / 250", span / 250, "mm", "EN 1994-1-1 9.8.2")

        m = g_tot * 100 / GRAVITY
        f1 = add_step(steps, "Natural frequency", "f1 = π/(2L²) × √(Ea Ieq / (m × 10⁶))",
                      f"= π/(2 × {L:.2f}²) × √({Ea:.0f} × {Ieq:.0f} / ({m:.1f} × 10⁶))",
                      math.pi / (2 * L ** 2) * math.sqrt(Ea * Ieq / (m * 1e6)), "Hz")

        deflection_ok = delta <= delta_lim
        frequency_ok = f1 >= MIN_FLOOR_FREQUENCY
        if deflection_ok and frequency_ok:
            status, badge = DesignStatus.PASS, BADGE_OK
        elif deflection_ok:
            status, badge = DesignStatus.FAIL, "✗ Vibrations"
        else:
            status, badge = DesignStatus.FAIL, "✗ Flèche excessive"

        return SlabDeflectionOutput(
            status=status,
            badge=badge,
            utilization=delta / delta_lim,
            modular_ratio=n0,
            equivalent_inertia=Ieq,
            permanent_load=g_tot,
            total_load=q_tot,
            deflection=delta,
            deflection_limit=delta_lim,
            deflection_ok=deflection_ok,
            natural_frequency=f1,
            frequency_ok=frequency_ok,
            calculation_steps=steps,
        )

    def fire_resistance(self, inp: SlabFireInput) -> SlabFireOutput:
        """Rebar required in the ribs for the fire rating, plus minimum thickness."""
        steps = []
        rating = inp.rating.value
        req = self.code.slab_fire_requirement(rating)
        fsk = self.code.rebar_fsk
        hc = inp.hc
        L = inp.span / 1000

        q_fi = add_step(steps, "Fire load combination", "q_fi = g + ψ1 q",
                        f"= {inp.permanent_load:.2f} + {req['psi1']} × {inp.imposed_load:.2f}",
                        inp.permanent_load + req["psi1"] * inp.imposed_load, "kN/m²",
                        "EN 1990 6.11b")
        M_fi = add_step(steps, "Moment in fire", "M_fi = q_fi L² / 8",
                        f"= {q_fi:.2f} × {L:.2f}² / 8", q_fi * L ** 2 / 8, "kN.m/m")
        ds = add_step(steps, "Rebar depth", "ds = hc + 60 - 20",
                      f"= {hc:.0f} + {FIRE_REBAR_RIB_DEPTH:.0f} - {FIRE_REBAR_COVER:.0f}",
                      hc + FIRE_REBAR_RIB_DEPTH - FIRE_REBAR_COVER, "mm")
        As_req = add_step(steps, "Required rebar", "As = M_fi × 10⁶ / (0.9 ds fsk)",
                          f"= {M_fi:.2f} × 10⁶ / (0.9 × {ds:.0f} × {fsk:.0f})",
                          M_fi * 1e6 / (0.9 * ds * fsk), "mm²/m")

        for threshold, diameter, per_rib in FIRE_BAR_SELECTION:
            if As_req <= threshold:
                break
        As_prov = add_step(steps, "Provided rebar", "As = n π d²/4 × ribs",
                           f"= {per_rib} × π × {diameter}²/4 × {FIRE_RIBS_PER_METRE}",
                           per_rib * math.pi * diameter ** 2 / 4 * FIRE_RIBS_PER_METRE, "mm²/m")

        hc_min = float(req["hc_min"])
        thickness_ok = hc >= hc_min
        steel_ok = As_prov >= As_req
        if thickness_ok and steel_ok:
            status, badge = DesignStatus.PASS, f"✓ {rating} vérifié"
        elif thickness_ok:
            status, badge = DesignStatus.FAIL, "✗ Armatures insuffisantes"
        else:
            status, badge = DesignStatus.FAIL, "✗ hc insuffisant"

        warnings = []
        if not thickness_ok:
            warnings.append(f"Épaisseur hc = {hc:.0f} mm < {hc_min:.0f} mm requis pour {rating}")

        return SlabFireOutput(
            status=status,
            badge=badge,
            utilization=As_req / As_prov,
            warnings=warnings,
            rating=rating,
            fire_load=q_fi,
            fire_moment=M_fi,
            rebar_depth=ds,
            required_steel=As_req,
            min_thickness=hc_min,
            thickness_ok=thickness_ok,
            bar_diameter=diameter,
            bars_per_rib=per_rib,
            provided_steel=As_prov,
            arrangement=f"{per_rib} HA {diameter}/nervure ({As_prov:.0f} mm²/m)",
            calculation_steps=steps,
        )
