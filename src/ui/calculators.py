"""Interactive calculator forms of the course chapters.

Each calculator has a form builder returning the raw widget values and a
result renderer. Widget keys are ``<calculator>.<field>`` so values survive
reruns and page changes.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import streamlit as st

from src.codes.ec4 import get_code
from src.core.registry import Calculator, calculators_for
from src.models.inputs import (
    BucklingCurve, ColumnFireSection, ColumnSupport, FireRating, SupportType,
)
from src.reports.diagrams.buckling_curve import generate_buckling_curves
from src.reports.diagrams.cross_section import generate_composite_section
from src.ui.components import (
    _fnum, render_badge, render_errors, render_metrics, render_note_download,
    render_steps, render_utilization,
)
from src.ui.runner import run_calculator
from src.ui.session_state import store_result

_NO_RATING = "—"

_SUPPORT_LABELS = {
    SupportType.SIMPLE: "Travée isostatique",
    SupportType.END_SPAN: "Travée de rive",
    SupportType.INTERNAL_SUPPORT: "Appui intermédiaire",
}

_COLUMN_SUPPORT_LABELS = {
    ColumnSupport.PINNED_PINNED: "Articulé - articulé (β = 1,0)",
    ColumnSupport.FIXED_PINNED: "Encastré - articulé (β = 0,7)",
    ColumnSupport.FIXED_FIXED: "Encastré - encastré (β = 0,5)",
    ColumnSupport.CANTILEVER: "Console (β = 2,0)",
}

_FIRE_SECTION_LABELS = {
    ColumnFireSection.CIRCULAR_TUBE: "Tube circulaire rempli",
    ColumnFireSection.RECTANGULAR_TUBE: "Tube rectangulaire rempli",
    ColumnFireSection.ENCASED: "Profilé enrobé",
}


# ── Widget helpers ───────────────────────────────────────────────────────────

def _number(calc: Calculator, field: str, label: str, step: float = 1.0,
            help: Optional[str] = None) -> float:
    return st.number_input(
        label,
        value=float(calc.example.get(field, 0.0)),
        min_value=0.0,
        step=step,
        key=f"{calc.name}.{field}",
        help=help,
    )


def _select(calc: Calculator, field: str, label: str, options: list,
            format_func: Callable[[Any], str] = str):
    default = calc.example.get(field)
    index = options.index(default) if default in options else 0
    return st.selectbox(label, options, index=index, format_func=format_func,
                        key=f"{calc.name}.{field}")


def _table(table: str) -> list[str]:
    return get_code().table_keys(table)


def _deck_label(key: str) -> str:
    return get_code().decks[key].label


# ── Forms ────────────────────────────────────────────────────────────────────

def _form_slab_construction(calc):
    col1, col2 = st.columns(2)
    with col1:
        deck = _select(calc, "deck", "Bac acier", _table("decks"), _deck_label)
        hc = _number(calc, "hc", "Épaisseur de béton hc (mm)", 5.0)
    with col2:
        span = _number(calc, "span", "Portée L (mm)", 100.0)
        q = _number(calc, "construction_load", "Charge de chantier q (kN/m²)", 0.25)
    return {"deck": deck, "hc": hc, "span": span, "construction_load": q}


def _form_slab_bending(calc):
    col1, col2 = st.columns(2)
    with col1:
        deck = _select(calc, "deck", "Bac acier", _table("decks"), _deck_label)
        concrete = _select(calc, "concrete", "Béton", _table("slab_concretes"))
    with col2:
        hc = _number(calc, "hc", "Épaisseur de béton hc (mm)", 5.0)
        med = _number(calc, "design_moment", "Moment sollicitant MEd (kN.m/m)", 1.0,
                      help="0 pour calculer la résistance seule")
    return {"deck": deck, "concrete": concrete, "hc": hc, "design_moment": med}


def _form_slab_shear(calc):
    col1, col2 = st.columns(2)
    with col1:
        deck = _select(calc, "deck", "Bac acier", _table("decks"), _deck_label)
        concrete = _select(calc, "concrete", "Béton", _table("slab_concretes"))
    with col2:
        hc = _number(calc, "hc", "Épaisseur de béton hc (mm)", 5.0)
        ved = _number(calc, "design_shear", "Effort tranchant VEd (kN/m)", 1.0)
    return {"deck": deck, "concrete": concrete, "hc": hc, "design_shear": ved}


def _form_slab_deflection(calc):
    col1, col2 = st.columns(2)
    with col1:
        deck = _select(calc, "deck", "Bac acier", _table("decks"), _deck_label)
        concrete = _select(calc, "concrete", "Béton", _table("slab_concretes"))
        hc = _number(calc, "hc", "Épaisseur de béton hc (mm)", 5.0)
    with col2:
        span = _number(calc, "span", "Portée L (mm)", 100.0)
        g_extra = _number(calc, "extra_permanent_load", "Charges permanentes ajoutées (kN/m²)", 0.25)
        q = _number(calc, "imposed_load", "Charge d'exploitation (kN/m²)", 0.25)
    return {"deck": deck, "concrete": concrete, "hc": hc, "span": span,
            "extra_permanent_load": g_extra, "imposed_load": q}


def _form_slab_fire(calc):
    col1, col2 = st.columns(2)
    with col1:
        rating = _select(calc, "rating", "Degré de stabilité au feu",
                         [r.value for r in FireRating])
        hc = _number(calc, "hc", "Épaisseur de béton hc (mm)", 5.0)
        span = _number(calc, "span", "Portée L (mm)", 100.0)
    with col2:
        g = _number(calc, "permanent_load", "Charges permanentes g (kN/m²)", 0.25)
        q = _number(calc, "imposed_load", "Charge d'exploitation q (kN/m²)", 0.25)
    return {"rating": rating, "hc": hc, "span": span, "permanent_load": g, "imposed_load": q}


def _form_beam_effective_width(calc):
    col1, col2 = st.columns(2)
    with col1:
        span = _number(calc, "span", "Portée L (mm)", 100.0)
        spacing = _number(calc, "spacing", "Entraxe des poutres s (mm)", 100.0)
    with col2:
        support = _select(calc, "support", "Position", [s.value for s in SupportType],
                          lambda v: _SUPPORT_LABELS[SupportType(v)])
    return {"span": span, "spacing": spacing, "support": support}


def _form_beam_modular_ratio(calc):
    col1, col2 = st.columns(2)
    with col1:
        concrete = _select(calc, "concrete", "Béton", _table("beam_concretes"))
    with col2:
        phi = _number(calc, "creep_coefficient", "Coefficient de fluage φt", 0.1)
    return {"concrete": concrete, "creep_coefficient": phi}


def _section_widgets(calc, with_steel: bool = True) -> dict:
    col1, col2 = st.columns(2)
    with col1:
        data = {"profile": _select(calc, "profile", "Profilé", _table("beam_profiles"))}
        if with_steel:
            data["steel"] = _select(calc, "steel", "Acier", _table("beam_steels"))
        data["concrete"] = _select(calc, "concrete", "Béton", _table("beam_concretes"))
    with col2:
        data["beff"] = _number(calc, "beff", "Largeur participante beff (mm)", 50.0)
        data["hc"] = _number(calc, "hc", "Épaisseur de dalle hc (mm)", 5.0)
        if "hp" in calc.example:
            data["hp"] = _number(calc, "hp", "Hauteur des nervures hp (mm)", 5.0)
    return data


def _form_beam_plastic_forces(calc):
    return _section_widgets(calc)


def _form_beam_moment(calc):
    data = _section_widgets(calc)
    data["design_moment"] = _number(calc, "design_moment", "Moment sollicitant MEd (kN.m)", 10.0,
                                    help="0 pour calculer la résistance seule")
    return data


def _form_beam_connectors(calc):
    col1, col2 = st.columns(2)
    with col1:
        d = _number(calc, "diameter", "Diamètre du goujon d (mm)", 1.0)
        hsc = _number(calc, "height", "Hauteur du goujon hsc (mm)", 5.0)
        fu = _number(calc, "fu", "Résistance ultime fu (MPa)", 10.0)
    with col2:
        concrete = _select(calc, "concrete", "Béton", _table("beam_concretes"))
        vl = _number(calc, "longitudinal_shear", "Effort de glissement Vl (kN)", 10.0)
        eta = st.slider("Degré de connexion η", 0.4, 1.0,
                        float(calc.example.get("connection_degree", 1.0)), 0.05,
                        key=f"{calc.name}.connection_degree")
    return {"diameter": d, "height": hsc, "fu": fu, "concrete": concrete,
            "longitudinal_shear": vl, "connection_degree": eta}


def _form_beam_deflection(calc):
    data = _section_widgets(calc, with_steel=False)
    col1, col2, col3 = st.columns(3)
    with col1:
        data["span"] = _number(calc, "span", "Portée L (mm)", 100.0)
    with col2:
        data["load"] = _number(calc, "load", "Charge de service q (kN/m)", 0.5)
    with col3:
        data["creep_coefficient"] = _number(calc, "creep_coefficient", "Coefficient de fluage φt", 0.1)
    return data


def _form_beam_shear(calc):
    col1, col2 = st.columns(2)
    with col1:
        profile = _select(calc, "profile", "Profilé", _table("beam_profiles"))
        steel = _select(calc, "steel", "Acier", _table("beam_steels"))
    with col2:
        ved = _number(calc, "design_shear", "Effort tranchant VEd (kN)", 10.0,
                      help="0 pour calculer la résistance seule")
    return {"profile": profile, "steel": steel, "design_shear": ved}


def _form_column_resistance(calc):
    col1, col2 = st.columns(2)
    with col1:
        profile = _select(calc, "profile", "Profilé", _table("column_profiles"))
        steel = _select(calc, "steel", "Acier", _table("column_steels"))
        concrete = _select(calc, "concrete", "Béton", _table("column_concretes"))
    with col2:
        b = _number(calc, "b", "Largeur b (mm)", 10.0)
        h = _number(calc, "h", "Hauteur h (mm)", 10.0)
        As = _number(calc, "rebar_area", "Armatures As (cm²)", 0.5)
    return {"profile": profile, "steel": steel, "concrete": concrete,
            "b": b, "h": h, "rebar_area": As}


def _form_column_buckling(calc):
    col1, col2 = st.columns(2)
    with col1:
        npl = _number(calc, "plastic_resistance", "Npl,Rd (kN)", 100.0)
        ei = _number(calc, "effective_stiffness", "(EI)eff (kN.m²)", 1000.0)
        length = _number(calc, "length", "Longueur L (m)", 0.1)
    with col2:
        support = _select(calc, "support", "Conditions d'appui", [s.value for s in ColumnSupport],
                          lambda v: _COLUMN_SUPPORT_LABELS[ColumnSupport(v)])
        curve = _select(calc, "curve", "Courbe de flambement", [c.value for c in BucklingCurve])
        ned = _number(calc, "design_axial", "Effort normal NEd (kN)", 100.0)
    return {"plastic_resistance": npl, "effective_stiffness": ei, "length": length,
            "support": support, "curve": curve, "design_axial": ned}


def _form_column_combined(calc):
    col1, col2 = st.columns(2)
    with col1:
        npl = _number(calc, "plastic_resistance", "Npl,Rd (kN)", 100.0)
        mpl = _number(calc, "plastic_moment", "Mpl,Rd (kN.m)", 10.0)
        alpha_m = _number(calc, "alpha_m", "Coefficient αM", 0.05)
    with col2:
        ned = _number(calc, "design_axial", "Effort normal NEd (kN)", 100.0)
        med = _number(calc, "design_moment", "Moment MEd (kN.m)", 10.0)
    return {"plastic_resistance": npl, "plastic_moment": mpl, "alpha_m": alpha_m,
            "design_axial": ned, "design_moment": med}


def _form_column_fire(calc):
    col1, col2 = st.columns(2)
    with col1:
        section = _select(calc, "section_type", "Type de section",
                          [s.value for s in ColumnFireSection],
                          lambda v: _FIRE_SECTION_LABELS[ColumnFireSection(v)])
        dimension = _number(calc, "dimension", "Plus petite dimension (mm)", 10.0)
        cover = _number(calc, "cover", "Enrobage du profilé (mm)", 5.0)
    with col2:
        mu = _number(calc, "load_level", "Taux de chargement μfi", 0.05)
        required = _select(calc, "required_rating", "Exigence",
                           [_NO_RATING] + [r.value for r in FireRating])
    return {"section_type": section, "dimension": dimension, "cover": cover,
            "load_level": mu, "required_rating": None if required == _NO_RATING else required}


# ── Results ──────────────────────────────────────────────────────────────────

def _show_slab_construction(out, data):
    render_metrics([
        ("g (kN/m²)", out.permanent_load, ""),
        ("MEd (kN.m/m)", out.design_moment, ""),
        ("Mpa (kN.m/m)", out.moment_resistance, ""),
        ("Flèche (mm)", out.deflection, "", 1),
        ("Limite (mm)", out.deflection_limit, "", 1),
    ])


def _show_slab_bending(out, data):
    render_metrics([
        ("Npa (kN/m)", out.deck_tension, ""),
        ("Ncf (kN/m)", out.concrete_compression, ""),
        ("xpl (mm)", out.pna_depth, ""),
        ("z (mm)", out.lever_arm, ""),
        ("MRd (kN.m/m)", out.moment_resistance, ""),
    ])
    st.caption("Axe neutre dans le béton" if out.pna_in_concrete else "Axe neutre dans le bac")


def _show_slab_shear(out, data):
    render_metrics([
        ("dp (mm)", out.effective_depth, "", 0),
        ("Nervures / m", out.ribs_per_metre, ""),
        ("VRd (kN/m)", out.shear_resistance, ""),
    ])


def _show_slab_deflection(out, data):
    render_metrics([
        ("n0", out.modular_ratio, ""),
        ("Ieq (mm⁴/m)", out.equivalent_inertia, "", 0),
        ("Flèche (mm)", out.deflection, ""),
        ("L/250 (mm)", out.deflection_limit, ""),
        ("f1 (Hz)", out.natural_frequency, ""),
    ])


def _show_slab_fire(out, data):
    render_metrics([
        ("q,fi (kN/m²)", out.fire_load, ""),
        ("M,fi (kN.m/m)", out.fire_moment, ""),
        ("As,req (mm²/m)", out.required_steel, "", 0),
        ("hc,min (mm)", out.min_thickness, "", 0),
    ])
    st.markdown(f"**Armatures :** {out.arrangement}")


def _show_beam_effective_width(out, data):
    render_metrics([
        ("Le (mm)", out.equivalent_span, "", 0),
        ("bei (mm)", out.half_width, "", 0),
        ("beff (mm)", out.effective_width, "", 0),
    ])


def _show_beam_modular_ratio(out, data):
    render_metrics([
        ("Ecm (MPa)", out.Ecm, "", 0),
        ("n0", out.n0, ""),
        ("nL", out.nL, ""),
    ])


def _show_beam_plastic_forces(out, data):
    render_metrics([
        ("fyd (MPa)", out.fyd, "", 0),
        ("fcd (MPa)", out.fcd, ""),
        ("Na,pl (kN)", out.steel_force, "", 1),
        ("Nc,f (kN)", out.concrete_force, "", 1),
    ])
    if out.concrete_force >= out.steel_force:
        st.caption("Nc,f ≥ Na,pl : l'axe neutre plastique est dans la dalle.")
    else:
        st.caption("Nc,f < Na,pl : l'axe neutre plastique est dans le profilé.")


_PNA_LABELS = {"slab": "dans la dalle", "top_flange": "dans la semelle", "web": "dans l'âme"}


def _show_beam_moment(out, data):
    render_metrics([
        ("Na,pl (kN)", out.steel_force, "", 1),
        ("Nc,f (kN)", out.concrete_force, "", 1),
        ("zpl (mm)", out.pna_depth, ""),
        ("Mpl,Rd (kN.m)", out.moment_resistance, "", 1),
    ])
    st.caption(f"Axe neutre plastique {_PNA_LABELS[out.pna_position]}")
    profile = get_code().beam_profiles[data["profile"]]
    st.image(generate_composite_section(profile, data["beff"], data["hc"], data.get("hp", 0.0),
                                        out.pna_position, out.pna_depth, return_figure=False))


def _show_beam_connectors(out, data):
    render_metrics([
        ("PRd,1 acier (kN)", out.stud.steel_failure, ""),
        ("PRd,2 béton (kN)", out.stud.concrete_failure, ""),
        ("PRd (kN)", out.stud.resistance, ""),
        ("n / demi-portée", out.count.per_half_span, "", 0),
        ("Total", out.count.total, "", 0),
    ])
    st.caption(f"α = {_fnum(out.stud.alpha, 3)}, rupture côté {out.stud.failure_mode}")


def _show_beam_deflection(out, data):
    render_metrics([
        ("Ieq (cm⁴)", out.section.inertia, "", 0),
        ("δ inst. (mm)", out.instantaneous, ""),
        ("δ fluage (mm)", out.with_creep, ""),
        ("L/350 (mm)", out.limit_l350, "", 1),
        ("L/250 (mm)", out.limit_l250, "", 1),
    ])


def _show_beam_shear(out, data):
    render_metrics([
        ("hw (mm)", out.web_height, "", 1),
        ("Av (mm²)", out.shear_area, "", 0),
        ("Vpl,Rd (kN)", out.shear_resistance, "", 1),
    ])


def _show_column_resistance(out, data):
    render_metrics([
        ("Ac (cm²)", out.concrete_area, "", 1),
        ("Na (kN)", out.steel_contribution, "", 0),
        ("Nc (kN)", out.concrete_contribution, "", 0),
        ("Ns (kN)", out.rebar_contribution, "", 0),
        ("Npl,Rd (kN)", out.plastic_resistance, "", 0),
    ])
    st.caption(f"δ = {_fnum(out.contribution_ratio, 3)} (0,2 ≤ δ ≤ 0,9)")


def _show_column_buckling(out, data):
    render_metrics([
        ("Lcr (m)", out.buckling_length, ""),
        ("Ncr (kN)", out.critical_load, "", 0),
        ("λ̄", out.relative_slenderness, "", 3),
        ("χ", out.chi, "", 3),
        ("Nb,Rd (kN)", out.buckling_resistance, "", 0),
    ])
    st.image(generate_buckling_curves(out.relative_slenderness, out.chi,
                                      BucklingCurve(data["curve"]), return_figure=False))


def _show_column_combined(out, data):
    render_metrics([
        ("Npm,Rd (kN)", out.concrete_resistance, "", 0),
        ("NEd/Npl,Rd", out.axial_ratio, "", 3),
        ("μd", out.mu_d, "", 3),
        ("Mpl,N,Rd (kN.m)", out.reduced_moment, "", 1),
        ("αM Mpl,N,Rd (kN.m)", out.allowable_moment, "", 1),
    ])


def _show_column_fire(out, data):
    render_metrics([
        ("Classement atteint", out.achieved_rating or "aucun", ""),
        ("μfi", out.load_level, ""),
    ])
    rows = {"dimension min. (mm)": out.requirements}
    if out.section_type == ColumnFireSection.ENCASED.value:
        rows["enrobage min. (mm)"] = get_code().column_fire_covers()
    st.table(rows)


_FORMS = {
    "slab_construction": _form_slab_construction,
    "slab_bending": _form_slab_bending,
    "slab_shear": _form_slab_shear,
    "slab_deflection": _form_slab_deflection,
    "slab_fire": _form_slab_fire,
    "beam_effective_width": _form_beam_effective_width,
    "beam_modular_ratio": _form_beam_modular_ratio,
    "beam_plastic_forces": _form_beam_plastic_forces,
    "beam_moment": _form_beam_moment,
    "beam_connectors": _form_beam_connectors,
    "beam_deflection": _form_beam_deflection,
    "beam_shear": _form_beam_shear,
    "column_resistance": _form_column_resistance,
    "column_buckling": _form_column_buckling,
    "column_combined": _form_column_combined,
    "column_fire": _form_column_fire,
}

_RESULTS = {
    "slab_construction": _show_slab_construction,
    "slab_bending": _show_slab_bending,
    "slab_shear": _show_slab_shear,
    "slab_deflection": _show_slab_deflection,
    "slab_fire": _show_slab_fire,
    "beam_effective_width": _show_beam_effective_width,
    "beam_modular_ratio": _show_beam_modular_ratio,
    "beam_plastic_forces": _show_beam_plastic_forces,
    "beam_moment": _show_beam_moment,
    "beam_connectors": _show_beam_connectors,
    "beam_deflection": _show_beam_deflection,
    "beam_shear": _show_beam_shear,
    "column_resistance": _show_column_resistance,
    "column_buckling": _show_column_buckling,
    "column_combined": _show_column_combined,
    "column_fire": _show_column_fire,
}


# ── Page rendering ───────────────────────────────────────────────────────────

def render_calculator(calc: Calculator, reader: str = "") -> None:
    """Form, verdict, metrics, details and PDF note of one calculator."""
    st.markdown(f"### {calc.title}")
    with st.form(f"form_{calc.name}"):
        data = _FORMS[calc.name](calc)
        submitted = st.form_submit_button("Calculer", type="primary")

    if submitted:
        output, errors = run_calculator(calc.name, data)
        store_result(calc.name, output, errors)
        st.session_state[f"{calc.name}.data"] = data
        st.session_state.pop(f"note_{calc.name}", None)

    errors = st.session_state["errors"].get(calc.name)
    if errors:
        render_errors(errors)
        return
    output = st.session_state["results"].get(calc.name)
    if output is None:
        return

    used = st.session_state[f"{calc.name}.data"]
    render_badge(output)
    _RESULTS[calc.name](output, used)
    render_utilization(output)
    render_steps(getattr(output, "calculation_steps", []))
    render_note_download(calc.name, used, reader)


def render_chapter_calculators(chapter: str, reader: str = "") -> None:
    """One tab per calculator of the chapter."""
    calcs = calculators_for(chapter)
    tabs = st.tabs([c.title for c in calcs])
    for tab, calc in zip(tabs, calcs):
        with tab:
            render_calculator(calc, reader)
