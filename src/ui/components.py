"""Shared result widgets for the calculator pages."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

import streamlit as st

from src.models.outputs import CalculationStep, DesignStatus
from src.reports.pdf_generator import build_calculation_note


# ── Formatting helpers ───────────────────────────────────────────────────────

def _fnum(val, dp: int = 2, unit: str = "") -> str:
    """Format a number safely."""
    if val is None:
        return "—"
    try:
        s = f"{float(val):.{dp}f}"
        return f"{s} {unit}".strip() if unit else s
    except (TypeError, ValueError):
        return str(val)


# ── Widgets ──────────────────────────────────────────────────────────────────

def render_badge(output) -> None:
    """Verdict banner coloured by the output status."""
    status = getattr(output, "status", None)
    badge = getattr(output, "badge", "")
    if status == DesignStatus.PASS:
        st.success(badge)
    elif status == DesignStatus.FAIL:
        st.error(badge)
    elif status == DesignStatus.WARNING:
        st.warning(badge)
    elif status == DesignStatus.NOT_CHECKED:
        st.info("Aucune sollicitation saisie : résistance seule.")
    for warning in getattr(output, "warnings", []):
        st.warning(warning)


def render_metrics(items: Iterable[tuple]) -> None:
    """Row of ``st.metric`` cards from ``(label, value, unit[, dp])`` tuples."""
    items = list(items)
    cols = st.columns(len(items))
    for col, item in zip(cols, items):
        label, value, unit = item[:3]
        dp = item[3] if len(item) > 3 else 2
        with col:
            st.metric(label, _fnum(value, dp, unit))


def render_utilization(output) -> None:
    utilization = getattr(output, "utilization", None)
    if utilization is None:
        return
    st.progress(min(max(utilization, 0.0), 1.0),
                text=f"Taux de travail : {_fnum(utilization, 3)}")


def render_steps(steps: list[CalculationStep]) -> None:
    """Calculation details in a collapsed expander."""
    if not steps:
        return
    with st.expander("Détail des calculs"):
        for step in steps:
            ref = f" *({step.code_reference})*" if step.code_reference else ""
            st.markdown(f"**{step.step_number}. {step.description}**{ref}")
            st.code(f"{step.formula}\n{step.substitution}\n= {step.result:g} {step.unit}".rstrip(),
                    language=None)


def render_errors(errors: list[str]) -> None:
    st.error("Données invalides : le calcul n'a pas été effectué.")
    for e in errors:
        st.markdown(f"- {e}")


def render_note_download(name: str, data: Mapping[str, Any], reader: str = "",
                         key: Optional[str] = None) -> None:
    """Generate the PDF note on demand, then offer it for download."""
    key = key or f"note_{name}"
    if st.button("Générer la note de calcul (PDF)", key=f"{key}_build"):
        st.session_state[key] = build_calculation_note(name, data, reader)
    pdf = st.session_state.get(key)
    if pdf:
        st.download_button(
            "Télécharger la note",
            data=pdf,
            file_name=f"note_{name}.pdf",
            mime="application/pdf",
            key=f"{key}_download",
        )
