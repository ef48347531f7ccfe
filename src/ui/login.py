"""Login page in front of the course."""

from __future__ import annotations

import streamlit as st

from src.auth.gate import AccessDenied, AccessGate


def render_login(gate: AccessGate) -> bool:
    """Show the access form. True once a session has been opened."""
    st.markdown("## 🏗️ Construction Mixte")
    st.markdown("Cours de construction mixte acier-béton selon l'Eurocode 4 (EN 1994-1-1).")
    st.markdown("---")

    col1, _ = st.columns([1, 1])
    with col1:
        with st.form("login_form"):
            name = st.text_input("Nom", key="login_name")
            first_name = st.text_input("Prénom", key="login_first_name")
            email = st.text_input("Email", key="login_email")
            submitted = st.form_submit_button("Accéder au cours", type="primary",
                                              width="stretch")

        if not submitted:
            return False
        try:
            record = gate.login(name, first_name, email)
        except AccessDenied as exc:
            st.error(str(exc))
            return False

    st.success(f"Bienvenue {record.first_name} {record.name}")
    return True
