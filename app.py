"""
Construction Mixte - EC4 Course Application

Composite steel/concrete course (EN 1994-1-1) with interactive calculators
for slabs, beams and columns, behind an email allow-list.
"""

import logging
import streamlit as st
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from src.auth.gate import LOGIN_PAGE, page_watermark, watermark_text
from src.core.registry import CHAPTERS
from src.ui.calculators import render_chapter_calculators
from src.ui.course import render_chapter_course, render_home
from src.ui.login import render_login
from src.ui.protection import build_protection_html
from src.ui.session_state import (
    CHAPTER_PAGES, HOME_PAGE, PAGES, clear_results, current_page, get_gate, go_to,
    init_state, resolve_page,
)
from src.utils.settings import configure_logging, load_settings

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Construction Mixte - EC4",
    page_icon="🏗️",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .info-box {
        background-color: #e8f4f8;
        padding: 1rem;
        border-radius: 0.5rem;
        border-left: 4px solid #2d5a8a;
    }
    [data-testid="stMetricValue"] {
        font-size: 1.3rem;
    }
</style>
""", unsafe_allow_html=True)


def render_sidebar(gate, record):
    """Navigation, identity and logout."""
    with st.sidebar:
        st.markdown("### 🏗️ Construction Mixte")
        if st.button("Accueil", width="stretch"):
            go_to(HOME_PAGE)
        for chapter, page in CHAPTER_PAGES.items():
            if st.button(CHAPTERS[chapter], key=f"nav_{chapter}", width="stretch"):
                go_to(page)

        st.markdown("---")
        st.caption(watermark_text(record))
        if st.button("Déconnexion", width="stretch"):
            gate.logout()
            clear_results()
            go_to(LOGIN_PAGE)


def render_chapter(chapter, reader):
    st.markdown(f"## {CHAPTERS[chapter]}")
    course_tab, calc_tab = st.tabs(["📖 Cours", "🧮 Calculateurs"])
    with course_tab:
        render_chapter_course(chapter)
    with calc_tab:
        render_chapter_calculators(chapter, reader)


def main():
    settings = load_settings()
    configure_logging(settings)
    init_state()
    gate = get_gate(settings)

    page = current_page()
    record = gate.current_session()
    reader = page_watermark(page, record)
    if settings.protection.enabled:
        # on the login page this also removes the previous reader's watermark
        st.iframe(build_protection_html(reader, settings.protection), width=1, height=1)

    if page == LOGIN_PAGE:
        if record is not None or render_login(gate):
            go_to(HOME_PAGE)
        return

    redirect = gate.require_session(page)
    if redirect is not None:
        logger.debug("No session on %s, redirecting to %s", page, redirect)
        go_to(resolve_page(page, redirect))

    render_sidebar(gate, record)

    chapter = next((c for c, p in CHAPTER_PAGES.items() if p == page), None)
    if chapter is None:
        st.markdown(f"## {PAGES[HOME_PAGE]}")
        render_home(record, lambda key: go_to(CHAPTER_PAGES[key]))
    else:
        render_chapter(chapter, reader)


main()
