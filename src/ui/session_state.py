"""
Session state and page routing for the course app.

Pages are addressed by the ``page`` query parameter using the site's
relative paths, so the login redirect computed by the access gate can be
resolved against the current page.
"""

import posixpath
from typing import Optional

import streamlit as st
from streamlit_cookies_controller import CookieController

from src.auth.cookies import CookieStorage
from src.auth.gate import LOGIN_PAGE, AccessGate, build_session_store
from src.utils.settings import CourseSettings

HOME_PAGE = "accueil.html"

CHAPTER_PAGES = {
    "planchers": "cours/planchers/index.html",
    "poutres": "cours/poutres/index.html",
    "poteaux": "cours/poteaux/index.html",
}

PAGES = {
    LOGIN_PAGE: "Connexion",
    HOME_PAGE: "Accueil",
    CHAPTER_PAGES["planchers"]: "Planchers mixtes",
    CHAPTER_PAGES["poutres"]: "Poutres mixtes",
    CHAPTER_PAGES["poteaux"]: "Poteaux mixtes",
}

_DEFAULTS = {
    "results": {},  # calculator name -> last output
    "errors": {},   # calculator name -> validation messages
    "cookie_writes": {},  # cookie name -> value not yet sent back by the browser
}


def init_state():
    """Initialize session state with defaults."""
    for key, val in _DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = type(val)(val)


def get_gate(settings: CourseSettings) -> AccessGate:
    """Access gate storing its session record in a browser cookie.

    The cookie outlives the Streamlit session, so a reload or a new tab keeps
    the reader logged in until the record expires.
    """
    max_age = int(settings.access.session_duration_days * 86400)
    storage = CookieStorage(
        st.context.cookies,
        CookieController(key="cm_cookies"),
        st.session_state["cookie_writes"],
        max_age=max_age,
    )
    storage.sync()
    store = build_session_store(storage, settings.access)
    return AccessGate(settings.access, store)


def resolve_page(current: str, relative: str) -> str:
    """Join a relative link to the folder of the current page.

    >>> resolve_page("cours/poutres/index.html", "../../index.html")
    'index.html'
    """
    joined = posixpath.join(posixpath.dirname(current), relative)
    return posixpath.normpath(joined)


def current_page() -> str:
    page = st.query_params.get("page", HOME_PAGE)
    return page if page in PAGES else HOME_PAGE


def go_to(page: str):
    st.query_params["page"] = page
    st.rerun()


def store_result(name: str, output, errors: Optional[list] = None):
    """Keep the last output (or validation errors) of a calculator."""
    st.session_state["results"][name] = output
    st.session_state["errors"][name] = errors or []


def clear_results():
    st.session_state["results"] = {}
    st.session_state["errors"] = {}
