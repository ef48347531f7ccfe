"""
Access gate in front of the course pages.

A reader enters name, first name and email; an allow-listed email opens a
session for ``session_duration_days``. There is no password and no server
check: this only keeps the course out of casual reach.
"""

from __future__ import annotations

import datetime as dt
import logging
from pathlib import PurePosixPath
from typing import Optional

from src.auth.allow_list import decode_allow_list, is_authorized, normalize_email
from src.auth.session import Clock, SessionRecord, SessionStore, utc_now
from src.utils.settings import AccessSettings

logger = logging.getLogger(__name__)

LOGIN_PAGE = "index.html"


class AccessDenied(Exception):
    """Login refused (missing field or email not on the list)."""


def redirect_path(current_path: str, login_page: str = LOGIN_PAGE) -> str:
    """Relative path from the folder of ``current_path`` back to the login page.

    >>> redirect_path("cours/poutres/index.html")
    '../../index.html'
    """
    path = current_path.strip().lstrip("/")
    folder = PurePosixPath(path) if path.endswith("/") else PurePosixPath(path).parent
    return "../" * len(folder.parts) + login_page


def watermark_text(record: Optional[SessionRecord]) -> str:
    if record is None:
        return ""
    return f"{record.first_name} {record.name} - {record.email}"


def page_watermark(page: str, record: Optional[SessionRecord]) -> str:
    """Watermark for ``page``; the login page never shows an identity."""
    if page == LOGIN_PAGE:
        return ""
    return watermark_text(record)


def build_session_store(storage, settings: AccessSettings, clock: Clock = utc_now) -> SessionStore:
    return SessionStore(
        storage,
        key=settings.session_key,
        duration=dt.timedelta(days=settings.session_duration_days),
        clock=clock,
    )


class AccessGate:
    """Login, logout and page guard over a :class:`SessionStore`."""

    def __init__(self, settings: AccessSettings, store: SessionStore):
        self.settings = settings
        self.store = store
        self.allow_list = decode_allow_list(settings.authorized_emails_encoded)

    def login(self, name: str, first_name: str, email: str) -> SessionRecord:
        if not name.strip() or not first_name.strip() or not email.strip():
            raise AccessDenied("Veuillez remplir tous les champs.")
        if "@" not in email:
            raise AccessDenied("Adresse email invalide.")
        if not is_authorized(email, self.allow_list):
            logger.info("Access refused for %s", normalize_email(email))
            raise AccessDenied(
                "Accès refusé. Votre email n'est pas dans la liste des utilisateurs autorisés."
            )

        record = self.store.save(name, first_name, email)
        logger.info("Session opened for %s until %s", record.email, record.expires_at)
        return record

    def logout(self) -> None:
        self.store.clear()

    def current_session(self) -> Optional[SessionRecord]:
        return self.store.load()

    def require_session(self, current_path: str) -> Optional[str]:
        """None when the reader has a valid session, else where to send them."""
        if self.store.is_authenticated():
            return None
        return redirect_path(current_path)
