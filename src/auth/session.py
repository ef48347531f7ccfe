"""
Session record kept in a string storage mapping.

In the app the storage is a :class:`~src.auth.cookies.CookieStorage`; in tests any
``dict`` works. The record is serialized as JSON under a single key.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable, MutableMapping, Optional

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

Clock = Callable[[], dt.datetime]


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class SessionRecord(BaseModel):
    """Identity of the logged-in reader and validity window."""
    name: str
    first_name: str
    email: str
    created_at: dt.datetime
    expires_at: dt.datetime

    def is_valid(self, now: dt.datetime) -> bool:
        """Valid up to and including ``expires_at``."""
        return now <= self.expires_at


class SessionStore:
    """Read and write the session record under one storage key."""

    def __init__(
        self,
        storage: MutableMapping,
        key: str = "cm_session",
        duration: dt.timedelta = dt.timedelta(days=7),
        clock: Clock = utc_now,
    ):
        self.storage = storage
        self.key = key
        self.duration = duration
        self.clock = clock

    def save(self, name: str, first_name: str, email: str) -> SessionRecord:
        """Overwrite the current session with a new one starting now."""
        now = self.clock()
        record = SessionRecord(
            name=name.strip(),
            first_name=first_name.strip(),
            email=email.strip().lower(),
            created_at=now,
            expires_at=now + self.duration,
        )
        self.storage[self.key] = record.model_dump_json()
        return record

    def load(self) -> Optional[SessionRecord]:
        """Current session, or None when absent, unreadable or expired."""
        raw = self.storage.get(self.key)
        if not raw:
            return None
        try:
            record = SessionRecord.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable session data")
            self.clear()
            return None

        if not record.is_valid(self.clock()):
            logger.info("Session of %s expired at %s", record.email, record.expires_at)
            self.clear()
            return None
        return record

    def is_authenticated(self) -> bool:
        return self.load() is not None

    def clear(self) -> None:
        if self.key in self.storage:
            del self.storage[self.key]
