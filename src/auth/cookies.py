"""
Browser cookies as a string mapping for :class:`SessionStore`.

Reads come from the cookies the browser sent with the page request, so a
session survives reloads, new tabs and reconnections for as long as the
cookie lives. Writes go back to the browser through a cookie component and
are remembered in ``pending`` (kept in ``st.session_state``) until a new page
load sends them with the request.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from typing import Any, Iterator, Mapping, MutableMapping, Optional
from urllib.parse import unquote

logger = logging.getLogger(__name__)


def _same(stored: Any, value: Optional[str]) -> bool:
    """Whether the browser jar already holds ``value`` (None: no cookie)."""
    if stored is None or value is None:
        return stored is None and value is None
    if isinstance(stored, str):
        return unquote(stored) == value
    # the cookie component hands JSON values back already parsed
    try:
        return json.loads(value) == stored
    except ValueError:
        return False


class CookieStorage(MutableMapping):
    """
    Mapping over the request cookies plus the writes of this browser session.

    Args:
        request_cookies: Cookies sent with the page request (``st.context.cookies``)
        controller: Object with ``get``, ``set`` and ``remove`` writing to the
            browser (``streamlit_cookies_controller.CookieController``)
        pending: Writes not yet seen in a request; ``None`` marks a removal
        max_age: Cookie lifetime in seconds
    """

    def __init__(
        self,
        request_cookies: Mapping[str, str],
        controller,
        pending: MutableMapping[str, Optional[str]],
        max_age: Optional[int] = None,
    ):
        self.request_cookies = request_cookies
        self.controller = controller
        self.pending = pending
        self.max_age = max_age

    def __getitem__(self, key: str) -> str:
        if key in self.pending:
            value = self.pending[key]
            if value is None:
                raise KeyError(key)
            return value
        return unquote(self.request_cookies[key])

    def __setitem__(self, key: str, value: str) -> None:
        self.pending[key] = value
        self._send(key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self:
            raise KeyError(key)
        self.pending[key] = None
        self._send(key, None)

    def __iter__(self) -> Iterator[str]:
        keys = sorted(set(self.request_cookies) | set(self.pending))
        return iter([k for k in keys if k in self])

    def __len__(self) -> int:
        return len(list(iter(self)))

    def _send(self, key: str, value: Optional[str]) -> None:
        if value is None:
            self.controller.remove(key)
            return
        options = {}
        if self.max_age is not None:
            options["max_age"] = self.max_age
            options["expires"] = dt.datetime.now() + dt.timedelta(seconds=self.max_age)
        self.controller.set(key, value, **options)

    def sync(self) -> None:
        """Re-send the pending writes the browser jar does not reflect yet.

        A write issued right before ``st.rerun`` can be dropped with the
        rerun; call once at the start of every script run.
        """
        for key, value in list(self.pending.items()):
            if not _same(self.controller.get(key), value):
                logger.debug("Re-sending cookie %s", key)
                self._send(key, value)
