"""
Email allow-list of the course.

The list is stored base64-encoded in the settings. The encoding only keeps
addresses out of casual view; it is not a protection.
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Iterable, List

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def decode_allow_list(encoded: str) -> List[str]:
    """Decode a base64 comma-separated list into normalized entries.

    Entries starting with ``@`` are domains. A payload that cannot be decoded
    is logged and yields an empty list, which lets everybody in.
    """
    if not encoded:
        return []
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        logger.error("Could not decode the authorized emails list: %s", exc)
        return []
    return [e for e in (normalize_email(part) for part in decoded.split(",")) if e]


def encode_allow_list(entries: Iterable[str]) -> str:
    """Inverse of :func:`decode_allow_list`, for maintainers editing the list."""
    cleaned = [normalize_email(e) for e in entries if e.strip()]
    return base64.b64encode(",".join(cleaned).encode("utf-8")).decode("ascii")


def is_authorized(email: str, allow_list: List[str]) -> bool:
    """Exact address or ``@domain`` suffix match; an empty list accepts anyone."""
    if not allow_list:
        return True
    normalized = normalize_email(email)
    for entry in allow_list:
        if entry.startswith("@"):
            if normalized.endswith(entry):
                return True
        elif normalized == entry:
            return True
    return False
