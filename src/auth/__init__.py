# Email allow-list gate and session record
from .allow_list import decode_allow_list, encode_allow_list, is_authorized, normalize_email
from .session import SessionRecord, SessionStore, utc_now
from .cookies import CookieStorage
from .gate import (
    AccessDenied, AccessGate, build_session_store, page_watermark, redirect_path, watermark_text,
)
