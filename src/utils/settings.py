"""
Application settings loaded from ``config/course.yaml``.

Usage:
    settings = load_settings()
    settings.access.session_duration_days

Environment overrides:
    CM_COURSE_CONFIG      path to an alternative settings file
    CM_AUTHORIZED_EMAILS  base64-encoded allow-list
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from src.utils.tables import find_config_file

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CM_COURSE_CONFIG"
EMAILS_ENV_VAR = "CM_AUTHORIZED_EMAILS"


class AccessSettings(BaseModel):
    """Allow-list gate settings."""
    authorized_emails_encoded: str = ""
    session_key: str = "cm_session"
    session_duration_days: float = Field(default=7, gt=0)


class ProtectionSettings(BaseModel):
    """Anti-copy layer settings."""
    enabled: bool = True
    notification_text: str = "Contenu protégé - Action non autorisée"
    notification_ms: int = Field(default=2000, ge=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"


class CourseSettings(BaseModel):
    """Complete application settings."""
    access: AccessSettings = Field(default_factory=AccessSettings)
    protection: ProtectionSettings = Field(default_factory=ProtectionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


_settings_cache: CourseSettings | None = None


def _settings_path() -> Optional[Path]:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    try:
        return find_config_file("course.yaml")
    except FileNotFoundError as exc:
        logger.warning("Using default settings: %s", exc)
        return None


def load_settings() -> CourseSettings:
    """Load and cache the course settings.

    A missing file yields the defaults; a malformed one raises.
    """
    global _settings_cache
    if _settings_cache is not None:
        return _settings_cache

    data: dict = {}
    path = _settings_path()
    if path is not None:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        logger.info("Loaded settings from %s", path)

    settings = CourseSettings.model_validate(data)

    encoded = os.environ.get(EMAILS_ENV_VAR)
    if encoded is not None:
        settings.access.authorized_emails_encoded = encoded

    _settings_cache = settings
    return settings


def _clear_settings_cache() -> None:
    """Reset the internal cache (useful in tests)."""
    global _settings_cache
    _settings_cache = None


def configure_logging(settings: CourseSettings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.logging.level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
