"""Reference table loading for the EC4 calculators.

Provides:
- EC4 table loading from YAML configuration
- Config directory lookup shared with the settings loader
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Config lookup
# ---------------------------------------------------------------------------

def config_search_paths(filename: str) -> list[Path]:
    """Candidate locations for a file of the ``config/`` directory."""
    return [
        # src/utils/../../config  (standard layout)
        Path(__file__).resolve().parent.parent.parent / "config" / filename,
        # current working directory (running from a checkout)
        Path.cwd() / "config" / filename,
    ]


def find_config_file(filename: str) -> Path:
    """Return the first existing ``config/<filename>``.

    Raises
    ------
    FileNotFoundError
        If the file cannot be located in any of the expected paths.
    """
    paths = config_search_paths(filename)
    for path in paths:
        if path.exists():
            return path

    searched = "\n  ".join(str(p) for p in paths)
    raise FileNotFoundError(
        f"{filename} not found.  Searched:\n  {searched}"
    )


# ---------------------------------------------------------------------------
# EC4 table loading
# ---------------------------------------------------------------------------

_ec4_tables_cache: dict[str, Any] | None = None


def load_ec4_tables() -> dict[str, Any]:
    """Load the EC4 reference tables from ``config/ec4_tables.yaml``.

    The result is cached so that repeated calls do not re-read from disk.

    Returns
    -------
    dict
        Parsed YAML content keyed by table name (e.g. ``decks``,
        ``beam_profiles``, ``partial_factors``).
    """
    global _ec4_tables_cache
    if _ec4_tables_cache is not None:
        return _ec4_tables_cache

    path = find_config_file("ec4_tables.yaml")
    with open(path, encoding="utf-8") as fh:
        _ec4_tables_cache = yaml.safe_load(fh)
    logger.info("Loaded EC4 tables from %s", path)
    return _ec4_tables_cache


def _clear_ec4_tables_cache() -> None:
    """Reset the internal cache (useful in tests)."""
    global _ec4_tables_cache
    _ec4_tables_cache = None
