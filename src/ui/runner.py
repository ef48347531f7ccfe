"""Calculator wrapper for the Streamlit pages.

Runs a registered calculator from widget values and returns the output
together with readable error messages instead of raising, so a page can
show a blocking error and compute nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ValidationError

from src.core.registry import get_calculator

logger = logging.getLogger(__name__)


def format_validation_errors(exc: ValidationError) -> list[str]:
    """One ``field: message`` line per pydantic error."""
    messages = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"])
        messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return messages


def run_calculator(name: str, data: Mapping[str, Any]) -> tuple[Optional[BaseModel], list[str]]:
    """Return ``(output, [])`` or ``(None, errors)``."""
    calculator = get_calculator(name)
    try:
        inp = calculator.validate(data)
    except ValidationError as exc:
        errors = format_validation_errors(exc)
        logger.debug("Invalid inputs for %s: %s", name, errors)
        return None, errors
    return calculator.run(inp), []


def status_label(output: Optional[BaseModel]) -> str:
    """Badge text of an output, "—" for results without a verdict."""
    badge = getattr(output, "badge", None)
    return badge if badge else "—"
