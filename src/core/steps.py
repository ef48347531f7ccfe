"""
Helpers shared by the designers to record calculation steps and verdicts.
"""

from typing import List, Optional

from src.models.outputs import CalculationStep, DesignStatus


BADGE_OK = "✓ Vérifié"
BADGE_FAIL = "✗ Non vérifié"
BADGE_NOT_CHECKED = "—"


def add_step(
    steps: List[CalculationStep],
    description: str,
    formula: str,
    substitution: str,
    result: float,
    unit: str = "",
    code_reference: Optional[str] = None,
) -> float:
    """Append a numbered step and return ``result`` unchanged."""
    steps.append(CalculationStep(
        step_number=len(steps) + 1,
        description=description,
        formula=formula,
        substitution=substitution,
        result=round(result, 4),
        unit=unit,
        code_reference=code_reference,
    ))
    return result


def ratio_verdict(demand: float, capacity: float) -> tuple[DesignStatus, str, Optional[float]]:
    """
    Status, badge and utilization for an optional demand against a capacity.

    A demand of zero means nothing to verify: only the resistance is reported.
    """
    if demand <= 0:
        return DesignStatus.NOT_CHECKED, BADGE_NOT_CHECKED, None
    utilization = demand / capacity
    if utilization <= 1.0:
        return DesignStatus.PASS, BADGE_OK, utilization
    return DesignStatus.FAIL, BADGE_FAIL, utilization
