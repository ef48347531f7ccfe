"""
Abstract base class for design code provisions.
Keeps the calculators independent of where the reference tables come from.
"""

from abc import ABC, abstractmethod
from typing import Dict, List


class DesignCode(ABC):
    """
    Abstract base class for structural design codes.

    Purpose:
    - Define interface for code-specific provisions
    - Centralize material and profile lookups
    - Centralize code clause references
    """

    @property
    @abstractmethod
    def code_name(self) -> str:
        """Return the code name/version."""
        pass

    @abstractmethod
    def get_partial_safety_factors(self) -> Dict[str, float]:
        """Return partial safety factors for materials."""
        pass

    @abstractmethod
    def table_keys(self, table: str) -> List[str]:
        """Return the keys of a reference table, in table order."""
        pass

    def has_key(self, table: str, key: str) -> bool:
        """Check whether ``key`` exists in reference table ``table``."""
        return key in self.table_keys(table)
