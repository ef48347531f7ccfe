"""
EN 1994-1-1 (Eurocode 4) reference data for the course calculators.

Tables covered:
- Steel decks and deck steel (composite slabs)
- Concrete classes (one table per chapter, as printed in the course)
- Structural steel grades and rolled profiles (beams and columns)
- Partial factors (EN 1993-1-1 6.1, EN 1992-1-1 2.4.2.4, EN 1994-1-1 6.6.3.1)
- Fire tables (EN 1994-1-2 tabulated data)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from src.utils.tables import load_ec4_tables
from .base_code import DesignCode


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DeckProfile:
    """Profiled steel deck properties, per metre width."""
    key: str
    label: str
    hp: float      # rib height (mm)
    br: float      # rib spacing (mm)
    b0: float      # mean rib width (mm)
    Ap: float      # steel area (mm²/m)
    Ip: float      # second moment of area (mm⁴/m)
    Weff: float    # effective section modulus (mm³/m)
    Mpa: float     # bending resistance of the bare deck (kN.m/m)
    weight: float  # self weight (kg/m²)


@dataclass(frozen=True)
class ConcreteProperties:
    """Concrete class properties (MPa). Optional fields depend on the table."""
    grade: str
    fck: float
    Ecm: float
    fcd: Optional[float] = None
    fcm: Optional[float] = None
    fctm: Optional[float] = None


@dataclass(frozen=True)
class SteelProperties:
    """Structural steel grade (MPa)."""
    grade: str
    fy: float
    fu: Optional[float] = None


@dataclass(frozen=True)
class BeamProfile:
    """Rolled I/H profile used as the steel part of a composite beam."""
    name: str
    Aa: float    # cm²
    ha: float    # mm
    bf: float    # mm
    tf: float    # mm
    tw: float    # mm
    Iy: float    # cm⁴
    Wply: float  # cm³


@dataclass(frozen=True)
class ColumnProfile:
    """Rolled H profile encased in or filled with concrete."""
    name: str
    Aa: float  # cm²
    Ia: float  # cm⁴
    h: float   # mm
    b: float   # mm


# ---------------------------------------------------------------------------
# Code
# ---------------------------------------------------------------------------

class EN1994(DesignCode):
    """
    EN 1994-1-1 - Design of composite steel and concrete structures.

    Records are built once from the cached YAML tables and never mutated.
    """

    TABLES = (
        "decks", "slab_concretes", "slab_fire",
        "beam_steels", "beam_concretes", "beam_profiles",
        "column_profiles", "column_concretes", "column_steels",
    )

    def __init__(self, tables: Optional[Dict[str, Any]] = None):
        self._tables = tables if tables is not None else load_ec4_tables()

        self.decks = {
            k: DeckProfile(key=k, **v) for k, v in self._tables["decks"].items()
        }
        self.slab_concretes = self._concretes("slab_concretes")
        self.beam_concretes = self._concretes("beam_concretes")
        self.column_concretes = self._concretes("column_concretes")
        self.beam_steels = self._steels("beam_steels")
        self.column_steels = self._steels("column_steels")
        self.beam_profiles = {
            k: BeamProfile(name=k, **v) for k, v in self._tables["beam_profiles"].items()
        }
        self.column_profiles = {
            k: ColumnProfile(name=k, **v) for k, v in self._tables["column_profiles"].items()
        }

    def _concretes(self, table: str) -> Dict[str, ConcreteProperties]:
        return {
            k: ConcreteProperties(grade=k, **v) for k, v in self._tables[table].items()
        }

    def _steels(self, table: str) -> Dict[str, SteelProperties]:
        return {
            k: SteelProperties(grade=k, **v) for k, v in self._tables[table].items()
        }

    @property
    def code_name(self) -> str:
        return "EN 1994-1-1:2004"

    def get_partial_safety_factors(self) -> Dict[str, float]:
        """
        Partial factors used throughout the course.

        - gamma_M0 / gamma_M1: structural steel (EN 1993-1-1 6.1)
        - gamma_C / gamma_S: concrete and rebar (EN 1992-1-1 Table 2.1N)
        - gamma_V: headed studs (EN 1994-1-1 6.6.3.1)
        """
        return dict(self._tables["partial_factors"])

    def table_keys(self, table: str) -> List[str]:
        if table not in self.TABLES:
            raise KeyError(f"Unknown reference table '{table}'")
        return list(self._tables[table].keys())

    def table_entry(self, table: str, key: str) -> Dict[str, Any]:
        """Raw values of one table entry, as read from the YAML file."""
        if key not in self.table_keys(table):
            raise KeyError(f"Unknown key '{key}' in table '{table}'")
        return dict(self._tables[table][key])

    # -- deck steel / rebar --------------------------------------------------

    @property
    def deck_fyp(self) -> float:
        return float(self._tables["deck_steel"]["fyp"])

    @property
    def Ea(self) -> float:
        """Elastic modulus of structural steel (MPa)."""
        return float(self._tables["deck_steel"]["Ea"])

    @property
    def rebar_fsk(self) -> float:
        return float(self._tables["rebar"]["fsk"])

    # -- fire tables ---------------------------------------------------------

    def slab_fire_requirement(self, rating: str) -> Dict[str, float]:
        """Minimum slab thickness and psi1 for a fire rating."""
        return dict(self._tables["slab_fire"][rating])

    def column_fire_dimensions(self, section_type: str) -> Dict[str, float]:
        """Minimum section dimension per rating for a column section type."""
        return dict(self._tables["column_fire"]["min_dimension"][section_type])

    def column_fire_covers(self) -> Dict[str, float]:
        """Minimum concrete cover per rating for encased columns."""
        return dict(self._tables["column_fire"]["min_cover"])

    @property
    def column_fire_max_load_level(self) -> float:
        return float(self._tables["column_fire"]["max_load_level"])


_default_code: EN1994 | None = None


def get_code() -> EN1994:
    """Shared EN1994 instance built from the cached tables."""
    global _default_code
    if _default_code is None:
        _default_code = EN1994()
    return _default_code
