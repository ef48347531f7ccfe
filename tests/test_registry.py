"""Calculator registry, page runner and routing helpers."""

import pytest

from src.core.registry import CALCULATORS, CHAPTERS, calculators_for, get_calculator, run_calculator
from src.models import SlabBendingInput
from src.ui import runner
from src.ui.session_state import CHAPTER_PAGES, PAGES, resolve_page


class TestRegistry:

    def test_sixteen_calculators(self):
        assert len(CALCULATORS) == 16
        assert [len(calculators_for(c)) for c in CHAPTERS] == [5, 7, 4]

    @pytest.mark.parametrize("name", sorted(CALCULATORS))
    def test_example_runs(self, name):
        calc = CALCULATORS[name]
        output = calc.run(calc.example)
        if hasattr(output, "status"):
            assert output.calculation_steps
        assert output.model_dump_json()

    def test_deterministic(self):
        first = run_calculator("beam_deflection", CALCULATORS["beam_deflection"].example)
        second = run_calculator("beam_deflection", CALCULATORS["beam_deflection"].example)
        assert first == second

    def test_accepts_model_instance(self):
        calc = get_calculator("slab_bending")
        inp = SlabBendingInput(**calc.example)
        assert calc.validate(inp) is inp

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="Available"):
            get_calculator("beam_torsion")


class TestPageRunner:

    def test_valid(self):
        output, errors = runner.run_calculator("column_combined",
                                               CALCULATORS["column_combined"].example)
        assert errors == []
        assert runner.status_label(output) == "✓ OK"

    def test_errors_instead_of_raising(self):
        output, errors = runner.run_calculator("slab_shear", {"deck": "cofraplus60_088", "hc": -5})
        assert output is None
        assert any(e.startswith("hc:") for e in errors)

    def test_label_without_verdict(self):
        output = CALCULATORS["beam_effective_width"].run({"span": 8000, "spacing": 3000})
        assert runner.status_label(output) == "—"


class TestRouting:

    @pytest.mark.parametrize("current, relative, expected", [
        ("cours/poutres/index.html", "../../index.html", "index.html"),
        ("accueil.html", "index.html", "index.html"),
        ("index.html", "cours/poteaux/index.html", "cours/poteaux/index.html"),
    ])
    def test_resolve(self, current, relative, expected):
        assert resolve_page(current, relative) == expected

    def test_every_chapter_has_a_page(self):
        assert set(CHAPTER_PAGES) == set(CHAPTERS)
        assert all(page in PAGES for page in CHAPTER_PAGES.values())
