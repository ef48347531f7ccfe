"""PDF calculation notes and diagrams."""

import matplotlib.pyplot as plt
import numpy as np
import pytest
from reportlab.pdfbase import pdfmetrics

from src.core.registry import CALCULATORS
from src.models import BucklingCurve, DesignStatus
from src.reports.diagrams.buckling_curve import generate_buckling_curves, reduction_factor
from src.reports.diagrams.cross_section import generate_composite_section, pna_level
from src.reports.pdf_generator import (
    FONT, FONT_BOLD, PDFReportGenerator, build_calculation_note, flatten_fields,
)

PNG = b"\x89PNG"


class TestFlattenFields:

    def test_formatting(self):
        rows = flatten_fields({
            "ok": True, "status": DesignStatus.PASS, "value": 624.6912, "small": 0.0001234,
            "missing": None,
        })
        assert rows == [
            ["ok", "oui"], ["status", "pass"], ["value", "624.691"], ["small", "0.0001234"],
            ["missing", "—"],
        ]

    def test_nested(self):
        rows = flatten_fields({"count": {"total": 64, "per_half_span": 32}})
        assert rows == [["count.total", "64"], ["count.per_half_span", "32"]]


class TestCalculationNote:

    @pytest.mark.parametrize("name", ["beam_moment", "column_buckling", "slab_fire",
                                      "column_fire", "beam_connectors"])
    def test_pdf(self, name):
        pdf = build_calculation_note(name, CALCULATORS[name].example, reader="Marie Dupont")
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000

    def test_unicode_font_embedded(self):
        pdf = build_calculation_note("column_buckling", CALCULATORS["column_buckling"].example)
        assert b"DejaVuSans" in pdf

    def test_styles_use_unicode_font(self):
        styles = PDFReportGenerator().styles
        assert styles["BodyText"].fontName == FONT
        assert styles["Cell"].fontName == FONT
        assert styles["SectionHeader"].fontName == FONT_BOLD

    @pytest.mark.parametrize("char", ["✓", "✗", "⚠", "λ", "φ", "⁴", "⁻", "³", "\u0304"])
    def test_glyph_coverage(self, char):
        PDFReportGenerator()
        assert ord(char) in pdfmetrics.getFont(FONT).face.charToGlyph

    def test_invalid_inputs_raise(self):
        with pytest.raises(ValueError):
            build_calculation_note("slab_bending", {"deck": "unknown", "hc": 80})


class TestDiagrams:

    def test_composite_section_png(self, code):
        png = generate_composite_section(code.beam_profiles["IPE 360"], 2000, 100,
                                         pna_position="slab", pna_depth=75.9,
                                         return_figure=False)
        assert png.startswith(PNG)

    def test_composite_section_figure(self, code):
        fig = generate_composite_section(code.beam_profiles["IPE 360"], 2000, 80, hp=60)
        assert fig.axes[0].get_title() == "Section mixte"
        plt.close(fig)

    @pytest.mark.parametrize("position, depth, level", [
        ("slab", 40, 360 + 60 + 100 - 40),
        ("top_flange", 10, 350),
        ("web", 50, 310),
    ])
    def test_pna_level(self, code, position, depth, level):
        assert pna_level(code.beam_profiles["IPE 360"], 100, 60, position, depth) == level

    def test_buckling_curves_png(self):
        png = generate_buckling_curves(0.456, 0.903, BucklingCurve.B, return_figure=False)
        assert png.startswith(PNG)

    def test_reduction_factor(self):
        chi = reduction_factor(np.array([0.0, 0.2, 0.45612]), BucklingCurve.B.alpha)
        assert chi[0] == 1.0
        assert chi[1] == pytest.approx(1.0)
        assert chi[2] == pytest.approx(0.90316, abs=1e-4)
