"""
PDF calculation note generator using ReportLab.
"""

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle, Image
)
from datetime import datetime
from enum import Enum
from typing import Any, List, Mapping, Union
from xml.sax.saxutils import escape
import io
import logging
from pathlib import Path

import matplotlib
from pydantic import BaseModel

from src.codes.ec4 import get_code
from src.core.registry import Calculator, get_calculator
from src.models.outputs import CalculationStep, DesignStatus
from src.reports.diagrams.buckling_curve import generate_buckling_curves
from src.reports.diagrams.cross_section import generate_composite_section

logger = logging.getLogger(__name__)

_STATUS_COLORS = {
    DesignStatus.PASS: '#27ae60',
    DesignStatus.WARNING: '#f39c12',
    DesignStatus.FAIL: '#e74c3c',
    DesignStatus.NOT_CHECKED: '#7f8c8d',
}

# shown in their own sections
_RESULT_EXCLUDE = {"status", "badge", "warnings", "calculation_steps"}

# TrueType family shipped with matplotlib; the base-14 fonts lack ✓ ✗ ⚠ λ̄ and superscripts
FONT = 'DejaVuSans'
FONT_BOLD = 'DejaVuSans-Bold'
_FONT_FILES = {
    FONT: 'DejaVuSans.ttf',
    FONT_BOLD: 'DejaVuSans-Bold.ttf',
    'DejaVuSans-Oblique': 'DejaVuSans-Oblique.ttf',
    'DejaVuSans-BoldOblique': 'DejaVuSans-BoldOblique.ttf',
}


def register_fonts():
    """Register the DejaVu Sans family with ReportLab (once)."""
    if FONT in pdfmetrics.getRegisteredFontNames():
        return
    font_dir = Path(matplotlib.get_data_path()) / 'fonts' / 'ttf'
    for name, filename in _FONT_FILES.items():
        pdfmetrics.registerFont(TTFont(name, str(font_dir / filename)))
    pdfmetrics.registerFontFamily(
        FONT, normal=FONT, bold=FONT_BOLD,
        italic='DejaVuSans-Oblique', boldItalic='DejaVuSans-BoldOblique',
    )
    logger.debug("Registered %s from %s", FONT, font_dir)


def _format_value(value: Any) -> str:
    if value is None:
        return '—'
    if isinstance(value, bool):
        return 'oui' if value else 'non'
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return f'{value:.4g}' if abs(value) < 1e-3 or abs(value) >= 1e5 else f'{value:.3f}'
    return str(value)


def flatten_fields(data: Mapping[str, Any], prefix: str = '') -> List[List[str]]:
    """[name, value] rows; nested mappings become ``parent.child`` rows."""
    rows = []
    for key, value in data.items():
        name = f'{prefix}{key}'
        if isinstance(value, Mapping):
            rows.extend(flatten_fields(value, prefix=f'{name}.'))
        else:
            rows.append([name, _format_value(value)])
    return rows


class PDFReportGenerator:
    """
    Generate calculation notes for any registered calculator.
    """

    def __init__(self):
        register_fonts()
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()
        self._use_unicode_fonts()

    def _setup_custom_styles(self):
        """Set up custom paragraph styles."""
        self.styles.add(ParagraphStyle(
            name='TitleStyle',
            parent=self.styles['Title'],
            fontSize=18,
            spaceAfter=20,
            textColor=colors.HexColor('#2d5a8a')
        ))

        self.styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceBefore=16,
            spaceAfter=8,
            textColor=colors.HexColor('#34495e'),
        ))

        self.styles.add(ParagraphStyle(
            name='Cell',
            parent=self.styles['BodyText'],
            fontSize=8,
            leading=10,
        ))

    def _use_unicode_fonts(self):
        """Swap the base-14 fonts of every style for their DejaVu Sans face."""
        for style in self.styles.byName.values():
            name = style.fontName
            if 'Bold' in name:
                style.fontName = FONT_BOLD
            elif 'Oblique' in name or 'Italic' in name:
                style.fontName = 'DejaVuSans-Oblique'
            else:
                style.fontName = FONT

    def generate_report(
        self,
        calculator: Calculator,
        inputs: BaseModel,
        outputs: BaseModel,
        reader: str = '',
    ) -> bytes:
        """
        Build the note: inputs, results, calculation steps and, where the
        calculator has one, a diagram.

        Args:
            calculator: Registry entry that produced ``outputs``
            inputs: Validated input model
            outputs: Calculator result
            reader: Identity printed in the page footer

        Returns:
            PDF file content as bytes
        """
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=2*cm,
            leftMargin=2*cm,
            topMargin=2*cm,
            bottomMargin=2*cm,
            title=calculator.title,
        )

        story = []
        story.extend(self._build_header(calculator, outputs))
        story.extend(self._build_inputs(inputs))
        story.extend(self._build_results(outputs))
        story.extend(self._build_steps(getattr(outputs, 'calculation_steps', [])))
        story.extend(self._build_diagram(calculator, inputs, outputs))

        def footer(canvas, _doc):
            canvas.saveState()
            canvas.setFont(FONT, 8)
            canvas.setFillColor(colors.HexColor('#7f8c8d'))
            canvas.drawString(2*cm, 1.2*cm, f'Construction mixte - {calculator.title}')
            if reader:
                canvas.drawRightString(A4[0] - 2*cm, 1.2*cm, reader)
            canvas.restoreState()

        doc.build(story, onFirstPage=footer, onLaterPages=footer)
        logger.info("Generated calculation note for %s", calculator.name)

        buffer.seek(0)
        return buffer.getvalue()

    def _build_header(self, calculator, outputs):
        elements = [
            Paragraph(escape(f'NOTE DE CALCUL - {calculator.title.upper()}'),
                      self.styles['TitleStyle']),
            Paragraph(f'Calculateur : <b>{calculator.name}</b> '
                      f'({datetime.now().strftime("%d/%m/%Y %H:%M")})',
                      self.styles['BodyText']),
            Spacer(1, 10),
        ]

        status = getattr(outputs, 'status', None)
        if status is not None:
            color = _STATUS_COLORS[status]
            elements.append(Paragraph(
                f'<font color="{color}"><b>{escape(outputs.badge)}</b></font>',
                self.styles['Heading3']
            ))
        for warning in getattr(outputs, 'warnings', []):
            elements.append(Paragraph(f'⚠ {escape(warning)}', self.styles['BodyText']))
        return elements

    def _build_inputs(self, inputs):
        elements = [Paragraph('1. DONNÉES', self.styles['SectionHeader'])]
        rows = [['Paramètre', 'Valeur']] + flatten_fields(inputs.model_dump())
        elements.append(self._create_data_table(rows, [8*cm, 6*cm]))
        return elements

    def _build_results(self, outputs):
        elements = [Paragraph('2. RÉSULTATS', self.styles['SectionHeader'])]
        data = outputs.model_dump(exclude=_RESULT_EXCLUDE)
        rows = [['Grandeur', 'Valeur']] + flatten_fields(data)
        elements.append(self._create_data_table(rows, [8*cm, 6*cm]))
        return elements

    def _build_steps(self, steps: List[CalculationStep]):
        if not steps:
            return []
        elements = [Paragraph('3. DÉTAIL DES CALCULS', self.styles['SectionHeader'])]
        cell = self.styles['Cell']
        rows = [['#', 'Étape', 'Formule', 'Application', 'Résultat']]
        for step in steps:
            result = f'{step.result:.4g} {step.unit}'.strip()
            description = escape(step.description)
            if step.code_reference:
                description += f'<br/><i>{escape(step.code_reference)}</i>'
            rows.append([
                str(step.step_number),
                Paragraph(description, cell),
                Paragraph(escape(step.formula), cell),
                Paragraph(escape(step.substitution), cell),
                Paragraph(escape(result), cell),
            ])
        elements.append(self._create_data_table(rows, [0.8*cm, 4.2*cm, 4*cm, 4.5*cm, 2.5*cm]))
        return elements

    def _build_diagram(self, calculator, inputs, outputs):
        png = None
        if calculator.name == 'beam_moment':
            png = generate_composite_section(
                get_code().beam_profiles[inputs.profile], inputs.beff, inputs.hc, inputs.hp,
                outputs.pna_position, outputs.pna_depth, return_figure=False,
            )
        elif calculator.name == 'column_buckling':
            png = generate_buckling_curves(
                outputs.relative_slenderness, outputs.chi, inputs.curve, return_figure=False,
            )
        if png is None:
            return []
        return [
            Paragraph('4. SCHÉMA', self.styles['SectionHeader']),
            Image(io.BytesIO(png), width=15*cm, height=9*cm, kind='proportional'),
        ]

    def _create_data_table(self, data, col_widths):
        """Create a formatted data table."""
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2d5a8a')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, -1), FONT),
            ('FONTNAME', (0, 0), (-1, 0), FONT_BOLD),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.gray),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8f9fa')]),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        return table


def build_calculation_note(
    name: str,
    data: Union[Mapping[str, Any], BaseModel],
    reader: str = '',
) -> bytes:
    """Validate ``data``, run calculator ``name`` and render its note."""
    calculator = get_calculator(name)
    inputs = calculator.validate(data)
    outputs = calculator.run(inputs)
    return PDFReportGenerator().generate_report(calculator, inputs, outputs, reader)
