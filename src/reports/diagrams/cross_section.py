"""
Cross-section diagram of a composite beam using Matplotlib.
"""

import io
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from src.codes.ec4 import BeamProfile

_CONCRETE = '#ecf0f1'
_STEEL = '#7f8c8d'
_DECK = '#bdc3c7'
_PNA = '#e74c3c'


def figure_to_png(fig, dpi: int = 150) -> bytes:
    """Render a figure to PNG bytes and close it."""
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    buf.seek(0)
    return buf.getvalue()


def pna_level(profile: BeamProfile, hc: float, hp: float,
              pna_position: str, pna_depth: float) -> float:
    """Height of the plastic neutral axis above the steel bottom fibre (mm).

    In the slab ``pna_depth`` is measured from the slab top, otherwise from
    the top of the steel profile.
    """
    if pna_position == "slab":
        return profile.ha + hp + hc - pna_depth
    return profile.ha - pna_depth


def generate_composite_section(
    profile: BeamProfile,
    beff: float,
    hc: float,
    hp: float = 0.0,
    pna_position: Optional[str] = None,
    pna_depth: Optional[float] = None,
    return_figure: bool = True,
):
    """
    Draw the concrete slab of width beff on top of the rolled profile.

    Args:
        profile: Steel profile (mm dimensions)
        beff: Effective slab width in mm
        hc: Concrete thickness above the deck in mm
        hp: Deck rib height in mm (0 for a solid slab)
        pna_position: "slab", "top_flange" or "web" to draw the PNA
        pna_depth: PNA depth as returned by the moment calculator (mm)
        return_figure: If True, return figure; if False, return PNG bytes

    Returns:
        Matplotlib figure or PNG bytes
    """
    ha, bf, tf, tw = profile.ha, profile.bf, profile.tf, profile.tw
    top = ha + hp + hc

    fig, ax = plt.subplots(1, 1, figsize=(8, 5))

    # Steel profile: bottom flange, web, top flange
    for x, y, w, h in (
        (-bf / 2, 0, bf, tf),
        (-tw / 2, tf, tw, ha - 2 * tf),
        (-bf / 2, ha - tf, bf, tf),
    ):
        ax.add_patch(Rectangle((x, y), w, h, facecolor=_STEEL,
                               edgecolor='#2c3e50', linewidth=1))

    if hp > 0:
        ax.add_patch(Rectangle((-beff / 2, ha), beff, hp, facecolor=_DECK,
                               edgecolor='#2c3e50', linewidth=1, hatch='//'))

    ax.add_patch(Rectangle((-beff / 2, ha + hp), beff, hc, facecolor=_CONCRETE,
                           edgecolor='#2c3e50', linewidth=2))

    if pna_position and pna_depth is not None:
        y = pna_level(profile, hc, hp, pna_position, pna_depth)
        ax.axhline(y, color=_PNA, linestyle='--', linewidth=1.5)
        ax.text(beff / 2, y + 5, f'ANP (zpl = {pna_depth:.1f} mm)',
                ha='right', va='bottom', fontsize=9, color=_PNA, fontweight='bold')

    # Dimensions
    dim_offset = 0.04 * beff
    ax.annotate('', xy=(-beff / 2, top + dim_offset), xytext=(beff / 2, top + dim_offset),
                arrowprops=dict(arrowstyle='<->', color='black', lw=1))
    ax.text(0, top + dim_offset + 5, f'beff = {beff:.0f} mm',
            ha='center', va='bottom', fontsize=10, fontweight='bold')

    x_dim = beff / 2 + dim_offset
    ax.annotate('', xy=(x_dim, ha + hp), xytext=(x_dim, top),
                arrowprops=dict(arrowstyle='<->', color='black', lw=1))
    ax.text(x_dim + 10, ha + hp + hc / 2, f'hc = {hc:.0f}',
            ha='left', va='center', fontsize=9)
    ax.annotate('', xy=(bf / 2 + dim_offset, 0), xytext=(bf / 2 + dim_offset, ha),
                arrowprops=dict(arrowstyle='<->', color='black', lw=1))
    ax.text(bf / 2 + dim_offset + 10, ha / 2, f'{profile.name}\nha = {ha:.0f}',
            ha='left', va='center', fontsize=9)

    margin = 2 * dim_offset
    ax.set_xlim(-beff / 2 - margin, beff / 2 + 3 * margin)
    ax.set_ylim(-margin, top + 3 * margin)
    ax.set_aspect('equal')
    ax.axis('off')
    ax.set_title('Section mixte', fontsize=12, fontweight='bold')

    plt.tight_layout()

    if return_figure:
        return fig
    return figure_to_png(fig)
