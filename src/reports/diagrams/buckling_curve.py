"""
European buckling curves χ(λ̄) with the design point of a column.
"""

from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from src.models.inputs import BucklingCurve
from src.reports.diagrams.cross_section import figure_to_png

_COLORS = {
    BucklingCurve.A0: '#8e44ad',
    BucklingCurve.A: '#2980b9',
    BucklingCurve.B: '#27ae60',
    BucklingCurve.C: '#f39c12',
    BucklingCurve.D: '#c0392b',
}


def reduction_factor(lam: np.ndarray, alpha: float) -> np.ndarray:
    """Vectorized χ = 1 / (Φ + √(Φ² - λ̄²)), capped at 1."""
    phi = 0.5 * (1 + alpha * (lam - 0.2) + lam ** 2)
    return np.minimum(1.0, 1 / (phi + np.sqrt(phi ** 2 - lam ** 2)))


def generate_buckling_curves(
    relative_slenderness: Optional[float] = None,
    chi: Optional[float] = None,
    curve: Optional[BucklingCurve] = None,
    max_slenderness: float = 3.0,
    return_figure: bool = True,
):
    """
    Plot the five curves and, when given, the computed (λ̄, χ) point.

    Returns:
        Matplotlib figure or PNG bytes
    """
    upper = max(max_slenderness, (relative_slenderness or 0) * 1.1)
    lam = np.linspace(0.0, upper, 301)

    fig, ax = plt.subplots(1, 1, figsize=(7, 4.5))
    for c in BucklingCurve:
        highlighted = c == curve
        ax.plot(lam, reduction_factor(lam, c.alpha), color=_COLORS[c],
                linewidth=2.5 if highlighted else 1.2,
                label=f'courbe {c.value} (α = {c.alpha})')

    if relative_slenderness is not None and chi is not None:
        ax.plot([relative_slenderness], [chi], marker='o', markersize=8, color='black')
        ax.annotate(f'λ̄ = {relative_slenderness:.2f}\nχ = {chi:.3f}',
                    xy=(relative_slenderness, chi), xytext=(10, 10),
                    textcoords='offset points', fontsize=9)

    ax.axvline(2.0, color='gray', linestyle=':', linewidth=1)
    ax.set_xlim(0, upper)
    ax.set_ylim(0, 1.05)
    ax.set_xlabel('Élancement réduit λ̄')
    ax.set_ylabel('Coefficient de réduction χ')
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize=8, loc='upper right')
    ax.set_title('Courbes de flambement', fontsize=12, fontweight='bold')

    plt.tight_layout()

    if return_figure:
        return fig
    return figure_to_png(fig)
