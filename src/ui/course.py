"""Home page and course content of the three chapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

import streamlit as st

from src.auth.session import SessionRecord
from src.core.registry import CHAPTERS, calculators_for


@dataclass(frozen=True)
class Section:
    title: str
    text: str
    formulas: tuple = ()


@dataclass(frozen=True)
class Chapter:
    key: str
    summary: str
    sections: tuple = field(default_factory=tuple)


COURSE = {
    "planchers": Chapter(
        "planchers",
        "Dalles béton coulées sur bac acier collaborant : phase de construction, "
        "phase mixte, vérifications ELS et résistance au feu.",
        (
            Section(
                "Phase de construction",
                "Le bac acier sert de coffrage et reprend seul le poids du béton frais "
                "et la charge de chantier. S'il ne suffit pas, un étaiement est requis.",
                (r"p = 1{,}35\,g + 1{,}5\,q", r"M_{Ed} = \frac{p L^2}{8} \le M_{pa}",
                 r"\delta = \frac{5 g L^4}{384 E_a I_p} \le \min(L/180;\ L/150 + 10)"),
            ),
            Section(
                "Phase mixte : moment résistant",
                "L'axe neutre plastique se situe dans le béton lorsque la compression "
                "disponible dépasse la traction du bac.",
                (r"N_{pa} = A_p f_{yp}", r"N_{cf} = 0{,}85 f_{cd}\, b\, h_c",
                 r"M_{Rd} = N_{pa}\,(h_t - x_{pl}/2 - e)"),
            ),
            Section(
                "Cisaillement, flèche et vibrations",
                "Le cisaillement vertical est repris par les nervures ; la flèche est "
                "limitée à L/250 et la première fréquence propre doit dépasser 3 Hz.",
                (r"V_{Rd} = \frac{b}{b_r}\, b_0\, d_p\, k_v \sqrt{f_{ck}}",
                 r"f_1 = \frac{\pi}{2 L^2} \sqrt{\frac{E_a I_{eq}}{m}}"),
            ),
            Section(
                "Résistance au feu",
                "L'épaisseur minimale de béton assure l'isolation ; des armatures en "
                "nervure reprennent le moment en situation d'incendie.",
                (r"q_{fi} = g + \psi_1 q", r"A_{s,req} = \frac{M_{fi}}{0{,}9\, d_s f_{sk}}"),
            ),
        ),
    ),
    "poutres": Chapter(
        "poutres",
        "Poutres acier connectées à la dalle par goujons : largeur participante, "
        "moment plastique, connexion, flèche et effort tranchant.",
        (
            Section(
                "Largeur participante",
                "Seule une partie de la dalle participe à la flexion de la poutre.",
                (r"b_{ei} = \min(L_e/8;\ s/2)", r"b_{eff} = \min(2 b_{ei};\ s)"),
            ),
            Section(
                "Moment résistant plastique",
                "Selon la position de l'axe neutre plastique (dalle, semelle ou âme), "
                "le bras de levier entre traction et compression change.",
                (r"N_{a,pl} = A_a f_{yd}", r"N_{c,f} = 0{,}85 f_{cd}\, b_{eff}\, h_c"),
            ),
            Section(
                "Connecteurs",
                "La résistance d'un goujon est la plus faible entre la rupture de "
                "l'acier et l'écrasement du béton.",
                (r"P_{Rd} = \min\left(\frac{0{,}8 f_u \pi d^2/4}{\gamma_V};\ "
                 r"\frac{0{,}29 \alpha d^2 \sqrt{f_{ck} E_{cm}}}{\gamma_V}\right)",
                 r"n = \left\lceil \frac{\eta V_l}{P_{Rd}} \right\rceil"),
            ),
        ),
    ),
    "poteaux": Chapter(
        "poteaux",
        "Poteaux enrobés ou remplis : résistance plastique, flambement, flexion "
        "composée et résistance au feu.",
        (
            Section(
                "Résistance plastique",
                "Somme des contributions de l'acier, du béton et des armatures.",
                (r"N_{pl,Rd} = A_a f_{yd} + 0{,}85 A_c f_{cd} + A_s f_{sd}",
                 r"0{,}2 \le \delta = \frac{A_a f_{yd}}{N_{pl,Rd}} \le 0{,}9"),
            ),
            Section(
                "Flambement",
                "Méthode simplifiée par les courbes européennes de flambement.",
                (r"\bar\lambda = \sqrt{N_{pl,Rk}/N_{cr}}",
                 r"\chi = \frac{1}{\Phi + \sqrt{\Phi^2 - \bar\lambda^2}} \le 1"),
            ),
            Section(
                "Flexion composée",
                "Le moment résistant est réduit par l'effort normal.",
                (r"M_{Ed} \le \alpha_M\, \mu_d\, M_{pl,Rd}",),
            ),
        ),
    ),
}


def render_home(record: Optional[SessionRecord], open_chapter: Callable[[str], None]) -> None:
    """Chapter cards; ``open_chapter`` is called with the chosen chapter key."""
    if record is not None:
        st.markdown(f"### Bonjour {record.first_name} !")
    st.markdown(
        "Ce cours présente le dimensionnement des éléments mixtes acier-béton "
        "selon l'Eurocode 4, avec des calculateurs interactifs pour chaque vérification."
    )

    cols = st.columns(len(COURSE))
    for col, (key, chapter) in zip(cols, COURSE.items()):
        with col:
            st.markdown(f"#### {CHAPTERS[key]}")
            st.caption(chapter.summary)
            st.markdown(f"{len(calculators_for(key))} calculateurs")
            if st.button("Ouvrir", key=f"open_{key}", width="stretch"):
                open_chapter(key)


def render_chapter_course(chapter: str) -> None:
    """Course sections with their key formulas."""
    content = COURSE[chapter]
    st.markdown(content.summary)
    for section in content.sections:
        st.markdown(f"#### {section.title}")
        st.markdown(section.text)
        for formula in section.formulas:
            st.latex(formula)
