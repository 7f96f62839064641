# aad_tape/finance/__init__.py
# Client formulas built on the tape: each comes as a plain value, a
# hand-written adjoint and an automatic (recorded) version.

from . import ad_starter, black_formula, sabr_volatility, sabr_formula
from .config import FormulaConfig
from .interpolation import InterpolationLinear
from .black_smile import (
    BlackSmileDescription, BlackSmileStrike, BlackSmileSimpleMoneyness,
    BlackSmileDescriptionAad, BlackSmileStrikeAad, BlackSmileFormula,
)

__all__ = [
    "ad_starter", "black_formula", "sabr_volatility", "sabr_formula",
    "FormulaConfig",
    "InterpolationLinear",
    "BlackSmileDescription", "BlackSmileStrike", "BlackSmileSimpleMoneyness",
    "BlackSmileDescriptionAad", "BlackSmileStrikeAad", "BlackSmileFormula",
]
