# aad_tape/__init__.py
# Tape-based adjoint algorithmic differentiation with finance client formulas

from .aad import *  # noqa: F401,F403
from .aad import __all__ as _aad_all
from . import finance, utils

__all__ = list(_aad_all) + ['finance', 'utils']
