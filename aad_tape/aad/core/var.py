# aad/core/var.py
from __future__ import annotations
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Variable:
    """
    Active variable for tape-based adjoint differentiation.

    A plain handle on one tape entry: the forward value and the entry index.
    Several Variables may point at the same index; the tape entry value never
    changes, so they always agree.

    Attributes
    ----------
    value : float
        Forward (primal) value, float64.
    index : int
        Position of the producing entry on the tape.
    """
    value: float
    index: int

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, (int, np.integer)):
            raise TypeError(f"Variable index must be an integer, got {type(self.index)}")
        # frozen dataclass: bypass __setattr__ to normalise the value
        object.__setattr__(self, "value", np.float64(self.value))
        object.__setattr__(self, "index", int(self.index))

    def __float__(self):
        return float(self.value)

    def __repr__(self):
        return f"Variable({float(self.value)!r}, index={self.index})"
