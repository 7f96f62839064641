# aad/ops/special.py
import numpy as np
from scipy.special import ndtr

from ..core.kinds import OperationKind
from ..core.tape import Tape
from ..core.var import Variable
from .arithmetic import _as_var, _record

SQRT_TWO_PI = np.sqrt(2.0 * np.pi)


def normal_pdf(x):
    """Standard normal density phi(x). Works on scalars and arrays."""
    return np.exp(-0.5 * np.square(x)) / SQRT_TWO_PI


def normal_cdf(x):
    """Standard normal cumulative distribution Phi(x). Works on scalars and arrays."""
    return ndtr(x)


def norm_cdf(x: Variable, tape: Tape) -> Variable:
    """
    Primitive: returns N(x) and records a NORMAL_CDF entry.
    The sweep uses dN/dx = phi(x) evaluated at the recorded argument.
    """
    x = _as_var(x, "x")
    return _record(tape, OperationKind.NORMAL_CDF, np.float64(normal_cdf(x.value)), x.index)
