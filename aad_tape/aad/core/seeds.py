# aad/core/seeds.py

#-----------------------------------------------------------------------------
# We "plant" a seed (dy/dy = 1) at the scalar output and let gradients grow
# backwards through the tape.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Iterable, List, Tuple

import numpy as np

from .tape import Tape
from .var import Variable
from .engine import interpret, extract_gradient


def value(x: Any) -> Any:
    """Return the numeric value of a Variable; pass through plain numbers unchanged."""
    return x.value if isinstance(x, Variable) else x


def gradient(f: Callable[[List[Variable], Tape], Variable],
             x0: Iterable[float]) -> Tuple[float, np.ndarray]:
    """
    Value and gradient of a scalar function y = f(xs, tape) at x0.

    Records one INPUT per element of x0 on a fresh tape (declaration order is
    the order of x0), evaluates f, then runs ONE reverse pass from the
    returned Variable.

    Example
    -------
    f = lambda xs, tape: ops.add(ops.mul(xs[0], xs[1], tape), xs[0], tape)
    gradient(f, [2.0, 3.0]) -> (8.0, array([4., 2.]))
    """
    from ..ops.arithmetic import input as record_input

    tape = Tape()
    xs: List[Variable] = [record_input(v, tape) for v in x0]
    y = f(xs, tape)
    if not isinstance(y, Variable):
        raise TypeError(f"gradient(f, x0) expects f to return a Variable, got {type(y).__name__}")
    interpret(tape, output=y)
    return y.value, extract_gradient(tape)
