"""
Starter example for adjoint differentiation.

    f(a) = cos(a0 + exp(a1)) * (sin(a2) + cos(a3)) + a1^1.5 + a3

Versions: plain value, hand-written backward sweep (plain and optimized), and the tape.
"""

from typing import Sequence, Tuple

import numpy as np

from ..aad import ops
from ..aad.core.tape import Tape
from ..aad.core.var import Variable


def f(a: Sequence[float]) -> float:
    b1 = a[0] + np.exp(a[1])
    b2 = np.sin(a[2]) + np.cos(a[3])
    b3 = np.power(a[1], 1.5) + a[3]
    b4 = np.cos(b1) * b2 + b3
    return b4


def f_aad(a: Sequence[float]) -> Tuple[float, np.ndarray]:
    """Value of f and its derivatives w.r.t. a[0..3], by a manual adjoint sweep."""
    # Forward sweep - function
    b1 = a[0] + np.exp(a[1])
    b2 = np.sin(a[2]) + np.cos(a[3])
    b3 = np.power(a[1], 1.5) + a[3]
    b4 = np.cos(b1) * b2 + b3
    # Backward sweep - derivatives
    a_bar = np.zeros(len(a))
    b4_bar = 1.0
    b3_bar = 1.0 * b4_bar
    b2_bar = np.cos(b1) * b4_bar
    b1_bar = b2 * -np.sin(b1) * b4_bar
    a_bar[3] = 1.0 * b3_bar - np.sin(a[3]) * b2_bar
    a_bar[2] = np.cos(a[2]) * b2_bar
    a_bar[1] = 1.5 * np.sqrt(a[1]) * b3_bar + np.exp(a[1]) * b1_bar
    a_bar[0] = 1.0 * b1_bar
    return b4, a_bar


def f_aad_optimized(a: Sequence[float]) -> Tuple[float, np.ndarray]:
    """As f_aad, reusing the forward intermediates exp(a1), a1^1.5 and cos(b1)."""
    # Forward sweep - function
    tmp1 = np.exp(a[1])
    tmp2 = np.power(a[1], 1.5)
    b1 = a[0] + tmp1
    b2 = np.sin(a[2]) + np.cos(a[3])
    tmp3 = np.cos(b1)
    b3 = tmp2 + a[3]
    b4 = tmp3 * b2 + b3
    # Backward sweep - derivatives
    a_bar = np.zeros(len(a))
    b4_bar = 1.0
    b3_bar = b4_bar
    b2_bar = tmp3 * b4_bar
    b1_bar = b2 * -np.sin(b1) * b4_bar
    a_bar[3] = b3_bar - np.sin(a[3]) * b2_bar
    a_bar[2] = np.cos(a[2]) * b2_bar
    a_bar[1] = 1.5 * tmp2 / a[1] * b3_bar + tmp1 * b1_bar
    a_bar[0] = b1_bar
    return b4, a_bar


def f_aad_automatic(a: Sequence[Variable], tape: Tape) -> Variable:
    """Record f on `tape`; interpret the tape to obtain the derivatives."""
    b1 = ops.add(a[0], ops.exp(a[1], tape), tape)
    b2 = ops.add(ops.sin(a[2], tape), ops.cos(a[3], tape), tape)
    b3 = ops.add(ops.pow_const(a[1], 1.5, tape), a[3], tape)
    b4 = ops.add(ops.mul(ops.cos(b1, tape), b2, tape), b3, tape)
    return b4
