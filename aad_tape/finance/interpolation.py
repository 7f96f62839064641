"""
Piecewise linear interpolation with its adjoint versions.

The derivatives of interest are the sensitivities of the interpolated level
to the node values (the market data), not to the abscissa.
"""

from typing import Sequence, Tuple

import numpy as np

from ..aad import ops
from ..aad.core.tape import Tape
from ..aad.core.var import Variable


def upper_index(x: float, nodes: Sequence[float]) -> int:
    """
    Index i of the segment [nodes[i-1], nodes[i]] containing x.
    x equal to the first node uses the first segment.
    """
    if len(nodes) < 2:
        raise ValueError("linear interpolation needs at least two nodes")
    if not nodes[0] <= x <= nodes[-1]:
        raise ValueError(f"x={x} is outside the node range [{nodes[0]}, {nodes[-1]}]")
    if x == nodes[0]:
        return 1
    i = 1
    while nodes[i] < x:
        i += 1
    return i


class InterpolationLinear:
    """Linear interpolation between (nodes[i], values[i]) pairs, nodes increasing."""

    def interpolate(self, x: float, nodes: Sequence[float], values: Sequence[float]) -> float:
        i = upper_index(x, nodes)
        num = 1.0 / (nodes[i] - nodes[i - 1])
        slope = (values[i] - values[i - 1]) * num
        return values[i - 1] + (x - nodes[i - 1]) * slope

    def derivative_x(self, x: float, nodes: Sequence[float], values: Sequence[float]) -> float:
        """
        Derivative of the interpolated level w.r.t. x. At a node the function
        is not differentiable; the left derivative is returned.
        """
        i = upper_index(x, nodes)
        return (values[i] - values[i - 1]) / (nodes[i] - nodes[i - 1])

    def interpolate_aad(self, x: float, nodes: Sequence[float],
                        values: Sequence[float]) -> Tuple[float, np.ndarray]:
        """Interpolated level and its derivatives w.r.t. every node value."""
        # Forward sweep - function
        i = upper_index(x, nodes)
        num = 1.0 / (nodes[i] - nodes[i - 1])
        slope = (values[i] - values[i - 1]) * num
        interp = values[i - 1] + (x - nodes[i - 1]) * slope
        # Backward sweep - derivatives
        interp_bar = 1.0
        slope_bar = (x - nodes[i - 1]) * interp_bar
        values_bar = np.zeros(len(values))
        values_bar[i - 1] += interp_bar
        values_bar[i] += num * slope_bar
        values_bar[i - 1] += -num * slope_bar
        return interp, values_bar

    def interpolate_aad_automatic(self, x: Variable, nodes: Sequence[float],
                                  values: Sequence[Variable], tape: Tape) -> Variable:
        """Record the interpolation on `tape`; x and the node values are Variables."""
        i = upper_index(float(x.value), nodes)
        slope = ops.mul_const(ops.sub(values[i], values[i - 1], tape),
                              1.0 / (nodes[i] - nodes[i - 1]), tape)
        return ops.add(values[i - 1],
                       ops.mul(slope, ops.sub_const(x, nodes[i - 1], tape), tape), tape)
