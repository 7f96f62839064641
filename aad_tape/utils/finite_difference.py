"""
Finite difference differentiation (bumping).

Used to validate adjoint gradients:
    FORWARD      f'(x) ~ [f(x+e) - f(x)] / e
    BACKWARD     f'(x) ~ [f(x) - f(x-e)] / e
    SYMMETRICAL  f'(x) ~ [f(x+e) - f(x-e)] / (2e)
    FOURTH_ORDER f'(x) ~ [-f(x+2e) + 8f(x+e) - 8f(x-e) + f(x-2e)] / (12e)
"""

from enum import Enum
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np


class FiniteDifferenceScheme(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    SYMMETRICAL = "symmetrical"
    FOURTH_ORDER = "fourth_order"


# scheme -> (shift, comparison tolerance against an exact gradient)
FINITE_DIFFERENCE_DEFAULTS = {
    FiniteDifferenceScheme.FORWARD: (1.0E-6, 1.0E-2),
    FiniteDifferenceScheme.BACKWARD: (1.0E-6, 1.0E-2),
    FiniteDifferenceScheme.SYMMETRICAL: (1.0E-6, 1.0E-6),
    FiniteDifferenceScheme.FOURTH_ORDER: (1.0E-4, 1.0E-6),
}


def finite_difference_defaults(scheme: Union[FiniteDifferenceScheme, str]) -> Tuple[float, float]:
    """
    Default (epsilon, tolerance) for a finite difference scheme.

    One-sided schemes have an O(epsilon) truncation error, hence the much
    looser tolerance; the symmetric schemes are O(epsilon^2) / O(epsilon^4).

    Args:
        scheme: a FiniteDifferenceScheme or its value, e.g. 'symmetrical'

    Returns:
        (epsilon, tolerance)
    """
    return FINITE_DIFFERENCE_DEFAULTS[FiniteDifferenceScheme(scheme)]


def _bumped(x: np.ndarray, i: int, shift: float) -> np.ndarray:
    x_shifted = x.copy()
    x_shifted[i] += shift
    return x_shifted


def differentiate(f: Callable[[np.ndarray], float], x: Sequence[float], epsilon: float,
                  scheme: FiniteDifferenceScheme = FiniteDifferenceScheme.SYMMETRICAL) -> np.ndarray:
    """
    Gradient of a scalar function of a vector by finite difference.

    Args:
        f: function taking a float64 array and returning a float
        x: point at which the derivative is computed
        epsilon: bump size
        scheme: finite difference scheme

    Returns:
        np.ndarray of df/dx[i]
    """
    x = np.asarray(x, dtype=np.float64)
    n = x.size
    derivative = np.zeros(n)

    if scheme is FiniteDifferenceScheme.FORWARD:
        y0 = f(x)
        for i in range(n):
            derivative[i] = (f(_bumped(x, i, epsilon)) - y0) / epsilon
    elif scheme is FiniteDifferenceScheme.BACKWARD:
        y0 = f(x)
        for i in range(n):
            derivative[i] = (y0 - f(_bumped(x, i, -epsilon))) / epsilon
    elif scheme is FiniteDifferenceScheme.SYMMETRICAL:
        for i in range(n):
            derivative[i] = (f(_bumped(x, i, epsilon)) - f(_bumped(x, i, -epsilon))) / (2.0 * epsilon)
    elif scheme is FiniteDifferenceScheme.FOURTH_ORDER:
        for i in range(n):
            derivative[i] = (-f(_bumped(x, i, 2.0 * epsilon)) + 8.0 * f(_bumped(x, i, epsilon))
                             - 8.0 * f(_bumped(x, i, -epsilon)) + f(_bumped(x, i, -2.0 * epsilon))
                             ) / (12.0 * epsilon)
    else:
        raise ValueError(
            "Finite difference scheme should be FORWARD, BACKWARD, SYMMETRICAL or FOURTH_ORDER"
        )
    return derivative


def check_gradient(f: Callable[[np.ndarray], float], gradient: Sequence[float], x: Sequence[float],
                   scheme: FiniteDifferenceScheme = FiniteDifferenceScheme.SYMMETRICAL,
                   epsilon: Optional[float] = None, tolerance: Optional[float] = None,
                   verbose: bool = False) -> bool:
    """
    Compare a gradient (typically from the tape) with finite differences.

    Args:
        f: plain float function used for the bumps
        gradient: gradient to check, one entry per element of x
        x: evaluation point
        scheme: finite difference scheme
        epsilon, tolerance: default to finite_difference_defaults(scheme)
        verbose: print one line per component

    Returns:
        True if every component agrees within tolerance (absolute).
    """
    default_eps, default_tol = finite_difference_defaults(scheme)
    epsilon = default_eps if epsilon is None else epsilon
    tolerance = default_tol if tolerance is None else tolerance

    gradient = np.asarray(gradient, dtype=np.float64)
    fd = differentiate(f, x, epsilon, scheme)
    if gradient.shape != fd.shape:
        raise ValueError(f"gradient has shape {gradient.shape}, expected {fd.shape}")
    errors = np.abs(gradient - fd)

    if verbose:
        print(f"Gradient check ({scheme.value}, eps={epsilon:.1e}, tol={tolerance:.1e})")
        for i, (g, d, e) in enumerate(zip(gradient, fd, errors)):
            flag = "ok" if e < tolerance else "FAIL"
            print(f"  x[{i}]: adjoint={g: .10e}  bumped={d: .10e}  err={e:.2e}  {flag}")

    return bool(np.all(errors < tolerance))
