"""
Finite difference schemes and the gradient checker.
"""

import numpy as np
import pytest

from aad_tape.finance import FormulaConfig
from aad_tape.utils import (FiniteDifferenceScheme, check_gradient, differentiate,
                            finite_difference_defaults)

X = [0.7, -1.3]


def f(x):
    return x[0] ** 3 + np.sin(x[1]) * x[0]


def f_gradient(x):
    return np.array([3.0 * x[0] ** 2 + np.sin(x[1]), np.cos(x[1]) * x[0]])


@pytest.mark.parametrize("scheme", list(FiniteDifferenceScheme))
def test_schemes_close_to_exact(scheme):
    epsilon, tolerance = finite_difference_defaults(scheme)
    fd = differentiate(f, X, epsilon, scheme)
    np.testing.assert_allclose(fd, f_gradient(X), atol=tolerance)


def test_one_sided_schemes_have_first_order_error():
    epsilon = 1.0E-3
    forward = differentiate(f, X, epsilon, FiniteDifferenceScheme.FORWARD)
    backward = differentiate(f, X, epsilon, FiniteDifferenceScheme.BACKWARD)
    symmetrical = differentiate(f, X, epsilon, FiniteDifferenceScheme.SYMMETRICAL)
    exact = f_gradient(X)
    assert abs(forward[0] - exact[0]) > 1.0E-4
    assert abs(backward[0] - exact[0]) > 1.0E-4
    assert abs(symmetrical[0] - exact[0]) < 1.0E-5
    # the average of the one-sided schemes is the symmetric one
    np.testing.assert_allclose(0.5 * (forward + backward), symmetrical, atol=1e-10)


def test_unknown_scheme():
    with pytest.raises(ValueError):
        differentiate(f, X, 1e-6, "symmetrical")
    with pytest.raises(ValueError):
        finite_difference_defaults("central")


def test_check_gradient():
    assert check_gradient(f, f_gradient(X), X)
    assert check_gradient(f, f_gradient(X), X, FiniteDifferenceScheme.FOURTH_ORDER)
    assert not check_gradient(f, f_gradient(X) + [0.0, 1.0E-3], X)
    with pytest.raises(ValueError):
        check_gradient(f, [1.0], X)


def test_check_gradient_verbose(capsys):
    check_gradient(f, f_gradient(X), X, verbose=True)
    out = capsys.readouterr().out
    assert "Gradient check (symmetrical" in out
    assert "x[1]" in out


def test_omega():
    assert FormulaConfig.omega(True) == 1.0
    assert FormulaConfig.omega(False) == -1.0


def test_defaults_by_scheme_or_name():
    for scheme in FiniteDifferenceScheme:
        assert finite_difference_defaults(scheme) == finite_difference_defaults(scheme.value)
    assert finite_difference_defaults(FiniteDifferenceScheme.FORWARD) == (1.0E-6, 1.0E-2)
    assert finite_difference_defaults("fourth_order") == (1.0E-4, 1.0E-6)


def test_finite_difference_has_no_finance_dependency():
    import aad_tape.utils.finite_difference as finite_difference
    assert not hasattr(finite_difference, "FormulaConfig")
