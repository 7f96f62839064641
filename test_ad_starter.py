"""
Starter function: manual sweep, tape and bumping agree.
"""

import numpy as np
import pytest

from aad_tape.aad import Tape, gradient, interpret, extract_gradient
from aad_tape.aad import ops
from aad_tape.finance import ad_starter
from aad_tape.utils.finite_difference import FiniteDifferenceScheme, differentiate

A = [1.0, 2.0, 3.0, 4.0]
TOLERANCE_VALUE = 1.0E-10
TOLERANCE_DELTA = 1.0E-6


def test_value():
    expected = np.cos(1.0 + np.exp(2.0)) * (np.sin(3.0) + np.cos(4.0)) + 2.0 ** 1.5 + 4.0
    assert ad_starter.f(A) == pytest.approx(expected, abs=TOLERANCE_VALUE)


def test_manual_sweep_against_finite_difference():
    value, a_bar = ad_starter.f_aad(A)
    assert value == pytest.approx(ad_starter.f(A), abs=TOLERANCE_VALUE)
    fd = differentiate(ad_starter.f, A, 1.0E-6, FiniteDifferenceScheme.SYMMETRICAL)
    np.testing.assert_allclose(a_bar, fd, atol=TOLERANCE_DELTA)


def test_tape_matches_manual_sweep():
    value, a_bar = ad_starter.f_aad(A)
    tape = Tape()
    a = [ops.input(v, tape) for v in A]
    y = ad_starter.f_aad_automatic(a, tape)
    interpret(tape)
    assert y.value == pytest.approx(value, abs=TOLERANCE_VALUE)
    np.testing.assert_allclose(extract_gradient(tape), a_bar, atol=TOLERANCE_VALUE)


def test_gradient_wrapper_on_starter():
    value, a_bar = gradient(ad_starter.f_aad_automatic, A)
    value_expected, a_bar_expected = ad_starter.f_aad(A)
    assert value == pytest.approx(value_expected, abs=TOLERANCE_VALUE)
    np.testing.assert_allclose(a_bar, a_bar_expected, atol=TOLERANCE_VALUE)


def test_optimized_sweep_matches_manual_sweep():
    value, a_bar = ad_starter.f_aad(A)
    value_opt, a_bar_opt = ad_starter.f_aad_optimized(A)
    assert value_opt == pytest.approx(value, abs=TOLERANCE_VALUE)
    np.testing.assert_allclose(a_bar_opt, a_bar, atol=TOLERANCE_VALUE)
