"""
Reverse sweep: seeding, backward rules, gradient extraction, hybrid splices.
"""

import numpy as np
import pytest

from aad_tape.aad import Tape, gradient, interpret, extract_gradient
from aad_tape.aad import ops
from aad_tape.aad.core.graph_utils import check_topological
from aad_tape.utils.finite_difference import FiniteDifferenceScheme, differentiate

TOLERANCE_DOUBLE = 1.0E-10
EPSILON = 1.0E-6
TOLERANCE_DELTA = 1.0E-6


def _recorded_gradient(build, x):
    """Gradient of build(xs, tape) at x through the tape."""
    tape = Tape()
    xs = [ops.input(v, tape) for v in x]
    y = build(xs, tape)
    interpret(tape)
    return y.value, extract_gradient(tape), tape


def _recorded_value(build):
    """Plain float function of build, for finite differences."""
    def f(x):
        tape = Tape()
        return build([ops.input(v, tape) for v in x], tape).value
    return f


# ---------------- Concrete scenarios ---------------- #
def test_scenario_product_plus_input():
    value, grad, tape = _recorded_gradient(
        lambda xs, tape: ops.add(ops.mul(xs[0], xs[1], tape), xs[0], tape), [2.0, 3.0])
    assert value == 8.0
    np.testing.assert_allclose(grad, [4.0, 2.0], atol=TOLERANCE_DOUBLE)
    assert grad.dtype == np.float64


def test_scenario_sine():
    value, grad, _ = _recorded_gradient(lambda xs, tape: ops.sin(xs[0], tape), [0.5])
    assert value == pytest.approx(0.4794255386, abs=1e-10)
    np.testing.assert_allclose(grad, [0.8775825619], atol=1e-10)


def test_gradient_wrapper():
    value, grad = gradient(lambda xs, tape: ops.add(ops.mul(xs[0], xs[1], tape), xs[0], tape), [2.0, 3.0])
    assert value == 8.0
    np.testing.assert_allclose(grad, [4.0, 2.0])
    with pytest.raises(TypeError):
        gradient(lambda xs, tape: 1.0, [2.0])


# ---------------- Seeding and ordering ---------------- #
def test_single_seed_on_last_entry():
    _, _, tape = _recorded_gradient(
        lambda xs, tape: ops.exp(ops.mul(xs[0], xs[1], tape), tape), [0.3, 0.7])
    assert tape.get(tape.size() - 1).adjoint == 1.0
    assert tape.interpreted


def test_single_input_tape():
    tape = Tape()
    ops.input(123.4, tape)
    interpret(tape)
    assert tape.size() == 1
    assert tape.get(0).adjoint == 1.0
    np.testing.assert_array_equal(extract_gradient(tape), [1.0])


def test_gradient_in_declaration_order():
    tape = Tape()
    a = ops.input(1.0, tape)
    b = ops.input(2.0, tape)
    s = ops.mul_const(a, 10.0, tape)
    c = ops.input(3.0, tape)  # declared after an operation
    ops.add(ops.add(s, ops.mul_const(b, 20.0, tape), tape), ops.mul_const(c, 30.0, tape), tape)
    interpret(tape)
    np.testing.assert_allclose(extract_gradient(tape), [10.0, 20.0, 30.0])


def test_explicit_output():
    tape = Tape()
    x = ops.input(2.0, tape)
    y = ops.input(5.0, tape)
    z = ops.mul(x, y, tape)
    ops.add(z, x, tape)  # recorded after the output of interest
    interpret(tape, output=z)
    np.testing.assert_allclose(extract_gradient(tape), [5.0, 2.0])
    assert tape.get(tape.size() - 1).adjoint == 0.0


def test_explicit_output_index_out_of_range():
    tape = Tape()
    ops.input(2.0, tape)
    with pytest.raises(IndexError):
        interpret(tape, output=3)


# ---------------- Precondition violations ---------------- #
def test_interpret_empty_tape():
    with pytest.raises(ValueError):
        interpret(Tape())


def test_extract_before_interpret():
    tape = Tape()
    ops.sin(ops.input(0.5, tape), tape)
    with pytest.raises(RuntimeError):
        extract_gradient(tape)


def test_tape_is_consumed_by_interpretation():
    tape = Tape()
    x = ops.input(0.5, tape)
    ops.sin(x, tape)
    interpret(tape)
    with pytest.raises(RuntimeError):
        interpret(tape)
    with pytest.raises(RuntimeError):
        ops.cos(x, tape)


# ---------------- Spot checks of the local rules ---------------- #
def test_mul_rule():
    tape = Tape()
    a = ops.input(3.0, tape)
    b = ops.input(-1.5, tape)
    ops.mul(a, b, tape)
    interpret(tape)
    out = tape.get(2)
    assert tape.get(a.index).adjoint == b.value * out.adjoint
    assert tape.get(b.index).adjoint == a.value * out.adjoint


def test_add_rule():
    tape = Tape()
    a = ops.input(3.0, tape)
    b = ops.input(-1.5, tape)
    ops.add(a, b, tape)
    interpret(tape)
    assert tape.get(a.index).adjoint == tape.get(2).adjoint
    assert tape.get(b.index).adjoint == tape.get(2).adjoint


UNARY_CASES = [
    (ops.sin, np.sin, 0.7),
    (ops.cos, np.cos, 0.7),
    (ops.exp, np.exp, 0.7),
    (ops.log, np.log, 0.7),
    (ops.sqrt, np.sqrt, 0.7),
    (ops.norm_cdf, ops.normal_cdf, -0.4),
]


@pytest.mark.parametrize("builder, fn, x", UNARY_CASES)
def test_unary_rules_against_finite_difference(builder, fn, x):
    _, grad, _ = _recorded_gradient(lambda xs, tape: builder(xs[0], tape), [x])
    fd = (fn(x + EPSILON) - fn(x - EPSILON)) / (2.0 * EPSILON)
    assert grad[0] == pytest.approx(fd, abs=TOLERANCE_DELTA)


BINARY_CASES = [
    lambda xs, tape: ops.add(xs[0], xs[1], tape),
    lambda xs, tape: ops.sub(xs[0], xs[1], tape),
    lambda xs, tape: ops.mul(xs[0], xs[1], tape),
    lambda xs, tape: ops.div(xs[0], xs[1], tape),
    lambda xs, tape: ops.pow(xs[0], xs[1], tape),
    lambda xs, tape: ops.add(ops.add_const(xs[0], 2.0, tape), ops.mul_const(xs[1], -3.0, tape), tape),
    lambda xs, tape: ops.mul(ops.pow_const(xs[0], 2.5, tape), ops.rsub_const(1.0, xs[1], tape), tape),
]


@pytest.mark.parametrize("build", BINARY_CASES)
def test_binary_rules_against_finite_difference(build):
    x = [1.7, 0.6]
    _, grad, _ = _recorded_gradient(build, x)
    fd = differentiate(_recorded_value(build), x, EPSILON, FiniteDifferenceScheme.SYMMETRICAL)
    np.testing.assert_allclose(grad, fd, atol=TOLERANCE_DELTA)


def test_quotient_and_power_rules_exact():
    a, b = 1.7, 0.6
    _, grad, _ = _recorded_gradient(lambda xs, tape: ops.div(xs[0], xs[1], tape), [a, b])
    np.testing.assert_allclose(grad, [1.0 / b, -a / b ** 2], rtol=1e-14)
    _, grad, _ = _recorded_gradient(lambda xs, tape: ops.pow(xs[0], xs[1], tape), [a, b])
    np.testing.assert_allclose(grad, [b * a ** (b - 1.0), a ** b * np.log(a)], rtol=1e-14)


def test_nan_propagates_backward():
    with np.errstate(all="ignore"):
        _, grad, _ = _recorded_gradient(lambda xs, tape: ops.div(xs[0], xs[1], tape), [1.0, 0.0])
        assert grad[0] == np.inf
        assert grad[1] == -np.inf
        _, grad, _ = _recorded_gradient(lambda xs, tape: ops.sin(ops.log(xs[0], tape), tape), [-1.0])
        assert np.isnan(grad[0])
        _, grad, _ = _recorded_gradient(lambda xs, tape: ops.sqrt(xs[0], tape), [-4.0])
        assert np.isnan(grad[0])


# ---------------- Random programs ---------------- #
_RANDOM_OPS = ("add", "sub", "mul", "sin", "cos", "add_const", "mul_const")


def _random_program(rng, n_inputs, n_ops):
    program = []
    for k in range(n_ops):
        n_available = n_inputs + k
        program.append((_RANDOM_OPS[rng.randint(len(_RANDOM_OPS))],
                        rng.randint(n_available), rng.randint(n_available),
                        rng.uniform(-1.0, 1.0)))
    return program


def _run_program(program, xs, tape):
    values = list(xs)
    for name, i, j, c in program:
        if name in ("add", "sub", "mul"):
            # squashed through sin so values stay bounded
            values.append(ops.sin(getattr(ops, name)(values[i], values[j], tape), tape))
        elif name in ("sin", "cos"):
            values.append(getattr(ops, name)(values[i], tape))
        else:
            values.append(getattr(ops, name)(values[i], c, tape))
    return values[-1]


@pytest.mark.parametrize("seed", range(10))
def test_random_programs(seed):
    rng = np.random.RandomState(seed)
    n_inputs = 4
    program = _random_program(rng, n_inputs, 25)
    x = rng.uniform(-1.0, 1.0, n_inputs)
    build = lambda xs, tape: _run_program(program, xs, tape)
    _, grad, tape = _recorded_gradient(build, x)
    check_topological(tape)
    assert tape.get(tape.size() - 1).adjoint == 1.0
    fd = differentiate(_recorded_value(build), x, EPSILON, FiniteDifferenceScheme.SYMMETRICAL)
    np.testing.assert_allclose(grad, fd, rtol=1e-5, atol=TOLERANCE_DELTA)


# ---------------- Hybrid manual / automatic ---------------- #
def test_manual_splice_matches_automatic():
    x0 = [0.8, 1.3]

    def automatic(xs, tape):
        return ops.mul(ops.exp(ops.sin(xs[0], tape), tape), xs[1], tape)

    def hybrid(xs, tape):
        # sin(x) with its analytic derivative supplied by hand
        s = ops.manual(xs[0], np.cos(xs[0].value), tape, value=np.sin(xs[0].value))
        return ops.mul(ops.exp(s, tape), xs[1], tape)

    value_auto, grad_auto, _ = _recorded_gradient(automatic, x0)
    value_hybrid, grad_hybrid, _ = _recorded_gradient(hybrid, x0)
    assert value_hybrid == pytest.approx(value_auto, abs=TOLERANCE_DOUBLE)
    np.testing.assert_allclose(grad_hybrid, grad_auto, atol=TOLERANCE_DOUBLE)


def test_chained_manual_splice_matches_automatic():
    x0 = [0.8, 1.3, -0.4]

    def automatic(xs, tape):
        g = ops.add(ops.mul(xs[0], xs[1], tape), ops.sin(xs[2], tape), tape)
        return ops.mul_const(ops.log(ops.add_const(ops.mul(g, g, tape), 1.0, tape), tape), 2.0, tape)

    def hybrid(xs, tape):
        a, b, c = (float(x.value) for x in xs)
        g = ops.manual_chain(xs, [b, a, np.cos(c)], a * b + np.sin(c), tape)
        return ops.mul_const(ops.log(ops.add_const(ops.mul(g, g, tape), 1.0, tape), tape), 2.0, tape)

    value_auto, grad_auto, _ = _recorded_gradient(automatic, x0)
    value_hybrid, grad_hybrid, _ = _recorded_gradient(hybrid, x0)
    assert value_hybrid == pytest.approx(value_auto, abs=TOLERANCE_DOUBLE)
    np.testing.assert_allclose(grad_hybrid, grad_auto, atol=TOLERANCE_DOUBLE)


@pytest.mark.parametrize("output", [True, 1.0, "1"])
def test_explicit_output_must_be_an_index(output):
    tape = Tape()
    ops.input(2.0, tape)
    ops.input(5.0, tape)
    with pytest.raises(TypeError):
        interpret(tape, output=output)
    assert not tape.interpreted
    assert tape.get(1).adjoint == 0.0


def test_explicit_output_numpy_index():
    tape = Tape()
    x = ops.input(2.0, tape)
    y = ops.input(5.0, tape)
    ops.mul(x, y, tape)
    interpret(tape, output=np.int64(1))
    np.testing.assert_array_equal(extract_gradient(tape), [0.0, 1.0])
