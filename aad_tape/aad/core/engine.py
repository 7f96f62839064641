# aad/core/engine.py
from __future__ import annotations
from typing import Optional, Union

import numpy as np

from .entry import TapeEntry
from .kinds import OperationKind
from .tape import Tape
from .var import Variable
from ..ops.special import normal_pdf


# ---------------- Backward rules, one per OperationKind ---------------- #
# Each rule receives the entry being visited (its adjoint is final) and the
# tape, and adds  bar(entry) * d(entry)/d(operand)  to every operand.

def _input_bar(entry: TapeEntry, tape: Tape):
    # Terminal: the adjoint stays on the entry and is read by extract_gradient.
    pass


def _manual_bar(entry: TapeEntry, tape: Tape):
    tape.get(entry.operand1).add_adjoint(entry.extra * entry.adjoint)
    if entry.operand2 is not None:
        # chained splice: the previous manual entry carries the same output
        tape.get(entry.operand2).add_adjoint(entry.adjoint)


def _add_bar(entry: TapeEntry, tape: Tape):
    tape.get(entry.operand1).add_adjoint(entry.adjoint)
    tape.get(entry.operand2).add_adjoint(entry.adjoint)


def _add_const_bar(entry: TapeEntry, tape: Tape):
    tape.get(entry.operand1).add_adjoint(entry.adjoint)


def _sub_bar(entry: TapeEntry, tape: Tape):
    tape.get(entry.operand1).add_adjoint(entry.adjoint)
    tape.get(entry.operand2).add_adjoint(-entry.adjoint)


def _mul_bar(entry: TapeEntry, tape: Tape):
    # y = a * b:  a_bar += b * y_bar,  b_bar += a * y_bar
    a, b = tape.get(entry.operand1), tape.get(entry.operand2)
    a.add_adjoint(b.value * entry.adjoint)
    b.add_adjoint(a.value * entry.adjoint)


def _mul_const_bar(entry: TapeEntry, tape: Tape):
    tape.get(entry.operand1).add_adjoint(entry.extra * entry.adjoint)


def _div_bar(entry: TapeEntry, tape: Tape):
    # y = a / b:  a_bar += y_bar / b,  b_bar += -a / b^2 * y_bar
    a, b = tape.get(entry.operand1), tape.get(entry.operand2)
    a.add_adjoint(np.divide(entry.adjoint, b.value))
    b.add_adjoint(np.divide(-a.value, b.value * b.value) * entry.adjoint)


def _pow_bar(entry: TapeEntry, tape: Tape):
    # y = a^b:  a_bar += b * y / a * y_bar,  b_bar += y * log(a) * y_bar
    a, b = tape.get(entry.operand1), tape.get(entry.operand2)
    a.add_adjoint(np.divide(b.value * entry.value, a.value) * entry.adjoint)
    b.add_adjoint(entry.value * np.log(a.value) * entry.adjoint)


def _pow_const_bar(entry: TapeEntry, tape: Tape):
    # y = a^p:  a_bar += p * y / a * y_bar
    a = tape.get(entry.operand1)
    a.add_adjoint(np.divide(entry.extra * entry.value, a.value) * entry.adjoint)


def _sin_bar(entry: TapeEntry, tape: Tape):
    a = tape.get(entry.operand1)
    a.add_adjoint(np.cos(a.value) * entry.adjoint)


def _cos_bar(entry: TapeEntry, tape: Tape):
    a = tape.get(entry.operand1)
    a.add_adjoint(-np.sin(a.value) * entry.adjoint)


def _exp_bar(entry: TapeEntry, tape: Tape):
    # d exp(a) / da = exp(a), already stored as the entry value
    tape.get(entry.operand1).add_adjoint(entry.value * entry.adjoint)


def _log_bar(entry: TapeEntry, tape: Tape):
    a = tape.get(entry.operand1)
    a.add_adjoint(np.divide(entry.adjoint, a.value))


def _sqrt_bar(entry: TapeEntry, tape: Tape):
    # d sqrt(a) / da = 0.5 / sqrt(a)
    tape.get(entry.operand1).add_adjoint(np.divide(0.5, entry.value) * entry.adjoint)


def _normal_cdf_bar(entry: TapeEntry, tape: Tape):
    a = tape.get(entry.operand1)
    a.add_adjoint(normal_pdf(a.value) * entry.adjoint)


_BACKWARD_RULES = {
    OperationKind.INPUT: _input_bar,
    OperationKind.MANUAL: _manual_bar,
    OperationKind.ADD: _add_bar,
    OperationKind.ADD_CONST: _add_const_bar,
    OperationKind.SUB: _sub_bar,
    OperationKind.MUL: _mul_bar,
    OperationKind.MUL_CONST: _mul_const_bar,
    OperationKind.DIV: _div_bar,
    OperationKind.POW: _pow_bar,
    OperationKind.POW_CONST: _pow_const_bar,
    OperationKind.SIN: _sin_bar,
    OperationKind.COS: _cos_bar,
    OperationKind.EXP: _exp_bar,
    OperationKind.LOG: _log_bar,
    OperationKind.SQRT: _sqrt_bar,
    OperationKind.NORMAL_CDF: _normal_cdf_bar,
}

_missing = set(OperationKind) - set(_BACKWARD_RULES)
if _missing:
    raise ImportError(f"no backward rule for {sorted(k.name for k in _missing)}")


# ---------------- Reverse sweep ---------------- #
def interpret(tape: Tape, output: Optional[Union[Variable, int]] = None):
    """
    Run the reverse sweep in place.

    Args:
        tape:   a completed tape; it is consumed (no appends afterwards).
        output: the scalar output to differentiate, as a Variable or a tape
                index. Defaults to the last recorded entry.

    The output adjoint is seeded with 1.0, then entries are visited in
    strictly descending index order. Operands always sit at lower indices,
    so an entry's adjoint is complete before its own rule reads it.
    Afterwards every entry holds d(output)/d(entry value).
    """
    if tape.size() == 0:
        raise ValueError("cannot interpret an empty tape")
    if tape.interpreted:
        raise RuntimeError("tape has already been interpreted; record on a new Tape")

    if output is None:
        start = tape.size() - 1
    elif isinstance(output, Variable):
        start = output.index
    elif isinstance(output, bool) or not isinstance(output, (int, np.integer)):
        raise TypeError(f"output must be a Variable or an integer index, got {type(output)}")
    else:
        start = int(output)
    tape.get(start).add_adjoint(1.0)

    for index in range(start, -1, -1):
        entry = tape.get(index)
        _BACKWARD_RULES[entry.kind](entry, tape)

    tape._mark_interpreted()


def extract_gradient(tape: Tape) -> np.ndarray:
    """
    Adjoints of all INPUT entries, in the order the inputs were declared.
    """
    if not tape.interpreted:
        raise RuntimeError("extract_gradient called before interpret; the adjoints are not populated")
    return np.array([entry.adjoint for entry in tape if entry.kind is OperationKind.INPUT],
                    dtype=np.float64)
