# aad/ops/arithmetic.py
import numbers
from typing import Optional, Sequence

import numpy as np

from ..core.entry import TapeEntry
from ..core.kinds import OperationKind
from ..core.tape import Tape
from ..core.var import Variable


def _as_var(x, name: str) -> Variable:
    """Operands recorded by index must be Variables; plain numbers go through the *_const builders."""
    if not isinstance(x, Variable):
        raise TypeError(f"{name} must be a Variable, got {type(x).__name__}")
    return x


def _as_const(c, name: str) -> np.float64:
    if isinstance(c, Variable) or isinstance(c, bool) or not isinstance(c, numbers.Real):
        raise TypeError(f"{name} must be a real number, got {type(c).__name__}")
    return np.float64(c)


def _record(tape: Tape, kind: OperationKind, value, operand1=None, operand2=None, extra=0.0) -> Variable:
    """
    Generic primitive:
      - appends one TapeEntry(kind, operands, value, extra)
      - returns the handle Variable(value, new index)
    """
    index = tape.append(TapeEntry(kind=kind, operand1=operand1, operand2=operand2,
                                  value=value, extra=extra))
    return Variable(value, index)


def input(x, tape: Tape) -> Variable:
    """
    Declare an independent variable. The gradient returned by
    `extract_gradient` lists the inputs in the order they were declared.
    """
    return _record(tape, OperationKind.INPUT, _as_const(x, "input value"))


def manual(operand: Variable, partial: float, tape: Tape,
           value: Optional[float] = None, previous: Optional[Variable] = None) -> Variable:
    """
    Splice an externally computed partial derivative into the tape.

    The new entry carries `value` and propagates `partial * bar` to `operand`.
    When `previous` (the result of an earlier manual splice) is given, the
    entry also passes its full adjoint to it, so a chain of splices threads
    the sensitivities to several inputs through one output:

        v1 = manual(x0, d0, tape, value=y)
        v2 = manual(x1, d1, tape, previous=v1)
        ...

    `value` defaults to the value of `previous`; a splice without `previous`
    must state it.
    """
    operand = _as_var(operand, "operand")
    partial = _as_const(partial, "partial")
    if previous is not None:
        previous = _as_var(previous, "previous")
        if value is None:
            value = previous.value
    elif value is None:
        raise ValueError("manual() without a previous splice needs the forward value")
    return _record(tape, OperationKind.MANUAL, _as_const(value, "value"),
                   operand1=operand.index,
                   operand2=None if previous is None else previous.index,
                   extra=partial)


def manual_chain(operands: Sequence[Variable], partials: Sequence[float], value: float,
                 tape: Tape) -> Variable:
    """
    Record one manual splice per operand, each chained to the previous one,
    and return the last. `partials[i]` is d(value)/d(operands[i]).
    """
    if len(operands) != len(partials):
        raise ValueError(
            f"manual_chain got {len(operands)} operands but {len(partials)} partials"
        )
    if len(operands) == 0:
        raise ValueError("manual_chain needs at least one operand")
    out = manual(operands[0], partials[0], tape, value=value)
    for operand, partial in zip(operands[1:], partials[1:]):
        out = manual(operand, partial, tape, previous=out)
    return out


def add(x: Variable, y: Variable, tape: Tape) -> Variable:
    x, y = _as_var(x, "x"), _as_var(y, "y")
    return _record(tape, OperationKind.ADD, x.value + y.value, x.index, y.index)


def add_const(x: Variable, c: float, tape: Tape) -> Variable:
    x, c = _as_var(x, "x"), _as_const(c, "c")
    return _record(tape, OperationKind.ADD_CONST, x.value + c, x.index, extra=c)


def sub(x: Variable, y: Variable, tape: Tape) -> Variable:
    x, y = _as_var(x, "x"), _as_var(y, "y")
    return _record(tape, OperationKind.SUB, x.value - y.value, x.index, y.index)


def sub_const(x: Variable, c: float, tape: Tape) -> Variable:
    """x - c, recorded as ADD_CONST with -c."""
    return add_const(x, -_as_const(c, "c"), tape)


def rsub_const(c: float, x: Variable, tape: Tape) -> Variable:
    """c - x, recorded as MUL_CONST(-1) followed by ADD_CONST(c)."""
    return add_const(neg(x, tape), c, tape)


def mul(x: Variable, y: Variable, tape: Tape) -> Variable:
    x, y = _as_var(x, "x"), _as_var(y, "y")
    return _record(tape, OperationKind.MUL, x.value * y.value, x.index, y.index)


def mul_const(x: Variable, c: float, tape: Tape) -> Variable:
    x, c = _as_var(x, "x"), _as_const(c, "c")
    return _record(tape, OperationKind.MUL_CONST, x.value * c, x.index, extra=c)


def neg(x: Variable, tape: Tape) -> Variable:
    """-x, recorded as MUL_CONST with -1."""
    return mul_const(x, -1.0, tape)


def div(x: Variable, y: Variable, tape: Tape) -> Variable:
    """
    x / y. A zero denominator gives IEEE inf / NaN (numpy warns, no exception),
    and the same values flow through the backward sweep.
    """
    x, y = _as_var(x, "x"), _as_var(y, "y")
    return _record(tape, OperationKind.DIV, np.divide(x.value, y.value), x.index, y.index)


def pow(x: Variable, y: Variable, tape: Tape) -> Variable:
    """
    x ** y with both arguments active.

    Local partials (computed in the sweep from the recorded values):
      d/dx = y * out / x
      d/dy = out * log(x)      (NaN for x <= 0, left as is)
    """
    x, y = _as_var(x, "x"), _as_var(y, "y")
    return _record(tape, OperationKind.POW, np.power(x.value, y.value), x.index, y.index)


def pow_const(x: Variable, p: float, tape: Tape) -> Variable:
    x, p = _as_var(x, "x"), _as_const(p, "p")
    return _record(tape, OperationKind.POW_CONST, np.power(x.value, p), x.index, extra=p)
