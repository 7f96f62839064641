# aad/ops/transcendental.py
import numpy as np

from ..core.kinds import OperationKind
from ..core.tape import Tape
from ..core.var import Variable
from .arithmetic import _as_var, _record


def sin(x: Variable, tape: Tape) -> Variable:
    x = _as_var(x, "x")
    return _record(tape, OperationKind.SIN, np.sin(x.value), x.index)


def cos(x: Variable, tape: Tape) -> Variable:
    x = _as_var(x, "x")
    return _record(tape, OperationKind.COS, np.cos(x.value), x.index)


def exp(x: Variable, tape: Tape) -> Variable:
    x = _as_var(x, "x")
    return _record(tape, OperationKind.EXP, np.exp(x.value), x.index)


def log(x: Variable, tape: Tape) -> Variable:
    # log(0) = -inf, log(<0) = NaN
    x = _as_var(x, "x")
    return _record(tape, OperationKind.LOG, np.log(x.value), x.index)


def sqrt(x: Variable, tape: Tape) -> Variable:
    x = _as_var(x, "x")
    return _record(tape, OperationKind.SQRT, np.sqrt(x.value), x.index)
