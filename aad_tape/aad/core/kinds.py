# aad/core/kinds.py
from enum import Enum


class OperationKind(Enum):
    """
    Instruction tags a tape entry can hold.

    The set is closed: a new operation needs a member here, a builder in
    `aad.ops` and a backward rule in `aad.core.engine`.
    """
    INPUT = "input"            # independent variable, terminal of the sweep
    MANUAL = "manual"          # externally supplied partial derivative
    ADD = "add"
    ADD_CONST = "add_const"
    SUB = "sub"
    MUL = "mul"
    MUL_CONST = "mul_const"
    DIV = "div"
    POW = "pow"
    POW_CONST = "pow_const"
    SIN = "sin"
    COS = "cos"
    EXP = "exp"
    LOG = "log"
    SQRT = "sqrt"
    NORMAL_CDF = "norm_cdf"

    @property
    def tag(self) -> str:
        return self.value

    def __repr__(self):
        return f"OperationKind.{self.name}"
