# aad/core/entry.py
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .kinds import OperationKind


@dataclass(frozen=True)
class TapeEntry:
    """
    One instruction recorded on the tape by an operation builder.

    Attributes
    ----------
    kind     : OperationKind
        Which elementary operation produced `value`.
    operand1 : Optional[int]
        Tape index of the first argument, None for INPUT.
    operand2 : Optional[int]
        Tape index of the second argument, None for unary / constant ops.
        For MANUAL it is the index of the previous manual entry in a chain.
    value    : float
        Forward result, fixed at creation.
    extra    : float
        Kind dependent: the constant of ADD_CONST / MUL_CONST / POW_CONST,
        the supplied partial of MANUAL, 0.0 otherwise.
    adjoint  : float
        d(output)/d(value). Zero until the tape is interpreted, afterwards
        only increased through `add_adjoint`; every other field is read-only.
    """
    kind: OperationKind
    operand1: Optional[int] = None
    operand2: Optional[int] = None
    value: float = 0.0
    extra: float = 0.0
    adjoint: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if not isinstance(self.kind, OperationKind):
            raise TypeError(f"TapeEntry kind must be an OperationKind, got {type(self.kind)}")
        object.__setattr__(self, "value", np.float64(self.value))
        object.__setattr__(self, "extra", np.float64(self.extra))
        object.__setattr__(self, "adjoint", np.float64(self.adjoint))

    def operands(self) -> Tuple[int, ...]:
        """Indices of the arguments actually present, first operand first."""
        return tuple(i for i in (self.operand1, self.operand2) if i is not None)

    def add_adjoint(self, contribution: float):
        object.__setattr__(self, "adjoint", self.adjoint + contribution)

    def __repr__(self):
        return (f"TapeEntry({self.kind.tag}, {self.operand1}, {self.operand2}: "
                f"value={self.value!r}, extra={self.extra!r}, adjoint={self.adjoint!r})")
