# aad/core/__init__.py

"""
Core public API of the tape engine.

Exports:
    OperationKind    : Closed set of instruction tags.
    TapeEntry        : One recorded instruction (kind, operands, value, extra, adjoint).
    Tape             : Append-only arena of entries, one per computation.
    Variable         : (value, index) handle composed by formula code.
    interpret        : Reverse sweep populating every adjoint.
    extract_gradient : Adjoints of the INPUT entries in declaration order.
    gradient         : Convenience: value and gradient of f(xs, tape) at x0.
    value            : Convenience: numeric value of a Variable.
"""

from .kinds import OperationKind
from .entry import TapeEntry
from .tape import Tape
from .var import Variable
from .engine import interpret, extract_gradient
from .seeds import gradient, value
from .graph_utils import check_topological, tape_summary

__all__ = [
    "OperationKind", "TapeEntry", "Tape", "Variable",
    "interpret", "extract_gradient",
    "gradient", "value",
    "check_topological", "tape_summary",
]
