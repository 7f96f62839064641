# aad/__init__.py
# Tape-based Adjoint Algorithmic Differentiation

from .core.kinds import OperationKind
from .core.entry import TapeEntry
from .core.tape import Tape
from .core.var import Variable
from .core.engine import interpret, extract_gradient
from .core.seeds import gradient, value
from .core.graph_utils import check_topological, tape_summary

# Operation builders
from . import ops
from .ops import (
    input, manual, manual_chain,
    add, add_const, sub, sub_const, rsub_const,
    mul, mul_const, neg, div, pow, pow_const,
    sin, cos, exp, log, sqrt,
    norm_cdf, normal_cdf, normal_pdf,
)

__all__ = [
    # Core
    'OperationKind',
    'TapeEntry',
    'Tape',
    'Variable',
    # Engine
    'interpret',
    'extract_gradient',
    'gradient',
    'value',
    'check_topological',
    'tape_summary',
    # Builders
    'ops',
    'input', 'manual', 'manual_chain',
    'add', 'add_const', 'sub', 'sub_const', 'rsub_const',
    'mul', 'mul_const', 'neg', 'div', 'pow', 'pow_const',
    'sin', 'cos', 'exp', 'log', 'sqrt',
    'norm_cdf', 'normal_cdf', 'normal_pdf',
]
