# aad/ops/__init__.py

# Convenience re-exports so users can do: from aad_tape.aad.ops import mul, exp, ...
from .arithmetic import (
    input, manual, manual_chain,
    add, add_const, sub, sub_const, rsub_const,
    mul, mul_const, neg, div, pow, pow_const,
)
from .transcendental import sin, cos, exp, log, sqrt
from .special import norm_cdf, normal_cdf, normal_pdf

__all__ = [
    "input", "manual", "manual_chain",
    "add", "add_const", "sub", "sub_const", "rsub_const",
    "mul", "mul_const", "neg", "div", "pow", "pow_const",
    "sin", "cos", "exp", "log", "sqrt",
    "norm_cdf", "normal_cdf", "normal_pdf",
]
