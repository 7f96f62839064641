# aad_tape/utils/__init__.py

from .finite_difference import (
    FiniteDifferenceScheme, FINITE_DIFFERENCE_DEFAULTS, finite_difference_defaults,
    differentiate, check_gradient,
)

__all__ = [
    "FiniteDifferenceScheme", "FINITE_DIFFERENCE_DEFAULTS", "finite_difference_defaults",
    "differentiate", "check_gradient",
]
