"""
Formula Configuration

Shared constants of the client formulas.
"""


class FormulaConfig:
    """Shared configuration for the finance formulas"""

    # Range around 0 for which z/x(z) in the SABR formula is replaced by its
    # first order expansion 1 - 0.5 * z * rho.
    SABR_Z_RANGE: float = 1.0E-6

    @staticmethod
    def omega(is_call: bool) -> float:
        """Payoff sign: +1 for a call, -1 for a put."""
        return 1.0 if is_call else -1.0
