"""
Black formula with a smile: the implied volatility depends on the strike.

The smile is described by interpolated volatilities at strike nodes. The
derivative of the price w.r.t. the forward depends on how the smile is
assumed to move with the forward:

    sticky strike          : volatility fixed for a given strike
    sticky simple moneyness: volatility fixed for a given K - F
    sticky log moneyness   : volatility fixed for a given log(K / F)
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.stats import norm

from ..aad import ops
from ..aad.core.tape import Tape
from ..aad.core.var import Variable
from .config import FormulaConfig
from .interpolation import InterpolationLinear


class BlackSmileDescription(ABC):
    """Abstract description of a Black implied volatility smile."""

    @abstractmethod
    def volatility(self, strike: float, forward: float) -> float:
        pass

    @abstractmethod
    def volatility_parameter_sensitivity(self, strike: float, forward: float) -> Tuple[float, np.ndarray]:
        """Volatility and its derivatives w.r.t. the smile parameters."""
        pass

    @abstractmethod
    def derivative_strike(self, strike: float, forward: float) -> float:
        """Derivative of the volatility w.r.t. the strike."""
        pass


class BlackSmileStrike(BlackSmileDescription):
    """Smile interpolated on the strike, volatilities given as floats."""

    def __init__(self, nodes: Sequence[float], volatilities: Sequence[float],
                 interpolation: Optional[InterpolationLinear] = None):
        if len(nodes) != len(volatilities):
            raise ValueError("nodes and volatilities must have the same length")
        self.nodes = np.asarray(nodes, dtype=np.float64)
        self.volatilities = np.asarray(volatilities, dtype=np.float64)
        self.interpolation = interpolation or InterpolationLinear()

    def volatility(self, strike, forward):
        return self.interpolation.interpolate(strike, self.nodes, self.volatilities)

    def volatility_parameter_sensitivity(self, strike, forward):
        return self.interpolation.interpolate_aad(strike, self.nodes, self.volatilities)

    def derivative_strike(self, strike, forward):
        return self.interpolation.derivative_x(strike, self.nodes, self.volatilities)


class BlackSmileSimpleMoneyness(BlackSmileDescription):
    """Smile interpolated on the simple moneyness F - K, volatilities given as floats."""

    def __init__(self, nodes: Sequence[float], volatilities: Sequence[float],
                 interpolation: Optional[InterpolationLinear] = None):
        if len(nodes) != len(volatilities):
            raise ValueError("nodes and volatilities must have the same length")
        self.nodes = np.asarray(nodes, dtype=np.float64)
        self.volatilities = np.asarray(volatilities, dtype=np.float64)
        self.interpolation = interpolation or InterpolationLinear()

    def volatility(self, strike, forward):
        return self.interpolation.interpolate(forward - strike, self.nodes, self.volatilities)

    def volatility_parameter_sensitivity(self, strike, forward):
        return self.interpolation.interpolate_aad(forward - strike, self.nodes, self.volatilities)

    def derivative_strike(self, strike, forward):
        # d(moneyness)/d(strike) = -1
        moneyness_bar = self.interpolation.derivative_x(forward - strike, self.nodes, self.volatilities)
        return -moneyness_bar


class BlackSmileDescriptionAad(ABC):
    """Abstract description of a smile whose volatility is recorded on a tape."""

    @abstractmethod
    def volatility(self, strike: Variable, forward: Variable, tape: Tape) -> Variable:
        pass


class BlackSmileStrikeAad(BlackSmileDescriptionAad):
    """Smile interpolated on the strike, volatilities recorded on a tape."""

    def __init__(self, nodes: Sequence[float], volatilities: Sequence[Variable],
                 interpolation: Optional[InterpolationLinear] = None):
        if len(nodes) != len(volatilities):
            raise ValueError("nodes and volatilities must have the same length")
        self.nodes = np.asarray(nodes, dtype=np.float64)
        self.volatilities = list(volatilities)
        self.interpolation = interpolation or InterpolationLinear()

    def volatility(self, strike: Variable, forward: Variable, tape: Tape) -> Variable:
        return self.interpolation.interpolate_aad_automatic(strike, self.nodes, self.volatilities, tape)


class BlackSmileFormula:
    """
    Black price with a strike dependent volatility.

    The manual adjoint versions return the derivatives w.r.t.
    [0] forward, [1] volatility, [2] numeraire, [3] strike, [4] expiry.
    """

    def price(self, forward: float, smile: BlackSmileDescription, numeraire: float,
              strike: float, expiry: float, is_call: bool) -> float:
        vol = smile.volatility(strike, forward)
        period_volatility = vol * np.sqrt(expiry)
        d_plus = np.log(forward / strike) / period_volatility + 0.5 * period_volatility
        d_minus = d_plus - period_volatility
        omega = FormulaConfig.omega(is_call)
        n_plus = norm.cdf(omega * d_plus)
        n_minus = norm.cdf(omega * d_minus)
        return numeraire * omega * (forward * n_plus - strike * n_minus)

    def _price_aad(self, forward, smile, numeraire, strike, expiry, is_call):
        # Forward sweep - function
        vol = smile.volatility(strike, forward)
        omega = FormulaConfig.omega(is_call)
        sqrt_expiry = np.sqrt(expiry)
        period_volatility = vol * sqrt_expiry
        d_plus = np.log(forward / strike) / period_volatility + 0.5 * period_volatility
        d_minus = d_plus - period_volatility
        n_plus = norm.cdf(omega * d_plus)
        n_minus = norm.cdf(omega * d_minus)
        value = numeraire * omega * (forward * n_plus - strike * n_minus)
        # Backward sweep - derivatives
        price_bar = 1.0
        n_minus_bar = numeraire * omega * -strike * price_bar
        d_minus_bar = norm.pdf(omega * d_minus) * omega * n_minus_bar
        period_volatility_bar = -1.0 * d_minus_bar
        input_bar = np.zeros(5)
        input_bar[4] = vol * 0.5 / sqrt_expiry * period_volatility_bar
        input_bar[3] = numeraire * omega * -n_minus * price_bar
        input_bar[2] = omega * (forward * n_plus - strike * n_minus) * price_bar
        input_bar[1] = sqrt_expiry * period_volatility_bar  # vega
        input_bar[0] = numeraire * omega * n_plus * price_bar  # delta
        return value, input_bar

    def price_aad_sticky_strike(self, forward, smile, numeraire, strike, expiry, is_call):
        """Delta with the volatility held fixed for the strike."""
        return self._price_aad(forward, smile, numeraire, strike, expiry, is_call)

    def price_aad_sticky_simple_moneyness(self, forward, smile, numeraire, strike, expiry, is_call):
        """Delta with the volatility held fixed for the simple moneyness K - F."""
        value, input_bar = self._price_aad(forward, smile, numeraire, strike, expiry, is_call)
        input_bar[0] += -input_bar[1] * smile.derivative_strike(strike, forward)
        return value, input_bar

    def price_aad_sticky_log_moneyness(self, forward, smile, numeraire, strike, expiry, is_call):
        """Delta with the volatility held fixed for the log moneyness log(K / F)."""
        value, input_bar = self._price_aad(forward, smile, numeraire, strike, expiry, is_call)
        input_bar[0] += -input_bar[1] * smile.derivative_strike(strike, forward) * strike / forward
        return value, input_bar

    def price_aad_automatic(self, forward: Variable, smile: BlackSmileDescriptionAad, numeraire: Variable,
                            strike: Variable, expiry: Variable, is_call: bool, tape: Tape) -> Variable:
        """Record the smile interpolation and the Black price on `tape`."""
        vol = smile.volatility(strike, forward, tape)
        period_volatility = ops.mul(vol, ops.sqrt(expiry, tape), tape)
        d_plus = ops.add(
            ops.div(ops.log(ops.div(forward, strike, tape), tape), period_volatility, tape),
            ops.mul_const(period_volatility, 0.5, tape), tape)
        d_minus = ops.sub(d_plus, period_volatility, tape)
        omega = FormulaConfig.omega(is_call)
        n_plus = ops.norm_cdf(ops.mul_const(d_plus, omega, tape), tape)
        n_minus = ops.norm_cdf(ops.mul_const(d_minus, omega, tape), tape)
        return ops.mul(
            ops.mul_const(numeraire, omega, tape),
            ops.sub(ops.mul(forward, n_plus, tape), ops.mul(strike, n_minus, tape), tape), tape)
