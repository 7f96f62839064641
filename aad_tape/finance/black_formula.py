"""
Black-Scholes (Black 76) option price on a forward.

Inputs, in gradient order:
    [0] forward, [1] volatility, [2] numeraire, [3] strike, [4] expiry

    d+ = log(F/K) / (sigma sqrt(T)) + sigma sqrt(T) / 2
    d- = d+ - sigma sqrt(T)
    price = numeraire * omega * (F N(omega d+) - K N(omega d-))
"""

from typing import Tuple

import numpy as np
from scipy.stats import norm

from ..aad import ops
from ..aad.core.tape import Tape
from ..aad.core.var import Variable
from .config import FormulaConfig


def price(forward: float, volatility: float, numeraire: float, strike: float,
          expiry: float, is_call: bool) -> float:
    """Option price by the Black formula."""
    period_volatility = volatility * np.sqrt(expiry)
    d_plus = np.log(forward / strike) / period_volatility + 0.5 * period_volatility
    d_minus = d_plus - period_volatility
    omega = FormulaConfig.omega(is_call)
    n_plus = norm.cdf(omega * d_plus)
    n_minus = norm.cdf(omega * d_minus)
    return numeraire * omega * (forward * n_plus - strike * n_minus)


def price_aad(forward: float, volatility: float, numeraire: float, strike: float,
              expiry: float, is_call: bool) -> Tuple[float, np.ndarray]:
    """
    Price and its derivatives w.r.t. the five inputs, by a hand-written
    adjoint sweep.
    """
    # Forward sweep - function
    omega = FormulaConfig.omega(is_call)
    period_volatility = volatility * np.sqrt(expiry)
    d_plus = np.log(forward / strike) / period_volatility + 0.5 * period_volatility
    d_minus = d_plus - period_volatility
    n_plus = norm.cdf(omega * d_plus)
    n_minus = norm.cdf(omega * d_minus)
    value = numeraire * omega * (forward * n_plus - strike * n_minus)
    # Backward sweep - derivatives
    price_bar = 1.0
    n_minus_bar = numeraire * omega * -strike * price_bar
    n_plus_bar = numeraire * omega * forward * price_bar
    d_minus_bar = norm.pdf(omega * d_minus) * omega * n_minus_bar
    d_plus_bar = 1.0 * d_minus_bar + norm.pdf(omega * d_plus) * omega * n_plus_bar
    # d_plus_bar is 0 up to rounding (optimal exercise boundary)
    period_volatility_bar = (-1.0 * d_minus_bar
                             + (-np.log(forward / strike) / period_volatility ** 2 + 0.5) * d_plus_bar)
    input_bar = np.zeros(5)
    input_bar[4] = volatility * 0.5 / np.sqrt(expiry) * period_volatility_bar
    input_bar[3] = -1.0 / strike / period_volatility * d_plus_bar + numeraire * omega * -n_minus * price_bar
    input_bar[2] = omega * (forward * n_plus - strike * n_minus) * price_bar
    input_bar[1] = np.sqrt(expiry) * period_volatility_bar
    input_bar[0] = 1.0 / forward / period_volatility * d_plus_bar + numeraire * omega * n_plus * price_bar
    return value, input_bar


def price_aad_optimized(forward: float, volatility: float, numeraire: float, strike: float,
                        expiry: float, is_call: bool) -> Tuple[float, np.ndarray]:
    """Same as price_aad, dropping the d_plus_bar terms which vanish analytically."""
    # Forward sweep - function
    omega = FormulaConfig.omega(is_call)
    sqrt_expiry = np.sqrt(expiry)
    period_volatility = volatility * sqrt_expiry
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
    input_bar[4] = volatility * 0.5 / sqrt_expiry * period_volatility_bar
    input_bar[3] = numeraire * omega * -n_minus * price_bar
    input_bar[2] = omega * (forward * n_plus - strike * n_minus) * price_bar
    input_bar[1] = sqrt_expiry * period_volatility_bar
    input_bar[0] = numeraire * omega * n_plus * price_bar
    return value, input_bar


def price_aad_automatic(forward: Variable, volatility: Variable, numeraire: Variable,
                        strike: Variable, expiry: Variable, is_call: bool, tape: Tape) -> Variable:
    """Record the Black price on `tape` and return it as a Variable."""
    omega = FormulaConfig.omega(is_call)
    period_volatility = ops.mul(volatility, ops.sqrt(expiry, tape), tape)
    d_plus = ops.add(
        ops.div(ops.log(ops.div(forward, strike, tape), tape), period_volatility, tape),
        ops.mul_const(period_volatility, 0.5, tape), tape)
    d_minus = ops.sub(d_plus, period_volatility, tape)
    n_plus = ops.norm_cdf(ops.mul_const(d_plus, omega, tape), tape)
    n_minus = ops.norm_cdf(ops.mul_const(d_minus, omega, tape), tape)
    return ops.mul(
        ops.mul_const(numeraire, omega, tape),
        ops.sub(ops.mul(forward, n_plus, tape), ops.mul(strike, n_minus, tape), tape), tape)
