"""
Option price in the SABR model: the SABR implied volatility fed into the
Black formula.

Inputs, in gradient order:
    [0] forward, [1] alpha, [2] beta, [3] rho, [4] nu,
    [5] numeraire, [6] strike, [7] expiry

Besides the fully manual and fully automatic versions, three mixed versions
combine the two styles:
    price_aad_mixed1  manual signature; manual volatility, Black on an inner tape
    price_aad_mixed2  automatic signature; volatility recorded, Black manual
                      (optimized) spliced as five chained MANUAL entries
    price_aad_mixed3  automatic signature; volatility manual spliced as seven
                      chained MANUAL entries, Black recorded
"""

from typing import Tuple

import numpy as np

from ..aad import ops
from ..aad.core.engine import interpret, extract_gradient
from ..aad.core.tape import Tape
from ..aad.core.var import Variable
from . import black_formula, sabr_volatility

N_INPUTS = 8


def price(forward: float, alpha: float, beta: float, rho: float, nu: float,
          numeraire: float, strike: float, expiry: float, is_call: bool) -> float:
    vol = sabr_volatility.volatility(forward, alpha, beta, rho, nu, strike, expiry)
    return black_formula.price(forward, vol, numeraire, strike, expiry, is_call)


def _chain_rule(price_bar: np.ndarray, vol_bar: np.ndarray) -> np.ndarray:
    """
    Combine the Black derivatives [F, vol, N, K, T] with the SABR volatility
    derivatives [F, alpha, beta, rho, nu, K, T] into the eight price inputs.
    """
    volatility_bar = price_bar[1]
    input_bar = np.zeros(N_INPUTS)
    input_bar[7] += price_bar[4] + vol_bar[6] * volatility_bar
    input_bar[6] += price_bar[3] + vol_bar[5] * volatility_bar
    input_bar[5] += price_bar[2]
    input_bar[1:5] += vol_bar[1:5] * volatility_bar
    input_bar[0] += price_bar[0] + vol_bar[0] * volatility_bar
    return input_bar


def price_aad(forward: float, alpha: float, beta: float, rho: float, nu: float,
              numeraire: float, strike: float, expiry: float,
              is_call: bool) -> Tuple[float, np.ndarray]:
    """Price and its derivatives w.r.t. the eight inputs, both layers manual."""
    vol, vol_bar = sabr_volatility.volatility_aad(forward, alpha, beta, rho, nu, strike, expiry)
    value, price_bar = black_formula.price_aad_optimized(forward, vol, numeraire, strike, expiry, is_call)
    return value, _chain_rule(price_bar, vol_bar)


def price_aad_automatic(forward: Variable, alpha: Variable, beta: Variable, rho: Variable,
                        nu: Variable, numeraire: Variable, strike: Variable, expiry: Variable,
                        is_call: bool, tape: Tape) -> Variable:
    """Record both the volatility and the Black price on `tape`."""
    vol = sabr_volatility.volatility_aad_automatic(forward, alpha, beta, rho, nu, strike, expiry, tape)
    return black_formula.price_aad_automatic(forward, vol, numeraire, strike, expiry, is_call, tape)


def price_aad_mixed1(forward: float, alpha: float, beta: float, rho: float, nu: float,
                     numeraire: float, strike: float, expiry: float,
                     is_call: bool) -> Tuple[float, np.ndarray]:
    """
    Manual adjoint signature. The volatility uses the hand-written sweep; the
    Black formula is recorded on a local tape and interpreted, and its
    derivatives enter the outer manual sweep.
    """
    vol, vol_bar = sabr_volatility.volatility_aad(forward, alpha, beta, rho, nu, strike, expiry)
    tape = Tape()
    black_inputs = [ops.input(v, tape) for v in (forward, vol, numeraire, strike, expiry)]
    p = black_formula.price_aad_automatic(*black_inputs, is_call, tape)
    interpret(tape)
    return p.value, _chain_rule(extract_gradient(tape), vol_bar)


def price_aad_mixed2(forward: Variable, alpha: Variable, beta: Variable, rho: Variable,
                     nu: Variable, numeraire: Variable, strike: Variable, expiry: Variable,
                     is_call: bool, tape: Tape) -> Variable:
    """
    Automatic signature. The volatility is recorded; the Black price comes
    from the optimized manual adjoint and is spliced as chained MANUAL entries
    on (forward, volatility, numeraire, strike, expiry).
    """
    vol = sabr_volatility.volatility_aad_automatic(forward, alpha, beta, rho, nu, strike, expiry, tape)
    black_inputs = (forward, vol, numeraire, strike, expiry)
    value, price_bar = black_formula.price_aad_optimized(
        *(float(x.value) for x in black_inputs), is_call)
    return ops.manual_chain(black_inputs, price_bar, value, tape)


def price_aad_mixed3(forward: Variable, alpha: Variable, beta: Variable, rho: Variable,
                     nu: Variable, numeraire: Variable, strike: Variable, expiry: Variable,
                     is_call: bool, tape: Tape) -> Variable:
    """
    Automatic signature. The volatility comes from the manual adjoint spliced
    as chained MANUAL entries; the Black price is recorded on top of it.
    """
    vol = sabr_volatility.volatility_aad_hybrid(forward, alpha, beta, rho, nu, strike, expiry, tape)
    return black_formula.price_aad_automatic(forward, vol, numeraire, strike, expiry, is_call, tape)
