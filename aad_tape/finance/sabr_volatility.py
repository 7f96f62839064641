"""
SABR implied Black volatility approximation.

Reference: Hagan, P., Kumar, D., Lesniewski, A. and Woodward, D. (2002).
Managing Smile Risk. Wilmott Magazine, September: 84-108.

Inputs, in gradient order:
    [0] forward, [1] alpha, [2] beta, [3] rho, [4] nu, [5] strike, [6] expiry

Four implementations of the same function:
    volatility                plain float
    volatility_aad            hand-written adjoint sweep
    volatility_aad_automatic  every operation recorded on the tape
    volatility_aad_hybrid     hand-written sweep spliced into the tape with
                              chained MANUAL entries
"""

from typing import Tuple

import numpy as np

from ..aad import ops
from ..aad.core.tape import Tape
from ..aad.core.var import Variable
from .config import FormulaConfig

N_INPUTS = 7


def volatility(forward: float, alpha: float, beta: float, rho: float, nu: float,
               strike: float, expiry: float) -> float:
    """Approximated implied Black volatility for the SABR model."""
    beta1 = 1.0 - beta
    f_k_beta = np.power(forward * strike, 0.5 * beta1)
    log_fk = np.log(forward / strike)
    z = nu / alpha * f_k_beta * log_fk
    if abs(z) < FormulaConfig.SABR_Z_RANGE:
        zxz = 1.0 - 0.5 * z * rho
    else:
        sqz = np.sqrt(1.0 - 2.0 * rho * z + z * z)
        xz = np.log((sqz + z - rho) / (1.0 - rho))
        zxz = z / xz
    beta24 = beta1 * beta1 / 24.0
    beta1920 = beta1 ** 4 / 1920.0
    log_fk2 = log_fk * log_fk
    factor11 = beta24 * log_fk2
    factor12 = beta1920 * log_fk2 * log_fk2
    num1 = 1.0 + factor11 + factor12
    factor1 = alpha / (f_k_beta * num1)
    factor31 = beta24 * alpha * alpha / (f_k_beta * f_k_beta)
    factor32 = 0.25 * rho * beta * nu * alpha / f_k_beta
    factor33 = (2.0 - 3.0 * rho * rho) / 24.0 * nu * nu
    factor3 = 1.0 + (factor31 + factor32 + factor33) * expiry
    return factor1 * zxz * factor3


def volatility_aad(forward: float, alpha: float, beta: float, rho: float, nu: float,
                   strike: float, expiry: float) -> Tuple[float, np.ndarray]:
    """
    Volatility and its derivatives w.r.t. the seven inputs.

    The backward sweep mirrors the forward one line by line; the z/x(z) branch
    taken in the forward sweep is taken again in the backward sweep.
    """
    # Forward sweep - function
    beta1 = 1.0 - beta
    f_k_beta = np.power(forward * strike, 0.5 * beta1)
    log_fk = np.log(forward / strike)
    z = nu / alpha * f_k_beta * log_fk
    small_z = abs(z) < FormulaConfig.SABR_Z_RANGE
    xz = 0.0
    sqz = 0.0
    if small_z:
        zxz = 1.0 - 0.5 * z * rho
    else:
        sqz = np.sqrt(1.0 - 2.0 * rho * z + z * z)
        xz = np.log((sqz + z - rho) / (1.0 - rho))
        zxz = z / xz
    beta24 = beta1 * beta1 / 24.0
    beta1920 = beta1 ** 4 / 1920.0
    log_fk2 = log_fk * log_fk
    factor11 = beta24 * log_fk2
    factor12 = beta1920 * log_fk2 * log_fk2
    num1 = 1.0 + factor11 + factor12
    factor1 = alpha / (f_k_beta * num1)
    factor31 = beta24 * alpha * alpha / (f_k_beta * f_k_beta)
    factor32 = 0.25 * rho * beta * nu * alpha / f_k_beta
    factor33 = (2.0 - 3.0 * rho * rho) / 24.0 * nu * nu
    factor3 = 1.0 + (factor31 + factor32 + factor33) * expiry
    vol = factor1 * zxz * factor3

    # Backward sweep - derivatives
    vol_bar = 1.0
    factor3_bar = factor1 * zxz * vol_bar
    factor33_bar = expiry * factor3_bar
    factor32_bar = expiry * factor3_bar
    factor31_bar = expiry * factor3_bar
    factor1_bar = zxz * factor3 * vol_bar
    num1_bar = -alpha / (f_k_beta * num1 * num1) * factor1_bar
    factor12_bar = num1_bar
    factor11_bar = num1_bar
    log_fk2_bar = beta24 * factor11_bar
    log_fk2_bar += 2.0 * beta1920 * log_fk2 * factor12_bar
    beta1920_bar = log_fk2 * log_fk2 * factor12_bar
    beta24_bar = log_fk2 * factor11_bar
    beta24_bar += alpha * alpha / (f_k_beta * f_k_beta) * factor31_bar
    zxz_bar = factor1 * factor3 * vol_bar
    xz_bar = 0.0
    sqz_bar = 0.0
    if small_z:
        z_bar = -0.5 * rho * zxz_bar
    else:
        xz_bar = -z / (xz * xz) * zxz_bar
        sqz_bar = xz_bar / (sqz + z - rho)
        z_bar = zxz_bar / xz
        z_bar += xz_bar / (sqz + z - rho)
        z_bar += (z - rho) / sqz * sqz_bar
    log_fk_bar = nu / alpha * f_k_beta * z_bar
    log_fk_bar += 2.0 * log_fk * log_fk2_bar
    f_k_beta_bar = nu / alpha * log_fk * z_bar
    f_k_beta_bar += -alpha / (f_k_beta * f_k_beta * num1) * factor1_bar
    f_k_beta_bar += -2.0 * beta24 * alpha * alpha / (f_k_beta ** 3) * factor31_bar
    f_k_beta_bar += -0.25 * rho * beta * nu * alpha / (f_k_beta * f_k_beta) * factor32_bar
    beta1_bar = f_k_beta * 0.5 * np.log(forward * strike) * f_k_beta_bar
    beta1_bar += beta1 / 12.0 * beta24_bar
    beta1_bar += beta1 ** 3 / 480.0 * beta1920_bar

    input_bar = np.zeros(N_INPUTS)
    input_bar[0] += log_fk_bar / forward
    input_bar[0] += 0.5 * beta1 * f_k_beta / forward * f_k_beta_bar
    input_bar[1] += -nu / (alpha * alpha) * f_k_beta * log_fk * z_bar
    input_bar[1] += factor1_bar / (f_k_beta * num1)
    input_bar[1] += 2.0 * beta24 * alpha / (f_k_beta * f_k_beta) * factor31_bar
    input_bar[1] += 0.25 * rho * beta * nu / f_k_beta * factor32_bar
    input_bar[2] += -beta1_bar
    input_bar[2] += 0.25 * rho * nu * alpha / f_k_beta * factor32_bar
    if small_z:
        input_bar[3] += -0.5 * z * zxz_bar
    else:
        input_bar[3] += -z / sqz * sqz_bar
        input_bar[3] += (-1.0 / (sqz + z - rho) + 1.0 / (1.0 - rho)) * xz_bar
    input_bar[3] += 0.25 * beta * nu * alpha / f_k_beta * factor32_bar
    input_bar[3] += -0.25 * rho * nu * nu * factor33_bar
    input_bar[4] += f_k_beta / alpha * log_fk * z_bar
    input_bar[4] += 0.25 * rho * beta * alpha / f_k_beta * factor32_bar
    input_bar[4] += (2.0 - 3.0 * rho * rho) / 12.0 * nu * factor33_bar
    input_bar[5] += 0.5 * beta1 * f_k_beta / strike * f_k_beta_bar
    input_bar[5] += -log_fk_bar / strike
    input_bar[6] += (factor31 + factor32 + factor33) * factor3_bar
    return vol, input_bar


def volatility_aad_automatic(forward: Variable, alpha: Variable, beta: Variable, rho: Variable,
                             nu: Variable, strike: Variable, expiry: Variable,
                             tape: Tape) -> Variable:
    """Record the SABR volatility operation by operation on `tape`."""
    beta1 = ops.rsub_const(1.0, beta, tape)
    f_k_beta = ops.pow(ops.mul(forward, strike, tape), ops.mul_const(beta1, 0.5, tape), tape)
    log_fk = ops.log(ops.div(forward, strike, tape), tape)
    z = ops.mul(ops.mul(ops.div(nu, alpha, tape), f_k_beta, tape), log_fk, tape)
    if abs(z.value) < FormulaConfig.SABR_Z_RANGE:
        # first order approximation of z/x(z)
        zxz = ops.add_const(ops.mul_const(ops.mul(z, rho, tape), -0.5, tape), 1.0, tape)
    else:
        sqz = ops.sqrt(
            ops.add(ops.add_const(ops.mul_const(ops.mul(rho, z, tape), -2.0, tape), 1.0, tape),
                    ops.mul(z, z, tape), tape), tape)
        xz = ops.log(
            ops.div(ops.sub(ops.add(sqz, z, tape), rho, tape), ops.rsub_const(1.0, rho, tape), tape),
            tape)
        zxz = ops.div(z, xz, tape)
    beta12 = ops.mul(beta1, beta1, tape)
    beta24 = ops.mul_const(beta12, 1.0 / 24.0, tape)
    beta1920 = ops.mul_const(ops.mul(beta12, beta12, tape), 1.0 / 1920.0, tape)
    log_fk2 = ops.mul(log_fk, log_fk, tape)
    factor11 = ops.mul(beta24, log_fk2, tape)
    factor12 = ops.mul(ops.mul(beta1920, log_fk2, tape), log_fk2, tape)
    num1 = ops.add_const(ops.add(factor11, factor12, tape), 1.0, tape)
    factor1 = ops.div(alpha, ops.mul(f_k_beta, num1, tape), tape)
    factor31 = ops.div(ops.mul(ops.mul(beta24, alpha, tape), alpha, tape),
                       ops.mul(f_k_beta, f_k_beta, tape), tape)
    factor32 = ops.div(
        ops.mul(ops.mul(ops.mul(ops.mul_const(rho, 0.25, tape), beta, tape), nu, tape), alpha, tape),
        f_k_beta, tape)
    factor33 = ops.mul(
        ops.mul_const(ops.add_const(ops.mul_const(ops.mul(rho, rho, tape), -3.0, tape), 2.0, tape),
                      1.0 / 24.0, tape),
        ops.mul(nu, nu, tape), tape)
    factor3 = ops.add_const(
        ops.mul(ops.add(ops.add(factor31, factor32, tape), factor33, tape), expiry, tape), 1.0, tape)
    return ops.mul(ops.mul(factor1, zxz, tape), factor3, tape)


def volatility_aad_hybrid(forward: Variable, alpha: Variable, beta: Variable, rho: Variable,
                          nu: Variable, strike: Variable, expiry: Variable,
                          tape: Tape) -> Variable:
    """
    SABR volatility computed with the hand-written adjoint, recorded as a
    chain of seven MANUAL entries (one per input). The rest of a larger
    computation can then be recorded automatically around it.
    """
    inputs = (forward, alpha, beta, rho, nu, strike, expiry)
    vol, vol_bar = volatility_aad(*(float(x.value) for x in inputs))
    return ops.manual_chain(inputs, vol_bar, vol, tape)
