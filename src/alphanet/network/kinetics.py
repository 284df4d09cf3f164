"""
Rates of change of the alpha-chain mole fractions and their Jacobian.

For every reaction the net rate is

    r = frv * (prod(y_reactant^m) - rev * prod(y_product^m))

Reactants are destroyed at m*r and products created at m*r, so the network
conserves mass (sum_k A_k dy_k/dt = 0) by construction.

The state vector has 14 entries: y[0:13] are the mole fractions, y[13] is the
scaled internal energy. The energy entry is not read here.
"""

from typing import Tuple

import numpy as np

from ..core.constants import MEV_PER_NUCLEON_TO_ERG_PER_G
from .reactions import I_ENERGY, N_EQN, N_ISO, REACTIONS, Species


def _product(y: np.ndarray, species: Species) -> float:
    p = 1.0
    for i, m in species:
        p *= y[i]**m
    return p


def _product_derivatives(y: np.ndarray, species: Species) -> Tuple[Tuple[int, float], ...]:
    """d/dy_i of prod(y^m) for each member i of the product."""
    out = []
    for i, m in species:
        d = m * y[i]**(m - 1)
        for j, n in species:
            if j != i:
                d *= y[j]**n
        out.append((i, d))
    return tuple(out)


def net_rate(k: int, frv: np.ndarray, rev: np.ndarray, y: np.ndarray) -> float:
    """Net forward rate of reaction k (1/s)."""
    reac = REACTIONS[k]
    return frv[k] * (_product(y, reac.reactants) - rev[k] * _product(y, reac.products))


def rates_of_change(frv: np.ndarray, rev: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Right hand sides of the nuclear kinetic equations.

    Args:
        frv: Forward reaction rates (18)
        rev: Reverse rate coefficients (18)
        y: Mole fractions; only y[0:13] is used

    Returns:
        f: dy/dt for the 13 isotopes (1/s)
    """
    y = np.asarray(y, dtype=np.float64)
    f = np.zeros(N_ISO)

    for k, reac in enumerate(REACTIONS):
        r = net_rate(k, frv, rev, y)
        for i, m in reac.reactants:
            f[i] -= m * r
        for i, m in reac.products:
            f[i] += m * r

    return f


def energy_generation(q: np.ndarray, f: np.ndarray) -> float:
    """de/dt (erg/g/s) from dy/dt (1/s) and binding energies (MeV)."""
    return MEV_PER_NUCLEON_TO_ERG_PER_G * float(np.dot(q, f[:N_ISO]))


def partial_derivatives(frv: np.ndarray, rev: np.ndarray, y: np.ndarray,
                        q: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Rates of change, energy generation and their derivatives with respect
    to the mole fractions.

    Args:
        frv: Forward reaction rates (18)
        rev: Reverse rate coefficients (18)
        y: State vector; only y[0:13] is used
        q: Binding energies (MeV)

    Returns:
        f: (14,) f[0:13] = dy/dt [1/s], f[13] = de/dt [erg/g/s]
        jac: (14, 14) jac[i, j] = df[i]/dy[j]. Column 13 (d/de) is zero;
             see AlphaChainNetwork.jacobian for the energy derivative.
    """
    y = np.asarray(y, dtype=np.float64)
    f = np.zeros(N_EQN)
    jac = np.zeros((N_EQN, N_EQN))

    for k, reac in enumerate(REACTIONS):
        r = net_rate(k, frv, rev, y)

        # Partial derivatives of the net rate wrt each participant
        dr = np.zeros(N_ISO)
        for i, d in _product_derivatives(y, reac.reactants):
            dr[i] += frv[k] * d
        for i, d in _product_derivatives(y, reac.products):
            dr[i] -= frv[k] * rev[k] * d

        for i, m in reac.reactants:
            f[i] -= m * r
            jac[i, :N_ISO] -= m * dr
        for i, m in reac.products:
            f[i] += m * r
            jac[i, :N_ISO] += m * dr

    # Energy row is the binding-energy weighted sum of the species rows
    f[I_ENERGY] = energy_generation(q, f)
    jac[I_ENERGY, :] = MEV_PER_NUCLEON_TO_ERG_PER_G * (q @ jac[:N_ISO, :])

    return f, jac
