"""
Forward and reverse reaction rates of the alpha-chain network.

The forward rate of each reaction is a sum of REACLIB-type fits

    lambda = rho * exp(c0 + c1/T9 + c2*T9^(-1/3) + c3*T9^(1/3)
                       + c4*T9 + c5*T9^(5/3) + c6*ln(T9))

corrected for Coulomb screening by the electron gas. Reverse rates follow
from detailed balance: backward rate = frv * rev, with

    rev = exp(ca + cb*11.605/T9 + F_products - F_reactants)
          * pf_reactants / pf_products * (T9^(3/2) / rho)^(n_r - n_p)

where F are screening free energies and pf partition functions.

Reference:
    - Caughlan & Fowler (1988), Atomic Data Nuc. Data Tables 40, 283
    - Rauscher & Thielemann (2000), Atomic Data Nuc. Data Tables 75, 1
    - Yakovlev & Shalybkov (1989), Astrophys. Space Phys. Rev. 7, 311
"""

from typing import Optional, Tuple

import numpy as np

from ..core.constants import MEV_TO_T9, T9_FLOOR
from .nuclear_data import NuclearData, default_nuclear_data
from .reactions import N_REAC, REACTIONS

# Screening fit (strong regime)
A1 = -0.897744
A2 = 4.0 * 0.95043
A3 = -4.0 * 0.18956
A4 = -0.81487
A5 = -2.58020
# Screening fit (weak regime)
A6 = -0.57735
A8 = 2.0160
A7 = 0.29341 / A8

GAMMA_MAX = 150.0
GAMMA_STRONG = 1.0


def normalized_temperature(temp: float) -> float:
    """Temperature in 10^9 K, clamped to T9_FLOOR."""
    return max(T9_FLOOR, 1.0e-9 * temp)


def bank_rates(rho: float, t9: float, calp: np.ndarray) -> np.ndarray:
    """Evaluate the N_ALP polynomial fits, each scaled by density."""
    t9i = 1.0 / t9
    t923 = t9**(2.0 / 3.0)
    t9l = np.log(t9)

    exponent = (calp[:, 0]
                + t9i * (calp[:, 1]
                + t923 * (calp[:, 2]
                + t923 * (calp[:, 3]
                + t923 * (calp[:, 4]
                + t923 * calp[:, 5]))))
                + t9l * calp[:, 6])

    return rho * np.exp(exponent)


def screening_parameters(rho: float, t9: float, gscr: np.ndarray) -> np.ndarray:
    """Ion coupling parameter of each isotope, capped at GAMMA_MAX."""
    g1 = (0.5 * rho)**(1.0 / 3.0) / t9
    return np.minimum(GAMMA_MAX, g1 * gscr)


def screening_factors(rho: float, t9: float, gscr: np.ndarray) -> np.ndarray:
    """
    Screening free energy F(Gamma) of each isotope (in units of kT).

    Weak screening (Gamma < 1):
        F = a6 Gamma^(3/2) + a7 Gamma^a8
    Strong screening:
        F = a1 Gamma + a2 Gamma^(1/4) + a3 Gamma^(-1/4) + a4 ln(Gamma) + a5
    """
    gam = screening_parameters(rho, t9, gscr)

    weak = gam < GAMMA_STRONG
    fscr = np.empty_like(gam)

    g = gam[weak]
    fscr[weak] = A6 * g * np.sqrt(g) + A7 * np.power(g, A8)

    g = gam[~weak]
    gam4 = np.sqrt(np.sqrt(g))
    fscr[~weak] = A1 * g + A2 * gam4 + A3 / gam4 + A4 * np.log(g) + A5

    return fscr


def screening_exponents(fscr: np.ndarray) -> np.ndarray:
    """
    Net screening exponent of each forward rate.

    Reactants contribute F with their multiplicity, the compound nucleus
    is subtracted.
    """
    expo = np.zeros(N_REAC)
    for k, reac in enumerate(REACTIONS):
        expo[k] = sum(m * fscr[i] for i, m in reac.reactants) - fscr[reac.compound]
    return expo


def equilibrium_screening(fscr: np.ndarray) -> np.ndarray:
    """F_products - F_reactants for each reaction, entering the reverse rate."""
    expo = np.zeros(N_REAC)
    for k, reac in enumerate(REACTIONS):
        expo[k] = (sum(m * fscr[i] for i, m in reac.products)
                   - sum(m * fscr[i] for i, m in reac.reactants))
    return expo


def partition_functions(t9: float, data: NuclearData) -> np.ndarray:
    """pf = g0 * (1 + exp(a/T9 + b + c*T9))"""
    return data.g0 * (1.0 + np.exp(data.apf / t9 + data.bpf + t9 * data.cpf))


def forward_rates(rho: float, t9: float, data: NuclearData,
                  fscr: Optional[np.ndarray] = None) -> np.ndarray:
    """Screened forward rates of the 18 reactions."""
    falp = bank_rates(rho, t9, data.calp)

    frv = np.zeros(N_REAC)
    for k, reac in enumerate(REACTIONS):
        # Extra density factor for three-body reactions
        frv[k] = sum(falp[l] for l in reac.bank) * reac.factor * rho**(reac.n_reactants - 2)

    if fscr is None:
        fscr = screening_factors(rho, t9, data.gscr)
    return frv * np.exp(screening_exponents(fscr))


def reverse_rates(rho: float, t9: float, data: NuclearData,
                  fscr: Optional[np.ndarray] = None) -> np.ndarray:
    """Reverse rate coefficients (backward rate = frv * rev)."""
    if fscr is None:
        fscr = screening_factors(rho, t9, data.gscr)

    pf = partition_functions(t9, data)
    t9r = MEV_TO_T9 / t9
    # Inverse density of free alphas at unit partition function
    pf0_inv = t9 * np.sqrt(t9) / rho

    expo = data.ca + data.cb * t9r + equilibrium_screening(fscr)

    rev = np.zeros(N_REAC)
    for k, reac in enumerate(REACTIONS):
        pf_in = np.prod([pf[i]**m for i, m in reac.reactants])
        pf_out = np.prod([pf[i]**m for i, m in reac.products])
        rev[k] = (np.exp(expo[k]) * pf_in / pf_out
                  * pf0_inv**(reac.n_reactants - reac.n_products))

    return rev


def calculate_rates(rho: float, temp: float,
                    data: Optional[NuclearData] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Forward rates and reverse rate coefficients.

    Args:
        rho: Density (g/cm^3)
        temp: Temperature (K)
        data: Nuclear data; the process-wide table when omitted

    Returns:
        frv: Forward reaction rates (18)
        rev: Reverse rate coefficients (18), backward rate = frv * rev
    """
    if data is None:
        data = default_nuclear_data()

    t9 = normalized_temperature(temp)
    fscr = screening_factors(rho, t9, data.gscr)

    frv = forward_rates(rho, t9, data, fscr)
    rev = reverse_rates(rho, t9, data, fscr)
    return frv, rev


__all__ = [
    'calculate_rates',
    'forward_rates',
    'reverse_rates',
    'bank_rates',
    'screening_parameters',
    'screening_factors',
    'screening_exponents',
    'equilibrium_screening',
    'partition_functions',
    'normalized_temperature',
]
