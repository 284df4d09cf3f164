"""
Ideal-gas energy/temperature relation used by the network driver.

The host hydro code evolves an internal energy density with a constant
adiabatic index gamma. The network only needs the temperature:

    e = n k_B T / (gamma - 1),    n = rho / m_n

so that

    T = e (gamma - 1) m_n / (rho k_B)
"""

import numpy as np

from ..core.constants import K_BOLTZMANN, M_NEUTRON


def temperature_from_energy_density(e: np.ndarray, rho: np.ndarray, gamma: float) -> np.ndarray:
    """
    Temperature (K) of an ideal gas.

    Args:
        e: Internal energy density (erg/cm^3)
        rho: Density (g/cm^3)
        gamma: Adiabatic index
    """
    return e * (gamma - 1.0) * M_NEUTRON / (rho * K_BOLTZMANN)


def energy_density_from_temperature(T: np.ndarray, rho: np.ndarray, gamma: float) -> np.ndarray:
    """Inverse of temperature_from_energy_density (erg/cm^3)."""
    return rho * K_BOLTZMANN * T / ((gamma - 1.0) * M_NEUTRON)


def specific_energy_from_temperature(T: np.ndarray, gamma: float) -> np.ndarray:
    """Specific internal energy (erg/g)."""
    return K_BOLTZMANN * T / ((gamma - 1.0) * M_NEUTRON)


def temperature_from_specific_energy(e_int: np.ndarray, gamma: float) -> np.ndarray:
    """Temperature (K) from specific internal energy (erg/g)."""
    return e_int * (gamma - 1.0) * M_NEUTRON / K_BOLTZMANN
