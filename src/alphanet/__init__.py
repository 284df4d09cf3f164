"""
alphanet: 13-isotope alpha-chain nuclear reaction network.

    4He, 12C, 16O, 20Ne, 24Mg, 28Si, 32S, 36Ar, 40Ca, 44Ti, 48Cr, 52Fe, 56Ni

linked by triple-alpha, (alpha, gamma) captures, C12+C12, C12+O16 and
O16+O16, with Coulomb screening and detailed-balance reverse rates.
"""

from .core.config import NetworkConfig
from .network import (
    AlphaChainNetwork,
    NuclearData,
    NuclearDataError,
    UniformHydro,
    calculate_rates,
    default_nuclear_data,
    load_nuclear_data,
    partial_derivatives,
    rates_of_change,
)

__version__ = "0.1.0"

__all__ = [
    'AlphaChainNetwork',
    'NetworkConfig',
    'NuclearData',
    'NuclearDataError',
    'UniformHydro',
    'calculate_rates',
    'default_nuclear_data',
    'load_nuclear_data',
    'partial_derivatives',
    'rates_of_change',
]
