"""
Alpha-chain network: nuclear data, rates, kinetics and the cell driver.
"""

from .nuclear_data import NuclearData, NuclearDataError, load_nuclear_data, default_nuclear_data
from .reactions import Isotope, REACTIONS, SPECIES_NAMES
from .rates import calculate_rates
from .kinetics import rates_of_change, partial_derivatives
from .alpha13 import AlphaChainNetwork, ChemistryNetwork, HydroHost, UniformHydro

__all__ = [
    'NuclearData',
    'NuclearDataError',
    'load_nuclear_data',
    'default_nuclear_data',
    'Isotope',
    'REACTIONS',
    'SPECIES_NAMES',
    'calculate_rates',
    'rates_of_change',
    'partial_derivatives',
    'AlphaChainNetwork',
    'ChemistryNetwork',
    'HydroHost',
    'UniformHydro',
]
