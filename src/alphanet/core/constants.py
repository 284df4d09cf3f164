"""
Physical constants for the alpha-chain network.

All values are cgs unless noted otherwise.

Import via:
    from alphanet.core.constants import *                      # All constants
    from alphanet.core.constants import K_BOLTZMANN, M_NEUTRON  # Specific constants
"""

# Fundamental
K_BOLTZMANN = 1.380658e-16     # erg/K
M_NEUTRON = 1.674920e-24       # g
M_PROTON = 1.67262192e-24      # g
N_AVOGADRO = 6.02214076e23     # mol^-1

# Conversions
MEV_TO_ERG = 1.60218e-6        # erg/MeV
ERG_TO_MEV = 1.0 / MEV_TO_ERG

# MeV per nucleon -> erg/g (1 MeV * N_A, as tabulated by the network)
MEV_PER_NUCLEON_TO_ERG_PER_G = 9.64867e17

# 1 MeV / k_B in units of 10^9 K
MEV_TO_T9 = 11.605

# Temperature below which a cell is considered inert (K)
T_COLD = 2.0e8

# Floor on T9 used by every temperature-dependent formula
T9_FLOOR = 0.01

__all__ = [
    'K_BOLTZMANN', 'M_NEUTRON', 'M_PROTON', 'N_AVOGADRO',
    'MEV_TO_ERG', 'ERG_TO_MEV', 'MEV_PER_NUCLEON_TO_ERG_PER_G',
    'MEV_TO_T9', 'T_COLD', 'T9_FLOOR',
]
