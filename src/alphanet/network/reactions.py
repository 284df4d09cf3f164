"""
Isotopes and reactions of the 13-isotope alpha-chain network.

    He4 -> C12 -> O16 -> Ne20 -> Mg24 -> Si28 -> S32 -> Ar36
        -> Ca40 -> Ti44 -> Cr48 -> Fe52 -> Ni56

The chain is closed by triple-alpha, the heavy-ion reactions C+C, C+O and
O+O, and alpha captures (with their photodisintegration inverses) on every
member from C12 to Fe52.

Each reaction is described by its stoichiometry; the rate, rate-of-change and
Jacobian code is driven entirely by this table.

Reference:
    - Timmes, Hoffman & Woosley (2000), ApJS 129, 377
    - Khokhlov (1989), MNRAS 239, 785
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple

import numpy as np


class Isotope(IntEnum):
    """Indices for isotope mole fractions."""
    He4 = 0    # α particles
    C12 = 1
    O16 = 2
    Ne20 = 3
    Mg24 = 4
    Si28 = 5
    S32 = 6
    Ar36 = 7
    Ca40 = 8
    Ti44 = 9
    Cr48 = 10
    Fe52 = 11
    Ni56 = 12


SPECIES_NAMES = ("4He", "12C", "16O", "20Ne", "24Mg", "28Si", "32S",
                 "36Ar", "40Ca", "44Ti", "48Cr", "52Fe", "56Ni")

N_ISO = len(Isotope)
N_EQN = N_ISO + 1     # abundances + scaled energy
I_ENERGY = N_ISO

# Mass numbers and atomic numbers
A_ISO = np.array([4.0, 12.0, 16.0, 20.0, 24.0, 28.0, 32.0,
                  36.0, 40.0, 44.0, 48.0, 52.0, 56.0])
Z_ISO = np.array([2.0, 6.0, 8.0, 10.0, 12.0, 14.0, 16.0,
                  18.0, 20.0, 22.0, 24.0, 26.0, 28.0])

# Triple-alpha equilibrium constant (not reducible to the two-body rule)
LN_TRIPLE_ALPHA_REVERSE = float(np.log(1.199252e21))

# Phase-space constant of a two-to-one reverse rate
REVERSE_CONV_FACTOR = 9.867425e9

Species = Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class Reaction:
    """One forward reaction and its inverse."""
    label: str
    reactants: Species    # (isotope, multiplicity)
    products: Species
    compound: int         # compound nucleus whose screening is subtracted
    bank: Tuple[int, ...] # polynomial-bank rows summed into the forward rate
    factor: float = 1.0   # identical-particle factor

    @property
    def n_reactants(self) -> int:
        return sum(m for _, m in self.reactants)

    @property
    def n_products(self) -> int:
        return sum(m for _, m in self.products)

    def stoichiometry(self) -> np.ndarray:
        """Signed multiplicities: negative for reactants, positive for products."""
        nu = np.zeros(N_ISO)
        for i, m in self.reactants:
            nu[i] -= m
        for i, m in self.products:
            nu[i] += m
        return nu


def _alpha_capture(target: Isotope, rows: Tuple[int, ...]) -> Reaction:
    product = Isotope(target + 1)
    return Reaction(
        label=f"He + {target.name} -> {product.name}",
        reactants=((Isotope.He4, 1), (target, 1)),
        products=((product, 1),),
        compound=product,
        bank=rows,
    )


I = Isotope

REACTIONS: Tuple[Reaction, ...] = (
    Reaction("3He -> C12", ((I.He4, 3),), ((I.C12, 1),), I.C12, (0,), factor=1.0 / 12.0),
    Reaction("C12 + C12 -> Ne20 + He", ((I.C12, 2),), ((I.Ne20, 1), (I.He4, 1)), I.Mg24, (1,), factor=0.5),
    Reaction("C12 + C12 -> Mg24", ((I.C12, 2),), ((I.Mg24, 1),), I.Mg24, (2, 3), factor=0.5),
    Reaction("C12 + O16 -> Mg24 + He", ((I.C12, 1), (I.O16, 1)), ((I.Mg24, 1), (I.He4, 1)), I.Si28, (4,)),
    Reaction("C12 + O16 -> Si28", ((I.C12, 1), (I.O16, 1)), ((I.Si28, 1),), I.Si28, (5, 6)),
    Reaction("O16 + O16 -> Si28 + He", ((I.O16, 2),), ((I.Si28, 1), (I.He4, 1)), I.S32, (7,), factor=0.5),
    Reaction("O16 + O16 -> S32", ((I.O16, 2),), ((I.S32, 1),), I.S32, (8, 9), factor=0.5),
    _alpha_capture(I.C12, (10, 11)),
    _alpha_capture(I.O16, (12, 13)),
    _alpha_capture(I.Ne20, (14, 15, 16, 17, 18)),
    _alpha_capture(I.Mg24, (19, 20, 21, 22, 23)),
    _alpha_capture(I.Si28, (24, 25)),
    _alpha_capture(I.S32, (26, 27)),
    _alpha_capture(I.Ar36, (28, 29)),
    _alpha_capture(I.Ca40, (30, 31)),
    _alpha_capture(I.Ti44, (32, 33)),
    _alpha_capture(I.Cr48, (34, 35)),
    _alpha_capture(I.Fe52, (36, 37)),
)

del I

N_REAC = len(REACTIONS)
N_ALP = sum(len(r.bank) for r in REACTIONS)

# (N_REAC, N_ISO) matrix of signed multiplicities
STOICHIOMETRY = np.array([r.stoichiometry() for r in REACTIONS])
