"""
Network driver: the 13-isotope alpha chain as seen by the host ODE integrator.

The host calls, for every cell and sub-step:

    network.initialize_next_step(k, j, i)
    ydot = network.rhs(t, y, ED)
    EDdot = network.edot(t, y, ED)

with y the 13 mole fractions and ED the internal energy density, all in
code units. Internal calculations are in cgs.

Stiff integrators additionally use `jacobian`, or the one-call
`rhs_full` entry point that also flags cells too cold to burn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Tuple, runtime_checkable

import numpy as np

from ..core.config import NetworkConfig
from ..core.constants import T_COLD
from .eos_ideal import temperature_from_energy_density, temperature_from_specific_energy
from .kinetics import energy_generation, partial_derivatives, rates_of_change
from .nuclear_data import NuclearData, default_nuclear_data
from .rates import calculate_rates
from .reactions import I_ENERGY, N_EQN, N_ISO, SPECIES_NAMES

log = logging.getLogger(__name__)


@runtime_checkable
class HydroHost(Protocol):
    """What the network needs from the hydro code and its EOS."""
    gamma: float
    density_floor: float
    non_barotropic: bool

    def density(self, k: int, j: int, i: int) -> float:
        ...


@runtime_checkable
class ChemistryNetwork(Protocol):
    """Capability set the ODE-integration harness depends on."""
    species_names: Tuple[str, ...]

    def initialize_next_step(self, k: int, j: int, i: int) -> None:
        ...

    def rhs(self, t: float, y: np.ndarray, ED: float) -> np.ndarray:
        ...

    def edot(self, t: float, y: np.ndarray, ED: float) -> float:
        ...


@dataclass
class UniformHydro:
    """Array-backed hydro state: density in code units, indexed [k, j, i]."""
    rho: np.ndarray
    gamma: float = 5.0 / 3.0
    density_floor: float = 0.0
    non_barotropic: bool = True

    def __post_init__(self):
        self.rho = np.asarray(self.rho, dtype=np.float64)
        if self.rho.ndim != 3:
            raise ValueError(f"Density must be indexed [k, j, i], got shape {self.rho.shape}")

    @classmethod
    def uniform(cls, rho: float, shape: Tuple[int, int, int] = (1, 1, 1), **kwargs) -> "UniformHydro":
        return cls(np.full(shape, rho), **kwargs)

    def density(self, k: int, j: int, i: int) -> float:
        return float(self.rho[k, j, i])


def floor_abundances(y: np.ndarray) -> np.ndarray:
    """Copy of the first 13 mole fractions with negative values set to zero."""
    y = np.asarray(y, dtype=np.float64)
    if y.shape[0] < N_ISO:
        raise ValueError(f"Expected at least {N_ISO} mole fractions, got {y.shape[0]}")
    return np.maximum(y[:N_ISO], 0.0)


def _zero_negative_columns(jac: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Zero d/dy_j for every negative y_j; the floored rhs is flat there."""
    negative = np.flatnonzero(np.asarray(y, dtype=np.float64)[:N_ISO] < 0.0)
    jac[:, negative] = 0.0
    return jac


def _central_difference(func: Callable[[float], np.ndarray], x: float, eps: float) -> np.ndarray:
    """d func / dx with relative step eps (absolute eps when x == 0)."""
    h = eps * abs(x) if x != 0.0 else eps
    return (func(x + h) - func(x - h)) / (2.0 * h)


class AlphaChainNetwork:
    """
    13-isotope alpha-chain nuclear network for one cell at a time.

    The nuclear data is shared and read-only; the cached cell density is
    per instance, so concurrent cells need separate instances.
    """

    species_names = SPECIES_NAMES

    def __init__(self, host: HydroHost, config: Optional[NetworkConfig] = None,
                 data: Optional[NuclearData] = None):
        self.host = host
        self.config = config if config is not None else NetworkConfig()
        self.data = data if data is not None else default_nuclear_data()

        # Density (g/cm^3), updated at initialize_next_step
        self.rho: Optional[float] = None

    @property
    def unit_time_in_s(self) -> float:
        return self.config.unit_time_in_s

    @property
    def unit_E_in_cgs(self) -> float:
        return self.config.unit_E_in_cgs

    def initialize_next_step(self, k: int, j: int, i: int) -> None:
        """Cache the floored density of cell (k, j, i)."""
        rho = max(self.host.density(k, j, i), self.host.density_floor)
        self.rho = rho * self.config.unit_density

    def _density(self) -> float:
        if self.rho is None:
            raise RuntimeError("initialize_next_step must be called before evaluating the network")
        return self.rho

    def temperature(self, ED: float) -> float:
        """Temperature (K) from the code-unit energy density."""
        return float(temperature_from_energy_density(
            ED * self.unit_E_in_cgs, self._density(), self.host.gamma))

    def _cgs_rates_of_change(self, y_corr: np.ndarray, ED: float) -> np.ndarray:
        frv, rev = calculate_rates(self._density(), self.temperature(ED), self.data)
        return rates_of_change(frv, rev, y_corr)

    def rhs(self, t: float, y: np.ndarray, ED: float) -> np.ndarray:
        """
        dy/dt of the 13 mole fractions, in code units.

        Negative mole fractions are treated as zero; y is not modified.
        """
        y_corr = floor_abundances(y)
        if t == 0:
            log.debug("T_9 = %f", 1.0e-9 * self.temperature(ED))

        f = self._cgs_rates_of_change(y_corr, ED)
        return self.unit_time_in_s * f

    def edot(self, t: float, y: np.ndarray, ED: float) -> float:
        """dED/dt in code units (0 when the energy equation is not evolved)."""
        if not self.host.non_barotropic:
            return 0.0

        ydot = self.rhs(t, y, ED)
        # erg/g per code time -> erg/cm^3 per code time -> code units
        dEDdt = energy_generation(self.data.q, ydot) * self._density() / self.unit_E_in_cgs
        log.debug("dEDdt = %.4e (code units)", dEDdt)
        return dEDdt

    def fuel_consumption_rate(self, t: float, y: np.ndarray, ED: float) -> float:
        """Rate at which the fuel isotope NISOfuel is consumed (code units)."""
        return -float(self.rhs(t, y, ED)[self.config.NISOfuel])

    def jacobian(self, t: float, y: np.ndarray, ED: float) -> np.ndarray:
        """
        Jacobian of (rhs, edot) with respect to (y, ED), in code units.

        Returns:
            jac: (14, 14), jac[i, j] = d(ydot_i)/d(x_j) with x = (y[0:13], ED).
                 The mole-fraction columns are analytic, the ED column is a
                 central difference with relative step alphanet_epsder.
                 Columns of negative mole fractions are zero, matching the
                 flooring in rhs.
        """
        y_corr = floor_abundances(y)
        rho = self._density()

        frv, rev = calculate_rates(rho, self.temperature(ED), self.data)
        _, df = partial_derivatives(frv, rev, y_corr, self.data.q)

        jac = np.zeros((N_EQN, N_EQN))
        jac[:N_ISO, :N_ISO] = self.unit_time_in_s * df[:N_ISO, :N_ISO]

        if not self.host.non_barotropic:
            # Energy is not evolved; abundances still depend on it through T
            jac[:N_ISO, I_ENERGY] = _central_difference(
                lambda e: self.rhs(t, y_corr, e), ED, self.config.alphanet_epsder)
            return _zero_negative_columns(jac, y)

        energy_scale = rho * self.unit_time_in_s / self.unit_E_in_cgs
        jac[I_ENERGY, :N_ISO] = energy_scale * df[I_ENERGY, :N_ISO]

        def full_rhs(e: float) -> np.ndarray:
            ydot = self.rhs(t, y_corr, e)
            return np.append(ydot, energy_generation(self.data.q, ydot) * rho / self.unit_E_in_cgs)

        jac[:, I_ENERGY] = _central_difference(full_rhs, ED, self.config.alphanet_epsder)
        return _zero_negative_columns(jac, y)

    def rhs_full(self, y: np.ndarray, rho: float, e0: float) -> Tuple[np.ndarray, np.ndarray, bool]:
        """
        Production rates, energy generation and Jacobian in one call (cgs).

        Args:
            y: (14,) mole fractions y[0:13] and internal energy scaled by e0, y[13]
            rho: Density (g/cm^3)
            e0: Energy scale (erg/g)

        Returns:
            f: (14,) f[0:13] = dy/dt [1/s], f[13] = d(e/e0)/dt [1/s]
            jac: (14, 14) jac[i, j] = df[i]/dy[j]; zero in the columns
                 of negative mole fractions
            active: False when the cell is too cold to integrate (f, jac zero)
        """
        y = np.asarray(y, dtype=np.float64)
        if y.shape != (N_EQN,):
            raise ValueError(f"Expected state vector of shape ({N_EQN},), got {y.shape}")

        gamma = self.host.gamma
        temp = float(temperature_from_specific_energy(y[I_ENERGY] * e0, gamma))
        if temp < T_COLD:
            return np.zeros(N_EQN), np.zeros((N_EQN, N_EQN)), False

        y_corr = floor_abundances(y)
        frv, rev = calculate_rates(rho, temp, self.data)
        f, jac = partial_derivatives(frv, rev, y_corr, self.data.q)

        e0_inv = 1.0 / e0
        f[I_ENERGY] *= e0_inv
        jac[I_ENERGY, :] *= e0_inv

        def scaled_rhs(ys: float) -> np.ndarray:
            frv_e, rev_e = calculate_rates(
                rho, float(temperature_from_specific_energy(ys * e0, gamma)), self.data)
            fn = rates_of_change(frv_e, rev_e, y_corr)
            return np.append(fn, energy_generation(self.data.q, fn) * e0_inv)

        jac[:, I_ENERGY] = _central_difference(scaled_rhs, y[I_ENERGY], self.config.alphanet_epsder)
        return f, _zero_negative_columns(jac, y), True


__all__ = [
    'AlphaChainNetwork',
    'ChemistryNetwork',
    'HydroHost',
    'UniformHydro',
    'floor_abundances',
]
