"""
Single-cell burn with an off-the-shelf stiff integrator.

Integrates the 14-component system (13 mole fractions + energy density) of
one cell with scipy's BDF method, using the network's rhs/edot and its
analytic Jacobian. The network must already be initialized for the cell.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import numpy as np
import pandas as pd
from scipy.integrate import solve_ivp

from .network.alpha13 import AlphaChainNetwork
from .network.reactions import A_ISO, I_ENERGY, N_ISO, SPECIES_NAMES


@dataclass
class BurnResult:
    """Time history of one burning cell (code units)."""
    t: np.ndarray      # (n_t,)
    y: np.ndarray      # (n_t, 13) mole fractions
    ED: np.ndarray     # (n_t,) internal energy density
    T: np.ndarray      # (n_t,) temperature (K)
    success: bool
    message: str

    @property
    def mass_fractions(self) -> np.ndarray:
        return self.y * A_ISO

    def to_frame(self) -> pd.DataFrame:
        columns = {'t': self.t}
        for k, name in enumerate(SPECIES_NAMES):
            columns[f"Y_{name}"] = self.y[:, k]
        columns['ED'] = self.ED
        columns['T'] = self.T
        return pd.DataFrame(columns)


def composition(abundances: Dict[str, float]) -> np.ndarray:
    """Mole-fraction vector from {species name: mole fraction}."""
    y = np.zeros(N_ISO)
    for name, value in abundances.items():
        if name not in SPECIES_NAMES:
            raise ValueError(f"Unknown species {name!r}; expected one of {', '.join(SPECIES_NAMES)}")
        y[SPECIES_NAMES.index(name)] = value
    return y


def burn_cell(network: AlphaChainNetwork, y0: np.ndarray, ED0: float, t_end: float,
              rtol: float = 1e-6, atol: float = 1e-12,
              t_eval: Optional[Iterable[float]] = None) -> BurnResult:
    """
    Burn one cell from t = 0 to t_end (code units).

    Args:
        network: Network initialized for the cell
        y0: Initial mole fractions (13)
        ED0: Initial internal energy density
        t_end: End time
        rtol, atol: Integrator tolerances for the mole fractions; the energy
                    density uses rtol * ED0 as its absolute tolerance
        t_eval: Output times (solver steps when omitted)
    """
    x0 = np.append(np.asarray(y0, dtype=np.float64)[:N_ISO], ED0)
    atol_vec = np.full(N_ISO + 1, atol)
    atol_vec[I_ENERGY] = rtol * abs(ED0)

    def fun(t, x):
        y, ED = x[:N_ISO], x[I_ENERGY]
        return np.append(network.rhs(t, y, ED), network.edot(t, y, ED))

    def jac(t, x):
        return network.jacobian(t, x[:N_ISO], x[I_ENERGY])

    sol = solve_ivp(fun, (0.0, t_end), x0, method='BDF', jac=jac,
                    rtol=rtol, atol=atol_vec,
                    t_eval=None if t_eval is None else np.asarray(list(t_eval)))

    ED = sol.y[I_ENERGY]
    T = np.array([network.temperature(e) for e in ED])

    return BurnResult(
        t=sol.t,
        y=sol.y[:N_ISO].T,
        ED=ED,
        T=T,
        success=bool(sol.success),
        message=str(sol.message),
    )
