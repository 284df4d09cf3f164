"""
Run-time configuration of the alpha-chain network.

The host simulation supplies a "chemistry" block of named options. Missing
options fall back to the defaults below, mirroring the host's get-or-add
parameter lookup.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

# Environment override for the nuclear data table location
DATA_PATH_ENV = "ALPHANET_DATA"

N_ISOTOPES = 13


@dataclass(frozen=True)
class NetworkConfig:
    """Container for the "chemistry" block options."""
    # Index of the isotope treated as cold fuel (12C by default)
    NISOfuel: int = 1
    # Relative increment of energy used for numerical d/de derivatives
    alphanet_epsder: float = 1.0e-5

    # Code units
    unit_density: float = 1.0
    unit_length_in_cm: float = 1.0
    unit_vel_in_cms: float = 1.0

    def __post_init__(self):
        if not 0 <= self.NISOfuel < N_ISOTOPES:
            raise ValueError(
                f"NISOfuel must be an isotope index in [0, {N_ISOTOPES - 1}], got {self.NISOfuel}"
            )
        if not self.alphanet_epsder > 0.0:
            raise ValueError(f"alphanet_epsder must be positive, got {self.alphanet_epsder}")
        for name in ('unit_density', 'unit_length_in_cm', 'unit_vel_in_cms'):
            value = getattr(self, name)
            if not value > 0.0:
                raise ValueError(f"{name} must be positive, got {value}")

    @property
    def unit_time_in_s(self) -> float:
        """Code time unit, from the length and velocity units."""
        return self.unit_length_in_cm / self.unit_vel_in_cms

    @property
    def unit_E_in_cgs(self) -> float:
        """Code energy-density unit in erg/cm^3."""
        return self.unit_density * self.unit_vel_in_cms**2

    @classmethod
    def from_mapping(cls, section: Optional[Mapping[str, Any]] = None) -> "NetworkConfig":
        """
        Build a config from a parsed "chemistry" block.

        Unknown keys are reported with a warning and otherwise ignored.
        """
        section = dict(section or {})
        known = {f.name: f for f in fields(cls)}

        unknown = sorted(set(section) - set(known))
        if unknown:
            warnings.warn(f"Ignoring unknown chemistry options: {', '.join(unknown)}")

        kwargs = {}
        for name, f in known.items():
            if name in section:
                caster = int if f.type in (int, 'int') else float
                kwargs[name] = caster(section[name])
        return cls(**kwargs)


def data_path_override() -> Optional[Path]:
    """Nuclear data location requested through the environment, if any."""
    value = os.getenv(DATA_PATH_ENV)
    return Path(value) if value else None
