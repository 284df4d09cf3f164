"""
Nuclear Data Table for the alpha-chain network.

Reads the fixed-format table `alpnet.dat` once and returns an immutable
bundle of per-isotope constants and per-reaction rate coefficients.

File layout:
    1. 13 isotope records, whitespace delimited:
           label  Z  Q[MeV]  g0  a  b  c
       Partition function: pf = g0 * (1 + exp(a/T9 + b + c*T9))
    2. Triple-alpha bootstrap: two lines of 13-character fields, six
       coefficients on the first line and the seventh on the second.
    3. 37 paired records for the a(x,y)b reactions. The first line holds the
       target and projectile labels followed by four 14-character fields,
       the second line holds the remaining three fields.

Reverse-rate coefficients are not read; they follow from detailed balance
using the mass numbers and binding energies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.config import data_path_override
from .reactions import (
    A_ISO,
    LN_TRIPLE_ALPHA_REVERSE,
    N_ALP,
    N_ISO,
    N_REAC,
    REACTIONS,
    REVERSE_CONV_FACTOR,
    SPECIES_NAMES,
    Z_ISO,
)

log = logging.getLogger(__name__)

DATA_FILE = Path(__file__).parents[1] / "data" / "alpnet.dat"

# Isotope record: label, Z, Q, g0, a, b, c
N_ISOTOPE_FIELDS = 7

# Triple-alpha bootstrap record
BOOTSTRAP_WIDTH = 13
BOOTSTRAP_FIRST_LINE_FIELDS = 6

# a(x,y)b record
TARGET_LABEL = slice(1, 3)
TARGET_MASS = slice(3, 5)
PROJECTILE_LABEL = slice(6, 8)
PROJECTILE_MASS = slice(8, 10)
OPEN_PAREN_COLUMN = 5
COMMA_COLUMN = 10
COEFF_OFFSET = 20
COEFF_WIDTH = 14
FIRST_LINE_FIELDS = 4
SECOND_LINE_FIELDS = 3

N_COEFFS = 7

# Screening coefficient: gscr = GSCR_PREFACTOR * Z^(5/3)
GSCR_PREFACTOR = 0.2275e-3


class NuclearDataError(ValueError):
    """The nuclear data table is missing or malformed."""


@dataclass(frozen=True)
class NuclearData:
    """Immutable nuclear and reaction constants."""
    z: np.ndarray       # Atomic numbers
    q: np.ndarray       # Binding energies (MeV)
    g0: np.ndarray      # Pre-exponential factor in partition function
    apf: np.ndarray     # Term in exponent of partition function divided by T9
    bpf: np.ndarray     # Constant term in exponent of partition function
    cpf: np.ndarray     # Term in exponent of partition function multiplied by T9
    gscr: np.ndarray    # Screening coefficients
    calp: np.ndarray    # (N_ALP, 7) rate polynomial coefficients
    ca: np.ndarray      # Constant term of reverse-rate exponent
    cb: np.ndarray      # Reaction energy (MeV); reverse exponent term times 11.605/T9
    source: Optional[Path] = None

    def __post_init__(self):
        for name in ('z', 'q', 'g0', 'apf', 'bpf', 'cpf', 'gscr', 'calp', 'ca', 'cb'):
            arr = np.array(getattr(self, name), dtype=np.float64)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)


def screening_coefficients(z: np.ndarray) -> np.ndarray:
    return GSCR_PREFACTOR * np.power(z, 5.0 / 3.0)


def reverse_constants(q: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Detailed-balance constants of the 18 reverse rates.

    Returns:
        ca: ln of the statistical prefactor
        cb: reaction energy  sum(Q reactants) - sum(Q products)  (MeV)
    """
    ca = np.zeros(N_REAC)
    cb = np.zeros(N_REAC)

    for k, reac in enumerate(REACTIONS):
        a_in = np.prod([A_ISO[i]**m for i, m in reac.reactants])
        a_out = np.prod([A_ISO[i]**m for i, m in reac.products])
        n_in, n_out = reac.n_reactants, reac.n_products

        if n_in == 3:
            # C ==> 3 He
            ca[k] = LN_TRIPLE_ALPHA_REVERSE
        elif n_out == 1:
            # Y ==> X + He, or Y ==> X + X
            ca[k] = np.log(REVERSE_CONV_FACTOR * (a_in / a_out)**1.5)
        else:
            # Y + He ==> X + X'
            ca[k] = 1.5 * np.log(a_in / a_out)

        cb[k] = (sum(m * q[i] for i, m in reac.reactants)
                 - sum(m * q[i] for i, m in reac.products))

    return ca, cb


def _parse_float(text: str, path: Path, lineno: int) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise NuclearDataError(f"{path}:{lineno}: cannot read number from {text!r}") from exc


def _fixed_fields(line: str, offset: int, width: int, count: int,
                  path: Path, lineno: int) -> List[float]:
    end = offset + count * width
    if len(line.rstrip("\n")) < end:
        raise NuclearDataError(
            f"{path}:{lineno}: expected {count} fields of width {width} "
            f"starting at column {offset}, line has {len(line.rstrip())} characters"
        )
    return [_parse_float(line[offset + l*width: offset + (l+1)*width], path, lineno)
            for l in range(count)]


def _parse_isotopes(lines: Sequence[str], path: Path) -> np.ndarray:
    """Rows of (Z, Q, g0, a, b, c) for the 13 isotopes."""
    table = np.zeros((N_ISO, N_ISOTOPE_FIELDS - 1))
    for k in range(N_ISO):
        lineno = k + 1
        tokens = lines[k].split()
        if len(tokens) != N_ISOTOPE_FIELDS:
            raise NuclearDataError(
                f"{path}:{lineno}: isotope record needs {N_ISOTOPE_FIELDS} fields, "
                f"found {len(tokens)}"
            )
        if tokens[0] != SPECIES_NAMES[k]:
            raise NuclearDataError(
                f"{path}:{lineno}: expected isotope {SPECIES_NAMES[k]}, found {tokens[0]}"
            )
        table[k] = [_parse_float(t, path, lineno) for t in tokens[1:]]
        if table[k, 0] != Z_ISO[k]:
            raise NuclearDataError(
                f"{path}:{lineno}: {SPECIES_NAMES[k]} has Z = {table[k, 0]:g}, "
                f"expected {Z_ISO[k]:g}"
            )
    return table


def _record_header(first: str, second: str, path: Path, lineno: int) -> Tuple[Tuple[str, int], Tuple[str, int]]:
    """(label, mass) of target and projectile of an a(x,y)b record."""
    if (len(first) < COEFF_OFFSET or first[OPEN_PAREN_COLUMN] != "("
            or first[COMMA_COLUMN] != ","):
        raise NuclearDataError(f"{path}:{lineno}: reaction record has no a(x,y)b label")

    nuclei = []
    for label, mass in ((TARGET_LABEL, TARGET_MASS), (PROJECTILE_LABEL, PROJECTILE_MASS)):
        try:
            nuclei.append((first[label], int(first[mass])))
        except ValueError as exc:
            raise NuclearDataError(
                f"{path}:{lineno}: cannot read mass number from {first[mass]!r}"
            ) from exc

    if second[:COEFF_OFFSET].strip():
        raise NuclearDataError(
            f"{path}:{lineno + 1}: continuation line must be blank before column {COEFF_OFFSET}"
        )
    return nuclei[0], nuclei[1]


def _parse_reactions(lines: Sequence[str], first_lineno: int, path: Path) -> np.ndarray:
    """The (N_ALP, 7) polynomial bank."""
    n_expected = 2 * N_ALP
    if len(lines) != n_expected:
        raise NuclearDataError(
            f"{path}: expected {n_expected} reaction lines, found {len(lines)}"
        )

    calp = np.zeros((N_ALP, N_COEFFS))

    # 3He ==> C
    calp[0, :BOOTSTRAP_FIRST_LINE_FIELDS] = _fixed_fields(
        lines[0], 0, BOOTSTRAP_WIDTH, BOOTSTRAP_FIRST_LINE_FIELDS, path, first_lineno)
    calp[0, BOOTSTRAP_FIRST_LINE_FIELDS] = _fixed_fields(
        lines[1], 0, BOOTSTRAP_WIDTH, 1, path, first_lineno + 1)[0]
    calp[0, 0] -= np.log(6.0)

    # a(x,y)b reactions
    for m in range(1, N_ALP):
        lineno = first_lineno + 2 * m
        first, second = lines[2 * m], lines[2 * m + 1]
        target, projectile = _record_header(first, second, path, lineno)

        calp[m, :FIRST_LINE_FIELDS] = _fixed_fields(
            first, COEFF_OFFSET, COEFF_WIDTH, FIRST_LINE_FIELDS, path, lineno)
        calp[m, FIRST_LINE_FIELDS:] = _fixed_fields(
            second, COEFF_OFFSET, COEFF_WIDTH, SECOND_LINE_FIELDS, path, lineno + 1)

        if target == projectile:
            calp[m, 0] -= np.log(2.0)

    return calp


def load_nuclear_data(path: Optional[Union[str, Path]] = None) -> NuclearData:
    """
    Parse the nuclear data table.

    Args:
        path: Table location. Defaults to $ALPHANET_DATA, then the bundled table.

    Raises:
        NuclearDataError: the file cannot be opened or does not follow the layout.
    """
    if path is None:
        path = data_path_override() or DATA_FILE
    path = Path(path)

    try:
        with open(path) as fh:
            lines = fh.readlines()
    except OSError as exc:
        raise NuclearDataError(f"Unable to open nuclear data table {path}") from exc

    # Trailing blank lines carry no records
    while lines and not lines[-1].strip():
        lines.pop()

    if len(lines) < N_ISO:
        raise NuclearDataError(
            f"{path}: expected {N_ISO} isotope records, file has {len(lines)} lines"
        )

    iso = _parse_isotopes(lines[:N_ISO], path)
    calp = _parse_reactions(lines[N_ISO:], N_ISO + 1, path)

    z, q = iso[:, 0], iso[:, 1]
    ca, cb = reverse_constants(q)

    log.info("Loaded nuclear data for %d isotopes and %d rate fits from %s",
             N_ISO, N_ALP, path)

    return NuclearData(
        z=z,
        q=q,
        g0=iso[:, 2],
        apf=iso[:, 3],
        bpf=iso[:, 4],
        cpf=iso[:, 5],
        gscr=screening_coefficients(z),
        calp=calp,
        ca=ca,
        cb=cb,
        source=path,
    )


@lru_cache(maxsize=None)
def default_nuclear_data() -> NuclearData:
    """Process-wide table, read on first use."""
    return load_nuclear_data()
