"""
Tests for single-cell burning (burn.py) and the command line (cli.py)

Tests validate:
1. Helium burns to carbon and heats the cell
2. Total mass fraction is conserved by the integration
3. History export to pandas
4. CLI subcommands

Run with: pytest tests/test_burn.py -v
"""

import numpy as np
import pandas as pd
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from alphanet.burn import BurnResult, burn_cell, composition
from alphanet.cli import main
from alphanet.network.alpha13 import AlphaChainNetwork, UniformHydro
from alphanet.network.eos_ideal import energy_density_from_temperature
from alphanet.network.reactions import SPECIES_NAMES

GAMMA = 5.0 / 3.0
RHO = 1e7
T0 = 3e9


@pytest.fixture(scope="module")
def helium_burn():
    network = AlphaChainNetwork(UniformHydro.uniform(RHO, gamma=GAMMA))
    network.initialize_next_step(0, 0, 0)
    y0 = composition({'4He': 0.25})
    ED0 = energy_density_from_temperature(T0, RHO, GAMMA)
    return burn_cell(network, y0, ED0, 1e-3, t_eval=np.linspace(0.0, 1e-3, 11))


class TestComposition:
    """Test building initial compositions."""

    def test_named_species(self):
        y = composition({'12C': 0.5 / 12, '16O': 0.5 / 16})
        assert y[1] == pytest.approx(0.5 / 12)
        assert y[2] == pytest.approx(0.5 / 16)
        assert y.sum() == pytest.approx(0.5 / 12 + 0.5 / 16)

    def test_unknown_species(self):
        with pytest.raises(ValueError, match="Unknown species"):
            composition({'He4': 1.0})


class TestHeliumBurn:
    """Pure helium at 1e7 g/cm^3 and 3e9 K for 1 ms."""

    def test_success(self, helium_burn):
        assert isinstance(helium_burn, BurnResult)
        assert helium_burn.success

    def test_output_times(self, helium_burn):
        assert len(helium_burn.t) == 11
        assert helium_burn.y.shape == (11, 13)
        assert helium_burn.t[-1] == pytest.approx(1e-3)

    def test_helium_consumed(self, helium_burn):
        assert helium_burn.y[-1, 0] < helium_burn.y[0, 0]
        assert np.all(np.diff(helium_burn.y[:, 0]) <= 0)

    def test_carbon_produced(self, helium_burn):
        assert helium_burn.y[-1, 1] > 0

    def test_cell_heats(self, helium_burn):
        assert helium_burn.ED[-1] > helium_burn.ED[0]
        assert helium_burn.T[-1] > helium_burn.T[0]
        assert helium_burn.T[0] == pytest.approx(T0)

    def test_mass_conserved(self, helium_burn):
        total = helium_burn.mass_fractions.sum(axis=1)
        np.testing.assert_allclose(total, 1.0, atol=1e-4)

    def test_to_frame(self, helium_burn):
        df = helium_burn.to_frame()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 11
        assert list(df.columns) == ['t'] + [f"Y_{n}" for n in SPECIES_NAMES] + ['ED', 'T']
        np.testing.assert_array_equal(df['Y_4He'].to_numpy(), helium_burn.y[:, 0])


class TestCLI:
    """Test the alphanet command."""

    def test_rates(self, capsys):
        assert main(["rates", "--rho", "1e7", "--temp", "3e9"]) == 0
        out = capsys.readouterr().out
        assert "3He -> C12" in out
        assert "He + Fe52 -> Ni56" in out

    def test_burn_writes_outputs(self, tmp_path, capsys):
        csv = tmp_path / "history.csv"
        plot = tmp_path / "burn.png"
        rc = main(["burn", "--t-end", "1e-4", "--abundance", "4He=0.25",
                   "--csv", str(csv), "--plot", str(plot)])
        assert rc == 0
        assert "Final composition" in capsys.readouterr().out
        df = pd.read_csv(csv)
        assert 'Y_12C' in df.columns
        assert plot.exists()

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()
