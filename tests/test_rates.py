"""
Tests for forward and reverse reaction rates (network/rates.py)

Tests validate:
1. REACLIB polynomial form and identical-particle factors
2. Temperature floor
3. Coulomb screening behavior
4. Detailed balance of reverse rates
5. Finite, non-negative rates over the burning regime

Run with: pytest tests/test_rates.py -v
"""

import numpy as np
import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from alphanet.network.nuclear_data import default_nuclear_data
from alphanet.network.rates import (
    GAMMA_MAX,
    bank_rates,
    calculate_rates,
    equilibrium_screening,
    forward_rates,
    normalized_temperature,
    partition_functions,
    screening_exponents,
    screening_factors,
    screening_parameters,
)
from alphanet.network.reactions import N_REAC, REACTIONS

# Reactions whose only product is the screening compound nucleus
SINGLE_PRODUCT = [k for k, r in enumerate(REACTIONS)
                  if len(r.products) == 1 and r.products[0][0] == r.compound]


@pytest.fixture(scope="module")
def data():
    return default_nuclear_data()


class TestTemperatureFloor:
    """Test T9 is clamped to 0.01."""

    def test_normalized(self):
        assert normalized_temperature(3e9) == pytest.approx(3.0)

    def test_clamped(self):
        assert normalized_temperature(1e5) == 0.01
        assert normalized_temperature(0.0) == 0.01

    def test_rates_identical_below_floor(self):
        """Every temperature below 1e7 K gives the rates at 1e7 K."""
        frv_a, rev_a = calculate_rates(1e7, 1e7)
        frv_b, rev_b = calculate_rates(1e7, 1e5)
        np.testing.assert_array_equal(frv_a, frv_b)
        np.testing.assert_array_equal(rev_a, rev_b)


class TestPolynomialBank:
    """Test the rate fits."""

    def test_reaclib_form(self, data):
        """exp(c0 + c1/T9 + c2 T9^-1/3 + c3 T9^1/3 + c4 T9 + c5 T9^5/3 + c6 ln T9)"""
        rho, t9 = 2e6, 2.5
        c = data.calp
        expected = rho * np.exp(c[:, 0] + c[:, 1] / t9 + c[:, 2] * t9**(-1.0 / 3.0)
                                + c[:, 3] * t9**(1.0 / 3.0) + c[:, 4] * t9
                                + c[:, 5] * t9**(5.0 / 3.0) + c[:, 6] * np.log(t9))
        np.testing.assert_allclose(bank_rates(rho, t9, c), expected, rtol=1e-12)

    def test_bank_aggregation(self, data):
        """Unscreened forward rates sum their fits and apply particle factors."""
        rho, t9 = 1e7, 3.0
        falp = bank_rates(rho, t9, data.calp)
        frv = forward_rates(rho, t9, data, fscr=np.zeros(13))

        assert frv[0] == pytest.approx(falp[0] * rho / 12.0)
        assert frv[1] == pytest.approx(0.5 * falp[1])
        assert frv[2] == pytest.approx(0.5 * (falp[2] + falp[3]))
        assert frv[4] == pytest.approx(falp[5] + falp[6])
        assert frv[6] == pytest.approx(0.5 * (falp[8] + falp[9]))
        assert frv[9] == pytest.approx(falp[14:19].sum())
        assert frv[17] == pytest.approx(falp[36] + falp[37])

    def test_every_fit_used_once(self):
        rows = sorted(l for r in REACTIONS for l in r.bank)
        assert rows == list(range(38))

    def test_temperature_sensitivity(self):
        """Alpha captures speed up strongly with temperature."""
        frv_lo, _ = calculate_rates(1e7, 2e9)
        frv_hi, _ = calculate_rates(1e7, 4e9)
        assert frv_hi[7] > 10 * frv_lo[7]


class TestScreening:
    """Test Coulomb screening of forward rates."""

    def test_gamma_capped(self, data):
        gam = screening_parameters(1e10, 0.01, data.gscr)
        assert np.all(gam <= GAMMA_MAX)

    def test_enhancement_in_weak_regime(self, data):
        fscr = screening_factors(1e4, 5.0, data.gscr)
        assert np.all(screening_exponents(fscr) > 0)

    def test_increases_with_density(self, data):
        lo = screening_exponents(screening_factors(1e4, 5.0, data.gscr))
        hi = screening_exponents(screening_factors(1e5, 5.0, data.gscr))
        assert np.all(hi > lo)

    def test_weak_strong_boundary_finite(self, data):
        """Both branches are evaluated somewhere across a density sweep."""
        for rho in np.logspace(3, 10, 15):
            fscr = screening_factors(rho, 1.0, data.gscr)
            assert np.all(np.isfinite(fscr))

    def test_forward_rates_include_screening(self, data):
        rho, t9 = 1e8, 1.0
        fscr = screening_factors(rho, t9, data.gscr)
        bare = forward_rates(rho, t9, data, fscr=np.zeros(13))
        screened = forward_rates(rho, t9, data, fscr=fscr)
        np.testing.assert_allclose(screened, bare * np.exp(screening_exponents(fscr)))


class TestDetailedBalance:
    """Test reverse rates."""

    def test_equilibrium_screening_antisymmetric(self, data):
        """Single-product reactions undo the forward screening exactly."""
        fscr = screening_factors(1e8, 2.0, data.gscr)
        fwd = screening_exponents(fscr)
        eq = equilibrium_screening(fscr)
        np.testing.assert_allclose(eq[SINGLE_PRODUCT], -fwd[SINGLE_PRODUCT], atol=1e-12)

    @pytest.mark.parametrize("temp", [2e9, 5e9])
    def test_photodisintegration_density_independent(self, temp):
        """Backward rate frv*rev of Y -> X + He does not depend on density."""
        frv_a, rev_a = calculate_rates(1e6, temp)
        frv_b, rev_b = calculate_rates(1e8, temp)
        np.testing.assert_allclose((frv_a * rev_a)[SINGLE_PRODUCT],
                                   (frv_b * rev_b)[SINGLE_PRODUCT], rtol=1e-9)

    @pytest.mark.parametrize("rho,temp", [(1e7, 5e9), (1e9, 2e9), (1e5, 8e9)])
    @pytest.mark.parametrize("k", range(N_REAC))
    def test_reverse_closed_form(self, data, rho, temp, k):
        """Every reverse law written out by hand from Q, A, F and pf."""
        t9 = 1.0e-9 * temp
        F = screening_factors(rho, t9, data.gscr)
        pf = partition_functions(t9, data)
        q = data.q
        K2 = 9.867425e9
        t9r = 11.605 / t9
        x = t9**1.5 / rho

        def law(ca, cb, scr, pf_ratio, phase):
            return np.exp(ca + cb * t9r + scr) * pf_ratio * phase

        closed = {
            0: law(np.log(1.199252e21), 3 * q[0] - q[1],
                   F[1] - 3 * F[0], pf[0]**3 / pf[1], x**2),
            1: law(1.5 * np.log(12.0 * 12.0 / (20.0 * 4.0)), 2 * q[1] - q[3] - q[0],
                   F[3] + F[0] - 2 * F[1], pf[1]**2 / (pf[3] * pf[0]), 1.0),
            2: law(np.log(K2 * (12.0 * 12.0 / 24.0)**1.5), 2 * q[1] - q[4],
                   F[4] - 2 * F[1], pf[1]**2 / pf[4], x),
            3: law(1.5 * np.log(12.0 * 16.0 / (24.0 * 4.0)), q[1] + q[2] - q[4] - q[0],
                   F[4] + F[0] - F[1] - F[2], pf[1] * pf[2] / (pf[4] * pf[0]), 1.0),
            4: law(np.log(K2 * (12.0 * 16.0 / 28.0)**1.5), q[1] + q[2] - q[5],
                   F[5] - F[1] - F[2], pf[1] * pf[2] / pf[5], x),
            5: law(1.5 * np.log(16.0 * 16.0 / (28.0 * 4.0)), 2 * q[2] - q[5] - q[0],
                   F[5] + F[0] - 2 * F[2], pf[2]**2 / (pf[5] * pf[0]), 1.0),
            6: law(np.log(K2 * (16.0 * 16.0 / 32.0)**1.5), 2 * q[2] - q[6],
                   F[6] - 2 * F[2], pf[2]**2 / pf[6], x),
        }
        # He + X -> Y for X = 12C ... 52Fe
        for i in range(1, 12):
            a_x, a_y = 4.0 * (i + 2), 4.0 * (i + 3)
            closed[6 + i] = law(np.log(K2 * (4.0 * a_x / a_y)**1.5), q[0] + q[i] - q[i + 1],
                                F[i + 1] - F[0] - F[i], pf[0] * pf[i] / pf[i + 1], x)

        _, rev = calculate_rates(rho, temp)
        assert rev[k] == pytest.approx(closed[k], rel=1e-10, abs=1e-300)

    def test_reverse_grows_with_temperature(self):
        """Photodisintegration turns on at high temperature."""
        frv_lo, rev_lo = calculate_rates(1e7, 2e9)
        frv_hi, rev_hi = calculate_rates(1e7, 6e9)
        assert frv_hi[17] * rev_hi[17] > frv_lo[17] * rev_lo[17]

    def test_partition_functions_at_least_g0(self, data):
        for t9 in [0.01, 1.0, 5.0, 10.0]:
            assert np.all(partition_functions(t9, data) >= data.g0)


class TestCalculateRates:
    """Test the combined entry point."""

    def test_shapes(self):
        frv, rev = calculate_rates(1e7, 3e9)
        assert frv.shape == (N_REAC,)
        assert rev.shape == (N_REAC,)

    def test_idempotent(self):
        a = calculate_rates(3e7, 4e9)
        b = calculate_rates(3e7, 4e9)
        np.testing.assert_array_equal(a[0], b[0])
        np.testing.assert_array_equal(a[1], b[1])

    def test_explicit_table(self, data):
        a = calculate_rates(1e7, 3e9)
        b = calculate_rates(1e7, 3e9, data)
        np.testing.assert_array_equal(a[0], b[0])

    @pytest.mark.parametrize("rho", [1e4, 1e6, 1e8, 1e9])
    @pytest.mark.parametrize("temp", [1e7, 2e8, 1e9, 5e9, 1e10])
    def test_finite_non_negative(self, rho, temp):
        frv, rev = calculate_rates(rho, temp)
        assert np.all(np.isfinite(frv)) and np.all(frv >= 0)
        assert np.all(np.isfinite(rev)) and np.all(rev >= 0)
