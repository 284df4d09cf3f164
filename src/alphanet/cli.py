import argparse
import logging
import sys
from pathlib import Path

import numpy as np


def _parse_abundances(pairs):
    abundances = {}
    for pair in pairs:
        name, _, value = pair.partition("=")
        if not value:
            raise argparse.ArgumentTypeError(f"Expected SPECIES=VALUE, got {pair!r}")
        abundances[name] = float(value)
    return abundances


def run_rates(args):
    from alphanet.network.rates import calculate_rates
    from alphanet.network.reactions import REACTIONS

    frv, rev = calculate_rates(args.rho, args.temp)

    print(f"rho = {args.rho:.3e} g/cm^3, T = {args.temp:.3e} K")
    print("-" * 64)
    print(f"{'reaction':<28}{'forward':>16}{'reverse':>16}")
    for reac, f, r in zip(REACTIONS, frv, rev):
        print(f"{reac.label:<28}{f:>16.6e}{r:>16.6e}")


def run_burn(args):
    from alphanet.burn import burn_cell, composition
    from alphanet.network.alpha13 import AlphaChainNetwork, UniformHydro
    from alphanet.network.eos_ideal import energy_density_from_temperature
    from alphanet.network.reactions import SPECIES_NAMES

    abundances = _parse_abundances(args.abundance or ["4He=1.0"])
    y0 = composition(abundances)

    host = UniformHydro.uniform(args.rho, gamma=args.gamma)
    network = AlphaChainNetwork(host)
    network.initialize_next_step(0, 0, 0)
    ED0 = energy_density_from_temperature(args.temp, args.rho, args.gamma)

    print(f"[BURN] rho = {args.rho:.2e} g/cm^3, T = {args.temp:.2e} K, t_end = {args.t_end:.2e} s")
    t_eval = np.geomspace(args.t_end * 1e-6, args.t_end, 60)
    result = burn_cell(network, y0, ED0, args.t_end, t_eval=t_eval)

    if not result.success:
        print(f"[FAIL] {result.message}")
        return 1

    print("\nFinal composition (mass fractions):")
    for name, X in zip(SPECIES_NAMES, result.mass_fractions[-1]):
        if X > 1e-4:
            print(f"  {name:>5}: {X:.4f}")
    print(f"\nFinal temperature: {result.T[-1]:.3e} K")

    if args.csv:
        result.to_frame().to_csv(args.csv, index=False)
        print(f"History written to {args.csv}")

    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(8, 5))
        for k, name in enumerate(SPECIES_NAMES):
            X = result.mass_fractions[:, k]
            if X.max() > 1e-6:
                ax.loglog(result.t, np.maximum(X, 1e-12), label=name)
        ax.set_xlabel("t (s)")
        ax.set_ylabel("mass fraction")
        ax.set_ylim(1e-6, 1.5)
        ax.legend(ncol=2, fontsize=8)
        ax.set_title(f"rho = {args.rho:.1e} g/cm$^3$, T$_0$ = {args.temp:.1e} K")
        plt.savefig(Path(args.plot), dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Plot written to {args.plot}")

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="alphanet: 13-isotope alpha-chain nuclear reaction network"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Subcommand: rates
    parser_rates = subparsers.add_parser("rates", help="Print forward and reverse rates")
    parser_rates.add_argument("--rho", type=float, default=1e7, help="Density (g/cm^3)")
    parser_rates.add_argument("--temp", type=float, default=5e9, help="Temperature (K)")

    # Subcommand: burn
    parser_burn = subparsers.add_parser("burn", help="Burn a single cell at constant density")
    parser_burn.add_argument("--rho", type=float, default=1e7, help="Density (g/cm^3)")
    parser_burn.add_argument("--temp", type=float, default=3e9, help="Initial temperature (K)")
    parser_burn.add_argument("--gamma", type=float, default=5.0 / 3.0, help="Adiabatic index")
    parser_burn.add_argument("--t-end", type=float, default=1e-3, help="Burn time (s)")
    parser_burn.add_argument("--abundance", action="append", metavar="SPECIES=Y",
                             help="Initial mole fraction, e.g. 12C=0.0417 (repeatable)")
    parser_burn.add_argument("--csv", help="Write the history table to this file")
    parser_burn.add_argument("--plot", help="Write a mass-fraction plot to this file")

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if args.command == "rates":
        run_rates(args)
        return 0
    elif args.command == "burn":
        return run_burn(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
