"""
Estimate the site percolation threshold of an n x n grid by Monte Carlo
simulation.

Each trial opens uniformly random sites of a fresh model until it percolates
and records the open fraction. Summary statistics over t trials:

    mean, sample stddev, 95% confidence interval
    [mean - 1.96 * stddev / sqrt(t), mean + 1.96 * stddev / sqrt(t)]

    $ python percolation_stats.py 2 10000
    mean                    = 0.6668
    stddev                  = 0.1178...
    95% confidence interval = [0.6644..., 0.6691...]
"""

import argparse
import logging
import math
import sys

import numpy as np
from numba import njit

from percolation import Percolation, OPEN, CONNECTED_TOP, CONNECTED_BOTTOM, CONNECTED_BOTH
from percolation_config import SIMULATION, ENGINES
from union_find import find_root, union_by_size

logger = logging.getLogger(__name__)


@njit(cache=True)
def threshold_trial_kernel(n, order):
    """
    Compiled single trial: open sites in the given order (0-based flat
    indices into the n*n grid) and return how many were open when the grid
    first percolated. Same root-flag bookkeeping as Percolation.open.
    """
    numSites = (n + 1) * (n + 1)
    parent = np.arange(numSites)
    size = np.ones(numSites, dtype=np.int64)
    state = np.zeros(numSites, dtype=np.uint8)

    for k in range(order.shape[0]):
        row = order[k] // n + 1
        col = order[k] % n + 1
        site = row * n + col

        flags = OPEN
        if row == 1:
            flags |= CONNECTED_TOP
        if row == n:
            flags |= CONNECTED_BOTTOM
        state[site] |= flags

        captured = 0
        if row > 1 and state[site - n] & OPEN:
            nb = find_root(parent, site - n)
            captured |= state[nb]
            union_by_size(parent, size, site, nb)
        if col > 1 and state[site - 1] & OPEN:
            nb = find_root(parent, site - 1)
            captured |= state[nb]
            union_by_size(parent, size, site, nb)
        if col < n and state[site + 1] & OPEN:
            nb = find_root(parent, site + 1)
            captured |= state[nb]
            union_by_size(parent, size, site, nb)
        if row < n and state[site + n] & OPEN:
            nb = find_root(parent, site + n)
            captured |= state[nb]
            union_by_size(parent, size, site, nb)

        root = find_root(parent, site)
        state[root] |= captured | state[site]
        if state[root] & CONNECTED_BOTH == CONNECTED_BOTH:
            return k + 1

    return order.shape[0]


def run_trial(n, rng):
    """One trial on a Percolation object; returns the open-site count."""
    simulator = Percolation(n)
    while not simulator.percolates():
        row, col = rng.integers(1, n + 1, size=2)
        simulator.open(int(row), int(col))
    return simulator.numberOfOpenSites()


class PercolationStats:
    # perform independent trials on an n-by-n grid
    def __init__(self, n: int, trials: int, seed=None, engine: str = SIMULATION["engine"]):
        if n <= 0 or trials <= 0:
            raise ValueError("grid size n and trials count must be positive integers")
        if engine not in ENGINES:
            raise ValueError(f"unknown engine {engine!r}, expected one of {ENGINES}")

        self.gridSize = n
        self.trialCount = trials
        self.engine = engine
        self.z = SIMULATION["confidence_z"]

        rng = np.random.default_rng(seed)
        openCounts = np.empty(trials, dtype=np.int64)

        for i in range(trials):
            if engine == "numba":
                openCounts[i] = threshold_trial_kernel(n, rng.permutation(n * n))
            else:
                openCounts[i] = run_trial(n, rng)
            if (i + 1) % 1000 == 0:
                logger.debug("n=%d: %d/%d trials done", n, i + 1, trials)

        self.results = openCounts / (n * n)
        logger.info("n=%d, trials=%d, engine=%s: mean=%.6f", n, trials, engine, self.mean())

    # sample mean of percolation threshold
    def mean(self) -> float:
        return float(np.mean(self.results))

    # sample standard deviation of percolation threshold
    def stddev(self) -> float:
        if self.trialCount < 2:
            return math.nan
        return float(np.std(self.results, ddof=1))

    def _half_width(self):
        return self.z * self.stddev() / math.sqrt(self.trialCount)

    # low endpoint of 95% confidence interval
    def confidence_lo(self) -> float:
        return self.mean() - self._half_width()

    # high endpoint of 95% confidence interval
    def confidence_hi(self) -> float:
        return self.mean() + self._half_width()

    def confidence_interval(self):
        return self.confidence_lo(), self.confidence_hi()

    def report(self, out=None):
        out = out or sys.stdout
        print(f"mean                    = {self.mean()}", file=out)
        print(f"stddev                  = {self.stddev()}", file=out)
        lo, hi = self.confidence_interval()
        print(f"95% confidence interval = [{lo}, {hi}]", file=out)


def positive_int(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text!r} is not an integer")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return value


def build_parser():
    parser = argparse.ArgumentParser(
        description="Run a Monte Carlo simulation for 2D site percolation."
    )
    parser.add_argument('n', type=positive_int,
                        help="Size of the square grid (n x n).")
    parser.add_argument('trials', type=positive_int,
                        help="The number of Monte Carlo trials to perform.")
    parser.add_argument('--seed', type=int, default=SIMULATION["random_seed"],
                        help="Seed for the random site generator.")
    parser.add_argument('--engine', choices=ENGINES, default=SIMULATION["engine"],
                        help="Trial implementation: Percolation objects or the numba kernel.")
    parser.add_argument('--sweep', nargs=2, type=positive_int, metavar=('LMAX', 'LSTEP'),
                        help="Sweep sizes n..LMAX in steps of LSTEP and extrapolate pc(infinity).")
    parser.add_argument('--verbose', action='store_true',
                        help="Log trial progress.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.sweep:
        # imported here, threshold_sweep depends on this module
        from threshold_sweep import sweep_sizes, extrapolate_threshold

        lmax, lstep = args.sweep
        if lmax < args.n:
            parser.error(f"LMAX ({lmax}) must be >= n ({args.n})")
        sizes = list(range(args.n, lmax + 1, lstep))
        sweep = sweep_sizes(sizes, args.trials, seed=args.seed, engine=args.engine)
        for size, mean, std, lo, hi in sweep.rows():
            print(f"n = {size:<6d} mean = {mean:.6f}  stddev = {std:.6f}  95% CI = [{lo:.6f}, {hi:.6f}]")
        if len(sizes) >= 2:
            fit = extrapolate_threshold(sweep.sizes, sweep.means)
            print(f"pc(infinity) = {fit.pc_inf:.6f}, R^2 = {fit.r_squared:.4f}")
        return 0

    stats = PercolationStats(args.n, args.trials, seed=args.seed, engine=args.engine)
    stats.report()
    return 0


if __name__ == "__main__":
    sys.exit(main())
