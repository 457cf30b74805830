"""
Percolation threshold across grid sizes, with a finite-size scaling
extrapolation to the infinite lattice.

    pc(L) = pc(inf) + a * L^(-3/4)

so a straight-line fit of the mean threshold against L^(-3/4) has
pc(inf) as its intercept.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
from scipy.stats import linregress

from percolation_config import SCALING, SIMULATION
from percolation_stats import PercolationStats

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Per-size summary of a threshold sweep."""
    sizes: np.ndarray
    means: np.ndarray
    stddevs: np.ndarray
    conf_lo: np.ndarray
    conf_hi: np.ndarray

    def rows(self) -> Iterator[Tuple[int, float, float, float, float]]:
        for i in range(len(self.sizes)):
            yield (int(self.sizes[i]), float(self.means[i]), float(self.stddevs[i]),
                   float(self.conf_lo[i]), float(self.conf_hi[i]))


@dataclass
class Extrapolation:
    pc_inf: float
    slope: float
    r_squared: float


def sweep_sizes(sizes: Sequence[int], trials: int, seed: Optional[int] = None,
                engine: str = SIMULATION["engine"]) -> SweepResult:
    """
    Run PercolationStats for every grid size.

    A single seed drives all sizes: it seeds a SeedSequence whose children
    feed one independent stream per size.
    """
    if len(sizes) == 0:
        raise ValueError("sizes must not be empty")

    children = np.random.SeedSequence(seed).spawn(len(sizes))
    means, stds, los, his = [], [], [], []

    for size, child in zip(sizes, children):
        logger.info("simulate n = %d", size)
        stats = PercolationStats(int(size), trials, seed=child, engine=engine)
        means.append(stats.mean())
        stds.append(stats.stddev())
        lo, hi = stats.confidence_interval()
        los.append(lo)
        his.append(hi)

    return SweepResult(
        sizes=np.asarray(sizes, dtype=np.int64),
        means=np.asarray(means),
        stddevs=np.asarray(stds),
        conf_lo=np.asarray(los),
        conf_hi=np.asarray(his),
    )


def extrapolate_threshold(sizes, means, exponent: float = SCALING["exponent"]) -> Extrapolation:
    """
    Linear fit of mean threshold against L**exponent; the intercept at
    L**exponent = 0 estimates pc(infinity).
    """
    sizes = np.asarray(sizes, dtype=float)
    means = np.asarray(means, dtype=float)
    if sizes.shape != means.shape:
        raise ValueError("sizes and means must have the same length")
    if len(np.unique(sizes)) < SCALING["min_sizes"]:
        raise ValueError(f"need at least {SCALING['min_sizes']} distinct sizes to extrapolate")

    X_scaling = sizes ** exponent
    slope, intercept, r_value, p_value, std_err = linregress(X_scaling, means)
    logger.info("pc(infinity) = %.6f, R^2 = %.4f", intercept, r_value ** 2)
    return Extrapolation(pc_inf=float(intercept), slope=float(slope), r_squared=float(r_value ** 2))
