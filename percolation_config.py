"""
Default parameters for the percolation threshold simulations.
"""

# =============================================================================
# Monte Carlo driver
# =============================================================================
SIMULATION = {
    "trials": 500,                 # default trials per grid size
    "confidence_z": 1.96,          # z-value of the 95% confidence interval
    "engine": "python",            # "python" (Percolation objects) or "numba"
    "random_seed": None,           # None -> fresh OS entropy
    "numba_cache_dir": ".numba_cache",
}

ENGINES = ("python", "numba")

# =============================================================================
# Finite-size scaling
# =============================================================================
SCALING = {
    "exponent": -3 / 4,            # pc(L) - pc(inf) ~ L^(-1/nu), nu = 4/3 in 2D
    "min_sizes": 2,                # points needed for the linear fit
}
