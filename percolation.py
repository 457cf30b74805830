import numpy as np

from union_find import WeightedQuickUnionUF

# Possible states a site can be in (bit flags)
CLOSED = 0
OPEN = 1
CONNECTED_TOP = 2
CONNECTED_BOTTOM = 4
CONNECTED_BOTH = CONNECTED_TOP | CONNECTED_BOTTOM


class Percolation:
    """
    n-by-n site percolation model, sites addressed 1..n by (row, col),
    row 1 at the top.

    Top/bottom reachability is kept as a flag set on each union-find root
    instead of two virtual sites, so an open bottom-row site only reports
    full when it is really joined to an open top-row site (no backwash).
    """

    # create a n by n grid with all sites blocked
    def __init__(self, n: int):
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
            raise ValueError("n must be a positive integer")
        if n <= 0:
            raise ValueError("n must be a positive integer")

        self.gridSize = int(n)
        numSites = self.flattenGrid(n + 1, n + 1)

        # state[id] holds OPEN for the site itself and, on roots, the
        # CONNECTED_* flags of the whole component
        self.state = np.full(numSites, CLOSED, dtype=np.uint8)
        self.connections = WeightedQuickUnionUF(numSites)

        self.openSite = 0
        self.hasPercolated = False

    @property
    def grid_size(self) -> int:
        return self.gridSize

    def __repr__(self):
        return (f"Percolation(n={self.gridSize}, open={self.openSite}, "
                f"percolates={self.hasPercolated})")

    # open the site[row, col] if it's not open yet
    def open(self, row: int, col: int):
        self.validState(row, col)
        site = self.flattenGrid(row, col)

        if self.state[site] & OPEN:
            return

        self.state[site] |= OPEN
        if row == 1:
            self.state[site] |= CONNECTED_TOP
        if row == self.gridSize:
            self.state[site] |= CONNECTED_BOTTOM

        # harvest each neighbour root's flags before the union can move the root
        captured = 0
        for nRow, nCol in ((row - 1, col), (row, col - 1), (row, col + 1), (row + 1, col)):
            if self.isOnGrid(nRow, nCol) and self.isOpen(nRow, nCol):
                neighbor = self.connections.find(self.flattenGrid(nRow, nCol))
                captured |= int(self.state[neighbor])
                self.connections.union(site, neighbor)

        newRoot = self.connections.find(site)
        self.state[newRoot] |= captured | int(self.state[site])

        if self.state[newRoot] & CONNECTED_BOTH == CONNECTED_BOTH:
            self.hasPercolated = True

        self.openSite += 1

    open_site = open

    # is site[row, col] open? (0..n accepted, padding reads as closed)
    def isOpen(self, row: int, col: int) -> bool:
        self.validPadded(row, col)
        return bool(self.state[self.flattenGrid(row, col)] & OPEN)

    # is site[row, col] connected to the top row?
    def isFull(self, row: int, col: int) -> bool:
        self.validState(row, col)
        root = self.connections.find(self.flattenGrid(row, col))
        return bool(self.state[root] & CONNECTED_TOP)

    def numberOfOpenSites(self) -> int:
        return self.openSite

    def percolates(self) -> bool:
        return self.hasPercolated

    is_open = isOpen
    is_full = isFull
    number_of_open_sites = numberOfOpenSites

    def open_mask(self) -> np.ndarray:
        """Boolean (n, n) array, True where the site is open."""
        return (self.state[self._grid_ids()] & OPEN).astype(bool)

    def full_mask(self) -> np.ndarray:
        """Boolean (n, n) array, True where the site is connected to the top."""
        ids = self._grid_ids()
        mask = np.zeros(ids.shape, dtype=bool)
        for r, c in zip(*np.nonzero(self.state[ids] & OPEN)):
            root = self.connections.find(int(ids[r, c]))
            mask[r, c] = bool(self.state[root] & CONNECTED_TOP)
        return mask

    def _grid_ids(self):
        idx = np.arange(1, self.gridSize + 1)
        return idx[:, None] * self.gridSize + idx[None, :]

    def validState(self, row: int, col: int):
        if not self.isOnGrid(row, col):
            raise IndexError(f"site ({row}, {col}) is outside 1..{self.gridSize}")

    def validPadded(self, row: int, col: int):
        if not (0 <= row <= self.gridSize and 0 <= col <= self.gridSize):
            raise IndexError(f"site ({row}, {col}) is outside 0..{self.gridSize}")

    def flattenGrid(self, row: int, col: int) -> int:
        return row * self.gridSize + col

    def isOnGrid(self, row: int, col: int) -> bool:
        return 1 <= row <= self.gridSize and 1 <= col <= self.gridSize
