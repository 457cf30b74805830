"""
Tests for the weighted quick-union-find and its numba kernels.
"""

import numpy as np
import pytest

from union_find import WeightedQuickUnionUF, find_root, union_by_size


class TestWeightedQuickUnionUF:
    """Object-level union-find used by Percolation."""

    def setup_method(self):
        self.uf = WeightedQuickUnionUF(10)

    def test_initial_singletons(self):
        assert self.uf.get_count() == 10
        assert len(self.uf) == 10
        for p in range(10):
            assert self.uf.find(p) == p

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError, match="n must be > 0"):
            WeightedQuickUnionUF(0)

    def test_union_and_connected(self):
        self.uf.union(1, 2)
        self.uf.union(3, 4)
        assert self.uf.connected(1, 2)
        assert not self.uf.connected(2, 3)
        self.uf.union(2, 4)
        assert self.uf.connected(1, 3)
        assert self.uf.get_count() == 7

    def test_union_same_component_is_noop(self):
        self.uf.union(0, 1)
        root = self.uf.union(1, 0)
        assert root == self.uf.find(0)
        assert self.uf.get_count() == 9

    def test_union_by_size_keeps_larger_root(self):
        self.uf.union(0, 1)
        self.uf.union(0, 2)
        big_root = self.uf.find(0)
        assert self.uf.union(5, 0) == big_root
        assert self.uf.size[big_root] == 4

    def test_path_compression(self):
        for p in range(1, 10):
            self.uf.union(p - 1, p)
        root = self.uf.find(9)
        assert self.uf.parent[9] == root
        assert all(self.uf.find(p) == root for p in range(10))

    def test_out_of_range_index(self):
        with pytest.raises(IndexError):
            self.uf.find(10)
        with pytest.raises(IndexError):
            self.uf.union(-1, 3)


class TestNumbaKernels:
    """Flat-array kernels used by the compiled trial loop."""

    def test_find_and_union(self):
        parent = np.arange(6, dtype=np.int64)
        size = np.ones(6, dtype=np.int64)
        r = union_by_size(parent, size, 0, 1)
        assert find_root(parent, 1) == r
        r2 = union_by_size(parent, size, 2, 1)
        assert r2 == r
        assert size[r] == 3
        assert find_root(parent, 3) == 3
