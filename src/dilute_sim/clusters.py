"""
Same-sign cluster census for diluted Ising lattices.

Magnetic sites are remapped to a dense local range before the union-find
runs, so ``parent``/``rank`` only ever cover active sites. Non-magnetic sites
map to -1 and never take part in a union.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
from numba import njit

from .geometry import LatticeGeometry, index_to_coords
from .spin_field import SpinField
from .topology import NeighborTable

###############################################################################
# Union-find kernels
###############################################################################


@njit(cache=True)
def find_root(parent, node):
    """Root lookup with path halving."""
    while parent[node] != node:
        parent[node] = parent[parent[node]]
        node = parent[node]
    return node


@njit(cache=True)
def union_by_rank(parent, rank, a, b):
    """
    Merge the sets holding ``a`` and ``b``.
    The lower-rank root goes under the higher one; on a tie b's root goes
    under a's root and a's rank grows.
    """
    root_a = find_root(parent, a)
    root_b = find_root(parent, b)
    if root_a == root_b:
        return
    if rank[root_a] < rank[root_b]:
        parent[root_a] = root_b
    else:
        parent[root_b] = root_a
        if rank[root_a] == rank[root_b]:
            rank[root_a] += 1


@njit(cache=True)
def label_same_sign_clusters(spins, magnetic, table, counts):
    """
    Union every pair of same-sign neighboring magnetic sites.

    Returns the root (as a local index into ``magnetic``) of every magnetic
    site.
    """
    n_active = magnetic.shape[0]
    local = np.full(spins.shape[0], -1, dtype=np.int64)
    for k in range(n_active):
        local[magnetic[k]] = k

    parent = np.arange(n_active, dtype=np.int64)
    rank = np.ones(n_active, dtype=np.int64)

    for k in range(n_active):
        site = magnetic[k]
        sign = spins[site]
        for m in range(counts[site]):
            nb = table[site, m]
            if spins[nb] == sign:
                union_by_rank(parent, rank, k, local[nb])

    roots = np.empty(n_active, dtype=np.int64)
    for k in range(n_active):
        roots[k] = find_root(parent, k)
    return roots


###############################################################################
# Percolation kernel
###############################################################################


@njit(cache=True)
def spanning_kernel(members, size, layers, periodic, stop_early):
    """
    Per-axis spanning flags for one cluster.

    Open boundaries: an axis spans once both of its faces have been touched
    by some member. Periodic boundaries: an axis spans once the cluster has
    visited every coordinate value along it.
    """
    spans = np.zeros(3, dtype=np.bool_)
    if members.shape[0] < min(size, layers):
        return spans

    area = size * size
    seen_x = np.zeros(size, dtype=np.bool_)
    seen_y = np.zeros(size, dtype=np.bool_)
    seen_z = np.zeros(layers, dtype=np.bool_)
    distinct = np.zeros(3, dtype=np.int64)
    low = np.zeros(3, dtype=np.bool_)
    high = np.zeros(3, dtype=np.bool_)

    for k in range(members.shape[0]):
        x, y, z = index_to_coords(members[k], size, area)
        if not seen_x[x]:
            seen_x[x] = True
            distinct[0] += 1
        if not seen_y[y]:
            seen_y[y] = True
            distinct[1] += 1
        if not seen_z[z]:
            seen_z[z] = True
            distinct[2] += 1

        if periodic:
            spans[0] = distinct[0] == size
            spans[1] = distinct[1] == size
            spans[2] = distinct[2] == layers
        else:
            if x == 0:
                low[0] = True
            if x == size - 1:
                high[0] = True
            if y == 0:
                low[1] = True
            if y == size - 1:
                high[1] = True
            if z == 0:
                low[2] = True
            if z == layers - 1:
                high[2] = True
            for axis in range(3):
                spans[axis] = low[axis] and high[axis]

        if stop_early and (spans[0] or spans[1] or spans[2]):
            return spans

    return spans


###############################################################################
# Census
###############################################################################


@dataclass
class ClusterCensus:
    """Four views over one partition of the magnetic sites."""

    all: List[np.ndarray] = field(default_factory=list)
    up: List[np.ndarray] = field(default_factory=list)
    down: List[np.ndarray] = field(default_factory=list)
    percolating: List[np.ndarray] = field(default_factory=list)

    def __iter__(self):
        return iter((self.all, self.up, self.down, self.percolating))

    def sizes(self) -> np.ndarray:
        return np.array([c.size for c in self.all], dtype=np.int64)

    def largest(self) -> np.ndarray:
        if not self.all:
            return np.empty(0, dtype=np.int64)
        return max(self.all, key=len)

    def mean_size(self) -> float:
        if not self.all:
            return 0.0
        return float(self.sizes().mean())


class ClusterFinder:
    """Partitions magnetic sites into same-sign clusters and tags spanning ones."""

    def __init__(
        self, geometry: LatticeGeometry, neighbors: NeighborTable
    ) -> None:
        self.geometry = geometry
        self.neighbors = neighbors
        self.periodic = neighbors.periodic

    def find_clusters(self, spin_field: SpinField) -> ClusterCensus:
        spins = spin_field.spins
        magnetic = spin_field.magnetic_indices
        census = ClusterCensus()
        if magnetic.size == 0:
            return census

        roots = label_same_sign_clusters(
            spins, magnetic, self.neighbors.table, self.neighbors.counts
        )
        _, labels = np.unique(roots, return_inverse=True)
        labels = labels.reshape(-1)
        order = np.argsort(labels, kind="stable")
        bounds = np.cumsum(np.bincount(labels))[:-1]
        census.all = np.split(magnetic[order], bounds)

        for cluster in census.all:
            signs = spins[cluster]
            assert np.all(signs == signs[0]), "cluster mixes spin orientations"
            if signs[0] == 1:
                census.up.append(cluster)
            else:
                census.down.append(cluster)
            if self.is_percolating(cluster):
                census.percolating.append(cluster)

        return census

    def spanning_axes(self, cluster) -> Tuple[bool, bool, bool]:
        members = np.asarray(cluster, dtype=np.int64)
        spans = spanning_kernel(
            members, self.geometry.size, self.geometry.layers, self.periodic, False
        )
        return bool(spans[0]), bool(spans[1]), bool(spans[2])

    def is_percolating(self, cluster) -> bool:
        members = np.asarray(cluster, dtype=np.int64)
        spans = spanning_kernel(
            members, self.geometry.size, self.geometry.layers, self.periodic, True
        )
        return bool(spans.any())
