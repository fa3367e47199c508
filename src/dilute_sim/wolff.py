"""
Single-cluster (Wolff) Monte-Carlo updates on a diluted Ising lattice.

Coupling is fixed at J = 1, so a same-sign bond joins the cluster with
probability ``p = 1 - exp(-2 / T)``.
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit

from .spin_field import SpinField
from .topology import NeighborTable


@njit
def grow_wolff_cluster(spins, table, counts, seed_site, p_add, rng):
    """
    Breadth-first growth from ``seed_site`` through same-sign neighbors.

    Each unmarked same-sign neighbor of a cluster site gets exactly one
    Bernoulli(p_add) trial. ``rng`` is a numpy Generator; only its
    ``random()`` method is used inside the kernel.
    """
    volume = spins.shape[0]
    in_cluster = np.zeros(volume, dtype=np.bool_)
    cluster = np.empty(volume, dtype=np.int64)
    sign = spins[seed_site]

    cluster[0] = seed_site
    in_cluster[seed_site] = True
    n_members = 1
    head = 0

    while head < n_members:
        current = cluster[head]
        head += 1
        for m in range(counts[current]):
            nb = table[current, m]
            if not in_cluster[nb] and spins[nb] == sign and rng.random() < p_add:
                in_cluster[nb] = True
                cluster[n_members] = nb
                n_members += 1

    return cluster[:n_members].copy()


def bond_probability(temperature: float) -> float:
    if temperature <= 0:
        raise ValueError(f"Temperature must be positive, got {temperature}")
    return 1.0 - math.exp(-2.0 / temperature)


class WolffUpdater:
    """Grows and flips one cluster per step; occupancy is never touched."""

    def __init__(
        self, spin_field: SpinField, neighbors: NeighborTable, rng: np.random.Generator
    ) -> None:
        self.spin_field = spin_field
        self.neighbors = neighbors
        self.rng = rng

    def step(self, temperature: float) -> np.ndarray:
        """Perform one Wolff update and return the flipped sites."""
        p_add = bond_probability(temperature)
        magnetic = self.spin_field.magnetic_indices
        if magnetic.size == 0:
            return np.empty(0, dtype=np.int64)

        seed_site = int(magnetic[self.rng.integers(magnetic.size)])
        cluster = grow_wolff_cluster(
            self.spin_field.spins,
            self.neighbors.table,
            self.neighbors.counts,
            seed_site,
            p_add,
            self.rng,
        )
        self.spin_field.flip(cluster)
        return cluster

    def relax(self, temperature: float, n_steps: int) -> np.ndarray:
        """Run ``n_steps`` updates and return the magnetization after each one."""
        if n_steps < 0:
            raise ValueError(f"Number of steps must be non-negative, got {n_steps}")
        series = np.empty(n_steps, dtype=np.float64)
        for i in range(n_steps):
            self.step(temperature)
            series[i] = self.spin_field.magnetization()
        return series
