"""
Diluted cubic Ising lattice.

Ties together the pieces a Monte-Carlo run needs:
1.  **Geometry:** flat index <-> (x, y, z) on an L x L x layers box.
2.  **Neighbor table:** built once from the crystal type (SC, BCC, FCC) and
    boundary mode, reused by every configuration.
3.  **Spin field:** -1/0/+1 spins with tracked occupancy, diluted at random.
4.  **Cluster census:** same-sign union-find clusters plus percolation tags.
5.  **Wolff updates:** single-cluster spin dynamics on the same topology.

All randomness comes from one ``numpy.random.Generator`` owned by the
instance, so seeded runs are reproducible and independent lattices never
share a stream.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .clusters import ClusterCensus, ClusterFinder
from .geometry import LatticeGeometry
from .spin_field import SpinField
from .topology import build_neighbor_table, resolve_crystal_type
from .wolff import WolffUpdater
from . import utils


class Lattice:
    def __init__(
        self,
        crystal_type: str,
        size: int,
        layers: Optional[int] = None,
        *,
        periodic: bool = True,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.crystal_type = resolve_crystal_type(crystal_type)
        self.periodic = bool(periodic)
        self.geometry = LatticeGeometry(int(size), int(size if layers is None else layers))
        self.rng = rng if rng is not None else utils.make_rng(seed)

        # Expensive, spin-independent: built exactly once per instance
        self.neighbor_table = build_neighbor_table(
            self.crystal_type, self.geometry, self.periodic
        )

        self.field = SpinField(self.geometry.volume, self.rng)
        self.cluster_finder = ClusterFinder(self.geometry, self.neighbor_table)
        self.wolff = WolffUpdater(self.field, self.neighbor_table, self.rng)

    # ------------------------------------------------------------------ state
    @property
    def spins(self) -> np.ndarray:
        return self.field.spins

    @property
    def magnetic_indices(self) -> np.ndarray:
        return self.field.magnetic_indices

    @property
    def volume(self) -> int:
        return self.geometry.volume

    def neighbors(self, index: int) -> np.ndarray:
        return self.neighbor_table.neighbors(index)

    # ------------------------------------------------------------------ public
    def initialize(self) -> None:
        """Fresh fully-occupied field with random +/-1 orientations."""
        self.field.initialize()

    def dilute(self, non_magnetic_count: int) -> int:
        return self.field.dilute(non_magnetic_count)

    def find_clusters(self) -> ClusterCensus:
        return self.cluster_finder.find_clusters(self.field)

    def is_percolating(self, cluster) -> bool:
        return self.cluster_finder.is_percolating(cluster)

    def spanning_axes(self, cluster) -> Tuple[bool, bool, bool]:
        return self.cluster_finder.spanning_axes(cluster)

    def wolff_step(self, temperature: float) -> np.ndarray:
        return self.wolff.step(temperature)

    def __repr__(self) -> str:
        boundary = "periodic" if self.periodic else "open"
        return (
            f"Lattice({self.crystal_type}, size={self.geometry.size}, "
            f"layers={self.geometry.layers}, {boundary})"
        )


__all__ = ["Lattice"]
