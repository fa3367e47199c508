"""
Neighbor tables for the cubic crystal families.

Each crystal type is described by a fixed table of integer offsets. The table
is applied to every site once per lattice instance; the resulting neighbor
lists depend only on geometry, crystal type and boundary mode, never on the
spin state, so they are built once and shared by every later step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

import numpy as np
from numba import njit

from .geometry import LatticeGeometry, coords_to_index, index_to_coords

###############################################################################
# Offset tables
###############################################################################

_AXIS_OFFSETS = [
    [1, 0, 0],
    [-1, 0, 0],
    [0, 1, 0],
    [0, -1, 0],
    [0, 0, 1],
    [0, 0, -1],
]

CRYSTAL_OFFSETS: Dict[str, np.ndarray] = {
    "SC": np.array(_AXIS_OFFSETS, dtype=np.int64),
    "BCC": np.array(_AXIS_OFFSETS + [[1, 1, 1], [-1, -1, -1]], dtype=np.int64),
    "FCC": np.array(
        [
            [1, 0, 0],
            [-1, 0, 0],
            [0, 1, 0],
            [0, -1, 0],
            [1, 1, 0],
            [-1, -1, 0],
            [1, 0, 1],
            [-1, 0, -1],
            [0, 1, 1],
            [0, -1, -1],
            [0, 0, 1],
            [0, 0, -1],
        ],
        dtype=np.int64,
    ),
}

CRYSTAL_TYPES = tuple(CRYSTAL_OFFSETS)


def resolve_crystal_type(crystal_type: str) -> str:
    """Normalise a crystal selector ("sc", "Bcc", ...) to its table key."""
    key = str(crystal_type).strip().upper()
    if key not in CRYSTAL_OFFSETS:
        raise ValueError(
            f"Unknown crystal type: {crystal_type!r} (expected one of {', '.join(CRYSTAL_TYPES)})"
        )
    return key


###############################################################################
# Kernel
###############################################################################


@njit(cache=True)
def _build_neighbor_kernel(offsets, size, layers, periodic):
    """
    Fill a padded (volume, n_offsets) table of neighbor indices.

    Open boundaries drop out-of-range candidates, so rows are left-packed and
    padded with -1; ``counts`` holds the number of valid entries per row.
    """
    area = size * size
    volume = area * layers
    n_off = offsets.shape[0]
    table = np.full((volume, n_off), -1, dtype=np.int64)
    counts = np.zeros(volume, dtype=np.int64)

    for index in range(volume):
        x, y, z = index_to_coords(index, size, area)
        k = 0
        for o in range(n_off):
            nx = x + offsets[o, 0]
            ny = y + offsets[o, 1]
            nz = z + offsets[o, 2]
            if periodic:
                nx = nx % size
                ny = ny % size
                nz = nz % layers
            elif nx < 0 or nx >= size or ny < 0 or ny >= size or nz < 0 or nz >= layers:
                continue
            table[index, k] = coords_to_index(nx, ny, nz, size, area)
            k += 1
        counts[index] = k

    return table, counts


###############################################################################
# Table container
###############################################################################


@dataclass(frozen=True)
class NeighborTable:
    crystal_type: str
    periodic: bool
    table: np.ndarray
    counts: np.ndarray

    def neighbors(self, index: int) -> np.ndarray:
        """Ordered neighbor indices of one site (offset-table order)."""
        return self.table[index, : self.counts[index]]

    @property
    def coordination(self) -> np.ndarray:
        return self.counts

    @property
    def total_links(self) -> int:
        return int(self.counts.sum())


def build_neighbor_table(
    crystal_type: str, geometry: LatticeGeometry, periodic: bool
) -> NeighborTable:
    key = resolve_crystal_type(crystal_type)
    table, counts = _build_neighbor_kernel(
        CRYSTAL_OFFSETS[key], geometry.size, geometry.layers, bool(periodic)
    )
    # shared read-only across every configuration of the lattice
    table.setflags(write=False)
    counts.setflags(write=False)
    return NeighborTable(crystal_type=key, periodic=bool(periodic), table=table, counts=counts)
