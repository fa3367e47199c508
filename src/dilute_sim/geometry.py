from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
from numba import njit


@njit(cache=True)
def index_to_coords(index: int, size: int, area: int) -> Tuple[int, int, int]:
    """Decode a flat site index into (x, y, z)."""
    z = index // area
    rem = index - z * area
    y = rem // size
    x = rem - y * size
    return x, y, z


@njit(cache=True)
def coords_to_index(x: int, y: int, z: int, size: int, area: int) -> int:
    return x + y * size + z * area


@dataclass(frozen=True)
class LatticeGeometry:
    """Box of ``size x size x layers`` sites addressed by a flat index."""

    size: int
    layers: int
    area: int = field(init=False)
    volume: int = field(init=False)

    def __post_init__(self) -> None:
        if self.size < 1 or self.layers < 1:
            raise ValueError(
                f"Lattice extents must be positive, got size={self.size}, layers={self.layers}"
            )
        object.__setattr__(self, "area", self.size * self.size)
        object.__setattr__(self, "volume", self.size * self.size * self.layers)

    def to_coordinates(self, index: int) -> Tuple[int, int, int]:
        z, rem = divmod(int(index), self.area)
        y, x = divmod(rem, self.size)
        return x, y, z

    def to_index(self, x: int, y: int, z: int) -> int:
        return int(x) + int(y) * self.size + int(z) * self.area

    def coordinates(self, indices) -> np.ndarray:
        """Vectorised decode returning an (N, 3) array of x, y, z columns."""
        idx = np.asarray(indices, dtype=np.int64)
        z = idx // self.area
        rem = idx - z * self.area
        y = rem // self.size
        x = rem - y * self.size
        return np.column_stack((x, y, z))
