from __future__ import annotations

import numpy as np


class SpinField:
    """
    Occupancy-tracked Ising spin array.

    ``spins`` holds -1/0/+1 per site (0 marks a diluted, non-magnetic site)
    and ``magnetic_indices`` lists every site with a non-zero spin. Both are
    only changed through the methods below, which keep them in sync.
    """

    def __init__(self, volume: int, rng: np.random.Generator) -> None:
        if volume < 1:
            raise ValueError(f"Spin field needs at least one site, got {volume}")
        self.volume = int(volume)
        self.rng = rng
        self._spins = np.zeros(self.volume, dtype=np.int8)
        self._magnetic = np.empty(0, dtype=np.int64)

    # ------------------------------------------------------------------ views
    @property
    def spins(self) -> np.ndarray:
        view = self._spins.view()
        view.setflags(write=False)
        return view

    @property
    def magnetic_indices(self) -> np.ndarray:
        view = self._magnetic.view()
        view.setflags(write=False)
        return view

    @property
    def occupancy(self) -> int:
        return int(self._magnetic.size)

    @property
    def concentration(self) -> float:
        return self.occupancy / self.volume

    def magnetization(self) -> float:
        """Mean spin over magnetic sites (0.0 for an empty field)."""
        if self._magnetic.size == 0:
            return 0.0
        return float(self._spins[self._magnetic].mean())

    # --------------------------------------------------------------- mutators
    def initialize(self) -> None:
        """Fully occupied field with independent fair-coin orientations."""
        up = self.rng.random(self.volume) < 0.5
        self._spins = np.where(up, 1, -1).astype(np.int8)
        self._magnetic = np.arange(self.volume, dtype=np.int64)

    def dilute(self, non_magnetic_count: int) -> int:
        """
        Zero ``non_magnetic_count`` distinct magnetic sites chosen uniformly.

        Stops early when the field runs out of magnetic sites. Returns the
        number of sites actually removed.

        All sites are drawn in one ``rng.choice(..., replace=False)`` call.
        This has the same distribution as repeated single draws with removal,
        but a given seed yields a different sequence than such a loop would.
        """
        count = int(non_magnetic_count)
        if count < 0:
            raise ValueError(f"Dilution count must be non-negative, got {count}")
        if count == 0:
            return 0

        self._resync()
        count = min(count, self._magnetic.size)
        if count == 0:
            return 0

        chosen = self.rng.choice(self._magnetic.size, size=count, replace=False)
        self._spins[self._magnetic[chosen]] = 0
        self._magnetic = np.delete(self._magnetic, chosen)
        return count

    def assign(self, values) -> None:
        """Replace every spin at once and rebuild occupancy from the result."""
        arr = np.asarray(values)
        if arr.shape != (self.volume,):
            raise ValueError(f"Expected {self.volume} spins, got shape {arr.shape}")
        if not np.isin(arr, (-1, 0, 1)).all():
            raise ValueError("Spin values must be -1, 0 or +1")
        self._spins = arr.astype(np.int8)
        self._resync()

    def flip(self, sites) -> None:
        """Reverse the orientation of already-magnetic sites."""
        sites = np.asarray(sites, dtype=np.int64)
        assert np.all(self._spins[sites] != 0), "cannot flip a non-magnetic site"
        self._spins[sites] *= -1

    def _resync(self) -> None:
        self._magnetic = np.flatnonzero(self._spins).astype(np.int64)
