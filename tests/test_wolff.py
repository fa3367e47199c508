"""
Tests for single-cluster Wolff updates.
"""

import numpy as np
import pytest

from dilute_sim import Lattice
from dilute_sim.wolff import bond_probability


def _connected(lattice, sites):
    """True if ``sites`` form one connected subgraph of the neighbor table."""
    members = set(int(s) for s in sites)
    start = next(iter(members))
    seen = {start}
    frontier = [start]
    while frontier:
        site = frontier.pop()
        for nb in lattice.neighbors(site):
            nb = int(nb)
            if nb in members and nb not in seen:
                seen.add(nb)
                frontier.append(nb)
    return seen == members


def test_bond_probability():
    assert bond_probability(2.0) == pytest.approx(1.0 - np.exp(-1.0))
    with pytest.raises(ValueError):
        bond_probability(0.0)
    with pytest.raises(ValueError):
        bond_probability(-1.0)


def test_cold_step_flips_whole_same_sign_lattice():
    lattice = Lattice("SC", 3, seed=1)
    lattice.field.assign(np.ones(lattice.volume, dtype=np.int8))

    flipped = lattice.wolff_step(1e-3)
    assert flipped.size == 27
    assert np.all(lattice.spins == -1)


def test_hot_step_flips_single_site():
    lattice = Lattice("BCC", 4, seed=5)
    lattice.field.assign(np.ones(lattice.volume, dtype=np.int8))

    flipped = lattice.wolff_step(1e6)
    assert flipped.size == 1
    assert lattice.spins[flipped[0]] == -1
    assert np.count_nonzero(lattice.spins == -1) == 1


@pytest.mark.parametrize("crystal_type", ["SC", "BCC", "FCC"])
def test_step_preserves_occupancy_and_flips_connected_cluster(crystal_type):
    lattice = Lattice(crystal_type, 5, periodic=False, seed=77)
    lattice.initialize()
    lattice.dilute(30)

    for _ in range(20):
        before = lattice.spins.copy()
        occupancy = lattice.field.occupancy
        magnetic = lattice.magnetic_indices.copy()

        flipped = lattice.wolff_step(2.5)
        after = lattice.spins

        assert lattice.field.occupancy == occupancy
        np.testing.assert_array_equal(lattice.magnetic_indices, magnetic)
        np.testing.assert_array_equal(np.abs(after), np.abs(before))

        changed = np.flatnonzero(after != before)
        np.testing.assert_array_equal(np.sort(flipped), changed)
        assert np.unique(before[flipped]).size == 1
        assert _connected(lattice, flipped)


def test_step_on_empty_field_is_a_no_op():
    lattice = Lattice("SC", 3, seed=0)
    lattice.initialize()
    lattice.dilute(lattice.volume)
    flipped = lattice.wolff_step(1.0)
    assert flipped.size == 0
    assert np.all(lattice.spins == 0)


def test_step_rejects_non_positive_temperature():
    lattice = Lattice("SC", 3, seed=0)
    lattice.initialize()
    with pytest.raises(ValueError):
        lattice.wolff_step(0.0)


def test_seeded_trajectories_are_reproducible():
    spins = []
    for _ in range(2):
        lattice = Lattice("FCC", 4, seed=31)
        lattice.initialize()
        lattice.dilute(12)
        for _ in range(15):
            lattice.wolff_step(3.0)
        spins.append(lattice.spins.copy())
    np.testing.assert_array_equal(spins[0], spins[1])


def test_relax_orders_a_cold_lattice():
    lattice = Lattice("SC", 6, seed=4)
    lattice.initialize()
    series = lattice.wolff.relax(0.2, 100)
    assert series.shape == (100,)
    # far below the ordering temperature the field ends up fully aligned
    assert abs(series[-1]) == pytest.approx(1.0)
