"""
Tests for the union-find cluster census and the percolation criteria.
"""

import numpy as np
import pytest

from dilute_sim import Lattice
from dilute_sim.clusters import find_root, spanning_kernel, union_by_rank


def _checkerboard(lattice):
    coords = lattice.geometry.coordinates(np.arange(lattice.volume))
    return np.where(coords.sum(axis=1) % 2 == 0, 1, -1)


def _assert_partition(lattice, census):
    members = np.concatenate(census.all) if census.all else np.empty(0, dtype=np.int64)
    assert members.size == np.unique(members).size, "a site appears in two clusters"
    np.testing.assert_array_equal(np.sort(members), np.sort(lattice.magnetic_indices))
    assert len(census.all) == len(census.up) + len(census.down)


def test_union_by_rank_and_path_halving():
    parent = np.arange(4, dtype=np.int64)
    rank = np.ones(4, dtype=np.int64)

    union_by_rank(parent, rank, 0, 1)
    assert parent[1] == 0 and rank[0] == 2

    # lower-rank root goes under the higher-rank one
    union_by_rank(parent, rank, 2, 1)
    assert parent[2] == 0 and rank[0] == 2

    parent = np.array([0, 0, 1, 2, 3], dtype=np.int64)
    assert find_root(parent, 4) == 0
    # halving shortened the chain from node 4
    assert parent[4] == 2


@pytest.mark.parametrize("periodic", [True, False])
def test_fully_up_simple_cubic_is_one_spanning_cluster(periodic):
    lattice = Lattice("SC", 3, periodic=periodic, seed=0)
    lattice.field.assign(np.ones(lattice.volume, dtype=np.int8))

    census = lattice.find_clusters()
    assert len(census.all) == 1
    assert census.all[0].size == 27
    assert len(census.up) == 1 and len(census.down) == 0
    assert len(census.percolating) == 1
    assert lattice.spanning_axes(census.all[0]) == (True, True, True)
    _assert_partition(lattice, census)


def test_checkerboard_has_only_isolated_sites():
    lattice = Lattice("SC", 4, seed=0)
    lattice.field.assign(_checkerboard(lattice))

    census = lattice.find_clusters()
    assert len(census.all) == lattice.volume
    assert np.all(census.sizes() == 1)
    assert len(census.up) == len(census.down) == lattice.volume // 2
    assert census.percolating == []


def test_checkerboard_connects_along_fcc_face_diagonals():
    """Face diagonals join same-sign checkerboard sites into two sublattices."""
    lattice = Lattice("FCC", 4, seed=0)
    lattice.field.assign(_checkerboard(lattice))

    census = lattice.find_clusters()
    assert len(census.all) == 2
    assert sorted(census.sizes()) == [32, 32]
    _assert_partition(lattice, census)


@pytest.mark.parametrize("crystal_type", ["SC", "BCC", "FCC"])
@pytest.mark.parametrize("periodic", [True, False])
def test_census_partitions_diluted_lattice(crystal_type, periodic):
    lattice = Lattice(crystal_type, 6, 4, periodic=periodic, seed=123)
    lattice.initialize()
    lattice.dilute(60)

    census = lattice.find_clusters()
    _assert_partition(lattice, census)
    spins = lattice.spins
    for cluster in census.up:
        assert np.all(spins[cluster] == 1)
    for cluster in census.down:
        assert np.all(spins[cluster] == -1)
    all_ids = {tuple(c) for c in census.all}
    assert all(tuple(c) in all_ids for c in census.percolating)


def test_empty_field_has_no_clusters():
    lattice = Lattice("BCC", 3, seed=0)
    lattice.initialize()
    lattice.dilute(lattice.volume)
    census = lattice.find_clusters()
    all_, up, down, percolating = census
    assert all_ == up == down == percolating == []
    assert census.mean_size() == 0.0
    assert census.largest().size == 0


def test_clusters_are_connected_same_sign_components():
    lattice = Lattice("SC", 5, seed=9)
    lattice.initialize()
    lattice.dilute(40)
    spins = lattice.spins

    for cluster in lattice.find_clusters().all:
        members = set(cluster.tolist())
        start = cluster[0]
        seen = {start}
        frontier = [start]
        while frontier:
            site = frontier.pop()
            for nb in lattice.neighbors(site):
                nb = int(nb)
                if spins[nb] == spins[start] and nb not in seen:
                    seen.add(nb)
                    frontier.append(nb)
        assert seen == members


def test_short_clusters_are_rejected():
    lattice = Lattice("SC", 4, periodic=False, seed=0)
    geom = lattice.geometry
    # touches both x faces but has fewer sites than the box is wide
    pair = [geom.to_index(0, 0, 0), geom.to_index(3, 0, 0)]
    assert not lattice.is_percolating(pair)


def test_open_spanning_uses_faces_touched_by_any_member():
    lattice = Lattice("SC", 4, periodic=False, seed=0)
    geom = lattice.geometry
    members = [
        geom.to_index(0, 0, 0),
        geom.to_index(0, 1, 0),
        geom.to_index(0, 2, 0),
        geom.to_index(3, 0, 0),
    ]
    assert lattice.is_percolating(members)
    assert lattice.spanning_axes(members) == (True, False, False)


def test_periodic_spanning_counts_distinct_coordinates():
    geom_size, layers = 4, 4
    lattice = Lattice("SC", geom_size, layers, periodic=True, seed=0)
    geom = lattice.geometry

    faces_only = [
        geom.to_index(0, 0, 0),
        geom.to_index(0, 1, 0),
        geom.to_index(0, 2, 0),
        geom.to_index(3, 0, 0),
    ]
    assert not lattice.is_percolating(faces_only)

    row = [geom.to_index(x, 1, 2) for x in range(geom_size)]
    assert lattice.is_percolating(row)
    assert lattice.spanning_axes(row) == (True, False, False)


def test_slab_uses_layer_count_for_z():
    lattice = Lattice("SC", 5, 2, periodic=True, seed=0)
    geom = lattice.geometry
    column = [geom.to_index(2, 2, z) for z in range(2)]
    assert lattice.spanning_axes(column) == (False, False, True)

    spans = spanning_kernel(np.array(column, dtype=np.int64), 5, 2, False, True)
    assert spans[2]


def test_seeded_partitions_are_reproducible():
    censuses = []
    for _ in range(2):
        lattice = Lattice("FCC", 5, periodic=False, seed=2024)
        lattice.initialize()
        lattice.dilute(50)
        censuses.append(lattice.find_clusters())
    a, b = censuses
    assert len(a.all) == len(b.all)
    for ca, cb in zip(a.all, b.all):
        np.testing.assert_array_equal(ca, cb)
