"""
Diluted Magnet Cluster Library - Production Core Models

This package simulates site-diluted Ising ferromagnets on cubic lattices:
- Lattice: SC / BCC / FCC lattice with open or periodic boundaries
- ClusterFinder: union-find census of same-sign clusters and percolation
- WolffUpdater: single-cluster Monte-Carlo spin dynamics
"""

from .lattice import Lattice
from .geometry import LatticeGeometry
from .topology import CRYSTAL_TYPES, NeighborTable, build_neighbor_table
from .spin_field import SpinField
from .clusters import ClusterCensus, ClusterFinder
from .wolff import WolffUpdater
from .config import SimulationConfig
from .sweep import SweepPoint, concentration_grid, run_sweep, sweep_from_config
from . import utils

__all__ = [
    # Lattice model
    "Lattice",
    "LatticeGeometry",
    "CRYSTAL_TYPES",
    "NeighborTable",
    "build_neighbor_table",
    "SpinField",
    # Algorithms
    "ClusterCensus",
    "ClusterFinder",
    "WolffUpdater",
    # Sweeps and configuration
    "SimulationConfig",
    "SweepPoint",
    "concentration_grid",
    "run_sweep",
    "sweep_from_config",
    # Utilities
    "utils",
]
