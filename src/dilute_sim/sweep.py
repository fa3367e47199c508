from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .config import SimulationConfig
from .lattice import Lattice
from . import utils

CONCENTRATION_TOLERANCE = 1e-3


@dataclass
class SweepPoint:
    concentration: float
    mean_cluster_count: float
    mean_cluster_size: float
    percolation_probability: float


def concentration_grid(initial: float, final: float, step: float) -> np.ndarray:
    """Concentrations ``initial + k*step`` up to ``final`` (with a small tolerance)."""
    if step <= 0:
        raise ValueError(f"Concentration step must be positive, got {step}")
    if final + CONCENTRATION_TOLERANCE < initial:
        return np.empty(0, dtype=np.float64)
    n_points = int(math.floor((final + CONCENTRATION_TOLERANCE - initial) / step)) + 1
    return initial + step * np.arange(n_points, dtype=np.float64)


def non_magnetic_count(concentration: float, volume: int) -> int:
    # rounding first keeps (1 - 0.3) * 1000 from landing on 701
    count = math.ceil(round((1.0 - concentration) * volume, 9))
    return min(max(count, 0), volume)


def run_sweep(
    lattice: Lattice,
    concentrations: Sequence[float],
    num_configurations: int,
    *,
    verbose: bool = True,
) -> List[SweepPoint]:
    """
    Average cluster statistics over random dilutions at each concentration.
    """
    if num_configurations < 1:
        raise ValueError(
            f"Number of configurations must be at least 1, got {num_configurations}"
        )
    progress_step = max(1, num_configurations // 100)
    points: List[SweepPoint] = []

    for concentration in concentrations:
        removed = non_magnetic_count(concentration, lattice.volume)
        total_clusters = 0
        total_cluster_size = 0
        percolating_configs = 0

        for configuration in range(num_configurations):
            if verbose and (
                configuration % progress_step == 0
                or configuration == num_configurations - 1
            ):
                percent = (configuration * 100) // max(1, num_configurations - 1)
                print(
                    f"\rConcentration: {concentration:.4g} | Completed: {percent}%   ",
                    end="",
                    flush=True,
                )

            lattice.initialize()
            lattice.dilute(removed)
            census = lattice.find_clusters()

            total_clusters += len(census.all)
            total_cluster_size += int(census.sizes().sum())
            if census.percolating:
                percolating_configs += 1

        points.append(
            SweepPoint(
                concentration=float(concentration),
                mean_cluster_count=total_clusters / num_configurations,
                mean_cluster_size=total_cluster_size / total_clusters if total_clusters else 0.0,
                percolation_probability=percolating_configs / num_configurations,
            )
        )

    if verbose:
        print()
    return points


def sweep_from_config(
    crystal_type: str,
    config: SimulationConfig,
    *,
    seed: Optional[int] = None,
    verbose: bool = True,
) -> utils.SweepResult:
    """Build a lattice from ``config`` and run the configured sweep."""
    seed = config.seed if seed is None else seed
    lattice = Lattice(
        crystal_type,
        config.lattice_size,
        config.n_layers,
        periodic=config.periodic,
        seed=seed,
    )
    concentrations = concentration_grid(
        config.get_float("simulation.initial_concentration"),
        config.get_float("simulation.final_concentration"),
        config.get_float("simulation.concentration_step"),
    )
    num_configurations = config.get_int("simulation.num_configurations")

    if verbose:
        print(f"Lattice type is {lattice.crystal_type}")
    start_time = time.time()
    points = run_sweep(lattice, concentrations, num_configurations, verbose=verbose)

    meta = {
        "crystal_type": lattice.crystal_type,
        "size": lattice.geometry.size,
        "layers": lattice.geometry.layers,
        "periodic": lattice.periodic,
        "num_configurations": num_configurations,
        "seed": seed,
        "time_elapsed": time.time() - start_time,
    }
    return utils.SweepResult.from_points(points, meta=meta)
