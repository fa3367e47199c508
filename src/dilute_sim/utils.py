# src/dilute_sim/utils.py
from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore

SWEEP_COLUMNS = (
    "concentration",
    "mean_cluster_count",
    "mean_cluster_size",
    "percolation_probability",
)


@dataclass
class SweepResult:
    """Common container for concentration-sweep outputs."""

    concentration: np.ndarray
    mean_cluster_count: np.ndarray
    mean_cluster_size: np.ndarray
    percolation_probability: np.ndarray
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_points(cls, points: Sequence[Any], meta: Optional[Dict[str, Any]] = None):
        columns = {
            name: np.array([getattr(p, name) for p in points], dtype=np.float64)
            for name in SWEEP_COLUMNS
        }
        return cls(**columns, meta=dict(meta or {}))


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Independent random stream; a fixed seed makes the run reproducible."""
    return np.random.default_rng(seed)


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def write_sweep_tsv(path: str | os.PathLike[str], result: SweepResult) -> None:
    """One line per point: concentration, mean cluster count, mean cluster size."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    rows = np.column_stack(
        (result.concentration, result.mean_cluster_count, result.mean_cluster_size)
    )
    np.savetxt(path, rows, delimiter="\t", fmt="%.10g")


def save_sweep_result(
    path: str | os.PathLike[str], result: SweepResult, *, overwrite: bool = True
) -> None:
    """Serialize a SweepResult to a compressed .npz archive."""
    out_dir = Path(path).parent
    out_dir.mkdir(parents=True, exist_ok=True)
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    out: Dict[str, Any] = {name: getattr(result, name) for name in SWEEP_COLUMNS}
    out["meta"] = np.array(result.meta, dtype=object)
    np.savez_compressed(path, **out)


def load_sweep_result(path: str | os.PathLike[str]) -> SweepResult:
    data = np.load(path, allow_pickle=True)
    meta: Dict[str, Any] = {}
    if "meta" in data:
        meta_raw = data["meta"]
        try:
            meta = meta_raw.item()
        except ValueError:
            meta = {}
    columns = {name: data[name].astype(np.float64) for name in SWEEP_COLUMNS}
    return SweepResult(**columns, meta=meta)


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load simulation parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")
