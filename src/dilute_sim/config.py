from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import utils

_MISSING = object()


@dataclass
class SimulationConfig:
    """
    Nested parameter mapping with typed, dotted-key lookups.

    ``config.get_float("simulation.initial_concentration")`` walks
    ``data["simulation"]["initial_concentration"]``.
    """

    data: Dict[str, Any] = field(default_factory=dict)
    source: Optional[str] = None

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "SimulationConfig":
        return cls(data=utils.load_params(path), source=str(path))

    def get(self, key: str, default: Any = _MISSING) -> Any:
        node: Any = self.data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                if default is _MISSING:
                    raise KeyError(f"Missing config key: {key}")
                return default
            node = node[part]
        return node

    def get_float(self, key: str, default: Any = _MISSING) -> float:
        return float(self.get(key, default))

    def get_int(self, key: str, default: Any = _MISSING) -> int:
        value = self.get(key, default)
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"Config key {key} must be an integer, got {value}")
        return int(value)

    def get_bool(self, key: str, default: Any = _MISSING) -> bool:
        value = self.get(key, default)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    # ------------------------------------------------------------- lattice
    @property
    def lattice_size(self) -> int:
        return self.get_int("lattice.size")

    @property
    def n_layers(self) -> int:
        return self.get_int("lattice.layers", self.lattice_size)

    @property
    def periodic(self) -> bool:
        return self.get_bool("lattice.periodic", True)

    @property
    def lattice_volume(self) -> int:
        return self.lattice_size * self.lattice_size * self.n_layers

    @property
    def seed(self) -> Optional[int]:
        value = self.get("simulation.seed", None)
        return None if value is None else int(value)

    @property
    def output_dir(self) -> str:
        return str(self.get("output.directory", "results"))
