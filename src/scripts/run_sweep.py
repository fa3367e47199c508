#!/usr/bin/env python3
"""
Concentration Sweep Runner

Dilutes SC / BCC / FCC lattices over a range of magnetic concentrations and
records the average number and size of same-sign clusters per configuration.
Writes one tab-separated file per crystal type plus a .npz archive.
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.dilute_sim import CRYSTAL_TYPES, SimulationConfig, sweep_from_config, utils


def main():
    parser = argparse.ArgumentParser(
        description="Cluster statistics of diluted magnets versus concentration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=str(ROOT / "configs" / "default.json"),
        help="JSON or TOML parameter file (default: configs/default.json)",
    )
    parser.add_argument(
        "-l",
        "--lattice",
        choices=[*CRYSTAL_TYPES, "ALL"],
        default="ALL",
        help="Crystal type to simulate (default: ALL)",
    )
    parser.add_argument(
        "--out-dir",
        type=str,
        default=None,
        help="Output directory (default: output.directory from the config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed, overrides simulation.seed",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    args = parser.parse_args()

    try:
        config = SimulationConfig.from_file(args.config)
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1

    lattice_types = CRYSTAL_TYPES if args.lattice == "ALL" else (args.lattice,)
    out_dir = Path(args.out_dir or config.output_dir)
    verbose = not args.quiet
    failed = []
    start_time = time.time()

    for crystal_type in lattice_types:
        try:
            result = sweep_from_config(
                crystal_type, config, seed=args.seed, verbose=verbose
            )
        except (KeyError, ValueError) as e:
            failed.append(crystal_type)
            print(f"  {crystal_type} FAILED: {e}", file=sys.stderr)
            continue

        tsv_path = out_dir / f"clusters_{crystal_type}.txt"
        npz_path = out_dir / f"clusters_{crystal_type}.npz"
        try:
            utils.write_sweep_tsv(tsv_path, result)
            utils.save_sweep_result(npz_path, result)
        except OSError as e:
            failed.append(crystal_type)
            print(f"  Failed to write {tsv_path}: {e}", file=sys.stderr)
            continue

        if verbose:
            print(f"Data saved to {tsv_path}")
            print()

    if verbose:
        print("=" * 60)
        print("Sweep completed!")
        print(f"  Lattices: {', '.join(lattice_types)}")
        print(f"  Failed: {len(failed)}/{len(lattice_types)}")
        print(f"  Total time: {time.time() - start_time:.2f} seconds")
        print(f"  Output directory: {out_dir}")
        print("=" * 60)

    return 0 if not failed else 1


if __name__ == "__main__":
    sys.exit(main())
