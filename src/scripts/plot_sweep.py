"""
Sweep Plotter for Diluted Magnet Cluster Statistics.

Plots mean cluster count, mean cluster size and percolation probability
against concentration for one or more sweep archives.
"""
import argparse
import sys
from pathlib import Path

import matplotlib.pyplot as plt

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from src.dilute_sim import utils  # type: ignore[import]


def plot_sweeps(paths, output_path, dpi=150):
    fig, axes = plt.subplots(1, 3, figsize=(15, 4.5))
    panels = [
        ("mean_cluster_count", "Clusters per configuration"),
        ("mean_cluster_size", "Mean cluster size"),
        ("percolation_probability", "Percolation probability"),
    ]

    for path in paths:
        result = utils.load_sweep_result(path)
        label = result.meta.get("crystal_type", Path(path).stem)
        for ax, (column, _) in zip(axes, panels):
            ax.plot(result.concentration, getattr(result, column), marker="o", ms=3, label=label)

    for ax, (_, ylabel) in zip(axes, panels):
        ax.set_xlabel("Concentration")
        ax.set_ylabel(ylabel)
        ax.grid(alpha=0.3)
    axes[1].set_yscale("log")
    axes[0].legend()

    fig.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi)
    plt.close(fig)
    print(f"Saved plot to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Plot concentration sweeps")
    parser.add_argument("inputs", nargs="+", help="Sweep .npz files")
    parser.add_argument("--out", default="results/sweep.png", help="Output image")
    parser.add_argument("--dpi", type=int, default=150)
    args = parser.parse_args()

    plot_sweeps(args.inputs, args.out, dpi=args.dpi)


if __name__ == "__main__":
    main()
