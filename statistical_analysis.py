"""
Statistical Analysis Module

Records the state of a control tower after every tick and turns the history
into summary statistics, a JSON report and matplotlib charts of queue
lengths and gate occupancy over time.
"""

import json
from typing import Dict, List, Optional

import numpy as np
import matplotlib.pyplot as plt

from control_tower import ControlTower

HISTORY_FIELDS = ("tick", "landing", "takeoff", "loading", "gates_occupied", "gates_total")


class TowerStatistics:
    """Per-tick history of queue lengths and gate usage."""

    def __init__(self):
        self.history: List[Dict[str, int]] = []

    def record(self, tower: ControlTower):
        status = tower.get_status()
        self.history.append({
            "tick": status["ticks_elapsed"],
            "landing": status["landing"],
            "takeoff": status["takeoff"],
            "loading": status["loading"],
            "gates_occupied": status["gates_occupied"],
            "gates_total": status["gates_total"],
        })

    def __len__(self):
        return len(self.history)

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """One integer array per recorded field, in recording order."""
        return {field: np.array([entry[field] for entry in self.history], dtype=int)
                for field in HISTORY_FIELDS}

    def gate_occupancy(self) -> np.ndarray:
        """Fraction of gates occupied at each recorded tick (0 when there are no gates)."""
        arrays = self.as_arrays()
        total = arrays["gates_total"].astype(float)
        occupied = arrays["gates_occupied"].astype(float)
        return np.divide(occupied, total, out=np.zeros_like(occupied), where=total > 0)

    def summary(self) -> dict:
        """
        Aggregate statistics over the recorded history.

        Returns
        -------
        dict
            Number of ticks recorded, mean and max length of each queue, and
            mean and peak gate occupancy as fractions. Empty history gives zeros.
        """
        if not self.history:
            return {
                "ticks_recorded": 0,
                "mean_landing": 0.0, "max_landing": 0,
                "mean_takeoff": 0.0, "max_takeoff": 0,
                "mean_loading": 0.0, "max_loading": 0,
                "mean_gate_occupancy": 0.0, "peak_gate_occupancy": 0.0,
            }
        arrays = self.as_arrays()
        occupancy = self.gate_occupancy()
        result = {"ticks_recorded": len(self.history)}
        for field in ("landing", "takeoff", "loading"):
            result[f"mean_{field}"] = float(np.mean(arrays[field]))
            result[f"max_{field}"] = int(np.max(arrays[field]))
        result["mean_gate_occupancy"] = float(np.mean(occupancy))
        result["peak_gate_occupancy"] = float(np.max(occupancy))
        return result

    def to_json(self, path: str):
        with open(path, "w") as f:
            json.dump({"history": self.history, "summary": self.summary()}, f, indent=2)
        print(f"\n✓ Tower statistics saved to: {path}")

    def print_summary(self):
        summary = self.summary()
        print(f"\n{'='*60}")
        print(f"{'CONTROL TOWER STATISTICS':<60}")
        print(f"{'='*60}")
        print(f"{'Ticks recorded:':<28} {summary['ticks_recorded']:>8}")
        for field in ("landing", "takeoff", "loading"):
            print(f"{field.capitalize() + ' (mean / max):':<28} "
                  f"{summary[f'mean_{field}']:>8.2f} / {summary[f'max_{field}']}")
        print(f"{'Gate occupancy (mean):':<28} {summary['mean_gate_occupancy']:>8.1%}")
        print(f"{'Gate occupancy (peak):':<28} {summary['peak_gate_occupancy']:>8.1%}")
        print(f"{'='*60}\n")

    def plot_history(self, save_path: Optional[str] = None, show: bool = False):
        """
        Plot queue lengths and gate occupancy against tick number.

        Parameters
        ----------
        save_path : str, optional
            Where to write the figure as an image.
        show : bool
            Open an interactive window.

        Returns
        -------
        matplotlib.figure.Figure
        """
        arrays = self.as_arrays()
        ticks = arrays["tick"]

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(12, 8), sharex=True)
        fig.suptitle('Control Tower Activity', fontsize=14, fontweight='bold')

        # Plot 1: Queue lengths
        ax1.step(ticks, arrays["landing"], where='post', label='Landing queue', color='#1f77b4', linewidth=2)
        ax1.step(ticks, arrays["takeoff"], where='post', label='Takeoff queue', color='#ff7f0e', linewidth=2)
        ax1.step(ticks, arrays["loading"], where='post', label='Loading', color='#2ca02c', linewidth=2)
        ax1.set_ylabel('Aircraft', fontsize=11)
        ax1.set_title('Queue Lengths', fontsize=12, fontweight='bold')
        ax1.grid(True, alpha=0.3)
        ax1.legend(fontsize=9)

        # Plot 2: Gate occupancy
        occupancy = self.gate_occupancy() * 100.0
        ax2.fill_between(ticks, occupancy, step='post', color='#9467bd', alpha=0.4)
        ax2.step(ticks, occupancy, where='post', color='#9467bd', linewidth=2)
        if len(occupancy):
            ax2.axhline(np.mean(occupancy), color='red', linestyle='--', linewidth=1.5,
                        label=f'Mean: {np.mean(occupancy):.1f}%')
            ax2.legend(fontsize=9)
        ax2.set_ylim(0, 105)
        ax2.set_xlabel('Tick', fontsize=11)
        ax2.set_ylabel('Gates occupied (%)', fontsize=11)
        ax2.set_title('Gate Occupancy', fontsize=12, fontweight='bold')
        ax2.grid(True, alpha=0.3)

        plt.tight_layout()
        if save_path is not None:
            fig.savefig(save_path, dpi=120)
        if show:
            plt.show()
        return fig
