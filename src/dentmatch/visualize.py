"""
Lightweight visualizations of the roster load for a day.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

# Use a non-interactive backend to avoid display issues in headless environments.
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd

from .config import DAILY_SLOT_CEILING, MONTHLY_CAPACITY


def plot_load_overview(
    loads: pd.DataFrame, scores: Optional[pd.DataFrame] = None, outfile: Optional[Path] = None
) -> None:
    panels = 3 if scores is not None and not scores.empty else 2
    fig, axes = plt.subplots(1, panels, figsize=(5 * panels, 4))

    # Booked slots for the day
    colors = ["tab:red" if full else "tab:blue" for full in loads["is_full"]]
    axes[0].bar(loads["name"], loads["daily_count"], color=colors)
    axes[0].axhline(DAILY_SLOT_CEILING, color="black", linestyle="--", linewidth=1)
    axes[0].set_ylim(0, DAILY_SLOT_CEILING + 1)
    axes[0].set_title("Booked slots")

    # Monthly workload
    axes[1].bar(loads["name"], loads["monthly_total"], color="tab:purple")
    axes[1].axhline(MONTHLY_CAPACITY, color="black", linestyle="--", linewidth=1)
    axes[1].set_title("Monthly cases")

    if panels == 3:
        eligible = scores[scores["total_score"] >= 0]
        axes[2].bar(eligible["name"], eligible["total_score"], color="tab:green")
        axes[2].set_title("Weighted total (eligible)")

    for ax in axes:
        ax.tick_params(axis="x", rotation=45)

    plt.tight_layout()
    if outfile:
        plt.savefig(outfile, dpi=150)
    else:
        plt.show()
    plt.close(fig)
