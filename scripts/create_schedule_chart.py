#!/usr/bin/env python3
"""
Generate a grazing calendar (Gantt) chart of the saved rotation plan.
"""

import sys
from datetime import date, timedelta
from pathlib import Path

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from grazeplan.core import format_density, get_data_dir, get_density_unit
from grazeplan.data.store import load_plan
from grazeplan.plan.derive import parse_date, summer_window
from grazeplan.plan.schedule import in_summer, summarize


def create_schedule_chart():
    """Create a one-row-per-pasture calendar with the summer window shaded."""

    entries, season_start = load_plan()
    rows = [e for e in entries if parse_date(e.start_date) and parse_date(e.end_date)]
    if not rows:
        print("No dated entries. Set a season start with 'grazeplan start YYYY-MM-DD'.")
        return None

    starts = [parse_date(e.start_date) for e in rows]
    # end dates are inclusive; bars run to the end of the last day
    ends = [parse_date(e.end_date) + timedelta(days=1) for e in rows]
    y = np.arange(len(rows))

    fig, ax = plt.subplots(figsize=(14, max(4, 0.45 * len(rows) + 2)))
    totals = summarize(entries)
    fig.suptitle(
        f"Grazing Rotation - season start {season_start} "
        f"({totals.total_days} days, {format_density(totals.total_ada)} {get_density_unit()})",
        fontsize=13,
        fontweight="bold",
    )

    # Summer window for every year the plan touches
    first, last = min(starts), max(ends)
    for year in range(first.year, last.year + 1):
        window_start, window_end = summer_window(year)
        ax.axvspan(
            mdates.date2num(window_start),
            mdates.date2num(window_end + timedelta(days=1)),
            color="#fde68a",
            alpha=0.4,
            label="Jul 15 - Sep 15" if year == first.year else None,
        )

    colors = ["#f59e0b" if in_summer(e) else "#2563eb" for e in rows]
    ax.barh(
        y,
        [(end - start).days for start, end in zip(starts, ends)],
        left=[mdates.date2num(s) for s in starts],
        color=colors,
        edgecolor="#0f172a",
        linewidth=0.5,
        height=0.6,
    )

    for yi, entry, start in zip(y, rows, starts):
        ax.text(
            mdates.date2num(start) + 0.5,
            yi,
            f"{entry.grazing_days}d",
            va="center",
            fontsize=8,
            color="white",
        )

    ax.set_yticks(y)
    ax.set_yticklabels([e.pasture for e in rows])
    ax.invert_yaxis()  # first pasture on top
    ax.xaxis.set_major_locator(mdates.MonthLocator())
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%b %Y"))
    ax.set_xlim(mdates.date2num(first) - 2, mdates.date2num(last) + 2)
    ax.grid(axis="x", alpha=0.3)
    ax.legend(loc="lower right")

    plt.tight_layout()

    output_path = get_data_dir() / f"grazing_schedule_{date.today().isoformat()}.png"
    plt.savefig(output_path, dpi=150, bbox_inches="tight")
    print(f"Saved chart to {output_path}")
    plt.close(fig)
    return output_path


if __name__ == "__main__":
    create_schedule_chart()
