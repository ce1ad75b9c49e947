# trackanalytics/visualize/plot.py
"""
Plotting routines for trackanalytics
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import matplotlib.pyplot as plt

from trackanalytics.analyze.elevation import elevation_profile
from trackanalytics.analyze.models import Track


def plot_elevation_profiles(tracks: Iterable[Track], out_path: Optional[Path] = None) -> int:
    """
    Draw elevation against distance for each track on one set of axes.

    Tracks without elevation are left out. Saves to `out_path` if given,
    otherwise opens a window. Returns the number of profiles drawn.
    """
    fig, ax = plt.subplots(figsize=(10, 4))
    drawn = 0
    for track in tracks:
        profile = elevation_profile(track)
        if not profile:
            continue
        dists, eles = zip(*profile)
        ax.plot(dists, eles, linewidth=1.5, label=track.name)
        drawn += 1

    ax.set_xlabel("Distance (km)")
    ax.set_ylabel("Elevation (m)")
    ax.set_title("Elevation profile")
    if drawn:
        ax.legend()
    fig.tight_layout()

    if out_path is not None:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path)
    else:
        plt.show()
    plt.close(fig)
    return drawn
