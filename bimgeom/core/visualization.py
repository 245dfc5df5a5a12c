"""Debug plots of containment queries.

Curves are drawn in plan (XY projection); each test point is coloured by
its containment result.
"""
from __future__ import annotations

import os as _os
from typing import Optional, Sequence

import matplotlib as _mpl
# Ensure a non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Patch as _MPatch

from .config import ContainmentConfig
from .containment import is_containing
from .curves import sample, sub_parts, Line
from .logging_utils import get_logger
from .primitives import Point, as_points, points_to_array

logger = get_logger('bimgeom.viz')

_INSIDE = (0.2, 0.7, 0.3)
_OUTSIDE = (0.85, 0.2, 0.2)


def plot_containment(
    curve,
    points: Sequence[Point],
    outname: str = "containment.png",
    accept_on_edge: Optional[bool] = None,
    tolerance: Optional[float] = None,
    config: Optional[ContainmentConfig] = None,
    samples_per_part: int = 32,
) -> list:
    """Plot ``curve`` with ``points`` coloured by containment and save to ``outname``.

    Returns the per-point containment results, in input order.
    """
    pts = as_points(points)
    results = [is_containing(curve, p, accept_on_edge, tolerance, config) for p in pts]

    plt.figure(figsize=(6, 6))
    for part in sub_parts(curve):
        xy = sample(part, 2 if isinstance(part, Line) else samples_per_part)
        plt.plot(xy[:, 0], xy[:, 1], color='black', linewidth=1.2)
    if pts:
        arr = points_to_array(pts)
        colors = [_INSIDE if r else _OUTSIDE for r in results]
        s = max(2.0, min(30.0, 400.0 / float(len(pts))))
        plt.scatter(arr[:, 0], arr[:, 1], s=s, c=np.asarray(colors), zorder=3)
    plt.legend(handles=[_MPatch(color=_INSIDE, label='inside'), _MPatch(color=_OUTSIDE, label='outside')],
               loc='upper right', fontsize=8)
    plt.gca().set_aspect('equal')
    plt.title(f"{type(curve).__name__}: {sum(results)}/{len(results)} inside")
    plt.savefig(outname, dpi=150)
    plt.close()
    logger.debug("wrote %s (%d points)", outname, len(pts))
    return results
