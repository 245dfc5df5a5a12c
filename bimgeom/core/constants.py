"""Central numerical tolerances and geometry constants.

This module centralizes the thresholds used by every geometric predicate so
they can be tuned consistently and referenced without scattering literals.
A single containment or parameterization call must use one distance
tolerance throughout; callers override it per call, never by mutating these.
"""
from __future__ import annotations

# Geometry tolerances
DISTANCE_TOL: float = 1e-6         # two points closer than this are equal
ANGLE_TOL: float = 1e-6            # radians, also used on 1 - |cos| for parallelism
MICRO_DISTANCE_TOL: float = 1e-9   # fine threshold for near-zero lengths

# Sentinels
NOT_ON_CURVE: float = -1.0         # parameter_at_point result for points off the curve

__all__ = [
    'DISTANCE_TOL',
    'ANGLE_TOL',
    'MICRO_DISTANCE_TOL',
    'NOT_ON_CURVE',
]
