"""Configuration objects for the containment engine."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Any, Dict

from .constants import DISTANCE_TOL


@dataclass(frozen=True)
class ContainmentConfig:
    """Tuning of the ray-casting containment test.

    Attributes
    ----------
    max_ray_attempts : int
        Upper bound on random perturbations of the test ray before giving up
        on a point (the point is then reported as not contained).
    seed : int or None
        Seed for the perturbation generator. ``None`` draws fresh entropy on
        every call; an int makes results reproducible.
    accept_on_edge : bool
        Default for points lying on the boundary.
    tolerance : float
        Default distance tolerance.
    """
    max_ray_attempts: int = 100
    seed: Optional[int] = None
    accept_on_edge: bool = True
    tolerance: float = DISTANCE_TOL

    def __post_init__(self) -> None:
        if self.max_ray_attempts < 1:
            raise ValueError(f"max_ray_attempts must be >= 1, got {self.max_ray_attempts}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")

    def with_overrides(self, **overrides: Dict[str, Any]) -> 'ContainmentConfig':
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


DEFAULT_CONFIG = ContainmentConfig()

__all__ = ['ContainmentConfig', 'DEFAULT_CONFIG']
