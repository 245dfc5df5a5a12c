"""Immutable geometry value types and the elementary queries on them.

Points and vectors are small frozen dataclasses rather than raw arrays so that
point equality can be tolerance based; ``to_array`` bridges into numpy for the
vectorised routines (plane fitting, matrix reduction).
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

import numpy as np

from .constants import DISTANCE_TOL

__all__ = [
    'Point', 'Vector', 'Plane', 'Cartesian', 'BoundingBox',
    'X_AXIS', 'Y_AXIS', 'Z_AXIS', 'ORIGIN',
    'points_to_array', 'square_distance', 'distance', 'signed_distance_to_plane',
    'distance_to_plane', 'project', 'signed_angle', 'random_vector_in_plane',
    'as_points',
]


@dataclass(frozen=True, eq=False)
class Point:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return square_distance(self, other) < DISTANCE_TOL * DISTANCE_TOL

    __hash__ = None  # tolerance equality is not transitive

    def __sub__(self, other):
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __add__(self, other):
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def translate(self, vector: 'Vector') -> 'Point':
        return self + vector

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> 'Point':
        a = np.asarray(arr, dtype=np.float64).ravel()
        z = float(a[2]) if a.shape[0] > 2 else 0.0
        return cls(float(a[0]), float(a[1]), z)


@dataclass(frozen=True)
class Vector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x + other.x, self.y + other.y, self.z + other.z)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Vector):
            return Vector(self.x - other.x, self.y - other.y, self.z - other.z)
        return NotImplemented

    def __neg__(self):
        return Vector(-self.x, -self.y, -self.z)

    def __mul__(self, k):
        if isinstance(k, (int, float)):
            return Vector(self.x * k, self.y * k, self.z * k)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, k):
        if isinstance(k, (int, float)):
            return Vector(self.x / k, self.y / k, self.z / k)
        return NotImplemented

    def dot(self, other: 'Vector') -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: 'Vector') -> 'Vector':
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def square_length(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.square_length())

    def normalise(self) -> 'Vector':
        """Unit vector in the same direction; the zero vector stays zero."""
        n = self.length()
        if n == 0.0:
            return Vector(0.0, 0.0, 0.0)
        return self / n

    def angle(self, other: 'Vector') -> float:
        """Unsigned angle in [0, pi]."""
        denom = self.length() * other.length()
        if denom == 0.0:
            return 0.0
        c = max(-1.0, min(1.0, self.dot(other) / denom))
        return math.acos(c)

    def signed_angle(self, other: 'Vector', normal: 'Vector') -> float:
        return signed_angle(self, other, normal)

    def is_parallel(self, other: 'Vector', angle_tolerance: float) -> bool:
        """True when the directions agree up to sign within ``1 - |cos|``."""
        a = self.normalise(); b = other.normalise()
        return 1.0 - abs(a.dot(b)) <= angle_tolerance

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> 'Vector':
        a = np.asarray(arr, dtype=np.float64).ravel()
        z = float(a[2]) if a.shape[0] > 2 else 0.0
        return cls(float(a[0]), float(a[1]), z)


X_AXIS = Vector(1.0, 0.0, 0.0)
Y_AXIS = Vector(0.0, 1.0, 0.0)
Z_AXIS = Vector(0.0, 0.0, 1.0)
ORIGIN = Point(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Plane:
    origin: Point = field(default_factory=lambda: ORIGIN)
    normal: Vector = Z_AXIS


@dataclass(frozen=True)
class Cartesian:
    """Right-handed local coordinate system (orthonormal axes)."""
    origin: Point = field(default_factory=lambda: ORIGIN)
    x: Vector = X_AXIS
    y: Vector = Y_AXIS
    z: Vector = Z_AXIS

    @classmethod
    def from_plane(cls, origin: Point, x_dir: Vector, normal: Vector) -> 'Cartesian':
        z = normal.normalise()
        # remove any out-of-plane component of the requested x direction
        x = (x_dir - z * x_dir.dot(z)).normalise()
        y = z.cross(x)
        return cls(origin, x, y, z)


@dataclass(frozen=True)
class BoundingBox:
    min: Point = field(default_factory=Point)
    max: Point = field(default_factory=Point)

    def extents(self) -> Vector:
        return self.max - self.min

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(
            Point(min(self.min.x, other.min.x), min(self.min.y, other.min.y), min(self.min.z, other.min.z)),
            Point(max(self.max.x, other.max.x), max(self.max.y, other.max.y), max(self.max.z, other.max.z)),
        )

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> 'BoundingBox':
        arr = points_to_array(points)
        if arr.size == 0:
            raise ValueError("cannot bound an empty point set")
        return cls(Point.from_array(arr.min(axis=0)), Point.from_array(arr.max(axis=0)))


def points_to_array(points: Iterable[Point]) -> np.ndarray:
    """Stack points into an (N, 3) float64 array."""
    rows = [(p.x, p.y, p.z) for p in points]
    if not rows:
        return np.empty((0, 3), dtype=np.float64)
    return np.asarray(rows, dtype=np.float64)


def square_distance(a: Point, b: Point) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return dx * dx + dy * dy + dz * dz


def distance(a: Point, b: Point) -> float:
    return math.sqrt(square_distance(a, b))


def signed_distance_to_plane(point: Point, plane: Plane) -> float:
    return plane.normal.normalise().dot(point - plane.origin)


def distance_to_plane(point: Point, plane: Plane) -> float:
    return abs(signed_distance_to_plane(point, plane))


def project(point: Point, plane: Plane) -> Point:
    """Orthogonal projection of a point onto a plane."""
    n = plane.normal.normalise()
    return point - n * n.dot(point - plane.origin)


def signed_angle(v1: Vector, v2: Vector, normal: Vector) -> float:
    """Angle from v1 to v2 in [-pi, pi], positive counter-clockwise about normal."""
    angle = v1.angle(v2)
    if normal.dot(v1.cross(v2)) < 0:
        return -angle
    return angle


def random_vector_in_plane(plane: Plane, rng: np.random.Generator, normalise: bool = True) -> Vector:
    """Random direction lying in ``plane``; unit length when ``normalise``."""
    n = plane.normal.normalise()
    while True:
        v = Vector.from_array(rng.uniform(-1.0, 1.0, size=3))
        in_plane = v - n * v.dot(n)
        if in_plane.square_length() > DISTANCE_TOL * DISTANCE_TOL:
            return in_plane.normalise() if normalise else in_plane


def as_points(points: Iterable) -> List[Point]:
    """Accept Points or (x, y[, z]) sequences."""
    out = []
    for p in points:
        out.append(p if isinstance(p, Point) else Point.from_array(p))
    return out
