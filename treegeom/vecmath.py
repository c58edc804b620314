"""Small vector, rotation and curve helpers built on numpy."""

import math
from typing import Sequence

import numpy as np

from .errors import DegenerateGeometryError, InvalidParameterError

UP = np.array([0.0, 1.0, 0.0], dtype=float)
EPSILON = 1e-12


# ---------- Basic math helpers ----------
def vec3(value) -> np.ndarray:
    a = np.asarray(value, dtype=float)
    if a.shape != (3,) or not np.all(np.isfinite(a)):
        raise InvalidParameterError(f"expected a finite 3-vector, got {value!r}")
    return a.copy()


def rot_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1, 0, 0], [0, c, -s], [0, s, c]], dtype=float)


def rot_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]], dtype=float)


def rot_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]], dtype=float)


def euler_matrix(ex: float, ey: float, ez: float) -> np.ndarray:
    """Rotation matrix for intrinsic XYZ Euler angles (radians)."""
    return rot_x(ex) @ rot_y(ey) @ rot_z(ez)


def as_rotation(value) -> np.ndarray:
    """Resolve an Euler triple, a 3x3 or a 4x4 matrix to a 3x3 rotation."""
    if value is None:
        return np.eye(3)
    a = np.asarray(value, dtype=float)
    if not np.all(np.isfinite(a)):
        raise InvalidParameterError("rotation contains non-finite values")
    if a.shape == (3,):
        return euler_matrix(*a)
    if a.shape == (3, 3):
        return a.copy()
    if a.shape == (4, 4):
        # only the rotation block is ever applied
        return a[:3, :3].copy()
    raise InvalidParameterError(f"rotation must be an Euler triple or a 3x3/4x4 matrix, got shape {a.shape}")


def normalize(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n < EPSILON:
        raise DegenerateGeometryError(f"cannot normalize zero-length vector {v!r}")
    return v / n


def set_length(v: np.ndarray, length: float) -> np.ndarray:
    return normalize(v) * length


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(b - a))


def lerp(a, b, t: float):
    return a * (1 - t) + b * t


# ---------- Catmull-Rom ----------
def _cubic_coefficients(x0, x1, t0, t1):
    return x0, t0, -3 * x0 + 3 * x1 - 2 * t0 - t1, 2 * x0 - 2 * x1 + t0 + t1


def _nonuniform_coefficients(x0, x1, x2, x3, dt0, dt1, dt2):
    t1 = (x1 - x0) / dt0 - (x2 - x0) / (dt0 + dt1) + (x2 - x1) / dt1
    t2 = (x2 - x1) / dt1 - (x3 - x1) / (dt1 + dt2) + (x3 - x2) / dt2
    return _cubic_coefficients(x1, x2, t1 * dt1, t2 * dt1)


class CatmullRomCurve:
    """Open centripetal Catmull-Rom spline through a sequence of 3D points.

    End tangents are taken from points mirrored past the first and last
    control point, so the curve passes through every control point.
    """

    def __init__(self, points: Sequence[np.ndarray]):
        self.points = np.array([np.asarray(p, dtype=float) for p in points])
        if len(self.points) < 2:
            raise InvalidParameterError("a curve needs at least two points")

    def get_point(self, t: float) -> np.ndarray:
        points = self.points
        n = len(points)
        p = (n - 1) * t
        index = int(math.floor(p))
        weight = p - index
        if index >= n - 1:
            index, weight = n - 2, 1.0

        p0 = points[index - 1] if index > 0 else 2 * points[0] - points[1]
        p1 = points[index]
        p2 = points[index + 1]
        p3 = points[index + 2] if index + 2 < n else 2 * points[n - 1] - points[n - 2]

        dt0 = float(np.sum((p1 - p0) ** 2)) ** 0.25
        dt1 = float(np.sum((p2 - p1) ** 2)) ** 0.25
        dt2 = float(np.sum((p3 - p2) ** 2)) ** 0.25
        # safety check for repeated points
        if dt1 < 1e-4:
            dt1 = 1.0
        if dt0 < 1e-4:
            dt0 = dt1
        if dt2 < 1e-4:
            dt2 = dt1

        c0, c1, c2, c3 = _nonuniform_coefficients(p0, p1, p2, p3, dt0, dt1, dt2)
        return c0 + c1 * weight + c2 * weight ** 2 + c3 * weight ** 3

    def get_points(self, divisions: int) -> np.ndarray:
        """Sample divisions + 1 points at uniform parameter steps."""
        return np.array([self.get_point(d / divisions) for d in range(divisions + 1)])
