"""A single cross-section ring of a branch."""

import copy
import math

import numpy as np

from .vecmath import as_rotation, vec3


class TreeSegment:
    """Ring of radius_segments + 1 vertices around a centreline point.

    The ring lies in the local XZ plane, is rotated by ``rotation`` and
    moved to ``position``. The last vertex repeats the first so the U
    coordinate can wrap from 0 to 1 without a texture seam.
    """

    def __init__(self, position, rotation, uv_offset: float, radius: float, radius_segments: int):
        self.position = vec3(position)
        self.rotation = as_rotation(rotation)
        self.uv_offset = float(uv_offset)
        self.radius = float(radius)
        self.radius_segments = int(radius_segments)

        u = np.arange(self.radius_segments + 1, dtype=float) / self.radius_segments
        angle = u * 2.0 * math.pi
        local = np.column_stack([
            self.radius * np.sin(angle),
            np.zeros_like(angle),
            self.radius * np.cos(angle),
        ])
        self.vertices = local @ self.rotation.T + self.position
        self.vertices[-1] = self.vertices[0]
        self.uvs = np.column_stack([u, np.full_like(u, self.uv_offset)])

    @property
    def center(self) -> np.ndarray:
        return self.vertices[:-1].mean(axis=0)

    def clone(self) -> "TreeSegment":
        return copy.deepcopy(self)

    def __repr__(self):
        p = self.position
        return (f"TreeSegment(position=({p[0]:.3f}, {p[1]:.3f}, {p[2]:.3f}), "
                f"radius={self.radius:.4f}, uv_offset={self.uv_offset:.4f})")
