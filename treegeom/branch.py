"""Branches: tapered tubes along a Catmull-Rom curve."""

import copy
import math
import numbers
import random
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .errors import InvalidParameterError
from .segment import TreeSegment
from .vecmath import UP, CatmullRomCurve, as_rotation, distance, euler_matrix, lerp, set_length, vec3

# random tilt applied to every branch's control point
BEND_THETA = math.pi * 0.25
# offset of a child's start point off its parent's ring
ATTACH_OFFSET = 0.05


def taper_ratios(generation: int, generations: int) -> Tuple[float, float]:
    """Radius scale at the start and end of a branch of the given generation."""
    from_ratio = 1.0 if generation == 0 else 1.0 - generation / (generations + 1)
    to_ratio = 1.0 - (generation + 1) / (generations + 1)
    return from_ratio, to_ratio


def validate_branch_params(length, radius, radius_segments, height_segments, generation, generations, uv_length):
    for name, value in (("radius_segments", radius_segments), ("height_segments", height_segments),
                        ("generation", generation), ("generations", generations)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if radius_segments < 3:
        raise InvalidParameterError(f"radius_segments must be >= 3, got {radius_segments}")
    if height_segments < 1:
        raise InvalidParameterError(f"height_segments must be >= 1, got {height_segments}")
    if generations < 0 or generation < 0:
        raise InvalidParameterError(f"generation/generations must be >= 0, got {generation}/{generations}")
    for name, value in (("length", length), ("radius", radius), ("uv_length", uv_length)):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidParameterError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(value) or value <= 0:
            raise InvalidParameterError(f"{name} must be a positive finite number, got {value}")


class TreeBranch:
    """One tapering tube of the tree.

    A branch starts either at a raw point (the root) or just off a ring of
    its parent, in which case ``from_segment`` keeps a read-only reference
    to that ring for UV continuity and joint stitching.
    """

    def __init__(self, length: float, radius_segments: int, height_segments: int,
                 generations: int, radius: float = 0.1, uv_length: float = 10.0,
                 uv_offset: float = 0.0, generation: int = 0, rotation=None,
                 origin=None, rng: Optional[random.Random] = None):
        validate_branch_params(length, radius, radius_segments, height_segments,
                               generation, generations, uv_length)
        self.length = float(length)
        self.radius = float(radius)
        self.radius_segments = int(radius_segments)
        self.height_segments = int(height_segments)
        self.generation = int(generation)
        self.generations = int(generations)
        self.uv_length = float(uv_length)
        self.uv_offset = float(uv_offset)
        self.rotation = as_rotation(rotation)
        self.rng = rng if rng is not None else random.Random()

        self.from_segment: Optional[TreeSegment] = None
        if isinstance(origin, TreeSegment):
            self.from_segment = origin
            self.position = origin.position + set_length(origin.rotation @ UP, ATTACH_OFFSET)
        elif origin is not None:
            self.position = vec3(origin)
        else:
            self.position = np.zeros(3)

        direction = self.rotation @ UP
        self.to = self.position + set_length(direction, self.length)
        self.segments: List[TreeSegment] = self._build_segments(direction)
        self.children: List["TreeBranch"] = []

    def _build_segments(self, direction: np.ndarray) -> List[TreeSegment]:
        htheta = BEND_THETA * 0.5
        x = self.rng.random() * BEND_THETA - htheta
        z = self.rng.random() * BEND_THETA - htheta
        bent = euler_matrix(x, 0.0, z) @ direction

        control = self.position + set_length(bent, self.length * 0.5)
        curve = CatmullRomCurve([self.position, control, self.to])
        points = curve.get_points(self.height_segments)

        from_ratio, to_ratio = taper_ratios(self.generation, self.generations)
        from_radius = self.radius * from_ratio
        to_radius = self.radius * to_ratio

        uv_offset = self.uv_offset
        if self.from_segment is not None:
            uv_offset += distance(self.from_segment.position, points[0]) / self.uv_length

        segments = [TreeSegment(points[0], self.rotation, uv_offset, from_radius, self.radius_segments)]
        for i in range(1, self.height_segments + 1):
            # interior rings reach to_radius at h - 1; the closing ring repeats it
            ry = 1.0 if i == self.height_segments else i / (self.height_segments - 1)
            radius = lerp(from_radius, to_radius, ry)
            uv_offset += distance(points[i - 1], points[i]) / self.uv_length
            segments.append(TreeSegment(points[i], self.rotation, uv_offset, radius, self.radius_segments))
        return segments

    # ---------- growth ----------
    def branch(self, spawner, count: int) -> None:
        """Spawn ``count`` children (the first one an extension), then recurse with count - 1."""
        for i in range(count):
            self.spawn(spawner, i == 0)
        for child in self.children:
            child.branch(spawner, count - 1)

    def grow(self, spawner) -> None:
        """Add one extension to every leaf still below the generation limit."""
        if self.children:
            for child in self.children:
                child.grow(spawner)
        elif self.generation < self.generations:
            self.branch(spawner, 1)

    def spawn(self, spawner, extension: bool) -> "TreeBranch":
        child = spawner.spawn(self, extension)
        self.children.append(child)
        return child

    # ---------- traversal ----------
    def iter_branches(self) -> Iterator["TreeBranch"]:
        """Every branch of the subtree, pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_branches()

    def branchlets(self) -> Iterator["TreeBranch"]:
        """Leaf branches of the subtree, depth-first."""
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.branchlets()

    @property
    def depth(self) -> int:
        return max(b.generation for b in self.iter_branches())

    def curve_length(self) -> float:
        return sum(distance(a.position, b.position) for a, b in zip(self.segments, self.segments[1:]))

    def clone(self) -> "TreeBranch":
        return copy.deepcopy(self)

    def __repr__(self):
        return (f"TreeBranch(generation={self.generation}/{self.generations}, length={self.length:.3f}, "
                f"segments={len(self.segments)}, children={len(self.children)})")
