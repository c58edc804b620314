"""Policy for creating child branches."""

import copy
import math
from typing import Tuple

from .branch import TreeBranch
from .errors import InvalidParameterError
from .vecmath import euler_matrix


class TreeSpawner:
    """Creates a child branch on a parent.

    theta:        full angular spread of the child's tilt (radians)
    attenuation:  child length = parent length * attenuation
    root_range:   fraction of the parent's rings a lateral child may start from
    """

    def __init__(self, theta: float = math.pi * 0.5, attenuation: float = 0.75,
                 root_range: Tuple[float, float] = (0.75, 1.0)):
        lo, hi = float(root_range[0]), float(root_range[1])
        if not 0.0 <= lo <= hi <= 1.0:
            raise InvalidParameterError(f"root_range must satisfy 0 <= lo <= hi <= 1, got {root_range!r}")
        if attenuation <= 0:
            raise InvalidParameterError(f"attenuation must be positive, got {attenuation}")
        self.theta = float(theta)
        self.attenuation = float(attenuation)
        self.root_range = (lo, hi)

    def clone(self) -> "TreeSpawner":
        return copy.deepcopy(self)

    def attachment_index(self, branch, extension: bool) -> int:
        count = len(branch.segments)
        if extension:
            return count - 1
        lo, hi = self.root_range
        t = branch.rng.random() * (hi - lo) + lo
        return min(count - 1, int(math.floor(t * count)))

    def spawn(self, branch, extension: bool = False):
        """Build (but do not attach) a child of ``branch``."""
        rng = branch.rng
        htheta = self.theta * 0.5
        x = rng.random() * self.theta - htheta
        z = rng.random() * self.theta - htheta
        segment = branch.segments[self.attachment_index(branch, extension)]
        rotation = euler_matrix(x, 0.0, z) @ branch.rotation

        return TreeBranch(
            origin=segment,
            rotation=rotation,
            length=branch.length * self.attenuation,
            uv_offset=segment.uv_offset,
            uv_length=branch.uv_length,
            generation=branch.generation + 1,
            generations=branch.generations,
            radius=branch.radius,
            radius_segments=branch.radius_segments,
            height_segments=branch.height_segments,
            rng=rng,
        )

    def __repr__(self):
        return f"TreeSpawner(theta={self.theta:.4f}, attenuation={self.attenuation}, root_range={self.root_range})"
