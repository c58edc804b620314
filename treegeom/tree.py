"""Tree: resolves options, builds the root branch and grows it."""

import copy
import logging
import random
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterator, Mapping, Optional

from .branch import TreeBranch, validate_branch_params
from .errors import InvalidParameterError
from .spawner import TreeSpawner
from .vecmath import as_rotation

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 3.0
DEFAULT_UV_LENGTH = 10.0
DEFAULT_GENERATIONS = 5
DEFAULT_RADIUS = 0.1
DEFAULT_RADIUS_SEGMENTS = 8
DEFAULT_HEIGHT_SEGMENTS = 8

# camelCase keys accepted by TreeOptions.from_dict
OPTION_ALIASES = {
    "uvLength": "uv_length",
    "radiusSegments": "radius_segments",
    "heightSegments": "height_segments",
    "uvOffset": "uv_offset",
    "from": "origin",
}


# ---------- Options ----------
@dataclass
class TreeOptions:
    """Construction options; ``None`` means "use the default"."""
    generations: Optional[int] = None
    length: Optional[float] = None
    uv_length: Optional[float] = None
    radius: Optional[float] = None
    radius_segments: Optional[int] = None
    height_segments: Optional[int] = None
    origin: Any = None          # start point or a TreeSegment to attach to
    rotation: Any = None        # Euler triple (radians) or 3x3/4x4 matrix
    uv_offset: Optional[float] = None
    generation: Optional[int] = None
    spawner: Optional[TreeSpawner] = None
    seed: Optional[int] = None

    @staticmethod
    def _field_names(data: Mapping[str, Any]) -> Dict[str, Any]:
        names = {f.name for f in fields(TreeOptions)}
        resolved: Dict[str, Any] = {}
        for key, value in data.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in names:
                raise InvalidParameterError(f"unknown tree option {key!r}")
            resolved[name] = value
        return resolved

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TreeOptions":
        return cls(**cls._field_names(data))

    def merged(self, **overrides) -> "TreeOptions":
        return replace(self, **self._field_names(overrides)) if overrides else self


def default_options(seed=None) -> TreeOptions:
    return TreeOptions(
        generations=DEFAULT_GENERATIONS,
        length=DEFAULT_LENGTH,
        uv_length=DEFAULT_UV_LENGTH,
        radius=DEFAULT_RADIUS,
        radius_segments=DEFAULT_RADIUS_SEGMENTS,
        height_segments=DEFAULT_HEIGHT_SEGMENTS,
        uv_offset=0.0,
        generation=0,
        seed=seed,
    )


def _pick(value, default):
    return default if value is None else value


class Tree:
    """A fully grown tree of branches.

    Only the random perturbations make two trees with the same options
    differ; pass ``seed`` (or an ``rng``) to reproduce a shape exactly.
    """

    def __init__(self, options: Optional[TreeOptions] = None, rng: Optional[random.Random] = None, **overrides):
        if isinstance(options, Mapping):
            options = TreeOptions.from_dict(options)
        options = (options or TreeOptions()).merged(**overrides)
        self.options = options

        self.origin = options.origin
        self.rotation = as_rotation(options.rotation)
        self.length = _pick(options.length, DEFAULT_LENGTH)
        self.uv_length = _pick(options.uv_length, DEFAULT_UV_LENGTH)
        self.generations = _pick(options.generations, DEFAULT_GENERATIONS)
        self.radius = _pick(options.radius, DEFAULT_RADIUS)
        self.radius_segments = _pick(options.radius_segments, DEFAULT_RADIUS_SEGMENTS)
        self.height_segments = _pick(options.height_segments, DEFAULT_HEIGHT_SEGMENTS)
        self.uv_offset = _pick(options.uv_offset, 0.0)
        root_generation = _pick(options.generation, 0)
        validate_branch_params(self.length, self.radius, self.radius_segments, self.height_segments,
                               root_generation, self.generations, self.uv_length)
        if root_generation > self.generations:
            raise InvalidParameterError(
                f"generation {root_generation} is beyond the generation limit {self.generations}")

        self.rng = rng if rng is not None else random.Random(options.seed)
        self.spawner = options.spawner or TreeSpawner()
        # bumped once per grow pass; never read back
        self.generation = 0

        self.root = TreeBranch(
            length=self.length,
            radius=self.radius,
            radius_segments=self.radius_segments,
            height_segments=self.height_segments,
            generation=root_generation,
            generations=self.generations,
            uv_length=self.uv_length,
            uv_offset=self.uv_offset,
            rotation=self.rotation,
            origin=self.origin,
            rng=self.rng,
        )
        self.root.branch(self.spawner, self.generations - root_generation)
        self.grow()

        logger.debug("Built tree: %d branches, depth %d, %d leaves",
                     self.branch_count, self.root.depth, sum(1 for _ in self.branchlets()))

    def grow(self, spawner: Optional[TreeSpawner] = None) -> None:
        self.root.grow(spawner or self.spawner)
        self.generation += 1

    @property
    def branch_count(self) -> int:
        return sum(1 for _ in self.root.iter_branches())

    def branchlets(self) -> Iterator[TreeBranch]:
        return self.root.branchlets()

    def clone(self) -> "Tree":
        return copy.deepcopy(self)
