"""Procedural branching tree meshes with bark UVs."""

from .branch import TreeBranch, taper_ratios
from .errors import DegenerateGeometryError, InvalidParameterError, TreeGeometryError
from .geometry import MeshBuffer, TreeGeometry, build_branch, build_mesh
from .helpers import search_branch_points
from .segment import TreeSegment
from .spawner import TreeSpawner
from .tree import Tree, TreeOptions, default_options

__all__ = [
    "DegenerateGeometryError",
    "InvalidParameterError",
    "MeshBuffer",
    "Tree",
    "TreeBranch",
    "TreeGeometry",
    "TreeGeometryError",
    "TreeOptions",
    "TreeSegment",
    "TreeSpawner",
    "build_branch",
    "build_mesh",
    "default_options",
    "search_branch_points",
    "taper_ratios",
]
