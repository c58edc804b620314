"""Assembles a grown tree into one indexed triangle mesh."""

import copy
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import trimesh

from .branch import TreeBranch
from .helpers import search_branch_points
from .tree import Tree

logger = logging.getLogger(__name__)

BuildData = Tuple[List[np.ndarray], List[np.ndarray], List[np.ndarray]]


@dataclass
class MeshBuffer:
    """Positions (N, 3), UVs (N, 2) and a CCW triangle list of uint32 indices."""
    positions: np.ndarray
    uvs: np.ndarray
    indices: np.ndarray

    @property
    def uv2(self) -> np.ndarray:
        return self.uvs

    @property
    def faces(self) -> np.ndarray:
        return self.indices.reshape(-1, 3)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def bounds(self) -> np.ndarray:
        return np.array([self.positions.min(axis=0), self.positions.max(axis=0)])


def _side_faces(rows: int, radius_segments: int) -> np.ndarray:
    grid = np.arange(rows * (radius_segments + 1)).reshape(rows, radius_segments + 1)
    v1 = grid[:-1, :-1]
    v2 = grid[1:, :-1]
    v3 = grid[1:, 1:]
    v4 = grid[:-1, 1:]
    return np.stack([v1, v4, v2, v2, v4, v3], axis=-1).reshape(-1)


def build_branch(branch: TreeBranch, offset: int = 0) -> BuildData:
    """Vertices, faces and UVs of a single branch, indices shifted by ``offset``."""
    radius_segments = branch.radius_segments
    rows = len(branch.segments)
    vertices = [s.vertices for s in branch.segments]
    uvs = [s.uvs for s in branch.segments]
    faces = [_side_faces(rows, radius_segments) + offset]

    first_ring = np.arange(radius_segments + 1) + offset
    index = rows * (radius_segments + 1) + offset

    if branch.from_segment is None:
        # fan the bottom ring onto its centre point
        bottom = branch.segments[0]
        vertices.append(bottom.position[np.newaxis, :])
        uvs.append(np.array([[0.5, bottom.uv_offset]]))
        center = np.full(radius_segments, index)
        faces.append(np.column_stack([first_ring[:-1], center, first_ring[1:]]).reshape(-1))
    else:
        # stitch the first ring to a private copy of the parent's ring
        parent_ring = branch.from_segment
        bottom = np.arange(radius_segments + 1) + index
        vertices.append(parent_ring.vertices)
        uvs.append(parent_ring.uvs)
        faces.append(np.column_stack([
            first_ring[:-1], bottom[1:], first_ring[1:],
            first_ring[:-1], bottom[:-1], bottom[1:],
        ]).reshape(-1))

    return vertices, faces, uvs


def build_branches(branch: TreeBranch, offset: int = 0) -> BuildData:
    """Pre-order walk; each child's indices start after everything emitted before it."""
    vertices, faces, uvs = build_branch(branch, offset)
    count = sum(len(v) for v in vertices)
    for child in branch.children:
        child_vertices, child_faces, child_uvs = build_branches(child, offset + count)
        vertices.extend(child_vertices)
        faces.extend(child_faces)
        uvs.extend(child_uvs)
        count += sum(len(v) for v in child_vertices)
    return vertices, faces, uvs


def build_mesh(root: TreeBranch) -> MeshBuffer:
    vertices, faces, uvs = build_branches(root)
    mesh = MeshBuffer(
        positions=np.concatenate(vertices).astype(float),
        uvs=np.concatenate(uvs).astype(float),
        indices=np.concatenate(faces).astype(np.uint32),
    )
    logger.debug("Assembled mesh: %d vertices, %d triangles", mesh.vertex_count, mesh.triangle_count)
    return mesh


class TreeGeometry:
    """Buffer geometry of a procedurally grown tree.

    Builds a :class:`Tree` from the given options and exposes the mesh
    buffer, vertex normals and the branch end points.
    """

    def __init__(self, options=None, rng=None, **overrides):
        self.tree = Tree(options, rng=rng, **overrides)
        self.branch_ends: List[np.ndarray] = search_branch_points(self.tree.root, self.tree.generations)
        self.mesh = build_mesh(self.tree.root)
        self._normals: Optional[np.ndarray] = None
        self._positions_of_branches: Optional[np.ndarray] = None

    @property
    def positions(self) -> np.ndarray:
        return self.mesh.positions

    @property
    def uvs(self) -> np.ndarray:
        return self.mesh.uvs

    @property
    def uv2(self) -> np.ndarray:
        return self.mesh.uv2

    @property
    def indices(self) -> np.ndarray:
        return self.mesh.indices

    @property
    def normals(self) -> np.ndarray:
        if self._normals is None:
            self._normals = np.asarray(self.to_trimesh().vertex_normals, dtype=float)
        return self._normals

    def to_trimesh(self) -> trimesh.Trimesh:
        return trimesh.Trimesh(vertices=self.mesh.positions, faces=self.mesh.faces, process=False)

    def positions_of_branches(self, skip: int = 0) -> np.ndarray:
        """Ring centres of every branch, sorted by height."""
        if self._positions_of_branches is None:
            centres = np.array([
                np.round(segment.vertices.mean(axis=0), 5)
                for branch in self.tree.root.iter_branches()
                for segment in branch.segments
            ])
            order = np.argsort(centres[:, 1], kind="stable")
            self._positions_of_branches = centres[order]
        return self._positions_of_branches[skip:]

    def clone(self) -> "TreeGeometry":
        return copy.deepcopy(self)
