# Static matplotlib preview of a generated tree.
# Run: python -m treegeom.preview

import numpy as np
from matplotlib import pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from .geometry import TreeGeometry
from .tree import default_options


def plot_mesh(geometry: TreeGeometry, ax=None, show: bool = True, mark_ends: bool = True):
    """Plot the bark mesh, coloured by height, with branch ends marked."""
    if ax is None:
        fig = plt.figure(figsize=(10, 12))
        ax = fig.add_subplot(111, projection='3d')

    vertices = geometry.positions
    triangles = vertices[geometry.mesh.faces]

    # brown gradient from the base to the top
    heights = triangles[:, :, 1].mean(axis=1)
    lo, hi = vertices[:, 1].min(), vertices[:, 1].max()
    shade = (heights - lo) / max(hi - lo, 1e-9)
    colors = plt.cm.copper(0.3 + 0.5 * shade)

    # y is up in the mesh, z is up in matplotlib
    mesh = Poly3DCollection(triangles[:, :, [0, 2, 1]], alpha=0.9, edgecolor='black', linewidth=0.05)
    mesh.set_facecolors(colors)
    ax.add_collection3d(mesh)

    if mark_ends and geometry.branch_ends:
        ends = np.array(geometry.branch_ends)
        ax.scatter(ends[:, 0], ends[:, 2], ends[:, 1], c='green', s=6)

    ax.set_xlim(vertices[:, 0].min() - 0.5, vertices[:, 0].max() + 0.5)
    ax.set_ylim(vertices[:, 2].min() - 0.5, vertices[:, 2].max() + 0.5)
    ax.set_zlim(lo, hi + 0.5)
    ax.set_xlabel('X'); ax.set_ylabel('Z'); ax.set_zlabel('Y')
    ax.view_init(elev=15, azim=45)
    ax.set_title(f'Tree mesh ({geometry.mesh.vertex_count} vertices, {geometry.mesh.triangle_count} triangles)')

    if show:
        plt.tight_layout()
        plt.show()
    return ax


if __name__ == "__main__":
    opts = default_options(seed=1337)
    geometry = TreeGeometry(opts)

    print(f"Generated tree with {geometry.tree.branch_count} branches, depth {geometry.tree.root.depth}")
    print(f"Mesh: {geometry.mesh.vertex_count} vertices, {geometry.mesh.triangle_count} triangles")
    print(f"Branch ends: {len(geometry.branch_ends)}")
    lo, hi = geometry.mesh.bounds()
    print(f"Bounds: {np.round(lo, 3)} to {np.round(hi, 3)}")

    plot_mesh(geometry)
