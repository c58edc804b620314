"""Smoke test for the matplotlib preview."""

from matplotlib import pyplot as plt

from treegeom import TreeGeometry
from treegeom.preview import plot_mesh


def test_plot_mesh_draws_without_showing():
    geometry = TreeGeometry(generations=1, height_segments=2, radius_segments=4, seed=2)
    ax = plot_mesh(geometry, show=False)
    assert len(ax.collections) >= 1
    assert "triangles" in ax.get_title()
    plt.close(ax.figure)
