"""Tests for Tree orchestration and option handling."""

import math

import numpy as np
import pytest

from tests.conftest import FixedRandom
from treegeom import InvalidParameterError, Tree, TreeOptions, TreeSpawner, default_options
from treegeom.tree import DEFAULT_GENERATIONS, DEFAULT_HEIGHT_SEGMENTS, DEFAULT_RADIUS_SEGMENTS


def expected_branch_count(generations: int) -> int:
    total, level = 1, 1
    for count in range(generations, 0, -1):
        level *= count
        total += level
    return total


class TestTreeOptions:

    def test_from_dict_accepts_camel_case(self):
        options = TreeOptions.from_dict({"uvLength": 4.0, "radiusSegments": 5, "heightSegments": 3,
                                         "uvOffset": 0.5, "from": (1.0, 0.0, 0.0), "generations": 2})
        assert options.uv_length == 4.0
        assert options.radius_segments == 5
        assert options.height_segments == 3
        assert options.uv_offset == 0.5
        assert options.origin == (1.0, 0.0, 0.0)

    def test_unknown_key_is_rejected(self):
        with pytest.raises(InvalidParameterError):
            TreeOptions.from_dict({"branches": 3})

    def test_merged_only_overrides_given_fields(self):
        options = default_options(seed=7).merged(radius=0.4)
        assert options.radius == 0.4
        assert options.seed == 7
        assert options.generations == DEFAULT_GENERATIONS


class TestTree:

    def test_defaults(self):
        tree = Tree(seed=3, generations=1)
        assert tree.length == 3.0
        assert tree.uv_length == 10.0
        assert tree.radius == 0.1
        assert tree.radius_segments == DEFAULT_RADIUS_SEGMENTS
        assert tree.height_segments == DEFAULT_HEIGHT_SEGMENTS
        assert len(tree.root.segments) == DEFAULT_HEIGHT_SEGMENTS + 1

    def test_accepts_mapping(self):
        tree = Tree({"generations": 1, "heightSegments": 2, "seed": 1})
        assert len(tree.root.segments) == 3

    @pytest.mark.parametrize("generations", [0, 1, 2, 3, 4])
    def test_depth_is_bounded(self, generations):
        tree = Tree(generations=generations, height_segments=2, radius_segments=3, seed=generations)
        assert all(b.generation <= generations for b in tree.root.iter_branches())
        assert tree.root.depth == generations
        assert tree.branch_count == expected_branch_count(generations)

    def test_generation_counter_bumped_once(self):
        tree = Tree(generations=1, seed=1)
        assert tree.generation == 1

    def test_seed_reproduces_shape(self):
        a = Tree(generations=3, seed=99)
        b = Tree(generations=3, seed=99)
        for x, y in zip(a.root.iter_branches(), b.root.iter_branches()):
            assert np.array_equal(x.to, y.to)

    def test_injected_rng(self):
        tree = Tree(generations=2, rng=FixedRandom(0.5))
        assert np.allclose(tree.root.to, [0.0, 3.0, 0.0])
        assert tree.root.rng is tree.rng

    def test_euler_rotation(self):
        tree = Tree(generations=0, rotation=(0.0, 0.0, math.pi / 2), rng=FixedRandom(0.5))
        assert np.allclose(tree.root.to, [-3.0, 0.0, 0.0])

    def test_matrix_rotation(self):
        m = np.eye(4)
        m[:3, :3] = [[1, 0, 0], [0, 0, -1], [0, 1, 0]]
        tree = Tree(generations=0, rotation=m, rng=FixedRandom(0.5))
        assert np.allclose(tree.root.to, [0.0, 0.0, 3.0])

    def test_origin(self):
        tree = Tree(generations=1, origin=(1.0, 2.0, 3.0), seed=5)
        assert np.allclose(tree.root.segments[0].position, [1.0, 2.0, 3.0])

    def test_custom_spawner(self):
        tree = Tree(generations=1, spawner=TreeSpawner(attenuation=0.5), rng=FixedRandom(0.5))
        assert tree.spawner.attenuation == 0.5
        assert tree.root.children[0].length == pytest.approx(1.5)

    def test_initial_generation(self):
        tree = Tree(generations=3, generation=2, seed=1)
        assert tree.root.generation == 2
        assert tree.root.depth == 3

    @pytest.mark.parametrize("kwargs", [
        {"radius_segments": 2},
        {"height_segments": 0},
        {"length": 0.0},
        {"generations": -1},
        {"generation": 4, "generations": 3},
        {"rotation": np.eye(2)},
    ])
    def test_invalid_options_fail_before_building(self, kwargs):
        with pytest.raises(InvalidParameterError):
            Tree(**kwargs)

    def test_scenario_single_generation(self):
        tree = Tree(generations=1, length=3, radius=0.5, radius_segments=4, height_segments=1, seed=11)
        assert len(tree.root.segments) == 2
        assert all(len(s.vertices) == 5 for s in tree.root.segments)
        assert len(tree.root.children) >= 1

    def test_branchlets_are_leaves(self):
        tree = Tree(generations=2, seed=2)
        leaves = list(tree.branchlets())
        assert leaves
        assert all(not leaf.children for leaf in leaves)
        assert all(leaf.generation == 2 for leaf in leaves)

    def test_clone_is_deep(self):
        tree = Tree(generations=2, seed=8)
        copy = tree.clone()
        assert copy.root is not tree.root
        assert copy.branch_count == tree.branch_count
        copy.root.children.clear()
        assert tree.root.children
