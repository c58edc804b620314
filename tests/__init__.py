"""
Tests for treegeom: rings, branches, spawning, tree growth and mesh assembly.
"""
