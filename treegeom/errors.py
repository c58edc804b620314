"""Exceptions raised while building a tree."""


class TreeGeometryError(Exception):
    """Base class for every error raised by treegeom."""


class InvalidParameterError(TreeGeometryError, ValueError):
    """A configuration value is out of range or of the wrong kind."""


class DegenerateGeometryError(TreeGeometryError, ArithmeticError):
    """Internal invariant violation, e.g. normalizing a zero-length vector."""
