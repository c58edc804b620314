from typing import List, Optional

import numpy as np

from .branch import TreeBranch


def search_branch_points(node: TreeBranch, generations: int, points: Optional[List[np.ndarray]] = None) -> List[np.ndarray]:
    """End points of every branch that has children, post-order.

    Only nodes whose child count does not exceed ``generations`` are
    reported; external tools use the points to mark branch tips.
    """
    if points is None:
        points = []
    if node.children:
        for child in node.children:
            search_branch_points(child, generations, points)
        if len(node.children) <= generations:
            points.append(node.to)
    return points
