"""
Network connectivity analysis.

This module finds the electrical islands formed by in-service branches.
A network with more than one island has a singular reduced nodal matrix.
"""

import logging

from ..core.elements import BranchElement, SystemParameters

logger = logging.getLogger(__name__)


class UnionFind:
    """
    Union-Find (Disjoint Set Union) data structure with preferred node support.

    When preferred nodes are specified, they will be chosen as representatives
    over non-preferred nodes during union operations.
    """

    def __init__(self, preferred: set[int] | None = None):
        """
        Initialize Union-Find.

        Args:
            preferred: Set of bus numbers that should be preferred as representatives,
                      typically the reference bus.
        """
        self.parent: dict[int, int] = {}
        self.rank: dict[int, int] = {}
        self.preferred: set[int] = preferred or set()

    def find(self, x: int) -> int:
        """Find representative of set containing x (with path compression)."""
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: int, y: int) -> None:
        """
        Union the sets containing x and y.

        Preferred nodes are always chosen as representatives over
        non-preferred nodes. Otherwise union by rank is used.
        """
        px, py = self.find(x), self.find(y)
        if px == py:
            return

        px_preferred = px in self.preferred
        py_preferred = py in self.preferred

        if px_preferred and not py_preferred:
            self.parent[py] = px
        elif py_preferred and not px_preferred:
            self.parent[px] = py
        else:
            if self.rank[px] < self.rank[py]:
                px, py = py, px
            self.parent[py] = px
            if self.rank[px] == self.rank[py]:
                self.rank[px] += 1


def find_islands(
    system: SystemParameters,
    branches: list[BranchElement],
    reference_bus: int | None = None,
) -> list[list[int]]:
    """
    Group buses into islands connected by in-service branches.

    Only terminals 1 and 2 of each branch are considered, matching the
    way branches are folded into the nodal matrices.

    Args:
        system: System parameters (bus count)
        branches: List of branch elements
        reference_bus: Optional reference bus number; its island is listed first

    Returns:
        List of islands, each a sorted list of bus numbers. Islands are
        ordered by their smallest bus, except that the reference bus island
        comes first when given.
    """
    uf = UnionFind(preferred={reference_bus} if reference_bus is not None else None)

    for bus_number in range(1, system.bus_quantity + 1):
        uf.find(bus_number)

    for branch in branches:
        if branch.status:
            uf.union(branch.from_bus.number, branch.to_bus.number)

    groups: dict[int, list[int]] = {}
    for bus_number in range(1, system.bus_quantity + 1):
        groups.setdefault(uf.find(bus_number), []).append(bus_number)

    islands = sorted(groups.values(), key=lambda island: island[0])
    if reference_bus is not None:
        islands.sort(key=lambda island: reference_bus not in island)

    if len(islands) > 1:
        logger.info(f"Topology: {len(islands)} islands found in {system.bus_quantity} buses")

    return islands
