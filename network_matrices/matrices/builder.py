"""
Admittance matrix construction.

This module provides functions for building the sparse Y-matrix and the
branch rating vector from network elements.
"""

import logging

import numpy as np
from scipy.sparse import coo_matrix, csc_matrix

from ..core.elements import BranchElement, SystemParameters, Transformer3WBranch
from ..core.exceptions import NetworkDataError
from .validation import check_branch_indices

logger = logging.getLogger(__name__)


class SparseTripletBuilder:
    """
    Collects (row, col, value) triples and assembles them once.

    Indices are 0-based. Duplicated cells are summed on assembly, so
    contributions of parallel elements accumulate.
    """

    def __init__(self, shape: tuple[int, int], dtype=float):
        self.shape = shape
        self.dtype = dtype
        self._rows: list[int] = []
        self._cols: list[int] = []
        self._values: list = []

    def __len__(self) -> int:
        return len(self._values)

    def add(self, row: int, col: int, value) -> None:
        self._rows.append(row)
        self._cols.append(col)
        self._values.append(value)

    def add_branch(self, i: int, j: int, Yii, Yjj, Yij, Yji) -> None:
        """Add the four cells of a two-terminal element between buses i and j."""
        self.add(i, i, Yii)
        self.add(j, j, Yjj)
        self.add(i, j, Yij)
        self.add(j, i, Yji)

    def to_csc(self) -> csc_matrix:
        matrix = coo_matrix(
            (
                np.array(self._values, dtype=self.dtype),
                (np.array(self._rows, dtype=np.int64), np.array(self._cols, dtype=np.int64)),
            ),
            shape=self.shape,
        ).tocsc()
        matrix.sum_duplicates()
        matrix.sort_indices()
        return matrix


def build_admittance_matrix(
    system: SystemParameters,
    branches: list[BranchElement],
) -> tuple[csc_matrix, np.ndarray]:
    """
    Build the admittance (Y) matrix and rating vector from branch elements.

    Out-of-service branches add nothing to the matrix but keep their entry
    in the rating vector.

    Args:
        system: System parameters (bus count)
        branches: List of branch elements, numbered 1..len(branches)

    Returns:
        Tuple of (Y_matrix, max_flows) where Y_matrix is a complex
        bus_quantity x bus_quantity CSC matrix and max_flows[k] is the
        rating of branch k + 1
    """
    n = system.bus_quantity
    n_branches = len(branches)

    Y = SparseTripletBuilder((n, n), dtype=complex)
    max_flows = np.zeros(n_branches, dtype=float)

    for branch in branches:
        check_branch_indices(branch, n, n_branches)

        max_flows[branch.number - 1] = branch.max_flow

        if isinstance(branch, Transformer3WBranch):
            logger.warning(
                f"Data contains a 3W transformer (branch {branch.number}): modelled between buses "
                f"{branch.from_bus.number} and {branch.to_bus.number} only, bus "
                f"{branch.third_bus.number} is not connected"
            )

        if not branch.status:
            continue

        i = branch.from_bus.number - 1
        j = branch.to_bus.number - 1

        try:
            Yii, Yjj, Yij, Yji = branch.get_y_matrix_entries()
        except ZeroDivisionError as e:
            raise NetworkDataError(
                f"{type(branch).__name__} {branch.number}: admittance undefined "
                f"(zero series impedance or zero tap)"
            ) from e

        Y.add_branch(i, j, Yii, Yjj, Yij, Yji)

    logger.info(f"Admittance matrix: {n} buses, {n_branches} branches, {len(Y)} stamps")

    return Y.to_csc(), max_flows
