"""
Linear sensitivity matrices (DC approximation).

This module builds the node-branch incidence matrix, the reactance-only
nodal matrix B and the Power Transfer Distribution Factors:

    PTDF = X^-1 @ A_red^T @ B_red^-1

where A_red and B_red have the reference bus row (and column) removed.
The reference bus column of the PTDF is zero. B only stamps in-service
branches, while X = diag(x) covers every branch, so an open branch reports
the flow its reactance would carry across the angle difference of its
terminals.
"""

import logging
from enum import Enum

import numpy as np
from scipy.sparse import csc_matrix

from ..core.elements import Bus, BranchElement, SystemParameters
from ..core.exceptions import NetworkDataError, ReferenceBusError, IslandedNetworkError
from .builder import SparseTripletBuilder
from .topology import find_islands
from .validation import check_branch_indices

logger = logging.getLogger(__name__)


class ReferencePolicy(Enum):
    """How to resolve more than one bus marked as reference."""
    STRICT = "strict"  # Multiple reference buses are a data error
    FIRST = "first"    # First reference bus in the bus list wins


def build_incidence_matrix(system: SystemParameters, branches: list[BranchElement]) -> csc_matrix:
    """
    Build the bus x branch incidence matrix.

    Column k holds +1 at the row of the first terminal of branch k + 1 and
    -1 at the row of its second terminal, whatever the branch status.
    """
    n = system.bus_quantity
    n_branches = len(branches)

    A = SparseTripletBuilder((n, n_branches), dtype=float)
    for branch in branches:
        check_branch_indices(branch, n, n_branches)
        k = branch.number - 1
        A.add(branch.from_bus.number - 1, k, 1.0)
        A.add(branch.to_bus.number - 1, k, -1.0)

    return A.to_csc()


def _dc_susceptance(branch: BranchElement) -> float:
    try:
        return branch.get_dc_susceptance()
    except ZeroDivisionError as e:
        raise NetworkDataError(
            f"{type(branch).__name__} {branch.number}: zero reactance, DC model undefined"
        ) from e


def get_branch_susceptances(branches: list[BranchElement], zero_open_branches: bool = False) -> np.ndarray:
    """
    Vector of 1/x per branch number.

    Out-of-service branches keep their 1/x unless zero_open_branches is set,
    in which case their entry is zero.
    """
    b = np.zeros(len(branches), dtype=float)
    for branch in branches:
        if zero_open_branches and not branch.status:
            continue
        b[branch.number - 1] = _dc_susceptance(branch)
    return b



def build_dc_susceptance_matrix(system: SystemParameters, branches: list[BranchElement]) -> csc_matrix:
    """
    Build the reactance-only nodal matrix B.

    Uses the line stamping pattern with 1/x in place of the complex series
    admittance. Out-of-service branches are not stamped.
    """
    n = system.bus_quantity
    n_branches = len(branches)

    B = SparseTripletBuilder((n, n), dtype=float)
    for branch in branches:
        check_branch_indices(branch, n, n_branches)
        if not branch.status:
            continue
        b = _dc_susceptance(branch)
        i = branch.from_bus.number - 1
        j = branch.to_bus.number - 1
        B.add_branch(i, j, b, b, -b, -b)

    return B.to_csc()


def get_reference_buses(buses: list[Bus]) -> list[int]:
    """Numbers of all buses marked as reference, in bus list order."""
    return [bus.number for bus in buses if bus.is_reference]


def find_reference_bus(
    buses: list[Bus],
    policy: ReferencePolicy = ReferencePolicy.STRICT,
) -> int | None:
    """
    Find the reference (slack) bus.

    Args:
        buses: List of buses
        policy: How to resolve several reference buses

    Returns:
        Reference bus number, or None if no bus is marked as reference
    """
    references = get_reference_buses(buses)
    if not references:
        return None
    if len(references) > 1 and policy is ReferencePolicy.STRICT:
        raise ReferenceBusError(references)
    return references[0]


def build_ptdf(
    system: SystemParameters,
    branches: list[BranchElement],
    buses: list[Bus],
    reference_policy: ReferencePolicy = ReferencePolicy.STRICT,
    zero_open_branches: bool = False,
) -> tuple[np.ndarray | None, csc_matrix]:
    """
    Build the PTDF matrix and the incidence matrix.

    Args:
        system: System parameters (bus count)
        branches: List of branch elements, numbered 1..len(branches)
        buses: List of buses, used to locate the reference bus
        reference_policy: How to resolve several reference buses
        zero_open_branches: Give out-of-service branches a zero row instead
            of the flow implied by their 1/x over the open terminals

    Returns:
        Tuple of (PTDF, incidence). PTDF is a dense branches x buses array,
        or None when no reference bus is marked.

    Raises:
        ReferenceBusError: Several reference buses under ReferencePolicy.STRICT
        IslandedNetworkError: The in-service network is not connected
    """
    n = system.bus_quantity
    n_branches = len(branches)

    A = build_incidence_matrix(system, branches)
    B = build_dc_susceptance_matrix(system, branches)

    slack = find_reference_bus(buses, reference_policy)
    if slack is None:
        logger.warning("Slack bus not identified in the Bus/Nodes list, can't build PTDF")
        return None, A

    references = get_reference_buses(buses)
    if len(references) > 1:
        logger.warning(f"Multiple reference buses {references}, using bus {slack}")

    islands = find_islands(system, branches, reference_bus=slack)
    if len(islands) > 1:
        raise IslandedNetworkError(islands)

    keep = np.array([k for k in range(n) if k != slack - 1], dtype=np.int64)

    if len(keep) == 0:
        S_red = np.zeros((n_branches, 0), dtype=float)
    else:
        B_red = B[keep, :][:, keep].toarray()
        A_red = A[keep, :].toarray()

        # rhs = A_red @ X^-1, so that PTDF^T = B_red^-1 @ rhs (B is symmetric)
        rhs = A_red * get_branch_susceptances(branches, zero_open_branches)[np.newaxis, :]

        try:
            S_red = np.linalg.solve(B_red, rhs).T
        except np.linalg.LinAlgError as e:
            raise IslandedNetworkError(islands, message=f"Reduced nodal matrix is singular: {e}") from e

    ptdf = np.insert(S_red, slack - 1, 0.0, axis=1)

    logger.info(f"PTDF: {n_branches} branches x {n} buses, reference bus {slack}")

    return ptdf, A
