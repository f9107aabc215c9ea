"""
Structural checks on bus and branch data.

Bus and branch numbers double as matrix indices, so they must be contiguous
in [1, N]. Electrical plausibility of the parameters is not checked here.
"""

import logging
from collections import Counter

from ..core.elements import Bus, BranchElement, SystemParameters
from ..core.exceptions import NetworkDataError, ElementIndexError

logger = logging.getLogger(__name__)


def validate_bus_types(buses: list[Bus]) -> None:
    """Every bus must carry a classification to build an AC network."""
    untyped = [bus.number for bus in buses if bus.bus_type is None]
    if untyped:
        raise NetworkDataError(
            f"Bus/Nodes data does not contain information to build an AC network "
            f"(buses without classification: {untyped})"
        )


def validate_bus_numbering(system: SystemParameters, buses: list[Bus]) -> None:
    """Bus numbers must cover [1, bus_quantity] exactly once."""
    n = system.bus_quantity
    for bus in buses:
        if not 1 <= bus.number <= n:
            raise ElementIndexError("Bus", bus.number, n)

    counts = Counter(bus.number for bus in buses)
    duplicated = sorted(number for number, count in counts.items() if count > 1)
    if duplicated:
        raise NetworkDataError(f"Duplicated bus numbers: {duplicated}")

    missing = sorted(set(range(1, n + 1)) - set(counts))
    if missing:
        raise NetworkDataError(
            f"Bus numbers must be contiguous in [1, {n}], missing: {missing}"
        )


def check_branch_indices(branch: BranchElement, n_buses: int, n_branches: int) -> None:
    """Raise if the branch number or any of its terminals cannot index the matrices."""
    context = f"{type(branch).__name__} {branch.number}"
    if not 1 <= branch.number <= n_branches:
        raise ElementIndexError("Branch", branch.number, n_branches, context)
    for bus_number in branch.bus_numbers:
        if not 1 <= bus_number <= n_buses:
            raise ElementIndexError("Terminal bus", bus_number, n_buses, context)


def validate_branch_numbering(system: SystemParameters, branches: list[BranchElement]) -> None:
    """Branch numbers must cover [1, len(branches)] exactly once, with terminals in range."""
    n_branches = len(branches)
    for branch in branches:
        check_branch_indices(branch, system.bus_quantity, n_branches)

    counts = Counter(branch.number for branch in branches)
    duplicated = sorted(number for number, count in counts.items() if count > 1)
    if duplicated:
        raise NetworkDataError(f"Duplicated branch numbers: {duplicated}")

    logger.debug(f"Validated {n_branches} branches against {system.bus_quantity} buses")
