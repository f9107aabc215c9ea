"""
Network diagnostics.

Collects the data issues that make the admittance or PTDF construction fail
or degrade: islands, zero impedances, missing or repeated reference buses.
"""

import logging

import numpy as np
from scipy.sparse import spmatrix

from ..core.elements import Bus, BranchElement, SystemParameters, Transformer3WBranch
from .sensitivity import get_reference_buses
from .topology import find_islands

logger = logging.getLogger(__name__)


def diagnose_network(
    system: SystemParameters,
    branches: list[BranchElement],
    buses: list[Bus],
    Y: spmatrix | None = None,
) -> dict:
    """
    Run network diagnostics.

    Args:
        system: System parameters (bus count)
        branches: List of branch elements
        buses: List of buses
        Y: Optional admittance matrix, checked for empty diagonal entries

    Returns:
        Dictionary with all diagnostic results
    """
    references = get_reference_buses(buses)
    reference_bus = references[0] if references else None

    islands = find_islands(system, branches, reference_bus=reference_bus)
    isolated = [island[0] for island in islands if len(island) == 1]

    zero_impedance = []
    zero_reactance = []
    for branch in branches:
        if not branch.status:
            continue
        if isinstance(branch, Transformer3WBranch):
            r = branch.r[0] + branch.r[1]
        else:
            r = branch.r
        if branch.series_reactance == 0:
            zero_reactance.append(branch.number)
            if r == 0:
                zero_impedance.append(branch.number)

    diag = {
        'n_buses': system.bus_quantity,
        'n_branches': len(branches),
        'reference_buses': references,
        'untyped_buses': [bus.number for bus in buses if bus.bus_type is None],
        'islands': islands,
        'isolated_buses': isolated,
        'zero_impedance_branches': zero_impedance,
        'zero_reactance_branches': zero_reactance,
        'out_of_service_branches': [b.number for b in branches if not b.status],
        'transformers_3w': [b.number for b in branches if isinstance(b, Transformer3WBranch)],
    }

    if Y is not None:
        diagonal = Y.diagonal()
        diag['empty_diagonal_buses'] = [int(k) + 1 for k in np.flatnonzero(diagonal == 0)]

    n_issues = sum(
        len(diag[key]) for key in ('untyped_buses', 'zero_impedance_branches', 'zero_reactance_branches')
    ) + (len(islands) - 1)
    logger.info(f"Diagnostics: {n_issues} issues found")

    return diag


def print_diagnostics(diag: dict) -> None:
    """Print a formatted diagnostic report."""
    print("Network diagnostics:")
    print(f"  Buses:              {diag['n_buses']}")
    print(f"  Branches:           {diag['n_branches']}")

    if not diag['reference_buses']:
        print("  Reference bus:      none (PTDF not available)")
    elif len(diag['reference_buses']) == 1:
        print(f"  Reference bus:      {diag['reference_buses'][0]}")
    else:
        print(f"  Reference buses:    {diag['reference_buses']} (ambiguous)")

    if len(diag['islands']) > 1:
        print(f"  Islands:            {len(diag['islands'])}")
        for island in diag['islands']:
            print(f"    {island}")
    if diag['isolated_buses']:
        print(f"  Isolated buses:     {diag['isolated_buses']}")
    if diag['untyped_buses']:
        print(f"  Untyped buses:      {diag['untyped_buses']}")
    if diag['zero_impedance_branches']:
        print(f"  Zero impedance:     {diag['zero_impedance_branches']}")
    if diag['zero_reactance_branches']:
        print(f"  Zero reactance:     {diag['zero_reactance_branches']}")
    if diag['out_of_service_branches']:
        print(f"  Out of service:     {diag['out_of_service_branches']}")
    if diag['transformers_3w']:
        print(f"  3W transformers:    {diag['transformers_3w']} (2-winding approximation)")
    if diag.get('empty_diagonal_buses'):
        print(f"  Empty Y diagonal:   {diag['empty_diagonal_buses']}")
