"""
Network Matrices Library
========================

A Python library for building the steady-state network model of a power grid.

Features:
- Bus and branch records (lines, 2-winding and 3-winding transformers)
- Sparse complex admittance matrix (Ybus) in per-unit
- Branch rating vector
- Node-branch incidence matrix and DC Power Transfer Distribution Factors (PTDF)
- Structural validation and network diagnostics

Quick Start
-----------

Using the high-level Network class:

    from network_matrices import Network, SystemParameters, Bus, BusType, LineBranch

    buses = [Bus(1, BusType.REF), Bus(2, BusType.PQ)]
    line = LineBranch(1, True, (buses[0], buses[1]), r=0.01, x=0.1, b=0.0, rate=100.0)

    net = Network(SystemParameters(bus_quantity=2), [line], buses)
    net.Y_matrix      # scipy.sparse complex matrix
    net.ptdf          # numpy array, or None without a reference bus

Using individual functions:

    from network_matrices import build_admittance_matrix, build_ptdf

    Y, max_flows = build_admittance_matrix(system, branches)
    ptdf, incidence = build_ptdf(system, branches, buses)
"""

__version__ = "0.1.0"

# Core classes
from .core import (
    Network,
    BusType,
    Bus,
    SystemParameters,
    BranchElement,
    LineBranch,
    TransformerBranch,
    Transformer3WBranch,
    NetworkDataError,
    ElementIndexError,
    ReferenceBusError,
    IslandedNetworkError,
)

# Matrix functions
from .matrices import (
    SparseTripletBuilder,
    build_admittance_matrix,
    ReferencePolicy,
    build_incidence_matrix,
    build_dc_susceptance_matrix,
    find_reference_bus,
    build_ptdf,
    find_islands,
    diagnose_network,
    print_diagnostics,
)

# Utilities
from .utils import (
    ptdf_to_frame,
    admittance_to_frame,
    incidence_to_frame,
    branch_table,
)

__all__ = [
    # Version
    '__version__',

    # Core classes
    'Network',
    'BusType',
    'Bus',
    'SystemParameters',
    'BranchElement',
    'LineBranch',
    'TransformerBranch',
    'Transformer3WBranch',

    # Exceptions
    'NetworkDataError',
    'ElementIndexError',
    'ReferenceBusError',
    'IslandedNetworkError',

    # Matrix functions
    'SparseTripletBuilder',
    'build_admittance_matrix',
    'ReferencePolicy',
    'build_incidence_matrix',
    'build_dc_susceptance_matrix',
    'find_reference_bus',
    'build_ptdf',
    'find_islands',
    'diagnose_network',
    'print_diagnostics',

    # Utilities
    'ptdf_to_frame',
    'admittance_to_frame',
    'incidence_to_frame',
    'branch_table',
]
