"""
Admittance and sensitivity matrix building functions.
"""

from .builder import (
    SparseTripletBuilder,
    build_admittance_matrix,
)

from .sensitivity import (
    ReferencePolicy,
    build_incidence_matrix,
    build_dc_susceptance_matrix,
    find_reference_bus,
    build_ptdf,
)

from .validation import (
    validate_bus_types,
    validate_bus_numbering,
    validate_branch_numbering,
)

from .topology import find_islands

from .diagnostics import (
    diagnose_network,
    print_diagnostics,
)

__all__ = [
    'SparseTripletBuilder',
    'build_admittance_matrix',
    'ReferencePolicy',
    'build_incidence_matrix',
    'build_dc_susceptance_matrix',
    'find_reference_bus',
    'build_ptdf',
    'validate_bus_types',
    'validate_bus_numbering',
    'validate_branch_numbering',
    'find_islands',
    'diagnose_network',
    'print_diagnostics',
]
