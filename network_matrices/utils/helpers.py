"""
pandas views of the network matrices.
"""
import logging

import numpy as np
import pandas as pd
from scipy.sparse import spmatrix

from ..core.elements import BranchElement, Transformer3WBranch

logger = logging.getLogger(__name__)


def _bus_index(n_buses: int) -> pd.Index:
    return pd.Index(range(1, n_buses + 1), name='bus')


def _branch_index(n_branches: int) -> pd.Index:
    return pd.Index(range(1, n_branches + 1), name='branch')


def ptdf_to_frame(ptdf: np.ndarray) -> pd.DataFrame:
    """
    Label a PTDF matrix.

    Parameters:
    -----------
    ptdf : np.ndarray
        Branches x buses PTDF matrix

    Returns:
    --------
    pd.DataFrame indexed by branch number with one column per bus number
    """
    n_branches, n_buses = ptdf.shape
    return pd.DataFrame(ptdf, index=_branch_index(n_branches), columns=_bus_index(n_buses))


def admittance_to_frame(Y: spmatrix | np.ndarray) -> pd.DataFrame:
    """Dense complex Y-matrix labelled by bus number on both axes."""
    dense = Y.toarray() if hasattr(Y, 'toarray') else np.asarray(Y)
    n = dense.shape[0]
    return pd.DataFrame(dense, index=_bus_index(n), columns=_bus_index(n))


def incidence_to_frame(A: spmatrix) -> pd.DataFrame:
    """Incidence matrix labelled by bus (rows) and branch (columns) number."""
    n_buses, n_branches = A.shape
    return pd.DataFrame(A.toarray(), index=_bus_index(n_buses), columns=_branch_index(n_branches))


def branch_table(branches: list[BranchElement], max_flows: np.ndarray | None = None) -> pd.DataFrame:
    """
    One row per branch with its type, terminals, status and series parameters.

    For 3-winding transformers r and x are the series values between
    terminals 1 and 2 and the third bus is listed separately.
    """
    rows = []
    for branch in branches:
        if isinstance(branch, Transformer3WBranch):
            r = branch.r[0] + branch.r[1]
            third_bus = branch.third_bus.number
        else:
            r = branch.r
            third_bus = None
        rows.append({
            'branch': branch.number,
            'type': type(branch).__name__,
            'from_bus': branch.from_bus.number,
            'to_bus': branch.to_bus.number,
            'third_bus': third_bus,
            'status': bool(branch.status),
            'r': r,
            'x': branch.series_reactance,
            'rate': branch.max_flow,
        })

    columns = ['branch', 'type', 'from_bus', 'to_bus', 'third_bus', 'status', 'r', 'x', 'rate']
    table = pd.DataFrame(rows, columns=columns).set_index('branch').sort_index()

    if max_flows is not None:
        table['max_flow'] = pd.Series(max_flows, index=_branch_index(len(max_flows)))

    logger.debug(f"Branch table with {len(table)} rows")
    return table
