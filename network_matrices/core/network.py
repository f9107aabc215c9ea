"""
Network aggregate.

This module provides the Network class that validates the bus and branch
data, runs the admittance and sensitivity builders, and keeps the results
as a read-only snapshot.
"""

import logging

import numpy as np
import pandas as pd
from scipy.sparse import csc_matrix

from .elements import Bus, BranchElement, SystemParameters, LineBranch, TransformerBranch, Transformer3WBranch
from ..matrices.builder import build_admittance_matrix
from ..matrices.sensitivity import build_ptdf, find_reference_bus, ReferencePolicy
from ..matrices.validation import validate_bus_types, validate_bus_numbering, validate_branch_numbering
from ..matrices.diagnostics import diagnose_network, print_diagnostics
from ..utils.helpers import ptdf_to_frame, admittance_to_frame, incidence_to_frame, branch_table

logger = logging.getLogger(__name__)


class Network:
    """
    Steady-state network model built once from buses and branches.

    Holds:
    - The complex admittance matrix (Ybus)
    - The branch rating vector
    - The PTDF matrix, or None when no reference bus is marked
    - Optionally the node-branch incidence matrix

    The instance cannot be modified after construction; a topology change
    requires building a new Network.
    """

    def __init__(
        self,
        system: SystemParameters,
        branches: list[BranchElement],
        buses: list[Bus],
        keep_incidence: bool = False,
        reference_policy: ReferencePolicy = ReferencePolicy.STRICT,
        zero_open_branches: bool = False,
        verbose: bool = False,
    ):
        """
        Build the network matrices.

        Args:
            system: System parameters (bus count, base power)
            branches: Branch elements numbered 1..len(branches)
            buses: Buses numbered 1..system.bus_quantity, all classified
            keep_incidence: If True, keep the incidence matrix on the instance
            reference_policy: How to resolve several buses marked as reference
            zero_open_branches: If True, out-of-service branches get a zero PTDF row
            verbose: If True, print a network summary to console

        Raises:
            NetworkDataError: Missing classification or inconsistent numbering
            ElementIndexError: Bus or branch number outside its range
            ReferenceBusError: Several reference buses under ReferencePolicy.STRICT
            IslandedNetworkError: Disconnected network while building the PTDF
        """
        validate_bus_types(buses)
        validate_bus_numbering(system, buses)
        validate_branch_numbering(system, branches)

        self.system = system
        self.branches = tuple(branches)
        self.buses = tuple(buses)
        self.reference_policy = reference_policy
        self.zero_open_branches = zero_open_branches

        Y, max_flows = build_admittance_matrix(system, self.branches)
        ptdf, incidence = build_ptdf(
            system, self.branches, self.buses, reference_policy, zero_open_branches=zero_open_branches
        )

        max_flows.setflags(write=False)
        if ptdf is not None:
            ptdf.setflags(write=False)

        self._Y = Y
        self._max_flows = max_flows
        self._ptdf = ptdf
        self._incidence = incidence if keep_incidence else None
        self._reference_bus = find_reference_bus(self.buses, reference_policy)

        if verbose:
            self._print_network_summary("Network built:")

        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"Network is immutable, cannot set '{name}'. Build a new Network instead")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        raise AttributeError(f"Network is immutable, cannot delete '{name}'")

    def __repr__(self) -> str:
        return (f"Network(n_buses={self.n_buses}, n_branches={self.n_branches}, "
                f"reference_bus={self._reference_bus}, has_ptdf={self.has_ptdf})")

    def _print_network_summary(self, title: str = "Network summary:") -> None:
        """Print a summary of network elements to console."""
        print(f"{title}")
        if self.n_lines > 0:
            print(f"  Lines:              {self.n_lines}")
        if self.n_transformers > 0:
            print(f"  Transformers (2W):  {self.n_transformers}")
        if self.n_transformers_3w > 0:
            print(f"  Transformers (3W):  {self.n_transformers_3w}")
        n_out = len([b for b in self.branches if not b.status])
        if n_out > 0:
            print(f"  Out of service:     {n_out}")
        print(f"  Buses:              {self.n_buses}")
        if self._reference_bus is not None:
            print(f"  Reference bus:      {self._reference_bus}")
        else:
            print("  Reference bus:      none (PTDF not built)")

    @property
    def Y_matrix(self) -> csc_matrix:
        """Complex admittance matrix (copy, bus_quantity x bus_quantity)."""
        return self._Y.copy()

    @property
    def ybus(self) -> csc_matrix:
        return self.Y_matrix

    @property
    def max_flows(self) -> np.ndarray:
        """Branch ratings [MVA] indexed by branch number - 1 (read-only)."""
        return self._max_flows

    @property
    def ptdf(self) -> np.ndarray | None:
        """PTDF matrix (branches x buses, read-only), or None without a reference bus."""
        return self._ptdf

    @property
    def has_ptdf(self) -> bool:
        return self._ptdf is not None

    @property
    def incidence(self) -> csc_matrix | None:
        """Incidence matrix (buses x branches), only kept with keep_incidence=True."""
        if self._incidence is None:
            return None
        return self._incidence.copy()

    @property
    def reference_bus(self) -> int | None:
        return self._reference_bus

    @property
    def n_buses(self) -> int:
        """Number of buses in the network."""
        return self.system.bus_quantity

    @property
    def n_branches(self) -> int:
        """Number of branches, in service or not."""
        return len(self.branches)

    @property
    def line_quantity(self) -> int:
        return self.n_branches

    @property
    def n_lines(self) -> int:
        """Number of lines in the network."""
        return len([b for b in self.branches if isinstance(b, LineBranch)])

    @property
    def n_transformers(self) -> int:
        """Number of 2-winding transformers in the network."""
        return len([b for b in self.branches if isinstance(b, TransformerBranch)])

    @property
    def n_transformers_3w(self) -> int:
        """Number of 3-winding transformers in the network."""
        return len([b for b in self.branches if isinstance(b, Transformer3WBranch)])

    def to_frames(self) -> dict[str, pd.DataFrame]:
        """
        Labelled pandas views of the results.

        Returns:
            Dictionary with 'ybus' and 'branches' frames, plus 'ptdf' and
            'incidence' when those matrices are available
        """
        frames = {
            'ybus': admittance_to_frame(self._Y),
            'branches': branch_table(list(self.branches), self._max_flows),
        }
        if self._ptdf is not None:
            frames['ptdf'] = ptdf_to_frame(self._ptdf)
        if self._incidence is not None:
            frames['incidence'] = incidence_to_frame(self._incidence)
        return frames

    def diagnose(self, print_results: bool = True) -> dict:
        """
        Run network diagnostics on the data this network was built from.

        Args:
            print_results: If True, print formatted diagnostic report

        Returns:
            Dictionary with all diagnostic results
        """
        diag = diagnose_network(
            system=self.system,
            branches=list(self.branches),
            buses=list(self.buses),
            Y=self._Y,
        )

        if print_results:
            print_diagnostics(diag)

        return diag
