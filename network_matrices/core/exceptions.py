"""
Exceptions raised while building a network model.

Fatal conditions abort construction; degraded ones (no reference bus,
3-winding approximation) are only logged and never raise.
"""

import numpy as np


class NetworkDataError(ValueError):
    """Bus or branch data cannot describe an AC network."""
    pass


class ElementIndexError(NetworkDataError, IndexError):
    """A bus or branch number falls outside its contiguous [1, N] range."""

    def __init__(self, kind: str, number: int, upper: int, context: str = ""):
        self.kind = kind
        self.number = number
        self.upper = upper
        message = f"{kind} number {number} outside [1, {upper}]"
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


class ReferenceBusError(NetworkDataError):
    """More than one bus is marked as the network reference."""

    def __init__(self, bus_numbers: list[int]):
        self.bus_numbers = bus_numbers
        super().__init__(
            f"Multiple reference buses found: {bus_numbers}. "
            f"Mark a single bus as reference or use ReferencePolicy.FIRST"
        )


class IslandedNetworkError(np.linalg.LinAlgError):
    """Reduced nodal matrix is singular because the network is split into islands."""

    def __init__(self, islands: list[list[int]] | None = None, message: str | None = None):
        self.islands = islands or []
        if message is None:
            message = f"Network has {len(self.islands)} islands, reduced nodal matrix is singular"
            if self.islands:
                message += f": {self.islands}"
        super().__init__(message)
