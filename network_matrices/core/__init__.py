"""
Core network elements and classes.
"""

from .elements import (
    BusType,
    Bus,
    SystemParameters,
    BranchElement,
    LineBranch,
    TransformerBranch,
    Transformer3WBranch,
)

from .exceptions import (
    NetworkDataError,
    ElementIndexError,
    ReferenceBusError,
    IslandedNetworkError,
)

from .network import Network

__all__ = [
    'BusType',
    'Bus',
    'SystemParameters',
    'BranchElement',
    'LineBranch',
    'TransformerBranch',
    'Transformer3WBranch',
    'NetworkDataError',
    'ElementIndexError',
    'ReferenceBusError',
    'IslandedNetworkError',
    'Network',
]
