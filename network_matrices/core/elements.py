"""
Element definitions for power system network components.

This module contains the records the matrix builders read:
- Buses and their classification
- Branch elements (lines, 2-winding and 3-winding transformers)

All electrical quantities are per-unit on the system base, phase angles
are in radians and ratings in MVA.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar
import cmath

from .exceptions import NetworkDataError


class BusType(Enum):
    """Bus classification."""
    REF = "SF"  # Reference (slack) bus
    PV = "PV"
    PQ = "PQ"


@dataclass(frozen=True)
class SystemParameters:
    """System-wide quantities shared by every matrix dimension."""
    bus_quantity: int
    base_mva: float = 100.0

    def __post_init__(self):
        if self.bus_quantity <= 0:
            raise NetworkDataError(f"bus_quantity must be positive, got {self.bus_quantity}")


@dataclass(frozen=True)
class Bus:
    """
    Network node.

    The bus number doubles as a 1-based matrix index, so numbers must be
    contiguous in [1, bus_quantity]. The classification may be left unset,
    in which case the bus cannot be part of an AC network.
    """
    number: int
    bus_type: BusType | None = None
    name: str = ""

    def __post_init__(self):
        if isinstance(self.bus_type, str):
            object.__setattr__(self, 'bus_type', _parse_bus_type(self.bus_type))

    @property
    def is_reference(self) -> bool:
        return self.bus_type is BusType.REF


def _parse_bus_type(value: str) -> BusType:
    try:
        return BusType(value)
    except ValueError:
        pass
    try:
        return BusType[value.upper()]
    except KeyError:
        raise NetworkDataError(f"Unknown bus classification '{value}'") from None


@dataclass(frozen=True)
class BranchElement(ABC):
    """Abstract base class for elements connecting buses."""
    n_terminals: ClassVar[int] = 2

    number: int
    status: bool
    terminals: tuple[Bus, ...]

    def __post_init__(self):
        object.__setattr__(self, 'terminals', tuple(self.terminals))
        if len(self.terminals) != self.n_terminals:
            raise NetworkDataError(
                f"{type(self).__name__} {self.number}: expected {self.n_terminals} terminals, "
                f"got {len(self.terminals)}"
            )

    @property
    def bus_numbers(self) -> tuple[int, ...]:
        return tuple(bus.number for bus in self.terminals)

    @property
    def from_bus(self) -> Bus:
        return self.terminals[0]

    @property
    def to_bus(self) -> Bus:
        return self.terminals[1]

    @property
    @abstractmethod
    def max_flow(self) -> float:
        """Thermal rating written into the rating vector [MVA]."""

    @property
    @abstractmethod
    def series_reactance(self) -> float:
        """Reactance seen between terminals 1 and 2 in the DC model [pu]."""

    @abstractmethod
    def get_y_matrix_entries(self) -> tuple[complex, complex, complex, complex]:
        """
        Return Y-matrix contributions between terminals 1 and 2: (Yii, Yjj, Yij, Yji).

        Contributions are those of the element in service; the builder
        decides whether to stamp them.
        """

    def get_dc_susceptance(self) -> float:
        """Series susceptance 1/x used by the DC (reactance-only) model."""
        return 1.0 / self.series_reactance


@dataclass(frozen=True)
class LineBranch(BranchElement):
    """Transmission line, pi-model with the total charging susceptance split between both ends."""
    r: float = 0.0
    x: float = 0.0
    b: float = 0.0
    rate: float = 0.0

    @property
    def max_flow(self) -> float:
        return self.rate

    @property
    def series_reactance(self) -> float:
        return self.x

    def get_y_matrix_entries(self) -> tuple[complex, complex, complex, complex]:
        """Include shunt admittance (pi-model)"""
        y = 1 / complex(self.r, self.x)
        y_shunt = 1j * self.b / 2
        return (y + y_shunt, y + y_shunt, -y, -y)


@dataclass(frozen=True)
class TransformerBranch(BranchElement):
    """
    Two-winding transformer element.

    The equivalent circuit places the series impedance on the high voltage
    (terminal 1) side, and allocates iron losses and magnetizing susceptance
    ``zb`` to the primary.

    With y = 1/(r + jx), t = tap, c = 1/t and y_a = y / (t * e^(j*alpha)):
        Y_ii = y_a + y*c*(c - 1) + zb
        Y_jj = y_a + y*(1 - c)
        Y_ij = Y_ji = -y_a

    For t = 1 and alpha = 0 this is the line model with zb on terminal 1.
    """
    r: float = 0.0
    x: float = 0.0
    zb: float = 0.0
    tap: float = 1.0   # [0 - 2]
    alpha: float = 0.0  # [radians]
    rate: float = 0.0

    @property
    def max_flow(self) -> float:
        return self.rate

    @property
    def series_reactance(self) -> float:
        return self.x

    def get_y_matrix_entries(self) -> tuple[complex, complex, complex, complex]:
        y = 1 / complex(self.r, self.x)
        y_a = y / (self.tap * cmath.exp(1j * self.alpha))
        c = 1 / self.tap

        Yii = y_a + y * c * (c - 1) + self.zb
        Yjj = y_a + y * (1 - c)
        Yij = -y_a
        return (Yii, Yjj, Yij, Yij)


@dataclass(frozen=True)
class Transformer3WBranch(BranchElement):
    """
    Three-winding transformer element.

    Parameters are given per winding, in terminal order. Only the path
    between terminals 1 and 2 is folded into the matrices: the series
    impedances of windings 1 and 2 are added (winding 3 open) and the
    result is stamped like a line without charging. Taps, phase shift and
    magnetizing branches are not modelled, and the builder logs a warning
    for every 3-winding transformer it stamps.
    """
    n_terminals: ClassVar[int] = 3

    r: tuple[float, float, float] = (0.0, 0.0, 0.0)
    x: tuple[float, float, float] = (0.0, 0.0, 0.0)
    zb: tuple[float, float, float] = (0.0, 0.0, 0.0)
    tap: tuple[float, float, float] = (1.0, 1.0, 1.0)
    alpha: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rate: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self):
        super().__post_init__()
        for name in ('r', 'x', 'zb', 'tap', 'alpha', 'rate'):
            value = tuple(getattr(self, name))
            if len(value) != 3:
                raise NetworkDataError(
                    f"Transformer3WBranch {self.number}: '{name}' needs one value per winding, got {len(value)}"
                )
            object.__setattr__(self, name, value)

    @property
    def third_bus(self) -> Bus:
        return self.terminals[2]

    @property
    def max_flow(self) -> float:
        return self.rate[0]

    @property
    def series_reactance(self) -> float:
        return self.x[0] + self.x[1]

    def get_y_matrix_entries(self) -> tuple[complex, complex, complex, complex]:
        y = 1 / complex(self.r[0] + self.r[1], self.series_reactance)
        return (y, y, -y, -y)
