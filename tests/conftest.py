import pytest

from network_matrices import Bus, BusType, LineBranch, SystemParameters


def make_buses(n: int, reference: int | None = 1) -> list[Bus]:
    return [Bus(k, BusType.REF if k == reference else BusType.PQ) for k in range(1, n + 1)]


@pytest.fixture
def two_bus():
    """Two buses joined by one line, bus 1 is the reference."""
    buses = make_buses(2)
    line = LineBranch(1, True, (buses[0], buses[1]), r=0.01, x=0.1, b=0.0, rate=100.0)
    return SystemParameters(bus_quantity=2), [line], buses


@pytest.fixture
def three_bus_ring():
    """
    Three buses in a ring, bus 1 is the reference.

        1 --(x=0.1)-- 2 --(x=0.2)-- 3 --(x=0.3)-- 1
    """
    buses = make_buses(3)
    branches = [
        LineBranch(1, True, (buses[0], buses[1]), r=0.0, x=0.1, b=0.0, rate=100.0),
        LineBranch(2, True, (buses[1], buses[2]), r=0.0, x=0.2, b=0.0, rate=80.0),
        LineBranch(3, True, (buses[2], buses[0]), r=0.0, x=0.3, b=0.0, rate=60.0),
    ]
    return SystemParameters(bus_quantity=3), branches, buses
