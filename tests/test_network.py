import numpy as np
import pandas as pd
import pytest

import network_matrices.core.network as network_module
from network_matrices import (
    Network,
    Bus,
    BusType,
    SystemParameters,
    LineBranch,
    TransformerBranch,
    Transformer3WBranch,
    ReferencePolicy,
    NetworkDataError,
    ElementIndexError,
    ReferenceBusError,
    IslandedNetworkError,
)
from conftest import make_buses


def test_two_bus_network(two_bus):
    system, branches, buses = two_bus

    net = Network(system, branches, buses)

    y = 1 / complex(0.01, 0.1)
    np.testing.assert_allclose(net.Y_matrix.toarray(), [[y, -y], [-y, y]], rtol=1e-12)
    np.testing.assert_array_equal(net.max_flows, [100.0])
    assert net.n_branches == 1
    assert net.line_quantity == 1
    assert net.n_buses == 2
    assert net.reference_bus == 1
    assert net.has_ptdf
    assert net.ptdf[0, 0] == 0.0
    assert abs(net.ptdf[0, 1]) == pytest.approx(1.0)
    assert net.incidence is None


def test_missing_bus_type_fails_before_assembly(two_bus, monkeypatch):
    system, branches, _ = two_bus
    buses = [Bus(1, BusType.REF), Bus(2)]

    def fail(*args, **kwargs):
        raise AssertionError("assembly must not run")

    monkeypatch.setattr(network_module, "build_admittance_matrix", fail)

    with pytest.raises(NetworkDataError, match="AC network"):
        Network(system, branches, buses)


def test_no_reference_bus(three_bus_ring):
    system, branches, _ = three_bus_ring

    net = Network(system, branches, make_buses(3, reference=None), keep_incidence=True)

    assert net.ptdf is None
    assert not net.has_ptdf
    assert net.reference_bus is None
    assert net.incidence.shape == (3, 3)
    assert net.Y_matrix.shape == (3, 3)


def test_keep_incidence(three_bus_ring):
    system, branches, buses = three_bus_ring

    net = Network(system, branches, buses, keep_incidence=True)

    A = net.incidence.toarray()
    np.testing.assert_array_equal(A[:, 0], [1.0, -1.0, 0.0])
    np.testing.assert_array_equal(A[:, 2], [-1.0, 0.0, 1.0])


def test_bus_numbers_must_be_contiguous(three_bus_ring):
    system, branches, buses = three_bus_ring

    with pytest.raises(NetworkDataError):
        Network(system, branches, [buses[0], buses[1], Bus(2, BusType.PQ)])

    with pytest.raises(NetworkDataError):
        Network(system, branches, buses[:2])

    with pytest.raises(ElementIndexError):
        Network(system, branches, buses + [Bus(4, BusType.PQ)])

    with pytest.raises(ElementIndexError):
        Network(system, branches, [Bus(0, BusType.PQ)] + buses[1:])


def test_branch_numbers_must_be_contiguous(three_bus_ring):
    system, branches, buses = three_bus_ring
    renumbered = LineBranch(4, True, branches[2].terminals, x=0.3, rate=60.0)
    duplicated = LineBranch(1, True, branches[2].terminals, x=0.3, rate=60.0)

    with pytest.raises(ElementIndexError):
        Network(system, [branches[0], branches[1], renumbered], buses)

    with pytest.raises(NetworkDataError):
        Network(system, [branches[0], branches[1], duplicated], buses)


def test_terminal_outside_bus_range(three_bus_ring):
    system, branches, buses = three_bus_ring
    stray = LineBranch(3, True, (buses[0], Bus(7, BusType.PQ)), x=0.3, rate=60.0)

    with pytest.raises(IndexError):
        Network(system, [branches[0], branches[1], stray], buses)


def test_multiple_reference_buses(three_bus_ring):
    system, branches, _ = three_bus_ring
    buses = [Bus(1, BusType.REF), Bus(2, BusType.PQ), Bus(3, BusType.REF)]

    with pytest.raises(ReferenceBusError):
        Network(system, branches, buses)

    net = Network(system, branches, buses, reference_policy=ReferencePolicy.FIRST)
    assert net.reference_bus == 1
    assert np.all(net.ptdf[:, 0] == 0.0)


def test_islanded_network_fails():
    buses = make_buses(3)
    branches = [LineBranch(1, True, (buses[0], buses[1]), x=0.1, rate=100.0)]

    with pytest.raises(IslandedNetworkError):
        Network(SystemParameters(3), branches, buses)


def test_network_is_immutable(three_bus_ring):
    system, branches, buses = three_bus_ring
    net = Network(system, branches, buses)

    with pytest.raises(AttributeError):
        net.branches = ()
    with pytest.raises(AttributeError):
        net._ptdf = None
    with pytest.raises(AttributeError):
        del net.system
    with pytest.raises(ValueError):
        net.ptdf[0, 1] = 3.0
    with pytest.raises(ValueError):
        net.max_flows[0] = 3.0

    Y = net.Y_matrix
    Y[0, 0] = 0.0
    assert net.Y_matrix[0, 0] != 0.0


def test_rebuild_is_bit_identical():
    buses = make_buses(4, reference=3)
    branches = [
        LineBranch(1, True, (buses[0], buses[1]), r=0.013, x=0.117, b=0.03, rate=100.0),
        TransformerBranch(2, True, (buses[1], buses[2]), r=0.002, x=0.071, zb=0.001, tap=1.025, alpha=0.02, rate=90.0),
        LineBranch(3, True, (buses[2], buses[3]), r=0.021, x=0.193, b=0.05, rate=70.0),
        LineBranch(4, True, (buses[3], buses[0]), r=0.017, x=0.151, b=0.04, rate=70.0),
        LineBranch(5, False, (buses[0], buses[2]), r=0.011, x=0.101, b=0.0, rate=30.0),
    ]
    system = SystemParameters(4)

    first = Network(system, branches, buses)
    second = Network(system, branches, buses)

    assert (first.Y_matrix != second.Y_matrix).nnz == 0
    assert np.array_equal(first.max_flows, second.max_flows)
    assert np.array_equal(first.ptdf, second.ptdf)


def test_status_false_removes_admittance_keeps_rating(three_bus_ring):
    system, branches, buses = three_bus_ring
    opened = [LineBranch(b.number, b.number != 2, b.terminals, r=b.r, x=b.x, b=b.b, rate=b.rate) for b in branches]

    closed_net = Network(system, branches, buses)
    open_net = Network(system, opened, buses)

    np.testing.assert_array_equal(open_net.max_flows, closed_net.max_flows)
    assert open_net.Y_matrix[1, 2] == 0.0
    assert closed_net.Y_matrix[1, 2] != 0.0


def test_string_bus_types(two_bus):
    system, branches, _ = two_bus
    buses = [Bus(1, "SF"), Bus(2, "PQ")]

    net = Network(system, branches, buses)

    assert net.reference_bus == 1


def test_counts_and_summary(capsys):
    buses = make_buses(4)
    branches = [
        LineBranch(1, True, (buses[0], buses[1]), x=0.1, rate=100.0),
        TransformerBranch(2, True, (buses[1], buses[2]), x=0.1, rate=100.0),
        Transformer3WBranch(3, True, (buses[2], buses[3], buses[0]), x=(0.05, 0.05, 0.1), rate=(50.0, 30.0, 20.0)),
    ]

    net = Network(SystemParameters(4), branches, buses, verbose=True)

    assert net.n_lines == 1
    assert net.n_transformers == 1
    assert net.n_transformers_3w == 1
    out = capsys.readouterr().out
    assert "Transformers (3W):  1" in out
    assert "Reference bus:      1" in out
    assert "has_ptdf=True" in repr(net)


def test_to_frames(three_bus_ring):
    system, branches, buses = three_bus_ring
    net = Network(system, branches, buses, keep_incidence=True)

    frames = net.to_frames()

    assert set(frames) == {'ybus', 'branches', 'ptdf', 'incidence'}
    assert isinstance(frames['ptdf'], pd.DataFrame)
    assert frames['ptdf'].shape == (3, 3)
    assert frames['ptdf'].loc[1, 2] == pytest.approx(-5.0 / 6.0)
    assert list(frames['branches']['max_flow']) == [100.0, 80.0, 60.0]


def test_diagnose(three_bus_ring, capsys):
    system, branches, buses = three_bus_ring
    net = Network(system, branches, buses)

    diag = net.diagnose(print_results=True)

    assert diag['reference_buses'] == [1]
    assert diag['islands'] == [[1, 2, 3]]
    assert diag['empty_diagonal_buses'] == []
    assert "Network diagnostics:" in capsys.readouterr().out


def test_branches_cannot_be_switched_after_build(three_bus_ring):
    system, branches, buses = three_bus_ring
    net = Network(system, branches, buses)
    ptdf = net.ptdf.copy()

    with pytest.raises(AttributeError):
        net.branches[0].status = False

    assert net.branches[0].status
    np.testing.assert_array_equal(net.ptdf, ptdf)


def test_zero_open_branches_option(three_bus_ring):
    system, branches, buses = three_bus_ring
    opened = [branches[0], branches[1], LineBranch(3, False, branches[2].terminals, x=0.3, rate=60.0)]

    net = Network(system, opened, buses)
    zeroed = Network(system, opened, buses, zero_open_branches=True)

    np.testing.assert_allclose(net.ptdf[2], [0.0, 1.0 / 3.0, 1.0], atol=1e-12)
    np.testing.assert_allclose(zeroed.ptdf[2], 0.0)
    np.testing.assert_allclose(zeroed.ptdf[:2], net.ptdf[:2], atol=1e-12)
    assert (net.Y_matrix != zeroed.Y_matrix).nnz == 0
