import numpy as np
import pandas as pd

from network_matrices import (
    Bus,
    BusType,
    SystemParameters,
    LineBranch,
    TransformerBranch,
    Transformer3WBranch,
    build_admittance_matrix,
    diagnose_network,
    print_diagnostics,
    ptdf_to_frame,
    admittance_to_frame,
    branch_table,
)
from conftest import make_buses


def test_diagnose_reports_data_issues(capsys):
    buses = [Bus(1, BusType.REF), Bus(2, BusType.PQ), Bus(3), Bus(4, BusType.REF), Bus(5, BusType.PV)]
    branches = [
        LineBranch(1, True, (buses[0], buses[1]), r=0.0, x=0.0, rate=100.0),
        LineBranch(2, True, (buses[1], buses[2]), r=0.01, x=0.0, rate=100.0),
        LineBranch(3, False, (buses[2], buses[3]), r=0.01, x=0.1, rate=100.0),
        Transformer3WBranch(4, True, (buses[3], buses[4], buses[0]), x=(0.1, 0.1, 0.1)),
    ]

    diag = diagnose_network(SystemParameters(5), branches, buses)

    assert diag['reference_buses'] == [1, 4]
    assert diag['untyped_buses'] == [3]
    assert diag['islands'] == [[1, 2, 3], [4, 5]]
    assert diag['isolated_buses'] == []
    assert diag['zero_impedance_branches'] == [1]
    assert diag['zero_reactance_branches'] == [1, 2]
    assert diag['out_of_service_branches'] == [3]
    assert diag['transformers_3w'] == [4]
    assert 'empty_diagonal_buses' not in diag

    print_diagnostics(diag)
    out = capsys.readouterr().out
    assert "Reference buses:    [1, 4] (ambiguous)" in out
    assert "Islands:            2" in out


def test_diagnose_empty_diagonal():
    buses = make_buses(3)
    branches = [LineBranch(1, True, (buses[0], buses[1]), r=0.01, x=0.1, rate=100.0)]
    system = SystemParameters(3)
    Y, _ = build_admittance_matrix(system, branches)

    diag = diagnose_network(system, branches, buses, Y=Y)

    assert diag['empty_diagonal_buses'] == [3]
    assert diag['isolated_buses'] == [3]


def test_ptdf_frame_labels():
    frame = ptdf_to_frame(np.array([[0.0, -1.0, -0.5], [0.0, 0.0, -0.5]]))

    assert frame.index.name == 'branch'
    assert frame.columns.name == 'bus'
    assert list(frame.index) == [1, 2]
    assert list(frame.columns) == [1, 2, 3]
    assert frame.loc[2, 3] == -0.5


def test_admittance_frame(two_bus):
    system, branches, _ = two_bus
    Y, _ = build_admittance_matrix(system, branches)

    frame = admittance_to_frame(Y)

    assert frame.shape == (2, 2)
    assert frame.loc[1, 2] == Y[0, 1]


def test_branch_table():
    buses = make_buses(3)
    branches = [
        TransformerBranch(2, True, (buses[1], buses[2]), r=0.002, x=0.05, rate=90.0),
        LineBranch(1, False, (buses[0], buses[1]), r=0.01, x=0.1, rate=100.0),
        Transformer3WBranch(3, True, (buses[0], buses[1], buses[2]), r=(0.01, 0.02, 0.0), x=(0.1, 0.2, 0.3),
                            rate=(40.0, 20.0, 20.0)),
    ]

    table = branch_table(branches)

    assert isinstance(table, pd.DataFrame)
    assert list(table.index) == [1, 2, 3]
    assert table.loc[1, 'type'] == 'LineBranch'
    assert not table.loc[1, 'status']
    assert table.loc[2, 'from_bus'] == 2
    assert table.loc[3, 'x'] == np.float64(0.1 + 0.2)
    assert table.loc[3, 'third_bus'] == 3
    assert table.loc[3, 'rate'] == 40.0
