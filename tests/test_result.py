import sys
from types import SimpleNamespace

import pytest

from sbmlsolve.result import (
    SimulationResult,
    search_local_max,
    search_local_min,
    search_max,
    write_result_list,
)


def _result():
    return SimulationResult(
        column_name_sp=["A", "B"],
        values_time=[0.0, 1.0, 2.0, 3.0, 4.0],
        values_sp=[[5.0, -1.0], [1.0, -2.0], [7.0, -3.0], [3.0, -4.0], [9.0, -5.0]],
    )


def test_counts():
    res = _result()
    assert res.num_of_rows == 5
    assert res.num_of_columns_sp == 2


def test_search_max_over_all_rows():
    res = _result()
    assert search_max(res, 0) == 9.0
    assert search_max(res, 1) == -1.0


def test_search_max_without_rows_is_dbl_min():
    assert search_max(SimulationResult(), 0) == sys.float_info.min


def test_search_local_max_ignores_points_outside_window():
    res = _result()
    assert search_local_max(res, 0, 0.5, 3.5) == 7.0


def test_search_local_min_within_window():
    res = _result()
    assert search_local_min(res, 0, 0.5, 3.5) == 1.0


def test_local_extremes_bracket_window_values():
    res = _result()
    lo = search_local_min(res, 1, 0.5, 3.5)
    hi = search_local_max(res, 1, 0.5, 3.5)
    assert lo <= hi


def test_search_local_min_empty_window_keeps_initial():
    res = _result()
    assert search_local_min(res, 0, 10.0, 20.0) == sys.float_info.max


def test_write_result_list_format(tmp_path):
    path = tmp_path / "result_list.dat"
    species = [SimpleNamespace(id="S1", name="glucose"), SimpleNamespace(id="S2", name="")]
    parameters = [SimpleNamespace(id="k1", name="rate")]
    compartments = [SimpleNamespace(id="cell", name="cell")]
    write_result_list(path, species, parameters, compartments)
    assert path.read_text(encoding="utf-8") == (
        "Result : Species List\n"
        "column 2 : ID=S1 Name=glucose\n"
        "column 3 : ID=S2 Name=\n"
        "\n"
        "Result : Parameter List\n"
        "column 2 : ID=k1 Name=rate\n"
        "Result : Compartment List\n"
        "column 2 : ID=cell Name=cell\n"
    )


def test_write_result_list_missing_directory(tmp_path):
    with pytest.raises(OSError):
        write_result_list(tmp_path / "missing" / "out.dat", [], [], [])