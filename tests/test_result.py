import pytest

from websql.interface.base import RunResult
from websql.result import (
    EMPTY_ROWS,
    ResultSet,
    RowList,
    shape_mutation,
    shape_query,
)


@pytest.fixture
def rows():
    return [{"id": 1, "name": "foo"}, {"id": 2, "name": "bar"}]


def test_row_list_item(rows):
    row_list = RowList(rows)

    assert row_list.length == 2
    assert len(row_list) == 2
    assert row_list.item(0) == {"id": 1, "name": "foo"}
    assert row_list.item(1)["name"] == "bar"


@pytest.mark.parametrize("index", (-1, 2, 100))
def test_row_list_item_out_of_range(rows, index):
    assert RowList(rows).item(index) is None


def test_row_list_is_a_sequence(rows):
    row_list = RowList(rows)

    assert list(row_list) == rows
    assert row_list[1] is rows[1]
    assert row_list.array == rows
    assert row_list._array == rows
    assert row_list == RowList(rows)


def test_row_list_is_read_only(rows):
    row_list = RowList(rows)
    rows.append({"id": 3, "name": "baz"})

    assert row_list.length == 2
    with pytest.raises(TypeError):
        row_list[0] = {}
    row_list.array.append({})
    assert row_list.length == 2


def test_empty_rows():
    assert EMPTY_ROWS.length == 0
    assert EMPTY_ROWS.item(0) is None


def test_shape_query(rows):
    result = shape_query(rows)

    assert result.rows_affected == 0
    assert result.rowsAffected == 0
    assert result.insert_id is None
    assert result.insertId is None
    assert result.rows.item(1) == rows[1]


@pytest.mark.parametrize(
    "outcome,rows_affected,insert_id",
    (
        (RunResult(1, 5), 1, 5),
        (RunResult(3, None), 3, None),
        (RunResult(0, 5), 0, None),
        (RunResult(1, 0), 1, None),
        (RunResult(-1, None), 0, None),
        (RunResult(2, -4), 2, None),
    ),
)
def test_shape_mutation(outcome, rows_affected, insert_id):
    result = shape_mutation(outcome)

    assert result.rowsAffected == rows_affected
    assert result.insertId == insert_id
    assert result.rows.length == 0


def test_result_set_is_frozen():
    result = ResultSet(rows_affected=1)
    with pytest.raises(AttributeError):
        result.rows_affected = 2
