import warnings

import numpy as np
import pytest

from py_table import Table, aggregate, groupfun
from py_table.errors import DimensionMismatchError, PyTableTypeError, PyTableValueError, RowCountMismatchError


def test_aggregate_by_vector_no_warnings():
    table = Table([10, 20, 30, 40], ['x'])

    # Capture warnings
    with warnings.catch_warnings(record=True) as w:
        warnings.simplefilter("always")
        res = aggregate(table, [1, 1, 2, 2])

    # No warnings should have been raised
    assert len(w) == 0, f"Unexpected warnings: {[str(x.message) for x in w]}"

    assert res.shape == (2, 1)
    assert res.row_names == ['1', '2']
    assert res.col_names == ['x']
    np.testing.assert_allclose(res.data[:, 0], [15, 35])


def test_aggregate_groups_are_sorted():
    table = Table([[1, 5], [2, 6], [3, 7], [4, 8]], ['a', 'b'])
    res = table.aggregate([3, 1, 3, 1], np.sum)
    assert res.row_names == ['1', '3']
    np.testing.assert_array_equal(res.data, [[6, 14], [4, 12]])


def test_aggregate_by_column_name_removes_the_column():
    table = Table([[1, 10], [1, 20], [2, 30], [2, 40]], ['g', 'x'])
    res = aggregate(table, 'g')
    assert res.col_names == ['x']
    assert res.row_names == ['g=1', 'g=2']
    np.testing.assert_allclose(res.data[:, 0], [15, 35])

    by_index = aggregate(table, 0)
    np.testing.assert_array_equal(by_index.data, res.data)
    assert by_index.row_names == res.row_names


def test_aggregate_by_factor_table_uses_levels():
    species = Table([2, 1, 2, 1], ['Species'], levels=[['setosa', 'virginica']])
    values = Table([[1, 10], [2, 20], [3, 30], [4, 40]], ['len', 'width'])
    res = values.aggregate(species)
    assert res.row_names == ['Species=setosa', 'Species=virginica']
    np.testing.assert_allclose(res.data, [[3, 30], [2, 20]])


def test_aggregate_by_factor_column():
    table = Table([[1, 2.0], [2, 4.0], [1, 6.0]], ['kind', 'v'], levels=[['hot', 'cold'], []])
    res = table.aggregate('kind', 'max')
    assert res.row_names == ['kind=hot', 'kind=cold']
    np.testing.assert_array_equal(res.data[:, 0], [6, 4])


def test_aggregate_by_string_values():
    table = Table([1, 2, 3, 4], ['v'])
    res = aggregate(table, ['b', 'a', 'b', 'a'], np.min)
    assert res.row_names == ['a', 'b']
    np.testing.assert_array_equal(res.data[:, 0], [2, 1])


def test_aggregate_skips_missing_group_values():
    table = Table([1, 2, 3, 4], ['v'])
    res = aggregate(table, [1, np.nan, 1, 2.5])
    assert res.row_names == ['1', '2.5']
    np.testing.assert_allclose(res.data[:, 0], [2, 4])


def test_aggregate_with_explicit_row_names():
    table = Table([10, 20, 30, 40], ['x'])
    res = aggregate(table, [1, 1, 2, 2], np.mean, ['low', 'high'])
    assert res.row_names == ['low', 'high']
    with pytest.raises(DimensionMismatchError):
        aggregate(table, [1, 1, 2, 2], np.mean, ['only-one'])


def test_aggregate_drops_levels_of_reduced_columns():
    table = Table([[1, 1], [1, 2], [2, 2]], ['g', 'k'], levels=[[], ['a', 'b']])
    res = aggregate(table, 'g', np.max)
    assert not res.has_factors()


def test_group_vector_length_mismatch():
    table = Table([10, 20, 30, 40], ['x'])
    with pytest.raises(RowCountMismatchError):
        aggregate(table, [1, 2, 1])
    with pytest.raises(RowCountMismatchError):
        aggregate(table, Table([1, 2], ['g']))


def test_unknown_reduction_name():
    table = Table([10, 20], ['x'])
    with pytest.raises(PyTableTypeError):
        aggregate(table, [1, 2], 'no_such_function')


def test_reduction_must_return_scalar():
    table = Table([10, 20, 30], ['x'])
    with pytest.raises(PyTableValueError):
        aggregate(table, [1, 1, 2], lambda values: values)


def test_groupfun_is_deprecated():
    table = Table([10, 20, 30, 40], ['x'])
    with pytest.warns(DeprecationWarning, match="aggregate"):
        res = groupfun(table, [1, 1, 2, 2])
    np.testing.assert_allclose(res.data[:, 0], [15, 35])


def test_reduction_must_return_a_number():
    table = Table([10, 20, 30], ['x'])
    with pytest.raises(PyTableValueError, match="single numeric value"):
        aggregate(table, [1, 1, 2], lambda values: 'many')
