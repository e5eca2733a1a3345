"""
Grouping of table rows: aggregation by group and cross-tabulation.

Both operations share the same group resolution: the distinct values of a
grouping variable, sorted, define the groups, and each group is labelled
either by its factor level or by its stringified value.
"""

import numbers
import warnings

import numpy as np

from .errors import DimensionMismatchError
from .errors import PyTableTypeError
from .errors import PyTableValueError
from .errors import RowCountMismatchError
from .naming import format_value
from .table import Table


def group_indices(values, levels=None):
	"""Map each value to the index of its group.

	Args:
		values: 1-D sequence of numbers or strings
		levels: factor labels when values are level codes

	Returns:
		(indices, labels) where indices holds the zero-based group index of
		each value, or -1 for missing values (NaN, or code 0 of a factor),
		and labels holds one string per group in sorted value order.
	"""
	values = np.asarray(values)

	if values.dtype.kind in "USO":
		strs = [str(v) for v in values]
		distinct = sorted(set(strs))
		lookup = {v: i for i, v in enumerate(distinct)}
		return np.array([lookup[v] for v in strs], dtype=int), distinct

	numeric = values.astype(float)
	valid = ~np.isnan(numeric)
	if levels:
		valid &= numeric > 0

	distinct, inverse = np.unique(numeric[valid], return_inverse=True)
	indices = np.full(len(numeric), -1, dtype=int)
	indices[valid] = np.ravel(inverse)

	if levels:
		labels = [levels[int(v) - 1] for v in distinct]
	else:
		labels = [format_value(v) for v in distinct]
	return indices, labels


def _resolve_group(table, group):
	"""Extract group values from a group spec.

	Returns (values, levels, label, cols) where label is the name of the
	column the groups come from (None for a plain vector), and cols the
	positions of the columns to reduce.
	"""
	nrows, ncols = table.shape
	cols = list(range(ncols))

	if isinstance(group, Table):
		if group.row_count() != nrows:
			raise RowCountMismatchError(
				f"Group table has {group.row_count()} rows, but table has {nrows} rows."
			)
		if group.column_count() == 0:
			raise DimensionMismatchError("Group table has no column")
		return group.data[:, 0], group.levels[0], group.col_names[0], cols

	if isinstance(group, (str, numbers.Integral)) and not isinstance(group, bool):
		idx = table._single_column(group)
		cols.remove(idx)
		return table.data[:, idx], table.levels[idx], table.col_names[idx], cols

	values = np.asarray(group)
	if values.ndim == 2 and values.shape[1] == 1:
		values = values[:, 0]
	if values.ndim != 1 or len(values) != nrows:
		raise RowCountMismatchError(
			f"Group vector has {len(values) if values.ndim else 0} values, "
			f"but table has {nrows} rows."
		)
	return values, [], None, cols


def _resolve_reduction(func):
	if callable(func):
		return func
	if isinstance(func, str):
		reduction = getattr(np, func, None)
		if callable(reduction):
			return reduction
	raise PyTableTypeError(f"Unknown reduction function: {func!r}")


def aggregate(table, group, func=np.mean, row_names=None):
	"""
	Group rows of a table and reduce each column within each group.

	Args:
		table: source Table
		group: one of
			- a sequence of values, one per row
			- a single-column Table, whose factor levels name the groups
			- a column name or index of table; that column is not reduced
		func: reduction applied to the values of one column within one
			group, or the name of a numpy reduction ("mean", "max", ...)
		row_names: names of the result rows, one per group

	Returns:
		Table with one row per distinct group value, in sorted order. Rows
		are named "<column>=<group>" when groups come from a named column,
		or by the group label alone for a plain vector.

	Examples:
		# mean of each measurement per species
		aggregate(iris[:, 0:4], iris["Species"])

		# maximum per group, grouping column taken from the table itself
		aggregate(iris, "Species", "max")
	"""
	values, levels, label, cols = _resolve_group(table, group)
	reduce = _resolve_reduction(func)
	indices, labels = group_indices(values, levels)

	data = table.data
	res = np.zeros((len(labels), len(cols)))
	for i in range(len(labels)):
		rows = indices == i
		for j, col in enumerate(cols):
			try:
				res[i, j] = np.asarray(reduce(data[rows, col]), dtype=float).item()
			except (ValueError, TypeError) as e:
				raise PyTableValueError(
					f"Reduction of column '{table.col_names[col]}' did not return a single numeric value"
				) from e

	if row_names is None:
		if label:
			row_names = [f"{label}={lab}" for lab in labels]
		else:
			row_names = labels

	all_names = table.col_names
	return Table(res, [all_names[c] for c in cols], row_names, name=table.name)


def groupfun(table, group, func=np.mean, row_names=None):
	"""Deprecated alias of aggregate."""
	warnings.warn(
		"groupfun function is deprecated, use 'aggregate' instead",
		DeprecationWarning,
		stacklevel=2,
	)
	return aggregate(table, group, func, row_names)


def cross_table(table1, table2):
	"""
	Cross-tabulation of two one-column tables.

	Counts, for each pair of groups, the rows falling in both. Can be used to
	compute confusion matrices from classification results. Plain vectors
	are accepted in place of tables.

	Example:
		tab1 = Table([1, 1, 2, 3, 1], ["x"])
		tab2 = Table([1, 2, 5, 3, 1], ["y"])
		cross_table(tab1, tab2)
		     1  2  3  5
		1    2  1  0  0
		2    0  0  0  1
		3    0  0  1  0
	"""
	if not isinstance(table1, Table):
		table1 = Table(table1)
	if not isinstance(table2, Table):
		table2 = Table(table2)

	nr = table1.row_count()
	if table2.row_count() != nr:
		raise DimensionMismatchError("Both inputs must have same number of rows")
	if table1.column_count() != 1 or table2.column_count() != 1:
		raise DimensionMismatchError("Input must have only one column")

	inds1, labels1 = group_indices(table1.data[:, 0], table1.levels[0])
	inds2, labels2 = group_indices(table2.data[:, 0], table2.levels[0])

	counts = np.zeros((len(labels1), len(labels2)))
	valid = (inds1 >= 0) & (inds2 >= 0)
	np.add.at(counts, (inds1[valid], inds2[valid]), 1)

	return Table(counts, labels2, labels1)
