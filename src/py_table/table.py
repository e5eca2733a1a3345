import numbers
import operator

import numpy as np

from .errors import DimensionMismatchError
from .errors import FactorOperationError
from .errors import PyTableIndexError
from .errors import PyTableKeyError
from .errors import PyTableTypeError
from .errors import PyTableValueError
from .errors import UnknownColumnError
from .naming import TableOperand
from .naming import UnnamedOperand
from .naming import binary_column_names
from .naming import default_names
from .naming import resolve_operand


def _missing_col_error(name):
	return UnknownColumnError(f"Input table does not contain column named '{name}'")


def _missing_row_error(name):
	return PyTableKeyError(f"Input table does not contain row named '{name}'")


def _as_name_list(names, expected, axis):
	"""Normalize user-supplied axis labels and check their count."""
	if names is None:
		return default_names(expected)
	if isinstance(names, str):
		names = [names]
	names = [str(n) for n in names]
	if len(names) != expected:
		raise DimensionMismatchError(
			f"Number of {axis} names ({len(names)}) does not match "
			f"number of {axis}s ({expected})"
		)
	return names


def _resolve_labels(key, labels, missing_error):
	"""Resolve a label, an index, or a collection of them, against an axis.

	Integers pass through unchanged, so resolution is idempotent. The token
	":" and slices select positions; boolean masks select where True.
	"""
	if isinstance(key, (bool, np.bool_)):
		raise PyTableTypeError("Boolean scalars are not valid table indices")

	if isinstance(key, numbers.Integral):
		return int(key)

	if isinstance(key, str):
		if key == ":":
			return list(range(len(labels)))
		for idx, label in enumerate(labels):
			if label == key:
				return idx
		raise missing_error(key)

	if isinstance(key, slice):
		return list(range(len(labels)))[key]

	if isinstance(key, (list, tuple, np.ndarray)):
		values = list(key)
		if values and all(isinstance(v, (bool, np.bool_)) for v in values):
			if len(values) != len(labels):
				raise DimensionMismatchError(
					f"Boolean mask has {len(values)} elements, expected {len(labels)}"
				)
			return [i for i, flag in enumerate(values) if flag]
		out = []
		for v in values:
			idx = _resolve_labels(v, labels, missing_error)
			if isinstance(idx, list):
				raise PyTableTypeError("Nested label lists are not supported")
			out.append(idx)
		return out

	raise PyTableTypeError(
		f"Index should be a name or a position, not {type(key).__name__}"
	)


def _positions(resolved, length, axis):
	"""Turn a resolved index into a list of non-negative positions."""
	if isinstance(resolved, int):
		resolved = [resolved]
	out = []
	for idx in resolved:
		if idx < -length or idx >= length:
			raise PyTableIndexError(f"{axis} index {idx} out of range for {length} {axis}s")
		out.append(idx % length)
	return out


def _format_number(value) -> str:
	"""Text form of a value that reads back to the same float."""
	value = float(value)
	if np.isnan(value):
		return "NaN"
	if np.isinf(value):
		return "Inf" if value > 0 else "-Inf"
	if value.is_integer() and abs(value) < 1e15:
		return str(int(value))
	return repr(value)


class Table:
	""" Labelled 2-D array of numeric values and factor codes

	Each column is either numeric, or a factor: its values are 1-based codes
	into the column's list of levels, with 0 marking a missing level.
	"""

	# numpy must defer to the reflected operators below
	__array_ufunc__ = None

	def __init__(self, data=(), col_names=None, row_names=None, name=None,
			file_name=None, levels=None):
		array = np.array(data, dtype=float)
		if array.ndim == 1:
			array = array.reshape(-1, 1) if array.size else array.reshape(0, 0)
		if array.ndim != 2:
			raise DimensionMismatchError(
				f"Table data must be one or two dimensional, not {array.ndim}"
			)
		nrows, ncols = array.shape

		self._data = array
		self._col_names = _as_name_list(col_names, ncols, "column")
		self._row_names = _as_name_list(row_names, nrows, "row")
		self._levels = self._check_levels(levels, ncols)
		self.name = name
		self.file_name = file_name

	@classmethod
	def create(cls, data=(), col_names=None, row_names=None, **kwargs):
		"""Create a table from raw arrays (same arguments as the constructor)."""
		return cls(data, col_names, row_names, **kwargs)

	@classmethod
	def read(cls, file_name, **options):
		"""Read a table from a delimited text file, see py_table.reader.read."""
		from .reader import read
		return read(file_name, **options)

	def _check_levels(self, levels, ncols):
		if levels is None:
			return [[] for _ in range(ncols)]

		if isinstance(levels, dict):
			out = [[] for _ in range(ncols)]
			for key, labels in levels.items():
				idx = _positions(_resolve_labels(key, self._col_names, _missing_col_error), ncols, "column")[0]
				out[idx] = [str(x) for x in (labels if labels is not None else ())]
		else:
			levels = list(levels)
			if len(levels) != ncols:
				raise DimensionMismatchError(
					f"Number of level lists ({len(levels)}) does not match number of columns ({ncols})"
				)
			out = [[str(x) for x in (labels if labels is not None else ())] for labels in levels]

		for idx, labels in enumerate(out):
			if not labels:
				continue
			col = self._data[:, idx]
			codes = col[np.isfinite(col)]
			if np.any((codes < 0) | (codes > len(labels)) | (codes != np.round(codes))):
				raise PyTableValueError(
					f"Column '{self._col_names[idx]}' holds codes outside its {len(labels)} levels"
				)
		return out

	# ------------------------------------------------------------
	# Accessors
	# ------------------------------------------------------------

	@property
	def data(self):
		return self._data

	@property
	def col_names(self):
		return list(self._col_names)

	@col_names.setter
	def col_names(self, names):
		self._col_names = _as_name_list(names, self._data.shape[1], "column")

	@property
	def row_names(self):
		return list(self._row_names)

	@row_names.setter
	def row_names(self, names):
		self._row_names = _as_name_list(names, self._data.shape[0], "row")

	@property
	def levels(self):
		return [list(labels) for labels in self._levels]

	@property
	def shape(self):
		return self._data.shape

	def __len__(self):
		return self._data.shape[0]

	def row_count(self):
		return self._data.shape[0]

	def column_count(self):
		return self._data.shape[1]

	def copy(self):
		return Table(self._data, self._col_names, self._row_names,
			name=self.name, file_name=self.file_name, levels=self._levels)

	def column_index(self, key):
		"""Index of a column from its name.

		Returns an int for a single name or index, and a list of ints for a
		list of names, a slice, a boolean mask, or the token ":". Integers
		are returned unchanged, so these two calls give the same result:

			table.column_index("x")
			table.column_index(table.column_index("x"))
		"""
		return _resolve_labels(key, self._col_names, _missing_col_error)

	def row_index(self, key):
		"""Index of a row from its name, resolved like column_index."""
		return _resolve_labels(key, self._row_names, _missing_row_error)

	def _single_column(self, col):
		idx = self.column_index(col)
		if isinstance(idx, list):
			if len(idx) != 1:
				raise PyTableTypeError("Expected a single column")
			idx = idx[0]
		return _positions(idx, self._data.shape[1], "column")[0]

	def is_factor(self, col):
		return bool(self._levels[self._single_column(col)])

	def has_factors(self):
		return any(self._levels)

	def column(self, col):
		"""Copy of a column's values as a 1-D array."""
		return self._data[:, self._single_column(col)].copy()

	def factor_codes(self, col):
		"""1-based level codes of a factor column, None for missing values."""
		idx = self._single_column(col)
		if not self._levels[idx]:
			raise PyTableTypeError(f"Column '{self._col_names[idx]}' is not a factor")
		return [int(v) if np.isfinite(v) and v > 0 else None for v in self._data[:, idx]]

	def labels(self, col):
		"""Level labels of a factor column, None for missing values."""
		idx = self._single_column(col)
		levels = self._levels[idx]
		return [None if code is None else levels[code - 1] for code in self.factor_codes(idx)]

	def __getitem__(self, key):
		""" table[cols] or table[rows, cols]

		Each index may be a name, a position, a list of them, a slice, a
		boolean mask or ":". A single key always selects columns.
		"""
		if isinstance(key, tuple) and len(key) == 2:
			rows, cols = key
		else:
			rows, cols = ":", key

		nrows, ncols = self._data.shape
		ri = _positions(_resolve_labels(rows, self._row_names, _missing_row_error), nrows, "row")
		ci = _positions(self.column_index(cols), ncols, "column")

		return Table(
			self._data[np.ix_(ri, ci)],
			[self._col_names[i] for i in ci],
			[self._row_names[i] for i in ri],
			name=self.name,
			file_name=self.file_name,
			levels=[self._levels[i] for i in ci],
		)

	def __iter__(self):
		"""Iterate over rows as 1-D arrays."""
		for row in self._data:
			yield row.copy()

	def __repr__(self):
		from .display import _printr
		return _printr(self)

	# ------------------------------------------------------------
	# Elementwise math
	# ------------------------------------------------------------

	def _unary_operation(self, op_func, tag: str):
		"""Apply op_func to every value, tagging column names with tag."""
		if self.has_factors():
			raise FactorOperationError(f"Can not compute {tag} for table with factors")

		name = f"{tag} of {self.name}" if self.name else None
		return Table(
			op_func(self._data),
			[tag + col for col in self._col_names],
			self._row_names,
			name=name,
		)

	def __neg__(self):
		return self._unary_operation(np.negative, "-")

	def __abs__(self):
		return self._unary_operation(np.abs, "abs")

	def exp(self):
		return self._unary_operation(np.exp, "exp")

	def log(self):
		return self._unary_operation(np.log, "log")

	def log10(self):
		return self._unary_operation(np.log10, "log10")

	def sqrt(self):
		return self._unary_operation(np.sqrt, "sqrt")

	def nthroot(self, n):
		"""Real n-th root of each value."""
		if not float(n).is_integer() or n == 0:
			raise PyTableValueError(f"Root order must be a non-zero integer, not {n}")
		n = int(n)
		if n % 2 == 0 and np.any(self._data < 0):
			raise PyTableValueError("Negative values require an odd root order")

		def root(x):
			return np.sign(x) * np.abs(x) ** (1.0 / n)

		return self._unary_operation(root, "nthroot")

	def _binary_operation(self, other, op_func, symbol: str, reflected=False):
		"""Helper for elementwise operations between a table and another operand."""
		if reflected:
			left, right = resolve_operand(other), resolve_operand(self)
		else:
			left, right = resolve_operand(self), resolve_operand(other)

		parent = left.table if isinstance(left, TableOperand) else right.table
		nrows = parent.row_count()

		values = []
		for operand in (left, right):
			if isinstance(operand, TableOperand):
				if operand.table.has_factors():
					raise FactorOperationError(f"Can not compute '{symbol}' for table with factors")
				if operand.table.row_count() != nrows:
					raise DimensionMismatchError(
						f"Tables have different row numbers: {operand.table.row_count()} and {nrows}"
					)
				values.append(operand.table._data)
			elif isinstance(operand, UnnamedOperand):
				arr = operand.values
				# 1-D operands always apply per row; per column needs shape (1, ncols)
				if arr.ndim == 1:
					if len(arr) not in (nrows, 1):
						raise DimensionMismatchError(
							f"Vector operand of '{symbol}' has {len(arr)} values for {nrows} rows"
						)
					arr = arr.reshape(-1, 1)
				values.append(arr)
			else:
				values.append(operand.value)

		try:
			result = np.asarray(op_func(values[0], values[1]), dtype=float)
			result = np.broadcast_to(result, np.broadcast_shapes(result.shape, (nrows, 1)))
		except ValueError as e:
			raise DimensionMismatchError(f"Operands of '{symbol}' have incompatible shapes") from e

		tables = [op.table for op in (left, right) if isinstance(op, TableOperand)]
		name = None
		if all(t.name for t in tables):
			name = f"{left.label}{symbol}{right.label}"
		return Table(
			result,
			binary_column_names(left, right, symbol, result.shape[1]),
			parent._row_names,
			name=name,
		)

	def __add__(self, other):
		return self._binary_operation(other, operator.add, "+")

	def __radd__(self, other):
		return self._binary_operation(other, operator.add, "+", reflected=True)

	def __sub__(self, other):
		return self._binary_operation(other, operator.sub, "-")

	def __rsub__(self, other):
		return self._binary_operation(other, operator.sub, "-", reflected=True)

	def __mul__(self, other):
		return self._binary_operation(other, operator.mul, "*")

	def __rmul__(self, other):
		return self._binary_operation(other, operator.mul, "*", reflected=True)

	def __truediv__(self, other):
		return self._binary_operation(other, operator.truediv, "/")

	def __rtruediv__(self, other):
		return self._binary_operation(other, operator.truediv, "/", reflected=True)

	def __pow__(self, other):
		return self._binary_operation(other, operator.pow, "^")

	def __rpow__(self, other):
		return self._binary_operation(other, operator.pow, "^", reflected=True)

	# ------------------------------------------------------------
	# Grouping
	# ------------------------------------------------------------

	def aggregate(self, group, func=np.mean, row_names=None):
		"""Reduce each column within groups of rows, see py_table.grouping.aggregate."""
		from .grouping import aggregate
		return aggregate(self, group, func, row_names)

	def groupfun(self, group, func=np.mean, row_names=None):
		from .grouping import groupfun
		return groupfun(self, group, func, row_names)

	def cross_table(self, other):
		"""Contingency table of two single-column tables."""
		from .grouping import cross_table
		return cross_table(self, other)

	# ------------------------------------------------------------
	# Output
	# ------------------------------------------------------------

	def write(self, path, delimiter="\t", header=True, write_row_names=True):
		"""Write the table as delimited text that read() parses back.

		Factor columns are written as their labels and missing values as NA.
		Labels containing a delimiter or white space are double-quoted.
		"""
		def quote(token):
			if token == "" or any(c in delimiter or c.isspace() for c in token):
				return f'"{token}"'
			return token

		nrows, ncols = self._data.shape
		with open(path, "w") as f:
			if header:
				f.write(delimiter.join(quote(n) for n in self._col_names) + "\n")
			for r in range(nrows):
				tokens = [quote(self._row_names[r])] if write_row_names else []
				for c in range(ncols):
					value = self._data[r, c]
					levels = self._levels[c]
					if not levels:
						tokens.append(_format_number(value))
					elif np.isfinite(value) and value > 0:
						tokens.append(quote(levels[int(value) - 1]))
					else:
						tokens.append("NA")
				f.write(delimiter.join(tokens) + "\n")
