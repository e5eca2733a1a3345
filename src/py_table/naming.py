"""Axis label and operand naming utilities."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import numbers

import numpy as np

from .errors import PyTableTypeError


def default_names(count: int) -> list[str]:
	"""Positional labels "1", "2", ... used when no names are given."""
	return [str(i + 1) for i in range(count)]


def remove_end_quotes(value):
	"""Remove wrapping double quotes from a label, or from each label of a list."""
	if isinstance(value, str):
		if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
			return value[1:-1]
		return value
	return [remove_end_quotes(v) for v in value]


def format_value(value) -> str:
	"""Stringify a group value: integral numbers without decimals, others in %g form."""
	if isinstance(value, str):
		return value
	if isinstance(value, numbers.Integral):
		return str(int(value))
	value = float(value)
	if value.is_integer():
		return str(int(value))
	return f"{value:g}"


# ============================================================
# Binary operation operands
# ============================================================

@dataclass(frozen=True)
class ValueOperand:
	"""A scalar operand, labelled by its printed value."""
	value: float

	@property
	def label(self) -> str:
		return format_value(self.value)


@dataclass(frozen=True)
class TableOperand:
	"""A Table operand, labelled by the table name.

	Result column labels use the table's column names instead, see
	operand_column_labels.
	"""
	table: Any

	@property
	def label(self) -> str:
		return self.table.name or ""


@dataclass(frozen=True)
class UnnamedOperand:
	"""An array-like operand that carries no name."""
	values: Any

	@property
	def label(self) -> str:
		return "..."


def resolve_operand(obj):
	"""Classify one operand of a binary operation."""
	from .table import Table

	if isinstance(obj, Table):
		return TableOperand(obj)
	if isinstance(obj, (str, bytes)):
		raise PyTableTypeError(f"Unsupported operand type: {type(obj).__name__}")
	if isinstance(obj, numbers.Number) or np.ndim(obj) == 0:
		return ValueOperand(float(obj))
	return UnnamedOperand(np.asarray(obj, dtype=float))


def operand_column_labels(operand, ncols: int) -> list[str]:
	"""Per-column labels of an operand, broadcast to ncols."""
	if isinstance(operand, TableOperand):
		names = operand.table.col_names
		if len(names) == 1 and ncols > 1:
			return names * ncols
		return names
	return [operand.label] * ncols


def binary_column_names(left, right, symbol: str, ncols: int) -> list[str]:
	"""Label result columns as "<left><symbol><right>"."""
	left_labels = operand_column_labels(left, ncols)
	right_labels = operand_column_labels(right, ncols)
	return [f"{a}{symbol}{b}" for a, b in zip(left_labels, right_labels)]
