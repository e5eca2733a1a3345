"""Display and repr logic for Table."""

from __future__ import annotations
from typing import List

import numpy as np


# How many rows/columns to show before inserting "..."
MAX_HEAD_ROWS = 5
MAX_HEAD_COLS = 5


def _needs_quoting(name: str) -> bool:
	"""A name needs quoting if it is empty or has leading/trailing whitespace."""
	return name == "" or name != name.strip()


def _preview_indices(count: int, head: int) -> List[int]:
	"""Symmetric preview: first and last head positions, -1 marks the gap."""
	if count > head * 2:
		return list(range(head)) + [-1] + list(range(count - head, count))
	return list(range(count))


def _format_value(value, levels) -> str:
	if levels:
		if np.isfinite(value) and value > 0:
			return levels[int(value) - 1]
		return "NA"
	if np.isnan(value):
		return "NaN"
	if np.isinf(value):
		return "Inf" if value > 0 else "-Inf"
	if value == int(value) and abs(value) < 1e15:
		return str(int(value))
	return f"{value:g}"


def _format_column(tbl, col: int, rows: List[int]) -> List[str]:
	"""Returns a list of strings representing that column, truncated for display."""
	data = tbl.data[:, col]
	levels = tbl.levels[col]
	return ["..." if r < 0 else _format_value(data[r], levels) for r in rows]


def _pad(values: List[str], width: int, right: bool) -> List[str]:
	return [s.rjust(width) if right else s.ljust(width) for s in values]


def _footer(tbl, truncated=False, shown=MAX_HEAD_COLS) -> str:
	"""Generate footer line based on shape and column kinds."""
	rows, cols = tbl.shape
	kinds = ["factor" if levels else "float" for levels in tbl.levels]
	if truncated:
		d = ", ".join(kinds[:shown]) + ", ..., " + ", ".join(kinds[-shown:])
	else:
		d = ", ".join(kinds)
	return f"# {rows}×{cols} table <{d}>"


def _repr_table(tbl) -> str:
	"""Pretty repr for a Table."""
	nrows, ncols = tbl.shape
	if ncols == 0:
		return f"# {nrows}×0 table"

	rows = _preview_indices(nrows, MAX_HEAD_ROWS)
	cols = _preview_indices(ncols, MAX_HEAD_COLS)
	truncated = -1 in cols

	col_names = tbl.col_names
	row_names = tbl.row_names

	# Row labels column, left aligned
	labels = ["..." if r < 0 else row_names[r] for r in rows]
	width = max((len(s) for s in labels), default=0)
	out_cols = [[" " * width] + _pad(labels, width, right=False)]

	for c in cols:
		if c < 0:
			body = ["..." for _ in rows]
			header = "..."
			right = False
		else:
			body = _format_column(tbl, c, rows)
			header = repr(col_names[c]) if _needs_quoting(col_names[c]) else col_names[c]
			right = not tbl.levels[c]
		width = max([len(header)] + [len(s) for s in body])
		out_cols.append(_pad([header] + body, width, right))

	lines = []
	for r in range(len(rows) + 1):
		lines.append("  ".join(col[r] for col in out_cols).rstrip())

	lines.append("")
	lines.append(_footer(tbl, truncated, MAX_HEAD_COLS))
	return "\n".join(lines)


def _printr(tbl) -> str:
	"""Entry point used by Table.__repr__."""
	return _repr_table(tbl)
