"""
Reading of tables from delimited text files.

    table = read("measures.txt")
    table = read("measures.csv", delimiter=",", decimal_point=",")
    table = read("orchard")            # one of the bundled sample files

Options (keyword arguments, snake_case or camelCase, case-insensitive):
    header          True if the first line holds column names (default True)
    row_names       list of row names, or the column holding them: a 1-based
                    position, a column label, 0 for none, -1 to auto-detect
    decimal_point   character used as decimal point (default "."). Any other
                    value forces token parsing of every column
    delimiter       characters separating values (alias: delim). Default is
                    white space; repeated white space counts as one separator
    need_parse      force token parsing of every column
    skip_lines      number of lines to skip between header and data
    remove_quotes   remove wrapping double quotes from labels (default True)

Column types are inferred from the first data line: a column whose first
value is a finite number is read as numbers, any other column as text. Text
columns whose values are all numbers or missing markers (na, nan) end up
numeric; the others become factors whose levels are their sorted distinct
values.
"""

from dataclasses import dataclass
from dataclasses import replace
from pathlib import Path
import math
import numbers
import os
import warnings

import numpy as np

from .errors import AmbiguousColumnNameError
from .errors import MalformedFileError
from .errors import PyTableTypeError
from .errors import UnexpectedEndOfFileWarning
from .errors import UnknownColumnError
from .naming import default_names
from .naming import remove_end_quotes
from .table import Table


WHITESPACE_DELIMITERS = " \b\t"
DEFAULT_DELIMITERS = WHITESPACE_DELIMITERS
MISSING_TOKENS = ("na", "nan")
ROW_NAME_LABELS = ("name", "nom")
SAMPLE_DIR = Path(__file__).resolve().parent / "samples"
DEFAULT_EXTENSION = ".txt"


@dataclass(frozen=True)
class ReadOptions:
	"""Settings of one read() call."""

	row_names: tuple = ()
	row_names_index: object = -1  # -1 auto, 0 none, >= 1 position, or a label
	header: bool = True
	decimal_point: str = "."
	delimiter: str = DEFAULT_DELIMITERS
	need_parse: bool = False
	skip_lines: int = 0
	remove_quotes: bool = True

	@property
	def parse_tokens(self) -> bool:
		"""True when every column must be read as tokens and parsed afterwards."""
		return self.need_parse or self.decimal_point != "."

	@classmethod
	def from_kwargs(cls, **kwargs):
		values = {}
		for key, value in kwargs.items():
			option = key.replace("_", "").lower()
			if option == "rownames":
				if value is None:
					values["row_names_index"] = -1
				elif isinstance(value, (str, numbers.Integral)):
					values["row_names_index"] = value
				else:
					values["row_names"] = tuple(str(v) for v in value)
			elif option == "header":
				values["header"] = bool(value)
			elif option == "decimalpoint":
				values["decimal_point"] = value
			elif option in ("delim", "delimiter"):
				values["delimiter"] = value
			elif option == "needparse":
				values["need_parse"] = bool(value)
			elif option == "skiplines":
				values["skip_lines"] = int(value)
			elif option == "removequotes":
				values["remove_quotes"] = bool(value)
			else:
				raise PyTableTypeError(f"unknown parameter: {key}")
		return cls(**values)


# ============================================================
# Tokens
# ============================================================

def split_line(line, delimiters=DEFAULT_DELIMITERS):
	"""Split one line of text into tokens.

	When the delimiters include white space, runs of delimiters count as a
	single separator and leading/trailing ones are ignored. Otherwise each
	delimiter ends a field, so consecutive delimiters enclose an empty token.
	Double-quoted text stays in one token, quotes included.
	"""
	line = line.rstrip("\r\n")
	collapse = any(c in WHITESPACE_DELIMITERS for c in delimiters)

	tokens = []
	current = []
	in_quotes = False
	for ch in line:
		if ch == '"':
			in_quotes = not in_quotes
			current.append(ch)
		elif ch in delimiters and not in_quotes:
			if current or not collapse:
				tokens.append("".join(current))
			current = []
		else:
			current.append(ch)
	if current or (not collapse and tokens):
		tokens.append("".join(current))

	if not collapse:
		tokens = [t.strip(" \t") for t in tokens]
	return tokens


def _parse_number(token):
	"""Float value of a token, None if it is not a number."""
	try:
		return float(token)
	except ValueError:
		return None


def _is_finite_number(token) -> bool:
	value = _parse_number(token)
	return value is not None and math.isfinite(value)


def parse_column(tokens, decimal_point=".", remove_quotes=True):
	"""Convert the raw tokens of one column into numbers or factor codes.

	Returns (values, levels). When every token is a number or a missing
	marker, values holds the numbers (NaN for missing) and levels is empty.
	Otherwise the column is a factor: levels are the sorted distinct tokens
	and values their 1-based codes. A level "NA" is removed from the levels,
	its rows get code 0 and the codes above it shift down by one.
	"""
	parsed = [_parse_number(t.replace(decimal_point, ".")) for t in tokens]
	values = np.array([np.nan if v is None else v for v in parsed], dtype=float)
	missing = np.array([t.lower() in MISSING_TOKENS for t in tokens], dtype=bool)

	if not np.any(np.isnan(values[~missing])):
		return values, []

	levels = sorted(set(tokens))
	lookup = {label: k + 1 for k, label in enumerate(levels)}
	codes = np.array([lookup[t] for t in tokens], dtype=float)

	if remove_quotes:
		levels = remove_end_quotes(levels)

	if "NA" in levels:
		na_code = levels.index("NA") + 1
		codes[codes == na_code] = 0
		codes[codes > na_code] -= 1
		del levels[na_code - 1]

	return codes, levels


# ============================================================
# Scanning
# ============================================================

def _scan_typed(lines, split, numeric):
	"""Read lines into columns, numeric columns as floats, others as tokens.

	Returns (columns, complete). Scanning stops before the end of lines at
	the first line whose token count differs from the number of columns, or
	whose numeric column holds something that is not a number.
	"""
	n = len(numeric)
	columns = [[] for _ in range(n)]
	for line in lines:
		if not line.strip():
			continue
		tokens = split(line)
		if len(tokens) != n:
			return columns, False

		row = []
		for token, is_numeric in zip(tokens, numeric):
			if is_numeric:
				value = _parse_number(token)
				if value is None:
					return columns, False
				row.append(value)
			else:
				row.append(token)
		for col, value in zip(columns, row):
			col.append(value)
	return columns, True


def _scan_tokens(lines, split, n):
	"""Read lines into columns of raw tokens."""
	return _scan_typed(lines, split, [False] * n)


def _read_preamble(f, options, split):
	"""Consume header and skipped lines; return (header tokens, first data line)."""
	header = []
	if options.header:
		line = f.readline()
		if not line:
			raise MalformedFileError("File is empty")
		header = split(line)

	for _ in range(options.skip_lines):
		f.readline()

	line = f.readline()
	while line and not line.strip():
		line = f.readline()
	if not line:
		raise MalformedFileError("File does not contain any data line")
	return header, line


def _row_name_column(options, col_names, n):
	"""Find the 1-based column holding row names (0 for none).

	Returns (index, col_names) where col_names no longer includes the name
	of the row name column.
	"""
	index = options.row_names_index
	if index is None:
		index = -1

	# a first column explicitly called 'name' holds row names
	if options.header and index == -1 and col_names and col_names[0] in ROW_NAME_LABELS:
		index = 1

	if isinstance(index, str):
		matches = [i for i, name in enumerate(col_names) if name == index]
		if not matches:
			raise UnknownColumnError(f"Could not identify row names column from label: {index}")
		if len(matches) > 1:
			raise AmbiguousColumnNameError(f"Multiple column names with label: {index}")
		index = matches[0] + 1

	if index > 0:
		if index > n:
			raise UnknownColumnError(f"Row names column {index} exceeds the {n} columns of the file")
		if len(col_names) > n - 1:
			col_names = col_names[:index - 1] + col_names[index:]
	elif index == -1:
		# more values than names: the first column holds row names
		index = 1 if options.header and n > len(col_names) else 0

	return index, col_names


def find_file(file_name):
	"""Locate a data file, falling back to the bundled sample files."""
	path = Path(file_name)
	if path.exists():
		return path

	if not os.path.dirname(str(file_name)):
		candidate = SAMPLE_DIR / path.name
		if candidate.exists():
			return candidate
		if not path.suffix:
			candidate = SAMPLE_DIR / (path.name + DEFAULT_EXTENSION)
			if candidate.exists():
				return candidate

	raise FileNotFoundError(f"Couldn't open the file {path.name}")


# ============================================================
# Entry point
# ============================================================

def read(file_name, **options):
	"""Read a file containing table data.

	Args:
		file_name: path to the file, or the name of a bundled sample file
		**options: see the module documentation

	Returns:
		Table whose name is the base name of the file.

	Raises:
		FileNotFoundError: the file can not be found
		MalformedFileError: the file can not be read up to its end, even
			when parsing every column as text
		UnknownColumnError, AmbiguousColumnNameError: the row names column
			can not be identified
	"""
	options = ReadOptions.from_kwargs(**options)
	path = find_file(file_name)

	def split(line):
		return split_line(line, options.delimiter)

	with open(path, "r") as f:
		col_names, first_line = _read_preamble(f, options, split)
		first = split(first_line)
		n = len(first)

		if options.remove_quotes:
			col_names = remove_end_quotes(col_names)

		row_col, col_names = _row_name_column(options, col_names, n)
		nc = n - 1 if row_col > 0 else n

		if len(col_names) < nc:
			col_names = col_names + default_names(nc)[len(col_names):]

		numeric = [_is_finite_number(token) for token in first]
		if row_col > 0:
			numeric[row_col - 1] = False

		if options.parse_tokens:
			columns, complete = _scan_tokens(f, split, n)
		else:
			columns, complete = _scan_typed(f, split, numeric)

			if not complete:
				warnings.warn(
					"Could not read the whole file, possibly due to NaN or text values. "
					"Retry by forcing parse.",
					UnexpectedEndOfFileWarning,
					stacklevel=2,
				)
				options = replace(options, need_parse=True)
				f.seek(0)
				_read_preamble(f, options, split)
				columns, complete = _scan_tokens(f, split, n)

		if not complete:
			raise MalformedFileError(
				f"Could not read the whole file {path.name}, possibly due to NaN or text values."
			)

	# first data line goes back on top
	for i, token in enumerate(first):
		value = float(token) if numeric[i] and not options.parse_tokens else token
		columns[i].insert(0, value)
	nr = len(columns[0])

	row_names = None
	if row_col > 0:
		row_names = [str(t) for t in columns.pop(row_col - 1)]
		if options.remove_quotes:
			row_names = remove_end_quotes(row_names)
		numeric.pop(row_col - 1)
	elif options.row_names:
		row_names = list(options.row_names)

	data = np.zeros((nr, nc))
	levels = [[] for _ in range(nc)]
	for i, col in enumerate(columns):
		if numeric[i] and not options.parse_tokens:
			data[:, i] = col
		else:
			data[:, i], levels[i] = parse_column(col, options.decimal_point, options.remove_quotes)

	return Table(
		data,
		col_names,
		row_names,
		name=Path(file_name).stem,
		file_name=str(file_name),
		levels=levels,
	)
