"""
py-table: labelled numeric tables with factor columns

Tables are 2-D arrays of numbers with named rows and columns. A column may
be a factor: its values are codes into a list of level labels.

Main entry points:
    - Table: the table type, with elementwise math and selection by name
    - read: parse a delimited text file, inferring numeric and factor columns
    - aggregate: reduce the columns of a table within groups of rows
    - cross_table: contingency table of two categorical columns
"""

from .table import Table
from .reader import read, ReadOptions
from .grouping import aggregate, cross_table, groupfun
from .errors import (
	PyTableError,
	PyTableKeyError,
	PyTableTypeError,
	PyTableValueError,
	PyTableIndexError,
	DimensionMismatchError,
	RowCountMismatchError,
	UnknownColumnError,
	AmbiguousColumnNameError,
	MalformedFileError,
	FactorOperationError,
	UnexpectedEndOfFileWarning,
)

__version__ = "0.1.0"
__all__ = [
	"Table",
	"read",
	"ReadOptions",
	"aggregate",
	"cross_table",
	"groupfun",
	"PyTableError",
	"PyTableKeyError",
	"PyTableTypeError",
	"PyTableValueError",
	"PyTableIndexError",
	"DimensionMismatchError",
	"RowCountMismatchError",
	"UnknownColumnError",
	"AmbiguousColumnNameError",
	"MalformedFileError",
	"FactorOperationError",
	"UnexpectedEndOfFileWarning",
]
