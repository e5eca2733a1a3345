class PyTableError(Exception):
	"""Base exception for py-table library."""
	pass


class PyTableKeyError(PyTableError, KeyError):
	"""Raised when a column/row label is missing."""
	pass


class PyTableTypeError(PyTableError, TypeError):
	"""Raised for invalid types in API calls."""
	pass


class PyTableValueError(PyTableError, ValueError):
	"""Raised for invalid values or mismatched lengths."""
	pass


class PyTableIndexError(PyTableError, IndexError):
	"""Raised for invalid indexing operations."""
	pass


class DimensionMismatchError(PyTableValueError):
	"""Raised when shapes, label counts or row counts disagree."""
	pass


class RowCountMismatchError(DimensionMismatchError):
	"""Raised when a grouping vector does not have one value per row."""
	pass


class UnknownColumnError(PyTableKeyError):
	"""Raised when a column label can not be resolved."""
	pass


class AmbiguousColumnNameError(PyTableKeyError):
	"""Raised when a column label matches several columns."""
	pass


class MalformedFileError(PyTableValueError):
	"""Raised when a data file can not be read up to its end."""
	pass


class FactorOperationError(PyTableTypeError):
	"""Raised for mathematical operations on factor columns."""
	pass


class UnexpectedEndOfFileWarning(UserWarning):
	"""Emitted when the typed scan of a file stops early and is retried."""
	pass
