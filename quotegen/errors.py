from __future__ import annotations


class QuoteError(Exception):
	"""Base class for failures reported back to the user."""


class ValidationError(QuoteError):
	pass


class DuplicateError(QuoteError):
	pass


class FormatError(QuoteError):
	pass


class SyncError(QuoteError):
	pass
