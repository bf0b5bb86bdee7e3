"""
Error taxonomy shared by every Filmorate component.

All errors are caller-correctable; the core performs no I/O and never retries.
The HTTP layer maps them to 4xx responses.
"""

from typing import Any, Optional


class FilmorateError(Exception):
	"""Base class for every error raised by the core."""

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class ValidationError(FilmorateError):
	"""Input was structurally or semantically invalid."""

	def __init__(self, field: Optional[str], reason: str):
		super().__init__(reason)
		self.field = field  # offending field, None when the rule spans the whole request
		self.reason = reason


class ConflictError(ValidationError):
	"""
	The requested state change is redundant given current state (duplicate like,
	duplicate friendship). Subclasses ValidationError so callers can treat both alike.
	"""

	def __init__(self, reason: str):
		super().__init__(None, reason)


class NotFoundError(FilmorateError):
	"""A referenced identifier does not resolve."""

	def __init__(self, entity_kind: str, entity_id: Any, message: Optional[str] = None):
		super().__init__(message or f"{entity_kind} with id {entity_id} not found")
		self.entity_kind = entity_kind  # "user", "film", "mpa", "genre", "like"
		self.entity_id = entity_id
