"""
Classification lookups: MPA ratings and genres.
Small catalogs mapping an id to its descriptive record, consulted when films are
admitted, updated or read.
"""

import threading  # guard the slowly-changing catalogs
from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar, Generic

from loguru import logger  # console logger

from .errors import NotFoundError  # unknown classification id
from .models import Genre, Mpa  # catalog record types

# Default catalog contents (id, name)
DEFAULT_MPA: Tuple[Tuple[int, str], ...] = (
	(1, "G"),
	(2, "PG"),
	(3, "PG-13"),
	(4, "R"),
	(5, "NC-17"),
)
DEFAULT_GENRES: Tuple[Tuple[int, str], ...] = (
	(1, "Comedy"),
	(2, "Drama"),
	(3, "Animation"),
	(4, "Thriller"),
	(5, "Documentary"),
	(6, "Action"),
)

C = TypeVar("C", Mpa, Genre)


class ClassificationCatalog(Generic[C]):
	"""
	Read-mostly id -> record catalog.
	Entries are kept sorted by id for listing; lookups return fresh copies.
	"""

	def __init__(self, kind: str, factory: Callable[[int, str], C], entries: Iterable[Tuple[int, str]]):
		self.kind = kind  # "mpa" or "genre"
		self._factory = factory  # builds a record from (id, name)
		self._names: Dict[int, str] = {}  # id -> descriptive name
		self._lock = threading.RLock()
		for entry_id, name in entries:
			self._names[entry_id] = name
		logger.debug(f"[Catalog:{kind}] Initialized with {len(self._names)} entries")

	def list_all(self) -> List[C]:
		"""All entries ordered by id."""
		with self._lock:
			return [self._factory(i, self._names[i]) for i in sorted(self._names)]

	def find_by_id(self, entry_id: int) -> Optional[C]:
		"""Resolve an id, or None when it is unknown."""
		with self._lock:
			name = self._names.get(entry_id)
		return self._factory(entry_id, name) if name is not None else None

	def get_by_id(self, entry_id: int) -> C:
		"""Resolve an id or raise NotFoundError."""
		entry = self.find_by_id(entry_id)
		if entry is None:
			logger.warning(f"[Catalog:{self.kind}] id={entry_id} not found")
			raise NotFoundError(self.kind, entry_id)
		return entry

	def exists_by_id(self, entry_id: int) -> bool:
		with self._lock:
			return entry_id in self._names

	def add(self, entry_id: int, name: str) -> C:
		"""Insert or rename an entry."""
		with self._lock:
			self._names[entry_id] = name
		logger.info(f"[Catalog:{self.kind}] Stored id={entry_id} name='{name}'")
		return self._factory(entry_id, name)

	def remove(self, entry_id: int) -> bool:
		"""Drop an entry. Films already referencing it keep their stored names."""
		with self._lock:
			removed = self._names.pop(entry_id, None) is not None
		if removed:
			logger.info(f"[Catalog:{self.kind}] Removed id={entry_id}")
		return removed


class MpaCatalog(ClassificationCatalog[Mpa]):
	"""MPA ratings. Id 1 ("G") is the default for films that omit a rating."""

	def __init__(self, entries: Iterable[Tuple[int, str]] = DEFAULT_MPA):
		super().__init__("mpa", lambda i, n: Mpa(id=i, name=n), entries)


class GenreCatalog(ClassificationCatalog[Genre]):
	def __init__(self, entries: Iterable[Tuple[int, str]] = DEFAULT_GENRES):
		super().__init__("genre", lambda i, n: Genre(id=i, name=n), entries)
