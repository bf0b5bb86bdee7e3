"""
Persistence backends for the reference catalogs.

The catalogs depend only on the `EntityStorage` capability set, so an in-memory
map and a durable store are interchangeable. Records are copied on the way in
and out; callers can never mutate stored state through a returned object.
"""

import copy  # detach stored records from caller-held objects
from typing import Dict, Generic, List, Optional, Protocol, TypeVar

from loguru import logger  # console logger

from .id_allocator import IdAllocator  # identifier source for new records

T = TypeVar("T")


class EntityStorage(Protocol[T]):
	"""Capability set every backend provides. Records carry an integer `id` attribute."""

	def get_all(self) -> List[T]: ...

	def create(self, entity: T) -> T: ...

	def update(self, entity: T) -> Optional[T]: ...

	def get_by_id(self, entity_id: int) -> Optional[T]: ...

	def exists_by_id(self, entity_id: int) -> bool: ...

	def delete(self, entity_id: int) -> bool: ...


class InMemoryStorage(Generic[T]):
	"""
	Dict-backed storage preserving insertion order.
	Not synchronized on its own: the owning catalog serializes access.
	"""

	def __init__(self, kind: str, allocator: Optional[IdAllocator] = None):
		self.kind = kind  # "user" or "film", used in log lines
		self.allocator = allocator or IdAllocator(name=kind)  # id source
		self._records: Dict[int, T] = {}  # id -> record, insertion ordered

	def get_all(self) -> List[T]:
		"""Snapshot of every record, in insertion order."""
		logger.debug(f"[Storage:{self.kind}] get_all -> {len(self._records)} records")
		return [copy.deepcopy(r) for r in self._records.values()]

	def create(self, entity: T) -> T:
		"""Assign a fresh id, store a copy and return it."""
		stored = copy.deepcopy(entity)
		stored.id = self.allocator.next()
		self._records[stored.id] = stored
		return copy.deepcopy(stored)

	def update(self, entity: T) -> Optional[T]:
		"""Replace the record wholesale; None when no record has that id."""
		if entity.id not in self._records:
			return None
		# Assigning to an existing key keeps its original position
		self._records[entity.id] = copy.deepcopy(entity)
		return copy.deepcopy(entity)

	def get_by_id(self, entity_id: int) -> Optional[T]:
		record = self._records.get(entity_id)
		return copy.deepcopy(record) if record is not None else None

	def exists_by_id(self, entity_id: int) -> bool:
		return entity_id in self._records

	def delete(self, entity_id: int) -> bool:
		"""Remove a record; False when it was already absent."""
		return self._records.pop(entity_id, None) is not None

	def __len__(self) -> int:
		return len(self._records)
