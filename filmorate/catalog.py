"""
Reference catalogs for users and films.

A catalog owns the canonical records of one entity kind. It validates candidates,
normalizes them, delegates storage to an `EntityStorage` backend and serializes
every mutation behind its own lock.
"""

import copy  # normalize without touching the caller's candidate
import threading  # one re-entrant lock per catalog
from datetime import date
from typing import Callable, Generic, List, Optional, TypeVar

from loguru import logger  # console logger

from .classifications import GenreCatalog, MpaCatalog  # film reference resolution
from .errors import NotFoundError, ValidationError
from .models import Film, Genre, User
from .storage import EntityStorage, InMemoryStorage
from .validators import MAX_DESCRIPTION_LENGTH, MIN_RELEASE_DATE, validate_film, validate_user

T = TypeVar("T", User, Film)


class ReferenceCatalog(Generic[T]):
	"""
	Generic create/update/read surface over a storage backend.
	Subclasses supply `_validate` and `_prepare`.
	"""

	def __init__(self, kind: str, storage: Optional[EntityStorage] = None):
		self.kind = kind  # "user" or "film"
		self.storage = storage if storage is not None else InMemoryStorage(kind)
		self.lock = threading.RLock()  # held for the duration of one operation
		self._tag = f"[{kind.title()}Catalog]"  # log prefix

	def _validate(self, candidate: T) -> Optional[ValidationError]:
		raise NotImplementedError

	def _prepare(self, candidate: T) -> T:
		"""Return a normalized copy ready for storage. May raise before any write happens."""
		return copy.deepcopy(candidate)

	def _check(self, candidate: T) -> None:
		error = self._validate(candidate)
		if error is not None:
			logger.warning(f"{self._tag} Validation failed | field={error.field} | {error.reason}")
			raise error

	def get_all(self) -> List[T]:
		"""Snapshot of all records in insertion order."""
		with self.lock:
			return self.storage.get_all()

	def create(self, candidate: T) -> T:
		"""Validate, normalize, allocate an id and store. Any supplied id is ignored."""
		self._check(candidate)
		with self.lock:
			prepared = self._prepare(candidate)
			created = self.storage.create(prepared)
		logger.info(f"{self._tag} Created id={created.id}")
		return created

	def update(self, candidate: T) -> T:
		"""Replace an existing record wholesale (no field merge)."""
		if candidate.id is None:
			logger.warning(f"{self._tag} Update without id")
			raise ValidationError("id", f"{self.kind} id must be set for update")
		self._check(candidate)
		with self.lock:
			if not self.storage.exists_by_id(candidate.id):
				logger.warning(f"{self._tag} Update of unknown id={candidate.id}")
				raise NotFoundError(self.kind, candidate.id)
			prepared = self._prepare(candidate)
			updated = self.storage.update(prepared)
		if updated is None:
			# Backend lost the record between the check and the write
			raise NotFoundError(self.kind, candidate.id)
		logger.info(f"{self._tag} Updated id={updated.id}")
		return updated

	def find_by_id(self, entity_id: int) -> Optional[T]:
		"""Resolve an id, or None when absent."""
		with self.lock:
			return self.storage.get_by_id(entity_id)

	def get_by_id(self, entity_id: int) -> T:
		"""Resolve an id or raise NotFoundError."""
		record = self.find_by_id(entity_id)
		if record is None:
			logger.warning(f"{self._tag} id={entity_id} not found")
			raise NotFoundError(self.kind, entity_id)
		return record

	def exists_by_id(self, entity_id: int) -> bool:
		with self.lock:
			return self.storage.exists_by_id(entity_id)

	def delete(self, entity_id: int) -> None:
		"""Remove a record. Its id is never handed out again."""
		with self.lock:
			if not self.storage.delete(entity_id):
				logger.warning(f"{self._tag} Delete of unknown id={entity_id}")
				raise NotFoundError(self.kind, entity_id)
		logger.info(f"{self._tag} Deleted id={entity_id}")


class UserCatalog(ReferenceCatalog[User]):
	"""Users. A blank display name is replaced by the login before storage."""

	def __init__(self, storage: Optional[EntityStorage] = None, today: Callable[[], date] = date.today):
		super().__init__("user", storage)
		self._today = today  # clock used for the birthday rule

	def _validate(self, candidate: User) -> Optional[ValidationError]:
		return validate_user(candidate, today=self._today())

	def _prepare(self, candidate: User) -> User:
		user = copy.deepcopy(candidate)
		if user.name is None or not user.name.strip():
			user.name = user.login
			logger.debug(f"{self._tag} Display name defaulted to login '{user.login}'")
		return user


class FilmCatalog(ReferenceCatalog[Film]):
	"""
	Films. Before storage the MPA reference is defaulted and resolved, and every
	genre reference is resolved and de-duplicated by id (first occurrence wins).
	Stored films therefore always carry classification names, not bare ids.
	"""

	def __init__(
		self,
		mpa: MpaCatalog,
		genres: GenreCatalog,
		storage: Optional[EntityStorage] = None,
		default_mpa_id: int = 1,
		min_release_date: date = MIN_RELEASE_DATE,
		max_description_length: int = MAX_DESCRIPTION_LENGTH,
	):
		super().__init__("film", storage)
		self.mpa = mpa
		self.genres = genres
		self.default_mpa_id = default_mpa_id
		self.min_release_date = min_release_date
		self.max_description_length = max_description_length

	def _validate(self, candidate: Film) -> Optional[ValidationError]:
		return validate_film(
			candidate,
			min_release_date=self.min_release_date,
			max_description_length=self.max_description_length,
		)

	def _prepare(self, candidate: Film) -> Film:
		film = copy.deepcopy(candidate)

		# Classification: default when omitted, must resolve otherwise
		mpa_id = film.mpa.id if film.mpa is not None else self.default_mpa_id
		if mpa_id is None:
			raise ValidationError("mpa", "mpa id must be set")
		film.mpa = self.mpa.get_by_id(mpa_id)

		# Genres: collapse duplicates, keep first-insertion order, resolve each
		resolved: List[Genre] = []
		seen = set()
		for ref in film.genres or []:
			if ref is None or ref.id is None:
				raise ValidationError("genres", "genre id must be set")
			if ref.id in seen:
				continue
			seen.add(ref.id)
			resolved.append(self.genres.get_by_id(ref.id))
		film.genres = resolved
		return film
