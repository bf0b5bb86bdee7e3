"""
Service layer: the operations callers (the HTTP layer, scripts) invoke.

Every component is constructed once in `build_services` and handed explicitly to
whatever needs it; there is no module-level state.
"""

from dataclasses import dataclass  # container for the wired components
from datetime import date
from typing import Callable, List, Optional

from loguru import logger

from .catalog import FilmCatalog, UserCatalog
from .classifications import GenreCatalog, MpaCatalog
from .enrichment import Enricher
from .models import Film, Genre, Mpa, User
from .ranking import PopularityRanker
from .relationships import RelationshipEngine
from .storage import EntityStorage
from .validators import MAX_DESCRIPTION_LENGTH, MIN_RELEASE_DATE


class UserService:
	"""Users and their friendships."""

	def __init__(self, users: UserCatalog, relations: RelationshipEngine):
		self.users = users
		self.relations = relations

	def list_users(self) -> List[User]:
		logger.debug("[UserService] Listing users")
		return self.users.get_all()

	def get_user(self, user_id: int) -> User:
		return self.users.get_by_id(user_id)

	def create_user(self, data: User) -> User:
		logger.info(f"[UserService] Creating user login='{data.login}'")
		return self.users.create(data)

	def update_user(self, data: User) -> User:
		logger.info(f"[UserService] Updating user id={data.id}")
		return self.users.update(data)

	def delete_user(self, user_id: int) -> None:
		"""Delete a user and every friendship and like that involved them."""
		with self.users.lock:
			self.users.delete(user_id)
			self.relations.forget_user(user_id)

	def add_friend(self, user_id: int, friend_id: int) -> None:
		self.relations.add_friend(user_id, friend_id)

	def remove_friend(self, user_id: int, friend_id: int) -> None:
		self.relations.remove_friend(user_id, friend_id)

	def friends_of(self, user_id: int) -> List[User]:
		return self.relations.friends_of(user_id)

	def common_friends(self, user_id: int, other_id: int) -> List[User]:
		return self.relations.common_friends(user_id, other_id)


class FilmService:
	"""Films, likes and the popularity query. Every read passes through enrichment."""

	def __init__(
		self,
		films: FilmCatalog,
		relations: RelationshipEngine,
		enricher: Enricher,
		ranker: PopularityRanker,
	):
		self.films = films
		self.relations = relations
		self.enricher = enricher
		self.ranker = ranker

	def list_films(self) -> List[Film]:
		logger.debug("[FilmService] Listing films")
		return self.enricher.enrich_films(self.films.get_all())

	def get_film(self, film_id: int) -> Film:
		return self.enricher.enrich_film(self.films.get_by_id(film_id))

	def create_film(self, data: Film) -> Film:
		logger.info(f"[FilmService] Creating film '{data.name}'")
		return self.enricher.enrich_film(self.films.create(data))

	def update_film(self, data: Film) -> Film:
		logger.info(f"[FilmService] Updating film id={data.id}")
		return self.enricher.enrich_film(self.films.update(data))

	def delete_film(self, film_id: int) -> None:
		"""Delete a film together with its likes."""
		with self.films.lock:
			self.films.delete(film_id)
			self.relations.forget_film(film_id)

	def add_like(self, film_id: int, user_id: int) -> None:
		self.relations.add_like(film_id, user_id)

	def remove_like(self, film_id: int, user_id: int) -> None:
		self.relations.remove_like(film_id, user_id)

	def like_count(self, film_id: int) -> int:
		return self.relations.like_count(film_id)

	def popular_films(self, count: Optional[int] = None) -> List[Film]:
		"""Top `count` films by like count (default when missing or not positive)."""
		# Films and like counts are read as one snapshot (lock order: films -> relations)
		with self.films.lock:
			films = self.films.get_all()
			like_counts = self.relations.like_counts()
		ranked = self.ranker.top(films, like_counts, count)
		return self.enricher.enrich_films(ranked)


class ClassificationService:
	"""Read access to the MPA and genre catalogs."""

	def __init__(self, mpa: MpaCatalog, genres: GenreCatalog):
		self.mpa = mpa
		self.genres = genres

	def list_mpa(self) -> List[Mpa]:
		return self.mpa.list_all()

	def get_mpa(self, mpa_id: int) -> Mpa:
		return self.mpa.get_by_id(mpa_id)

	def list_genres(self) -> List[Genre]:
		return self.genres.list_all()

	def get_genre(self, genre_id: int) -> Genre:
		return self.genres.get_by_id(genre_id)


@dataclass
class Services:
	users: UserService
	films: FilmService
	classifications: ClassificationService
	relations: RelationshipEngine


def build_services(
	default_popular_count: int = 10,
	default_mpa_id: int = 1,
	min_release_date: date = MIN_RELEASE_DATE,
	max_description_length: int = MAX_DESCRIPTION_LENGTH,
	mpa: Optional[MpaCatalog] = None,
	genres: Optional[GenreCatalog] = None,
	user_storage: Optional[EntityStorage] = None,
	film_storage: Optional[EntityStorage] = None,
	today: Callable[[], date] = date.today,
) -> Services:
	"""Wire catalogs, engine, ranker and enricher into the three services."""
	mpa = mpa or MpaCatalog()
	genres = genres or GenreCatalog()
	users = UserCatalog(storage=user_storage, today=today)
	films = FilmCatalog(
		mpa,
		genres,
		storage=film_storage,
		default_mpa_id=default_mpa_id,
		min_release_date=min_release_date,
		max_description_length=max_description_length,
	)
	relations = RelationshipEngine(users, films)
	enricher = Enricher(mpa, genres)
	ranker = PopularityRanker(default_count=default_popular_count)
	logger.debug("[Services] Components wired")
	return Services(
		users=UserService(users, relations),
		films=FilmService(films, relations, enricher, ranker),
		classifications=ClassificationService(mpa, genres),
		relations=relations,
	)
