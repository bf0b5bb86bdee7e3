"""
Relationship engine: the friendship graph and the like relation.

Friendship is symmetric and stored as two directed adjacency sets that are always
mutated together. Likes are (film, user) pairs, at most one per pair.

Lock order whenever several resources are involved:
film catalog -> user catalog -> relationship engine.
"""

import threading  # engine-wide lock for adjacency and like sets
from typing import Dict, List

from loguru import logger  # console logger

from .catalog import FilmCatalog, UserCatalog  # existence checks and friend resolution
from .errors import ConflictError, NotFoundError, ValidationError
from .models import User

# Ordered set: dict keys keep insertion order, values unused
OrderedIds = Dict[int, None]


class RelationshipEngine:
	"""
	Owns friendships and likes. Adjacency sets are never exposed for direct mutation;
	every change goes through the methods below.
	"""

	def __init__(self, users: UserCatalog, films: FilmCatalog):
		self.users = users  # user catalog (checked before taking our own lock)
		self.films = films  # film catalog (checked before the user catalog)
		self._lock = threading.RLock()
		self._friends: Dict[int, OrderedIds] = {}  # user id -> friend ids
		self._likes: Dict[int, OrderedIds] = {}  # film id -> ids of users who liked it

	# ------------------------------------------------------------------ helpers

	def _require_user(self, user_id: int) -> None:
		if not self.users.exists_by_id(user_id):
			logger.warning(f"[Relations] User id={user_id} not found")
			raise NotFoundError("user", user_id)

	def _require_film(self, film_id: int) -> None:
		if not self.films.exists_by_id(film_id):
			logger.warning(f"[Relations] Film id={film_id} not found")
			raise NotFoundError("film", film_id)

	def _resolve_users(self, ids: List[int]) -> List[User]:
		# Ids that no longer resolve (deleted users) are skipped
		resolved = []
		for user_id in ids:
			user = self.users.find_by_id(user_id)
			if user is not None:
				resolved.append(user)
		return resolved

	# --------------------------------------------------------------- friendship

	def add_friend(self, user_id: int, friend_id: int) -> None:
		"""Create the friendship {user_id, friend_id}. Both directions are written together."""
		with self.users.lock:
			self._require_user(user_id)
			self._require_user(friend_id)
			if user_id == friend_id:
				logger.warning(f"[Relations] User {user_id} tried to befriend themselves")
				raise ValidationError("friend_id", "a user cannot befriend themselves")
			with self._lock:
				if friend_id in self._friends.get(user_id, {}):
					logger.warning(f"[Relations] Users {user_id} and {friend_id} are already friends")
					raise ConflictError("already friends")
				self._friends.setdefault(user_id, {})[friend_id] = None
				self._friends.setdefault(friend_id, {})[user_id] = None
		logger.info(f"[Relations] Users {user_id} and {friend_id} are now friends")

	def remove_friend(self, user_id: int, friend_id: int) -> None:
		"""
		Ensure the two users are not friends. Removing a missing friendship is a no-op;
		both directions are cleared even if only one was present.
		"""
		with self.users.lock:
			self._require_user(user_id)
			self._require_user(friend_id)
			with self._lock:
				forward = self._friends.get(user_id, {})
				backward = self._friends.get(friend_id, {})
				had_forward = friend_id in forward
				had_backward = user_id in backward
				forward.pop(friend_id, None)
				backward.pop(user_id, None)
		if had_forward != had_backward:
			logger.warning(f"[Relations] Repaired asymmetric friendship between {user_id} and {friend_id}")
		if had_forward or had_backward:
			logger.info(f"[Relations] Users {user_id} and {friend_id} are no longer friends")
		else:
			logger.debug(f"[Relations] Users {user_id} and {friend_id} were not friends; nothing to remove")

	def friend_ids(self, user_id: int) -> List[int]:
		"""Raw friend ids in the order the friendships were made."""
		with self._lock:
			return list(self._friends.get(user_id, {}))

	def friends_of(self, user_id: int) -> List[User]:
		"""Current records of every friend of `user_id`."""
		with self.users.lock:
			self._require_user(user_id)
			return self._resolve_users(self.friend_ids(user_id))

	def common_friends(self, user_id: int, other_id: int) -> List[User]:
		"""Friends shared by both users, in the friend order of `user_id`."""
		with self.users.lock:
			self._require_user(user_id)
			self._require_user(other_id)
			with self._lock:
				theirs = self._friends.get(other_id, {})
				shared = [f for f in self._friends.get(user_id, {}) if f in theirs]
			return self._resolve_users(shared)

	# -------------------------------------------------------------------- likes

	def add_like(self, film_id: int, user_id: int) -> None:
		"""Record that `user_id` likes `film_id`. A second like for the same pair is a conflict."""
		with self.films.lock, self.users.lock:
			self._require_film(film_id)
			self._require_user(user_id)
			with self._lock:
				likers = self._likes.setdefault(film_id, {})
				if user_id in likers:
					logger.warning(f"[Relations] User {user_id} already liked film {film_id}")
					raise ConflictError("already liked")
				likers[user_id] = None
				total = len(likers)
		logger.info(f"[Relations] Film {film_id} liked by user {user_id}. Total likes: {total}")

	def remove_like(self, film_id: int, user_id: int) -> None:
		"""Withdraw a like. Unlike friend removal, a missing like is an error."""
		with self.films.lock, self.users.lock:
			self._require_film(film_id)
			self._require_user(user_id)
			with self._lock:
				likers = self._likes.get(film_id, {})
				if user_id not in likers:
					logger.warning(f"[Relations] User {user_id} has no like on film {film_id}")
					raise NotFoundError("like", (film_id, user_id), "like not found")
				del likers[user_id]
				total = len(likers)
		logger.info(f"[Relations] Film {film_id} lost like from user {user_id}. Total likes: {total}")

	def likes_of(self, film_id: int) -> List[int]:
		"""Ids of users who liked the film, in like order."""
		with self._lock:
			return list(self._likes.get(film_id, {}))

	def like_count(self, film_id: int) -> int:
		with self._lock:
			return len(self._likes.get(film_id, {}))

	def like_counts(self) -> Dict[int, int]:
		"""Snapshot of film id -> like count for every film with at least one like."""
		with self._lock:
			return {film_id: len(likers) for film_id, likers in self._likes.items() if likers}

	# ---------------------------------------------------------------- deletions

	def forget_user(self, user_id: int) -> None:
		"""Drop every friendship and like involving a deleted user."""
		with self._lock:
			for friend_id in self._friends.pop(user_id, {}):
				self._friends.get(friend_id, {}).pop(user_id, None)
			# Sweep the rest in case a previous failure left a one-sided entry
			for friends in self._friends.values():
				friends.pop(user_id, None)
			for likers in self._likes.values():
				likers.pop(user_id, None)
		logger.info(f"[Relations] Cleared relations of deleted user {user_id}")

	def forget_film(self, film_id: int) -> None:
		"""Drop every like on a deleted film."""
		with self._lock:
			removed = len(self._likes.pop(film_id, {}))
		logger.info(f"[Relations] Cleared {removed} likes of deleted film {film_id}")
