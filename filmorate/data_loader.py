"""
Fixture loading.
Reads users, films, friendships and likes from a JSON Lines file and applies them
through the services, so every record goes through the same validation as API input.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
from dataclasses import dataclass, field  # per-load summary
from datetime import date  # ISO date parsing
from pathlib import Path  # filesystem-safe paths
from typing import Dict, List, Optional

# Console logging
from loguru import logger  # console logger

from .errors import FilmorateError  # rejected records are skipped, not fatal
from .models import Film, Genre, Mpa, User
from .services import Services


@dataclass
class LoadSummary:
	"""Counts of applied and skipped lines for one load."""
	users: int = 0
	films: int = 0
	friendships: int = 0
	likes: int = 0
	skipped: List[int] = field(default_factory=list)  # line numbers that were rejected


class DataLoader:
	"""
	Applies fixture records of four kinds:
	{"kind": "user", "email", "login", "name", "birthday"}
	{"kind": "film", "name", "description", "releaseDate", "duration", "mpa": {"id"}, "genres": [{"id"}]}
	{"kind": "friend", "userId", "friendId"}
	{"kind": "like", "filmId", "userId"}
	Friend and like records refer to ids as allocated during the same load.
	"""

	def __init__(self, services: Services):
		self.services = services  # target of every applied record

	def load_from_jsonl(self, filepath: str) -> LoadSummary:
		"""Apply every line of `filepath`; malformed or rejected lines are logged and skipped."""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Fixture file not found: {filepath}")

		logger.info(f"[DataLoader] Loading fixtures from {filepath}...")
		summary = LoadSummary()

		# Read line-by-line; one bad record must not abort the whole import
		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):
				if not line.strip():  # tolerate blank lines
					continue
				try:
					self._apply(json.loads(line), summary)
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")
					summary.skipped.append(line_num)
				except (FilmorateError, ValueError, TypeError, KeyError, AttributeError) as e:
					logger.warning(f"[DataLoader] Skipping rejected record at line {line_num}: {e}")
					summary.skipped.append(line_num)

		logger.info(
			f"[DataLoader] Loaded users={summary.users} films={summary.films} "
			f"friendships={summary.friendships} likes={summary.likes} skipped={len(summary.skipped)}"
		)
		return summary

	def _apply(self, data: Dict, summary: LoadSummary) -> None:
		if not isinstance(data, dict):  # valid JSON, but not a record
			raise ValueError(f"expected a JSON object, got {type(data).__name__}")
		kind = data.get('kind')
		if kind == 'user':
			self.services.users.create_user(self.parse_user(data))
			summary.users += 1
		elif kind == 'film':
			self.services.films.create_film(self.parse_film(data))
			summary.films += 1
		elif kind == 'friend':
			self.services.users.add_friend(_parse_id(data['userId']), _parse_id(data['friendId']))
			summary.friendships += 1
		elif kind == 'like':
			self.services.films.add_like(_parse_id(data['filmId']), _parse_id(data['userId']))
			summary.likes += 1
		else:
			raise ValueError(f"unknown record kind: {kind!r}")

	@staticmethod
	def parse_user(data: Dict) -> User:
		"""Convert a raw dictionary into a User candidate (not yet validated)."""
		return User(
			email=data.get('email'),
			login=data.get('login'),
			name=data.get('name'),
			birthday=_parse_date(data.get('birthday')),
		)

	@staticmethod
	def parse_film(data: Dict) -> Film:
		"""Convert a raw dictionary into a Film candidate (not yet validated)."""
		mpa_data = data.get('mpa')
		mpa = Mpa(id=_parse_id(mpa_data['id']), name=mpa_data.get('name')) if mpa_data else None
		genres = [Genre(id=_parse_id(g['id']), name=g.get('name')) for g in (data.get('genres') or [])]
		return Film(
			name=data.get('name'),
			description=data.get('description'),
			release_date=_parse_date(data.get('releaseDate')),
			duration=data.get('duration'),  # passed through; the validator rejects non-integers
			mpa=mpa,
			genres=genres,
		)


def _parse_id(value) -> int:
	"""Identifiers must be JSON integers; floats and numeric strings are rejected, not coerced."""
	if isinstance(value, bool) or not isinstance(value, int):
		raise ValueError(f"identifier must be an integer, got {value!r}")
	return value


def _parse_date(value: Optional[str]) -> Optional[date]:
	"""ISO date string -> date; missing values stay None for the validator to report."""
	if not value:
		return None
	return date.fromisoformat(value)
