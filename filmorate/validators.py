"""
Entity validation.
Pure checks run before a film or user is admitted or updated.

Each validator returns None when the candidate is valid, or the ValidationError
for the FIRST rule it violates. Rules are checked in a fixed order so the
reported reason is deterministic.
"""

from datetime import date  # release date bounds and "today"
from typing import Optional  # None signals a valid candidate

from .errors import ValidationError  # result value for the first violated rule
from .models import Film, User  # candidates under validation

# Earliest recognized film date (first public film screening)
MIN_RELEASE_DATE = date(1895, 12, 28)
# Longest accepted film description
MAX_DESCRIPTION_LENGTH = 200


def _is_blank(value) -> bool:
	# Non-string values count as blank so they are reported on their own field
	return not isinstance(value, str) or not value.strip()


def validate_film(
	film: Film,
	min_release_date: date = MIN_RELEASE_DATE,
	max_description_length: int = MAX_DESCRIPTION_LENGTH,
) -> Optional[ValidationError]:
	"""Check a film candidate. Used identically by the create and update paths."""
	if _is_blank(film.name):
		return ValidationError("name", "film name must not be blank")

	# Description is optional, but bounded when present
	if film.description is not None and not isinstance(film.description, str):
		return ValidationError("description", "description must be text")
	if film.description is not None and len(film.description) > max_description_length:
		return ValidationError(
			"description",
			f"description must be at most {max_description_length} characters",
		)

	if not isinstance(film.release_date, date):
		return ValidationError("releaseDate", "release date must be set")
	if film.release_date < min_release_date:
		return ValidationError(
			"releaseDate",
			f"release date must not be before {min_release_date.isoformat()}",
		)

	# bool is an int subclass; reject it explicitly
	if film.duration is None or isinstance(film.duration, bool) or not isinstance(film.duration, int):
		return ValidationError("duration", "duration must be a positive integer")
	if film.duration <= 0:
		return ValidationError("duration", "duration must be a positive integer")

	return None


def validate_user(user: User, today: Optional[date] = None) -> Optional[ValidationError]:
	"""
	Check a user candidate. `today` may be pinned for deterministic checks;
	it defaults to the current local date.
	"""
	if _is_blank(user.email):
		return ValidationError("email", "email must not be blank")
	if "@" not in user.email:
		return ValidationError("email", "email must contain '@'")

	if _is_blank(user.login):
		return ValidationError("login", "login must not be blank")
	if any(ch.isspace() for ch in user.login):
		return ValidationError("login", "login must not contain whitespace")

	if user.name is not None and not isinstance(user.name, str):
		return ValidationError("name", "name must be text")

	if not isinstance(user.birthday, date):
		return ValidationError("birthday", "birthday must be set")
	if user.birthday > (today or date.today()):
		return ValidationError("birthday", "birthday must not be in the future")

	# Blank display name is allowed here; the catalog defaults it to the login
	return None
