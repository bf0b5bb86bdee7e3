"""
Shared fixtures: freshly wired services and small builders for valid candidates.
"""

from datetime import date

import pytest

from filmorate.models import Film, Genre, Mpa, User
from filmorate.services import build_services

TODAY = date(2026, 1, 15)  # pinned clock for birthday checks


@pytest.fixture
def services():
	return build_services(today=lambda: TODAY)


def make_user(login="joe", name="Joe", email=None, birthday=date(1990, 1, 1)):
	return User(email=email or f"{login}@example.com", login=login, name=name, birthday=birthday)


def make_film(name="Film", release_date=date(2000, 1, 1), duration=120, mpa_id=None, genre_ids=(), description="A film"):
	return Film(
		name=name,
		description=description,
		release_date=release_date,
		duration=duration,
		mpa=Mpa(id=mpa_id) if mpa_id is not None else None,
		genres=[Genre(id=g) for g in genre_ids],
	)
