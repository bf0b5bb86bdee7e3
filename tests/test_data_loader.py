"""
Tests for loading JSON Lines fixtures through the services.
"""

import json
from pathlib import Path

import pytest

from filmorate.data_loader import DataLoader

ROOT = Path(__file__).resolve().parents[1]


def write_lines(path, records):
	lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
	path.write_text("\n".join(lines) + "\n", encoding="utf-8")
	return path


def test_loads_all_record_kinds(services, tmp_path):
	path = write_lines(tmp_path / "fixtures.jsonl", [
		{"kind": "user", "email": "a@x.io", "login": "a", "birthday": "1990-01-01"},
		{"kind": "user", "email": "b@x.io", "login": "b", "name": "Bee", "birthday": "1991-01-01"},
		{"kind": "film", "name": "F", "releaseDate": "2000-01-01", "duration": 90, "genres": [{"id": 1}]},
		{"kind": "friend", "userId": 1, "friendId": 2},
		{"kind": "like", "filmId": 1, "userId": 2},
	])
	summary = DataLoader(services).load_from_jsonl(str(path))

	assert (summary.users, summary.films, summary.friendships, summary.likes) == (2, 1, 1, 1)
	assert summary.skipped == []
	assert services.users.get_user(1).name == "a"
	assert services.films.get_film(1).mpa.name == "G"
	assert [u.id for u in services.users.friends_of(2)] == [1]
	assert services.films.like_count(1) == 1


def test_bad_lines_are_skipped(services, tmp_path):
	path = write_lines(tmp_path / "fixtures.jsonl", [
		"{not json",
		{"kind": "user", "email": "broken", "login": "a", "birthday": "1990-01-01"},
		{"kind": "film", "name": "Old", "releaseDate": "1800-01-01", "duration": 5},
		{"kind": "user", "email": "ok@x.io", "login": "ok", "birthday": "1990-01-01"},
		{"kind": "friend", "userId": 1, "friendId": 1},
		{"kind": "mystery"},
	])
	summary = DataLoader(services).load_from_jsonl(str(path))
	assert summary.users == 1
	assert summary.skipped == [1, 2, 3, 5, 6]


def test_missing_file(services, tmp_path):
	with pytest.raises(FileNotFoundError):
		DataLoader(services).load_from_jsonl(str(tmp_path / "absent.jsonl"))


def test_bundled_seed_file(services):
	summary = DataLoader(services).load_from_jsonl(str(ROOT / "data" / "seed.jsonl"))
	assert summary.skipped == []
	assert [f.name for f in services.films.popular_films(1)] == ["Metropolis"]
	# Duplicate genre in the fixture collapses
	assert [g.name for g in services.films.get_film(3).genres] == ["Drama", "Thriller"]


def test_non_object_lines_are_skipped(services, tmp_path):
	path = write_lines(tmp_path / "fixtures.jsonl", [
		"[1, 2]",
		"null",
		"\"user\"",
		{"kind": "user", "email": "ok@x.io", "login": "ok", "birthday": "1990-01-01"},
	])
	summary = DataLoader(services).load_from_jsonl(str(path))
	assert summary.skipped == [1, 2, 3]
	assert summary.users == 1
	assert services.users.get_user(1).login == "ok"


def test_wrongly_typed_fields_are_skipped(services, tmp_path):
	path = write_lines(tmp_path / "fixtures.jsonl", [
		{"kind": "user", "email": 5, "login": "a", "birthday": "1990-01-01"},
		{"kind": "user", "email": "b@x.io", "login": ["b"], "birthday": "1990-01-01"},
		{"kind": "user", "email": "c@x.io", "login": "c", "name": 7, "birthday": "1990-01-01"},
		{"kind": "film", "name": "F", "releaseDate": "2000-01-01", "duration": 90, "mpa": 3},
		{"kind": "user", "email": "ok@x.io", "login": "ok", "birthday": "1990-01-01"},
	])
	summary = DataLoader(services).load_from_jsonl(str(path))
	assert summary.skipped == [1, 2, 3, 4]
	assert [u.login for u in services.users.list_users()] == ["ok"]
	assert services.films.list_films() == []


def test_fractional_duration_is_rejected_not_truncated(services, tmp_path):
	path = write_lines(tmp_path / "fixtures.jsonl", [
		{"kind": "film", "name": "F", "releaseDate": "2000-01-01", "duration": 90.7},
		{"kind": "film", "name": "G", "releaseDate": "2000-01-01", "duration": "90"},
	])
	summary = DataLoader(services).load_from_jsonl(str(path))
	assert summary.films == 0
	assert summary.skipped == [1, 2]
	assert services.films.list_films() == []


def test_ids_must_be_integers(services, tmp_path):
	path = write_lines(tmp_path / "fixtures.jsonl", [
		{"kind": "user", "email": "a@x.io", "login": "a", "birthday": "1990-01-01"},
		{"kind": "user", "email": "b@x.io", "login": "b", "birthday": "1990-01-01"},
		{"kind": "film", "name": "F", "releaseDate": "2000-01-01", "duration": 90, "mpa": {"id": 1.9}},
		{"kind": "film", "name": "G", "releaseDate": "2000-01-01", "duration": 90, "genres": [{"id": "2"}]},
		{"kind": "friend", "userId": 1.0, "friendId": 2},
		{"kind": "like", "filmId": "1", "userId": 1},
		{"kind": "friend", "userId": 1, "friendId": 2},
	])
	summary = DataLoader(services).load_from_jsonl(str(path))
	assert summary.skipped == [3, 4, 5, 6]
	assert summary.friendships == 1
	assert services.films.list_films() == []
