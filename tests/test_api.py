"""
HTTP tests for the FastAPI layer: routing, payload shapes and error-to-status mapping.
"""

import pytest
from fastapi.testclient import TestClient

from api import create_app
from filmorate.config import Settings

FILM = {
	"name": "The General",
	"description": "A Confederate engineer chases his stolen locomotive.",
	"releaseDate": "1926-12-31",
	"duration": 78,
	"mpa": {"id": 1},
	"genres": [{"id": 1}, {"id": 6}, {"id": 1}],
}


@pytest.fixture
def client():
	app = create_app(Settings(log_level="WARNING"))
	return TestClient(app)


def create_user(client, login, name=""):
	resp = client.post("/users", json={"email": f"{login}@example.com", "login": login, "name": name, "birthday": "1990-05-05"})
	assert resp.status_code == 200, resp.text
	return resp.json()


def test_health(client):
	resp = client.get("/health")
	assert resp.status_code == 200
	assert resp.json()["status"] == "ok"


def test_create_and_get_film(client):
	resp = client.post("/films", json=FILM)
	assert resp.status_code == 200, resp.text
	film = resp.json()
	assert film["id"] == 1
	assert film["releaseDate"] == "1926-12-31"
	assert film["mpa"] == {"id": 1, "name": "G"}
	assert film["genres"] == [{"id": 1, "name": "Comedy"}, {"id": 6, "name": "Action"}]
	assert film["likes"] == 0

	assert client.get("/films/1").json() == film
	assert client.get("/films").json() == [film]


def test_film_validation_errors(client):
	resp = client.post("/films", json={**FILM, "releaseDate": "1895-12-27"})
	assert resp.status_code == 400
	assert resp.json()["error"]["field"] == "releaseDate"

	resp = client.post("/films", json={**FILM, "name": ""})
	assert resp.status_code == 400

	# Unparseable body values are rejected before reaching the core
	resp = client.post("/films", json={**FILM, "releaseDate": "not a date"})
	assert resp.status_code == 400

	assert client.get("/films").json() == []


def test_film_with_unknown_genre(client):
	resp = client.post("/films", json={**FILM, "genres": [{"id": 999}]})
	assert resp.status_code == 404
	assert "999" in resp.json()["error"]["message"]


def test_update_film(client):
	client.post("/films", json=FILM)
	resp = client.put("/films", json={**FILM, "id": 1, "name": "Renamed", "mpa": {"id": 3}})
	assert resp.status_code == 200
	assert resp.json()["name"] == "Renamed"
	assert resp.json()["mpa"]["name"] == "PG-13"

	assert client.put("/films", json={**FILM, "id": 9}).status_code == 404
	assert client.put("/films", json=FILM).status_code == 400


def test_users_and_friends(client):
	ada = create_user(client, "ada", "Ada")
	alan = create_user(client, "alan")
	grace = create_user(client, "grace")
	assert alan["name"] == "alan"

	assert client.put(f"/users/{ada['id']}/friends/{alan['id']}").status_code == 200
	assert client.put(f"/users/{ada['id']}/friends/{grace['id']}").status_code == 200
	assert client.put(f"/users/{alan['id']}/friends/{grace['id']}").status_code == 200

	friends = client.get(f"/users/{alan['id']}/friends").json()
	assert [u["login"] for u in friends] == ["ada", "grace"]

	common = client.get(f"/users/{ada['id']}/friends/common/{alan['id']}").json()
	assert [u["login"] for u in common] == ["grace"]

	# Duplicate is a conflict, self-friending a validation error, unknown ids 404
	assert client.put(f"/users/{alan['id']}/friends/{ada['id']}").status_code == 409
	assert client.put(f"/users/{ada['id']}/friends/{ada['id']}").status_code == 400
	assert client.put(f"/users/{ada['id']}/friends/77").status_code == 404

	assert client.delete(f"/users/{ada['id']}/friends/{alan['id']}").status_code == 200
	assert client.delete(f"/users/{ada['id']}/friends/{alan['id']}").status_code == 200
	assert [u["login"] for u in client.get(f"/users/{ada['id']}/friends").json()] == ["grace"]


def test_user_validation_and_update(client):
	resp = client.post("/users", json={"email": "bad", "login": "x", "birthday": "1990-01-01"})
	assert resp.status_code == 400
	assert resp.json()["error"]["field"] == "email"

	user = create_user(client, "joe")
	resp = client.put("/users", json={**user, "name": "Joseph"})
	assert resp.status_code == 200
	assert client.get(f"/users/{user['id']}").json()["name"] == "Joseph"
	assert client.get("/users/123").status_code == 404


def test_likes_and_popular(client):
	u1 = create_user(client, "u1")
	u2 = create_user(client, "u2")
	for name in ("F1", "F2", "F3"):
		client.post("/films", json={**FILM, "name": name})

	assert client.put(f"/films/2/like/{u1['id']}").status_code == 200
	assert client.put(f"/films/2/like/{u2['id']}").status_code == 200
	assert client.put(f"/films/3/like/{u1['id']}").status_code == 200
	assert client.put(f"/films/2/like/{u1['id']}").status_code == 409

	popular = client.get("/films/popular", params={"count": 2}).json()
	assert [(f["name"], f["likes"]) for f in popular] == [("F2", 2), ("F3", 1)]
	assert len(client.get("/films/popular").json()) == 3

	assert client.delete(f"/films/3/like/{u1['id']}").status_code == 200
	assert client.delete(f"/films/3/like/{u1['id']}").status_code == 404
	assert client.put(f"/films/99/like/{u1['id']}").status_code == 404


def test_delete_entities(client):
	user = create_user(client, "gone")
	client.post("/films", json=FILM)
	client.put(f"/films/1/like/{user['id']}")

	assert client.delete(f"/users/{user['id']}").status_code == 200
	assert client.get(f"/users/{user['id']}").status_code == 404
	assert client.get("/films/1").json()["likes"] == 0

	assert client.delete("/films/1").status_code == 200
	assert client.delete("/films/1").status_code == 404


def test_classification_routes(client):
	mpa = client.get("/mpa").json()
	assert [m["name"] for m in mpa] == ["G", "PG", "PG-13", "R", "NC-17"]
	assert client.get("/mpa/4").json() == {"id": 4, "name": "R"}
	assert client.get("/mpa/42").status_code == 404

	genres = client.get("/genres").json()
	assert genres[0] == {"id": 1, "name": "Comedy"}
	assert client.get("/genres/6").json()["name"] == "Action"
	assert client.get("/genres/42").status_code == 404
