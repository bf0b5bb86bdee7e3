"""
FastAPI server exposing Filmorate over HTTP.
Endpoints:
- /films, /films/{id}, /films/{id}/like/{userId}, /films/popular?count=10
- /users, /users/{id}, /users/{id}/friends[/{friendId}], /users/{id}/friends/common/{otherId}
- /mpa, /mpa/{id}, /genres, /genres/{id}
- /health

Run: uvicorn api:app --reload
"""

# Standard libraries for the log sink and timing
import sys  # stderr sink for loguru
import time  # measure startup latency
from datetime import date  # request/response date fields
from typing import List, Optional  # precise typing for clarity

# Import FastAPI for the web layer and Pydantic for request/response models
from fastapi import APIRouter, Depends, FastAPI, Request, status  # FastAPI primitives
from fastapi.exceptions import RequestValidationError  # body/path parse failures
from fastapi.responses import JSONResponse  # error envelopes
from pydantic import BaseModel, ConfigDict, Field  # schema definitions

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Internal modules: configuration, errors, models and services
from filmorate.config import Settings, get_settings
from filmorate.data_loader import DataLoader
from filmorate.errors import ConflictError, FilmorateError, NotFoundError, ValidationError
from filmorate.models import Film, Genre, Mpa, User
from filmorate.services import Services, build_services


# ---------------------------------------------------------------- schemas

class MpaRef(BaseModel):
	id: Optional[int] = None  # classification id
	name: Optional[str] = None  # filled in by the server


class GenreRef(BaseModel):
	id: Optional[int] = None  # genre id
	name: Optional[str] = None  # filled in by the server


# Request models are permissive: the core validator decides what is acceptable
class FilmIn(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: Optional[int] = None
	name: Optional[str] = None
	description: Optional[str] = None
	release_date: Optional[date] = Field(None, alias="releaseDate")
	duration: Optional[int] = None
	mpa: Optional[MpaRef] = None
	genres: Optional[List[GenreRef]] = None

	def to_film(self) -> Film:
		return Film(
			id=self.id,
			name=self.name,
			description=self.description,
			release_date=self.release_date,
			duration=self.duration,
			mpa=Mpa(id=self.mpa.id, name=self.mpa.name) if self.mpa else None,
			genres=[Genre(id=g.id, name=g.name) for g in (self.genres or [])],
		)


class FilmOut(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: int
	name: str
	description: Optional[str] = None
	release_date: date = Field(alias="releaseDate")
	duration: int
	mpa: MpaRef
	genres: List[GenreRef]
	likes: int = 0  # current like count

	@classmethod
	def from_film(cls, film: Film, likes: int = 0) -> "FilmOut":
		return cls(
			id=film.id,
			name=film.name,
			description=film.description,
			release_date=film.release_date,
			duration=film.duration,
			mpa=MpaRef(id=film.mpa.id, name=film.mpa.name),
			genres=[GenreRef(id=g.id, name=g.name) for g in film.genres],
			likes=likes,
		)


class UserIn(BaseModel):
	id: Optional[int] = None
	email: Optional[str] = None
	login: Optional[str] = None
	name: Optional[str] = None
	birthday: Optional[date] = None

	def to_user(self) -> User:
		return User(id=self.id, email=self.email, login=self.login, name=self.name, birthday=self.birthday)


class UserOut(BaseModel):
	id: int
	email: str
	login: str
	name: str
	birthday: date

	@classmethod
	def from_user(cls, user: User) -> "UserOut":
		return cls(id=user.id, email=user.email, login=user.login, name=user.name, birthday=user.birthday)


class ClassificationOut(BaseModel):
	id: int
	name: str


# ---------------------------------------------------------------- error handling

def _error_body(code: str, message: str, field: Optional[str] = None) -> dict:
	body = {"code": code, "message": message}
	if field is not None:
		body["field"] = field
	return {"error": body}


def register_error_handlers(app: FastAPI) -> None:
	"""Map the core error taxonomy onto HTTP responses."""

	@app.exception_handler(NotFoundError)
	async def not_found_handler(request: Request, exc: NotFoundError):
		logger.warning(f"[API] {request.method} {request.url.path} -> 404: {exc.message}")
		return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body("NOT_FOUND", exc.message))

	@app.exception_handler(ConflictError)
	async def conflict_handler(request: Request, exc: ConflictError):
		logger.warning(f"[API] {request.method} {request.url.path} -> 409: {exc.reason}")
		return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_error_body("CONFLICT", exc.reason))

	@app.exception_handler(ValidationError)
	async def validation_handler(request: Request, exc: ValidationError):
		logger.warning(f"[API] {request.method} {request.url.path} -> 400: {exc.reason}")
		return JSONResponse(
			status_code=status.HTTP_400_BAD_REQUEST,
			content=_error_body("VALIDATION_ERROR", exc.reason, exc.field),
		)

	@app.exception_handler(RequestValidationError)
	async def request_validation_handler(request: Request, exc: RequestValidationError):
		logger.warning(f"[API] {request.method} {request.url.path} -> 400: {exc.errors()}")
		first = exc.errors()[0] if exc.errors() else {"loc": (), "msg": "invalid request"}
		field = ".".join(str(part) for part in first["loc"] if part != "body") or None
		return JSONResponse(
			status_code=status.HTTP_400_BAD_REQUEST,
			content=_error_body("VALIDATION_ERROR", first["msg"], field),
		)

	@app.exception_handler(FilmorateError)
	async def filmorate_handler(request: Request, exc: FilmorateError):
		logger.warning(f"[API] {request.method} {request.url.path} -> 400: {exc.message}")
		return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body("BAD_REQUEST", exc.message))

	@app.exception_handler(Exception)
	async def generic_handler(request: Request, exc: Exception):
		# Never leak internals to the client
		logger.exception(f"[API] Unhandled error on {request.method} {request.url.path}: {exc}")
		return JSONResponse(
			status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
			content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
		)


# ---------------------------------------------------------------- routes

def get_services(request: Request) -> Services:
	"""Services built for this application instance."""
	return request.app.state.services


films_router = APIRouter(prefix="/films", tags=["films"])
users_router = APIRouter(prefix="/users", tags=["users"])
catalog_router = APIRouter(tags=["catalog"])


def _film_out(services: Services, film: Film) -> FilmOut:
	return FilmOut.from_film(film, likes=services.films.like_count(film.id))


@films_router.get("", response_model=List[FilmOut])
def list_films(services: Services = Depends(get_services)):
	logger.debug("[API] GET /films")
	return [_film_out(services, f) for f in services.films.list_films()]


# Declared before /{film_id} so "popular" is not parsed as an id
@films_router.get("/popular", response_model=List[FilmOut])
def popular_films(count: Optional[int] = None, services: Services = Depends(get_services)):
	logger.debug(f"[API] GET /films/popular count={count}")
	return [_film_out(services, f) for f in services.films.popular_films(count)]


@films_router.get("/{film_id}", response_model=FilmOut)
def get_film(film_id: int, services: Services = Depends(get_services)):
	return _film_out(services, services.films.get_film(film_id))


@films_router.post("", response_model=FilmOut)
def create_film(body: FilmIn, services: Services = Depends(get_services)):
	logger.info(f"[API] POST /films name='{body.name}'")
	return _film_out(services, services.films.create_film(body.to_film()))


@films_router.put("", response_model=FilmOut)
def update_film(body: FilmIn, services: Services = Depends(get_services)):
	logger.info(f"[API] PUT /films id={body.id}")
	return _film_out(services, services.films.update_film(body.to_film()))


@films_router.delete("/{film_id}")
def delete_film(film_id: int, services: Services = Depends(get_services)):
	logger.info(f"[API] DELETE /films/{film_id}")
	services.films.delete_film(film_id)


@films_router.put("/{film_id}/like/{user_id}")
def add_like(film_id: int, user_id: int, services: Services = Depends(get_services)):
	services.films.add_like(film_id, user_id)


@films_router.delete("/{film_id}/like/{user_id}")
def remove_like(film_id: int, user_id: int, services: Services = Depends(get_services)):
	services.films.remove_like(film_id, user_id)


@users_router.get("", response_model=List[UserOut])
def list_users(services: Services = Depends(get_services)):
	logger.debug("[API] GET /users")
	return [UserOut.from_user(u) for u in services.users.list_users()]


@users_router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, services: Services = Depends(get_services)):
	return UserOut.from_user(services.users.get_user(user_id))


@users_router.post("", response_model=UserOut)
def create_user(body: UserIn, services: Services = Depends(get_services)):
	logger.info(f"[API] POST /users login='{body.login}'")
	return UserOut.from_user(services.users.create_user(body.to_user()))


@users_router.put("", response_model=UserOut)
def update_user(body: UserIn, services: Services = Depends(get_services)):
	logger.info(f"[API] PUT /users id={body.id}")
	return UserOut.from_user(services.users.update_user(body.to_user()))


@users_router.delete("/{user_id}")
def delete_user(user_id: int, services: Services = Depends(get_services)):
	logger.info(f"[API] DELETE /users/{user_id}")
	services.users.delete_user(user_id)


@users_router.put("/{user_id}/friends/{friend_id}")
def add_friend(user_id: int, friend_id: int, services: Services = Depends(get_services)):
	services.users.add_friend(user_id, friend_id)


@users_router.delete("/{user_id}/friends/{friend_id}")
def remove_friend(user_id: int, friend_id: int, services: Services = Depends(get_services)):
	services.users.remove_friend(user_id, friend_id)


@users_router.get("/{user_id}/friends", response_model=List[UserOut])
def friends_of(user_id: int, services: Services = Depends(get_services)):
	return [UserOut.from_user(u) for u in services.users.friends_of(user_id)]


@users_router.get("/{user_id}/friends/common/{other_id}", response_model=List[UserOut])
def common_friends(user_id: int, other_id: int, services: Services = Depends(get_services)):
	return [UserOut.from_user(u) for u in services.users.common_friends(user_id, other_id)]


@catalog_router.get("/mpa", response_model=List[ClassificationOut])
def list_mpa(services: Services = Depends(get_services)):
	return [ClassificationOut(id=m.id, name=m.name) for m in services.classifications.list_mpa()]


@catalog_router.get("/mpa/{mpa_id}", response_model=ClassificationOut)
def get_mpa(mpa_id: int, services: Services = Depends(get_services)):
	m = services.classifications.get_mpa(mpa_id)
	return ClassificationOut(id=m.id, name=m.name)


@catalog_router.get("/genres", response_model=List[ClassificationOut])
def list_genres(services: Services = Depends(get_services)):
	return [ClassificationOut(id=g.id, name=g.name) for g in services.classifications.list_genres()]


@catalog_router.get("/genres/{genre_id}", response_model=ClassificationOut)
def get_genre(genre_id: int, services: Services = Depends(get_services)):
	g = services.classifications.get_genre(genre_id)
	return ClassificationOut(id=g.id, name=g.name)


# ---------------------------------------------------------------- application

def configure_logging(level: str) -> None:
	"""Route loguru output to stderr at the configured level."""
	logger.remove()
	logger.add(sys.stderr, level=level.upper())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
	"""Build an application with its own, freshly wired services."""
	settings = settings or get_settings()
	start = time.time()  # start timer for startup latency
	configure_logging(settings.log_level)

	app = FastAPI(title=settings.api_title, version="1.0.0")
	app.state.services = build_services(
		default_popular_count=settings.default_popular_count,
		default_mpa_id=settings.default_mpa_id,
		min_release_date=settings.min_release_date,
		max_description_length=settings.max_description_length,
	)

	# Optional fixtures, applied through the same validation as API input
	if settings.seed_file:
		DataLoader(app.state.services).load_from_jsonl(settings.seed_file)

	register_error_handlers(app)
	app.include_router(films_router)
	app.include_router(users_router)
	app.include_router(catalog_router)

	@app.get("/health")
	async def health():
		"""Return minimal health info for liveness/readiness probes."""
		return {
			"status": "ok",
			"startup_seconds": round(app.state.startup_seconds, 3),
		}

	app.state.startup_seconds = time.time() - start
	logger.info(f"[API] Application ready in {app.state.startup_seconds:.3f}s")
	return app


app = create_app()
