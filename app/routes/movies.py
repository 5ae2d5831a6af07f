from fastapi import APIRouter, Depends, Query, status

from app.schemas.movie import (
    MessageResponse,
    Movie,
    MovieCreate,
    MovieEnvelope,
    MovieListEnvelope,
    MovieUpdate,
)
from app.schemas.search import DEFAULT_MOVIE_SORT, Filters
from app.schemas.user import User
from app.schemas.validation import validate_filters, validate_movie
from app.services.base import Models
from app.services.errors import ActorsNotFoundError, DuplicateNameError, RecordNotFoundError, StoreError
from app.utils.dependencies import get_models, read_id_param, require_authenticated_user, require_role_admin
from app.utils.errors import failed_validation, not_found, server_error
from app.utils.validator import Validator

router = APIRouter(prefix="/movies", tags=["Movies"])
search_router = APIRouter(prefix="/search", tags=["Movies"])

DUPLICATE_MOVIE_MESSAGE = "a movie with this title already exists"
MISSING_ACTORS_MESSAGE = "one or more actor IDs do not exist"


def save_errors(v: Validator, error: StoreError):
    """Map a store failure on insert/update to an HTTP error"""
    if isinstance(error, DuplicateNameError):
        v.add_error("title", DUPLICATE_MOVIE_MESSAGE)
        return failed_validation(v.errors)
    if isinstance(error, ActorsNotFoundError):
        v.add_error("actors", MISSING_ACTORS_MESSAGE)
        return failed_validation(v.errors)
    if isinstance(error, RecordNotFoundError):
        return not_found()
    return server_error(error)


# ==================== MOVIES ====================

@router.post("", response_model=MovieEnvelope, status_code=status.HTTP_201_CREATED)
def create_movie(
    movie_data: MovieCreate,
    _: User = Depends(require_role_admin),
    models: Models = Depends(get_models),
):
    """
    Add a movie (admin only)

    - **title**: unique, up to 150 characters
    - **description**: under 1000 characters
    - **release_date**: RFC3339 timestamp
    - **rating**: 0 to 10
    - **actors**: ids of existing actors, at least one
    """
    movie = Movie(
        title=movie_data.title,
        description=movie_data.description,
        release_date=movie_data.release_date,
        rating=movie_data.rating,
        actor_ids=movie_data.actors,
    )

    v = Validator()
    if not validate_movie(v, movie).valid():
        raise failed_validation(v.errors)

    try:
        movie = models.movies.insert(movie)
    except StoreError as e:
        raise save_errors(v, e)

    return {"movie": movie}


@router.get("", response_model=MovieListEnvelope)
def list_movies(
    sort: str = Query(DEFAULT_MOVIE_SORT, description="title, rating or release_date; '-' prefix for descending"),
    _: User = Depends(require_authenticated_user),
    models: Models = Depends(get_models),
):
    """All movies, sorted by rating (highest first) unless asked otherwise"""
    filters = Filters(sort=sort)

    v = Validator()
    if not validate_filters(v, filters).valid():
        raise failed_validation(v.errors)

    try:
        movies = models.movies.get_all(filters)
    except StoreError as e:
        raise server_error(e)
    return {"movies": movies}


@router.get("/{movie_id}", response_model=MovieEnvelope)
def get_movie(
    movie_id: str,
    _: User = Depends(require_authenticated_user),
    models: Models = Depends(get_models),
):
    record_id = read_id_param(movie_id)
    try:
        movie = models.movies.get(record_id)
    except RecordNotFoundError:
        raise not_found()
    except StoreError as e:
        raise server_error(e)
    return {"movie": movie}


@router.patch("/{movie_id}", response_model=MovieEnvelope)
def update_movie(
    movie_id: str,
    update_data: MovieUpdate,
    _: User = Depends(require_role_admin),
    models: Models = Depends(get_models),
):
    """Partial update: omitted or null fields keep their current value; a given cast replaces the old one"""
    record_id = read_id_param(movie_id)
    try:
        movie = models.movies.get(record_id)
    except RecordNotFoundError:
        raise not_found()
    except StoreError as e:
        raise server_error(e)

    changes = update_data.model_dump(exclude_none=True)
    if "actors" in changes:
        changes["actor_ids"] = changes.pop("actors")
    movie = Movie.model_validate({**movie.model_dump(), **changes})

    v = Validator()
    if not validate_movie(v, movie).valid():
        raise failed_validation(v.errors)

    try:
        movie = models.movies.update(movie)
    except StoreError as e:
        raise save_errors(v, e)

    return {"movie": movie}


@router.delete("/{movie_id}", response_model=MessageResponse)
def delete_movie(
    movie_id: str,
    _: User = Depends(require_role_admin),
    models: Models = Depends(get_models),
):
    record_id = read_id_param(movie_id)
    try:
        models.movies.delete(record_id)
    except RecordNotFoundError:
        raise not_found()
    except StoreError as e:
        raise server_error(e)
    return {"message": "movie successfully deleted"}


# ==================== SEARCH ====================

@search_router.get("", response_model=MovieListEnvelope)
def search_movies(
    title: str = Query("", description="Substring of the movie title, case-insensitive"),
    actor: str = Query("", description="Substring of a cast member's full name, case-insensitive"),
    _: User = Depends(require_authenticated_user),
    models: Models = Depends(get_models),
):
    """
    Movies matching both filters

    An empty filter matches everything; a movie with no cast never matches.
    """
    try:
        movies = models.movies.search(title, actor)
    except StoreError as e:
        raise server_error(e)
    return {"movies": movies}
