"""
Validation rules for actors, movies, users and listing filters.

Every rule runs even after an earlier one failed so a single response can
report all invalid fields. Each function fills the Validator it is given.
"""

from datetime import datetime, timezone

from app.schemas.actor import Actor, GENDERS, ensure_utc
from app.schemas.movie import Movie
from app.schemas.search import Filters
from app.schemas.user import User, ROLES
from app.utils.security import MAX_PASSWORD_BYTES
from app.utils.validator import Validator, permitted_value


def validate_actor(v: Validator, actor: Actor) -> Validator:
    v.check(actor.full_name != "", "full_name", "must be provided")
    v.check(len(actor.full_name) <= 200, "full_name", "must be no more than 200 symbols")

    v.check(actor.gender != "", "gender", "must be provided")
    v.check(permitted_value(actor.gender, *GENDERS), "gender", "must be either male or female")

    birth_date = ensure_utc(actor.birth_date)
    v.check(birth_date is not None, "birth_date", "must be provided")
    v.check(birth_date is not None and birth_date < datetime.now(timezone.utc), "birth_date", "must be a valid date")
    return v


def validate_movie(v: Validator, movie: Movie) -> Validator:
    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title) <= 150, "title", "must be no more than 150 symbols")

    v.check(movie.description != "", "description", "must be provided")
    v.check(len(movie.description) < 1000, "description", "must be no more than 1000 symbols")

    v.check(movie.release_date is not None, "release_date", "must be provided")

    v.check(0 <= movie.rating <= 10, "rating", "must be between 0 and 10")

    v.check(len(movie.actor_ids) >= 1, "actors", "must contain at least one actor")
    return v


def validate_password_plaintext(v: Validator, password: str) -> Validator:
    v.check(password != "", "password", "must be provided")
    v.check(len(password.encode("utf-8")) >= 8, "password", "must be at least 8 bytes long")
    v.check(len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES, "password", "must not be more than 72 bytes long")
    return v


def validate_user(v: Validator, user: User) -> Validator:
    v.check(user.name != "", "name", "must be provided")
    v.check(len(user.name.encode("utf-8")) <= 200, "name", "must not be more than 200 bytes long")

    v.check(permitted_value(user.role, *ROLES), "role", "must be either user or admin")

    if user.password_plaintext is not None:
        validate_password_plaintext(v, user.password_plaintext)

    # Without a rejected password, a missing hash is a coding error, not bad input
    if user.password_hash is None and "password" not in v.errors:
        raise RuntimeError("missing password hash for user")
    return v


def validate_filters(v: Validator, filters: Filters) -> Validator:
    v.check(permitted_value(filters.sort, *filters.sort_safelist), "sort", "invalid sort value")
    return v
