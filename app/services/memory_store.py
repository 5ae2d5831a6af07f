"""
In-memory stores.

Same contract as the SQLAlchemy stores, backed by dicts behind one lock.
Callers always receive copies, never the stored objects. Used by tests and
by STORE_BACKEND=memory for running the API without a database.
"""

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List
import logging

from app.schemas.actor import Actor
from app.schemas.movie import Movie
from app.schemas.search import Filters, UnsafeSortError
from app.schemas.user import User
from app.services.base import ActorStore, MovieStore, UserStore
from app.services.errors import ActorsNotFoundError, DuplicateNameError, RecordNotFoundError

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


class MemoryDatabase:
    """Tables shared by the three in-memory stores"""

    def __init__(self):
        self.lock = Lock()
        self.actors: Dict[int, Actor] = {}
        self.movies: Dict[int, Movie] = {}
        self.users: Dict[str, User] = {}
        self._next_ids = {"actors": 1, "movies": 1, "users": 1}

    def next_id(self, table: str) -> int:
        value = self._next_ids[table]
        self._next_ids[table] = value + 1
        return value

    def movie_ids_of(self, actor_id: int) -> List[int]:
        return sorted(movie.id for movie in self.movies.values() if actor_id in movie.actor_ids)

    def actor_snapshot(self, actor: Actor) -> Actor:
        return actor.model_copy(update={"movie_ids": self.movie_ids_of(actor.id)}, deep=True)

    def actor_store(self) -> "MemoryActorStore":
        return MemoryActorStore(self)

    def movie_store(self) -> "MemoryMovieStore":
        return MemoryMovieStore(self)

    def user_store(self) -> "MemoryUserStore":
        return MemoryUserStore(self)


class MemoryActorStore(ActorStore):

    def __init__(self, database: MemoryDatabase):
        self.db = database

    def insert(self, actor: Actor) -> Actor:
        with self.db.lock:
            if any(a.full_name == actor.full_name for a in self.db.actors.values()):
                raise DuplicateNameError("duplicate full name")
            stored = actor.model_copy(update={"id": self.db.next_id("actors"), "movie_ids": []}, deep=True)
            self.db.actors[stored.id] = stored
            return self.db.actor_snapshot(stored)

    def get(self, actor_id: int) -> Actor:
        with self.db.lock:
            actor = self.db.actors.get(actor_id)
            if actor is None:
                raise RecordNotFoundError()
            return self.db.actor_snapshot(actor)

    def get_all(self) -> List[Actor]:
        with self.db.lock:
            return [self.db.actor_snapshot(actor) for _, actor in sorted(self.db.actors.items())]

    def update(self, actor: Actor) -> Actor:
        with self.db.lock:
            if actor.id not in self.db.actors:
                raise RecordNotFoundError()
            for other in self.db.actors.values():
                if other.full_name == actor.full_name and other.id != actor.id:
                    raise DuplicateNameError("duplicate full name")
            stored = actor.model_copy(update={"movie_ids": []}, deep=True)
            self.db.actors[actor.id] = stored
            return self.db.actor_snapshot(stored)

    def delete(self, actor_id: int) -> None:
        with self.db.lock:
            if actor_id not in self.db.actors:
                raise RecordNotFoundError()
            del self.db.actors[actor_id]
            for movie in self.db.movies.values():
                if actor_id in movie.actor_ids:
                    movie.actor_ids.remove(actor_id)


class MemoryMovieStore(MovieStore):

    SORT_KEYS = {
        "title": lambda movie: movie.title,
        "rating": lambda movie: movie.rating,
        "release_date": lambda movie: movie.release_date,
    }

    def __init__(self, database: MemoryDatabase):
        self.db = database

    def _check_actors_exist(self, actor_ids: List[int]) -> None:
        for actor_id in actor_ids:
            if actor_id not in self.db.actors:
                raise ActorsNotFoundError()

    def _check_title_free(self, movie: Movie) -> None:
        for other in self.db.movies.values():
            if other.title == movie.title and other.id != movie.id:
                raise DuplicateNameError("duplicate title")

    def insert(self, movie: Movie) -> Movie:
        with self.db.lock:
            self._check_actors_exist(movie.actor_ids)
            self._check_title_free(movie)
            stored = movie.model_copy(
                update={
                    "id": self.db.next_id("movies"),
                    "actor_ids": sorted(set(movie.actor_ids)),
                },
                deep=True,
            )
            self.db.movies[stored.id] = stored
            return stored.model_copy(deep=True)

    def get(self, movie_id: int) -> Movie:
        with self.db.lock:
            movie = self.db.movies.get(movie_id)
            if movie is None:
                raise RecordNotFoundError()
            return movie.model_copy(deep=True)

    def get_all(self, filters: Filters) -> List[Movie]:
        key = self.SORT_KEYS.get(filters.sort_column())
        if key is None:
            raise UnsafeSortError(f"no column for sort value {filters.sort}")

        with self.db.lock:
            # Stable sorts: id first, then the requested column
            movies = sorted(self.db.movies.values(), key=lambda movie: movie.id)
            movies.sort(key=key, reverse=filters.sort_direction() == "DESC")
            return [movie.model_copy(deep=True) for movie in movies]

    def update(self, movie: Movie) -> Movie:
        with self.db.lock:
            self._check_actors_exist(movie.actor_ids)
            if movie.id not in self.db.movies:
                raise RecordNotFoundError()
            self._check_title_free(movie)
            stored = movie.model_copy(update={"actor_ids": sorted(set(movie.actor_ids))}, deep=True)
            self.db.movies[movie.id] = stored
            return stored.model_copy(deep=True)

    def delete(self, movie_id: int) -> None:
        with self.db.lock:
            if movie_id not in self.db.movies:
                raise RecordNotFoundError()
            del self.db.movies[movie_id]

    def search(self, title: str, actor: str) -> List[Movie]:
        title, actor = title.lower(), actor.lower()
        with self.db.lock:
            found = []
            for movie_id, movie in sorted(self.db.movies.items()):
                if title not in movie.title.lower():
                    continue
                cast = (self.db.actors[actor_id].full_name.lower() for actor_id in movie.actor_ids)
                if any(actor in name for name in cast):
                    found.append(movie.model_copy(deep=True))
            return found


class MemoryUserStore(UserStore):

    def __init__(self, database: MemoryDatabase):
        self.db = database

    def insert(self, user: User) -> User:
        with self.db.lock:
            if user.name in self.db.users:
                raise DuplicateNameError("duplicate user name")
            stored = User(
                id=self.db.next_id("users"),
                name=user.name,
                role=user.role,
                password_hash=user.password_hash,
            )
            self.db.users[stored.name] = stored
            return stored.model_copy()

    def get(self, name: str) -> User:
        with self.db.lock:
            user = self.db.users.get(name)
            if user is None:
                raise RecordNotFoundError()
            return user.model_copy()


def seed_demo_data(models) -> None:
    """
    Two accounts (user/admin, both with DEMO_PASSWORD), two actors and one
    movie starring both
    """
    for name, role in (("user", "user"), ("admin", "admin")):
        user = User(name=name, role=role)
        user.set_password(DEMO_PASSWORD)
        models.users.insert(user)

    born = datetime(1980, 1, 1, tzinfo=timezone.utc)
    first = models.actors.insert(Actor(full_name="Mock Actor 1", gender="male", birth_date=born))
    second = models.actors.insert(Actor(full_name="Mock Actor 2", gender="female", birth_date=born))

    models.movies.insert(
        Movie(
            title="Mock Movie 1",
            description="Mock movie description",
            release_date=datetime(2020, 1, 1, tzinfo=timezone.utc),
            rating=7.0,
            actor_ids=[first.id, second.id],
        )
    )
    logger.info("In-memory store seeded with demo data")
