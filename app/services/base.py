"""
Store interfaces and the Models bundle handed to the application.

Handlers only talk to ActorStore / MovieStore / UserStore. Two families of
implementations exist:
- SQLAlchemy backed (ActorService, MovieService, UserService)
- in-memory (app/services/memory_store.py), used for demos and tests
The family is picked once, when the app is created.
"""

from abc import ABC, abstractmethod
from typing import List

from sqlalchemy.orm import sessionmaker

from app.schemas.actor import Actor
from app.schemas.movie import Movie
from app.schemas.search import Filters
from app.schemas.user import User


class ActorStore(ABC):

    @abstractmethod
    def insert(self, actor: Actor) -> Actor:
        """Persist a new actor and return it with its id. DuplicateNameError on a taken full_name."""

    @abstractmethod
    def get(self, actor_id: int) -> Actor:
        """Actor with movie_ids. RecordNotFoundError when absent."""

    @abstractmethod
    def get_all(self) -> List[Actor]:
        ...

    @abstractmethod
    def update(self, actor: Actor) -> Actor:
        """Replace the mutable fields of actor.id. RecordNotFoundError / DuplicateNameError."""

    @abstractmethod
    def delete(self, actor_id: int) -> None:
        """Remove the actor and its links; movies are kept. RecordNotFoundError when absent."""


class MovieStore(ABC):

    @abstractmethod
    def insert(self, movie: Movie) -> Movie:
        """ActorsNotFoundError for an unknown cast member, DuplicateNameError for a taken title."""

    @abstractmethod
    def get(self, movie_id: int) -> Movie:
        ...

    @abstractmethod
    def get_all(self, filters: Filters) -> List[Movie]:
        """All movies ordered by the validated filters"""

    @abstractmethod
    def update(self, movie: Movie) -> Movie:
        """Replace scalar fields and rewrite the cast"""

    @abstractmethod
    def delete(self, movie_id: int) -> None:
        ...

    @abstractmethod
    def search(self, title: str, actor: str) -> List[Movie]:
        """Movies whose title contains `title` and whose cast has a name containing `actor`"""


class UserStore(ABC):

    @abstractmethod
    def insert(self, user: User) -> User:
        """DuplicateNameError on a taken name"""

    @abstractmethod
    def get(self, name: str) -> User:
        """RecordNotFoundError when absent"""


class Models:
    """The three stores of one backend"""

    def __init__(self, actors: ActorStore, movies: MovieStore, users: UserStore):
        self.actors = actors
        self.movies = movies
        self.users = users

    @classmethod
    def from_session_factory(cls, session_factory: sessionmaker) -> "Models":
        from app.services.actor_service import ActorService
        from app.services.movie_service import MovieService
        from app.services.user_service import UserService

        return cls(
            actors=ActorService(session_factory),
            movies=MovieService(session_factory),
            users=UserService(session_factory),
        )

    @classmethod
    def in_memory(cls, seed: bool = False) -> "Models":
        from app.services.memory_store import MemoryDatabase, seed_demo_data

        database = MemoryDatabase()
        models = cls(
            actors=database.actor_store(),
            movies=database.movie_store(),
            users=database.user_store(),
        )
        if seed:
            seed_demo_data(models)
        return models
