"""
Import all models to ensure they are registered with SQLAlchemy
"""
from app.models.actor import Actor
from app.models.movie import Movie
from app.models.movie_actor import MovieActor
from app.models.user import User

__all__ = [
    "Actor",
    "Movie",
    "MovieActor",
    "User",
]
