"""
Movie Service - movies table and its cast in movies_actors

Writes that touch both tables (insert, update) run in one transaction, so a
movie is never visible with a partially written cast.
"""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from app.models.actor import Actor as ActorModel
from app.models.movie import Movie as MovieModel
from app.models.movie_actor import MovieActor
from app.schemas.movie import Movie
from app.schemas.search import Filters, UnsafeSortError
from app.services.base import MovieStore
from app.services.errors import ActorsNotFoundError, DuplicateNameError, RecordNotFoundError
from app.services.sql_base import SQLAlchemyStore, is_unique_violation

logger = logging.getLogger(__name__)

# Safelisted sort names -> ORM columns
SORT_COLUMNS = {
    "title": MovieModel.title,
    "rating": MovieModel.rating,
    "release_date": MovieModel.release_date,
}


def group_movie_rows(rows: Iterable[Tuple[MovieModel, Optional[int]]]) -> List[Movie]:
    """Fold (movie, actor_id) rows into movies, keeping the order rows arrive in"""
    movies: Dict[int, Movie] = {}
    for row, actor_id in rows:
        movie = movies.get(row.id)
        if movie is None:
            movie = Movie(
                id=row.id,
                title=row.title,
                description=row.description,
                release_date=row.release_date,
                rating=row.rating,
                actor_ids=[],
            )
            movies[row.id] = movie
        if actor_id is not None:
            movie.actor_ids.append(actor_id)
    return list(movies.values())


def distinct_ids(ids: Iterable[int]) -> List[int]:
    return list(dict.fromkeys(ids))


class MovieService(SQLAlchemyStore, MovieStore):

    @staticmethod
    def _joined_query(db: Session):
        # Outer join: a movie whose last actor was deleted is still listed
        return db.query(MovieModel, MovieActor.actor_id).outerjoin(
            MovieActor, MovieModel.id == MovieActor.movie_id
        )

    @staticmethod
    def _check_actors_exist(db: Session, actor_ids: List[int]) -> None:
        """Sequential lookup, stops at the first unknown id"""
        for actor_id in actor_ids:
            found = db.query(ActorModel.id).filter(ActorModel.id == actor_id).first()
            if found is None:
                raise ActorsNotFoundError()

    @staticmethod
    def _write_cast(db: Session, movie_id: int, actor_ids: List[int]) -> None:
        db.add_all([MovieActor(movie_id=movie_id, actor_id=actor_id) for actor_id in actor_ids])
        db.flush()

    def _load(self, db: Session, movie_id: int) -> Movie:
        rows = (
            self._joined_query(db)
            .filter(MovieModel.id == movie_id)
            .order_by(MovieActor.actor_id)
            .all()
        )
        movies = group_movie_rows(rows)
        if not movies:
            raise RecordNotFoundError()
        return movies[0]

    def insert(self, movie: Movie) -> Movie:
        actor_ids = distinct_ids(movie.actor_ids)

        with self.transaction() as db:
            self._check_actors_exist(db, actor_ids)

            row = MovieModel(
                title=movie.title,
                description=movie.description,
                release_date=movie.release_date,
                rating=movie.rating,
            )
            db.add(row)
            try:
                db.flush()
            except IntegrityError as e:
                if is_unique_violation(e, "title"):
                    raise DuplicateNameError("duplicate title") from e
                raise

            self._write_cast(db, row.id, actor_ids)
            return self._load(db, row.id)

    def get(self, movie_id: int) -> Movie:
        with self.transaction() as db:
            return self._load(db, movie_id)

    def get_all(self, filters: Filters) -> List[Movie]:
        column = SORT_COLUMNS.get(filters.sort_column())
        if column is None:
            raise UnsafeSortError(f"no column for sort value {filters.sort}")
        order = column.desc() if filters.sort_direction() == "DESC" else column.asc()

        with self.transaction() as db:
            rows = self._joined_query(db).order_by(order, MovieModel.id, MovieActor.actor_id).all()
            return group_movie_rows(rows)

    def update(self, movie: Movie) -> Movie:
        actor_ids = distinct_ids(movie.actor_ids)

        with self.transaction() as db:
            self._check_actors_exist(db, actor_ids)

            try:
                updated = (
                    db.query(MovieModel)
                    .filter(MovieModel.id == movie.id)
                    .update(
                        {
                            MovieModel.title: movie.title,
                            MovieModel.description: movie.description,
                            MovieModel.release_date: movie.release_date,
                            MovieModel.rating: movie.rating,
                        },
                        synchronize_session=False,
                    )
                )
            except IntegrityError as e:
                if is_unique_violation(e, "title"):
                    raise DuplicateNameError("duplicate title") from e
                raise

            if updated == 0:
                raise RecordNotFoundError()

            # Cast is replaced as a whole, not diffed
            db.query(MovieActor).filter(MovieActor.movie_id == movie.id).delete(synchronize_session=False)
            self._write_cast(db, movie.id, actor_ids)
            return self._load(db, movie.id)

    def delete(self, movie_id: int) -> None:
        with self.transaction() as db:
            db.query(MovieActor).filter(MovieActor.movie_id == movie_id).delete(synchronize_session=False)

            deleted = db.query(MovieModel).filter(MovieModel.id == movie_id).delete(synchronize_session=False)
            if deleted == 0:
                raise RecordNotFoundError()

    def search(self, title: str, actor: str) -> List[Movie]:
        with self.transaction() as db:
            # Stage 1: ids of movies matching both substrings
            matches = (
                db.query(MovieModel.id)
                .join(MovieActor, MovieModel.id == MovieActor.movie_id)
                .join(ActorModel, MovieActor.actor_id == ActorModel.id)
                .filter(func.lower(MovieModel.title).contains(title.lower(), autoescape=True))
                .filter(func.lower(ActorModel.full_name).contains(actor.lower(), autoescape=True))
                .distinct()
                .all()
            )
            movie_ids = [movie_id for (movie_id,) in matches]
            if not movie_ids:
                return []

            # Stage 2: full records with the whole cast, not only the matching actors
            rows = (
                self._joined_query(db)
                .filter(MovieModel.id.in_(movie_ids))
                .order_by(MovieModel.id, MovieActor.actor_id)
                .all()
            )
            logger.debug(f"Search title={title!r} actor={actor!r} matched {len(movie_ids)} movies")
            return group_movie_rows(rows)
