from sqlalchemy.exc import IntegrityError
from typing import Dict, List, Tuple, Optional

from app.models.actor import Actor as ActorModel
from app.models.movie_actor import MovieActor
from app.schemas.actor import Actor
from app.services.base import ActorStore
from app.services.errors import DuplicateNameError, RecordNotFoundError
from app.services.sql_base import SQLAlchemyStore, is_unique_violation


def group_actor_rows(rows: List[Tuple[ActorModel, Optional[int]]]) -> List[Actor]:
    """
    Fold (actor, movie_id) rows of the outer join into one Actor per id.

    An actor without movies comes back as a single row with movie_id None;
    that row must produce movie_ids == [], not [None].
    """
    actors: Dict[int, Actor] = {}
    for row, movie_id in rows:
        actor = actors.get(row.id)
        if actor is None:
            actor = Actor(
                id=row.id,
                full_name=row.full_name,
                gender=row.gender,
                birth_date=row.birth_date,
                movie_ids=[],
            )
            actors[row.id] = actor
        if movie_id is not None:
            actor.movie_ids.append(movie_id)
    return list(actors.values())


class ActorService(SQLAlchemyStore, ActorStore):
    """Actors table plus the movie ids joined from movies_actors"""

    @staticmethod
    def _joined_query(db):
        return (
            db.query(ActorModel, MovieActor.movie_id)
            .outerjoin(MovieActor, ActorModel.id == MovieActor.actor_id)
            .order_by(ActorModel.id, MovieActor.movie_id)
        )

    def insert(self, actor: Actor) -> Actor:
        with self.transaction() as db:
            row = ActorModel(full_name=actor.full_name, gender=actor.gender, birth_date=actor.birth_date)
            db.add(row)
            try:
                db.flush()
            except IntegrityError as e:
                if is_unique_violation(e, "full_name"):
                    raise DuplicateNameError("duplicate full name") from e
                raise
            return actor.model_copy(update={"id": row.id, "movie_ids": []})

    def get(self, actor_id: int) -> Actor:
        with self.transaction() as db:
            rows = self._joined_query(db).filter(ActorModel.id == actor_id).all()
            actors = group_actor_rows(rows)
            if not actors:
                raise RecordNotFoundError()
            return actors[0]

    def get_all(self) -> List[Actor]:
        with self.transaction() as db:
            return group_actor_rows(self._joined_query(db).all())

    def update(self, actor: Actor) -> Actor:
        with self.transaction() as db:
            try:
                updated = (
                    db.query(ActorModel)
                    .filter(ActorModel.id == actor.id)
                    .update(
                        {
                            ActorModel.full_name: actor.full_name,
                            ActorModel.gender: actor.gender,
                            ActorModel.birth_date: actor.birth_date,
                        },
                        synchronize_session=False,
                    )
                )
            except IntegrityError as e:
                if is_unique_violation(e, "full_name"):
                    raise DuplicateNameError("duplicate full name") from e
                raise

            if updated == 0:
                raise RecordNotFoundError()

            rows = self._joined_query(db).filter(ActorModel.id == actor.id).all()
            return group_actor_rows(rows)[0]

    def delete(self, actor_id: int) -> None:
        with self.transaction() as db:
            # Drop the actor from every cast; the movies themselves stay
            db.query(MovieActor).filter(MovieActor.actor_id == actor_id).delete(synchronize_session=False)

            deleted = db.query(ActorModel).filter(ActorModel.id == actor_id).delete(synchronize_session=False)
            if deleted == 0:
                raise RecordNotFoundError()
