from sqlalchemy import Column, BigInteger, Integer, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class MovieActor(Base):
    """
    Link table between movies and actors.
    Rewritten as a whole when a movie is updated; rows of a deleted actor or
    movie are removed by the ON DELETE CASCADE foreign keys.
    """
    __tablename__ = "movies_actors"

    movie_id = Column(
        BigInteger().with_variant(Integer(), "sqlite"),
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
    )
    actor_id = Column(
        BigInteger().with_variant(Integer(), "sqlite"),
        ForeignKey("actors.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    movie = relationship("Movie", back_populates="actor_links")
    actor = relationship("Actor", back_populates="movie_links")

    def __repr__(self):
        return f"<MovieActor(movie_id={self.movie_id}, actor_id={self.actor_id})>"
