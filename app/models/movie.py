from sqlalchemy import Column, BigInteger, Integer, String, Text, Float, DateTime
from sqlalchemy.orm import relationship
from app.database import Base


class Movie(Base):
    __tablename__ = "movies"

    id = Column(BigInteger().with_variant(Integer(), "sqlite"), primary_key=True, autoincrement=True)
    title = Column(String(150), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    release_date = Column(DateTime(timezone=True), nullable=False)
    rating = Column(Float, nullable=False, default=0.0)

    actor_links = relationship("MovieActor", back_populates="movie", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Movie(id={self.id}, title='{self.title}')>"
