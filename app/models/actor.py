from sqlalchemy import Column, BigInteger, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.database import Base


class Actor(Base):
    __tablename__ = "actors"

    id = Column(BigInteger().with_variant(Integer(), "sqlite"), primary_key=True, autoincrement=True)
    full_name = Column(String(200), unique=True, nullable=False)
    gender = Column(String(6), nullable=False)
    birth_date = Column(DateTime(timezone=True), nullable=False)

    # Link rows go with the actor; the movies themselves stay
    movie_links = relationship("MovieActor", back_populates="actor", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Actor(id={self.id}, full_name='{self.full_name}')>"
