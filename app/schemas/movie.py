from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Annotated, List, Optional

from app.schemas.actor import ensure_utc

# Ids are BIGINT columns
MAX_RECORD_ID = 2**63 - 1
CastId = Annotated[int, Field(ge=-MAX_RECORD_ID - 1, le=MAX_RECORD_ID)]


class MovieCreate(BaseModel):
    """Schema for adding a movie"""
    model_config = ConfigDict(extra="forbid")

    title: str = ""
    description: str = ""
    release_date: Optional[datetime] = Field(None, description="RFC3339 timestamp")
    rating: float = Field(0.0, description="Rating from 0 to 10")
    actors: List[CastId] = Field(default_factory=list, description="IDs of existing actors")


class MovieUpdate(BaseModel):
    """Schema for PATCH /movies/{id}: omitted or null fields keep their value"""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    release_date: Optional[datetime] = None
    rating: Optional[float] = None
    actors: Optional[List[CastId]] = None


class Movie(BaseModel):
    """Movie snapshot. actor_ids is serialized as "actors"."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int = 0
    title: str = ""
    description: str = ""
    release_date: Optional[datetime] = None
    rating: float = 0.0
    actor_ids: List[int] = Field(default_factory=list, alias="actors")

    @field_validator("release_date")
    @classmethod
    def normalize_release_date(cls, v):
        return ensure_utc(v)


class MovieEnvelope(BaseModel):
    movie: Movie


class MovieListEnvelope(BaseModel):
    movies: List[Movie]


class MessageResponse(BaseModel):
    message: str
