"""
Actor schemas - request bodies, the actor record returned by the stores and
response envelopes
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone
from typing import List, Optional

GENDERS = ("male", "female")


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps (SQLite, clients without offset) are read as UTC"""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ActorCreate(BaseModel):
    """Schema for adding an actor. Missing fields are reported by validate_actor."""
    model_config = ConfigDict(extra="forbid")

    full_name: str = ""
    gender: str = ""
    birth_date: Optional[datetime] = Field(None, description="RFC3339 timestamp")


class ActorUpdate(BaseModel):
    """Schema for PATCH /actors/{id}: omitted or null fields keep their value"""
    model_config = ConfigDict(extra="forbid")

    full_name: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[datetime] = None


class Actor(BaseModel):
    """Actor snapshot. movie_ids comes from the link table and is serialized as "movies"."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int = 0
    full_name: str = ""
    gender: str = ""
    birth_date: Optional[datetime] = None
    movie_ids: List[int] = Field(default_factory=list, alias="movies")

    @field_validator("birth_date")
    @classmethod
    def normalize_birth_date(cls, v):
        return ensure_utc(v)


class ActorEnvelope(BaseModel):
    actor: Actor


class ActorListEnvelope(BaseModel):
    actors: List[Actor]
