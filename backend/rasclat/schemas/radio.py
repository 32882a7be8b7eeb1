"""Wire shapes of the API.

Field names follow the JSON documents the frontends already consume
(``_id``, ``objectID``, camelCase timestamps), hence the serialization
aliases. Dump with ``model_dump(mode='json', by_alias=True)``.
"""
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    # columns hold naive UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# serialised with a trailing Z
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


def _ids(values):
    return [getattr(v, 'id', v) for v in values or []]


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(serialization_alias='_id')
    title: str
    slug: str
    created_at: UtcDatetime = Field(serialization_alias='createdAt')
    updated_at: UtcDatetime = Field(serialization_alias='updatedAt')


class IndexedOut(DocumentOut):
    object_id: Optional[str] = Field(None, serialization_alias='objectID')


class ArtistOut(IndexedOut):
    image: Optional[str] = None


class ShowOut(IndexedOut):
    description: str
    image: Optional[str] = None


class GenreOut(DocumentOut):
    color: str


class BlogPostOut(IndexedOut):
    description: str
    image: Optional[str] = None


class ProjectOut(IndexedOut):
    description: str
    image: Optional[str] = None
    time_start: UtcDatetime = Field(serialization_alias='timeStart')
    time_end: UtcDatetime = Field(serialization_alias='timeEnd')


class RecordingOut(IndexedOut):
    """Recording with its references as plain identifiers."""
    description: Optional[str] = None
    audio: str
    image: str
    time_start: UtcDatetime = Field(serialization_alias='timeStart')
    time_end: UtcDatetime = Field(serialization_alias='timeEnd')
    show: str = Field(validation_alias='show_id')
    artists: list[str] = []
    genres: list[str] = []

    @field_validator('artists', mode='before')
    @classmethod
    def _artist_ids(cls, v):
        return _ids(v)

    @field_validator('genres', mode='before')
    @classmethod
    def _genre_ids(cls, v):
        return _ids(v)


class RecordingWithGenres(RecordingOut):
    genres: list[GenreOut] = []

    # overrides the id flattening of the parent
    @field_validator('genres', mode='before')
    @classmethod
    def _genre_ids(cls, v):
        return list(v or [])


class RecordingDetail(RecordingOut):
    show: ShowOut = Field(validation_alias='show')
    artists: list[ArtistOut] = []
    genres: list[GenreOut] = []

    @field_validator('artists', mode='before')
    @classmethod
    def _artist_ids(cls, v):
        return list(v or [])

    @field_validator('genres', mode='before')
    @classmethod
    def _genre_ids(cls, v):
        return list(v or [])


class ArtistDetail(ArtistOut):
    recordings: list[RecordingWithGenres] = []


class ArtistWithRecordings(ArtistOut):
    recordings: list[RecordingOut] = []


class ShowDetail(ShowOut):
    recordings: list[RecordingWithGenres] = []


class GenreDetail(GenreOut):
    recordings: list[RecordingOut] = []
