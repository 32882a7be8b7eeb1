"""Per content type configuration of the write pipeline and the read routes."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..core.cache import recordings_cache
from ..core.errors import ValidationError
from ..models.radio import Artist, BlogPost, Genre, Project, Recording, Show
from ..schemas.radio import (
    ArtistDetail,
    ArtistOut,
    ArtistWithRecordings,
    BlogPostOut,
    GenreDetail,
    GenreOut,
    ProjectOut,
    RecordingDetail,
    RecordingOut,
    ShowDetail,
    ShowOut,
)
from .pipeline import EntityConfig
from .validators import parse_datetime, parse_id_list

TIME_FIELDS = {'time_start': 'timeStart', 'time_end': 'timeEnd'}


def _coerce_times(db: Session, fields: dict) -> dict:
    for column, wire in TIME_FIELDS.items():
        if column in fields:
            fields[column] = parse_datetime(fields[column], wire)
    return fields


def _resolve(db: Session, model, ids: list[str], message: str) -> list:
    if not ids:
        return []
    found = {obj.id: obj for obj in db.execute(select(model).where(model.id.in_(ids))).scalars()}
    missing = [i for i in ids if i not in found]
    if missing:
        raise ValidationError(message)
    return [found[i] for i in ids]


def _coerce_recording(db: Session, fields: dict) -> dict:
    fields = _coerce_times(db, fields)
    if 'show_id' in fields:
        show_id = str(fields['show_id']).strip()
        if db.get(Show, show_id) is None:
            raise ValidationError('The given show could not be found.')
        fields['show_id'] = show_id
    if 'artists' in fields:
        fields['artists'] = _resolve(db, Artist, parse_id_list(fields['artists'], 'artists'),
                                     'One or more of the given artists could not be found.')
    if 'genres' in fields:
        fields['genres'] = _resolve(db, Genre, parse_id_list(fields['genres'], 'genres'),
                                    'One or more of the given genres could not be found.')
    return fields


def _show_in_use(db: Session, show: Show) -> str | None:
    used = db.execute(select(Recording.id).where(Recording.show_id == show.id).limit(1)).first()
    if used is not None:
        return 'This show still has recordings and cannot be removed.'
    return None


ARTISTS = EntityConfig(
    key='artists',
    label='Artist',
    noun='artist',
    response_key='artist',
    model=Artist,
    schema=ArtistOut,
    rules=[('title', 'No artist title was provided.')],
    writable={'title': 'title'},
    files=('image',),
    order_by=lambda: (Artist.slug.asc(),),
    list_options=lambda: (selectinload(Artist.recordings).selectinload(Recording.artists),
                          selectinload(Artist.recordings).selectinload(Recording.genres)),
    list_schema=ArtistWithRecordings,
    detail_options=lambda: (selectinload(Artist.recordings).selectinload(Recording.genres),
                            selectinload(Artist.recordings).selectinload(Recording.artists)),
    detail_schema=ArtistDetail,
)

SHOWS = EntityConfig(
    key='shows',
    label='Show',
    noun='show',
    response_key='show',
    model=Show,
    schema=ShowOut,
    rules=[
        ('title', 'No show title was provided.'),
        ('description', 'No show description was provided.'),
    ],
    writable={'title': 'title', 'description': 'description'},
    files=('image',),
    order_by=lambda: (Show.slug.asc(),),
    detail_options=lambda: (selectinload(Show.recordings).selectinload(Recording.genres),
                            selectinload(Show.recordings).selectinload(Recording.artists)),
    detail_schema=ShowDetail,
    delete_guard=_show_in_use,
)

GENRES = EntityConfig(
    key='genres',
    label='Genre',
    noun='genre',
    response_key='genre',
    model=Genre,
    schema=GenreOut,
    rules=[
        ('title', 'No genre title was given.'),
        ('color', 'No genre color was provided.'),
    ],
    writable={'title': 'title', 'color': 'color'},
    indexed=False,
    order_by=lambda: (Genre.id.desc(),),
    detail_options=lambda: (selectinload(Genre.recordings).selectinload(Recording.artists),
                            selectinload(Genre.recordings).selectinload(Recording.genres)),
    detail_schema=GenreDetail,
    not_found_status=200,
)

RECORDINGS = EntityConfig(
    key='recordings',
    label='Recording',
    noun='recording',
    response_key='recording',
    model=Recording,
    schema=RecordingOut,
    rules=[
        ('title', 'No recording title was provided.'),
        ('artists', 'No artist was given.'),
        ('genres', 'No describing genre was given.'),
        ('timeStart', 'No starting time was provided.'),
        ('timeEnd', 'No ending time was provided.'),
        ('show', 'No show was provided.'),
        ('audio', 'No audio file was uploaded.'),
        ('image', 'No image was uploaded.'),
    ],
    writable={
        'title': 'title',
        'description': 'description',
        'show': 'show_id',
        'artists': 'artists',
        'genres': 'genres',
        'timeStart': 'time_start',
        'timeEnd': 'time_end',
    },
    list_fields=('artists', 'genres'),
    files=('audio', 'image'),
    order_by=lambda: (Recording.time_start.desc(),),
    list_options=lambda: (selectinload(Recording.show), selectinload(Recording.artists),
                          selectinload(Recording.genres)),
    list_schema=RecordingDetail,
    detail_options=lambda: (selectinload(Recording.show), selectinload(Recording.artists),
                            selectinload(Recording.genres)),
    detail_schema=RecordingDetail,
    not_found_status=200,
    coerce=_coerce_recording,
    after_write=lambda: recordings_cache().clear(),
)

BLOG = EntityConfig(
    key='blog',
    label='Blog post',
    noun='blog post',
    response_key='blogPost',
    model=BlogPost,
    schema=BlogPostOut,
    rules=[
        ('title', 'No blog post title was provided.'),
        ('description', 'No blog post description was provided.'),
    ],
    writable={'title': 'title', 'description': 'description'},
    files=('image',),
    order_by=lambda: (BlogPost.created_at.desc(), BlogPost.id.desc()),
)

PROJECTS = EntityConfig(
    key='projects',
    label='Project',
    noun='project',
    response_key='project',
    model=Project,
    schema=ProjectOut,
    rules=[
        ('title', 'No project title was provided.'),
        ('description', 'No project description was provided.'),
        ('timeStart', 'No starting time was provided.'),
        ('timeEnd', 'No ending time was provided.'),
    ],
    writable={
        'title': 'title',
        'description': 'description',
        'timeStart': 'time_start',
        'timeEnd': 'time_end',
    },
    files=('image',),
    order_by=lambda: (Project.created_at.desc(), Project.id.desc()),
    not_found_status=200,
    coerce=_coerce_times,
)

ENTITIES = {cfg.key: cfg for cfg in (ARTISTS, SHOWS, GENRES, RECORDINGS, BLOG, PROJECTS)}
