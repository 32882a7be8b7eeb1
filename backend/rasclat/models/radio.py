from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.db import Base
from ..utils.ids import new_object_id
from ..utils.text import slugify


def utcnow() -> datetime:
    # stored naive, always UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


recording_artists = Table(
    'recording_artists',
    Base.metadata,
    Column('recording_id', ForeignKey('recordings.id', ondelete='CASCADE'), primary_key=True),
    Column('artist_id', ForeignKey('artists.id', ondelete='CASCADE'), primary_key=True),
)

recording_genres = Table(
    'recording_genres',
    Base.metadata,
    Column('recording_id', ForeignKey('recordings.id', ondelete='CASCADE'), primary_key=True),
    Column('genre_id', ForeignKey('genres.id', ondelete='CASCADE'), primary_key=True),
)


class DocumentMixin:
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    slug: Mapped[str] = mapped_column(String(255), index=True, default='')
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


@event.listens_for(DocumentMixin, 'before_insert', propagate=True)
@event.listens_for(DocumentMixin, 'before_update', propagate=True)
def _refresh_slug(mapper, connection, target):
    """Slug always follows the current title."""
    target.slug = slugify(target.title or '')


class Artist(DocumentMixin, Base):
    __tablename__ = 'artists'
    title: Mapped[str] = mapped_column(String(255), unique=True)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    object_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    recordings: Mapped[list['Recording']] = relationship(secondary=recording_artists, back_populates='artists',
                                                         order_by=lambda: Recording.time_start.desc())


class Show(DocumentMixin, Base):
    __tablename__ = 'shows'
    title: Mapped[str] = mapped_column(String(255), unique=True)
    description: Mapped[str] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    object_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    recordings: Mapped[list['Recording']] = relationship(back_populates='show',
                                                         order_by=lambda: Recording.time_start.desc())


class Genre(DocumentMixin, Base):
    __tablename__ = 'genres'
    title: Mapped[str] = mapped_column(String(255), unique=True)
    # display hint, e.g. "#FF0000"
    color: Mapped[str] = mapped_column(String(32))
    recordings: Mapped[list['Recording']] = relationship(secondary=recording_genres, back_populates='genres',
                                                         order_by=lambda: Recording.time_start.desc())


class Recording(DocumentMixin, Base):
    __tablename__ = 'recordings'
    title: Mapped[str] = mapped_column(String(255), index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    show_id: Mapped[str] = mapped_column(ForeignKey('shows.id'))
    audio: Mapped[str] = mapped_column(String(500))
    image: Mapped[str] = mapped_column(String(500))
    object_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    time_start: Mapped[datetime] = mapped_column(DateTime, index=True)
    time_end: Mapped[datetime] = mapped_column(DateTime)
    show: Mapped[Show] = relationship(back_populates='recordings')
    artists: Mapped[list[Artist]] = relationship(secondary=recording_artists, back_populates='recordings')
    genres: Mapped[list[Genre]] = relationship(secondary=recording_genres, back_populates='recordings')


class BlogPost(DocumentMixin, Base):
    __tablename__ = 'blog_posts'
    title: Mapped[str] = mapped_column(String(255), unique=True)
    description: Mapped[str] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    object_id: Mapped[str | None] = mapped_column(String(64), nullable=True)


class Project(DocumentMixin, Base):
    __tablename__ = 'projects'
    title: Mapped[str] = mapped_column(String(255), unique=True)
    description: Mapped[str] = mapped_column(Text)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    object_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    time_start: Mapped[datetime] = mapped_column(DateTime)
    time_end: Mapped[datetime] = mapped_column(DateTime)


class User(Base):
    __tablename__ = 'users'
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    username: Mapped[str] = mapped_column(String(120), unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
