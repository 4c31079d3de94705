from __future__ import annotations

from sqlalchemy import String, Integer, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional
from datetime import datetime
from ..core.db import Base

class Artist(Base):
    __tablename__ = 'artists'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    # private artists are hidden from recommendation surfaces
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)
    tracks: Mapped[list['Track']] = relationship(back_populates='artist')

class Album(Base):
    __tablename__ = 'albums'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), index=True)
    artist_id: Mapped[int | None] = mapped_column(ForeignKey('artists.id'), nullable=True)
    tracks: Mapped[list['Track']] = relationship(back_populates='album')

class Track(Base):
    __tablename__ = 'tracks'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), index=True)
    album_id: Mapped[int | None] = mapped_column(ForeignKey('albums.id'), nullable=True)
    artist_id: Mapped[int | None] = mapped_column(ForeignKey('artists.id'), nullable=True)
    audio_url: Mapped[str | None] = mapped_column(String(500))
    cover_url: Mapped[str | None] = mapped_column(String(500))
    # global play counter, drives the candidate pool and the fallback ordering
    plays: Mapped[int] = mapped_column(Integer, default=0, index=True)
    # soft delete: row stays for history but never surfaces again
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    album: Mapped[Optional[Album]] = relationship(back_populates='tracks')
    artist: Mapped[Optional[Artist]] = relationship(back_populates='tracks')

class User(Base):
    __tablename__ = 'users'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

class TrackLike(Base):
    __tablename__ = 'track_likes'
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), primary_key=True)
    track_id: Mapped[int] = mapped_column(ForeignKey('tracks.id'), primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

class LibraryEntry(Base):
    """A track saved to a listener's personal library."""
    __tablename__ = 'user_library'
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), primary_key=True)
    track_id: Mapped[int] = mapped_column(ForeignKey('tracks.id'), primary_key=True)
    added_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

class PersonalPlay(Base):
    """Per-listener play counter for one track."""
    __tablename__ = 'personal_plays'
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), primary_key=True)
    track_id: Mapped[int] = mapped_column(ForeignKey('tracks.id'), primary_key=True)
    count: Mapped[int] = mapped_column(Integer, default=0)
    last_played_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
