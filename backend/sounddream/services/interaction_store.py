"""Read-only access to listener interactions and the track catalogue.

The recommender only ever reads through the `InteractionStore` protocol, so
tests can swap in an in-memory store and production uses `SqlInteractionStore`.
"""
import functools
import logging
from collections import defaultdict
from typing import Iterable, Optional, Protocol

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.errors import DataAccessError
from ..models.music import Artist, LibraryEntry, PersonalPlay, Track, TrackLike, User
from .types import (
    AlbumRef,
    ArtistRef,
    CandidateRecord,
    ListenerInteractions,
    PlayRecord,
    PopularTrack,
    TrackMetadata,
    UNKNOWN_ARTIST_NAME,
)

logger = logging.getLogger(__name__)


class InteractionStore(Protocol):
    def get_listener_interactions(self, listener_id: int) -> Optional[ListenerInteractions]:
        """Library and personal plays of a listener, or None if the listener does not exist."""
        ...

    def get_tracks_liked_by(self, listener_id: int) -> list[int]:
        ...

    def get_liker_sets(self, track_ids: Iterable[int]) -> dict[int, frozenset[int]]:
        """Liker set for every requested id; ids without likes map to an empty set."""
        ...

    def get_top_tracks(self, limit: int, public_only: bool = True) -> list[CandidateRecord]:
        """Up to `limit` non-deleted tracks, most played first (ties by ascending id)."""
        ...

    def get_most_played(
        self, limit: int, exclude: Iterable[int] = (), public_only: bool = True
    ) -> list[PopularTrack]:
        """Like get_top_tracks without liker sets, skipping `exclude` inside the query."""
        ...


def _wrap_errors(fn):
    """Re-raise any SQLAlchemy failure as a DataAccessError."""
    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            logger.debug('interaction store %s failed: %s', fn.__name__, exc)
            raise DataAccessError(f"interaction store {fn.__name__} failed") from exc
    return wrapper


def track_metadata(track: Track) -> TrackMetadata:
    if track.artist is not None:
        artist = ArtistRef(id=track.artist.id, name=track.artist.name)
    else:
        artist = ArtistRef(id=None, name=UNKNOWN_ARTIST_NAME)
    album = AlbumRef(id=track.album.id, title=track.album.title) if track.album else None
    return TrackMetadata(
        title=track.title,
        cover_url=track.cover_url,
        audio_url=track.audio_url,
        plays=track.plays or 0,
        artist=artist,
        album=album,
    )


class SqlInteractionStore:
    """InteractionStore backed by a SQLAlchemy session (one per request)."""

    def __init__(self, db: Session):
        self.db = db

    @_wrap_errors
    def get_listener_interactions(self, listener_id: int) -> Optional[ListenerInteractions]:
        if self.db.get(User, listener_id) is None:
            return None
        library = self.db.query(LibraryEntry.track_id).filter(LibraryEntry.user_id == listener_id).all()
        plays = (
            self.db.query(PersonalPlay.track_id, PersonalPlay.count)
            .filter(PersonalPlay.user_id == listener_id)
            .all()
        )
        return ListenerInteractions(
            library=tuple(int(r[0]) for r in library),
            personal_plays=tuple(PlayRecord(track_id=int(tid), count=int(count or 0)) for tid, count in plays),
        )

    @_wrap_errors
    def get_tracks_liked_by(self, listener_id: int) -> list[int]:
        rows = self.db.query(TrackLike.track_id).filter(TrackLike.user_id == listener_id).all()
        return [int(r[0]) for r in rows]

    @_wrap_errors
    def get_liker_sets(self, track_ids: Iterable[int]) -> dict[int, frozenset[int]]:
        ids = set(track_ids)
        if not ids:
            return {}
        grouped: dict[int, set[int]] = defaultdict(set)
        rows = (
            self.db.query(TrackLike.track_id, TrackLike.user_id)
            .filter(TrackLike.track_id.in_(ids))
            .all()
        )
        for tid, uid in rows:
            grouped[int(tid)].add(int(uid))
        return {tid: frozenset(grouped.get(tid, ())) for tid in ids}

    def _most_played_query(self, public_only: bool):
        q = (
            self.db.query(Track)
            .outerjoin(Artist, Track.artist_id == Artist.id)
            .options(joinedload(Track.artist), joinedload(Track.album))
            .filter(Track.is_deleted.is_(False))
        )
        if public_only:
            # tracks without an artist stay eligible and render as the unknown artist
            q = q.filter(or_(Track.artist_id.is_(None), Artist.is_public.is_(True)))
        return q.order_by(Track.plays.desc(), Track.id.asc())

    @_wrap_errors
    def get_top_tracks(self, limit: int, public_only: bool = True) -> list[CandidateRecord]:
        tracks = self._most_played_query(public_only).limit(limit).all()
        likers = self.get_liker_sets(t.id for t in tracks)
        return [
            CandidateRecord(
                track_id=t.id,
                likers=likers.get(t.id, frozenset()),
                plays=t.plays or 0,
                metadata=track_metadata(t),
            )
            for t in tracks
        ]

    @_wrap_errors
    def get_most_played(
        self, limit: int, exclude: Iterable[int] = (), public_only: bool = True
    ) -> list[PopularTrack]:
        q = self._most_played_query(public_only)
        skip = set(exclude)
        if skip:
            q = q.filter(~Track.id.in_(skip))
        return [
            PopularTrack(track_id=t.id, plays=t.plays or 0, metadata=track_metadata(t))
            for t in q.limit(limit).all()
        ]
