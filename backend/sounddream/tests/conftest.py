import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sounddream.core.config import RecommendationSettings, RecommendationWeights
from sounddream.core.db import Base
from sounddream.core.errors import DataAccessError
from sounddream.models import music  # noqa: F401
from sounddream.services.types import (
    ArtistRef,
    CandidateRecord,
    ListenerInteractions,
    PlayRecord,
    PopularTrack,
    TrackMetadata,
)


class FakeStore:
    """In-memory InteractionStore.

    tracks: {track_id: plays}; likes: {track_id: {listener ids}};
    listeners: {listener_id: (library ids, {track_id: play count})}.
    """

    def __init__(self, tracks=None, likes=None, listeners=None, deleted=(), private=(), fail=None,
                 ignore_limit=False, delay=None):
        self.tracks = dict(tracks or {})
        self.likes = {tid: set(users) for tid, users in (likes or {}).items()}
        self.listeners = dict(listeners or {})
        self.deleted = set(deleted)
        self.private = set(private)
        self.fail = fail
        # hand back every visible track whatever limit is asked for
        self.ignore_limit = ignore_limit
        # {method name: seconds to sleep before answering}
        self.delay = dict(delay or {})
        self.calls = []
        self.limits = []

    def _record(self, name):
        self.calls.append(name)
        if name in self.delay:
            time.sleep(self.delay[name])
        if self.fail == name:
            raise DataAccessError(f"{name} failed")

    def get_listener_interactions(self, listener_id):
        self._record('get_listener_interactions')
        if listener_id not in self.listeners:
            return None
        library, plays = self.listeners[listener_id]
        return ListenerInteractions(
            library=tuple(library),
            personal_plays=tuple(PlayRecord(track_id=t, count=c) for t, c in plays.items()),
        )

    def get_tracks_liked_by(self, listener_id):
        self._record('get_tracks_liked_by')
        return sorted(tid for tid, users in self.likes.items() if listener_id in users)

    def get_liker_sets(self, track_ids):
        self._record('get_liker_sets')
        return {tid: frozenset(self.likes.get(tid, ())) for tid in track_ids}

    def _visible(self, limit, public_only, exclude=()):
        visible = [
            tid for tid in self.tracks
            if tid not in self.deleted and tid not in exclude and not (public_only and tid in self.private)
        ]
        visible.sort(key=lambda tid: (-self.tracks[tid], tid))
        return visible if self.ignore_limit else visible[:limit]

    def _metadata(self, tid):
        return TrackMetadata(title=f"Track {tid}", plays=self.tracks[tid], artist=ArtistRef(id=1, name="Artist"))

    def get_most_played(self, limit, exclude=(), public_only=True):
        self._record('get_most_played')
        self.limits.append(('get_most_played', limit))
        exclude = set(exclude)
        return [
            PopularTrack(track_id=tid, plays=self.tracks[tid], metadata=self._metadata(tid))
            for tid in self._visible(limit, public_only, exclude)
        ]

    def get_top_tracks(self, limit, public_only=True):
        self._record('get_top_tracks')
        self.limits.append(('get_top_tracks', limit))
        return [
            CandidateRecord(
                track_id=tid,
                likers=frozenset(self.likes.get(tid, ())),
                plays=self.tracks[tid],
                metadata=self._metadata(tid),
            )
            for tid in self._visible(limit, public_only)
        ]


def make_config(**overrides) -> RecommendationSettings:
    values = dict(
        weights=RecommendationWeights(like=3, library=2, play=1),
        candidate_limit=200,
        top_n=3,
        min_play_threshold=5,
        penalty_base=None,
        score_workers=1,
        public_artists_only=True,
        store_timeout_seconds=5.0,
    )
    values.update(overrides)
    return RecommendationSettings(**values)


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def store_factory():
    return FakeStore


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(bind=engine, autoflush=False)
    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
