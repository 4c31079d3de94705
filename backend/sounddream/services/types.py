"""Value objects shared by the recommendation pipeline.

Everything here is an immutable per-request snapshot; nothing is cached
between requests.
"""
from dataclasses import dataclass
from typing import Optional

UNKNOWN_ARTIST_NAME = "Desconhecido"

# track id -> accumulated weight
InteractionProfile = dict[int, float]


@dataclass(frozen=True)
class ArtistRef:
    id: Optional[int]
    name: str


@dataclass(frozen=True)
class AlbumRef:
    id: int
    title: str


@dataclass(frozen=True)
class TrackMetadata:
    title: str
    cover_url: Optional[str] = None
    audio_url: Optional[str] = None
    plays: int = 0
    artist: Optional[ArtistRef] = None
    album: Optional[AlbumRef] = None


@dataclass(frozen=True)
class PlayRecord:
    track_id: int
    count: int


@dataclass(frozen=True)
class ListenerInteractions:
    library: tuple[int, ...] = ()
    personal_plays: tuple[PlayRecord, ...] = ()


@dataclass(frozen=True)
class CandidateRecord:
    track_id: int
    likers: frozenset[int]
    plays: int
    metadata: TrackMetadata


@dataclass(frozen=True)
class PopularTrack:
    """A most played track without its liker set; enough to fill a fallback list."""
    track_id: int
    plays: int
    metadata: TrackMetadata


@dataclass(frozen=True)
class Recommendation:
    track_id: int
    score: float
    metadata: TrackMetadata


def ranking_key(score: float, plays: int, track_id: int) -> tuple[float, int, int]:
    """Sort key: score desc, then play count desc, then track id asc."""
    return (-score, -plays, track_id)
