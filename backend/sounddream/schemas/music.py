from pydantic import BaseModel, ConfigDict, Field, model_serializer
from typing import Optional

from ..services.types import Recommendation, UNKNOWN_ARTIST_NAME


class ArtistOut(BaseModel):
    id: Optional[int] = None
    name: str

    @model_serializer(mode="wrap")
    def _drop_missing_id(self, handler):
        # the unknown-artist placeholder goes out as {"name": ...} only
        data = handler(self)
        if data.get("id") is None:
            data.pop("id", None)
        return data


class AlbumOut(BaseModel):
    id: int
    title: str


class RecommendationOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    cover_url: Optional[str] = Field(None, alias="coverUrl")
    audio_url: Optional[str] = Field(None, alias="audioUrl")
    plays: int = 0
    artist: ArtistOut
    album: Optional[AlbumOut] = None
    score: float

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> "RecommendationOut":
        meta = rec.metadata
        artist = meta.artist
        return cls(
            id=rec.track_id,
            title=meta.title,
            cover_url=meta.cover_url,
            audio_url=meta.audio_url,
            plays=meta.plays,
            artist=ArtistOut(id=artist.id, name=artist.name) if artist else ArtistOut(name=UNKNOWN_ARTIST_NAME),
            album=AlbumOut(id=meta.album.id, title=meta.album.title) if meta.album else None,
            score=rec.score,
        )


class RecommendationListOut(BaseModel):
    success: bool = True
    data: list[RecommendationOut]
