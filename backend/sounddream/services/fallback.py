from typing import AbstractSet

from ..core.config import RecommendationSettings
from .interaction_store import InteractionStore
from .types import Recommendation, ranking_key


class FallbackProvider:
    """Most played tracks with score 0, for listeners we cannot personalise for.

    Tracks in `exclude` (the listener's known set) are filtered out by the store,
    so the read is always `n` rows whatever the size of the listener's history.
    """

    def __init__(self, config: RecommendationSettings):
        self.public_only = config.public_artists_only

    def fallback(self, store: InteractionStore, n: int, exclude: AbstractSet[int] = frozenset()) -> list[Recommendation]:
        top = store.get_most_played(n, exclude=exclude, public_only=self.public_only)
        top = sorted(top, key=lambda t: ranking_key(0.0, t.plays, t.track_id))[:n]
        return [Recommendation(track_id=t.track_id, score=0.0, metadata=t.metadata) for t in top]
