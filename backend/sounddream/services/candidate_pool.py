from ..core.config import RecommendationSettings
from .interaction_store import InteractionStore
from .types import CandidateRecord


class CandidatePool:
    """Bounded set of globally popular tracks scored on each request."""

    def __init__(self, config: RecommendationSettings):
        self.limit = config.candidate_limit
        self.public_only = config.public_artists_only

    def fetch(self, store: InteractionStore) -> list[CandidateRecord]:
        candidates = store.get_top_tracks(self.limit, public_only=self.public_only)
        # a store may hand back more than asked for; the bound is ours to keep
        return list(candidates[: self.limit])
