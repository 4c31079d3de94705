import logging
from collections import defaultdict

from ..core.config import RecommendationSettings
from .interaction_store import InteractionStore
from .types import InteractionProfile

logger = logging.getLogger(__name__)


class ProfileBuilder:
    """Folds a listener's library, frequent plays and likes into weighted track scores.

    Each category adds its weight once per track; a track that is both liked
    and in the library gets like + library.
    """

    def __init__(self, config: RecommendationSettings):
        self.weights = config.weights
        self.min_play_threshold = config.min_play_threshold

    def build(self, store: InteractionStore, listener_id: int) -> tuple[InteractionProfile, frozenset[int]]:
        interactions = store.get_listener_interactions(listener_id)
        if interactions is None:
            logger.info('profile: listener %s not found, using empty profile', listener_id)
            return {}, frozenset()

        weights: dict[int, float] = defaultdict(float)

        for tid in set(interactions.library):
            weights[tid] += self.weights.library

        frequent = {p.track_id for p in interactions.personal_plays if p.count >= self.min_play_threshold}
        for tid in frequent:
            weights[tid] += self.weights.play

        for tid in set(store.get_tracks_liked_by(listener_id)):
            weights[tid] += self.weights.like

        profile = dict(weights)
        return profile, frozenset(profile)
