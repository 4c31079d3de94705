import math
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Mapping, Sequence

from ..core.config import RecommendationSettings
from .similarity import cosine_similarity
from .types import CandidateRecord, InteractionProfile, Recommendation, ranking_key


class Ranker:
    """Item-item neighbourhood scorer.

    score(c) = sum over known tracks k of weight(k) * cosine(likers(c), likers(k)),
    optionally damped by log2(penalty_base + |likers(c)|). Only candidates the
    listener does not know and with a positive score are returned, best first.
    """

    def __init__(self, config: RecommendationSettings):
        self.top_n = config.top_n
        self.penalty_base = config.penalty_base
        self.workers = max(1, min(config.score_workers, os.cpu_count() or 1))

    def score(
        self,
        candidate: CandidateRecord,
        profile: InteractionProfile,
        known_likers: Mapping[int, frozenset[int]],
    ) -> float:
        if not candidate.likers:
            return 0.0
        penalty = math.log2(self.penalty_base + len(candidate.likers)) if self.penalty_base else 1.0
        total = 0.0
        # fixed iteration order keeps float sums identical between runs
        for known_id in sorted(profile):
            likers = known_likers.get(known_id)
            if not likers:
                continue
            total += profile[known_id] * cosine_similarity(candidate.likers, likers) / penalty
        return total

    def rank(
        self,
        profile: InteractionProfile,
        known: frozenset[int],
        known_likers: Mapping[int, frozenset[int]],
        candidates: Sequence[CandidateRecord],
    ) -> list[Recommendation]:
        eligible = [c for c in candidates if c.track_id not in known and c.likers]

        def _score(c: CandidateRecord) -> float:
            return self.score(c, profile, known_likers)

        if self.workers > 1 and len(eligible) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                scores = list(pool.map(_score, eligible))
        else:
            scores = [_score(c) for c in eligible]

        positive = [(c, s) for c, s in zip(eligible, scores) if s > 0]
        positive.sort(key=lambda cs: ranking_key(cs[1], cs[0].plays, cs[0].track_id))
        return [
            Recommendation(track_id=c.track_id, score=s, metadata=c.metadata)
            for c, s in positive[: self.top_n]
        ]
