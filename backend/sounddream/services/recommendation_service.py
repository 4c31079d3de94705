import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Optional

from ..core.config import RecommendationSettings, get_settings
from ..core.errors import StoreTimeoutError
from .candidate_pool import CandidatePool
from .fallback import FallbackProvider
from .interaction_store import InteractionStore
from .profile_builder import ProfileBuilder
from .ranker import Ranker
from .types import Recommendation

logger = logging.getLogger(__name__)


class _DeadlineStore:
    """Runs every store call on a worker thread and stops waiting at the deadline.

    A call that is still running when the time is up is abandoned: the request
    fails with StoreTimeoutError and whatever the call returns later is dropped.
    One worker per request keeps the store (and its session) on a single thread.
    """

    def __init__(self, store: InteractionStore, timeout: float):
        self._store = store
        self._timeout = timeout
        self._expires_at = time.monotonic() + timeout
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="store-call")

    def _remaining(self, name: str) -> float:
        remaining = self._expires_at - time.monotonic()
        if remaining <= 0:
            raise StoreTimeoutError(f"interaction store {name} exceeded {self._timeout}s deadline")
        return remaining

    def __getattr__(self, name):
        attr = getattr(self._store, name)
        if not callable(attr):
            return attr

        def guarded(*args, **kwargs):
            future = self._executor.submit(attr, *args, **kwargs)
            try:
                return future.result(timeout=self._remaining(name))
            except FutureTimeoutError:
                future.cancel()
                raise StoreTimeoutError(f"interaction store {name} exceeded {self._timeout}s deadline") from None
        return guarded

    def close(self):
        # never block on an abandoned call
        self._executor.shutdown(wait=False, cancel_futures=True)


class RecommendationService:
    """Personalised "you may also like" tracks for one listener.

    Flow per request:
      - build the weighted profile (library, frequent plays, likes);
      - empty profile -> most played fallback;
      - otherwise score the most played candidates against the profile by
        liker-set cosine similarity and keep the positive ones;
      - nothing positive -> most played fallback.
    The caller gets either a full personalised list or a full fallback list.
    """

    def __init__(self, config: RecommendationSettings):
        self.config = config
        self.profile_builder = ProfileBuilder(config)
        self.candidate_pool = CandidatePool(config)
        self.ranker = Ranker(config)
        self.fallback_provider = FallbackProvider(config)

    def recommend(
        self,
        store: InteractionStore,
        listener_id: int,
        timeout: Optional[float] = None,
    ) -> list[Recommendation]:
        if timeout is None:
            return self._recommend(store, listener_id)
        guarded = _DeadlineStore(store, timeout)
        try:
            return self._recommend(guarded, listener_id)
        finally:
            guarded.close()

    def _recommend(self, store: InteractionStore, listener_id: int) -> list[Recommendation]:
        profile, known = self.profile_builder.build(store, listener_id)
        if not known:
            logger.info('recommend: no interactions for listener %s, using most played', listener_id)
            return self.fallback_provider.fallback(store, self.config.top_n)

        candidates = self.candidate_pool.fetch(store)
        if not candidates:
            logger.info('recommend: empty candidate pool for listener %s, using most played', listener_id)
            return self.fallback_provider.fallback(store, self.config.top_n, exclude=known)

        known_likers = store.get_liker_sets(known)
        ranked = self.ranker.rank(profile, known, known_likers, candidates)
        if not ranked:
            logger.info('recommend: no positive scores for listener %s (%s known, %s candidates), using most played',
                        listener_id, len(known), len(candidates))
            return self.fallback_provider.fallback(store, self.config.top_n, exclude=known)

        logger.info('recommend: %s personalised tracks for listener %s', len(ranked), listener_id)
        return ranked


# Global instance
recommendation_service = RecommendationService(get_settings().recommendation)
