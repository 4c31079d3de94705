import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..core.db import get_db
from ..core.errors import DataAccessError, StoreTimeoutError
from ..schemas.music import RecommendationListOut, RecommendationOut
from ..services.interaction_store import SqlInteractionStore
from ..services.recommendation_service import recommendation_service

router = APIRouter(prefix="/recommend", tags=["recommend"])

logger = logging.getLogger(__name__)


@router.get(
    "/user/{user_id}",
    response_model=RecommendationListOut,
    responses={204: {"description": "Nothing to recommend"}},
)
def recommend_for_user(
    user_id: int,
    timeout: float | None = Query(None, gt=0, description="Seconds to wait for the data store"),
    db: Session = Depends(get_db),
):
    """Tracks the listener has not interacted with yet, best match first.

    Falls back to the most played tracks (score 0) for listeners without
    usable history. An empty catalogue answers 204 with no body. The listener
    id is trusted: authentication happens upstream.
    """
    if timeout is None:
        timeout = get_settings().recommendation.store_timeout_seconds
    try:
        recs = recommendation_service.recommend(SqlInteractionStore(db), user_id, timeout=timeout)
    except StoreTimeoutError as exc:
        logger.error('recommend_for_user: user_id=%s timed out: %s', user_id, exc)
        raise HTTPException(status_code=504, detail="Recommendation data source timed out")
    except DataAccessError:
        logger.error('recommend_for_user: user_id=%s data access failed', user_id, exc_info=True)
        raise HTTPException(status_code=503, detail="Recommendation data source unavailable")
    if not recs:
        return Response(status_code=204)
    return {"success": True, "data": [RecommendationOut.from_recommendation(r) for r in recs]}
