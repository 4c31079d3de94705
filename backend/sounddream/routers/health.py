import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.db import get_db

router = APIRouter(prefix="/health", tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/ping")
async def ping():
    """Process is up; touches nothing else."""
    return {"status": "ok"}


@router.get("")
def database_health(db: Session = Depends(get_db)):
    """Recommendations are servable: the interaction database answers a trivial query.

    Returns 503 with the same shape when it does not, so load balancers can pull
    the instance before /recommend starts failing.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning('health: database check failed', exc_info=True)
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": "down"})
    return {"status": "ok", "database": "ok"}
