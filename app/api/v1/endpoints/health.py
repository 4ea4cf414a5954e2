"""
Liveness and database checks for the load balancer and uptime monitor.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import StoreUnavailableError
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check():
    """The process is up and serving requests."""
    return {"status": "healthy", "service": "campus-events", "env": settings.ENV}


@router.get("/db")
def database_health(db: Session = Depends(get_db)):
    """
    Round-trip a trivial query. An unreachable database is reported with the
    same 503 notice as any other store failure.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        raise StoreUnavailableError() from e
    return {"status": "healthy", "component": "database"}
