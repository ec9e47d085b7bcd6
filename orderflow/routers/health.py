"""
Health check router.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import __version__
from ..config import settings
from ..database import get_db

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)) -> dict:
    """Report service status and database reachability."""
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        database = "unavailable"

    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "status": "healthy" if database == "connected" else "degraded",
        "database": database,
    }
