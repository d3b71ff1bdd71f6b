import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, text

from marketplace.config import settings
from marketplace.database import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/check")
def health_check(response: Response, session: Session = Depends(get_session)):
    """Liveness plus a database round trip; 503 when the database is unreachable."""
    try:
        session.exec(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = "failed"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "env": settings.env,
        "timestamp": datetime.utcnow().isoformat(),
    }
