import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.config import settings
from app.database import get_session
from app.models.base import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def health_check(session: Session = Depends(get_session)):
    """Liveness plus which checkout integrations are configured."""
    db_status = "ok"
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e}")
        db_status = "failed"

    return {
        "status": "ok",
        "database": db_status,
        "payments": "configured" if settings.STRIPE_SECRET_KEY else "missing",
        # without credentials every quote uses the fallback table
        "shipping_rates": "live" if settings.USPS_CLIENT_ID and settings.USPS_CLIENT_SECRET else "fallback",
        "timestamp": utc_now().isoformat(),
    }
