# app/services/order_event_service.py

from datetime import datetime
from typing import Optional

from app.models.base import utc_now
from app.models.order import Order


def log_order_event(
    order: Order,
    event: str,
    note: Optional[str] = None,
    at: Optional[datetime] = None,
) -> dict:
    """
    Append-only event log for order timeline
    """
    entry = {
        "date": (at or utc_now()).isoformat(),
        "event": event,
        "note": note,
    }
    # reassign so the JSON column is flagged dirty
    order.timeline = [*(order.timeline or []), entry]
    return entry
