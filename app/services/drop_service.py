from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from app.models.artwork import Artwork
from app.models.drop import Drop


class DropStatus(str, Enum):
    scheduled = "scheduled"
    active = "active"
    ended = "ended"


def _combine(date_part: Optional[str], time_part: Optional[str]) -> Optional[datetime]:
    if not date_part or not time_part:
        return None
    try:
        return datetime.fromisoformat(f"{date_part}T{time_part}")
    except ValueError:
        return None


def get_drop_start(drop: Drop) -> Optional[datetime]:
    """Local start timestamp, or None when the stored fields don't parse."""
    return _combine(drop.start_date, drop.start_time)


def get_drop_end(drop: Drop) -> Optional[datetime]:
    if not drop.has_end_date:
        return None
    return _combine(drop.end_date, drop.end_time)


def get_drop_status(drop: Drop, now: Optional[datetime] = None) -> DropStatus:
    """
    Derive a drop's state from its schedule and the wall clock.

    ``now < start`` is scheduled, ``now > end`` is ended, everything else
    (including both exact boundaries) is active. Nothing is stored; the
    persisted ``status`` column is not consulted.
    """
    now = now or datetime.now()
    start = get_drop_start(drop)
    end = get_drop_end(drop)

    if start is not None and now < start:
        return DropStatus.scheduled
    if end is not None and now > end:
        return DropStatus.ended
    return DropStatus.active


def format_drop_date(drop: Drop) -> str:
    start = get_drop_start(drop)
    if start is None:
        return ""
    hour = start.hour % 12 or 12
    meridiem = "AM" if start.hour < 12 else "PM"
    return f"{start:%B} {start.day}, {start.year} at {hour}:{start:%M} {meridiem}"


def is_drop_visible(drop: Drop, now: Optional[datetime] = None) -> bool:
    return get_drop_status(drop, now) != DropStatus.scheduled


def is_artwork_purchasable(
    artwork: Artwork,
    drops: Iterable[Drop],
    now: Optional[datetime] = None,
) -> bool:
    """
    Whether the catalog should offer checkout for an artwork.

    Sold out is never purchasable. An artwork listed in drops is purchasable
    only while at least one of those drops is active; artworks outside any
    drop follow their sold-out flag alone.
    """
    if artwork.sold_out:
        return False
    statuses = [
        get_drop_status(drop, now)
        for drop in drops
        if artwork.id in (drop.artwork_ids or [])
    ]
    if not statuses:
        return True
    return DropStatus.active in statuses
