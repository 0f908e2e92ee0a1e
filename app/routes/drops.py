from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.database import get_session
from app.models.drop import Drop
from app.schemas.catalog_schemas import DropRead
from app.services.drop_service import DropStatus, get_drop_status

router = APIRouter()


def to_drop_read(drop: Drop, now: datetime) -> DropRead:
    return DropRead.model_validate(
        {**drop.model_dump(), "current_status": get_drop_status(drop, now).value}
    )


@router.get("", response_model=List[DropRead])
def list_drops(
    visible: bool = False,
    session: Session = Depends(get_session),
):
    """All drops, newest first; ``visible=true`` leaves out drops that haven't started."""
    now = datetime.now()
    drops = session.exec(select(Drop).order_by(Drop.created_at.desc())).all()

    results = [to_drop_read(d, now) for d in drops]
    if visible:
        results = [d for d in results if d.current_status != DropStatus.scheduled.value]
    return results


@router.get("/{drop_id}", response_model=DropRead)
def drop_details(drop_id: str, session: Session = Depends(get_session)):
    drop = session.get(Drop, drop_id)
    if not drop:
        raise HTTPException(404, "Drop not found")
    return to_drop_read(drop, datetime.now())
