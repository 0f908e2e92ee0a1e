from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.database import get_session
from app.models.artwork import Artwork
from app.models.drop import Drop
from app.schemas.catalog_schemas import ArtworkRead
from app.services.cart_service import UNBOUNDED_QUANTITY, max_quantity
from app.services.drop_service import is_artwork_purchasable

router = APIRouter()


def to_artwork_read(artwork: Artwork, drops: List[Drop], now: datetime) -> ArtworkRead:
    limit = max_quantity(artwork)
    return ArtworkRead.model_validate(
        {
            **artwork.model_dump(),
            "purchasable": is_artwork_purchasable(artwork, drops, now),
            "max_quantity": None if limit == UNBOUNDED_QUANTITY else limit,
        }
    )


@router.get("", response_model=List[ArtworkRead])
def list_artworks(session: Session = Depends(get_session)):
    now = datetime.now()
    drops = session.exec(select(Drop)).all()
    artworks = session.exec(select(Artwork).order_by(Artwork.created_at.desc())).all()
    return [to_artwork_read(a, drops, now) for a in artworks]


@router.get("/{artwork_id}", response_model=ArtworkRead)
def artwork_details(artwork_id: str, session: Session = Depends(get_session)):
    artwork = session.get(Artwork, artwork_id)
    if not artwork:
        raise HTTPException(404, "Artwork not found")
    drops = session.exec(select(Drop)).all()
    return to_artwork_read(artwork, drops, datetime.now())
