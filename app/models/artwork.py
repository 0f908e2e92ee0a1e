from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.models.base import utc_now
from uuid import uuid4


class Artwork(SQLModel, table=True):
    __tablename__ = "artworks"

    #main info
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str
    year: Optional[int] = None
    type: str = Field(default="original")  # original | limited | open
    medium: Optional[str] = None
    description: str = ""

    #Image
    image: str = ""

    #Shop Details
    price: int  # whole dollars
    compare_at_price: Optional[int] = None
    currency: str = Field(default="USD")
    edition_size: Optional[int] = None
    edition_remaining: Optional[int] = None
    sold_out: bool = False
    featured: bool = False

    #timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
