from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.models.base import utc_now


class CartItem(SQLModel, table=True):
    __tablename__ = "cart_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    # customer id, or "guest"
    owner: str = Field(index=True)
    artwork_id: str = Field(index=True)
    quantity: int = 1
    created_at: datetime = Field(default_factory=utc_now)
