from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.models.base import utc_now
from uuid import uuid4


class Customer(SQLModel, table=True):
    __tablename__ = "customers"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str
    email: str = Field(index=True)
    phone: Optional[str] = None

    # aggregate stats, written together with each new order
    total_spent: int = Field(default=0)
    order_count: int = Field(default=0)
    last_order_date: Optional[datetime] = None

    status: str = Field(default="active")
    created_at: datetime = Field(default_factory=utc_now)
