from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

from app.models.base import utc_now
from app.constants.order_status import OrderStatus, PaymentStatus


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    # payment intent id when available, assigned by the caller
    id: str = Field(primary_key=True)
    customer_id: str = Field(index=True)
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None

    # serialized address payloads
    shipping_address: str
    billing_address: str

    status: str = Field(default=OrderStatus.pending.value)
    payment_status: str = Field(default=PaymentStatus.pending.value)

    # line snapshot: {id, title, image, price, quantity}
    items: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    subtotal: int
    shipping: int = 0
    tax: int = 0
    total: int

    tracking_carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None

    # append-only: {date, event, note}
    timeline: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
