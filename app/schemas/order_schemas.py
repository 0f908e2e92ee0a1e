from datetime import datetime
from typing import List, Optional
from pydantic import Field

from app.constants.order_status import OrderStatus, PaymentStatus
from app.schemas.base import ApiSchema


class OrderItemSnapshot(ApiSchema):
    id: str
    title: str
    image: Optional[str] = None
    price: int
    quantity: int = Field(gt=0)


class TimelineEvent(ApiSchema):
    date: str
    event: str
    note: Optional[str] = None


class OrderCreate(ApiSchema):
    id: str = Field(min_length=1)
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: str
    billing_address: str
    status: OrderStatus = OrderStatus.pending
    payment_status: PaymentStatus = PaymentStatus.pending
    items: List[OrderItemSnapshot]
    subtotal: int
    shipping: int = 0
    tax: int = 0
    total: int
    tracking_carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    timeline: List[TimelineEvent] = []
    notes: Optional[str] = None


class OrderUpdate(ApiSchema):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None
    note: Optional[str] = None  # timeline note for a status change


class TrackingUpdate(ApiSchema):
    carrier: str = "FedEx"
    number: str = Field(min_length=1)


class RefundRequest(ApiSchema):
    amount: Optional[int] = Field(default=None, gt=0)
    reason: Optional[str] = None


class OrderRead(ApiSchema):
    id: str
    customer_id: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_address: str
    billing_address: str
    status: str
    payment_status: str
    items: List[OrderItemSnapshot]
    subtotal: int
    shipping: int
    tax: int
    total: int
    tracking_carrier: Optional[str] = None
    tracking_number: Optional[str] = None
    tracking_url: Optional[str] = None
    timeline: List[TimelineEvent]
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CustomerRead(ApiSchema):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    total_spent: int
    order_count: int
    last_order_date: Optional[datetime] = None
