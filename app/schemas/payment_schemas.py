from typing import List, Optional
from pydantic import Field

from app.schemas.base import ApiSchema


class PaymentIntentItem(ApiSchema):
    artwork_id: str
    quantity: int = Field(gt=0)


class CreatePaymentIntentRequest(ApiSchema):
    items: List[PaymentIntentItem]
    shipping_mail_class: str
    destination_zip: str = Field(min_length=5, max_length=10)
    customer_id: Optional[str] = None


class PricingBreakdown(ApiSchema):
    subtotal: int
    shipping: int
    shipping_method: str
    tax: int
    total: int


class PaymentIntentResponse(ApiSchema):
    client_secret: str
    payment_intent_id: str
    calculated_total: int
    breakdown: PricingBreakdown


class StripeConfigResponse(ApiSchema):
    publishable_key: Optional[str] = None
