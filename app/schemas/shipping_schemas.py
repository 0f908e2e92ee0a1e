from typing import List, Optional
from pydantic import Field, model_serializer

from app.schemas.base import ApiSchema


class ShippingItem(ApiSchema):
    quantity: int = Field(gt=0)


class ShippingRateRequest(ApiSchema):
    origin_zip: str = Field(min_length=5, max_length=10)
    destination_zip: str = Field(min_length=5, max_length=10)
    items: List[ShippingItem]


class ShippingRate(ApiSchema):
    mail_class: str
    mail_class_name: str
    price: int
    delivery_days: Optional[int] = None
    delivery_date: Optional[str] = None


class ShippingRatesResponse(ApiSchema):
    rates: List[ShippingRate]
    error: Optional[str] = None

    @model_serializer(mode="wrap")
    def _omit_empty_error(self, handler):
        # rates keep their nullable fields; only the top-level error is optional
        data = handler(self)
        if self.error is None:
            data.pop("error", None)
        return data
