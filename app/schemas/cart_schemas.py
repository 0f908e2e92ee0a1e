from typing import List, Optional
from pydantic import Field

from app.schemas.base import ApiSchema


class CartLineSchema(ApiSchema):
    artwork_id: str
    quantity: int


class CartAddRequest(ApiSchema):
    artwork_id: str
    quantity: int = Field(default=1, gt=0)


class CartUpdateRequest(ApiSchema):
    quantity: int


class CartResponse(ApiSchema):
    items: List[CartLineSchema]
    notice: Optional[str] = None
