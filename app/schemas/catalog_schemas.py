from typing import List, Optional

from app.schemas.base import ApiSchema


class ArtworkRead(ApiSchema):
    id: str
    title: str
    year: Optional[int] = None
    type: str
    medium: Optional[str] = None
    description: str
    image: str
    price: int
    compare_at_price: Optional[int] = None
    currency: str
    edition_size: Optional[int] = None
    edition_remaining: Optional[int] = None
    sold_out: bool
    featured: bool
    purchasable: bool
    max_quantity: Optional[int] = None  # None when unbounded


class DropRead(ApiSchema):
    id: str
    title: str
    subtitle: Optional[str] = None
    description: str
    start_date: str
    start_time: str
    has_end_date: bool
    end_date: Optional[str] = None
    end_time: Optional[str] = None
    status: str
    current_status: str
    artwork_ids: List[str]
    hero_image: Optional[str] = None
    featured: bool
    notify_subscribers: bool


class PublicSettings(ApiSchema):
    store_name: str
    tagline: str
