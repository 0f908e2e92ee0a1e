from dataclasses import dataclass
from typing import List, Optional

from sqlmodel import Session

from app.config import settings
from app.models.artwork import Artwork
from app.schemas.shipping_schemas import ShippingRate
from app.services.exceptions import (
    ArtworkNotFoundError,
    ArtworkSoldOutError,
    InvalidShippingMethodError,
    InvalidTotalError,
)
from app.services.shipping_service import (
    RateSource,
    calculate_package_weight,
    get_shipping_rates,
    round_half_up,
)


@dataclass
class PricedLine:
    artwork_id: str
    title: str
    price: int
    quantity: int

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass
class PricingResult:
    lines: List[PricedLine]
    rate: ShippingRate
    subtotal: int
    shipping: int
    tax: int
    total: int
    weight_ounces: int = 0
    destination_zip: str = ""


def calculate_tax(subtotal: int, rate: Optional[float] = None) -> int:
    rate = settings.TAX_RATE if rate is None else rate
    return round_half_up(subtotal * rate)


def reconcile_pricing(
    session: Session,
    items,
    shipping_mail_class: str,
    destination_zip: str,
    rate_source: Optional[RateSource] = None,
) -> PricingResult:
    """
    Server-side price breakdown for a checkout attempt.

    ``items`` carry only ``artwork_id`` and ``quantity``; prices come from the
    artworks table and shipping from a fresh rate lookup, never from the
    client. Raises a PricingError subclass on the first rule violation.
    """
    lines: List[PricedLine] = []
    subtotal = 0

    for item in items:
        artwork = session.get(Artwork, item.artwork_id)
        if not artwork:
            raise ArtworkNotFoundError(item.artwork_id)
        if artwork.sold_out:
            raise ArtworkSoldOutError(artwork.title)

        line = PricedLine(
            artwork_id=artwork.id,
            title=artwork.title,
            price=artwork.price,
            quantity=item.quantity,
        )
        subtotal += line.line_total
        lines.append(line)

    weight = calculate_package_weight(items)
    quote = get_shipping_rates(
        settings.SHIPPING_ORIGIN_ZIP,
        destination_zip,
        weight,
        source=rate_source,
    )

    selected = next((r for r in quote.rates if r.mail_class == shipping_mail_class), None)
    if not selected:
        raise InvalidShippingMethodError(shipping_mail_class)

    tax = calculate_tax(subtotal)
    total = subtotal + selected.price + tax

    if total <= 0:
        raise InvalidTotalError()

    return PricingResult(
        lines=lines,
        rate=selected,
        subtotal=subtotal,
        shipping=selected.price,
        tax=tax,
        total=total,
        weight_ounces=weight,
        destination_zip=destination_zip,
    )
