from fastapi import Depends
from sqlmodel import Session

from app.database import get_session
from app.models.artwork import Artwork
from app.services.cart_service import CartService, SqlCartStore
from app.services.payment_service import PaymentGateway, payment_gateway
from app.services.shipping_service import RateSource, usps_rate_source


def get_rate_source() -> RateSource:
    return usps_rate_source


def get_payment_gateway() -> PaymentGateway:
    return payment_gateway


def get_cart_service(session: Session = Depends(get_session)) -> CartService:
    return CartService(
        SqlCartStore(session),
        lambda artwork_id: session.get(Artwork, artwork_id),
    )
