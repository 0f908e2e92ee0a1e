from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.config import settings
from app.database import get_session
from app.dependencies.services import get_payment_gateway, get_rate_source
from app.schemas.payment_schemas import (
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    StripeConfigResponse,
)
from app.services.exceptions import PaymentProviderError, PricingError
from app.services.payment_service import PaymentGateway, create_checkout_payment_intent
from app.services.pricing_service import reconcile_pricing
from app.services.shipping_service import RateSource

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    data: CreatePaymentIntentRequest,
    session: Session = Depends(get_session),
    rate_source: RateSource = Depends(get_rate_source),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """Price the cart from stored prices and a fresh rate quote, then open an intent."""
    try:
        pricing = reconcile_pricing(
            session,
            data.items,
            data.shipping_mail_class,
            data.destination_zip,
            rate_source=rate_source,
        )
    except PricingError as e:
        raise HTTPException(400, str(e))

    try:
        return create_checkout_payment_intent(pricing, data.customer_id, gateway=gateway)
    except PaymentProviderError:
        raise HTTPException(500, "Failed to create payment intent")


@router.get("/config", response_model=StripeConfigResponse)
def stripe_config():
    return {"publishable_key": settings.STRIPE_PUBLISHABLE_KEY or None}
