import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import stripe

from app.config import settings
from app.services.exceptions import PaymentProviderError
from app.services.pricing_service import PricingResult

logger = logging.getLogger(__name__)


@dataclass
class PaymentIntentResult:
    id: str
    client_secret: str
    amount: int
    status: str


class PaymentGateway:
    """Thin wrapper over the Stripe PaymentIntents API."""

    def __init__(self, secret_key: str, currency: str = "usd"):
        self.secret_key = secret_key
        self.currency = currency

    def create_payment_intent(self, amount: int, metadata: Dict[str, str]) -> PaymentIntentResult:
        """Create an intent for ``amount`` whole dollars (sent in cents)."""
        logger.info(f"Creating payment intent: amount={amount} {self.currency}")
        try:
            intent = stripe.PaymentIntent.create(
                amount=int(amount * 100),
                currency=self.currency,
                payment_method_types=["card"],
                metadata=metadata,
                api_key=self.secret_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent creation failed: {e}")
            raise PaymentProviderError("Failed to create payment intent") from e

        return PaymentIntentResult(
            id=intent["id"],
            client_secret=intent["client_secret"],
            amount=amount,
            status=intent["status"],
        )

    def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self.secret_key)
        except stripe.StripeError as e:
            logger.error(f"Stripe payment intent lookup failed for {payment_intent_id}: {e}")
            raise PaymentProviderError("Failed to retrieve payment intent") from e

        return PaymentIntentResult(
            id=intent["id"],
            client_secret=intent["client_secret"],
            amount=intent["amount"] // 100,
            status=intent["status"],
        )


payment_gateway = PaymentGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_CURRENCY)


def build_intent_metadata(pricing: PricingResult, customer_id: Optional[str]) -> Dict[str, str]:
    """Audit snapshot stored on the provider intent (values must be strings)."""
    return {
        "customerId": customer_id or "",
        "items": json.dumps(
            [{"id": line.artwork_id, "qty": line.quantity} for line in pricing.lines],
            separators=(",", ":"),
        ),
        "subtotal": str(pricing.subtotal),
        "shipping": str(pricing.shipping),
        "shippingMethod": pricing.rate.mail_class_name,
        "tax": str(pricing.tax),
        "total": str(pricing.total),
    }


def create_checkout_payment_intent(
    pricing: PricingResult,
    customer_id: Optional[str] = None,
    gateway: Optional[PaymentGateway] = None,
) -> Dict[str, Any]:
    """
    Open a provider intent for an already reconciled checkout.

    Each call creates a fresh intent; nothing is persisted here.
    """
    gateway = gateway or payment_gateway

    intent = gateway.create_payment_intent(
        amount=pricing.total,
        metadata=build_intent_metadata(pricing, customer_id),
    )
    logger.info(f"Payment intent {intent.id} created for total {pricing.total}")

    return {
        "client_secret": intent.client_secret,
        "payment_intent_id": intent.id,
        "calculated_total": pricing.total,
        "breakdown": {
            "subtotal": pricing.subtotal,
            "shipping": pricing.shipping,
            "shipping_method": pricing.rate.mail_class_name,
            "tax": pricing.tax,
            "total": pricing.total,
        },
    }
