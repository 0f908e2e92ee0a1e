"""
Storefront checkout flow.

Steps run strictly in order: shipping -> delivery -> payment -> review.
Each forward move needs the current step to validate (and usually one API
round-trip); moving back is always allowed. The payment intent is requested
fresh every time the payment step is entered, so prices are re-derived by the
server instead of trusting anything computed earlier in the session.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from app.client.api import ApiError, StorefrontClient
from app.config import settings

logger = logging.getLogger(__name__)

STEPS = ("shipping", "delivery", "payment", "review")

REQUIRED_FIELDS = {
    "email": "Email is required",
    "first_name": "First name is required",
    "last_name": "Last name is required",
    "address": "Address is required",
    "city": "City is required",
    "state": "State is required",
    "zip": "ZIP code is required",
    "phone": "Phone is required",
}

ORDER_FAILED_MESSAGE = "Payment successful but order creation failed. Please contact support."


@dataclass
class CheckoutItem:
    artwork_id: str
    title: str
    price: int
    quantity: int
    image: Optional[str] = None


@dataclass
class ShippingInfo:
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    apartment: str = ""
    city: str = ""
    country: str = "United States"
    state: str = ""
    zip: str = ""
    phone: str = ""

    def to_json(self) -> str:
        data = asdict(self)
        return json.dumps(
            {
                "email": data["email"],
                "firstName": data["first_name"],
                "lastName": data["last_name"],
                "address": data["address"],
                "apartment": data["apartment"],
                "city": data["city"],
                "country": data["country"],
                "state": data["state"],
                "zip": data["zip"],
                "phone": data["phone"],
            }
        )


class CheckoutFlow:

    def __init__(
        self,
        api: StorefrontClient,
        items: List[CheckoutItem],
        customer_id: Optional[str] = None,
        shipping_info: Optional[ShippingInfo] = None,
        origin_zip: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.api = api
        self.items = items
        self.customer_id = customer_id
        self.shipping_info = shipping_info or ShippingInfo()
        self.origin_zip = origin_zip or settings.SHIPPING_ORIGIN_ZIP
        self.clock = clock

        self.step = "shipping"
        self.errors: Dict[str, str] = {}
        self.message: Optional[str] = None

        self.rates: List[dict] = []
        self.selected_rate: Optional[dict] = None

        self.client_secret: Optional[str] = None
        self.payment_intent_id: Optional[str] = None
        self.breakdown: Optional[dict] = None

        self.order: Optional[dict] = None

    # -------- shipping --------

    def validate_shipping(self) -> bool:
        self.errors = {
            field: message
            for field, message in REQUIRED_FIELDS.items()
            if not getattr(self.shipping_info, field)
        }
        return not self.errors

    def continue_to_delivery(self) -> bool:
        if self.step != "shipping":
            return False
        if not self.validate_shipping():
            self.message = "Please fill in all required fields"
            return False

        self.message = None
        self.step = "delivery"
        self.fetch_shipping_rates()
        return True

    # -------- delivery --------

    def fetch_shipping_rates(self) -> None:
        try:
            response = self.api.get_shipping_rates(
                self.origin_zip,
                self.shipping_info.zip,
                [item.quantity for item in self.items],
            )
        except ApiError as e:
            logger.warning(f"Shipping rates unavailable: {e.message}")
            self.message = "Could not fetch shipping rates"
            return

        self.rates = response.get("rates") or []
        self.selected_rate = self.rates[0] if self.rates else None

    def select_rate(self, mail_class: str) -> bool:
        rate = next((r for r in self.rates if r["mailClass"] == mail_class), None)
        if not rate:
            return False
        self.selected_rate = rate
        return True

    def continue_to_payment(self) -> bool:
        if self.step != "delivery":
            return False
        if not self.selected_rate:
            self.message = "Please select a shipping method"
            return False

        self.message = None
        self.step = "payment"
        return self.create_payment_intent()

    # -------- payment --------

    def create_payment_intent(self) -> bool:
        self._clear_payment()
        try:
            response = self.api.create_payment_intent(
                items=[{"artworkId": i.artwork_id, "quantity": i.quantity} for i in self.items],
                shipping_mail_class=self.selected_rate["mailClass"],
                destination_zip=self.shipping_info.zip,
                customer_id=self.customer_id,
            )
        except ApiError as e:
            self.message = e.message or "Failed to initialize payment"
            return False

        if not response.get("clientSecret"):
            self.message = "No client secret returned"
            return False

        self.client_secret = response["clientSecret"]
        self.payment_intent_id = response.get("paymentIntentId")
        self.breakdown = response.get("breakdown")
        return True

    @property
    def payment_ready(self) -> bool:
        return self.step == "payment" and self.client_secret is not None

    def handle_payment_error(self, message: Optional[str]) -> None:
        self.message = message or "Payment failed"

    def handle_payment_success(self) -> bool:
        """
        Record the order once the provider has confirmed payment.

        A failure here is not retried: the shopper has been charged, so they
        get a message pointing them at support instead.
        """
        if not self.payment_ready:
            self.message = "Payment is not ready yet, please try again"
            return False

        try:
            self.order = self.api.create_order(self.build_order())
        except ApiError as e:
            logger.error(f"Order creation failed after payment {self.payment_intent_id}: {e.message}")
            self.message = ORDER_FAILED_MESSAGE
            return False

        self.message = None
        self.step = "review"
        return True

    def build_order(self) -> dict:
        info = self.shipping_info
        address = info.to_json()
        totals = self.breakdown or {}
        order_id = self.payment_intent_id or f"order_{int(self.clock() * 1000)}"

        return {
            "id": order_id,
            "customerId": self.customer_id or "",
            "customerName": f"{info.first_name} {info.last_name}",
            "customerEmail": info.email,
            "customerPhone": info.phone,
            "shippingAddress": address,
            "billingAddress": address,
            "status": "processing",
            "paymentStatus": "paid",
            "items": [
                {
                    "id": item.artwork_id,
                    "title": item.title,
                    "image": item.image,
                    "price": item.price,
                    "quantity": item.quantity,
                }
                for item in self.items
            ],
            "subtotal": totals.get("subtotal", 0),
            "shipping": totals.get("shipping", 0),
            "tax": totals.get("tax", 0),
            "total": totals.get("total", 0),
            "timeline": [
                {
                    "date": datetime.now(timezone.utc).isoformat(),
                    "event": "Order placed",
                    "note": "Payment confirmed via Stripe",
                }
            ],
        }

    # -------- navigation --------

    def go_to_step(self, target: str) -> bool:
        """Jump back to an earlier step. Forward jumps are refused."""
        if target not in STEPS or STEPS.index(target) >= STEPS.index(self.step):
            return False
        if self.step == "review":
            return False

        self.step = target
        self.message = None
        if STEPS.index(target) < STEPS.index("payment"):
            self._clear_payment()
        return True

    def _clear_payment(self) -> None:
        self.client_secret = None
        self.payment_intent_id = None
        self.breakdown = None
