import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A storefront API call failed; ``message`` is safe to show the shopper."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class StorefrontClient:
    """HTTP client for the checkout endpoints of the StudioDrop API."""

    def __init__(self, base_url: str, http=None, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError("Network error, please try again") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            detail = data.get("detail") if isinstance(data, dict) else None
            message = detail if isinstance(detail, str) else f"Request failed ({response.status_code})"
            raise ApiError(message, response.status_code)
        return data

    def get_stripe_config(self) -> Dict[str, Any]:
        return self._request("GET", "/api/stripe/config")

    def get_shipping_rates(
        self, origin_zip: str, destination_zip: str, quantities: List[int]
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/api/shipping/rates",
            {
                "originZip": origin_zip,
                "destinationZip": destination_zip,
                "items": [{"quantity": q} for q in quantities],
            },
        )

    def create_payment_intent(
        self,
        items: List[Dict[str, Any]],
        shipping_mail_class: str,
        destination_zip: str,
        customer_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "items": items,
            "shippingMailClass": shipping_mail_class,
            "destinationZip": destination_zip,
        }
        if customer_id:
            payload["customerId"] = customer_id
        return self._request("POST", "/api/stripe/create-payment-intent", payload)

    def create_order(self, order: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/orders", order)
