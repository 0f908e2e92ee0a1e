import logging
import math
from typing import Iterable, List, Optional

import requests

from app.config import settings
from app.schemas.shipping_schemas import ShippingRate, ShippingRatesResponse
from app.services.exceptions import RateSourceError

logger = logging.getLogger(__name__)

OUNCES_PER_ITEM = 32
PACKAGING_OUNCES = 16

MAX_RATES = 5

FALLBACK_BASE_RATE = 8
FALLBACK_PER_LB_RATE = 1

MAIL_CLASS_NAMES = {
    "PRIORITY_MAIL_EXPRESS": "Priority Mail Express",
    "PRIORITY_MAIL": "Priority Mail",
    "USPS_GROUND_ADVANTAGE": "USPS Ground Advantage",
    "GROUND_ADVANTAGE": "USPS Ground Advantage",
    "PARCEL_SELECT": "Parcel Select",
    "FIRST_CLASS_MAIL": "First-Class Mail",
    "MEDIA_MAIL": "Media Mail",
    "LIBRARY_MAIL": "Library Mail",
}

# default box, inches
PACKAGE_LENGTH = 12
PACKAGE_WIDTH = 12
PACKAGE_HEIGHT = 6


def round_half_up(value: float) -> int:
    """Round .5 upwards, the way checkout prices have always been rounded."""
    return int(math.floor(value + 0.5))


def calculate_package_weight(items: Iterable) -> int:
    """Package weight in ounces for cart lines (anything with a ``quantity``)."""
    total_items = sum(_quantity(item) for item in items)
    return total_items * OUNCES_PER_ITEM + PACKAGING_OUNCES


def _quantity(item) -> int:
    if isinstance(item, dict):
        return item["quantity"]
    return item.quantity


def format_mail_class_name(mail_class: Optional[str]) -> str:
    if not mail_class:
        return "Standard Shipping"
    return MAIL_CLASS_NAMES.get(mail_class) or mail_class.replace("_", " ")


def get_fallback_rates(weight_ounces: int) -> ShippingRatesResponse:
    weight_lbs = weight_ounces / 16

    ground_price = round_half_up(FALLBACK_BASE_RATE + weight_lbs * FALLBACK_PER_LB_RATE)
    priority_price = round_half_up(ground_price * 1.5)
    express_price = round_half_up(ground_price * 2.5)

    return ShippingRatesResponse(
        rates=[
            ShippingRate(
                mail_class="USPS_GROUND_ADVANTAGE",
                mail_class_name="USPS Ground Advantage",
                price=ground_price,
                delivery_days=5,
            ),
            ShippingRate(
                mail_class="PRIORITY_MAIL",
                mail_class_name="Priority Mail",
                price=priority_price,
                delivery_days=3,
            ),
            ShippingRate(
                mail_class="PRIORITY_MAIL_EXPRESS",
                mail_class_name="Priority Mail Express",
                price=express_price,
                delivery_days=1,
            ),
        ]
    )


class RateSource:
    """Live carrier rates. Implementations raise RateSourceError on any failure."""

    def fetch_rates(
        self, origin_zip: str, destination_zip: str, weight_ounces: int
    ) -> List[ShippingRate]:
        raise NotImplementedError


class UspsRateSource(RateSource):
    """USPS Prices v3 API, authenticated with an OAuth client-credentials token."""

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        base_url: str = "https://apis.usps.com",
        timeout: float = 10.0,
        http=None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def _get_access_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise RateSourceError("USPS API credentials not configured")

        try:
            response = self.http.post(
                f"{self.base_url}/oauth2/v3/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RateSourceError(f"USPS token request failed: {e}") from e

        if not response.ok:
            raise RateSourceError(f"Failed to get USPS access token: {response.status_code}")

        try:
            token = response.json().get("access_token")
        except (ValueError, AttributeError) as e:
            raise RateSourceError("Malformed USPS token response") from e

        if not token:
            raise RateSourceError("USPS token response had no access_token")
        return token

    def fetch_rates(self, origin_zip, destination_zip, weight_ounces):
        access_token = self._get_access_token()

        pricing_request = {
            "originZIPCode": origin_zip,
            "destinationZIPCode": destination_zip,
            "weight": weight_ounces / 16,
            "length": PACKAGE_LENGTH,
            "width": PACKAGE_WIDTH,
            "height": PACKAGE_HEIGHT,
            "mailClass": "ALL",
            "processingCategory": "MACHINABLE",
            "rateIndicator": "DR",
            "destinationEntryFacilityType": "NONE",
            "priceType": "RETAIL",
        }

        try:
            response = self.http.post(
                f"{self.base_url}/prices/v3/base-rates/search",
                json=pricing_request,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RateSourceError(f"USPS rate request failed: {e}") from e

        if not response.ok:
            raise RateSourceError(f"USPS rate request failed: {response.status_code}")

        try:
            data = response.json()
            raw_rates = data.get("rates") if isinstance(data, dict) else None
            rates = [_normalize_usps_rate(r) for r in raw_rates or []]
        except (ValueError, TypeError, AttributeError) as e:
            raise RateSourceError(f"Malformed USPS rate response: {e}") from e

        if not rates:
            raise RateSourceError("USPS returned no rates")
        return rates


def _normalize_usps_rate(rate: dict) -> ShippingRate:
    mail_class = rate.get("mailClass") or rate.get("rateClass") or "UNKNOWN"
    commitment = rate.get("commitment") or {}
    return ShippingRate(
        mail_class=mail_class,
        mail_class_name=format_mail_class_name(rate.get("mailClass") or rate.get("description")),
        price=round_half_up(float(rate.get("price") or rate.get("totalPrice") or 0)),
        delivery_days=commitment.get("deliveryDays") or None,
        delivery_date=commitment.get("deliveryDate") or None,
    )


def rank_rates(rates: List[ShippingRate]) -> List[ShippingRate]:
    """Cheapest entry per mail class, ascending by price, at most MAX_RATES."""
    cheapest = {}
    for rate in rates:
        current = cheapest.get(rate.mail_class)
        if current is None or rate.price < current.price:
            cheapest[rate.mail_class] = rate
    return sorted(cheapest.values(), key=lambda r: r.price)[:MAX_RATES]


def default_rate_source() -> RateSource:
    return UspsRateSource(
        client_id=settings.USPS_CLIENT_ID,
        client_secret=settings.USPS_CLIENT_SECRET,
        base_url=settings.USPS_API_BASE,
        timeout=settings.USPS_TIMEOUT_SECONDS,
    )


usps_rate_source = default_rate_source()


def get_shipping_rates(
    origin_zip: str,
    destination_zip: str,
    weight_ounces: int,
    source: Optional[RateSource] = None,
) -> ShippingRatesResponse:
    """
    Ranked shipping options for a package.

    Never raises: when the live source fails for any reason the
    deterministic fallback table is returned instead. No retries.
    """
    source = source or usps_rate_source

    try:
        rates = source.fetch_rates(origin_zip, destination_zip, weight_ounces)
    except RateSourceError as e:
        logger.warning(f"Using fallback shipping rates: {e}")
        return get_fallback_rates(weight_ounces)
    except Exception:
        logger.exception("Unexpected rate source failure, using fallback shipping rates")
        return get_fallback_rates(weight_ounces)

    ranked = rank_rates(rates)
    if not ranked:
        return get_fallback_rates(weight_ounces)
    return ShippingRatesResponse(rates=ranked)
