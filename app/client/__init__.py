from app.client.api import ApiError, StorefrontClient
from app.client.checkout import CheckoutFlow, CheckoutItem, ShippingInfo
from app.client.drop_watch import DropStatusWatcher

__all__ = [
    "ApiError",
    "StorefrontClient",
    "CheckoutFlow",
    "CheckoutItem",
    "ShippingInfo",
    "DropStatusWatcher",
]
