from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"
    refunded = "refunded"


class PaymentStatus(str, Enum):
    paid = "paid"
    pending = "pending"
    refunded = "refunded"
    partially_refunded = "partially_refunded"


TRACKING_URLS = {
    "FedEx": "https://www.fedex.com/fedextrack/?trknbr={number}",
    "UPS": "https://www.ups.com/track?tracknum={number}",
    "USPS": "https://tools.usps.com/go/TrackConfirmAction?tLabels={number}",
}
