class StoreError(Exception):
    """Base class for storefront business errors."""


# -------- pricing / checkout --------

class PricingError(StoreError):
    """Business-rule rejection while pricing a checkout; shown to the shopper."""


class ArtworkNotFoundError(PricingError):
    def __init__(self, artwork_id: str):
        self.artwork_id = artwork_id
        super().__init__(f"Artwork not found: {artwork_id}")


class ArtworkSoldOutError(PricingError):
    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Artwork sold out: {title}")


class InvalidShippingMethodError(PricingError):
    def __init__(self, mail_class: str):
        self.mail_class = mail_class
        super().__init__(f"Invalid shipping method: {mail_class}")


class InvalidTotalError(PricingError):
    def __init__(self):
        super().__init__("Order total must be greater than 0")


# -------- integrations --------

class PaymentProviderError(StoreError):
    """The payment provider call failed."""


class RateSourceError(StoreError):
    """The carrier rate source could not produce rates."""


# -------- orders --------

class OrderNotFoundError(StoreError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class OrderExistsError(StoreError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order already exists: {order_id}")


class OrderStateError(StoreError):
    """Administrative action not allowed in the order's current state."""
