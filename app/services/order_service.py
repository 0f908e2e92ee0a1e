import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus, PaymentStatus, TRACKING_URLS
from app.models.base import utc_now
from app.models.customer import Customer
from app.models.order import Order
from app.schemas.order_schemas import OrderCreate, OrderUpdate
from app.services.exceptions import OrderExistsError, OrderNotFoundError, OrderStateError
from app.services.order_event_service import log_order_event

logger = logging.getLogger(__name__)


def create_order(session: Session, data: OrderCreate) -> Order:
    """
    Persist a paid order and roll its total into the customer's stats.

    The caller has already confirmed payment; nothing is checked with the
    provider here. Order insert and stats update commit together.
    """
    if session.get(Order, data.id):
        raise OrderExistsError(data.id)

    now = utc_now()
    order = Order(**data.model_dump(mode="json"), created_at=now, updated_at=now)
    if not order.timeline:
        log_order_event(order, "Order placed", at=now)

    try:
        session.add(order)

        customer = session.exec(
            select(Customer).where(Customer.id == data.customer_id).with_for_update()
        ).first()

        if customer:
            customer.total_spent = customer.total_spent + order.total
            customer.order_count = customer.order_count + 1
            customer.last_order_date = now
            session.add(customer)
        else:
            logger.info(f"Order {order.id}: customer {data.customer_id} not found, stats not updated")

        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise OrderExistsError(data.id) from e
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    logger.info(f"Order {order.id} created: total={order.total} customer={order.customer_id}")
    return order


def get_order(session: Session, order_id: str) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise OrderNotFoundError(order_id)
    return order


def list_orders(session: Session, customer_id: Optional[str] = None) -> List[Order]:
    query = select(Order)
    if customer_id:
        query = query.where(Order.customer_id == customer_id)
    return session.exec(query.order_by(Order.created_at.desc())).all()


def update_order(session: Session, order_id: str, changes: OrderUpdate) -> Order:
    order = get_order(session, order_id)

    if changes.status and changes.status.value != order.status:
        order.status = changes.status.value
        log_order_event(order, f"Status changed to {order.status}", note=changes.note)

    if changes.payment_status:
        order.payment_status = changes.payment_status.value

    if changes.notes is not None:
        order.notes = changes.notes

    order.updated_at = utc_now()
    session.add(order)
    session.commit()
    session.refresh(order)
    return order


def build_tracking_url(carrier: str, number: str) -> str:
    template = TRACKING_URLS.get(carrier, TRACKING_URLS["USPS"])
    return template.format(number=number)


def add_tracking(session: Session, order_id: str, carrier: str, number: str) -> Order:
    """Attach tracking info; this is what moves an order to shipped."""
    order = get_order(session, order_id)

    if order.status in (OrderStatus.cancelled.value, OrderStatus.refunded.value):
        raise OrderStateError(f"Cannot ship an order that is {order.status}")

    order.tracking_carrier = carrier
    order.tracking_number = number
    order.tracking_url = build_tracking_url(carrier, number)
    order.status = OrderStatus.shipped.value
    order.updated_at = utc_now()
    log_order_event(order, "Order shipped", note=f"{carrier} tracking number {number}")

    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info(f"Order {order.id} shipped via {carrier}")
    return order


def refund_order(
    session: Session,
    order_id: str,
    amount: Optional[int] = None,
    reason: Optional[str] = None,
) -> Order:
    order = get_order(session, order_id)

    if order.payment_status != PaymentStatus.paid.value:
        raise OrderStateError(f"Cannot refund an order with payment status {order.payment_status}")

    amount = order.total if amount is None else amount
    if amount > order.total:
        raise OrderStateError("Refund amount exceeds order total")

    full_refund = amount == order.total
    order.payment_status = (
        PaymentStatus.refunded.value if full_refund else PaymentStatus.partially_refunded.value
    )
    order.status = OrderStatus.refunded.value
    order.updated_at = utc_now()

    note = f"${amount} refunded"
    if reason:
        note = f"{note}: {reason}"
    log_order_event(order, "Refund issued", note=note)

    session.add(order)
    session.commit()
    session.refresh(order)
    logger.info(f"Order {order.id} refunded {amount} of {order.total}")
    return order
