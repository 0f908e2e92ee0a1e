import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.config import settings
from app.database import get_session
from app.dependencies.services import get_payment_gateway
from app.schemas.order_schemas import (
    OrderCreate,
    OrderRead,
    OrderUpdate,
    RefundRequest,
    TrackingUpdate,
)
from app.services.exceptions import (
    OrderExistsError,
    OrderNotFoundError,
    OrderStateError,
    PaymentProviderError,
)
from app.services.order_service import (
    add_tracking,
    create_order,
    get_order,
    list_orders,
    refund_order,
    update_order,
)
from app.services.payment_service import PaymentGateway

logger = logging.getLogger(__name__)

router = APIRouter()


def _verify_payment(data: OrderCreate, gateway: PaymentGateway):
    try:
        intent = gateway.retrieve_payment_intent(data.id)
    except PaymentProviderError:
        raise HTTPException(400, "Payment not confirmed")

    if intent.status != "succeeded" or intent.amount != data.total:
        logger.warning(f"Order {data.id} rejected: intent status={intent.status} amount={intent.amount}")
        raise HTTPException(400, "Payment not confirmed")


@router.post("", response_model=OrderRead, status_code=201)
def place_order(
    data: OrderCreate,
    session: Session = Depends(get_session),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    if settings.VERIFY_PAYMENT_ON_ORDER:
        _verify_payment(data, gateway)

    try:
        return create_order(session, data)
    except OrderExistsError as e:
        raise HTTPException(409, str(e))


@router.get("", response_model=List[OrderRead])
def all_orders(session: Session = Depends(get_session)):
    return list_orders(session)


@router.get("/{order_id}", response_model=OrderRead)
def order_details(order_id: str, session: Session = Depends(get_session)):
    try:
        return get_order(session, order_id)
    except OrderNotFoundError:
        raise HTTPException(404, "Order not found")


@router.patch("/{order_id}", response_model=OrderRead)
def patch_order(
    order_id: str,
    data: OrderUpdate,
    session: Session = Depends(get_session),
):
    try:
        return update_order(session, order_id, data)
    except OrderNotFoundError:
        raise HTTPException(404, "Order not found")


@router.post("/{order_id}/tracking", response_model=OrderRead)
def order_tracking(
    order_id: str,
    data: TrackingUpdate,
    session: Session = Depends(get_session),
):
    try:
        return add_tracking(session, order_id, data.carrier, data.number)
    except OrderNotFoundError:
        raise HTTPException(404, "Order not found")
    except OrderStateError as e:
        raise HTTPException(400, str(e))


@router.post("/{order_id}/refund", response_model=OrderRead)
def order_refund(
    order_id: str,
    data: RefundRequest,
    session: Session = Depends(get_session),
):
    try:
        return refund_order(session, order_id, data.amount, data.reason)
    except OrderNotFoundError:
        raise HTTPException(404, "Order not found")
    except OrderStateError as e:
        raise HTTPException(400, str(e))
