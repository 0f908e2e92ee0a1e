from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.database import get_session
from app.models.customer import Customer
from app.schemas.order_schemas import CustomerRead, OrderRead
from app.services.order_service import list_orders

router = APIRouter()


@router.get("/{customer_id}", response_model=CustomerRead)
def customer_details(customer_id: str, session: Session = Depends(get_session)):
    customer = session.get(Customer, customer_id)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer


@router.get("/{customer_id}/orders", response_model=List[OrderRead])
def customer_orders(customer_id: str, session: Session = Depends(get_session)):
    return list_orders(session, customer_id=customer_id)
