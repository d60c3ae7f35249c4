# app/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_authenticated_caller
from app.data.database import get_db
from app.domain.caller import Caller
from app.domain.errors import NotFound
from app.domain.schemas import (
    OrderCreateIn,
    OrderCreated,
    OrderOut,
    OrderStatusIn,
    OrderWithItemsOut,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderCreated, status_code=201)
def create_order(
    payload: OrderCreateIn,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamówienie z koszyka przekazanego przez klienta.
    Ceny i stany liczone na nowo po stronie serwera.
    """
    return OrderService(db).create_order(
        caller,
        payload.items,
        payload.shipping_address,
        payload.order_note,
    )


@router.get("", response_model=List[OrderOut])
def list_orders(
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    return OrderService(db).get_user_orders(caller)


@router.get("/{order_id}", response_model=OrderWithItemsOut)
def get_order(
    order_id: str,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegóły zamówienia.
    """
    order = OrderService(db).get_order_by_id(caller, order_id)
    if not order:
        raise NotFound("Zamówienie nie znalezione")
    return order


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: str,
    payload: OrderStatusIn,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    return OrderService(db).update_order_status(caller, order_id, payload.status)
