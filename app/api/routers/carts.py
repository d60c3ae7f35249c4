#app/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_authenticated_caller, get_caller
from app.data.database import get_db
from app.domain.caller import Caller
from app.domain.schemas import (
    CartClearedOut,
    CartCountOut,
    CartItemIn,
    CartItemOut,
    CartItemUpdateIn,
    CartOut,
)
from app.services.cart_service import CartService, summarize

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    items = CartService(db).get_cart_items(caller)
    return {"items": items, "summary": summarize(items)}


@router.get("/count", response_model=CartCountOut)
def get_cart_count(
    caller: Caller | None = Depends(get_caller),
    db: Session = Depends(get_db),
):
    return {"count": CartService(db).get_cart_item_count(caller)}


@router.post("/items", response_model=CartItemOut)
def add_item(
    payload: CartItemIn,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    return CartService(db).add_to_cart(caller, payload.product_id, payload.quantity)


@router.patch("/items/{cart_item_id}", response_model=CartItemOut)
def update_item(
    cart_item_id: int,
    payload: CartItemUpdateIn,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    return CartService(db).update_cart_item(caller, cart_item_id, payload.quantity)


@router.delete("/items/{cart_item_id}", status_code=204)
def remove_item(
    cart_item_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    CartService(db).remove_from_cart(caller, cart_item_id)
    return Response(status_code=204)


@router.delete("", response_model=CartClearedOut)
def clear_cart(
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
):
    return {"deleted": CartService(db).clear_cart(caller)}
