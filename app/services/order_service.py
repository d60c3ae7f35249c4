# app/services/order_service.py
from collections import defaultdict
from typing import Iterable, List

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.caller import Caller, require_caller
from app.domain.errors import (
    EmptyCart,
    InvalidInput,
    InvalidShippingAddress,
    InvalidState,
    NotFound,
    ProductInactive,
    StockExceeded,
    StoreError,
)
from app.domain.order_status import OrderStatus, can_transition
from app.domain.schemas import OrderCreated, OrderLineIn, ShippingAddress
from app.repos.order_repo import OrderRepo
from app.repos.product_repo import ProductRepo
from app.services.cart_service import CartService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Koszyk klienta to tylko snapshot, ceny i stany zawsze czytane z bazy.
    """

    def __init__(self, db: Session, cart_service: CartService | None = None):
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.cart_service = cart_service or CartService(db)

    def create_order(
        self,
        caller: Caller | None,
        cart_items: Iterable[OrderLineIn | dict],
        shipping_address: ShippingAddress | dict | None,
        order_note: str | None = None,
    ) -> OrderCreated:
        """
        Use Case: Tworzenie zamówienia z koszyka.

        1. Walidacja wejscia (koszyk, adres)
        2. Ponowna walidacja stanu i aktywnosci kazdego produktu
        3. Total z aktualnych cen
        4. Insert orders + order_items, przy bledzie items kasujemy order (kompensacja)
        5. Czyszczenie koszyka best-effort
        """
        caller = require_caller(caller)

        lines = _parse_lines(cart_items)
        if not lines:
            raise EmptyCart()

        address = _parse_address(shipping_address)
        missing = address.missing_fields()
        if missing:
            raise InvalidShippingAddress(f"Uzupełnij dane adresu dostawy: {', '.join(missing)}")

        products = self.products.get_products_by_ids({line.product_id for line in lines})

        #suma ilosci per produkt, duplikaty linii nie obchodza limitu stanu
        requested = defaultdict(int)
        for line in lines:
            requested[line.product_id] += line.quantity

        total_amount = 0
        for line in lines:
            product = products.get(line.product_id)
            if not product:
                raise NotFound(f"Produkt {line.product_id} nie istnieje")

            if requested[line.product_id] > product.stock_quantity:
                raise StockExceeded(product.name, product.stock_quantity, requested[line.product_id])

            if not product.is_active:
                raise ProductInactive(product.name)

            total_amount += product.price * line.quantity

        try:
            order = self.repo.create_order(
                OrderModel(
                    clerk_id=caller.clerk_id,
                    total_amount=total_amount,
                    status=OrderStatus.PENDING.value,
                    shipping_address=address.model_dump(by_alias=True),
                    order_note=order_note or None,
                )
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad tworzenia zamowienia dla {caller.clerk_id}: {e}")
            raise StoreError(f"Nie udało się utworzyć zamówienia: {e}") from e

        order_id = order.id

        items = [
            OrderItemModel(
                order_id=order_id,
                product_id=line.product_id,
                product_name=products[line.product_id].name,
                quantity=line.quantity,
                price=products[line.product_id].price,
            )
            for line in lines
        ]

        try:
            self.repo.add_order_items(items)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad tworzenia pozycji zamowienia {order_id}: {e}")
            self._delete_orphan_order(order_id)
            raise StoreError(f"Nie udało się utworzyć pozycji zamówienia: {e}") from e

        logger.info(f"Order {order_id} created for {caller.clerk_id}, total {total_amount}")

        #zamowienie juz istnieje, blad czyszczenia koszyka tylko logujemy
        cart_cleared, cart_clear_error = True, None
        try:
            self.cart_service.clear_cart(caller)
        except StoreError as e:
            logger.error(f"Nie udalo sie wyczyscic koszyka po zamowieniu {order_id}: {e}")
            cart_cleared, cart_clear_error = False, str(e)

        return OrderCreated(
            order_id=order_id,
            total_amount=total_amount,
            cart_cleared=cart_cleared,
            cart_clear_error=cart_clear_error,
        )

    def get_order_by_id(self, caller: Caller | None, order_id: str) -> OrderModel | None:
        """
        Use Case: Pobranie zamówienia z pozycjami (Query).
        Cudze zamowienie wyglada tak samo jak nieistniejace (None).
        """
        caller = require_caller(caller)
        return self.repo.get_user_order(order_id, caller.clerk_id)

    def get_user_orders(self, caller: Caller | None) -> List[OrderModel]:
        caller = require_caller(caller)
        return self.repo.get_user_orders(caller.clerk_id)

    def update_order_status(self, caller: Caller | None, order_id: str, new_status: OrderStatus | str) -> OrderModel:
        caller = require_caller(caller)

        try:
            new_status = OrderStatus(new_status)
        except ValueError:
            raise InvalidInput(f"Nieznany status zamówienia: {new_status}")

        order = self.repo.get_user_order(order_id, caller.clerk_id)
        if not order:
            raise NotFound("Zamówienie nie istnieje")

        current = order.status
        if not can_transition(current, new_status):
            raise InvalidState(f"Niedozwolona zmiana statusu: {current} -> {new_status.value}")

        rowcount = self.repo.update_status_if(
            order_id=order_id,
            expected_status=current,
            new_status=new_status.value,
            clerk_id=caller.clerk_id,
        )

        if rowcount == 0:
            self.repo.rollback()
            raise InvalidState("Konflikt współbieżności - status zamówienia został zmieniony przez inną operację")

        self.repo.commit()
        logger.info(f"Order {order_id} status {current} -> {new_status.value}")

        return self.repo.refresh(order)

    def _delete_orphan_order(self, order_id: str) -> None:
        try:
            self.repo.delete_order(order_id)
            logger.info(f"Kompensacja: usunieto zamowienie {order_id} bez pozycji")
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.critical(f"Kompensacja nieudana, zamowienie {order_id} zostalo bez pozycji: {e}")


def _parse_lines(cart_items) -> List[OrderLineIn]:
    try:
        return [
            item if isinstance(item, OrderLineIn) else OrderLineIn.model_validate(item)
            for item in (cart_items or [])
        ]
    except ValidationError as e:
        raise InvalidInput(f"Nieprawidłowa pozycja koszyka: {e.errors()[0]['msg']}") from e


def _parse_address(shipping_address) -> ShippingAddress:
    if isinstance(shipping_address, ShippingAddress):
        return shipping_address
    try:
        return ShippingAddress.model_validate(shipping_address or {})
    except ValidationError as e:
        raise InvalidShippingAddress() from e
