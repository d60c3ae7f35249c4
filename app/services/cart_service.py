from typing import Dict, Any, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel
from app.domain.caller import Caller, require_caller
from app.domain.errors import InvalidInput, NotFound, StockExceeded, StoreError
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.utils.logging import get_logger
from app.utils.retry import store_retry

logger = get_logger(__name__)


class CartService:
    """
    Use case'y dla koszyka
    commands (add, update, remove, clear) modyfikuja cart_items
    query (items, summary, count) tylko odczyt
    koszyk = wszystkie wiersze cart_items danego clerk_id
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query - odczyt
    def get_cart_items(self, caller: Caller | None) -> List[CartItemModel]:
        caller = require_caller(caller)
        return self.repo.get_cart_items(caller.clerk_id)

    def get_cart_summary(self, caller: Caller | None) -> Dict[str, Any]:
        items = self.get_cart_items(caller)
        return summarize(items)

    def get_cart_item_count(self, caller: Caller | None) -> int:
        #licznik dla badge w nawigacji, nigdy nie rzuca
        if caller is None or not caller.clerk_id:
            return 0

        try:
            return self._count_items(caller.clerk_id)
        except SQLAlchemyError as e:
            logger.error(f"Nie udalo sie policzyc koszyka {caller.clerk_id}: {e}")
            return 0

    #commands
    def add_to_cart(self, caller: Caller | None, product_id: int, quantity: int = 1) -> CartItemModel:
        caller = require_caller(caller)

        if quantity <= 0:
            raise InvalidInput("Ilość musi być większa niż 0")

        product = self.products.get_active_product(product_id)
        if not product:
            raise NotFound("Produkt nie istnieje")

        existing = self.repo.get_cart_item_by_product(caller.clerk_id, product_id)
        new_quantity = existing.quantity + quantity if existing else quantity

        #stan liczony dla sumy (to co juz w koszyku + nowe)
        if new_quantity > product.stock_quantity:
            raise StockExceeded(product.name, product.stock_quantity, new_quantity)

        if existing:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku {caller.clerk_id}, zwiekszam ilosc "
                f"z {existing.quantity} do {new_quantity}"
            )
            existing.quantity = new_quantity
            item = existing
        else:
            logger.info(f"Dodaje produkt {product_id} do koszyka {caller.clerk_id}")
            item = CartItemModel(
                clerk_id=caller.clerk_id,
                product_id=product_id,
                quantity=quantity,
            )

        return self._save(item)

    def update_cart_item(self, caller: Caller | None, cart_item_id: int, quantity: int) -> CartItemModel:
        caller = require_caller(caller)

        if quantity <= 0:
            raise InvalidInput("Ilość musi być większa niż 0")

        item = self.repo.get_cart_item(caller.clerk_id, cart_item_id)
        if not item:
            raise NotFound("Pozycja koszyka nie istnieje")

        #stan czytany na nowo, nie z cache
        product = self.products.get_product(item.product_id)
        if not product:
            raise NotFound("Produkt nie istnieje")

        if quantity > product.stock_quantity:
            raise StockExceeded(product.name, product.stock_quantity, quantity)

        item.quantity = quantity
        logger.info(f"Pozycja {cart_item_id} koszyka {caller.clerk_id}: ilosc {quantity}")
        return self._save(item)

    def remove_from_cart(self, caller: Caller | None, cart_item_id: int) -> None:
        caller = require_caller(caller)

        try:
            deleted = self.repo.delete_cart_item(caller.clerk_id, cart_item_id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise StoreError(f"Nie udało się usunąć pozycji koszyka: {e}") from e

        if deleted:
            logger.info(f"Usunieto pozycje {cart_item_id} z koszyka {caller.clerk_id}")

    def clear_cart(self, caller: Caller | None) -> int:
        caller = require_caller(caller)

        try:
            deleted = self._delete_all_items(caller.clerk_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Nie udało się wyczyścić koszyka: {e}") from e

        logger.info(f"Wyczyszczono koszyk {caller.clerk_id}, usunieto {deleted} pozycji")
        return deleted

    def _save(self, item: CartItemModel) -> CartItemModel:
        try:
            return self.repo.save_cart_item(item)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad zapisu koszyka: {e}")
            raise StoreError(f"Nie udało się zapisać koszyka: {e}") from e

    @store_retry()
    def _delete_all_items(self, clerk_id: str) -> int:
        try:
            return self.repo.delete_all_cart_items(clerk_id)
        except SQLAlchemyError:
            self.repo.rollback()
            raise

    @store_retry()
    def _count_items(self, clerk_id: str) -> int:
        try:
            return self.repo.count_cart_items(clerk_id)
        except SQLAlchemyError:
            self.repo.rollback()
            raise


def summarize(items: List[CartItemModel]) -> Dict[str, Any]:
    """Podsumowanie koszyka wg aktualnych cen produktow."""
    return {
        "total_items": len(items),
        "total_quantity": sum(i.quantity for i in items),
        "total_price": sum(i.product.price * i.quantity for i in items if i.product),
    }
