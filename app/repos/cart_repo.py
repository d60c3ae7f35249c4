# app/repos/cart_repo.py
from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session

from app.data.models.cart_item import CartItemModel


class CartRepo:
    """
    Dostep do cart_items.
    Kazde zapytanie filtruje po clerk_id, baza nie ma RLS.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, clerk_id: str) -> list[CartItemModel]:
        return self.db.execute(
            select(CartItemModel)
            .where(CartItemModel.clerk_id == clerk_id)
            .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
        ).scalars().all()

    def get_cart_item(self, clerk_id: str, cart_item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.id == cart_item_id,
                CartItemModel.clerk_id == clerk_id,
            )
        ).scalar_one_or_none()

    def get_cart_item_by_product(self, clerk_id: str, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.clerk_id == clerk_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def count_cart_items(self, clerk_id: str) -> int:
        return self.db.execute(
            select(func.count()).select_from(CartItemModel).where(CartItemModel.clerk_id == clerk_id)
        ).scalar_one()

    def save_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_cart_item(self, clerk_id: str, cart_item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id == cart_item_id,
                CartItemModel.clerk_id == clerk_id,
            )
        )
        self.db.commit()
        return result.rowcount

    def delete_all_cart_items(self, clerk_id: str) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(CartItemModel.clerk_id == clerk_id)
        )
        self.db.commit()
        return result.rowcount

    def rollback(self):
        self.db.rollback()
