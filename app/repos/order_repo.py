# app/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def add_order_items(self, items: list[OrderItemModel]) -> list[OrderItemModel]:
        self.db.add_all(items)
        self.db.commit()
        return items

    def delete_order(self, order_id: str) -> int:
        result = self.db.execute(delete(OrderModel).where(OrderModel.id == order_id))
        self.db.commit()
        return result.rowcount

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_user_order(self, order_id: str, clerk_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(
                OrderModel.id == order_id,
                OrderModel.clerk_id == clerk_id,
            )
        ).scalar_one_or_none()

    def get_user_orders(self, clerk_id: str) -> list[OrderModel]:
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.clerk_id == clerk_id)
            .order_by(OrderModel.created_at.desc())
        ).scalars().all()

    def update_status_if(self, order_id: str, expected_status: str, new_status: str, clerk_id: str | None = None) -> int:
        """
        Warunkowy update statusu (jak optimistic locking na wersji).
        UPDATE orders SET status = new WHERE id = ? AND status = expected
        Zwraca rowcount, 0 = ktos zmienil status wczesniej.
        """
        stmt = (
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == expected_status,
            )
            .values(status=new_status, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if clerk_id is not None:
            stmt = stmt.where(OrderModel.clerk_id == clerk_id)

        result = self.db.execute(stmt)
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, order: OrderModel) -> OrderModel:
        self.db.refresh(order)
        return order
