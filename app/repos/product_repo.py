# app/repos/product_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from app.data.models.product import ProductModel

SORTABLE_COLUMNS = {
    "created_at": ProductModel.created_at,
    "price": ProductModel.price,
    "name": ProductModel.name,
}


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        #zawsze swiezy odczyt stanu, nie obiekt z identity map
        return self.db.get(ProductModel, product_id, populate_existing=True)

    def get_active_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.id == product_id,
                ProductModel.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def get_products_by_ids(self, product_ids) -> dict[int, ProductModel]:
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(list(product_ids)))
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {p.id: p for p in rows}

    def list_active_products(
        self,
        category: str | None,
        sort_by: str,
        ascending: bool,
        offset: int,
        limit: int,
    ) -> list[ProductModel]:
        column = SORTABLE_COLUMNS[sort_by]
        stmt = select(ProductModel).where(ProductModel.is_active.is_(True))

        if category:
            stmt = stmt.where(ProductModel.category == category)

        #id jako drugi klucz, zeby stronicowanie bylo stabilne
        if ascending:
            stmt = stmt.order_by(column.asc(), ProductModel.id.asc())
        else:
            stmt = stmt.order_by(column.desc(), ProductModel.id.desc())

        return self.db.execute(stmt.offset(offset).limit(limit)).scalars().all()

    def count_active_products(self, category: str | None) -> int:
        stmt = select(func.count()).select_from(ProductModel).where(ProductModel.is_active.is_(True))
        if category:
            stmt = stmt.where(ProductModel.category == category)
        return self.db.execute(stmt).scalar_one()
