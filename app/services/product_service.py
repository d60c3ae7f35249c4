# app/services/product_service.py
import math
from typing import Dict, Any

from sqlalchemy.orm import Session

from app.data.models.product import ProductModel
from app.domain.errors import InvalidInput
from app.repos.product_repo import ProductRepo, SORTABLE_COLUMNS
from app.utils.logging import get_logger

logger = get_logger(__name__)

#stala lista kategorii, kiedys moze przyjsc z bazy
CATEGORIES = [
    {"id": "electronics", "name": "electronics", "label": "전자제품"},
    {"id": "clothing", "name": "clothing", "label": "의류"},
    {"id": "books", "name": "books", "label": "도서"},
    {"id": "food", "name": "food", "label": "식품"},
    {"id": "sports", "name": "sports", "label": "스포츠"},
    {"id": "beauty", "name": "beauty", "label": "뷰티"},
    {"id": "home", "name": "home", "label": "생활/가정"},
]

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


def get_category_label(category_id: str) -> str:
    for category in CATEGORIES:
        if category["id"] == category_id:
            return category["label"]
    return category_id


class ProductService:
    """Katalog tylko do odczytu, widoczne sa wylacznie aktywne produkty."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def list_products(
        self,
        category: str | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        if sort_by not in SORTABLE_COLUMNS:
            raise InvalidInput(f"Nieobslugiwane sortowanie: {sort_by}")
        if sort_order not in ("asc", "desc"):
            raise InvalidInput(f"Nieobslugiwany kierunek sortowania: {sort_order}")
        if page < 1 or page_size < 1 or page_size > MAX_PAGE_SIZE:
            raise InvalidInput("Nieprawidlowe parametry stronicowania")

        offset = (page - 1) * page_size
        products = self.repo.list_active_products(
            category=category,
            sort_by=sort_by,
            ascending=sort_order == "asc",
            offset=offset,
            limit=page_size,
        )
        total = self.repo.count_active_products(category)

        return {
            "products": products,
            "total": total,
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(total / page_size),
        }

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.repo.get_active_product(product_id)
