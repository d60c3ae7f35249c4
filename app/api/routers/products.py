# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.errors import NotFound
from app.domain.schemas import CategoryOut, PaginatedProductsOut, ProductOut
from app.services.product_service import CATEGORIES, DEFAULT_PAGE_SIZE, ProductService

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=PaginatedProductsOut)
def list_products(
    category: str | None = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc"),
    page: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    return ProductService(db).list_products(
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        page_size=page_size,
    )


@router.get("/categories", response_model=List[CategoryOut])
def list_categories():
    return CATEGORIES


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = ProductService(db).get_product(product_id)
    if not product:
        raise NotFound("Produkt nie znaleziony")
    return product
