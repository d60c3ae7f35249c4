from datetime import datetime, timedelta, timezone

import pytest

from app.domain.errors import InvalidInput
from app.services.product_service import ProductService, get_category_label


@pytest.fixture
def service(db):
    return ProductService(db)


@pytest.fixture
def catalog(make_product):
    now = datetime.now(timezone.utc)
    return [
        make_product(name="Gitara", price=300000, category="electronics", created_at=now - timedelta(days=3)),
        make_product(name="Ksiazka", price=15000, category="books", created_at=now - timedelta(days=2)),
        make_product(name="Sluchawki", price=90000, category="electronics", created_at=now - timedelta(days=1)),
        make_product(name="Ukryty", price=1000, category="electronics", is_active=False, created_at=now),
    ]


def test_lists_only_active_newest_first(service, catalog):
    page = service.list_products()
    assert [p.name for p in page["products"]] == ["Sluchawki", "Ksiazka", "Gitara"]
    assert page["total"] == 3
    assert page["total_pages"] == 1


def test_category_filter(service, catalog):
    page = service.list_products(category="electronics")
    assert {p.name for p in page["products"]} == {"Gitara", "Sluchawki"}
    assert page["total"] == 2


def test_sort_by_price_ascending(service, catalog):
    page = service.list_products(sort_by="price", sort_order="asc")
    assert [p.price for p in page["products"]] == [15000, 90000, 300000]


def test_pagination(service, catalog):
    page = service.list_products(page=2, page_size=2)
    assert [p.name for p in page["products"]] == ["Gitara"]
    assert page["total_pages"] == 2
    assert page["page"] == 2


@pytest.mark.parametrize(
    "kwargs",
    [{"sort_by": "stock"}, {"sort_order": "up"}, {"page": 0}, {"page_size": 0}, {"page_size": 1000}],
)
def test_invalid_listing_params(service, kwargs):
    with pytest.raises(InvalidInput):
        service.list_products(**kwargs)


def test_get_product_hides_inactive(service, catalog):
    assert service.get_product(catalog[0].id).name == "Gitara"
    assert service.get_product(catalog[3].id) is None
    assert service.get_product(99999) is None


def test_category_label():
    assert get_category_label("books") == "도서"
    assert get_category_label("unknown") == "unknown"
