import pytest
from sqlalchemy import select

from app.data.models.order import OrderModel
from app.domain.errors import (
    AmountMismatch,
    Forbidden,
    InvalidInput,
    InvalidState,
    NotFound,
    PaymentProcessorError,
    PaymentResultUnreadable,
    Unauthenticated,
)
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService


@pytest.fixture
def service(db, payment_client):
    return PaymentService(db, payment_client=payment_client)


@pytest.fixture
def order(db, make_product, alice, shipping):
    product = make_product(price=10000, stock_quantity=5)
    created = OrderService(db).create_order(alice, [{"product_id": product.id, "quantity": 2}], shipping)
    return OrderService(db).get_order_by_id(alice, created.order_id)


def status_of(db, order_id):
    db.expire_all()
    return db.execute(select(OrderModel.status).where(OrderModel.id == order_id)).scalar_one()


def test_requires_caller(service, order, payment_client):
    with pytest.raises(Unauthenticated):
        service.confirm_payment(None, "pk_1", order.id, 20000)
    assert payment_client.calls == []


@pytest.mark.parametrize(
    "payment_key,amount",
    [(None, 20000), ("", 20000), ("pk_1", None), ("pk_1", 0)],
)
def test_missing_fields(service, order, alice, payment_key, amount):
    with pytest.raises(InvalidInput):
        service.confirm_payment(alice, payment_key, order.id, amount)


def test_missing_order_id(service, alice):
    with pytest.raises(InvalidInput):
        service.confirm_payment(alice, "pk_1", None, 20000)


def test_unknown_order(service, alice):
    with pytest.raises(NotFound):
        service.confirm_payment(alice, "pk_1", "no-such-order", 20000)


def test_foreign_order_is_forbidden(service, order, bob, payment_client):
    with pytest.raises(Forbidden):
        service.confirm_payment(bob, "pk_1", order.id, 20000)
    assert payment_client.calls == []


@pytest.mark.parametrize("amount", [1, 19999, 20001, 40000])
def test_amount_mismatch_never_calls_processor(service, order, db, alice, payment_client, amount):
    with pytest.raises(AmountMismatch):
        service.confirm_payment(alice, "pk_1", order.id, amount)
    assert payment_client.calls == []
    assert status_of(db, order.id) == "pending"


@pytest.mark.parametrize("status", ["confirmed", "shipped", "delivered", "cancelled"])
def test_not_pending_never_calls_processor(service, order, db, alice, payment_client, status):
    order.status = status
    db.commit()

    with pytest.raises(InvalidState):
        service.confirm_payment(alice, "pk_1", order.id, 20000)
    assert payment_client.calls == []


def test_confirm_then_confirm_again(service, order, db, alice, payment_client):
    result = service.confirm_payment(alice, "pk_1", order.id, 20000)

    assert result["success"] is True
    assert result["order_id"] == order.id
    assert result["payment_key"] == "pk_1"
    assert result["amount"] == 20000
    assert result["payment_result"]["status"] == "DONE"
    assert payment_client.calls == [("pk_1", order.id, 20000)]
    assert status_of(db, order.id) == "confirmed"

    with pytest.raises(InvalidState):
        service.confirm_payment(alice, "pk_1", order.id, 20000)
    assert len(payment_client.calls) == 1


def test_order_is_claimed_before_processor_call(service, order, session_factory, alice, payment_client):
    seen = []

    def check(order_id):
        with session_factory() as other:
            seen.append(other.get(OrderModel, order_id).status)

    payment_client.on_confirm = check
    service.confirm_payment(alice, "pk_1", order.id, 20000)

    assert seen == ["confirmed"]


def test_lost_claim_race_is_invalid_state(service, order, db, alice, payment_client, monkeypatch):
    #inny request potwierdzil zamowienie miedzy odczytem a updatem
    monkeypatch.setattr(service.repo, "update_status_if", lambda *args, **kwargs: 0)

    with pytest.raises(InvalidState):
        service.confirm_payment(alice, "pk_1", order.id, 20000)
    assert payment_client.calls == []


def test_processor_failure_reverts_to_pending(service, order, db, alice, payment_client):
    payment_client.error = "카드 한도 초과"

    with pytest.raises(PaymentProcessorError) as exc:
        service.confirm_payment(alice, "pk_1", order.id, 20000)

    assert "카드 한도 초과" in exc.value.message
    assert status_of(db, order.id) == "pending"

    payment_client.error = None
    service.confirm_payment(alice, "pk_2", order.id, 20000)
    assert status_of(db, order.id) == "confirmed"


def test_unreadable_processor_result_keeps_order_confirmed(service, order, db, alice, payment_client):
    #operator pobral pieniadze, tylko body odpowiedzi jest nieczytelne
    payment_client.error = "nieczytelna odpowiedz"
    payment_client.error_type = PaymentResultUnreadable

    with pytest.raises(PaymentResultUnreadable):
        service.confirm_payment(alice, "pk_1", order.id, 20000)

    assert status_of(db, order.id) == "confirmed"
    assert len(payment_client.calls) == 1

    with pytest.raises(InvalidState):
        service.confirm_payment(alice, "pk_1", order.id, 20000)
    assert len(payment_client.calls) == 1
