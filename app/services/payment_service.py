# app/services/payment_service.py
from typing import Dict, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.caller import Caller, require_caller
from app.domain.errors import (
    AmountMismatch,
    Forbidden,
    InvalidInput,
    InvalidState,
    NotFound,
    PaymentResultUnreadable,
    StoreError,
    StorefrontError,
)
from app.domain.order_status import OrderStatus
from app.repos.order_repo import OrderRepo
from app.services.payment_client import PaymentClient
from app.utils.logging import get_logger

logger = get_logger(__name__)

PENDING = OrderStatus.PENDING.value
CONFIRMED = OrderStatus.CONFIRMED.value


class PaymentService:
    """
    Potwierdzenie platnosci po powrocie z widgetu operatora.

    Kwota od klienta jest tylko deklaracja, porownujemy z total_amount zamowienia.
    Zamowienie jest "zajmowane" warunkowym updatem (pending -> confirmed) przed
    wywolaniem operatora, dwa rownolegle potwierdzenia nie obciaza karty dwa razy.
    Jesli operator odrzuci platnosc, status wraca na pending.
    """

    def __init__(self, db: Session, payment_client: PaymentClient | None = None):
        self.repo = OrderRepo(db)
        self.payment_client = payment_client or PaymentClient()

    def confirm_payment(
        self,
        caller: Caller | None,
        payment_key: str | None,
        order_id: str | None,
        amount: int | None,
    ) -> Dict[str, Any]:
        caller = require_caller(caller)

        if not payment_key or not order_id or not amount:
            raise InvalidInput("Nieprawidłowe dane płatności")

        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Zamówienie nie istnieje")

        if order.clerk_id != caller.clerk_id:
            raise Forbidden("Brak dostępu do zamówienia")

        if order.status != PENDING:
            raise InvalidState(f"Zamówienie zostało już przetworzone (status: {order.status})")

        if order.total_amount != amount:
            logger.warning(
                f"[Payment] Niezgodna kwota dla {order_id}: zamowienie {order.total_amount}, platnosc {amount}"
            )
            raise AmountMismatch()

        self._claim(order_id)

        logger.info(f"[Payment] Potwierdzanie platnosci: orderId={order_id}, amount={amount}")
        try:
            payment_result = self.payment_client.confirm_payment(payment_key, order_id, amount)
        except PaymentResultUnreadable:
            #operator pobral pieniadze, zamowienie zostaje confirmed
            logger.critical(f"[Payment] Zamowienie {order_id} potwierdzone, odpowiedz operatora nieczytelna")
            raise
        except StorefrontError:
            self._release(order_id)
            raise

        logger.info(f"[Payment] Platnosc potwierdzona: orderId={order_id}")

        return {
            "success": True,
            "order_id": order_id,
            "payment_key": payment_key,
            "amount": amount,
            "payment_result": payment_result,
        }

    def _claim(self, order_id: str) -> None:
        try:
            rowcount = self.repo.update_status_if(order_id, PENDING, CONFIRMED)
            if rowcount == 0:
                self.repo.rollback()
                raise InvalidState("Zamówienie jest już potwierdzane przez inną operację")
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise StoreError(f"Nie udało się zaktualizować zamówienia: {e}") from e

    def _release(self, order_id: str) -> None:
        try:
            self.repo.update_status_if(order_id, CONFIRMED, PENDING)
            self.repo.commit()
            logger.info(f"[Payment] Zamowienie {order_id} wraca na pending")
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.critical(f"[Payment] Nie udalo sie cofnac statusu zamowienia {order_id}: {e}")
