# app/api/routers/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_authenticated_caller, get_payment_client
from app.data.database import get_db
from app.domain.caller import Caller
from app.domain.schemas import PaymentConfirmIn, PaymentConfirmOut
from app.services.payment_client import PaymentClient
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/confirm", response_model=PaymentConfirmOut)
def confirm_payment(
    payload: PaymentConfirmIn,
    caller: Caller = Depends(get_authenticated_caller),
    db: Session = Depends(get_db),
    payment_client: PaymentClient = Depends(get_payment_client),
):
    svc = PaymentService(db, payment_client=payment_client)
    return svc.confirm_payment(
        caller,
        payment_key=payload.payment_key,
        order_id=payload.order_id,
        amount=payload.amount,
    )
