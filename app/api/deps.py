# app/api/deps.py
from fastapi import Depends, Request

from app.domain.caller import Caller, require_caller
from app.services.payment_client import PaymentClient
from app.utils.settings import IDENTITY_HEADER


def get_caller(request: Request) -> Caller | None:
    """
    Tozsamosc od identity providera (Clerk) przekazana w naglowku.
    Brak naglowka = niezalogowany, decyzja nalezy do serwisu.
    """
    clerk_id = request.headers.get(IDENTITY_HEADER, "").strip()
    return Caller(clerk_id=clerk_id) if clerk_id else None


def get_authenticated_caller(caller: Caller | None = Depends(get_caller)) -> Caller:
    """
    Dla chronionych endpointow: 401 zanim fastapi zwaliduje body,
    zaleznosci sa rozwiazywane przed body.
    """
    return require_caller(caller)


def get_payment_client() -> PaymentClient:
    return PaymentClient()
