# app/domain/caller.py
from dataclasses import dataclass

from app.domain.errors import Unauthenticated


@dataclass(frozen=True)
class Caller:
    """Uwierzytelniony uzytkownik requestu (id z Clerk)."""

    clerk_id: str


def require_caller(caller: Caller | None) -> Caller:
    if caller is None or not caller.clerk_id:
        raise Unauthenticated()
    return caller
