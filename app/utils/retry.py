# app/utils/retry.py
from sqlalchemy.exc import OperationalError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.utils.settings import STORE_RETRY_ATTEMPTS


def store_retry():
    """
    Retry dla operacji best-effort na bazie (czyszczenie koszyka, licznik).
    Tylko bledy polaczenia, bledy zapytan nie sa powtarzane.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(STORE_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(OperationalError),
    )
