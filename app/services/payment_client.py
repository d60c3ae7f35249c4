# app/services/payment_client.py
from urllib.parse import quote

import requests
from requests import RequestException

from app.domain.errors import ConfigurationError, PaymentProcessorError, PaymentResultUnreadable
from app.utils.settings import PAYMENTS_API_URL, TOSS_SECRET_KEY, PAYMENTS_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentClient:
    """
    Klient API operatora platnosci (Toss Payments).
    Potwierdzenie nie jest idempotentne po stronie operatora, wiec bez retry.
    """

    def __init__(
        self,
        base_url: str | None = None,
        secret_key: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or PAYMENTS_API_URL).rstrip("/")
        self.secret_key = secret_key if secret_key is not None else TOSS_SECRET_KEY
        self.timeout = timeout or PAYMENTS_TIMEOUT_SECONDS

    def confirm_payment(self, payment_key: str, order_id: str, amount: int) -> dict:
        if not self.secret_key:
            raise ConfigurationError("Brak konfiguracji TOSS_SECRET_KEY")

        url = f"{self.base_url}/payments/{quote(payment_key, safe='')}"
        logger.info(f"PaymentClient POST {url} orderId={order_id} amount={amount}")

        try:
            #basic auth: base64("sekret:"), puste haslo
            resp = requests.post(
                url,
                json={"orderId": order_id, "amount": amount},
                auth=(self.secret_key, ""),
                timeout=self.timeout,
            )
        except RequestException as e:
            logger.error(f"PaymentClient blad polaczenia: {e}")
            raise PaymentProcessorError(f"Potwierdzenie płatności nie powiodło się: {e}") from e

        if not resp.ok:
            message = _error_message(resp)
            logger.error(f"PaymentClient {resp.status_code}: {message}")
            raise PaymentProcessorError(f"Potwierdzenie płatności nie powiodło się: {message}")

        try:
            return resp.json()
        except ValueError as e:
            logger.critical(f"PaymentClient {resp.status_code}: odpowiedz nie jest JSON-em dla orderId={order_id}")
            raise PaymentResultUnreadable() from e


def _error_message(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        payload = {}
    if isinstance(payload, dict) and payload.get("message"):
        return payload["message"]
    return resp.reason or f"HTTP {resp.status_code}"
