import pytest
import requests

from app.domain.errors import ConfigurationError, PaymentProcessorError, PaymentResultUnreadable
from app.services import payment_client as module
from app.services.payment_client import PaymentClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.reason = reason
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture
def captured(monkeypatch):
    calls = []
    responses = []

    def fake_post(url, json=None, auth=None, timeout=None):
        calls.append({"url": url, "json": json, "auth": auth, "timeout": timeout})
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(module.requests, "post", fake_post)
    return calls, responses


def test_confirm_success(captured):
    calls, responses = captured
    responses.append(FakeResponse(payload={"status": "DONE", "orderId": "order-1"}))

    client = PaymentClient(base_url="https://pay.example/v1/", secret_key="test_sk", timeout=3)
    result = client.confirm_payment("pk_abc", "order-1", 20000)

    assert result == {"status": "DONE", "orderId": "order-1"}
    assert calls == [{
        "url": "https://pay.example/v1/payments/pk_abc",
        "json": {"orderId": "order-1", "amount": 20000},
        "auth": ("test_sk", ""),
        "timeout": 3,
    }]


def test_payment_key_is_url_quoted(captured):
    calls, responses = captured
    responses.append(FakeResponse(payload={}))

    PaymentClient(base_url="https://pay.example", secret_key="sk").confirm_payment("a/b c", "order-1", 1)

    assert calls[0]["url"] == "https://pay.example/payments/a%2Fb%20c"


def test_missing_secret_is_configuration_error(captured):
    calls, _ = captured
    with pytest.raises(ConfigurationError):
        PaymentClient(secret_key="").confirm_payment("pk", "order-1", 1)
    assert calls == []


def test_processor_error_message_is_propagated(captured):
    _, responses = captured
    responses.append(FakeResponse(400, {"code": "REJECT_CARD_PAYMENT", "message": "한도초과"}, "Bad Request"))

    with pytest.raises(PaymentProcessorError) as exc:
        PaymentClient(secret_key="sk").confirm_payment("pk", "order-1", 1)
    assert "한도초과" in exc.value.message


def test_processor_error_without_body_uses_reason(captured):
    _, responses = captured
    responses.append(FakeResponse(502, None, "Bad Gateway"))

    with pytest.raises(PaymentProcessorError) as exc:
        PaymentClient(secret_key="sk").confirm_payment("pk", "order-1", 1)
    assert "Bad Gateway" in exc.value.message


def test_transport_error_is_not_retried(captured):
    calls, responses = captured
    responses.append(requests.ConnectionError("connection reset"))

    with pytest.raises(PaymentProcessorError):
        PaymentClient(secret_key="sk").confirm_payment("pk", "order-1", 1)
    assert len(calls) == 1


def test_success_with_non_json_body_is_processor_error(captured):
    _, responses = captured
    resp = requests.Response()
    resp.status_code = 200
    resp._content = b"<html>OK</html>"
    responses.append(resp)

    with pytest.raises(PaymentResultUnreadable) as exc:
        PaymentClient(secret_key="sk").confirm_payment("pk", "order-1", 1)
    assert isinstance(exc.value, PaymentProcessorError)
    assert exc.value.status_code == 500
