import json
import random
from decimal import Decimal

import pytest
import requests

from src.payments.gateway import MercadoPagoGateway, PaymentMethod, PaymentRequest


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Substitui requests.Session: grava as chamadas e devolve respostas prontas."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []
        self.closed = False

    def _call(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self._call("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._call("GET", url, **kwargs)

    def close(self):
        self.closed = True


PIX_RESPONSE = {
    "id": "123",
    "status": "pending",
    "point_of_interaction": {
        "transaction_data": {
            "qr_code": "Q1",
            "qr_code_base64": "QjE=",
            "ticket_url": "http://x",
        }
    },
}

BOLETO_RESPONSE = {
    "id": 987654321,
    "status": "pending",
    "transaction_details": {
        "external_resource_url": "https://www.mercadopago.com.br/payments/987654321/ticket",
        "barcode": {"content": "23793380296099605290241006333300689690000001050"},
    },
}


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def gateway(session):
    return MercadoPagoGateway(
        "TEST-token",
        "https://loja.example.com/webhook/mp",
        session=session,
        rng=random.Random(42),
    )


@pytest.fixture
def pix_request():
    return PaymentRequest(
        reference="ORD-1",
        amount=Decimal("10.50"),
        description="x",
        payer_email="a@b.com",
        payer_tax_id="12345678900",
        method=PaymentMethod.PIX,
    )


@pytest.fixture
def boleto_request():
    return PaymentRequest(
        reference="ORD-2",
        amount=Decimal("10.50"),
        description="Pedido 2",
        payer_email="a@b.com",
        payer_tax_id="12345678900",
        method=PaymentMethod.BOLETO,
        payer_first_name="Ana",
        payer_last_name="Souza",
    )


@pytest.fixture
def connection_error():
    return requests.ConnectionError("Failed to resolve 'api.mercadopago.com'")
