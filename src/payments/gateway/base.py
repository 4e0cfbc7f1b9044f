"""Tipos do gateway de pagamento (pedido e resultados PIX/boleto/erro)."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class PaymentMethod(str, Enum):
    """Métodos suportados; o valor é o payment_method_id do Mercado Pago."""

    PIX = "pix"
    BOLETO = "bolbradesco"


class ErrorKind(str, Enum):
    TRANSPORT = "transport"  # conexão, DNS, timeout
    PROVIDER = "provider"  # erro devolvido pela API ou status != 200
    UNSUPPORTED_METHOD = "unsupported_method"
    INVALID_AMOUNT = "invalid_amount"  # não positivo, não finito ou fração de centavo
    MISSING_FIELD = "missing_field"  # campo esperado ausente na resposta


@dataclass(frozen=True)
class PaymentRequest:
    """Dados de uma tentativa de pagamento (montado pelo chamador)."""

    reference: str
    amount: Decimal
    description: str
    payer_email: str
    payer_tax_id: str  # CPF
    method: PaymentMethod | str = PaymentMethod.PIX
    payer_first_name: str | None = None
    payer_last_name: str | None = None


@dataclass
class PixResult:
    """Pagamento PIX criado: copia-e-cola, QR em base64 e link do ticket."""

    payment_id: Any
    qr_code: str
    qr_code_base64: str
    payment_url: str
    idempotency_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "payment_id": self.payment_id,
            "qr_code": self.qr_code,
            "qr_code_base64": self.qr_code_base64,
            "payment_url": self.payment_url,
        }


@dataclass
class BoletoResult:
    """Boleto emitido: URL do documento e linha digitável."""

    payment_id: Any
    boleto_url: str
    boleto_barcode: str
    idempotency_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "payment_id": self.payment_id,
            "boleto_url": self.boleto_url,
            "boleto_barcode": self.boleto_barcode,
        }


@dataclass
class ErrorResult:
    message: Any
    kind: ErrorKind = ErrorKind.PROVIDER
    raw_response: str | None = None
    idempotency_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"error": self.message}
        if self.raw_response is not None:
            data["response"] = self.raw_response
        return data


PaymentResult = PixResult | BoletoResult | ErrorResult
