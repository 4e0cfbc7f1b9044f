"""Gateway de pagamento PIX/boleto (Mercado Pago)."""

from src.payments.gateway.base import (
    BoletoResult,
    ErrorKind,
    ErrorResult,
    PaymentMethod,
    PaymentRequest,
    PaymentResult,
    PixResult,
)
from src.payments.gateway.factory import get_gateway
from src.payments.gateway.mercadopago import MercadoPagoGateway

__all__ = [
    "BoletoResult",
    "ErrorKind",
    "ErrorResult",
    "MercadoPagoGateway",
    "PaymentMethod",
    "PaymentRequest",
    "PaymentResult",
    "PixResult",
    "get_gateway",
]
