"""Gateway Mercado Pago: cria pagamentos PIX/boleto e consulta status (API REST v1)."""

import http.cookiejar
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union
from urllib.parse import quote

import requests

from src.config import DEFAULT_API_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from src.payments.gateway.base import (
    BoletoResult,
    ErrorKind,
    ErrorResult,
    PaymentMethod,
    PaymentRequest,
    PaymentResult,
    PixResult,
)
from src.payments.gateway.idempotency import (
    RandomSource,
    default_random_source,
    generate_idempotency_key,
)

logger = logging.getLogger(__name__)

UNSUPPORTED_METHOD_MESSAGE = "Método de pagamento não suportado"
CENT = Decimal("0.01")

PIX_FIELDS = {
    "qr_code": ("point_of_interaction", "transaction_data", "qr_code"),
    "qr_code_base64": ("point_of_interaction", "transaction_data", "qr_code_base64"),
    "payment_url": ("point_of_interaction", "transaction_data", "ticket_url"),
}

BOLETO_FIELDS = {
    "boleto_url": ("transaction_details", "external_resource_url"),
    "boleto_barcode": ("transaction_details", "barcode", "content"),
}


class _MissingField(Exception):
    def __init__(self, path: tuple[str, ...]):
        super().__init__(".".join(path))
        self.path = ".".join(path)


def _lookup(data: Any, path: tuple[str, ...]) -> Any:
    """Percorre `data` pelas chaves de `path`; levanta _MissingField se faltar algum nível."""
    node = data
    for depth, key in enumerate(path):
        if not isinstance(node, dict) or node.get(key) is None:
            raise _MissingField(path[: depth + 1])
        node = node[key]
    return node


def _resolve_method(method: Union[PaymentMethod, str]) -> Optional[PaymentMethod]:
    try:
        return PaymentMethod(method)
    except ValueError:
        return None


def _parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Valor em reais com no máximo duas casas. Devolve None se não for
    positivo, finito ou se tiver fração de centavo (não há arredondamento).
    """
    try:
        amount = Decimal(str(raw))
        if not amount.is_finite() or amount <= 0 or amount % CENT != 0:
            return None
        return amount.quantize(CENT)
    except (InvalidOperation, ValueError):
        return None


def _new_session() -> requests.Session:
    """Session própria do gateway, sem cookie jar (nada de estado entre chamadas)."""
    session = requests.Session()
    session.cookies.set_policy(http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))
    return session


class MercadoPagoGateway:
    """
    Cliente síncrono da API de pagamentos do Mercado Pago.

    Credenciais são fixadas no construtor. Cada operação faz exatamente uma
    requisição bloqueante; não há retry. Para repetir uma criação após falha de
    transporte, reenvie com o mesmo `idempotency_key` devolvido no resultado.
    Ao compartilhar entre threads, passe uma `session` por thread.

    Sem `session`, o gateway cria a sua (cookies desabilitados) e a fecha em
    `close()` ou ao sair do bloco `with`. Session recebida é do chamador.
    """

    def __init__(
        self,
        access_token: str,
        notification_url: str,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        rng: Optional[RandomSource] = None,
    ):
        self._access_token = access_token
        self._notification_url = notification_url
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else _new_session()
        self._rng = rng or default_random_source()

    def __repr__(self) -> str:
        return f"MercadoPagoGateway(base_url={self._base_url!r})"

    def __enter__(self) -> "MercadoPagoGateway":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    @property
    def payments_url(self) -> str:
        return f"{self._base_url}/v1/payments"

    def new_idempotency_key(self) -> str:
        """Gera uma chave nova para uma tentativa lógica de pagamento."""
        return generate_idempotency_key(self._rng)

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._access_token}"}

    def _build_payload(
        self, request: PaymentRequest, method: PaymentMethod, amount: Decimal
    ) -> dict[str, Any]:
        return {
            "external_reference": request.reference,
            "transaction_amount": float(amount),
            "description": request.description,
            "notification_url": self._notification_url,
            "payment_method_id": method.value,
            "payer": {
                "email": request.payer_email,
                "first_name": request.payer_first_name or "",
                "last_name": request.payer_last_name or "",
                "identification": {
                    "type": "CPF",
                    "number": request.payer_tax_id,
                },
            },
        }

    def create_payment(
        self,
        request: PaymentRequest,
        *,
        idempotency_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> PaymentResult:
        """
        Cria um pagamento PIX ou boleto (POST /v1/payments).

        Sem `idempotency_key`, gera uma chave nova; a chave enviada volta em
        `result.idempotency_key`. Erros nunca são levantados: viram ErrorResult.
        """
        method = _resolve_method(request.method)
        if method is None:
            logger.warning("Método de pagamento não suportado: %s (ref=%s)", request.method, request.reference)
            return ErrorResult(UNSUPPORTED_METHOD_MESSAGE, kind=ErrorKind.UNSUPPORTED_METHOD)

        amount = _parse_amount(request.amount)
        if amount is None:
            logger.warning("Valor inválido para pagamento ref=%s: %s", request.reference, request.amount)
            return ErrorResult(f"Valor inválido: {request.amount}", kind=ErrorKind.INVALID_AMOUNT)
        payload = self._build_payload(request, method, amount)

        key = idempotency_key or self.new_idempotency_key()
        headers = {
            "Content-Type": "application/json",
            **self._auth_headers(),
            "X-Idempotency-Key": key,
        }
        logger.info("Criando pagamento %s ref=%s idempotency_key=%s", method.value, request.reference, key)
        try:
            response = self._session.post(
                self.payments_url,
                json=payload,
                headers=headers,
                timeout=timeout or self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("Falha de transporte ao criar pagamento ref=%s: %s", request.reference, e)
            return ErrorResult(str(e), kind=ErrorKind.TRANSPORT, idempotency_key=key)

        raw = response.text
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.warning("Resposta não-JSON do Mercado Pago (HTTP %s) ref=%s", response.status_code, request.reference)
            return ErrorResult(
                f"Resposta inválida da API: HTTP {response.status_code}",
                raw_response=raw,
                idempotency_key=key,
            )

        for field in ("error", "message"):
            if data.get(field) is not None:
                logger.warning("Mercado Pago recusou pagamento ref=%s: %s", request.reference, data[field])
                return ErrorResult(data[field], raw_response=raw, idempotency_key=key)

        fields = PIX_FIELDS if method is PaymentMethod.PIX else BOLETO_FIELDS
        try:
            payment_id = _lookup(data, ("id",))
            values = {name: _lookup(data, path) for name, path in fields.items()}
        except _MissingField as e:
            logger.warning("Campo ausente na resposta do Mercado Pago ref=%s: %s", request.reference, e.path)
            return ErrorResult(
                f"Campo ausente na resposta: {e.path}",
                kind=ErrorKind.MISSING_FIELD,
                raw_response=raw,
                idempotency_key=key,
            )

        logger.info("Pagamento %s criado: id=%s ref=%s", method.value, payment_id, request.reference)
        if method is PaymentMethod.PIX:
            return PixResult(payment_id=payment_id, idempotency_key=key, **values)
        return BoletoResult(payment_id=payment_id, idempotency_key=key, **values)

    def get_payment(
        self, payment_id: str, *, timeout: Optional[float] = None
    ) -> Union[dict[str, Any], ErrorResult]:
        """Consulta GET /v1/payments/{id}. HTTP 200 devolve o JSON como veio."""
        url = f"{self.payments_url}/{quote(str(payment_id), safe='')}"
        try:
            response = self._session.get(url, headers=self._auth_headers(), timeout=timeout or self._timeout)
        except requests.RequestException as e:
            logger.warning("Falha de transporte ao consultar pagamento %s: %s", payment_id, e)
            return ErrorResult(f"Erro na requisição: {e}", kind=ErrorKind.TRANSPORT)

        if response.status_code != 200:
            logger.warning("Consulta do pagamento %s falhou: HTTP %s", payment_id, response.status_code)
            return ErrorResult(f"Erro na API: HTTP {response.status_code}", raw_response=response.text)
        try:
            return response.json()
        except ValueError:
            return ErrorResult("Resposta inválida da API: HTTP 200", raw_response=response.text)
