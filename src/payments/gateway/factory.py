"""Factory do gateway de pagamento (monta o cliente a partir da configuração)."""

from typing import Optional

import requests

from src.config import Settings, load_settings
from src.payments.gateway.mercadopago import MercadoPagoGateway


def get_gateway(
    settings: Optional[Settings] = None,
    *,
    session: Optional[requests.Session] = None,
) -> MercadoPagoGateway:
    """
    Retorna o gateway Mercado Pago configurado.
    Sem `settings`, lê do ambiente/.env (levanta ConfigError se faltar token).
    """
    settings = settings or load_settings()
    return MercadoPagoGateway(
        settings.access_token,
        settings.notification_url,
        base_url=settings.api_base_url,
        timeout=settings.timeout_seconds,
        session=session,
    )
