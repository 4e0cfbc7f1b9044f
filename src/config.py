"""Configuração do gateway Mercado Pago lida do ambiente (ou .env)."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "https://api.mercadopago.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


class ConfigError(RuntimeError):
    """Configuração obrigatória ausente."""


@dataclass(frozen=True)
class Settings:
    access_token: str
    notification_url: str
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __repr__(self) -> str:
        # token e URL de notificação não aparecem em logs/tracebacks
        return f"Settings(api_base_url={self.api_base_url!r}, timeout_seconds={self.timeout_seconds!r})"


def _timeout_seconds() -> float:
    """Timeout das requisições (MP_TIMEOUT_SECONDS); valor inválido cai no padrão."""
    raw = (os.getenv("MP_TIMEOUT_SECONDS") or "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_TIMEOUT_SECONDS


def load_settings() -> Settings:
    """
    Carrega .env (se existir) e monta Settings a partir do ambiente.
    Levanta ConfigError se MP_ACCESS_TOKEN ou MP_NOTIFICATION_URL faltarem.
    """
    load_dotenv()
    token = (os.getenv("MP_ACCESS_TOKEN") or "").strip()
    if not token:
        raise ConfigError("Defina MP_ACCESS_TOKEN no ambiente ou no .env")
    notification_url = (os.getenv("MP_NOTIFICATION_URL") or "").strip()
    if not notification_url:
        raise ConfigError("Defina MP_NOTIFICATION_URL no ambiente ou no .env")
    base_url = (os.getenv("MP_API_BASE_URL") or "").strip() or DEFAULT_API_BASE_URL
    return Settings(
        access_token=token,
        notification_url=notification_url,
        api_base_url=base_url.rstrip("/"),
        timeout_seconds=_timeout_seconds(),
    )
