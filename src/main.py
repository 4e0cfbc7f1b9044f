"""Entrypoint de linha de comando: cria pagamentos PIX/boleto e consulta status."""

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from src.config import ConfigError, load_settings
from src.payments.gateway import ErrorResult, PaymentMethod, PaymentRequest, get_gateway

logger = logging.getLogger(__name__)


def _amount(raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"valor inválido: {raw}")
    if value <= 0:
        raise argparse.ArgumentTypeError("o valor deve ser positivo")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mp-pagamentos", description="Pagamentos PIX/boleto via Mercado Pago")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("pix", "cria pagamento PIX"), ("boleto", "emite boleto")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--ref", required=True, help="referência externa do pedido")
        p.add_argument("--amount", required=True, type=_amount)
        p.add_argument("--description", required=True)
        p.add_argument("--email", required=True)
        p.add_argument("--cpf", required=True)
        p.add_argument("--first-name")
        p.add_argument("--last-name")
        p.add_argument("--idempotency-key", help="reaproveita a chave de uma tentativa anterior")

    status = sub.add_parser("status", help="consulta um pagamento")
    status.add_argument("payment_id")

    parser.add_argument("--timeout", type=float, help="timeout da requisição em segundos")
    return parser


def _print(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2, default=str))


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    # Não emite logs de conexão do urllib3 (requests)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    args = build_parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as e:
        raise SystemExit(str(e))
    with get_gateway(settings) as gateway:
        if args.command == "status":
            return _status(gateway, args)
        return _create(gateway, args)


def _status(gateway, args: argparse.Namespace) -> int:
    result = gateway.get_payment(args.payment_id, timeout=args.timeout)
    if isinstance(result, ErrorResult):
        _print(result.as_dict())
        return 1
    _print(result)
    return 0


def _create(gateway, args: argparse.Namespace) -> int:
    method = PaymentMethod.PIX if args.command == "pix" else PaymentMethod.BOLETO
    request = PaymentRequest(
        reference=args.ref,
        amount=args.amount,
        description=args.description,
        payer_email=args.email,
        payer_tax_id=args.cpf,
        method=method,
        payer_first_name=args.first_name,
        payer_last_name=args.last_name,
    )
    result = gateway.create_payment(request, idempotency_key=args.idempotency_key, timeout=args.timeout)
    _print(result.as_dict())
    if isinstance(result, ErrorResult):
        if result.idempotency_key:
            logger.info("Para repetir esta tentativa use --idempotency-key %s", result.idempotency_key)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
