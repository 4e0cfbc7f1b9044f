"""Chave de idempotência (UUID v4) para criação de pagamentos."""

import random
import uuid
from typing import Protocol


class RandomSource(Protocol):
    def getrandbits(self, k: int) -> int:
        ...


def generate_idempotency_key(rng: RandomSource) -> str:
    """
    UUID v4 textual (8-4-4-4-12) a partir de 128 bits de `rng`.
    O construtor do UUID fixa o nibble de versão em 4 e a variante em 10xx.
    Obrigatório no POST /v1/payments desde jan/2024.
    """
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))


def default_random_source() -> random.Random:
    return random.Random()
