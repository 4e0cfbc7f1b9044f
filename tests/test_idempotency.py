import random
import re

from src.payments.gateway.idempotency import generate_idempotency_key

UUID4_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def test_keys_are_uuid4_and_unique():
    rng = random.Random()
    keys = [generate_idempotency_key(rng) for _ in range(10_000)]

    for key in keys:
        assert UUID4_PATTERN.match(key), key
        assert key[14] == "4"
        assert key[19] in "89ab"
    assert len(set(keys)) == len(keys)


def test_seeded_source_is_deterministic():
    a = [generate_idempotency_key(random.Random(7)) for _ in range(3)]
    assert a[0] == a[1] == a[2]


def test_version_and_variant_forced_on_extreme_bits():
    class AllOnes:
        def getrandbits(self, k):
            return (1 << k) - 1

    class AllZeros:
        def getrandbits(self, k):
            return 0

    assert generate_idempotency_key(AllOnes()) == "ffffffff-ffff-4fff-bfff-ffffffffffff"
    assert generate_idempotency_key(AllZeros()) == "00000000-0000-4000-8000-000000000000"
