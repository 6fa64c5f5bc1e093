import hashlib

import pytest

from database import BetContext
from game import digest, derive


def test_digest_is_reproducible():
    ctx = BetContext(timestamp=1_700_000_000, address="player1", selection=1, counter=7)
    same = BetContext(timestamp=1_700_000_000, address="player1", selection=1, counter=7)

    assert digest(ctx) == digest(same)
    assert derive(ctx, 37) == derive(same, 37)


def test_digest_matches_sha256_prefix():
    ctx = BetContext(timestamp=42, address="abc", selection=0, counter=3)
    expected = int(hashlib.sha256(b"42:abc:0:3").hexdigest()[:16], 16)

    assert digest(ctx) == expected
    assert 0 <= digest(ctx) < 2 ** 64


def test_every_field_feeds_the_digest():
    base = BetContext(timestamp=100, address="a", selection=0, counter=0)
    variants = [
        BetContext(timestamp=101, address="a", selection=0, counter=0),
        BetContext(timestamp=100, address="b", selection=0, counter=0),
        BetContext(timestamp=100, address="a", selection=1, counter=0),
        BetContext(timestamp=100, address="a", selection=0, counter=1),
    ]

    assert all(digest(v) != digest(base) for v in variants)


@pytest.mark.parametrize("modulus", [2, 3, 6, 37])
def test_derive_stays_in_outcome_space(modulus):
    values = {derive(BetContext(t, "player1", 0, 0), modulus) for t in range(2000)}

    assert values <= set(range(modulus))
    assert len(values) == modulus


def test_derive_rejects_empty_space():
    with pytest.raises(ValueError):
        derive(BetContext(0, "a", 0, 0), 0)
