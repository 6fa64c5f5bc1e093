"""
Deterministic outcome derivation.

The digest is a pure function of public call data (block time, caller,
selection, game counter). Anyone who can predict the block timestamp and the
counter can predict the outcome: this is NOT a fair randomness source.
"""
import hashlib
import logging
from database.models import BetContext

logger = logging.getLogger(__name__)


def digest(ctx: BetContext) -> int:
    """Hash a bet context into an unsigned 64-bit integer.

    Args:
        ctx: Timestamp, caller, selection and pre-increment counter

    Returns:
        First 8 bytes of SHA-256 over the joined fields, big-endian
    """
    seed = f"{ctx.timestamp}:{ctx.address}:{ctx.selection}:{ctx.counter}"
    hash_digest = hashlib.sha256(seed.encode()).hexdigest()
    return int(hash_digest[:16], 16)


def derive(ctx: BetContext, modulus: int) -> int:
    """Reduce the context digest into a game's outcome space [0, modulus)."""
    if modulus <= 0:
        raise ValueError(f"Outcome space must be positive, got {modulus}")
    value = digest(ctx) % modulus
    logger.debug(f"Derived {value} (mod {modulus}) for {ctx.address} at t={ctx.timestamp}, counter={ctx.counter}")
    return value
