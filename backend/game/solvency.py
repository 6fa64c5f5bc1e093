"""
Pool solvency checks.

Two policies coexist and are kept as-is per game:
- DOWNGRADE: a win/tie the pool cannot pay is recorded as a loss (fee still charged)
- REJECT: the whole call fails with InsufficientFunds before anything is requested
"""
import logging
from enum import Enum
from typing import Tuple
from database.models import Outcome
from errors import InsufficientFunds

logger = logging.getLogger(__name__)


class SolvencyPolicy(Enum):
    """What happens when the pool cannot cover a reward."""
    DOWNGRADE = "downgrade"
    REJECT = "reject"


def can_cover(pool_balance: int, reward: int) -> bool:
    return pool_balance >= reward


def require_cover(pool_balance: int, reward: int):
    """Raise InsufficientFunds if the pool cannot pay ``reward``."""
    if not can_cover(pool_balance, reward):
        logger.warning(f"[SOLVENCY] Rejecting bet: pool {pool_balance} < reward {reward}")
        raise InsufficientFunds(f"Pool balance {pool_balance} cannot cover reward {reward}")


def downgrade_if_uncovered(outcome: Outcome, pool_balance: int, reward: int) -> Tuple[Outcome, int]:
    """Turn an unpayable win/tie into a loss.

    Returns:
        Tuple of (outcome, reward) to settle with
    """
    if outcome == Outcome.LOSE or can_cover(pool_balance, reward):
        return outcome, reward

    logger.warning(f"[SOLVENCY] Downgrading {outcome.name} to LOSE: pool {pool_balance} < reward {reward}")
    return Outcome.LOSE, 0
