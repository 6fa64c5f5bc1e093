"""
Settlement configuration.

Rate constants are fixed-point numerators over a shared denominator
(MULTIPLY). Override any of them through the environment / .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# CONTRACT IDENTITY
# =============================================================================

CONTRACT_NAME = "wager-settlement"
CONTRACT_VERSION = "1.0.0"

# =============================================================================
# PAYOUT RATES
# =============================================================================
#
# fee    = wager * OWNER_RATE / MULTIPLY
# reward = wager * REWARD_RATE / MULTIPLY - fee   (win)
# reward = wager - fee                            (tie)
#

MULTIPLY = int(os.getenv("RATE_DENOMINATOR", "1000"))
OWNER_RATE = int(os.getenv("OWNER_RATE", "35"))      # 3.5%
REWARD_RATE = int(os.getenv("REWARD_RATE", "2000"))  # 2x

# =============================================================================
# ADDRESSES & STORAGE
# =============================================================================

TREASURY_ADDR = os.getenv("TREASURY_WALLET", "treasury")  # Receives every fee
CONTRACT_ADDRESS = os.getenv("POOL_ADDRESS", "pool")      # Holds the pool
DATABASE_PATH = os.getenv("DATABASE_PATH", "settlement.db")

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")


def validate_rates(owner_rate: int, reward_rate: int, multiply: int):
    """Reject rate constants that would produce negative amounts.

    Raises:
        ValueError: If the denominator is not positive, the fee rate is
            outside [0, multiply), or a win would return less than the wager.
    """
    if multiply <= 0:
        raise ValueError(f"Rate denominator must be positive, got {multiply}")
    if owner_rate < 0 or owner_rate >= multiply:
        raise ValueError(f"Owner rate must be in [0, {multiply}), got {owner_rate}")
    if reward_rate < multiply:
        raise ValueError(f"Reward rate must be at least {multiply}, got {reward_rate}")
