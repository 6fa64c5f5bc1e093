"""Shared constants and search helpers for the test suite."""
from database import BetContext, GameKind
from game import derive, rule_for

OWNER = "operator"
PLAYER = "player1"
DENOM = "uusd"
TREASURY = "treasury"
POOL = "pool"
START_TIME = 1_700_000_000

WAGER = 1_000_000
FEE = 35_000            # 3.5%
WIN_REWARD = 1_965_000  # 2x - fee
TIE_REWARD = 965_000    # 1x - fee


def find_block_time(game: GameKind, selection: int, counter: int, predicate, sender: str = PLAYER, start: int = START_TIME) -> int:
    """First block time at which the derived value satisfies ``predicate``."""
    rule = rule_for(game)
    for t in range(start, start + 200_000):
        if predicate(derive(BetContext(t, sender, selection, counter), rule.modulus)):
            return t
    raise AssertionError(f"No block time found for {game.value}")
