"""Settlement logic shared by every game."""
from .oracle import digest, derive
from .payout import PayoutRates
from .solvency import SolvencyPolicy, can_cover, require_cover, downgrade_if_uncovered
from .rules import GameRule, RULES, rule_for
from .ledger import HistoryLedger
from .engine import SettlementEngine, get_amount_of_denom

__all__ = [
    "digest",
    "derive",
    "PayoutRates",
    "SolvencyPolicy",
    "can_cover",
    "require_cover",
    "downgrade_if_uncovered",
    "GameRule",
    "RULES",
    "rule_for",
    "HistoryLedger",
    "SettlementEngine",
    "get_amount_of_denom",
]
