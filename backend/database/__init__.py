"""Database module for the settlement engine."""
from .models import (
    GameKind,
    Outcome,
    Config,
    BetContext,
    HistoryRecord,
    Coin,
    MessageInfo,
    BlockEnv,
    TransferRequest,
    Response,
    ConfigView,
    ContractInfo,
    PlaceBet,
    Withdraw,
    UpdateOwner,
    UpdateEnabled,
    ExecuteMsg,
)
from .repo import Database, Store

__all__ = [
    "GameKind", "Outcome", "Config", "BetContext", "HistoryRecord", "Coin", "MessageInfo",
    "BlockEnv", "TransferRequest", "Response", "ConfigView", "ContractInfo",
    "PlaceBet", "Withdraw", "UpdateOwner", "UpdateEnabled", "ExecuteMsg",
    "Database", "Store",
]
