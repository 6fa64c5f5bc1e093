"""
Data models for the settlement engine.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Union
from enum import Enum, IntEnum


class GameKind(Enum):
    """Game variant sharing the pool."""
    FLIP = "flip"
    RPS = "rps"
    DICE = "dice"
    ROULETTE = "roulette"

    @property
    def counter_field(self) -> str:
        return f"{self.value}_count"


class Outcome(IntEnum):
    """Numeric outcome indicator stored in history and attributes."""
    WIN = 0
    TIE = 1
    LOSE = 2


@dataclass
class Config:
    """Singleton contract state."""
    owner: str
    denom: str
    enabled: bool = True

    # Per-game play counters (also ledger keys and oracle nonces)
    flip_count: int = 0
    rps_count: int = 0
    dice_count: int = 0
    roulette_count: int = 0

    def counter(self, game: GameKind) -> int:
        return getattr(self, game.counter_field)

    def advance(self, game: GameKind) -> int:
        """Increment a game's counter by one. Returns the new value."""
        value = self.counter(game) + 1
        setattr(self, game.counter_field, value)
        return value


@dataclass(frozen=True)
class BetContext:
    """Entropy fed to the outcome oracle. Never persisted."""
    timestamp: int
    address: str
    selection: int
    counter: int  # Game counter before increment


@dataclass(frozen=True)
class HistoryRecord:
    """An immutable settled bet.

    Stored under key ``id - 1`` (the counter value at call time).
    """
    id: int
    address: str
    level: int  # Player selection
    win: Optional[Outcome]
    bet_amount: int
    timestamp: int


@dataclass(frozen=True)
class Coin:
    """Funds attached to a call."""
    denom: str
    amount: int


@dataclass(frozen=True)
class MessageInfo:
    """Caller and attached funds."""
    sender: str
    funds: Tuple[Coin, ...] = ()


@dataclass(frozen=True)
class BlockEnv:
    """Execution environment of a call."""
    time: int  # Seconds


@dataclass(frozen=True)
class TransferRequest:
    """A payment the host must execute out of the pool."""
    recipient: str
    denom: str
    amount: int


@dataclass
class Response:
    """Result of a successful execute call."""
    transfers: List[TransferRequest] = field(default_factory=list)
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    record: Optional[HistoryRecord] = None

    def attribute(self, key: str) -> Optional[str]:
        for name, value in self.attributes:
            if name == key:
                return value
        return None


@dataclass(frozen=True)
class ConfigView:
    """Config query result."""
    owner: str
    enabled: bool
    denom: str
    treasury_amount: int  # Current pool balance
    flip_count: int
    rps_count: int
    dice_count: int
    roulette_count: int


@dataclass(frozen=True)
class ContractInfo:
    """Contract name and version stored alongside the state."""
    contract: str
    version: str


# === Execute messages ===

@dataclass(frozen=True)
class PlaceBet:
    game: GameKind
    selection: int


@dataclass(frozen=True)
class Withdraw:
    amount: int


@dataclass(frozen=True)
class UpdateOwner:
    owner: str


@dataclass(frozen=True)
class UpdateEnabled:
    enabled: bool


ExecuteMsg = Union[PlaceBet, Withdraw, UpdateOwner, UpdateEnabled]
