"""
Win rules for each game.

A GameRule bundles the legal selections, the outcome space the oracle digest
is reduced into, the win function and the solvency policy of one game.
"""
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet
from database.models import GameKind, Outcome
from .solvency import SolvencyPolicy


@dataclass(frozen=True)
class GameRule:
    game: GameKind
    modulus: int
    selections: FrozenSet[int]
    solvency: SolvencyPolicy
    decide: Callable[[int, int], Outcome]

    def is_valid(self, selection: int) -> bool:
        return isinstance(selection, int) and not isinstance(selection, bool) and selection in self.selections


# === Coin flip ===

def flip_outcome(selection: int, value: int) -> Outcome:
    """Even digest wins. The selection is recorded but does not take part."""
    return Outcome.WIN if value % 2 == 0 else Outcome.LOSE


# === Rock paper scissors ===

PAPER = 0
ROCK = 1
SCISSORS = 2

# (player, opponent) pairs the player wins
RPS_BEATS = {
    (PAPER, ROCK),
    (ROCK, SCISSORS),
    (SCISSORS, PAPER),
}


def rps_outcome(selection: int, opponent: int) -> Outcome:
    if selection == opponent:
        return Outcome.TIE
    if (selection, opponent) in RPS_BEATS:
        return Outcome.WIN
    return Outcome.LOSE


# === Dice ===

def dice_outcome(selection: int, die: int) -> Outcome:
    """Parity bet: 0 = even face, 1 = odd face."""
    return Outcome.WIN if die % 2 == selection else Outcome.LOSE


# === Roulette ===

WHEEL_SIZE = 37  # 0..36, single zero

RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset(set(range(1, WHEEL_SIZE)) - RED_NUMBERS)

# Composite bet codes. Zero belongs to none of them.
FIRST_COLUMN = 37
SECOND_COLUMN = 38
THIRD_COLUMN = 39
FIRST_DOZEN = 40
SECOND_DOZEN = 41
THIRD_DOZEN = 42
LOW = 43
HIGH = 44
EVEN = 45
ODD = 46
RED = 47
BLACK = 48

ROULETTE_PREDICATES: Dict[int, Callable[[int], bool]] = {
    FIRST_COLUMN: lambda v: v >= 1 and v % 3 == 1,
    SECOND_COLUMN: lambda v: v >= 1 and v % 3 == 2,
    THIRD_COLUMN: lambda v: v >= 1 and v % 3 == 0,
    FIRST_DOZEN: lambda v: 1 <= v <= 12,
    SECOND_DOZEN: lambda v: 13 <= v <= 24,
    THIRD_DOZEN: lambda v: 25 <= v <= 36,
    LOW: lambda v: 1 <= v <= 18,
    HIGH: lambda v: 19 <= v <= 36,
    EVEN: lambda v: v >= 1 and v % 2 == 0,
    ODD: lambda v: v >= 1 and v % 2 == 1,
    RED: lambda v: v in RED_NUMBERS,
    BLACK: lambda v: v in BLACK_NUMBERS,
}


def roulette_outcome(selection: int, wheel: int) -> Outcome:
    if selection < WHEEL_SIZE:
        won = selection == wheel
    else:
        won = ROULETTE_PREDICATES[selection](wheel)
    return Outcome.WIN if won else Outcome.LOSE


RULES: Dict[GameKind, GameRule] = {
    GameKind.FLIP: GameRule(
        game=GameKind.FLIP,
        modulus=2,
        selections=frozenset({0, 1}),
        solvency=SolvencyPolicy.DOWNGRADE,
        decide=flip_outcome,
    ),
    GameKind.RPS: GameRule(
        game=GameKind.RPS,
        modulus=3,
        selections=frozenset({PAPER, ROCK, SCISSORS}),
        solvency=SolvencyPolicy.DOWNGRADE,
        decide=rps_outcome,
    ),
    GameKind.DICE: GameRule(
        game=GameKind.DICE,
        modulus=6,
        selections=frozenset({0, 1}),
        solvency=SolvencyPolicy.DOWNGRADE,
        decide=dice_outcome,
    ),
    GameKind.ROULETTE: GameRule(
        game=GameKind.ROULETTE,
        modulus=WHEEL_SIZE,
        selections=frozenset(range(WHEEL_SIZE)) | frozenset(ROULETTE_PREDICATES),
        solvency=SolvencyPolicy.REJECT,
        decide=roulette_outcome,
    ),
}


def rule_for(game: GameKind) -> GameRule:
    return RULES[game]
