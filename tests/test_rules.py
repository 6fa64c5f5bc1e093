import pytest

from database import GameKind, Outcome
from game import rule_for, SolvencyPolicy, can_cover, require_cover, downgrade_if_uncovered
from game.rules import (
    PAPER, ROCK, SCISSORS,
    RED_NUMBERS, BLACK_NUMBERS, ROULETTE_PREDICATES,
    FIRST_COLUMN, SECOND_COLUMN, THIRD_COLUMN,
    FIRST_DOZEN, SECOND_DOZEN, THIRD_DOZEN,
    LOW, HIGH, EVEN, ODD, RED, BLACK,
    flip_outcome, rps_outcome, dice_outcome, roulette_outcome,
)
from errors import InsufficientFunds


# === Selection domains ===

@pytest.mark.parametrize("game,valid,invalid", [
    (GameKind.FLIP, [0, 1], [2, -1, 7]),
    (GameKind.RPS, [0, 1, 2], [3, -1]),
    (GameKind.DICE, [0, 1], [2, 6]),
    (GameKind.ROULETTE, [0, 17, 36, 37, 48], [49, -1, 100]),
])
def test_selection_domains(game, valid, invalid):
    rule = rule_for(game)
    assert all(rule.is_valid(s) for s in valid)
    assert not any(rule.is_valid(s) for s in invalid)


def test_non_integer_selections_are_invalid():
    rule = rule_for(GameKind.FLIP)
    assert not rule.is_valid(True)
    assert not rule.is_valid("0")
    assert not rule.is_valid(0.0)


def test_outcome_spaces_and_policies():
    assert rule_for(GameKind.FLIP).modulus == 2
    assert rule_for(GameKind.RPS).modulus == 3
    assert rule_for(GameKind.DICE).modulus == 6
    assert rule_for(GameKind.ROULETTE).modulus == 37

    for game in (GameKind.FLIP, GameKind.RPS, GameKind.DICE):
        assert rule_for(game).solvency == SolvencyPolicy.DOWNGRADE
    assert rule_for(GameKind.ROULETTE).solvency == SolvencyPolicy.REJECT


# === Coin flip ===

@pytest.mark.parametrize("selection", [0, 1])
def test_flip_wins_on_even_value_whatever_the_selection(selection):
    assert flip_outcome(selection, 0) == Outcome.WIN
    assert flip_outcome(selection, 1) == Outcome.LOSE


# === Rock paper scissors ===

@pytest.mark.parametrize("player,opponent,expected", [
    (PAPER, ROCK, Outcome.WIN),
    (ROCK, SCISSORS, Outcome.WIN),
    (SCISSORS, PAPER, Outcome.WIN),
    (ROCK, PAPER, Outcome.LOSE),
    (SCISSORS, ROCK, Outcome.LOSE),
    (PAPER, SCISSORS, Outcome.LOSE),
    (PAPER, PAPER, Outcome.TIE),
    (ROCK, ROCK, Outcome.TIE),
    (SCISSORS, SCISSORS, Outcome.TIE),
])
def test_rps_table(player, opponent, expected):
    assert rps_outcome(player, opponent) == expected


# === Dice ===

def test_dice_parity():
    assert [dice_outcome(0, die) for die in range(6)] == [
        Outcome.WIN, Outcome.LOSE, Outcome.WIN, Outcome.LOSE, Outcome.WIN, Outcome.LOSE,
    ]
    assert [dice_outcome(1, die) for die in range(6)] == [
        Outcome.LOSE, Outcome.WIN, Outcome.LOSE, Outcome.WIN, Outcome.LOSE, Outcome.WIN,
    ]


# === Roulette ===

def test_straight_bets_need_exact_match():
    assert roulette_outcome(0, 0) == Outcome.WIN
    assert roulette_outcome(17, 17) == Outcome.WIN
    assert roulette_outcome(17, 18) == Outcome.LOSE
    assert roulette_outcome(1, 0) == Outcome.LOSE


@pytest.mark.parametrize("code", sorted(ROULETTE_PREDICATES))
def test_zero_loses_every_composite_bet(code):
    assert roulette_outcome(code, 0) == Outcome.LOSE


def test_even_bet_on_zero_loses():
    assert roulette_outcome(EVEN, 0) == Outcome.LOSE
    assert roulette_outcome(EVEN, 2) == Outcome.WIN
    assert roulette_outcome(ODD, 0) == Outcome.LOSE


@pytest.mark.parametrize("code,winners", [
    (FIRST_COLUMN, {1, 4, 34}),
    (SECOND_COLUMN, {2, 5, 35}),
    (THIRD_COLUMN, {3, 6, 36}),
    (FIRST_DOZEN, {1, 12}),
    (SECOND_DOZEN, {13, 24}),
    (THIRD_DOZEN, {25, 36}),
    (LOW, {1, 18}),
    (HIGH, {19, 36}),
    (ODD, {1, 35}),
    (RED, {1, 36}),
    (BLACK, {2, 35}),
])
def test_composite_bets(code, winners):
    for value in winners:
        assert roulette_outcome(code, value) == Outcome.WIN


def test_composite_coverage_counts():
    counts = {code: sum(pred(v) for v in range(37)) for code, pred in ROULETTE_PREDICATES.items()}

    for code in (FIRST_COLUMN, SECOND_COLUMN, THIRD_COLUMN, FIRST_DOZEN, SECOND_DOZEN, THIRD_DOZEN):
        assert counts[code] == 12
    for code in (LOW, HIGH, EVEN, ODD, RED, BLACK):
        assert counts[code] == 18


def test_red_and_black_partition_the_non_zero_numbers():
    assert RED_NUMBERS.isdisjoint(BLACK_NUMBERS)
    assert RED_NUMBERS | BLACK_NUMBERS == set(range(1, 37))


# === Solvency ===

def test_require_cover():
    require_cover(100, 100)
    with pytest.raises(InsufficientFunds):
        require_cover(99, 100)


def test_downgrade_only_touches_uncovered_wins_and_ties():
    assert can_cover(10, 10)
    assert downgrade_if_uncovered(Outcome.WIN, 10, 10) == (Outcome.WIN, 10)
    assert downgrade_if_uncovered(Outcome.WIN, 9, 10) == (Outcome.LOSE, 0)
    assert downgrade_if_uncovered(Outcome.TIE, 9, 10) == (Outcome.LOSE, 0)
    assert downgrade_if_uncovered(Outcome.LOSE, 0, 0) == (Outcome.LOSE, 0)
