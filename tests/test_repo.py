import sqlite3

import pytest

from database import Config, GameKind, HistoryRecord, Outcome, ContractInfo


def test_transaction_commits(db):
    with db.transaction() as store:
        store.save_config(Config(owner="op", denom="uusd"))
        store.adjust_balance("pool", "uusd", 500)

    with db.transaction() as store:
        assert store.load_config() == Config(owner="op", denom="uusd")
        assert store.get_balance("pool", "uusd") == 500


def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        with db.transaction() as store:
            store.save_config(Config(owner="op", denom="uusd"))
            store.adjust_balance("pool", "uusd", 500)
            raise RuntimeError("boom")

    with db.transaction() as store:
        assert store.load_config() is None
        assert store.get_balance("pool", "uusd") == 0


def test_config_round_trip_keeps_counters(db):
    cfg = Config(owner="op", denom="uusd", enabled=False)
    cfg.advance(GameKind.ROULETTE)
    cfg.advance(GameKind.ROULETTE)
    cfg.advance(GameKind.FLIP)

    with db.transaction() as store:
        store.save_config(cfg)
        loaded = store.load_config()

    assert loaded == cfg
    assert loaded.counter(GameKind.ROULETTE) == 2
    assert loaded.counter(GameKind.DICE) == 0


def test_history_keys_are_unique_per_game(db):
    record = HistoryRecord(id=1, address="p", level=1, win=Outcome.TIE, bet_amount=10, timestamp=5)

    with db.transaction() as store:
        store.insert_history(GameKind.RPS, 0, record)
        store.insert_history(GameKind.DICE, 0, record)
        with pytest.raises(sqlite3.IntegrityError):
            store.insert_history(GameKind.RPS, 0, record)

        assert store.load_history(GameKind.RPS, 0) == record
        assert store.load_history(GameKind.FLIP, 0) is None


def test_history_without_outcome(db):
    record = HistoryRecord(id=1, address="p", level=0, win=None, bet_amount=1, timestamp=0)

    with db.transaction() as store:
        store.insert_history(GameKind.FLIP, 0, record)
        assert store.load_history(GameKind.FLIP, 0).win is None


def test_large_amounts_survive(db):
    big = 2 ** 100
    record = HistoryRecord(id=1, address="p", level=0, win=Outcome.WIN, bet_amount=big, timestamp=0)

    with db.transaction() as store:
        store.adjust_balance("pool", "uusd", big)
        store.insert_history(GameKind.FLIP, 0, record)

    with db.transaction() as store:
        assert store.get_balance("pool", "uusd") == big
        assert store.load_history(GameKind.FLIP, 0).bet_amount == big


def test_balance_cannot_go_negative(db):
    with db.transaction() as store:
        store.adjust_balance("pool", "uusd", 10)
        with pytest.raises(ValueError):
            store.adjust_balance("pool", "uusd", -11)
        assert store.get_balance("pool", "uusd") == 10


def test_contract_info(db):
    with db.transaction() as store:
        assert store.load_contract_info() is None
        store.save_contract_info(ContractInfo("wager-settlement", "1.0.0"))
        assert store.load_contract_info() == ContractInfo("wager-settlement", "1.0.0")
