import pytest

from database import Database, Coin
from game import SettlementEngine, PayoutRates
from host import SettlementHost
from helpers import OWNER, DENOM, TREASURY, POOL, START_TIME


@pytest.fixture
def rates():
    return PayoutRates(owner_rate=35, reward_rate=2000, multiply=1000)


@pytest.fixture
def db(tmp_path):
    return Database(str(tmp_path / "settlement_test.db"))


@pytest.fixture
def engine(rates):
    return SettlementEngine(rates, treasury_address=TREASURY, contract_address=POOL)


@pytest.fixture
def host(db, engine):
    """Instantiated host with an empty pool."""
    h = SettlementHost(db, engine, clock=lambda: START_TIME)
    h.instantiate(OWNER, [Coin(DENOM, 0)])
    return h


@pytest.fixture
def funded_host(host):
    """Instantiated host whose pool can pay any test reward."""
    host.fund(POOL, DENOM, 1_000_000_000)
    return host
