"""
Settlement engine shared by every game.

The engine never moves funds. It decides amounts, returns transfer requests
for the host to execute and mutates state only through the Store it is given.
"""
import logging
from typing import List, Optional
from database.models import (
    GameKind,
    Outcome,
    Config,
    BetContext,
    HistoryRecord,
    MessageInfo,
    BlockEnv,
    TransferRequest,
    Response,
    ConfigView,
    ContractInfo,
)
from database.repo import Store
from errors import (
    InvalidBet,
    InvalidFunds,
    ContractDisabled,
    Unauthorized,
    NotEnoughCoins,
    VersionMismatch,
    NotInstantiated,
    AlreadyInstantiated,
)
from .oracle import derive
from .payout import PayoutRates
from .rules import rule_for
from .solvency import SolvencyPolicy, require_cover, downgrade_if_uncovered
from .ledger import HistoryLedger
import config

logger = logging.getLogger(__name__)


def get_amount_of_denom(info: MessageInfo, denom: str) -> int:
    """Total attached amount of ``denom``.

    Raises:
        InvalidFunds: If nothing of ``denom`` was attached
    """
    amount = sum(coin.amount for coin in info.funds if coin.denom == denom)
    if amount <= 0:
        raise InvalidFunds(f"Attach a positive amount of {denom}")
    return amount


class SettlementEngine:
    """Outcome, payout, solvency and ledger logic for all four games."""

    def __init__(
        self,
        rates: Optional[PayoutRates] = None,
        treasury_address: str = config.TREASURY_ADDR,
        contract_address: str = config.CONTRACT_ADDRESS,
    ):
        self.rates = rates or PayoutRates.from_config()
        self.treasury_address = treasury_address
        self.contract_address = contract_address

    # === State helpers ===

    def load_config(self, store: Store) -> Config:
        cfg = store.load_config()
        if cfg is None:
            raise NotInstantiated()
        return cfg

    def pool_balance(self, store: Store, denom: str) -> int:
        return store.get_balance(self.contract_address, denom)

    def is_owner(self, store: Store, address: str) -> bool:
        return self.load_config(store).owner == address

    def is_enabled(self, store: Store) -> bool:
        return self.load_config(store).enabled

    def check_owner(self, store: Store, address: str):
        if not self.is_owner(store, address):
            raise Unauthorized(f"{address} is not the operator")

    def check_enabled(self, store: Store):
        if not self.is_enabled(store):
            raise ContractDisabled()

    # === Lifecycle ===

    def instantiate(self, store: Store, info: MessageInfo) -> Response:
        """Create the config: sender becomes operator, first coin sets the currency."""
        if store.load_config() is not None:
            raise AlreadyInstantiated()
        if not info.funds:
            raise InvalidFunds("Attach a coin to set the settlement currency")

        store.save_contract_info(ContractInfo(config.CONTRACT_NAME, config.CONTRACT_VERSION))
        cfg = Config(owner=info.sender, denom=info.funds[0].denom, enabled=True)
        store.save_config(cfg)

        logger.info(f"[ADMIN] Instantiated: owner={cfg.owner}, denom={cfg.denom}")
        return Response(attributes=[
            ("action", "instantiate"),
            ("owner", cfg.owner),
            ("denom", cfg.denom),
        ])

    def migrate(self, store: Store) -> Response:
        version = store.load_contract_info()
        if version is None:
            raise NotInstantiated()
        if version.contract != config.CONTRACT_NAME:
            raise VersionMismatch(version.contract)

        store.save_contract_info(ContractInfo(config.CONTRACT_NAME, config.CONTRACT_VERSION))
        logger.info(f"[ADMIN] Migrated {version.contract} {version.version} -> {config.CONTRACT_VERSION}")
        return Response(attributes=[
            ("action", "migrate"),
            ("from_version", version.version),
            ("to_version", config.CONTRACT_VERSION),
        ])

    # === Administration ===

    def update_owner(self, store: Store, info: MessageInfo, owner: str) -> Response:
        self.check_owner(store, info.sender)

        cfg = self.load_config(store)
        cfg.owner = owner
        store.save_config(cfg)

        logger.info(f"[ADMIN] Owner changed {info.sender} -> {owner}")
        return Response(attributes=[("action", "update_owner"), ("owner", owner)])

    def update_enabled(self, store: Store, info: MessageInfo, enabled: bool) -> Response:
        self.check_owner(store, info.sender)

        cfg = self.load_config(store)
        cfg.enabled = enabled
        store.save_config(cfg)

        logger.info(f"[ADMIN] Enabled set to {enabled} by {info.sender}")
        return Response(attributes=[("action", "update_enabled"), ("enabled", str(enabled).lower())])

    def withdraw(self, store: Store, env: BlockEnv, info: MessageInfo, amount: int) -> Response:
        """Pay ``amount`` from the pool to the operator."""
        self.check_owner(store, info.sender)

        if amount < 0:
            raise InvalidFunds(f"Cannot withdraw a negative amount ({amount})")

        cfg = self.load_config(store)
        contract_amount = self.pool_balance(store, cfg.denom)
        if contract_amount < amount:
            raise NotEnoughCoins(contract_amount)

        logger.info(f"[WITHDRAW] {amount} {cfg.denom} to {info.sender} (pool: {contract_amount})")
        return Response(
            transfers=[TransferRequest(info.sender, cfg.denom, amount)],
            attributes=[
                ("action", "withdraw"),
                ("address", info.sender),
                ("amount", str(amount)),
            ],
        )

    # === Settlement ===

    def place_bet(self, store: Store, env: BlockEnv, info: MessageInfo, game: GameKind, selection: int) -> Response:
        """Settle one wager.

        Args:
            store: Open transaction
            env: Block time used as oracle input and record timestamp
            info: Caller and attached wager
            game: Which game is played
            selection: Game-specific choice

        Returns:
            Response with the fee transfer, the optional reward transfer and
            the appended history record
        """
        self.check_enabled(store)
        cfg = self.load_config(store)
        rule = rule_for(game)

        if not rule.is_valid(selection):
            raise InvalidBet(f"Selection {selection!r} is not valid for {game.value}")

        amount = get_amount_of_denom(info, cfg.denom)
        pool = self.pool_balance(store, cfg.denom)
        fee = self.rates.treasury_fee(amount)
        # The fee leaves the pool before any reward does
        payable = pool - fee

        if rule.solvency == SolvencyPolicy.REJECT:
            require_cover(payable, self.rates.win_reward(amount))

        counter = cfg.counter(game)
        ctx = BetContext(timestamp=env.time, address=info.sender, selection=selection, counter=counter)
        value = derive(ctx, rule.modulus)

        outcome = rule.decide(selection, value)
        reward = self.rates.reward_for(outcome, amount)
        if rule.solvency == SolvencyPolicy.DOWNGRADE:
            outcome, reward = downgrade_if_uncovered(outcome, payable, reward)

        transfers: List[TransferRequest] = [TransferRequest(self.treasury_address, cfg.denom, fee)]
        if outcome != Outcome.LOSE:
            transfers.append(TransferRequest(info.sender, cfg.denom, reward))

        record = HistoryRecord(
            id=counter + 1,
            address=info.sender,
            level=selection,
            win=outcome,
            bet_amount=amount,
            timestamp=env.time,
        )
        HistoryLedger(store).append(game, counter, record)

        cfg.advance(game)
        store.save_config(cfg)

        logger.info(
            f"[SETTLE] {game.value} #{record.id}: {info.sender} picked {selection}, drew {value} -> "
            f"{outcome.name} (wager {amount}, fee {fee}, reward {reward})"
        )

        return Response(
            transfers=transfers,
            attributes=[
                ("action", game.value),
                ("address", info.sender),
                ("amount", str(amount)),
                ("win", str(int(outcome))),
            ],
            record=record,
        )

    # === Queries ===

    def query_config(self, store: Store) -> ConfigView:
        cfg = self.load_config(store)
        return ConfigView(
            owner=cfg.owner,
            enabled=cfg.enabled,
            denom=cfg.denom,
            treasury_amount=self.pool_balance(store, cfg.denom),
            flip_count=cfg.flip_count,
            rps_count=cfg.rps_count,
            dice_count=cfg.dice_count,
            roulette_count=cfg.roulette_count,
        )

    def query_history(self, store: Store, game: GameKind, count: int) -> List[HistoryRecord]:
        cfg = self.load_config(store)
        return HistoryLedger(store).recent(game, cfg.counter(game), count)
