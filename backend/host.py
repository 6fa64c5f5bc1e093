"""
Transactional host for the settlement engine.

Each call runs inside one exclusive database transaction: attached funds are
credited to the pool, the engine decides, the returned transfer requests are
applied to the balances table, then everything commits together. Any error
rolls the whole call back, attached funds included.

Attached funds are credited to the pool without being debited from the
sender, since custody of player money lives outside this service. The
balances table therefore tracks pool, treasury and payout receipts only
and does not conserve funds across accounts.
"""
import time
import logging
from typing import Callable, Iterable, List, Optional
from database import (
    Database,
    Store,
    GameKind,
    Coin,
    MessageInfo,
    BlockEnv,
    TransferRequest,
    Response,
    ConfigView,
    HistoryRecord,
    PlaceBet,
    Withdraw,
    UpdateOwner,
    UpdateEnabled,
    ExecuteMsg,
)
from errors import ContractError, InvalidFunds, Unauthorized
from game import SettlementEngine
from security import AuditLogger, AuditEventType, AuditSeverity

logger = logging.getLogger(__name__)


class SettlementHost:
    """Serializes calls and commits or reverts each one as a unit."""

    def __init__(
        self,
        db: Database,
        engine: Optional[SettlementEngine] = None,
        audit: Optional[AuditLogger] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.engine = engine or SettlementEngine()
        self.audit = audit or AuditLogger(db.db_path)
        self.clock = clock

    # === Bank ===

    def _credit_funds(self, store: Store, funds: Iterable[Coin]):
        for coin in funds:
            if coin.amount < 0:
                raise InvalidFunds(f"Negative amount of {coin.denom}")
            store.adjust_balance(self.engine.contract_address, coin.denom, coin.amount)

    def _apply_transfers(self, store: Store, transfers: List[TransferRequest]):
        for transfer in transfers:
            store.adjust_balance(self.engine.contract_address, transfer.denom, -transfer.amount)
            store.adjust_balance(transfer.recipient, transfer.denom, transfer.amount)
            logger.debug(f"[HOST] Sent {transfer.amount} {transfer.denom} to {transfer.recipient}")

    def fund(self, address: str, denom: str, amount: int, sender: Optional[str] = None) -> int:
        """Deposit into any account, e.g. to seed the pool. Returns the new balance.

        When ``sender`` is given the deposit is only accepted from the operator.
        """
        if amount < 0:
            raise InvalidFunds(f"Negative amount of {denom}")
        try:
            with self.db.transaction() as store:
                if sender is not None:
                    self.engine.check_owner(store, sender)
                balance = store.adjust_balance(address, denom, amount)
        except Unauthorized as e:
            self.audit.log(
                AuditEventType.UNAUTHORIZED_ACTION,
                AuditSeverity.WARNING,
                address=sender,
                details=f"Fund: {e}",
            )
            raise
        logger.info(f"[HOST] Funded {address} with {amount} {denom} (balance: {balance})")
        return balance

    def balance_of(self, address: str, denom: str) -> int:
        with self.db.transaction() as store:
            return store.get_balance(address, denom)

    # === Lifecycle ===

    def instantiate(self, sender: str, funds: Iterable[Coin]) -> Response:
        info = MessageInfo(sender=sender, funds=tuple(funds))
        with self.db.transaction() as store:
            self._credit_funds(store, info.funds)
            response = self.engine.instantiate(store, info)

        self.audit.log(AuditEventType.CONTRACT_INSTANTIATED, address=sender, details=f"denom={response.attribute('denom')}")
        return response

    def migrate(self) -> Response:
        with self.db.transaction() as store:
            response = self.engine.migrate(store)

        self.audit.log(
            AuditEventType.CONTRACT_MIGRATED,
            details=f"{response.attribute('from_version')} -> {response.attribute('to_version')}",
        )
        return response

    # === Execute ===

    def _dispatch(self, store: Store, env: BlockEnv, info: MessageInfo, msg: ExecuteMsg) -> Response:
        if isinstance(msg, PlaceBet):
            return self.engine.place_bet(store, env, info, msg.game, msg.selection)
        if isinstance(msg, Withdraw):
            return self.engine.withdraw(store, env, info, msg.amount)
        if isinstance(msg, UpdateOwner):
            return self.engine.update_owner(store, info, msg.owner)
        if isinstance(msg, UpdateEnabled):
            return self.engine.update_enabled(store, info, msg.enabled)
        raise TypeError(f"Unknown message: {msg!r}")

    def execute(
        self,
        sender: str,
        msg: ExecuteMsg,
        funds: Iterable[Coin] = (),
        block_time: Optional[int] = None,
    ) -> Response:
        """Run one call atomically.

        Args:
            sender: Caller address
            msg: PlaceBet, Withdraw, UpdateOwner or UpdateEnabled
            funds: Coins attached to the call (credited to the pool)
            block_time: Call timestamp in seconds, defaults to the clock

        Returns:
            Response of the engine, already committed

        Raises:
            ContractError: The call was rejected and nothing was committed
        """
        info = MessageInfo(sender=sender, funds=tuple(funds))
        env = BlockEnv(time=int(self.clock() if block_time is None else block_time))

        try:
            with self.db.transaction() as store:
                self._credit_funds(store, info.funds)
                response = self._dispatch(store, env, info, msg)
                self._apply_transfers(store, response.transfers)
        except Unauthorized as e:
            self.audit.log(
                AuditEventType.UNAUTHORIZED_ACTION,
                AuditSeverity.WARNING,
                address=sender,
                details=f"{type(msg).__name__}: {e}",
            )
            raise
        except ContractError as e:
            logger.warning(f"[HOST] {type(msg).__name__} from {sender} rejected: {e}")
            if isinstance(msg, PlaceBet):
                self.audit.log(
                    AuditEventType.BET_REJECTED,
                    AuditSeverity.WARNING,
                    address=sender,
                    details=f"{msg.game.value} selection={msg.selection}: {e.code}",
                )
            raise

        self._audit_admin_action(sender, msg)
        return response

    def _audit_admin_action(self, sender: str, msg: ExecuteMsg):
        if isinstance(msg, Withdraw):
            self.audit.log(AuditEventType.WITHDRAWAL, address=sender, details=f"amount={msg.amount}")
        elif isinstance(msg, UpdateOwner):
            self.audit.log(AuditEventType.OWNER_UPDATED, AuditSeverity.CRITICAL, address=sender, details=f"new_owner={msg.owner}")
        elif isinstance(msg, UpdateEnabled):
            self.audit.log(AuditEventType.ENABLED_UPDATED, address=sender, details=f"enabled={msg.enabled}")

    # === Queries ===

    def query_config(self) -> ConfigView:
        with self.db.transaction() as store:
            return self.engine.query_config(store)

    def query_history(self, game: GameKind, count: int) -> List[HistoryRecord]:
        with self.db.transaction() as store:
            return self.engine.query_history(store, game, count)
