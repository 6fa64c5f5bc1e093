"""
Typed errors raised by the settlement engine.

Every error carries a stable ``code`` and the HTTP status the API layer
answers with.
"""


class ContractError(Exception):
    """Base class for every settlement failure."""
    code = "contract_error"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)


class InvalidBet(ContractError):
    """Selection is outside the game's legal domain."""
    code = "invalid_bet"
    status_code = 400


class InvalidFunds(ContractError):
    """No wager of the configured currency was attached."""
    code = "invalid_funds"
    status_code = 400


class ContractDisabled(ContractError):
    """Contract is disabled."""
    code = "contract_disabled"
    status_code = 503


class Unauthorized(ContractError):
    """Caller is not the operator."""
    code = "unauthorized"
    status_code = 403


class InsufficientFunds(ContractError):
    """Pool cannot cover the reward."""
    code = "insufficient_funds"
    status_code = 409


class NotEnoughCoins(ContractError):
    """Pool balance is lower than the requested amount."""
    code = "not_enough_coins"
    status_code = 409

    def __init__(self, contract_amount: int):
        self.contract_amount = contract_amount
        super().__init__(f"Not enough coins in pool: {contract_amount}")


class VersionMismatch(ContractError):
    """Stored state belongs to a different contract."""
    code = "version_mismatch"
    status_code = 409

    def __init__(self, previous_contract: str):
        self.previous_contract = previous_contract
        super().__init__(f"Cannot migrate from different contract type: {previous_contract}")


class HistoryNotFound(ContractError):
    """Ledger key was never written."""
    code = "history_not_found"
    status_code = 404

    def __init__(self, game: str, key: int):
        self.game = game
        self.key = key
        super().__init__(f"No {game} history at key {key}")


class NotInstantiated(ContractError):
    """Contract has not been instantiated."""
    code = "not_instantiated"
    status_code = 409


class AlreadyInstantiated(ContractError):
    """Contract is already instantiated."""
    code = "already_instantiated"
    status_code = 409
