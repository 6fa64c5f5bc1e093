"""
Fee and reward arithmetic shared by every game.
"""
from dataclasses import dataclass
from database.models import Outcome
import config


@dataclass(frozen=True)
class PayoutRates:
    """Fixed-point rates: numerators over a shared denominator."""
    owner_rate: int
    reward_rate: int
    multiply: int

    def __post_init__(self):
        config.validate_rates(self.owner_rate, self.reward_rate, self.multiply)

    @classmethod
    def from_config(cls) -> "PayoutRates":
        return cls(
            owner_rate=config.OWNER_RATE,
            reward_rate=config.REWARD_RATE,
            multiply=config.MULTIPLY,
        )

    def treasury_fee(self, amount: int) -> int:
        """Fee owed to the treasury, charged on every outcome."""
        return amount * self.owner_rate // self.multiply

    def win_reward(self, amount: int) -> int:
        """Reward on a win: multiplied wager minus the fee."""
        return amount * self.reward_rate // self.multiply - self.treasury_fee(amount)

    def tie_reward(self, amount: int) -> int:
        """Reward on a tie: the wager back minus the fee."""
        return amount - self.treasury_fee(amount)

    def reward_for(self, outcome: Outcome, amount: int) -> int:
        if outcome == Outcome.WIN:
            return self.win_reward(amount)
        if outcome == Outcome.TIE:
            return self.tie_reward(amount)
        return 0
