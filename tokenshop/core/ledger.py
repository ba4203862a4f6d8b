"""Ledger for whole-unit token balances and total supply.

The ledger is the only writer of balances. All mutations check their
preconditions first and then apply the full update, so a failed call leaves
balances and supply exactly as they were.

Balances are plain ints. An account that was never credited has balance 0;
absence is not an error.

Invariant: sum(balances) == total_supply, and no balance is negative.
"""

from __future__ import annotations

import logging
from typing import Callable

from .errors import InsufficientBalance, InvalidAmount, Overflow, Unauthorized, reject
from .logger import EventEntry, EventLogger, burned_entry


logger = logging.getLogger(__name__)

# uint256 upper bound
DEFAULT_MAX_AMOUNT: int = 2**256 - 1


def require_amount(amount: object, operation: str) -> int:
    """Validate a whole-unit amount and return it.

    bool is rejected even though it subclasses int.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        reject(logger, operation, InvalidAmount(f"Amount must be a whole number, got {amount!r}", amount))
    if amount < 0:
        reject(logger, operation, InvalidAmount(f"Amount must not be negative, got {amount}", amount))
    return amount


class Ledger:
    """
    Tracks token balances per account and the total supply.

    - mint: administrator only, creates supply
    - transfer: moves balance between accounts, supply unchanged
    - burn: destroys the caller's tokens, supply decreases

    The administrator check is injected as a callable so the administrator
    stays a single field of the owning shop state.
    """

    balances: dict[str, int]
    max_amount: int
    _total_supply: int
    _is_administrator: Callable[[str], bool]
    _events: EventLogger

    def __init__(
        self,
        is_administrator: Callable[[str], bool],
        events: EventLogger | None = None,
        *,
        max_amount: int = DEFAULT_MAX_AMOUNT,
    ) -> None:
        """Initialize an empty ledger.

        Args:
            is_administrator: Returns True if the caller may mint
            events: EventLogger receiving one record per successful mutation
            max_amount: Largest representable balance or supply
        """
        self.balances = {}
        self.max_amount = max_amount
        self._total_supply = 0
        self._is_administrator = is_administrator
        self._events = events if events is not None else EventLogger()

    # ===== QUERIES =====

    def balance_of(self, account: str) -> int:
        """Get balance. Unknown accounts have balance 0."""
        return self.balances.get(account, 0)

    def total_supply(self) -> int:
        return self._total_supply

    def get_all_balances(self) -> dict[str, int]:
        """Get snapshot of all balances."""
        return dict(self.balances)

    def can_afford(self, account: str, amount: int) -> bool:
        """Check if account holds at least amount."""
        return self.balance_of(account) >= amount

    # ===== MUTATIONS =====
    # Each mutation validates, writes its event record, then commits.
    # A failed record write leaves balances and supply untouched.

    def mint(self, caller: str, target: str, amount: int) -> None:
        """Create amount new tokens in target's balance.

        Raises:
            Unauthorized: caller is not the administrator
            InvalidAmount: amount is zero, negative or not an int
            Overflow: supply would exceed max_amount
        """
        if not self._is_administrator(caller):
            reject(logger, "mint", Unauthorized(caller, "mint"))
        require_amount(amount, "mint")
        if amount == 0:
            reject(logger, "mint", InvalidAmount("Mint amount must be positive, got 0", amount))
        # Balances never exceed supply, so checking supply covers the target too
        if self._total_supply + amount > self.max_amount:
            reject(logger, "mint", Overflow(amount, self.max_amount, current=self._total_supply))

        supply = self._total_supply + amount
        self._events.log_minted(target, amount, supply)
        self.balances[target] = self.balance_of(target) + amount
        self._total_supply = supply
        logger.info("Minted %d to %s (supply %d)", amount, target, supply)

    def transfer(self, caller: str, receiver: str, amount: int) -> None:
        """Move amount from caller to receiver.

        Auto-creates the receiver with 0 balance if not seen before.
        Self-transfer still checks the balance and leaves it unchanged.

        Raises:
            InvalidAmount: amount is negative or not an int
            InsufficientBalance: caller holds less than amount
        """
        require_amount(amount, "transfer")
        balance = self.balance_of(caller)
        if balance < amount:
            reject(logger, "transfer", InsufficientBalance(caller, balance, amount))

        self._events.log_transferred(caller, receiver, amount)
        self.balances[caller] = balance - amount
        self.balances[receiver] = self.balance_of(receiver) + amount
        logger.info("Transferred %d from %s to %s", amount, caller, receiver)

    def burn(
        self,
        caller: str,
        amount: int,
        *,
        extra_events: list[EventEntry] | None = None,
    ) -> None:
        """Destroy amount of the caller's tokens.

        Args:
            extra_events: Records written together with the burn record,
                only if the burn succeeds (used by redemption)

        Raises:
            InvalidAmount: amount is negative or not an int
            InsufficientBalance: caller holds less than amount
        """
        require_amount(amount, "burn")
        balance = self.balance_of(caller)
        if balance < amount:
            reject(logger, "burn", InsufficientBalance(caller, balance, amount))

        supply = self._total_supply - amount
        self._events.emit([burned_entry(caller, amount, supply), *(extra_events or [])])
        self.balances[caller] = balance - amount
        self._total_supply = supply
        logger.info("Burned %d from %s (supply %d)", amount, caller, supply)

    # ===== INTEGRITY =====

    def check_invariants(self) -> bool:
        """True iff balances sum to total supply and none is negative."""
        if any(b < 0 for b in self.balances.values()):
            return False
        return sum(self.balances.values()) == self._total_supply
