"""TokenShop - the shared state behind every external operation.

Holds the administrator, the Ledger, the Catalog and the EventLogger, and
serializes all operations behind one lock so balance, supply and catalog
invariants are never observed mid-update.

Usage:
    shop = TokenShop(administrator="admin")
    shop.mint("admin", "alice", 100)
    item_id = shop.add_item("admin", "Sword", 10)
    shop.redeem("alice", item_id)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from .catalog import Catalog, Item
from .ledger import DEFAULT_MAX_AMOUNT, Ledger
from .logger import EventLogger

if TYPE_CHECKING:
    from ..config_schema import AppConfig


logger = logging.getLogger(__name__)


class TokenShop:
    """Fungible token ledger plus a catalog of redeemable items.

    Callers pass an already-authenticated account id to every operation.
    Administrator reassignment is not offered here; the administrator is
    fixed for the lifetime of the instance.
    """

    _lock: threading.Lock

    def __init__(
        self,
        administrator: str,
        *,
        name: str = "Shop Token",
        symbol: str = "SHOP",
        max_amount: int = DEFAULT_MAX_AMOUNT,
        events: EventLogger | None = None,
    ) -> None:
        if not administrator:
            raise ValueError("administrator must be a non-empty account id")
        self._administrator = administrator
        self._name = name
        self._symbol = symbol
        self.events = events if events is not None else EventLogger()
        self.ledger = Ledger(self.is_administrator, self.events, max_amount=max_amount)
        self.catalog = Catalog(self.ledger, self.is_administrator, self.events)
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        events: EventLogger | None = None,
    ) -> "TokenShop":
        """Create a shop from validated config and apply its genesis state.

        Genesis balances are minted and genesis items added by the
        administrator, so they produce ordinary event records.
        """
        if events is None:
            events = EventLogger(
                config.logging.events_file,
                default_recent=config.logging.default_recent,
                memory_window=config.logging.memory_window,
            )
        shop = cls(
            config.administrator,
            name=config.token.name,
            symbol=config.token.symbol,
            max_amount=config.token.max_amount,
            events=events,
        )
        admin = config.administrator
        for account, amount in config.genesis.balances.items():
            shop.mint(admin, account, amount)
        for item in config.genesis.items:
            shop.add_item(admin, item.name, item.cost)
        logger.info(
            "Created %s (%s) with supply %d and %d items",
            shop.name, shop.symbol, shop.total_supply(), len(config.genesis.items),
        )
        return shop

    # ===== METADATA =====

    @property
    def administrator(self) -> str:
        return self._administrator

    def is_administrator(self, account: str) -> bool:
        return account == self._administrator

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        """Whole units only."""
        return 0

    # ===== LEDGER =====

    def mint(self, caller: str, target: str, amount: int) -> None:
        with self._lock:
            self.ledger.mint(caller, target, amount)

    def transfer(self, caller: str, receiver: str, amount: int) -> None:
        with self._lock:
            self.ledger.transfer(caller, receiver, amount)

    def burn(self, caller: str, amount: int) -> None:
        with self._lock:
            self.ledger.burn(caller, amount)

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self.ledger.balance_of(account)

    def total_supply(self) -> int:
        with self._lock:
            return self.ledger.total_supply()

    def get_all_balances(self) -> dict[str, int]:
        with self._lock:
            return self.ledger.get_all_balances()

    # ===== CATALOG =====

    def add_item(self, caller: str, name: str, cost: int) -> int:
        with self._lock:
            return self.catalog.add_item(caller, name, cost)

    def update_item(self, caller: str, item_id: int, name: str, cost: int) -> None:
        with self._lock:
            self.catalog.update_item(caller, item_id, name, cost)

    def retire_item(self, caller: str, item_id: int) -> None:
        with self._lock:
            self.catalog.retire_item(caller, item_id)

    def get_item(self, item_id: int) -> Item:
        with self._lock:
            return self.catalog.get_item(item_id)

    def list_available_items(self) -> list[Item]:
        with self._lock:
            return self.catalog.list_available_items()

    def list_items(self, include_retired: bool = False) -> list[Item]:
        with self._lock:
            return self.catalog.list_items(include_retired)

    def redeem(self, caller: str, item_id: int) -> Item:
        with self._lock:
            return self.catalog.redeem(caller, item_id)

    # ===== INTEGRITY =====

    def check_invariants(self) -> bool:
        """True iff balances sum to total supply and none is negative."""
        with self._lock:
            return self.ledger.check_invariants()
