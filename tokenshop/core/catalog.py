"""Catalog of redeemable items.

Items are soft-deleted: retiring an item flips its status but keeps the
record, so an identifier is never handed out twice. Retired items behave as
if they never existed for every external lookup (get, update, retire,
redeem, listing).

Item lifecycle:
    unassigned -> ACTIVE (add_item) -> ACTIVE (update_item) -> RETIRED (retire_item)

RETIRED is terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from .errors import NotFound, Overflow, Unauthorized, reject
from .ledger import Ledger, require_amount
from .logger import EventLogger, item_redeemed_entry


logger = logging.getLogger(__name__)


class ItemStatus(str, Enum):
    ACTIVE = "active"
    RETIRED = "retired"


@dataclass
class Item:
    """A catalog entry."""

    item_id: int
    name: str
    cost: int
    status: ItemStatus = ItemStatus.ACTIVE

    @property
    def available(self) -> bool:
        return self.status is ItemStatus.ACTIVE

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "cost": self.cost,
            "available": self.available,
        }


class Catalog:
    """Owns item records and the item id counter.

    Redemption is the one place the catalog reaches into the ledger: it
    calls Ledger.burn directly and lets its errors propagate unchanged.

    Dependencies:
        ledger: For burning the redeemer's tokens
        is_administrator: Callable deciding who may manage items
        events: EventLogger for item records
    """

    _items: dict[int, Item]
    _next_item_id: int

    def __init__(
        self,
        ledger: Ledger,
        is_administrator: Callable[[str], bool],
        events: EventLogger | None = None,
    ) -> None:
        self._ledger = ledger
        self._is_administrator = is_administrator
        self._events = events if events is not None else EventLogger()
        self._items = {}
        self._next_item_id = 1

    @property
    def next_item_id(self) -> int:
        """Identifier the next add_item call will assign."""
        return self._next_item_id

    def _require_administrator(self, caller: str, operation: str) -> None:
        if not self._is_administrator(caller):
            reject(logger, operation, Unauthorized(caller, operation))

    def _require_cost(self, cost: int, operation: str) -> int:
        require_amount(cost, operation)
        if cost > self._ledger.max_amount:
            reject(logger, operation, Overflow(cost, self._ledger.max_amount))
        return cost

    def _active(self, item_id: int, operation: str) -> Item:
        """Get the live record for an active item. Retired counts as missing."""
        item = self._items.get(item_id)
        if item is None or not item.available:
            reject(logger, operation, NotFound(item_id))
        return item

    # ===== ADMINISTRATION =====
    # Event records are written before the catalog changes.

    def add_item(self, caller: str, name: str, cost: int) -> int:
        """Add an item and return its new identifier.

        Names are not unique; two items may share one.
        """
        self._require_administrator(caller, "add_item")
        self._require_cost(cost, "add_item")

        item_id = self._next_item_id
        self._events.log_item_added(item_id, name, cost)
        self._items[item_id] = Item(item_id=item_id, name=name, cost=cost)
        self._next_item_id += 1
        logger.info("Added item %d %r cost %d", item_id, name, cost)
        return item_id

    def update_item(self, caller: str, item_id: int, name: str, cost: int) -> None:
        """Replace name and cost of an active item."""
        self._require_administrator(caller, "update_item")
        item = self._active(item_id, "update_item")
        self._require_cost(cost, "update_item")

        self._events.log_item_updated(item_id, name, cost)
        item.name = name
        item.cost = cost
        logger.info("Updated item %d %r cost %d", item_id, name, cost)

    def retire_item(self, caller: str, item_id: int) -> None:
        """Retire an active item. Its identifier is never reused."""
        self._require_administrator(caller, "retire_item")
        item = self._active(item_id, "retire_item")

        self._events.log_item_removed(item_id)
        item.status = ItemStatus.RETIRED
        logger.info("Retired item %d", item_id)

    # ===== QUERIES =====

    def get_item(self, item_id: int) -> Item:
        """Get a copy of an active item."""
        return replace(self._active(item_id, "get_item"))

    def list_available_items(self) -> list[Item]:
        """Snapshot of active items ordered by ascending identifier."""
        return [
            replace(item)
            for item_id, item in sorted(self._items.items())
            if item.available
        ]

    def list_items(self, include_retired: bool = False) -> list[Item]:
        """Snapshot of item records, optionally including retired ones."""
        if not include_retired:
            return self.list_available_items()
        return [replace(item) for _, item in sorted(self._items.items())]

    # ===== REDEMPTION =====

    def redeem(self, caller: str, item_id: int) -> Item:
        """Spend the item's cost from the caller's balance.

        The tokens are burned through the ledger, which writes the burn and
        redemption records together. If the burn fails nothing changes and
        the ledger's error propagates.

        Returns:
            Copy of the redeemed item
        """
        item = self._active(item_id, "redeem")
        self._ledger.burn(
            caller,
            item.cost,
            extra_events=[item_redeemed_entry(caller, item_id, item.cost)],
        )
        logger.info("%s redeemed item %d for %d", caller, item_id, item.cost)
        return replace(item)
