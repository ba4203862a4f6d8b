"""JSONL event logger - the record of every successful mutation.

The surrounding environment consumes these records (e.g. to forward them as
chain events). Failed operations never produce a record.

Callers write the record before committing their state change: if the
write raises, the operation fails and nothing has changed.
"""

from __future__ import annotations

import json
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


EVENT_MINTED = "minted"
EVENT_TRANSFERRED = "transferred"
EVENT_BURNED = "burned"
EVENT_ITEM_ADDED = "item_added"
EVENT_ITEM_UPDATED = "item_updated"
EVENT_ITEM_REMOVED = "item_removed"
EVENT_ITEM_REDEEMED = "item_redeemed"

# (event_type, data) pair not yet written
EventEntry = tuple[str, dict[str, Any]]

DEFAULT_RECENT: int = 50
DEFAULT_MEMORY_WINDOW: int = 10_000


def burned_entry(account: str, amount: int, total_supply: int) -> EventEntry:
    return EVENT_BURNED, {"account": account, "amount": amount, "total_supply": total_supply}


def item_redeemed_entry(account: str, item_id: int, cost: int) -> EventEntry:
    return EVENT_ITEM_REDEEMED, {"account": account, "item_id": item_id, "cost": cost}


class EventLogger:
    """Append-only event log.

    With output_file set, the JSONL file is the full record and queries read
    it back. Without one, only the last memory_window records are kept.

    Every record includes a monotonic 'sequence' field for ordering.
    """

    output_path: Path | None
    default_recent: int
    _recent: deque[dict[str, Any]]
    _sequence: int

    def __init__(
        self,
        output_file: str | Path | None = None,
        *,
        default_recent: int = DEFAULT_RECENT,
        memory_window: int = DEFAULT_MEMORY_WINDOW,
    ) -> None:
        """Initialize the event logger.

        Args:
            output_file: Optional JSONL file. Cleared on init (new run).
            default_recent: Number of events read_recent returns by default
            memory_window: Records kept in memory when there is no file
        """
        self.default_recent = default_recent
        self._recent = deque(maxlen=memory_window)
        self._sequence = 0
        self.output_path = Path(output_file) if output_file else None
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_text("")

    def emit(self, entries: list[EventEntry]) -> list[dict[str, Any]]:
        """Write several records at once and return them.

        Either all of them are recorded or, if the file write raises, none
        are and the sequence does not advance.
        """
        now = datetime.now(timezone.utc).isoformat()
        events: list[dict[str, Any]] = [
            {
                "timestamp": now,
                "sequence": self._sequence + offset,
                "event_type": event_type,
                **data,
            }
            for offset, (event_type, data) in enumerate(entries, start=1)
        ]
        if self.output_path is not None:
            with open(self.output_path, "a") as f:
                f.write("".join(json.dumps(e) + "\n" for e in events))
        else:
            self._recent.extend(events)
        self._sequence += len(events)
        return events

    def log(self, event_type: str, data: dict[str, Any]) -> dict[str, Any]:
        """Append one event record and return it."""
        return self.emit([(event_type, data)])[0]

    # ========== Ledger events ==========

    def log_minted(self, account: str, amount: int, total_supply: int) -> None:
        """Log new supply credited to an account."""
        self.log(EVENT_MINTED, {
            "account": account,
            "amount": amount,
            "total_supply": total_supply,
        })

    def log_transferred(self, sender: str, receiver: str, amount: int) -> None:
        """Log a balance move between two accounts."""
        self.log(EVENT_TRANSFERRED, {
            "sender": sender,
            "receiver": receiver,
            "amount": amount,
        })

    def log_burned(self, account: str, amount: int, total_supply: int) -> None:
        """Log tokens destroyed from an account."""
        self.emit([burned_entry(account, amount, total_supply)])

    # ========== Catalog events ==========

    def log_item_added(self, item_id: int, name: str, cost: int) -> None:
        self.log(EVENT_ITEM_ADDED, {"item_id": item_id, "name": name, "cost": cost})

    def log_item_updated(self, item_id: int, name: str, cost: int) -> None:
        self.log(EVENT_ITEM_UPDATED, {"item_id": item_id, "name": name, "cost": cost})

    def log_item_removed(self, item_id: int) -> None:
        self.log(EVENT_ITEM_REMOVED, {"item_id": item_id})

    def log_item_redeemed(self, account: str, item_id: int, cost: int) -> None:
        self.emit([item_redeemed_entry(account, item_id, cost)])

    # ========== Queries ==========

    def _stored(self) -> list[dict[str, Any]]:
        if self.output_path is None:
            return [dict(e) for e in self._recent]
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_text().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events. N defaults to default_recent."""
        if n is None:
            n = self.default_recent
        if n <= 0:
            return []
        return self._stored()[-n:]

    def events_of_type(self, event_type: str) -> list[dict[str, Any]]:
        """Return stored events of one kind, oldest first."""
        return [e for e in self._stored() if e["event_type"] == event_type]

    def all_events(self) -> list[dict[str, Any]]:
        return self._stored()

    def __len__(self) -> int:
        """Number of records written since creation."""
        return self._sequence

    @property
    def sequence(self) -> int:
        """Sequence number of the most recent event (0 if none)."""
        return self._sequence
