"""Pytest fixtures for token shop tests.

Common fixtures for testing the ledger and catalog.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tokenshop import config as config_module
from tokenshop.core import EventLogger, Ledger, TokenShop

ADMIN = "admin"


@pytest.fixture(autouse=True)
def _reset_config() -> Iterator[None]:
    """Every test starts and ends with no cached config."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def admin() -> str:
    return ADMIN


@pytest.fixture
def events() -> EventLogger:
    """In-memory event logger."""
    return EventLogger()


@pytest.fixture
def shop(events: EventLogger) -> TokenShop:
    """Fresh shop with no balances and no items."""
    return TokenShop(ADMIN, events=events)


@pytest.fixture
def funded_shop(shop: TokenShop) -> TokenShop:
    """Shop where alice holds 100 and bob holds 50."""
    shop.mint(ADMIN, "alice", 100)
    shop.mint(ADMIN, "bob", 50)
    return shop


@pytest.fixture
def ledger(events: EventLogger) -> Ledger:
    """Bare ledger whose administrator is ADMIN."""
    return Ledger(lambda account: account == ADMIN, events)
