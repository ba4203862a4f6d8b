# Ledger + catalog core package
from .shop import TokenShop
from .ledger import Ledger, DEFAULT_MAX_AMOUNT
from .catalog import Catalog, Item, ItemStatus
from .logger import EventLogger
from .errors import (
    TokenShopError, Unauthorized, NotFound, InsufficientBalance, InvalidAmount, Overflow,
    ErrorCode, ErrorCategory, ErrorResponse,
)

__all__ = [
    "TokenShop",
    "Ledger", "DEFAULT_MAX_AMOUNT",
    "Catalog", "Item", "ItemStatus",
    "EventLogger",
    "TokenShopError", "Unauthorized", "NotFound", "InsufficientBalance",
    "InvalidAmount", "Overflow",
    "ErrorCode", "ErrorCategory", "ErrorResponse",
]
