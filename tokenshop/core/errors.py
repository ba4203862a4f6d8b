"""Error kinds raised by the ledger and the item catalog.

Every failed operation raises a subclass of TokenShopError before any state
is touched. Each error carries a machine-readable code and category so a
surrounding service can forward it without switching on exception types.

Usage:
    from tokenshop.core.errors import InsufficientBalance, TokenShopError

    try:
        shop.transfer("alice", "bob", 30)
    except TokenShopError as e:
        return e.to_response()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import NoReturn


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided a bad amount or cost
    - PERMISSION: Caller is not the administrator
    - RESOURCE: Item missing or balance too low
    """

    VALIDATION = "validation"  # Invalid amount, would overflow
    PERMISSION = "permission"  # Not authorized
    RESOURCE = "resource"  # Not found, insufficient balance


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    INVALID_AMOUNT = "invalid_amount"
    OVERFLOW = "overflow"

    # Permission errors
    NOT_AUTHORIZED = "not_authorized"

    # Resource errors
    NOT_FOUND = "not_found"
    INSUFFICIENT_BALANCE = "insufficient_balance"


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Machine-readable error code
    - category: Error category (validation, permission, resource)
    - retriable: Whether the operation should be retried
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class TokenShopError(Exception):
    """Base class for all ledger and catalog failures.

    Core errors are never retriable: retrying is a decision for the caller,
    and state is unchanged after any failure.
    """

    code: ErrorCode = ErrorCode.INVALID_AMOUNT
    category: ErrorCategory = ErrorCategory.VALIDATION
    retriable: bool = False

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details: dict[str, object] = dict(details)
        super().__init__(message)

    def to_response(self) -> dict[str, object]:
        """Build the error response dict for this failure."""
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=self.retriable,
            details=self.details or None,
        ).to_dict()


class Unauthorized(TokenShopError):
    """Raised when a non-administrator calls an administrator-only operation."""

    code = ErrorCode.NOT_AUTHORIZED
    category = ErrorCategory.PERMISSION

    def __init__(self, caller: str, operation: str) -> None:
        self.caller = caller
        self.operation = operation
        super().__init__(
            f"'{caller}' is not the administrator and cannot {operation}",
            caller=caller,
            operation=operation,
        )


class NotFound(TokenShopError):
    """Raised when an item id was never assigned or has been retired."""

    code = ErrorCode.NOT_FOUND
    category = ErrorCategory.RESOURCE

    def __init__(self, item_id: object) -> None:
        self.item_id = item_id
        super().__init__(f"Item {item_id!r} does not exist", item_id=item_id)


class InsufficientBalance(TokenShopError):
    """Raised when a transfer, burn or redeem exceeds the caller's balance."""

    code = ErrorCode.INSUFFICIENT_BALANCE
    category = ErrorCategory.RESOURCE

    def __init__(self, account: str, balance: int, required: int) -> None:
        self.account = account
        self.balance = balance
        self.required = required
        super().__init__(
            f"'{account}' has {balance}, needs {required}",
            account=account,
            balance=balance,
            required=required,
        )


class InvalidAmount(TokenShopError):
    """Raised for zero mints and for negative or non-integer amounts."""

    code = ErrorCode.INVALID_AMOUNT
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, amount: object) -> None:
        self.amount = amount
        shown = amount if isinstance(amount, int) else repr(amount)
        super().__init__(message, amount=shown)


class Overflow(TokenShopError):
    """Raised when a supply, balance or cost would exceed the representable range.

    current is the value amount would be added to; None when amount is
    checked against the limit on its own (e.g. an item cost).
    """

    code = ErrorCode.OVERFLOW
    category = ErrorCategory.VALIDATION

    def __init__(self, amount: int, limit: int, current: int | None = None) -> None:
        self.amount = amount
        self.limit = limit
        self.current = current
        if current is None:
            message = f"{amount} exceeds the maximum of {limit}"
            super().__init__(message, amount=amount, limit=limit)
        else:
            message = f"{current} + {amount} exceeds the maximum of {limit}"
            super().__init__(message, current=current, amount=amount, limit=limit)


def reject(log: logging.Logger, operation: str, error: TokenShopError) -> NoReturn:
    """Log a rejected operation with its error code, then raise the error."""
    log.warning("Rejected %s [%s]: %s", operation, error.code.value, error.message)
    raise error
