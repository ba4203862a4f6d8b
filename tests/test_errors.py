"""Tests for error kinds and standardized error responses."""

import pytest

from tokenshop.core.errors import (
    ErrorCategory,
    ErrorCode,
    ErrorResponse,
    InsufficientBalance,
    InvalidAmount,
    NotFound,
    Overflow,
    TokenShopError,
    Unauthorized,
)


class TestErrorResponse:
    """Tests for the ErrorResponse dataclass."""

    def test_to_dict_without_details(self) -> None:
        response = ErrorResponse(error="nope", code="not_found", category="resource")
        assert response.to_dict() == {
            "success": False,
            "error": "nope",
            "code": "not_found",
            "category": "resource",
            "retriable": False,
        }

    def test_to_dict_with_details(self) -> None:
        response = ErrorResponse(error="x", details={"item_id": 3})
        assert response.to_dict()["details"] == {"item_id": 3}


class TestErrorKinds:
    """Each error kind maps to one code and category."""

    @pytest.mark.parametrize(
        "error, code, category",
        [
            (Unauthorized("bob", "mint"), ErrorCode.NOT_AUTHORIZED, ErrorCategory.PERMISSION),
            (NotFound(7), ErrorCode.NOT_FOUND, ErrorCategory.RESOURCE),
            (InsufficientBalance("bob", 1, 5), ErrorCode.INSUFFICIENT_BALANCE, ErrorCategory.RESOURCE),
            (InvalidAmount("zero", 0), ErrorCode.INVALID_AMOUNT, ErrorCategory.VALIDATION),
            (Overflow(5, 12, current=10), ErrorCode.OVERFLOW, ErrorCategory.VALIDATION),
        ],
    )
    def test_code_and_category(
        self, error: TokenShopError, code: ErrorCode, category: ErrorCategory
    ) -> None:
        response = error.to_response()

        assert isinstance(error, TokenShopError)
        assert response["success"] is False
        assert response["code"] == code.value
        assert response["category"] == category.value
        assert response["retriable"] is False

    def test_details_carry_context(self) -> None:
        response = InsufficientBalance("alice", 3, 10).to_response()
        assert response["details"] == {"account": "alice", "balance": 3, "required": 10}

    def test_non_integer_amount_detail_is_repr(self) -> None:
        response = InvalidAmount("bad", 1.5).to_response()
        assert response["details"] == {"amount": "1.5"}

    def test_message_is_str(self) -> None:
        assert str(NotFound(4)) == "Item 4 does not exist"

    def test_overflow_message_with_current(self) -> None:
        error = Overflow(5, 12, current=10)
        assert error.message == "10 + 5 exceeds the maximum of 12"
        assert error.details == {"current": 10, "amount": 5, "limit": 12}

    def test_overflow_message_standalone(self) -> None:
        error = Overflow(101, 100)
        assert error.message == "101 exceeds the maximum of 100"
        assert error.details == {"amount": 101, "limit": 100}
