"""
Unit tests for the data models and error messages.

Tests follow the Given/When/Then pattern for clarity.
"""

from datetime import datetime, timezone

import pytest

from scripts.lib.errors import (
    AddressValidationError,
    HeliusAPIError,
    HeliusNetworkError,
    InvalidAddressError,
    InvalidApiKeyError,
    ValidationReason,
    WalletNotFoundError,
    user_message_for,
)
from scripts.lib.models import (
    TOKEN_CSV_COLUMNS,
    TRANSACTION_CSV_COLUMNS,
    ScanResult,
    TokenRecord,
    TransactionSummary,
)


def make_token(mint="MintA", is_nft=False):
    return TokenRecord(
        mint=mint,
        amount="1500000",
        decimals=6,
        name="USD Coin",
        symbol="USDC",
        balance="1.500000",
        is_nft=is_nft,
    )


class TestTokenRecord:
    """Tests for the TokenRecord model."""

    def test_to_csv_row_includes_all_columns(self):
        """
        Given a fungible TokenRecord
        When converting to CSV row
        Then all columns should be present in order
        """
        # When
        row = make_token().to_csv_row()

        # Then
        assert len(row) == len(TOKEN_CSV_COLUMNS)
        assert row == ["fungible", "USD Coin", "USDC", "MintA", "1.500000", "1500000", "6"]

    def test_to_csv_row_marks_nfts_and_handles_missing_amount(self):
        # Given
        token = make_token(is_nft=True)
        token.amount = None

        # When
        row = token.to_csv_row()

        # Then
        assert row[0] == "nft"
        assert row[5] == ""


class TestTransactionSummary:
    def test_to_csv_row_uses_iso_timestamp(self):
        """
        Given a TransactionSummary
        When converting to CSV row
        Then the timestamp should be ISO formatted
        """
        tx = TransactionSummary(
            signature="sig",
            tx_type="SOL Transfer",
            amount="1.000000000",
            token="SOL",
            timestamp=datetime(2024, 12, 14, 15, 30, tzinfo=timezone.utc),
            status="Success",
            fee="0.000005000",
        )

        row = tx.to_csv_row()

        assert len(row) == len(TRANSACTION_CSV_COLUMNS)
        assert row[4] == "2024-12-14T15:30:00+00:00"


class TestScanResult:
    """Tests for the ScanResult model."""

    def test_total_tokens_counts_both_buckets(self):
        """
        Given a result with two fungible tokens and one NFT
        When reading total_tokens
        Then it should be 3
        """
        result = ScanResult(
            address="addr",
            fungible=[make_token("A"), make_token("B")],
            non_fungible=[make_token("C", is_nft=True)],
        )

        assert result.total_tokens == 3
        assert result.succeeded

    def test_defaults_are_empty_and_independent(self):
        first = ScanResult(address="a")
        second = ScanResult(address="b")

        first.fungible.append(make_token())

        assert second.fungible == []
        assert first.transactions == []


class TestUserMessages:
    """Tests for the user-facing error mapping."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (WalletNotFoundError("x", 404), "Wallet address not found or has no tokens"),
            (InvalidAddressError("x", 400), "Invalid wallet address format"),
            (InvalidApiKeyError("x", 401), "Invalid API key. Please check your configuration."),
            (HeliusAPIError("x", 503), "Unable to connect to Solana network. Please try again."),
            (HeliusNetworkError("x"), "Network error. Please check your connection."),
            (
                AddressValidationError(ValidationReason.BAD_LENGTH),
                "Wallet address must be between 32 and 44 characters long",
            ),
            (ValueError("raw technical detail"), "An unexpected error occurred. Please try again."),
        ],
    )
    def test_every_error_maps_to_a_fixed_message(self, error, expected):
        """
        Given any exception
        When mapping it to a user message
        Then the fixed sentence for its kind should be returned
        """
        assert user_message_for(error) == expected
