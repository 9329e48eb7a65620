"""
Unit tests for token classification and balance formatting.

Tests follow the Given/When/Then pattern for clarity.
"""

import pytest

from scripts.lib.models import RawBalanceEntry, TokenMetadata
from scripts.lib.token_classifier import (
    classify,
    classify_all,
    format_balance,
    is_non_fungible,
    resolve_name,
    resolve_symbol,
)


class TestFormatBalance:
    """Tests for the format_balance helper function."""

    @pytest.mark.parametrize("amount", [None, "", "0"])
    def test_missing_or_zero_amount_is_zero(self, amount):
        """
        Given a missing or zero amount
        When formatting
        Then "0" should be returned regardless of decimals
        """
        assert format_balance(amount, 6) == "0"

    def test_pads_to_token_decimals(self):
        """
        Given a token with 6 decimals
        When formatting
        Then exactly 6 fractional digits should be shown
        """
        assert format_balance("1500000", 6) == "1.500000"

    def test_zero_decimals_uses_grouping(self):
        """
        Given a zero-decimal token
        When formatting
        Then the integer should be thousands-grouped
        """
        assert format_balance("42", 0) == "42"
        assert format_balance("1234567", 0) == "1,234,567"

    def test_caps_fractional_digits_at_six(self):
        """
        Given a token with 9 decimals
        When formatting
        Then the value should be rounded to 6 fractional digits
        """
        assert format_balance("123456789", 9) == "0.123457"

    def test_small_decimals(self):
        assert format_balance("5", 2) == "0.05"

    def test_keeps_precision_of_huge_amounts(self):
        """
        Given an amount far beyond float precision
        When formatting with zero decimals
        Then every digit should be kept
        """
        assert format_balance("123456789012345678901234567890", 0) == (
            "123,456,789,012,345,678,901,234,567,890"
        )

    def test_amount_longer_than_default_precision(self):
        """
        Given a 250-digit amount with 9 decimals
        When formatting
        Then it should round half-up without raising
        """
        assert format_balance("9" * 250, 9) == "1" + "0" * 241 + ".000000"

    def test_negative_decimals_treated_as_zero(self):
        assert format_balance("1234", -3) == "1,234"

    def test_unparseable_amount_is_zero(self):
        assert format_balance("abc", 2) == "0"


class TestNameAndSymbolResolution:
    """Tests for resolve_name and resolve_symbol."""

    def test_on_chain_metadata_wins(self):
        """
        Given on-chain, off-chain and raw names
        When resolving the name
        Then the on-chain name should be used
        """
        # Given
        entry = RawBalanceEntry(mint="M", amount="5", name="Baz", symbol="BZ")
        metadata = TokenMetadata(
            on_chain_name="Foo",
            on_chain_symbol="FOO",
            off_chain_name="Bar",
            off_chain_symbol="BAR",
        )

        # When / Then
        assert resolve_name(entry, metadata) == "Foo"
        assert resolve_symbol(entry, metadata) == "FOO"

    def test_blank_on_chain_falls_through_to_off_chain(self):
        """
        Given a blank on-chain name and a padded off-chain name
        When resolving the name
        Then the trimmed off-chain name should be used
        """
        entry = RawBalanceEntry(mint="M", amount="5", name="Baz")
        metadata = TokenMetadata(on_chain_name="   ", off_chain_name="  Bar  ")

        assert resolve_name(entry, metadata) == "Bar"

    def test_raw_entry_used_without_metadata(self):
        """
        Given only a raw name
        When resolving the name
        Then the raw name should be used
        """
        entry = RawBalanceEntry(mint="M", amount="5", name=" Baz ", symbol="BZ")

        assert resolve_name(entry, None) == "Baz"
        assert resolve_symbol(entry, None) == "BZ"

    def test_fallbacks_when_nothing_is_known(self):
        """
        Given no metadata and no raw name or symbol
        When resolving
        Then the literal fallbacks should be used
        """
        entry = RawBalanceEntry(mint="M", amount="5")

        assert resolve_name(entry, TokenMetadata()) == "Unknown Token"
        assert resolve_symbol(entry, None) == "UNKNOWN"


class TestClassification:
    """Tests for the NFT heuristic and classify."""

    @pytest.mark.parametrize(
        "amount,decimals,expected",
        [
            ("1", 0, True),
            ("1", 2, False),
            ("5", 0, False),
            ("0", 0, False),
            (None, 0, False),
        ],
    )
    def test_is_non_fungible(self, amount, decimals, expected):
        """
        Given a balance entry
        When checking the NFT heuristic
        Then only amount "1" with 0 decimals should be an NFT
        """
        entry = RawBalanceEntry(mint="M", amount=amount, decimals=decimals)

        assert is_non_fungible(entry) is expected

    def test_classify_builds_token_record(self):
        """
        Given a balance entry and metadata
        When classifying
        Then the record should carry resolved fields and a formatted balance
        """
        # Given
        entry = RawBalanceEntry(mint="MintA", amount="2500000", decimals=6)
        metadata = TokenMetadata(off_chain_name="USD Coin", off_chain_symbol="USDC")

        # When
        record = classify(entry, metadata)

        # Then
        assert record.mint == "MintA"
        assert record.name == "USD Coin"
        assert record.symbol == "USDC"
        assert record.balance == "2.500000"
        assert record.is_nft is False

    def test_classify_all_splits_buckets_in_input_order(self):
        """
        Given fungible and NFT entries interleaved
        When classifying all of them
        Then each bucket should keep input order and metadata should be matched by mint
        """
        # Given
        entries = [
            RawBalanceEntry(mint="F1", amount="10", decimals=1),
            RawBalanceEntry(mint="N1", amount="1", decimals=0),
            RawBalanceEntry(mint="F2", amount="0", decimals=0),
            RawBalanceEntry(mint="N2", amount="1", decimals=0),
        ]
        metadata_by_mint = {"N1": TokenMetadata(on_chain_name="Ape #1"), "F1": None}

        # When
        fungible, non_fungible = classify_all(entries, metadata_by_mint)

        # Then
        assert [t.mint for t in fungible] == ["F1", "F2"]
        assert [t.mint for t in non_fungible] == ["N1", "N2"]
        assert non_fungible[0].name == "Ape #1"
        assert non_fungible[1].name == "Unknown Token"
        assert fungible[0].balance == "1.0"
