"""
Data models for Solana wallet scans.

Raw* records mirror the loosely-structured Helius responses with every
optional field made explicit. TokenRecord, TransactionSummary and ScanResult
are the normalized display models handed to the formatters.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

from .errors import ScanError


# CSV column order for token output
TOKEN_CSV_COLUMNS = [
    "bucket",
    "name",
    "symbol",
    "mint",
    "balance",
    "raw_amount",
    "decimals",
]

# CSV column order for transaction output
TRANSACTION_CSV_COLUMNS = [
    "signature",
    "type",
    "amount",
    "token",
    "timestamp",
    "status",
    "fee",
]


@dataclass
class RawBalanceEntry:
    """One token balance from the balances endpoint."""

    mint: str
    amount: Optional[str]  # String-encoded integer in the smallest unit
    decimals: int = 0
    name: Optional[str] = None
    symbol: Optional[str] = None


@dataclass
class TokenMetadata:
    """Descriptive metadata for a mint; either source may be missing."""

    on_chain_name: Optional[str] = None
    on_chain_symbol: Optional[str] = None
    off_chain_name: Optional[str] = None
    off_chain_symbol: Optional[str] = None


@dataclass
class RawTokenTransfer:
    mint: Optional[str] = None
    amount: Optional[str] = None
    decimals: int = 0


@dataclass
class RawNativeTransfer:
    amount: Optional[int] = None  # Lamports


@dataclass
class RawTransaction:
    """A transaction record as returned by the transactions endpoint."""

    signature: Optional[str] = None
    nested_signatures: List[str] = field(default_factory=list)
    timestamp: Optional[int] = None  # Seconds since epoch
    token_transfers: List[RawTokenTransfer] = field(default_factory=list)
    native_transfers: List[RawNativeTransfer] = field(default_factory=list)
    nft_transfer_count: int = 0
    error: Any = None  # meta.err; truthy means the transaction failed
    fee: Optional[int] = None  # meta.fee in lamports


@dataclass
class TokenRecord:
    """A classified token holding ready for display."""

    mint: str
    amount: Optional[str]
    decimals: int
    name: str
    symbol: str
    balance: str  # Formatted for display
    is_nft: bool = False

    def to_csv_row(self) -> List[str]:
        """Convert token to a CSV row (list of strings)."""
        return [
            "nft" if self.is_nft else "fungible",
            self.name,
            self.symbol,
            self.mint,
            self.balance,
            self.amount or "",
            str(self.decimals),
        ]


@dataclass
class TransactionSummary:
    """Uniform view of a transaction regardless of its transfer type."""

    signature: str  # "Unknown" when the record carried none
    tx_type: str  # Transfer, Token Transfer, SOL Transfer, NFT Transfer
    amount: str
    token: str
    timestamp: datetime
    status: str  # Success or Failed
    fee: str  # SOL, 9 fractional digits, or "0"

    def to_csv_row(self) -> List[str]:
        """Convert transaction to a CSV row (list of strings)."""
        return [
            self.signature,
            self.tx_type,
            self.amount,
            self.token,
            self.timestamp.isoformat(),
            self.status,
            self.fee,
        ]


@dataclass
class ScanResult:
    """
    Result of scanning a single wallet.

    On success the token buckets and transactions are populated; on failure
    they are empty and error holds the exception that ended the scan.
    """

    address: str
    fungible: List[TokenRecord] = field(default_factory=list)
    non_fungible: List[TokenRecord] = field(default_factory=list)
    transactions: List[TransactionSummary] = field(default_factory=list)
    error: Optional[ScanError] = None

    @property
    def total_tokens(self) -> int:
        return len(self.fungible) + len(self.non_fungible)

    @property
    def succeeded(self) -> bool:
        return self.error is None
