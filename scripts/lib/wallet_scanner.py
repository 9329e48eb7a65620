"""
Wallet scanner coordinating validation, fetching and normalization.

This module provides the WalletScanner, which validates the address, runs
the balance and transaction lookups concurrently, fans metadata lookups out
per distinct mint, and assembles everything into a ScanResult.
"""

import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .address import validate_address
from .errors import ScanError, ScanInProgressError, UnexpectedScanError
from .helius_client import HeliusClient
from .models import (
    RawBalanceEntry,
    RawTransaction,
    ScanResult,
    TokenMetadata,
    TransactionSummary,
)
from .token_classifier import classify_all
from .transaction_normalizer import normalize_transactions


class ScanState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    FETCHING = "fetching"
    CLASSIFYING = "classifying"
    DONE = "done"
    FAILED = "failed"


BUSY_STATES = (ScanState.VALIDATING, ScanState.FETCHING, ScanState.CLASSIFYING)


def log(message: str) -> None:
    """Log a scanner message to stderr."""
    print(f"[scan] {message}", file=sys.stderr)


class WalletScanner:
    """
    Scanner for a single Solana wallet.

    A scanner runs one scan at a time: a scan requested while another is in
    flight is rejected with ScanInProgressError instead of being queued.
    """

    def __init__(self, client: HeliusClient, include_transactions: bool = True):
        """
        Initialize the scanner.

        Args:
            client: HeliusClient instance for API calls
            include_transactions: Whether to fetch recent transaction history
        """
        self.client = client
        self.include_transactions = include_transactions
        self.state = ScanState.IDLE
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self.state in BUSY_STATES

    def scan(self, address: str) -> ScanResult:
        """
        Scan a wallet for tokens and recent transactions.

        Args:
            address: Wallet address as entered by the user

        Returns:
            ScanResult; on failure its error field holds the ScanError
        """
        address = (address or "").strip()

        if not self._busy.acquire(blocking=False):
            return ScanResult(address=address, error=ScanInProgressError("Scan already running"))

        try:
            return self._run(address)
        finally:
            self._busy.release()

    def _fail(self, address: str, error: ScanError) -> ScanResult:
        self.state = ScanState.FAILED
        log(f"Scan failed: {error}")
        return ScanResult(address=address, error=error)

    def _run(self, address: str) -> ScanResult:
        self.state = ScanState.VALIDATING
        try:
            validate_address(address)
        except ScanError as e:
            return self._fail(address, e)

        self.state = ScanState.FETCHING
        log(f"Scanning wallet {address}...")

        try:
            balances, raw_transactions = self._fetch(address)
            log(f"Found {len(balances)} token balance(s)")

            self.state = ScanState.CLASSIFYING
            metadata_by_mint = self._fetch_metadata(balances)
            fungible, non_fungible = classify_all(balances, metadata_by_mint)
        except ScanError as e:
            return self._fail(address, e)
        except Exception as e:
            failure = UnexpectedScanError(f"{type(e).__name__}: {e}")
            failure.__cause__ = e
            return self._fail(address, failure)

        transactions = self._normalize_or_empty(raw_transactions)

        self.state = ScanState.DONE
        log(
            f"Found {len(fungible)} fungible token(s), {len(non_fungible)} NFT(s), "
            f"{len(transactions)} recent transaction(s)"
        )
        return ScanResult(
            address=address,
            fungible=fungible,
            non_fungible=non_fungible,
            transactions=transactions,
        )

    def _fetch(self, address: str) -> Tuple[List[RawBalanceEntry], List[RawTransaction]]:
        """Run the balance and transaction lookups side by side."""
        if not self.include_transactions:
            return self.client.get_balances(address), []

        # Leaving the executor waits for both lookups, even if balances fail
        with ThreadPoolExecutor(max_workers=2) as executor:
            balances_future = executor.submit(self.client.get_balances, address)
            transactions_future = executor.submit(self._transactions_or_empty, address)

            balances: List[RawBalanceEntry] = balances_future.result()
            raw_transactions: List[RawTransaction] = transactions_future.result()

        return balances, raw_transactions

    def _transactions_or_empty(self, address: str) -> List[RawTransaction]:
        try:
            return self.client.get_transactions(address)
        except Exception as e:
            log(f"Transaction history unavailable: {e}")
            return []

    def _normalize_or_empty(self, raw_transactions: List[RawTransaction]) -> List[TransactionSummary]:
        try:
            return normalize_transactions(raw_transactions, now=datetime.now(timezone.utc))
        except Exception as e:
            log(f"Transaction history unavailable: {type(e).__name__}: {e}")
            return []

    def _metadata_or_none(self, mint: str) -> Optional[TokenMetadata]:
        try:
            return self.client.get_token_metadata(mint)
        except Exception as e:
            log(f"Metadata lookup for {mint} failed: {e}")
            return None

    def _fetch_metadata(
        self, balances: List[RawBalanceEntry]
    ) -> Dict[str, Optional[TokenMetadata]]:
        """Fetch metadata once per distinct mint, one worker per mint."""
        mints = list(dict.fromkeys(entry.mint for entry in balances if entry.mint))
        if not mints:
            return {}

        with ThreadPoolExecutor(max_workers=len(mints)) as executor:
            results = list(executor.map(self._metadata_or_none, mints))

        missing = sum(1 for metadata in results if metadata is None)
        if missing:
            log(f"Metadata unavailable for {missing} token(s); using balance data")

        return dict(zip(mints, results))
