"""
Helius API client for wallet balances, token metadata and transactions.

This module provides a centralized client for all Helius REST interactions,
mapping balance-lookup failures to typed errors and absorbing metadata and
transaction failures so they never abort a scan. No request is retried.
"""

import sys
from typing import Any, Dict, List, Optional

import requests

from .config import ScannerConfig
from .errors import (
    HeliusAPIError,
    HeliusNetworkError,
    InvalidAddressError,
    InvalidApiKeyError,
    WalletNotFoundError,
)
from .models import (
    RawBalanceEntry,
    RawNativeTransfer,
    RawTokenTransfer,
    RawTransaction,
    TokenMetadata,
)


# Balance lookup status codes with a dedicated error type
BALANCE_STATUS_ERRORS = {
    404: (WalletNotFoundError, "Wallet address not found"),
    400: (InvalidAddressError, "Invalid wallet address"),
    401: (InvalidApiKeyError, "Invalid API key"),
}

JSON_HEADERS = {"Content-Type": "application/json"}


def _warn(message: str) -> None:
    print(f"[helius] WARNING: {message}", file=sys.stderr)


def _as_amount(value: Any) -> Optional[str]:
    """Normalize a JSON amount (string or number) to its string form."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_decimals(value: Any) -> int:
    """Token decimals: missing, unparseable or negative values become 0."""
    return max(_as_int(value, 0) or 0, 0)


def _as_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def parse_balance_entry(token: Dict[str, Any]) -> RawBalanceEntry:
    """Build a RawBalanceEntry from one item of the balances response."""
    return RawBalanceEntry(
        mint=_as_text(token.get("mint")) or "",
        amount=_as_amount(token.get("amount")),
        decimals=_as_decimals(token.get("decimals")),
        name=_as_text(token.get("name")),
        symbol=_as_text(token.get("symbol")),
    )


def parse_token_metadata(record: Dict[str, Any]) -> TokenMetadata:
    """
    Build TokenMetadata from one item of the token-metadata response.

    Reads onChainMetadata.metadata.data.{name,symbol} and
    offChainMetadata.metadata.{name,symbol}; any missing level yields None.
    """
    on_chain = _as_dict(_as_dict(_as_dict(record.get("onChainMetadata")).get("metadata")).get("data"))
    off_chain = _as_dict(_as_dict(record.get("offChainMetadata")).get("metadata"))

    return TokenMetadata(
        on_chain_name=_as_text(on_chain.get("name")),
        on_chain_symbol=_as_text(on_chain.get("symbol")),
        off_chain_name=_as_text(off_chain.get("name")),
        off_chain_symbol=_as_text(off_chain.get("symbol")),
    )


def parse_transaction(tx: Dict[str, Any]) -> RawTransaction:
    """Build a RawTransaction from one item of the transactions response."""
    meta = _as_dict(tx.get("meta"))
    nested = _as_dict(tx.get("transaction"))

    token_transfers = [
        RawTokenTransfer(
            mint=_as_text(transfer.get("mint")),
            amount=_as_amount(transfer.get("amount")),
            decimals=_as_decimals(transfer.get("decimals")),
        )
        for transfer in _as_list(tx.get("tokenTransfers"))
        if isinstance(transfer, dict)
    ]
    native_transfers = [
        RawNativeTransfer(amount=_as_int(transfer.get("amount")))
        for transfer in _as_list(tx.get("nativeTransfers"))
        if isinstance(transfer, dict)
    ]

    return RawTransaction(
        signature=_as_text(tx.get("signature")),
        nested_signatures=[s for s in _as_list(nested.get("signatures")) if isinstance(s, str)],
        timestamp=_as_int(tx.get("timestamp")),
        token_transfers=token_transfers,
        native_transfers=native_transfers,
        nft_transfer_count=len(_as_list(tx.get("nftTransfers"))),
        error=meta.get("err"),
        fee=_as_int(meta.get("fee")),
    )


class HeliusClient:
    """
    Helius REST API client.

    All API interactions go through this class, which handles:
    - Endpoint URLs and API key query parameters
    - Mapping balance-lookup failures to typed errors
    - Absorbing metadata and transaction failures
    - Response parsing into typed records
    """

    def __init__(self, config: ScannerConfig, session: Optional[requests.Session] = None):
        """
        Initialize the Helius client.

        Args:
            config: Validated scanner configuration
            session: Optional requests session to reuse
        """
        self.config = config
        self.session = session or requests.Session()

    def _sanitize_error_message(self, message: str) -> str:
        """Remove API key from error messages to prevent credential leakage."""
        return message.replace(self.config.api_key, "[REDACTED]")

    def _url(self, path: str) -> str:
        return f"{self.config.endpoint}/{path}"

    def _params(self) -> Dict[str, str]:
        return {"api-key": self.config.api_key}

    def get_balances(self, address: str) -> List[RawBalanceEntry]:
        """
        Get all token balances for a wallet.

        Args:
            address: Validated wallet address

        Returns:
            List of RawBalanceEntry objects, in response order

        Raises:
            WalletNotFoundError: On HTTP 404
            InvalidAddressError: On HTTP 400
            InvalidApiKeyError: On HTTP 401
            HeliusAPIError: On any other failed status or an unreadable body
            HeliusNetworkError: When the endpoint cannot be reached
        """
        url = self._url(f"addresses/{address}/balances")

        try:
            response = self.session.get(
                url,
                params=self._params(),
                headers=JSON_HEADERS,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            sanitized_msg = self._sanitize_error_message(str(e))
            raise HeliusNetworkError(f"Request failed: {sanitized_msg}") from e

        if not response.ok:
            error_class, message = BALANCE_STATUS_ERRORS.get(
                response.status_code,
                (HeliusAPIError, f"API error: {response.status_code}"),
            )
            raise error_class(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise HeliusAPIError(
                "Malformed balances response", status_code=response.status_code
            ) from e

        tokens = _as_list(_as_dict(data).get("tokens"))
        return [parse_balance_entry(token) for token in tokens if isinstance(token, dict)]

    def get_token_metadata(self, mint: str) -> Optional[TokenMetadata]:
        """
        Get on-chain and off-chain metadata for a single mint.

        Failures are logged and reported as None so the caller can fall back
        to the balance entry's own fields.

        Args:
            mint: Token mint address

        Returns:
            TokenMetadata, or None if nothing usable came back
        """
        url = self._url("token-metadata")
        payload = {
            "mintAccounts": [mint],
            "includeOffChain": True,
            "disableCache": False,
        }

        try:
            response = self.session.post(
                url,
                params=self._params(),
                json=payload,
                headers=JSON_HEADERS,
                timeout=self.config.timeout,
            )
            if not response.ok:
                _warn(f"Metadata lookup for {mint} failed: HTTP {response.status_code}")
                return None
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            _warn(f"Failed to fetch token metadata for {mint}: "
                  f"{self._sanitize_error_message(str(e))}")
            return None

        records = _as_list(data)
        if not records or not isinstance(records[0], dict):
            return None

        return parse_token_metadata(records[0])

    def get_transactions(self, address: str) -> List[RawTransaction]:
        """
        Get the most recent transactions for a wallet, newest first.

        Failures are logged and reported as an empty list; transaction
        history never aborts a scan.

        Args:
            address: Validated wallet address

        Returns:
            List of RawTransaction objects in response order
        """
        url = self._url(f"addresses/{address}/transactions")

        try:
            response = self.session.get(
                url,
                params=self._params(),
                headers=JSON_HEADERS,
                timeout=self.config.timeout,
            )
            if not response.ok:
                _warn(f"Failed to fetch transactions: HTTP {response.status_code}")
                return []
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            _warn(f"Error fetching transactions: {self._sanitize_error_message(str(e))}")
            return []

        return [parse_transaction(tx) for tx in _as_list(data) if isinstance(tx, dict)]
